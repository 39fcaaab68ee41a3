"""Near-duplicate question clustering and curation engine."""

__version__ = "0.1.0"
