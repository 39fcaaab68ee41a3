"""Thresholds for clustering, splitting and proposing additions.

Values come from ``config/clustering.yaml`` (or the path named by
``QUESTION_DEDUP_CLUSTERING_CONFIG_PATH``) layered over the defaults below.
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, model_validator


class ClusteringConfig(BaseModel):
    """Thresholds and size limits for clustering, splitting and proposals."""

    threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    min_cluster_size: int = Field(default=2, ge=1)
    split_threshold: float = Field(default=0.95, ge=0.0, le=1.0)
    split_min_cluster_size: int = Field(default=2, ge=2)
    proposal_threshold: float = Field(default=0.85, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def warn_if_split_not_stricter(self) -> "ClusteringConfig":
        """Log a warning if splitting would not tighten the clustering threshold."""
        if self.split_threshold <= self.threshold:
            structlog.get_logger().warning(
                "split_threshold_not_stricter",
                threshold=self.threshold,
                split_threshold=self.split_threshold,
            )
        return self


def load_clustering_config(path: Path) -> ClusteringConfig:
    """Read clustering parameters from ``path``.

    A missing or empty file yields the defaults; keys present in the
    file override them one by one.

    Raises:
        ValueError: If the YAML does not hold a mapping or a value is
            out of range, or the file is not valid YAML.
    """
    logger = structlog.get_logger()
    if not path.is_file():
        logger.debug("clustering_config_defaults", path=str(path))
        return ClusteringConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Clustering config {path} must be a mapping, got {type(data).__name__}")

    config = ClusteringConfig.model_validate(data)
    logger.debug("clustering_config_loaded", path=str(path), overrides=list(data))
    return config
