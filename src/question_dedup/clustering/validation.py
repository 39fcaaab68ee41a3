"""Argument checks shared by the clustering entry points."""

from __future__ import annotations

import math


def validate_threshold(value: float, name: str = "threshold") -> float:
    """Reject thresholds that are NaN, non-numeric, or outside ``[0, 1]``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if math.isnan(value):
        raise ValueError(f"{name} must not be NaN")
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be within [0, 1], got {value}")
    return float(value)


def validate_min_cluster_size(value: int) -> int:
    """Reject minimum cluster sizes that are not integers ``>= 1``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"min_cluster_size must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"min_cluster_size must be >= 1, got {value}")
    return value
