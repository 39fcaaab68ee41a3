"""Curation of stored clusters: review actions, proposals, regeneration."""

from .actions import ClusterAction, parse_cluster_action
from .operations import (
    ActionOutcome,
    ClusterActionError,
    InvalidTransitionError,
    apply_cluster_action,
)
from .proposals import propose_additions
from .reconcile import reconcile_clusters

__all__ = [
    "ActionOutcome",
    "ClusterAction",
    "ClusterActionError",
    "InvalidTransitionError",
    "apply_cluster_action",
    "parse_cluster_action",
    "propose_additions",
    "reconcile_clusters",
]
