"""Graph-based clustering for near-duplicate questions.

Turns pairwise similarity scores into question clusters using
union-find connected components, and supports splitting and merging
clusters with the same graph semantics.
"""

from .assembler import build_cluster, cluster_questions_by_similarity, cluster_sort_key
from .components import extract_components
from .graph import SimilarityGraph, build_similarity_graph, drop_ignored_pairs
from .identity import generate_cluster_id
from .metrics import ClusterMetrics, calculate_cluster_metrics, collapse_pair_scores
from .mutators import AutoSplitResult, merge_clusters, split_cluster, split_cluster_auto

__all__ = [
    "AutoSplitResult",
    "ClusterMetrics",
    "SimilarityGraph",
    "build_cluster",
    "build_similarity_graph",
    "calculate_cluster_metrics",
    "cluster_questions_by_similarity",
    "cluster_sort_key",
    "collapse_pair_scores",
    "drop_ignored_pairs",
    "extract_components",
    "generate_cluster_id",
    "merge_clusters",
    "split_cluster",
    "split_cluster_auto",
]
