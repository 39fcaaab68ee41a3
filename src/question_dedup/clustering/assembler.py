"""Cluster assembly from raw similarity pairs.

Builds the thresholded similarity graph, extracts connected components
with union-find, and turns every component that is large enough into a
``QuestionCluster`` with metrics and a deterministic id.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog

from question_dedup.models.cluster import QuestionCluster
from question_dedup.models.similarity import SimilarityPair

from .components import extract_components
from .graph import build_similarity_graph
from .identity import generate_cluster_id
from .metrics import collapse_pair_scores, metrics_from_scores
from .validation import validate_min_cluster_size

logger = structlog.get_logger()


def cluster_questions_by_similarity(
    pairs: Iterable[SimilarityPair],
    min_cluster_size: int = 2,
    threshold: float = 0.85,
) -> list[QuestionCluster]:
    """Group questions into clusters of mutually reachable similar pairs.

    Args:
        pairs: Scored pairs from the similarity search.  Self-pairs and
            duplicates are tolerated.
        min_cluster_size: Components with fewer members are discarded.
        threshold: Pairs scoring below this are not edges.

    Returns:
        Pending clusters sorted by size (descending), then average
        similarity (descending), then id.

    Raises:
        ValueError: If ``threshold`` is outside ``[0, 1]`` or NaN, or
            ``min_cluster_size`` is not an integer ``>= 1``.
    """
    validate_min_cluster_size(min_cluster_size)
    pairs = list(pairs)
    sim_graph = build_similarity_graph(pairs, threshold)

    if sim_graph.edge_count == 0:
        logger.debug("clusters_assembled", pair_count=len(pairs), edge_count=0, cluster_count=0)
        return []

    scores = collapse_pair_scores(sim_graph.pairs)
    clusters = [
        build_cluster(component, scores)
        for component in extract_components(sim_graph.graph)
        if len(component) >= min_cluster_size
    ]
    clusters.sort(key=cluster_sort_key)

    logger.debug(
        "clusters_assembled",
        pair_count=len(pairs),
        edge_count=sim_graph.edge_count,
        cluster_count=len(clusters),
    )
    return clusters


def build_cluster(
    member_ids: Iterable[str],
    scores: Mapping[tuple[str, str], float],
) -> QuestionCluster:
    """Materialise a pending cluster for ``member_ids``.

    Members are stored in lexicographic order; metrics come from
    ``scores`` (collapsed pair scores, see ``collapse_pair_scores``).
    """
    members = sorted(set(member_ids))
    metrics = metrics_from_scores(members, scores)
    return QuestionCluster(
        id=generate_cluster_id(members),
        question_ids=members,
        **metrics.as_dict(),
    )


def cluster_sort_key(cluster: QuestionCluster) -> tuple[int, float, str]:
    """Largest first, then most similar, then by id for a total order."""
    return (-cluster.size, -cluster.avg_similarity, cluster.id)
