"""Split and merge operations over existing clusters.

Both reuse the graph builder, union-find extractor and metrics
calculator, and both return new clusters without touching their inputs.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from networkx.utils import UnionFind

from question_dedup.models.cluster import QuestionCluster
from question_dedup.models.similarity import SimilarityPair

from .assembler import build_cluster, cluster_questions_by_similarity
from .metrics import collapse_pair_scores
from .validation import validate_min_cluster_size, validate_threshold


@dataclass
class AutoSplitResult:
    """Outcome of an automatic split.

    Attributes:
        threshold: The split threshold chosen, or ``None`` if the
            cluster has no separable sub-groups.
        clusters: Sub-clusters found at ``threshold``.
    """

    threshold: float | None = None
    clusters: list[QuestionCluster] = field(default_factory=list)


def _internal_pairs(
    cluster: QuestionCluster, pairs: Iterable[SimilarityPair]
) -> list[SimilarityPair]:
    members = set(cluster.question_ids)
    return [p for p in pairs if p.a_id in members and p.b_id in members]


def split_cluster(
    cluster: QuestionCluster,
    pairs: Iterable[SimilarityPair],
    higher_threshold: float,
) -> list[QuestionCluster]:
    """Re-partition ``cluster`` using only its strong internal edges.

    Only pairs with both endpoints in the cluster and a score of at
    least ``higher_threshold`` are considered.  Singletons are dropped.
    An empty list means nothing survives the stricter threshold; the
    caller decides what to do with such a cluster.

    Raises:
        ValueError: If ``higher_threshold`` is NaN or outside ``[0, 1]``.
    """
    higher_threshold = validate_threshold(higher_threshold, "higher_threshold")
    restricted = [p for p in _internal_pairs(cluster, pairs) if p.score >= higher_threshold]
    return cluster_questions_by_similarity(restricted, 2, higher_threshold)


def split_cluster_auto(
    cluster: QuestionCluster,
    pairs: Iterable[SimilarityPair],
    min_cluster_size: int = 2,
) -> AutoSplitResult:
    """Find the loosest threshold that breaks ``cluster`` apart.

    Internal edges are added strongest first (Kruskal style).  After
    each distinct score level the number of components holding at
    least ``min_cluster_size`` members is checked; the lowest level
    with two or more such components wins.  The weakest internal score
    is never a candidate since it reproduces the whole cluster.
    Sizes below two count as two, since every component found here
    already has at least two members.
    """
    min_cluster_size = max(2, validate_min_cluster_size(min_cluster_size))
    internal = _internal_pairs(cluster, pairs)
    scores = collapse_pair_scores(internal)
    if not scores:
        return AutoSplitResult()

    floor = min(scores.values())
    edges = sorted(scores.items(), key=lambda item: (-item[1], item[0]))

    forest = UnionFind()
    large = 0
    chosen: float | None = None
    i = 0
    while i < len(edges):
        level = edges[i][1]
        if level <= floor:
            break
        while i < len(edges) and edges[i][1] == level:
            (a_id, b_id), _ = edges[i]
            i += 1
            root_a, root_b = forest[a_id], forest[b_id]
            if root_a == root_b:
                continue
            size_a, size_b = forest.weights[root_a], forest.weights[root_b]
            large -= (size_a >= min_cluster_size) + (size_b >= min_cluster_size)
            large += size_a + size_b >= min_cluster_size
            forest.union(root_a, root_b)
        if large >= 2:
            chosen = level

    if chosen is None:
        return AutoSplitResult()

    subclusters = [
        c for c in split_cluster(cluster, internal, chosen) if c.size >= min_cluster_size
    ]
    return AutoSplitResult(threshold=chosen, clusters=subclusters)


def merge_clusters(
    clusters: Iterable[QuestionCluster],
    pairs: Iterable[SimilarityPair],
) -> QuestionCluster:
    """Union several clusters into one pending cluster.

    Metrics reflect every known pair between any two members of the
    union, regardless of threshold.  The id is derived from the merged
    membership, so merging a single cluster returns its own id and the
    order of ``clusters`` does not matter.  An empty input yields an
    empty cluster with zeroed metrics.
    """
    members = {qid for cluster in clusters for qid in cluster.question_ids}
    return build_cluster(members, collapse_pair_scores(pairs))
