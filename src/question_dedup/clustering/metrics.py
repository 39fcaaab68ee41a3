"""Aggregate similarity statistics for a set of cluster members."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from itertools import combinations

from question_dedup.models.similarity import SimilarityPair


@dataclass(frozen=True)
class ClusterMetrics:
    """Similarity statistics over the known pairs inside a cluster.

    Attributes:
        avg_similarity: Mean score over distinct member pairs with evidence.
        max_similarity: Highest such score.
        min_similarity: Lowest such score.
        edge_count: Number of distinct member pairs with a score.
        possible_edge_count: ``n * (n - 1) / 2`` for ``n`` members.
        density: ``edge_count / possible_edge_count``.
        std_dev_similarity: Population standard deviation of the scores.
        cohesion_score: ``avg_similarity * density``.
        medoid_id: Member with the greatest summed similarity to the
            others (smallest id on ties), or ``None`` without members.
    """

    avg_similarity: float = 0.0
    max_similarity: float = 0.0
    min_similarity: float = 0.0
    edge_count: int = 0
    possible_edge_count: int = 0
    density: float = 0.0
    std_dev_similarity: float = 0.0
    cohesion_score: float = 0.0
    medoid_id: str | None = None

    def as_dict(self) -> dict:
        return asdict(self)


def collapse_pair_scores(
    pairs: Iterable[SimilarityPair],
) -> dict[tuple[str, str], float]:
    """Map each unordered pair to a single score.

    Self-pairs are skipped.  Repeated or reversed pairs count once; if
    their scores disagree the highest wins, so the result does not
    depend on input order.
    """
    scores: dict[tuple[str, str], float] = {}
    for pair in pairs:
        if pair.is_self_pair:
            continue
        key = pair.key
        previous = scores.get(key)
        if previous is None or pair.score > previous:
            scores[key] = pair.score
    return scores


def calculate_cluster_metrics(
    member_ids: Iterable[str], pairs: Iterable[SimilarityPair]
) -> ClusterMetrics:
    """Compute metrics for ``member_ids`` from a raw pair list."""
    return metrics_from_scores(member_ids, collapse_pair_scores(pairs))


def metrics_from_scores(
    member_ids: Iterable[str], scores: Mapping[tuple[str, str], float]
) -> ClusterMetrics:
    """Compute metrics for ``member_ids`` from collapsed pair scores.

    Only pairs with both endpoints in the member set contribute.  A
    missing pair is absent evidence, not a zero score.
    """
    members = sorted(set(member_ids))
    if not members:
        return ClusterMetrics()

    n = len(members)
    possible = n * (n - 1) // 2
    found: list[tuple[tuple[str, str], float]] = []

    # Walk whichever side is smaller: member combinations or known scores
    if possible <= len(scores):
        for key in combinations(members, 2):
            score = scores.get(key)
            if score is not None:
                found.append((key, score))
    else:
        member_set = set(members)
        for key, score in scores.items():
            if key[0] in member_set and key[1] in member_set:
                found.append((key, score))

    if not found:
        return ClusterMetrics(possible_edge_count=possible, medoid_id=members[0])

    values = [score for _, score in found]
    avg = math.fsum(values) / len(values)
    variance = math.fsum((v - avg) ** 2 for v in values) / len(values)
    density = len(found) / possible

    strength: dict[str, list[float]] = {m: [] for m in members}
    for (a_id, b_id), score in found:
        strength[a_id].append(score)
        strength[b_id].append(score)
    medoid = min(members, key=lambda m: (-math.fsum(strength[m]), m))

    return ClusterMetrics(
        avg_similarity=avg,
        max_similarity=max(values),
        min_similarity=min(values),
        edge_count=len(found),
        possible_edge_count=possible,
        density=density,
        std_dev_similarity=math.sqrt(variance),
        cohesion_score=avg * density,
        medoid_id=medoid,
    )
