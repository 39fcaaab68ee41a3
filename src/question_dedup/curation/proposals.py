"""Incremental growth: propose new members against existing clusters."""

from __future__ import annotations

import datetime as dt
from collections import defaultdict
from collections.abc import Iterable, Sequence

import structlog

from question_dedup.clustering.graph import drop_ignored_pairs
from question_dedup.clustering.validation import validate_threshold
from question_dedup.models.cluster import ClusterStatus, ProposedAddition, QuestionCluster
from question_dedup.models.similarity import SimilarityPair

logger = structlog.get_logger()


def propose_additions(
    clusters: Sequence[QuestionCluster],
    pairs: Iterable[SimilarityPair],
    threshold: float,
    ignored_pairs: Iterable[tuple[str, str]] = (),
    now: dt.datetime | None = None,
) -> list[QuestionCluster]:
    """Attach candidate members to the clusters they are most similar to.

    A candidate is any id outside every cluster that has a pair scoring
    at least ``threshold`` with some member.  Each candidate goes to
    exactly one cluster: the one holding its best-scoring partner, with
    ties resolved by the smaller cluster id.  Clusters that have been
    split, ids already proposed somewhere, and ignored pairs are skipped.

    Proposals land in ``proposed_additions`` and flag the cluster for
    review; membership itself is unchanged until an admin approves.

    Returns:
        The clusters in input order, with proposals attached where found.

    Raises:
        ValueError: If ``threshold`` is NaN or outside ``[0, 1]``.
    """
    threshold = validate_threshold(threshold)
    now = now or dt.datetime.now(dt.timezone.utc)

    owner: dict[str, int] = {}
    for idx, cluster in enumerate(clusters):
        for qid in cluster.question_ids:
            owner[qid] = idx
    already_proposed = {p.id for c in clusters for p in c.proposed_additions}

    best: dict[str, tuple[float, str, int]] = {}
    for pair in drop_ignored_pairs(pairs, ignored_pairs):
        if pair.is_self_pair or pair.score < threshold:
            continue
        a_idx, b_idx = owner.get(pair.a_id), owner.get(pair.b_id)
        if (a_idx is None) == (b_idx is None):
            continue
        if a_idx is not None:
            candidate, idx = pair.b_id, a_idx
        else:
            candidate, idx = pair.a_id, b_idx
        target = clusters[idx]
        if target.status == ClusterStatus.SPLIT or candidate in already_proposed:
            continue

        current = best.get(candidate)
        if current is None or (-pair.score, target.id) < (-current[0], current[1]):
            best[candidate] = (pair.score, target.id, idx)

    by_cluster: dict[int, list[ProposedAddition]] = defaultdict(list)
    for candidate in sorted(best):
        score, _, idx = best[candidate]
        by_cluster[idx].append(ProposedAddition(id=candidate, score=score, proposed_at=now))

    result: list[QuestionCluster] = []
    for idx, cluster in enumerate(clusters):
        additions = by_cluster.get(idx)
        if not additions:
            result.append(cluster)
            continue
        result.append(
            cluster.model_copy(
                update={
                    "proposed_additions": [*cluster.proposed_additions, *additions],
                    "flagged_for_review": True,
                }
            )
        )

    logger.debug(
        "additions_proposed",
        candidate_count=len(best),
        cluster_count=len(by_cluster),
    )
    return result
