"""Carry curation state across cluster regenerations."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from question_dedup.clustering.assembler import cluster_sort_key
from question_dedup.models.cluster import QuestionCluster

logger = structlog.get_logger()

_CARRIED_FIELDS = (
    "status",
    "flagged_for_review",
    "flagged_reason",
    "flagged_at",
    "flagged_by",
    "decided_at",
    "decided_by",
    "parents",
    "children",
)


def reconcile_clusters(
    existing: Iterable[QuestionCluster],
    regenerated: Iterable[QuestionCluster],
) -> list[QuestionCluster]:
    """Merge freshly generated clusters with the stored ones.

    - Locked clusters (admin decisions) are kept exactly as stored.
    - Regenerated clusters sharing any member with a locked cluster are
      dropped so that no question belongs to two clusters.
    - A regenerated cluster whose id matches an unlocked stored cluster
      has the same membership, so it inherits that cluster's curation
      state (status, review flags, lineage, outstanding proposals).
    - Everything else is taken as regenerated.

    Returns:
        The reconciled clusters, in the assembler's sort order.
    """
    existing = list(existing)
    locked = [c for c in existing if c.locked]
    locked_members = {qid for c in locked for qid in c.question_ids}
    previous = {c.id: c for c in existing if not c.locked}

    result = list(locked)
    carried = 0
    dropped = 0
    for cluster in regenerated:
        if locked_members.intersection(cluster.question_ids):
            dropped += 1
            continue
        prior = previous.get(cluster.id)
        if prior is not None:
            update = {name: getattr(prior, name) for name in _CARRIED_FIELDS}
            members = set(cluster.question_ids)
            update["proposed_additions"] = [
                p for p in prior.proposed_additions if p.id not in members
            ]
            cluster = cluster.model_copy(update=update)
            carried += 1
        result.append(cluster)

    result.sort(key=cluster_sort_key)
    logger.info(
        "clusters_reconciled",
        locked=len(locked),
        carried=carried,
        dropped_overlapping=dropped,
        total=len(result),
    )
    return result
