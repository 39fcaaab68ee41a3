"""Curation operations: the review state machine around stored clusters.

Every operation is pure.  It receives a cluster (and, where needed, the
current similarity pairs) and returns an ``ActionOutcome`` describing
the new cluster state plus any side effects the caller must persist,
such as question deletions or "not similar" pair flags.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import structlog

from question_dedup.clustering.assembler import build_cluster
from question_dedup.clustering.graph import drop_ignored_pairs
from question_dedup.clustering.identity import generate_cluster_id
from question_dedup.clustering.metrics import calculate_cluster_metrics, collapse_pair_scores
from question_dedup.clustering.mutators import split_cluster, split_cluster_auto
from question_dedup.models.cluster import ClusterStatus, QuestionCluster
from question_dedup.models.similarity import SimilarityPair, pair_key

from .actions import (
    ApproveAdditions,
    ApproveDuplicates,
    ApproveVariants,
    ClearReview,
    ClusterAction,
    ExcludeQuestion,
    FlagReview,
    RejectAdditions,
    ResetCluster,
    SplitCluster,
)

logger = structlog.get_logger()


class ClusterActionError(ValueError):
    """An action could not be applied to the given cluster."""


class InvalidTransitionError(ClusterActionError):
    """The action is not allowed from the cluster's current status."""


@dataclass
class ActionOutcome:
    """Result of applying a curation action.

    Attributes:
        action: Label of what happened (e.g. ``"question_excluded"``,
            ``"cluster_deleted"``, ``"no_split_found"``).
        cluster: The updated cluster, or ``None`` if it was dissolved.
        created: New clusters produced by the action (split children).
        deleted_question_ids: Questions the caller should delete.
        ignored_pairs: Unordered id pairs the caller should record as
            "not similar" so regeneration does not re-link them.
        replaced_cluster_id: Previous id when membership changed and the
            cluster was re-identified.
        threshold: Threshold used by a split, if any.
    """

    action: str
    cluster: QuestionCluster | None
    created: list[QuestionCluster] = field(default_factory=list)
    deleted_question_ids: list[str] = field(default_factory=list)
    ignored_pairs: list[tuple[str, str]] = field(default_factory=list)
    replaced_cluster_id: str | None = None
    threshold: float | None = None


def apply_cluster_action(
    cluster: QuestionCluster,
    action: ClusterAction,
    pairs: Sequence[SimilarityPair] = (),
    ignored_pairs: Iterable[tuple[str, str]] = (),
    operator: str = "anonymous",
    now: dt.datetime | None = None,
) -> ActionOutcome:
    """Apply ``action`` to ``cluster`` and describe the result.

    Args:
        cluster: The stored cluster being curated.
        action: One of the ``ClusterAction`` models.
        pairs: Current similarity pairs; needed for ``split`` and used
            to refresh metrics when membership changes.
        ignored_pairs: Pairs previously marked "not similar"; removed
            from ``pairs`` before any graph is built.
        operator: Who is acting, recorded on decisions and flags.
        now: Timestamp to record; defaults to the current UTC time.

    Raises:
        InvalidTransitionError: If the action is not allowed from the
            cluster's status.
        ClusterActionError: If the action's arguments do not fit the
            cluster (unknown keep id, empty id list).
    """
    now = now or dt.datetime.now(dt.timezone.utc)
    pairs = drop_ignored_pairs(pairs, ignored_pairs)

    if isinstance(action, ApproveDuplicates):
        outcome = _approve_duplicates(cluster, action, operator, now)
    elif isinstance(action, ApproveVariants):
        outcome = _approve(cluster, ClusterStatus.APPROVED_VARIANTS, operator, now)
    elif isinstance(action, ExcludeQuestion):
        outcome = _exclude_question(cluster, action, pairs)
    elif isinstance(action, SplitCluster):
        outcome = _split(cluster, action, pairs, now)
    elif isinstance(action, ResetCluster):
        outcome = _reset(cluster)
    elif isinstance(action, FlagReview):
        outcome = _flag_review(cluster, action, operator, now)
    elif isinstance(action, ClearReview):
        outcome = _clear_review(cluster)
    elif isinstance(action, ApproveAdditions):
        outcome = _approve_additions(cluster, action, pairs)
    elif isinstance(action, RejectAdditions):
        outcome = _reject_additions(cluster, action)
    else:
        raise ClusterActionError(f"Unsupported action: {action!r}")

    logger.info(
        "cluster_action_applied",
        cluster_id=cluster.id,
        action=outcome.action,
        operator=operator,
        created=len(outcome.created),
    )
    return outcome


def _require_status(
    cluster: QuestionCluster, action: str, allowed: Iterable[ClusterStatus]
) -> None:
    allowed = tuple(allowed)
    if cluster.status not in allowed:
        raise InvalidTransitionError(
            f"Cannot {action} cluster {cluster.id} in status {cluster.status.value}"
        )


def _approve(
    cluster: QuestionCluster,
    status: ClusterStatus,
    operator: str,
    now: dt.datetime,
) -> ActionOutcome:
    _require_status(cluster, f"approve ({status.value})", (ClusterStatus.PENDING, status))
    if cluster.status == status:
        return ActionOutcome(action=status.value, cluster=cluster)
    updated = cluster.model_copy(
        update={"status": status, "locked": True, "decided_at": now, "decided_by": operator}
    )
    return ActionOutcome(action=status.value, cluster=updated)


def _approve_duplicates(
    cluster: QuestionCluster,
    action: ApproveDuplicates,
    operator: str,
    now: dt.datetime,
) -> ActionOutcome:
    keep = action.keep_question_id
    if keep is not None and keep not in cluster.question_ids:
        raise ClusterActionError(f"Question {keep} is not a member of cluster {cluster.id}")

    outcome = _approve(cluster, ClusterStatus.APPROVED_DUPLICATES, operator, now)
    if keep is not None:
        outcome.deleted_question_ids = [qid for qid in cluster.question_ids if qid != keep]
    return outcome


def _exclude_question(
    cluster: QuestionCluster,
    action: ExcludeQuestion,
    pairs: Sequence[SimilarityPair],
) -> ActionOutcome:
    _require_status(
        cluster,
        "exclude a question from",
        (ClusterStatus.PENDING, ClusterStatus.APPROVED_DUPLICATES, ClusterStatus.APPROVED_VARIANTS),
    )
    removed = action.question_id
    if removed not in cluster.question_ids:
        return ActionOutcome(action="question_not_in_cluster", cluster=cluster)

    remaining = [qid for qid in cluster.question_ids if qid != removed]
    ignored = [pair_key(removed, other) for other in remaining]

    if len(remaining) < action.min_cluster_size:
        return ActionOutcome(
            action="cluster_deleted",
            cluster=None,
            ignored_pairs=ignored,
            replaced_cluster_id=cluster.id,
        )

    update: dict = {"id": generate_cluster_id(remaining), "question_ids": remaining}
    if pairs:
        update.update(calculate_cluster_metrics(remaining, pairs).as_dict())
    return ActionOutcome(
        action="question_excluded",
        cluster=cluster.model_copy(update=update),
        ignored_pairs=ignored,
        replaced_cluster_id=cluster.id,
    )


def _split(
    cluster: QuestionCluster,
    action: SplitCluster,
    pairs: Sequence[SimilarityPair],
    now: dt.datetime,
) -> ActionOutcome:
    _require_status(cluster, "split", (ClusterStatus.PENDING,))

    if action.strategy == "threshold":
        threshold: float | None = action.threshold
        children = [
            c
            for c in split_cluster(cluster, pairs, action.threshold)
            if c.size >= action.min_cluster_size
        ]
    else:
        result = split_cluster_auto(cluster, pairs, action.min_cluster_size)
        threshold, children = result.threshold, result.clusters

    if len(children) < 2:
        return ActionOutcome(action="no_split_found", cluster=cluster, threshold=threshold)

    children = [c.model_copy(update={"parents": [cluster.id]}) for c in children]
    parent = cluster.model_copy(
        update={
            "status": ClusterStatus.SPLIT,
            "children": [c.id for c in children],
            "decided_at": now,
        }
    )
    return ActionOutcome(action="split", cluster=parent, created=children, threshold=threshold)


def _reset(cluster: QuestionCluster) -> ActionOutcome:
    updated = cluster.model_copy(
        update={
            "status": ClusterStatus.PENDING,
            "locked": False,
            "decided_at": None,
            "decided_by": None,
        }
    )
    return ActionOutcome(action="reset", cluster=updated)


def _flag_review(
    cluster: QuestionCluster,
    action: FlagReview,
    operator: str,
    now: dt.datetime,
) -> ActionOutcome:
    if cluster.flagged_for_review and cluster.flagged_reason == action.reason:
        return ActionOutcome(action="flag_review", cluster=cluster)
    updated = cluster.model_copy(
        update={
            "flagged_for_review": True,
            "flagged_reason": action.reason,
            "flagged_at": now,
            "flagged_by": operator,
        }
    )
    return ActionOutcome(action="flag_review", cluster=updated)


def _clear_review(cluster: QuestionCluster) -> ActionOutcome:
    updated = cluster.model_copy(
        update={
            "flagged_for_review": False,
            "flagged_reason": None,
            "flagged_at": None,
            "flagged_by": None,
        }
    )
    return ActionOutcome(action="clear_review", cluster=updated)


def _approve_additions(
    cluster: QuestionCluster,
    action: ApproveAdditions,
    pairs: Sequence[SimilarityPair],
) -> ActionOutcome:
    if not action.ids:
        raise ClusterActionError("No ids provided")
    _require_status(
        cluster,
        "approve additions for",
        (ClusterStatus.PENDING, ClusterStatus.APPROVED_DUPLICATES, ClusterStatus.APPROVED_VARIANTS),
    )

    accepted = set(action.ids)
    merged = build_cluster([*cluster.question_ids, *action.ids], collapse_pair_scores(pairs))
    remaining = [p for p in cluster.proposed_additions if p.id not in accepted]

    update = merged.model_dump(
        include={
            "id",
            "question_ids",
            "avg_similarity",
            "max_similarity",
            "min_similarity",
            "edge_count",
            "possible_edge_count",
            "density",
            "std_dev_similarity",
            "cohesion_score",
            "medoid_id",
        }
    )
    update["proposed_additions"] = remaining
    update["flagged_for_review"] = bool(remaining)
    return ActionOutcome(
        action="approve_additions",
        cluster=cluster.model_copy(update=update),
        replaced_cluster_id=cluster.id if merged.id != cluster.id else None,
    )


def _reject_additions(cluster: QuestionCluster, action: RejectAdditions) -> ActionOutcome:
    if not action.ids:
        raise ClusterActionError("No ids provided")

    rejected = set(action.ids)
    remaining = [p for p in cluster.proposed_additions if p.id not in rejected]
    ignored = sorted(
        {
            pair_key(add_id, member)
            for add_id in rejected
            for member in cluster.question_ids
            if add_id != member
        }
    )
    updated = cluster.model_copy(
        update={"proposed_additions": remaining, "flagged_for_review": bool(remaining)}
    )
    return ActionOutcome(action="reject_additions", cluster=updated, ignored_pairs=ignored)
