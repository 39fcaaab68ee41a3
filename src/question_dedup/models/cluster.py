"""Materialised question clusters and their curation state."""

from __future__ import annotations

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ClusterStatus(str, Enum):
    """Curation status of a cluster."""

    PENDING = "pending"
    APPROVED_DUPLICATES = "approved_duplicates"
    APPROVED_VARIANTS = "approved_variants"
    SPLIT = "split"


class ProposedAddition(BaseModel):
    """A candidate member proposed against an existing cluster."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    score: float | None = None
    proposed_at: dt.datetime | None = None


class QuestionCluster(BaseModel):
    """A group of questions judged similar, plus aggregate metrics.

    Instances are immutable: the clustering engine and the curation
    operations return new clusters via ``model_copy`` rather than editing
    the ones they are given.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    question_ids: list[str] = Field(default_factory=list)
    avg_similarity: float = 0.0
    max_similarity: float = 0.0
    min_similarity: float = 0.0
    status: ClusterStatus = ClusterStatus.PENDING

    # Review flags
    flagged_for_review: bool = False
    flagged_reason: str | None = None
    flagged_at: dt.datetime | None = None
    flagged_by: str | None = None
    proposed_additions: list[ProposedAddition] = Field(default_factory=list)

    # Decision and lineage
    locked: bool = False
    decided_at: dt.datetime | None = None
    decided_by: str | None = None
    parents: list[str] = Field(default_factory=list)
    children: list[str] = Field(default_factory=list)

    # Extended metrics
    edge_count: int | None = None
    possible_edge_count: int | None = None
    density: float | None = None
    std_dev_similarity: float | None = None
    cohesion_score: float | None = None
    medoid_id: str | None = None

    @field_validator("question_ids")
    @classmethod
    def _unique_members(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("question_ids must not contain duplicates")
        return value

    @property
    def size(self) -> int:
        return len(self.question_ids)

    @property
    def proposed_ids(self) -> list[str]:
        return [p.id for p in self.proposed_additions]
