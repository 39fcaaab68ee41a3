"""Admin actions that can be applied to a stored cluster."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ApproveDuplicates(_Action):
    type: Literal["approve_duplicates"] = "approve_duplicates"
    keep_question_id: str | None = None


class ApproveVariants(_Action):
    type: Literal["approve_variants"] = "approve_variants"


class ExcludeQuestion(_Action):
    type: Literal["exclude_question"] = "exclude_question"
    question_id: str
    min_cluster_size: int = Field(default=2, ge=1)


class SplitCluster(_Action):
    type: Literal["split"] = "split"
    strategy: Literal["auto", "threshold"] = "auto"
    threshold: float = Field(default=0.95, ge=0.0, le=1.0)
    min_cluster_size: int = Field(default=2, ge=2)


class ResetCluster(_Action):
    type: Literal["reset"] = "reset"


class FlagReview(_Action):
    type: Literal["flag_review"] = "flag_review"
    reason: str | None = None


class ClearReview(_Action):
    type: Literal["clear_review"] = "clear_review"


class ApproveAdditions(_Action):
    type: Literal["approve_additions"] = "approve_additions"
    ids: list[str]


class RejectAdditions(_Action):
    type: Literal["reject_additions"] = "reject_additions"
    ids: list[str]


ClusterAction = Annotated[
    Union[
        ApproveDuplicates,
        ApproveVariants,
        ExcludeQuestion,
        SplitCluster,
        ResetCluster,
        FlagReview,
        ClearReview,
        ApproveAdditions,
        RejectAdditions,
    ],
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[ClusterAction] = TypeAdapter(ClusterAction)


def parse_cluster_action(data: dict) -> ClusterAction:
    """Validate a raw action payload such as ``{"type": "split", "threshold": 0.9}``.

    Raises:
        ValueError: If ``type`` is unknown or the payload is malformed.
    """
    return _action_adapter.validate_python(data)
