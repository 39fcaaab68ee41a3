"""Scored similarity pairs as produced by the vector search collaborator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SimilarityPair(BaseModel):
    """An unordered, scored edge candidate between two question ids.

    Serialised as ``{"aId": ..., "bId": ..., "score": ...}``.  ``aId`` and
    ``bId`` may be given in either order and may even be equal; the graph
    builder decides what to do with such pairs.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    a_id: str = Field(alias="aId", min_length=1)
    b_id: str = Field(alias="bId", min_length=1)
    score: float = Field(ge=0.0, le=1.0, allow_inf_nan=False)

    @property
    def key(self) -> tuple[str, str]:
        return pair_key(self.a_id, self.b_id)

    @property
    def is_self_pair(self) -> bool:
        return self.a_id == self.b_id


def pair_key(a_id: str, b_id: str) -> tuple[str, str]:
    """Canonical key for the unordered pair ``{a_id, b_id}``."""
    return (a_id, b_id) if a_id <= b_id else (b_id, a_id)
