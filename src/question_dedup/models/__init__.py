"""Value types shared by the clustering engine and curation layer."""

from question_dedup.models.cluster import (
    ClusterStatus,
    ProposedAddition,
    QuestionCluster,
)
from question_dedup.models.similarity import SimilarityPair, pair_key

__all__ = [
    "ClusterStatus",
    "ProposedAddition",
    "QuestionCluster",
    "SimilarityPair",
    "pair_key",
]
