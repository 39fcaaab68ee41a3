"""Tests for the pair and cluster value types."""

import pytest
from pydantic import ValidationError

from question_dedup.models import ClusterStatus, QuestionCluster, SimilarityPair, pair_key


class TestSimilarityPair:
    def test_accepts_wire_aliases(self):
        pair = SimilarityPair.model_validate({"aId": "q2", "bId": "q1", "score": 0.9})

        assert pair.a_id == "q2"
        assert pair.key == ("q1", "q2")
        assert pair.is_self_pair is False

    def test_frozen(self):
        pair = SimilarityPair(a_id="q1", b_id="q2", score=0.9)
        with pytest.raises(ValidationError):
            pair.score = 0.1

    def test_nan_score_rejected(self):
        with pytest.raises(ValueError):
            SimilarityPair(a_id="q1", b_id="q2", score=float("nan"))

    def test_pair_key_is_unordered(self):
        assert pair_key("b", "a") == pair_key("a", "b") == ("a", "b")


class TestQuestionCluster:
    def test_defaults(self):
        cluster = QuestionCluster(id="cluster_x", question_ids=["q1", "q2"])

        assert cluster.status == ClusterStatus.PENDING
        assert cluster.flagged_for_review is False
        assert cluster.proposed_additions == []
        assert cluster.size == 2

    def test_duplicate_members_rejected(self):
        with pytest.raises(ValueError, match="duplicates"):
            QuestionCluster(id="cluster_x", question_ids=["q1", "q1"])

    def test_serialises_camel_case(self):
        cluster = QuestionCluster(id="cluster_x", question_ids=["q1", "q2"], avg_similarity=0.9)
        data = cluster.model_dump(mode="json", by_alias=True)

        assert data["questionIds"] == ["q1", "q2"]
        assert data["avgSimilarity"] == 0.9
        assert data["flaggedForReview"] is False
