"""Tests for splitting and merging clusters."""

from __future__ import annotations

import math
import re

import pytest

from question_dedup.clustering import (
    cluster_questions_by_similarity,
    generate_cluster_id,
    merge_clusters,
    split_cluster,
    split_cluster_auto,
)
from question_dedup.models.cluster import QuestionCluster
from question_dedup.models.similarity import SimilarityPair


def _make_pair(a_id: str, b_id: str, score: float = 0.9) -> SimilarityPair:
    return SimilarityPair(a_id=a_id, b_id=b_id, score=score)


def _make_cluster(question_ids: list[str], cluster_id: str | None = None, **fields) -> QuestionCluster:
    """Create a QuestionCluster; the id defaults to the content-derived one."""
    return QuestionCluster(
        id=cluster_id or generate_cluster_id(question_ids),
        question_ids=question_ids,
        **fields,
    )


def _bridged_pairs() -> list[SimilarityPair]:
    """Two tight pairs (q1-q2, q3-q4) joined by one weak bridge."""
    return [
        _make_pair("q1", "q2", 0.95),
        _make_pair("q3", "q4", 0.92),
        _make_pair("q2", "q3", 0.82),
    ]


class TestSplitCluster:
    def test_splits_at_higher_threshold(self):
        cluster = _make_cluster(["q1", "q2", "q3", "q4"], "cluster_123")
        subclusters = split_cluster(cluster, _bridged_pairs(), 0.9)

        assert sorted(c.question_ids for c in subclusters) == [["q1", "q2"], ["q3", "q4"]]
        assert all(c.size == 2 for c in subclusters)

    def test_returns_empty_when_no_pair_meets_threshold(self):
        cluster = _make_cluster(["q1", "q2", "q3"])
        pairs = [_make_pair("q1", "q2", 0.85), _make_pair("q2", "q3", 0.88)]

        assert split_cluster(cluster, pairs, 0.95) == []

    def test_ignores_pairs_outside_cluster(self):
        cluster = _make_cluster(["q1", "q2"])
        pairs = [_make_pair("q1", "q2", 0.92), _make_pair("q3", "q4", 0.95), _make_pair("q2", "q5", 0.99)]

        (child,) = split_cluster(cluster, pairs, 0.9)

        assert child.question_ids == ["q1", "q2"]
        assert child.max_similarity == 0.92

    def test_input_cluster_untouched(self):
        cluster = _make_cluster(["q1", "q2", "q3", "q4"])
        before = cluster.model_dump()

        split_cluster(cluster, _bridged_pairs(), 0.9)

        assert cluster.model_dump() == before

    def test_nan_threshold_rejected(self):
        with pytest.raises(ValueError, match="higher_threshold"):
            split_cluster(_make_cluster(["q1", "q2"]), [], math.nan)

    def test_children_ids_are_content_derived(self):
        cluster = _make_cluster(["q1", "q2", "q3", "q4"])
        subclusters = split_cluster(cluster, _bridged_pairs(), 0.9)

        assert {c.id for c in subclusters} == {
            generate_cluster_id(["q1", "q2"]),
            generate_cluster_id(["q3", "q4"]),
        }


class TestSplitClusterAuto:
    def test_finds_loosest_separating_threshold(self):
        cluster = _make_cluster(["q1", "q2", "q3", "q4"])
        result = split_cluster_auto(cluster, _bridged_pairs())

        assert result.threshold == 0.92
        assert sorted(c.question_ids for c in result.clusters) == [["q1", "q2"], ["q3", "q4"]]

    def test_uniform_chain_cannot_split(self):
        cluster = _make_cluster(["a", "b", "c", "d"])
        pairs = [_make_pair("a", "b", 0.9), _make_pair("b", "c", 0.9), _make_pair("c", "d", 0.9)]

        result = split_cluster_auto(cluster, pairs)

        assert result.threshold is None
        assert result.clusters == []

    def test_min_cluster_size_respected(self):
        cluster = _make_cluster(["q1", "q2", "q3", "q4"])
        result = split_cluster_auto(cluster, _bridged_pairs(), min_cluster_size=3)

        assert result.threshold is None
        assert result.clusters == []

    def test_size_one_behaves_like_two(self):
        cluster = _make_cluster(["q1", "q2", "q3", "q4"])

        loose = split_cluster_auto(cluster, _bridged_pairs(), min_cluster_size=1)
        default = split_cluster_auto(cluster, _bridged_pairs(), min_cluster_size=2)

        assert loose.threshold == default.threshold == 0.92
        assert [c.question_ids for c in loose.clusters] == [c.question_ids for c in default.clusters]

    def test_invalid_min_cluster_size_rejected(self):
        with pytest.raises(ValueError):
            split_cluster_auto(_make_cluster(["q1", "q2"]), _bridged_pairs(), min_cluster_size=0)

    def test_no_internal_pairs(self):
        result = split_cluster_auto(_make_cluster(["q1", "q2"]), [_make_pair("x", "y")])
        assert result.threshold is None

    def test_prefers_lowest_threshold_that_still_splits(self):
        # Three tight pairs; the weakest bridge (0.8) would reunite everything.
        cluster = _make_cluster(["a", "b", "c", "d", "e", "f"])
        pairs = [
            _make_pair("a", "b", 0.99),
            _make_pair("c", "d", 0.97),
            _make_pair("e", "f", 0.95),
            _make_pair("b", "c", 0.9),
            _make_pair("d", "e", 0.8),
        ]
        result = split_cluster_auto(cluster, pairs)

        assert result.threshold == 0.9
        assert sorted(c.question_ids for c in result.clusters) == [
            ["a", "b", "c", "d"],
            ["e", "f"],
        ]


class TestMergeClusters:
    def test_merges_members_and_metrics(self):
        c1 = _make_cluster(["q1", "q2"], "cluster_1")
        c2 = _make_cluster(["q3", "q4"], "cluster_2")
        pairs = [
            _make_pair("q1", "q2", 0.9),
            _make_pair("q3", "q4", 0.88),
            _make_pair("q2", "q3", 0.85),
        ]
        merged = merge_clusters([c1, c2], pairs)

        assert merged.question_ids == ["q1", "q2", "q3", "q4"]
        assert merged.avg_similarity == pytest.approx(0.8767, abs=1e-3)

    def test_overlapping_members_deduplicated(self):
        c1 = _make_cluster(["q1", "q2", "q3"])
        c2 = _make_cluster(["q2", "q3", "q4"])
        merged = merge_clusters([c1, c2], [])

        assert merged.question_ids == ["q1", "q2", "q3", "q4"]

    def test_new_id_for_new_membership(self):
        c1 = _make_cluster(["q1", "q2"], "cluster_1")
        c2 = _make_cluster(["q3"], "cluster_2")
        merged = merge_clusters([c1, c2], [])

        assert re.match(r"^cluster_[0-9a-z]+$", merged.id)
        assert merged.id not in {"cluster_1", "cluster_2"}
        assert merged.id == generate_cluster_id(["q1", "q2", "q3"])

    def test_single_cluster_is_noop(self):
        pairs = [_make_pair("q1", "q2", 0.9)]
        (original,) = cluster_questions_by_similarity(pairs, 2, 0.85)

        merged = merge_clusters([original], pairs)

        assert merged.id == original.id
        assert merged.question_ids == original.question_ids
        assert merged.avg_similarity == original.avg_similarity

    def test_metrics_with_missing_pairs(self):
        c1 = _make_cluster(["q1", "q2"])
        c2 = _make_cluster(["q3"])
        merged = merge_clusters([c1, c2], [_make_pair("q1", "q2", 0.9)])

        assert merged.size == 3
        assert merged.avg_similarity == 0.9

    def test_uses_pairs_regardless_of_threshold(self):
        c1 = _make_cluster(["q1", "q2"])
        c2 = _make_cluster(["q3", "q4"])
        pairs = [_make_pair("q2", "q3", 0.3), _make_pair("q3", "q9", 0.99)]

        merged = merge_clusters([c1, c2], pairs)

        assert merged.max_similarity == 0.3
        assert merged.edge_count == 1

    def test_empty_input(self):
        merged = merge_clusters([], [])

        assert merged.question_ids == []
        assert merged.avg_similarity == 0
        assert merged.max_similarity == 0
        assert merged.min_similarity == 0

    def test_order_independent(self):
        a = _make_cluster(["q1", "q2"])
        b = _make_cluster(["q3", "q4"])
        pairs = [_make_pair("q2", "q3", 0.87), _make_pair("q1", "q2", 0.93)]

        ab = merge_clusters([a, b], pairs)
        ba = merge_clusters([b, a], list(reversed(pairs)))

        assert ab.id == ba.id
        assert ab.question_ids == ba.question_ids
        assert ab.avg_similarity == ba.avg_similarity
