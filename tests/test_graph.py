"""Tests for similarity graph construction."""

import math

import pytest

from question_dedup.clustering.graph import build_similarity_graph, drop_ignored_pairs
from question_dedup.models.similarity import SimilarityPair


def _make_pair(a_id: str, b_id: str, score: float = 0.9) -> SimilarityPair:
    return SimilarityPair(a_id=a_id, b_id=b_id, score=score)


class TestBuildSimilarityGraph:
    def test_empty_input_gives_empty_graph(self):
        result = build_similarity_graph([], 0.85)

        assert result.edge_count == 0
        assert result.graph.number_of_nodes() == 0
        assert result.pairs == []

    def test_pairs_below_threshold_dropped(self):
        pairs = [_make_pair("a", "b", 0.9), _make_pair("b", "c", 0.7)]
        result = build_similarity_graph(pairs, 0.85)

        assert result.edge_count == 1
        assert result.graph.has_edge("a", "b")
        assert "c" not in result.graph
        assert result.pairs == [pairs[0]]

    def test_score_equal_to_threshold_is_retained(self):
        result = build_similarity_graph([_make_pair("a", "b", 0.85)], 0.85)
        assert result.edge_count == 1

    def test_self_pairs_dropped(self):
        pairs = [_make_pair("a", "a", 1.0), _make_pair("a", "b", 0.9)]
        result = build_similarity_graph(pairs, 0.85)

        assert result.edge_count == 1
        assert not result.graph.has_edge("a", "a")
        assert all(not p.is_self_pair for p in result.pairs)

    def test_duplicates_collapse_to_one_edge_but_stay_in_pairs(self):
        pairs = [
            _make_pair("a", "b", 0.9),
            _make_pair("a", "b", 0.9),
            _make_pair("b", "a", 0.95),
        ]
        result = build_similarity_graph(pairs, 0.85)

        assert result.edge_count == 1
        assert len(result.pairs) == 3
        assert result.graph["a"]["b"]["weight"] == 0.95

    @pytest.mark.parametrize("threshold", [-0.1, 1.01, math.nan])
    def test_invalid_threshold_rejected(self, threshold):
        with pytest.raises(ValueError, match="threshold"):
            build_similarity_graph([_make_pair("a", "b")], threshold)


class TestDropIgnoredPairs:
    def test_no_ignored_pairs_returns_copy(self):
        pairs = [_make_pair("a", "b")]
        result = drop_ignored_pairs(pairs, [])

        assert result == pairs
        assert result is not pairs

    def test_ignored_pairs_match_in_either_order(self):
        pairs = [_make_pair("a", "b"), _make_pair("c", "b"), _make_pair("c", "d")]
        result = drop_ignored_pairs(pairs, [("b", "a"), ("b", "c")])

        assert result == [pairs[2]]
