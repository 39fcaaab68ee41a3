"""Similarity graph construction from flat pair lists.

The graph is rebuilt on every call and discarded afterwards; nothing
is cached between invocations.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import networkx as nx

from question_dedup.models.similarity import SimilarityPair, pair_key

from .validation import validate_threshold


@dataclass
class SimilarityGraph:
    """Thresholded similarity graph plus the pairs that produced it.

    Attributes:
        graph: Undirected graph with one edge per unordered pair.  The
            ``weight`` attribute holds the highest score seen for it.
        pairs: Every retained (non-self, at-or-above-threshold) input
            pair, duplicates included, for metrics computation.
    """

    graph: nx.Graph = field(default_factory=nx.Graph)
    pairs: list[SimilarityPair] = field(default_factory=list)

    @property
    def edge_count(self) -> int:
        return self.graph.number_of_edges()


def build_similarity_graph(
    pairs: Iterable[SimilarityPair], threshold: float
) -> SimilarityGraph:
    """Build the thresholded adjacency relation for ``pairs``.

    Self-pairs are dropped.  Duplicate and reversed pairs collapse onto
    a single edge but all of them are kept in ``SimilarityGraph.pairs``.

    Raises:
        ValueError: If ``threshold`` is NaN or outside ``[0, 1]``.
    """
    threshold = validate_threshold(threshold)
    G = nx.Graph()
    retained: list[SimilarityPair] = []

    for pair in pairs:
        if pair.is_self_pair or pair.score < threshold:
            continue
        retained.append(pair)
        a_id, b_id = pair.key
        edge = G.get_edge_data(a_id, b_id)
        if edge is None:
            G.add_edge(a_id, b_id, weight=pair.score)
        elif pair.score > edge["weight"]:
            edge["weight"] = pair.score

    return SimilarityGraph(graph=G, pairs=retained)


def drop_ignored_pairs(
    pairs: Iterable[SimilarityPair],
    ignored: Iterable[tuple[str, str]],
) -> list[SimilarityPair]:
    """Remove pairs that curators marked as "not similar".

    ``ignored`` holds id tuples in any order; matching is on the
    unordered pair.
    """
    ignored_keys = {pair_key(a_id, b_id) for a_id, b_id in ignored}
    if not ignored_keys:
        return list(pairs)
    return [p for p in pairs if p.key not in ignored_keys]
