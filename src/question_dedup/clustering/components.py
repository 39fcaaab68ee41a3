"""Connected components via union-find."""

from __future__ import annotations

from collections.abc import Iterable

import networkx as nx
from networkx.utils import UnionFind


def extract_components(
    edges: nx.Graph | Iterable[tuple[str, str]],
) -> list[set[str]]:
    """Partition every node touched by an edge into connected components.

    Uses a disjoint-set forest (path compression + union by size), so
    discovery stays near-linear in the number of edges.  Nodes that
    appear in no edge are never part of the result, and self-edges do
    not introduce nodes.

    Args:
        edges: A graph, or any iterable of ``(a_id, b_id)`` tuples.

    Returns:
        Components ordered largest first, ties by smallest member id.
    """
    edge_iter = edges.edges() if isinstance(edges, nx.Graph) else edges

    forest = UnionFind()
    for a_id, b_id in edge_iter:
        if a_id == b_id:
            continue
        forest.union(a_id, b_id)

    components = [set(group) for group in forest.to_sets()]
    components.sort(key=lambda c: (-len(c), min(c)))
    return components
