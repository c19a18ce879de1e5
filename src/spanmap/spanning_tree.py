#!/usr/bin/env python3
"""
Minimum spanning tree construction over geographic nodes.

The tree is built with Kruskal's algorithm over the implicit complete graph:
every pair of nodes is a candidate edge weighted by its great-circle
distance. Enumeration is quadratic in the number of nodes, which is fine for
up to a few thousand locations.
"""

from typing import Dict, Hashable, Iterable, List, NamedTuple, Sequence
import logging

from .geometry import haversine_distance
from .node import Node

logger = logging.getLogger(__name__)


class Edge(NamedTuple):
    """A candidate or accepted tree edge between two nodes."""

    source: Node
    target: Node
    distance: float  # Great-circle distance in kilometers


class DisjointSet:
    """Union-find partition of node ids, with path compression."""

    def __init__(self, ids: Iterable[Hashable]):
        self.parent: Dict[Hashable, Hashable] = {i: i for i in ids}

    def find(self, item: Hashable) -> Hashable:
        """Return the root of the set containing item."""
        root = item
        while self.parent[root] != root:
            root = self.parent[root]

        # Point every element on the walked chain directly at the root
        while self.parent[item] != root:
            self.parent[item], item = root, self.parent[item]

        return root

    def union(self, a: Hashable, b: Hashable) -> bool:
        """
        Merge the sets containing a and b.

        Returns:
            True if the sets were merged, False if a and b were already joined
        """
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False
        self.parent[root_a] = root_b
        return True

    def connected(self, a: Hashable, b: Hashable) -> bool:
        return self.find(a) == self.find(b)

    def component_count(self) -> int:
        return len({self.find(item) for item in self.parent})

    def __len__(self) -> int:
        return len(self.parent)


def enumerate_edges(nodes: Sequence[Node]) -> List[Edge]:
    """
    List every unordered pair of nodes as a weighted edge.

    Pairs are produced as (i, j) with i < j over the input positions, so the
    lower-indexed node is always the edge source.

    Args:
        nodes: Nodes in caller order

    Returns:
        N*(N-1)/2 edges in enumeration order
    """
    edges = []
    for i in range(len(nodes)):
        for j in range(i + 1, len(nodes)):
            edges.append(
                Edge(nodes[i], nodes[j], haversine_distance(nodes[i], nodes[j]))
            )
    return edges


def build_minimum_spanning_tree(nodes: Sequence[Node]) -> List[Edge]:
    """
    Build the minimum spanning tree of the given nodes (Kruskal's algorithm).

    Node ids must be unique within the input. Duplicate ids are not detected
    here and make unrelated nodes share a set; see node.validate_nodes.

    Args:
        nodes: Nodes to connect

    Returns:
        Accepted edges in acceptance order (ascending distance). Empty for
        fewer than two nodes, otherwise len(nodes) - 1 edges.
    """
    if len(nodes) < 2:
        return []

    edges = enumerate_edges(nodes)
    # list.sort is stable: equal distances keep enumeration order
    edges.sort(key=lambda edge: edge.distance)

    components = DisjointSet(node.id for node in nodes)
    target_count = len(nodes) - 1
    tree: List[Edge] = []

    for edge in edges:
        if components.union(edge.source.id, edge.target.id):
            tree.append(edge)
            if len(tree) == target_count:
                break

    logger.debug(
        f"Spanning tree over {len(nodes)} nodes: {len(tree)} of {len(edges)} candidate edges accepted"
    )
    return tree


def total_distance(edges: Iterable[Edge]) -> float:
    """Sum of edge distances in kilometers."""
    return sum(edge.distance for edge in edges)
