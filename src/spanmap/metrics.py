"""
Module for collecting and logging metrics about a spanning tree.
"""

import collections
import logging
from typing import Dict, NamedTuple, Sequence

from .config import SpanmapConfig
from .node import Node
from .spanning_tree import Edge, total_distance

logger = logging.getLogger(__name__)


class TreeMetrics(NamedTuple):
    """Container for spanning tree metrics data."""

    node_count: int
    edge_count: int
    total_distance: float  # km
    longest_edge: float  # km
    shortest_edge: float  # km
    category_counts: Dict[str, int]


def collect_metrics(
    nodes: Sequence[Node], edges: Sequence[Edge], field: str = "region"
) -> TreeMetrics:
    """
    Collect metrics for a computed tree before drawing it.

    Args:
        nodes: Nodes the tree was built over
        edges: Accepted tree edges
        field: Metadata field to count node categories by

    Returns:
        TreeMetrics for the tree
    """
    category_counts: Dict[str, int] = collections.defaultdict(int)
    for node in nodes:
        category_counts[str(node.get(field) or "unknown")] += 1

    distances = [edge.distance for edge in edges]

    return TreeMetrics(
        node_count=len(nodes),
        edge_count=len(edges),
        total_distance=total_distance(edges),
        longest_edge=max(distances, default=0.0),
        shortest_edge=min(distances, default=0.0),
        category_counts=dict(category_counts),
    )


def log_metrics(metrics: TreeMetrics, config: SpanmapConfig) -> None:
    """
    Log detailed metrics after creating the map.

    Args:
        metrics: TreeMetrics containing collected metrics
        config: Settings; nothing is logged unless config.metrics is set
    """
    if not config.metrics:
        return

    logger.debug("=== SPANMAP_METRICS ===")
    logger.debug(f"node_count={metrics.node_count}")
    logger.debug(f"edge_count={metrics.edge_count}")
    logger.debug(f"total_distance_km={metrics.total_distance:.3f}")
    logger.debug(f"longest_edge_km={metrics.longest_edge:.3f}")
    logger.debug(f"shortest_edge_km={metrics.shortest_edge:.3f}")
    for category, count in sorted(metrics.category_counts.items()):
        logger.debug(f"nodes[{category}]={count}")
    logger.debug("=== END_SPANMAP_METRICS ===")
