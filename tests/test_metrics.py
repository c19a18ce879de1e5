import logging

import pytest

from spanmap.config import SpanmapConfig
from spanmap.metrics import collect_metrics, log_metrics
from spanmap.node import Node
from spanmap.spanning_tree import build_minimum_spanning_tree


@pytest.fixture
def nodes():
    return [
        Node("a", 0.0, 0.0, {"region": "North"}),
        Node("b", 0.0, 1.0, {"region": "North"}),
        Node("c", 0.0, 3.0, {"region": "South"}),
        Node("d", 0.0, 6.0),
    ]


def test_collect_metrics(nodes):
    tree = build_minimum_spanning_tree(nodes)
    metrics = collect_metrics(nodes, tree)

    assert metrics.node_count == 4
    assert metrics.edge_count == 3
    assert metrics.total_distance == pytest.approx(sum(e.distance for e in tree))
    assert metrics.shortest_edge == pytest.approx(tree[0].distance)
    assert metrics.longest_edge == pytest.approx(tree[-1].distance)
    assert metrics.category_counts == {"North": 2, "South": 1, "unknown": 1}


def test_collect_metrics_without_edges():
    metrics = collect_metrics([Node("a", 0.0, 0.0)], [])
    assert metrics.edge_count == 0
    assert metrics.total_distance == 0
    assert metrics.longest_edge == 0.0
    assert metrics.shortest_edge == 0.0


def test_log_metrics_disabled(nodes, caplog):
    metrics = collect_metrics(nodes, build_minimum_spanning_tree(nodes))
    with caplog.at_level(logging.DEBUG, logger="spanmap.metrics"):
        log_metrics(metrics, SpanmapConfig(metrics=False))
    assert "SPANMAP_METRICS" not in caplog.text


def test_log_metrics_enabled(nodes, caplog):
    metrics = collect_metrics(nodes, build_minimum_spanning_tree(nodes))
    with caplog.at_level(logging.DEBUG, logger="spanmap.metrics"):
        log_metrics(metrics, SpanmapConfig(metrics=True))

    assert "=== SPANMAP_METRICS ===" in caplog.text
    assert "edge_count=3" in caplog.text
    assert "nodes[North]=2" in caplog.text
    assert "=== END_SPANMAP_METRICS ===" in caplog.text
