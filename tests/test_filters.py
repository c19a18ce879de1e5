import pytest

from spanmap.filters import filter_nodes, filter_values
from spanmap.node import Node


@pytest.fixture
def nodes():
    return [
        Node(1, -31.4, -64.2, {"region": "Cordoba"}),
        Node(2, -32.9, -68.8, {"region": "Mendoza"}),
        Node(3, -33.1, -64.3, {"region": "Cordoba"}),
        Node(4, -33.3, -66.3, {"region": ""}),
        Node(5, -34.6, -68.3, {}),
    ]


def test_no_filter_returns_copy(nodes):
    selected = filter_nodes(nodes, "region")
    assert selected == nodes
    assert selected is not nodes


def test_filter_keeps_matching_in_order(nodes):
    selected = filter_nodes(nodes, "region", "Cordoba")
    assert [node.id for node in selected] == [1, 3]


def test_filter_without_matches(nodes):
    assert filter_nodes(nodes, "region", "Salta") == []


def test_value_named_all_is_an_ordinary_value():
    nodes = [
        Node(1, 0.0, 0.0, {"status": "all"}),
        Node(2, 0.0, 1.0, {"status": "some"}),
    ]
    assert [node.id for node in filter_nodes(nodes, "status", "all")] == [1]
    assert filter_values(nodes, "status") == ["all", "some"]


def test_filter_values_first_seen_order(nodes):
    assert filter_values(nodes, "region") == ["Cordoba", "Mendoza"]


def test_filter_values_of_empty_list():
    assert filter_values([], "region") == []
