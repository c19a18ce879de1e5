"""
Categorical filtering of nodes (e.g. by region).
"""

from typing import Any, List, Optional, Sequence
import logging

from .node import Node

logger = logging.getLogger(__name__)


def filter_nodes(
    nodes: Sequence[Node], field: str, value: Optional[Any] = None
) -> List[Node]:
    """
    Select the nodes whose metadata field equals value.

    Args:
        nodes: Nodes to filter
        field: Metadata key to compare
        value: Value to keep; None keeps every node

    Returns:
        Matching nodes in input order
    """
    if value is None:
        return list(nodes)

    selected = [node for node in nodes if node.get(field) == value]
    logger.debug(f"Filter {field}={value!r} kept {len(selected)}/{len(nodes)} nodes")
    return selected


def filter_values(nodes: Sequence[Node], field: str) -> List[Any]:
    """
    List the choices for filtering on a field.

    Returns:
        Each distinct value of the field, in first-seen order.
        Nodes without the field (or with an empty value) contribute nothing.
    """
    values: List[Any] = []
    for node in nodes:
        value = node.get(field)
        if value in (None, "") or value in values:
            continue
        values.append(value)
    return values
