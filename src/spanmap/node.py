"""Geographic node data model."""

from typing import Any, Dict, Hashable, Iterable, Optional, Set
import logging
import math

logger = logging.getLogger(__name__)


class Node:
    """A named location with coordinates and descriptive metadata."""

    def __init__(
        self,
        id: Hashable,
        lat: float,
        lng: float,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Initializes a Node object.

        Args:
            id: Identifier, unique among the nodes of one tree computation.
            lat: Latitude in decimal degrees.
            lng: Longitude in decimal degrees.
            metadata: Descriptive attributes (name, region, population, ...).
                These are carried along for display and filtering only.
        """
        self.id = id
        self.lat = lat
        self.lng = lng
        self.metadata = metadata if metadata is not None else {}

    @property
    def name(self) -> str:
        """Display name, falling back to the id."""
        return str(self.metadata.get("name") or self.id)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a metadata attribute."""
        return self.metadata.get(key, default)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return (
            self.id == other.id
            and self.lat == other.lat
            and self.lng == other.lng
            and self.metadata == other.metadata
        )

    def __hash__(self) -> int:
        return hash((self.id, self.lat, self.lng))

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, lat={self.lat}, lng={self.lng})"


def validate_nodes(nodes: Iterable[Node]) -> None:
    """
    Check that nodes are fit for a spanning tree computation.

    The tree builder itself trusts its input: duplicate ids silently merge
    unrelated nodes and non-finite coordinates poison the edge ordering.
    This check is opt-in.

    Args:
        nodes: Nodes to check

    Raises:
        ValueError: On the first duplicate id or invalid coordinate found
    """
    seen: Set[Hashable] = set()
    for node in nodes:
        if node.id in seen:
            raise ValueError(f"Duplicate node id: {node.id!r}")
        seen.add(node.id)

        if not (math.isfinite(node.lat) and math.isfinite(node.lng)):
            raise ValueError(
                f"Node {node.id!r} has non-finite coordinates ({node.lat}, {node.lng})"
            )
        if not -90.0 <= node.lat <= 90.0:
            raise ValueError(f"Node {node.id!r} latitude {node.lat} out of range")
        if not -180.0 <= node.lng <= 180.0:
            raise ValueError(f"Node {node.id!r} longitude {node.lng} out of range")

    logger.debug(f"Validated {len(seen)} nodes")
