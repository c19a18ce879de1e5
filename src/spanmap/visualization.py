#!/usr/bin/env python3
"""
Spanning tree visualization using folium maps.
"""

from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple
import html
import logging
import folium
from folium.template import Template

from .config import SpanmapConfig
from .geometry import bounding_box, geodesic_path
from .metrics import TreeMetrics
from .node import Node
from .spanning_tree import Edge

logger = logging.getLogger(__name__)

EDGE_COLOR = "#FF0000"
LAYER_EDGE_COLOR = "#2E86AB"

# Metadata keys shown first in popups, in this order
PROMINENT_KEYS = ["region", "population", "status"]


class RenderSet(NamedTuple):
    """The map layers drawn for one tree."""

    markers: folium.FeatureGroup
    edges: folium.FeatureGroup


class TreeLegend(folium.MacroElement):
    """Custom legend for spanning tree visualization with dynamic counts."""

    def __init__(self, metrics: TreeMetrics, title: str = "Spanning tree"):
        super().__init__()
        self.title = html.escape(title)
        self.node_count = metrics.node_count
        self.edge_count = metrics.edge_count
        self.total_distance = f"{metrics.total_distance:.1f}"
        self.longest_edge = f"{metrics.longest_edge:.1f}"

        self._template = Template(
            """
        {% macro html(this, kwargs) %}
        <div id="spanmap-legend" style="
            position: fixed;
            bottom: 50px;
            left: 50px;
            width: 230px;
            background-color: white;
            border: 2px solid grey;
            z-index: 9999;
            font-size: 13px;
            padding: 12px;
            font-family: Arial, sans-serif;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2);
            box-sizing: border-box;
        ">
            <b>{{ this.title }}</b><br>
            <div style="margin: 4px 0; line-height: 1.3;">
                Locations: {{ this.node_count }}
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #FF0000; font-weight: bold; font-size: 18px;">&mdash;</span>
                Connections: {{ this.edge_count }}
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                Total length: {{ this.total_distance }} km
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                Longest connection: {{ this.longest_edge }} km
            </div>
        </div>
        {% endmacro %}
        """
        )


def node_to_html(node: Node) -> str:
    """
    Format a node's details into HTML for popup display.

    Args:
        node: The Node to format

    Returns:
        HTML-formatted string
    """
    html_parts = [f"<b>{html.escape(node.name)}</b>"]
    html_parts.append(f"<br><b>ID:</b> {html.escape(str(node.id))}")

    for key in PROMINENT_KEYS:
        value = node.get(key)
        if value not in (None, ""):
            html_parts.append(
                f"<br><b>{key.capitalize()}:</b> {html.escape(str(value))}"
            )

    # Anything else the loader attached
    remaining = {
        k: v
        for k, v in node.metadata.items()
        if k not in PROMINENT_KEYS and k != "name"
    }
    for key, value in sorted(remaining.items()):
        html_parts.append(
            f"<br>&nbsp;&nbsp;<i>{html.escape(key)}:</i> {html.escape(str(value))}"
        )

    html_parts.append(f"<br><b>Lat:</b> {node.lat}")
    html_parts.append(f"<br><b>Lng:</b> {node.lng}")

    return "".join(html_parts)


def edge_to_html(edge: Edge) -> str:
    """Format an edge for popup display."""
    return (
        f"<b>{html.escape(edge.source.name)}</b> &ndash; "
        f"<b>{html.escape(edge.target.name)}</b><br>{edge.distance:.2f} km"
    )


def create_map() -> folium.Map:
    """
    Create an empty map with the standard and satellite base layers.

    Returns:
        The folium map all layers are drawn onto
    """
    tree_map = folium.Map(tiles=None)

    folium.TileLayer(
        tiles="CartoDB positron",
        attr=(
            "&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> "
            "contributors &copy; <a href='https://carto.com/attributions'>CARTO</a>"
        ),
        name="Standard",
        control=True,
        show=True,
    ).add_to(tree_map)

    folium.TileLayer(
        tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attr=(
            "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, GeoEye, "
            "Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
        ),
        name="Satellite",
        control=True,
        show=False,
    ).add_to(tree_map)

    return tree_map


def clear_render_set(tree_map: folium.Map, render_set: RenderSet) -> None:
    """
    Remove a previously drawn tree from the map.

    folium has no public way to detach a child, so this pops the layers out
    of the private branca ``_children`` mapping, keyed by element name.
    Recheck it when upgrading folium or branca.
    """
    for group in render_set:
        tree_map._children.pop(group.get_name(), None)


def render_tree(
    tree_map: folium.Map,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    config: SpanmapConfig,
    name: str = "Spanning tree",
    show: bool = True,
    color: str = EDGE_COLOR,
    previous: Optional[RenderSet] = None,
) -> RenderSet:
    """
    Draw nodes and tree edges onto a map.

    Args:
        tree_map: Map to draw on
        nodes: Nodes to mark
        edges: Tree edges to draw as geodesic polylines
        config: Settings such as geodesic_segments
        name: Layer name shown in the layer control
        show: Whether the layers are visible initially
        color: Edge color
        previous: Render set returned by an earlier call; removed first

    Returns:
        RenderSet holding the new marker and edge layers
    """
    if previous is not None:
        clear_render_set(tree_map, previous)

    markers = folium.FeatureGroup(name=f"{name} locations", show=show)
    for node in nodes:
        folium.Marker(
            [node.lat, node.lng],
            popup=folium.Popup(node_to_html(node), max_width=300),
            tooltip=node.name,
        ).add_to(markers)

    lines = folium.FeatureGroup(name=f"{name} connections", show=show)
    for edge in edges:
        folium.PolyLine(
            geodesic_path(edge.source, edge.target, config.geodesic_segments),
            color=color,
            weight=2,
            opacity=1.0,
            popup=folium.Popup(edge_to_html(edge), max_width=300),
        ).add_to(lines)

    lines.add_to(tree_map)
    markers.add_to(tree_map)

    logger.debug(f"Rendered '{name}': {len(nodes)} markers, {len(edges)} edges")
    return RenderSet(markers=markers, edges=lines)


def create_tree_map(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    output_filename: str,
    metrics: TreeMetrics,
    config: SpanmapConfig,
    layers: Optional[Dict[str, Tuple[List[Node], List[Edge]]]] = None,
) -> None:
    """
    Create an interactive map of a spanning tree and save it as HTML.

    Args:
        nodes: Selected nodes
        edges: Spanning tree over the selected nodes
        output_filename: Path where HTML map file should be saved
        metrics: TreeMetrics for the legend
        config: Settings like bbox_buffer and geodesic_segments
        layers: Extra trees by category name, drawn hidden and toggled
            through the layer control

    Raises:
        ValueError: If nodes is empty
    """
    if not nodes:
        raise ValueError("Cannot create map for no locations")

    tree_map = create_map()

    title = config.filter_value or "Spanning tree"
    render_tree(tree_map, nodes, edges, config, name=title)

    for layer_name, (layer_nodes, layer_edges) in (layers or {}).items():
        render_tree(
            tree_map,
            layer_nodes,
            layer_edges,
            config,
            name=str(layer_name),
            show=False,
            color=LAYER_EDGE_COLOR,
        )

    folium.LayerControl().add_to(tree_map)
    tree_map.add_child(TreeLegend(metrics, title))

    south, west, north, east = bounding_box(nodes)
    buffer = config.bbox_buffer
    bounds = [
        [max(-90.0, south - buffer), max(-180.0, west - buffer)],
        [min(90.0, north + buffer), min(180.0, east + buffer)],
    ]
    tree_map.fit_bounds(bounds)

    tree_map.save(output_filename)

    logger.debug(
        f"Map saved to {output_filename} with {metrics.node_count} locations and {metrics.edge_count} connections ({metrics.total_distance:.1f} km)"
    )
