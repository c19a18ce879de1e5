#!/usr/bin/env python3
"""
Spanning Tree Map Tool
This script loads a set of locations, optionally filters them by a category
such as region, connects them with a minimum spanning tree of great-circle
edges, and generates an interactive HTML map of the result.

Requirements:
    pip install folium gpxpy pyproj requests shapely

"""

from typing import Dict, List, Optional, Sequence, Tuple
import webbrowser
import argparse
import logging
import sys
import os
import gpxpy.gpx
import requests

from . import __version__
from . import visualization
from .config import SpanmapConfig
from .filters import filter_nodes, filter_values
from .loader import DEFAULT_TIMEOUT, load_nodes
from .metrics import collect_metrics, log_metrics
from .node import Node, validate_nodes
from .spanning_tree import Edge, build_minimum_spanning_tree
from .file_utils import generate_output_filename

# Configure logging
logger = logging.getLogger("spanmap")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Minimum spanning tree map tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "source",
        type=str,
        nargs="?",
        help="Delimited text file, GPX file, or http(s) URL of either",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output HTML map file (default: auto-generated based on input name)",
    )
    parser.add_argument(
        "--delimiter",
        type=str,
        default=";",
        help="Field separator of delimited input (default: ;)",
    )
    parser.add_argument(
        "--filter-field",
        type=str,
        default="region",
        help="Location attribute to filter on (default: region)",
    )
    parser.add_argument(
        "--filter-value",
        type=str,
        default=None,
        help="Only connect locations whose filter field has this value (default: all locations)",
    )
    parser.add_argument(
        "--list-values",
        action="store_true",
        help="Print the available filter values and exit",
    )
    parser.add_argument(
        "--region-layers",
        action="store_true",
        help="Add a hidden, toggleable tree layer for every filter value",
    )
    parser.add_argument(
        "--geodesic-segments",
        type=int,
        default=16,
        help="Segments per drawn connection, following the great circle (default: 16)",
    )
    parser.add_argument(
        "--bbox-buffer",
        type=float,
        default=0.05,
        help="Padding around the locations when fitting the map, in degrees (default: 0.05)",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Reject input with duplicate ids or out-of-range coordinates",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=DEFAULT_TIMEOUT,
        help=f"Timeout in seconds when downloading a URL (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--no-open",
        action="store_true",
        help="Don't automatically open the HTML file in browser",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Output structured metrics after processing",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"spanmap {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SpanmapConfig:
    """Build a SpanmapConfig from parsed arguments."""
    return SpanmapConfig(
        delimiter=args.delimiter,
        filter_field=args.filter_field,
        filter_value=args.filter_value,
        region_layers=args.region_layers,
        geodesic_segments=args.geodesic_segments,
        bbox_buffer=args.bbox_buffer,
        timeout=args.timeout,
        validate=args.validate,
        log_level=args.log_level,
        metrics=args.metrics,
    )


def determine_output_filename(
    source: str, output_arg: Optional[str], suffix: Optional[str] = None
) -> str:
    """
    Determine the output filename to use.

    Args:
        source: Path or URL of the input data
        output_arg: Value from --output argument (None if not specified)
        suffix: Selected filter value, if any

    Returns:
        Output filename to use

    Raises:
        RuntimeError: If auto-generation fails
        ValueError: If constructed filename would be illegal
    """
    if output_arg is not None:
        return output_arg

    try:
        return generate_output_filename(source, suffix)
    except (RuntimeError, ValueError) as e:
        logger.error(f"Failed to generate output filename: {e}")
        raise


def open_file_in_browser(filename: str) -> None:
    """
    Open the specified file in the default browser.

    Args:
        filename: Path to the file to open
    """
    abs_path = os.path.abspath(filename)
    try:
        webbrowser.open(f"file://{abs_path}")
        logger.debug(f"Opening {abs_path} in your default browser...")
    except Exception as e:
        logger.warning(f"Could not automatically open browser: {e}")
        logger.warning(f"Please manually open {abs_path}")


def setup_logging(args: argparse.Namespace) -> None:
    """Setup logging configuration."""
    if hasattr(sys.stdout, "reconfigure") and sys.stdout.encoding != "utf-8":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            if hasattr(sys.stderr, "reconfigure") and sys.stderr.encoding != "utf-8":
                sys.stderr.reconfigure(encoding="utf-8")
            logger.debug("Reconfigured stdout and stderr to UTF-8 encoding.")
        except Exception as e:
            logger.debug(f"Could not reconfigure stdout/stderr to UTF-8: {e}")
    level = getattr(logging, args.log_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Suppress overly verbose third-party logging
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def print_tree(edges: Sequence[Edge]) -> None:
    """
    Print the accepted tree edges in acceptance order, with running totals.

    Args:
        edges: Spanning tree edges
    """
    if not edges:
        print("No connections (fewer than two locations)")
        return

    total = sum(edge.distance for edge in edges)
    print(f"Spanning tree ({len(edges)} connections; {total:.2f} km):")

    # Width needed for distances (digits before decimal point)
    distance_width = len(f"{max(edge.distance for edge in edges):.0f}") + 3
    total_width = len(f"{total:.0f}") + 3

    running = 0.0
    for edge in edges:
        running += edge.distance
        print(
            f"{edge.distance:{distance_width}.2f} km ({running:{total_width}.2f} km) "
            f"{edge.source.name} - {edge.target.name}"
        )


def build_region_layers(
    nodes: Sequence[Node], config: SpanmapConfig
) -> Dict[str, Tuple[List[Node], List[Edge]]]:
    """
    Compute a separate tree for every value of the filter field.

    Each tree is built from scratch over its own subset.
    """
    layers = {}
    for value in filter_values(nodes, config.filter_field):
        if value == config.filter_value:
            continue
        subset = filter_nodes(nodes, config.filter_field, value)
        layers[str(value)] = (subset, build_minimum_spanning_tree(subset))
    logger.debug(f"Built {len(layers)} region layers")
    return layers


def main():
    """
    Parses command-line arguments, loads the locations, builds the
    spanning tree, and generates an interactive map.
    """
    parser = create_argument_parser()
    args = parser.parse_args()

    if not args.source:
        parser.print_help()
        sys.exit(1)

    setup_logging(args)
    config = config_from_args(args)

    # Load the locations
    try:
        nodes = load_nodes(args.source, config.delimiter, config.timeout)
    except FileNotFoundError:
        logger.error(f"Input file not found: {args.source}")
        sys.exit(1)
    except PermissionError:
        logger.error(f"Cannot read input file (permission denied): {args.source}")
        sys.exit(1)
    except gpxpy.gpx.GPXException as e:
        logger.error(f"Invalid GPX file: {e}")
        sys.exit(1)
    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to download {args.source}: {e}")
        sys.exit(1)
    except UnicodeDecodeError as e:
        logger.error(f"Input is not UTF-8 text: {args.source} ({e})")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Cannot read input {args.source}: {e}")
        sys.exit(1)
    logger.info(f"Loaded {len(nodes)} locations")

    if args.list_values:
        for value in filter_values(nodes, config.filter_field):
            print(value)
        return

    selected = filter_nodes(nodes, config.filter_field, config.filter_value)
    if not selected:
        logger.error(
            f"No locations match {config.filter_field}={config.filter_value!r}"
        )
        sys.exit(1)
    logger.info(f"Selected {len(selected)} of {len(nodes)} locations")

    if config.validate:
        try:
            validate_nodes(selected)
            if config.region_layers:
                for value in filter_values(nodes, config.filter_field):
                    validate_nodes(filter_nodes(nodes, config.filter_field, value))
        except ValueError as e:
            logger.error(f"Invalid input: {e}")
            sys.exit(1)

    tree = build_minimum_spanning_tree(selected)
    print_tree(tree)

    layers = build_region_layers(nodes, config) if config.region_layers else None

    try:
        output_filename = determine_output_filename(
            args.source, args.output, config.filter_value
        )
        logger.debug(f"Output filename: {output_filename}")
    except (RuntimeError, ValueError):
        sys.exit(1)

    metrics = collect_metrics(selected, tree, config.filter_field)

    # Create visualization map
    try:
        visualization.create_tree_map(
            selected, tree, output_filename, metrics, config, layers
        )
    except Exception as e:
        logger.error(f"Failed to create map: {e}")
        sys.exit(1)

    log_metrics(metrics, config)

    if not args.no_open:
        open_file_in_browser(output_filename)


if __name__ == "__main__":
    main()
