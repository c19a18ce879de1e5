#!/usr/bin/env python3
"""
Loading of geographic nodes from delimited text, GPX files, or URLs.
"""

from typing import Iterable, List, Optional, TextIO
import csv
import io
import logging
import math
import gpxpy
import gpxpy.gpx
import requests

from .node import Node

DEFAULT_TIMEOUT = 30

# Column layout of delimited input rows
COLUMNS = ["id", "name", "region", "population", "status", "lat", "lng"]

logger = logging.getLogger(__name__)


def parse_coordinate(raw: str) -> Optional[float]:
    """
    Parse a decimal-degree coordinate, accepting a decimal comma.

    Returns:
        The coordinate, or None if it is not a finite number
    """
    try:
        value = float(raw.strip().replace(",", ".", 1))
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_delimited(lines: Iterable[str], delimiter: str = ";") -> List[Node]:
    """
    Parse delimited rows into nodes.

    Each row holds id, name, region, population, status, lat and lng in that
    order. Empty rows are ignored; rows that are too short or whose
    coordinates do not parse are skipped.

    Args:
        lines: Lines of text (a file object works)
        delimiter: Field separator

    Returns:
        Parsed nodes in input order
    """
    nodes = []
    skipped = 0

    for line_number, row in enumerate(csv.reader(lines, delimiter=delimiter), 1):
        if not row or all(not field.strip() for field in row):
            continue

        if len(row) < len(COLUMNS):
            logger.debug(f"Line {line_number}: expected {len(COLUMNS)} fields, got {len(row)}")
            skipped += 1
            continue

        lat = parse_coordinate(row[5])
        lng = parse_coordinate(row[6])
        if lat is None or lng is None:
            logger.debug(f"Line {line_number}: unparseable coordinates ({row[5]!r}, {row[6]!r})")
            skipped += 1
            continue

        nodes.append(
            Node(
                id=row[0].strip(),
                lat=lat,
                lng=lng,
                metadata={
                    "name": row[1].strip(),
                    "region": row[2].strip(),
                    "population": row[3].strip(),
                    "status": row[4].strip(),
                },
            )
        )

    if skipped:
        logger.warning(f"Skipped {skipped} rows without valid coordinates")
    logger.debug(f"Parsed {len(nodes)} nodes from delimited input")

    return nodes


def parse_gpx(file_input: TextIO) -> List[Node]:
    """
    Parse GPX waypoints into nodes.

    Waypoint names repeat freely in GPX files, so the node id is the
    waypoint position and the name is kept as metadata. The waypoint type is
    used as the region.

    Args:
        file_input: File-like object or string containing GPX data

    Returns:
        One node per waypoint

    Raises:
        gpxpy.gpx.GPXException: If the GPX data is malformed
    """
    gpx_data = gpxpy.parse(file_input)

    nodes = []
    for index, waypoint in enumerate(gpx_data.waypoints):
        metadata = {"name": waypoint.name or str(index)}
        if waypoint.type:
            metadata["region"] = waypoint.type
        if waypoint.description:
            metadata["description"] = waypoint.description
        if waypoint.elevation is not None:
            metadata["elevation"] = waypoint.elevation

        nodes.append(
            Node(
                id=index,
                lat=waypoint.latitude,
                lng=waypoint.longitude,
                metadata=metadata,
            )
        )

    logger.debug(f"Parsed {len(nodes)} waypoints from GPX data")
    return nodes


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def _is_gpx(source: str) -> bool:
    # Ignore any query string when looking at a URL's extension
    return source.split("?", 1)[0].lower().endswith(".gpx")


def fetch_text(url: str, timeout: int = DEFAULT_TIMEOUT) -> str:
    """
    Download a text document.

    Raises:
        requests.exceptions.RequestException: On network or HTTP errors
    """
    logger.debug(f"Fetching {url}")
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text


def load_nodes(
    source: str, delimiter: str = ";", timeout: int = DEFAULT_TIMEOUT
) -> List[Node]:
    """
    Load nodes from a file path or an http(s) URL.

    Sources ending in .gpx are read as GPX waypoints; anything else is read
    as delimited text.

    Args:
        source: Path or URL
        delimiter: Field separator for delimited text
        timeout: Request timeout in seconds for URLs

    Returns:
        Loaded nodes

    Raises:
        FileNotFoundError: If a file doesn't exist.
        PermissionError: If a file can't be read.
        gpxpy.gpx.GPXException: If GPX data is malformed.
        requests.exceptions.RequestException: If a URL can't be fetched.
        UnicodeDecodeError: If a file is not UTF-8 text.
    """
    if _is_url(source):
        text = fetch_text(source, timeout)
        if _is_gpx(source):
            return parse_gpx(text)
        return parse_delimited(io.StringIO(text), delimiter)

    logger.debug(f"Reading {source}")
    with open(source, "r", encoding="utf-8", newline="") as f:
        if _is_gpx(source):
            return parse_gpx(f)
        return parse_delimited(f, delimiter)
