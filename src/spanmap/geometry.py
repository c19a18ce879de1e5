"""
Distance and geometry helpers for geographic nodes.

This module provides the great-circle distance used to weight tree edges,
plus the bounding box and geodesic path helpers used when drawing a tree
on a map.
"""

from typing import List, Sequence, Tuple
import math
import logging
from shapely.geometry import MultiPoint
import pyproj

logger = logging.getLogger(__name__)

# Mean Earth radius in kilometers (spherical approximation)
EARTH_RADIUS_KM = 6371.0

_GEOD = pyproj.Geod(ellps="WGS84")


def haversine_distance(a, b) -> float:
    """
    Calculate the great-circle distance between two nodes.

    Uses the haversine formula on a sphere of radius EARTH_RADIUS_KM. No
    range checking is done; callers supply valid decimal-degree coordinates.

    Args:
        a: First node (any object with ``lat`` and ``lng`` attributes)
        b: Second node

    Returns:
        Distance in kilometers
    """
    dlat = math.radians(b.lat - a.lat)
    dlng = math.radians(b.lng - a.lng)
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(
        dlng / 2
    ) ** 2
    # Rounding can push h just past 1 for near-antipodal nodes
    h = min(h, 1.0)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_KM * c


def bounding_box(nodes: Sequence) -> Tuple[float, float, float, float]:
    """
    Get the bounding box of a collection of nodes.

    Args:
        nodes: Nodes with ``lat`` and ``lng`` attributes

    Returns:
        Tuple of (south, west, north, east) in decimal degrees

    Raises:
        ValueError: If nodes is empty
    """
    if not nodes:
        raise ValueError("Cannot compute a bounding box for no nodes")

    # shapely works in (x, y) = (lng, lat)
    west, south, east, north = MultiPoint(
        [(node.lng, node.lat) for node in nodes]
    ).bounds
    return (south, west, north, east)


def geodesic_path(a, b, segments: int = 16) -> List[Tuple[float, float]]:
    """
    Interpolate points along the WGS84 geodesic between two nodes.

    Straight lines on a web map drift away from the great circle over long
    distances; drawing the densified path keeps the overlay faithful.
    Longitudes after the start are unwrapped past ±180 where needed, so a
    path crossing the antimeridian takes the short way round instead of
    sweeping across the whole map.

    Args:
        a: Start node
        b: End node
        segments: Number of segments to split the path into

    Returns:
        List of (lat, lng) pairs, both endpoints included
    """
    start = (a.lat, a.lng)
    if segments <= 1 or start == (b.lat, b.lng):
        points = [(b.lng, b.lat)]
    else:
        # npts returns only the intermediate points, as (lon, lat)
        points = list(_GEOD.npts(a.lng, a.lat, b.lng, b.lat, segments - 1))
        points.append((b.lng, b.lat))

    path = [start]
    previous = a.lng
    for lon, lat in points:
        while lon - previous > 180.0:
            lon -= 360.0
        while previous - lon > 180.0:
            lon += 360.0
        path.append((lat, lon))
        previous = lon
    return path
