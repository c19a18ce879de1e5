#!/usr/bin/env python3
"""
Spanmap - Minimum spanning tree overlays for geographic locations.

This package connects a set of locations with the shortest possible network
of great-circle links and draws the result on an interactive map.
"""
import importlib.metadata

__version__ = importlib.metadata.version("spanmap")

# Import main classes for public API
from .node import Node
from .spanning_tree import Edge, DisjointSet, build_minimum_spanning_tree
from .geometry import haversine_distance

__all__ = [
    "Node",
    "Edge",
    "DisjointSet",
    "build_minimum_spanning_tree",
    "haversine_distance",
]
