"""
Umbra Geometry
==============

Bounded Context: Linked polygon topology for wall and shadow geometry.

Design Philosophy:
- Separation of Concerns: Points, Graph, Polygon, Sweep, Boolean separated
- Arena topology: vertices and segments reference each other by handle
- Tolerant identity: equal points (within EPSILON) are one vertex

Architecture:

    umbra_geometry/
    ├── point.py           # Point, orientation and projection helpers
    ├── graph.py           # Vertex, Segment, SegmentGraph (arena)
    ├── polygon.py         # LinkedPolygon, build_polygon
    ├── boolean.py         # intersection / union / xor
    ├── sweep.py           # Sweep-line intersection engine
    ├── errors.py          # GeometryError, TopologyError
    ├── logging/           # Structured JSON logging
    └── rendering/         # TopologyVisualizer (debug drawing)

Usage:

    from umbra_geometry import build_polygon, find_intersections

    a = build_polygon([(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)])
    b = build_polygon([(1, 1), (3, 1), (3, 3), (1, 3), (1, 1)])

    find_intersections([a, b])          # {Point(2, 1), Point(1, 2)}
    overlap = a.intersection(b)         # {LinkedPolygon(4 points)}
"""

# Primitives
from umbra_geometry.point import EPSILON, Point, orient2d, perpendicular_point
from umbra_geometry.errors import GeometryError, TopologyError

# Topology
from umbra_geometry.graph import (
    DEFAULT_COLOR,
    Segment,
    SegmentGraph,
    SegmentKind,
    Vertex,
    VisionDistance,
    VisionType,
)
from umbra_geometry.polygon import LinkedPolygon, build_polygon

# Algorithms
from umbra_geometry.boolean import SetOperation, edgify, set_operation
from umbra_geometry.sweep import SweepLine, find_intersections, validate_walls

__all__ = [
    # Primitives
    "EPSILON",
    "Point",
    "orient2d",
    "perpendicular_point",
    "GeometryError",
    "TopologyError",
    # Topology
    "DEFAULT_COLOR",
    "Segment",
    "SegmentGraph",
    "SegmentKind",
    "Vertex",
    "VisionDistance",
    "VisionType",
    "LinkedPolygon",
    "build_polygon",
    # Algorithms
    "SetOperation",
    "edgify",
    "set_operation",
    "SweepLine",
    "find_intersections",
    "validate_walls",
]

__version__ = "0.1.0"
