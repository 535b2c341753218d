"""
Point Primitives
================

Immutable 2D points and the orientation/projection helpers shared by the
linked topology, the sweep line and the shadow evaluator.

Design:
- Frozen dataclass (value object, thread-safe)
- Equality and hash both come from coordinates quantized on the EPSILON
  grid, so equal points collide in maps and sets
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

import numpy as np

EPSILON = 1e-6

PointLike = Union["Point", Tuple[float, float]]


def quantize(value: float, tolerance: float = EPSILON) -> int:
    """Snap a coordinate onto the tolerance grid."""
    return int(round(value / tolerance))


@dataclass(frozen=True, eq=False)
class Point:
    """
    Immutable (x, y) pair in plane coordinates.

    Two points are equal when their `key`s (coordinates snapped to the
    EPSILON grid) match; the hash is taken from the same key.

    Attributes:
        x: Horizontal coordinate
        y: Vertical coordinate (grows downward in screen space)
    """

    x: float
    y: float

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    @classmethod
    def of(cls, value: PointLike) -> "Point":
        """Coerce a Point or an (x, y) pair."""
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(x, y)

    @property
    def key(self) -> Tuple[int, int]:
        """Coordinate-derived identity, quantized by EPSILON."""
        return (quantize(self.x), quantize(self.y))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Point({self.x:.4f}, {self.y:.4f})"

    def __iter__(self):
        yield self.x
        yield self.y

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Point":
        return Point(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def dot(self, other: "Point") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        return self.x * other.y - self.y * other.x

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)

    def to_dict(self):
        return {"x": self.x, "y": self.y}


def orient2d(a: Point, b: Point, c: Point) -> float:
    """
    Twice the signed area of triangle abc.

    Positive when c lies to one side of ab, negative on the other, zero
    when collinear. No tolerance is applied.
    """
    return (a.y - c.y) * (b.x - c.x) - (a.x - c.x) * (b.y - c.y)


def side(a: Point, b: Point, c: Point, tolerance: float = EPSILON) -> int:
    """
    Sign of orient2d with a distance tolerance.

    Returns 0 when c is within `tolerance` of the infinite line ab.
    """
    length = a.distance(b)
    if length <= tolerance:
        return 0
    value = orient2d(a, b, c) / length
    if abs(value) <= tolerance:
        return 0
    return 1 if value > 0 else -1


def perpendicular_point(a: Point, b: Point, c: Point) -> Optional[Point]:
    """
    Foot of the perpendicular from c onto the infinite line ab.

    Returns None when a and b coincide (line undefined).
    """
    dx = b.x - a.x
    dy = b.y - a.y
    dab = dx * dx + dy * dy
    if dab == 0:
        return None
    u = ((c.x - a.x) * dx + (c.y - a.y) * dy) / dab
    return Point(a.x + u * dx, a.y + u * dy)


def line_intersection(a: Point, b: Point, c: Point, d: Point) -> Optional[Point]:
    """
    Intersection of infinite lines ab and cd, None if parallel.
    """
    denom = (b.x - a.x) * (d.y - c.y) - (b.y - a.y) * (d.x - c.x)
    if abs(denom) < EPSILON * EPSILON:
        return None
    t = ((c.x - a.x) * (d.y - c.y) - (c.y - a.y) * (d.x - c.x)) / denom
    return Point(a.x + t * (b.x - a.x), a.y + t * (b.y - a.y))


def segments_cross(a: Point, b: Point, c: Point, d: Point) -> Optional[Point]:
    """
    Proper crossing of segments ab and cd.

    Parallel, collinear and touching configurations (an endpoint lying on the
    other segment) are not crossings and return None.
    """
    o1 = side(a, b, c)
    o2 = side(a, b, d)
    o3 = side(c, d, a)
    o4 = side(c, d, b)
    if o1 == 0 or o2 == 0 or o3 == 0 or o4 == 0:
        return None
    if o1 == o2 or o3 == o4:
        return None
    return line_intersection(a, b, c, d)


def on_segment(a: Point, b: Point, p: Point, tolerance: float = EPSILON) -> bool:
    """True if p lies on the closed segment ab, within tolerance."""
    if side(a, b, p, tolerance) != 0:
        return False
    return (
        min(a.x, b.x) - tolerance <= p.x <= max(a.x, b.x) + tolerance
        and min(a.y, b.y) - tolerance <= p.y <= max(a.y, b.y) + tolerance
    )


def signed_area(points: Iterable[Point]) -> float:
    """Shoelace area of an open ring (no repeated closing point)."""
    pts = list(points)
    total = 0.0
    for i, p in enumerate(pts):
        q = pts[(i + 1) % len(pts)]
        total += p.x * q.y - q.x * p.y
    return total * 0.5


def point_in_ring(p: Point, ring: Iterable[Point]) -> bool:
    """
    Even-odd ray casting against an open ring.

    Boundary points get no special treatment; callers sample off the
    boundary.
    """
    pts = list(ring)
    inside = False
    n = len(pts)
    for i in range(n):
        a = pts[i]
        b = pts[(i + 1) % n]
        if (a.y > p.y) != (b.y > p.y):
            x_cross = (b.x - a.x) * (p.y - a.y) / (b.y - a.y) + a.x
            if x_cross > p.x:
                inside = not inside
    return inside
