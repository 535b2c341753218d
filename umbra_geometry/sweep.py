"""
Sweep-Line Intersection Engine
==============================

Bentley-Ottmann style search for the points where segments meet inside
at least one of them.

Design:
- Screen coordinates: y grows downward, the sweep line moves from the
  smallest y to the largest
- Event queue: sorted list of (-y, -x, key) on the quantized EPSILON grid;
  the next event (smallest y, then smallest x) pops from the end
- Events are deduplicated by quantized point key, so a crossing found from
  several neighbour pairs is queued once
- Status: plain list ordered by x at the sweep line; ties below an event
  are broken by inverse slope, then by insertion order

Output:
    Points interior to at least one segment where two or more segments
    meet. Shared endpoints and coincident edges are not reported.

Usage:
    points = find_intersections([square_a, square_b])
"""

import math
from bisect import bisect_left, insort
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .logging import LogEvent, create_logger
from .point import EPSILON, Point, PointLike, on_segment, segments_cross

logger = create_logger("sweep")


def _order(point: Point) -> Tuple[int, int]:
    """Sweep order on the quantized grid: y first, then x."""
    kx, ky = point.key
    return (ky, kx)


class _SweepSegment:
    """Segment normalized so `top` is met first by the sweep."""

    __slots__ = ("index", "top", "bottom", "source", "inverse_slope")

    def __init__(self, index: int, a: Point, b: Point, source: Any = None):
        self.index = index
        self.source = source
        # same ordering as the event queue
        if _order(a) <= _order(b):
            self.top, self.bottom = a, b
        else:
            self.top, self.bottom = b, a
        if self.top.key[1] == self.bottom.key[1]:
            self.inverse_slope = math.inf
        else:
            self.inverse_slope = (self.bottom.x - self.top.x) / (self.bottom.y - self.top.y)

    @property
    def is_horizontal(self) -> bool:
        return math.isinf(self.inverse_slope)

    def x_at(self, y: float, px: float) -> float:
        """x where the segment meets the sweep line; horizontals clamp px."""
        if self.is_horizontal:
            lo, hi = sorted((self.top.x, self.bottom.x))
            return min(max(px, lo), hi)
        return self.top.x + (y - self.top.y) * self.inverse_slope

    def contains_interior(self, p: Point) -> bool:
        return p != self.top and p != self.bottom and on_segment(self.top, self.bottom, p)

    def __repr__(self) -> str:
        return f"_SweepSegment({self.index}, {self.top} -> {self.bottom})"


class _Event:
    __slots__ = ("point", "upper")

    def __init__(self, point: Point):
        self.point = point
        self.upper: List[_SweepSegment] = []


class SweepLine:
    """
    Intersection search over a fixed set of segments.

    Usage:
        sweep = SweepLine([(Point(0, 0), Point(2, 2)), (Point(0, 2), Point(2, 0))])
        sweep.run()   # {Point(1.0000, 1.0000)}
    """

    def __init__(self, segments: Iterable[Tuple[PointLike, PointLike]], sources: Optional[Sequence[Any]] = None):
        self.segments: List[_SweepSegment] = []
        for i, (a, b) in enumerate(segments):
            a, b = Point.of(a), Point.of(b)
            if a == b:
                continue
            source = sources[i] if sources is not None else None
            self.segments.append(_SweepSegment(len(self.segments), a, b, source))

        self._queue: List[Tuple[int, int, Tuple[int, int]]] = []
        self._events: Dict[Tuple[int, int], _Event] = {}
        self._processed: Set[Tuple[int, int]] = set()
        self._status: List[_SweepSegment] = []
        self.intersections: Set[Point] = set()
        self.crossing_sources: Dict[Point, List[Any]] = {}

    # ---- Event queue ----

    def _push(self, point: Point) -> _Event:
        existing = self._events.get(point.key)
        if existing is not None:
            return existing
        event = _Event(point)
        self._events[point.key] = event
        ky, kx = _order(point)
        insort(self._queue, (-ky, -kx, point.key))
        return event

    # ---- Sweep ----

    def run(self) -> Set[Point]:
        for segment in self.segments:
            self._push(segment.top).upper.append(segment)

        while self._queue:
            _, _, key = self._queue.pop()
            if key in self._processed:
                continue
            self._processed.add(key)
            self._handle(self._events[key])

        logger.debug(
            event=LogEvent.SWEEP_COMPLETED,
            message="Sweep finished",
            metadata={'segments': len(self.segments), 'intersections': len(self.intersections)}
        )
        return self.intersections

    def _handle(self, event: _Event) -> None:
        p = event.point
        upper = event.upper
        lower: List[_SweepSegment] = []
        interior: List[_SweepSegment] = []
        for segment in self._status:
            if segment.bottom == p:
                lower.append(segment)
            elif segment.contains_interior(p):
                interior.append(segment)

        if interior and len(upper) + len(lower) + len(interior) > 1:
            self.intersections.add(p)
            involved = upper + lower + interior
            self.crossing_sources[p] = [s.source for s in involved]

        gone = {s.index for s in lower + interior}
        self._status = [s for s in self._status if s.index not in gone]

        # order just below p
        new = sorted(upper + interior, key=lambda s: (s.inverse_slope, s.index))
        xs = [s.x_at(p.y, p.x) for s in self._status]
        pos = bisect_left(xs, p.x - EPSILON)
        self._status[pos:pos] = new

        for segment in upper:
            self._push(segment.bottom)

        if not new:
            if 0 < pos < len(self._status):
                self._check(self._status[pos - 1], self._status[pos], p)
            return
        if pos > 0:
            self._check(self._status[pos - 1], new[0], p)
        after = pos + len(new)
        if after < len(self._status):
            self._check(new[-1], self._status[after], p)

    def _check(self, s1: _SweepSegment, s2: _SweepSegment, p: Point) -> None:
        crossing = segments_cross(s1.top, s1.bottom, s2.top, s2.bottom)
        if crossing is None:
            return
        # above the sweep line, or on it left of p
        if _order(crossing) <= _order(p):
            return
        if crossing.key in self._events:
            return
        self._push(crossing)


def _ring_segments(polygon) -> List[Tuple[Point, Point]]:
    ring = polygon.ring
    return [(ring[i], ring[(i + 1) % len(ring)]) for i in range(len(ring))]


def find_intersections(polygons: Iterable) -> Set[Point]:
    """Interior intersection points among the edges of the given polygons."""
    segments: List[Tuple[Point, Point]] = []
    for polygon in polygons:
        segments.extend(_ring_segments(polygon))
    return SweepLine(segments).run()


def validate_walls(walls: Iterable) -> Dict[Point, List[Any]]:
    """
    Report where walls cross or T into each other.

    Args:
        walls: Objects with `a` and `b` endpoints, or (a, b) pairs

    Returns:
        Map of crossing point -> walls meeting there (empty when clean)
    """
    walls = list(walls)
    pairs = [(w.a, w.b) if hasattr(w, "a") else tuple(w) for w in walls]
    sweep = SweepLine(pairs, sources=walls)
    sweep.run()
    return dict(sweep.crossing_sources)
