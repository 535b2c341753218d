"""
Linked Polygon
==============

Closed polygon represented as a ring of mutually linked Vertex/Segment
nodes instead of a flat point array.

Design:
- Points are validated once (closed ring, >= 3 distinct corners)
- `vertices` and `segments` are lazily built, cached views over the graph
- Invalidating vertices rebuilds the graph and forces segments to rebuild
- Splitting refreshes both caches by walking the ring, so a split segment
  is replaced by its halves in the segment map
- Boolean operations live in `umbra_geometry.boolean`

Usage:
    square = build_polygon([(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)])
    len(square.vertices)   # 4
    overlap = square.intersection(other)   # set of LinkedPolygon
"""

from typing import Any, Dict, List, Optional, Set, Tuple

import numpy as np

from .errors import GeometryError, TopologyError
from .graph import DEFAULT_COLOR, Segment, SegmentGraph, SegmentKind, Vertex, VisionDistance, VisionType
from .logging import LogEvent, create_logger
from .point import Point, point_in_ring, signed_area

logger = create_logger("polygon")


def _parse_points(points: Any) -> Tuple[Point, ...]:
    """
    Accept Points, (x, y) pairs, an Nx2 array or a flat [x0, y0, x1, y1, ...]
    list.
    """
    if isinstance(points, np.ndarray):
        if points.ndim != 2 or points.shape[1] != 2:
            raise GeometryError(f"points array must be Nx2, got shape {points.shape}")
        return tuple(Point(x, y) for x, y in points.tolist())

    items = list(points)
    if items and all(isinstance(v, (int, float)) for v in items):
        if len(items) % 2 != 0:
            raise GeometryError(f"Flat coordinate list must have even length, got {len(items)}")
        return tuple(Point(items[i], items[i + 1]) for i in range(0, len(items), 2))

    try:
        return tuple(Point.of(p) for p in items)
    except (TypeError, ValueError) as e:
        raise GeometryError(f"Invalid polygon points: {e}")


class LinkedPolygon:
    """
    Polygon built from a closed, ordered point ring.

    Attributes:
        points: Closed ring (first point == last point)
        graph: Arena holding the linked vertices and segments
        segment_kind: Kind assigned to every constructed segment
    """

    def __init__(
        self,
        points: Any,
        segment_kind: SegmentKind = SegmentKind.EDGE,
        polygon_id: Optional[str] = None,
    ):
        self.points = _parse_points(points)
        self.segment_kind = segment_kind
        self.polygon_id = polygon_id
        self._validate()

        self.graph = SegmentGraph()
        self._first: Optional[int] = None
        self._vertices: Optional[Dict[Tuple[int, int], Vertex]] = None
        self._segments: Optional[Dict[Any, Segment]] = None

    def _validate(self) -> None:
        if len(self.points) < 4:
            raise GeometryError(
                f"Polygon needs at least 3 points plus the closing point, got {len(self.points)}"
            )
        if self.points[0] != self.points[-1]:
            raise GeometryError(
                f"Polygon expects a closed set of points: {self.points[0]} != {self.points[-1]}"
            )
        corners = self.points[:-1]
        if len({p.key for p in corners}) != len(corners):
            raise GeometryError("Polygon ring repeats a vertex")
        if len(corners) < 3:
            raise GeometryError(f"Polygon needs at least 3 distinct points, got {len(corners)}")

    def __repr__(self) -> str:
        label = f"{self.polygon_id}, " if self.polygon_id else ""
        return f"LinkedPolygon({label}{len(self.points) - 1} points)"

    # ---- Cached views ----

    @property
    def vertices(self) -> Dict[Tuple[int, int], Vertex]:
        """
        Map of vertex id -> Vertex in ring order.

        Cached. Rebuilding discards the segments cache.
        """
        if not self._vertices:
            self._segments = None
            self._vertices = self._construct_vertices()
        return self._vertices

    @property
    def segments(self) -> Dict[Any, Segment]:
        """
        Map of segment id -> Segment, one outgoing segment per vertex.

        The closing segment comes last, as the outgoing edge of the last
        constructed vertex.
        """
        if not self._segments:
            self._segments = self._construct_segments()
        return self._segments

    def invalidate_vertices(self) -> None:
        """Drop both caches; the next access rebuilds from `points`."""
        self._vertices = None
        self._segments = None

    def _construct_vertices(self) -> Dict[Tuple[int, int], Vertex]:
        self.graph = SegmentGraph()
        first = self.graph.add_vertex(self.points[0], origin=self)
        self._first = first.handle
        vertices = {first.id: first}

        prior = first
        for p in self.points[1:-1]:
            prior = self.graph.connect_point(prior, p.x, p.y, kind=self.segment_kind)
            vertices[prior.id] = prior

        # link to beginning
        closing = self.graph.add_segment(prior, first, kind=self.segment_kind)
        self.graph.include_segment(prior, closing)

        # the closing segment becomes the first vertex's incoming edge, so
        # every vertex reads prior --> vertex --> next
        first_outgoing = self.graph.segment(first.outgoing)
        self.graph.detach(first)
        self.graph.include_segment(first, closing)
        self.graph.include_segment(first, first_outgoing)

        logger.debug(
            event=LogEvent.POLYGON_BUILT,
            message="Constructed polygon vertices",
            metadata={'polygon_id': self.polygon_id, 'vertices': len(vertices)}
        )
        return vertices

    def _construct_segments(self) -> Dict[Any, Segment]:
        segments: Dict[Any, Segment] = {}
        for vertex in self.vertices.values():
            if vertex.outgoing is None:
                raise TopologyError(f"Vertex {vertex.point} has no outgoing segment")
            segment = self.graph.segment(vertex.outgoing)
            # "far" until near/far classification runs, "ignore" for vision
            segment.properties.setdefault("vision_distance", VisionDistance.FAR.value)
            segment.properties.setdefault("vision_type", VisionType.IGNORE.value)
            segments[segment.id] = segment
        return segments

    def _refresh_from_ring(self) -> None:
        start = self.graph.vertex(self._first)
        self._vertices = {v.id: v for v in self.graph.walk_ring(start)}
        self._segments = self._construct_segments()

    # ---- Mutation ----

    def split_segment(self, segment: Segment, point: Any) -> Tuple[Segment, Segment]:
        """
        Split one of this polygon's segments at `point`.

        Raises:
            TopologyError: Segment belongs to another graph
            GeometryError: Point not strictly inside the segment
        """
        self.vertices  # make sure the graph exists
        if segment.handle >= self.graph.segment_count or self.graph.segment(segment.handle) is not segment:
            raise TopologyError(f"Segment {segment.id} does not belong to this polygon")
        halves = self.graph.split(segment, point)
        self._refresh_from_ring()
        logger.debug(
            event=LogEvent.SEGMENT_SPLIT,
            message="Split polygon segment",
            metadata={'polygon_id': self.polygon_id, 'point': Point.of(point).to_tuple()}
        )
        return halves

    def set_segments_color(self, color: str = DEFAULT_COLOR) -> None:
        for segment in self.segments.values():
            segment.merge_property(color=color)

    # ---- Queries ----

    @property
    def ring(self) -> List[Point]:
        """Open ring of current vertex positions, split vertices included."""
        return [v.point for v in self.vertices.values()]

    @property
    def signed_area(self) -> float:
        return signed_area(self.points[:-1])

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    def contains_point(self, point: Any) -> bool:
        return point_in_ring(Point.of(point), self.points[:-1])

    def segment_points(self, segment: Segment) -> Tuple[Point, Point]:
        return self.graph.endpoints(segment)

    def split_leaves(self) -> List[Segment]:
        """Every segment's current split sub-segments, in ring order."""
        leaves: List[Segment] = []
        for segment in self.segments.values():
            leaves.extend(self.graph.leaves(segment))
        return leaves

    def to_dict(self) -> Dict[str, Any]:
        return {
            "polygon_id": self.polygon_id,
            "points": [[p.x, p.y] for p in self.points],
        }

    # ---- Drawing ----

    def draw(self, frame: np.ndarray, default_color: str = DEFAULT_COLOR, thickness: int = 1) -> np.ndarray:
        """
        Draw each segment's split leaves in its own color, or `default_color`.
        """
        from .rendering import TopologyVisualizer

        return TopologyVisualizer(thickness=thickness).draw_segments(frame, self, default_color)

    def draw_polygon(self, frame: np.ndarray, color: str = DEFAULT_COLOR, thickness: int = 1) -> np.ndarray:
        """Draw the raw point ring as a single outline."""
        from .rendering import TopologyVisualizer

        return TopologyVisualizer(thickness=thickness).draw_outline(frame, self.points, color)

    # ---- Set operations ----

    def intersection(self, other: "LinkedPolygon") -> Set["LinkedPolygon"]:
        """Polygons covering the area inside both polygons."""
        from .boolean import SetOperation, set_operation

        return set_operation(self, other, SetOperation.INTERSECTION)

    def union(self, other: "LinkedPolygon") -> Set["LinkedPolygon"]:
        """Polygons covering the area inside either polygon."""
        from .boolean import SetOperation, set_operation

        return set_operation(self, other, SetOperation.UNION)

    def xor(self, other: "LinkedPolygon") -> Set["LinkedPolygon"]:
        """Polygons covering the area inside exactly one polygon."""
        from .boolean import SetOperation, set_operation

        return set_operation(self, other, SetOperation.XOR)


def build_polygon(points: Any, segment_kind: SegmentKind = SegmentKind.EDGE) -> LinkedPolygon:
    """
    Build a LinkedPolygon and its caches eagerly.

    Raises:
        GeometryError: Ring not closed, fewer than 3 distinct points,
            zero-length edge
    """
    polygon = LinkedPolygon(points, segment_kind=segment_kind)
    polygon.segments
    return polygon
