"""
Vertex/Segment Graph
====================

Bounded Context: Linked topology of polygon corners and edges.

Design:
- Arena: vertices and segments live in lists and reference each other by
  small integer handles (no object cycles between nodes)
- Coordinate-derived identity: a coordinate key -> vertex handle index is
  consulted at insertion, so equal points map onto one vertex
- Each vertex holds exactly one `incoming` and one `outgoing` slot;
  incoming.b == vertex == outgoing.a
- Segments split recursively; the parent keeps its A/B identity and
  records its children, endpoint incidences move to the halves

Not thread-safe: callers serialize access to a graph.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import GeometryError, TopologyError
from .point import EPSILON, Point, PointLike, on_segment


class SegmentKind(str, Enum):
    """What created the segment."""

    EDGE = "edge"
    SHADOW = "shadow"


class VisionDistance(str, Enum):
    NEAR = "near"
    FAR = "far"


class VisionType(str, Enum):
    """How a segment interacts with visibility computation."""

    BLOCK = "block"
    SHADOW = "shadow"
    IGNORE = "ignore"


DEFAULT_COLOR = "#000000"


@dataclass(eq=False)
class Vertex:
    """
    Polygon corner.

    Attributes:
        handle: Index in the owning graph's arena
        point: Coordinates
        origin: Object that created the vertex (polygon or wall); not owned
        incoming: Handle of the segment ending here
        outgoing: Handle of the segment starting here
    """

    handle: int
    point: Point
    origin: Any = field(default=None, repr=False)
    incoming: Optional[int] = None
    outgoing: Optional[int] = None

    @property
    def id(self) -> Tuple[int, int]:
        return self.point.key

    @property
    def x(self) -> float:
        return self.point.x

    @property
    def y(self) -> float:
        return self.point.y

    @property
    def is_complete(self) -> bool:
        return self.incoming is not None and self.outgoing is not None

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vertex):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(eq=False)
class Segment:
    """
    Directed edge A -> B between two vertices of the same graph.

    Attributes:
        handle: Index in the owning graph's arena
        a: Start vertex handle
        b: End vertex handle
        id: (A key, B key), fixed at creation
        properties: color, vision_distance, vision_type, kind, ...
        children: Handles of the two halves once split
    """

    handle: int
    a: int
    b: int
    id: Tuple[Tuple[int, int], Tuple[int, int]]
    properties: Dict[str, Any] = field(default_factory=dict)
    children: Tuple[int, ...] = ()

    @property
    def is_split(self) -> bool:
        return len(self.children) > 0

    def merge_property(self, **properties: Any) -> None:
        self.properties.update(properties)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class SegmentGraph:
    """
    Arena of vertices and segments.

    Usage:
        graph = SegmentGraph()
        v0 = graph.add_vertex(Point(0, 0))
        v1 = graph.connect_point(v0, 10, 0)
        v2 = graph.connect_point(v1, 10, 10)
        closing = graph.add_segment(v2, v0)
        graph.include_segment(v2, closing)
        graph.include_segment(v0, closing)
    """

    def __init__(self):
        self._vertices: List[Vertex] = []
        self._segments: List[Segment] = []
        self._index: Dict[Tuple[int, int], int] = {}

    def __repr__(self) -> str:
        return f"SegmentGraph(vertices={len(self._vertices)}, segments={len(self._segments)})"

    # ---- Arena access ----

    def vertex(self, handle: int) -> Vertex:
        return self._vertices[handle]

    def segment(self, handle: int) -> Segment:
        return self._segments[handle]

    def find_vertex(self, point: PointLike) -> Optional[Vertex]:
        handle = self._index.get(Point.of(point).key)
        return None if handle is None else self._vertices[handle]

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    # ---- Construction ----

    def add_vertex(self, point: PointLike, origin: Any = None) -> Vertex:
        """
        Return the vertex at `point`, creating it if the coordinate key is new.
        """
        point = Point.of(point)
        existing = self._index.get(point.key)
        if existing is not None:
            return self._vertices[existing]
        vertex = Vertex(handle=len(self._vertices), point=point, origin=origin)
        self._vertices.append(vertex)
        self._index[point.key] = vertex.handle
        return vertex

    def add_segment(self, a: Vertex, b: Vertex, **properties: Any) -> Segment:
        """
        Create an unattached segment a -> b.

        Raises:
            GeometryError: If a and b coincide (zero-length segment)
        """
        if a.point == b.point:
            raise GeometryError(f"Zero-length segment at {a.point}")
        segment = Segment(
            handle=len(self._segments),
            a=a.handle,
            b=b.handle,
            id=(a.id, b.id),
            properties=dict(properties),
        )
        self._segments.append(segment)
        return segment

    def connect_point(
        self,
        vertex: Vertex,
        x: float,
        y: float,
        kind: SegmentKind = SegmentKind.EDGE,
    ) -> Vertex:
        """
        Grow the chain: new vertex at (x, y) linked by vertex -> new.

        Returns:
            The new vertex

        Raises:
            TopologyError: If `vertex` already has an outgoing segment
        """
        if vertex.outgoing is not None:
            raise TopologyError(f"Vertex {vertex.point} already has an outgoing segment")
        new_vertex = self.add_vertex(Point(x, y), origin=vertex.origin)
        segment = self.add_segment(vertex, new_vertex, kind=kind)
        self.include_segment(vertex, segment)
        self.include_segment(new_vertex, segment)
        return new_vertex

    def include_segment(self, vertex: Vertex, segment: Segment) -> None:
        """
        Attach `segment` to `vertex` as incoming (vertex is B) or outgoing
        (vertex is A).

        Raises:
            TopologyError: Slot already taken, or segment not incident
        """
        if segment.b == vertex.handle:
            if vertex.incoming is not None and vertex.incoming != segment.handle:
                raise TopologyError(f"Vertex {vertex.point} already has an incoming segment")
            vertex.incoming = segment.handle
        elif segment.a == vertex.handle:
            if vertex.outgoing is not None and vertex.outgoing != segment.handle:
                raise TopologyError(f"Vertex {vertex.point} already has an outgoing segment")
            vertex.outgoing = segment.handle
        else:
            raise TopologyError(f"Segment {segment.id} is not incident to vertex {vertex.point}")

    def detach(self, vertex: Vertex) -> None:
        """Clear both incidence slots of `vertex`."""
        vertex.incoming = None
        vertex.outgoing = None

    # ---- Geometry ----

    def endpoints(self, segment: Segment) -> Tuple[Point, Point]:
        return self._vertices[segment.a].point, self._vertices[segment.b].point

    def length(self, segment: Segment) -> float:
        a, b = self.endpoints(segment)
        return a.distance(b)

    def point_at(self, segment: Segment, t: float) -> Point:
        a, b = self.endpoints(segment)
        return Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)

    def contains(self, segment: Segment, point: PointLike) -> bool:
        a, b = self.endpoints(segment)
        return on_segment(a, b, Point.of(point), EPSILON)

    # ---- Splitting ----

    def split(self, segment: Segment, point: PointLike) -> Tuple[Segment, Segment]:
        """
        Split `segment` at `point` into two halves sharing a new vertex.

        Properties propagate to both halves. A segment that was already
        split delegates to the leaf that contains the point.

        Raises:
            GeometryError: Point not on the segment, or on an existing vertex
            TopologyError: The coordinate is already a linked vertex elsewhere
        """
        point = Point.of(point)

        if segment.is_split:
            for leaf in self.leaves(segment):
                a, b = self.endpoints(leaf)
                if point != a and point != b and self.contains(leaf, point):
                    return self.split(leaf, point)
            raise GeometryError(f"Point {point} is not strictly inside segment {segment.id}")

        a, b = self.endpoints(segment)
        if not on_segment(a, b, point):
            raise GeometryError(f"Point {point} does not lie on segment {a} -> {b}")
        if point == a or point == b:
            raise GeometryError(f"Splitting {a} -> {b} at {point} would create a zero-length segment")

        start = self._vertices[segment.a]
        end = self._vertices[segment.b]
        middle = self.add_vertex(point, origin=start.origin)
        if middle.incoming is not None or middle.outgoing is not None:
            raise TopologyError(f"Vertex {point} is already linked in this graph")

        first = self.add_segment(start, middle, **segment.properties)
        second = self.add_segment(middle, end, **segment.properties)

        if start.outgoing == segment.handle:
            start.outgoing = first.handle
        if end.incoming == segment.handle:
            end.incoming = second.handle
        middle.incoming = first.handle
        middle.outgoing = second.handle

        segment.children = (first.handle, second.handle)
        return first, second

    def leaves(self, segment: Segment) -> List[Segment]:
        """Current split sub-segments in A -> B order."""
        if not segment.is_split:
            return [segment]
        result: List[Segment] = []
        for child in segment.children:
            result.extend(self.leaves(self._segments[child]))
        return result

    # ---- Traversal ----

    def walk_ring(self, start: Vertex) -> Iterator[Vertex]:
        """
        Follow outgoing segments from `start` until the ring closes.

        Raises:
            TopologyError: Chain is open or never returns to `start`
        """
        current = start
        for _ in range(len(self._vertices)):
            yield current
            if current.outgoing is None:
                raise TopologyError(f"Vertex {current.point} has no outgoing segment")
            current = self._vertices[self._segments[current.outgoing].b]
            if current.handle == start.handle:
                return
        raise TopologyError(f"Ring starting at {start.point} does not close")
