"""
Polygon Set Operations
======================

Bounded Context: Intersection, union and xor of linked polygons.

Pipeline:
    1. edgify   - split every participating polygon at its crossings with
                  the others, so no two edges cross without sharing a vertex
    2. select   - keep each refined edge whose two sides disagree on the
                  operation predicate, directed so the kept region is on
                  its left
    3. walk     - "multiple worlds": from each unused edge, follow kept
                  edges through a prioritized work-list; a vertex with
                  several continuations spawns one world per continuation
    4. filter   - counter-clockwise rings whose interior satisfies the
                  predicate are outer boundaries; clockwise rings with the
                  predicate holding outside them are their holes
    5. holes    - a region with holes is cut along vertical lines through
                  each hole into simple polygons

Usage:
    result = set_operation(square_a, square_b, SetOperation.UNION)
    sum(p.area for p in result)
"""

import heapq
import math
from enum import Enum
from typing import Callable, Dict, List, Sequence, Set, Tuple

from .logging import LogEvent, create_logger
from .point import EPSILON, Point, PointLike, on_segment, point_in_ring, segments_cross, signed_area
from .polygon import LinkedPolygon

logger = create_logger("boolean")

# Worlds explored per start edge before the walk gives up
MAX_WORLDS = 10000

Key = Tuple[int, int]
Edge = Tuple[Key, Key]
Region = Tuple[List[Point], List[List[Point]]]


class SetOperation(str, Enum):
    INTERSECTION = "intersection"
    UNION = "union"
    XOR = "xor"

    def holds(self, in_a: bool, in_b: bool) -> bool:
        if self is SetOperation.INTERSECTION:
            return in_a and in_b
        if self is SetOperation.UNION:
            return in_a or in_b
        return in_a != in_b


# ---- 1. edgify ----

def edgify(polygons: Sequence[LinkedPolygon]) -> int:
    """
    Split the polygons' segments at every point where a segment of another
    polygon crosses them or ends on them.

    Mutates the polygons' graphs. Returns the number of splits performed.
    """
    cuts: Dict[Tuple[int, int], List[Point]] = {}
    originals = [list(polygon.segments.values()) for polygon in polygons]

    for i in range(len(polygons)):
        for j in range(i + 1, len(polygons)):
            for s in originals[i]:
                a, b = polygons[i].segment_points(s)
                for t in originals[j]:
                    c, d = polygons[j].segment_points(t)
                    crossing = segments_cross(a, b, c, d)
                    if crossing is not None:
                        cuts.setdefault((i, s.handle), []).append(crossing)
                        cuts.setdefault((j, t.handle), []).append(crossing)
                        continue
                    # T-junctions and collinear overlaps
                    for p in (c, d):
                        if p != a and p != b and on_segment(a, b, p):
                            cuts.setdefault((i, s.handle), []).append(p)
                    for p in (a, b):
                        if p != c and p != d and on_segment(c, d, p):
                            cuts.setdefault((j, t.handle), []).append(p)

    splits = 0
    for (index, handle), points in cuts.items():
        polygon = polygons[index]
        segment = polygon.graph.segment(handle)
        start, _ = polygon.segment_points(segment)
        for p in sorted(points, key=start.distance):
            if polygon.graph.find_vertex(p) is not None:
                continue
            polygon.split_segment(segment, p)
            splits += 1

    logger.debug(
        event=LogEvent.EDGIFY_COMPLETED,
        message="Split polygons at mutual intersections",
        metadata={'polygons': len(polygons), 'splits': splits}
    )
    return splits


# ---- 2. select ----

def _offset_samples(a: Point, b: Point) -> Tuple[Point, Point]:
    """Points just left and just right of the midpoint of a -> b."""
    dx = b.x - a.x
    dy = b.y - a.y
    length = math.hypot(dx, dy)
    delta = max(length * 1e-4, EPSILON)
    nx = -dy / length * delta
    ny = dx / length * delta
    mx = (a.x + b.x) * 0.5
    my = (a.y + b.y) * 0.5
    return Point(mx + nx, my + ny), Point(mx - nx, my - ny)


def select_edges(
    polygons: Sequence[LinkedPolygon],
    inside: Callable[[Point], bool],
) -> Tuple[Dict[Key, List[Key]], Dict[Key, Point]]:
    """
    Directed adjacency of the edges bounding the region where `inside` holds.

    Returns:
        (outgoing map vertex key -> target keys, vertex key -> Point)
    """
    outgoing: Dict[Key, List[Key]] = {}
    positions: Dict[Key, Point] = {}
    seen: Set[frozenset] = set()

    for polygon in polygons:
        ring = polygon.ring
        for i, a in enumerate(ring):
            b = ring[(i + 1) % len(ring)]
            undirected = frozenset((a.key, b.key))
            if undirected in seen:
                continue
            seen.add(undirected)

            left, right = _offset_samples(a, b)
            left_in = inside(left)
            if left_in == inside(right):
                continue
            start, end = (a, b) if left_in else (b, a)
            positions.setdefault(start.key, start)
            positions.setdefault(end.key, end)
            outgoing.setdefault(start.key, []).append(end.key)

    return outgoing, positions


# ---- 3. walk ----

def _turn(prev: Point, current: Point, candidate: Point) -> float:
    """Signed turn angle; larger is further left."""
    din = current - prev
    dout = candidate - current
    return math.atan2(din.cross(dout), din.dot(dout))


def walk_rings(outgoing: Dict[Key, List[Key]], positions: Dict[Key, Point]) -> List[List[Point]]:
    """
    Trace closed rings through the directed edge set.

    Each work item carries (penalty, length, order, path). A vertex offering
    several continuations spawns one item per continuation, ranked by turn:
    the leftmost turn adds no penalty, the next adds 1, and so on. An item
    succeeds when it reaches its start vertex and is abandoned when it
    reaches any other vertex it already visited.
    """
    used: Set[Edge] = set()
    rings: List[List[Point]] = []
    counter = 0

    for origin in sorted(outgoing):
        for target in outgoing[origin]:
            if (origin, target) in used:
                continue

            queue = [(0, 1, counter, [origin, target])]
            counter += 1
            worlds = 0
            found = None

            while queue and worlds < MAX_WORLDS:
                penalty, length, _, path = heapq.heappop(queue)
                worlds += 1
                current = path[-1]
                if current == path[0]:
                    found = path[:-1]
                    break

                prev = positions[path[-2]]
                here = positions[current]
                candidates = [
                    k for k in outgoing.get(current, [])
                    if (current, k) not in used
                ]
                candidates.sort(key=lambda k: _turn(prev, here, positions[k]), reverse=True)

                visited = set(path)
                for rank, k in enumerate(candidates):
                    if k != path[0] and k in visited:
                        logger.debug(
                            event=LogEvent.WALK_ABANDONED,
                            message="Walk revisited a vertex",
                            metadata={'vertex': positions[k].to_tuple(), 'length': length}
                        )
                        continue
                    heapq.heappush(queue, (penalty + rank, length + 1, counter, path + [k]))
                    counter += 1

            used.add((origin, target))
            if found is None:
                continue
            for i, key in enumerate(found):
                used.add((key, found[(i + 1) % len(found)]))
            rings.append([positions[k] for k in found])

    return rings


# ---- 4. filter ----

def filter_rings(rings: List[List[Point]], inside: Callable[[Point], bool]) -> List[Region]:
    """
    Group walked rings into regions.

    Counter-clockwise rings with `inside` holding just within them are outer
    boundaries. Clockwise rings with `inside` holding just outside them are
    holes, attached to the smallest outer ring containing them.

    Returns:
        List of (outer ring, hole rings)
    """
    outers: List[List[Point]] = []
    holes: List[List[Point]] = []
    for ring in rings:
        if len(ring) < 3:
            continue
        area = signed_area(ring)
        left, _ = _offset_samples(ring[0], ring[1])
        if area > EPSILON:
            if point_in_ring(left, ring) and inside(left):
                outers.append(ring)
        elif area < -EPSILON:
            if not point_in_ring(left, ring) and inside(left):
                holes.append(ring)

    regions: List[Region] = [(outer, []) for outer in outers]
    for hole in holes:
        _, within = _offset_samples(hole[0], hole[1])
        owners = [r for r in regions if point_in_ring(within, r[0])]
        if owners:
            min(owners, key=lambda r: signed_area(r[0]))[1].append(hole)
    return regions


# ---- 5. holes ----

def _closed(ring: Sequence[PointLike]) -> List[PointLike]:
    return list(ring) + [ring[0]]


def _trace(polygons: List[LinkedPolygon], inside: Callable[[Point], bool]) -> List[Region]:
    edgify(polygons)
    outgoing, positions = select_edges(polygons, inside)
    return filter_rings(walk_rings(outgoing, positions), inside)


def _cut_x(outer: List[Point], holes: List[List[Point]]) -> float:
    """x of a vertical line through the first hole that misses every vertex."""
    hole = holes[0]
    lo = min(p.x for p in hole)
    hi = max(p.x for p in hole)
    xs = sorted({p.x for ring in [outer, *holes] for p in ring})
    gaps = [(b - a, a, b) for a, b in zip(xs, xs[1:]) if lo <= a and b <= hi]
    _, a, b = max(gaps)
    return (a + b) * 0.5


def split_holes(outer: List[Point], holes: List[List[Point]]) -> List[List[Point]]:
    """
    Simple rings covering the region `outer` minus `holes`.

    The region is cut along a vertical line through the first hole and each
    side is traced again; holes left whole on a side are cut in turn.
    """
    if not holes:
        return [outer]

    cut = _cut_x(outer, holes)
    min_x = min(p.x for p in outer)
    max_x = max(p.x for p in outer)
    pad = 1.0 + (max_x - min_x) + max(p.y for p in outer) - min(p.y for p in outer)
    top = min(p.y for p in outer) - pad
    bottom = max(p.y for p in outer) + pad

    def in_region(p: Point) -> bool:
        return point_in_ring(p, outer) and not any(point_in_ring(p, h) for h in holes)

    halves = [
        (lambda p: p.x < cut, [(min_x - pad, top), (cut, top), (cut, bottom), (min_x - pad, bottom)]),
        (lambda p: p.x > cut, [(cut, top), (max_x + pad, top), (max_x + pad, bottom), (cut, bottom)]),
    ]

    pieces: List[List[Point]] = []
    for keep, box in halves:
        def inside(p: Point, keep=keep) -> bool:
            return keep(p) and in_region(p)

        work = [LinkedPolygon(_closed(ring)) for ring in [outer, *holes, box]]
        for piece, piece_holes in _trace(work, inside):
            pieces.extend(split_holes(piece, piece_holes))

    logger.debug(
        event=LogEvent.HOLES_SPLIT,
        message="Region with holes cut into simple polygons",
        metadata={'holes': len(holes), 'cut_x': cut, 'pieces': len(pieces)}
    )
    return pieces


def set_operation(a: LinkedPolygon, b: LinkedPolygon, operation: SetOperation) -> Set[LinkedPolygon]:
    """
    Compute `operation` over the areas of `a` and `b`.

    Works on copies built from the inputs' point rings; `a` and `b` are not
    split. A result region with holes comes back as several simple polygons
    whose areas sum to the region's area.

    Returns:
        Set of zero or more LinkedPolygons
    """
    ring_a = list(a.points[:-1])
    ring_b = list(b.points[:-1])

    def inside(p: Point) -> bool:
        return operation.holds(point_in_ring(p, ring_a), point_in_ring(p, ring_b))

    work = [LinkedPolygon(a.points, a.segment_kind), LinkedPolygon(b.points, b.segment_kind)]
    rings: List[List[Point]] = []
    for outer, holes in _trace(work, inside):
        rings.extend(split_holes(outer, holes))

    result = {LinkedPolygon(_closed(ring), a.segment_kind) for ring in rings}
    logger.debug(
        event=LogEvent.SET_OPERATION_COMPLETED,
        message=f"{operation.value} produced {len(result)} polygon(s)",
        metadata={'operation': operation.value, 'polygons': len(result)}
    )
    return result
