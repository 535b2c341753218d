"""
Test Linked Polygon Topology
============================

Ring construction, segment splitting, vertex identity and error paths of
the Vertex/Segment graph.

Usage:
    python test_linked_polygon.py
"""

import numpy as np

from umbra_geometry import (
    GeometryError,
    LinkedPolygon,
    Point,
    SegmentGraph,
    TopologyError,
    build_polygon,
)

SQUARE = [(0, 0), (2, 0), (2, 2), (0, 2), (0, 0)]


def _segment_between(polygon, a, b):
    for segment in polygon.segments.values():
        if polygon.segment_points(segment) == (Point.of(a), Point.of(b)):
            return segment
    raise AssertionError(f"No segment {a} -> {b}")


def test_ring_construction():
    """N-point ring -> N vertices, N segments, one in / one out per vertex."""
    print("\n" + "=" * 60)
    print("TEST: Ring Construction")
    print("=" * 60)

    polygon = build_polygon(SQUARE)
    assert len(polygon.vertices) == 4
    assert len(polygon.segments) == 4
    print(f"✓ {polygon}: {len(polygon.vertices)} vertices, {len(polygon.segments)} segments")

    graph = polygon.graph
    for vertex in polygon.vertices.values():
        assert vertex.is_complete
        incoming = graph.segment(vertex.incoming)
        outgoing = graph.segment(vertex.outgoing)
        assert incoming.b == vertex.handle
        assert outgoing.a == vertex.handle
    print("✓ Every vertex reads prior --> vertex --> next")

    ring = [v.point for v in polygon.vertices.values()]
    assert ring == [Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)]
    print("✓ Vertices keep ring order")

    for segment in polygon.segments.values():
        assert segment.properties["vision_distance"] == "far"
        assert segment.properties["vision_type"] == "ignore"
        assert segment.properties["kind"] == "edge"
    print("✓ Segment defaults: far / ignore / edge")

    pentagon = [(0, 0), (4, 0), (5, 3), (2, 5), (-1, 3), (0, 0)]
    assert len(build_polygon(pentagon).segments) == 5
    print("✓ Pentagon: 5 segments")

    print("\n✅ RING CONSTRUCTION PASSED")


def test_point_inputs():
    """Flat lists and Nx2 arrays build the same polygon."""
    print("\n" + "=" * 60)
    print("TEST: Point Inputs")
    print("=" * 60)

    flat = build_polygon([0, 0, 2, 0, 2, 2, 0, 2, 0, 0])
    array = build_polygon(np.array(SQUARE, dtype=np.float64))
    assert flat.points == array.points == build_polygon(SQUARE).points
    print("✓ Flat list, array and pairs agree")

    assert build_polygon(SQUARE).area == 4.0
    assert build_polygon(list(reversed(SQUARE))).signed_area == -4.0
    print("✓ Area and orientation")

    assert build_polygon(SQUARE).contains_point((1, 1))
    assert not build_polygon(SQUARE).contains_point((3, 1))
    print("✓ contains_point")

    print("\n✅ POINT INPUTS PASSED")


def test_split_segment():
    """Halves sum to the original; new vertex at the segment evaluated at t."""
    print("\n" + "=" * 60)
    print("TEST: Split Segment")
    print("=" * 60)

    polygon = build_polygon(SQUARE)
    polygon.set_segments_color("#ff0000")
    graph = polygon.graph
    segment = _segment_between(polygon, (0, 0), (2, 0))

    original_length = graph.length(segment)
    expected = graph.point_at(segment, 0.25)
    first, second = polygon.split_segment(segment, expected)

    assert abs(graph.length(first) + graph.length(second) - original_length) < 1e-9
    print(f"✓ {graph.length(first):.3f} + {graph.length(second):.3f} == {original_length:.3f}")

    middle = graph.vertex(first.b)
    assert middle.point == Point(0.5, 0)
    assert graph.vertex(second.a) is middle
    assert middle.incoming == first.handle and middle.outgoing == second.handle
    print(f"✓ New vertex at {middle.point}")

    assert segment.is_split
    assert graph.leaves(segment) == [first, second]
    assert first.properties["color"] == "#ff0000"
    assert second.properties["color"] == "#ff0000"
    print("✓ Parent records children; properties propagate")

    assert len(polygon.vertices) == 5
    assert len(polygon.segments) == 5
    print("✓ Caches refreshed: 5 vertices, 5 segments")

    # splitting the parent again recurses into the leaf holding the point
    polygon.split_segment(segment, (1.5, 0))
    assert len(graph.leaves(segment)) == 3
    assert len(polygon.vertices) == 6
    print("✓ Re-splitting a split segment lands in the right leaf")

    polygon.invalidate_vertices()
    assert len(polygon.vertices) == 4
    print("✓ invalidate_vertices rebuilds from points")

    print("\n✅ SPLIT SEGMENT PASSED")


def test_vertex_identity():
    """Polygons sharing an edge produce vertices with equal ids."""
    print("\n" + "=" * 60)
    print("TEST: Vertex Identity")
    print("=" * 60)

    left = build_polygon([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)])
    right = build_polygon([(1, 0), (2, 0), (2, 1), (1, 1), (1, 0)])

    shared = set(left.vertices) & set(right.vertices)
    assert shared == {Point(1, 0).key, Point(1, 1).key}
    assert left.vertices[Point(1, 0).key] == right.vertices[Point(1, 0).key]
    print(f"✓ Shared vertex ids: {sorted(shared)}")

    graph = SegmentGraph()
    v1 = graph.add_vertex(Point(3, 4))
    v2 = graph.add_vertex((3 + 1e-9, 4))
    assert v1 is v2
    assert graph.vertex_count == 1
    print("✓ Points within EPSILON map onto one vertex")

    print("\n✅ VERTEX IDENTITY PASSED")


def test_point_identity():
    """Point equality and hashing follow the same EPSILON grid."""
    print("\n" + "=" * 60)
    print("TEST: Point Identity")
    print("=" * 60)

    p = Point(3.0, 4.0)
    q = Point(3.0 + 1e-8, 4.0 - 1e-8)
    assert p == q and hash(p) == hash(q)
    assert q in {p}
    assert {p: "a"}[q] == "a"
    print("✓ Same grid cell: equal, one set entry")

    # 0.49e-6 and 0.51e-6 sit on either side of a cell boundary
    left = Point(0.49e-6, 0)
    right = Point(0.51e-6, 0)
    assert left.key != right.key
    assert left != right
    assert right not in {left}
    print("✓ Across a cell boundary: distinct, consistently")

    points = [Point(x * 0.25e-6, y * 0.25e-6) for x in range(-4, 5) for y in range(-2, 3)]
    for a in points:
        for b in points:
            assert (a == b) == (b in {a}) == (a.key == b.key)
    print(f"✓ == and hash agree on {len(points) ** 2} pairs")

    assert Point(1, 2).to_array().tolist() == [1.0, 2.0]

    print("\n✅ POINT IDENTITY PASSED")


def _expect(error_type, fn, *args):
    try:
        fn(*args)
    except error_type as e:
        print(f"✓ {error_type.__name__}: {e}")
    else:
        raise AssertionError(f"Expected {error_type.__name__}")


def test_error_paths():
    """Malformed geometry and invalid links raise."""
    print("\n" + "=" * 60)
    print("TEST: Error Paths")
    print("=" * 60)

    _expect(GeometryError, build_polygon, [(0, 0), (2, 0), (2, 2), (0, 2)])
    _expect(GeometryError, build_polygon, [(0, 0), (2, 0), (0, 0)])
    _expect(GeometryError, build_polygon, [(0, 0), (2, 0), (2, 2), (2, 0), (0, 0)])
    _expect(GeometryError, build_polygon, [0, 0, 2, 0, 2])

    polygon = build_polygon(SQUARE)
    segment = _segment_between(polygon, (0, 0), (2, 0))
    _expect(GeometryError, polygon.split_segment, segment, (1, 1))
    _expect(GeometryError, polygon.split_segment, segment, (2, 0))

    other = build_polygon(SQUARE)
    foreign = _segment_between(other, (2, 0), (2, 2))
    _expect(TopologyError, polygon.split_segment, foreign, (2, 1))

    graph = SegmentGraph()
    v0 = graph.add_vertex((0, 0))
    v1 = graph.connect_point(v0, 1, 0)
    _expect(TopologyError, graph.connect_point, v0, 0, 1)
    _expect(GeometryError, graph.add_segment, v1, graph.add_vertex((1, 0)))

    stray = graph.add_segment(graph.add_vertex((5, 5)), graph.add_vertex((6, 6)))
    _expect(TopologyError, graph.include_segment, v0, stray)
    _expect(TopologyError, lambda: list(graph.walk_ring(v0)))

    print("\n✅ ERROR PATHS PASSED")


def test_draw():
    """Drawing leaves and outlines marks the frame."""
    print("\n" + "=" * 60)
    print("TEST: Draw")
    print("=" * 60)

    polygon = LinkedPolygon([(10, 10), (40, 10), (40, 40), (10, 40), (10, 10)])
    polygon.set_segments_color("#00ff00")

    frame = np.zeros((50, 50, 3), dtype=np.uint8)
    frame = polygon.draw(frame, default_color="#ffffff")
    assert frame[10, 25].tolist() == [0, 255, 0]
    assert frame[25, 25].tolist() == [0, 0, 0]
    print("✓ Segment colors drawn, interior untouched")

    outline = polygon.draw_polygon(np.zeros((50, 50, 3), dtype=np.uint8), color="#ff0000")
    assert outline.sum() > 0
    print("✓ Outline drawn")

    print("\n✅ DRAW PASSED")


def main():
    """Run all tests."""
    print("\n🔗 umbra_geometry - Linked Polygon Tests")
    print("=" * 60)

    try:
        test_ring_construction()
        test_point_inputs()
        test_split_segment()
        test_vertex_identity()
        test_point_identity()
        test_error_paths()
        test_draw()

        print("\n" + "=" * 60)
        print("✅ ALL TESTS PASSED!")
        print("=" * 60)

    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        raise


if __name__ == "__main__":
    main()
