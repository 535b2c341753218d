"""
Test Polygon Set Operations
===========================

Intersection, union and xor over linked polygons, including the area
identity area(A & B) + area(A ^ B) == area(A | B).

Usage:
    python test_set_operations.py
"""

from umbra_geometry import LinkedPolygon, Point, SetOperation, build_polygon, edgify, set_operation


def _square(x0, y0, size):
    return build_polygon([
        (x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size), (x0, y0)
    ])


def _total_area(polygons):
    return sum(p.area for p in polygons)


def _check_area_identity(a, b):
    inter = _total_area(a.intersection(b))
    union = _total_area(a.union(b))
    xor = _total_area(a.xor(b))
    assert abs(inter + xor - union) < 1e-9, f"{inter} + {xor} != {union}"
    return inter, union, xor


def test_overlapping_squares():
    """Squares [0,2]^2 and [1,3]^2 overlap in a unit square."""
    print("\n" + "=" * 60)
    print("TEST: Overlapping Squares")
    print("=" * 60)

    a = _square(0, 0, 2)
    b = _square(1, 1, 2)

    intersection = a.intersection(b)
    assert len(intersection) == 1
    (overlap,) = intersection
    assert isinstance(overlap, LinkedPolygon)
    assert abs(overlap.area - 1.0) < 1e-9
    assert {p.key for p in overlap.ring} == {
        Point(1, 1).key, Point(2, 1).key, Point(2, 2).key, Point(1, 2).key
    }
    print(f"✓ Intersection: {overlap.ring}")

    union = a.union(b)
    assert len(union) == 1
    assert abs(_total_area(union) - 7.0) < 1e-9
    print("✓ Union: one polygon, area 7")

    xor = a.xor(b)
    assert len(xor) == 2
    assert sorted(round(p.area, 9) for p in xor) == [3.0, 3.0]
    print("✓ Xor: two L shapes, area 3 each")

    inter, union_area, xor_area = _check_area_identity(a, b)
    print(f"✓ {inter} + {xor_area} == {union_area}")

    # inputs are not split by the operation
    assert len(a.vertices) == 4 and len(b.vertices) == 4
    print("✓ Inputs untouched")

    print("\n✅ OVERLAPPING SQUARES PASSED")


def test_disjoint_and_identical():
    """Degenerate overlaps: none at all, and complete."""
    print("\n" + "=" * 60)
    print("TEST: Disjoint And Identical")
    print("=" * 60)

    a = _square(0, 0, 2)
    far = _square(5, 5, 2)
    assert a.intersection(far) == set()
    assert len(a.union(far)) == 2
    assert abs(_total_area(a.xor(far)) - 8.0) < 1e-9
    _check_area_identity(a, far)
    print("✓ Disjoint: empty intersection, union of two")

    same = _square(0, 0, 2)
    assert abs(_total_area(a.intersection(same)) - 4.0) < 1e-9
    assert abs(_total_area(a.union(same)) - 4.0) < 1e-9
    assert a.xor(same) == set()
    print("✓ Identical: intersection == union == A, xor empty")

    print("\n✅ DISJOINT AND IDENTICAL PASSED")


def test_partially_shared_edge():
    """A rectangle touching part of a square's edge merges under union."""
    print("\n" + "=" * 60)
    print("TEST: Partially Shared Edge")
    print("=" * 60)

    square = _square(0, 0, 2)
    tab = build_polygon([(2, 0), (4, 0), (4, 1), (2, 1), (2, 0)])

    assert square.intersection(tab) == set()
    union = square.union(tab)
    assert len(union) == 1
    assert abs(_total_area(union) - 6.0) < 1e-9
    print("✓ Union: one polygon, area 6")

    inter, union_area, xor_area = _check_area_identity(square, tab)
    assert abs(xor_area - 6.0) < 1e-9
    print(f"✓ {inter} + {xor_area} == {union_area}")

    print("\n✅ PARTIALLY SHARED EDGE PASSED")


def test_orientation_independent():
    """Clockwise input rings give the same areas; results are counter-clockwise."""
    print("\n" + "=" * 60)
    print("TEST: Orientation Independence")
    print("=" * 60)

    a = build_polygon([(0, 0), (0, 2), (2, 2), (2, 0), (0, 0)])
    b = _square(1, 1, 2)

    result = set_operation(a, b, SetOperation.INTERSECTION)
    assert abs(_total_area(result) - 1.0) < 1e-9
    assert all(p.signed_area > 0 for p in a.union(b))
    _check_area_identity(a, b)
    print("✓ Clockwise A behaves like counter-clockwise A")

    print("\n✅ ORIENTATION INDEPENDENCE PASSED")


def test_regions_with_holes():
    """Holes in a result are cut out, keeping the area identity."""
    print("\n" + "=" * 60)
    print("TEST: Regions With Holes")
    print("=" * 60)

    outer = _square(0, 0, 4)
    inner = _square(1, 1, 1)

    inter, union_area, xor_area = _check_area_identity(outer, inner)
    assert abs(inter - 1.0) < 1e-9
    assert abs(union_area - 16.0) < 1e-9
    assert abs(xor_area - 15.0) < 1e-9
    xor = outer.xor(inner)
    assert len(xor) == 2
    assert all(p.signed_area > 0 for p in xor)
    assert not any(p.contains_point((1.25, 1.5)) for p in xor)
    print(f"✓ Nested squares: xor is {len(xor)} simple polygons, area {xor_area}")

    u_shape = build_polygon([
        (0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3), (0, 0)
    ])
    bar = build_polygon([(0, 2.5), (3, 2.5), (3, 4), (0, 4), (0, 2.5)])

    inter, union_area, xor_area = _check_area_identity(u_shape, bar)
    assert abs(inter - 1.0) < 1e-9
    assert abs(union_area - 10.5) < 1e-9
    assert abs(xor_area - 9.5) < 1e-9
    union = u_shape.union(bar)
    assert len(union) >= 2
    assert not any(p.contains_point((1.25, 2.0)) for p in union)
    assert any(p.contains_point((0.5, 2.0)) for p in union)
    print(f"✓ U + bar: union encloses a 1.5 hole, area {union_area}")

    print("\n✅ REGIONS WITH HOLES PASSED")


def test_edgify():
    """edgify splits both polygons at their crossings."""
    print("\n" + "=" * 60)
    print("TEST: Edgify")
    print("=" * 60)

    a = _square(0, 0, 2)
    b = _square(1, 1, 2)
    splits = edgify([a, b])
    assert splits == 4
    assert len(a.vertices) == 6 and len(b.vertices) == 6
    assert Point(2, 1).key in a.vertices and Point(2, 1).key in b.vertices
    print(f"✓ {splits} splits; shared vertex ids at crossings")

    print("\n✅ EDGIFY PASSED")


def main():
    """Run all tests."""
    print("\n🔀 umbra_geometry - Set Operation Tests")
    print("=" * 60)

    try:
        test_overlapping_squares()
        test_disjoint_and_identical()
        test_partially_shared_edge()
        test_orientation_independent()
        test_regions_with_holes()
        test_edgify()

        print("\n" + "=" * 60)
        print("✅ ALL TESTS PASSED!")
        print("=" * 60)

    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        raise


if __name__ == "__main__":
    main()
