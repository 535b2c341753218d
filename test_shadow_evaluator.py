"""
Test Shadow Evaluator
=====================

Elevated-wall shadow membership and depth, the evaluator's short-circuits,
multi-wall combination, and agreement between the scalar and numpy paths.

Geometry used throughout: source at the origin, 10 units up; wall along
x = 5, 5 units tall. The shadow then reaches 5 units past the wall.

Usage:
    python test_shadow_evaluator.py
"""

import numpy as np

from umbra_shadow import (
    SamplePoint,
    Source,
    Wall,
    evaluate_shadow,
    evaluate_walls,
    segments_intersect,
    shadow_depth_map,
)
from umbra_geometry import Point

SOURCE = Source(position=(0, 0), elevation=10)
WALL = Wall(a=(5, -5), b=(5, 5), top_elevation=5, wall_id="w1")


def test_shadow_membership():
    """Samples behind the wall are shadowed until maxDistWP."""
    print("\n" + "=" * 60)
    print("TEST: Shadow Membership")
    print("=" * 60)

    result = evaluate_shadow(SOURCE, WALL, SamplePoint((7, 0)))
    assert result.in_shadow
    assert abs(result.depth - 0.4) < 1e-9
    print(f"✓ (7, 0): depth {result.depth:.3f}")

    near_edge = evaluate_shadow(SOURCE, WALL, SamplePoint((9.9, 0)))
    assert near_edge.in_shadow and near_edge.depth > 0.95
    print(f"✓ (9.9, 0): depth {near_edge.depth:.3f}")

    near = [evaluate_shadow(SOURCE, WALL, SamplePoint((x, 0))) for x in (5.1, 5.01, 5.001)]
    assert all(r.in_shadow for r in near)
    assert near[0].depth > near[1].depth > near[2].depth > 0.0
    assert near[2].depth < 1e-3
    assert abs(near[1].depth - 0.002) < 1e-9
    print(f"✓ Approaching the wall base: depths {[round(r.depth, 5) for r in near]} -> 0")

    beyond = evaluate_shadow(SOURCE, WALL, SamplePoint((10.5, 0)))
    assert not beyond.in_shadow and beyond.depth == 0.0
    print("✓ (10.5, 0): past the shadow's far edge")

    given = evaluate_shadow(SOURCE, WALL, SamplePoint((7, 0)), wall_distance=5.0)
    assert abs(given.depth - result.depth) < 1e-12
    print("✓ Supplied wall distance matches computed")

    raised = evaluate_shadow(SOURCE, WALL, SamplePoint((7, 0), elevation=2))
    assert raised.in_shadow
    assert abs(raised.depth - 2.0 / 3.0) < 1e-9
    print(f"✓ Raised sample: shorter shadow, depth {raised.depth:.3f}")

    print("\n✅ SHADOW MEMBERSHIP PASSED")


def test_short_circuits():
    """Each early exit yields no shadow and depth 0."""
    print("\n" + "=" * 60)
    print("TEST: Short Circuits")
    print("=" * 60)

    low_source = Source(position=(0, 0), elevation=5)
    assert evaluate_shadow(low_source, WALL, SamplePoint((7, 0))) == evaluate_shadow(
        SOURCE, WALL, SamplePoint((20, 0))
    )
    assert not evaluate_shadow(low_source, WALL, SamplePoint((7, 0))).in_shadow
    print("✓ Source not above wall top")

    assert not evaluate_shadow(SOURCE, WALL, SamplePoint((7, 0), elevation=5)).in_shadow
    print("✓ Sample at wall top")

    assert not evaluate_shadow(SOURCE, WALL, SamplePoint((7, 10))).in_shadow
    assert not evaluate_shadow(SOURCE, WALL, SamplePoint((3, 0))).in_shadow
    print("✓ Sight line misses the wall")

    unbounded = Wall(a=(5, -5), b=(5, 5))
    assert not evaluate_shadow(SOURCE, unbounded, SamplePoint((7, 0))).in_shadow
    print("✓ Unbounded wall top casts no elevated shadow")

    degenerate = Wall(a=(5, 0), b=(5, 0), top_elevation=5)
    assert not evaluate_shadow(SOURCE, degenerate, SamplePoint((7, 0))).in_shadow
    print("✓ Zero-length wall")

    assert not evaluate_shadow(SOURCE, WALL, SamplePoint((7, 0)), wall_distance=0.0).in_shadow
    print("✓ Zero wall distance")

    print("\n✅ SHORT CIRCUITS PASSED")


def test_multiple_walls():
    """All walls are evaluated; the minimum depth wins."""
    print("\n" + "=" * 60)
    print("TEST: Multiple Walls")
    print("=" * 60)

    second = Wall(a=(6, -5), b=(6, 5), top_elevation=5, wall_id="w2")
    result = evaluate_walls(SOURCE, [WALL, second], SamplePoint((7, 0)))
    assert result.in_shadow
    assert abs(result.depth - 1.0 / 6.0) < 1e-9
    print(f"✓ Nearest shadow dominates: depth {result.depth:.3f}")

    assert evaluate_walls(SOURCE, [], SamplePoint((7, 0))) == evaluate_walls(
        SOURCE, [WALL], SamplePoint((-7, 0))
    )
    print("✓ No walls / no hits: not in shadow")

    light = Source(position=(0, 0), elevation=10)
    vision = Source(position=(0, 0), elevation=10, is_vision=True)
    high = SamplePoint((1, 1), elevation=11)
    assert evaluate_walls(light, [WALL], high) == evaluate_walls(light, [], high)
    assert not evaluate_walls(light, [WALL], high).in_shadow
    hidden = evaluate_walls(vision, [WALL], high)
    assert hidden.in_shadow and hidden.depth == 0.0
    print("✓ Sample above source: light misses it, vision cannot see it")

    print("\n✅ MULTIPLE WALLS PASSED")


def test_segments_intersect():
    """Touching counts, collinear does not."""
    print("\n" + "=" * 60)
    print("TEST: Segment Intersection")
    print("=" * 60)

    assert segments_intersect(Point(0, 0), Point(2, 2), Point(0, 2), Point(2, 0))
    assert segments_intersect(Point(0, 0), Point(2, 0), Point(2, 0), Point(2, 2))
    assert not segments_intersect(Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0))
    assert not segments_intersect(Point(0, 0), Point(2, 0), Point(1, 0), Point(3, 0))
    assert not segments_intersect(Point(0, 0), Point(1, 1), Point(0, 1), Point(1, 2))
    print("✓ Crossing, touching, collinear, parallel")

    print("\n✅ SEGMENT INTERSECTION PASSED")


def test_batch_matches_scalar():
    """shadow_depth_map agrees with evaluate_walls sample by sample."""
    print("\n" + "=" * 60)
    print("TEST: Batch vs Scalar")
    print("=" * 60)

    walls = [
        WALL,
        Wall(a=(6, -5), b=(8, 5), top_elevation=7, wall_id="w2"),
        Wall(a=(-4, 3), b=(-2, 6), top_elevation=3, wall_id="w3"),
        Wall(a=(0, -8), b=(3, -8)),
    ]
    xs, ys = np.meshgrid(np.arange(-6.25, 13.0, 0.5), np.arange(-9.1, 9.1, 0.4))
    elevations = np.where(xs > 11.5, 12.0, np.where(ys > 4.0, 1.5, 0.0))

    for source in (SOURCE, Source(position=(0.3, -0.2), elevation=10, is_vision=True)):
        mask, depth = shadow_depth_map(source, walls, xs, ys, elevations)
        assert mask.shape == xs.shape and depth.shape == xs.shape

        for idx in np.ndindex(xs.shape):
            sample = SamplePoint((xs[idx], ys[idx]), elevation=elevations[idx])
            expected = evaluate_walls(source, walls, sample)
            assert bool(mask[idx]) == expected.in_shadow, f"mask mismatch at {sample}"
            assert abs(depth[idx] - expected.depth) < 1e-9, f"depth mismatch at {sample}"

        print(f"✓ is_vision={source.is_vision}: {int(mask.sum())} of {mask.size} samples shadowed")

    assert mask[np.where(xs > 11.5)].all()
    print("✓ Vision source hides samples above it")

    print("\n✅ BATCH VS SCALAR PASSED")


def test_validation():
    """Wall and source dataclasses reject inconsistent values."""
    print("\n" + "=" * 60)
    print("TEST: Validation")
    print("=" * 60)

    for build in (
        lambda: Wall(a=(0, 0), b=(1, 0), top_elevation=1, bottom_elevation=2),
        lambda: Source(position=(0, 0), radius=-1),
    ):
        try:
            build()
        except ValueError as e:
            print(f"✓ ValueError: {e}")
        else:
            raise AssertionError("Expected ValueError")

    print("\n✅ VALIDATION PASSED")


def main():
    """Run all tests."""
    print("\n🌗 umbra_shadow - Evaluator Tests")
    print("=" * 60)

    try:
        test_shadow_membership()
        test_short_circuits()
        test_multiple_walls()
        test_segments_intersect()
        test_batch_matches_scalar()
        test_validation()

        print("\n" + "=" * 60)
        print("✅ ALL TESTS PASSED!")
        print("=" * 60)

    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        raise


if __name__ == "__main__":
    main()
