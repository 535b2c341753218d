"""
Shadow Volume Evaluator
=======================

Decides whether a sample point lies in the shadow an elevated wall casts
from a point source, and how deep into that shadow it sits.

Cross-section (O = source, W = wall, V = where the shadow ends):

    O----------W----V
    | \\ theta  |    |
 Oe |    \\     |    |
    |       \\  |    |
    |        We \\   |
    ----------------+----
    |<-    OV    ->|

    theta     = atan((Oe - We) / OW)
    OV        = Oe / tan(theta)
    maxDistWP = OV - OW

Elevations are shifted by the sample elevation first, so a raised sample
behaves like ground level under a lower wall and source.

Design:
- Frozen dataclasses for inputs and results (thread-safe value objects)
- Pure functions: no state, no logging on the hot path
- Numeric degeneracies (zero-length wall, zero wall distance) are
  "no shadow", never exceptions
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from umbra_geometry.point import Point, PointLike, orient2d, perpendicular_point


@dataclass(frozen=True)
class Source:
    """
    Light or vision source.

    Attributes:
        position: Planar location
        elevation: Height in plane units
        radius: Light radius in plane units (0 for unbounded evaluation)
        is_vision: Vision sources cannot see samples above them
    """

    position: Point
    elevation: float = math.inf
    radius: float = 0.0
    is_vision: bool = False

    def __post_init__(self):
        object.__setattr__(self, "position", Point.of(self.position))
        if self.radius < 0:
            raise ValueError(f"radius must be >= 0, got {self.radius}")


@dataclass(frozen=True)
class Wall:
    """
    Wall segment with elevation bounds.

    An unbounded top (inf) never casts an elevated shadow: nothing can be
    higher than it.
    """

    a: Point
    b: Point
    top_elevation: float = math.inf
    bottom_elevation: float = -math.inf
    wall_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "a", Point.of(self.a))
        object.__setattr__(self, "b", Point.of(self.b))
        if self.top_elevation < self.bottom_elevation:
            raise ValueError(
                f"Wall '{self.wall_id}' top_elevation ({self.top_elevation}) "
                f"is below bottom_elevation ({self.bottom_elevation})"
            )

    @property
    def length(self) -> float:
        return self.a.distance(self.b)

    def distance_to(self, point: PointLike) -> Optional[float]:
        """Distance from `point` to its perpendicular foot on the wall line."""
        point = Point.of(point)
        foot = perpendicular_point(self.a, self.b, point)
        if foot is None:
            return None
        return point.distance(foot)


@dataclass(frozen=True)
class SamplePoint:
    position: Point
    elevation: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "position", Point.of(self.position))


@dataclass(frozen=True)
class ShadowResult:
    """
    Attributes:
        in_shadow: True if the sample is shadowed (or hidden from a vision source)
        depth: distWP / maxDistWP in [0, 1); 0 near the wall, 1 at the
            shadow's far edge. 0.0 when not in shadow.
    """

    in_shadow: bool
    depth: float = 0.0


NO_SHADOW = ShadowResult(in_shadow=False, depth=0.0)


def segments_intersect(a: Point, b: Point, c: Point, d: Point) -> bool:
    """
    Does segment ab touch or cross segment cd?

    Touching counts. Collinear segments never intersect.
    """
    xa = orient2d(a, b, c)
    xb = orient2d(a, b, d)
    if xa == 0.0 and xb == 0.0:
        return False
    return xa * xb <= 0.0 and orient2d(c, d, a) * orient2d(c, d, b) <= 0.0


def evaluate_shadow(
    source: Source,
    wall: Wall,
    sample: SamplePoint,
    wall_distance: Optional[float] = None,
) -> ShadowResult:
    """
    Shadow of a single wall at a single sample.

    Args:
        source: Light/vision source
        wall: Occluding wall
        sample: Point being tested
        wall_distance: Planar distance from the source to the wall line;
            computed when omitted

    Returns:
        ShadowResult (depth 0.0 when not in shadow)
    """
    top = wall.top_elevation

    if source.elevation <= top:
        return NO_SHADOW

    if sample.elevation >= top:
        return NO_SHADOW

    if not segments_intersect(sample.position, source.position, wall.a, wall.b):
        return NO_SHADOW

    foot = perpendicular_point(wall.a, wall.b, sample.position)
    if foot is None:
        return NO_SHADOW

    if wall_distance is None:
        wall_distance = wall.distance_to(source.position)
    if wall_distance is None or wall_distance <= 0:
        return NO_SHADOW

    dist_wp = sample.position.distance(foot)

    adj_wall = top - sample.elevation
    adj_source = source.elevation - sample.elevation
    theta = math.atan((adj_source - adj_wall) / wall_distance)

    dist_ov = adj_source / math.tan(theta)
    max_dist_wp = dist_ov - wall_distance

    if dist_wp < max_dist_wp:
        return ShadowResult(in_shadow=True, depth=dist_wp / max_dist_wp)
    return NO_SHADOW


def evaluate_walls(
    source: Source,
    walls: Sequence[Wall],
    sample: SamplePoint,
    wall_distances: Optional[Sequence[Optional[float]]] = None,
) -> ShadowResult:
    """
    Combine every wall's shadow at `sample`.

    All walls are evaluated; the minimum depth among shadowing walls wins.
    A sample above the source receives no light: depth 0, and vision
    sources report it as hidden.
    """
    if sample.elevation > source.elevation:
        return ShadowResult(in_shadow=source.is_vision, depth=0.0)

    in_shadow = False
    depth = math.inf
    for i, wall in enumerate(walls):
        distance = wall_distances[i] if wall_distances is not None else None
        result = evaluate_shadow(source, wall, sample, distance)
        if result.in_shadow:
            in_shadow = True
            depth = min(depth, result.depth)

    if not in_shadow:
        return NO_SHADOW
    return ShadowResult(in_shadow=True, depth=depth)
