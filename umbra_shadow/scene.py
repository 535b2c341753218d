"""
Light-Space Scene
=================

Prepares walls for a single source and evaluates shadows in the source's
local frame.

Light space:
    The light circle maps onto [0, 1] x [0, 1]: center (0.5, 0.5),
    radius 0.5. Elevations scale by the same factor (0.5 / radius), so
    depth ratios are unchanged.

Design:
- LightFrame: coordinate mapping and wall selection (stateless apart from
  the source)
- ShadowScene: source + walls + elevation transform; single samples via
  the scalar evaluator, depth maps via the numpy batch path
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from umbra_geometry.logging import LogEvent, create_logger
from umbra_geometry.point import Point, PointLike, perpendicular_point
from umbra_shadow.batch import shadow_depth_map
from umbra_shadow.config import SceneConfig
from umbra_shadow.elevation import ElevationTransform, load_elevation_image
from umbra_shadow.evaluator import SamplePoint, ShadowResult, Source, Wall, evaluate_walls

logger = create_logger("scene")

LIGHT_CENTER = Point(0.5, 0.5)


class LightFrame:
    """
    Mapping between plane coordinates and a source's light space.

    Usage:
        frame = LightFrame(Source(Point(400, 300), elevation=80, radius=200))
        frame.to_light((600, 300))     # Point(1.0, 0.5)
        walls, distances = frame.prepare(all_walls)
    """

    def __init__(self, source: Source):
        if source.radius <= 0:
            raise ValueError(f"LightFrame needs a source radius > 0, got {source.radius}")
        self.source = source
        self.center = source.position
        self.radius = source.radius
        self._scale = 0.5 / source.radius

    def to_light(self, point: PointLike) -> Point:
        point = Point.of(point)
        return Point(
            (point.x - self.center.x) * self._scale + 0.5,
            (point.y - self.center.y) * self._scale + 0.5,
        )

    def from_light(self, point: PointLike) -> Point:
        point = Point.of(point)
        return Point(
            (point.x - 0.5) / self._scale + self.center.x,
            (point.y - 0.5) / self._scale + self.center.y,
        )

    def to_light_arrays(self, xs, ys) -> Tuple[np.ndarray, np.ndarray]:
        xs = (np.asarray(xs, dtype=np.float64) - self.center.x) * self._scale + 0.5
        ys = (np.asarray(ys, dtype=np.float64) - self.center.y) * self._scale + 0.5
        return xs, ys

    def to_light_elevation(self, elevation):
        return elevation * self._scale

    @property
    def light_source(self) -> Source:
        return Source(
            position=LIGHT_CENTER,
            elevation=self.to_light_elevation(self.source.elevation),
            radius=0.5,
            is_vision=self.source.is_vision,
        )

    def select_walls(self, walls: Sequence[Wall]) -> List[Wall]:
        """Walls whose top is strictly below the source."""
        return [w for w in walls if w.top_elevation < self.source.elevation]

    def prepare(self, walls: Sequence[Wall]) -> Tuple[List[Wall], List[float]]:
        """
        Light-space copies of the walls below the source, with each wall's
        perpendicular distance to the light center.

        Walls whose endpoints coincide are skipped.
        """
        light_walls: List[Wall] = []
        distances: List[float] = []
        for wall in self.select_walls(walls):
            a = self.to_light(wall.a)
            b = self.to_light(wall.b)
            foot = perpendicular_point(a, b, LIGHT_CENTER)
            if foot is None:
                continue
            distances.append(LIGHT_CENTER.distance(foot))
            light_walls.append(Wall(
                a=a,
                b=b,
                top_elevation=self.to_light_elevation(wall.top_elevation),
                bottom_elevation=self.to_light_elevation(wall.bottom_elevation),
                wall_id=wall.wall_id,
            ))
        return light_walls, distances


class ShadowScene:
    """
    One source and the walls that may shadow it.

    Elevations are plane units. A source with radius > 0 is evaluated in
    its light space; radius 0 evaluates directly in plane coordinates.

    Attributes:
        source: Light or vision source
        walls: All scene walls (selection happens at prepare time)
        terrain_elevation: Default sample elevation
    """

    def __init__(
        self,
        source: Source,
        walls: Sequence[Wall],
        terrain_elevation: float = 0.0,
        scene_id: Optional[str] = None,
    ):
        self.source = source
        self.walls = list(walls)
        self.terrain_elevation = terrain_elevation
        self.scene_id = scene_id
        self._log = logger.bind(scene_id=scene_id)

        if source.radius > 0:
            self.frame: Optional[LightFrame] = LightFrame(source)
            self._source = self.frame.light_source
            self._walls, self._distances = self.frame.prepare(self.walls)
        else:
            self.frame = None
            self._source = source
            self._walls = [w for w in self.walls if w.top_elevation < source.elevation]
            self._distances = [w.distance_to(source.position) for w in self._walls]

        self._log.debug(
            event=LogEvent.SCENE_PREPARED,
            message="Prepared walls below source",
            metadata={
                'walls_total': len(self.walls),
                'walls_below_source': len(self._walls),
            }
        )

    @property
    def active_walls(self) -> List[Wall]:
        """Prepared walls (light space when the source has a radius)."""
        return list(self._walls)

    def evaluate(self, point: PointLike, elevation: Optional[float] = None) -> ShadowResult:
        """Shadow state at a plane-space point."""
        if elevation is None:
            elevation = self.terrain_elevation
        position = Point.of(point)
        if self.frame is not None:
            position = self.frame.to_light(position)
            elevation = self.frame.to_light_elevation(elevation)
        sample = SamplePoint(position=position, elevation=elevation)
        return evaluate_walls(self._source, self._walls, sample, self._distances)

    def render_depth_map(
        self,
        width: int,
        height: int,
        elevation_map: Optional[np.ndarray] = None,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Evaluate every pixel of a width x height frame.

        Args:
            width, height: Frame size in plane units (pixels)
            elevation_map: Optional (height, width) plane-unit elevations;
                terrain_elevation everywhere when omitted

        Returns:
            (mask, depth) arrays of shape (height, width)
        """
        ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
        elevations = self.terrain_elevation if elevation_map is None else elevation_map
        if elevation_map is not None and elevation_map.shape != (height, width):
            raise ValueError(
                f"elevation_map shape {elevation_map.shape} does not match frame ({height}, {width})"
            )

        if self.frame is not None:
            xs, ys = self.frame.to_light_arrays(xs, ys)
            elevations = self.frame.to_light_elevation(np.asarray(elevations, dtype=np.float64))

        mask, depth = shadow_depth_map(self._source, self._walls, xs, ys, elevations, self._distances)

        self._log.info(
            event=LogEvent.SHADOW_MAP_RENDERED,
            message="Depth map rendered",
            metadata={
                'resolution_wh': (width, height),
                'walls': len(self._walls),
                'shadowed_pixels': int(mask.sum()),
            }
        )
        return mask, depth


def build_transform(config: SceneConfig) -> ElevationTransform:
    e = config.elevation
    return ElevationTransform.from_grid(
        grid_size=e.grid_size,
        grid_distance=e.grid_distance,
        elevation_min=e.elevation_min,
        elevation_step=e.elevation_step,
        max_pixel_value=e.max_pixel_value,
    )


def scenes_from_config(config: SceneConfig) -> List[ShadowScene]:
    """One ShadowScene per configured light, elevations in plane units."""
    transform = build_transform(config)
    walls = [
        Wall(
            a=w.coordinates[0],
            b=w.coordinates[1],
            top_elevation=transform.z_value(w.top),
            bottom_elevation=transform.z_value(w.bottom),
            wall_id=w.wall_id,
        )
        for w in config.walls
    ]
    terrain = transform.z_value(config.terrain_elevation)
    return [
        ShadowScene(
            source=Source(
                position=light.position,
                elevation=transform.z_value(light.elevation),
                radius=light.radius,
                is_vision=light.is_vision,
            ),
            walls=walls,
            terrain_elevation=terrain,
            scene_id=f"{config.scene_id}/{light.light_id}",
        )
        for light in config.lights
    ]


def elevation_map_from_config(config: SceneConfig) -> Optional[np.ndarray]:
    """Plane-unit elevation map from the configured image, or None."""
    if config.elevation_image is None:
        return None
    return load_elevation_image(config.elevation_image, build_transform(config), config.frame_resolution_wh)
