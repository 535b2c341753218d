"""
Configuration schema for shadow map scenes.

This module defines the scene file structure: the elevation transform,
the walls with their elevation bounds, and the light/vision sources to
render. Elevations are given in grid units (e.g. feet); coordinates and
radii in pixels.
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import yaml


@dataclass(frozen=True)
class ElevationConfig:
    """Elevation texture resolution and grid scale."""

    elevation_min: float = 0.0
    elevation_step: float = 1.0
    max_pixel_value: float = 255.0
    grid_size: float = 100.0  # pixels per grid square
    grid_distance: float = 5.0  # grid units per grid square

    def __post_init__(self):
        """Validate elevation configuration."""
        if self.elevation_step <= 0:
            raise ValueError(
                f"elevation_step must be > 0, got {self.elevation_step}"
            )
        if self.max_pixel_value <= 0:
            raise ValueError(
                f"max_pixel_value must be > 0, got {self.max_pixel_value}"
            )
        if self.grid_size <= 0 or self.grid_distance <= 0:
            raise ValueError(
                f"grid_size and grid_distance must be > 0, "
                f"got {self.grid_size} / {self.grid_distance}"
            )


@dataclass(frozen=True)
class WallConfig:
    """Wall segment with elevation bounds (grid units)."""

    wall_id: str
    coordinates: List[Tuple[float, float]]
    top: float = math.inf
    bottom: float = -math.inf

    def __post_init__(self):
        """Validate wall configuration."""
        if len(self.coordinates) != 2:
            raise ValueError(
                f"Wall '{self.wall_id}' must have exactly 2 points, "
                f"got {len(self.coordinates)}"
            )
        if self.top < self.bottom:
            raise ValueError(
                f"Wall '{self.wall_id}' top ({self.top}) is below bottom ({self.bottom})"
            )


@dataclass(frozen=True)
class LightConfig:
    """Light or vision source."""

    light_id: str
    position: Tuple[float, float]
    radius: float
    elevation: float
    is_vision: bool = False

    def __post_init__(self):
        """Validate light configuration."""
        if len(self.position) != 2:
            raise ValueError(
                f"Light '{self.light_id}' position must be [x, y], got {self.position}"
            )
        if self.radius <= 0:
            raise ValueError(
                f"Light '{self.light_id}' radius must be > 0, got {self.radius}"
            )


@dataclass(frozen=True)
class SceneConfig:
    """
    Main configuration for a shadow map scene.

    Loaded from YAML and validated at construction.
    Immutable after construction (frozen dataclass).
    """

    scene_id: str
    frame_resolution_wh: Tuple[int, int] = (1280, 720)  # (width, height)
    elevation: ElevationConfig = field(default_factory=ElevationConfig)
    walls: List[WallConfig] = field(default_factory=list)
    lights: List[LightConfig] = field(default_factory=list)
    terrain_elevation: float = 0.0
    elevation_image: Optional[Path] = None

    def __post_init__(self):
        """Validate scene configuration."""
        if not self.scene_id:
            raise ValueError("scene_id cannot be empty")

        width, height = self.frame_resolution_wh
        if width <= 0 or height <= 0:
            raise ValueError(
                f"frame_resolution_wh must have positive dimensions, got {self.frame_resolution_wh}"
            )
        if width > 4096 or height > 4096:
            raise ValueError(
                f"frame_resolution_wh dimensions too large (max 4096x4096), got {self.frame_resolution_wh}"
            )

        wall_ids = [w.wall_id for w in self.walls]
        if len(set(wall_ids)) != len(wall_ids):
            raise ValueError(f"Duplicate wall_id in {wall_ids}")

        light_ids = [light.light_id for light in self.lights]
        if len(set(light_ids)) != len(light_ids):
            raise ValueError(f"Duplicate light_id in {light_ids}")

        if self.elevation_image is not None and not self.elevation_image.is_file():
            raise FileNotFoundError(
                f"Elevation image not found: {self.elevation_image}\n"
                f"Create it or remove 'elevation_image' from config"
            )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "SceneConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            scene_id: "crypt"
            frame_resolution_wh: [800, 600]

            elevation:
              elevation_min: 0
              elevation_step: 5
              grid_size: 100
              grid_distance: 5

            walls:
              - wall_id: "pillar_n"
                coordinates: [[300, 250], [500, 250]]
                top: 10
                bottom: 0

            lights:
              - light_id: "torch"
                position: [400, 100]
                radius: 400
                elevation: 20
                is_vision: false

            terrain_elevation: 0
            elevation_image: null
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        elevation_data = data.get("elevation", {})
        elevation = ElevationConfig(**elevation_data)

        walls = [
            WallConfig(
                wall_id=str(w["wall_id"]),
                coordinates=[tuple(coord) for coord in w["coordinates"]],
                top=float(w.get("top", math.inf)),
                bottom=float(w.get("bottom", -math.inf)),
            )
            for w in data.get("walls", [])
        ]

        lights = [
            LightConfig(
                light_id=str(light["light_id"]),
                position=tuple(light["position"]),
                radius=float(light["radius"]),
                elevation=float(light["elevation"]),
                is_vision=light.get("is_vision", False),
            )
            for light in data.get("lights", [])
        ]

        frame_resolution_data = data.get("frame_resolution_wh", [1280, 720])
        frame_resolution_wh = tuple(frame_resolution_data)

        elevation_image = data.get("elevation_image")
        if elevation_image is not None:
            # relative to the config file
            elevation_image = Path(yaml_path).parent / elevation_image

        return cls(
            scene_id=data["scene_id"],
            frame_resolution_wh=frame_resolution_wh,
            elevation=elevation,
            walls=walls,
            lights=lights,
            terrain_elevation=float(data.get("terrain_elevation", 0.0)),
            elevation_image=elevation_image,
        )
