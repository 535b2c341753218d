"""
Umbra Shadow
============

Bounded Context: Shadows cast by elevated walls from point sources.

Architecture:

    umbra_shadow/
    ├── evaluator.py       # Source, Wall, SamplePoint, evaluate_shadow/walls
    ├── batch.py           # shadow_depth_map (numpy)
    ├── elevation.py       # ElevationTransform, elevation images
    ├── scene.py           # LightFrame, ShadowScene
    ├── config.py          # SceneConfig (YAML)
    └── rendering/         # ShadowVisualizer

Usage:

    from umbra_shadow import Source, Wall, SamplePoint, evaluate_walls

    source = Source(position=(0, 0), elevation=10)
    wall = Wall(a=(5, -5), b=(5, 5), top_elevation=5)
    evaluate_walls(source, [wall], SamplePoint((7, 0)))   # in shadow, depth 0.4
"""

from umbra_shadow.evaluator import (
    NO_SHADOW,
    SamplePoint,
    ShadowResult,
    Source,
    Wall,
    evaluate_shadow,
    evaluate_walls,
    segments_intersect,
)
from umbra_shadow.batch import shadow_depth_map
from umbra_shadow.elevation import ElevationTransform, load_elevation_image
from umbra_shadow.config import ElevationConfig, LightConfig, SceneConfig, WallConfig
from umbra_shadow.scene import LightFrame, ShadowScene, scenes_from_config

__all__ = [
    # Evaluation
    "NO_SHADOW",
    "SamplePoint",
    "ShadowResult",
    "Source",
    "Wall",
    "evaluate_shadow",
    "evaluate_walls",
    "segments_intersect",
    "shadow_depth_map",
    # Elevation
    "ElevationTransform",
    "load_elevation_image",
    # Configuration
    "ElevationConfig",
    "LightConfig",
    "SceneConfig",
    "WallConfig",
    # Scene
    "LightFrame",
    "ShadowScene",
    "scenes_from_config",
]

__version__ = "0.1.0"
