#!/usr/bin/env python3
"""
Shadow Map Renderer - Entry Point
=================================

Renders the shadows cast by elevated walls for every light in a scene
file and writes one PNG per light.

Usage:
    python run_shadow_map.py --config scene.example.yaml

Lifecycle:
    1. Load scene configuration from YAML
    2. Check walls for crossings (warning only)
    3. Build one ShadowScene per light
    4. Render depth map, overlay shadows, draw walls and light
    5. Write <scene_id>_<light_id>.png (and optionally the raw depth image)

Output:
    runs/shadow_map/<timestamp>/ unless --output-dir is given
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

import cv2
import numpy as np

from umbra_geometry import Point, validate_walls
from umbra_geometry.logging import LogEvent, create_logger
from umbra_shadow import SceneConfig, scenes_from_config
from umbra_shadow.rendering import ShadowVisualizer
from umbra_shadow.scene import elevation_map_from_config
from utils import get_target_run_folder

logger = create_logger("shadow_map")


def check_walls(config: SceneConfig) -> dict:
    """
    Warn about walls that cross each other or have zero length.

    Returns:
        Map of crossing point -> walls meeting there
    """
    degenerate = [w.wall_id for w in config.walls if Point.of(w.coordinates[0]) == Point.of(w.coordinates[1])]
    if degenerate:
        logger.warning(
            event=LogEvent.GEOMETRY_ERROR,
            message="Zero-length walls cast no shadow",
            metadata={'walls': degenerate}
        )

    crossings = validate_walls([w.coordinates for w in config.walls])
    if crossings:
        logger.warning(
            event=LogEvent.TOPOLOGY_ERROR,
            message="Walls cross each other",
            metadata={'points': [p.to_tuple() for p in crossings]}
        )
    return crossings


def render_scene(
    config: SceneConfig,
    output_dir: Path,
    save_depth: bool = False,
    crossings: Optional[Iterable[Point]] = None,
) -> list:
    """
    Render every light of `config` into `output_dir`.

    Wall crossings, when given, are marked on every overlay.

    Returns:
        Paths of the written images
    """
    width, height = config.frame_resolution_wh
    elevation_map = elevation_map_from_config(config)
    visualizer = ShadowVisualizer()
    written = []

    for scene in scenes_from_config(config):
        mask, depth = scene.render_depth_map(width, height, elevation_map)

        frame = np.full((height, width, 3), 255, dtype=np.uint8)
        frame = visualizer.draw_shadow_depth(frame, mask, depth)
        frame = visualizer.draw_walls(frame, scene.walls)
        frame = visualizer.draw_source(frame, scene.source)
        if crossings:
            frame = visualizer.draw_points(frame, crossings)

        name = scene.scene_id.replace("/", "_")
        path = output_dir / f"{name}.png"
        cv2.imwrite(str(path), frame)
        written.append(path)

        if save_depth:
            depth_path = output_dir / f"{name}_depth.png"
            cv2.imwrite(str(depth_path), visualizer.render_depth_image(mask, depth))
            written.append(depth_path)

    return written


def parse_args():
    """
    Parse command-line arguments.

    Returns:
        argparse.Namespace with parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Umbra Shadow Map - elevated wall shadows per light",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render the example scene into runs/shadow_map/<timestamp>/
  python run_shadow_map.py --config scene.example.yaml

  # Also write the raw depth images, with geometry debug logs
  python run_shadow_map.py --config scene.example.yaml --save-depth --debug
        """
    )

    parser.add_argument(
        '--config',
        type=Path,
        required=True,
        help='Path to scene configuration YAML file'
    )

    parser.add_argument(
        '--output-dir',
        type=Path,
        default=None,
        help='Output directory (default: runs/shadow_map/<timestamp>)'
    )

    parser.add_argument(
        '--save-depth',
        action='store_true',
        help='Also write the depth map as an image'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable DEBUG level geometry logs'
    )

    return parser.parse_args()


def main():
    """
    Main entry point.

    Exits with status 1 on missing or invalid configuration.
    """
    args = parse_args()

    if args.debug:
        for component in ("polygon", "sweep", "boolean", "scene", "shadow_map"):
            create_logger(component).set_level(logging.DEBUG)

    if not args.config.exists():
        logger.error(
            event=LogEvent.CONFIG_ERROR,
            message=f"Configuration file not found: {args.config}",
        )
        sys.exit(1)

    try:
        config = SceneConfig.from_yaml(args.config)
    except (ValueError, KeyError, TypeError, FileNotFoundError) as e:
        logger.error(
            event=LogEvent.CONFIG_ERROR,
            message=f"Invalid configuration: {args.config}",
            exc_info=e,
        )
        sys.exit(1)

    logger.info(
        event=LogEvent.CONFIG_LOADED,
        message="Scene configuration loaded",
        metadata={'scene_id': config.scene_id, 'walls': len(config.walls), 'lights': len(config.lights)}
    )

    crossings = check_walls(config)

    output_dir = args.output_dir or get_target_run_folder("shadow_map")
    output_dir.mkdir(parents=True, exist_ok=True)

    written = render_scene(config, output_dir, save_depth=args.save_depth, crossings=crossings)
    for path in written:
        print(f"✅ {path}")


if __name__ == '__main__':
    main()
