"""
Shadow Visualizer Module
========================

Pure visualization of walls, sources and shadow depth maps.

Dependencies:
- supervision (line drawing, Color)
- opencv (circles, color maps)
- numpy (alpha blending)
"""

from typing import Sequence

import cv2
import numpy as np
import supervision as sv

from umbra_geometry.rendering import TopologyVisualizer
from umbra_shadow.evaluator import Source, Wall


class ShadowVisualizer(TopologyVisualizer):
    """
    Stateless visualizer for shadow scenes.

    Usage:
        visualizer = ShadowVisualizer(shadow_color=sv.Color(r=0, g=0, b=0))

        frame = visualizer.draw_shadow_depth(frame, mask, depth)
        frame = visualizer.draw_walls(frame, walls)
        frame = visualizer.draw_source(frame, source)
    """

    def __init__(
        self,
        wall_color: sv.Color = sv.Color(r=255, g=64, b=64),
        light_color: sv.Color = sv.Color(r=255, g=220, b=120),
        shadow_color: sv.Color = sv.Color(r=0, g=0, b=0),
        thickness: int = 2,
        max_opacity: float = 0.75,
    ):
        """
        Args:
            wall_color: Wall segment color
            light_color: Light center and radius color
            shadow_color: Shadow overlay color
            thickness: Line thickness for drawing
            max_opacity: Overlay opacity at the wall (depth 0)
        """
        super().__init__(thickness=thickness)
        if not 0.0 <= max_opacity <= 1.0:
            raise ValueError(f"max_opacity must be in [0.0, 1.0], got {max_opacity}")
        self.wall_color = wall_color
        self.light_color = light_color
        self.shadow_color = shadow_color
        self.max_opacity = max_opacity

    def draw_walls(self, frame: np.ndarray, walls: Sequence[Wall]) -> np.ndarray:
        for wall in walls:
            frame = self.draw_segment(frame, wall.a, wall.b, self.wall_color)
        return frame

    def draw_source(self, frame: np.ndarray, source: Source) -> np.ndarray:
        center = self.to_pixel(source.position).as_xy_int_tuple()
        color = self.light_color.as_bgr()
        cv2.circle(frame, center, 4, color, -1)
        if source.radius > 0:
            cv2.circle(frame, center, int(source.radius * self.scale), color, self.thickness)
        return frame

    def draw_shadow_depth(self, frame: np.ndarray, mask: np.ndarray, depth: np.ndarray) -> np.ndarray:
        """
        Darken shadowed pixels; the shadow fades toward its far edge.

        Args:
            frame: BGR image, same height/width as mask
            mask: In-shadow mask
            depth: Shadow depth in [0, 1)
        """
        alpha = np.where(mask, self.max_opacity * (1.0 - 0.5 * depth), 0.0)[..., np.newaxis]
        overlay = np.array(self.shadow_color.as_bgr(), dtype=np.float64)
        blended = frame.astype(np.float64) * (1.0 - alpha) + overlay * alpha
        frame[...] = blended.astype(frame.dtype)
        return frame

    @staticmethod
    def render_depth_image(mask: np.ndarray, depth: np.ndarray, colormap: int = cv2.COLORMAP_BONE) -> np.ndarray:
        """Depth map as a BGR image; unshadowed pixels are white."""
        values = np.where(mask, depth, 1.0)
        gray = np.clip(values * 255.0, 0, 255).astype(np.uint8)
        return cv2.applyColorMap(gray, colormap)
