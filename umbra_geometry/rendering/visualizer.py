"""
Topology Visualizer Module
==========================

Pure visualization of linked polygons on numpy frames.

Design:
- Stateless rendering (frame in, frame out)
- Segment colors come from segment properties (hex strings)
- Uses supervision drawing utilities

Dependencies:
- supervision (draw utilities, Color, Point)
- numpy (arrays)
"""

from typing import Iterable, Tuple, Union

import numpy as np
import supervision as sv

from umbra_geometry.graph import DEFAULT_COLOR
from umbra_geometry.point import Point

ColorLike = Union[str, sv.Color]


def to_color(value: ColorLike) -> sv.Color:
    """Accept an sv.Color or a '#rrggbb' hex string."""
    if isinstance(value, sv.Color):
        return value
    return sv.Color.from_hex(value)


class TopologyVisualizer:
    """
    Stateless visualizer for linked polygons.

    Usage:
        visualizer = TopologyVisualizer(thickness=2, scale=40.0)

        # Each split leaf in its own color
        frame = visualizer.draw_segments(frame, polygon, default_color="#000000")

        # Raw ring
        frame = visualizer.draw_outline(frame, polygon.points, "#ff0000")
    """

    def __init__(
        self,
        thickness: int = 1,
        scale: float = 1.0,
        offset: Tuple[float, float] = (0.0, 0.0),
        point_radius: int = 3,
    ):
        """
        Args:
            thickness: Line thickness in pixels
            scale: Plane units -> pixels
            offset: Pixel offset added after scaling
            point_radius: Radius for vertex markers
        """
        self.thickness = thickness
        self.scale = scale
        self.offset = offset
        self.point_radius = point_radius

    def to_pixel(self, point: Point) -> sv.Point:
        return sv.Point(
            x=point.x * self.scale + self.offset[0],
            y=point.y * self.scale + self.offset[1],
        )

    def draw_segment(
        self,
        frame: np.ndarray,
        a: Point,
        b: Point,
        color: ColorLike = DEFAULT_COLOR,
    ) -> np.ndarray:
        return sv.draw_line(
            scene=frame,
            start=self.to_pixel(a),
            end=self.to_pixel(b),
            color=to_color(color),
            thickness=self.thickness,
        )

    def draw_segments(self, frame: np.ndarray, polygon, default_color: ColorLike = DEFAULT_COLOR) -> np.ndarray:
        """
        Draw every segment's current split leaves.

        Args:
            frame: Image to draw on
            polygon: LinkedPolygon
            default_color: Used when a leaf has no `color` property
        """
        for leaf in polygon.split_leaves():
            a, b = polygon.graph.endpoints(leaf)
            color = leaf.properties.get("color") or default_color
            frame = self.draw_segment(frame, a, b, color)
        return frame

    def draw_outline(self, frame: np.ndarray, points: Iterable[Point], color: ColorLike = DEFAULT_COLOR) -> np.ndarray:
        coords = np.array([Point.of(p).to_array() for p in points])
        pixels = (coords * self.scale + np.asarray(self.offset)).astype(np.int32)
        return sv.draw_polygon(
            scene=frame,
            polygon=pixels,
            color=to_color(color),
            thickness=self.thickness,
        )

    def draw_points(self, frame: np.ndarray, points: Iterable[Point], color: ColorLike = "#ff0000") -> np.ndarray:
        """Mark vertices or intersection points with small filled squares."""
        r = self.point_radius
        for p in points:
            center = self.to_pixel(p)
            square = np.array([
                [center.x - r, center.y - r],
                [center.x + r, center.y - r],
                [center.x + r, center.y + r],
                [center.x - r, center.y + r],
            ], dtype=np.int32)
            frame = sv.draw_filled_polygon(scene=frame, polygon=square, color=to_color(color), opacity=1.0)
        return frame
