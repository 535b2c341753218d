"""
Elevation Transform
===================

Linear map from raw elevation values (grid units, or 0-1 texture samples)
to plane units that compare directly with planar distances.

    plane = (raw - elevation_min) * elevation_step * plane_scale
    plane_scale = grid_size / grid_distance   (pixels per grid unit)
"""

from dataclasses import dataclass

import cv2
import numpy as np


@dataclass(frozen=True)
class ElevationTransform:
    """
    Per-scene elevation conversion.

    Attributes:
        elevation_min: Raw value mapped to zero
        elevation_step: Grid units per raw step
        max_pixel_value: Raw value of a fully saturated texture sample
        plane_scale: Plane units per grid unit
    """

    elevation_min: float = 0.0
    elevation_step: float = 1.0
    max_pixel_value: float = 255.0
    plane_scale: float = 1.0

    def __post_init__(self):
        if self.elevation_step <= 0:
            raise ValueError(f"elevation_step must be > 0, got {self.elevation_step}")
        if self.max_pixel_value <= 0:
            raise ValueError(f"max_pixel_value must be > 0, got {self.max_pixel_value}")
        if self.plane_scale <= 0:
            raise ValueError(f"plane_scale must be > 0, got {self.plane_scale}")

    @classmethod
    def from_grid(
        cls,
        grid_size: float,
        grid_distance: float,
        elevation_min: float = 0.0,
        elevation_step: float = 1.0,
        max_pixel_value: float = 255.0,
    ) -> "ElevationTransform":
        if grid_distance <= 0:
            raise ValueError(f"grid_distance must be > 0, got {grid_distance}")
        return cls(
            elevation_min=elevation_min,
            elevation_step=elevation_step,
            max_pixel_value=max_pixel_value,
            plane_scale=grid_size / grid_distance,
        )

    def to_plane(self, raw):
        """Raw elevation (scalar or array) to plane units."""
        return (raw - self.elevation_min) * self.elevation_step * self.plane_scale

    def from_texture(self, value):
        """Normalized texture sample in [0, 1] (scalar or array) to plane units."""
        if isinstance(value, np.ndarray):
            value = value.astype(np.float64)
        return self.to_plane(value * self.max_pixel_value)

    def z_value(self, units: float) -> float:
        """Grid units (e.g. feet) to plane units, no offset or step."""
        return units * self.plane_scale


def load_elevation_image(path, transform: ElevationTransform, size_wh=None) -> np.ndarray:
    """
    Read a grayscale elevation texture into a plane-unit elevation map.

    Args:
        path: Image file (8-bit grayscale; color images are converted)
        transform: Scene elevation transform
        size_wh: Resize to (width, height) when given

    Raises:
        FileNotFoundError: Image missing or unreadable
    """
    image = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if image is None:
        raise FileNotFoundError(f"Elevation image not found or unreadable: {path}")
    if size_wh is not None and (image.shape[1], image.shape[0]) != tuple(size_wh):
        image = cv2.resize(image, tuple(size_wh), interpolation=cv2.INTER_NEAREST)
    return transform.from_texture(image / 255.0)
