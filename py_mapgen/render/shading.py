"""
Directional hill shading.

Land cells (elevation above 0.5) are lit according to the angle between
their surface normal and a light vector. The result is blended into an
already colored pixel buffer: facing the light pushes a pixel towards the
light color, facing away pushes it towards the dark color. Water is left
flat.
"""

from typing import NamedTuple, Tuple

import numpy as np
import structlog

from ..core.heightmap import Heightmap
from ..errors import InvalidConfigurationError
from .color import Color

logger = structlog.get_logger()

SEA_LEVEL = 0.5
# Spreads the nominal [-1, 1] dot product over a wide brightness band
SHADE_CONTRAST = 35.0


class Vec3(NamedTuple):
    """Three-component vector used for light directions and normals."""

    x: float
    y: float
    z: float

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    @classmethod
    def parse(cls, text: str) -> "Vec3":
        """Parse the ``"x y z"`` text form."""
        parts = str(text).split()
        if len(parts) != 3:
            raise InvalidConfigurationError(f"Expected 'x y z', got {text!r}")
        try:
            return cls(*(float(p) for p in parts))
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid vector {text!r}: {e}") from e

    def __str__(self) -> str:
        return f"{self.x} {self.y} {self.z}"


def _slope(values: np.ndarray, axis: int) -> np.ndarray:
    """
    Finite difference along an axis: central inside, one-sided and doubled at
    both edges. A single row or column has no slope.
    """
    if values.shape[axis] < 2:
        return np.zeros_like(values)

    # np.gradient halves the central difference and keeps edges one-sided
    return 2.0 * np.gradient(values, axis=axis)


def surface_normals(hmap: Heightmap) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Unit surface normals for every cell.

    Returns:
        (nx, ny, nz) arrays of shape (height, width)
    """
    values = hmap.as_array()
    dx = _slope(values, axis=1)
    dy = _slope(values, axis=0)

    n = np.sqrt(dx * dx + dy * dy + 4.0)
    return -dx / n, -dy / n, 2.0 / n


def surface_normal(hmap: Heightmap, x: int, y: int) -> Vec3:
    """Unit surface normal at a single cell."""
    if hmap.width < 2:
        dx = 0.0
    elif x == 0:
        dx = (hmap.get(x + 1, y) - hmap.get(x, y)) * 2.0
    elif x == hmap.width - 1:
        dx = (hmap.get(x, y) - hmap.get(x - 1, y)) * 2.0
    else:
        dx = hmap.get(x + 1, y) - hmap.get(x - 1, y)

    if hmap.height < 2:
        dy = 0.0
    elif y == 0:
        dy = (hmap.get(x, y + 1) - hmap.get(x, y)) * 2.0
    elif y == hmap.height - 1:
        dy = (hmap.get(x, y) - hmap.get(x, y - 1)) * 2.0
    else:
        dy = hmap.get(x, y + 1) - hmap.get(x, y - 1)

    n = np.sqrt(dx * dx + dy * dy + 4.0)
    return Vec3(float(-dx / n), float(-dy / n), float(2.0 / n))


def shade(pixels: np.ndarray, hmap: Heightmap, light: Vec3, light_color: Color, dark_color: Color) -> None:
    """
    Shade land pixels in place.

    Args:
        pixels: uint8 (height, width, 3) buffer, typically from ColorRamp.apply_on
        hmap: Heightmap the buffer was colored from
        light: Light direction
        light_color: Color for fully lit slopes
        dark_color: Color for slopes facing away from the light
    """
    if pixels.shape != (hmap.height, hmap.width, 3):
        raise ValueError(
            f"Pixel buffer shape {pixels.shape} does not match "
            f"{hmap.width}x{hmap.height} heightmap"
        )

    nx, ny, nz = surface_normals(hmap)
    d = (light.x * nx + light.y * ny + light.z * nz) * SHADE_CONTRAST + 0.5
    d = d[..., np.newaxis]

    land = (hmap.as_array() > SEA_LEVEL)[..., np.newaxis]
    current = pixels.astype(np.float64)
    light_rgb = np.asarray(light_color, dtype=np.float64)
    dark_rgb = np.asarray(dark_color, dtype=np.float64)

    # Below 0.5 fade from dark to the base color, above it from base to light
    t_low = 2.0 * d
    t_high = 2.0 * d - 1.0
    towards_dark = np.floor((1.0 - t_low) * dark_rgb + t_low * current + 0.5)
    towards_light = np.floor((1.0 - t_high) * current + t_high * light_rgb + 0.5)

    shaded = np.where(d < 0.5, towards_dark, towards_light)
    shaded = np.where(d < 0.0, dark_rgb, shaded)
    shaded = np.where(d > 1.0, light_rgb, shaded)

    np.copyto(pixels, np.where(land, shaded, current).astype(np.uint8))

    logger.debug("Shaded land pixels", land_pixels=int(land.sum()))
