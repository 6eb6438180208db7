"""Grayscale previews of heightmaps and noise kernels."""

import numpy as np

from ..core.heightmap import Heightmap
from ..core.noise import LatticeNoise


def _to_luma(values: np.ndarray) -> np.ndarray:
    # Truncate like an integer cast, clipped so overshoot does not wrap
    return np.clip(np.trunc(values * 255.0), 0, 255).astype(np.uint8)


def heightmap_to_image(hmap: Heightmap) -> np.ndarray:
    """uint8 (height, width) grayscale image of a normalized heightmap."""
    return _to_luma(hmap.as_array())


def noise_to_image(noise: LatticeNoise, size: int = 256, scale: float = 64.0) -> np.ndarray:
    """
    Sample a noise kernel on a size x size grid.

    Pixel (x, y) shows ``noise.at(x / scale, y / scale)``; with the defaults
    a 256 pixel preview covers 4 x 4 lattice cells.
    """
    coords = np.arange(size, dtype=np.float64) / scale
    u, v = np.meshgrid(coords, coords)
    return _to_luma(noise.sample(u, v))
