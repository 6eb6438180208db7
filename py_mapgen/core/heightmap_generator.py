"""
Heightmap generation algorithms.

Three strategies produce a Heightmap from a requested size:
- Diamond2d: diamond-square subdivision
- Midpoint2d: classic midpoint displacement
- Fractal2d: fractal Brownian motion summed over a noise kernel

The subdivision generators work on a square grid whose side is 2^n + 1 and
crop the result to the requested rectangle. Random values are drawn from the
supplied ``numpy.random.Generator`` in a fixed order (corners, then every
level's square pass, then its diamond pass, centers visited column by
column), so a given seed always yields the same terrain.
"""

from enum import Enum
from typing import Iterator, List, Optional

import numpy as np
import structlog

from .heightmap import Heightmap
from .noise import LatticeNoise

logger = structlog.get_logger()


class GeneratorKind(str, Enum):
    """Available terrain generators."""

    DIAMOND = "diamond"
    FRACTAL = "fractal"
    MIDPOINT = "midpoint"


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n; 0 and 1 both give 1."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def grid_size(width: int, height: int) -> int:
    """Side of the 2^n + 1 working grid covering a width x height request."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Requested size must be positive, got {width}x{height}")
    return next_power_of_two(max(width, height) - 1) + 1


def _centers(size: int, d: int) -> Iterator:
    """Centers of the d-sized squares, x outer and y inner."""
    h = d // 2
    for x in range(h, size, d):
        for y in range(h, size, d):
            yield x, y


def _seed_corners(data: List[float], size: int, rng: np.random.Generator) -> None:
    tl, tr, bl, br = rng.uniform(0.0, 1.0, size=4).tolist()
    data[0] = tl
    data[size - 1] = tr
    data[(size - 1) * size] = bl
    data[(size - 1) * size + size - 1] = br


class Diamond2d:
    """Diamond-square terrain generator."""

    def _square(self, data: List[float], size: int, x: int, y: int, h: int, offset: float) -> None:
        """Set (x, y) to the mean of its four diagonal neighbors."""
        tl = data[(y - h) * size + x - h]
        tr = data[(y + h) * size + x - h]
        bl = data[(y - h) * size + x + h]
        br = data[(y + h) * size + x + h]

        data[y * size + x] = (tl + tr + bl + br) / 4.0 + offset

    def _diamond(self, data: List[float], size: int, x: int, y: int, h: int, offset: float) -> None:
        """Set (x, y) to the mean of its in-bounds orthogonal neighbors."""
        total = 0.0
        count = 0

        if x > 0:
            total += data[y * size + x - h]
            count += 1
        if x < size - 1:
            total += data[y * size + x + h]
            count += 1
        if y > 0:
            total += data[(y - h) * size + x]
            count += 1
        if y < size - 1:
            total += data[(y + h) * size + x]
            count += 1

        data[y * size + x] = total / count + offset

    def generate(self, width: int, height: int, rng: np.random.Generator) -> Heightmap:
        """
        Generate a heightmap with the diamond-square algorithm.

        Args:
            width: Requested width
            height: Requested height
            rng: Random source, consumed in a fixed order

        Returns:
            Unnormalized width x height heightmap
        """
        size = grid_size(width, height)
        logger.debug("Running diamond-square", width=width, height=height, grid_size=size)

        data = [0.0] * (size * size)
        _seed_corners(data, size, rng)

        d = size - 1
        while d > 1:
            h = d // 2
            centers = list(_centers(size, d))

            # Perturbation amplitude follows the step size
            offsets = iter(rng.uniform(-d, d, size=len(centers)).tolist())
            for x, y in centers:
                self._square(data, size, x, y, h, next(offsets))

            offsets = iter(rng.uniform(-d, d, size=4 * len(centers)).tolist())
            for x, y in centers:
                self._diamond(data, size, x - h, y, h, next(offsets))
                self._diamond(data, size, x + h, y, h, next(offsets))
                self._diamond(data, size, x, y - h, h, next(offsets))
                self._diamond(data, size, x, y + h, h, next(offsets))

            d = h

        return Heightmap(size, size, data).submap(0, 0, width, height)


class Midpoint2d:
    """Midpoint displacement terrain generator."""

    def generate(self, width: int, height: int, rng: np.random.Generator) -> Heightmap:
        """
        Generate a heightmap with midpoint displacement.

        Edge midpoints are derived from the two corners of their own square
        only, so no boundary handling is needed.
        """
        size = grid_size(width, height)
        logger.debug("Running midpoint displacement", width=width, height=height, grid_size=size)

        data = [0.0] * (size * size)
        _seed_corners(data, size, rng)

        d = size - 1
        while d > 1:
            h = d // 2
            centers = list(_centers(size, d))
            offsets = iter(rng.uniform(-d, d, size=5 * len(centers)).tolist())

            for x, y in centers:
                tl = data[(y - h) * size + x - h]
                tr = data[(y + h) * size + x - h]
                bl = data[(y - h) * size + x + h]
                br = data[(y + h) * size + x + h]

                data[y * size + x] = (tl + tr + bl + br) / 4.0 + next(offsets)
                data[y * size + x - h] = (tl + tr) / 2.0 + next(offsets)
                data[y * size + x + h] = (bl + br) / 2.0 + next(offsets)
                data[(y - h) * size + x] = (tl + bl) / 2.0 + next(offsets)
                data[(y + h) * size + x] = (tr + br) / 2.0 + next(offsets)

            d = h

        return Heightmap(size, size, data).submap(0, 0, width, height)


class Fractal2d:
    """
    Fractal Brownian motion over a noise kernel.

    Each octave samples the kernel at ``lacunarity`` times the previous
    frequency and ``persistence`` times the previous amplitude.
    """

    def __init__(
        self,
        noise: LatticeNoise,
        scale: float = 2.0,
        octave: int = 10,
        lacunarity: float = 2.0,
        persistence: float = 0.5,
    ):
        if octave < 0:
            raise ValueError(f"Octave count must not be negative, got {octave}")

        self.noise = noise
        self.scale = scale
        self.octave = octave
        self.lacunarity = lacunarity
        self.persistence = persistence

    def get(self, x, y):
        """Accumulate all octaves at (x, y); accepts scalars or arrays."""
        value = 0.0
        frequency = 1.0
        amplitude = 1.0

        for _ in range(self.octave):
            value = value + self.noise.sample(x * frequency, y * frequency) * amplitude
            frequency *= self.lacunarity
            amplitude *= self.persistence

        return value

    def generate(self, width: int, height: int, rng: Optional[np.random.Generator] = None) -> Heightmap:
        """
        Sample the fractal sum on a width x height grid.

        The random source is not used; all randomness lives in the noise
        kernel. x is stretched by the aspect ratio so features stay round.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Requested size must be positive, got {width}x{height}")

        logger.debug(
            "Running fractal summation",
            width=width,
            height=height,
            octave=self.octave,
            scale=self.scale,
        )

        ratio = width / height
        px, py = np.meshgrid(np.arange(width, dtype=np.float64), np.arange(height, dtype=np.float64))
        x = px / width * self.scale * ratio
        y = py / height * self.scale

        values = np.broadcast_to(self.get(x, y), (height, width))
        return Heightmap(width, height, values)
