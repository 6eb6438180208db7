"""
Two-dimensional coherent noise kernels.

Three lattice noises are provided:
- Value2d: random scalars at lattice corners, eased bilinear blend
- Gradient2d: Perlin-style random unit gradients dotted with the offset
- Simplex2d: Gustavson's 2-D simplex noise over a skewed triangular lattice

Each kernel draws its tables from a seeded ``numpy.random.Generator`` once at
construction and never mutates them afterwards. ``sample`` evaluates whole
coordinate arrays at once and ``at`` is the single-point form of the same
computation, so a grid sample and a point query run the same arithmetic.
"""

import math
from enum import Enum
from typing import Union

import numpy as np

from .interpolation import Blend, Interpolation, get_interpolation

ArrayLike = Union[float, np.ndarray]

TABLE_SIZE = 256
TABLE_MASK = 0xFF

# Skew/unskew factors for the 2-D simplex grid
F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0

# Eight gradient directions picked by the low 3 bits of the lattice hash:
# x+y, x, x-y, y, -y, -x+y, -x, -x-y
SIMPLEX_GRAD_X = np.array([1.0, 1.0, 1.0, 0.0, 0.0, -1.0, -1.0, -1.0])
SIMPLEX_GRAD_Y = np.array([1.0, 0.0, -1.0, 1.0, -1.0, 1.0, 0.0, -1.0])


class NoiseKind(str, Enum):
    """Available noise kernels."""

    VALUE = "value"
    GRADIENT = "gradient"
    SIMPLEX = "simplex"


def make_permutations(rng: np.random.Generator) -> np.ndarray:
    """Shuffle 0..255 into a lattice hashing table."""
    permutations = np.arange(TABLE_SIZE, dtype=np.int64)
    rng.shuffle(permutations)
    return permutations


class LatticeNoise:
    """Base class holding the permutation table and the point/grid API."""

    def __init__(self, permutations: np.ndarray):
        permutations = np.array(permutations, dtype=np.int64)
        if permutations.shape != (TABLE_SIZE,):
            raise ValueError(
                f"Permutation table must have {TABLE_SIZE} entries, got {permutations.shape}"
            )
        if not np.array_equal(np.sort(permutations), np.arange(TABLE_SIZE)):
            raise ValueError("Permutation table must be a bijection over 0..255")

        self.permutations = permutations
        self.permutations.setflags(write=False)

    def lattice_index(self, xi: ArrayLike, yi: ArrayLike) -> np.ndarray:
        """Map integer lattice coordinates to a table index (tiles every 256 units)."""
        p = self.permutations
        return p[(xi + p[np.bitwise_and(yi, TABLE_MASK)]) & TABLE_MASK]

    def sample(self, x: ArrayLike, y: ArrayLike) -> np.ndarray:
        raise NotImplementedError

    def at(self, x: float, y: float) -> float:
        """Evaluate the noise at a single point."""
        return float(self.sample(np.float64(x), np.float64(y)))


def _split(v: ArrayLike):
    """Split coordinates into integer lattice cell and fractional offset."""
    v = np.asarray(v, dtype=np.float64)
    cell = np.floor(v)
    return cell.astype(np.int64), v - cell


class Value2d(LatticeNoise):
    """Value noise: random scalars in [0, 1) blended across each lattice cell."""

    def __init__(self, permutations: np.ndarray, values: np.ndarray, interpolate: Blend):
        super().__init__(permutations)
        self.values = np.array(values, dtype=np.float64)
        self.values.setflags(write=False)
        self.interpolate = interpolate

    @classmethod
    def from_rng(cls, rng: np.random.Generator, interpolate: Blend) -> "Value2d":
        permutations = make_permutations(rng)
        values = rng.uniform(0.0, 1.0, size=TABLE_SIZE)
        return cls(permutations, values, interpolate)

    def sample(self, x: ArrayLike, y: ArrayLike) -> np.ndarray:
        xi, xf = _split(x)
        yi, yf = _split(y)

        nw = self.values[self.lattice_index(xi, yi)]
        ne = self.values[self.lattice_index(xi + 1, yi)]
        sw = self.values[self.lattice_index(xi, yi + 1)]
        se = self.values[self.lattice_index(xi + 1, yi + 1)]

        n = self.interpolate(nw, ne, xf)
        s = self.interpolate(sw, se, xf)

        return self.interpolate(n, s, yf)


class Gradient2d(LatticeNoise):
    """Perlin-style gradient noise rescaled into roughly [0, 1]."""

    def __init__(self, permutations: np.ndarray, gradients: np.ndarray, interpolate: Blend):
        super().__init__(permutations)
        self.gradients = np.array(gradients, dtype=np.float64)
        if self.gradients.shape != (TABLE_SIZE, 2):
            raise ValueError(f"Expected {TABLE_SIZE} 2-D gradients, got {self.gradients.shape}")
        self.gradients.setflags(write=False)
        self.interpolate = interpolate

    @classmethod
    def from_rng(cls, rng: np.random.Generator, interpolate: Blend) -> "Gradient2d":
        permutations = make_permutations(rng)
        angles = rng.uniform(0.0, 2.0 * np.pi, size=TABLE_SIZE)
        gradients = np.column_stack((np.cos(angles), np.sin(angles)))
        return cls(permutations, gradients, interpolate)

    def _dot(self, index: np.ndarray, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
        g = self.gradients[index]
        return g[..., 0] * dx + g[..., 1] * dy

    def sample(self, x: ArrayLike, y: ArrayLike) -> np.ndarray:
        xi, xf = _split(x)
        yi, yf = _split(y)

        nw = self._dot(self.lattice_index(xi, yi), xf, yf)
        ne = self._dot(self.lattice_index(xi + 1, yi), xf - 1.0, yf)
        sw = self._dot(self.lattice_index(xi, yi + 1), xf, yf - 1.0)
        se = self._dot(self.lattice_index(xi + 1, yi + 1), xf - 1.0, yf - 1.0)

        n = self.interpolate(nw, ne, xf)
        s = self.interpolate(sw, se, xf)

        # Dot products lie in [-sqrt(2)/2, sqrt(2)/2]
        return self.interpolate(n, s, yf) / math.sqrt(2.0) + 0.5


class Simplex2d(LatticeNoise):
    """
    2-D simplex noise.

    Based on Stefan Gustavson, "Simplex noise demystified" (2005).
    Only the permutation table is random; gradients are the eight fixed
    directions in SIMPLEX_GRAD_X/Y.
    """

    @classmethod
    def from_rng(cls, rng: np.random.Generator) -> "Simplex2d":
        return cls(make_permutations(rng))

    def _corner(self, index: np.ndarray, dx: np.ndarray, dy: np.ndarray) -> np.ndarray:
        t = 0.5 - dx * dx - dy * dy
        g = index & 0b111
        contribution = (t * t) * (t * t) * (SIMPLEX_GRAD_X[g] * dx + SIMPLEX_GRAD_Y[g] * dy)
        return np.where(t >= 0.0, contribution, 0.0)

    def sample(self, x: ArrayLike, y: ArrayLike) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        # Skew the input space to find the containing simplex cell
        s = (x + y) * F2
        i = np.floor(x + s).astype(np.int64)
        j = np.floor(y + s).astype(np.int64)

        # Unskew the cell origin back to (x, y) space
        t = (i + j) * G2
        x0 = x - i + t
        y0 = y - j + t

        # Lower triangle (i1, j1) = (1, 0), upper triangle (0, 1)
        i1 = (x0 > y0).astype(np.int64)
        j1 = 1 - i1

        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2

        v = 2.0 * G2 - 1.0
        x2 = x0 + v
        y2 = y0 + v

        n0 = self._corner(self.lattice_index(i, j), x0, y0)
        n1 = self._corner(self.lattice_index(i + i1, j + j1), x1, y1)
        n2 = self._corner(self.lattice_index(i + 1, j + 1), x2, y2)

        return 35.0 * (n0 + n1 + n2) + 0.5


def build_noise(
    kind: NoiseKind,
    rng: np.random.Generator,
    interpolation: Interpolation = Interpolation.CUBIC,
) -> LatticeNoise:
    """
    Construct a noise kernel from the random source.

    Args:
        kind: Which kernel to build
        rng: Seeded random generator; its stream is consumed here
        interpolation: Easing used by value and gradient noise

    Returns:
        Constructed noise kernel
    """
    kind = NoiseKind(kind)

    if kind == NoiseKind.VALUE:
        return Value2d.from_rng(rng, get_interpolation(interpolation))
    elif kind == NoiseKind.GRADIENT:
        return Gradient2d.from_rng(rng, get_interpolation(interpolation))
    elif kind == NoiseKind.SIMPLEX:
        return Simplex2d.from_rng(rng)

    raise ValueError(f"Unknown noise kind: {kind}")
