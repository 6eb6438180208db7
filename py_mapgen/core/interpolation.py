"""
Easing functions used to blend lattice values in the noise kernels.

Every function works on plain floats as well as NumPy arrays, so the same
code path serves single-point queries and whole-grid sampling.
"""

from enum import Enum
from typing import Callable, Union

import numpy as np

Number = Union[float, np.ndarray]
Blend = Callable[[Number, Number, Number], Number]


class Interpolation(str, Enum):
    """Easing curve applied to the fractional lattice offset."""

    LINEAR = "linear"
    CUBIC = "cubic"
    QUINTIC = "quintic"
    COSINE = "cosine"


def lerp(v0: Number, v1: Number, t: Number) -> Number:
    """Linear blend between v0 and v1."""
    return v0 * (1.0 - t) + v1 * t


def linear(v0: Number, v1: Number, t: Number) -> Number:
    return lerp(v0, v1, t)


def cubic(v0: Number, v1: Number, t: Number) -> Number:
    """Hermite smoothstep, 3t^2 - 2t^3."""
    return lerp(v0, v1, t * t * (3.0 - t * 2.0))


def quintic(v0: Number, v1: Number, t: Number) -> Number:
    """Perlin's improved fade curve, 6t^5 - 15t^4 + 10t^3."""
    return lerp(v0, v1, t * t * t * (t * (t * 6.0 - 15.0) + 10.0))


def cosine(v0: Number, v1: Number, t: Number) -> Number:
    return lerp(v0, v1, (1.0 - np.cos(np.pi * t)) * 0.5)


_BLENDS = {
    Interpolation.LINEAR: linear,
    Interpolation.CUBIC: cubic,
    Interpolation.QUINTIC: quintic,
    Interpolation.COSINE: cosine,
}


def get_interpolation(kind: Interpolation) -> Blend:
    """
    Get the blend function for an interpolation kind.

    Args:
        kind: Interpolation enum member or its string value

    Returns:
        Function (v0, v1, t) -> blended value
    """
    return _BLENDS[Interpolation(kind)]
