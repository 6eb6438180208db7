"""
Core heightmap generation functionality.
"""

from .heightmap import Heightmap, HeightmapOutOfBoundsError
from .heightmap_generator import Diamond2d, Fractal2d, GeneratorKind, Midpoint2d
from .interpolation import Interpolation, get_interpolation
from .noise import Gradient2d, NoiseKind, Simplex2d, Value2d, build_noise

__all__ = ['Heightmap', 'HeightmapOutOfBoundsError',
           'Diamond2d', 'Fractal2d', 'Midpoint2d', 'GeneratorKind',
           'Interpolation', 'get_interpolation',
           'Value2d', 'Gradient2d', 'Simplex2d', 'NoiseKind', 'build_noise']
