"""
Turning heightmaps into pixels.
"""

from .color import Color, lerp_color
from .color_ramp import ColorRamp, default_ramp
from .shading import Vec3, shade, surface_normal, surface_normals
from .to_image import heightmap_to_image, noise_to_image

__all__ = ['Color', 'lerp_color', 'ColorRamp', 'default_ramp',
           'Vec3', 'shade', 'surface_normal', 'surface_normals',
           'heightmap_to_image', 'noise_to_image']
