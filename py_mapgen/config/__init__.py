"""
Configuration for map generation.
"""

from .settings import Settings, settings
from .map_config import MapGeneratorConfig, default_dark, default_light, default_light_position

__all__ = ['Settings', 'settings', 'MapGeneratorConfig',
           'default_dark', 'default_light', 'default_light_position']
