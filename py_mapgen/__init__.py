"""
Procedural heightmap generation and shaded map rendering.
"""

__version__ = "0.1.0"
