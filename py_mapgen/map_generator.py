"""
Map generation pipeline.

Runs a MapGeneratorConfig end to end:

    seed -> noise kernel (fractal only) -> terrain generator -> heightmap
         -> normalize -> flatten -> color ramp -> shading -> RGB pixels

The returned buffer is a uint8 array of shape (height, width, 3). Writing
it anywhere is left to the caller.
"""

from typing import Union

import numpy as np
import structlog

from .config.map_config import MapGeneratorConfig
from .core.heightmap import Heightmap
from .core.heightmap_generator import Diamond2d, Fractal2d, GeneratorKind, Midpoint2d
from .core.noise import build_noise
from .render.shading import shade
from .utils.random import make_rng

logger = structlog.get_logger()

TerrainGenerator = Union[Diamond2d, Fractal2d, Midpoint2d]


def build_generator(config: MapGeneratorConfig, rng: np.random.Generator) -> TerrainGenerator:
    """
    Construct the configured terrain generator.

    For the fractal generator this also builds its noise kernel, which
    consumes the random source before generation starts.
    """
    kind = GeneratorKind(config.generator)

    if kind == GeneratorKind.DIAMOND:
        return Diamond2d()
    elif kind == GeneratorKind.MIDPOINT:
        return Midpoint2d()
    elif kind == GeneratorKind.FRACTAL:
        noise = build_noise(config.resolved_noise(), rng, config.resolved_interpolation())
        return Fractal2d(
            noise,
            scale=config.resolved_scale(),
            octave=config.resolved_octave(),
            lacunarity=config.resolved_lacunarity(),
            persistence=config.resolved_persistence(),
        )

    raise ValueError(f"Unknown generator: {kind}")


class MapGenerator:
    """Runs the generation pipeline for one configuration."""

    def __init__(self, config: MapGeneratorConfig):
        self.config = config

    def generate_heightmap(self) -> Heightmap:
        """Raw heightmap straight from the generator, before normalization."""
        config = self.config
        rng = make_rng(config.seed)
        generator = build_generator(config, rng)

        logger.info(
            "Generating heightmap",
            generator=GeneratorKind(config.generator).value,
            width=config.width,
            height=config.height,
            seed=config.seed,
        )
        return generator.generate(config.width, config.height, rng)

    def run(self) -> np.ndarray:
        """
        Generate, color and shade a map.

        Returns:
            uint8 RGB buffer of shape (height, width, 3)
        """
        config = self.config

        hmap = self.generate_heightmap()
        hmap.normalize()
        hmap.flatten()

        logger.info("Coloring heightmap", ramp_steps=len(config.ramp))
        pixels = config.ramp.apply_on(hmap)

        logger.info("Shading heightmap", light_position=str(config.light_position))
        shade(pixels, hmap, config.light_position, config.light, config.dark)

        return pixels
