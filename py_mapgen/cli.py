"""
Command line entry point.

    python -m py_mapgen --generator fractal --noise simplex --seed 42 -o map.png
    python -m py_mapgen --config map.json --random-seed
"""

import argparse
from pathlib import Path
from typing import List, Optional

import structlog
from PIL import Image
from pydantic import ValidationError

from .config.map_config import MapGeneratorConfig
from .core.heightmap_generator import GeneratorKind
from .core.interpolation import Interpolation
from .core.noise import NoiseKind
from .errors import InvalidConfigurationError
from .map_generator import MapGenerator
from .utils.logging import configure_logging
from .utils.random import generate_seed

logger = structlog.get_logger()


def _existing_file(value: str) -> Path:
    path = Path(value)
    if not path.is_file():
        raise argparse.ArgumentTypeError(f"{value} is not a valid filename")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-mapgen",
        description="Generate a shaded, colored terrain map",
    )
    parser.add_argument("-c", "--config", type=_existing_file, metavar="FILE", help="config file")

    seed_group = parser.add_mutually_exclusive_group()
    seed_group.add_argument("-s", "--seed", type=int, help="seed used to produce randomness")
    seed_group.add_argument("-r", "--random-seed", action="store_true", help="use a random seed")

    parser.add_argument(
        "-g", "--generator", choices=[g.value for g in GeneratorKind], help="generator function"
    )
    parser.add_argument("-n", "--noise", choices=[n.value for n in NoiseKind], help="noise type")
    parser.add_argument(
        "-i", "--interpolation",
        choices=[i.value for i in Interpolation],
        help="interpolation method",
    )
    parser.add_argument("--width", type=int, help="map width in pixels")
    parser.add_argument("--height", type=int, help="map height in pixels")
    parser.add_argument("-o", "--output", metavar="FILE", help="generated file name")
    parser.add_argument(
        "--write-config",
        action="store_true",
        help=argparse.SUPPRESS,
    )
    return parser


def build_config(args: argparse.Namespace) -> MapGeneratorConfig:
    """Resolve command line arguments into a map config."""
    seed = generate_seed() if args.random_seed else args.seed

    if args.config is not None:
        config = MapGeneratorConfig.read(args.config)
        updates = {"seed": seed, "output": args.output, "width": args.width, "height": args.height}
        for name, value in updates.items():
            if value is not None:
                setattr(config, name, value)
        return config

    common = {
        "width": args.width,
        "height": args.height,
        "output": args.output,
        "seed": seed,
    }
    common = {k: v for k, v in common.items() if v is not None}

    if args.generator in (None, GeneratorKind.FRACTAL.value):
        return MapGeneratorConfig.fractal_defaults(
            noise=args.noise, interpolation=args.interpolation, **common
        )

    return MapGeneratorConfig(generator=args.generator, **common)


def save_image(pixels, path: str) -> None:
    """Write an RGB buffer; the format follows the file extension."""
    Image.fromarray(pixels).save(path)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None and (args.generator or args.noise or args.interpolation):
        parser.error("--config cannot be combined with --generator, --noise or --interpolation")

    configure_logging()

    try:
        config = build_config(args)
    except (InvalidConfigurationError, ValidationError) as e:
        parser.error(str(e))

    if args.write_config:
        config.write(config.output + ".json")

    print(f"Seed used: {config.seed}")

    pixels = MapGenerator(config).run()
    save_image(pixels, config.output)
    logger.info("Saved map", path=config.output, width=config.width, height=config.height)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
