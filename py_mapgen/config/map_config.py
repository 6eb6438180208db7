"""
Map generation configuration.

MapGeneratorConfig is the fully resolved record the pipeline runs from.
Optional generator parameters fall back to documented defaults through the
``resolved_*`` accessors. Colors, vectors and ramp steps persist as short
text strings ("255 255 204", "-1.0 -1.0 0.0", "0.50000000  69 108 118") so saved
configs stay readable and editable.
"""

from pathlib import Path
from typing import Annotated, Any, List, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, PlainValidator, field_validator

from ..core.heightmap_generator import GeneratorKind
from ..core.interpolation import Interpolation
from ..core.noise import NoiseKind
from ..errors import InvalidConfigurationError
from ..render.color import Color
from ..render.color_ramp import ColorRamp, default_ramp
from ..render.shading import Vec3
from ..utils.random import MAX_SEED, generate_seed
from .settings import settings

logger = structlog.get_logger()

DEFAULT_NOISE = NoiseKind.GRADIENT
DEFAULT_SCALE = 2.0
DEFAULT_OCTAVE = 10
DEFAULT_LACUNARITY = 2.0
DEFAULT_PERSISTENCE = 0.5
DEFAULT_INTERPOLATION = Interpolation.CUBIC


def default_light_position() -> Vec3:
    return Vec3(-1.0, -1.0, 0.0)


def default_light() -> Color:
    return Color(0xFF, 0xFF, 0xCC)


def default_dark() -> Color:
    return Color(0x33, 0x11, 0x33)


def _parse_color(value: Any) -> Color:
    if isinstance(value, str):
        return Color.parse(value)
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return Color.of(*value)
    raise InvalidConfigurationError(f"Cannot read a color from {value!r}")


def _parse_vec3(value: Any) -> Vec3:
    if isinstance(value, str):
        return Vec3.parse(value)
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return Vec3(*(float(v) for v in value))
    raise InvalidConfigurationError(f"Cannot read a vector from {value!r}")


def _parse_ramp(value: Any) -> ColorRamp:
    if isinstance(value, ColorRamp):
        ramp = value
    elif isinstance(value, (list, tuple)):
        ramp = ColorRamp()
        for step in value:
            if isinstance(step, str):
                ramp.add_step(*_split_step(step))
            elif isinstance(step, (list, tuple)) and len(step) == 2:
                ramp.add_step(float(step[0]), _parse_color(step[1]))
            else:
                raise InvalidConfigurationError(f"Cannot read a ramp step from {step!r}")
    else:
        raise InvalidConfigurationError(f"Cannot read a color ramp from {value!r}")

    if len(ramp) == 0:
        raise InvalidConfigurationError("Color ramp needs at least one step")
    return ramp


def _split_step(text: str):
    return ColorRamp.from_text([text]).steps()[0]


ColorField = Annotated[Color, PlainValidator(_parse_color), PlainSerializer(str, return_type=str)]
Vec3Field = Annotated[Vec3, PlainValidator(_parse_vec3), PlainSerializer(str, return_type=str)]
RampField = Annotated[
    ColorRamp,
    PlainValidator(_parse_ramp),
    PlainSerializer(lambda ramp: ramp.to_text(), return_type=List[str]),
]


class MapGeneratorConfig(BaseModel):
    """Everything needed to generate one map."""

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    generator: GeneratorKind = Field(..., description="Terrain generator")
    noise: Optional[NoiseKind] = Field(default=None, description="Noise kernel (fractal only)")
    scale: Optional[float] = Field(default=None, gt=0, description="Fractal sampling scale")
    octave: Optional[int] = Field(default=None, ge=0, description="Fractal octave count")
    lacunarity: Optional[float] = Field(default=None, description="Per-octave frequency factor")
    persistence: Optional[float] = Field(default=None, description="Per-octave amplitude factor")
    interpolation: Optional[Interpolation] = Field(default=None, description="Noise easing curve")

    width: int = Field(default_factory=lambda: settings.default_map_width, gt=0)
    height: int = Field(default_factory=lambda: settings.default_map_height, gt=0)

    ramp: RampField = Field(default_factory=default_ramp, description="Elevation color ramp")
    light_position: Vec3Field = Field(default_factory=default_light_position)
    light: ColorField = Field(default_factory=default_light)
    dark: ColorField = Field(default_factory=default_dark)

    seed: int = Field(default_factory=generate_seed, ge=0, le=MAX_SEED)
    output: str = Field(default_factory=lambda: settings.default_output, exclude=True)

    @field_validator("width", "height")
    @classmethod
    def _check_map_size(cls, value: int) -> int:
        if value > settings.max_map_size:
            raise InvalidConfigurationError(
                f"Map dimension {value} exceeds the maximum of {settings.max_map_size}"
            )
        return value

    def resolved_noise(self) -> NoiseKind:
        return self.noise if self.noise is not None else DEFAULT_NOISE

    def resolved_scale(self) -> float:
        return self.scale if self.scale is not None else DEFAULT_SCALE

    def resolved_octave(self) -> int:
        return self.octave if self.octave is not None else DEFAULT_OCTAVE

    def resolved_lacunarity(self) -> float:
        return self.lacunarity if self.lacunarity is not None else DEFAULT_LACUNARITY

    def resolved_persistence(self) -> float:
        return self.persistence if self.persistence is not None else DEFAULT_PERSISTENCE

    def resolved_interpolation(self) -> Interpolation:
        return self.interpolation if self.interpolation is not None else DEFAULT_INTERPOLATION

    @classmethod
    def fractal_defaults(cls, **overrides) -> "MapGeneratorConfig":
        """Fractal config with every optional parameter filled in."""
        values = dict(
            generator=GeneratorKind.FRACTAL,
            noise=DEFAULT_NOISE,
            scale=DEFAULT_SCALE,
            octave=DEFAULT_OCTAVE,
            lacunarity=DEFAULT_LACUNARITY,
            persistence=DEFAULT_PERSISTENCE,
            interpolation=DEFAULT_INTERPOLATION,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @classmethod
    def read(cls, path: Union[str, Path]) -> "MapGeneratorConfig":
        """Load a config saved with ``write``."""
        path = Path(path)
        logger.info("Reading map config", path=str(path))
        return cls.model_validate_json(path.read_text(encoding="utf-8"))

    def write(self, path: Union[str, Path]) -> None:
        """Save the config as JSON; the output path is not stored."""
        path = Path(path)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Wrote map config", path=str(path))
