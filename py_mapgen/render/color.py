"""RGB color value type and channel-wise blending."""

import math
from typing import NamedTuple

from ..errors import InvalidConfigurationError


class Color(NamedTuple):
    """8-bit RGB color."""

    red: int
    green: int
    blue: int

    @classmethod
    def of(cls, red: int, green: int, blue: int) -> "Color":
        """Build a color, checking every channel is in 0..255."""
        channels = (int(red), int(green), int(blue))
        for channel in channels:
            if not 0 <= channel <= 255:
                raise InvalidConfigurationError(f"Color channel out of range 0-255: {channel}")
        return cls(*channels)

    @classmethod
    def parse(cls, text: str) -> "Color":
        """Parse the ``"r g b"`` text form."""
        parts = str(text).split()
        if len(parts) != 3:
            raise InvalidConfigurationError(f"Expected 'red green blue', got {text!r}")
        try:
            channels = [int(p) for p in parts]
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid color {text!r}: {e}") from e
        return cls.of(*channels)

    def __str__(self) -> str:
        return f"{self.red} {self.green} {self.blue}"


def _blend_channel(left: int, right: int, t: float) -> int:
    # Half rounds up
    return int(math.floor((1.0 - t) * left + t * right + 0.5))


def lerp_color(left: Color, right: Color, t: float) -> Color:
    """
    Blend two colors channel by channel.

    t below 0 gives ``left`` and t above 1 gives ``right``.
    """
    if t < 0.0:
        return left
    if t > 1.0:
        return right
    return Color(
        _blend_channel(left.red, right.red, t),
        _blend_channel(left.green, right.green, t),
        _blend_channel(left.blue, right.blue, t),
    )
