"""
Elevation to color mapping.

A ColorRamp is an ordered list of (elevation, color) breakpoints. Lookups
between two breakpoints blend their colors linearly; lookups outside the
ramp clamp to the first or last color.
"""

from bisect import bisect_left
from typing import Iterable, List, Optional, Tuple

import numpy as np

from ..core.heightmap import Heightmap
from ..errors import EmptyColorRampError, InvalidConfigurationError
from .color import Color, lerp_color

ColorStep = Tuple[float, Color]


class ColorRamp:
    """Sorted (elevation, color) breakpoints with interpolated lookup."""

    def __init__(self, steps: Optional[Iterable[ColorStep]] = None):
        self._elevations: List[float] = []
        self._colors: List[Color] = []

        for elevation, color in steps or ():
            self.add_step(elevation, color)

    def __len__(self) -> int:
        return len(self._elevations)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ColorRamp):
            return NotImplemented
        return self.steps() == other.steps()

    def __repr__(self) -> str:
        return f"ColorRamp({self.steps()!r})"

    def steps(self) -> List[ColorStep]:
        return list(zip(self._elevations, self._colors))

    def add_step(self, elevation: float, color: Color) -> None:
        """
        Insert a breakpoint, keeping the ramp sorted.

        The step goes before the first existing step whose elevation is
        greater than or equal to ``elevation``, so among equal elevations the
        most recently added one comes first.
        """
        elevation = float(elevation)
        position = bisect_left(self._elevations, elevation)
        self._elevations.insert(position, elevation)
        self._colors.insert(position, Color.of(*color))

    def get(self, elevation: float) -> Color:
        """
        Color for an elevation.

        Args:
            elevation: Query elevation

        Returns:
            First color below the ramp, last color at or above its top,
            otherwise the blend of the two surrounding steps
        """
        if not self._elevations:
            raise EmptyColorRampError("Cannot look up a color in an empty ramp")

        if elevation < self._elevations[0]:
            return self._colors[0]
        if elevation >= self._elevations[-1]:
            return self._colors[-1]

        i = bisect_left(self._elevations, elevation)
        if i == 0:
            return self._colors[0]

        e0, e1 = self._elevations[i - 1], self._elevations[i]
        t = (elevation - e0) / (e1 - e0)
        return lerp_color(self._colors[i - 1], self._colors[i], t)

    def apply_on(self, hmap: Heightmap) -> np.ndarray:
        """
        Color every cell of a heightmap.

        Returns:
            uint8 array of shape (height, width, 3)
        """
        if not self._elevations:
            raise EmptyColorRampError("Cannot apply an empty ramp")

        elevations = np.asarray(self._elevations, dtype=np.float64)
        colors = np.asarray(self._colors, dtype=np.float64)
        values = hmap.as_array()

        index = np.searchsorted(elevations, values, side="left")
        upper = np.clip(index, 1, len(elevations) - 1)
        lower = upper - 1

        if len(elevations) > 1:
            e0 = elevations[lower]
            e1 = elevations[upper]
            with np.errstate(divide="ignore", invalid="ignore"):
                t = ((values - e0) / (e1 - e0))[..., np.newaxis]
            blended = np.floor((1.0 - t) * colors[lower] + t * colors[upper] + 0.5)
        else:
            blended = np.broadcast_to(colors[0], values.shape + (3,))

        pixels = np.where((index == 0)[..., np.newaxis], colors[0], blended)
        pixels = np.where((values >= elevations[-1])[..., np.newaxis], colors[-1], pixels)

        return pixels.astype(np.uint8)

    def to_text(self) -> List[str]:
        """Serialize steps as ``"<elevation> <r> <g> <b>"`` lines."""
        return [
            f"{elevation:.8f} {color.red:>3} {color.green:>3} {color.blue:>3}"
            for elevation, color in self.steps()
        ]

    @classmethod
    def from_text(cls, lines: Iterable[str]) -> "ColorRamp":
        ramp = cls()
        for line in lines:
            parts = str(line).split()
            if len(parts) != 4:
                raise InvalidConfigurationError(
                    f"Expected 'elevation red green blue', got {line!r}"
                )
            try:
                elevation = float(parts[0])
            except ValueError as e:
                raise InvalidConfigurationError(f"Invalid ramp elevation in {line!r}") from e
            ramp.add_step(elevation, Color.parse(" ".join(parts[1:])))
        return ramp


def default_ramp() -> ColorRamp:
    """Land and water palette with the shoreline at 0.5."""
    ramp = ColorRamp()

    ramp.add_step(0.000, Color(2, 43, 68))  # deep water
    ramp.add_step(0.250, Color(9, 62, 92))  # water
    ramp.add_step(0.490, Color(17, 82, 112))  # shallow water
    ramp.add_step(0.500, Color(69, 108, 118))  # shore
    ramp.add_step(0.510, Color(42, 102, 41))  # grass
    ramp.add_step(0.750, Color(115, 128, 77))  # veld
    ramp.add_step(0.850, Color(153, 143, 92))  # tundra
    ramp.add_step(0.950, Color(179, 179, 179))  # rocks
    ramp.add_step(1.000, Color(255, 255, 255))  # snow

    return ramp
