"""
Rectangular elevation grid.

Cells are stored as a flat, row-major float64 NumPy array; cell (x, y) lives
at index ``y * width + x``. Dimensions never change after construction,
only cell values do (normalize/flatten). Cropping produces a new Heightmap.
"""

from typing import Iterable, Iterator, Optional, Tuple

import numpy as np
import structlog

logger = structlog.get_logger()


class HeightmapOutOfBoundsError(IndexError):
    """Cell access or sub-region extraction outside the grid."""


class Heightmap:
    """Owned width x height grid of elevations."""

    def __init__(self, width: int, height: int, data: Optional[Iterable[float]] = None):
        """
        Initialize the heightmap.

        Args:
            width: Number of columns, must be positive
            height: Number of rows, must be positive
            data: Optional row-major cell values, width * height of them.
                  Cells default to 0.0.
        """
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Heightmap dimensions must be positive, got {width}x{height}")

        if data is None:
            cells = np.zeros(width * height, dtype=np.float64)
        else:
            cells = np.array(data, dtype=np.float64).ravel()
            if cells.size != width * height:
                raise ValueError(
                    f"Expected {width * height} cells for {width}x{height}, got {cells.size}"
                )

        self._width = width
        self._height = height
        self._data = cells

    @classmethod
    def from_iter(cls, width: int, height: int, values: Iterable[float]) -> "Heightmap":
        return cls(width, height, np.fromiter(values, dtype=np.float64))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __len__(self) -> int:
        return self._data.size

    def __repr__(self) -> str:
        return f"Heightmap(width={self._width}, height={self._height})"

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise HeightmapOutOfBoundsError(
                f"Cell ({x}, {y}) out of bounds for {self._width}x{self._height} heightmap"
            )
        return y * self._width + x

    def get(self, x: int, y: int) -> float:
        return float(self._data[self._index(x, y)])

    def set(self, x: int, y: int, value: float) -> None:
        self._data[self._index(x, y)] = value

    def heights(self) -> Iterator[float]:
        """Iterate cell values in row-major order."""
        return (float(v) for v in self._data)

    def as_array(self) -> np.ndarray:
        """Read-only (height, width) view of the cells."""
        view = self._data.reshape(self._height, self._width).view()
        view.setflags(write=False)
        return view

    def minmax(self) -> Optional[Tuple[float, float]]:
        """Return (min, max) over all cells, or None when there are no cells."""
        if self._data.size == 0:
            return None
        return float(self._data.min()), float(self._data.max())

    def normalize(self) -> None:
        """
        Rescale cells in place so they span [0, 1].

        A constant map has no range to stretch; its values are left unchanged.
        """
        bounds = self.minmax()
        if bounds is None:
            return

        low, high = bounds
        if high == low:
            logger.warning(
                "Heightmap has constant elevation, skipping normalization",
                value=low,
                width=self._width,
                height=self._height,
            )
            return

        self._data = (self._data - low) / (high - low)

    def flatten(self) -> None:
        """
        Push cells away from 0.5 towards the extremes.

        h(x) = (x - 0.5)^2 * (-2 if x < 0.5 else 2) + 0.5, which fixes 0, 0.5
        and 1 and widens the plateaus on both sides of the shoreline.
        """
        offset = self._data - 0.5
        sign = np.where(self._data < 0.5, -2.0, 2.0)
        self._data = offset * offset * sign + 0.5

    def submap(self, x: int, y: int, width: int, height: int) -> "Heightmap":
        """
        Copy a rectangular region into a new heightmap.

        Args:
            x: Left column of the region
            y: Top row of the region
            width: Region width
            height: Region height

        Returns:
            New Heightmap holding a row-major copy of the region
        """
        if x < 0 or x + width > self._width:
            raise HeightmapOutOfBoundsError(
                f"Width out of bounds: {x} + {width} > {self._width}"
            )
        if y < 0 or y + height > self._height:
            raise HeightmapOutOfBoundsError(
                f"Height out of bounds: {y} + {height} > {self._height}"
            )

        grid = self._data.reshape(self._height, self._width)
        return Heightmap(width, height, grid[y:y + height, x:x + width].copy())
