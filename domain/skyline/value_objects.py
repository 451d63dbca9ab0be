"""Skyline Bounded Context - Value Objects.

Immutable data structures for the elevation map, its summary record, the
resolution quantizer and the rendered window matrix.
All validation and clamping occurs at construction time via Pydantic.
"""

from __future__ import annotations

import math
from bisect import bisect_left
from collections.abc import Sized
from typing import Any, Final

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

# ---------------------------------------------------------------------------
# Configuration Constants
# ---------------------------------------------------------------------------
MIN_WIDTH: Final[int] = 2
MIN_RESOLUTION: Final[int] = 3
MAX_RESOLUTION: Final[int] = 10000
DEFAULT_RESOLUTION: Final[int] = 10  # initial resolution of a new viewer
DEFAULT_VOID: Final[float] = 0.0  # substitute for void cells


def is_void(cell: Any) -> bool:
    """Return True for cells that mark a missing value.

    None, blank strings, NaN and zero-length entries such as [] or () are void.
    """
    if cell is None:
        return True
    if isinstance(cell, str):
        return not cell.strip()
    if isinstance(cell, Sized) and not isinstance(cell, np.ndarray):
        return len(cell) == 0
    try:
        return math.isnan(cell)
    except TypeError:
        return False


def _cell_value(cell: Any) -> float:
    if is_void(cell):
        return np.nan
    try:
        return float(cell)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Not a numeric map cell: {cell!r}") from e


# ---------------------------------------------------------------------------
# MapInfo
# ---------------------------------------------------------------------------
class MapInfo(BaseModel):
    """Bounding-box summary returned when a map is loaded (Value Object).

    Serialized field names (by alias) are the external contract:
    length, width, height, xMin, xMax, yMin, yMax.
    """

    length: int = Field(ge=0)
    width: int = Field(ge=MIN_WIDTH)
    height: int = Field(ge=0)
    x_min: int = Field(default=0, alias="xMin")
    x_max: int = Field(alias="xMax")
    y_min: int = Field(default=0, alias="yMin")
    y_max: int = Field(alias="yMax")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def as_dict(self) -> dict[str, int]:
        """Return the summary keyed by the external field names."""
        return self.model_dump(by_alias=True)

    def __str__(self) -> str:
        return " ".join(f"{k} {v}" for k, v in self.as_dict().items())


# ---------------------------------------------------------------------------
# ElevationMap
# ---------------------------------------------------------------------------
class ElevationMap(BaseModel):
    """Flat row-major elevation grid (Value Object).

    Void cells are stored as NaN. The cell array is an owned, read-only
    copy; a reload replaces the whole object.

    Invariants:
        - width >= MIN_WIDTH (smaller values are clamped up)
        - height == ceil(len(cells) / width)
    """

    cells: NDArray[np.float64]
    width: int = MIN_WIDTH

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("width", mode="before")
    @classmethod
    def clamp_width(cls, value: Any) -> int:
        width = int(value)
        return width if width >= MIN_WIDTH else MIN_WIDTH

    @field_validator("cells", mode="before")
    @classmethod
    def normalize_cells(cls, value: Any) -> NDArray[np.float64]:
        if isinstance(value, np.ndarray):
            data = np.array(value, dtype=np.float64, copy=True).ravel()
        else:
            data = np.array([_cell_value(cell) for cell in value], dtype=np.float64)
        data.flags.writeable = False
        return data

    @property
    def length(self) -> int:
        return int(self.cells.size)

    @property
    def height(self) -> int:
        # Ceiling division: a partial last row still counts
        return -(-self.length // self.width)

    @property
    def void_ratio(self) -> float:
        """Fraction of void cells (0.0 for an empty map)."""
        if not self.length:
            return 0.0
        return float(np.isnan(self.cells).mean())

    def info(self) -> MapInfo:
        return MapInfo(
            length=self.length,
            width=self.width,
            height=self.height,
            x_min=0,
            x_max=self.width - 1,
            y_min=0,
            y_max=self.height - 1,
        )

    def value_at(self, x: int, y: int) -> float | None:
        """Return the cell at flat index x + width*y, or None if void/outside."""
        index = int(x) + self.width * int(y)
        if index < 0 or index >= self.length:
            return None
        value = float(self.cells[index])
        return None if math.isnan(value) else value


# ---------------------------------------------------------------------------
# ResolutionQuantizer
# ---------------------------------------------------------------------------
class ResolutionQuantizer(BaseModel):
    """Number of elevation-angle bands and the derived rank classifier.

    threshold[j] = (res - j) * pi / res for j = 0..res, strictly decreasing
    from pi to 0. Ranks are reversed: rank 0 is the steepest band.

    Invariants:
        - MIN_RESOLUTION <= resolution <= MAX_RESOLUTION (clamped)
        - classify(v) in [0, resolution - 1] for every v
        - ties fall into the band below (strict > comparisons)
    """

    resolution: int = DEFAULT_RESOLUTION

    model_config = ConfigDict(frozen=True)

    _thresholds: tuple[float, ...] = PrivateAttr()
    _ascending: list[float] = PrivateAttr()

    @field_validator("resolution", mode="before")
    @classmethod
    def clamp_resolution(cls, value: Any) -> int:
        value = float(value)
        if math.isnan(value):
            raise ValueError("Resolution must be a number, got NaN")
        value = min(max(value, MIN_RESOLUTION), MAX_RESOLUTION)
        return int(value)

    def model_post_init(self, __context: Any) -> None:
        res = self.resolution
        self._thresholds = tuple((res - j) / res * math.pi for j in range(res + 1))
        # threshold[res-1] .. threshold[1], ascending, for bisection
        self._ascending = list(reversed(self._thresholds[1:res]))

    @property
    def thresholds(self) -> tuple[float, ...]:
        return self._thresholds

    @property
    def max_rank(self) -> int:
        return self.resolution - 1

    def classify(self, angle: float) -> int:
        """Map an angle in [0, pi] to its rank.

        Equivalent to the comparison chain "v > threshold[1] -> 0,
        v > threshold[2] -> 1, ..., otherwise res - 1".
        """
        return self.max_rank - bisect_left(self._ascending, angle)


# ---------------------------------------------------------------------------
# ScanRegion
# ---------------------------------------------------------------------------
class ScanRegion(BaseModel):
    """Rectangular region between two corners, walked inclusively (Value Object).

    Walk direction on each axis follows the sign of (corner2 - corner1).
    """

    x1: int
    y1: int
    x2: int
    y2: int

    model_config = ConfigDict(frozen=True)

    @property
    def step_x(self) -> int:
        return 1 if self.x2 >= self.x1 else -1

    @property
    def step_y(self) -> int:
        return 1 if self.y2 >= self.y1 else -1

    @property
    def xs(self) -> range:
        return range(self.x1, self.x2 + self.step_x, self.step_x)

    @property
    def ys(self) -> range:
        return range(self.y1, self.y2 + self.step_y, self.step_y)

    @property
    def is_single_cell(self) -> bool:
        return self.x1 == self.x2 and self.y1 == self.y2


# ---------------------------------------------------------------------------
# WindowMatrix
# ---------------------------------------------------------------------------
class WindowMatrix(BaseModel):
    """Banded 0/1 visibility matrix (Value Object).

    rows[0] is rank 0 (most prominent), rows[-1] is rank res-1. Columns keep
    the lateral sampling order of the scan.
    """

    rows: tuple[tuple[int, ...], ...]

    model_config = ConfigDict(frozen=True)

    @field_validator("rows", mode="before")
    @classmethod
    def coerce_rows(cls, value: Any) -> tuple[tuple[int, ...], ...]:
        if isinstance(value, np.ndarray):
            return tuple(tuple(int(v) for v in row) for row in value.tolist())
        return value

    @property
    def resolution(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def lines(self) -> list[str]:
        """Return each row as a string of 0/1 markers."""
        return ["".join(str(v) for v in row) for row in self.rows]

    def to_text(self) -> str:
        """Return rows joined by newlines, rank 0 first."""
        return "\n".join(self.lines())

    def to_array(self) -> NDArray[np.uint8]:
        return np.array(self.rows, dtype=np.uint8).reshape(self.resolution, self.width)

