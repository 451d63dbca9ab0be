"""Skyline Bounded Context - Domain Services.

Pure domain logic for the silhouette pipeline:
elevation angle -> rank -> area grid -> occlusion window.
NO I/O operations - map sources live under `src/infrastructure/skyline/`.
"""

from __future__ import annotations

import logging
import math
from enum import Enum

import numpy as np
from numpy.typing import ArrayLike, NDArray

from domain.skyline.errors import (
    DegenerateGeometryError,
    DegenerateRegionError,
    RankRangeError,
)
from domain.skyline.map_store import MapStore
from domain.skyline.numerics import compensated_sum
from domain.skyline.value_objects import (
    DEFAULT_VOID,
    ResolutionQuantizer,
    ScanRegion,
    WindowMatrix,
)

logger = logging.getLogger(__name__)

HALF_PI = math.pi / 2.0


class ScanOrder(str, Enum):
    """Which axis of a region becomes the rows of the scan grid."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


# ---------------------------------------------------------------------------
# Elevation Angle
# ---------------------------------------------------------------------------
def elevation_angle(
    store: MapStore,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    void: float = DEFAULT_VOID,
    z0: float | None = None,
) -> float:
    """Return the viewing angle from (x0, y0) to (x1, y1), offset into [0, pi].

    0 looks straight down, pi/2 is level, pi looks straight up.

    Args:
        store: Map to read elevations from
        x0, y0: Observer point
        x1, y1: Target point
        void: Substitute for void/missing cells
        z0: Observer elevation; read from the map at (x0, y0) when None

    Raises:
        DegenerateGeometryError: If observer and target coincide
        EmptyMapError: If no map is loaded
    """
    v0 = float(store.get_map_point(x0, y0, void)) if z0 is None else float(z0)
    v1 = float(store.get_map_point(x1, y1, void))

    distance = math.hypot(float(x1) - float(x0), float(y1) - float(y0))
    if distance == 0:
        raise DegenerateGeometryError((x0, y0), (x1, y1))

    return compensated_sum([HALF_PI, math.atan((v1 - v0) / distance)])


def indexed_elevation(
    store: MapStore,
    quantizer: ResolutionQuantizer,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    void: float = DEFAULT_VOID,
    z0: float | None = None,
) -> int:
    """Return the reversed rank of the viewing angle (0 = most elevated)."""
    return quantizer.classify(elevation_angle(store, x0, y0, x1, y1, void, z0))


# ---------------------------------------------------------------------------
# Area Scanning
# ---------------------------------------------------------------------------
def checked_region(x1: int, y1: int, x2: int, y2: int) -> ScanRegion:
    """Build a ScanRegion, rejecting zero span on a single axis.

    A region collapsed to one cell on both axes is accepted and yields a
    1x1 grid.
    """
    region = ScanRegion(x1=x1, y1=y1, x2=x2, y2=y2)
    if region.is_single_cell:
        return region
    if region.x1 == region.x2:
        raise DegenerateRegionError((x1, y1), (x2, y2), "zero span along x")
    if region.y1 == region.y2:
        raise DegenerateRegionError((x1, y1), (x2, y2), "zero span along y")
    return region


def scan_region(
    store: MapStore,
    quantizer: ResolutionQuantizer,
    x0: int,
    y0: int,
    region: ScanRegion,
    order: ScanOrder | str,
    void: float = DEFAULT_VOID,
    z0: float | None = None,
) -> NDArray[np.int64]:
    """Walk a region in the given axis order and return the grid of ranks.

    Rows follow the outer (primary) axis, columns the inner (lateral) axis.
    """
    order = ScanOrder(order)
    if order is ScanOrder.VERTICAL:
        cells = [
            [
                indexed_elevation(store, quantizer, x0, y0, x, y, void, z0)
                for x in region.xs
            ]
            for y in region.ys
        ]
    else:
        cells = [
            [
                indexed_elevation(store, quantizer, x0, y0, x, y, void, z0)
                for y in region.ys
            ]
            for x in region.xs
        ]

    grid = np.array(cells, dtype=np.int64)
    logger.debug(
        "Scan: %s-major %dx%d grid from observer (%d, %d)",
        order.value,
        grid.shape[0],
        grid.shape[1],
        x0,
        y0,
    )
    return grid


def scan_vertical(
    store: MapStore,
    quantizer: ResolutionQuantizer,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    void: float = DEFAULT_VOID,
    z0: float | None = None,
) -> NDArray[np.int64]:
    """Rank grid with rows indexed by y (y1 -> y2) and columns by x (x1 -> x2).

    Used for north/south views.

    Raises:
        DegenerateRegionError: If x1 == x2 or y1 == y2 (but not both)
        DegenerateGeometryError: If the observer lies inside the region
    """
    region = checked_region(x1, y1, x2, y2)
    return scan_region(
        store, quantizer, x0, y0, region, ScanOrder.VERTICAL, void, z0
    )


def scan_horizontal(
    store: MapStore,
    quantizer: ResolutionQuantizer,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    void: float = DEFAULT_VOID,
    z0: float | None = None,
) -> NDArray[np.int64]:
    """Rank grid with rows indexed by x (x1 -> x2) and columns by y (y1 -> y2).

    Used for east/west views. Raises like scan_vertical.
    """
    region = checked_region(x1, y1, x2, y2)
    return scan_region(
        store, quantizer, x0, y0, region, ScanOrder.HORIZONTAL, void, z0
    )


# ---------------------------------------------------------------------------
# Occlusion Window
# ---------------------------------------------------------------------------
def render_window(grid: ArrayLike, quantizer: ResolutionQuantizer) -> WindowMatrix:
    """Composite a rank grid into the banded 0/1 window matrix.

    Row 0 of the grid is nearest to the observer. The nearest row marks its
    own rank in every column; each farther sample marks its rank only when
    strictly more prominent (lower rank) than every nearer sample in the same
    column. Equal or less prominent samples are occluded.

    Args:
        grid: h x w ranks in [0, resolution - 1]
        quantizer: Supplies the number of bands

    Returns:
        WindowMatrix with `resolution` rows of w markers, rank 0 first

    Raises:
        RankRangeError: For the first out-of-range cell in row-major order
    """
    ranks = np.asarray(grid, dtype=np.int64)
    if ranks.size == 0:
        ranks = ranks.reshape(0, 0)
    if ranks.ndim != 2:
        raise ValueError(f"Rank grid must be 2D, got {ranks.ndim}D")

    max_rank = quantizer.max_rank
    out_of_range = (ranks < 0) | (ranks > max_rank)
    if out_of_range.any():
        row, column = (int(i) for i in np.argwhere(out_of_range)[0])
        raise RankRangeError(column, row, int(ranks[row, column]), max_rank)

    height, width = ranks.shape
    matrix = np.zeros((quantizer.resolution, width), dtype=np.uint8)
    if height:
        columns = np.arange(width)
        best = ranks[0].copy()
        matrix[best, columns] = 1
        for row in ranks[1:]:
            visible = row < best
            matrix[row[visible], columns[visible]] = 1
            best = np.where(visible, row, best)

    return WindowMatrix(rows=matrix)
