"""Skyline Bounded Context - Map Store.

Owns the currently loaded ElevationMap and answers point queries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from domain.skyline.errors import EmptyMapError
from domain.skyline.value_objects import DEFAULT_VOID, ElevationMap, MapInfo

logger = logging.getLogger(__name__)

# Share of void cells above which a load is logged as a warning
HIGH_VOID_RATIO = 0.8


class MapStore:
    """Holder of one elevation map, replaced wholesale by each load.

    Example:
        >>> store = MapStore()
        >>> store.load([0, 5, 5, 5, 0, 9], width=3).as_dict()["height"]
        2
        >>> store.get_map_point(1, 0)
        5.0
    """

    def __init__(self) -> None:
        self._map: ElevationMap | None = None

    @property
    def map(self) -> ElevationMap | None:
        return self._map

    @property
    def width(self) -> int:
        if self._map is None:
            raise EmptyMapError()
        return self._map.width

    @property
    def height(self) -> int:
        if self._map is None:
            raise EmptyMapError()
        return self._map.height

    def load(self, cells: Iterable[Any] | ElevationMap, width: int = 2) -> MapInfo:
        """Replace the stored map and return its bounding-box summary.

        Args:
            cells: Flat row-major cell sequence (None/""/NaN mark void cells),
                or an already built ElevationMap (width is then ignored)
            width: Number of columns, clamped up to MIN_WIDTH

        Returns:
            MapInfo with length, width, height and the x/y extent
        """
        if isinstance(cells, ElevationMap):
            elevation_map = cells
        else:
            elevation_map = ElevationMap(cells=cells, width=width)
        self._map = elevation_map

        info = elevation_map.info()
        if elevation_map.void_ratio > HIGH_VOID_RATIO:
            logger.warning(
                "Map: %.1f%% void cells detected", elevation_map.void_ratio * 100.0
            )
        logger.debug(
            "Map: Loaded %d cells as %dx%d grid",
            info.length,
            info.width,
            info.height,
        )
        return info

    def get_map_point(self, x: int, y: int, void: float = DEFAULT_VOID) -> float:
        """Return the value at (x, y), substituting `void` for missing cells.

        The flat index is x + width*y; indices outside the sequence (negative
        included) and void cells both yield `void`.

        Raises:
            EmptyMapError: If no map, or an empty one, has been loaded
        """
        if self._map is None or self._map.length == 0:
            raise EmptyMapError()
        value = self._map.value_at(x, y)
        return void if value is None else value
