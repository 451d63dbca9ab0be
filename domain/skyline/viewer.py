"""Skyline Bounded Context - MapViewer.

Facade that owns one MapStore and one ResolutionQuantizer. Each instance is
an independent configuration; concurrent callers should each hold their own
viewer rather than share one across a load/set_resolution boundary.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from domain.skyline import services
from domain.skyline.directions import Direction, parse_command, view_region
from domain.skyline.map_store import MapStore
from domain.skyline.value_objects import (
    DEFAULT_RESOLUTION,
    DEFAULT_VOID,
    ElevationMap,
    MapInfo,
    ResolutionQuantizer,
    WindowMatrix,
)

logger = logging.getLogger(__name__)


class MapViewer:
    """Silhouette viewer over a numeric elevation map.

    Example:
        >>> viewer = MapViewer(resolution=10)
        >>> viewer.load([0, 5, 5, 5, 0, 9, 5, 5, 4, 2, 8, 9], width=6).height
        2
        >>> viewer.north(2, 1).resolution
        10
    """

    def __init__(self, resolution: int = DEFAULT_RESOLUTION) -> None:
        self.store = MapStore()
        self.quantizer = ResolutionQuantizer(resolution=resolution)
        self._info: MapInfo | None = None

    @property
    def resolution(self) -> int:
        return self.quantizer.resolution

    @property
    def info(self) -> MapInfo | None:
        """Summary of the loaded map, None before the first load."""
        return self._info

    # -----------------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------------
    def load(self, cells: Iterable[Any] | ElevationMap, width: int = 2) -> MapInfo:
        self._info = self.store.load(cells, width)
        return self._info

    def set_resolution(self, resolution: int) -> int:
        """Replace the quantizer and return the effective (clamped) resolution.

        Ranks computed under a previous resolution must not be mixed with
        ranks computed afterwards.
        """
        self.quantizer = ResolutionQuantizer(resolution=resolution)
        logger.debug("Resolution set to %d", self.quantizer.resolution)
        return self.quantizer.resolution

    # -----------------------------------------------------------------------
    # Point and angle queries
    # -----------------------------------------------------------------------
    def get_map_point(self, x: int, y: int, void: float = DEFAULT_VOID) -> float:
        return self.store.get_map_point(x, y, void)

    def angle(
        self,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
        void: float = DEFAULT_VOID,
        z0: float | None = None,
    ) -> float:
        return services.elevation_angle(self.store, x0, y0, x1, y1, void, z0)

    def rank(
        self,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
        void: float = DEFAULT_VOID,
        z0: float | None = None,
    ) -> int:
        return services.indexed_elevation(
            self.store, self.quantizer, x0, y0, x1, y1, void, z0
        )

    # -----------------------------------------------------------------------
    # Area scans and compositing
    # -----------------------------------------------------------------------
    def scan_vertical(
        self,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        void: float = DEFAULT_VOID,
        z0: float | None = None,
    ) -> NDArray[np.int64]:
        return services.scan_vertical(
            self.store, self.quantizer, x0, y0, x1, y1, x2, y2, void, z0
        )

    def scan_horizontal(
        self,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
        x2: int,
        y2: int,
        void: float = DEFAULT_VOID,
        z0: float | None = None,
    ) -> NDArray[np.int64]:
        return services.scan_horizontal(
            self.store, self.quantizer, x0, y0, x1, y1, x2, y2, void, z0
        )

    def window(self, grid: ArrayLike) -> WindowMatrix:
        return services.render_window(grid, self.quantizer)

    # -----------------------------------------------------------------------
    # Directional views
    # -----------------------------------------------------------------------
    def view(
        self,
        direction: Direction | str,
        x: int,
        y: int,
        z: float | None = None,
        void: float = DEFAULT_VOID,
    ) -> WindowMatrix:
        """Render the silhouette seen from (x, y) facing `direction`."""
        order, region = view_region(
            direction, x, y, self.store.width, self.store.height
        )
        grid = services.scan_region(
            self.store, self.quantizer, x, y, region, order, void, z
        )
        return self.window(grid)

    def north(
        self, x: int, y: int, z: float | None = None, void: float = DEFAULT_VOID
    ) -> WindowMatrix:
        return self.view(Direction.NORTH, x, y, z, void)

    def south(
        self, x: int, y: int, z: float | None = None, void: float = DEFAULT_VOID
    ) -> WindowMatrix:
        return self.view(Direction.SOUTH, x, y, z, void)

    def east(
        self, x: int, y: int, z: float | None = None, void: float = DEFAULT_VOID
    ) -> WindowMatrix:
        return self.view(Direction.EAST, x, y, z, void)

    def west(
        self, x: int, y: int, z: float | None = None, void: float = DEFAULT_VOID
    ) -> WindowMatrix:
        return self.view(Direction.WEST, x, y, z, void)

    def compose(self, command: str) -> list[WindowMatrix]:
        """Render every view of a composition command, in order."""
        calls = parse_command(command)
        logger.debug("Composing %d view(s) from %r", len(calls), command)
        return [
            self.view(call.direction, call.x, call.y, call.z, call.void)
            for call in calls
        ]
