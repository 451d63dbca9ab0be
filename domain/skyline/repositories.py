"""Domain Port(s) for Map I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from .value_objects import ElevationMap


class MapRepository(Protocol):
    """Port for obtaining elevation maps from external sources.

    Implementations live in infrastructure (CSV text, GeoTIFF).
    """

    def load_map(self, file_path: Path | str) -> ElevationMap:
        """Load a map and return it as a flat ElevationMap."""
        ...
