"""Map View Domain Layer.

This package contains the core logic organized by bounded contexts:
- skyline: Elevation maps, viewing angles, banded occlusion silhouettes
"""

from domain import skyline

__all__ = ["skyline"]
