"""Root pytest configuration for all tests.

Provides the sample elevation map shared by domain and infrastructure tests.
"""

from __future__ import annotations

import pytest

# 6 x 5 sample map; the last cell (5, 4) is 0
SAMPLE_ROWS: list[list[float]] = [
    [0, 5, 5, 5, 0, 9],
    [5, 5, 4, 2, 8, 9],
    [4, 4, 3, 1, 9, 8],
    [3, 8, 2, 9, 3, 9],
    [2, 6, 1, 3, 2, 0],
]
SAMPLE_WIDTH = 6


@pytest.fixture
def sample_cells() -> list[float]:
    """Flat row-major cells of the sample map."""
    return [cell for row in SAMPLE_ROWS for cell in row]


@pytest.fixture
def sample_viewer(sample_cells):
    """MapViewer with the sample map loaded at resolution 10."""
    from domain.skyline.viewer import MapViewer

    viewer = MapViewer(resolution=10)
    viewer.load(sample_cells, SAMPLE_WIDTH)
    return viewer
