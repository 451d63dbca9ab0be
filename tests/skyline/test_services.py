"""Tests for skyline domain services: elevation angle, rank, area scans
and the occlusion window compositor.

Maps are built directly in the tests; no I/O.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from domain.skyline.errors import (
    DegenerateGeometryError,
    DegenerateRegionError,
    EmptyMapError,
    RankRangeError,
)
from domain.skyline.map_store import MapStore
from domain.skyline.services import (
    elevation_angle,
    indexed_elevation,
    ScanOrder,
    render_window,
    scan_horizontal,
    scan_region,
    scan_vertical,
)
from domain.skyline.value_objects import ResolutionQuantizer, ScanRegion
from tests.conftest import SAMPLE_WIDTH


def create_sample_store(cells: list[float]) -> MapStore:
    store = MapStore()
    store.load(cells, SAMPLE_WIDTH)
    return store


def create_flat_store(value: float = 3.0, width: int = 4, height: int = 4) -> MapStore:
    store = MapStore()
    store.load([value] * (width * height), width)
    return store


# ===========================================================================
# Elevation Angle
# ===========================================================================
def test_level_target_is_exactly_half_pi():
    store = create_flat_store()
    assert elevation_angle(store, 0, 0, 3, 2) == math.pi / 2


def test_angle_up_and_down(sample_cells):
    store = create_sample_store(sample_cells)
    # (0,0)=0 looking at (1,1)=5: upward
    up = elevation_angle(store, 0, 0, 1, 1)
    assert up == pytest.approx(math.pi / 2 + math.atan(5 / math.sqrt(2)))
    # (1,1)=5 looking at (0,0)=0: downward, mirrored around pi/2
    down = elevation_angle(store, 1, 1, 0, 0)
    assert up + down == pytest.approx(math.pi)


def test_observer_elevation_override(sample_cells):
    store = create_sample_store(sample_cells)
    # (1,0) holds 5; with z0=5 the target is level
    assert elevation_angle(store, 0, 0, 1, 0, z0=5) == math.pi / 2
    assert elevation_angle(store, 0, 0, 1, 0, z0=0) > math.pi / 2


def test_void_substitution_applies_to_target():
    store = MapStore()
    store.load([2, None, 2, 2], 2)
    assert elevation_angle(store, 0, 0, 1, 0, void=2) == math.pi / 2
    assert elevation_angle(store, 0, 0, 1, 0) < math.pi / 2


def test_target_outside_map_uses_void(sample_cells):
    store = create_sample_store(sample_cells)
    # observer (0,0) is 0; far outside target is void -> level
    assert elevation_angle(store, 0, 0, -3, -3) == math.pi / 2


@pytest.mark.parametrize("x0, y0", [(0, 0), (2, 2), (5, 4)])
def test_angle_always_within_zero_pi(sample_cells, x0, y0):
    store = create_sample_store(sample_cells)
    for x1 in range(-1, 7):
        for y1 in range(-1, 6):
            if (x1, y1) == (x0, y0):
                continue
            angle = elevation_angle(store, x0, y0, x1, y1, z0=-1000.0)
            assert 0.0 <= angle <= math.pi


def test_same_points_raise(sample_cells):
    store = create_sample_store(sample_cells)
    with pytest.raises(DegenerateGeometryError) as exc:
        elevation_angle(store, 2, 3, 2, 3)
    assert exc.value.observer == (2, 3)
    assert exc.value.target == (2, 3)


def test_angle_without_map_raises():
    with pytest.raises(EmptyMapError):
        elevation_angle(MapStore(), 0, 0, 1, 1)


# ===========================================================================
# Rank
# ===========================================================================
def test_rank_of_level_target_is_middle_band():
    store = create_flat_store()
    quantizer = ResolutionQuantizer(resolution=10)
    # pi/2 equals threshold[5] and falls into band 5
    assert indexed_elevation(store, quantizer, 0, 0, 1, 1) == 5


def test_rank_of_steep_target_is_zero(sample_cells):
    store = create_sample_store(sample_cells)
    quantizer = ResolutionQuantizer(resolution=10)
    assert indexed_elevation(store, quantizer, 0, 0, 1, 1) == 0


def test_rank_same_points_raise(sample_cells):
    store = create_sample_store(sample_cells)
    with pytest.raises(DegenerateGeometryError):
        indexed_elevation(store, ResolutionQuantizer(), 1, 1, 1, 1)


# ===========================================================================
# Area Scans
# ===========================================================================
def test_scan_single_cell_matches_rank(sample_cells):
    store = create_sample_store(sample_cells)
    quantizer = ResolutionQuantizer(resolution=10)
    grid = scan_vertical(store, quantizer, 0, 0, 1, 1, 1, 1)
    assert grid.shape == (1, 1)
    assert grid[0][0] == indexed_elevation(store, quantizer, 0, 0, 1, 1)


def test_scan_vertical_rows_follow_y(sample_cells):
    store = create_sample_store(sample_cells)
    quantizer = ResolutionQuantizer(resolution=10)
    grid = scan_vertical(store, quantizer, 0, 0, 1, 1, 3, 2)
    assert grid.tolist() == [[0, 1, 3], [1, 2, 4]]


def test_scan_horizontal_rows_follow_x(sample_cells):
    store = create_sample_store(sample_cells)
    quantizer = ResolutionQuantizer(resolution=10)
    grid = scan_horizontal(store, quantizer, 0, 0, 1, 1, 3, 2)
    assert grid.tolist() == [[0, 1], [1, 2], [3, 4]]


def test_scan_walks_backwards_when_corners_reversed(sample_cells):
    store = create_sample_store(sample_cells)
    quantizer = ResolutionQuantizer(resolution=10)
    grid = scan_vertical(store, quantizer, 0, 0, 3, 2, 1, 1)
    assert grid.tolist() == [[4, 2, 1], [3, 1, 0]]


def test_scan_region_accepts_order_by_value(sample_cells):
    store = create_sample_store(sample_cells)
    quantizer = ResolutionQuantizer(resolution=10)
    region = ScanRegion(x1=1, y1=1, x2=3, y2=2)

    by_member = scan_region(store, quantizer, 0, 0, region, ScanOrder.HORIZONTAL)
    by_value = scan_region(store, quantizer, 0, 0, region, "horizontal")

    assert by_value.tolist() == by_member.tolist() == [[0, 1], [1, 2], [3, 4]]


def test_scan_region_unknown_order_raises(sample_cells):
    store = create_sample_store(sample_cells)
    region = ScanRegion(x1=1, y1=1, x2=3, y2=2)
    with pytest.raises(ValueError, match="diagonal"):
        scan_region(store, ResolutionQuantizer(), 0, 0, region, "diagonal")


def test_scan_cells_match_individual_ranks(sample_cells):
    store = create_sample_store(sample_cells)
    quantizer = ResolutionQuantizer(resolution=17)
    grid = scan_horizontal(store, quantizer, 5, 0, 4, 4, 0, 1, void=2, z0=6)
    for i, x in enumerate(range(4, -1, -1)):
        for j, y in enumerate(range(4, 0, -1)):
            assert grid[i][j] == indexed_elevation(
                store, quantizer, 5, 0, x, y, void=2, z0=6
            )


@pytest.mark.parametrize("scan", [scan_vertical, scan_horizontal])
@pytest.mark.parametrize("corners", [(1, 1, 1, 3), (1, 1, 4, 1)])
def test_zero_span_on_one_axis_raises(sample_cells, scan, corners):
    store = create_sample_store(sample_cells)
    with pytest.raises(DegenerateRegionError):
        scan(store, ResolutionQuantizer(), 0, 0, *corners)


def test_observer_inside_region_raises(sample_cells):
    store = create_sample_store(sample_cells)
    with pytest.raises(DegenerateGeometryError):
        scan_vertical(store, ResolutionQuantizer(), 1, 1, 0, 0, 2, 2)


# ===========================================================================
# Occlusion Window
# ===========================================================================
def test_window_single_row_marks_each_column_once():
    quantizer = ResolutionQuantizer(resolution=5)
    matrix = render_window([[4, 0, 2, 2, 1]], quantizer)
    bits = matrix.to_array()
    assert bits.shape == (5, 5)
    assert bits.sum(axis=0).tolist() == [1, 1, 1, 1, 1]
    for column, rank in enumerate([4, 0, 2, 2, 1]):
        assert bits[rank, column] == 1


def test_window_occlusion_example():
    quantizer = ResolutionQuantizer(resolution=4)
    matrix = render_window([[2, 2], [1, 3], [0, 1]], quantizer)
    # Column 0 improves every row: 2 -> 1 -> 0
    # Column 1: 3 is hidden behind 2, then 1 beats 2
    assert matrix.lines() == ["10", "11", "11", "00"]


def test_window_equal_rank_farther_is_hidden():
    quantizer = ResolutionQuantizer(resolution=3)
    matrix = render_window([[1], [1], [2], [1]], quantizer)
    assert matrix.lines() == ["0", "1", "0"]


def test_window_accepts_numpy_grid():
    quantizer = ResolutionQuantizer(resolution=3)
    grid = np.array([[2, 1, 0], [0, 0, 0]])
    assert render_window(grid, quantizer).lines() == ["111", "010", "100"]


@pytest.mark.parametrize("bad", [-1, 10])
def test_window_rank_out_of_range_raises(bad):
    quantizer = ResolutionQuantizer(resolution=10)
    with pytest.raises(RankRangeError) as exc:
        render_window([[0, 1, 2], [3, bad, 4]], quantizer)
    assert exc.value.column == 1
    assert exc.value.row == 1
    assert exc.value.value == bad
    assert exc.value.max_rank == 9


def test_window_rank_out_of_range_in_nearest_row():
    quantizer = ResolutionQuantizer(resolution=3)
    with pytest.raises(RankRangeError) as exc:
        render_window([[0, 3]], quantizer)
    assert (exc.value.column, exc.value.row) == (1, 0)


def test_window_of_empty_grid():
    matrix = render_window([], ResolutionQuantizer(resolution=3))
    assert matrix.resolution == 3
    assert matrix.width == 0
