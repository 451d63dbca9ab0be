"""Tests for the GeoTIFF map reader with a fake rasterio dataset."""

from __future__ import annotations

import math
from contextlib import nullcontext

import numpy as np
import numpy.ma as ma
import pytest
import rasterio

from domain.skyline.errors import InvalidMapError
from infrastructure.skyline.geotiff_map_reader import GeoTiffMapReader


class FakeDataset:
    def __init__(self, data, *, count: int = 1, nodata=None, mask=None):
        self._data = np.asarray(data, dtype=np.float64)
        self._mask = mask
        self.count = count
        self.height, self.width = self._data.shape
        self.nodata = nodata

    def read(self, band: int, *, masked: bool, out_dtype: str):
        data = self._data.astype(out_dtype)
        if masked:
            mask = self._mask if self._mask is not None else np.zeros_like(data, bool)
            return ma.MaskedArray(data, mask=mask)
        return data

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def dem_path(tmp_path):
    p = tmp_path / "dem.tif"
    p.write_bytes(b"x")
    return p


def patch_rasterio(monkeypatch, ds):
    monkeypatch.setattr("rasterio.open", lambda path: ds)
    monkeypatch.setattr("rasterio.Env", lambda *a, **k: nullcontext())


def test_band_is_flattened_row_major(monkeypatch, dem_path):
    data = np.arange(12, dtype=np.float64).reshape(3, 4)
    patch_rasterio(monkeypatch, FakeDataset(data))

    em = GeoTiffMapReader().load_map(dem_path)

    assert em.width == 4
    assert em.height == 3
    assert em.value_at(1, 2) == 9.0


def test_single_column_raster_keeps_pixel_rows(monkeypatch, dem_path):
    patch_rasterio(monkeypatch, FakeDataset([[1.0], [2.0], [3.0], [4.0]]))

    em = GeoTiffMapReader().load_map(dem_path)

    assert em.width == 2
    assert em.height == 4
    assert [em.value_at(0, y) for y in range(4)] == [1.0, 2.0, 3.0, 4.0]
    assert em.value_at(1, 2) is None


def test_masked_pixels_become_void(monkeypatch, dem_path):
    data = np.ones((2, 3))
    mask = np.zeros((2, 3), dtype=bool)
    mask[1, 2] = True
    patch_rasterio(monkeypatch, FakeDataset(data, mask=mask))

    em = GeoTiffMapReader().load_map(dem_path)

    assert em.value_at(2, 1) is None
    assert em.value_at(0, 0) == 1.0


def test_explicit_nodata_becomes_void(monkeypatch, dem_path):
    data = np.array([[5.0, -9999.0], [1.0, 2.0]])
    patch_rasterio(monkeypatch, FakeDataset(data, nodata=-9999.0))

    em = GeoTiffMapReader().load_map(dem_path)

    assert math.isnan(em.cells[1])
    assert em.value_at(0, 1) == 1.0


def test_multiband_rejected(monkeypatch, dem_path):
    patch_rasterio(monkeypatch, FakeDataset(np.ones((2, 2)), count=3))
    with pytest.raises(InvalidMapError, match="Expected 1 band"):
        GeoTiffMapReader().load_map(dem_path)


def test_cell_limit(monkeypatch, dem_path):
    patch_rasterio(monkeypatch, FakeDataset(np.ones((10, 10))))
    with pytest.raises(InvalidMapError):
        GeoTiffMapReader(max_cells=50).load_map(dem_path)


def test_rasterio_error_is_wrapped(monkeypatch, dem_path):
    def _raise(_):
        raise rasterio.errors.RasterioIOError("not a TIFF")

    monkeypatch.setattr("rasterio.open", _raise)
    monkeypatch.setattr("rasterio.Env", lambda *a, **k: nullcontext())

    with pytest.raises(InvalidMapError, match="Corrupted"):
        GeoTiffMapReader().load_map(dem_path)


def test_wrong_extension_rejected(tmp_path):
    p = tmp_path / "image.png"
    p.write_bytes(b"x")
    with pytest.raises(InvalidMapError):
        GeoTiffMapReader().load_map(p)


def test_empty_file_rejected(tmp_path):
    p = tmp_path / "empty.tif"
    p.write_bytes(b"")
    with pytest.raises(InvalidMapError):
        GeoTiffMapReader().load_map(p)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        GeoTiffMapReader().load_map(tmp_path / "missing.tif")
