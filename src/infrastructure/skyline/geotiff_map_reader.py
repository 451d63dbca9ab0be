"""GeoTIFF adapter for MapRepository.

Reads band 1 of a DEM raster with rasterio and flattens it row-major into an
ElevationMap; NoData pixels become void cells. The map keeps pixel
coordinates (column = x, row = y); no reprojection is performed. Rasters
narrower than MIN_WIDTH get void columns on the right so every pixel keeps
its (x, y).
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import rasterio

from domain.skyline.errors import InvalidMapError
from domain.skyline.value_objects import MIN_WIDTH, ElevationMap

logger = logging.getLogger(__name__)


class GeoTiffMapReader:
    """Infrastructure adapter for loading maps from GeoTIFF files.

    Parameters
    ----------
    max_cells: int | None
        Optional limit on width*height. Larger rasters are rejected before
        the band is read.
    """

    def __init__(self, max_cells: int | None = None) -> None:
        self.max_cells = max_cells

    def load_map(self, file_path: Path | str) -> ElevationMap:
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(str(path))
        if path.suffix.lower() not in (".tif", ".tiff"):
            raise InvalidMapError(f"Unsupported file extension: {path.suffix}")
        if path.stat().st_size == 0:
            raise InvalidMapError("Empty file")

        try:
            with rasterio.Env():
                with rasterio.open(path) as src:
                    if src.count != 1:
                        raise InvalidMapError(f"Expected 1 band, got {src.count}")
                    if self.max_cells is not None:
                        n_cells = src.width * src.height
                        if n_cells > self.max_cells:
                            raise InvalidMapError(
                                f"Raster has {n_cells} cells, limit is {self.max_cells}"
                            )

                    data = src.read(1, masked=True, out_dtype="float64")

                    # Convert nodata -> NaN: masked arrays or explicit nodata value
                    if hasattr(data, "mask") and np.any(data.mask):
                        data = np.where(data.mask, np.nan, data.data)
                    elif src.nodata is not None:
                        data = np.where(data == src.nodata, np.nan, data)
                    data = np.asarray(data, dtype=np.float64)
                    width = src.width
        except (rasterio.errors.RasterioIOError, rasterio.errors.RasterioError) as e:
            raise InvalidMapError(f"Corrupted or invalid raster: {e}") from e

        if width < MIN_WIDTH:
            data = np.pad(
                data, ((0, 0), (0, MIN_WIDTH - width)), constant_values=np.nan
            )
            width = MIN_WIDTH

        elevation_map = ElevationMap(cells=data.ravel(), width=width)
        logger.info(
            "Map %s: Loaded %dx%d raster", path.name, width, elevation_map.height
        )
        return elevation_map
