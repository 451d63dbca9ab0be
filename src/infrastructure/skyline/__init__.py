"""Infrastructure adapters for the skyline bounded context.

Map readers (CSV text, GeoTIFF), output encoders (Braille, CSV) and the
command line front end.
"""

from .braille import encode_braille
from .csv_export import render_csv, write_csv
from .csv_map_reader import CsvMapReader, parse_map_text
from .geotiff_map_reader import GeoTiffMapReader

__all__ = [
    "CsvMapReader",
    "GeoTiffMapReader",
    "encode_braille",
    "parse_map_text",
    "render_csv",
    "write_csv",
]
