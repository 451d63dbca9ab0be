"""CSV / plain-text adapter for MapRepository.

Accepted layouts:
- one row per line, values separated by commas (empty field = void cell)
- one row per line, values separated by whitespace
- a single flat line of values, in which case the width must be given

When no width is given it is inferred from the longest row and shorter rows
are padded with void cells so columns stay aligned. A single inferred column
is padded with a void column, since a map is at least MIN_WIDTH wide.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from domain.skyline.errors import InvalidMapError
from domain.skyline.value_objects import MIN_WIDTH, ElevationMap

logger = logging.getLogger(__name__)


def _split_row(line: str) -> list[str]:
    if "," in line:
        return next(csv.reader([line]))
    return line.split()


def _parse_cell(field: str, line_no: int) -> float | None:
    field = field.strip()
    if not field:
        return None
    try:
        return float(field)
    except ValueError as e:
        raise InvalidMapError(f"Line {line_no}: not a number: {field!r}") from e


def parse_map_text(text: str, width: int | None = None) -> ElevationMap:
    """Parse map text into an ElevationMap.

    Args:
        text: CSV or whitespace separated values, one map row per line
        width: Map width; inferred from the longest row when None

    Raises:
        InvalidMapError: If a field is not a number or no width can be found
    """
    rows = [
        [_parse_cell(field, line_no) for field in _split_row(line)]
        for line_no, line in enumerate(text.splitlines(), start=1)
        if line.strip()
    ]

    if width is not None:
        cells = [cell for row in rows for cell in row]
        return ElevationMap(cells=cells, width=width)

    if len(rows) < 2:
        raise InvalidMapError("Map width cannot be inferred; give it explicitly")

    inferred = max(max(len(row) for row in rows), MIN_WIDTH)
    cells = [cell for row in rows for cell in row + [None] * (inferred - len(row))]
    return ElevationMap(cells=cells, width=inferred)


class CsvMapReader:
    """Infrastructure adapter for loading maps from CSV or text files.

    Parameters
    ----------
    width: int | None
        Map width. If None, inferred from the longest row in the file.
    """

    def __init__(self, width: int | None = None) -> None:
        self.width = width

    def load_map(self, file_path: Path | str) -> ElevationMap:
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(str(path))

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise InvalidMapError(f"Map file {path.name} is not UTF-8 text") from e
        except OSError as e:
            raise InvalidMapError(f"Map file {path.name} cannot be read") from e

        if not text.strip():
            raise InvalidMapError("Empty file")

        elevation_map = parse_map_text(text, self.width)
        # Log only filename, not full path
        logger.info(
            "Map %s: Loaded %d cells (width %d)",
            path.name,
            elevation_map.length,
            elevation_map.width,
        )
        return elevation_map
