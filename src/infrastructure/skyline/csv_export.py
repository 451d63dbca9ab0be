"""CSV output for composed views.

A single record of quoted fields: the map summary, the command, then one
Braille block per view. Braille blocks keep their embedded newlines.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from pathlib import Path

from domain.skyline.value_objects import MapInfo, WindowMatrix

from .braille import encode_braille

logger = logging.getLogger(__name__)


def render_csv(info: MapInfo, command: str, views: Sequence[WindowMatrix]) -> str:
    """Return the CSV record for a list of rendered views."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="")
    writer.writerow([str(info), command, *(encode_braille(v) for v in views)])
    return buffer.getvalue()


def write_csv(
    path: Path | str, info: MapInfo, command: str, views: Sequence[WindowMatrix]
) -> str:
    """Write the CSV record to `path` (UTF-8) and return it."""
    path = Path(path)
    record = render_csv(info, command, views)
    path.write_text(record, encoding="utf-8")
    logger.info("Export: wrote %d view(s) to %s", len(views), path.name)
    return record
