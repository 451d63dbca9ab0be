"""Command line front end: render composed views of a map file.

Usage:
    mapview map.csv --width 6 --resolution 10 --command "N(1,3)>S(5,0)"
    mapview dem.tif --command "E(3,4,120)" --format csv --output views.csv
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from domain.skyline.errors import SkylineError
from domain.skyline.repositories import MapRepository
from domain.skyline.value_objects import DEFAULT_RESOLUTION
from domain.skyline.viewer import MapViewer

from .braille import encode_braille
from .csv_export import render_csv, write_csv
from .csv_map_reader import CsvMapReader
from .geotiff_map_reader import GeoTiffMapReader

logger = logging.getLogger(__name__)

FORMATS = ("braille", "text", "csv")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mapview",
        description="Render banded skyline views of a numeric elevation map.",
    )
    parser.add_argument("map", type=Path, help="CSV/text map or GeoTIFF DEM")
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="map width (CSV only; inferred from rows when omitted)",
    )
    parser.add_argument(
        "--resolution",
        type=int,
        default=DEFAULT_RESOLUTION,
        help="number of elevation-angle bands (3-10000)",
    )
    parser.add_argument(
        "--command",
        required=True,
        help='views joined by ">", e.g. "N(1,2)>S(1,2,30)>W(1,2,10,-1)"',
    )
    parser.add_argument("--format", choices=FORMATS, default="braille")
    parser.add_argument("--output", type=Path, default=None, help="write to file")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    return parser


def select_reader(path: Path, width: int | None) -> MapRepository:
    if path.suffix.lower() in (".tif", ".tiff"):
        return GeoTiffMapReader()
    return CsvMapReader(width=width)


def run(args: argparse.Namespace) -> str:
    """Load the map, render every view and return the formatted output."""
    viewer = MapViewer(resolution=args.resolution)
    info = viewer.load(select_reader(args.map, args.width).load_map(args.map))
    views = viewer.compose(args.command)

    if args.format == "csv":
        if args.output is not None:
            return write_csv(args.output, info, args.command, views)
        return render_csv(info, args.command, views)

    if args.format == "text":
        blocks = [view.to_text() for view in views]
    else:
        blocks = [encode_braille(view) for view in views]
    output = "\n\n".join(blocks)

    if args.output is not None:
        args.output.write_text(output, encoding="utf-8")
        logger.info("Export: wrote %d view(s) to %s", len(views), args.output.name)
    return output


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        output = run(args)
    except (SkylineError, FileNotFoundError) as e:
        logger.error("%s", e)
        return 1

    if args.output is None:
        print(output)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
