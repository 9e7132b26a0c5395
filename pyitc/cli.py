#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PyITC – Individual tree crown segmentation from CHM and LiDAR data.

Copyright (C) 2025 Igor Pawelec

This file is part of PyITC.

PyITC is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

PyITC is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details:
<https://www.gnu.org/licenses/>.
"""

__author__    = "Igor Pawelec"
__copyright__ = "Copyright (C) 2025 Igor Pawelec"
__license__   = "GPLv3"
__version__   = "0.1"

import argparse
import logging
import sys

from .exceptions import ITCError
from .io_utils import read_height_grid, read_point_cloud, save_crowns
from .pyitc import segment_from_imagery, segment_from_point_cloud

log = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="pyitc",
        description="Individual tree crown segmentation (Dalponte & Coomes)."
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for progress messages, -vv for debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    img = sub.add_parser("image", help="segment an image or CHM raster")
    img.add_argument("raster", help="input raster (first band is used)")
    img.add_argument("output", help="output GeoPackage")
    img.add_argument("--band", type=int, default=1)
    img.add_argument("--window-size", type=int, default=3)
    img.add_argument("--th-seed", type=float, default=0.45)
    img.add_argument("--th-crown", type=float, default=0.55)
    img.add_argument("--max-diameter", type=float, default=10.0)
    img.add_argument("--min-dn", type=float, default=0.0)
    img.add_argument("--chm", action="store_true",
                     help="the raster is a canopy height model")

    las = sub.add_parser("lidar", help="segment a normalized LAS/LAZ point cloud")
    las.add_argument("points", help="input LAS/LAZ file")
    las.add_argument("output", help="output GeoPackage")
    las.add_argument("--crs", default=None, help="CRS of the points, e.g. EPSG:32632")
    las.add_argument("--first-returns", action="store_true")
    las.add_argument("--resolution", type=float, default=0.5)
    las.add_argument("--min-window-size", type=int, default=3)
    las.add_argument("--max-window-size", type=int, default=7)
    las.add_argument("--th-seed", type=float, default=0.55)
    las.add_argument("--th-crown", type=float, default=0.6)
    las.add_argument("--min-diameter", type=float, default=5.0)
    las.add_argument("--max-diameter", type=float, default=40.0)
    las.add_argument("--height-threshold", type=float, default=2.0)
    las.add_argument("--contrast-exponent", type=float, default=1.0)
    return parser


def _crs_wkt(crs):
    if crs is None:
        return None
    from rasterio.crs import CRS
    return CRS.from_user_input(crs).to_wkt()


def run(args):
    if args.command == "image":
        arr, transform, crs = read_height_grid(args.raster, band=args.band)
        crowns = segment_from_imagery(
            arr, transform, crs=crs,
            window_size=args.window_size,
            th_seed=args.th_seed,
            th_crown=args.th_crown,
            max_diameter=args.max_diameter,
            min_dn=args.min_dn,
            is_chm=args.chm,
        )
    else:
        crs = args.crs
        x, y, z = read_point_cloud(args.points, first_returns=args.first_returns)
        crowns = segment_from_point_cloud(
            x, y, z, crs=crs,
            resolution=args.resolution,
            min_window_size=args.min_window_size,
            max_window_size=args.max_window_size,
            th_seed=args.th_seed,
            th_crown=args.th_crown,
            min_diameter=args.min_diameter,
            max_diameter=args.max_diameter,
            height_threshold=args.height_threshold,
            contrast_exponent=args.contrast_exponent,
        )
    save_crowns(crowns, args.output, crs_wkt=_crs_wkt(crs))
    return crowns


def main(argv=None):
    args = build_parser().parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    try:
        crowns = run(args)
    except (ITCError, FileNotFoundError) as exc:
        log.error("%s", exc)
        return 1
    print(f"{len(crowns)} crowns saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
