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

import logging
from pathlib import Path

import fiona
import laspy
import numpy as np
import rasterio
from skimage.morphology import binary_closing, disk

from .geometry import cell_center
from .segmentation import seed_positions

log = logging.getLogger(__name__)

CROWN_SCHEMA = {
    'geometry': 'Polygon',
    'properties': {
        'id': 'int',
        'x': 'float',
        'y': 'float',
        'height_m': 'float',
        'ca_m2': 'float',
    }
}

SEED_SCHEMA = {
    'geometry': 'Point',
    'properties': {
        'id': 'int',
        'height': 'float'
    }
}


def _existing(path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return path


def read_height_grid(path, band=1):
    """
    Wczytuje jeden kanał rastra; komórki nodata zamieniane są na NaN.

    Returns
    -------
    (ndarray, Affine, CRS)
    """
    with rasterio.open(_existing(path)) as src:
        arr = src.read(band).astype(np.float64)
        if src.nodata is not None:
            arr[arr == src.nodata] = np.nan
        return arr, src.transform, src.crs


def read_point_cloud(path, first_returns=False):
    """
    Wczytuje współrzędne x, y, z z pliku LAS/LAZ.

    ``z`` musi być już znormalizowane do gruntu. Przy ``first_returns``
    zostają tylko punkty z numerem odbicia 1.
    """
    with laspy.open(_existing(path)) as fh:
        las = fh.read()
    x, y, z = np.array(las.x), np.array(las.y), np.array(las.z)
    if first_returns:
        keep = np.array(las.return_number) == 1
        x, y, z = x[keep], y[keep], z[keep]
    log.info("Read %d points from %s", x.size, path)
    return x, y, z


def save_crowns(crowns, path, crs_wkt=None):
    """
    Zapisuje rekordy koron do GeoPackage z atrybutami
    id, x, y, height_m, ca_m2 (zaokrąglone do 2 miejsc).
    """
    with fiona.open(
        path,
        'w',
        driver='GPKG',
        crs_wkt=crs_wkt,
        schema=CROWN_SCHEMA
    ) as dst:
        for crown in crowns:
            dst.write({
                'geometry': crown.geometry.__geo_interface__,
                'properties': {
                    'id': int(crown.id),
                    'x': round(crown.x, 2),
                    'y': round(crown.y, 2),
                    'height_m': None if crown.height is None else round(crown.height, 2),
                    'ca_m2': round(crown.area, 2)
                }
            })
    log.info("Saved %d crowns to %s", len(crowns), path)


def save_seeds(seeds, path, transform, crs_wkt=None, height=None):
    """
    Zapisuje wierzchołki z siatki seedów jako punkty (środki pikseli) z id
    i wysokością (zaokrągloną do 2 miejsc, NaN gdy brak ``height``).
    """
    rows, cols = seed_positions(seeds)
    with fiona.open(
        path,
        'w',
        driver='GPKG',
        crs_wkt=crs_wkt,
        schema=SEED_SCHEMA
    ) as dst:
        for idx, (r, c) in enumerate(zip(rows, cols), start=1):
            x, y = cell_center(transform, r, c)
            h = float('nan') if height is None else round(float(height[r, c]), 2)
            dst.write({
                'geometry': {"type": "Point", "coordinates": (x, y)},
                'properties': {'id': idx, 'height': h}
            })


def save_label_grid(labels, path, transform, crs=None, closing_radius=0):
    """
    Zapisuje siatkę etykiet koron do GeoTIFF.

    Jeśli closing_radius > 0, każda korona jest wygładzana przez binary_closing
    z disk(closing_radius); domknięte piksele nie nadpisują innej korony.
    """
    labels = np.asarray(labels, dtype=np.int32)
    out = labels.copy()
    if closing_radius > 0:
        footprint = disk(closing_radius)
        # wygładzamy każdą koronę osobno (pomijamy tło=0)
        for seg_id in np.unique(labels[labels != 0]):
            closed = binary_closing(labels == seg_id, footprint)
            out[closed & (out == 0)] = seg_id

    rows, cols = out.shape
    with rasterio.open(
        path, 'w', driver='GTiff', height=rows, width=cols, count=1,
        dtype='int32', crs=crs, transform=transform, nodata=0
    ) as dst:
        dst.write(out, 1)
