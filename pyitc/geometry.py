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
from collections import defaultdict

import numpy as np
import scipy.ndimage as ndimage
from rasterio.features import shapes
from rasterio.transform import from_origin
from shapely.geometry import shape
from shapely.ops import unary_union

from .exceptions import DegenerateInputError

log = logging.getLogger(__name__)

_KERNEL_3x3 = np.ones((3, 3), dtype=np.float64)


def _focal_sum(arr, valid):
    total = ndimage.convolve(np.where(valid, arr, 0.0), _KERNEL_3x3,
                             mode="constant", cval=0.0)
    count = ndimage.convolve(valid.astype(np.float64), _KERNEL_3x3,
                             mode="constant", cval=0.0)
    return total, count


def smooth_mean(grid, exponent=1.0):
    """
    3x3 mean filter ignoring NaN cells.

    Each cell becomes the mean of ``value ** exponent`` over the valid cells
    of its 3x3 window (the window is cropped at the grid border). Cells
    without any valid neighbour stay NaN.

    Parameters
    ----------
    grid : ndarray
        2-D height grid, NaN for no-data.
    exponent : float, optional
        Contrast exponent applied before averaging (default 1).

    Returns
    -------
    ndarray
        Smoothed float64 grid.
    """
    arr = np.asarray(grid, dtype=np.float64)
    valid = ~np.isnan(arr)
    if exponent != 1:
        arr = np.where(valid, arr, 0.0) ** exponent
    total, count = _focal_sum(arr, valid)
    with np.errstate(invalid="ignore", divide="ignore"):
        out = total / count
    out[count == 0] = np.nan
    return out


def fill_gaps(grid):
    """
    Fill empty (NaN) cells of a rasterized point cloud.

    Every empty cell with at least one valid 3x3 neighbour gets the mean of its
    valid neighbours. Passes repeat as long as some filled cell had more than
    six valid neighbours.
    """
    arr = np.array(grid, dtype=np.float64)
    npass = 0
    while True:
        empty = np.isnan(arr)
        if not empty.any():
            break
        valid = ~empty
        total, count = _focal_sum(arr, valid)
        fill = empty & (count > 0)
        if not fill.any():
            break
        arr[fill] = total[fill] / count[fill]
        npass += 1
        if not np.any(count[fill] > 6):
            break
    log.debug("Gap filling finished after %d passes", npass)
    return arr


def rasterize_points(x, y, z, resolution):
    """
    Grid of the highest point per cell.

    The grid starts at the top-left corner ``(min(x), max(y))``; cells without
    points are NaN.

    Returns
    -------
    (ndarray, Affine)
        Height grid and its affine transform.
    """
    if resolution <= 0:
        raise DegenerateInputError(f"Resolution must be positive, got {resolution}")
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)
    if x.size == 0:
        raise DegenerateInputError("Point set is empty")

    xmin, ymax = x.min(), y.max()
    ncol = max(1, int(np.ceil((x.max() - xmin) / resolution)))
    nrow = max(1, int(np.ceil((ymax - y.min()) / resolution)))

    col = np.clip(np.floor((x - xmin) / resolution).astype(np.int64), 0, ncol - 1)
    row = np.clip(np.floor((ymax - y) / resolution).astype(np.int64), 0, nrow - 1)

    flat = np.full(nrow * ncol, -np.inf)
    np.maximum.at(flat, row * ncol + col, z)
    flat[np.isneginf(flat)] = np.nan

    transform = from_origin(xmin, ymax, resolution, resolution)
    return flat.reshape(nrow, ncol), transform


def point_labels(labels, transform, x, y):
    """
    Label of the grid cell holding each point, 0 outside the grid.

    Cells are half-open like in ``rasterize_points``: a point on an edge
    between two cells goes to the cell on its right / below. Points on the
    outer right or bottom edge still go to the last column / row.
    """
    nrow, ncol = labels.shape
    inv = ~transform
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    fcol = inv.a * x + inv.b * y + inv.c
    frow = inv.d * x + inv.e * y + inv.f
    inside = (fcol >= 0) & (fcol <= ncol) & (frow >= 0) & (frow <= nrow)
    col = np.clip(np.floor(fcol[inside]).astype(np.int64), 0, ncol - 1)
    row = np.clip(np.floor(frow[inside]).astype(np.int64), 0, nrow - 1)
    out = np.zeros(x.shape, dtype=np.int64)
    out[inside] = labels[row, col]
    return out


def cell_center(transform, row, col):
    """Map coordinates of the centre of cell (row, col)."""
    x, y = transform * (float(col) + 0.5, float(row) + 0.5)
    return x, y


def polygonize_labels(labels, transform):
    """
    One polygon per nonzero label of a label grid.

    Parameters
    ----------
    labels : ndarray
        Integer label grid, 0 for background.
    transform : Affine
        Affine transform of the grid.

    Returns
    -------
    dict
        ``{label: shapely Polygon or MultiPolygon}`` in ascending label order.
    """
    labels = np.asarray(labels, dtype=np.int32)
    parts = defaultdict(list)
    for geom, val in shapes(labels, mask=labels > 0, connectivity=4,
                            transform=transform):
        parts[int(val)].append(shape(geom))

    polys = {}
    for label in sorted(parts):
        geoms = parts[label]
        polys[label] = geoms[0] if len(geoms) == 1 else unary_union(geoms)
    return polys
