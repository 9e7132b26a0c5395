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

import numpy as np
from shapely.geometry import MultiPoint

from ._otsu import NO_SPLIT, otsu_threshold
from .records import CrownRecord

log = logging.getLogger(__name__)

MAX_OTSU_POINTS = 300
MIN_CROWN_AREA = 1.0


def subsample_heights(z, max_points=MAX_OTSU_POINTS):
    """
    Deterministic subsample of at most ``max_points`` heights.

    Heights are sorted and every k-th one is taken, starting with the lowest,
    with ``k = ceil(n / max_points)``.
    """
    z = np.asarray(z, dtype=np.float64)
    if z.size <= max_points:
        return z
    step = int(np.ceil(z.size / max_points))
    return np.sort(z)[::step]


def refine_crown(label, x, y, z, height_threshold):
    """
    Rebuild a rasterized crown from the LiDAR points assigned to it.

    Points above ``height_threshold`` are split with Otsu's method to drop
    understory returns; the crown becomes the convex hull of the remaining
    points, and its apex the highest of them.

    Parameters
    ----------
    label : int
        Crown id.
    x, y, z : ndarray
        Coordinates of the points falling in the crown cells.
    height_threshold : float
        Points at or below this height are ignored.

    Returns
    -------
    CrownRecord or None
        None when the region has fewer than 3 points, no height variation, or
        a final area of at most 1.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)
    above = z > height_threshold
    px, py, pz = x[above], y[above], z[above]
    if pz.size < 3:
        log.debug("Crown %d dropped: %d points", label, pz.size)
        return None
    if np.all(pz == pz[0]):
        log.debug("Crown %d dropped: flat point heights", label)
        return None

    threshold = otsu_threshold(subsample_heights(pz))
    if threshold is not NO_SPLIT:
        keep = pz >= threshold
        px, py, pz = px[keep], py[keep], pz[keep]

    top = int(np.argmax(pz))
    hull = MultiPoint(np.column_stack((px, py))).convex_hull
    area = float(hull.area)
    if area <= MIN_CROWN_AREA:
        log.debug("Crown %d dropped: area %.2f", label, area)
        return None

    return CrownRecord(
        id=int(label),
        x=float(px[top]),
        y=float(py[top]),
        height=float(pz[top]),
        area=area,
        geometry=hull,
    )
