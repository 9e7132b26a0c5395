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
import math

import numpy as np

from ._crown_growing_numba import _grow_crowns
from ._seeds_numba import _detect_seeds
from .exceptions import DegenerateInputError
from .params import MAX_ASCENT, check_ratio

log = logging.getLogger(__name__)


def _as_grid(grid):
    arr = np.ascontiguousarray(grid, dtype=np.float64)
    if arr.ndim != 2 or arr.size == 0:
        raise DegenerateInputError(f"Expected a non-empty 2-D grid, got shape {arr.shape}")
    return arr


def detect_seeds(grid, window_table, min_window_size):
    """
    Find tree tops as local maxima of a height grid.

    A cell is a seed when it equals the maximum of the square window given by
    ``window_table`` at its height and no earlier seed lies inside that window.
    Cells closer than ``ceil(min_window_size / 2)`` to the border are skipped.

    Parameters
    ----------
    grid : ndarray
        Height grid with 0 for ground / no-data.
    window_table : StepFunction
        Height -> odd window size.
    min_window_size : int
        Smallest window size, defines the border margin.

    Returns
    -------
    ndarray of int32
        Seed grid, ids 1..N in row-major order.
    """
    chm = _as_grid(grid)
    margin = int(math.ceil(min_window_size / 2))
    seeds = _detect_seeds(chm,
                          np.ascontiguousarray(window_table.breaks),
                          np.ascontiguousarray(window_table.values, dtype=np.int64),
                          margin)
    log.info("Detected %d tree tops", int(seeds.max()) if seeds.size else 0)
    return seeds


def seed_positions(seeds):
    """Row and column of every seed, ordered by seed id."""
    rows, cols = np.nonzero(seeds)
    order = np.argsort(seeds[rows, cols], kind="stable")
    return rows[order].astype(np.int64), cols[order].astype(np.int64)


def grow_crowns(grid, seeds, radius_table, th_seed, th_crown,
                ascent=MAX_ASCENT, max_sweeps=None):
    """
    Grow a crown around every seed (Dalponte & Coomes, 2016).

    A 4-neighbour of a crown cell joins the crown when it is nonzero, lower
    than the cell plus ``ascent`` of its height, higher than ``th_seed`` times
    the seed height and ``th_crown`` times the mean crown height, at most 5 %
    above the seed, closer to the seed than the growth radius looked up at the
    seed height, and still unlabelled. Sweeps repeat until nothing changes.

    Parameters
    ----------
    grid : ndarray
        Height grid.
    seeds : ndarray of int
        Seed grid from ``detect_seeds``.
    radius_table : StepFunction
        Seed height -> maximum growth radius (pixels).
    th_seed, th_crown : float
        Growing thresholds in [0, 1].
    ascent : float, optional
        Relative height increase tolerated between neighbouring cells.
    max_sweeps : int, optional
        Stop after this many sweeps.

    Returns
    -------
    (ndarray of int32, int)
        Label grid and number of sweeps.
    """
    check_ratio("th_seed", th_seed)
    check_ratio("th_crown", th_crown)
    chm = _as_grid(grid)
    seeds = np.ascontiguousarray(seeds, dtype=np.int32)
    if seeds.shape != chm.shape:
        raise DegenerateInputError(
            f"Seed grid shape {seeds.shape} does not match height grid {chm.shape}"
        )

    rows, cols = seed_positions(seeds)
    ids = seeds[rows, cols]
    if not np.array_equal(ids, np.arange(1, ids.size + 1)):
        raise DegenerateInputError("Seed ids must be unique and numbered 1..N")
    radius = np.asarray(radius_table.lookup(chm[rows, cols]), dtype=np.float64)
    crowns, nsweeps = _grow_crowns(chm, seeds, rows, cols,
                                   np.ascontiguousarray(radius),
                                   float(th_seed), float(th_crown), float(ascent),
                                   -1 if max_sweeps is None else int(max_sweeps))
    log.debug("Region growing converged after %d sweeps", nsweeps)
    return crowns, int(nsweeps)
