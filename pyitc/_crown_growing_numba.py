# _crown_growing_numba.py
"""
PyITC - Individual tree crown segmentation
Dalponte region growing with adaptive crown radius (using Numba)
Copyright: 2018, Jan Zörner; 2025, Igor Pawelec
Licence: GNU GPLv3
"""

import math

import numpy as np
from numba import jit

# up, left, right, down
_NB_ROW = np.array([-1, 0, 0, 1], dtype=np.int64)
_NB_COL = np.array([0, -1, 1, 0], dtype=np.int64)


@jit(nopython=True, nogil=True)
def _grow_crowns(Chm, Seeds, seed_rows, seed_cols, radius,
                 th_seed, th_crown, ascent, max_sweeps):
    """
    Grow one crown around every seed until no pixel changes label.

    Each sweep visits the cells labelled during the previous sweep (all seeds
    in the first one). Claims are buffered in a scratch grid and written back
    at the end of the sweep; a cell claimed by two crowns in the same sweep
    goes to the first claimer in row-major order.

    Parameters
    ----------
    Chm : float64[:, :]
          Height grid.
    Seeds : int32[:, :]
            Seed grid, ids 1..N.
    seed_rows, seed_cols : int64[:]
            Position of seed ``i + 1``.
    radius : float64[:]
             Maximum growth distance (pixels) of seed ``i + 1``.
    th_seed : float64
              Neighbour must exceed ``seed height * th_seed``.
    th_crown : float64
               Neighbour must exceed ``mean crown height * th_crown``.
    ascent : float64
             Neighbour must be lower than ``cell height * (1 + ascent)``.
    max_sweeps : int
                 Stop after this many sweeps, -1 for no limit.

    Returns
    -------
    (int32[:, :], int)
         Label grid and number of sweeps run.
    """
    nrow = Chm.shape[0]
    ncol = Chm.shape[1]
    nseeds = seed_rows.shape[0]
    Crowns = Seeds.copy()

    npixel = np.ones(nseeds, dtype=np.float64)
    sum_height = np.zeros(nseeds, dtype=np.float64)
    for i in range(nseeds):
        sum_height[i] = Chm[seed_rows[i], seed_cols[i]]

    active_rows, active_cols = np.nonzero(Crowns)
    nsweeps = 0

    while active_rows.shape[0] > 0:
        if max_sweeps >= 0 and nsweeps >= max_sweeps:
            break
        nsweeps += 1
        Claimed = np.zeros((nrow, ncol), dtype=np.int32)

        for a in range(active_rows.shape[0]):
            row = active_rows[a]
            col = active_cols[a]
            if row == 0 or row == nrow - 1 or col == 0 or col == ncol - 1:
                continue
            label = Crowns[row, col]
            tidx = label - 1
            seed_y = seed_rows[tidx]
            seed_x = seed_cols[tidx]
            seed_h = Chm[seed_y, seed_x]
            mh_crown = sum_height[tidx] / npixel[tidx]
            cell_h = Chm[row, col]

            for k in range(4):
                nb_y = row + _NB_ROW[k]
                nb_x = col + _NB_COL[k]
                if Crowns[nb_y, nb_x] != 0 or Claimed[nb_y, nb_x] != 0:
                    continue
                nb_h = Chm[nb_y, nb_x]
                dist = math.sqrt((seed_y - nb_y) ** 2 + (seed_x - nb_x) ** 2)
                if (nb_h != 0 and
                    nb_h < cell_h + cell_h * ascent and
                    nb_h > seed_h * th_seed and
                    nb_h > mh_crown * th_crown and
                    nb_h <= seed_h * 1.05 and
                    dist < radius[tidx]):
                    Claimed[nb_y, nb_x] = label

        active_rows, active_cols = np.nonzero(Claimed)
        for a in range(active_rows.shape[0]):
            row = active_rows[a]
            col = active_cols[a]
            label = Claimed[row, col]
            Crowns[row, col] = label
            npixel[label - 1] += 1
            sum_height[label - 1] += Chm[row, col]

    return Crowns, nsweeps
