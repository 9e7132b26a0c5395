# _seeds_numba.py
"""
PyITC - Individual tree crown segmentation
Adaptive window local maxima (tree top seeds) using Numba
Copyright: 2025, Igor Pawelec
Licence: GNU GPLv3
"""

import numpy as np
from numba import jit


@jit(nopython=True, nogil=True)
def _window_at(height, win_breaks, win_sizes):
    pos = 0
    for i in range(win_breaks.shape[0]):
        if win_breaks[i] <= height:
            pos = i
        else:
            break
    return win_sizes[pos]


@jit(nopython=True, nogil=True)
def _detect_seeds(Chm, win_breaks, win_sizes, margin):
    """
    Tree top detection with a height adaptive moving window.

    Parameters
    ----------
    Chm : float64[:, :]
          Height grid, 0 where no tree can be.
    win_breaks : float64[:]
                 Height breakpoints of the window size table.
    win_sizes : int64[:]
                Odd window size for each breakpoint.
    margin : int
             Number of border rows/columns that are never seeds.

    Returns
    -------
    int32[:, :]
         Seed grid, ids 1..N in row-major scan order, 0 elsewhere.
    """
    nrow = Chm.shape[0]
    ncol = Chm.shape[1]
    Seeds = np.zeros((nrow, ncol), dtype=np.int32)
    index = 1

    for row in range(margin, nrow - margin):
        for col in range(margin, ncol - margin):
            h = Chm[row, col]
            if h == 0:
                continue
            half = _window_at(h, win_breaks, win_sizes) // 2
            r0 = max(row - half, 0)
            r1 = min(row + half + 1, nrow)
            c0 = max(col - half, 0)
            c1 = min(col + half + 1, ncol)

            wmax = Chm[r0:r1, c0:c1].max()
            if h != wmax or wmax == 0:
                continue
            if Seeds[r0:r1, c0:c1].max() != 0:
                continue
            Seeds[row, col] = index
            index += 1

    return Seeds
