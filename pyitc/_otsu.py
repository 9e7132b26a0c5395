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

import numpy as np

# returned when the sample cannot be split; callers keep every value
NO_SPLIT = None

MIN_UNIQUE_VALUES = 4
MIN_UPPER_COUNT = 10


def otsu_threshold(values):
    """
    Binary Otsu threshold by exhaustive search over the unique values.

    For every split of the sorted unique values into a lower and an upper
    class the score ``S_low**2 / P_low + S_high**2 / P_high`` is evaluated,
    where ``P`` is the cumulative probability mass and ``S`` the cumulative
    first moment of the class. The first split with the highest score wins.

    Parameters
    ----------
    values : array_like
        Sample of scalar values (a few hundred at most).

    Returns
    -------
    float or None
        Midpoint between the two classes of the best split, or ``NO_SPLIT``
        if fewer than 4 unique values are present or fewer than 10 values
        lie above the threshold.
    """
    y = np.asarray(values, dtype=np.float64).ravel()
    yvals, counts = np.unique(y, return_counts=True)
    n_unique = yvals.size
    if n_unique < MIN_UNIQUE_VALUES:
        return NO_SPLIT

    per = counts / y.size
    P = np.cumsum(per)
    S = np.cumsum(per * yvals)

    # split k keeps yvals[:k] in the lower class, k in 1..L-1
    P_low, S_low = P[:-1], S[:-1]
    P_high, S_high = P[-1] - P_low, S[-1] - S_low
    sigma = S_low ** 2 / P_low + S_high ** 2 / P_high
    k = int(np.argmax(sigma)) + 1

    threshold = 0.5 * (yvals[k - 1] + yvals[k])
    if np.count_nonzero(y > threshold) < MIN_UPPER_COUNT:
        return NO_SPLIT
    return float(threshold)
