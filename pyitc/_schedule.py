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

from .exceptions import ConfigurationError

log = logging.getLogger(__name__)


class StepFunction:
    """
    Monotonic step function built from sorted height breakpoints.

    ``lookup(h)`` returns the value attached to the last breakpoint that is
    lower or equal to ``h``. Heights below the first breakpoint get the first
    value. Values are never interpolated.

    Parameters
    ----------
    breaks : array_like
        Non-decreasing height breakpoints.
    values : array_like
        One value per breakpoint.
    """

    def __init__(self, breaks, values):
        self.breaks = np.asarray(breaks, dtype=np.float64)
        self.values = np.asarray(values, dtype=np.float64)
        if self.breaks.ndim != 1 or self.breaks.size == 0:
            raise ConfigurationError("Step function needs at least one breakpoint")
        if self.breaks.shape != self.values.shape:
            raise ConfigurationError(
                f"Got {self.breaks.size} breakpoints for {self.values.size} values"
            )
        if np.any(np.diff(self.breaks) < 0):
            raise ConfigurationError("Breakpoints must be non-decreasing")

    def __len__(self):
        return self.breaks.size

    def __repr__(self):
        return f"StepFunction(breaks={self.breaks.tolist()}, values={self.values.tolist()})"

    def index(self, height):
        """Interval index of ``height`` (0 when below every breakpoint)."""
        pos = np.searchsorted(self.breaks, height, side="right") - 1
        return np.maximum(pos, 0)

    def lookup(self, height):
        pos = self.index(height)
        if np.ndim(pos) == 0:
            return float(self.values[int(pos)])
        return self.values[pos]


def _height_breaks(h_threshold, h_max, n):
    # a grid lower than the threshold collapses every breakpoint onto it
    h_max = max(float(h_max), float(h_threshold))
    return np.linspace(float(h_threshold), h_max, n)


def check_window_sizes(min_ws, max_ws):
    """Raise ConfigurationError unless both sizes are odd, >= 3 and ordered."""
    for name, ws in (("min_window_size", min_ws), ("max_window_size", max_ws)):
        if int(ws) != ws:
            raise ConfigurationError(f"{name} must be an integer, got {ws}")
        if ws < 3:
            raise ConfigurationError(f"{name} must be at least 3, got {ws}")
        if ws % 2 == 0:
            raise ConfigurationError(f"{name} must be an odd number, got {ws}")
    if min_ws > max_ws:
        raise ConfigurationError(
            f"min_window_size ({min_ws}) is bigger than max_window_size ({max_ws})"
        )


def check_radii(min_radius, max_radius):
    """Raise ConfigurationError unless 0 < min_radius <= max_radius."""
    if min_radius <= 0 or max_radius <= 0:
        raise ConfigurationError(
            f"Growth radii must be positive, got {min_radius} and {max_radius}"
        )
    if min_radius > max_radius:
        raise ConfigurationError(
            f"Minimum growth radius ({min_radius}) is bigger than the maximum ({max_radius})"
        )


def window_size_table(min_ws, max_ws, h_threshold, h_max):
    """
    Height -> search window size.

    Window sizes run over the odd numbers from ``min_ws`` to ``max_ws``; their
    breakpoints are evenly spaced between ``h_threshold`` and ``h_max``.

    Parameters
    ----------
    min_ws, max_ws : int
        Odd window sizes (pixels), both at least 3.
    h_threshold : float
        Minimum tree height; first breakpoint.
    h_max : float
        Maximum observed height; last breakpoint.

    Returns
    -------
    StepFunction
    """
    check_window_sizes(min_ws, max_ws)
    sizes = np.arange(int(min_ws), int(max_ws) + 1, 2)
    table = StepFunction(_height_breaks(h_threshold, h_max, sizes.size), sizes)
    log.debug("Window size table: %r", table)
    return table


def growth_radius_table(min_radius, max_radius, h_threshold, h_max):
    """
    Height -> maximum crown growth radius (grid units).

    Radii are log-spaced from ``min_radius`` to ``max_radius`` in
    ``max_radius - min_radius`` steps (at least one); their breakpoints are
    evenly spaced between ``h_threshold`` and ``h_max``.
    """
    check_radii(min_radius, max_radius)
    n = max(1, int(round(max_radius - min_radius)))
    radii = np.exp(np.linspace(np.log(min_radius), np.log(max_radius), n))
    table = StepFunction(_height_breaks(h_threshold, h_max, n), radii)
    log.debug("Growth radius table has %d steps", n)
    return table
