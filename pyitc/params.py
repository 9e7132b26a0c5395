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

from dataclasses import dataclass

from ._schedule import check_radii, check_window_sizes
from .exceptions import ConfigurationError

# +0.5 % of the current cell height
MAX_ASCENT = 0.005


def check_ratio(name, value):
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be between 0 and 1, got {value}")


@dataclass
class ImageryParams:
    """
    Parameters for crown delineation on imagery or a CHM raster.

    Args:
        window_size: Size (pixels) of the moving window used to find local maxima.
        th_seed: Growing threshold relative to the seed value.
        th_crown: Growing threshold relative to the mean crown value.
        max_diameter: Maximum crown growth distance from the seed (pixels).
        min_dn: Value below which a pixel cannot belong to a tree.
        is_chm: True if the image is a canopy height model (heights are reported).
    """
    window_size: int = 3
    th_seed: float = 0.45
    th_crown: float = 0.55
    max_diameter: float = 10.0
    min_dn: float = 0.0
    is_chm: bool = False

    def validate(self):
        check_window_sizes(self.window_size, self.window_size)
        check_ratio("th_seed", self.th_seed)
        check_ratio("th_crown", self.th_crown)
        check_radii(self.max_diameter, self.max_diameter)
        return self


@dataclass
class LidarParams:
    """
    Parameters for crown delineation on a normalized LiDAR point cloud.

    Args:
        resolution: Cell size of the rasterized canopy height model.
        min_window_size: Smallest local maxima window (pixels), odd and >= 3.
        max_window_size: Largest local maxima window (pixels), odd and >= min_window_size.
        th_seed: Growing threshold relative to the seed height.
        th_crown: Growing threshold relative to the mean crown height.
        min_diameter: Growth distance (pixels) used for the lowest trees.
        max_diameter: Growth distance (pixels) used for the highest trees.
        height_threshold: Minimum tree height.
        contrast_exponent: Exponent applied to heights before smoothing.
    """
    resolution: float = 0.5
    min_window_size: int = 3
    max_window_size: int = 7
    th_seed: float = 0.55
    th_crown: float = 0.6
    min_diameter: float = 5.0
    max_diameter: float = 40.0
    height_threshold: float = 2.0
    contrast_exponent: float = 1.0

    def validate(self):
        check_window_sizes(self.min_window_size, self.max_window_size)
        check_ratio("th_seed", self.th_seed)
        check_ratio("th_crown", self.th_crown)
        check_radii(self.min_diameter, self.max_diameter)
        if self.resolution <= 0:
            raise ConfigurationError(f"resolution must be positive, got {self.resolution}")
        return self
