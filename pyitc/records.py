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
from typing import Optional

import numpy as np
from shapely.geometry.base import BaseGeometry


@dataclass(frozen=True)
class CrownRecord:
    """
    One delineated tree crown.

    Attributes
    ----------
    id : int
        Seed id of the crown.
    x, y : float
        Map coordinates of the crown apex.
    height : float or None
        Tree height; None when the input grid is not a height model.
    area : float
        Crown area in squared map units.
    geometry : shapely geometry
        Crown footprint.
    """
    id: int
    x: float
    y: float
    height: Optional[float]
    area: float
    geometry: BaseGeometry

    @property
    def diameter(self):
        """Diameter of the circle with the same area as the crown."""
        return float(2 * np.sqrt(self.area / np.pi))
