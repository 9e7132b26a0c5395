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

from .allometry import agb, dbh
from .exceptions import ConfigurationError, DegenerateInputError, ITCError
from .params import ImageryParams, LidarParams
from .pyitc import CrownSegmenter, segment_from_imagery, segment_from_point_cloud
from .records import CrownRecord

__all__ = [
    "CrownRecord",
    "CrownSegmenter",
    "ConfigurationError",
    "DegenerateInputError",
    "ITCError",
    "ImageryParams",
    "LidarParams",
    "agb",
    "dbh",
    "segment_from_imagery",
    "segment_from_point_cloud",
]
