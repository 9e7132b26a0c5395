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


class ITCError(Exception):
    """Base class for all PyITC errors."""


class ConfigurationError(ITCError, ValueError):
    """
    Invalid parameter (even or too small window size, min > max bounds,
    ratio outside [0, 1], unknown biome or species code).

    Raised before any computation starts.
    """


class DegenerateInputError(ITCError, ValueError):
    """Input data the engine cannot work on (mismatched lengths, empty grid)."""
