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

# Allometric equations of Jucker et al. (2017), Global Change Biology 23(1),
# 177-190:  value = a * (H * CD) ** b * exp(sigma ** 2 / 2)

import csv
import logging

import numpy as np

from .exceptions import ConfigurationError

log = logging.getLogger(__name__)

BIOMES = {
    0: "Global",
    1: "Afrotropic-Tropical forests-Angiosperm",
    2: "Afrotropic-Woodlands and savannas-Angiosperm",
    3: "Australasia-Temperate mixed forests-Angiosperm",
    4: "Australasia-Temperate mixed forests-Gymnosperm",
    5: "Australasia-Woodlands and savannas-Angiosperm",
    6: "Indo-Malaya-Tropical forests-Angiosperm",
    7: "Nearctic-Boreal forests-Angiosperm",
    8: "Nearctic-Boreal forests-Gymnosperm",
    9: "Nearctic-Temperate coniferous forests-Angiosperm",
    10: "Nearctic-Temperate coniferous forests-Gymnosperm",
    11: "Nearctic-Temperate mixed forests-Angiosperm",
    12: "Nearctic-Temperate mixed forests-Gymnosperm",
    13: "Nearctic-Woodlands and savannas-Angiosperm",
    14: "Nearctic-Woodlands and savannas-Gymnosperm",
    15: "Neotropic-Tropical forests-Angiosperm",
    16: "Palearctic-Boreal forests-Angiosperm",
    17: "Palearctic-Boreal forests-Gymnosperm",
    18: "Palearctic-Temperate coniferous forests-Angiosperm",
    19: "Palearctic-Temperate coniferous forests-Gymnosperm",
    20: "Palearctic-Temperate mixed forests-Angiosperm",
    21: "Palearctic-Temperate mixed forests-Gymnosperm",
    22: "Palearctic-Tropical forests-Angiosperm",
    23: "Palearctic-Woodlands and savannas-Angiosperm",
    24: "Palearctic-Woodlands and savannas-Gymnosperm",
}

# biome -> (a, b, sigma); only the global model ships with the package,
# biome specific rows are read with load_dbh_params(), missing biomes use row 0
DBH_PARAMS = {
    0: (0.557, 0.809, 0.056),
}

SPECIES = {1: "Gymnosperm", 2: "Angiosperm"}

# species -> (a, b) offsets of the pooled biomass model
_AGB_OFFSETS = {1: (0.093, -0.223), 2: (0.0, 0.0)}
_AGB_A, _AGB_B, _AGB_SIGMA = 0.016, 2.013, 0.204


def load_dbh_params(path):
    """
    Read DBH coefficients from a CSV file with the columns ``bio, a, b, g``.

    Returns
    -------
    dict
        ``{biome: (a, b, sigma)}``, to be passed as ``params`` to ``dbh``.
    """
    params = {}
    with open(path, newline="", encoding="utf8") as fh:
        for row in csv.DictReader(fh):
            biome = int(row["bio"])
            if biome not in BIOMES:
                raise ConfigurationError(f"Wrong value of biome in {path}: {biome}")
            params[biome] = (float(row["a"]), float(row["b"]), float(row["g"]))
    return params


def dbh(height, crown_diameter, biome=0, params=None):
    """
    Diameter at breast height from tree height and crown diameter.

    Parameters
    ----------
    height : float or ndarray
        Tree height in meters.
    crown_diameter : float or ndarray
        Crown diameter in meters.
    biome : int, optional
        Biome code 0-24 (see ``BIOMES``), 0 = global model. Biomes without
        coefficients in the table fall back to the global model.
    params : dict, optional
        Coefficient table, defaults to ``DBH_PARAMS``.

    Returns
    -------
    float or ndarray
        DBH in centimeters.
    """
    if biome not in BIOMES:
        raise ConfigurationError(f"Wrong value of biome: {biome}")
    table = DBH_PARAMS if params is None else params
    if biome in table:
        a, b, g = table[biome]
    else:
        log.warning("No DBH coefficients for biome %d (%s), using the global model",
                    biome, BIOMES[biome])
        a, b, g = table.get(0, DBH_PARAMS[0])
    hcd = np.asarray(height, dtype=np.float64) * np.asarray(crown_diameter, dtype=np.float64)
    out = a * hcd ** b * np.exp(g ** 2 / 2)
    return float(out) if np.ndim(out) == 0 else out


def agb(height, crown_diameter, species=1):
    """
    Aboveground biomass (kg) from tree height and crown diameter (m).

    ``species`` is 1 for gymnosperms and 2 for angiosperms.
    """
    if species not in SPECIES:
        raise ConfigurationError(f"Wrong value of species: {species}")
    da, db = _AGB_OFFSETS[species]
    hcd = np.asarray(height, dtype=np.float64) * np.asarray(crown_diameter, dtype=np.float64)
    out = (_AGB_A + da) * hcd ** (_AGB_B + db) * np.exp(_AGB_SIGMA ** 2 / 2)
    return float(out) if np.ndim(out) == 0 else out
