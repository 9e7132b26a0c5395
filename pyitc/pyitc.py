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
import scipy.ndimage as ndimage

from ._crown_refine import MIN_CROWN_AREA, refine_crown
from ._schedule import growth_radius_table, window_size_table
from .exceptions import DegenerateInputError
from .geometry import (cell_center, fill_gaps, point_labels, polygonize_labels,
                       rasterize_points, smooth_mean)
from .params import ImageryParams, LidarParams
from .records import CrownRecord
from .segmentation import detect_seeds, grow_crowns, seed_positions

log = logging.getLogger(__name__)


class CrownSegmenter:
    def __init__(self, height, transform, crs=None, nodata=None):
        """
        Przechowuje siatkę wysokości i wyniki pośrednie jednej segmentacji.

        Parameters
        ----------
        height : ndarray
            Dwuwymiarowy CHM lub kanał obrazu, NaN dla braku danych.
        transform : Affine
            Transformacja afiniczna siatki.
        crs : optional
            Układ współrzędnych, przekazywany bez zmian.
        nodata : float, optional
            Dodatkowa wartość traktowana jako brak danych.
        """
        arr = np.array(height, dtype=np.float64)
        if arr.ndim != 2 or arr.size == 0:
            raise DegenerateInputError(f"Expected a non-empty 2-D grid, got shape {arr.shape}")
        if nodata is not None:
            arr[arr == nodata] = np.nan
        self.height = arr
        self.transform = transform
        self.crs = crs
        self.smoothed = None
        self.grid = None
        self.hmin = None
        self.h_max = None
        self.seeds = None
        self.crowns = None
        self.n_sweeps = None

    @classmethod
    def from_file(cls, path, band=1):
        """Wczytuje siatkę z pliku rastrowego (nodata zamieniane na NaN)."""
        from .io_utils import read_height_grid
        arr, transform, crs = read_height_grid(path, band=band)
        return cls(arr, transform, crs)

    @property
    def resolution(self):
        return abs(self.transform.a)

    def smooth(self, exponent=1.0, fill_empty=False):
        """
        Wygładza siatkę wysokości filtrem średniej 3x3.

        Parameters
        ----------
        exponent : float, optional
            Wykładnik kontrastu stosowany do wysokości przed uśrednieniem.
        fill_empty : bool, optional
            Najpierw wypełnia puste komórki (zrasteryzowane chmury punktów).

        Returns
        -------
        ndarray
            Wygładzona siatka.
        """
        arr = fill_gaps(self.height) if fill_empty else self.height
        self.smoothed = smooth_mean(arr, exponent=exponent)
        return self.smoothed

    def tree_detection(self, min_ws=3, max_ws=3, hmin=0.0, h_max=None):
        """
        Wykrywa wierzchołki drzew w (wygładzonej) siatce.

        Komórki bez danych i niższe niż ``hmin`` są najpierw zerowane.

        Parameters
        ----------
        min_ws, max_ws : int
            Zakres adaptacyjnego rozmiaru okna (nieparzysty, >= 3).
        hmin : float
            Minimalna wysokość drzewa, pierwszy próg tabeli okien.
        h_max : float, optional
            Ostatni próg tabeli okien, domyślnie maksimum siatki.

        Returns
        -------
        ndarray
            Siatka wierzchołków (seedów).
        """
        src = self.smoothed if self.smoothed is not None else self.height
        grid = np.nan_to_num(src, nan=0.0)
        grid[grid < hmin] = 0.0
        self.grid = grid
        self.hmin = float(hmin)
        self.h_max = float(grid.max()) if h_max is None else float(h_max)

        table = window_size_table(min_ws, max_ws, self.hmin, self.h_max)
        self.seeds = detect_seeds(grid, table, min_ws)
        return self.seeds

    @property
    def n_trees(self):
        return 0 if self.seeds is None else int(self.seeds.max())

    def crown_delineation(self, th_seed=0.45, th_crown=0.55, min_radius=10.0,
                          max_radius=10.0, max_sweeps=None):
        """
        Rozrasta korony wokół wykrytych wierzchołków.

        Promień wzrostu korony rośnie od ``min_radius`` dla wierzchołków na
        minimalnej wysokości do ``max_radius`` dla najwyższych.
        """
        if self.seeds is None:
            raise ValueError("Tree tops must be detected first using tree_detection().")
        table = growth_radius_table(min_radius, max_radius, self.hmin, self.h_max)
        self.crowns, self.n_sweeps = grow_crowns(
            self.grid, self.seeds, table, th_seed, th_crown, max_sweeps=max_sweeps
        )
        return self.crowns

    def _require_crowns(self):
        if self.crowns is None:
            raise ValueError("Crowns must be delineated first using crown_delineation().")

    def crowns_to_records(self, is_chm=False):
        """
        Tworzy rekordy koron z koron rastrowych.

        Każdy poligon korony jest zmniejszany o pół piksela i zastępowany
        otoczką wypukłą. Wierzchołek to środek piksela seeda; wysokość (tylko
        gdy ``is_chm``) to najwyższa wygładzona wartość w koronie.
        """
        self._require_crowns()
        polys = polygonize_labels(self.crowns, self.transform)
        if not polys:
            return []
        rows, cols = seed_positions(self.seeds)
        labels = list(polys)
        if is_chm:
            src = self.smoothed if self.smoothed is not None else self.height
            heights = ndimage.maximum(src, labels=self.crowns, index=labels)

        records = []
        for i, label in enumerate(labels):
            hull = polys[label].buffer(-self.resolution / 2).convex_hull
            if hull.area <= MIN_CROWN_AREA:
                continue
            x, y = cell_center(self.transform, rows[label - 1], cols[label - 1])
            records.append(CrownRecord(
                id=label,
                x=x,
                y=y,
                height=float(heights[i]) if is_chm else None,
                area=float(hull.area),
                geometry=hull,
            ))
        log.info("Kept %d of %d crowns", len(records), len(labels))
        return records

    def refine_with_points(self, x, y, z, height_threshold=2.0):
        """
        Odbudowuje korony z punktów LiDAR leżących w każdej koronie rastrowej
        (Dalponte & Coomes, 2016).

        Każdy punkt należy do korony komórki, w którą wpada, więc punkt na
        krawędzi między dwiema koronami trafia tylko do jednej z nich.
        """
        self._require_crowns()
        x, y, z = _as_points(x, y, z)
        owner = point_labels(self.crowns, self.transform, x, y)
        labels = np.unique(self.crowns)
        labels = labels[labels != 0]
        records = []
        for label in labels:
            mine = owner == label
            rec = refine_crown(int(label), x[mine], y[mine], z[mine], height_threshold)
            if rec is not None:
                records.append(rec)
        log.info("Kept %d of %d crowns", len(records), labels.size)
        return records


def _as_points(x, y, z):
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    z = np.asarray(z, dtype=np.float64).ravel()
    if not (x.size == y.size == z.size):
        raise DegenerateInputError(
            f"X, Y, Z lengths differ: {x.size}, {y.size}, {z.size}"
        )
    if x.size == 0:
        raise DegenerateInputError("Point set is empty")
    return x, y, z


def segment_from_imagery(image, transform, crs=None, window_size=3, th_seed=0.45,
                         th_crown=0.55, max_diameter=10.0, min_dn=0.0,
                         is_chm=False, nodata=None):
    """
    Segmentacja koron drzew z obrazu lub modelu CHM.

    Parameters
    ----------
    image : ndarray
        Dwuwymiarowy kanał rastra.
    transform : Affine
        Transformacja afiniczna rastra.
    crs : optional
        Układ współrzędnych rastra.
    window_size : int
        Rozmiar okna lokalnych maksimów (piksele), nieparzysty i >= 3.
    th_seed, th_crown : float
        Progi wzrostu z przedziału [0, 1].
    max_diameter : float
        Maksymalna odległość wzrostu korony od seeda (piksele).
    min_dn : float
        Wartość, poniżej której piksel nie może należeć do drzewa.
    is_chm : bool
        True, jeśli raster zawiera wysokości; wtedy podawana jest wysokość koron.
    nodata : float, optional
        Wartość braku danych w rastrze.

    Returns
    -------
    list of CrownRecord
    """
    params = ImageryParams(window_size, th_seed, th_crown, max_diameter,
                           min_dn, is_chm).validate()
    seg = CrownSegmenter(image, transform, crs, nodata=nodata)
    seg.smooth()
    seg.tree_detection(params.window_size, params.window_size, hmin=params.min_dn)
    if seg.n_trees == 0:
        return []
    seg.crown_delineation(params.th_seed, params.th_crown,
                          params.max_diameter, params.max_diameter)
    return seg.crowns_to_records(is_chm=params.is_chm)


def segment_from_point_cloud(x, y, z, crs=None, resolution=0.5, min_window_size=3,
                             max_window_size=7, th_seed=0.55, th_crown=0.6,
                             min_diameter=5.0, max_diameter=40.0,
                             height_threshold=2.0, contrast_exponent=1.0):
    """
    Segmentacja koron drzew ze znormalizowanej chmury punktów LiDAR.

    Punkty są rasteryzowane do CHM (najwyższy punkt w komórce), puste komórki
    są wypełniane, a powierzchnia wygładzana. Korony wyrośnięte na tym rastrze
    są potem odbudowywane z punktów: odbicia z podszytu usuwa metoda Otsu,
    a koroną staje się otoczka wypukła pozostałych punktów.

    Parameters
    ----------
    x, y, z : array_like
        Współrzędne punktów; ``z`` znormalizowane do gruntu.
    crs : optional
        Układ współrzędnych punktów.
    resolution : float
        Rozmiar komórki CHM.
    min_window_size, max_window_size : int
        Zakres adaptacyjnego okna lokalnych maksimów (piksele).
    th_seed, th_crown : float
        Progi wzrostu z przedziału [0, 1].
    min_diameter, max_diameter : float
        Zakres adaptacyjnej odległości wzrostu (piksele).
    height_threshold : float
        Minimalna wysokość drzewa.
    contrast_exponent : float
        Wykładnik stosowany do wysokości przed wygładzeniem.

    Returns
    -------
    list of CrownRecord
    """
    params = LidarParams(resolution, min_window_size, max_window_size, th_seed,
                         th_crown, min_diameter, max_diameter, height_threshold,
                         contrast_exponent).validate()
    x, y, z = _as_points(x, y, z)

    chm, transform = rasterize_points(x, y, z, params.resolution)
    seg = CrownSegmenter(chm, transform, crs)
    seg.smooth(exponent=params.contrast_exponent, fill_empty=True)
    seg.tree_detection(params.min_window_size, params.max_window_size,
                       hmin=params.height_threshold, h_max=float(z.max()))
    if seg.n_trees == 0:
        return []
    seg.crown_delineation(params.th_seed, params.th_crown,
                          params.min_diameter, params.max_diameter)
    return seg.refine_with_points(x, y, z, params.height_threshold)
