# tests/conftest.py

import numpy as np
import pytest
from rasterio.transform import from_origin


@pytest.fixture
def single_peak_grid():
    """5x5 grid of ones with a peak of 10 in the centre."""
    grid = np.ones((5, 5), dtype=np.float64)
    grid[2, 2] = 10.0
    return grid


@pytest.fixture
def two_peak_grid():
    """10x10 flat floor of 0 with two 3x3 mounds topped at 10."""
    grid = np.zeros((10, 10), dtype=np.float64)
    grid[1:4, 1:4] = 8.0
    grid[2, 2] = 10.0
    grid[6:9, 6:9] = 8.0
    grid[7, 7] = 10.0
    return grid


def _cone(shape, center, height, slope):
    rows, cols = np.mgrid[0:shape[0], 0:shape[1]]
    dist = np.hypot(rows - center[0], cols - center[1])
    return height - slope * dist


@pytest.fixture
def two_cone_chm():
    """20x20 CHM with two cones (apex rows/cols (6, 6) and (13, 13))."""
    shape = (20, 20)
    chm = np.maximum(_cone(shape, (6, 6), 15.0, 2.0), _cone(shape, (13, 13), 12.0, 2.0))
    return np.clip(chm, 0, None)


@pytest.fixture
def unit_transform():
    """1 m pixels, top-left corner at (0, 20)."""
    return from_origin(0.0, 20.0, 1.0, 1.0)


def _tree_points(cx, cy, height, radius):
    offsets = np.arange(-40, 41) * 0.25
    dx, dy = np.meshgrid(offsets, offsets)
    r = np.hypot(dx, dy)
    inside = r <= radius
    crown = np.column_stack((cx + dx[inside], cy + dy[inside],
                             height - 0.6 * height * r[inside] / radius))

    offsets = np.arange(-20, 21) * 0.5 + 0.125
    dx, dy = np.meshgrid(offsets, offsets)
    inside = np.hypot(dx, dy) <= radius
    n = int(inside.sum())
    understory = np.column_stack((cx + dx[inside], cy + dy[inside],
                                  np.where(np.arange(n) % 2 == 0, 2.5, 3.5)))
    return np.vstack((crown, understory))


@pytest.fixture
def two_tree_points():
    """
    Normalized point cloud over a 30x30 m plot: a ground grid at z=0, a 20 m
    tree at (8.5, 21.5) (radius 5) and a 15 m tree at (21.5, 8.5) (radius 4),
    each with understory returns at 2.5 and 3.5 m below the crown.
    """
    g = np.arange(0, 61) * 0.5
    gx, gy = np.meshgrid(g, g)
    ground = np.column_stack((gx.ravel(), gy.ravel(), np.zeros(gx.size)))
    pts = np.vstack((ground,
                     _tree_points(8.5, 21.5, 20.0, 5.0),
                     _tree_points(21.5, 8.5, 15.0, 4.0)))
    return pts[:, 0], pts[:, 1], pts[:, 2]
