# tests/test_seeds.py

import numpy as np

from pyitc._schedule import window_size_table
from pyitc.segmentation import detect_seeds, seed_positions


def fixed_window(ws=3):
    return window_size_table(ws, ws, 0.0, 1.0)


def test_single_peak_gives_one_seed(single_peak_grid):
    seeds = detect_seeds(single_peak_grid, fixed_window(), 3)
    assert seeds[2, 2] == 1
    assert np.count_nonzero(seeds) == 1


def test_seed_ids_follow_scan_order():
    grid = np.zeros((9, 9))
    grid[3, 6] = 6.0
    grid[3, 3] = 5.0
    grid[6, 3] = 4.0
    seeds = detect_seeds(grid, fixed_window(), 3)
    assert seeds[3, 3] == 1
    assert seeds[3, 6] == 2
    assert seeds[6, 3] == 3
    rows, cols = seed_positions(seeds)
    assert list(zip(rows, cols)) == [(3, 3), (3, 6), (6, 3)]


def test_detection_is_idempotent():
    rng = np.random.default_rng(42)
    grid = rng.uniform(0, 20, (30, 30))
    grid[grid < 5] = 0
    table = window_size_table(3, 7, 5.0, 20.0)
    first = detect_seeds(grid, table, 3)
    second = detect_seeds(grid, table, 3)
    assert np.array_equal(first, second)
    assert first.max() > 0
    ids = first[first > 0]
    assert sorted(ids.tolist()) == list(range(1, first.max() + 1))


def test_plateau_keeps_first_cell_only():
    grid = np.zeros((7, 7))
    grid[3, 3] = 5.0
    grid[3, 4] = 5.0
    seeds = detect_seeds(grid, fixed_window(), 3)
    assert seeds[3, 3] == 1
    assert seeds[3, 4] == 0


def test_window_grows_with_height():
    grid = np.zeros((11, 11))
    grid[5, 5] = 20.0
    grid[5, 7] = 10.0

    adaptive = detect_seeds(grid, window_size_table(3, 7, 0.0, 20.0), 3)
    assert adaptive[5, 5] == 1
    assert adaptive[5, 7] == 0

    fixed = detect_seeds(grid, fixed_window(3), 3)
    assert fixed[5, 5] == 1
    assert fixed[5, 7] == 2


def test_border_cells_are_never_seeds():
    grid = np.zeros((8, 8))
    grid[0, 0] = 10.0
    grid[1, 6] = 10.0
    seeds = detect_seeds(grid, fixed_window(), 3)
    assert not seeds.any()


def test_flat_ground_has_no_seeds():
    seeds = detect_seeds(np.zeros((10, 10)), fixed_window(), 3)
    assert seeds.shape == (10, 10)
    assert not seeds.any()
