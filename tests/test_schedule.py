# tests/test_schedule.py

import numpy as np
import pytest

from pyitc._schedule import StepFunction, growth_radius_table, window_size_table
from pyitc.exceptions import ConfigurationError


def test_window_table_breakpoints_and_sizes():
    table = window_size_table(3, 7, 2.0, 20.0)
    assert table.values.tolist() == [3, 5, 7]
    assert np.allclose(table.breaks, [2.0, 11.0, 20.0])


@pytest.mark.parametrize("height, expected", [
    (0.0, 3), (2.0, 3), (10.9, 3), (11.0, 5), (19.9, 5), (20.0, 7), (35.0, 7),
])
def test_window_lookup_uses_last_lower_breakpoint(height, expected):
    table = window_size_table(3, 7, 2.0, 20.0)
    assert table.lookup(height) == expected


def test_lookup_accepts_arrays():
    table = window_size_table(3, 7, 2.0, 20.0)
    assert table.lookup(np.array([0.0, 11.0, 30.0])).tolist() == [3, 5, 7]


def test_growth_radius_table_is_log_spaced():
    table = growth_radius_table(5, 40, 2.0, 30.0)
    assert len(table) == 35
    assert table.values[0] == pytest.approx(5.0)
    assert table.values[-1] == pytest.approx(40.0)
    assert np.all(np.diff(table.values) > 0)
    # constant ratio between consecutive radii
    ratios = table.values[1:] / table.values[:-1]
    assert np.allclose(ratios, ratios[0])
    assert table.lookup(0.0) == pytest.approx(5.0)
    assert table.lookup(30.0) == pytest.approx(40.0)


def test_equal_radii_give_single_step():
    table = growth_radius_table(10, 10, 0.0, 5.0)
    assert len(table) == 1
    assert table.lookup(-1.0) == 10.0
    assert table.lookup(100.0) == 10.0


def test_max_height_below_threshold_keeps_table_sorted():
    table = window_size_table(3, 7, 5.0, 2.0)
    assert np.all(table.breaks == 5.0)
    assert table.lookup(4.0) == 3
    assert table.lookup(5.0) == 7


@pytest.mark.parametrize("min_ws, max_ws", [(4, 7), (3, 8), (1, 5), (7, 3), (3.5, 5)])
def test_invalid_window_sizes(min_ws, max_ws):
    with pytest.raises(ConfigurationError):
        window_size_table(min_ws, max_ws, 2.0, 20.0)


@pytest.mark.parametrize("min_r, max_r", [(10, 5), (0, 5), (-1, 3)])
def test_invalid_radii(min_r, max_r):
    with pytest.raises(ConfigurationError):
        growth_radius_table(min_r, max_r, 2.0, 20.0)


def test_step_function_rejects_unsorted_breaks():
    with pytest.raises(ConfigurationError):
        StepFunction([3.0, 1.0], [1, 2])
    with pytest.raises(ConfigurationError):
        StepFunction([1.0, 2.0], [1])
    with pytest.raises(ConfigurationError):
        StepFunction([], [])
