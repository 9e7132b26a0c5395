# tests/test_otsu.py

import numpy as np

from pyitc._otsu import NO_SPLIT, otsu_threshold


def test_threshold_between_two_clusters():
    rng = np.random.default_rng(0)
    low = rng.uniform(1.0, 2.0, 100)
    high = rng.uniform(10.0, 11.0, 100)
    values = np.concatenate((low, high))
    rng.shuffle(values)

    t = otsu_threshold(values)
    assert t is not NO_SPLIT
    assert low.max() < t < high.min()


def test_threshold_with_unequal_clusters():
    values = np.concatenate((np.linspace(2.5, 3.5, 40), np.linspace(12.0, 20.0, 160)))
    t = otsu_threshold(values)
    assert 3.5 < t < 12.0


def test_less_than_four_unique_values():
    assert otsu_threshold([1.0, 1.0, 2.0, 3.0, 3.0]) is NO_SPLIT


def test_identical_values():
    assert otsu_threshold(np.full(300, 7.5)) is NO_SPLIT


def test_too_few_values_above_threshold():
    values = np.concatenate((np.linspace(1.0, 2.0, 100), np.full(5, 50.0)))
    assert otsu_threshold(values) is NO_SPLIT
