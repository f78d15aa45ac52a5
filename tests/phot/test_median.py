# tests/phot/test_median.py
from __future__ import annotations

import numpy as np
import pytest

from starphot.errors import NonFiniteSample, NumericError
from starphot.phot.median import median


def test_even_count_averages_central_pair():
    assert median([1.0, 2.0, 3.0, 4.0]) == 2.5
    assert median([4.0, 1.0, 3.0, 2.0]) == 2.5


def test_odd_count_returns_central_value():
    assert median([1.0, 2.0, 3.0]) == 2.0
    assert median([9.0, -1.0, 5.0, 5.0, 0.0]) == 5.0


def test_single_sample():
    assert median([7.5]) == 7.5


def test_accepts_arrays_and_generators():
    a = np.array([[3.0, 1.0], [2.0, 10.0]])
    assert median(a) == 2.5
    assert median(x for x in (5.0, 1.0, 3.0)) == 3.0


def test_matches_numpy_on_random_samples(rng):
    for n in (1, 2, 7, 100, 101):
        s = rng.normal(size=n)
        assert median(s) == pytest.approx(float(np.median(s)))


@pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
def test_rejects_non_finite(bad):
    with pytest.raises(NonFiniteSample) as ei:
        median([1.0, bad, 3.0])
    assert isinstance(ei.value, NumericError)


def test_empty_sample_set():
    with pytest.raises(ValueError):
        median([])
