# src/starphot/phot/median.py
from __future__ import annotations

from typing import Iterable, Union

import numpy as np

from starphot.errors import NonFiniteSample

__all__ = ["median"]


def median(samples: Union[Iterable[float], np.ndarray]) -> float:
    """
    Median of a sample set.

    Sorts ascending; an even count averages the two central values, an odd
    count returns the central one. NaN or infinite samples raise
    NonFiniteSample since they have no place in the ordering.
    """
    a = np.asarray(list(samples) if not isinstance(samples, np.ndarray) else samples, dtype=np.float64).reshape(-1)
    if a.size == 0:
        raise ValueError("median of an empty sample set")
    bad = ~np.isfinite(a)
    if bad.any():
        raise NonFiniteSample(
            f"{int(bad.sum())} non-finite value(s) in sample set",
            n_samples=int(a.size),
        )
    s = np.sort(a, kind="stable")
    n = s.size
    if n % 2 == 0:
        return float((s[n // 2 - 1] + s[n // 2]) / 2.0)
    return float(s[(n + 1) // 2 - 1])
