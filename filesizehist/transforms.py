"""
Cumulative and relative transforms over bucket-indexed series.

Both operations are pure and return new dicts keyed like their input, in
ascending bucket order.
"""
from __future__ import annotations

import math
from itertools import accumulate
from numbers import Integral
from typing import Dict, Mapping, Union

import numpy as np

from .errors import RelativizeError

Number = Union[int, float]


def _is_integral(values) -> bool:
    return all(isinstance(v, (Integral, np.integer)) and not isinstance(v, bool) for v in values)


def cumulate(series: Mapping[int, Number]) -> Dict[int, Number]:
    """
    Running total over bucket indices.

    ``out[k]`` is the sum of ``series.get(i, 0)`` for ``i`` in ``0..k``; only
    the keys of ``series`` appear in the result. Integer input is summed with
    Python ints and never overflows; float input goes through numpy.

    Raises:
        ValueError: If any bucket index is negative.
    """
    if not series:
        return {}
    keys = sorted(series)
    if keys[0] < 0:
        raise ValueError(f"Bucket indices must be non-negative, got {keys[0]}")

    # Absent buckets add 0, so summing the present keys in order is enough
    if _is_integral(series.values()):
        running = accumulate(int(series[k]) for k in keys)
        return dict(zip(keys, running))

    values = np.asarray([series[k] for k in keys], dtype=np.float64)
    return {k: float(v) for k, v in zip(keys, np.cumsum(values))}


def relativize(series: Mapping[int, Number], total: Number) -> Dict[int, float]:
    """
    Express every value of ``series`` as a percentage of ``total``.

    Raises:
        RelativizeError: If ``total`` is not a positive finite number; an empty
            dataset has nothing to be relative to.
    """
    if total is None or not math.isfinite(total) or total <= 0:
        raise RelativizeError(f"Cannot relativize against a total of {total!r}; total must be > 0")
    if not series:
        return {}
    keys = sorted(series)
    values = np.asarray([series[k] for k in keys], dtype=np.float64)
    percent = values / float(total) * 100
    return {k: float(p) for k, p in zip(keys, percent)}


def cumulative_series(histogram, dimension: str = 'count') -> Dict[int, int]:
    """Cumulate the ``dimension`` projection of a histogram."""
    return cumulate(histogram.project(dimension))


def relative_cumulative_series(histogram, dimension: str = 'count') -> Dict[int, float]:
    """Cumulate then relativize against the histogram's own total for ``dimension``."""
    return relativize(cumulative_series(histogram, dimension), histogram.total(dimension))
