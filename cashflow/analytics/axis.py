"""
Chart axis scaling — human-friendly gridline steps and rounded axis tops.
"""
from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

from cashflow.config import AXIS_MAX_DIVISIONS, AXIS_MULTIPLIERS
from cashflow.data.schemas import AxisScale


def nice_step(value_range: float) -> float:
    """Smallest of 1/2/5/10 × 10^k that splits `value_range` into at most 4 divisions.

    Non-positive (or non-finite) ranges get a step of 1.0.
    """
    if not math.isfinite(value_range) or value_range <= 0:
        return 1.0
    exponent = 10.0 ** math.floor(math.log10(value_range))
    for multiplier in AXIS_MULTIPLIERS:
        step = multiplier * exponent
        if value_range / step <= AXIS_MAX_DIVISIONS:
            return step
    # float rounding in log10 near exact powers of ten
    return 10.0 * exponent


def nice_max(raw_max: float, step: float) -> float:
    """Round `raw_max` up to a whole number of steps."""
    if step <= 0:
        return raw_max
    top = step * math.ceil(raw_max / step)
    # ceil of an inexact quotient can land one ulp short
    return top if top >= raw_max else top + step


def axis_scale(values: Iterable[float], floor: float = 1.0) -> AxisScale:
    """Step and axis top for a series; the top never drops below `floor`."""
    arr = np.asarray(list(values), dtype="float64")
    arr = arr[np.isfinite(arr)]
    raw_max = float(arr.max()) if arr.size else 0.0
    step = nice_step(raw_max)
    return AxisScale(step=step, nice_max=max(nice_max(raw_max, step), floor))
