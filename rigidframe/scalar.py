# scalar.py

import math
import numpy as np
from numba import njit


@njit(cache=True, inline='always')
def degrees(radians: float) -> float:
    """Convert an angle from radians to degrees."""
    return radians * (180.0 / math.pi)


@njit(cache=True, inline='always')
def radians(degrees: float) -> float:
    """Convert an angle from degrees to radians."""
    return degrees * (math.pi / 180.0)


@njit(cache=True, inline='always')
def clamp(value: float, lower: float, upper: float) -> float:
    """Limit `value` to the closed interval [lower, upper]."""
    return max(lower, min(upper, value))


@njit(cache=True)
def round_decimal(num: float, scale: int = 5) -> float:
    """
    Round `num` to `scale` decimal places.

    Halves round towards positive infinity (2.5 -> 3, -2.5 -> -2), unlike the
    builtin `round`, which rounds halves to even.

    Parameters:
        num (float): value to round.
        scale (int, optional): number of decimal places to keep. Defaults to 5.

    Returns:
        float: the rounded value.
    """
    factor = 10.0 ** scale
    return np.floor(num * factor + 0.5) / factor
