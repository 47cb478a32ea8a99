"""
Single-feature regression kernel.

Fits y ≈ slope·x through the origin and returns the slope together with
the feature's residual sum of squares. Shared by every backend so that all
of them produce bit-identical per-feature numbers.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray


def regress(
    x: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
) -> tuple[float, float]:
    """
    Regress the target on one feature.

    Pass 1 accumulates Σx, Σy, Σxy and Σx² and forms the least-squares slope

        slope = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)

    Pass 2 accumulates Σ(y − slope·x)². The prediction carries no intercept
    term even though the slope formula is the centered one.

    A constant feature (or a single record) makes the denominator zero. The
    result is then NaN or ±Inf, exactly as IEEE 754 division gives it; it
    is returned, not raised.

    Pure function: reads x and y, touches nothing else, so any number of
    calls may run concurrently.

    Args:
        x: Feature values (n,)
        y: Target values (n,)

    Returns:
        (slope, squared_error_sum)
    """
    n = np.float64(x.shape[0])

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        sum_x = np.sum(x)
        sum_y = np.sum(y)
        sum_xy = np.dot(x, y)
        sum_x2 = np.dot(x, x)

        slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)

        residuals = y - slope * x
        squared_error_sum = np.dot(residuals, residuals)

    return float(slope), float(squared_error_sum)
