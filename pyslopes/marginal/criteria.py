"""
Information criteria for a marginal fit.

Both criteria use the pooled MSE as the likelihood proxy and the number of
fitted slopes as the parameter count:

    AIC = n·ln(MSE) + 2k
    BIC = n·ln(MSE) + k·ln(n)
"""

import numpy as np


def information_criteria(n: int, k: int, mse: float) -> tuple[float, float]:
    """
    Compute (AIC, BIC).

    A NaN MSE gives NaN for both; an MSE of exactly zero gives -Inf.
    Neither case raises.

    Args:
        n: Number of observations
        k: Number of fitted coefficients
        mse: Pooled mean squared error
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        log_mse = np.log(np.float64(mse))
        aic = n * log_mse + 2 * k
        bic = n * log_mse + k * np.log(np.float64(n))
    return float(aic), float(bic)
