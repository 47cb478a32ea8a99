"""
Per-feature (marginal) linear regression.

Every feature is regressed on its own against a shared target, through
the origin, and the squared residuals of all features are pooled into one
mean squared error. Features are fitted concurrently.

Public API:
    fit(data, features, ...) -> MarginalSolution
    load_csv(path, ...) -> DataSource
    information_criteria(n, k, mse) -> (aic, bic)

Example:
    >>> from pyslopes.marginal import fit, load_csv, BOSTON_FEATURES
    >>> result = fit(load_csv("boston.csv"), BOSTON_FEATURES)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pyslopes.marginal.features import (
    FeatureSet,
    BOSTON_FEATURES,
    BOSTON_TARGET,
    BOSTON_LABEL,
    BOSTON_COLUMNS,
)
from pyslopes.marginal.design import MarginalDesign
from pyslopes.marginal.solution import MarginalSolution, MarginalParams
from pyslopes.marginal.criteria import information_criteria
from pyslopes.marginal.datasets import load_csv
from pyslopes.marginal.solvers import fit

__all__ = [
    "fit",
    "load_csv",
    "information_criteria",
    "FeatureSet",
    "MarginalDesign",
    "MarginalSolution",
    "MarginalParams",
    "BOSTON_FEATURES",
    "BOSTON_TARGET",
    "BOSTON_LABEL",
    "BOSTON_COLUMNS",
]
