"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np
from loguru import logger

from pyslopes.core.datasource import DataSource
from pyslopes.marginal.features import BOSTON_FEATURES, BOSTON_COLUMNS


@pytest.fixture(autouse=True)
def _silence_library_logging():
    """Undo any sink or enable() a test installed."""
    yield
    logger.remove()
    logger.disable("pyslopes")


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def marginal_data(rng):
    """500 records x 12 features with a linear target."""
    n, k = 500, len(BOSTON_FEATURES)
    scales = rng.uniform(0.5, 20.0, size=k)
    offsets = rng.uniform(-5.0, 50.0, size=k)
    X = rng.standard_normal((n, k)) * scales + offsets
    beta = rng.uniform(-1.0, 1.0, size=k)
    y = X @ beta + rng.standard_normal(n)
    return X, y


@pytest.fixture
def marginal_source(marginal_data):
    """DataSource over marginal_data with the Boston feature names."""
    X, y = marginal_data
    return DataSource.from_arrays(X=X, y=y, columns=list(BOSTON_FEATURES))


@pytest.fixture
def boston_csv(tmp_path, rng):
    """Small CSV in the Boston layout: header, label, 12 features, mv."""
    n = 20
    lines = [",".join(BOSTON_COLUMNS)]
    for i in range(n):
        values = [f"{v:.4f}" for v in rng.uniform(0.0, 100.0, size=len(BOSTON_FEATURES) + 1)]
        values[3] = str(int(rng.integers(0, 2)))  # chas is an integer flag
        lines.append(",".join([f"Town {i}", *values]))
    path = tmp_path / "boston.csv"
    path.write_text("\n".join(lines) + "\n")
    return path
