"""
Core infrastructure for PySlopes.

This module provides shared abstractions and utilities used by the
domain-specific submodules.

Key components:
    datasource: DataSource column store and Record rows
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing and tolerance tiers
"""

from pyslopes.core.datasource import DataSource, Record
from pyslopes.core.result import Result
from pyslopes.core.exceptions import (
    PySlopesError,
    ValidationError,
    DimensionError,
    NumericalError,
)

__all__ = [
    # Data
    "DataSource",
    "Record",
    # Result
    "Result",
    # Exceptions
    "PySlopesError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
]
