"""
Exception hierarchy for PySlopes.

All exceptions inherit from PySlopesError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
    - Degenerate floating-point results (NaN, Inf) are values, not errors
"""


class PySlopesError(Exception):
    """Base exception for all PySlopes errors."""
    pass


class ValidationError(PySlopesError):
    """
    Input validation failed.
    
    Raised when user-provided inputs fail validation checks: empty
    datasets, unknown or duplicated feature identifiers, malformed rows.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    
    Raised when array shapes don't match expected dimensions or
    when multiple columns have inconsistent lengths.
    """
    pass


class NumericalError(PySlopesError):
    """
    Numerical computation failed.
    
    Base class for errors arising during computation. Note that a
    zero-variance feature is NOT an error: its slope is NaN or Inf.
    """
    pass


class FeatureFitError(NumericalError):
    """
    A worker failed while fitting one feature.
    
    Raised by the coordinators after every other worker has finished, so
    no partial coefficient map ever escapes. The original exception is
    chained as __cause__.
    
    Attributes:
        feature: Identifier of the feature whose worker failed
        backend_name: Backend that ran the worker
    """
    
    def __init__(
        self,
        message: str,
        feature: str | None = None,
        backend_name: str | None = None,
    ):
        super().__init__(message)
        self.feature = feature
        self.backend_name = backend_name
