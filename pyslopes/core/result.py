"""
Generic result container for all PySlopes computations.

The Result class provides a standardized envelope that every backend
returns. This enables shared tooling for timing, logging and
reproducibility while letting each domain define its own parameter payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, worker count)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) so a finished fit cannot be altered
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Version metadata recorded with every result."""
    import numpy as np
    from pyslopes import __version__
    return {
        'pyslopes_version': __version__,
        'numpy_version': np.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for computations.
    
    Type Parameters:
        P: The domain-specific parameter payload type
        
    Attributes:
        params: Domain-specific parameters (coefficients, error sums, ...)
        info: Structured metadata (method, worker count, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Library versions that produced the result
        
    Examples:
        >>> Result(
        ...     params=MarginalParams(...),
        ...     info={'method': 'fan_in', 'n_workers': 12},
        ...     timing={'total_seconds': 0.01, 'collect': 0.008},
        ...     backend_name='threads_fan_in'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)
    
    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
