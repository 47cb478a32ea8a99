"""
Solver dispatch for per-feature regression.

This module provides the fit() function (public API) and backend selection.
"""

from collections.abc import Iterable
from typing import Literal

from loguru import logger

from pyslopes.core.datasource import DataSource
from pyslopes.core.protocols import Backend
from pyslopes.marginal.design import MarginalDesign
from pyslopes.marginal.features import FeatureSet
from pyslopes.marginal.solution import MarginalParams, MarginalSolution
from pyslopes.marginal.backends.threaded import ThreadedFanInBackend
from pyslopes.marginal.backends.pool import PoolGatherBackend
from pyslopes.marginal.backends.sequential import SequentialBackend


# Type alias for backend selection
BackendChoice = Literal['auto', 'threads', 'pool', 'sequential']


def fit(
    data: DataSource | MarginalDesign,
    features: FeatureSet | Iterable[str] | None = None,
    *,
    target: str | None = None,
    backend: BackendChoice = 'auto',
) -> MarginalSolution:
    """
    Fit one through-the-origin slope per feature and pool their errors.
    
    For every feature f the target is regressed on f alone:
    
        slope_f = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)
        sse_f   = Σ(y − slope_f·x)²
    
    and the pooled error is MSE = Σ_f sse_f / n. Features are fitted
    concurrently; the result does not depend on the order they finish in.
    
    Degenerate features are not rejected: a constant column yields a NaN
    or infinite slope, which then makes the MSE NaN or infinite as well.
    
    Args:
        data: A DataSource, or an already built MarginalDesign (in which
            case `features` and `target` must be None).
        features: Feature identifiers, in reporting order. Defaults to the
            DataSource's 'features' metadata.
        target: Target column. Defaults to the DataSource's 'target'
            metadata, else 'y'.
        backend: Computational backend to use:
            - 'auto': Same as 'threads'
            - 'threads': One thread per feature, locked coefficient map,
              fan-in queue closed after all workers are joined
            - 'pool': Thread pool, ordered gather, lock-free merge
            - 'sequential': Single-threaded reference
            
    Returns:
        MarginalSolution with coefficients, MSE, AIC/BIC and summary()
        
    Raises:
        ValidationError: If inputs are invalid (no rows, unknown or
            duplicated features, unknown target)
        DimensionError: If columns have inconsistent lengths
        FeatureFitError: If a worker raised unexpectedly
        
    Example:
        >>> from pyslopes.marginal import fit, load_csv
        >>> result = fit(load_csv("boston.csv"))
        >>> coefficients, mse = result.as_tuple()
        >>> print(result.summary())
    """
    # === Construct Design ===
    # This is the boundary - validate here, trust everywhere else
    if isinstance(data, MarginalDesign):
        if features is not None or target is not None:
            raise ValueError("features/target cannot be given with a prebuilt design")
        design = data
    else:
        design = MarginalDesign.from_datasource(data, features=features, target=target)
    
    # === Select Backend ===
    backend_impl = _get_backend(backend)
    logger.debug(
        "fitting {} features on {} records with backend {}",
        design.k, design.n, backend_impl.name,
    )
    
    # === Solve ===
    result = backend_impl.solve(design)
    
    # === Wrap and Return ===
    return MarginalSolution(_result=result, _design=design)


def _get_backend(choice: BackendChoice) -> Backend[MarginalDesign, MarginalParams]:
    """
    Select and instantiate the appropriate backend.
    
    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'threads'):
        return ThreadedFanInBackend()
    
    elif choice == 'pool':
        return PoolGatherBackend()
    
    elif choice == 'sequential':
        return SequentialBackend()
    
    else:
        raise ValueError(f"Unknown backend: {choice!r}")
