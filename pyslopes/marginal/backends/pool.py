"""
Gather backend for per-feature regression.

Structured concurrency: every feature is submitted to a thread pool, the
results are gathered back in FeatureSet order, and a single-threaded merge
builds the coefficient map. Nothing is shared between workers, so there
is no lock and no stream to close.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any

from loguru import logger

from pyslopes.core.result import Result
from pyslopes.core.compute.timing import Timer
from pyslopes.core.exceptions import FeatureFitError
from pyslopes.marginal.backends._regress import regress
from pyslopes.marginal.design import MarginalDesign
from pyslopes.marginal.solution import MarginalParams, build_params


class PoolGatherBackend:
    """
    Thread-pool backend with an ordered gather and a lock-free merge.

    Implements the Backend protocol for MarginalDesign -> MarginalParams.

    Args:
        max_workers: Pool size. Defaults to one thread per feature.
    """

    def __init__(self, max_workers: int | None = None):
        self._max_workers = max_workers

    @property
    def name(self) -> str:
        return 'pool_gather'

    def solve(self, design: MarginalDesign) -> Result[MarginalParams]:
        """
        Fit every feature on the pool and merge after all have finished.

        Raises:
            FeatureFitError: If any worker raised. Every other worker has
                finished by then.
        """
        timer = Timer()
        timer.start()

        features = list(design.features)
        workers = self._max_workers or len(features)

        with timer.section('gather'):
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='pyslopes') as pool:
                futures = [
                    pool.submit(regress, design.column(feature), design.y)
                    for feature in features
                ]
            # Leaving the executor joined every worker
            results = []
            for feature, future in zip(features, futures):
                exc = future.exception()
                if exc is not None:
                    raise FeatureFitError(
                        f"worker for feature '{feature}' failed: {exc}",
                        feature=feature,
                        backend_name=self.name,
                    ) from exc
                results.append(future.result())

        with timer.section('merge'):
            coefficients = {f: slope for f, (slope, _) in zip(features, results)}
            sse_by_feature = {f: sse for f, (_, sse) in zip(features, results)}
            sse_total = 0.0
            for _, sse in results:
                sse_total += sse
        logger.debug("gathered {} features on {} threads", len(features), workers)

        params = build_params(design, coefficients, sse_by_feature, sse_total)
        timer.stop()

        info: dict[str, Any] = {
            'method': 'gather',
            'n_workers': workers,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=params.warnings(),
        )
