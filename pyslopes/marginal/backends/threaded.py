"""
Fan-in thread backend for per-feature regression.

One thread per feature. Workers publish slopes into a shared coefficient
map under a lock and push their squared-error sums onto a fan-in queue.
A supervisor thread joins every worker and only then closes the stream,
while the calling thread drains the queue and pools the error sums.
"""

from __future__ import annotations

import queue
import threading
from typing import Any

from loguru import logger

from pyslopes.core.result import Result
from pyslopes.core.compute.timing import Timer
from pyslopes.core.exceptions import FeatureFitError
from pyslopes.marginal.backends._regress import regress
from pyslopes.marginal.design import MarginalDesign
from pyslopes.marginal.solution import MarginalParams, build_params


# Marks the end of the stream; put only after every worker has been joined
_END_OF_STREAM = object()


class ThreadedFanInBackend:
    """
    Concurrent backend: lock-guarded shared map plus a fan-in channel.

    Implements the Backend protocol for MarginalDesign -> MarginalParams.

    Ordering guarantees:
        - Map insertions are mutually exclusive (one lock, held only for
          the insertion itself, never across the regression arithmetic).
        - End-of-stream is enqueued by the supervisor after join() has
          returned for every worker, so it lands behind every publish.
    """

    @property
    def name(self) -> str:
        return 'threads_fan_in'

    def solve(self, design: MarginalDesign) -> Result[MarginalParams]:
        """
        Fit every feature concurrently and pool the squared errors.

        Args:
            design: Validated design

        Returns:
            Result containing MarginalParams

        Raises:
            FeatureFitError: If a worker raised. Raised only after the
                stream has been drained, never with a partial map.
        """
        timer = Timer()
        timer.start()

        y = design.y
        coefficients: dict[str, float] = {}
        map_lock = threading.Lock()
        channel: queue.SimpleQueue = queue.SimpleQueue()

        def work(feature: str) -> None:
            try:
                slope, sse = regress(design.column(feature), y)
            except Exception as exc:
                channel.put((feature, exc))
                return
            with map_lock:
                coefficients[feature] = slope
            channel.put((feature, sse))
            logger.debug("worker {} done: slope={}, sse={}", feature, slope, sse)

        workers = [
            threading.Thread(target=work, args=(feature,), name=f"pyslopes-{feature}")
            for feature in design.features
        ]

        def close_when_joined() -> None:
            for worker in workers:
                worker.join()
            channel.put(_END_OF_STREAM)
            logger.debug("all {} workers joined, stream closed", len(workers))

        supervisor = threading.Thread(target=close_when_joined, name="pyslopes-supervisor")

        with timer.section('dispatch'):
            for worker in workers:
                worker.start()
            supervisor.start()

        sse_total = 0.0
        sse_by_feature: dict[str, float] = {}
        failures: list[tuple[str, Exception]] = []

        with timer.section('collect'):
            while True:
                item = channel.get()
                if item is _END_OF_STREAM:
                    break
                feature, value = item
                if isinstance(value, Exception):
                    failures.append((feature, value))
                    continue
                sse_by_feature[feature] = value
                sse_total += value
            supervisor.join()

        if failures:
            feature, exc = failures[0]
            raise FeatureFitError(
                f"worker for feature '{feature}' failed: {exc}",
                feature=feature,
                backend_name=self.name,
            ) from exc

        params = build_params(design, coefficients, sse_by_feature, sse_total)
        timer.stop()

        info: dict[str, Any] = {
            'method': 'fan_in',
            'n_workers': len(workers),
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=params.warnings(),
        )
