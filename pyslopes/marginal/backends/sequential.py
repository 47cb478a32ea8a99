"""
Sequential reference backend for per-feature regression.

Fits the features one after another on the calling thread. The concurrent
backends are checked against this one.
"""

from typing import Any

from pyslopes.core.result import Result
from pyslopes.core.compute.timing import Timer
from pyslopes.marginal.backends._regress import regress
from pyslopes.marginal.design import MarginalDesign
from pyslopes.marginal.solution import MarginalParams, build_params


class SequentialBackend:
    """
    Single-threaded backend.

    Implements the Backend protocol for MarginalDesign -> MarginalParams.
    Error sums are pooled in FeatureSet order, so repeated runs are
    bit-for-bit identical.
    """

    @property
    def name(self) -> str:
        return 'sequential'

    def solve(self, design: MarginalDesign) -> Result[MarginalParams]:
        """Fit every feature in order."""
        timer = Timer()
        timer.start()

        coefficients: dict[str, float] = {}
        sse_by_feature: dict[str, float] = {}
        sse_total = 0.0

        with timer.section('regress'):
            for feature in design.features:
                slope, sse = regress(design.column(feature), design.y)
                coefficients[feature] = slope
                sse_by_feature[feature] = sse
                sse_total += sse

        params = build_params(design, coefficients, sse_by_feature, sse_total)
        timer.stop()

        info: dict[str, Any] = {
            'method': 'sequential',
            'n_workers': 1,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=params.warnings(),
        )
