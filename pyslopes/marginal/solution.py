"""
Marginal regression solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray
from loguru import logger

from pyslopes.core.result import Result
from pyslopes.core.compute.tolerances import ToleranceTier, select_tolerance
from pyslopes.marginal.criteria import information_criteria

if TYPE_CHECKING:
    from pyslopes.marginal.design import MarginalDesign
    from pyslopes.marginal.features import FeatureSet


@dataclass(frozen=True)
class MarginalParams:
    """
    Parameter payload for a per-feature fit.

    This is the immutable data computed by backends. Both mappings are
    read-only and ordered like the design's FeatureSet, whatever order the
    workers finished in.
    """
    coefficients: Mapping[str, float]
    sse_by_feature: Mapping[str, float]
    sse: float
    mse: float
    n_observations: int

    def non_finite_features(self) -> tuple[str, ...]:
        """Features whose slope is NaN or ±Inf."""
        return tuple(f for f, b in self.coefficients.items() if not math.isfinite(b))

    def warnings(self) -> tuple[str, ...]:
        """One message per degenerate slope. The values are kept as-is."""
        return tuple(
            f"feature '{f}' has a non-finite slope ({self.coefficients[f]}); "
            f"it propagates into the MSE"
            for f in self.non_finite_features()
        )


def build_params(
    design: 'MarginalDesign',
    coefficients: Mapping[str, float],
    sse_by_feature: Mapping[str, float],
    sse: float,
) -> MarginalParams:
    """
    Freeze the collected per-feature results.

    Args:
        design: The design that was fitted
        coefficients: feature -> slope, one entry per feature
        sse_by_feature: feature -> squared-error sum, one entry per feature
        sse: Pooled squared-error sum, in whatever order it was reduced

    Raises:
        KeyError: If a feature of the design has no entry
    """
    params = MarginalParams(
        coefficients=MappingProxyType({f: coefficients[f] for f in design.features}),
        sse_by_feature=MappingProxyType({f: sse_by_feature[f] for f in design.features}),
        sse=sse,
        mse=sse / design.n,
        n_observations=design.n,
    )
    for feature in params.non_finite_features():
        logger.warning(
            "feature {} has non-finite slope {}", feature, params.coefficients[feature]
        )
    logger.debug("pooled sse={} over n={}: mse={}", params.sse, design.n, params.mse)
    return params


@dataclass
class MarginalSolution:
    """
    User-facing per-feature regression results.

    Wraps the backend Result and provides accessors for the coefficient map,
    the pooled MSE and the information criteria derived from them.
    """
    _result: Result[MarginalParams]
    _design: 'MarginalDesign'

    @property
    def coefficients(self) -> Mapping[str, float]:
        """feature -> slope, read-only, in FeatureSet order."""
        return self._result.params.coefficients

    @property
    def coefficient_array(self) -> NDArray[np.floating[Any]]:
        """Slopes as an array aligned with `features`."""
        return np.fromiter(self.coefficients.values(), dtype=np.float64)

    @property
    def features(self) -> 'FeatureSet':
        return self._design.features

    @property
    def sse_by_feature(self) -> Mapping[str, float]:
        return self._result.params.sse_by_feature

    @property
    def sse(self) -> float:
        return self._result.params.sse

    @property
    def mse(self) -> float:
        return self._result.params.mse

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_features(self) -> int:
        return len(self.coefficients)

    @property
    def aic(self) -> float:
        return information_criteria(self.n_observations, self.n_features, self.mse)[0]

    @property
    def bic(self) -> float:
        return information_criteria(self.n_observations, self.n_features, self.mse)[1]

    @property
    def non_finite_features(self) -> tuple[str, ...]:
        return self._result.params.non_finite_features()

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def as_tuple(self) -> tuple[Mapping[str, float], float]:
        """The (coefficients, mse) pair."""
        return self.coefficients, self.mse

    def equivalent_to(
        self,
        other: MarginalSolution,
        tier: ToleranceTier | None = None,
    ) -> bool:
        """
        Compare two fits of the same data.

        Same features (same order), same slopes, same per-feature error
        sums and same MSE within the tolerance tier. NaN equals NaN.

        Args:
            other: Solution to compare with
            tier: Tolerance tier. Defaults to the tier appropriate for the
                two backends that produced the solutions.
        """
        if tuple(self.coefficients) != tuple(other.coefficients):
            return False
        if tier is None:
            tier = select_tolerance(self.backend_name, other.backend_name)

        pairs = [
            (self.coefficient_array, other.coefficient_array),
            (np.fromiter(self.sse_by_feature.values(), dtype=np.float64),
             np.fromiter(other.sse_by_feature.values(), dtype=np.float64)),
            (np.array([self.mse]), np.array([other.mse])),
        ]
        return all(
            np.allclose(a, b, rtol=tier.rtol, atol=tier.atol, equal_nan=True)
            for a, b in pairs
        )

    def summary(self) -> str:
        """Generate a plain-text report."""
        lines = [
            "Marginal Regression Results",
            "=" * 60,
            f"Observations: {self.n_observations}",
            f"Features: {self.n_features}",
            f"Target: {self._design.target}",
            "",
            "Coefficients:",
            "-" * 60,
            f"{'Feature':<12} {'Slope':>16} {'SSE':>20}",
            "-" * 60,
        ]

        for feature, slope in self.coefficients.items():
            sse = self.sse_by_feature[feature]
            lines.append(f"{feature:<12} {slope:16.6f} {sse:20.6f}")

        lines.append("-" * 60)
        lines.append(f"Mean-Square Error: {self.mse:.6f}")
        lines.append(f"AIC: {self.aic:.6f}")
        lines.append(f"BIC: {self.bic:.6f}")
        for warning in self.warnings:
            lines.append(f"Warning: {warning}")
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MarginalSolution(n={self.n_observations}, k={self.n_features}, "
            f"mse={self.mse:.6g}, backend={self.backend_name!r})"
        )
