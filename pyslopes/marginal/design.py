"""
Marginal regression Design.

Design wraps a DataSource and extracts the target vector plus one column
per feature. It knows it's building per-feature regressions; DataSource
doesn't.

Like a furniture maker visiting the lumber yard: "I need these logs
for making chairs." The lumber yard just provides logs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyslopes.core.datasource import DataSource
from pyslopes.core.capabilities import CAPABILITY_MATERIALIZED, CAPABILITY_REPEATABLE
from pyslopes.core.exceptions import ValidationError
from pyslopes.core.validation import (
    check_array,
    check_1d,
    check_consistent_length,
    check_min_samples,
)
from pyslopes.marginal.features import FeatureSet


@dataclass(frozen=True)
class MarginalDesign:
    """
    Validated, read-only inputs for a per-feature fit.

    Immutable after construction. Shared by every worker of a fit without
    locking: workers only ever read columns.

    Construction:
        MarginalDesign.from_datasource(ds)                          # metadata defaults
        MarginalDesign.from_datasource(ds, features=F, target='mv')
        MarginalDesign.from_arrays(X, y, features=['a', 'b'])
    """
    _columns: Mapping[str, NDArray[np.floating[Any]]]
    _y: NDArray[np.floating[Any]]
    _features: FeatureSet
    _target: str
    _n: int
    _source: DataSource | None = None

    @classmethod
    def from_datasource(
        cls,
        source: DataSource,
        *,
        features: FeatureSet | Iterable[str] | None = None,
        target: str | None = None,
    ) -> MarginalDesign:
        """
        Build Design from DataSource.

        Args:
            source: The DataSource
            features: Feature identifiers. If None, uses the source's
                'features' metadata, else every column except the target.
            target: Target column. If None, uses the source's 'target'
                metadata, else 'y'.

        Raises:
            ValidationError: If the target or any feature is not a column
                of the source, or the source has no rows
        """
        metadata = source.metadata
        if target is None:
            target = metadata.get('target', 'y')
        if target not in source:
            raise ValidationError(
                f"target '{target}' is not a column. Available: {sorted(source.keys())}"
            )

        if features is None:
            features = metadata.get('features') or sorted(
                k for k in source.keys() if k != target
            )
            if not features:
                raise ValidationError("No feature columns available")
        feature_set = FeatureSet.coerce(features)

        unknown = [name for name in feature_set if name not in source]
        if unknown:
            raise ValidationError(
                f"features {unknown} are not columns. Available: {sorted(source.keys())}"
            )

        columns = {name: source[name] for name in feature_set}
        return cls._build(columns, source[target], feature_set, target, source=source)

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        *,
        features: FeatureSet | Iterable[str] | None = None,
    ) -> MarginalDesign:
        """Build Design directly from an (n x k) matrix and a target vector."""
        source = DataSource.from_arrays(
            X=check_array(X, 'X'),
            y=check_array(y, 'y'),
            columns=None if features is None else list(FeatureSet.coerce(features)),
        )
        return cls.from_datasource(source)

    @classmethod
    def _build(
        cls,
        columns: dict[str, Any],
        y: Any,
        features: FeatureSet,
        target: str,
        source: DataSource | None,
    ) -> MarginalDesign:
        """Internal builder with validation."""
        y_arr = check_array(y, target)
        check_1d(y_arr, target)
        check_min_samples(y_arr, 1, target)

        checked = {}
        for name in features:
            col = check_array(columns[name], name)
            check_1d(col, name)
            checked[name] = col
        check_consistent_length(
            y_arr, *checked.values(), names=(target, *checked.keys())
        )

        return cls(
            _columns=MappingProxyType(checked),
            _y=y_arr,
            _features=features,
            _target=target,
            _n=y_arr.shape[0],
            _source=source,
        )

    # === Properties ===

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Target vector (n,)."""
        return self._y

    @property
    def features(self) -> FeatureSet:
        """Feature identifiers, in reporting order."""
        return self._features

    @property
    def target(self) -> str:
        """Name of the target column."""
        return self._target

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def k(self) -> int:
        """Number of features."""
        return len(self._features)

    @property
    def source(self) -> DataSource | None:
        """Original DataSource, if available."""
        return self._source

    def supports(self, capability: str) -> bool:
        """Check if underlying data supports a capability."""
        if self._source is not None:
            return self._source.supports(capability)
        return capability in (CAPABILITY_MATERIALIZED, CAPABILITY_REPEATABLE)

    def column(self, feature: str) -> NDArray[np.floating[Any]]:
        """
        Values of one feature across all records.

        Raises:
            KeyError: If the feature is not part of this design
        """
        try:
            return self._columns[feature]
        except KeyError:
            raise KeyError(
                f"Design has no feature '{feature}'. Available: {list(self._features)}"
            ) from None
