"""
Universal DataSource for PySlopes.

DataSource is the "I have data" abstraction. It doesn't know or care
what domain consumes it. It just provides named float64 columns, plus
an optional label per row.

Like a lumber yard: provides raw logs. Doesn't care if you're making
furniture, paper, or two-by-fours.

Usage:
    from pyslopes.core import DataSource, Record

    ds = DataSource.from_arrays(X=X, y=y)
    ds = DataSource.from_dataframe(df, label='neighborhood')
    ds = DataSource.from_records(records, target='mv')

    # Access columns
    ds.keys()  # frozenset({'crim', 'zn', ..., 'mv'})
    crim = ds['crim']
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pyslopes.core.exceptions import ValidationError, DimensionError
from pyslopes.core.capabilities import (
    CAPABILITY_MATERIALIZED,
    CAPABILITY_REPEATABLE,
    CAPABILITY_LABELLED,
)

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class Record:
    """
    One observation: named feature values, a target value and a label.

    The label identifies the row for humans (e.g. a neighborhood name);
    no computation reads it.
    """
    features: Mapping[str, float]
    target: float
    label: str = ''

    def __post_init__(self):
        # Freeze the feature mapping along with the record
        object.__setattr__(self, 'features', MappingProxyType(dict(self.features)))

    def value(self, feature: str) -> float:
        """Value of one feature for this record."""
        try:
            return self.features[feature]
        except KeyError:
            raise KeyError(
                f"Record {self.label!r} has no feature '{feature}'. "
                f"Available: {sorted(self.features)}"
            ) from None


@dataclass
class DataSource:
    """
    Universal data container. Domain-agnostic.

    Construct via factory classmethods, not directly.

    Columns are read-only float64 arrays, so one DataSource can be shared
    by any number of concurrent readers without synchronization.
    """
    _data: dict[str, Any]
    _capabilities: frozenset[str]
    _metadata: dict[str, Any] = field(default_factory=dict)
    _labels: tuple[str, ...] | None = None

    # === Array Access ===

    def keys(self) -> frozenset[str]:
        """
        Return the names of all available columns.

        Example:
            >>> ds = DataSource.from_arrays(x=[1, 2], y=[3, 4])
            >>> ds.keys()
            frozenset({'x', 'y'})
        """
        return frozenset(k for k in self._data.keys() if not k.startswith('_'))

    def __getitem__(self, key: str) -> Any:
        """
        Access a named column.

        Raises:
            KeyError: If key not found, with helpful message listing available keys
        """
        if key not in self._data:
            available = sorted(self.keys())
            raise KeyError(
                f"DataSource has no array '{key}'. Available: {available}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        """Check if a key exists."""
        return key in self._data

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of statistical units (rows)."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        """Domain-agnostic metadata."""
        return self._metadata.copy()

    @property
    def labels(self) -> tuple[str, ...] | None:
        """Row labels, if the source carried them."""
        return self._labels

    def supports(self, capability: str) -> bool:
        """
        Check if this DataSource supports a capability.

        Args:
            capability: Use constants from pyslopes.core.capabilities

        Note:
            Unknown capabilities return False, never raise.
        """
        return capability in self._capabilities

    def records(
        self,
        *,
        target: str | None = None,
        features: Sequence[str] | None = None,
    ) -> Iterator[Record]:
        """
        Iterate over rows as Records.

        Args:
            target: Target column. Defaults to metadata['target'].
            features: Feature columns. Defaults to metadata['features'],
                else every column except the target.

        Yields:
            One Record per row, in order
        """
        target = target or self._metadata.get('target')
        if target is None:
            raise ValidationError("records(): no target given and none in metadata")
        if features is None:
            features = self._metadata.get('features') or sorted(
                k for k in self.keys() if k != target
            )
        columns = {name: self[name] for name in features}
        y = self[target]
        labels = self._labels or ('',) * len(y)

        for i, label in enumerate(labels):
            yield Record(
                features={name: float(col[i]) for name, col in columns.items()},
                target=float(y[i]),
                label=label,
            )

    # === Factory Methods ===

    @classmethod
    def from_arrays(
        cls,
        *,
        X: NDArray | None = None,
        y: NDArray | None = None,
        columns: list[str] | None = None,
        labels: Sequence[str] | None = None,
        **named_arrays: NDArray,
    ) -> DataSource:
        """
        Construct from NumPy arrays.

        A 2D X is split into one column per name in `columns`
        (default 'x0', 'x1', ...).

        Raises:
            DimensionError: If `columns` does not match the width of X
            ValidationError: If a name is used twice, including a column
                named 'y' when y is given
        """
        storage: dict[str, Any] = {}
        n_obs: int | None = None

        if X is not None:
            X = np.asarray(X, dtype=np.float64)
            if X.ndim == 1:
                X = X.reshape(-1, 1)
            if columns is None:
                columns = [f"x{i}" for i in range(X.shape[1])]
            if len(columns) != X.shape[1]:
                raise DimensionError(
                    f"X has {X.shape[1]} columns but {len(columns)} names were given"
                )
            if len(set(columns)) != len(columns):
                raise ValidationError(f"columns: duplicate names in {list(columns)}")
            if y is not None and 'y' in columns:
                raise ValidationError("column name 'y' collides with the target")
            for i, col in enumerate(columns):
                storage[col] = X[:, i]
            n_obs = X.shape[0]

        if y is not None:
            y = np.asarray(y, dtype=np.float64)
            if y.ndim == 2 and y.shape[1] == 1:
                y = y.ravel()
            storage['y'] = y
            n_obs = n_obs if n_obs is not None else y.shape[0]

        for name, arr in named_arrays.items():
            if name in storage:
                raise ValidationError(f"array name '{name}' collides with a column of X")
            storage[name] = np.asarray(arr, dtype=np.float64)
            n_obs = n_obs if n_obs is not None else storage[name].shape[0]

        metadata: dict[str, Any] = {'n_observations': n_obs or 0, 'source': 'arrays'}
        if X is not None:
            metadata['features'] = list(columns)
        if y is not None:
            metadata['target'] = 'y'

        return cls._build(storage, metadata, labels)

    @classmethod
    def from_dataframe(
        cls,
        df: 'pd.DataFrame',
        *,
        label: str | None = None,
        target: str | None = None,
        source_path: str | None = None,
    ) -> DataSource:
        """
        Construct from pandas DataFrame.

        Every column except `label` must already be numeric. When `target`
        is given, the remaining numeric columns are recorded as features.
        """
        storage: dict[str, Any] = {}

        for col in df.columns:
            if col == label:
                continue
            storage[str(col)] = df[col].to_numpy(dtype=np.float64)

        labels = None
        if label is not None:
            labels = tuple(str(v) for v in df[label].tolist())

        metadata = {
            'n_observations': len(df),
            'source': 'dataframe',
            'columns': [str(c) for c in df.columns if c != label],
        }
        if target is not None:
            if target not in storage:
                raise ValidationError(f"target '{target}' is not a column of the DataFrame")
            metadata['target'] = target
            metadata['features'] = [c for c in metadata['columns'] if c != target]
        if source_path:
            metadata['source_path'] = source_path

        return cls._build(storage, metadata, labels)

    @classmethod
    def from_records(
        cls,
        records: Sequence[Record],
        *,
        target: str = 'y',
    ) -> DataSource:
        """
        Construct from an ordered sequence of Records.

        Every record must supply the same feature names as the first one.

        Args:
            records: Rows, in order
            target: Column name under which the target values are stored
        """
        records = list(records)
        if not records:
            raise ValidationError("records: must contain at least one record")

        features = list(records[0].features)
        if target in features:
            raise ValidationError(
                f"target name '{target}' collides with a feature name"
            )
        expected = set(features)
        for i, record in enumerate(records):
            if set(record.features) != expected:
                missing = sorted(expected - set(record.features))
                extra = sorted(set(record.features) - expected)
                raise ValidationError(
                    f"records[{i}] ({record.label!r}): feature mismatch, "
                    f"missing={missing}, unexpected={extra}"
                )

        storage: dict[str, Any] = {
            name: np.fromiter(
                (r.features[name] for r in records), dtype=np.float64, count=len(records)
            )
            for name in features
        }
        storage[target] = np.fromiter(
            (r.target for r in records), dtype=np.float64, count=len(records)
        )
        metadata = {
            'n_observations': len(records),
            'source': 'records',
            'features': features,
            'target': target,
        }
        return cls._build(storage, metadata, tuple(r.label for r in records))

    @classmethod
    def _build(
        cls,
        storage: dict[str, Any],
        metadata: dict[str, Any],
        labels: Sequence[str] | None,
    ) -> DataSource:
        """Freeze column arrays and attach capabilities."""
        # Read-only views; the caller's own arrays stay writeable
        storage = {name: arr.view() for name, arr in storage.items()}
        for arr in storage.values():
            arr.flags.writeable = False

        capabilities = {CAPABILITY_MATERIALIZED, CAPABILITY_REPEATABLE}
        if labels is not None:
            labels = tuple(labels)
            if len(labels) != metadata['n_observations']:
                raise DimensionError(
                    f"Inconsistent lengths: labels={len(labels)}, "
                    f"rows={metadata['n_observations']}"
                )
            capabilities.add(CAPABILITY_LABELLED)

        return cls(
            _data=storage,
            _capabilities=frozenset(capabilities),
            _metadata=metadata,
            _labels=labels,
        )
