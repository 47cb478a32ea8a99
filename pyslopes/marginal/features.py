"""
Feature identifiers and the Boston housing layout.

This module is the SINGLE SOURCE OF TRUTH for the feature list. Every
caller that needs "the twelve features" imports BOSTON_FEATURES from
here instead of spelling the names out again.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pyslopes.core.validation import check_identifiers


@dataclass(frozen=True)
class FeatureSet:
    """
    Fixed, ordered, duplicate-free set of feature identifiers.
    
    Known before fitting begins and never mutated. Iteration order is the
    declaration order, which is also the order coefficients are reported in.
    
    Construction:
        FeatureSet(('crim', 'zn'))
        FeatureSet.of('crim', 'zn')
        FeatureSet.coerce(['crim', 'zn'])    # passes FeatureSets through
    """
    names: tuple[str, ...]
    
    def __post_init__(self):
        object.__setattr__(self, 'names', check_identifiers(self.names, 'features'))
    
    @classmethod
    def of(cls, *names: str) -> FeatureSet:
        return cls(names)
    
    @classmethod
    def coerce(cls, features: FeatureSet | Iterable[str]) -> FeatureSet:
        if isinstance(features, FeatureSet):
            return features
        if isinstance(features, str):
            # rejected by check_identifiers
            return cls(features)
        return cls(tuple(features))
    
    def __iter__(self) -> Iterator[str]:
        return iter(self.names)
    
    def __len__(self) -> int:
        return len(self.names)
    
    def __contains__(self, name: object) -> bool:
        return name in self.names
    
    def __repr__(self) -> str:
        return f"FeatureSet({', '.join(self.names)})"


# Row label column: identifies a record, never used as a regressor
BOSTON_LABEL = 'neighborhood'

# Median home value, the column every feature is regressed against
BOSTON_TARGET = 'mv'

BOSTON_FEATURES = FeatureSet.of(
    'crim',
    'zn',
    'indus',
    'chas',
    'nox',
    'rooms',
    'age',
    'dis',
    'rad',
    'tax',
    'ptratio',
    'lstat',
)

# Column order of the source file
BOSTON_COLUMNS: tuple[str, ...] = (BOSTON_LABEL, *BOSTON_FEATURES, BOSTON_TARGET)

# Columns parsed as integer literals rather than floats
BOSTON_INTEGER_COLUMNS: tuple[str, ...] = ('chas',)
