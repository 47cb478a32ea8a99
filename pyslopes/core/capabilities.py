"""
Capability string constants for PySlopes.

This module is the SINGLE SOURCE OF TRUTH for capability strings.
Import from here, never use raw strings.

Usage:
    from pyslopes.core.capabilities import CAPABILITY_LABELLED

    if ds.supports(CAPABILITY_LABELLED):
        labels = ds.labels
"""

# Data can be returned as full numpy arrays in memory
CAPABILITY_MATERIALIZED = 'materialized'

# Data can be iterated multiple times (two-pass regression needs this)
CAPABILITY_REPEATABLE = 'repeatable'

# Every row carries an identifying label (ignored by the fit)
CAPABILITY_LABELLED = 'labelled'

# All capabilities as a frozenset for validation
ALL_CAPABILITIES = frozenset({
    CAPABILITY_MATERIALIZED,
    CAPABILITY_REPEATABLE,
    CAPABILITY_LABELLED,
})

__all__ = [
    'CAPABILITY_MATERIALIZED',
    'CAPABILITY_REPEATABLE',
    'CAPABILITY_LABELLED',
    'ALL_CAPABILITIES',
]
