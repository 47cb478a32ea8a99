"""
Tolerance tiers for numerical comparison.

Defines precision expectations when comparing two fits of the same data:
- Same summation order (sequential vs sequential): bit-for-bit
- Reordered reduction (concurrent collector vs sequential): the per-feature
  values are identical, but the pooled error sum is added in arrival
  order, so only agreement to a few ulps is guaranteed

Used by the test suite and by MarginalSolution.equivalent_to().
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Same features, same order, same arithmetic
EXACT = ToleranceTier(
    rtol=0.0,
    atol=0.0,
    name='exact',
    description='Identical summation order, bit-for-bit equal',
)

# Floating-point addition is not associative; arrival order varies per run
REORDERED_SUM = ToleranceTier(
    rtol=1e-12,
    atol=1e-12,
    name='reordered_sum',
    description='Float64 reduction in arbitrary order, within a few ulps',
)


# Backends that reduce error sums in FeatureSet order
ORDERED_BACKENDS = frozenset({'sequential', 'pool_gather'})


def select_tolerance(backend_a: str, backend_b: str) -> ToleranceTier:
    """Select the tier for comparing results of two backends."""
    if backend_a in ORDERED_BACKENDS and backend_b in ORDERED_BACKENDS:
        return EXACT
    return REORDERED_SUM
