"""
Concurrency tests for the per-feature backends.

The kernel is replaced with instrumented versions to force particular
interleavings: reversed completion order, a straggler finishing long after
the others, workers that must all be inside the kernel at once, and a
worker that raises.
"""

import threading
import time

import pytest

from pyslopes.core.exceptions import FeatureFitError
from pyslopes.core.protocols import Backend
from pyslopes.marginal import fit, MarginalDesign, BOSTON_FEATURES
from pyslopes.marginal.backends import (
    PoolGatherBackend,
    SequentialBackend,
    ThreadedFanInBackend,
)
from pyslopes.marginal.backends import pool, threaded
from pyslopes.marginal.backends._regress import regress


CONCURRENT = [
    (threaded, 'threads'),
    (pool, 'pool'),
]


def _feature_of(design, x):
    """Recover which feature a column belongs to."""
    for feature in design.features:
        if design.column(feature) is x:
            return feature
    raise AssertionError("column not found in design")


@pytest.fixture
def design(marginal_source):
    return MarginalDesign.from_datasource(marginal_source)


class TestProtocol:

    @pytest.mark.parametrize("backend", [
        ThreadedFanInBackend(), PoolGatherBackend(), SequentialBackend(),
    ])
    def test_backends_satisfy_protocol(self, backend):
        assert isinstance(backend, Backend)

    def test_pool_size_recorded(self, design):
        result = PoolGatherBackend(max_workers=2).solve(design)
        assert result.info['n_workers'] == 2
        reference = SequentialBackend().solve(design)
        assert dict(result.params.coefficients) == dict(reference.params.coefficients)


class TestInterleavings:

    @pytest.mark.parametrize("module, choice", CONCURRENT)
    def test_reverse_completion_order(self, design, monkeypatch, module, choice):
        """Last feature finishes first; results are unchanged."""
        order = list(design.features)
        finished = []
        finished_lock = threading.Lock()

        def delayed(x, y):
            feature = _feature_of(design, x)
            time.sleep(0.01 * (len(order) - order.index(feature)))
            out = regress(x, y)
            with finished_lock:
                finished.append(feature)
            return out

        monkeypatch.setattr(module, 'regress', delayed)
        result = fit(design, backend=choice)
        reference = fit(design, backend='sequential')

        assert finished[0] == order[-1]
        assert result.equivalent_to(reference)

    @pytest.mark.parametrize("module, choice", CONCURRENT)
    def test_straggler_is_not_dropped(self, design, monkeypatch, module, choice):
        """The stream stays open until the slowest worker has published."""
        def straggle(x, y):
            if _feature_of(design, x) == 'crim':
                time.sleep(0.2)
            return regress(x, y)

        monkeypatch.setattr(module, 'regress', straggle)
        result = fit(design, backend=choice)
        reference = fit(design, backend='sequential')

        assert tuple(result.sse_by_feature) == BOSTON_FEATURES.names
        assert result.sse_by_feature['crim'] == reference.sse_by_feature['crim']
        assert result.mse == pytest.approx(reference.mse, rel=1e-12)

    @pytest.mark.parametrize("module, choice", CONCURRENT)
    def test_workers_run_in_parallel(self, design, monkeypatch, module, choice):
        """Every worker is inside the kernel at the same time."""
        barrier = threading.Barrier(design.k, timeout=10)

        def rendezvous(x, y):
            barrier.wait()
            return regress(x, y)

        monkeypatch.setattr(module, 'regress', rendezvous)
        result = fit(design, backend=choice)
        assert len(result.coefficients) == design.k

    def test_no_threads_left_behind(self, design):
        fit(design, backend='threads')
        leftovers = [t.name for t in threading.enumerate() if t.name.startswith('pyslopes')]
        assert leftovers == []


class TestWorkerFailure:

    @pytest.mark.parametrize("module, choice", CONCURRENT)
    def test_failure_raised_after_all_workers(self, design, monkeypatch, module, choice):
        calls = []
        calls_lock = threading.Lock()

        def faulty(x, y):
            feature = _feature_of(design, x)
            with calls_lock:
                calls.append(feature)
            if feature == 'nox':
                raise RuntimeError("kernel exploded")
            time.sleep(0.01)
            return regress(x, y)

        monkeypatch.setattr(module, 'regress', faulty)
        with pytest.raises(FeatureFitError, match="'nox'") as exc_info:
            fit(design, backend=choice)

        assert exc_info.value.feature == 'nox'
        assert exc_info.value.backend_name in ('threads_fan_in', 'pool_gather')
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert sorted(calls) == sorted(BOSTON_FEATURES)
