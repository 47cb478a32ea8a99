"""
Per-feature regression backends.

Available backends:
    ThreadedFanInBackend: One thread per feature, locked map, fan-in queue
    PoolGatherBackend: Thread pool, ordered gather, lock-free merge
    SequentialBackend: Single-threaded reference
"""

from pyslopes.marginal.backends.threaded import ThreadedFanInBackend
from pyslopes.marginal.backends.pool import PoolGatherBackend
from pyslopes.marginal.backends.sequential import SequentialBackend

__all__ = [
    "ThreadedFanInBackend",
    "PoolGatherBackend",
    "SequentialBackend",
]
