"""
Core protocols for PySlopes.

These define structural interfaces that backends must satisfy. We use
Protocol (structural typing) rather than ABC (nominal typing) so a backend
only has to look right, not inherit from anything.
"""

from typing import Protocol, TypeVar, runtime_checkable

from pyslopes.core.result import Result

# Type variables for generic payloads
P = TypeVar('P', covariant=True)  # Parameter payload type
D = TypeVar('D', contravariant=True)  # Design type


@runtime_checkable
class Backend(Protocol[D, P]):
    """
    Protocol for computational backends.
    
    Each backend knows how to take a domain-specific design and produce a
    domain-specific parameter payload. Backends are stateless between
    calls: all data arrives through the design, all configuration at
    construction time. This makes them easy to test and swap.
    
    Type Parameters:
        D: The design type this backend accepts
        P: The parameter payload type this backend produces
    """
    
    @property
    def name(self) -> str:
        """
        Backend identifier.
        
        Examples: 'threads_fan_in', 'pool_gather', 'sequential'
        """
        ...
    
    def solve(self, design: D) -> Result[P]:
        """
        Execute the computation.
        
        Raises:
            NumericalError: If a worker failed
        """
        ...
