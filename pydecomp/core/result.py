"""
Generic result container for all PyDecomp computations.

The Result class provides a standardized envelope that every decomposition
uses. This enables shared tooling for timing, diagnostics, and
reproducibility while allowing each decomposition to define its own
factor payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, iterations, eps, pivots)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Factor payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for matrix decompositions.

    Type Parameters:
        P: The decomposition-specific factor payload type

    Attributes:
        params: Decomposition-specific factors (reflectors, pivots, ...)
        info: Structured metadata (method, convergence, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        method: Identifier of the algorithm that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> # Direct method (no convergence notion)
        >>> Result(
        ...     params=QRParams(...),
        ...     info={'method': 'householder_qr', 'shape': (5, 3)},
        ...     timing={'total_seconds': 0.01},
        ...     method='householder_qr'
        ... )

        >>> # Iterative method
        >>> Result(
        ...     params=SchurParams(...),
        ...     info={'method': 'francis_qr', 'iterations': 23, 'eps': 2.2e-16},
        ...     timing={'total_seconds': 0.5, 'hessenberg': 0.1, 'iterations': 0.4},
        ...     method='francis_qr'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    method: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
