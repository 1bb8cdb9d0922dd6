"""
Core protocols for PyDecomp.

These define structural interfaces that every decomposition result
satisfies. We use Protocol (structural typing) rather than ABC (nominal
typing) so result classes stay plain dataclasses.

Design Principles:
    - Minimal contracts: prescribe only what's truly universal
    - Type-safe: use generics to preserve the payload type
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

import numpy as np
from numpy.typing import NDArray

P = TypeVar('P', covariant=True)  # Factor payload type


@runtime_checkable
class Factorization(Protocol[P]):
    """
    Minimal protocol for a decomposition result.

    Every decomposition wraps an immutable Result envelope and can rebuild
    the matrix it was computed from. Tooling (tests, benchmarks) uses
    recompose() to check the reconstruction identity without knowing
    which factors a particular decomposition exposes.
    """

    @property
    def method(self) -> str:
        """
        Algorithm identifier.

        Examples: 'householder_qr', 'partial_pivot_lu', 'francis_qr',
        'golub_kahan_svd'
        """
        ...

    @property
    def info(self) -> dict[str, Any]:
        """Structured metadata recorded by the kernel."""
        ...

    def recompose(self) -> NDArray[np.inexact[Any]]:
        """
        Multiply the factors back together.

        Returns:
            A matrix equal to the decomposed input within rounding.
        """
        ...
