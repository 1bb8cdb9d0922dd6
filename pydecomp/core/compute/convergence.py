"""
Convergence parameters for the iterative decompositions.

Schur, symmetric eigen and SVD refine a condensed form until every
coupling entry falls below a tolerance. The (eps, max_niter) pair that
controls this is request-scoped: it is built per call and never stored
globally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from numpy.typing import DTypeLike

from pydecomp.core.compute.precision import default_epsilon
from pydecomp.core.validation import check_max_niter, check_tolerance


@dataclass(frozen=True)
class ConvergenceCriteria:
    """
    Deflation tolerance and iteration budget.

    Attributes:
        eps: Non-negative tolerance below which an off-diagonal entry,
             relative to its neighbouring diagonal entries, is treated
             as zero.
        max_niter: Maximum number of iterations; 0 means unbounded.
    """
    eps: float
    max_niter: int

    @classmethod
    def build(cls, eps: Any, max_niter: Any) -> ConvergenceCriteria:
        """Validate user-supplied parameters."""
        return cls(
            eps=check_tolerance(eps, 'eps'),
            max_niter=check_max_niter(max_niter, 'max_niter'),
        )

    @classmethod
    def unbounded(cls, dtype: DTypeLike) -> ConvergenceCriteria:
        """Machine epsilon of dtype with no iteration ceiling."""
        return cls(eps=default_epsilon(dtype), max_niter=0)

    @property
    def is_bounded(self) -> bool:
        return self.max_niter != 0

    def exhausted(self, niter: int) -> bool:
        """True once niter iterations exceed a nonzero budget."""
        return self.is_bounded and niter > self.max_niter
