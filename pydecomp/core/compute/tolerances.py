"""
Tolerance tiers for numerical validation.

Defines precision expectations when checking decompositions against
their input (reconstruction, orthogonality):
- FP64 (float64 / complex128): tight, a few hundred ulps scaled by size
- FP32 (float32 / complex64): relaxed for single-precision arithmetic

Used by the test suite and by callers who want to verify a result.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import DTypeLike


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Double precision reference path
FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-11,
    name='fp64',
    description='Double precision: reconstruction to ~1e-10 relative',
)

# Double precision, ill-conditioned inputs (cond > 1e8)
FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='fp64_ill_conditioned',
    description='Double precision, ill-conditioned input',
)

# Single precision
FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-4,
    name='fp32',
    description='Single precision: reconstruction to ~1e-4 relative',
)


def select_tolerance(
    dtype: DTypeLike,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select appropriate tolerance tier for a given dtype."""
    if np.finfo(dtype).bits <= 32:
        return FP32
    if is_ill_conditioned:
        return FP64_ILL_CONDITIONED
    return FP64
