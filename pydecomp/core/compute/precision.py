"""
Numerical precision constants and utilities.

Provides machine epsilon and the default deflation tolerance used by the
unbounded entry points of the iterative decompositions.
"""

import numpy as np
from numpy.typing import DTypeLike, NDArray
from typing import Any


# Machine epsilon for float64 / complex128
EPSILON_64: float = float(np.finfo(np.float64).eps)  # ~2.22e-16

# Machine epsilon for float32 / complex64
EPSILON_32: float = float(np.finfo(np.float32).eps)  # ~1.19e-7


def machine_epsilon(dtype: DTypeLike = np.float64) -> float:
    """
    Get machine epsilon for a given dtype.

    Complex dtypes report the epsilon of their real counterpart.
    """
    return float(np.finfo(dtype).eps)


def default_epsilon(dtype: DTypeLike) -> float:
    """Deflation tolerance used when the caller gives no explicit eps."""
    return machine_epsilon(dtype)


def real_dtype(dtype: DTypeLike) -> np.dtype:
    """Real counterpart of a (possibly complex) floating dtype."""
    return np.finfo(dtype).dtype


def phase(x: complex | float) -> complex | float:
    """
    Unit-modulus factor of a scalar: x / |x|, or 1 for zero.

    For real scalars this is the sign, with sign(0) = 1.
    """
    modulus = abs(x)
    if modulus == 0:
        return 1.0
    return x / modulus


def frobenius_norm(a: NDArray[np.inexact[Any]]) -> float:
    """Frobenius norm, 0.0 for empty matrices."""
    if a.size == 0:
        return 0.0
    return float(np.linalg.norm(a))
