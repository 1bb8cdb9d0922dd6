"""
Cholesky and UDU kernels.

Direct factorizations of symmetric (Hermitian) matrices. Their failure is
structural, not iteration-budget related: it is detected at the exact
pivot step that violates the required property.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydecomp.core.exceptions import NotPositiveDefiniteError, SingularMatrixError


@dataclass(frozen=True)
class CholeskyParams:
    """
    Factor payload for Cholesky.

    Attributes:
        l: Lower-triangular factor, exact zeros above the diagonal
    """
    l: NDArray[np.inexact[Any]]


@dataclass(frozen=True)
class UDUParams:
    """
    Factor payload for UDU.

    Attributes:
        u: Unit upper-triangular factor, exact zeros below the diagonal
        d: Diagonal of D
    """
    u: NDArray[np.floating[Any]]
    d: NDArray[np.floating[Any]]


def cholesky_lower(a: NDArray[np.inexact[Any]]) -> CholeskyParams:
    """
    Cholesky factor L with A = L·Lᴴ, reading only the lower triangle.

    Columns are eliminated left to right. The diagonal pivot of column j
    is the real part of a[j, j] - Σ |l[j, k]|²; the imaginary part of a
    Hermitian diagonal is zero and is ignored.

    Raises:
        NotPositiveDefiniteError: At the first pivot that is <= 0
    """
    n = a.shape[0]
    l = np.tril(a)

    for j in range(n):
        if j > 0:
            l[j:, j] -= l[j:, :j] @ l[j, :j].conj()
        pivot = float(np.real(l[j, j]))
        if not pivot > 0:
            raise NotPositiveDefiniteError(
                f"Matrix is not positive definite: pivot {j} is {pivot:.6g}",
                matrix_name='matrix',
                pivot_index=j,
                pivot_value=pivot,
            )
        denom = np.sqrt(pivot)
        l[j, j] = denom
        l[j + 1:, j] /= denom

    return CholeskyParams(l=l)


def udu_upper(a: NDArray[np.floating[Any]]) -> UDUParams:
    """
    U·D·Uᵀ factorization of a real symmetric matrix, reading only the
    upper triangle. No square roots are taken.

    Columns are processed from the last one backwards:
        d[j]    = a[j, j] - Σ_{k>j} d[k] u[j, k]²
        u[i, j] = (a[i, j] - Σ_{k>j} d[k] u[j, k] u[i, k]) / d[j],  i < j

    Raises:
        SingularMatrixError: At the first exactly zero pivot d[j]
    """
    n = a.shape[0]
    u = np.zeros_like(a)
    d = np.zeros(n, dtype=a.dtype)

    for j in range(n - 1, -1, -1):
        tail = slice(j + 1, n)
        weighted = d[tail] * u[j, tail]
        d_j = a[j, j] - weighted @ u[j, tail]
        if d_j == 0:
            raise SingularMatrixError(
                f"UDU pivot {j} is exactly zero",
                matrix_name='matrix',
                pivot_index=j,
                expected_rank=n,
            )
        d[j] = d_j
        u[:j, j] = (a[:j, j] - u[:j, tail] @ weighted) / d_j
        u[j, j] = 1

    return UDUParams(u=u, d=d)
