"""
LU decomposition kernels.

Gaussian elimination with partial (row) pivoting and with full pivoting.
Both accept any shape and never fail: singular input yields a formally
valid but rank-deficient U.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydecomp.decomposition.permutation import PermutationSequence


@dataclass(frozen=True)
class LUParams:
    """
    Factor payload for LU.

    Attributes:
        lu: Combined matrix; strictly below the diagonal the multipliers
            of the unit lower-triangular L, on/above the diagonal U
        row_perm: Row swaps P
        col_perm: Column swaps Q (full pivoting only)
        n_pivots: Number of nonzero pivots met during elimination
    """
    lu: NDArray[np.inexact[Any]]
    row_perm: PermutationSequence
    col_perm: PermutationSequence | None
    n_pivots: int


def _eliminate(lu: NDArray[np.inexact[Any]], i: int) -> None:
    """One Gauss step below the (nonzero) pivot lu[i, i]."""
    lu[i + 1:, i] /= lu[i, i]
    lu[i + 1:, i + 1:] -= np.outer(lu[i + 1:, i], lu[i, i + 1:])


def partial_pivot_lu(a: NDArray[np.inexact[Any]]) -> LUParams:
    """
    LU with partial pivoting of a (consumed in place): P·A = L·U.

    At step i the row at or below i with the largest |a[r, i]| is swapped
    into place, so every multiplier satisfies |l| <= 1. A column whose
    candidates are all exactly zero is skipped and elimination continues
    with the next column.
    """
    n_rows, n_cols = a.shape
    swaps = []
    n_pivots = 0
    for i in range(min(n_rows, n_cols)):
        piv = i + int(np.argmax(np.abs(a[i:, i])))
        if a[piv, i] == 0:
            continue
        n_pivots += 1
        if piv != i:
            swaps.append((i, piv))
            a[[i, piv]] = a[[piv, i]]
        _eliminate(a, i)
    return LUParams(
        lu=a,
        row_perm=PermutationSequence(tuple(swaps)),
        col_perm=None,
        n_pivots=n_pivots,
    )


def full_pivot_lu(a: NDArray[np.inexact[Any]]) -> LUParams:
    """
    LU with full pivoting of a (consumed in place): P·A·Q = L·U.

    At step i the entry of largest modulus in the remaining submatrix is
    moved to (i, i); ties go to the first maximum in column-major order.
    Elimination stops once the remaining submatrix is exactly zero.
    """
    n_rows, n_cols = a.shape
    row_swaps = []
    col_swaps = []
    n_pivots = 0
    for i in range(min(n_rows, n_cols)):
        sub = np.abs(a[i:, i:])
        flat = int(np.argmax(sub.ravel(order='F')))
        r, c = np.unravel_index(flat, sub.shape, order='F')
        row_piv, col_piv = i + int(r), i + int(c)
        if a[row_piv, col_piv] == 0:
            break
        n_pivots += 1
        if col_piv != i:
            col_swaps.append((i, col_piv))
            a[:, [i, col_piv]] = a[:, [col_piv, i]]
        if row_piv != i:
            row_swaps.append((i, row_piv))
            a[[i, row_piv]] = a[[row_piv, i]]
        _eliminate(a, i)
    return LUParams(
        lu=a,
        row_perm=PermutationSequence(tuple(row_swaps)),
        col_perm=PermutationSequence(tuple(col_swaps)),
        n_pivots=n_pivots,
    )
