"""
QR decomposition kernels.

Householder QR and column-pivoted Householder QR. One reflector per column
up to min(R, C) drives the matrix to upper-triangular form. Neither kernel
can fail: rank-deficient input simply produces a singular R.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydecomp.decomposition.backends.householder import Reflector
from pydecomp.decomposition.permutation import PermutationSequence


@dataclass(frozen=True)
class QRParams:
    """
    Factor payload for QR.

    Attributes:
        reduced: Working matrix after reduction. On/above the diagonal it
                 holds R; below the diagonal it is exactly zero.
        reflectors: One Householder reflector per reduced column
        col_perm: Column swaps (column-pivoted variant only)
    """
    reduced: NDArray[np.inexact[Any]]
    reflectors: tuple[Reflector, ...]
    col_perm: PermutationSequence | None = None


def _reduce_column(r: NDArray[np.inexact[Any]], i: int) -> Reflector:
    refl = Reflector.from_column(r[i:, i], offset=i)
    refl.apply_left(r[i:, i + 1:])
    r[i, i] = refl.beta
    r[i + 1:, i] = 0
    return refl


def householder_qr(a: NDArray[np.inexact[Any]]) -> QRParams:
    """
    Householder QR of a (consumed in place).

    Args:
        a: Owned (R x C) working copy

    Returns:
        QRParams with R in the upper triangle of `reduced`
    """
    n_rows, n_cols = a.shape
    reflectors = []
    for i in range(min(n_rows, n_cols)):
        reflectors.append(_reduce_column(a, i))
    return QRParams(reduced=a, reflectors=tuple(reflectors))


def col_piv_householder_qr(a: NDArray[np.inexact[Any]]) -> QRParams:
    """
    Householder QR with column pivoting (consumed in place).

    Before each reflection the remaining column with the largest norm is
    swapped into the current position; ties go to the first column
    reaching the maximum. The swaps satisfy A·P = Q·R.
    """
    n_rows, n_cols = a.shape
    swaps = []
    reflectors = []
    for i in range(min(n_rows, n_cols)):
        norms = np.linalg.norm(a[i:, i:], axis=0)
        piv = i + int(np.argmax(norms))
        if piv != i:
            swaps.append((i, piv))
            a[:, [i, piv]] = a[:, [piv, i]]
        reflectors.append(_reduce_column(a, i))
    return QRParams(
        reduced=a,
        reflectors=tuple(reflectors),
        col_perm=PermutationSequence(tuple(swaps)),
    )
