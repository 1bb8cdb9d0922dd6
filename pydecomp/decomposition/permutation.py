"""
Permutation encoding for pivoted decompositions.

A permutation is stored as the ordered sequence of transpositions the
pivoting kernel performed. Replaying the swaps against an identity matrix
reconstructs the permutation matrix exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class PermutationSequence:
    """
    Ordered sequence of (i, j) row or column swaps.

    For partial-pivot LU, permute_rows(A) gives P·A; for column-pivoted QR,
    permute_columns(A) gives A·P.
    """
    swaps: tuple[tuple[int, int], ...] = ()

    def __len__(self) -> int:
        return len(self.swaps)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(self.swaps)

    def permute_rows(self, m: NDArray[Any]) -> NDArray[Any]:
        """Apply the swaps in order to the rows of a copy of m."""
        out = np.array(m, copy=True)
        for i, j in self.swaps:
            out[[i, j]] = out[[j, i]]
        return out

    def inv_permute_rows(self, m: NDArray[Any]) -> NDArray[Any]:
        """Undo permute_rows: apply the swaps in reverse order."""
        out = np.array(m, copy=True)
        for i, j in reversed(self.swaps):
            out[[i, j]] = out[[j, i]]
        return out

    def permute_columns(self, m: NDArray[Any]) -> NDArray[Any]:
        """Apply the swaps in order to the columns of a copy of m."""
        out = np.array(m, copy=True)
        for i, j in self.swaps:
            out[:, [i, j]] = out[:, [j, i]]
        return out

    def inv_permute_columns(self, m: NDArray[Any]) -> NDArray[Any]:
        """Undo permute_columns: apply the swaps in reverse order."""
        out = np.array(m, copy=True)
        for i, j in reversed(self.swaps):
            out[:, [i, j]] = out[:, [j, i]]
        return out

    def to_matrix(self, n: int, dtype: Any = np.float64) -> NDArray[Any]:
        """
        Permutation matrix P of size n built by replaying the swaps on
        the identity, so that P @ A == permute_rows(A).
        """
        return self.permute_rows(np.eye(n, dtype=dtype))

    def indices(self, n: int) -> NDArray[np.intp]:
        """Index vector p with permute_rows(A) == A[p]."""
        return self.permute_rows(np.arange(n))

    def determinant_sign(self) -> int:
        """Determinant of the permutation matrix: ±1."""
        n_transpositions = sum(1 for i, j in self.swaps if i != j)
        return -1 if n_transpositions % 2 else 1
