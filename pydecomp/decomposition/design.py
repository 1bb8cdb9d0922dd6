"""
Matrix Design.

Design wraps the caller's matrix after validation. It knows which shape
and field a decomposition needs; the kernels behind it trust it and never
re-check per inner loop iteration.

Every kernel consumes its own working copy (working_copy()), so a
decomposition never aliases caller data and the design itself stays
unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydecomp.core.compute.precision import machine_epsilon
from pydecomp.core.validation import (
    check_2d,
    check_array,
    check_finite,
    check_real,
    check_square,
)


@dataclass(frozen=True)
class MatrixDesign:
    """
    Validated, owned input matrix.

    Construction:
        MatrixDesign.build(a)                     # any R x C matrix
        MatrixDesign.build(a, square=True)        # Cholesky, Schur, ...
        MatrixDesign.build(a, square=True, real=True)   # UDU
    """
    _a: NDArray[np.inexact[Any]]
    _n_rows: int
    _n_cols: int

    @classmethod
    def build(
        cls,
        matrix: ArrayLike,
        *,
        name: str = 'matrix',
        square: bool = False,
        real: bool = False,
    ) -> MatrixDesign:
        """
        Validate matrix and take an owned copy.

        Args:
            matrix: Any 2D array-like of real or complex numbers
            name: Parameter name for error messages
            square: Reject non-square input
            real: Reject complex input

        Raises:
            ValidationError: Non-numeric, non-finite, or complex when real=True
            DimensionError: Not 2D, or not square when square=True
        """
        a = check_array(matrix, name)
        check_2d(a, name)
        if square:
            check_square(a, name)
        if real:
            check_real(a, name)
        check_finite(a, name)

        a = np.array(a, copy=True, order='C')
        n_rows, n_cols = a.shape
        return cls(_a=a, _n_rows=n_rows, _n_cols=n_cols)

    # === Properties ===

    @property
    def n_rows(self) -> int:
        return self._n_rows

    @property
    def n_cols(self) -> int:
        return self._n_cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._n_rows, self._n_cols)

    @property
    def dtype(self) -> np.dtype:
        return self._a.dtype

    @property
    def is_complex(self) -> bool:
        return bool(np.iscomplexobj(self._a))

    @property
    def min_dim(self) -> int:
        """min(R, C): number of reflectors / pivots / singular values."""
        return min(self._n_rows, self._n_cols)

    def working_copy(self) -> NDArray[np.inexact[Any]]:
        """Fresh copy for a kernel to consume in place."""
        return self._a.copy()

    def adjoint_copy(self) -> NDArray[np.inexact[Any]]:
        """Fresh copy of the conjugate transpose."""
        return np.ascontiguousarray(self._a.conj().T)

    def max_diagonal_imag(self) -> float:
        """Largest |imag| on the diagonal (0 for real input)."""
        if not self.is_complex or self.min_dim == 0:
            return 0.0
        return float(np.max(np.abs(np.diag(self._a).imag)))

    def diagonal_imag_tolerance(self) -> float:
        """Rounding level of a Hermitian diagonal: min_dim · ε · max|a_ii|."""
        if self.min_dim == 0:
            return 0.0
        scale = float(np.max(np.abs(np.diag(self._a))))
        return self.min_dim * machine_epsilon(self.dtype) * scale

    def metadata(self) -> dict[str, Any]:
        return {
            'shape': self.shape,
            'dtype': str(self.dtype),
        }
