"""
Decomposition solution types.

Each class wraps the immutable Result envelope produced by a kernel and
exposes the factor matrices. Factors are rebuilt or copied on access, so
a solution can never be mutated through the arrays it hands out.

The thin conveniences (solve, determinant, inverse, rank) compose the
factors with SciPy's triangular solver.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.linalg import solve_triangular

from pydecomp.core.compute.precision import machine_epsilon
from pydecomp.core.exceptions import DimensionError, ValidationError
from pydecomp.core.result import Result
from pydecomp.core.validation import check_rhs, check_tolerance
from pydecomp.decomposition.backends.cholesky import CholeskyParams, UDUParams
from pydecomp.decomposition.backends.hessenberg import HessenbergParams
from pydecomp.decomposition.backends.householder import accumulate_left
from pydecomp.decomposition.backends.lu import LUParams
from pydecomp.decomposition.backends.qr import QRParams
from pydecomp.decomposition.backends.schur import SchurParams
from pydecomp.decomposition.backends.svd import BidiagonalParams, SVDParams
from pydecomp.decomposition.backends.symmetric import EigenParams, TridiagonalParams
from pydecomp.decomposition.permutation import PermutationSequence

P = TypeVar('P')


@dataclass(frozen=True)
class _Decomposition(Generic[P]):
    """Common accessors for the Result envelope."""
    _result: Result[P]

    @property
    def params(self) -> P:
        return self._result.params

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def method(self) -> str:
        return self._result.method

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def shape(self) -> tuple[int, int]:
        return self._result.info['shape']

    def _require_square(self, what: str) -> int:
        n_rows, n_cols = self.shape
        if n_rows != n_cols:
            raise DimensionError(
                f"{what}: requires a square matrix, decomposition has shape {self.shape}"
            )
        return n_rows


def _rank_tolerance(diag: NDArray[np.inexact[Any]], shape: tuple[int, int], eps: float | None) -> float:
    """Threshold on |diag| relative to its leading entry."""
    if eps is None:
        eps = max(shape) * machine_epsilon(diag.dtype) if diag.size else 0.0
    else:
        eps = check_tolerance(eps, 'eps')
    lead = float(np.max(np.abs(diag), initial=0.0))
    return eps * lead


# ═══════════════════════════════════════════════════════════════════════
# QR
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class QR(_Decomposition[QRParams]):
    """
    QR decomposition A = Q·R.

    Q (R x k) has orthonormal columns, R (k x C) is upper triangular,
    k = min(R, C).
    """

    def r(self) -> NDArray[np.inexact[Any]]:
        """Upper-triangular factor, exact zeros below the diagonal."""
        k = min(self.shape)
        return np.triu(self.params.reduced[:k, :])

    def q(self) -> NDArray[np.inexact[Any]]:
        """Factor with orthonormal columns, built from the reflectors."""
        n_rows = self.shape[0]
        k = min(self.shape)
        return accumulate_left(self.params.reflectors, np.eye(n_rows, k, dtype=self.params.reduced.dtype))

    def unpack(self) -> tuple[NDArray[np.inexact[Any]], NDArray[np.inexact[Any]]]:
        return self.q(), self.r()

    def q_tr_mul(self, b: ArrayLike) -> NDArray[np.inexact[Any]]:
        """Qᴴ·b using the full set of reflectors (b has R rows)."""
        b_arr = check_rhs(b, self.shape[0], 'b')
        out = np.array(b_arr, dtype=np.result_type(b_arr, self.params.reduced), copy=True)
        column = out.ndim == 1
        if column:
            out = out[:, np.newaxis]
        accumulate_left(self.params.reflectors, out, adjoint=True)
        return out[:, 0] if column else out

    def is_invertible(self) -> bool:
        n_rows, n_cols = self.shape
        if n_rows != n_cols:
            return False
        return bool(np.all(np.diag(self.params.reduced) != 0))

    def _solve_r(self, b: ArrayLike) -> NDArray[np.inexact[Any]] | None:
        n = self._require_square('solve')
        if not self.is_invertible():
            return None
        qtb = self.q_tr_mul(b)
        return solve_triangular(self.r(), qtb[:n], lower=False)

    def solve(self, b: ArrayLike) -> NDArray[np.inexact[Any]] | None:
        """
        Solve A·x = b for square A.

        Returns:
            x, or None if R has a zero on its diagonal
        """
        return self._solve_r(b)

    def recompose(self) -> NDArray[np.inexact[Any]]:
        return self.q() @ self.r()


@dataclass(frozen=True)
class ColPivQR(QR):
    """
    QR decomposition with column pivoting, A·P = Q·R.
    """

    def p(self) -> PermutationSequence:
        """Column swaps: p().permute_columns(A) == A·P."""
        return self.params.col_perm

    def unpack(self) -> tuple[NDArray[np.inexact[Any]], NDArray[np.inexact[Any]], PermutationSequence]:
        return self.q(), self.r(), self.p()

    def rank(self, eps: float | None = None) -> int:
        """
        Numerical rank: diagonal entries of R above eps·|R[0, 0]|.

        The default eps is max(R, C) times machine epsilon.
        """
        diag = np.abs(np.diag(self.params.reduced))
        tol = _rank_tolerance(diag, self.shape, eps)
        return int(np.sum(diag > tol))

    def solve(self, b: ArrayLike) -> NDArray[np.inexact[Any]] | None:
        y = self._solve_r(b)
        if y is None:
            return None
        return self.p().inv_permute_rows(y)

    def recompose(self) -> NDArray[np.inexact[Any]]:
        return self.p().inv_permute_columns(self.q() @ self.r())


# ═══════════════════════════════════════════════════════════════════════
# LU
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LU(_Decomposition[LUParams]):
    """
    LU decomposition with partial pivoting, P·A = L·U.

    L (R x k) is unit lower triangular with |L[i, j]| <= 1,
    U (k x C) is upper triangular, k = min(R, C).
    """

    def l(self) -> NDArray[np.inexact[Any]]:
        """Unit lower-triangular factor, exact zeros above the diagonal."""
        n_rows = self.shape[0]
        k = min(self.shape)
        lu = self.params.lu
        return np.tril(lu[:, :k], -1) + np.eye(n_rows, k, dtype=lu.dtype)

    def u(self) -> NDArray[np.inexact[Any]]:
        """Upper-triangular factor, exact zeros below the diagonal."""
        k = min(self.shape)
        return np.triu(self.params.lu[:k, :])

    def p(self) -> PermutationSequence:
        """Row swaps: p().permute_rows(A) == P·A."""
        return self.params.row_perm

    def unpack(self) -> tuple[PermutationSequence, NDArray[np.inexact[Any]], NDArray[np.inexact[Any]]]:
        return self.p(), self.l(), self.u()

    def is_invertible(self) -> bool:
        n_rows, n_cols = self.shape
        if n_rows != n_cols:
            return False
        return bool(np.all(np.diag(self.params.lu) != 0))

    def determinant(self) -> complex | float:
        """Determinant of the square input."""
        self._require_square('determinant')
        sign = self.p().determinant_sign()
        if self.params.col_perm is not None:
            sign *= self.params.col_perm.determinant_sign()
        return sign * np.prod(np.diag(self.params.lu))

    def _solve_lu(self, b: ArrayLike) -> NDArray[np.inexact[Any]] | None:
        self._require_square('solve')
        b_arr = check_rhs(b, self.shape[0], 'b')
        if not self.is_invertible():
            return None
        y = solve_triangular(self.l(), self.p().permute_rows(b_arr), lower=True, unit_diagonal=True)
        return solve_triangular(self.u(), y, lower=False)

    def solve(self, b: ArrayLike) -> NDArray[np.inexact[Any]] | None:
        """
        Solve A·x = b for square A.

        Returns:
            x, or None if U has a zero pivot
        """
        return self._solve_lu(b)

    def try_inverse(self) -> NDArray[np.inexact[Any]] | None:
        """Inverse of the square input, or None if it is singular."""
        n = self._require_square('try_inverse')
        return self.solve(np.eye(n, dtype=self.params.lu.dtype))

    def recompose(self) -> NDArray[np.inexact[Any]]:
        return self.p().inv_permute_rows(self.l() @ self.u())


@dataclass(frozen=True)
class FullPivLU(LU):
    """
    LU decomposition with full pivoting, P·A·Q = L·U.
    """

    def q(self) -> PermutationSequence:
        """Column swaps: q().permute_columns(A) == A·Q."""
        return self.params.col_perm

    def unpack(self) -> tuple[
        PermutationSequence, NDArray[np.inexact[Any]], NDArray[np.inexact[Any]], PermutationSequence
    ]:
        return self.p(), self.l(), self.u(), self.q()

    def rank(self, eps: float | None = None) -> int:
        """
        Numerical rank: pivots above eps·|U[0, 0]|.

        The default eps is max(R, C) times machine epsilon.
        """
        diag = np.abs(np.diag(self.params.lu))
        tol = _rank_tolerance(diag, self.shape, eps)
        return int(np.sum(diag > tol))

    def solve(self, b: ArrayLike) -> NDArray[np.inexact[Any]] | None:
        y = self._solve_lu(b)
        if y is None:
            return None
        return self.q().inv_permute_rows(y)

    def recompose(self) -> NDArray[np.inexact[Any]]:
        return self.q().inv_permute_columns(super().recompose())


# ═══════════════════════════════════════════════════════════════════════
# Cholesky / UDU
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Cholesky(_Decomposition[CholeskyParams]):
    """
    Cholesky decomposition A = L·Lᴴ of a positive-definite matrix.
    """

    def l(self) -> NDArray[np.inexact[Any]]:
        """Lower-triangular factor with positive real diagonal."""
        return self.params.l.copy()

    def solve(self, b: ArrayLike) -> NDArray[np.inexact[Any]]:
        """Solve A·x = b."""
        b_arr = check_rhs(b, self.shape[0], 'b')
        l = self.params.l
        y = solve_triangular(l, b_arr, lower=True)
        return solve_triangular(l, y, lower=True, trans='C')

    def inverse(self) -> NDArray[np.inexact[Any]]:
        n = self.shape[0]
        return self.solve(np.eye(n, dtype=self.params.l.dtype))

    def determinant(self) -> float:
        """det(A) = Π L[i, i]², always real and positive."""
        return float(np.exp(self.log_determinant()))

    def log_determinant(self) -> float:
        """log det(A) = 2 Σ log L[i, i], finite where det(A) overflows."""
        return float(2.0 * np.sum(np.log(np.real(np.diag(self.params.l)))))

    def recompose(self) -> NDArray[np.inexact[Any]]:
        l = self.params.l
        return l @ l.conj().T


@dataclass(frozen=True)
class UDU(_Decomposition[UDUParams]):
    """
    UDU decomposition A = U·D·Uᵀ of a real symmetric matrix.
    """

    def u(self) -> NDArray[np.floating[Any]]:
        """Unit upper-triangular factor."""
        return self.params.u.copy()

    def d(self) -> NDArray[np.floating[Any]]:
        """Diagonal of D."""
        return self.params.d.copy()

    def d_matrix(self) -> NDArray[np.floating[Any]]:
        return np.diag(self.params.d)

    def recompose(self) -> NDArray[np.floating[Any]]:
        u = self.params.u
        return (u * self.params.d[np.newaxis, :]) @ u.T


# ═══════════════════════════════════════════════════════════════════════
# Hessenberg / Schur
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Hessenberg(_Decomposition[HessenbergParams]):
    """
    Hessenberg decomposition A = Q·H·Qᴴ.
    """

    def q(self) -> NDArray[np.inexact[Any]]:
        return self.params.q.copy()

    def h(self) -> NDArray[np.inexact[Any]]:
        """Upper-Hessenberg factor, exact zeros below the subdiagonal."""
        return np.triu(self.params.h, -1)

    def unpack(self) -> tuple[NDArray[np.inexact[Any]], NDArray[np.inexact[Any]]]:
        return self.q(), self.h()

    def recompose(self) -> NDArray[np.inexact[Any]]:
        q = self.params.q
        return q @ self.h() @ q.conj().T


@dataclass(frozen=True)
class Schur(_Decomposition[SchurParams]):
    """
    Schur decomposition A = Q·T·Qᴴ.

    T is upper triangular, except for 2x2 diagonal blocks holding the
    complex-conjugate eigenvalue pairs of a real matrix.
    """

    def q(self) -> NDArray[np.inexact[Any]]:
        return self.params.q.copy()

    def t(self) -> NDArray[np.inexact[Any]]:
        """Quasi-upper-triangular factor."""
        return np.triu(self.params.t, -1)

    def unpack(self) -> tuple[NDArray[np.inexact[Any]], NDArray[np.inexact[Any]]]:
        return self.q(), self.t()

    @property
    def iterations(self) -> int:
        return self.params.iterations

    def complex_eigenvalues(self) -> NDArray[np.complexfloating[Any, Any]]:
        """All eigenvalues, read from the 1x1 and 2x2 diagonal blocks."""
        t = self.params.t
        n = t.shape[0]
        out = np.zeros(n, dtype=np.result_type(t.dtype, np.complex64))
        i = 0
        while i < n:
            if i < n - 1 and t[i + 1, i] != 0:
                a, b, c, d = t[i, i], t[i, i + 1], t[i + 1, i], t[i + 1, i + 1]
                half_tr = (a + d) / 2
                root = np.sqrt(complex(((a - d) / 2) ** 2 + b * c))
                out[i] = half_tr + root
                out[i + 1] = half_tr - root
                i += 2
            else:
                out[i] = t[i, i]
                i += 1
        return out

    def eigenvalues(self) -> NDArray[np.inexact[Any]] | None:
        """
        Eigenvalues in the field of the input.

        Returns:
            The diagonal of T, or None when T still holds a 2x2 block
            (a real matrix with complex eigenvalues)
        """
        t = self.params.t
        if t.shape[0] > 1 and np.any(np.diag(t, -1) != 0):
            return None
        return np.diag(t).copy()

    def recompose(self) -> NDArray[np.inexact[Any]]:
        q = self.params.q
        return q @ self.t() @ q.conj().T


# ═══════════════════════════════════════════════════════════════════════
# Symmetric tridiagonal / eigen
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SymmetricTridiagonal(_Decomposition[TridiagonalParams]):
    """
    Symmetric tridiagonalization A = Q·T·Qᴴ with T real.
    """

    def q(self) -> NDArray[np.inexact[Any]]:
        return self.params.q.copy()

    def diagonal(self) -> NDArray[np.floating[Any]]:
        return self.params.diagonal.copy()

    def off_diagonal(self) -> NDArray[np.floating[Any]]:
        """Sub/superdiagonal of T, real and non-negative."""
        return self.params.off_diagonal.copy()

    def t(self) -> NDArray[np.floating[Any]]:
        """Tridiagonal matrix T."""
        e = self.params.off_diagonal
        return np.diag(self.params.diagonal) + np.diag(e, 1) + np.diag(e, -1)

    def unpack(self) -> tuple[NDArray[np.inexact[Any]], NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        return self.q(), self.diagonal(), self.off_diagonal()

    def recompose(self) -> NDArray[np.inexact[Any]]:
        q = self.params.q
        return q @ self.t() @ q.conj().T


@dataclass(frozen=True)
class SymmetricEigen(_Decomposition[EigenParams]):
    """
    Symmetric eigendecomposition A = Q·diag(Λ)·Qᴴ.

    Eigenvalues come out in the order the iteration deflated them; use
    sorted() for ascending or descending order.
    """

    @property
    def eigenvectors(self) -> NDArray[np.inexact[Any]]:
        return self.params.eigenvectors.copy()

    @property
    def eigenvalues(self) -> NDArray[np.floating[Any]]:
        return self.params.eigenvalues.copy()

    @property
    def iterations(self) -> int:
        return self.params.iterations

    def sorted(self, descending: bool = False) -> SymmetricEigen:
        """New decomposition with eigenpairs ordered by eigenvalue."""
        values = self.params.eigenvalues
        order = np.argsort(-values if descending else values, kind='stable')
        params = replace(
            self.params,
            eigenvalues=values[order],
            eigenvectors=self.params.eigenvectors[:, order],
        )
        info = dict(self.info, sorted='descending' if descending else 'ascending')
        return SymmetricEigen(_result=replace(self._result, params=params, info=info))

    def recompose(self) -> NDArray[np.inexact[Any]]:
        q = self.params.eigenvectors
        return (q * self.params.eigenvalues[np.newaxis, :]) @ q.conj().T


# ═══════════════════════════════════════════════════════════════════════
# Bidiagonal / SVD
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Bidiagonal(_Decomposition[BidiagonalParams]):
    """
    Bidiagonalization A = U·B·Vᴴ.

    B is upper bidiagonal when R >= C and lower bidiagonal otherwise; its
    entries are real and non-negative.
    """

    def u(self) -> NDArray[np.inexact[Any]]:
        return self.params.u.copy()

    def v_t(self) -> NDArray[np.inexact[Any]]:
        return self.params.v_t.copy()

    def diagonal(self) -> NDArray[np.floating[Any]]:
        return self.params.diagonal.copy()

    def off_diagonal(self) -> NDArray[np.floating[Any]]:
        return self.params.off_diagonal.copy()

    def is_upper_diagonal(self) -> bool:
        return self.params.upper

    def d(self) -> NDArray[np.floating[Any]]:
        """The k x k bidiagonal matrix B."""
        offset = 1 if self.params.upper else -1
        return np.diag(self.params.diagonal) + np.diag(self.params.off_diagonal, offset)

    def unpack(self) -> tuple[NDArray[np.inexact[Any]], NDArray[np.floating[Any]], NDArray[np.inexact[Any]]]:
        return self.u(), self.d(), self.v_t()

    def recompose(self) -> NDArray[np.inexact[Any]]:
        return self.params.u @ self.d() @ self.params.v_t


@dataclass(frozen=True)
class SVD(_Decomposition[SVDParams]):
    """
    Singular value decomposition A = U·diag(σ)·Vᴴ.

    σ is non-negative and sorted descending. U and Vᴴ are None when they
    were not requested.
    """

    @property
    def u(self) -> NDArray[np.inexact[Any]] | None:
        return None if self.params.u is None else self.params.u.copy()

    @property
    def v_t(self) -> NDArray[np.inexact[Any]] | None:
        return None if self.params.v_t is None else self.params.v_t.copy()

    @property
    def singular_values(self) -> NDArray[np.floating[Any]]:
        return self.params.singular_values.copy()

    @property
    def iterations(self) -> int:
        return self.params.iterations

    def _require_vectors(self, what: str) -> None:
        missing = [name for name in ('u', 'v_t') if getattr(self.params, name) is None]
        if missing:
            raise ValidationError(
                f"SVD.{what}: requires {' and '.join(missing)}; "
                f"decompose with compute_u=True and compute_v=True"
            )

    def rank(self, eps: float) -> int:
        """Number of singular values strictly greater than eps."""
        eps = check_tolerance(eps, 'eps')
        return int(np.sum(self.params.singular_values > eps))

    def pseudo_inverse(self, eps: float) -> NDArray[np.inexact[Any]]:
        """Moore-Penrose inverse, treating singular values <= eps as zero."""
        eps = check_tolerance(eps, 'eps')
        self._require_vectors('pseudo_inverse')
        sigma = self.params.singular_values
        inv = np.zeros_like(sigma)
        keep = sigma > eps
        inv[keep] = 1.0 / sigma[keep]
        return (self.params.v_t.conj().T * inv[np.newaxis, :]) @ self.params.u.conj().T

    def solve(self, b: ArrayLike, eps: float) -> NDArray[np.inexact[Any]]:
        """Least-squares, minimum-norm solution of A·x = b."""
        eps = check_tolerance(eps, 'eps')
        self._require_vectors('solve')
        b_arr = check_rhs(b, self.shape[0], 'b')
        return self.pseudo_inverse(eps) @ b_arr

    def recompose(self) -> NDArray[np.inexact[Any]]:
        self._require_vectors('recompose')
        return (self.params.u * self.params.singular_values[np.newaxis, :]) @ self.params.v_t
