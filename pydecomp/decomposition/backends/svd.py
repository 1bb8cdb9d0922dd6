"""
Bidiagonalization and SVD kernels.

A general R x C matrix is reduced to bidiagonal form by Householder
reflections applied alternately from the left and the right: upper
bidiagonal when R >= C, lower bidiagonal when R < C. The diagonal and
off-diagonal are then made real and non-negative by diagonal unitary
rescalings of U and Vᴴ.

The SVD iterates implicit-shift Golub-Kahan steps on the upper
bidiagonal form of A (or of Aᴴ when R < C). A superdiagonal entry e[i]
is collapsed once
    |e[i]| <= eps * (|d[i]| + |d[i+1]|)
and a diagonal entry below eps * ‖B‖ is zeroed and its row or column
chased out with Givens rotations.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydecomp.core.compute.convergence import ConvergenceCriteria
from pydecomp.core.compute.precision import phase, real_dtype
from pydecomp.core.exceptions import ConvergenceError
from pydecomp.decomposition.backends.householder import (
    Reflector,
    accumulate_left,
    givens,
    rotate_columns,
    rotate_rows,
)


@dataclass(frozen=True)
class BidiagonalParams:
    """
    Factor payload for bidiagonalization, A = U·B·Vᴴ.

    Attributes:
        u: Left factor (R x k) with orthonormal columns, or None
        v_t: Right factor Vᴴ (k x C) with orthonormal rows, or None
        diagonal: Real, non-negative diagonal of B (k,)
        off_diagonal: Real, non-negative off-diagonal of B (k-1,)
        upper: True when B is upper bidiagonal (R >= C)
    """
    u: NDArray[np.inexact[Any]] | None
    v_t: NDArray[np.inexact[Any]] | None
    diagonal: NDArray[np.floating[Any]]
    off_diagonal: NDArray[np.floating[Any]]
    upper: bool


@dataclass(frozen=True)
class SVDParams:
    """
    Factor payload for SVD, A = U·diag(σ)·Vᴴ.

    Attributes:
        u: Left singular vectors (R x k), or None if not requested
        v_t: Right singular vectors Vᴴ (k x C), or None if not requested
        singular_values: Non-negative, sorted descending (k,)
        iterations: Golub-Kahan steps performed
    """
    u: NDArray[np.inexact[Any]] | None
    v_t: NDArray[np.inexact[Any]] | None
    singular_values: NDArray[np.floating[Any]]
    iterations: int


def _real_phases(
    diag: NDArray[np.inexact[Any]],
    off: NDArray[np.inexact[Any]],
    upper: bool,
) -> tuple[NDArray[np.inexact[Any]], NDArray[np.inexact[Any]]]:
    """
    Unit scalars l, r with conj(l_i)·B[i, j]·r_j = |B[i, j]| on the
    bidiagonal. Each entry of the chain fixes one new phase.
    """
    k = diag.size
    left = np.ones(k, dtype=diag.dtype)
    right = np.ones(k, dtype=diag.dtype)
    for i in range(k):
        if upper:
            left[i] = phase(diag[i] * right[i])
            if i < k - 1:
                right[i + 1] = left[i] * np.conj(phase(off[i]))
        else:
            right[i] = left[i] * np.conj(phase(diag[i]))
            if i < k - 1:
                left[i + 1] = phase(off[i] * right[i])
    return left, right


def bidiagonalize(
    a: NDArray[np.inexact[Any]],
    compute_u: bool = True,
    compute_v: bool = True,
) -> BidiagonalParams:
    """
    Bidiagonalization of a (consumed in place).
    """
    n_rows, n_cols = a.shape
    k = min(n_rows, n_cols)
    upper = n_rows >= n_cols
    left_refls = []
    right_refls = []

    for i in range(k):
        if upper:
            refl = Reflector.from_column(a[i:, i], offset=i)
            refl.apply_left(a[i:, i + 1:])
            a[i, i] = refl.beta
            a[i + 1:, i] = 0
            left_refls.append(refl)
            if i < n_cols - 1:
                refl = Reflector.from_column(a[i, i + 1:].conj(), offset=i + 1)
                refl.apply_right(a[i + 1:, i + 1:])
                a[i, i + 1] = np.conj(refl.beta)
                a[i, i + 2:] = 0
                right_refls.append(refl)
        else:
            refl = Reflector.from_column(a[i, i:].conj(), offset=i)
            refl.apply_right(a[i + 1:, i:])
            a[i, i] = np.conj(refl.beta)
            a[i, i + 1:] = 0
            right_refls.append(refl)
            if i < n_rows - 1:
                refl = Reflector.from_column(a[i + 1:, i], offset=i + 1)
                refl.apply_left(a[i + 1:, i + 1:])
                a[i + 1, i] = refl.beta
                a[i + 2:, i] = 0
                left_refls.append(refl)

    diag = np.diag(a)[:k].copy()
    off = (np.diag(a, 1) if upper else np.diag(a, -1))[:max(k - 1, 0)].copy()
    left, right = _real_phases(diag, off, upper)

    u = None
    if compute_u:
        u = accumulate_left(left_refls, np.eye(n_rows, k, dtype=a.dtype))
        u = u * left[np.newaxis, :]
    v_t = None
    if compute_v:
        # Vᴴ = (H₀ H₁ …)ᴴ restricted to its first k rows
        v = accumulate_left(right_refls, np.eye(n_cols, k, dtype=a.dtype))
        v_t = (v * right[np.newaxis, :]).conj().T

    real = real_dtype(a.dtype)
    return BidiagonalParams(
        u=u,
        v_t=v_t,
        diagonal=np.abs(diag).astype(real),
        off_diagonal=np.abs(off).astype(real),
        upper=upper,
    )


def _chase_row(
    d: NDArray[np.floating[Any]],
    e: NDArray[np.floating[Any]],
    u: NDArray[np.inexact[Any]] | None,
    i: int,
    end: int,
) -> None:
    """d[i] is zero: rotate e[i] out of row i against rows i+1..end."""
    d[i] = 0
    f = e[i]
    e[i] = 0
    for j in range(i + 1, end + 1):
        c, s, r = givens(d[j], f)
        d[j] = r
        if j < end:
            f = -s * e[j]
            e[j] = c * e[j]
        # rows (j, i) rotated by (c, s): U ← U·Gᵀ
        rotate_columns(u, j, i, c, s)


def _chase_column(
    d: NDArray[np.floating[Any]],
    e: NDArray[np.floating[Any]],
    v_t: NDArray[np.inexact[Any]] | None,
    start: int,
    end: int,
) -> None:
    """d[end] is zero: rotate e[end-1] out of column end against columns end-1..start."""
    d[end] = 0
    f = e[end - 1]
    e[end - 1] = 0
    for j in range(end - 1, start - 1, -1):
        c, s, r = givens(d[j], f)
        d[j] = r
        if j > start:
            f = -s * e[j - 1]
            e[j - 1] = c * e[j - 1]
        rotate_rows(v_t, j, end, c, s)


def _golub_kahan_step(
    d: NDArray[np.floating[Any]],
    e: NDArray[np.floating[Any]],
    u: NDArray[np.inexact[Any]] | None,
    v_t: NDArray[np.inexact[Any]] | None,
    start: int,
    end: int,
) -> None:
    """One implicit-shift QR step on BᵀB for the active block d[start:end+1]."""
    t11 = d[end - 1] ** 2 + (e[end - 2] ** 2 if end - 1 > start else 0.0)
    t12 = d[end - 1] * e[end - 1]
    t22 = d[end] ** 2 + e[end - 1] ** 2
    half = (t11 - t22) / 2
    if t12 == 0:
        mu = t22
    else:
        sign = 1.0 if half >= 0 else -1.0
        mu = t22 - t12 * t12 / (half + sign * np.hypot(half, t12))

    y = d[start] ** 2 - mu
    z = d[start] * e[start]
    for k in range(start, end):
        # Right rotation on columns (k, k+1)
        c, s, r = givens(y, z)
        if k > start:
            e[k - 1] = r
        dk, ek, dk1 = d[k], e[k], d[k + 1]
        d[k] = c * dk + s * ek
        e[k] = -s * dk + c * ek
        bulge = s * dk1
        d[k + 1] = c * dk1
        rotate_rows(v_t, k, k + 1, c, s)

        # Left rotation on rows (k, k+1)
        c, s, r = givens(d[k], bulge)
        d[k] = r
        ek, dk1 = e[k], d[k + 1]
        e[k] = c * ek + s * dk1
        d[k + 1] = -s * ek + c * dk1
        if k < end - 1:
            z = s * e[k + 1]
            e[k + 1] = c * e[k + 1]
            y = e[k]
        rotate_columns(u, k, k + 1, c, s)


def golub_kahan_svd(
    bidiag: BidiagonalParams,
    criteria: ConvergenceCriteria,
) -> SVDParams:
    """
    Singular values (and vectors) of an upper bidiagonal decomposition.

    Raises:
        ConvergenceError: If criteria.max_niter (nonzero) is exceeded
    """
    d = bidiag.diagonal.copy()
    e = bidiag.off_diagonal.copy()
    u = None if bidiag.u is None else bidiag.u.copy()
    v_t = None if bidiag.v_t is None else bidiag.v_t.copy()
    eps = criteria.eps
    k = d.size
    scale = float(np.max(d, initial=0.0) + np.max(e, initial=0.0))
    niter = 0

    while True:
        for i in range(k - 1):
            if abs(e[i]) <= eps * (abs(d[i]) + abs(d[i + 1])):
                e[i] = 0

        end = k - 1
        while end > 0 and e[end - 1] == 0:
            end -= 1
        if end <= 0:
            break
        start = end - 1
        while start > 0 and e[start - 1] != 0:
            start -= 1

        zero_diag = [i for i in range(start, end + 1) if abs(d[i]) <= eps * scale]
        if zero_diag:
            i = zero_diag[0]
            if i < end:
                _chase_row(d, e, u, i, end)
            else:
                _chase_column(d, e, v_t, start, end)
            continue

        niter += 1
        if criteria.exhausted(niter):
            raise ConvergenceError(
                f"SVD iteration did not converge within {criteria.max_niter} iterations",
                iterations=niter - 1,
                reason='max_niter',
                threshold=eps,
            )
        _golub_kahan_step(d, e, u, v_t, start, end)

    negative = d < 0
    if np.any(negative):
        d[negative] = -d[negative]
        if v_t is not None:
            v_t[negative, :] = -v_t[negative, :]
        elif u is not None:
            u[:, negative] = -u[:, negative]

    order = np.argsort(-d, kind='stable')
    d = d[order]
    if u is not None:
        u = u[:, order]
    if v_t is not None:
        v_t = v_t[order, :]

    return SVDParams(u=u, v_t=v_t, singular_values=d, iterations=niter)


def adjoint_svd(params: SVDParams) -> SVDParams:
    """SVD of Aᴴ from the SVD of A: the roles of U and Vᴴ swap."""
    return SVDParams(
        u=None if params.v_t is None else params.v_t.conj().T.copy(),
        v_t=None if params.u is None else params.u.conj().T.copy(),
        singular_values=params.singular_values,
        iterations=params.iterations,
    )
