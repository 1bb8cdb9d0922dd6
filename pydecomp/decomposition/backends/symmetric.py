"""
Symmetric tridiagonalization and symmetric eigendecomposition kernels.

The input is assumed symmetric (Hermitian); only its lower triangle is
read. Householder reflections from both sides reduce it to a tridiagonal
matrix, whose off-diagonal is then made real and non-negative by a
diagonal unitary rescaling. The eigendecomposition runs implicit
Wilkinson-shift QR on that real tridiagonal matrix; eigenvalues are real
by symmetry, so no complex-pair deflation is needed.
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
    accumulate_right,
    givens,
    rotate_columns,
)


@dataclass(frozen=True)
class TridiagonalParams:
    """
    Factor payload for symmetric tridiagonalization.

    Attributes:
        q: Unitary transform with A = Q·T·Qᴴ
        diagonal: Real diagonal of T (n,)
        off_diagonal: Real, non-negative off-diagonal of T (n-1,)
    """
    q: NDArray[np.inexact[Any]]
    diagonal: NDArray[np.floating[Any]]
    off_diagonal: NDArray[np.floating[Any]]


@dataclass(frozen=True)
class EigenParams:
    """
    Factor payload for symmetric eigendecomposition.

    Attributes:
        eigenvectors: Unitary Q with A = Q·diag(Λ)·Qᴴ
        eigenvalues: Real eigenvalues Λ, in no particular order
        iterations: Implicit QR steps performed
    """
    eigenvectors: NDArray[np.inexact[Any]]
    eigenvalues: NDArray[np.floating[Any]]
    iterations: int


def hermitian_from_lower(a: NDArray[np.inexact[Any]]) -> NDArray[np.inexact[Any]]:
    """Full Hermitian matrix built from the lower triangle of a."""
    lower = np.tril(a, -1)
    full = lower + lower.conj().T
    full[np.diag_indices_from(full)] = np.real(np.diag(a))
    return full


def tridiagonalize(a: NDArray[np.inexact[Any]]) -> TridiagonalParams:
    """
    Symmetric tridiagonalization of a, reading only its lower triangle.
    """
    n = a.shape[0]
    t = hermitian_from_lower(a)
    reflectors = []
    for i in range(max(n - 2, 0)):
        refl = Reflector.from_column(t[i + 1:, i], offset=i + 1)
        refl.apply_left(t[i + 1:, :])
        refl.apply_right(t[:, i + 1:])
        reflectors.append(refl)

    q = accumulate_right(reflectors, np.eye(n, dtype=a.dtype))
    real = real_dtype(a.dtype)
    diagonal = np.real(np.diag(t)).astype(real, copy=True)
    sub = np.diag(t, -1)

    # D = diag(d), d₀ = 1, d_{i+1} = d_i·phase(t[i+1, i]) makes Dᴴ·T·D real
    scales = np.ones(n, dtype=a.dtype)
    for i in range(n - 1):
        scales[i + 1] = scales[i] * phase(sub[i])
    q = q * scales[np.newaxis, :]
    off_diagonal = np.abs(sub).astype(real, copy=True)

    return TridiagonalParams(q=q, diagonal=diagonal, off_diagonal=off_diagonal)


def _negligible(off: float, d_a: float, d_b: float, eps: float) -> bool:
    return abs(off) <= eps * (abs(d_a) + abs(d_b))


def _wilkinson_shift(a: float, b: float, c: float) -> float:
    """Eigenvalue of [[a, b], [b, c]] closer to c."""
    half = (a - c) / 2
    if b == 0:
        return c
    sign = 1.0 if half >= 0 else -1.0
    return c - b * b / (half + sign * np.hypot(half, b))


def tridiagonal_qr(
    tri: TridiagonalParams,
    criteria: ConvergenceCriteria,
) -> EigenParams:
    """
    Implicit-shift QR on the real symmetric tridiagonal matrix of tri.

    Each step chases the bulge created by a Wilkinson-shifted rotation
    down the active block; rotations are accumulated into the
    eigenvectors.

    Raises:
        ConvergenceError: If criteria.max_niter (nonzero) is exceeded
    """
    d = tri.diagonal.copy()
    e = tri.off_diagonal.copy()
    q = tri.q.copy()
    eps = criteria.eps
    n = d.size
    niter = 0
    end = n - 1

    while end > 0:
        if _negligible(e[end - 1], d[end - 1], d[end], eps):
            e[end - 1] = 0
            end -= 1
            continue

        start = end - 1
        while start > 0 and not _negligible(e[start - 1], d[start - 1], d[start], eps):
            start -= 1
        if start > 0:
            e[start - 1] = 0

        niter += 1
        if criteria.exhausted(niter):
            raise ConvergenceError(
                f"Symmetric eigen iteration did not converge within {criteria.max_niter} iterations",
                iterations=niter - 1,
                reason='max_niter',
                threshold=eps,
            )

        mu = _wilkinson_shift(d[end - 1], e[end - 1], d[end])
        x = d[start] - mu
        z = e[start]
        for k in range(start, end):
            c, s, r = givens(x, z)
            if k > start:
                e[k - 1] = r

            a, b, cc = d[k], e[k], d[k + 1]
            d[k] = c * c * a + 2 * c * s * b + s * s * cc
            d[k + 1] = s * s * a - 2 * c * s * b + c * c * cc
            e[k] = c * s * (cc - a) + (c * c - s * s) * b

            if k < end - 1:
                z = s * e[k + 1]
                e[k + 1] = c * e[k + 1]
            x = e[k]
            rotate_columns(q, k, k + 1, c, s)

    return EigenParams(eigenvectors=q, eigenvalues=d, iterations=niter)
