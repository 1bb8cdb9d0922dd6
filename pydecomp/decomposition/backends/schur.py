"""
Schur decomposition kernel.

Francis implicit double-shift QR iteration on an upper-Hessenberg matrix.
Real matrices with complex-conjugate eigenvalues are handled without
complex arithmetic: converged pairs are left as 2x2 diagonal blocks.

Deflation: the subdiagonal entry h[i, i-1] is set to zero once
    |h[i, i-1]| <= eps * (|h[i-1, i-1]| + |h[i, i]|)
(the Frobenius norm of the matrix replaces the local scale when both
diagonal entries are zero).
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydecomp.core.compute.convergence import ConvergenceCriteria
from pydecomp.core.compute.precision import frobenius_norm
from pydecomp.core.exceptions import ConvergenceError
from pydecomp.decomposition.backends.householder import Reflector

# Stagnant steps between two exceptional shifts
EXCEPTIONAL_SHIFT_PERIOD = 10


@dataclass(frozen=True)
class SchurParams:
    """
    Factor payload for Schur.

    Attributes:
        t: Quasi-upper-triangular matrix (exact zeros below the
           subdiagonal, and on the subdiagonal outside 2x2 blocks)
        q: Unitary transform with A = Q·T·Qᴴ
        iterations: Francis steps performed
    """
    t: NDArray[np.inexact[Any]]
    q: NDArray[np.inexact[Any]]
    iterations: int


def _negligible(t: NDArray[np.inexact[Any]], i: int, eps: float, scale: float) -> bool:
    local = abs(t[i - 1, i - 1]) + abs(t[i, i])
    if local == 0:
        local = scale
    return abs(t[i, i - 1]) <= eps * local


def _shift_coefficients(
    t: NDArray[np.inexact[Any]],
    end: int,
    exceptional: bool,
) -> tuple[Any, Any]:
    """Trace and determinant of the trailing 2x2 shift block."""
    if exceptional:
        s = abs(t[end, end - 1]) + abs(t[end - 1, end - 2])
        base = t[end, end] + 0.75 * s
        return 2 * base, base * base + 0.4375 * s * s
    a, b = t[end - 1, end - 1], t[end - 1, end]
    c, d = t[end, end - 1], t[end, end]
    return a + d, a * d - b * c


def _francis_step(
    t: NDArray[np.inexact[Any]],
    q: NDArray[np.inexact[Any]],
    start: int,
    end: int,
    exceptional: bool,
) -> None:
    """One implicit double-shift step on the active block t[start:end+1]."""
    tra, det = _shift_coefficients(t, end, exceptional)

    h00, h01 = t[start, start], t[start, start + 1]
    h10, h11 = t[start + 1, start], t[start + 1, start + 1]
    h21 = t[start + 2, start + 1]

    # First column of (H - σ₁I)(H - σ₂I)
    x = h00 * h00 + h01 * h10 - tra * h00 + det
    y = h10 * (h00 + h11 - tra)
    z = h10 * h21

    for k in range(start, end - 1):
        refl = Reflector.from_column(np.array([x, y, z], dtype=t.dtype))
        refl.apply_left(t[k:k + 3, max(start, k - 1):])
        refl.apply_right(t[:min(k + 4, end + 1), k:k + 3])
        refl.apply_right(q[:, k:k + 3])
        if k > start:
            t[k + 1:k + 3, k - 1] = 0

        x = t[k + 1, k]
        y = t[k + 2, k]
        if k < end - 2:
            z = t[k + 3, k]

    refl = Reflector.from_column(np.array([x, y], dtype=t.dtype))
    refl.apply_left(t[end - 1:end + 1, end - 2:])
    refl.apply_right(t[:end + 1, end - 1:end + 1])
    refl.apply_right(q[:, end - 1:end + 1])
    t[end, end - 2] = 0


def _split_2x2(t: NDArray[np.inexact[Any]], q: NDArray[np.inexact[Any]], k: int) -> None:
    """
    Triangularize the converged block t[k:k+2, k:k+2] by a unitary
    rotation when its eigenvalues lie in the field of t.
    """
    a, b = t[k, k], t[k, k + 1]
    c, d = t[k + 1, k], t[k + 1, k + 1]
    if c == 0:
        return

    half = (a - d) / 2
    disc = half * half + b * c
    if np.iscomplexobj(t):
        root = np.sqrt(complex(disc))
    elif disc < 0:
        # Complex-conjugate pair of a real matrix: keep the 2x2 block
        return
    else:
        root = np.sqrt(disc)

    # λ - d for the eigenvalue farther from d; (λ - d, c) is an eigenvector
    shift = half + root if abs(half + root) >= abs(half - root) else half - root
    v = np.array([shift, c], dtype=t.dtype)
    v /= np.linalg.norm(v)
    g = np.array([[v[0], -np.conj(v[1])], [v[1], np.conj(v[0])]], dtype=t.dtype)

    t[k:k + 2, :] = g.conj().T @ t[k:k + 2, :]
    t[:, k:k + 2] = t[:, k:k + 2] @ g
    q[:, k:k + 2] = q[:, k:k + 2] @ g
    t[k + 1, k] = 0


def francis_qr(
    t: NDArray[np.inexact[Any]],
    q: NDArray[np.inexact[Any]],
    criteria: ConvergenceCriteria,
) -> SchurParams:
    """
    Reduce the Hessenberg matrix t to quasi-triangular form (in place),
    accumulating the transforms into q.

    Raises:
        ConvergenceError: If criteria.max_niter (nonzero) is exceeded
    """
    n = t.shape[0]
    eps = criteria.eps
    scale = frobenius_norm(t)
    niter = 0
    stagnant = 0
    end = n - 1

    while end > 0:
        if _negligible(t, end, eps, scale):
            t[end, end - 1] = 0
            end -= 1
            stagnant = 0
            continue

        if end == 1 or _negligible(t, end - 1, eps, scale):
            if end >= 2:
                t[end - 1, end - 2] = 0
            _split_2x2(t, q, end - 1)
            end -= 2
            stagnant = 0
            continue

        start = end - 2
        while start > 0 and not _negligible(t, start, eps, scale):
            start -= 1
        if start > 0:
            t[start, start - 1] = 0

        niter += 1
        if criteria.exhausted(niter):
            raise ConvergenceError(
                f"Schur iteration did not converge within {criteria.max_niter} iterations",
                iterations=niter - 1,
                reason='max_niter',
                threshold=eps,
            )
        stagnant += 1
        _francis_step(t, q, start, end, stagnant % EXCEPTIONAL_SHIFT_PERIOD == 0)

    return SchurParams(t=t, q=q, iterations=niter)
