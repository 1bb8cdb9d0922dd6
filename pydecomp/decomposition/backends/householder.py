"""
Elementary reflectors and plane rotations.

Shared primitives of the QR, Hessenberg, tridiagonal and bidiagonal
reductions and of the iterative refinements built on them.

A Householder reflector H = I - 2 v vᴴ with unit axis v maps a column x
onto β e₀ with β = -sign(x₀)‖x‖, where sign is the complex phase (1 for
zero). Reflectors are kept as separate records rather than packed into
the lower part of the reduced matrix.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydecomp.core.compute.precision import phase


@dataclass(frozen=True)
class Reflector:
    """
    Householder reflector I - 2 v vᴴ.

    Attributes:
        axis: Unit vector v, or all zeros for the identity reflector
        beta: Value left in the leading position after reflecting the
              column the reflector was built from
        offset: Index of the first row/column the reflector acts on
    """
    axis: NDArray[np.inexact[Any]]
    beta: complex | float
    offset: int

    @classmethod
    def from_column(cls, x: NDArray[np.inexact[Any]], offset: int = 0) -> Reflector:
        """
        Build the reflector zeroing all but the first entry of x.

        An all-zero column gives the identity reflector.
        """
        axis = np.array(x, copy=True)
        if axis.size == 0:
            return cls(axis=axis, beta=0.0, offset=offset)

        norm = float(np.linalg.norm(axis))
        if norm == 0.0:
            return cls(axis=np.zeros_like(axis), beta=axis[0] * 0, offset=offset)

        head = axis[0]
        modulus = abs(head)
        signed_norm = phase(head) * norm
        axis[0] = head + signed_norm
        # ‖x + sign(x₀)‖x‖e₀‖² = 2(‖x‖² + |x₀|‖x‖)
        axis /= np.sqrt(2.0 * (norm * norm + modulus * norm))
        return cls(axis=axis, beta=-signed_norm, offset=offset)

    @property
    def is_identity(self) -> bool:
        return not np.any(self.axis)

    def apply_left(self, block: NDArray[np.inexact[Any]]) -> None:
        """block ← H block, in place. block has len(axis) rows."""
        if block.size == 0 or self.is_identity:
            return
        v = self.axis
        block -= 2.0 * np.outer(v, v.conj() @ block)

    def apply_right(self, block: NDArray[np.inexact[Any]]) -> None:
        """block ← block H, in place. block has len(axis) columns."""
        if block.size == 0 or self.is_identity:
            return
        v = self.axis
        block -= 2.0 * np.outer(block @ v, v.conj())


def accumulate_left(
    reflectors: tuple[Reflector, ...] | list[Reflector],
    target: NDArray[np.inexact[Any]],
    adjoint: bool = False,
) -> NDArray[np.inexact[Any]]:
    """
    Apply H₀ H₁ … H_{k-1} (or its adjoint) to target from the left.

    With adjoint=False the last reflector acts first, so that applying to
    the identity builds Q = H₀ H₁ … H_{k-1}. Reflectors are Hermitian, so
    the adjoint is the same product in reverse order.
    """
    ordered = reflectors if adjoint else reversed(reflectors)
    for refl in ordered:
        refl.apply_left(target[refl.offset:refl.offset + refl.axis.size, :])
    return target


def accumulate_right(
    reflectors: tuple[Reflector, ...] | list[Reflector],
    target: NDArray[np.inexact[Any]],
) -> NDArray[np.inexact[Any]]:
    """Apply H₀ H₁ … H_{k-1} to target from the right."""
    for refl in reflectors:
        refl.apply_right(target[:, refl.offset:refl.offset + refl.axis.size])
    return target


def givens(x: float, z: float) -> tuple[float, float, float]:
    """
    Real plane rotation zeroing z against x.

    Returns (c, s, r) with c·x + s·z = r, -s·x + c·z = 0 and
    r = hypot(x, z). A zero pair gives the identity rotation.
    """
    r = float(np.hypot(x, z))
    if r == 0.0:
        return 1.0, 0.0, 0.0
    return x / r, z / r, r


def rotate_columns(
    m: NDArray[np.inexact[Any]] | None,
    i: int,
    j: int,
    c: float,
    s: float,
) -> None:
    """(col_i, col_j) ← (c·col_i + s·col_j, -s·col_i + c·col_j), in place."""
    if m is None:
        return
    ci = m[:, i].copy()
    m[:, i] = c * ci + s * m[:, j]
    m[:, j] = -s * ci + c * m[:, j]


def rotate_rows(
    m: NDArray[np.inexact[Any]] | None,
    i: int,
    j: int,
    c: float,
    s: float,
) -> None:
    """(row_i, row_j) ← (c·row_i + s·row_j, -s·row_i + c·row_j), in place."""
    if m is None:
        return
    ri = m[i, :].copy()
    m[i, :] = c * ri + s * m[j, :]
    m[j, :] = -s * ri + c * m[j, :]
