"""
Hessenberg reduction kernel.

Orthogonal (unitary) similarity transform A = Q·H·Qᴴ with H upper
Hessenberg. Direct and non-iterative; used as the staging step of the
Schur decomposition.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pydecomp.decomposition.backends.householder import Reflector, accumulate_right


@dataclass(frozen=True)
class HessenbergParams:
    """
    Factor payload for Hessenberg.

    Attributes:
        h: Upper-Hessenberg matrix, exact zeros below the subdiagonal
        q: Unitary transform
        reflectors: Reflectors whose product is Q
    """
    h: NDArray[np.inexact[Any]]
    q: NDArray[np.inexact[Any]]
    reflectors: tuple[Reflector, ...]


def reduce_to_hessenberg(a: NDArray[np.inexact[Any]]) -> HessenbergParams:
    """
    Hessenberg reduction of the square matrix a (consumed in place).

    Reflector i acts on rows/columns i+1.. and zeroes a[i+2:, i].
    """
    n = a.shape[0]
    reflectors = []
    for i in range(max(n - 2, 0)):
        refl = Reflector.from_column(a[i + 1:, i], offset=i + 1)
        refl.apply_left(a[i + 1:, i + 1:])
        refl.apply_right(a[:, i + 1:])
        a[i + 1, i] = refl.beta
        a[i + 2:, i] = 0
        reflectors.append(refl)

    q = accumulate_right(reflectors, np.eye(n, dtype=a.dtype))
    return HessenbergParams(h=a, q=q, reflectors=tuple(reflectors))
