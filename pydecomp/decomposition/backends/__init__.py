"""
Decomposition kernels.

Each kernel consumes an owned working copy and returns a frozen factor
payload, raising a typed exception on structural or convergence failure.

Available kernels:
    householder: Reflectors, plane rotations and their accumulation
    qr: householder_qr, col_piv_householder_qr
    lu: partial_pivot_lu, full_pivot_lu
    cholesky: cholesky_lower, udu_upper
    hessenberg: reduce_to_hessenberg
    schur: francis_qr
    symmetric: tridiagonalize, tridiagonal_qr
    svd: bidiagonalize, golub_kahan_svd
"""

from pydecomp.decomposition.backends.householder import Reflector, givens
from pydecomp.decomposition.backends.qr import householder_qr, col_piv_householder_qr
from pydecomp.decomposition.backends.lu import partial_pivot_lu, full_pivot_lu
from pydecomp.decomposition.backends.cholesky import cholesky_lower, udu_upper
from pydecomp.decomposition.backends.hessenberg import reduce_to_hessenberg
from pydecomp.decomposition.backends.schur import francis_qr
from pydecomp.decomposition.backends.symmetric import tridiagonalize, tridiagonal_qr
from pydecomp.decomposition.backends.svd import bidiagonalize, golub_kahan_svd

__all__ = [
    "Reflector",
    "givens",
    "householder_qr",
    "col_piv_householder_qr",
    "partial_pivot_lu",
    "full_pivot_lu",
    "cholesky_lower",
    "udu_upper",
    "reduce_to_hessenberg",
    "francis_qr",
    "tridiagonalize",
    "tridiagonal_qr",
    "bidiagonalize",
    "golub_kahan_svd",
]
