"""
PyDecomp: dense matrix decompositions for Python.

Householder-based factorizations of real and complex NumPy matrices,
with explicit convergence control for the iterative ones.

Submodules:
    decomposition: QR, LU, Cholesky/UDU, Hessenberg, Schur,
                   symmetric eigen, bidiagonal and SVD
    core: Result envelope, exceptions, validation and numeric helpers
"""

__version__ = "0.1.0"

from pydecomp import decomposition
from pydecomp.decomposition import (
    qr,
    col_piv_qr,
    lu,
    full_piv_lu,
    cholesky,
    udu,
    hessenberg,
    schur,
    try_schur,
    symmetric_tridiagonalize,
    symmetric_eigen,
    try_symmetric_eigen,
    bidiagonalize,
    svd,
    try_svd,
)

__all__ = [
    "__version__",
    "decomposition",
    "qr",
    "col_piv_qr",
    "lu",
    "full_piv_lu",
    "cholesky",
    "udu",
    "hessenberg",
    "schur",
    "try_schur",
    "symmetric_tridiagonalize",
    "symmetric_eigen",
    "try_symmetric_eigen",
    "bidiagonalize",
    "svd",
    "try_svd",
]
