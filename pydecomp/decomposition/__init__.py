"""
Dense matrix decompositions.

Public API:
    qr(A) -> QR                          col_piv_qr(A) -> ColPivQR
    lu(A) -> LU                          full_piv_lu(A) -> FullPivLU
    cholesky(A) -> Cholesky | None       udu(A) -> UDU | None
    hessenberg(A) -> Hessenberg
    schur(A) -> Schur                    try_schur(A, eps, max_niter)
    symmetric_tridiagonalize(A) -> SymmetricTridiagonal
    symmetric_eigen(A) -> SymmetricEigen try_symmetric_eigen(A, eps, max_niter)
    bidiagonalize(A) -> Bidiagonal
    svd(A, compute_u, compute_v) -> SVD  try_svd(A, compute_u, compute_v, eps, max_niter)

Every function validates its input, works on its own copy and never
modifies the caller's array.

Example:
    >>> import numpy as np
    >>> from pydecomp.decomposition import qr
    >>> a = np.array([[1.0, 2.0], [3.0, 4.0]])
    >>> result = qr(a)
    >>> np.allclose(result.q() @ result.r(), a)
    True
"""

from pydecomp.decomposition.design import MatrixDesign
from pydecomp.decomposition.permutation import PermutationSequence
from pydecomp.decomposition.solution import (
    QR,
    ColPivQR,
    LU,
    FullPivLU,
    Cholesky,
    UDU,
    Hessenberg,
    Schur,
    SymmetricTridiagonal,
    SymmetricEigen,
    Bidiagonal,
    SVD,
)
from pydecomp.decomposition.solvers import (
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
    # Entry points
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
    # Solutions
    "QR",
    "ColPivQR",
    "LU",
    "FullPivLU",
    "Cholesky",
    "UDU",
    "Hessenberg",
    "Schur",
    "SymmetricTridiagonal",
    "SymmetricEigen",
    "Bidiagonal",
    "SVD",
    # Building blocks
    "MatrixDesign",
    "PermutationSequence",
]
