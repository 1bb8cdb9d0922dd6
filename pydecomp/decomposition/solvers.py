"""
Public entry points for the decompositions.

Every function validates its input at this boundary (MatrixDesign), runs
the kernel on an owned working copy, and wraps the kernel payload into a
Result envelope and a solution object.

Failure contract:
    cholesky, udu            None when the matrix violates the structural
                             requirement (non-positive or zero pivot)
    try_schur,
    try_symmetric_eigen,
    try_svd                  None when max_niter (nonzero) is exceeded
    schur, symmetric_eigen,
    svd                      unbounded; never give up

Validation errors (non-numeric, non-finite, wrong shape, bad eps or
max_niter) always propagate.
"""

from __future__ import annotations

import warnings
from typing import Any

from numpy.typing import ArrayLike

from pydecomp.core.compute.convergence import ConvergenceCriteria
from pydecomp.core.compute.timing import Timer
from pydecomp.core.exceptions import (
    ConvergenceError,
    NotPositiveDefiniteError,
    SingularMatrixError,
)
from pydecomp.core.result import Result
from pydecomp.decomposition.backends.cholesky import cholesky_lower, udu_upper
from pydecomp.decomposition.backends.hessenberg import reduce_to_hessenberg
from pydecomp.decomposition.backends.lu import full_pivot_lu, partial_pivot_lu
from pydecomp.decomposition.backends.qr import col_piv_householder_qr, householder_qr
from pydecomp.decomposition.backends.schur import francis_qr
from pydecomp.decomposition.backends.svd import (
    adjoint_svd,
    bidiagonalize as _bidiagonalize,
    golub_kahan_svd,
)
from pydecomp.decomposition.backends.symmetric import tridiagonal_qr, tridiagonalize
from pydecomp.decomposition.design import MatrixDesign
from pydecomp.decomposition.solution import (
    LU,
    QR,
    SVD,
    UDU,
    Bidiagonal,
    Cholesky,
    ColPivQR,
    FullPivLU,
    Hessenberg,
    Schur,
    SymmetricEigen,
    SymmetricTridiagonal,
)


def _envelope(
    params: Any,
    method: str,
    design: MatrixDesign,
    timer: Timer,
    info: dict[str, Any] | None = None,
    warn_list: list[str] | None = None,
) -> Result[Any]:
    timer.stop()
    full_info = {'method': method, **design.metadata()}
    if info:
        full_info.update(info)
    return Result(
        params=params,
        info=full_info,
        timing=timer.result(),
        method=method,
        warnings=tuple(warn_list or ()),
    )


def _criteria_info(criteria: ConvergenceCriteria, iterations: int) -> dict[str, Any]:
    return {
        'iterations': iterations,
        'eps': criteria.eps,
        'max_niter': criteria.max_niter,
    }


def _hermitian_diagonal_warnings(design: MatrixDesign, method: str) -> list[str]:
    """
    Flag a complex diagonal that is not real, as a Hermitian one must be.

    Imaginary parts at rounding level (e.g. the diagonal of B·Bᴴ) pass.
    """
    imag = design.max_diagonal_imag()
    if imag <= design.diagonal_imag_tolerance():
        return []
    message = (
        f"{method}: diagonal has imaginary parts up to {imag:.3g}; "
        f"they are ignored, the input is read as Hermitian"
    )
    warnings.warn(message, RuntimeWarning, stacklevel=3)
    return [message]


# ═══════════════════════════════════════════════════════════════════════
# Direct decompositions
# ═══════════════════════════════════════════════════════════════════════


def qr(matrix: ArrayLike) -> QR:
    """
    Householder QR decomposition, A = Q·R.

    Args:
        matrix: Any R x C real or complex matrix

    Returns:
        QR with Q (R x k) and R (k x C), k = min(R, C)

    Raises:
        ValidationError: If the input is not a finite numeric matrix
        DimensionError: If the input is not 2D
    """
    design = MatrixDesign.build(matrix)
    timer = Timer()
    timer.start()
    with timer.section('householder'):
        params = householder_qr(design.working_copy())
    result = _envelope(params, 'householder_qr', design, timer)
    return QR(_result=result)


def col_piv_qr(matrix: ArrayLike) -> ColPivQR:
    """
    Householder QR with column pivoting, A·P = Q·R.

    The remaining column of largest norm is moved forward before each
    reflection, so |R[0, 0]| >= |R[1, 1]| >= ... and rank() is reliable.
    """
    design = MatrixDesign.build(matrix)
    timer = Timer()
    timer.start()
    with timer.section('householder'):
        params = col_piv_householder_qr(design.working_copy())
    result = _envelope(
        params, 'col_piv_householder_qr', design, timer,
        info={'n_swaps': len(params.col_perm)},
    )
    return ColPivQR(_result=result)


def lu(matrix: ArrayLike) -> LU:
    """
    LU decomposition with partial pivoting, P·A = L·U.

    Singular input is not an error: a pivot column that is exactly zero
    is skipped and U comes out rank deficient.
    """
    design = MatrixDesign.build(matrix)
    timer = Timer()
    timer.start()
    with timer.section('elimination'):
        params = partial_pivot_lu(design.working_copy())
    result = _envelope(
        params, 'partial_pivot_lu', design, timer,
        info={'n_pivots': params.n_pivots},
    )
    return LU(_result=result)


def full_piv_lu(matrix: ArrayLike) -> FullPivLU:
    """LU decomposition with full pivoting, P·A·Q = L·U."""
    design = MatrixDesign.build(matrix)
    timer = Timer()
    timer.start()
    with timer.section('elimination'):
        params = full_pivot_lu(design.working_copy())
    result = _envelope(
        params, 'full_pivot_lu', design, timer,
        info={'n_pivots': params.n_pivots},
    )
    return FullPivLU(_result=result)


def cholesky(matrix: ArrayLike) -> Cholesky | None:
    """
    Cholesky decomposition A = L·Lᴴ.

    Only the lower triangle of matrix is read.

    Returns:
        Cholesky, or None if the matrix is not positive definite

    Raises:
        DimensionError: If the matrix is not square
    """
    design = MatrixDesign.build(matrix, square=True)
    warn_list = _hermitian_diagonal_warnings(design, 'cholesky')
    timer = Timer()
    timer.start()
    try:
        with timer.section('factorization'):
            params = cholesky_lower(design.working_copy())
    except NotPositiveDefiniteError:
        return None
    result = _envelope(params, 'cholesky_lower', design, timer, warn_list=warn_list)
    return Cholesky(_result=result)


def udu(matrix: ArrayLike) -> UDU | None:
    """
    UDU decomposition A = U·D·Uᵀ of a real symmetric matrix.

    Only the upper triangle of matrix is read. D may have negative
    entries, so indefinite matrices are accepted.

    Returns:
        UDU, or None if a pivot is exactly zero

    Raises:
        ValidationError: If the matrix is complex
        DimensionError: If the matrix is not square
    """
    design = MatrixDesign.build(matrix, square=True, real=True)
    timer = Timer()
    timer.start()
    try:
        with timer.section('factorization'):
            params = udu_upper(design.working_copy())
    except SingularMatrixError:
        return None
    result = _envelope(params, 'udu_upper', design, timer)
    return UDU(_result=result)


def hessenberg(matrix: ArrayLike) -> Hessenberg:
    """Hessenberg decomposition A = Q·H·Qᴴ of a square matrix."""
    design = MatrixDesign.build(matrix, square=True)
    timer = Timer()
    timer.start()
    with timer.section('hessenberg'):
        params = reduce_to_hessenberg(design.working_copy())
    result = _envelope(params, 'householder_hessenberg', design, timer)
    return Hessenberg(_result=result)


def symmetric_tridiagonalize(matrix: ArrayLike) -> SymmetricTridiagonal:
    """
    Tridiagonalization A = Q·T·Qᴴ of a symmetric (Hermitian) matrix.

    Only the lower triangle of matrix is read. T is real with a
    non-negative off-diagonal.
    """
    design = MatrixDesign.build(matrix, square=True)
    warn_list = _hermitian_diagonal_warnings(design, 'symmetric_tridiagonalize')
    timer = Timer()
    timer.start()
    with timer.section('tridiagonalization'):
        params = tridiagonalize(design.working_copy())
    result = _envelope(params, 'householder_tridiagonal', design, timer, warn_list=warn_list)
    return SymmetricTridiagonal(_result=result)


def bidiagonalize(matrix: ArrayLike) -> Bidiagonal:
    """
    Bidiagonalization A = U·B·Vᴴ.

    B is upper bidiagonal when R >= C and lower bidiagonal otherwise.
    """
    design = MatrixDesign.build(matrix)
    timer = Timer()
    timer.start()
    with timer.section('bidiagonalization'):
        params = _bidiagonalize(design.working_copy())
    result = _envelope(
        params, 'householder_bidiagonal', design, timer,
        info={'upper': params.upper},
    )
    return Bidiagonal(_result=result)


# ═══════════════════════════════════════════════════════════════════════
# Iterative decompositions
# ═══════════════════════════════════════════════════════════════════════


def _schur(design: MatrixDesign, criteria: ConvergenceCriteria) -> Schur:
    timer = Timer()
    timer.start()
    with timer.section('hessenberg'):
        hess = reduce_to_hessenberg(design.working_copy())
    with timer.section('francis_iterations'):
        params = francis_qr(hess.h, hess.q, criteria)
    result = _envelope(
        params, 'francis_qr', design, timer,
        info=_criteria_info(criteria, params.iterations),
    )
    return Schur(_result=result)


def schur(matrix: ArrayLike) -> Schur:
    """
    Schur decomposition A = Q·T·Qᴴ, iterating until convergence.

    For a real matrix T is quasi-triangular: complex-conjugate eigenvalue
    pairs stay as 2x2 diagonal blocks.
    """
    design = MatrixDesign.build(matrix, square=True)
    return _schur(design, ConvergenceCriteria.unbounded(design.dtype))


def try_schur(matrix: ArrayLike, eps: float, max_niter: int) -> Schur | None:
    """
    Schur decomposition with an explicit tolerance and iteration budget.

    Args:
        matrix: Square real or complex matrix
        eps: Deflation tolerance (>= 0)
        max_niter: Maximum number of Francis steps, 0 for unbounded

    Returns:
        Schur, or None if max_niter steps did not suffice
    """
    design = MatrixDesign.build(matrix, square=True)
    criteria = ConvergenceCriteria.build(eps, max_niter)
    try:
        return _schur(design, criteria)
    except ConvergenceError:
        return None


def _symmetric_eigen(
    design: MatrixDesign,
    criteria: ConvergenceCriteria,
    warn_list: list[str],
) -> SymmetricEigen:
    timer = Timer()
    timer.start()
    with timer.section('tridiagonalization'):
        tri = tridiagonalize(design.working_copy())
    with timer.section('qr_iterations'):
        params = tridiagonal_qr(tri, criteria)
    result = _envelope(
        params, 'implicit_symmetric_qr', design, timer,
        info=_criteria_info(criteria, params.iterations),
        warn_list=warn_list,
    )
    return SymmetricEigen(_result=result)


def symmetric_eigen(matrix: ArrayLike) -> SymmetricEigen:
    """
    Eigendecomposition A = Q·diag(Λ)·Qᴴ of a symmetric (Hermitian) matrix.

    Only the lower triangle of matrix is read. Eigenvalues are real and
    unsorted; see SymmetricEigen.sorted().
    """
    design = MatrixDesign.build(matrix, square=True)
    warn_list = _hermitian_diagonal_warnings(design, 'symmetric_eigen')
    return _symmetric_eigen(design, ConvergenceCriteria.unbounded(design.dtype), warn_list)


def try_symmetric_eigen(matrix: ArrayLike, eps: float, max_niter: int) -> SymmetricEigen | None:
    """
    Symmetric eigendecomposition with an explicit tolerance and budget.

    Returns:
        SymmetricEigen, or None if max_niter QR steps did not suffice
    """
    design = MatrixDesign.build(matrix, square=True)
    criteria = ConvergenceCriteria.build(eps, max_niter)
    warn_list = _hermitian_diagonal_warnings(design, 'try_symmetric_eigen')
    try:
        return _symmetric_eigen(design, criteria, warn_list)
    except ConvergenceError:
        return None


def _svd(
    design: MatrixDesign,
    compute_u: bool,
    compute_v: bool,
    criteria: ConvergenceCriteria,
) -> SVD:
    # A wide matrix is handled through its adjoint, whose bidiagonal
    # form is upper
    wide = design.n_rows < design.n_cols
    timer = Timer()
    timer.start()
    with timer.section('bidiagonalization'):
        if wide:
            bidiag = _bidiagonalize(design.adjoint_copy(), compute_u=compute_v, compute_v=compute_u)
        else:
            bidiag = _bidiagonalize(design.working_copy(), compute_u=compute_u, compute_v=compute_v)
    with timer.section('golub_kahan_iterations'):
        params = golub_kahan_svd(bidiag, criteria)
    if wide:
        params = adjoint_svd(params)
    info = _criteria_info(criteria, params.iterations)
    info.update(compute_u=compute_u, compute_v=compute_v)
    result = _envelope(params, 'golub_kahan_svd', design, timer, info=info)
    return SVD(_result=result)


def svd(matrix: ArrayLike, compute_u: bool = True, compute_v: bool = True) -> SVD:
    """
    Singular value decomposition A = U·diag(σ)·Vᴴ, iterating until convergence.

    Args:
        matrix: Any R x C real or complex matrix
        compute_u: Accumulate the left singular vectors
        compute_v: Accumulate the right singular vectors

    Returns:
        SVD with σ non-negative and sorted descending
    """
    design = MatrixDesign.build(matrix)
    return _svd(design, bool(compute_u), bool(compute_v), ConvergenceCriteria.unbounded(design.dtype))


def try_svd(
    matrix: ArrayLike,
    compute_u: bool,
    compute_v: bool,
    eps: float,
    max_niter: int,
) -> SVD | None:
    """
    SVD with an explicit tolerance and iteration budget.

    Returns:
        SVD, or None if max_niter Golub-Kahan steps did not suffice
    """
    design = MatrixDesign.build(matrix)
    criteria = ConvergenceCriteria.build(eps, max_niter)
    try:
        return _svd(design, bool(compute_u), bool(compute_v), criteria)
    except ConvergenceError:
        return None
