"""
Exception hierarchy for PyDecomp.

All exceptions inherit from PyDecompError to allow catching any
library-specific error. Kernels raise the numerical exceptions below;
the public entry points that are specified to return an absent result
(cholesky, udu, try_schur, try_symmetric_eigen, try_svd) translate exactly
their own kernel's failure into None.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyDecompError(Exception):
    """Base exception for all PyDecomp errors."""
    pass


class ValidationError(PyDecompError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when an input is not a matrix, when a square-only decomposition
    receives a rectangular matrix, or when a right-hand side does not match
    the factored matrix.
    """
    pass


class NumericalError(PyDecompError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or a pivot is exactly zero.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Elimination step at which the zero pivot was met
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically min(n, p))
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.rank = rank
        self.expected_rank = expected_rank


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised by the Cholesky kernel the first time a diagonal pivot would
    require the square root of a non-positive value.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        pivot_index: Column at which the factorization broke down
        pivot_value: Real part of the offending pivot
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        pivot_index: int | None = None,
        pivot_value: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.pivot_index = pivot_index
        self.pivot_value = pivot_value


class ConvergenceError(PyDecompError):
    """
    Iterative algorithm failed to converge.

    Raised when an iterative decomposition (Schur, symmetric eigen, SVD)
    exhausts its iteration budget before full deflation.

    Attributes:
        iterations: Number of iterations completed
        reason: Why convergence failed (e.g., 'max_niter')
        threshold: The deflation tolerance that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.reason = reason
        self.threshold = threshold
