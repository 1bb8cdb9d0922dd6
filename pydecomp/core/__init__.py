"""
Core infrastructure for PyDecomp.

This module provides shared abstractions and utilities used by the
decomposition package.

Key components:
    protocols: Factorization protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, precision, convergence parameters, tolerance tiers
"""

from pydecomp.core.protocols import Factorization
from pydecomp.core.result import Result
from pydecomp.core.exceptions import (
    PyDecompError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
)

__all__ = [
    # Protocols
    "Factorization",
    # Result
    "Result",
    # Exceptions
    "PyDecompError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
]
