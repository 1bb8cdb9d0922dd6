"""
Input validation utilities for PyDecomp.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Real and complex floating dtypes are preserved
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pydecomp.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.inexact[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with a real or complex floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.dtype == np.bool_:
        return result.astype(np.float64)

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    # Integers become float64; half precision is too coarse for the kernels
    if np.issubdtype(result.dtype, np.integer):
        result = result.astype(np.float64)
    elif result.dtype == np.float16:
        result = result.astype(np.float32)

    return result


def check_finite(array: NDArray[np.inexact[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.inexact[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_2d(array: NDArray[np.inexact[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_square(array: NDArray[np.inexact[Any]], name: str) -> None:
    """
    Verify a 2D array is square.

    Args:
        array: 2D array to check
        name: Parameter name for error messages

    Raises:
        DimensionError: If the row and column counts differ
    """
    n_rows, n_cols = array.shape
    if n_rows != n_cols:
        raise DimensionError(
            f"{name}: expected a square matrix, got shape {array.shape}"
        )


def check_real(array: NDArray[np.inexact[Any]], name: str) -> None:
    """
    Verify array has a real (ordered) dtype.

    Raises:
        ValidationError: If the dtype is complex
    """
    if np.iscomplexobj(array):
        raise ValidationError(
            f"{name}: complex dtype {array.dtype} not supported, expected a real matrix"
        )


def check_rhs(
    b: ArrayLike,
    n_rows: int,
    name: str,
) -> NDArray[np.inexact[Any]]:
    """
    Validate a right-hand side against a factored matrix.

    Accepts a vector (n,) or a matrix (n, k).

    Args:
        b: Right-hand side
        n_rows: Required number of rows
        name: Parameter name for error messages

    Returns:
        The right-hand side as a finite numeric array

    Raises:
        DimensionError: If b is not 1D/2D or has the wrong number of rows
    """
    b_arr = check_array(b, name)
    if b_arr.ndim not in (1, 2):
        raise DimensionError(
            f"{name}: expected 1D or 2D array, got {b_arr.ndim}D with shape {b_arr.shape}"
        )
    if b_arr.shape[0] != n_rows:
        raise DimensionError(
            f"{name}: expected {n_rows} rows, got {b_arr.shape[0]}"
        )
    check_finite(b_arr, name)
    return b_arr


def check_tolerance(eps: Any, name: str) -> float:
    """
    Verify a tolerance is a finite, non-negative real number.

    Raises:
        ValidationError: If eps is not a real number, negative, or not finite
    """
    if isinstance(eps, bool) or not isinstance(eps, numbers.Real):
        raise ValidationError(
            f"{name}: expected a real number, got {type(eps).__name__}"
        )
    value = float(eps)
    if not np.isfinite(value) or value < 0:
        raise ValidationError(
            f"{name}: must be finite and non-negative, got {value}"
        )
    return value


def check_max_niter(max_niter: Any, name: str) -> int:
    """
    Verify an iteration budget is a non-negative integer (0 = unbounded).

    Raises:
        ValidationError: If max_niter is not an integer or is negative
    """
    if isinstance(max_niter, bool) or not isinstance(max_niter, numbers.Integral):
        raise ValidationError(
            f"{name}: expected an integer, got {type(max_niter).__name__}"
        )
    value = int(max_niter)
    if value < 0:
        raise ValidationError(
            f"{name}: must be non-negative (0 means unbounded), got {value}"
        )
    return value
