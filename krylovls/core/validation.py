"""
Input validation utilities for krylovls.

These validators follow the "fail fast, fail loud" principle. They run
before any operator application and raise immediately with clear error
messages rather than silently correcting or making assumptions about user
intent.

Design principles:
    - No silent type coercion (except integer data promoted to float64)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from krylovls.core.exceptions import ValidationError, DimensionError, DTypeError
from krylovls.core.compute.precision import SUPPORTED_DTYPES, is_supported_dtype


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[Any]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (mixed types or non-numeric data) and
    non-numeric dtypes. Integer and boolean data are promoted to float64;
    real and complex floating data keep their dtype.

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

    if result.dtype == np.bool_ or np.issubdtype(result.dtype, np.integer):
        result = result.astype(np.float64)

    if not np.issubdtype(result.dtype, np.inexact):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    return result


def check_supported_dtype(dtype: np.dtype | type, name: str) -> None:
    """
    Verify dtype is one of the supported scalar fields.

    Args:
        dtype: dtype to check
        name: Parameter name for error messages

    Raises:
        DTypeError: If dtype is not float32, float64, complex64 or complex128
    """
    if not is_supported_dtype(dtype):
        supported = ", ".join(str(d) for d in SUPPORTED_DTYPES)
        raise DTypeError(
            f"{name}: unsupported dtype {np.dtype(dtype)}, expected one of {supported}",
            name=name,
            expected=None,
            actual=np.dtype(dtype),
        )


def check_same_dtype(
    dtype: np.dtype | type,
    expected: np.dtype | type,
    name: str,
) -> None:
    """
    Verify an operand lives in the solve's scalar field.

    Args:
        dtype: dtype of the operand
        expected: dtype of the solve (taken from b)
        name: Parameter name for error messages

    Raises:
        DTypeError: If the dtypes differ
    """
    if np.dtype(dtype) != np.dtype(expected):
        raise DTypeError(
            f"{name}: dtype {np.dtype(dtype)} does not match the right-hand side "
            f"dtype {np.dtype(expected)}",
            name=name,
            expected=np.dtype(expected),
            actual=np.dtype(dtype),
        )


def check_finite(array: NDArray[Any], name: str) -> None:
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


def check_1d(array: NDArray[Any], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Args:
        array: Array to check
        name: Parameter name for error messages

    Raises:
        DimensionError: If array is not 1D
    """
    if array.ndim != 1:
        raise DimensionError(
            f"{name}: expected 1D array, got {array.ndim}D with shape {array.shape}"
        )


def check_length(array: NDArray[Any], length: int, name: str, what: str) -> None:
    """
    Verify a vector has the length an operator requires.

    Args:
        array: 1D array to check
        length: Required length
        name: Parameter name for error messages
        what: Where the required length comes from, e.g. "rows of A"

    Raises:
        DimensionError: If len(array) != length
    """
    if array.shape[0] != length:
        raise DimensionError(
            f"Inconsistent problem size: {name} has length {array.shape[0]}, "
            f"expected {length} ({what})"
        )


def check_nonnegative(value: float, name: str) -> None:
    """
    Verify a scalar option is finite and >= 0.

    Args:
        value: Option value
        name: Option name for error messages

    Raises:
        ValidationError: If value is negative, NaN or infinite
    """
    if not np.isfinite(value) or value < 0:
        raise ValidationError(f"{name}: must be a finite value >= 0, got {value}")


def check_nonnegative_int(value: int, name: str) -> None:
    """
    Verify an integer option is >= 0.

    Args:
        value: Option value
        name: Option name for error messages

    Raises:
        ValidationError: If value is not an integer or is negative
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValidationError(f"{name}: expected an integer, got {type(value).__name__}")
    if value < 0:
        raise ValidationError(f"{name}: must be >= 0, got {value}")
