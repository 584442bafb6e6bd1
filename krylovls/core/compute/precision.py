"""
Numerical precision constants and utilities.

Provides the supported scalar fields, machine epsilon of a field's real
base type, and the default stopping tolerances derived from it.
"""

import numpy as np


# Scalar fields the solvers run on (the four BLAS types)
SUPPORTED_DTYPES: tuple[np.dtype, ...] = (
    np.dtype(np.float32),
    np.dtype(np.float64),
    np.dtype(np.complex64),
    np.dtype(np.complex128),
)

# Machine epsilon for float64
EPSILON_64: float = float(np.finfo(np.float64).eps)  # ~2.22e-16

# Machine epsilon for float32
EPSILON_32: float = float(np.finfo(np.float32).eps)  # ~1.19e-7


def is_supported_dtype(dtype: np.dtype | type) -> bool:
    """True if dtype is one of SUPPORTED_DTYPES."""
    return np.dtype(dtype) in SUPPORTED_DTYPES


def real_dtype(dtype: np.dtype | type) -> np.dtype:
    """
    Real base type of a scalar field.

    complex128 -> float64, complex64 -> float32, real types map to
    themselves.
    """
    return np.finfo(dtype).dtype


def machine_epsilon(dtype: np.dtype | type = np.float64) -> float:
    """
    Get machine epsilon for a given dtype.

    For complex dtypes this is the epsilon of the real base type.

    Args:
        dtype: NumPy dtype or type

    Returns:
        Machine epsilon for the dtype
    """
    return float(np.finfo(dtype).eps)


def default_tolerance(dtype: np.dtype | type = np.float64) -> float:
    """
    Default atol/rtol for a scalar field: sqrt(eps).

    ~1.49e-8 for float64/complex128, ~3.45e-4 for float32/complex64.
    """
    return float(np.sqrt(machine_epsilon(dtype)))
