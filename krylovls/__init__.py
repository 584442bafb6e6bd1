"""
krylovls: matrix-free Krylov solvers for linear least squares.

Solves  minimize ‖Ax − b‖₂  (optionally with ridge regularization and a
trust-region constraint) using only products with A and Aᴴ.

Submodules:
    crls: Conjugate residuals on the normal equations
    core: Shared operators, results, diagnostics and exceptions

Example:
    >>> from krylovls.crls import crls
    >>> x, stats = crls(A, b)
"""

__version__ = "0.1.0"

from krylovls import core
from krylovls import crls
from krylovls.core.exceptions import (
    DimensionError,
    DTypeError,
    KrylovLSError,
    ValidationError,
    WorkspaceBusyError,
)

__all__ = [
    "__version__",
    "core",
    "crls",
    "KrylovLSError",
    "ValidationError",
    "DimensionError",
    "DTypeError",
    "WorkspaceBusyError",
]
