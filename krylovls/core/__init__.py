"""
Core infrastructure for krylovls.

This module provides shared abstractions, utilities, and compute
infrastructure used by all solver families (crls, and sibling Krylov
solvers implementing the same contract).

Key components:
    protocols: LinearOperatorLike, KrylovBackend protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    operators: Operator and preconditioner adapters
    diagnostics: Per-solve diagnostics recorder
    status: Terminal status strings
    compute: Vector kernels, trust region, precision, timing
"""

from krylovls.core.protocols import LinearOperatorLike, KrylovBackend
from krylovls.core.result import Result
from krylovls.core.exceptions import (
    KrylovLSError,
    ValidationError,
    DimensionError,
    DTypeError,
    WorkspaceBusyError,
)
from krylovls.core.operators import OperatorAdapter, Preconditioner
from krylovls.core.diagnostics import DiagnosticsRecorder, DiagnosticsSnapshot

__all__ = [
    # Protocols
    "LinearOperatorLike",
    "KrylovBackend",
    # Result
    "Result",
    # Exceptions
    "KrylovLSError",
    "ValidationError",
    "DimensionError",
    "DTypeError",
    "WorkspaceBusyError",
    # Adapters
    "OperatorAdapter",
    "Preconditioner",
    # Diagnostics
    "DiagnosticsRecorder",
    "DiagnosticsSnapshot",
]
