"""
Exception hierarchy for krylovls.

All exceptions inherit from KrylovLSError so callers can catch any
library-specific error in one place. Only configuration problems are
exceptions: degeneracy, non-convergence, trust-region termination and
user-requested exits are ordinary terminal statuses reported through the
solver statistics.

Design principles:
    - Configuration errors are raised before any operator application
    - Error messages name the parameter and show actual vs expected values
    - Never catch and re-raise with less information
"""


class KrylovLSError(Exception):
    """Base exception for all krylovls errors."""
    pass


class ValidationError(KrylovLSError):
    """
    Configuration error.

    Raised when user-provided inputs or options fail validation checks
    (negative tolerances, unknown preconditioner mode, non-numeric data).
    """
    pass


class DimensionError(ValidationError):
    """
    Operator and vector dimensions are inconsistent.

    Raised when b is not a vector, when len(b) differs from the number of
    rows of A, when a preconditioner is not m x m, or when a workspace was
    sized for a different problem.
    """
    pass


class DTypeError(ValidationError):
    """
    Scalar field mismatch.

    Raised when A, b and M do not share the same element type, or when
    the element type is not one of the supported real/complex fields.

    Attributes:
        name: Parameter the mismatch was detected on
        expected: Expected dtype (None if any supported dtype would do)
        actual: dtype actually received
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        expected: object | None = None,
        actual: object | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.expected = expected
        self.actual = actual


class WorkspaceBusyError(KrylovLSError):
    """
    A workspace already has a solve in flight.

    A workspace supports exactly one solve at a time. Starting a second
    solve on it (for instance from inside an iteration callback) raises
    this error instead of corrupting the first solve's vectors.
    """
    pass
