"""
Tests for the krylovls exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via KrylovLSError)
    - Diagnostic attributes on DTypeError
    - Default attribute values (None for optional attributes)
"""

import numpy as np
import pytest

from krylovls.core.exceptions import (
    DimensionError,
    DTypeError,
    KrylovLSError,
    ValidationError,
    WorkspaceBusyError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via KrylovLSError."""

    def test_validation_error_is_krylovls_error(self):
        with pytest.raises(KrylovLSError):
            raise ValidationError("bad option")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_dtype_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DTypeError("wrong field")

    def test_workspace_busy_is_not_validation_error(self):
        assert issubclass(WorkspaceBusyError, KrylovLSError)
        assert not issubclass(WorkspaceBusyError, ValidationError)


# ═══════════════════════════════════════════════════════════════════════
# DTypeError attributes
# ═══════════════════════════════════════════════════════════════════════


class TestDTypeError:
    """DTypeError carries the offending parameter and dtypes."""

    def test_attributes(self):
        err = DTypeError(
            "A: dtype float32 does not match",
            name="A",
            expected=np.dtype(np.float64),
            actual=np.dtype(np.float32),
        )
        assert err.name == "A"
        assert err.expected == np.float64
        assert err.actual == np.float32
        assert "float32" in str(err)

    def test_defaults(self):
        err = DTypeError("mismatch")
        assert err.name is None
        assert err.expected is None
        assert err.actual is None
