"""
Least-squares design.

Design wraps the operator A, the right-hand side b and the preconditioner M
after validation. It knows it is building a least-squares problem;
the operator adapters don't.

Every check here runs before a single operator application: once a
LeastSquaresDesign exists, the backend trusts its shapes and scalar field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from krylovls.core.operators import OperatorAdapter, Preconditioner, PrecondMode
from krylovls.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_length,
    check_same_dtype,
    check_supported_dtype,
)


@dataclass(frozen=True)
class LeastSquaresDesign:
    """
    Validated problem  minimize ‖b − Ax‖₂  with optional preconditioner M.

    Construct via build(), not directly.
    """
    _A: OperatorAdapter
    _b: NDArray[Any]
    _M: Preconditioner
    _m: int
    _n: int

    @classmethod
    def build(
        cls,
        A: Any,
        b: ArrayLike,
        *,
        M: Any = None,
        precond_mode: PrecondMode = 'multiply',
    ) -> LeastSquaresDesign:
        """
        Validate (A, b, M) and build the design.

        Args:
            A: Operator (dense, sparse, LinearOperator) of shape (m, n)
            b: Right-hand side of length m
            M: Preconditioner on the residual space, None for identity
            precond_mode: 'multiply' or 'solve' semantics for M

        Returns:
            LeastSquaresDesign

        Raises:
            ValidationError: If b is non-numeric or non-finite, or
                precond_mode is unknown
            DimensionError: If b is not 1D, len(b) != rows(A), or M is not m x m
            DTypeError: If A, b and M are not in one supported scalar field
        """
        b_arr = check_array(b, 'b')
        check_1d(b_arr, 'b')
        check_supported_dtype(b_arr.dtype, 'b')
        check_finite(b_arr, 'b')

        op = OperatorAdapter.from_operator(A, name='A')
        m, n = op.shape
        check_length(b_arr, m, 'b', 'rows of A')
        check_same_dtype(op.dtype, b_arr.dtype, 'A')

        precond = Preconditioner.build(M, precond_mode, m, name='M')
        if precond.dtype is not None:
            check_same_dtype(precond.dtype, b_arr.dtype, 'M')

        return cls(_A=op, _b=b_arr, _M=precond, _m=m, _n=n)

    # === Properties ===

    @property
    def A(self) -> OperatorAdapter:
        """Operator adapter for A (m x n)."""
        return self._A

    @property
    def b(self) -> NDArray[Any]:
        """Right-hand side (m,)."""
        return self._b

    @property
    def M(self) -> Preconditioner:
        """Preconditioner (identity if none was given)."""
        return self._M

    @property
    def m(self) -> int:
        """Number of equations (rows of A)."""
        return self._m

    @property
    def n(self) -> int:
        """Number of unknowns (columns of A)."""
        return self._n

    @property
    def dtype(self) -> np.dtype:
        """Scalar field of the solve."""
        return self._b.dtype
