"""
Operator adapters.

Solvers see the operator A and the preconditioner M only through these
adapters, which hide whether the caller passed a dense array, a SciPy
sparse matrix or a scipy.sparse.linalg.LinearOperator. Every apply writes
into a caller-owned output buffer so solver loops run on preallocated
workspace vectors.

Usage:
    op = OperatorAdapter.from_operator(A)
    op.apply_forward(v, out=Av)        # Av ← A v
    op.apply_adjoint(w, out=Ahw)       # Ahw ← Aᴴ w

    M = Preconditioner.build(M_mat, 'solve', m=op.shape[0])
    if not M.is_identity:
        M.apply(r, out=Mr)             # Mr ← M⁻¹ r
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal
import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray
from scipy.linalg import lu_factor, lu_solve
from scipy.sparse.linalg import LinearOperator, aslinearoperator, factorized

from krylovls.core.exceptions import DimensionError, ValidationError


PrecondMode = Literal['multiply', 'solve']


def _promote_integer(A: Any) -> Any:
    """Integer dense/sparse matrices are promoted to float64, like vectors."""
    if isinstance(A, np.ndarray) or sp.issparse(A):
        if A.dtype == np.bool_ or np.issubdtype(A.dtype, np.integer):
            return A.astype(np.float64)
    return A


def _solve_dtype(M: Any, m: int) -> np.dtype:
    """
    Scalar field of a factorization exposing only solve().

    SuperLU (splu/spilu output) has no dtype but carries its L factor.
    Other objects solve one real zero vector; the result is in their field.
    """
    L = getattr(M, 'L', None)
    if L is not None and hasattr(L, 'dtype'):
        return np.dtype(L.dtype)
    return np.asarray(M.solve(np.zeros(m))).dtype


@dataclass(frozen=True)
class OperatorAdapter:
    """
    Uniform forward/adjoint application of a linear operator A (m x n).

    Construct via from_operator(), not directly.
    """
    _op: LinearOperator

    @classmethod
    def from_operator(cls, A: Any, name: str = 'A') -> OperatorAdapter:
        """
        Wrap anything scipy.sparse.linalg.aslinearoperator accepts.

        Args:
            A: Dense 2D array, SciPy sparse matrix/array, LinearOperator, or
               an object with shape, dtype, matvec and rmatvec
            name: Parameter name for error messages

        Returns:
            OperatorAdapter

        Raises:
            DimensionError: If A is not two-dimensional
            ValidationError: If A cannot be interpreted as a linear operator
        """
        if isinstance(A, cls):
            return A
        A = _promote_integer(A)
        if isinstance(A, np.ndarray) and A.ndim != 2:
            raise DimensionError(
                f"{name}: expected 2D operator, got {A.ndim}D with shape {A.shape}"
            )
        try:
            op = aslinearoperator(A)
        except TypeError as e:
            raise ValidationError(f"{name}: cannot use as a linear operator: {e}") from e
        return cls(_op=op)

    @property
    def shape(self) -> tuple[int, int]:
        """(m, n): rows and columns of A."""
        m, n = self._op.shape
        return int(m), int(n)

    @property
    def dtype(self) -> np.dtype:
        """Scalar field of A."""
        return np.dtype(self._op.dtype)

    def apply_forward(self, v: NDArray[Any], out: NDArray[Any]) -> NDArray[Any]:
        """out ← A v (v has length n, out has length m)."""
        np.copyto(out, np.ravel(self._op.matvec(v)))
        return out

    def apply_adjoint(self, v: NDArray[Any], out: NDArray[Any]) -> NDArray[Any]:
        """out ← Aᴴ v (v has length m, out has length n)."""
        np.copyto(out, np.ravel(self._op.rmatvec(v)))
        return out


@dataclass(frozen=True)
class Preconditioner:
    """
    Preconditioner M acting on the residual space (m x m).

    `mode` selects whether apply() multiplies by M or solves with M.
    The identity preconditioner has is_identity=True and no apply function;
    solvers check the flag once per solve and skip every M-related buffer
    and call.
    """
    _apply: Callable[[NDArray[Any]], NDArray[Any]] | None
    mode: PrecondMode
    dtype: np.dtype | None = None

    @classmethod
    def identity(cls) -> Preconditioner:
        """The identity preconditioner (fast path)."""
        return cls(_apply=None, mode='multiply', dtype=None)

    @classmethod
    def build(
        cls,
        M: Any,
        mode: PrecondMode,
        m: int,
        name: str = 'M',
    ) -> Preconditioner:
        """
        Build a preconditioner from user input.

        Args:
            M: None for the identity. In 'multiply' mode anything
               aslinearoperator accepts. In 'solve' mode an object with a
               .solve(v) method (e.g. scipy.sparse.linalg.splu output), a
               dense matrix (LU-factorized once) or a sparse matrix
               (factorized once).
            mode: 'multiply' (apply computes M v) or 'solve' (M⁻¹ v)
            m: Required size (rows of A)
            name: Parameter name for error messages

        Returns:
            Preconditioner

        Raises:
            ValidationError: If mode is unknown or M has no solve semantics
            DimensionError: If M is not m x m
        """
        if mode not in ('multiply', 'solve'):
            raise ValidationError(
                f"precond_mode: expected 'multiply' or 'solve', got {mode!r}"
            )
        if M is None:
            return cls.identity()
        if isinstance(M, cls):
            return M

        M = _promote_integer(M)
        shape = getattr(M, 'shape', None)
        if shape is not None and tuple(shape) != (m, m):
            raise DimensionError(
                f"{name}: expected shape ({m}, {m}) to match the rows of A, got {tuple(shape)}"
            )
        dtype = getattr(M, 'dtype', None)
        dtype = np.dtype(dtype) if dtype is not None else None

        if mode == 'multiply':
            op = OperatorAdapter.from_operator(M, name=name)
            return cls(_apply=op._op.matvec, mode=mode, dtype=op.dtype)

        if hasattr(M, 'solve') and callable(M.solve):
            if dtype is None:
                dtype = _solve_dtype(M, m)
            return cls(_apply=M.solve, mode=mode, dtype=dtype)
        if sp.issparse(M):
            return cls(_apply=factorized(sp.csc_matrix(M)), mode=mode, dtype=dtype)
        if isinstance(M, np.ndarray):
            if M.ndim != 2:
                raise DimensionError(
                    f"{name}: expected 2D matrix, got {M.ndim}D with shape {M.shape}"
                )
            lu_piv = lu_factor(M)
            return cls(_apply=lambda v: lu_solve(lu_piv, v), mode=mode, dtype=dtype)

        raise ValidationError(
            f"{name}: precond_mode='solve' needs a matrix or an object with a "
            f"solve() method, got {type(M).__name__}"
        )

    @property
    def is_identity(self) -> bool:
        return self._apply is None

    def apply(self, v: NDArray[Any], out: NDArray[Any]) -> NDArray[Any]:
        """out ← M v (multiply mode) or out ← M⁻¹ v (solve mode)."""
        if self._apply is None:
            np.copyto(out, v)
        else:
            np.copyto(out, np.ravel(self._apply(v)))
        return out
