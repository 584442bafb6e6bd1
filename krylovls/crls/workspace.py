"""
CRLS workspace.

The workspace owns every vector the CRLS iteration touches, plus the
diagnostics recorder. It is sized once for an operator shape and scalar
field and reused across solves: each solve zeros x and overwrites the rest
in place, so nothing but the returned statistics survives from one solve to
the next.

One workspace supports exactly one solve at a time. A second solve started
while one is in flight raises WorkspaceBusyError.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator
import numpy as np
from numpy.typing import ArrayLike, NDArray

from krylovls.core.compute.precision import is_supported_dtype
from krylovls.core.diagnostics import DiagnosticsRecorder, DiagnosticsSnapshot
from krylovls.core.exceptions import DimensionError, DTypeError, WorkspaceBusyError
from krylovls.core.operators import OperatorAdapter
from krylovls.core.validation import check_array, check_supported_dtype
from krylovls.crls.design import LeastSquaresDesign


def _readonly(array: NDArray[Any]) -> NDArray[Any]:
    view = array.view()
    view.flags.writeable = False
    return view


class CRLSWorkspace:
    """
    Preallocated iteration vectors for CRLS.

    Vectors of length n: x (solution), Ar (normal-equation gradient Aᴴr),
    p (search direction), q ((AᴴMA + λI) p).
    Vectors of length m: r (residual b − Ax), Ap (A p), s (A Ar).
    Ms (length m) holds the preconditioned copy of r, s or Ap, whichever is
    live; it is allocated only the first time a non-identity preconditioner
    is used.

    Public vector properties return read-only views and `stats` returns a
    frozen snapshot, so an iteration callback can inspect the current state
    without disturbing it.

    Args:
        m: Rows of A
        n: Columns of A
        dtype: Scalar field (float32, float64, complex64 or complex128)
    """

    def __init__(self, m: int, n: int, dtype: np.dtype | type = np.float64):
        check_supported_dtype(dtype, 'dtype')
        if m < 0 or n < 0:
            raise DimensionError(f"workspace dimensions must be >= 0, got ({m}, {n})")
        self._m = int(m)
        self._n = int(n)
        self._dtype = np.dtype(dtype)

        self._x = np.zeros(n, dtype=self._dtype)
        self._Ar = np.zeros(n, dtype=self._dtype)
        self._p = np.zeros(n, dtype=self._dtype)
        self._q = np.zeros(n, dtype=self._dtype)
        self._r = np.zeros(m, dtype=self._dtype)
        self._Ap = np.zeros(m, dtype=self._dtype)
        self._s = np.zeros(m, dtype=self._dtype)
        self._Ms: NDArray[Any] | None = None

        self._stats = DiagnosticsRecorder()
        self._busy = False

    @classmethod
    def for_problem(cls, A: Any, b: ArrayLike) -> CRLSWorkspace:
        """
        Workspace sized for the operator A and right-hand side b.

        The scalar field is taken from b (integer data is promoted to
        float64). Shape and field consistency between A and b is checked
        when a solve starts, not here.
        """
        b_arr = check_array(b, 'b')
        m, n = OperatorAdapter.from_operator(A).shape
        dtype = b_arr.dtype if is_supported_dtype(b_arr.dtype) else np.float64
        return cls(m, n, dtype)

    # === Dimensions ===

    @property
    def m(self) -> int:
        return self._m

    @property
    def n(self) -> int:
        return self._n

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def busy(self) -> bool:
        """True while a solve is in flight on this workspace."""
        return self._busy

    # === Read-only state ===

    @property
    def x(self) -> NDArray[Any]:
        """Current iterate (n,)."""
        return _readonly(self._x)

    @property
    def r(self) -> NDArray[Any]:
        """Recurred residual b − Ax (m,)."""
        return _readonly(self._r)

    @property
    def Ar(self) -> NDArray[Any]:
        """Recurred optimality residual Aᴴr, or Aᴴr − λx when regularized (n,)."""
        return _readonly(self._Ar)

    @property
    def p(self) -> NDArray[Any]:
        return _readonly(self._p)

    @property
    def Ap(self) -> NDArray[Any]:
        return _readonly(self._Ap)

    @property
    def q(self) -> NDArray[Any]:
        return _readonly(self._q)

    @property
    def s(self) -> NDArray[Any]:
        return _readonly(self._s)

    @property
    def Ms(self) -> NDArray[Any] | None:
        """Preconditioner buffer, None until a non-identity M has been used."""
        return None if self._Ms is None else _readonly(self._Ms)

    @property
    def stats(self) -> DiagnosticsSnapshot:
        """Frozen copy of the diagnostics of the current (or most recent) solve."""
        return self._stats.snapshot()

    # === Solve support ===

    def check_compatible(self, design: LeastSquaresDesign) -> None:
        """
        Verify this workspace was sized for the design.

        Raises:
            DimensionError: If (m, n) differ
            DTypeError: If the scalar fields differ
        """
        if (design.m, design.n) != (self._m, self._n):
            raise DimensionError(
                f"workspace: sized for a {self._m} x {self._n} operator, "
                f"got a {design.m} x {design.n} problem"
            )
        if design.dtype != self._dtype:
            raise DTypeError(
                f"workspace: allocated for dtype {self._dtype}, got a {design.dtype} problem",
                name='workspace',
                expected=self._dtype,
                actual=design.dtype,
            )

    def preconditioner_buffer(self) -> NDArray[Any]:
        """Ms, allocated on first use."""
        if self._Ms is None:
            self._Ms = np.zeros(self._m, dtype=self._dtype)
        return self._Ms

    @contextmanager
    def acquire(self) -> Iterator[CRLSWorkspace]:
        """
        Hold the workspace for one solve.

        Raises:
            WorkspaceBusyError: If another solve holds it
        """
        if self._busy:
            raise WorkspaceBusyError(
                "workspace already has a solve in flight; use a separate "
                "CRLSWorkspace per concurrent solve"
            )
        self._busy = True
        try:
            yield self
        finally:
            self._busy = False

    def __repr__(self) -> str:
        return (
            f"CRLSWorkspace(m={self._m}, n={self._n}, dtype={self._dtype}, "
            f"preconditioned={self._Ms is not None})"
        )
