"""
Tests for operator and preconditioner adapters.

Validates:
    - Dense, sparse and LinearOperator inputs apply identically
    - The adjoint is the conjugate transpose
    - Preconditioner multiply/solve semantics and the identity fast path
    - Shape and type errors
"""

import numpy as np
import pytest
import scipy.sparse as sp
from scipy.sparse.linalg import LinearOperator, splu

from krylovls.core.exceptions import DimensionError, ValidationError
from krylovls.core.operators import OperatorAdapter, Preconditioner


@pytest.fixture
def dense(rng):
    return rng.standard_normal((5, 3))


# ═══════════════════════════════════════════════════════════════════════
# OperatorAdapter
# ═══════════════════════════════════════════════════════════════════════


class TestOperatorAdapter:

    @pytest.mark.parametrize("kind", ["dense", "csr", "linear_operator"])
    def test_forward_and_adjoint(self, dense, rng, kind):
        if kind == "csr":
            A = sp.csr_matrix(dense)
        elif kind == "linear_operator":
            A = LinearOperator(
                dense.shape,
                matvec=lambda v: dense @ v,
                rmatvec=lambda w: dense.T @ w,
                dtype=np.float64,
            )
        else:
            A = dense
        op = OperatorAdapter.from_operator(A)
        assert op.shape == (5, 3)
        assert op.dtype == np.float64

        v = rng.standard_normal(3)
        w = rng.standard_normal(5)
        Av = np.empty(5)
        Ahw = np.empty(3)
        assert op.apply_forward(v, out=Av) is Av
        op.apply_adjoint(w, out=Ahw)
        np.testing.assert_allclose(Av, dense @ v, rtol=1e-14)
        np.testing.assert_allclose(Ahw, dense.T @ w, rtol=1e-14)

    def test_complex_adjoint_conjugates(self, rng):
        A = rng.standard_normal((4, 2)) + 1j * rng.standard_normal((4, 2))
        w = rng.standard_normal(4) + 1j * rng.standard_normal(4)
        out = np.empty(2, dtype=np.complex128)
        OperatorAdapter.from_operator(A).apply_adjoint(w, out=out)
        np.testing.assert_allclose(out, A.conj().T @ w, rtol=1e-14)

    def test_integer_matrix_promoted(self):
        op = OperatorAdapter.from_operator(np.array([[1, 2], [3, 4]]))
        assert op.dtype == np.float64

    def test_wrapping_adapter_is_noop(self, dense):
        op = OperatorAdapter.from_operator(dense)
        assert OperatorAdapter.from_operator(op) is op

    def test_3d_rejected(self):
        with pytest.raises(DimensionError, match="expected 2D operator"):
            OperatorAdapter.from_operator(np.ones((2, 2, 2)))

    def test_not_an_operator(self):
        with pytest.raises(ValidationError, match="cannot use as a linear operator"):
            OperatorAdapter.from_operator("not a matrix")


# ═══════════════════════════════════════════════════════════════════════
# Preconditioner
# ═══════════════════════════════════════════════════════════════════════


class TestPreconditioner:

    def test_none_is_identity(self):
        M = Preconditioner.build(None, 'multiply', m=4)
        assert M.is_identity
        out = np.empty(2)
        M.apply(np.array([1.0, 2.0]), out=out)
        np.testing.assert_array_equal(out, [1.0, 2.0])

    def test_multiply_mode(self, rng):
        W = np.diag([1.0, 2.0, 4.0])
        v = rng.standard_normal(3)
        out = np.empty(3)
        M = Preconditioner.build(W, 'multiply', m=3)
        assert not M.is_identity
        assert M.dtype == np.float64
        M.apply(v, out=out)
        np.testing.assert_allclose(out, W @ v, rtol=1e-14)

    @pytest.mark.parametrize("kind", ["dense", "sparse", "splu"])
    def test_solve_mode(self, rng, kind):
        W = np.array([[4.0, 1.0, 0.0], [1.0, 3.0, 0.0], [0.0, 0.0, 2.0]])
        if kind == "sparse":
            M_in = sp.csr_matrix(W)
        elif kind == "splu":
            M_in = splu(sp.csc_matrix(W))
        else:
            M_in = W
        v = rng.standard_normal(3)
        out = np.empty(3)
        Preconditioner.build(M_in, 'solve', m=3).apply(v, out=out)
        np.testing.assert_allclose(out, np.linalg.solve(W, v), rtol=1e-12)

    @pytest.mark.parametrize("dtype", [np.float32, np.float64, np.complex128])
    def test_solve_mode_reports_factor_dtype(self, dtype):
        lu = splu(sp.csc_matrix(np.eye(3, dtype=dtype) * 2))
        assert Preconditioner.build(lu, 'solve', m=3).dtype == dtype

    def test_solve_mode_needs_solve_semantics(self):
        op = LinearOperator((3, 3), matvec=lambda v: v, dtype=np.float64)
        with pytest.raises(ValidationError, match="solve"):
            Preconditioner.build(op, 'solve', m=3)

    def test_wrong_shape(self):
        with pytest.raises(DimensionError, match=r"expected shape \(3, 3\)"):
            Preconditioner.build(np.eye(4), 'multiply', m=3)

    def test_unknown_mode(self):
        with pytest.raises(ValidationError, match="precond_mode"):
            Preconditioner.build(np.eye(3), 'invert', m=3)
