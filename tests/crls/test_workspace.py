"""
Tests for CRLSWorkspace reuse, callbacks and verbose output.

Validates:
    - crls_inplace() is repeatable: identical inputs give bit-identical output
    - Workspace shape and dtype are checked before solving
    - A workspace refuses a second solve while one is in flight
    - Callbacks see read-only state and can request an early exit
    - verbose prints one line per `verbose` iterations
"""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from krylovls.core.exceptions import DimensionError, DTypeError, WorkspaceBusyError
from krylovls.core.status import STATUS_SOLVED, STATUS_USER_EXIT
from krylovls.crls import CRLSWorkspace, crls, crls_inplace


# ═══════════════════════════════════════════════════════════════════════
# Allocation and reuse
# ═══════════════════════════════════════════════════════════════════════


class TestAllocation:

    def test_for_problem(self, tall_problem):
        A, b, _ = tall_problem
        ws = CRLSWorkspace.for_problem(A, b)
        assert (ws.m, ws.n) == A.shape
        assert ws.dtype == np.float64
        assert ws.x.shape == (A.shape[1],)
        assert ws.r.shape == (A.shape[0],)
        assert ws.busy is False

    def test_for_problem_complex(self):
        ws = CRLSWorkspace.for_problem(np.eye(3, dtype=np.complex64), np.ones(3, dtype=np.complex64))
        assert ws.dtype == np.complex64

    def test_unsupported_dtype(self):
        with pytest.raises(DTypeError):
            CRLSWorkspace(3, 2, np.float16)

    def test_repr(self):
        assert repr(CRLSWorkspace(3, 2)) == (
            "CRLSWorkspace(m=3, n=2, dtype=float64, preconditioned=False)"
        )


class TestReuse:

    def test_repeatable(self, tall_problem, rng):
        A, b, _ = tall_problem
        ws = CRLSWorkspace.for_problem(A, b)

        stats1 = crls_inplace(ws, A, b, history=True)
        x1 = ws.x.copy()

        # An unrelated solve in between must leave no trace
        crls_inplace(ws, A, rng.standard_normal(A.shape[0]), lam=2.0, radius=0.1)

        stats2 = crls_inplace(ws, A, b, history=True)
        np.testing.assert_array_equal(ws.x, x1)
        assert stats2.niter == stats1.niter
        assert stats2.status == stats1.status
        assert stats2.residuals == stats1.residuals
        assert stats2.aresiduals == stats1.aresiduals

    def test_matches_crls(self, tall_problem):
        A, b, _ = tall_problem
        x, stats = crls(A, b)
        ws = CRLSWorkspace.for_problem(A, b)
        stats_ws = crls_inplace(ws, A, b)
        np.testing.assert_allclose(ws.x, x, rtol=1e-12, atol=1e-14)
        assert stats_ws.niter == stats.niter

    def test_returned_stats_survive_reuse(self, tall_problem, rng):
        A, b, _ = tall_problem
        ws = CRLSWorkspace.for_problem(A, b)
        stats = crls_inplace(ws, A, b, history=True)
        residuals = stats.residuals
        crls_inplace(ws, A, rng.standard_normal(A.shape[0]), history=True, itmax=1)
        assert stats.residuals == residuals
        assert ws.stats.niter == 1

    def test_shape_mismatch(self, tall_problem):
        A, b, _ = tall_problem
        ws = CRLSWorkspace(A.shape[0] + 1, A.shape[1])
        with pytest.raises(DimensionError, match="workspace"):
            crls_inplace(ws, A, b)

    def test_dtype_mismatch(self, tall_problem):
        A, b, _ = tall_problem
        ws = CRLSWorkspace(*A.shape, dtype=np.float32)
        with pytest.raises(DTypeError, match="workspace"):
            crls_inplace(ws, A, b)


# ═══════════════════════════════════════════════════════════════════════
# Callbacks
# ═══════════════════════════════════════════════════════════════════════


class TestCallback:

    def test_called_once_per_iteration(self, tall_problem):
        A, b, _ = tall_problem
        seen = []

        def callback(ws):
            seen.append(ws.stats.niter)
            return False

        _, stats = crls(A, b, callback=callback)
        assert seen == list(range(1, stats.niter + 1))

    def test_early_exit(self, tall_problem):
        A, b, _ = tall_problem
        x, stats = crls(A, b, callback=lambda ws: ws.stats.niter >= 2)
        assert stats.status == STATUS_USER_EXIT
        assert stats.niter == 2
        assert stats.solved is False
        assert np.all(np.isfinite(x))

    def test_exit_and_solved_same_iteration(self):
        A = np.array([[1.0], [2.0], [0.0], [1.0]])
        _, stats = crls(A, 3.0 * A[:, 0], callback=lambda ws: True)
        assert stats.niter == 1
        assert stats.solved is True
        assert stats.status == STATUS_USER_EXIT

    def test_state_is_read_only(self, tall_problem):
        A, b, _ = tall_problem
        errors = []

        def callback(ws):
            try:
                ws.x[0] = 1.0
            except ValueError as e:
                errors.append(e)
            return True

        crls(A, b, callback=callback)
        assert len(errors) == 1

    def test_stats_are_read_only(self, tall_problem):
        A, b, _ = tall_problem
        errors = []

        def callback(ws):
            stats = ws.stats
            assert not hasattr(stats, 'record_residual')
            try:
                stats.niter = 100
            except FrozenInstanceError as e:
                errors.append(e)
            return False

        _, stats = crls(A, b, callback=callback, history=True)
        assert len(errors) == stats.niter
        assert all(rnorm >= 0 for rnorm in stats.residuals)
        assert len(stats.residuals) == stats.niter + 1

    def test_stats_snapshot_is_current(self, tall_problem):
        A, b, _ = tall_problem
        snapshots = []

        def callback(ws):
            snapshots.append(ws.stats)
            return ws.stats.niter >= 3

        _, stats = crls(A, b, callback=callback, history=True)
        assert [s.niter for s in snapshots] == [1, 2, 3]
        assert snapshots[-1].residuals == stats.residuals
        assert snapshots[0].aresiduals == stats.aresiduals[:2]

    def test_sees_current_iterate(self, tall_problem):
        A, b, _ = tall_problem
        norms = []

        def callback(ws):
            norms.append(np.linalg.norm(b - A @ ws.x))
            return False

        _, stats = crls(A, b, callback=callback, history=True)
        np.testing.assert_allclose(norms, stats.residuals[1:], rtol=1e-8)

    def test_nested_solve_refused(self, tall_problem):
        A, b, _ = tall_problem
        ws = CRLSWorkspace.for_problem(A, b)

        def callback(inner_ws):
            crls_inplace(inner_ws, A, b)
            return False

        with pytest.raises(WorkspaceBusyError):
            crls_inplace(ws, A, b, callback=callback)
        assert ws.busy is False

    def test_busy_during_callback(self, tall_problem):
        A, b, _ = tall_problem
        flags = []

        def callback(ws):
            flags.append(ws.busy)
            return True

        ws = CRLSWorkspace.for_problem(A, b)
        crls_inplace(ws, A, b, callback=callback)
        assert flags == [True]
        assert ws.busy is False

    def test_exception_propagates(self, tall_problem):
        A, b, _ = tall_problem

        def callback(ws):
            raise RuntimeError("stop here")

        ws = CRLSWorkspace.for_problem(A, b)
        with pytest.raises(RuntimeError, match="stop here"):
            crls_inplace(ws, A, b, callback=callback)
        assert ws.busy is False
        crls_inplace(ws, A, b)
        assert ws.stats.status == STATUS_SOLVED


# ═══════════════════════════════════════════════════════════════════════
# Verbose output
# ═══════════════════════════════════════════════════════════════════════


def _iteration_lines(out):
    return [line for line in out.splitlines() if line.split() and line.split()[0].isdigit()]


class TestVerbose:

    def test_silent_by_default(self, exact_4x2, capsys):
        A, b, _ = exact_4x2
        crls(A, b)
        assert capsys.readouterr().out == ""

    def test_every_iteration(self, exact_4x2, capsys):
        A, b, _ = exact_4x2
        _, stats = crls(A, b, verbose=1)
        out = capsys.readouterr().out
        assert "CRLS: system of 4 equations in 2 variables" in out
        assert "‖Aᴴr‖" in out
        lines = _iteration_lines(out)
        assert len(lines) == stats.niter + 1
        assert [int(line.split()[0]) for line in lines] == list(range(stats.niter + 1))

    def test_every_other_iteration(self, tall_problem, capsys):
        A, b, _ = tall_problem
        _, stats = crls(A, b, verbose=2)
        ks = [int(line.split()[0]) for line in _iteration_lines(capsys.readouterr().out)]
        assert ks == list(range(0, stats.niter + 1, 2))

    def test_zero_rhs_prints_header_only(self, exact_4x2, capsys):
        A, _, _ = exact_4x2
        crls(A, np.zeros(4), verbose=1)
        out = capsys.readouterr().out
        assert out == "CRLS: system of 4 equations in 2 variables\n"
