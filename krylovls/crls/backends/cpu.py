"""
CPU backend for CRLS.

Conjugate residuals on the normal equations

    (AᴴA + λI) x = Aᴴb,

i.e. MINRES applied to the normal equations without forming AᴴA. Besides
the CR quantities the iteration recurs the residual r = b − Ax, so both
‖r‖ and the optimality residual ‖Aᴴr‖ are available every iteration and,
for λ = 0 without a trust region, decrease monotonically.

Reference:
    D. C.-L. Fong, Minimum-Residual Methods for Sparse Least-Squares using
    Golub-Kahan Bidiagonalization, Ph.D. Thesis, Stanford University, 2011.

r and Ar are only ever updated by their recurrences; on very long runs or
ill-conditioned operators they can drift from b − Ax and Aᴴ(b − Ax).
"""

import math
from typing import Any

from krylovls.core.compute.kernels import axpby, axpy, dotr, nrm2
from krylovls.core.compute.timing import Timer
from krylovls.core.compute.trust_region import to_boundary
from krylovls.core.result import Result
from krylovls.core.status import (
    STATUS_MAX_ITER,
    STATUS_ON_BOUNDARY,
    STATUS_SOLVED,
    STATUS_UNKNOWN,
    STATUS_USER_EXIT,
    STATUS_ZERO_CURVATURE,
    STATUS_ZERO_RHS,
)
from krylovls.crls.design import LeastSquaresDesign
from krylovls.crls.options import CRLSOptions
from krylovls.crls.solution import CRLSParams
from krylovls.crls.workspace import CRLSWorkspace


def _display(niter: int, verbose: int) -> bool:
    return verbose > 0 and niter % verbose == 0


class CPUCRLSBackend:
    """
    CPU backend running the CRLS iteration on NumPy vectors.

    Implements the KrylovBackend protocol for
    (LeastSquaresDesign, CRLSWorkspace, CRLSOptions) -> CRLSParams.

    All vectors live in the workspace and are updated in place; the backend
    itself keeps no state between solves.
    """

    @property
    def name(self) -> str:
        return 'cpu_crls'

    def solve(
        self,
        design: LeastSquaresDesign,
        workspace: CRLSWorkspace,
        options: CRLSOptions,
    ) -> Result[CRLSParams]:
        """
        Run CRLS to a terminal state.

        Args:
            design: Validated problem
            workspace: Workspace sized for the design
            options: Options already resolved for the design

        Returns:
            Result containing CRLSParams; x is left in workspace.x

        Raises:
            WorkspaceBusyError: If the workspace has another solve in flight
        """
        with workspace.acquire():
            return self._iterate(design, workspace, options)

    def _iterate(
        self,
        design: LeastSquaresDesign,
        ws: CRLSWorkspace,
        options: CRLSOptions,
    ) -> Result[CRLSParams]:
        timer = Timer()
        timer.start()
        warnings_list: list[str] = []

        A, M, b = design.A, design.M, design.b
        m, n = design.m, design.n
        lam, radius = options.lam, options.radius
        itmax, verbose = options.itmax, options.verbose
        stats = ws._stats

        if verbose > 0:
            print(f"CRLS: system of {m} equations in {n} variables")

        # === Initialization ===
        with timer.section('initialization'):
            stats.reset(options.history)
            precond = not M.is_identity

            x, p, Ar, q = ws._x, ws._p, ws._Ar, ws._q
            r, Ap, s = ws._r, ws._Ap, ws._s
            # One buffer holds M r, then M s, then M Ap; lifetimes never overlap.
            if precond:
                Mr = Ms = MAp = ws.preconditioner_buffer()
            else:
                Mr, Ms, MAp = r, s, Ap

            x.fill(0)
            r[:] = b
            b_norm = nrm2(r)
            r_norm = b_norm
            stats.record_residual(r_norm)

        info: dict[str, Any] = {
            'method': 'crls',
            'itmax': itmax,
            'lam': lam,
            'radius': radius,
            'preconditioned': precond,
            'precond_mode': M.mode if precond else None,
        }

        if b_norm == 0:
            stats.niter = 0
            stats.solved, stats.inconsistent = True, False
            stats.status = STATUS_ZERO_RHS
            stats.record_aresidual(0.0)
            timer.stop()
            return self._result(stats, info, timer, warnings_list)

        with timer.section('initialization'):
            if precond:
                M.apply(r, out=Mr)
            A.apply_adjoint(Mr, out=Ar)
            A.apply_forward(Ar, out=s)
            if precond:
                M.apply(s, out=Ms)

            p[:] = Ar
            Ap[:] = s
            A.apply_adjoint(Ms, out=q)
            if lam > 0:
                axpy(lam, p, q)
            gamma = dotr(s, Ms)

            ar_norm = nrm2(Ar)
            if lam > 0:
                gamma += lam * ar_norm * ar_norm
            stats.record_aresidual(ar_norm)
            epsilon = options.atol + options.rtol * ar_norm

        info['arnorm0'] = ar_norm
        info['epsilon'] = epsilon

        if verbose > 0:
            print(f"{'k':>5s}  {'‖Aᴴr‖':>8s}  {'‖r‖':>8s}")
        if _display(0, verbose):
            print(f"{0:5d}  {ar_norm:8.2e}  {r_norm:8.2e}")

        niter = 0
        on_boundary = False
        zero_curvature = False
        user_exit = False
        solved = ar_norm <= epsilon
        tired = niter >= itmax

        # === Iterations ===
        with timer.section('iterations'):
            while not (solved or tired or user_exit):
                q_norm2 = dotr(q, q)

                zero_curvature = q_norm2 == 0
                if radius > 0 and not zero_curvature:
                    p_norm = nrm2(p)
                    zero_curvature = dotr(Ap, Ap) <= epsilon * math.sqrt(q_norm2) * p_norm

                if zero_curvature:
                    # Flat along p (AᴴA singular there): step along Ar, which
                    # minimizes the quadratic at α = ‖Ar‖² / γ.
                    direction = Ar
                    if precond:
                        M.apply(s, out=Ms)
                    A.apply_adjoint(Ms, out=q)
                    if lam > 0:
                        axpy(lam, Ar, q)
                    ar_norm2 = ar_norm * ar_norm
                    alpha = ar_norm2 / gamma if gamma > 0 else 0.0
                    if radius > 0:
                        sigma = max(to_boundary(x, Ar, radius, d_norm2=ar_norm2))
                        alpha = min(alpha, sigma)
                else:
                    direction = p
                    alpha = gamma / q_norm2
                    if radius > 0:
                        sigma = max(to_boundary(x, p, radius, d_norm2=p_norm * p_norm))
                        if alpha >= sigma:
                            alpha = sigma
                            on_boundary = True

                axpy(alpha, direction, x)
                axpy(-alpha, q, Ar)
                ar_norm = nrm2(Ar)

                if zero_curvature or on_boundary:
                    solved = True
                    break

                axpy(-alpha, Ap, r)
                A.apply_forward(Ar, out=s)
                if precond:
                    M.apply(s, out=Ms)
                gamma_next = dotr(s, Ms)
                if lam > 0:
                    gamma_next += lam * ar_norm * ar_norm
                beta = gamma_next / gamma

                axpby(1.0, Ar, beta, p)
                axpby(1.0, s, beta, Ap)
                if precond:
                    M.apply(Ap, out=MAp)
                A.apply_adjoint(MAp, out=q)
                if lam > 0:
                    axpy(lam, p, q)

                gamma = gamma_next
                if lam > 0:
                    r_norm = math.sqrt(dotr(r, r) + lam * dotr(x, x))
                else:
                    r_norm = nrm2(r)

                niter += 1
                stats.niter = niter
                stats.record_residual(r_norm)
                stats.record_aresidual(ar_norm)
                if _display(niter, verbose):
                    print(f"{niter:5d}  {ar_norm:8.2e}  {r_norm:8.2e}")

                user_exit = bool(options.callback(ws))
                solved = ar_norm <= epsilon or on_boundary
                tired = niter >= itmax

        if verbose > 0:
            print()

        # Later assignments take precedence.
        status = STATUS_UNKNOWN
        if tired:
            status = STATUS_MAX_ITER
        if solved:
            status = STATUS_SOLVED
        if zero_curvature:
            status = STATUS_ZERO_CURVATURE
        if on_boundary:
            status = STATUS_ON_BOUNDARY
        if user_exit:
            status = STATUS_USER_EXIT

        if tired and not solved:
            warnings_list.append(
                f"CRLS did not converge after {niter} iterations "
                f"(final ‖Aᴴr‖: {ar_norm:.2e}, threshold: {epsilon:.2e})"
            )

        stats.niter = niter
        stats.solved = solved
        stats.inconsistent = False
        stats.status = status

        info['arnorm'] = ar_norm
        info['rnorm'] = r_norm

        timer.stop()
        return self._result(stats, info, timer, warnings_list)

    def _result(self, stats, info, timer, warnings_list) -> Result[CRLSParams]:
        params = CRLSParams(
            niter=stats.niter,
            solved=stats.solved,
            inconsistent=stats.inconsistent,
            status=stats.status,
            residuals=stats.residuals,
            aresiduals=stats.aresiduals,
        )
        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
