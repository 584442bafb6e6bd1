"""
Solver dispatch for CRLS.

This module provides crls() and crls_inplace() (public API). Both validate
their inputs here, at the boundary; the backend trusts what it is given.
"""

from typing import Any
from numpy.typing import ArrayLike, NDArray

from krylovls.core.operators import PrecondMode
from krylovls.crls.backends.cpu import CPUCRLSBackend
from krylovls.crls.design import LeastSquaresDesign
from krylovls.crls.options import Callback, CRLSOptions
from krylovls.crls.solution import CRLSStats
from krylovls.crls.workspace import CRLSWorkspace


def crls(
    A: Any,
    b: ArrayLike,
    *,
    M: Any = None,
    lam: float = 0.0,
    atol: float | None = None,
    rtol: float | None = None,
    radius: float = 0.0,
    itmax: int = 0,
    verbose: int = 0,
    history: bool = False,
    precond_mode: PrecondMode = 'multiply',
    callback: Callback | None = None,
) -> tuple[NDArray[Any], CRLSStats]:
    """
    Solve a linear least-squares problem with CRLS.

    Solves

        minimize ‖b − Ax‖₂² + λ‖x‖₂²

    using the Conjugate Residuals method on the normal equations
    (AᴴA + λI) x = Aᴴb, without forming AᴴA. The residual r = b − Ax is
    recurred, and both ‖r‖ and ‖Aᴴr‖ decrease monotonically (λ = 0, no
    trust region). CRLS is formally equivalent to LSMR, though it can be
    less accurate.

    A fresh CRLSWorkspace is allocated for the call; use crls_inplace() to
    reuse one across solves.

    Args:
        A: Operator of shape (m, n): dense array, SciPy sparse matrix or
            scipy.sparse.linalg.LinearOperator.
        b: Right-hand side of length m.
        M: Preconditioner on the residual space (m x m). None (default)
            is the identity and skips all preconditioner work.
        lam: Regularization weight λ >= 0. Default 0.
        atol: Absolute tolerance on ‖Aᴴr‖. Default sqrt(eps) of the
            scalar field's real type.
        rtol: Relative tolerance on ‖Aᴴr‖, scaled by ‖Aᴴb‖. Default
            sqrt(eps).
        radius: Trust-region radius; the iterate is kept in ‖x‖ <= radius.
            0 (default) means unconstrained.
        itmax: Maximum iterations. 0 (default) means m + n.
        verbose: Print a progress line (k, ‖Aᴴr‖, ‖r‖) every `verbose`
            iterations. 0 (default) is silent.
        history: Record ‖r‖ and ‖Aᴴr‖ at each iteration.
        precond_mode: 'multiply' (default) applies M v, 'solve' applies M⁻¹ v.
        callback: callback(workspace) -> bool, called after each completed
            iteration with read-only access to the current state. Returning
            True stops the iteration with status 'user-requested exit'.

    Returns:
        (x, stats): x is a dense vector of length n, stats a CRLSStats with
        niter, solved, inconsistent, status and the optional histories.

    Raises:
        ValidationError: If an option is out of range or b is not numeric
        DimensionError: If len(b) != rows(A), b is not 1D, or M is not m x m
        DTypeError: If A, b and M are not in the same supported scalar field

    Example:
        >>> import numpy as np
        >>> from krylovls.crls import crls
        >>>
        >>> A = np.array([[1.0, 0.0], [0.0, 2.0], [1.0, 1.0], [2.0, -1.0]])
        >>> b = A @ np.array([1.0, -1.0])
        >>> x, stats = crls(A, b)
        >>> stats.status
        'solution good enough given atol and rtol'
    """
    options = CRLSOptions.from_kwargs(
        lam=lam, atol=atol, rtol=rtol, radius=radius, itmax=itmax,
        verbose=verbose, history=history, precond_mode=precond_mode,
        callback=callback,
    )
    design = LeastSquaresDesign.build(A, b, M=M, precond_mode=options.precond_mode)
    workspace = CRLSWorkspace(design.m, design.n, design.dtype)
    stats = _run(design, workspace, options)
    return workspace._x, stats


def crls_inplace(
    workspace: CRLSWorkspace,
    A: Any,
    b: ArrayLike,
    *,
    M: Any = None,
    lam: float = 0.0,
    atol: float | None = None,
    rtol: float | None = None,
    radius: float = 0.0,
    itmax: int = 0,
    verbose: int = 0,
    history: bool = False,
    precond_mode: PrecondMode = 'multiply',
    callback: Callback | None = None,
) -> CRLSStats:
    """
    Solve with CRLS reusing an existing workspace.

    Same problem and keyword arguments as crls(). The solution is left in
    workspace.x; every other workspace vector is overwritten. Two calls
    with identical inputs produce identical results.

    Args:
        workspace: CRLSWorkspace sized for A (m x n) and b's scalar field
        A, b, **options: As for crls()

    Returns:
        CRLSStats for this solve

    Raises:
        DimensionError: If the workspace was sized for another shape
        DTypeError: If the workspace was allocated for another scalar field
        WorkspaceBusyError: If the workspace already has a solve in flight
        ValidationError: As for crls()
    """
    options = CRLSOptions.from_kwargs(
        lam=lam, atol=atol, rtol=rtol, radius=radius, itmax=itmax,
        verbose=verbose, history=history, precond_mode=precond_mode,
        callback=callback,
    )
    design = LeastSquaresDesign.build(A, b, M=M, precond_mode=options.precond_mode)
    workspace.check_compatible(design)
    return _run(design, workspace, options)


def _run(
    design: LeastSquaresDesign,
    workspace: CRLSWorkspace,
    options: CRLSOptions,
) -> CRLSStats:
    """Resolve defaults, run the backend and wrap its result."""
    resolved = options.resolve(design.m, design.n, design.dtype)
    result = CPUCRLSBackend().solve(design, workspace, resolved)
    return CRLSStats(_result=result)
