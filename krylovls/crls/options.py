"""
CRLS options.

Options arrive as keyword arguments of crls()/crls_inplace(), are
validated at that boundary and packed into a frozen CRLSOptions. Defaults
that depend on the problem (tolerances depend on the scalar field, the
iteration budget on the dimensions) are filled in by resolve().
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable
import numpy as np

from krylovls.core.compute.precision import default_tolerance
from krylovls.core.exceptions import ValidationError
from krylovls.core.operators import PrecondMode
from krylovls.core.validation import check_nonnegative, check_nonnegative_int


# callback(workspace) -> True requests an early exit
Callback = Callable[[Any], bool]


def _never_exit(workspace: Any) -> bool:
    return False


@dataclass(frozen=True)
class CRLSOptions:
    """
    Validated CRLS configuration.

    Attributes:
        lam: Ridge regularization weight λ >= 0
        atol: Absolute tolerance on ‖Aᴴr‖ (None: sqrt(eps) of the field)
        rtol: Relative tolerance on ‖Aᴴr‖ (None: sqrt(eps) of the field)
        radius: Trust-region radius, 0 disables the constraint
        itmax: Iteration budget, 0 means m + n
        verbose: Print a progress line every `verbose` iterations, 0 is silent
        history: Record ‖r‖ and ‖Aᴴr‖ at every iteration
        precond_mode: 'multiply' or 'solve' semantics for M
        callback: callback(workspace) -> bool, True stops the iteration
    """
    lam: float = 0.0
    atol: float | None = None
    rtol: float | None = None
    radius: float = 0.0
    itmax: int = 0
    verbose: int = 0
    history: bool = False
    precond_mode: PrecondMode = 'multiply'
    callback: Callback = _never_exit

    def __post_init__(self) -> None:
        check_nonnegative(self.lam, 'lam')
        if self.atol is not None:
            check_nonnegative(self.atol, 'atol')
        if self.rtol is not None:
            check_nonnegative(self.rtol, 'rtol')
        check_nonnegative(self.radius, 'radius')
        check_nonnegative_int(self.itmax, 'itmax')
        check_nonnegative_int(self.verbose, 'verbose')
        if self.precond_mode not in ('multiply', 'solve'):
            raise ValidationError(
                f"precond_mode: expected 'multiply' or 'solve', got {self.precond_mode!r}"
            )
        if not callable(self.callback):
            raise ValidationError(
                f"callback: expected a callable, got {type(self.callback).__name__}"
            )

    @classmethod
    def from_kwargs(
        cls,
        *,
        lam: float = 0.0,
        atol: float | None = None,
        rtol: float | None = None,
        radius: float = 0.0,
        itmax: int = 0,
        verbose: int = 0,
        history: bool = False,
        precond_mode: PrecondMode = 'multiply',
        callback: Callback | None = None,
    ) -> CRLSOptions:
        """Build options from public keyword arguments (None callback: never exit)."""
        return cls(
            lam=float(lam),
            atol=None if atol is None else float(atol),
            rtol=None if rtol is None else float(rtol),
            radius=float(radius),
            itmax=itmax,
            verbose=verbose,
            history=bool(history),
            precond_mode=precond_mode,
            callback=_never_exit if callback is None else callback,
        )

    def resolve(self, m: int, n: int, dtype: np.dtype) -> CRLSOptions:
        """
        Fill in problem-dependent defaults.

        Args:
            m: Rows of A
            n: Columns of A
            dtype: Scalar field of the solve

        Returns:
            Options with atol, rtol set and itmax > 0 (unless m + n == 0)
        """
        tol = default_tolerance(dtype)
        return replace(
            self,
            atol=tol if self.atol is None else self.atol,
            rtol=tol if self.rtol is None else self.rtol,
            itmax=m + n if self.itmax == 0 else self.itmax,
        )
