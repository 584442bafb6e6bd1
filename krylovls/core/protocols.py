"""
Core protocols for krylovls.

These define structural interfaces shared by the solver family. CRLS is
one implementation; sibling Krylov solvers (MINRES-QLP and friends) plug
into the same contract: a design built from (A, b), a reusable workspace,
and a backend that turns both into a Result.

We use Protocol (structural typing) rather than ABC (nominal typing) so
that operators from SciPy or user code qualify without subclassing.
"""

from typing import Protocol, TypeVar, Any, runtime_checkable

# Type variables for generic payloads
P = TypeVar('P')  # Parameter payload type
D = TypeVar('D')  # Design type
W = TypeVar('W')  # Workspace type
Opt = TypeVar('Opt')  # Options type


@runtime_checkable
class LinearOperatorLike(Protocol):
    """
    Minimal protocol for a matrix-free operator A (m x n).

    scipy.sparse.linalg.LinearOperator satisfies it, as does any object
    exposing these members. Dense arrays and SciPy sparse matrices are
    accepted by the adapters too, without satisfying this protocol.
    """

    @property
    def shape(self) -> tuple[int, int]:
        """(m, n): rows and columns."""
        ...

    @property
    def dtype(self) -> Any:
        """Scalar field of the operator."""
        ...

    def matvec(self, v: Any) -> Any:
        """A v for a vector v of length n."""
        ...

    def rmatvec(self, v: Any) -> Any:
        """Aᴴ v for a vector v of length m."""
        ...


@runtime_checkable
class KrylovBackend(Protocol[D, W, Opt, P]):
    """
    Protocol for solver backends.

    A backend runs one solver iteration to completion on a validated
    design, writing iterates into the workspace and returning a Result
    whose payload carries the solver statistics.

    Backends hold no per-solve state; everything mutable lives in the
    workspace, which makes a backend safe to reuse across solves.

    Type Parameters:
        D: Design type (validated operator and right-hand side)
        W: Workspace type (preallocated iteration vectors)
        Opt: Options type (tolerances, budgets, callbacks)
        P: Parameter payload type of the Result
    """

    @property
    def name(self) -> str:
        """
        Backend identifier.

        Convention: '{device}_{algorithm}'
        Examples: 'cpu_crls', 'cpu_minres_qlp'
        """
        ...

    def solve(self, design: D, workspace: W, options: Opt) -> 'Result[P]':
        """
        Run the solver.

        Args:
            design: Validated problem
            workspace: Workspace sized for the design, not in use elsewhere
            options: Resolved options

        Returns:
            Result envelope containing the statistics payload

        Raises:
            WorkspaceBusyError: If the workspace already has a solve in flight
        """
        ...
