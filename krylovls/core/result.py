"""
Generic result container for all krylovls solvers.

The Result class is the envelope every solver backend returns. Solver
families define their own parameter payloads (CRLS returns iteration
statistics); the envelope carries what is common to all of them: metadata,
timing, warnings and provenance.

Design decisions:
    - Generic over parameter payload P
    - info dict for solver metadata (method, itmax, stopping threshold)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) so a returned result never changes under the
      caller when the workspace that produced it is reused
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Library versions that produced a result."""
    import numpy
    import scipy
    from krylovls import __version__

    return {
        'krylovls_version': __version__,
        'numpy_version': numpy.__version__,
        'scipy_version': scipy.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for solver runs.

    Type Parameters:
        P: The solver-specific payload type

    Attributes:
        params: Solver-specific payload (iteration statistics, histories)
        info: Structured metadata (method, stopping threshold, itmax)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during the solve
        provenance: Library versions used to compute the result

    Examples:
        >>> Result(
        ...     params=CRLSParams(niter=4, solved=True, ...),
        ...     info={'method': 'crls', 'itmax': 6, 'epsilon': 1.5e-8},
        ...     timing={'total_seconds': 0.001, 'iterations': 0.0008},
        ...     backend_name='cpu_crls',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)

    @property
    def total_seconds(self) -> float | None:
        """Wall-clock time of the whole solve, if it was measured."""
        if self.timing is None:
            return None
        return self.timing.get('total_seconds')
