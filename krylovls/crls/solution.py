"""
CRLS solution types.

Contains the parameter payload produced by the backend and the
user-facing statistics wrapper returned by crls()/crls_inplace().
"""

from dataclasses import dataclass
from typing import Any

from krylovls.core.result import Result


@dataclass(frozen=True)
class CRLSParams:
    """
    Statistics payload for one CRLS solve.

    This is the immutable data computed by backends. Histories are tuples,
    so the workspace can be reused without touching a returned result.
    """
    niter: int
    solved: bool
    inconsistent: bool
    status: str
    residuals: tuple[float, ...]
    aresiduals: tuple[float, ...]


@dataclass
class CRLSStats:
    """
    User-facing CRLS statistics.

    Wraps the backend Result and exposes the iteration count, terminal
    flags, status and optional residual histories.
    """
    _result: Result[CRLSParams]

    @property
    def niter(self) -> int:
        return self._result.params.niter

    @property
    def solved(self) -> bool:
        return self._result.params.solved

    @property
    def inconsistent(self) -> bool:
        return self._result.params.inconsistent

    @property
    def status(self) -> str:
        return self._result.params.status

    @property
    def residuals(self) -> tuple[float, ...]:
        """‖r_k‖ (with λ‖x_k‖² folded in when regularized), if history was on."""
        return self._result.params.residuals

    @property
    def aresiduals(self) -> tuple[float, ...]:
        """‖Aᴴr_k‖, if history was on."""
        return self._result.params.aresiduals

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def result(self) -> Result[CRLSParams]:
        """The underlying Result envelope."""
        return self._result

    def summary(self) -> str:
        """Plain-text summary of the solve."""
        info = self.info
        lines = [
            "CRLS Statistics",
            "=" * 50,
            f"Status: {self.status}",
            f"Iterations: {self.niter}",
            f"Solved: {self.solved}",
            f"Inconsistent: {self.inconsistent}",
        ]
        if 'epsilon' in info:
            lines.append(f"Stopping threshold: {info['epsilon']:.3e}")
        if self.aresiduals:
            lines.append(
                f"‖Aᴴr‖: {self.aresiduals[0]:.3e} -> {self.aresiduals[-1]:.3e}"
            )
        if self.residuals:
            lines.append(f"‖r‖: {self.residuals[0]:.3e} -> {self.residuals[-1]:.3e}")
        lines.append("-" * 50)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"CRLSStats(niter={self.niter}, solved={self.solved}, "
            f"inconsistent={self.inconsistent}, status={self.status!r})"
        )
