"""
Per-solve diagnostics recording.

The recorder is owned by a solver workspace. It is reset at the start of
every solve and keeps the residual-norm histories only when the caller
asked for them.
"""

from __future__ import annotations

from dataclasses import dataclass

from krylovls.core.status import STATUS_UNKNOWN


@dataclass(frozen=True)
class DiagnosticsSnapshot:
    """Read-only copy of a recorder's state at one point of a solve."""
    niter: int
    solved: bool
    inconsistent: bool
    status: str
    residuals: tuple[float, ...]
    aresiduals: tuple[float, ...]


class DiagnosticsRecorder:
    """
    Iteration count, terminal flags and convergence histories of one solve.

    Attributes:
        niter: Completed iterations
        solved: Stopping test satisfied (tolerance, boundary or degeneracy)
        inconsistent: Problem proven to have no exact solution. Part of the
            shared solver contract; CRLS never sets it.
        status: Terminal status string from krylovls.core.status
        history: Whether residual norms are being recorded
    """

    def __init__(self) -> None:
        self.niter = 0
        self.solved = False
        self.inconsistent = False
        self.status = STATUS_UNKNOWN
        self.history = False
        self._residuals: list[float] = []
        self._aresiduals: list[float] = []

    def reset(self, history: bool) -> None:
        """Clear everything recorded by a previous solve."""
        self.niter = 0
        self.solved = False
        self.inconsistent = False
        self.status = STATUS_UNKNOWN
        self.history = history
        self._residuals.clear()
        self._aresiduals.clear()

    def record_residual(self, rnorm: float) -> None:
        if self.history:
            self._residuals.append(float(rnorm))

    def record_aresidual(self, arnorm: float) -> None:
        if self.history:
            self._aresiduals.append(float(arnorm))

    @property
    def residuals(self) -> tuple[float, ...]:
        """‖r_k‖ history (empty unless history was requested)."""
        return tuple(self._residuals)

    @property
    def aresiduals(self) -> tuple[float, ...]:
        """‖Aᴴr_k‖ history (empty unless history was requested)."""
        return tuple(self._aresiduals)

    def snapshot(self) -> DiagnosticsSnapshot:
        return DiagnosticsSnapshot(
            niter=self.niter,
            solved=self.solved,
            inconsistent=self.inconsistent,
            status=self.status,
            residuals=self.residuals,
            aresiduals=self.aresiduals,
        )

    def __repr__(self) -> str:
        return (
            f"DiagnosticsRecorder(niter={self.niter}, solved={self.solved}, "
            f"status={self.status!r})"
        )
