"""
Trust-region step limiter.

Given a point x inside the ball ‖x‖ ≤ Δ and a direction d, computes the
step lengths σ at which x + σd crosses the sphere ‖x + σd‖ = Δ, i.e. the
roots of

    ‖d‖² σ² + 2 Re⟨x, d⟩ σ + (‖x‖² − Δ²) = 0.

Because ‖x‖ ≤ Δ the constant term is non-positive and both roots are
real; the larger one is the (non-negative) step to the boundary along d.
"""

import math
from typing import Any
from numpy.typing import NDArray

from krylovls.core.compute.kernels import dotr


def roots_quadratic(
    q2: float,
    q1: float,
    q0: float,
    nitref: int = 1,
) -> tuple[float, float]:
    """
    Real roots of q2·t² + q1·t + q0 = 0, smallest first.

    Uses the cancellation-free formulation and refines each root with
    `nitref` Newton steps. A slightly negative discriminant (rounding on a
    point that sits on the sphere) is treated as zero.

    Args:
        q2: Quadratic coefficient
        q1: Linear coefficient
        q0: Constant coefficient
        nitref: Number of Newton refinement steps per root

    Returns:
        (t1, t2) with t1 <= t2

    Raises:
        ValueError: If the equation is degenerate (q2 == q1 == 0)
    """
    if q2 == 0:
        if q1 == 0:
            raise ValueError("degenerate quadratic: q2 = q1 = 0")
        t = -q0 / q1
        return t, t

    if q0 == 0:
        t1, t2 = 0.0, -q1 / q2
        return (t1, t2) if t1 <= t2 else (t2, t1)

    disc = max(q1 * q1 - 4.0 * q2 * q0, 0.0)
    sqd = math.sqrt(disc)
    q = -0.5 * (q1 + math.copysign(sqd, q1))
    if q == 0:
        # q1 == 0 and disc == 0 only when q0 == 0, handled above
        t1 = t2 = 0.0
    else:
        t1 = q / q2
        t2 = q0 / q

    def refine(t: float) -> float:
        for _ in range(nitref):
            dq = 2.0 * q2 * t + q1
            if dq == 0:
                break
            t = t - (q2 * t * t + q1 * t + q0) / dq
        return t

    t1, t2 = refine(t1), refine(t2)
    return (t1, t2) if t1 <= t2 else (t2, t1)


def to_boundary(
    x: NDArray[Any],
    d: NDArray[Any],
    radius: float,
    *,
    x_norm2: float | None = None,
    d_norm2: float | None = None,
) -> tuple[float, float]:
    """
    Step lengths σ such that ‖x + σd‖ = radius.

    Args:
        x: Current point, assumed to satisfy ‖x‖ <= radius
        d: Search direction
        radius: Trust-region radius Δ > 0
        x_norm2: Precomputed ‖x‖², computed if None
        d_norm2: Precomputed ‖d‖², computed if None

    Returns:
        Both roots (σ1, σ2) with σ1 <= σ2. The larger is the step to the
        boundary; it is 0 when x is on the sphere and d points outward.

    Raises:
        ValueError: If radius <= 0 or d is the zero vector
    """
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")

    rxd = dotr(x, d)
    if d_norm2 is None:
        d_norm2 = dotr(d, d)
    if d_norm2 == 0:
        raise ValueError("to_boundary: zero direction")
    if x_norm2 is None:
        x_norm2 = dotr(x, x)

    return roots_quadratic(d_norm2, 2.0 * rxd, x_norm2 - radius * radius)
