"""
Tolerance tiers for numerical validation.

Defines how closely a solver result is expected to match a dense
reference solution (numpy.linalg.lstsq / normal equations) for each
scalar field:
- double precision (float64, complex128)
- single precision (float32, complex64)

Used by the test suite when comparing iterative and direct solutions.
"""

from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Double precision with default sqrt(eps) stopping tolerances
FP64 = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='fp64',
    description='double precision, agrees with dense lstsq to ~sqrt(eps)',
)

# Double precision, ill-conditioned operators (cond(A) > 1e4)
FP64_ILL_CONDITIONED = ToleranceTier(
    rtol=1e-3,
    atol=1e-5,
    name='fp64_ill_conditioned',
    description='double precision, ill-conditioned (cond > 1e4)',
)

# Single precision
FP32 = ToleranceTier(
    rtol=1e-2,
    atol=1e-3,
    name='fp32',
    description='single precision, recurred residuals drift quickly',
)


def select_tolerance(
    dtype: np.dtype | type,
    is_ill_conditioned: bool = False,
) -> ToleranceTier:
    """Select the tolerance tier for a scalar field."""
    if np.finfo(dtype).bits <= 32:
        return FP32
    if is_ill_conditioned:
        return FP64_ILL_CONDITIONED
    return FP64
