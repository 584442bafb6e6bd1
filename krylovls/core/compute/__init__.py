"""
Shared compute infrastructure for krylovls.

IMPORTANT: This is NOT where solver iterations live. Those go in
{solver}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    kernels: In-place level-1 vector kernels (dot, norm, axpy, axpby)
    trust_region: Step-to-boundary computation for trust-region solvers
    precision: Supported scalar fields and default tolerances
    timing: Execution timing utilities
    tolerances: Tolerance tiers for comparing against dense references
"""

from krylovls.core.compute.kernels import axpby, axpy, dotr, nrm2
from krylovls.core.compute.precision import (
    SUPPORTED_DTYPES,
    default_tolerance,
    machine_epsilon,
    real_dtype,
)
from krylovls.core.compute.timing import Timer
from krylovls.core.compute.trust_region import roots_quadratic, to_boundary

__all__ = [
    # Kernels
    "axpby",
    "axpy",
    "dotr",
    "nrm2",
    # Precision
    "SUPPORTED_DTYPES",
    "default_tolerance",
    "machine_epsilon",
    "real_dtype",
    # Timing
    "Timer",
    # Trust region
    "roots_quadratic",
    "to_boundary",
]
