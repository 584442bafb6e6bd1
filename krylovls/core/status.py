"""
Terminal status strings shared by all krylovls solvers.

This module is the SINGLE SOURCE OF TRUTH for status strings.
Import from here, never use raw strings.

Usage:
    from krylovls.core.status import STATUS_SOLVED, STATUS_ON_BOUNDARY

    if stats.status == STATUS_ON_BOUNDARY:
        ...
"""

# Placeholder before a solve has decided anything
STATUS_UNKNOWN = 'unknown'

# b == 0, so x = 0 solves the problem exactly
STATUS_ZERO_RHS = 'x = 0 is a zero-residual solution'

# ‖Aᴴr‖ fell below atol + rtol * ‖Aᴴr₀‖
STATUS_SOLVED = 'solution good enough given atol and rtol'

# The normal-equations operator has no curvature along the search direction
STATUS_ZERO_CURVATURE = 'zero-curvature encountered'

# The step was clipped to the trust-region sphere
STATUS_ON_BOUNDARY = 'on trust-region boundary'

# Iteration budget exhausted
STATUS_MAX_ITER = 'maximum number of iterations exceeded'

# The per-iteration callback asked to stop
STATUS_USER_EXIT = 'user-requested exit'

# All terminal statuses as a frozenset for validation
ALL_STATUSES = frozenset({
    STATUS_ZERO_RHS,
    STATUS_SOLVED,
    STATUS_ZERO_CURVATURE,
    STATUS_ON_BOUNDARY,
    STATUS_MAX_ITER,
    STATUS_USER_EXIT,
})

__all__ = [
    'STATUS_UNKNOWN',
    'STATUS_ZERO_RHS',
    'STATUS_SOLVED',
    'STATUS_ZERO_CURVATURE',
    'STATUS_ON_BOUNDARY',
    'STATUS_MAX_ITER',
    'STATUS_USER_EXIT',
    'ALL_STATUSES',
]
