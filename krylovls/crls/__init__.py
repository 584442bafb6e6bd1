"""
Conjugate residuals for linear least squares (CRLS).

Public API:
    crls(A, b, ...) -> (x, CRLSStats)
    crls_inplace(workspace, A, b, ...) -> CRLSStats

crls() allocates a workspace per call; crls_inplace() reuses one, which is
the cheaper option when many problems share an operator shape.

Example:
    >>> from krylovls.crls import crls, crls_inplace, CRLSWorkspace
    >>> x, stats = crls(A, b, history=True)
    >>> print(stats.summary())
    >>>
    >>> ws = CRLSWorkspace.for_problem(A, b)
    >>> for b_k in right_hand_sides:
    ...     stats = crls_inplace(ws, A, b_k)
    ...     use(ws.x)
"""

from krylovls.crls.design import LeastSquaresDesign
from krylovls.crls.options import CRLSOptions
from krylovls.crls.solution import CRLSParams, CRLSStats
from krylovls.crls.solvers import crls, crls_inplace
from krylovls.crls.workspace import CRLSWorkspace

__all__ = [
    "crls",
    "crls_inplace",
    "CRLSWorkspace",
    "CRLSStats",
    "CRLSParams",
    "CRLSOptions",
    "LeastSquaresDesign",
]
