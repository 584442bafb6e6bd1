"""
Level-1 vector kernels used inside solver loops.

All update kernels write into their target array in place so that the
iteration loop works on preallocated workspace buffers. Inner products use
the conjugate-symmetric form (np.vdot conjugates its first argument), so
norms and ⟨v, v⟩ are real and non-negative for complex fields too.

axpy goes through the BLAS routine matching the array dtype
(saxpy/daxpy/caxpy/zaxpy via scipy.linalg.get_blas_funcs).
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import get_blas_funcs


def dotr(x: NDArray[Any], y: NDArray[Any]) -> float:
    """Real part of ⟨x, y⟩ = xᴴy."""
    return float(np.vdot(x, y).real)


def nrm2(x: NDArray[Any]) -> float:
    """Euclidean norm ‖x‖₂."""
    return float(np.linalg.norm(x))


def axpy(a: float, x: NDArray[Any], y: NDArray[Any]) -> None:
    """y ← a·x + y, in place."""
    blas_axpy = get_blas_funcs('axpy', (x, y))
    out = blas_axpy(x, y, a=a)
    # f2py hands back y itself unless it had to make a converted copy
    if out is not y:
        np.copyto(y, out)


def axpby(a: float, x: NDArray[Any], b: float, y: NDArray[Any]) -> None:
    """y ← a·x + b·y, in place."""
    np.multiply(y, b, out=y)
    if a == 1:
        np.add(y, x, out=y)
    else:
        axpy(a, x, y)
