"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def exact_4x2():
    """4 x 2 full-column-rank operator with an exactly solvable right-hand side."""
    A = np.array([
        [1.0, 0.0],
        [0.0, 2.0],
        [1.0, 1.0],
        [2.0, -1.0],
    ])
    x_true = np.array([1.0, -1.0])
    b = A @ x_true
    return A, b, x_true


@pytest.fixture
def tall_problem(rng):
    """Well-conditioned 30 x 10 least-squares problem with a nonzero residual."""
    m, n = 30, 10
    A = rng.standard_normal((m, n))
    b = rng.standard_normal(m)
    x_ls = np.linalg.lstsq(A, b, rcond=None)[0]
    return A, b, x_ls


@pytest.fixture
def orthogonal_problem(rng):
    """30 x 10 operator with singular values in [1, 2] and a consistent b."""
    m, n = 30, 10
    Q, _ = np.linalg.qr(rng.standard_normal((m, n)))
    A = Q * np.linspace(1.0, 2.0, n)
    x_true = rng.standard_normal(n)
    b = A @ x_true
    return A, b, x_true


@pytest.fixture
def rank_deficient_problem(rng):
    """20 x 6 operator whose last column duplicates the first (AᴴA singular)."""
    m = 20
    base = rng.standard_normal((m, 5))
    A = np.column_stack([base, base[:, 0]])
    b = rng.standard_normal(m)
    x_min_norm = np.linalg.pinv(A) @ b
    return A, b, x_min_norm
