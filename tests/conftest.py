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
def random_matrix(rng):
    """Factory for random real or complex matrices of a given shape."""
    def make(n_rows, n_cols, dtype=np.float64):
        a = rng.standard_normal((n_rows, n_cols))
        if np.issubdtype(dtype, np.complexfloating):
            a = a + 1j * rng.standard_normal((n_rows, n_cols))
        return a.astype(dtype)
    return make


@pytest.fixture
def hermitian_matrix(random_matrix):
    """Factory for random symmetric (Hermitian) matrices."""
    def make(n, dtype=np.float64):
        a = random_matrix(n, n, dtype)
        return ((a + a.conj().T) / 2).astype(dtype)
    return make


@pytest.fixture
def spd_matrix(random_matrix):
    """Factory for well-conditioned positive-definite matrices."""
    def make(n, dtype=np.float64):
        a = random_matrix(n, n, dtype)
        return (a @ a.conj().T + n * np.eye(n)).astype(dtype)
    return make

