"""
Tests for the Schur decomposition (Francis double-shift QR).

Validates:
    - A = Q·T·Qᴴ with unitary Q for real and complex input
    - Quasi-triangular T for real input, triangular T for complex input
    - Eigenvalues against numpy.linalg.eigvals
    - Iteration budget: max_niter=1 exhausts, max_niter=0 is unbounded
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from pydecomp.core.exceptions import DimensionError, ValidationError
from pydecomp.decomposition import Schur, schur, try_schur


def _assert_quasi_triangular(t):
    assert_array_equal(np.tril(t, -2), 0)
    sub = np.diag(t, -1)
    # 2x2 blocks never touch
    assert not np.any((sub[:-1] != 0) & (sub[1:] != 0))


# ═══════════════════════════════════════════════════════════════════════
# Unbounded iteration
# ═══════════════════════════════════════════════════════════════════════


class TestSchur:

    @pytest.mark.parametrize("n", [1, 2, 3, 6, 10])
    def test_real_reconstruction(self, random_matrix, n):
        a = random_matrix(n, n)
        result = schur(a)
        assert isinstance(result, Schur)
        q, t = result.unpack()
        assert_allclose(q @ t @ q.T, a, rtol=1e-10, atol=1e-10)
        assert_allclose(q.T @ q, np.eye(n), atol=1e-12)
        _assert_quasi_triangular(t)

    @pytest.mark.parametrize("n", [2, 5, 8])
    def test_complex_is_triangular(self, random_matrix, n):
        a = random_matrix(n, n, dtype=np.complex128)
        result = schur(a)
        q, t = result.unpack()
        assert_array_equal(np.tril(t, -1), 0)
        assert_allclose(q @ t @ q.conj().T, a, rtol=1e-10, atol=1e-10)
        assert_allclose(q.conj().T @ q, np.eye(n), atol=1e-12)

    def test_eigenvalues_match_numpy(self, random_matrix):
        a = random_matrix(8, 8)
        got = np.sort_complex(schur(a).complex_eigenvalues())
        expected = np.sort_complex(np.linalg.eigvals(a))
        assert_allclose(got, expected, atol=1e-9)

    def test_complex_eigenvalues_match_numpy(self, random_matrix):
        a = random_matrix(6, 6, dtype=np.complex128)
        result = schur(a)
        got = np.sort_complex(result.eigenvalues())
        expected = np.sort_complex(np.linalg.eigvals(a))
        assert_allclose(got, expected, atol=1e-9)

    def test_rotation_keeps_2x2_block(self):
        a = np.array([[0.0, -1.0], [1.0, 0.0]])
        result = schur(a)
        assert result.eigenvalues() is None
        got = np.sort_complex(result.complex_eigenvalues())
        assert_allclose(got, [-1j, 1j], atol=1e-14)
        assert_allclose(result.recompose(), a, atol=1e-14)

    def test_real_2x2_is_split(self):
        a = np.array([[1.0, 2.0], [3.0, 4.0]])
        result = schur(a)
        t = result.t()
        assert t[1, 0] == 0
        assert result.info['iterations'] == 0
        assert_allclose(np.sort(result.eigenvalues()), np.sort(np.linalg.eigvals(a).real), atol=1e-12)
        assert_allclose(result.recompose(), a, atol=1e-13)

    def test_symmetric_has_real_eigenvalues(self, hermitian_matrix):
        a = hermitian_matrix(6)
        values = schur(a).eigenvalues()
        assert values is not None
        assert_allclose(np.sort(values), np.linalg.eigvalsh(a), atol=1e-10)

    def test_triangular_input_needs_no_iterations(self, random_matrix):
        a = np.triu(random_matrix(5, 5))
        result = schur(a)
        assert result.iterations == 0
        assert_allclose(np.sort(result.eigenvalues()), np.sort(np.diag(a)))

    def test_float32(self, random_matrix):
        a = random_matrix(5, 5, dtype=np.float32)
        result = schur(a)
        assert result.t().dtype == np.float32
        assert_allclose(result.recompose(), a, rtol=1e-4, atol=1e-4)

    def test_info(self, random_matrix):
        result = schur(random_matrix(4, 4))
        assert result.method == 'francis_qr'
        assert result.info['max_niter'] == 0
        assert result.info['eps'] == np.finfo(np.float64).eps
        assert result.info['iterations'] == result.iterations
        assert {'hessenberg', 'francis_iterations'} <= set(result.timing)

    def test_rejects_rectangular(self):
        with pytest.raises(DimensionError):
            schur(np.ones((2, 3)))

    def test_empty(self):
        result = schur(np.empty((0, 0)))
        assert result.t().shape == (0, 0)
        assert result.complex_eigenvalues().shape == (0,)


# ═══════════════════════════════════════════════════════════════════════
# Budgeted iteration
# ═══════════════════════════════════════════════════════════════════════


class TestTrySchur:

    def test_budget_of_one_is_exhausted(self, random_matrix):
        assert try_schur(random_matrix(6, 6), 1e-12, 1) is None

    def test_zero_budget_is_unbounded(self, random_matrix):
        a = random_matrix(6, 6)
        result = try_schur(a, 1e-12, 0)
        assert result is not None
        assert_allclose(result.recompose(), a, rtol=1e-10, atol=1e-10)

    def test_generous_budget(self, random_matrix):
        a = random_matrix(6, 6)
        result = try_schur(a, np.finfo(np.float64).eps, 500)
        assert result is not None
        assert result.iterations <= 500
        assert result.info['max_niter'] == 500

    def test_budget_of_one_suffices_for_2x2(self):
        assert try_schur([[1.0, 2.0], [3.0, 4.0]], 1e-12, 1) is not None

    def test_invalid_eps_raises(self, random_matrix):
        with pytest.raises(ValidationError):
            try_schur(random_matrix(3, 3), -1.0, 10)

    def test_invalid_budget_raises(self, random_matrix):
        with pytest.raises(ValidationError):
            try_schur(random_matrix(3, 3), 1e-12, -1)

    def test_shape_error_raises(self):
        with pytest.raises(DimensionError):
            try_schur(np.ones((3, 2)), 1e-12, 10)
