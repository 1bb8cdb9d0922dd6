"""
Tests for QR and column-pivoted QR.

Validates:
    - Reconstruction A = Q·R (and A·P = Q·R) for tall, wide, square,
      real and complex input
    - Orthonormal Q, exactly upper-triangular R
    - Solving, rank detection, pivot ordering
    - Input is never modified
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from pydecomp.core.compute import select_tolerance
from pydecomp.core.exceptions import DimensionError, ValidationError
from pydecomp.decomposition import QR, ColPivQR, col_piv_qr, qr

SHAPES = [(5, 5), (7, 4), (4, 7), (1, 3), (3, 1)]
DTYPES = [np.float64, np.complex128]


# ═══════════════════════════════════════════════════════════════════════
# Householder QR
# ═══════════════════════════════════════════════════════════════════════


class TestQR:

    @pytest.mark.parametrize("shape", SHAPES)
    @pytest.mark.parametrize("dtype", DTYPES)
    def test_reconstruction(self, random_matrix, shape, dtype):
        a = random_matrix(*shape, dtype=dtype)
        result = qr(a)
        assert isinstance(result, QR)
        q, r = result.unpack()
        k = min(shape)
        assert q.shape == (shape[0], k)
        assert r.shape == (k, shape[1])
        assert_allclose(q @ r, a, rtol=1e-10, atol=1e-12)
        assert_allclose(result.recompose(), a, rtol=1e-10, atol=1e-12)

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_orthonormal_q(self, random_matrix, dtype):
        q = qr(random_matrix(8, 5, dtype=dtype)).q()
        assert_allclose(q.conj().T @ q, np.eye(5), atol=1e-12)

    def test_r_exactly_upper_triangular(self, random_matrix):
        r = qr(random_matrix(6, 4)).r()
        assert_array_equal(np.tril(r, -1), 0)

    def test_float32(self, random_matrix):
        a = random_matrix(6, 4, dtype=np.float32)
        result = qr(a)
        tol = select_tolerance(np.float32)
        assert result.r().dtype == np.float32
        assert_allclose(result.recompose(), a, rtol=tol.rtol, atol=tol.atol)

    def test_integer_input_promoted(self):
        result = qr([[1, 2], [3, 4]])
        assert result.r().dtype == np.float64
        assert_allclose(result.recompose(), [[1.0, 2.0], [3.0, 4.0]], atol=1e-14)

    def test_input_not_modified(self, random_matrix):
        a = random_matrix(5, 3)
        original = a.copy()
        qr(a)
        assert_array_equal(a, original)

    def test_redecomposition_is_identical(self, random_matrix):
        a = random_matrix(5, 5)
        first, second = qr(a), qr(a)
        assert_array_equal(first.r(), second.r())
        assert_array_equal(first.q(), second.q())

    def test_empty(self):
        result = qr(np.empty((0, 3)))
        assert result.q().shape == (0, 0)
        assert result.r().shape == (0, 3)

    def test_q_tr_mul(self, random_matrix):
        a = random_matrix(6, 3)
        b = random_matrix(6, 2)
        result = qr(a)
        full = result.q_tr_mul(b)
        assert full.shape == (6, 2)
        assert_allclose(full[:3], result.q().T @ b, atol=1e-12)
        # Qᴴ is unitary on the full space
        assert_allclose(np.linalg.norm(full, axis=0), np.linalg.norm(b, axis=0))

    def test_q_tr_mul_rejects_row_mismatch(self, random_matrix):
        with pytest.raises(DimensionError):
            qr(random_matrix(6, 3)).q_tr_mul(np.ones(5))

    @pytest.mark.parametrize("dtype", DTYPES)
    def test_solve(self, random_matrix, dtype):
        a = random_matrix(5, 5, dtype=dtype)
        b = random_matrix(5, 1, dtype=dtype)[:, 0]
        x = qr(a).solve(b)
        assert_allclose(a @ x, b, atol=1e-10)

    def test_solve_singular_returns_none(self):
        a = np.array([[0.0, 1.0], [0.0, 2.0]])
        result = qr(a)
        assert not result.is_invertible()
        assert result.solve([1.0, 2.0]) is None

    def test_solve_rejects_rectangular(self, random_matrix):
        with pytest.raises(DimensionError):
            qr(random_matrix(4, 3)).solve(np.ones(4))

    def test_rejects_non_2d(self):
        with pytest.raises(DimensionError):
            qr(np.ones(3))

    def test_rejects_nan(self):
        with pytest.raises(ValidationError):
            qr([[1.0, np.nan], [0.0, 1.0]])

    def test_info(self, random_matrix):
        result = qr(random_matrix(4, 3))
        assert result.method == 'householder_qr'
        assert result.info['shape'] == (4, 3)
        assert result.info['dtype'] == 'float64'
        assert 'householder' in result.timing


# ═══════════════════════════════════════════════════════════════════════
# Column-pivoted QR
# ═══════════════════════════════════════════════════════════════════════


class TestColPivQR:

    @pytest.mark.parametrize("shape", SHAPES)
    @pytest.mark.parametrize("dtype", DTYPES)
    def test_reconstruction(self, random_matrix, shape, dtype):
        a = random_matrix(*shape, dtype=dtype)
        result = col_piv_qr(a)
        assert isinstance(result, ColPivQR)
        q, r, p = result.unpack()
        assert_allclose(q @ r, p.permute_columns(a), rtol=1e-10, atol=1e-12)
        assert_allclose(result.recompose(), a, rtol=1e-10, atol=1e-12)

    def test_permutation_matrix_form(self, random_matrix):
        a = random_matrix(5, 4)
        result = col_piv_qr(a)
        p = result.p().to_matrix(4).T
        assert_allclose(a @ p, result.q() @ result.r(), atol=1e-12)

    def test_diagonal_non_increasing(self, random_matrix):
        diag = np.abs(np.diag(col_piv_qr(random_matrix(8, 6)).r()))
        assert np.all(diag[:-1] >= diag[1:] - 1e-12)

    def test_first_pivot_is_largest_column(self):
        a = np.array([[1.0, 0.0, 3.0], [0.0, 1.0, 4.0]])
        result = col_piv_qr(a)
        assert list(result.p())[0] == (0, 2)
        assert abs(result.r()[0, 0]) == pytest.approx(5.0)

    def test_tie_goes_to_first_column(self):
        result = col_piv_qr(np.eye(3))
        assert len(result.p()) == 0

    def test_rank_of_deficient_matrix(self, random_matrix):
        a = random_matrix(6, 2) @ random_matrix(2, 5)
        result = col_piv_qr(a)
        assert result.rank(1e-10) == 2
        assert result.info['n_swaps'] == len(result.p())

    def test_rank_full(self, random_matrix):
        assert col_piv_qr(random_matrix(5, 5)).rank() == 5

    def test_rank_explicit_eps(self):
        a = np.diag([1.0, 1e-3, 1e-9])
        result = col_piv_qr(a)
        assert result.rank(1e-6) == 2
        assert result.rank(0.0) == 3

    def test_rank_zero_matrix(self):
        assert col_piv_qr(np.zeros((3, 3))).rank() == 0

    def test_solve(self, random_matrix):
        a = random_matrix(4, 4)
        b = random_matrix(4, 2)
        x = col_piv_qr(a).solve(b)
        assert_allclose(a @ x, b, atol=1e-10)

    def test_solve_singular_returns_none(self):
        assert col_piv_qr(np.zeros((2, 2))).solve(np.ones(2)) is None
