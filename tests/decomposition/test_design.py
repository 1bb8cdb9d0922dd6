"""
Tests for MatrixDesign, the validated input boundary.
"""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from pydecomp.core.exceptions import DimensionError, ValidationError
from pydecomp.decomposition import MatrixDesign


class TestMatrixDesignBuild:

    def test_basic(self, random_matrix):
        a = random_matrix(4, 3)
        design = MatrixDesign.build(a)
        assert design.shape == (4, 3)
        assert design.n_rows == 4
        assert design.n_cols == 3
        assert design.min_dim == 3
        assert design.dtype == np.float64
        assert not design.is_complex

    def test_owns_a_copy(self, random_matrix):
        a = random_matrix(3, 3)
        design = MatrixDesign.build(a)
        a[0, 0] = 1e6
        assert design.working_copy()[0, 0] != 1e6

    def test_working_copies_are_independent(self, random_matrix):
        design = MatrixDesign.build(random_matrix(3, 3))
        first = design.working_copy()
        first[:] = 0
        assert np.any(design.working_copy() != 0)

    def test_adjoint_copy(self, random_matrix):
        a = random_matrix(2, 3, dtype=np.complex128)
        design = MatrixDesign.build(a)
        assert design.is_complex
        assert_array_equal(design.adjoint_copy(), a.conj().T)

    def test_integer_promoted(self):
        assert MatrixDesign.build([[1, 2], [3, 4]]).dtype == np.float64

    def test_complex64_preserved(self):
        design = MatrixDesign.build(np.eye(2, dtype=np.complex64))
        assert design.dtype == np.complex64

    def test_empty_allowed(self):
        design = MatrixDesign.build(np.empty((0, 4)))
        assert design.shape == (0, 4)
        assert design.min_dim == 0

    def test_rejects_vector(self):
        with pytest.raises(DimensionError):
            MatrixDesign.build([1.0, 2.0])

    def test_square_required(self):
        with pytest.raises(DimensionError, match="square"):
            MatrixDesign.build(np.ones((2, 3)), square=True)

    def test_real_required(self):
        with pytest.raises(ValidationError, match="complex"):
            MatrixDesign.build(np.eye(2, dtype=complex), real=True)

    def test_rejects_inf(self):
        with pytest.raises(ValidationError, match="Inf"):
            MatrixDesign.build([[np.inf, 0.0], [0.0, 1.0]])

    def test_name_in_message(self):
        with pytest.raises(DimensionError, match="weights"):
            MatrixDesign.build(np.ones(3), name='weights')

    def test_frozen(self, random_matrix):
        design = MatrixDesign.build(random_matrix(2, 2))
        with pytest.raises(FrozenInstanceError):
            design._n_rows = 5


class TestMatrixDesignDiagnostics:

    def test_max_diagonal_imag(self):
        a = np.diag([1.0 + 0.25j, 2.0 - 0.5j])
        assert MatrixDesign.build(a).max_diagonal_imag() == 0.5

    def test_max_diagonal_imag_real_input(self, random_matrix):
        assert MatrixDesign.build(random_matrix(3, 3)).max_diagonal_imag() == 0.0

    def test_diagonal_imag_tolerance(self):
        a = np.diag([4.0 + 0.0j, 1.0 - 3.0j])
        expected = 2 * np.finfo(np.float64).eps * np.hypot(1.0, 3.0)
        assert MatrixDesign.build(a).diagonal_imag_tolerance() == pytest.approx(expected)

    def test_diagonal_imag_tolerance_empty(self):
        assert MatrixDesign.build(np.empty((0, 0))).diagonal_imag_tolerance() == 0.0

    def test_metadata(self):
        meta = MatrixDesign.build(np.eye(3, 2, dtype=np.float32)).metadata()
        assert meta == {'shape': (3, 2), 'dtype': 'float32'}
