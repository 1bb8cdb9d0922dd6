"""
Tests for the package-level API and the shared solution contract.
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

import pydecomp
from pydecomp.core import Factorization, Result


ENTRY_POINTS = [
    'qr', 'col_piv_qr', 'lu', 'full_piv_lu', 'cholesky', 'udu',
    'hessenberg', 'schur', 'try_schur', 'symmetric_tridiagonalize',
    'symmetric_eigen', 'try_symmetric_eigen', 'bidiagonalize', 'svd', 'try_svd',
]


def _all_decompositions(a):
    return [
        pydecomp.qr(a),
        pydecomp.col_piv_qr(a),
        pydecomp.lu(a),
        pydecomp.full_piv_lu(a),
        pydecomp.cholesky(a),
        pydecomp.udu(a),
        pydecomp.hessenberg(a),
        pydecomp.schur(a),
        pydecomp.symmetric_tridiagonalize(a),
        pydecomp.symmetric_eigen(a),
        pydecomp.bidiagonalize(a),
        pydecomp.svd(a),
    ]


@pytest.fixture
def spd(spd_matrix):
    return spd_matrix(4)


class TestPackageAPI:

    def test_version(self):
        assert pydecomp.__version__ == "0.1.0"

    @pytest.mark.parametrize("name", ENTRY_POINTS)
    def test_entry_points_exported(self, name):
        assert callable(getattr(pydecomp, name))
        assert name in pydecomp.__all__

    def test_every_solution_is_a_factorization(self, spd):
        for result in _all_decompositions(spd):
            assert isinstance(result, Factorization)
            assert isinstance(result.method, str)
            assert result.info['method'] == result.method
            assert result.timing['total_seconds'] >= 0.0

    def test_every_solution_recomposes(self, spd):
        for result in _all_decompositions(spd):
            np.testing.assert_allclose(result.recompose(), spd, rtol=1e-10, atol=1e-10)

    def test_input_never_modified(self, spd):
        original = spd.copy()
        _all_decompositions(spd)
        assert_array_equal(spd, original)

    def test_factors_are_copies(self, spd):
        result = pydecomp.cholesky(spd)
        l = result.l()
        l[:] = 0
        assert np.any(result.l() != 0)

    def test_result_envelope_is_frozen(self, spd):
        result = pydecomp.qr(spd)
        assert isinstance(result._result, Result)
        with pytest.raises(AttributeError):
            result._result.method = 'other'
