"""
Tests for the shared compute infrastructure.

Validates:
    - ConvergenceCriteria construction and budget semantics
    - Precision helpers (machine epsilon, phase, Frobenius norm)
    - Timer sections
    - Tolerance tier selection
"""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from pydecomp.core.compute import (
    EPSILON_32,
    EPSILON_64,
    ConvergenceCriteria,
    Timer,
    default_epsilon,
    machine_epsilon,
    select_tolerance,
)
from pydecomp.core.compute.precision import frobenius_norm, phase, real_dtype
from pydecomp.core.compute.tolerances import FP32, FP64, FP64_ILL_CONDITIONED
from pydecomp.core.exceptions import ValidationError


# ═══════════════════════════════════════════════════════════════════════
# ConvergenceCriteria
# ═══════════════════════════════════════════════════════════════════════


class TestConvergenceCriteria:

    def test_build_validates(self):
        criteria = ConvergenceCriteria.build(1e-10, 50)
        assert criteria.eps == 1e-10
        assert criteria.max_niter == 50
        assert criteria.is_bounded

    def test_build_rejects_negative_eps(self):
        with pytest.raises(ValidationError):
            ConvergenceCriteria.build(-1.0, 10)

    def test_build_rejects_negative_budget(self):
        with pytest.raises(ValidationError):
            ConvergenceCriteria.build(1e-10, -3)

    def test_unbounded_uses_machine_epsilon(self):
        criteria = ConvergenceCriteria.unbounded(np.complex64)
        assert criteria.eps == EPSILON_32
        assert criteria.max_niter == 0
        assert not criteria.is_bounded

    def test_exhausted_only_past_budget(self):
        criteria = ConvergenceCriteria.build(1e-10, 3)
        assert not criteria.exhausted(3)
        assert criteria.exhausted(4)

    def test_zero_budget_never_exhausted(self):
        criteria = ConvergenceCriteria.build(1e-10, 0)
        assert not criteria.is_bounded
        assert not criteria.exhausted(10**9)

    def test_frozen(self):
        criteria = ConvergenceCriteria.build(1e-10, 3)
        with pytest.raises(FrozenInstanceError):
            criteria.max_niter = 4


# ═══════════════════════════════════════════════════════════════════════
# Precision
# ═══════════════════════════════════════════════════════════════════════


class TestPrecision:

    def test_epsilon_constants(self):
        assert EPSILON_64 == np.finfo(np.float64).eps
        assert EPSILON_32 == np.finfo(np.float32).eps

    def test_complex_uses_real_epsilon(self):
        assert machine_epsilon(np.complex128) == EPSILON_64
        assert default_epsilon(np.float32) == EPSILON_32

    def test_real_dtype(self):
        assert real_dtype(np.complex64) == np.float32
        assert real_dtype(np.float64) == np.float64

    def test_phase_of_zero_is_one(self):
        assert phase(0.0) == 1.0
        assert phase(0j) == 1.0

    def test_phase_real_sign(self):
        assert phase(-3.0) == -1.0
        assert phase(2.5) == 1.0

    def test_phase_complex_unit_modulus(self):
        p = phase(3 + 4j)
        assert p == pytest.approx(0.6 + 0.8j)

    def test_frobenius_norm(self):
        assert frobenius_norm(np.array([[3.0, 0.0], [0.0, 4.0]])) == pytest.approx(5.0)
        assert frobenius_norm(np.empty((0, 4))) == 0.0


# ═══════════════════════════════════════════════════════════════════════
# Timing
# ═══════════════════════════════════════════════════════════════════════


class TestTimer:

    def test_sections_recorded(self):
        timer = Timer()
        timer.start()
        with timer.section('hessenberg'):
            pass
        with timer.section('francis_iterations'):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'hessenberg', 'francis_iterations'}
        assert result['total_seconds'] >= 0.0

    def test_section_recorded_on_error(self):
        timer = Timer()
        timer.start()
        with pytest.raises(ValueError):
            with timer.section('iterations'):
                raise ValueError("boom")
        timer.stop()
        assert 'iterations' in timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()


# ═══════════════════════════════════════════════════════════════════════
# Tolerance tiers
# ═══════════════════════════════════════════════════════════════════════


class TestToleranceTiers:

    def test_double_precision(self):
        assert select_tolerance(np.float64) is FP64
        assert select_tolerance(np.complex128) is FP64

    def test_single_precision(self):
        assert select_tolerance(np.float32) is FP32
        assert select_tolerance(np.complex64) is FP32

    def test_ill_conditioned(self):
        assert select_tolerance(np.float64, is_ill_conditioned=True) is FP64_ILL_CONDITIONED
