"""
Shared compute infrastructure for PyDecomp.

This module provides timing utilities, precision constants, convergence
parameters and tolerance tiers shared by every decomposition kernel.

IMPORTANT: This is NOT where the numerical kernels live. Those go in
decomposition/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    precision: Machine epsilon and scalar helpers
    convergence: Deflation tolerance and iteration budget
    tolerances: Tolerance tiers for verifying results
"""

from pydecomp.core.compute.convergence import ConvergenceCriteria
from pydecomp.core.compute.precision import (
    EPSILON_32,
    EPSILON_64,
    default_epsilon,
    machine_epsilon,
)
from pydecomp.core.compute.timing import Timer
from pydecomp.core.compute.tolerances import ToleranceTier, select_tolerance

__all__ = [
    # Convergence
    "ConvergenceCriteria",
    # Precision
    "EPSILON_32",
    "EPSILON_64",
    "default_epsilon",
    "machine_epsilon",
    # Timing
    "Timer",
    # Tolerances
    "ToleranceTier",
    "select_tolerance",
]
