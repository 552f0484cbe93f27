"""
Testing infrastructure.

This module provides exact LP reference solutions for validating the
iterative solvers. It may import from any layer (test-only code).
"""

from matrix_nash_cfr.testing.lp_reference import (
    solve_zero_sum_lp,
    exploitability_of,
    validate_against_lp,
)

__all__ = [
    'solve_zero_sum_lp',
    'exploitability_of',
    'validate_against_lp',
]
