"""
Matrix representation layer (Layer 2).

This layer may only import from: matrix_nash_cfr.games
"""

from matrix_nash_cfr.matrix.builder import (
    PayoffMatrices,
    build_player_matrix,
    build_payoff_matrices,
    validate_zero_sum,
    print_matrix_stats,
)

__all__ = [
    'PayoffMatrices',
    'build_player_matrix',
    'build_payoff_matrices',
    'validate_zero_sum',
    'print_matrix_stats',
]
