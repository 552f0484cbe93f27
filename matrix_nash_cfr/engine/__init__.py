"""
Compute engine layer (Layer 3).

This layer provides GPU/CPU array operations for the solvers.
It may only import from: matrix_nash_cfr.games, matrix_nash_cfr.matrix
"""

from matrix_nash_cfr.engine.backend import (
    get_backend,
    is_cupy_available,
    Backend,
)

from matrix_nash_cfr.engine.ops import (
    uniform_strategy,
    normalize_strategy,
    regret_match,
    compute_action_values,
    best_response,
    compute_instant_regret,
    check_regret_invariant,
    check_distribution,
)

__all__ = [
    'get_backend',
    'is_cupy_available',
    'Backend',
    'uniform_strategy',
    'normalize_strategy',
    'regret_match',
    'compute_action_values',
    'best_response',
    'compute_instant_regret',
    'check_regret_invariant',
    'check_distribution',
]
