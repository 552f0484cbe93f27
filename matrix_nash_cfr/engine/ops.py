"""
Core operations on matrix games.

- Strategy derivation: average strategy (normalization) and current
  strategy (regret matching), both with a uniform fallback
- Action values: expected payoff of every own action against a fixed
  opponent strategy, A^(i) @ q
- Best response: value and first arg-max of the action values
- Instantaneous regret: action values minus the expected value under
  the acting player's strategy

All operations work on both NumPy and CuPy backends.
"""

import numpy as np
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from matrix_nash_cfr.engine.backend import Backend


def uniform_strategy(size: int, backend: 'Backend') -> np.ndarray:
    """
    Create uniform strategy (equal probability for all actions).

    Args:
        size: Number of actions
        backend: Backend

    Returns:
        strategy: Array of shape (size,)
    """
    return backend.full(size, 1.0 / size)


def normalize_strategy(strategy_sum: np.ndarray, backend: 'Backend') -> np.ndarray:
    """
    Convert cumulative strategy weights to the average strategy.

        if sum(strategy_sum) > 0:
            average = strategy_sum / sum(strategy_sum)
        else:
            average = uniform over actions

    Args:
        strategy_sum: Nonnegative array of shape (size,)
        backend: Backend

    Returns:
        average: Array of shape (size,) - valid probability distribution
    """
    total = float(backend.sum(strategy_sum))

    if total > 0:
        return strategy_sum / total
    return uniform_strategy(strategy_sum.shape[0], backend)


def regret_match(cumulative_regret: np.ndarray, backend: 'Backend') -> np.ndarray:
    """
    Convert cumulative regrets to strategy via regret matching.

        positive_regrets = max(0, regrets)
        if sum(positive_regrets) > 0:
            strategy = positive_regrets / sum(positive_regrets)
        else:
            strategy = uniform over actions

    Args:
        cumulative_regret: Array of shape (size,)
        backend: Backend

    Returns:
        strategy: Array of shape (size,) - valid probability distribution
    """
    positive_regrets = backend.maximum(cumulative_regret, 0.0)
    regret_sum = float(backend.sum(positive_regrets))

    if regret_sum > 0:
        return positive_regrets / regret_sum
    return uniform_strategy(cumulative_regret.shape[0], backend)


def compute_action_values(
    payoff_matrix: np.ndarray,
    opponent_strategy: np.ndarray,
    backend: 'Backend'
) -> np.ndarray:
    """
    Expected payoff of every own action against a fixed opponent strategy.

    values[a] = sum_b q[b] * A[a, b]

    These are the counterfactual action utilities of a matrix game (there is
    no chance or opponent reach to weight by).

    Args:
        payoff_matrix: Player's payoff matrix A, shape (size, size)
        opponent_strategy: Opponent distribution q, shape (size,)
        backend: Backend

    Returns:
        values: Array of shape (size,)
    """
    return backend.matvec(payoff_matrix, opponent_strategy)


def best_response(
    payoff_matrix: np.ndarray,
    opponent_strategy: np.ndarray,
    backend: 'Backend'
) -> Tuple[float, int]:
    """
    Best response against a fixed opponent strategy.

    Ties are broken towards the lowest action index.

    Returns:
        (value, action): max_a values[a] and the first a attaining it
    """
    values = compute_action_values(payoff_matrix, opponent_strategy, backend)
    action = backend.argmax(values)
    return float(values[action]), action


def compute_instant_regret(
    action_values: np.ndarray,
    strategy: np.ndarray,
    backend: 'Backend'
) -> Tuple[np.ndarray, float]:
    """
    Instantaneous regret of each action against the player's own strategy.

    regret[a] = values[a] - sum_a' strategy[a'] * values[a']

    Returns:
        (instant_regret, expected_value)
    """
    ev = backend.dot(strategy, action_values)
    return action_values - ev, ev


# =============================================================================
# Invariant checks for debugging
# =============================================================================

def check_regret_invariant(
    strategy: np.ndarray,
    instant_regret: np.ndarray,
    backend: 'Backend',
    tolerance: float = 1e-9
) -> None:
    """
    Check that the strategy-weighted instantaneous regret is zero.

    sum_a strategy[a] * regret[a] = 0 holds by construction; a violation
    means the regret was computed against a different strategy.

    Raises:
        AssertionError: If the invariant is violated
    """
    weighted = backend.dot(strategy, instant_regret)
    assert abs(weighted) <= tolerance, \
        f"Regret invariant violated: sum(sigma * r) = {weighted:.3e} (tolerance {tolerance:.0e})"


def check_distribution(
    strategy: np.ndarray,
    backend: 'Backend',
    tolerance: float = 1e-9
) -> None:
    """
    Check that a strategy is a valid probability distribution.

    Raises:
        AssertionError: If any entry is negative or the entries do not sum to 1
    """
    strategy_np = backend.asnumpy(strategy)
    assert np.all(strategy_np >= 0), f"Negative probability in strategy: {strategy_np}"
    total = float(np.sum(strategy_np))
    assert abs(total - 1.0) <= tolerance, f"Strategy sums to {total}, expected 1"
