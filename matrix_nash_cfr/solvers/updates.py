"""
Per-player update rules.

Each rule is a pure function

    (A, strategy_sums, regrets, player, t) -> (strategy_sums, regrets)

where A holds both players' payoff matrices, strategy_sums and regrets
are (player 1, player 2) pairs of accumulator vectors and t is the
iteration number (already incremented for the current iteration).
Inputs are never mutated; the returned pairs share the untouched arrays.

Reads happen at call time: when player 2 is updated after player 1 in the
same iteration, player 2 sees player 1's post-update accumulators.
"""

import numpy as np
from typing import Callable, Dict, Tuple, TYPE_CHECKING

from matrix_nash_cfr.engine.ops import (
    normalize_strategy,
    regret_match,
    compute_action_values,
    compute_instant_regret,
    best_response,
    check_regret_invariant,
)
from matrix_nash_cfr.solvers.algorithms import Algorithm

if TYPE_CHECKING:
    from matrix_nash_cfr.engine.backend import Backend

Pair = Tuple[np.ndarray, np.ndarray]
UpdateRule = Callable[..., Tuple[Pair, Pair]]


def _replace(pair: Pair, player: int, value: np.ndarray) -> Pair:
    """Return pair with the entry of player replaced."""
    if player == 0:
        return (value, pair[1])
    return (pair[0], value)


def fictitious_play_update(
    A: Pair,
    strategy_sums: Pair,
    regrets: Pair,
    player: int,
    t: int,
    backend: 'Backend',
    check_invariants: bool = False
) -> Tuple[Pair, Pair]:
    """
    Fictitious play: best respond to the opponent's empirical average.

    strategy_sum[player][a*] += 1, a* = first best response to the
    opponent's average strategy. Regrets are not used.
    """
    opponent = player ^ 1
    opponent_average = normalize_strategy(strategy_sums[opponent], backend)
    _, action = best_response(A[player], opponent_average, backend)

    new_sum = backend.copy(strategy_sums[player])
    new_sum[action] += 1.0

    return _replace(strategy_sums, player, new_sum), regrets


def _regret_step(
    A: Pair,
    regrets: Pair,
    player: int,
    backend: 'Backend',
    check_invariants: bool
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Current strategy and instantaneous regret of player.

    Returns:
        (sigma_player, instant_regret)
    """
    opponent = player ^ 1

    sigma_player = regret_match(regrets[player], backend)
    sigma_opponent = regret_match(regrets[opponent], backend)

    # Counterfactual utility of each action against the opponent's current strategy
    cf_values = compute_action_values(A[player], sigma_opponent, backend)
    instant_regret, _ = compute_instant_regret(cf_values, sigma_player, backend)

    if check_invariants:
        check_regret_invariant(sigma_player, instant_regret, backend)

    return sigma_player, instant_regret


def cfr_update(
    A: Pair,
    strategy_sums: Pair,
    regrets: Pair,
    player: int,
    t: int,
    backend: 'Backend',
    check_invariants: bool = False
) -> Tuple[Pair, Pair]:
    """
    Vanilla CFR.

    regret[a] += cfu[a] - ev        (unclamped, may go negative)
    strategy_sum[a] += sigma[a]     (uniform averaging)
    """
    sigma, instant_regret = _regret_step(A, regrets, player, backend, check_invariants)

    new_regret = regrets[player] + instant_regret
    new_sum = strategy_sums[player] + sigma

    return _replace(strategy_sums, player, new_sum), _replace(regrets, player, new_regret)


def cfr_plus_update(
    A: Pair,
    strategy_sums: Pair,
    regrets: Pair,
    player: int,
    t: int,
    backend: 'Backend',
    check_invariants: bool = False
) -> Tuple[Pair, Pair]:
    """
    CFR+.

    Differs from vanilla CFR in two places:
    1. Regret flooring: regret[a] = max(0, regret[a] + cfu[a] - ev)
    2. Quadratic weighting: strategy_sum[a] += sigma[a] * t^2
    """
    sigma, instant_regret = _regret_step(A, regrets, player, backend, check_invariants)

    new_regret = backend.maximum(regrets[player] + instant_regret, 0.0)
    new_sum = strategy_sums[player] + sigma * float(t * t)

    return _replace(strategy_sums, player, new_sum), _replace(regrets, player, new_regret)


UPDATE_RULES: Dict[Algorithm, UpdateRule] = {
    Algorithm.FICTITIOUS_PLAY: fictitious_play_update,
    Algorithm.CFR: cfr_update,
    Algorithm.CFR_PLUS: cfr_plus_update,
}
