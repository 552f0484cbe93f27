"""
Self-play solver for two-player zero-sum matrix games.

One solver instance owns a payoff table, both players' accumulators and
the iteration counter. Each call to iteration() runs one step of the
selected algorithm:

    t += 1
    update player 1
    update player 2 (reading player 1's post-update state)

The average strategy profile converges to a Nash equilibrium; progress is
measured by exploitability().
"""

import logging
from typing import Optional, Literal, Union

import numpy as np

from matrix_nash_cfr.games.base import PayoffTable, Player, as_player
from matrix_nash_cfr.games.random_matrix import random_payoff_table
from matrix_nash_cfr.matrix.builder import build_payoff_matrices, validate_zero_sum
from matrix_nash_cfr.engine.backend import get_backend
from matrix_nash_cfr.engine.ops import (
    normalize_strategy,
    regret_match,
    best_response,
    check_distribution,
)
from matrix_nash_cfr.solvers.algorithms import Algorithm, parse_algorithm
from matrix_nash_cfr.solvers.updates import UPDATE_RULES

logger = logging.getLogger(__name__)


class MatrixGameSolver:
    """
    Fictitious play / CFR / CFR+ solver using matrix operations.

    Supports both CPU (NumPy) and GPU (CuPy) backends.
    """

    def __init__(
        self,
        table: PayoffTable,
        backend: Literal['numpy', 'cupy'] = 'numpy',
        check_invariants: bool = False
    ):
        """
        Initialize the solver.

        Args:
            table: Game to solve
            backend: 'numpy' for CPU or 'cupy' for GPU
            check_invariants: If True, verify the zero-sum payoffs once and the
                regret and distribution invariants every iteration (slower, for debugging)
        """
        self.table = table
        self.backend = get_backend(backend)
        self.check_invariants = check_invariants

        # Player-oriented payoff matrices, A[i][own, opp]
        self.matrices = build_payoff_matrices(table)
        if check_invariants:
            validate_zero_sum(self.matrices)
        self._A = tuple(self.backend.dense_to_backend(self.matrices.for_player(p)) for p in Player)

        # Initialize accumulators, one vector per player
        size = table.size
        self._strategy_sum = (self.backend.zeros(size), self.backend.zeros(size))
        self._cumulative_regret = (self.backend.zeros(size), self.backend.zeros(size))

        # Iteration counter
        self.iterations = 0

        logger.debug("Created %dx%d matrix game solver (backend=%s)", size, size, self.backend.name)

    @classmethod
    def random(
        cls,
        size: int,
        rng: np.random.Generator,
        backend: Literal['numpy', 'cupy'] = 'numpy',
        **kwargs
    ) -> 'MatrixGameSolver':
        """
        Create a solver for a random size x size game.

        Args:
            size: Number of actions per player (>= 1)
            rng: Random source for the payoff table
            backend: 'numpy' or 'cupy'

        Raises:
            ValueError: If size < 1
        """
        return cls(random_payoff_table(size, rng), backend=backend, **kwargs)

    @property
    def size(self) -> int:
        """Number of actions per player."""
        return self.table.size

    @property
    def iteration_count(self) -> int:
        return self.iterations

    # -------------------------------------------------------------------------
    # Iteration
    # -------------------------------------------------------------------------

    def iteration(self, algorithm: Union[Algorithm, int, str] = Algorithm.CFR_PLUS) -> None:
        """
        Run one iteration of algorithm for both players.

        Args:
            algorithm: Algorithm member, integer id (0, 1, 2) or name
        """
        update = UPDATE_RULES[parse_algorithm(algorithm)]

        self.iterations += 1
        t = self.iterations

        strategy_sum = self._strategy_sum
        regret = self._cumulative_regret

        # Player 1 first, then player 2 against player 1's updated state
        for player in Player:
            strategy_sum, regret = update(
                self._A, strategy_sum, regret, int(player), t, self.backend,
                check_invariants=self.check_invariants,
            )

        self._strategy_sum = strategy_sum
        self._cumulative_regret = regret

        if self.check_invariants:
            for player in Player:
                check_distribution(self._average_strategy(player), self.backend)
                check_distribution(self._current_strategy(player), self.backend)

    def iterate(self, algorithm: Union[Algorithm, int, str], num_iterations: int = 1) -> None:
        """
        Run several iterations of the same algorithm.

        Args:
            algorithm: Algorithm to run
            num_iterations: Number of iterations to run
        """
        algorithm = parse_algorithm(algorithm)
        for _ in range(num_iterations):
            self.iteration(algorithm)

    def fictitious_play(self) -> None:
        """Run one fictitious play iteration."""
        self.iteration(Algorithm.FICTITIOUS_PLAY)

    def cfr(self) -> None:
        """Run one vanilla CFR iteration."""
        self.iteration(Algorithm.CFR)

    def cfr_plus(self) -> None:
        """Run one CFR+ iteration."""
        self.iteration(Algorithm.CFR_PLUS)

    def solve(
        self,
        algorithm: Union[Algorithm, int, str] = Algorithm.CFR_PLUS,
        epsilon: float = 1e-4,
        max_iterations: Optional[int] = None
    ) -> float:
        """
        Iterate until exploitability <= epsilon.

        At least one iteration is always run.

        Args:
            algorithm: Algorithm to run
            epsilon: Target exploitability
            max_iterations: Stop after this many total iterations even if
                not converged (None = no limit)

        Returns:
            Exploitability after the last iteration
        """
        algorithm = parse_algorithm(algorithm)

        while True:
            self.iteration(algorithm)
            exploitability = self.exploitability()
            if exploitability <= epsilon:
                logger.debug(
                    "%s converged to %.3e after %d iterations",
                    algorithm.display_name, exploitability, self.iterations,
                )
                break
            if max_iterations is not None and self.iterations >= max_iterations:
                logger.debug(
                    "%s stopped at iteration limit %d (exploitability %.3e)",
                    algorithm.display_name, max_iterations, exploitability,
                )
                break

        return exploitability

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def _average_strategy(self, player: int):
        return normalize_strategy(self._strategy_sum[player], self.backend)

    def _current_strategy(self, player: int):
        return regret_match(self._cumulative_regret[player], self.backend)

    def average_strategy(self, player: Union[int, Player]) -> np.ndarray:
        """Get average strategy (converges to Nash equilibrium)."""
        return self.backend.asnumpy(self._average_strategy(as_player(player)))

    def current_strategy(self, player: Union[int, Player]) -> np.ndarray:
        """Get current strategy from regret matching."""
        return self.backend.asnumpy(self._current_strategy(as_player(player)))

    def strategy_sum(self, player: Union[int, Player]) -> np.ndarray:
        """Copy of the cumulative (unnormalized) strategy weights."""
        return np.array(self.backend.asnumpy(self._strategy_sum[as_player(player)]))

    def cumulative_regret(self, player: Union[int, Player]) -> np.ndarray:
        """Copy of the cumulative regrets."""
        return np.array(self.backend.asnumpy(self._cumulative_regret[as_player(player)]))

    def print_strategy(self, max_actions: int = 10) -> None:
        """Print the average strategy of both players."""
        print(f"\nAverage strategy after {self.iterations} iterations:")
        print("-" * 50)

        for player in Player:
            probs = self.average_strategy(player)
            shown = ', '.join(f"{a}={probs[a]:.3f}" for a in range(min(self.size, max_actions)))
            if self.size > max_actions:
                shown += f", ... ({self.size - max_actions} more)"
            print(f"P{player + 1}: {shown}")

    # -------------------------------------------------------------------------
    # Exploitability
    # -------------------------------------------------------------------------

    def best_response(
        self,
        player: Union[int, Player],
        opponent_strategy: Optional[np.ndarray] = None
    ):
        """
        Best response of player.

        Args:
            player: 0 or 1
            opponent_strategy: Opponent distribution to respond to
                (default: the opponent's average strategy)

        Returns:
            (value, action)
        """
        player = as_player(player)

        if opponent_strategy is None:
            q = self._average_strategy(player.opponent)
        else:
            q = self.backend.dense_to_backend(np.asarray(opponent_strategy, dtype=np.float64))

        return best_response(self._A[player], q, self.backend)

    def best_response_value(
        self,
        player: Union[int, Player],
        opponent_strategy: Optional[np.ndarray] = None
    ) -> float:
        """
        Expected value of player's best response.

        This is the value the player can guarantee by deviating against
        the opponent's fixed strategy.
        """
        value, _ = self.best_response(player, opponent_strategy)
        return value

    def exploitability(self) -> float:
        """
        Compute exploitability of the average strategy profile.

        (BR_1 + BR_2) / 2, i.e. NashConv / 2. Zero only at an exact
        equilibrium.
        """
        return (self.best_response_value(0) + self.best_response_value(1)) / 2


def create(
    size: int,
    rng: np.random.Generator,
    backend: Literal['numpy', 'cupy'] = 'numpy'
) -> MatrixGameSolver:
    """
    Create a solver for a random size x size zero-sum game.

    Raises:
        ValueError: If size < 1
    """
    return MatrixGameSolver.random(size, rng, backend=backend)
