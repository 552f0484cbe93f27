"""
Drivers that run solvers to convergence.

- trace(): one (iteration, elapsed, exploitability) record per iteration
- run_to_convergence(): solve one random game
- run_many(): solve many independent random games and aggregate
  iteration counts

Each game in a batch gets its own generator spawned from one
SeedSequence, so results do not depend on the order games are solved in.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, NamedTuple, Optional

import numpy as np

from matrix_nash_cfr.solvers.algorithms import parse_algorithm
from matrix_nash_cfr.solvers.matrix_game import MatrixGameSolver

logger = logging.getLogger(__name__)


class TraceRecord(NamedTuple):
    iteration: int
    elapsed: float
    exploitability: float


@dataclass
class RunResult:
    """Outcome of solving one game."""
    iterations: int
    exploitability: float
    elapsed: float
    converged: bool


@dataclass
class BatchStats:
    """Iteration-count statistics over repeated solves."""
    iteration_counts: List[int] = field(default_factory=list)
    num_unconverged: int = 0

    @property
    def runs(self) -> int:
        return len(self.iteration_counts)

    @property
    def min(self) -> int:
        return min(self.iteration_counts)

    @property
    def max(self) -> int:
        return max(self.iteration_counts)

    @property
    def mean(self) -> float:
        return float(np.mean(self.iteration_counts))

    def summary(self) -> str:
        return f"min {self.min} | max {self.max} | avg {self.mean:.1f}"


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Generator seeded from seed, or from OS entropy when seed is None."""
    return np.random.default_rng(seed)


def trace(
    solver: MatrixGameSolver,
    algorithm,
    epsilon: float,
    max_iterations: Optional[int] = None,
    clock: Callable[[], float] = time.perf_counter
) -> Iterator[TraceRecord]:
    """
    Iterate solver, yielding a record after every iteration.

    Stops after the first record with exploitability <= epsilon, or once
    max_iterations total iterations have run.
    """
    algorithm = parse_algorithm(algorithm)
    start = clock()

    while True:
        solver.iteration(algorithm)
        exploitability = solver.exploitability()

        yield TraceRecord(solver.iteration_count, clock() - start, exploitability)

        if exploitability <= epsilon:
            return
        if max_iterations is not None and solver.iteration_count >= max_iterations:
            return


def run_to_convergence(
    algorithm,
    size: int,
    epsilon: float,
    rng: np.random.Generator,
    max_iterations: Optional[int] = None,
    backend: str = 'numpy'
) -> RunResult:
    """
    Solve one random size x size game.

    Args:
        algorithm: Algorithm to run
        size: Number of actions per player
        epsilon: Target exploitability
        rng: Random source for the payoff table
        max_iterations: Optional iteration cap
        backend: 'numpy' or 'cupy'

    Returns:
        RunResult of the final iteration
    """
    solver = MatrixGameSolver.random(size, rng, backend=backend)

    last = None
    for last in trace(solver, algorithm, epsilon, max_iterations):
        pass

    return RunResult(
        iterations=last.iteration,
        exploitability=last.exploitability,
        elapsed=last.elapsed,
        converged=last.exploitability <= epsilon,
    )


def run_many(
    runs: int,
    algorithm,
    size: int,
    epsilon: float,
    seed: Optional[int] = None,
    max_iterations: Optional[int] = None,
    backend: str = 'numpy',
    progress: Optional[Callable[[int, int], None]] = None
) -> BatchStats:
    """
    Solve runs independent random games and collect iteration counts.

    Args:
        runs: Number of games (>= 1)
        algorithm: Algorithm to run
        size: Number of actions per player
        epsilon: Target exploitability
        seed: Root seed (None = OS entropy)
        max_iterations: Optional iteration cap per game
        backend: 'numpy' or 'cupy'
        progress: Called as progress(i, runs) before game i (1-based)

    Returns:
        BatchStats over all games
    """
    if runs < 1:
        raise ValueError(f"runs must be >= 1, got {runs}")

    algorithm = parse_algorithm(algorithm)
    children = np.random.SeedSequence(seed).spawn(runs)
    stats = BatchStats()

    for i, child in enumerate(children):
        if progress is not None:
            progress(i + 1, runs)

        result = run_to_convergence(
            algorithm, size, epsilon, np.random.default_rng(child),
            max_iterations=max_iterations, backend=backend,
        )
        stats.iteration_counts.append(result.iterations)
        if not result.converged:
            stats.num_unconverged += 1

    logger.debug("%d %s runs: %s", runs, algorithm.display_name, stats.summary())
    return stats
