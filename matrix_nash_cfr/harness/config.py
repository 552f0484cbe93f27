"""Run configuration for the command line harness."""

from dataclasses import dataclass, asdict
from typing import Optional

from matrix_nash_cfr.solvers.algorithms import Algorithm, parse_algorithm


# Bounds and defaults of the command line options
MIN_SIZE = 1
MAX_SIZE = 100000
MIN_EPSILON = 1e-12
MAX_EPSILON = 1.0
MAX_RUNS = 100000


@dataclass
class SolveConfig:
    """Configuration for solving random matrix games."""
    algorithm: Algorithm = Algorithm.CFR_PLUS
    size: int = 1000
    epsilon: float = 1e-4
    runs: int = 1
    seed: Optional[int] = None  # None = fresh OS entropy
    max_iterations: Optional[int] = None
    backend: str = 'numpy'

    def __post_init__(self):
        self.algorithm = parse_algorithm(self.algorithm)

    def validate(self) -> 'SolveConfig':
        """
        Check option bounds.

        Raises:
            ValueError: If any option is out of range
        """
        if not MIN_SIZE <= self.size <= MAX_SIZE:
            raise ValueError(f"size must be in [{MIN_SIZE}, {MAX_SIZE}], got {self.size}")
        if not MIN_EPSILON <= self.epsilon <= MAX_EPSILON:
            raise ValueError(f"epsilon must be in [{MIN_EPSILON}, {MAX_EPSILON}], got {self.epsilon}")
        if not 1 <= self.runs <= MAX_RUNS:
            raise ValueError(f"runs must be in [1, {MAX_RUNS}], got {self.runs}")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be >= 0, got {self.seed}")
        if self.max_iterations is not None and self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.backend not in ('numpy', 'cupy'):
            raise ValueError(f"Unknown backend: {self.backend}. Use 'numpy' or 'cupy'.")
        return self

    def to_dict(self) -> dict:
        d = asdict(self)
        d['algorithm'] = self.algorithm.display_name
        return d
