"""
Command line entry point.

Usage:
    matrix-nash-cfr -a 2 -s 1000 -e 0.0001          # trace one game
    matrix-nash-cfr -a cfr -s 50 -e 0.001 -n 100     # iteration statistics
"""

import argparse
import logging
import sys
from typing import List, Optional

from matrix_nash_cfr.harness.config import (
    SolveConfig,
    MIN_SIZE,
    MAX_SIZE,
    MIN_EPSILON,
    MAX_EPSILON,
    MAX_RUNS,
)
from matrix_nash_cfr.harness.runner import make_rng, run_many, trace
from matrix_nash_cfr.matrix.builder import print_matrix_stats
from matrix_nash_cfr.solvers.algorithms import parse_algorithm
from matrix_nash_cfr.solvers.matrix_game import MatrixGameSolver


def _algorithm(value: str):
    try:
        return parse_algorithm(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _bounded(kind, low, high):
    def parse(value: str):
        try:
            number = kind(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid {kind.__name__} value: {value!r}")
        if not low <= number <= high:
            raise argparse.ArgumentTypeError(f"{value} not in [{low}, {high}]")
        return number
    return parse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matrix-nash-cfr",
        description="Approximate Nash equilibria of random zero-sum matrix games",
    )
    parser.add_argument("-a", "--algorithm", type=_algorithm, default="2",
                        help="Algorithm (0 = Fictitious play, 1 = CFR, 2 = CFR+)")
    parser.add_argument("-s", "--size", type=_bounded(int, MIN_SIZE, MAX_SIZE), default=1000,
                        help="Matrix size")
    parser.add_argument("-e", "--epsilon", type=_bounded(float, MIN_EPSILON, MAX_EPSILON), default=1e-4,
                        help="Target exploitability")
    parser.add_argument("-n", "--runs", type=_bounded(int, 1, MAX_RUNS), default=1,
                        help="Number of times to run")
    parser.add_argument("--seed", type=_bounded(int, 0, sys.maxsize), default=None,
                        help="Random seed (default: OS entropy)")
    parser.add_argument("--max-iterations", type=_bounded(int, 1, sys.maxsize), default=None,
                        help="Stop each run after this many iterations")
    parser.add_argument("--backend", choices=["numpy", "cupy"], default="numpy",
                        help="Array backend")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run_batch(config: SolveConfig) -> None:
    """Solve config.runs games and print iteration statistics."""
    def progress(i, n):
        print(f"\r{i}/{n}", end="", flush=True)

    stats = run_many(
        config.runs, config.algorithm, config.size, config.epsilon,
        seed=config.seed, max_iterations=config.max_iterations,
        backend=config.backend, progress=progress,
    )

    print(f"\r{stats.summary()}")
    if stats.num_unconverged:
        print(f"{stats.num_unconverged} run(s) hit the iteration limit before converging")


def run_single(config: SolveConfig, verbose: bool = False) -> None:
    """Solve one game, printing exploitability after every iteration."""
    print("init")
    solver = MatrixGameSolver.random(config.size, make_rng(config.seed), backend=config.backend)
    if verbose:
        print_matrix_stats(solver.matrices)

    print("start")
    for record in trace(solver, config.algorithm, config.epsilon, config.max_iterations):
        print(f"i={record.iteration} t={record.elapsed:.2f} e={record.exploitability:.6f}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s:%(name)s:%(message)s')

    config = SolveConfig(
        algorithm=args.algorithm,
        size=args.size,
        epsilon=args.epsilon,
        runs=args.runs,
        seed=args.seed,
        max_iterations=args.max_iterations,
        backend=args.backend,
    ).validate()

    print(f"Algorithm: {config.algorithm.display_name}")
    print(f"Matrix size: {config.size}")
    print(f"Epsilon: {config.epsilon:f}")
    print(f"N: {config.runs}")

    if config.runs > 1:
        run_batch(config)
    else:
        run_single(config, verbose=args.verbose)

    return 0


if __name__ == "__main__":
    sys.exit(main())
