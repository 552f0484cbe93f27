"""
Harness layer (Layer 5 - highest).

Configuration and drivers for running solvers to convergence.
It may import from any lower layer.
"""

from matrix_nash_cfr.harness.config import SolveConfig
from matrix_nash_cfr.harness.runner import (
    TraceRecord,
    RunResult,
    BatchStats,
    make_rng,
    trace,
    run_to_convergence,
    run_many,
)

__all__ = [
    'SolveConfig',
    'TraceRecord',
    'RunResult',
    'BatchStats',
    'make_rng',
    'trace',
    'run_to_convergence',
    'run_many',
]
