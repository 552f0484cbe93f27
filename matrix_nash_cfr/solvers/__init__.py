"""
Solver algorithms layer (Layer 4).

This layer implements fictitious play, CFR and CFR+ on matrix games.
It may import from: matrix_nash_cfr.games, matrix_nash_cfr.matrix, matrix_nash_cfr.engine
"""

from matrix_nash_cfr.solvers.algorithms import Algorithm, parse_algorithm
from matrix_nash_cfr.solvers.matrix_game import MatrixGameSolver, create

__all__ = ['Algorithm', 'parse_algorithm', 'MatrixGameSolver', 'create']
