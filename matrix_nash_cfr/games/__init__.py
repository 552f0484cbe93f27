"""
Game definitions layer (Layer 1 - lowest).

This layer has no internal dependencies.
"""

from matrix_nash_cfr.games.base import Player, PayoffTable, as_player
from matrix_nash_cfr.games.random_matrix import random_payoff_table
from matrix_nash_cfr.games.classic import (
    matching_pennies,
    biased_matching_pennies,
    rock_paper_scissors,
)

__all__ = [
    'Player',
    'PayoffTable',
    'as_player',
    'random_payoff_table',
    'matching_pennies',
    'biased_matching_pennies',
    'rock_paper_scissors',
]
