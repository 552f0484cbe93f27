"""
Hand-crafted matrix games with known equilibria.

Used as fixtures for convergence tests, the same way Kuhn poker is used
for extensive-form solvers:

- Matching pennies: unique equilibrium is uniform for both players, value 0
- Biased matching pennies: equilibrium (0.4, 0.6) for both players, value 0.1
- Rock-paper-scissors: unique equilibrium is uniform, value 0
"""

import numpy as np

from .base import PayoffTable


BIASED_MATCHING_PENNIES_VALUE = 0.1
BIASED_MATCHING_PENNIES_NASH = np.array([0.4, 0.6])


def matching_pennies() -> PayoffTable:
    """Player 1 wins on a match, player 2 wins on a mismatch."""
    return PayoffTable(np.array([
        [1.0, -1.0],
        [-1.0, 1.0],
    ]))


def biased_matching_pennies() -> PayoffTable:
    """
    Matching pennies where matching on heads pays double.

    Payoffs are scaled into [-1, 1]. Both players play heads with
    probability 0.4 at the unique equilibrium.
    """
    return PayoffTable(np.array([
        [1.0, -0.5],
        [-0.5, 0.5],
    ]))


def rock_paper_scissors() -> PayoffTable:
    """Actions ordered rock, paper, scissors."""
    return PayoffTable(np.array([
        [0.0, -1.0, 1.0],
        [1.0, 0.0, -1.0],
        [-1.0, 1.0, 0.0],
    ]))
