"""
Random matrix games.

Entries are drawn i.i.d. from Uniform(-1, 1) in row-major order, so two
generators seeded alike produce identical tables.
"""

import numpy as np

from .base import PayoffTable


PAYOFF_LOW = -1.0
PAYOFF_HIGH = 1.0


def random_payoff_table(size: int, rng: np.random.Generator) -> PayoffTable:
    """
    Generate a random size x size zero-sum game.

    Args:
        size: Number of actions per player (>= 1)
        rng: Seeded random source, advanced by size * size draws

    Returns:
        PayoffTable with entries in [-1, 1)
    """
    if size < 1:
        raise ValueError(f"Matrix size must be >= 1, got {size}")

    entries = rng.uniform(PAYOFF_LOW, PAYOFF_HIGH, size=(size, size))
    return PayoffTable(entries)
