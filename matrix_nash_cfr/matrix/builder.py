"""
Matrix builder for converting a payoff table to per-player payoff matrices.

Notation:
- A^(i): Payoff matrix of player i, shape (size, size)
  A^(i)[a, b] = payoff to player i for own action a against opponent action b
- A^(1) = T (the payoff table)
- A^(2) = -T^T (zero-sum, roles swapped)

With these, every per-player quantity is a matrix-vector product:
    action values of player i against opponent strategy q = A^(i) @ q
"""

import numpy as np
from typing import Tuple
from dataclasses import dataclass

from matrix_nash_cfr.games.base import PayoffTable, Player, as_player


@dataclass(frozen=True, eq=False)
class PayoffMatrices:
    """Player-oriented payoff matrices of a zero-sum matrix game."""

    # A[i]: (size, size), A[i][own, opp]
    A: Tuple[np.ndarray, np.ndarray]

    # Number of actions per player
    size: int

    def for_player(self, player) -> np.ndarray:
        """Payoff matrix of player (rows = own actions)."""
        return self.A[as_player(player)]


def build_player_matrix(table: PayoffTable, player: Player) -> np.ndarray:
    """
    Build the payoff matrix of one player.

    Args:
        table: Payoff table (player 1's view)
        player: Player to build the matrix for

    Returns:
        Read-only float64 array of shape (size, size)
    """
    if as_player(player) == Player.PLAYER_1:
        A = np.array(table.entries, dtype=np.float64)
    else:
        # Negation is exact, so A[1][x, y] == -entries[y, x] bit for bit
        A = np.ascontiguousarray(-table.entries.T, dtype=np.float64)

    A.setflags(write=False)
    return A


def build_payoff_matrices(table: PayoffTable) -> PayoffMatrices:
    """
    Build both players' payoff matrices from a payoff table.

    Args:
        table: PayoffTable

    Returns:
        PayoffMatrices with A[0] = T and A[1] = -T^T
    """
    return PayoffMatrices(
        A=(
            build_player_matrix(table, Player.PLAYER_1),
            build_player_matrix(table, Player.PLAYER_2),
        ),
        size=table.size,
    )


def validate_zero_sum(matrices: PayoffMatrices, tolerance: float = 0.0):
    """Validate A[0][a, b] + A[1][b, a] == 0 for all action pairs."""
    residual = matrices.A[0] + matrices.A[1].T
    assert np.all(np.abs(residual) <= tolerance), \
        f"Payoff matrices are not zero-sum: max residual {np.max(np.abs(residual))}"


def print_matrix_stats(matrices: PayoffMatrices):
    """Print statistics about the payoff matrices."""
    A0 = matrices.A[0]
    print(f"Payoff Matrix Statistics:")
    print(f"  Actions per player: {matrices.size}")
    print(f"  Entries: {A0.size}")
    print(f"  Min payoff: {A0.min():.6f}")
    print(f"  Max payoff: {A0.max():.6f}")
    print(f"  Mean payoff (P1): {A0.mean():.6f}")
    print(f"  Pure maximin (P1): {A0.min(axis=1).max():.6f}")
    print(f"  Pure minimax (P1): {A0.max(axis=0).min():.6f}")
