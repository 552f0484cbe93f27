"""
Core game definitions for two-player zero-sum matrix games.

A game is described by a single square payoff table from player 1's
point of view. Player 2's payoffs are the negated table read with the
action indices swapped, so every algorithm can be written once and run
for either player.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union
import numpy as np


class Player(IntEnum):
    """Player identifiers."""
    PLAYER_1 = 0
    PLAYER_2 = 1

    @property
    def opponent(self) -> 'Player':
        return Player(self.value ^ 1)


def as_player(player: Union[int, Player]) -> Player:
    """
    Coerce an integer player index to a Player.

    Raises:
        ValueError: If player is not 0 or 1
    """
    try:
        return Player(int(player))
    except ValueError:
        raise ValueError(f"Invalid player: {player}. Use 0 or 1.") from None


@dataclass(frozen=True, eq=False)
class PayoffTable:
    """
    Immutable size x size payoff table of a zero-sum matrix game.

    entries[a, b] is player 1's payoff when player 1 plays action a and
    player 2 plays action b.
    """
    entries: np.ndarray

    def __post_init__(self):
        entries = np.array(self.entries, dtype=np.float64)

        if entries.ndim != 2 or entries.shape[0] != entries.shape[1]:
            raise ValueError(f"Payoff table must be square, got shape {entries.shape}")
        if entries.shape[0] < 1:
            raise ValueError("Payoff table must have at least one action")
        if not np.all(np.isfinite(entries)):
            raise ValueError("Payoff table contains NaN or Inf")

        entries.setflags(write=False)
        object.__setattr__(self, 'entries', entries)

    @property
    def size(self) -> int:
        """Number of actions per player."""
        return self.entries.shape[0]

    def payoff(self, player: Union[int, Player], own_action: int, opponent_action: int) -> float:
        """
        Payoff to player for playing own_action against opponent_action.

        Args:
            player: 0 or 1
            own_action: Action index of player
            opponent_action: Action index of the opponent

        Returns:
            entries[own, opp] for player 1, -entries[opp, own] for player 2
        """
        if as_player(player) == Player.PLAYER_1:
            return float(self.entries[own_action, opponent_action])
        return float(-self.entries[opponent_action, own_action])

    def __repr__(self) -> str:
        return f"PayoffTable(size={self.size})"
