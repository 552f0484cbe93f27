"""
Algorithm identifiers.

The three self-play algorithms form a closed set selected by a single
dispatch operation. Integer ids match the command line (-a 0|1|2).
"""

from enum import IntEnum
from typing import Union


class Algorithm(IntEnum):
    """Self-play algorithm used by MatrixGameSolver.iteration()."""
    FICTITIOUS_PLAY = 0
    CFR = 1
    CFR_PLUS = 2

    @property
    def display_name(self) -> str:
        return ALGORITHM_NAMES[self]


ALGORITHM_NAMES = {
    Algorithm.FICTITIOUS_PLAY: "Fictitious play",
    Algorithm.CFR: "CFR",
    Algorithm.CFR_PLUS: "CFR+",
}

# Accepted spellings for parse_algorithm(), lower-cased
_ALIASES = {
    'fp': Algorithm.FICTITIOUS_PLAY,
    'fictitious_play': Algorithm.FICTITIOUS_PLAY,
    'fictitious-play': Algorithm.FICTITIOUS_PLAY,
    'fictitious play': Algorithm.FICTITIOUS_PLAY,
    'cfr': Algorithm.CFR,
    'vanilla': Algorithm.CFR,
    'cfr+': Algorithm.CFR_PLUS,
    'cfr_plus': Algorithm.CFR_PLUS,
    'cfr-plus': Algorithm.CFR_PLUS,
    'cfrplus': Algorithm.CFR_PLUS,
}


def parse_algorithm(value: Union[int, str, Algorithm]) -> Algorithm:
    """
    Resolve an algorithm from a member, integer id, digit string or name.

    Raises:
        ValueError: If value names no known algorithm
    """
    if isinstance(value, Algorithm):
        return value

    if isinstance(value, str):
        key = value.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        if not key.isdigit():
            raise ValueError(
                f"Unknown algorithm: {value!r}. "
                f"Use 0/fp, 1/cfr or 2/cfr+."
            )
        value = int(key)

    try:
        return Algorithm(value)
    except ValueError:
        raise ValueError(
            f"Unknown algorithm id: {value}. "
            f"Use 0 (Fictitious play), 1 (CFR) or 2 (CFR+)."
        ) from None
