"""Furiten (振聴) detection.

Three types:
1. Discard furiten: A waiting tile is in your own discard pile
2. Temporary furiten: Someone discarded a winning tile this turn but you didn't ron
3. Riichi furiten: After riichi, someone discards a winning tile but you don't ron

Only the first one can be derived from a hand snapshot; the other two are
carried in by the turn engine as a flag.
"""

from typing import Iterable, Sequence, Set


def is_discard_furiten(waits: Sequence[bool], discarded_tiles: Sequence[bool]) -> bool:
    """Any waiting tile appears in the player's own discards.

    Such a hand cannot ron (but can still tsumo).
    """
    return any(w and d for w, d in zip(waits, discarded_tiles))


def is_missed_win_furiten(waiting_tiles_34: Iterable[int],
                          missed_tiles_34: Set[int]) -> bool:
    """Temporary or riichi furiten from passed-on winning tiles."""
    return any(w in missed_tiles_34 for w in waiting_tiles_34)
