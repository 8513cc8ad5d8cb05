"""Shanten (向聴数) calculation.

Shanten = minimum number of tiles needed to reach tenpai (waiting to win).
-1 means already a complete hand (agari).
0 means tenpai (one tile away).

All functions take a 34-length count array of concealed tiles plus
``len_div3``, the number of mentsu the concealed part still has to form
(4 minus the number of melds).
"""

from functools import lru_cache
from typing import List, Sequence, Tuple

from riichi_advisor.core.tile import YAOCHU_INDICES


def calc_all(tehai: Sequence[int], len_div3: int) -> int:
    """Minimum shanten across all hand forms."""
    return _calc_all_cached(tuple(tehai), len_div3)


@lru_cache(maxsize=1 << 16)
def _calc_all_cached(tehai: Tuple[int, ...], len_div3: int) -> int:
    best = shanten_standard(list(tehai), len_div3)
    if len_div3 == 4:
        best = min(best, shanten_chiitoi(tehai), shanten_kokushi(tehai))
    return best


def shanten_standard(tiles_34: List[int], len_div3: int) -> int:
    """Shanten for standard form (mentsu + 1 jantai).

    Formula: shanten = (needed - mentsu) * 2 - 1 - partial
    where partial = taatsu (partial sequences) + pairs as head candidate.
    """
    best = len_div3 * 2

    # Try each tile as potential head
    for head in range(34):
        if tiles_34[head] >= 2:
            tiles_34[head] -= 2
            mentsu, partial = _count_mentsu_and_partial(tiles_34, len_div3)
            best = min(best, (len_div3 - mentsu) * 2 - 1 - partial)
            tiles_34[head] += 2

    # Also try without designating a head yet
    mentsu, partial = _count_mentsu_and_partial(tiles_34, len_div3)
    best = min(best, (len_div3 - mentsu) * 2 - partial)

    return max(best, -1)


def _count_mentsu_and_partial(tiles_34: List[int], max_mentsu: int) -> tuple:
    """Count mentsu and partial groups using backtracking.

    Returns (mentsu_count, partial_count) that minimizes shanten.
    """
    best = [0, 0]  # [mentsu, partial]
    _backtrack(list(tiles_34), 0, 0, 0, max_mentsu, best)
    return best[0], best[1]


def _backtrack(tiles: List[int], idx: int, mentsu: int, partial: int,
               max_mentsu: int, best: List[int]):
    """Backtrack to find optimal mentsu + partial decomposition."""
    while idx < 34 and tiles[idx] == 0:
        idx += 1

    if idx >= 34:
        # Mentsu found after a partial can fill the partial's slot
        partial = min(partial, max_mentsu - mentsu)
        if mentsu * 2 + partial > best[0] * 2 + best[1]:
            best[0] = mentsu
            best[1] = partial
        return

    # Cap: mentsu + partial <= max_mentsu
    can_add_mentsu = mentsu < max_mentsu
    can_add_partial = (mentsu + partial) < max_mentsu
    is_number = idx < 27

    # Koutsu (triplet)
    if tiles[idx] >= 3 and can_add_mentsu:
        tiles[idx] -= 3
        _backtrack(tiles, idx, mentsu + 1, partial, max_mentsu, best)
        tiles[idx] += 3

    # Shuntsu (sequence)
    if (is_number and idx % 9 <= 6 and can_add_mentsu
            and tiles[idx + 1] >= 1 and tiles[idx + 2] >= 1):
        tiles[idx] -= 1
        tiles[idx + 1] -= 1
        tiles[idx + 2] -= 1
        _backtrack(tiles, idx, mentsu + 1, partial, max_mentsu, best)
        tiles[idx] += 1
        tiles[idx + 1] += 1
        tiles[idx + 2] += 1

    if can_add_partial:
        # Pair
        if tiles[idx] >= 2:
            tiles[idx] -= 2
            _backtrack(tiles, idx, mentsu, partial + 1, max_mentsu, best)
            tiles[idx] += 2

        # Adjacent (12, 23)
        if is_number and idx % 9 <= 7 and tiles[idx + 1] >= 1:
            tiles[idx] -= 1
            tiles[idx + 1] -= 1
            _backtrack(tiles, idx, mentsu, partial + 1, max_mentsu, best)
            tiles[idx] += 1
            tiles[idx + 1] += 1

        # Gap (13, 24)
        if is_number and idx % 9 <= 6 and tiles[idx + 2] >= 1:
            tiles[idx] -= 1
            tiles[idx + 2] -= 1
            _backtrack(tiles, idx, mentsu, partial + 1, max_mentsu, best)
            tiles[idx] += 1
            tiles[idx + 2] += 1

    # Leave the remaining copies of this tile isolated
    saved = tiles[idx]
    tiles[idx] = 0
    _backtrack(tiles, idx + 1, mentsu, partial, max_mentsu, best)
    tiles[idx] = saved


def shanten_chiitoi(tiles_34: Sequence[int]) -> int:
    """Shanten for seven pairs (七対子). Closed 13/14 tile hands only."""
    pairs = sum(1 for c in tiles_34 if c >= 2)
    kinds = sum(1 for c in tiles_34 if c >= 1)

    s = 6 - pairs
    # Four of a kind cannot be two pairs
    if kinds < 7:
        s += 7 - kinds
    return s


def shanten_kokushi(tiles_34: Sequence[int]) -> int:
    """Shanten for thirteen orphans (国士無双). Closed 13/14 tile hands only."""
    types = sum(1 for idx in YAOCHU_INDICES if tiles_34[idx] >= 1)
    has_pair = any(tiles_34[idx] >= 2 for idx in YAOCHU_INDICES)
    return 13 - types - (1 if has_pair else 0)
