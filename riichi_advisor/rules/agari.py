"""Winning shape (和了形) checks on the concealed 34-array.

Melds are left to the caller: a concealed part of 3n+2 tiles is complete
when it splits into n mentsu and one pair, or (closed 14 tiles only) into
seven pairs or thirteen orphans.
"""

from typing import Iterator, List, Sequence, Tuple

from riichi_advisor.core.tile import YAOCHU_INDICES

# ('koutsu' | 'shuntsu', lowest 34 index)
Mentsu = Tuple[str, int]
# (pair 34 index, mentsu of the concealed part)
Decomposition = Tuple[int, List[Mentsu]]

_YAOCHU = frozenset(YAOCHU_INDICES)


def _splits(counts: List[int], pos: int) -> Iterator[List[Mentsu]]:
    """Every way to cut ``counts`` entirely into mentsu, lowest tile first."""
    while pos < 34 and counts[pos] == 0:
        pos += 1
    if pos == 34:
        yield []
        return

    if counts[pos] >= 3:
        counts[pos] -= 3
        for rest in _splits(counts, pos):
            yield [('koutsu', pos)] + rest
        counts[pos] += 3

    if pos < 27 and pos % 9 < 7 and counts[pos + 1] and counts[pos + 2]:
        for i in (pos, pos + 1, pos + 2):
            counts[i] -= 1
        for rest in _splits(counts, pos):
            yield [('shuntsu', pos)] + rest
        for i in (pos, pos + 1, pos + 2):
            counts[i] += 1


def decompose_standard(tiles_34: Sequence[int]) -> List[Decomposition]:
    """All readings of a 3n+2 concealed part as mentsu plus one pair."""
    if sum(tiles_34) % 3 != 2:
        return []

    readings = []
    for pair in range(34):
        if tiles_34[pair] < 2:
            continue
        counts = list(tiles_34)
        counts[pair] -= 2
        readings.extend((pair, mentsu) for mentsu in _splits(counts, 0))
    return readings


def is_chiitoi_agari(tiles_34: Sequence[int]) -> bool:
    """Seven distinct pairs (七対子); four of a kind is not two pairs."""
    return sum(tiles_34) == 14 and all(c in (0, 2) for c in tiles_34)


def is_kokushi_agari(tiles_34: Sequence[int]) -> bool:
    """Every terminal and honor, one of them doubled (国士無双)."""
    if sum(tiles_34) != 14:
        return False
    return (all(tiles_34[i] for i in _YAOCHU)
            and not any(c for i, c in enumerate(tiles_34) if i not in _YAOCHU))


def is_agari(tiles_34: Sequence[int]) -> bool:
    """Whether the concealed part is a winning shape of any form."""
    return (is_chiitoi_agari(tiles_34)
            or is_kokushi_agari(tiles_34)
            or bool(decompose_standard(tiles_34)))


def get_waiting_tiles(tiles_34: Sequence[int]) -> List[int]:
    """Kinds that complete a 3n+1 concealed part.

    Kinds already held four times cannot be drawn and are skipped.
    """
    if sum(tiles_34) % 3 != 1:
        return []

    waits = []
    test = list(tiles_34)
    for kind in range(34):
        if test[kind] >= 4:
            continue
        test[kind] += 1
        if is_agari(test):
            waits.append(kind)
        test[kind] -= 1
    return waits
