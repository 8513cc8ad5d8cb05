"""Tile definition with 37-id encoding (34 basic kinds + 3 red fives)."""

from enum import IntEnum
from typing import Iterable, List


class TileSuit(IntEnum):
    MAN = 0   # 万子
    PIN = 1   # 筒子
    SOU = 2   # 索子
    WIND = 3  # 风牌
    DRAGON = 4  # 三元牌


# Red five ids in the 37 encoding
RED_FIVE_MAN = 34    # 赤5m
RED_FIVE_PIN = 35    # 赤5p
RED_FIVE_SOU = 36    # 赤5s
RED_FIVE_IDS = (RED_FIVE_MAN, RED_FIVE_PIN, RED_FIVE_SOU)

# Basic five kinds, aligned with RED_FIVE_IDS / akas_in_hand
FIVE_MAN = 4
FIVE_PIN = 13
FIVE_SOU = 22
FIVE_INDICES = (FIVE_MAN, FIVE_PIN, FIVE_SOU)

# Yaochu (terminal + honor) tile indices in 34 encoding
YAOCHU_INDICES = [0, 8, 9, 17, 18, 26, 27, 28, 29, 30, 31, 32, 33]
HONOR_INDICES = list(range(27, 34))

TILE_NAMES_37 = [
    "1m", "2m", "3m", "4m", "5m", "6m", "7m", "8m", "9m",
    "1p", "2p", "3p", "4p", "5p", "6p", "7p", "8p", "9p",
    "1s", "2s", "3s", "4s", "5s", "6s", "7s", "8s", "9s",
    "東", "南", "西", "北", "白", "發", "中",
    "0m", "0p", "0s",
]

_HONOR_CHARS = {'東': 27, '南': 28, '西': 29, '北': 30, '白': 31, '發': 32, '中': 33}


class Tile:
    """Immutable tile identified by its 37 encoding id."""
    __slots__ = ('_id', '_index34', '_suit', '_number')

    def __init__(self, tile_id: int):
        if not (0 <= tile_id < 37):
            raise ValueError(f"tile_id must be 0..36, got {tile_id}")
        self._id = tile_id
        self._index34 = FIVE_INDICES[tile_id - 34] if tile_id >= 34 else tile_id
        if self._index34 < 27:
            self._suit = TileSuit(self._index34 // 9)
            self._number = self._index34 % 9 + 1
        elif self._index34 < 31:
            self._suit = TileSuit.WIND
            self._number = self._index34 - 27 + 1  # 1=東,2=南,3=西,4=北
        else:
            self._suit = TileSuit.DRAGON
            self._number = self._index34 - 31 + 1  # 1=白,2=發,3=中

    @property
    def id(self) -> int:
        return self._id

    @property
    def index34(self) -> int:
        return self._index34

    @property
    def suit(self) -> TileSuit:
        return self._suit

    @property
    def number(self) -> int:
        return self._number

    @property
    def is_aka(self) -> bool:
        return self._id >= 34

    @property
    def is_honor(self) -> bool:
        return self._suit in (TileSuit.WIND, TileSuit.DRAGON)

    @property
    def is_terminal(self) -> bool:
        return not self.is_honor and self._number in (1, 9)

    @property
    def is_yaochu(self) -> bool:
        return self.is_honor or self.is_terminal

    @property
    def name(self) -> str:
        return TILE_NAMES_37[self._id]

    def deaka(self) -> 'Tile':
        """The basic kind of this tile (red fives become black fives)."""
        return ALL_TILES[self._index34]

    def next(self) -> 'Tile':
        """The dora indicated by this tile."""
        return ALL_TILES[next_tile_index(self._index34)]

    def prev(self) -> 'Tile':
        """The indicator whose dora is this tile."""
        return ALL_TILES[prev_tile_index(self._index34)]

    def __repr__(self):
        return f"Tile({self.name})"

    def __eq__(self, other):
        if isinstance(other, Tile):
            return self._id == other._id
        return NotImplemented

    def __hash__(self):
        return self._id

    def __lt__(self, other):
        if isinstance(other, Tile):
            if self._index34 != other._index34:
                return self._index34 < other._index34
            return self._id < other._id
        return NotImplemented


ALL_TILES = [Tile(i) for i in range(37)]


def tiles_to_34_array(tiles: Iterable[Tile]) -> List[int]:
    """Convert tiles to a 34-length count array (red fives folded)."""
    arr = [0] * 34
    for t in tiles:
        arr[t.index34] += 1
    return arr


def next_tile_index(index34: int) -> int:
    """Get the 'next' tile index for dora indicator calculation.

    For number tiles: wraps 9->1
    For wind: 東→南→西→北→東
    For dragon: 白→發→中→白
    """
    if index34 < 27:
        base = index34 - index34 % 9
        return base + (index34 - base + 1) % 9
    elif index34 < 31:
        return 27 + (index34 - 27 + 1) % 4
    else:
        return 31 + (index34 - 31 + 1) % 3


def prev_tile_index(index34: int) -> int:
    """Inverse of next_tile_index."""
    if index34 < 27:
        base = index34 - index34 % 9
        return base + (index34 - base + 8) % 9
    elif index34 < 31:
        return 27 + (index34 - 27 + 3) % 4
    else:
        return 31 + (index34 - 31 + 2) % 3


def make_tiles_from_string(s: str) -> List[Tile]:
    """Parse a shorthand string like '123m0p456s東南' or '1122z' into tiles.

    '0m', '0p', '0s' are red fives; 'z' digits 1-7 are 東南西北白發中.
    """
    tiles = []
    numbers = []
    for ch in s:
        if ch.isdigit():
            numbers.append(int(ch))
        elif ch in ('m', 'p', 's'):
            suit = 'mps'.index(ch)
            for n in numbers:
                if n == 0:
                    tiles.append(ALL_TILES[RED_FIVE_IDS[suit]])
                else:
                    tiles.append(ALL_TILES[suit * 9 + n - 1])
            numbers = []
        elif ch == 'z':
            for n in numbers:
                if not 1 <= n <= 7:
                    raise ValueError(f"honor tile must be 1z..7z, got {n}z")
                tiles.append(ALL_TILES[26 + n])
            numbers = []
        elif ch in _HONOR_CHARS:
            tiles.append(ALL_TILES[_HONOR_CHARS[ch]])
        elif not ch.isspace():
            raise ValueError(f"unexpected character {ch!r} in tile string")
    if numbers:
        raise ValueError(f"dangling numbers without suit in {s!r}")
    return tiles


def tile_from_string(s: str) -> Tile:
    """Parse exactly one tile."""
    tiles = make_tiles_from_string(s)
    if len(tiles) != 1:
        raise ValueError(f"expected exactly one tile, got {s!r}")
    return tiles[0]
