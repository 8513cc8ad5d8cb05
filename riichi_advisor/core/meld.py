"""Meld (副露) data structures for Chi/Pon/Kan."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .tile import Tile, make_tiles_from_string


class MeldType(Enum):
    CHI = "chi"           # 吃
    PON = "pon"           # 碰
    ANKAN = "ankan"       # 暗杠
    DAIMINKAN = "daiminkan"  # 大明杠
    SHOUMINKAN = "shouminkan"  # 加杠 (小明杠)


_MELD_SIZES = {
    MeldType.CHI: 3,
    MeldType.PON: 3,
    MeldType.ANKAN: 4,
    MeldType.DAIMINKAN: 4,
    MeldType.SHOUMINKAN: 4,
}


@dataclass(frozen=True)
class Meld:
    """A frozen meld (副露).

    Attributes:
        meld_type: Type of meld
        tiles: All tiles in the meld, red fives kept distinct
        called_tile: The tile that was called (None for ankan)
        from_player: Absolute seat the tile was called from (None for ankan)
    """
    meld_type: MeldType
    tiles: tuple  # tuple of Tile
    called_tile: Optional[Tile] = None
    from_player: Optional[int] = None

    def __post_init__(self):
        if len(self.tiles) != _MELD_SIZES[self.meld_type]:
            raise ValueError(
                f"{self.meld_type.value} needs {_MELD_SIZES[self.meld_type]} tiles, "
                f"got {len(self.tiles)}")
        kinds = sorted(t.index34 for t in self.tiles)
        if self.meld_type == MeldType.CHI:
            first = kinds[0]
            if first >= 27 or first % 9 > 6 or kinds != [first, first + 1, first + 2]:
                raise ValueError(f"not a sequence: {self.tiles}")
        elif len(set(kinds)) != 1:
            raise ValueError(f"not a set of identical tiles: {self.tiles}")

    @classmethod
    def from_string(cls, meld_type: MeldType, s: str,
                    from_player: Optional[int] = None) -> 'Meld':
        """Build a meld from shorthand, the first tile being the called one."""
        tiles = make_tiles_from_string(s)
        called = None if meld_type == MeldType.ANKAN else tiles[0]
        return cls(meld_type, tuple(tiles), called, from_player)

    @property
    def is_open(self) -> bool:
        return self.meld_type != MeldType.ANKAN

    @property
    def is_kan(self) -> bool:
        return self.meld_type in (MeldType.ANKAN, MeldType.DAIMINKAN, MeldType.SHOUMINKAN)

    @property
    def is_minkan(self) -> bool:
        return self.meld_type in (MeldType.DAIMINKAN, MeldType.SHOUMINKAN)

    @property
    def tile_index34(self) -> int:
        """34 index of the meld's primary tile (lowest tile for chi)."""
        return min(t.index34 for t in self.tiles)

    def aka_count(self) -> int:
        return sum(1 for t in self.tiles if t.is_aka)
