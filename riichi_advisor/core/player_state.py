"""Frozen per-player snapshot at one decision point."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

from .meld import Meld, MeldType
from .tile import Tile


class Wind(IntEnum):
    EAST = 0    # 東
    SOUTH = 1   # 南
    WEST = 2    # 西
    NORTH = 3   # 北

    @property
    def kanji(self) -> str:
        return ['東', '南', '西', '北'][self.value]

    @property
    def index34(self) -> int:
        """34 encoding index for this wind tile."""
        return 27 + self.value


def _bools(n: int) -> Tuple[bool, ...]:
    return (False,) * n


def _ints(n: int) -> Tuple[int, ...]:
    return (0,) * n


@dataclass(frozen=True)
class LastCans:
    """Legal actions at the current decision point."""
    can_discard: bool = False
    can_ron_agari: bool = False
    can_tsumo_agari: bool = False
    can_ryukyoku: bool = False
    target_actor: int = 0  # Absolute seat whose discard can be ronned

    def can_agari(self) -> bool:
        return self.can_ron_agari or self.can_tsumo_agari


@dataclass(frozen=True)
class PlayerState:
    """Everything one player knows at a decision point.

    Count and flag arrays are 34 wide, indexed by basic kind with red fives
    folded in; red five holdings are tracked by ``akas_in_hand`` and
    ``akas_seen`` (5m, 5p, 5s). Seat-indexed arrays (``scores``,
    ``riichi_declared``, ``riichi_accepted``, ``doras_owned``) are relative
    to this player, index 0 being self. ``oya`` is the dealer's relative
    seat.

    Snapshots are built by the turn engine (or ``build_player_state``) and
    never change afterwards.
    """
    player_id: int = 0

    # Hand
    tehai: Tuple[int, ...] = field(default_factory=lambda: _ints(34))
    akas_in_hand: Tuple[bool, ...] = field(default_factory=lambda: _bools(3))
    melds: Tuple[Meld, ...] = ()
    tehai_len_div3: int = 4

    # Shanten caches
    shanten: int = 8
    keep_shanten_discards: Tuple[bool, ...] = field(default_factory=lambda: _bools(34))
    next_shanten_discards: Tuple[bool, ...] = field(default_factory=lambda: _bools(34))
    has_next_shanten_discard: bool = False

    # Furiten / legality
    forbidden_tiles: Tuple[bool, ...] = field(default_factory=lambda: _bools(34))
    discarded_tiles: Tuple[bool, ...] = field(default_factory=lambda: _bools(34))
    waits: Tuple[bool, ...] = field(default_factory=lambda: _bools(34))
    at_furiten: bool = False

    # Riichi
    riichi_declared: Tuple[bool, ...] = field(default_factory=lambda: _bools(4))
    riichi_accepted: Tuple[bool, ...] = field(default_factory=lambda: _bools(4))
    is_w_riichi: bool = False
    at_ippatsu: bool = False
    can_w_riichi: bool = False

    # Draws and discards
    last_self_tsumo: Optional[Tile] = None
    last_kawa_tile: Optional[Tile] = None
    at_rinshan: bool = False
    chankan_chance: bool = False
    tiles_left: int = 70
    tiles_seen: Tuple[int, ...] = field(default_factory=lambda: _ints(34))
    akas_seen: Tuple[bool, ...] = field(default_factory=lambda: _bools(3))

    # Dora
    dora_indicators: Tuple[Tile, ...] = ()
    doras_owned: Tuple[int, ...] = field(default_factory=lambda: _ints(4))
    dora_factor: Tuple[int, ...] = field(default_factory=lambda: _ints(34))

    # Table
    bakaze: Wind = Wind.EAST
    jikaze: Wind = Wind.EAST
    kyoku: int = 0
    honba: int = 0
    kyotaku: int = 0
    oya: int = 0
    scores: Tuple[int, ...] = (25000, 25000, 25000, 25000)
    rank: int = 0
    is_all_last: bool = False

    last_cans: LastCans = field(default_factory=LastCans)

    @property
    def is_menzen(self) -> bool:
        """Whether hand is fully closed (門前)."""
        return all(not m.is_open for m in self.melds)

    @property
    def chis(self) -> List[int]:
        return [m.tile_index34 for m in self.melds if m.meld_type == MeldType.CHI]

    @property
    def pons(self) -> List[int]:
        return [m.tile_index34 for m in self.melds if m.meld_type == MeldType.PON]

    @property
    def minkans(self) -> List[int]:
        return [m.tile_index34 for m in self.melds if m.is_minkan]

    @property
    def ankans(self) -> List[int]:
        return [m.tile_index34 for m in self.melds if m.meld_type == MeldType.ANKAN]

    def rel(self, actor: int) -> int:
        """Absolute seat to seat relative to this player."""
        return (actor - self.player_id + 4) % 4

    def get_rank(self, scores: Sequence[int]) -> int:
        """Rank (0 = top) of this player under a relative score table.

        Equal scores are ordered by absolute seat, lower seat first.
        """
        rank = 0
        for rel_seat in range(1, 4):
            abs_seat = (self.player_id + rel_seat) % 4
            if scores[rel_seat] > scores[0] or (
                    scores[rel_seat] == scores[0] and abs_seat < self.player_id):
                rank += 1
        return rank

    def __repr__(self):
        return (f"PlayerState(seat={self.player_id}, {self.bakaze.kanji}{self.kyoku + 1}, "
                f"{self.jikaze.kanji}, shanten={self.shanten}, {self.scores[0]}点)")
