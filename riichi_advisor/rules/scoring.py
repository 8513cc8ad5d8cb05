"""Score calculation - hand evaluation and han + fu to points."""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from riichi_advisor.core.meld import Meld
from riichi_advisor.core.player_state import Wind
from riichi_advisor.rules.agari import decompose_standard, is_chiitoi_agari, is_kokushi_agari
from riichi_advisor.rules.fu import calculate_fu
from riichi_advisor.rules.yaku import (
    YAKUMAN_HAN, HandContext, YakuResult, detect_all_yaku, total_han, yakuman_multiplier,
)


@dataclass(frozen=True)
class Point:
    """Payments of a winning hand, without honba and kyotaku.

    For a dealer win ``tsumo_ko`` is what each of the three others pays and
    ``tsumo_oya`` is 0. For a non-dealer win the dealer pays ``tsumo_oya``
    and each other non-dealer ``tsumo_ko``.
    """
    ron: int
    tsumo_oya: int
    tsumo_ko: int
    is_oya: bool
    han: int = 0
    fu: int = 0
    yakuman: int = 0

    @classmethod
    def from_han_fu(cls, han: int, fu: int, is_oya: bool) -> 'Point':
        base = _calculate_base_points(han, fu)
        return cls._from_base(base, is_oya, han=han, fu=fu,
                              yakuman=1 if han >= YAKUMAN_HAN else 0)

    @classmethod
    def from_yakuman(cls, is_oya: bool, multiplier: int) -> 'Point':
        return cls._from_base(8000 * multiplier, is_oya, yakuman=multiplier)

    @classmethod
    def _from_base(cls, base: int, is_oya: bool, **kwargs) -> 'Point':
        if is_oya:
            return cls(
                ron=_round_up_100(base * 6),
                tsumo_oya=0,
                tsumo_ko=_round_up_100(base * 2),
                is_oya=True,
                **kwargs,
            )
        return cls(
            ron=_round_up_100(base * 4),
            tsumo_oya=_round_up_100(base * 2),
            tsumo_ko=_round_up_100(base),
            is_oya=False,
            **kwargs,
        )

    @property
    def is_yakuman(self) -> bool:
        return self.yakuman > 0

    def tsumo_total(self, is_oya: bool) -> int:
        """Total collected on tsumo."""
        if is_oya:
            return self.tsumo_ko * 3
        return self.tsumo_oya + self.tsumo_ko * 2


def _calculate_base_points(han: int, fu: int) -> int:
    """Calculate base points from han and fu."""
    if han >= 13:
        return 8000  # Kazoe yakuman
    if han >= 11:
        return 6000  # Sanbaiman
    if han >= 8:
        return 4000  # Baiman
    if han >= 6:
        return 3000  # Haneman
    if han >= 5:
        return 2000  # Mangan

    base = fu * (2 ** (2 + han))
    return min(base, 2000)


def _round_up_100(points: int) -> int:
    return ((points + 99) // 100) * 100


@dataclass
class Agari:
    """Evaluated winning hand."""
    han: int
    fu: int
    yakuman: int = 0
    yaku: List[YakuResult] = field(default_factory=list)

    def point(self, is_oya: bool) -> Point:
        if self.yakuman > 0:
            return Point.from_yakuman(is_oya, self.yakuman)
        return Point.from_han_fu(self.han, self.fu, is_oya)


class AgariCalculator:
    """Evaluates a completed 3n+2 concealed part plus melds.

    Attributes:
        tehai: 34-length concealed counts, winning tile included
        is_menzen: No open melds
        melds: Called melds and concealed kans
        bakaze / jikaze: Round and seat wind
        winning_tile: 34 index of the winning tile
        is_ron: Win on a discard rather than a self-draw
    """

    def __init__(self, tehai: Sequence[int], is_menzen: bool, melds: Sequence[Meld],
                 bakaze: Wind, jikaze: Wind, winning_tile: int, is_ron: bool):
        self.tehai = list(tehai)
        self.is_menzen = is_menzen
        self.melds = list(melds)
        self.bakaze = bakaze
        self.jikaze = jikaze
        self.winning_tile = winning_tile
        self.is_ron = is_ron

    def _contexts(self) -> Iterator[HandContext]:
        all_tiles_34 = list(self.tehai)
        for meld in self.melds:
            for t in meld.tiles:
                all_tiles_34[t.index34] += 1

        def make(head, mentsu, is_chiitoi=False, is_kokushi=False):
            return HandContext(
                head_34=head,
                mentsu=mentsu,
                melds=self.melds,
                all_tiles_34=all_tiles_34,
                win_tile_34=self.winning_tile,
                is_tsumo=not self.is_ron,
                is_menzen=self.is_menzen,
                seat_wind_34=self.jikaze.index34,
                round_wind_34=self.bakaze.index34,
                is_chiitoi=is_chiitoi,
                is_kokushi=is_kokushi,
            )

        for head, mentsu_list in decompose_standard(self.tehai):
            yield make(head, mentsu_list)
        if not self.melds:
            if is_chiitoi_agari(self.tehai):
                yield make(-1, [], is_chiitoi=True)
            if is_kokushi_agari(self.tehai):
                yield make(-1, [], is_kokushi=True)

    def has_yaku(self) -> bool:
        """Whether any reading of the hand carries at least one yaku."""
        return any(detect_all_yaku(ctx) for ctx in self._contexts())

    def agari(self, additional_hans: int, doras: int) -> Optional[Agari]:
        """Best reading of the hand, or None when it is not a valid win.

        ``additional_hans`` are situational yaku and count as yaku;
        ``doras`` only add to a hand that already has one.
        """
        best = None
        best_key = None
        for ctx in self._contexts():
            yaku_list = detect_all_yaku(ctx)
            multiplier = yakuman_multiplier(yaku_list)
            if multiplier:
                result = Agari(han=0, fu=0, yakuman=multiplier, yaku=yaku_list)
            else:
                han = total_han(yaku_list) + additional_hans
                if han == 0:
                    continue
                is_pinfu = any(name == "平和" for name, _ in yaku_list)
                fu = calculate_fu(
                    ctx.head_34, ctx.mentsu, ctx.melds,
                    ctx.win_tile_34, ctx.is_tsumo, ctx.is_menzen,
                    ctx.seat_wind_34, ctx.round_wind_34,
                    is_pinfu, ctx.is_chiitoi,
                )
                result = Agari(han=han + doras, fu=fu, yaku=yaku_list)

            if result.yakuman:
                key = (result.yakuman * 8000, 0, 0)
            else:
                key = (_calculate_base_points(result.han, result.fu), result.han, result.fu)
            if best is None or key > best_key:
                best = result
                best_key = key
        return best
