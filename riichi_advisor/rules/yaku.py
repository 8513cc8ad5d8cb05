"""Hand-shape yaku (役) detection for Riichi Mahjong.

Each yaku function takes a HandContext and returns (yaku_name, han_value) or None.
Situational yaku (riichi, ippatsu, menzen tsumo, haitei/houtei, rinshan,
chankan, tenhou/chiihou) depend on the table rather than the tiles and are
added by the caller as extra han.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, Tuple

from riichi_advisor.core.tile import HONOR_INDICES, YAOCHU_INDICES
from riichi_advisor.core.meld import Meld, MeldType


YAKUMAN_HAN = 13

YAOCHU = frozenset(YAOCHU_INDICES)
HONORS = frozenset(HONOR_INDICES)
TERMINALS = YAOCHU - HONORS
WINDS = frozenset(range(27, 31))
DRAGONS = frozenset(range(31, 34))
# 2s 3s 4s 6s 8s 發
GREENS = frozenset((19, 20, 21, 23, 25, 32))
# 1112345678999 of one suit
_NINE_GATES = (3, 1, 1, 1, 1, 1, 1, 1, 3)


@dataclass
class HandContext:
    """All information needed to judge yaku for one decomposition."""
    # Decomposition of the concealed part
    head_34: int = -1
    mentsu: List[Tuple[str, int]] = field(default_factory=list)
    # Hand info
    melds: List[Meld] = field(default_factory=list)
    all_tiles_34: List[int] = field(default_factory=lambda: [0]*34)
    # Win info
    win_tile_34: int = -1
    is_tsumo: bool = False
    is_menzen: bool = True
    # Positional
    seat_wind_34: int = 27
    round_wind_34: int = 27
    # Form type
    is_chiitoi: bool = False
    is_kokushi: bool = False

    @property
    def is_special(self) -> bool:
        return self.is_chiitoi or self.is_kokushi

    @property
    def all_mentsu(self) -> List[Tuple[str, int]]:
        """Concealed mentsu followed by the called ones."""
        return list(self.mentsu) + [
            ('shuntsu' if m.meld_type == MeldType.CHI else 'koutsu', m.tile_index34)
            for m in self.melds
        ]

    def triplets(self) -> List[int]:
        """Kinds of every triplet and kan, called or not."""
        return [first for kind, first in self.all_mentsu if kind == 'koutsu']

    def runs(self) -> List[int]:
        """Lowest kind of every sequence, called or not."""
        return [first for kind, first in self.all_mentsu if kind == 'shuntsu']

    def kinds(self) -> Set[int]:
        return {i for i, c in enumerate(self.all_tiles_34) if c}

    def suits(self) -> Set[int]:
        return {i // 9 for i in self.kinds() if i < 27}

    def kan_count(self) -> int:
        return sum(1 for m in self.melds if m.is_kan)

    def concealed_koutsu_count(self) -> int:
        """Concealed triplets, a ron-completed triplet counting as open."""
        count = sum(1 for kind, _ in self.mentsu if kind == 'koutsu')
        count += sum(1 for m in self.melds if m.meld_type == MeldType.ANKAN)

        # On ron the tile is read into a sequence whenever one can take it
        win = self.win_tile_34
        if (not self.is_tsumo and ('koutsu', win) in self.mentsu
                and not any(kind == 'shuntsu' and 0 <= win - first <= 2
                            for kind, first in self.mentsu)):
            count -= 1
        return count


YakuResult = Tuple[str, int]  # (name, han)


def detect_all_yaku(ctx: HandContext) -> List[YakuResult]:
    """Detect all hand-shape yaku. Yakuman, when present, replace the rest."""
    return _check_yakuman(ctx) or _run_checks(ctx, _REGULAR_CHECKS)


def _check_yakuman(ctx: HandContext) -> List[YakuResult]:
    results = [("国士無双", YAKUMAN_HAN)] if ctx.is_kokushi else []
    return results + _run_checks(ctx, _YAKUMAN_CHECKS)


def _run_checks(ctx, checks) -> List[YakuResult]:
    return [r for r in (check(ctx) for check in checks) if r]


def yakuman_multiplier(yaku_list: List[YakuResult]) -> int:
    """Number of yakuman in a yakuman result list (0 for regular hands)."""
    return sum(1 for _, han in yaku_list if han >= YAKUMAN_HAN)


def total_han(yaku_list: List[YakuResult]) -> int:
    """Sum total han from yaku list."""
    return sum(han for _, han in yaku_list)


def _by_menzen(ctx: HandContext, name: str, closed: int) -> YakuResult:
    """Yaku losing one han once the hand is open."""
    return (name, closed if ctx.is_menzen else closed - 1)


# === 1翻 yaku ===

def check_tanyao(ctx: HandContext) -> Optional[YakuResult]:
    """All simples (断幺九) - no terminals or honors. Kuitan allowed."""
    if ctx.kinds() & YAOCHU:
        return None
    return ("断幺九", 1)


def check_pinfu(ctx: HandContext) -> Optional[YakuResult]:
    """Pinfu - all sequences, non-yakuhai head, ryanmen wait, menzen."""
    if not ctx.is_menzen or ctx.melds or ctx.is_special or ctx.triplets():
        return None
    if ctx.head_34 in DRAGONS or ctx.head_34 in (ctx.seat_wind_34, ctx.round_wind_34):
        return None

    win = ctx.win_tile_34
    # 12 waiting on 3 and 89 waiting on 7 are penchan
    for first in ctx.runs():
        if win == first and first % 9 != 6 or win == first + 2 and first % 9 != 0:
            return ("平和", 1)
    return None


def _peikou_count(ctx: HandContext) -> int:
    """Pairs of identical concealed sequences."""
    runs = Counter(first for kind, first in ctx.mentsu if kind == 'shuntsu')
    return sum(n // 2 for n in runs.values())


def check_iipeikou(ctx: HandContext) -> Optional[YakuResult]:
    """One set of identical sequences (一杯口). Menzen only."""
    if ctx.is_menzen and _peikou_count(ctx) == 1:
        return ("一杯口", 1)
    return None


def check_ryanpeikou(ctx: HandContext) -> Optional[YakuResult]:
    """Two sets of identical sequences (二杯口). Menzen only."""
    if ctx.is_menzen and _peikou_count(ctx) >= 2:
        return ("二杯口", 3)
    return None


def _yakuhai(name: str, kind_of: Callable[[HandContext], int]):
    def check(ctx: HandContext) -> Optional[YakuResult]:
        if kind_of(ctx) in ctx.triplets():
            return (name, 1)
        return None
    check.__doc__ = f"Triplet of a value tile ({name})."
    return check


check_yakuhai_seat_wind = _yakuhai("自風牌", lambda ctx: ctx.seat_wind_34)
check_yakuhai_round_wind = _yakuhai("場風牌", lambda ctx: ctx.round_wind_34)
check_yakuhai_haku = _yakuhai("役牌 白", lambda ctx: 31)
check_yakuhai_hatsu = _yakuhai("役牌 發", lambda ctx: 32)
check_yakuhai_chun = _yakuhai("役牌 中", lambda ctx: 33)


# === 2翻+ yaku ===

def _outside_hand(ctx: HandContext) -> Optional[Tuple[bool, bool]]:
    """(has honor, has sequence) when every group and the head touch a terminal or honor."""
    if ctx.is_special or ctx.head_34 not in YAOCHU:
        return None
    runs, triplets = ctx.runs(), ctx.triplets()
    if any(first % 9 not in (0, 6) for first in runs) or not YAOCHU.issuperset(triplets):
        return None
    has_honor = ctx.head_34 in HONORS or bool(HONORS.intersection(triplets))
    return has_honor, bool(runs)


def check_chanta(ctx: HandContext) -> Optional[YakuResult]:
    """Mixed outside hand (混全帯幺九). All groups contain terminal or honor."""
    # Without honors it is junchan, without sequences honroutou
    if _outside_hand(ctx) == (True, True):
        return _by_menzen(ctx, "混全帯幺九", 2)
    return None


def check_junchan(ctx: HandContext) -> Optional[YakuResult]:
    """Pure outside hand (純全帯幺九). All groups contain terminal, no honor."""
    if _outside_hand(ctx) == (False, True):
        return _by_menzen(ctx, "純全帯幺九", 3)
    return None


def check_ittsu(ctx: HandContext) -> Optional[YakuResult]:
    """Straight (一気通貫). 123+456+789 of one suit."""
    runs = set(ctx.runs())
    if any({s, s + 3, s + 6} <= runs for s in (0, 9, 18)):
        return _by_menzen(ctx, "一気通貫", 2)
    return None


def check_sanshoku_doujun(ctx: HandContext) -> Optional[YakuResult]:
    """Three-colored straight (三色同順). Same sequence in all 3 suits."""
    runs = set(ctx.runs())
    if any({n, n + 9, n + 18} <= runs for n in range(7)):
        return _by_menzen(ctx, "三色同順", 2)
    return None


def check_sanshoku_doukou(ctx: HandContext) -> Optional[YakuResult]:
    """Three-colored triplets (三色同刻). Same triplet in all 3 suits."""
    triplets = set(ctx.triplets())
    if any({n, n + 9, n + 18} <= triplets for n in range(9)):
        return ("三色同刻", 2)
    return None


def check_toitoi(ctx: HandContext) -> Optional[YakuResult]:
    """All triplets (対対和)."""
    if not ctx.is_special and len(ctx.triplets()) == 4:
        return ("対対和", 2)
    return None


def check_sanankou(ctx: HandContext) -> Optional[YakuResult]:
    """Three concealed triplets (三暗刻)."""
    if not ctx.is_special and ctx.concealed_koutsu_count() == 3:
        return ("三暗刻", 2)
    return None


def check_sankantsu(ctx: HandContext) -> Optional[YakuResult]:
    """Three kans (三槓子)."""
    if ctx.kan_count() == 3:
        return ("三槓子", 2)
    return None


def check_honroutou(ctx: HandContext) -> Optional[YakuResult]:
    """All terminals and honors (混老頭)."""
    kinds = ctx.kinds()
    if kinds <= YAOCHU and kinds & TERMINALS and kinds & HONORS:
        return ("混老頭", 2)
    return None


def _count_in(kinds, group) -> int:
    return sum(1 for k in kinds if k in group)


def check_shousangen(ctx: HandContext) -> Optional[YakuResult]:
    """Little three dragons (小三元). 2 dragon triplets + dragon pair."""
    if _count_in(ctx.triplets(), DRAGONS) == 2 and ctx.head_34 in DRAGONS:
        return ("小三元", 2)
    return None


def check_chiitoi(ctx: HandContext) -> Optional[YakuResult]:
    """Seven pairs (七対子)."""
    return ("七対子", 2) if ctx.is_chiitoi else None


def check_honitsu(ctx: HandContext) -> Optional[YakuResult]:
    """Half flush (混一色). One suit + honors."""
    if len(ctx.suits()) == 1 and ctx.kinds() & HONORS:
        return _by_menzen(ctx, "混一色", 3)
    return None


def check_chinitsu(ctx: HandContext) -> Optional[YakuResult]:
    """Full flush (清一色). One suit only, no honors."""
    if len(ctx.suits()) == 1 and not ctx.kinds() & HONORS:
        return _by_menzen(ctx, "清一色", 6)
    return None


# === Yakuman ===

def check_suuankou(ctx: HandContext) -> Optional[YakuResult]:
    """Four concealed triplets (四暗刻)."""
    if not ctx.is_special and ctx.concealed_koutsu_count() == 4:
        return ("四暗刻", YAKUMAN_HAN)
    return None


def check_daisangen(ctx: HandContext) -> Optional[YakuResult]:
    """Big three dragons (大三元)."""
    if _count_in(ctx.triplets(), DRAGONS) == 3:
        return ("大三元", YAKUMAN_HAN)
    return None


def check_shousuushii(ctx: HandContext) -> Optional[YakuResult]:
    """Little four winds (小四喜)."""
    if _count_in(ctx.triplets(), WINDS) == 3 and ctx.head_34 in WINDS:
        return ("小四喜", YAKUMAN_HAN)
    return None


def check_daisuushii(ctx: HandContext) -> Optional[YakuResult]:
    """Big four winds (大四喜)."""
    if _count_in(ctx.triplets(), WINDS) == 4:
        return ("大四喜", YAKUMAN_HAN)
    return None


def check_tsuuiisou(ctx: HandContext) -> Optional[YakuResult]:
    """All honors (字一色)."""
    return ("字一色", YAKUMAN_HAN) if ctx.kinds() <= HONORS else None


def check_chinroutou(ctx: HandContext) -> Optional[YakuResult]:
    """All terminals (清老頭)."""
    return ("清老頭", YAKUMAN_HAN) if ctx.kinds() <= TERMINALS else None


def check_ryuuiisou(ctx: HandContext) -> Optional[YakuResult]:
    """All green (緑一色). Only 2s,3s,4s,6s,8s + hatsu."""
    return ("緑一色", YAKUMAN_HAN) if ctx.kinds() <= GREENS else None


def check_chuuren(ctx: HandContext) -> Optional[YakuResult]:
    """Nine gates (九蓮宝燈). Menzen only, one suit: 1112345678999+1."""
    if not ctx.is_menzen or ctx.melds:
        return None
    suits = ctx.suits()
    if len(suits) != 1 or ctx.kinds() & HONORS:
        return None
    base = 9 * suits.pop()
    counts = ctx.all_tiles_34[base:base + 9]
    if all(have >= need for have, need in zip(counts, _NINE_GATES)):
        return ("九蓮宝燈", YAKUMAN_HAN)
    return None


def check_suukantsu(ctx: HandContext) -> Optional[YakuResult]:
    """Four kans (四槓子)."""
    if ctx.kan_count() == 4:
        return ("四槓子", YAKUMAN_HAN)
    return None


_REGULAR_CHECKS = (
    check_tanyao, check_pinfu,
    check_iipeikou, check_ryanpeikou,
    check_yakuhai_seat_wind, check_yakuhai_round_wind,
    check_yakuhai_haku, check_yakuhai_hatsu, check_yakuhai_chun,
    check_chanta, check_junchan, check_ittsu,
    check_sanshoku_doujun, check_sanshoku_doukou,
    check_toitoi, check_sanankou, check_sankantsu,
    check_honroutou, check_shousangen,
    check_chiitoi, check_honitsu, check_chinitsu,
)

_YAKUMAN_CHECKS = (
    check_suuankou, check_daisangen, check_shousuushii,
    check_daisuushii, check_tsuuiisou, check_chinroutou,
    check_ryuuiisou, check_chuuren, check_suukantsu,
)
