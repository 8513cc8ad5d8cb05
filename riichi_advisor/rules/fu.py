"""Fu (符) calculation for scoring."""

from typing import List, Tuple

from riichi_advisor.core.tile import YAOCHU_INDICES
from riichi_advisor.core.meld import Meld, MeldType


def calculate_fu(
    head_34: int,
    mentsu_list: List[Tuple[str, int]],
    melds: List[Meld],
    win_tile_34: int,
    is_tsumo: bool,
    is_menzen: bool,
    seat_wind_34: int,
    round_wind_34: int,
    is_pinfu: bool = False,
    is_chiitoi: bool = False,
) -> int:
    """Calculate fu (符) for a winning hand.

    Args:
        head_34: 34-index of the pair (jantai)
        mentsu_list: List of (type, index34) for concealed mentsu
        melds: Called melds and concealed kans
        win_tile_34: 34-index of the winning tile
        is_tsumo: Whether win is by tsumo
        is_menzen: Whether hand is fully closed
        seat_wind_34: 34-index of seat wind tile
        round_wind_34: 34-index of round wind tile
        is_pinfu: Whether this is a pinfu hand
        is_chiitoi: Whether this is a chiitoi hand

    Returns:
        Fu value rounded up to nearest 10 (chiitoi stays 25).
    """
    if is_chiitoi:
        return 25
    if is_pinfu:
        return 20 if is_tsumo else 30

    fu = 20  # 副底

    # For ron, a koutsu completed by the winning tile is treated as open (明刻)
    # only if the winning tile is not used in any shuntsu in this decomposition.
    win_in_shuntsu = any(
        m_type == 'shuntsu' and win_tile_34 in (m_idx, m_idx + 1, m_idx + 2)
        for m_type, m_idx in mentsu_list
    )
    win_koutsu_found = False
    for m_type, m_idx in mentsu_list:
        if m_type != 'koutsu':
            continue
        is_yaochu = m_idx in YAOCHU_INDICES
        if (not is_tsumo and not win_koutsu_found and m_idx == win_tile_34
                and not win_in_shuntsu):
            fu += 4 if is_yaochu else 2
            win_koutsu_found = True
        else:
            fu += 8 if is_yaochu else 4

    for meld in melds:
        is_yaochu = meld.tile_index34 in YAOCHU_INDICES
        if meld.meld_type == MeldType.ANKAN:
            fu += 32 if is_yaochu else 16
        elif meld.is_minkan:
            fu += 16 if is_yaochu else 8
        elif meld.meld_type == MeldType.PON:
            fu += 4 if is_yaochu else 2

    # Yakuhai pair; a double wind pair counts 4
    if head_34 == seat_wind_34:
        fu += 2
    if head_34 == round_wind_34:
        fu += 2
    if head_34 in (31, 32, 33):
        fu += 2

    fu += _calculate_wait_fu(head_34, mentsu_list, win_tile_34)

    if is_tsumo:
        fu += 2
    elif is_menzen:
        fu += 10  # 門前加符

    # Open hand without any fu still scores 30
    if fu == 20 and not is_menzen:
        fu = 30

    return _round_up_10(fu)


def _calculate_wait_fu(head_34: int, mentsu_list: List[Tuple[str, int]],
                       win_tile_34: int) -> int:
    """Wait fu, taking the most favourable reading for ambiguous shapes.

    Kanchan (嵌張), Penchan (辺張), Tanki (単騎): 2 fu
    Ryanmen (両面), Shanpon (双碰): 0 fu
    """
    readings = []
    if win_tile_34 == head_34:
        readings.append(2)

    for m_type, m_idx in mentsu_list:
        if m_type == 'koutsu' and m_idx == win_tile_34:
            readings.append(0)
        if m_type != 'shuntsu' or win_tile_34 not in (m_idx, m_idx + 1, m_idx + 2):
            continue
        if win_tile_34 == m_idx + 1:
            readings.append(2)
        elif m_idx % 9 == 0 and win_tile_34 == m_idx + 2:
            readings.append(2)
        elif m_idx % 9 == 6 and win_tile_34 == m_idx:
            readings.append(2)
        else:
            readings.append(0)

    return max(readings) if readings else 0


def _round_up_10(fu: int) -> int:
    return ((fu + 9) // 10) * 10
