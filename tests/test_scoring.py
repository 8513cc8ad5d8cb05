"""Tests for scoring.py"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from riichi_advisor.core.meld import Meld, MeldType
from riichi_advisor.core.player_state import Wind
from riichi_advisor.rules.scoring import (
    AgariCalculator, Point, _calculate_base_points, _round_up_100,
)
from helpers import make_34


class TestBasePoints:
    def test_mangan(self):
        assert _calculate_base_points(5, 30) == 2000

    def test_haneman(self):
        assert _calculate_base_points(6, 30) == 3000
        assert _calculate_base_points(7, 30) == 3000

    def test_baiman(self):
        assert _calculate_base_points(8, 30) == 4000

    def test_sanbaiman(self):
        assert _calculate_base_points(11, 30) == 6000

    def test_kazoe_yakuman(self):
        assert _calculate_base_points(13, 30) == 8000

    def test_sub_mangan(self):
        # 1 han 30 fu = 30 * 2^3 = 240
        assert _calculate_base_points(1, 30) == 240
        assert _calculate_base_points(2, 30) == 480
        assert _calculate_base_points(3, 30) == 960
        assert _calculate_base_points(4, 30) == 1920

    def test_mangan_cutoff(self):
        # 3 han 70 fu = 70 * 2^5 = 2240 -> capped at 2000 (mangan)
        assert _calculate_base_points(3, 70) == 2000


class TestRoundUp:
    def test_exact(self):
        assert _round_up_100(1000) == 1000

    def test_round_up(self):
        assert _round_up_100(1001) == 1100
        assert _round_up_100(960) == 1000


class TestPoint:
    def test_ko_1han_30fu(self):
        p = Point.from_han_fu(1, 30, is_oya=False)
        assert p.ron == 1000
        assert p.tsumo_oya == 500
        assert p.tsumo_ko == 300
        assert p.tsumo_total(False) == 1100

    def test_oya_1han_40fu(self):
        p = Point.from_han_fu(1, 40, is_oya=True)
        assert p.ron == 2000
        assert p.tsumo_ko == 700
        assert p.tsumo_oya == 0
        assert p.tsumo_total(True) == 2100

    def test_ko_mangan(self):
        p = Point.from_han_fu(5, 30, is_oya=False)
        assert (p.ron, p.tsumo_oya, p.tsumo_ko) == (8000, 4000, 2000)

    def test_oya_haneman(self):
        p = Point.from_han_fu(6, 30, is_oya=True)
        assert p.ron == 18000
        assert p.tsumo_total(True) == 18000

    def test_yakuman(self):
        p = Point.from_yakuman(is_oya=False, multiplier=1)
        assert p.ron == 32000
        assert p.tsumo_total(False) == 32000
        assert p.is_yakuman

    def test_double_yakuman_oya(self):
        p = Point.from_yakuman(is_oya=True, multiplier=2)
        assert p.ron == 96000
        assert p.tsumo_ko == 32000


def calc(hand, winning_tile, is_ron, melds=(), jikaze=Wind.SOUTH, bakaze=Wind.EAST):
    return AgariCalculator(
        tehai=make_34(hand),
        is_menzen=all(not m.is_open for m in melds),
        melds=list(melds),
        bakaze=bakaze,
        jikaze=jikaze,
        winning_tile=winning_tile,
        is_ron=is_ron,
    )


class TestAgariCalculator:
    def test_menzen_tsumo_only(self):
        """No shape yaku: menzen tsumo alone, 40 fu."""
        agari = calc("123m456p789s111s99m", 8, is_ron=False).agari(1, 0)
        assert agari.han == 1
        assert agari.fu == 40
        point = agari.point(is_oya=True)
        assert point.tsumo_ko == 700
        assert point.tsumo_total(True) == 2100

    def test_no_yaku_is_not_a_win(self):
        c = calc("123m456p789s111s99m", 8, is_ron=True)
        assert not c.has_yaku()
        assert c.agari(0, 3) is None

    def test_doras_need_a_yaku(self):
        """Doras add han only once a yaku exists."""
        agari = calc("123m456p789s111s99m", 8, is_ron=True).agari(1, 2)
        assert agari.han == 3

    def test_pinfu_tsumo(self):
        agari = calc("234m456p678s23455s", 21, is_ron=False).agari(1, 0)
        assert agari.fu == 20
        assert ("平和", 1) in agari.yaku
        assert ("断幺九", 1) in agari.yaku
        assert agari.han == 3

    def test_yakuhai_has_yaku(self):
        c = calc("123m456p789s55566z", 32, is_ron=True)
        assert c.has_yaku()

    def test_open_tanyao(self):
        pon = Meld.from_string(MeldType.PON, "555p", from_player=1)
        agari = calc("234m678s23455s", 21, is_ron=True, melds=[pon]).agari(0, 0)
        assert agari.han == 1
        assert agari.fu == 30

    def test_best_reading(self):
        """111222333m reads as sanankou or as iipeikou; sanankou scores more."""
        agari = calc("111222333m456p99s", 13, is_ron=False).agari(1, 0)
        assert ("三暗刻", 2) in agari.yaku

    def test_kokushi(self):
        agari = calc("119m19p19s1234567z", 33, is_ron=True).agari(0, 0)
        assert agari.yakuman == 1
        assert agari.point(is_oya=False).ron == 32000

    def test_chiitoi(self):
        agari = calc("1199m2288p3377s55z", 31, is_ron=True).agari(0, 0)
        assert agari.fu == 25
        assert agari.han == 2
