"""Tests for AgentHelper.agari_points"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from riichi_advisor.core.meld import Meld, MeldType
from riichi_advisor.core.player_state import Wind
from riichi_advisor.core.tile import tile_from_string
from riichi_advisor.errors import CannotAgariError, NotAHoraHandError
from helpers import helper_for

# No shape yaku, 9m tanki
NO_YAKU_TENPAI = "123m456p789s111s9m"
# 白 triplet waiting on 6s-9s
HAKU_TENPAI = "123m456p78s55511z"


class TestTsumo:
    def test_dealer_menzen_tsumo(self):
        """Menzen tsumo only: 1 han 40 fu, 700 all."""
        helper = helper_for(NO_YAKU_TENPAI + "9m", last_self_tsumo="9m", can_tsumo_agari=True)
        point = helper.agari_points(False)
        assert point.han == 1
        assert point.fu == 40
        assert point.tsumo_ko == 700
        assert point.tsumo_total(True) == 2100

    def test_rinshan_is_not_haitei(self):
        helper = helper_for(NO_YAKU_TENPAI + "9m", last_self_tsumo="9m", can_tsumo_agari=True,
                            oya=1, at_rinshan=True, tiles_left=0)
        point = helper.agari_points(False)
        assert point.han == 2
        assert (point.tsumo_oya, point.tsumo_ko) == (1300, 700)

    def test_haitei(self):
        helper = helper_for(NO_YAKU_TENPAI + "9m", last_self_tsumo="9m", can_tsumo_agari=True,
                            tiles_left=0)
        assert helper.agari_points(False).han == 2

    def test_tenhou(self):
        helper = helper_for(NO_YAKU_TENPAI + "9m", last_self_tsumo="9m", can_tsumo_agari=True,
                            can_w_riichi=True)
        point = helper.agari_points(False)
        assert point.is_yakuman
        assert point.tsumo_ko == 16000

    def test_chiihou(self):
        helper = helper_for(NO_YAKU_TENPAI + "9m", last_self_tsumo="9m", can_tsumo_agari=True,
                            can_w_riichi=True, oya=2)
        point = helper.agari_points(False)
        assert (point.tsumo_oya, point.tsumo_ko) == (16000, 8000)

    def test_tsumo_not_legal(self):
        helper = helper_for(NO_YAKU_TENPAI + "9m", last_self_tsumo="9m")
        with pytest.raises(CannotAgariError):
            helper.agari_points(False)

    def test_missing_tsumo_tile(self):
        """Legal tsumo but no drawn tile recorded."""
        pon = Meld.from_string(MeldType.PON, "555p", from_player=1)
        helper = helper_for("234m678s23455s", [pon], can_tsumo_agari=True)
        with pytest.raises(CannotAgariError):
            helper.agari_points(False)


class TestRon:
    def test_no_yaku(self):
        helper = helper_for(NO_YAKU_TENPAI, last_kawa_tile="9m", can_ron_agari=True)
        with pytest.raises(NotAHoraHandError):
            helper.agari_points(True)

    def test_not_a_hora_is_cannot_agari(self):
        helper = helper_for(NO_YAKU_TENPAI, last_kawa_tile="9m", can_ron_agari=True)
        with pytest.raises(CannotAgariError):
            helper.agari_points(True)

    def test_houtei_gives_yaku(self):
        helper = helper_for(NO_YAKU_TENPAI, last_kawa_tile="9m", can_ron_agari=True,
                            oya=1, tiles_left=0)
        point = helper.agari_points(True)
        assert point.han == 1
        assert point.ron == 1300

    def test_chankan(self):
        helper = helper_for(NO_YAKU_TENPAI, last_kawa_tile="9m", can_ron_agari=True,
                            oya=1, chankan_chance=True)
        assert helper.agari_points(True).han == 1

    def test_ron_not_legal(self):
        helper = helper_for(HAKU_TENPAI, last_kawa_tile="6s")
        with pytest.raises(CannotAgariError):
            helper.agari_points(True)

    def test_mode_must_match(self):
        """Only tsumo is legal: asking for ron fails."""
        helper = helper_for(HAKU_TENPAI + "6s", last_self_tsumo="6s", can_tsumo_agari=True)
        with pytest.raises(CannotAgariError):
            helper.agari_points(True)

    def test_missing_kawa_tile(self):
        helper = helper_for(HAKU_TENPAI, can_ron_agari=True)
        with pytest.raises(CannotAgariError):
            helper.agari_points(True)

    def test_yakuhai(self):
        helper = helper_for(HAKU_TENPAI, last_kawa_tile="6s", can_ron_agari=True, oya=1)
        point = helper.agari_points(True)
        assert (point.han, point.fu, point.ron) == (1, 40, 1300)


class TestDora:
    def test_red_winning_tile(self):
        helper = helper_for("123m46p789s55511z", last_kawa_tile="0p", can_ron_agari=True, oya=1)
        point = helper.agari_points(True)
        # 白 + red 5p, kanchan wait
        assert (point.han, point.fu, point.ron) == (2, 50, 3200)

    def test_dora_on_winning_tile(self):
        helper = helper_for(HAKU_TENPAI, last_kawa_tile="6s", can_ron_agari=True, oya=1,
                            dora_indicators="5s")
        assert helper.agari_points(True).han == 2

    def test_uradora_with_riichi(self):
        helper = helper_for(HAKU_TENPAI, last_kawa_tile="6s", can_ron_agari=True, oya=1,
                            riichi_accepted=True)
        point = helper.agari_points(True, [tile_from_string("7z")])
        # 立直 + 白 + 3 uradora
        assert point.han == 5
        assert point.ron == 8000

    def test_uradora_ignored_without_riichi(self):
        helper = helper_for(HAKU_TENPAI, last_kawa_tile="6s", can_ron_agari=True, oya=1)
        assert helper.agari_points(True, [tile_from_string("7z")]).han == 1

    def test_uradora_on_ankan(self):
        ankan = Meld.from_string(MeldType.ANKAN, "2222z")
        helper = helper_for("123m456p78s11z", [ankan], last_kawa_tile="6s",
                            can_ron_agari=True, oya=1, riichi_accepted=True,
                            bakaze=Wind.SOUTH)
        point = helper.agari_points(True, [tile_from_string("1z")])
        # 立直 + round wind 南 + 4 uradora on the concealed kan
        assert point.han == 6
        assert point.ron == 12000

    def test_ippatsu_and_double_riichi(self):
        helper = helper_for(HAKU_TENPAI, last_kawa_tile="6s", can_ron_agari=True, oya=1,
                            riichi_accepted=True, is_w_riichi=True, at_ippatsu=True)
        assert helper.agari_points(True).han == 4
