"""Tests for AgentHelper discard candidates"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from riichi_advisor.core.tile import RED_FIVE_MAN
from riichi_advisor.errors import EngineDesyncError
from helpers import flagged, helper_for


class TestDiscardCandidates:
    def test_every_held_kind(self):
        helper = helper_for("123m456p789s1112z3z", last_self_tsumo="3z")
        assert flagged(helper.discard_candidates()) == [0, 1, 2, 12, 13, 14, 24, 25, 26, 27, 28, 29]

    def test_forbidden(self):
        """Kuikae-forbidden kinds are never offered."""
        helper = helper_for("123m456p789s1112z3z", last_self_tsumo="3z", forbidden="1z3m")
        ret = helper.discard_candidates()
        assert not ret[27]
        assert not ret[2]
        assert ret[28]

    def test_not_at_discard_point(self):
        helper = helper_for("123m456p789s1112z")
        with pytest.raises(EngineDesyncError):
            helper.discard_candidates()
        with pytest.raises(AssertionError):
            helper.discard_candidates_aka()

    def test_does_not_modify_state(self):
        helper = helper_for("123m456p789s1112z3z", last_self_tsumo="3z", forbidden="1z")
        before = helper.state
        helper.discard_candidates_aka()
        assert helper.state is before
        assert helper.state.forbidden_tiles[27]


class TestRiichi:
    def test_accepted_only_tsumogiri(self):
        helper = helper_for("123m456p789s1112z3z", last_self_tsumo="3z", riichi_accepted=True)
        assert flagged(helper.discard_candidates_aka()) == [29]

    def test_accepted_red_tsumo(self):
        helper = helper_for("123m456p789s1112z0m", last_self_tsumo="0m", riichi_accepted=True)
        assert flagged(helper.discard_candidates_aka()) == [RED_FIVE_MAN]
        assert flagged(helper.discard_candidates()) == [4]

    def test_declared_at_iishanten(self):
        """Declaring from iishanten: only discards reaching tenpai."""
        helper = helper_for("123m456p234p78s99s1z", last_self_tsumo="2p", riichi_declared=True)
        assert flagged(helper.discard_candidates()) == [26, 27]

    def test_declared_at_tenpai(self):
        """Declaring from tenpai: only discards keeping tenpai."""
        helper = helper_for("123m456p789s1112z3z", last_self_tsumo="3z", riichi_declared=True)
        assert flagged(helper.discard_candidates()) == [28, 29]


class TestAka:
    def test_red_and_black_both_offered(self):
        helper = helper_for("340m5m678p789s1123z", last_self_tsumo="3z")
        ret = helper.discard_candidates_aka()
        assert ret[4]
        assert ret[RED_FIVE_MAN]

    def test_only_red_five(self):
        """A lone red five never reports the black five as discardable."""
        helper = helper_for("340m678p789s11123z", last_self_tsumo="3z")
        ret = helper.discard_candidates_aka()
        assert ret[RED_FIVE_MAN]
        assert not ret[4]
        assert helper.discard_candidates()[4]

    def test_folded_view_matches(self):
        helper = helper_for("340m5m678p789s1123z", last_self_tsumo="3z")
        full = helper.discard_candidates_aka()
        folded = helper.discard_candidates()
        assert len(folded) == 34
        assert folded[4] == (full[4] or full[RED_FIVE_MAN])
