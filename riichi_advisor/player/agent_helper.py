"""Decision-support queries over a frozen PlayerState.

Every query is a pure function of the snapshot: hypothetical hands are
built on local copies and the state is never modified.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from riichi_advisor.config import DEFAULT_CONFIG, HelperConfig
from riichi_advisor.core.player_state import PlayerState, Wind
from riichi_advisor.core.tile import (
    ALL_TILES, FIVE_INDICES, HONOR_INDICES, RED_FIVE_IDS, YAOCHU_INDICES, Tile,
)
from riichi_advisor.errors import (
    CannotAgariError, EngineDesyncError, HandAlreadyCompleteError,
    InsufficientDrawsError, NotAHoraHandError,
)
from riichi_advisor.rules.expected_value import InitState, SinglePlayerTables, SPCalculator
from riichi_advisor.rules.scoring import AgariCalculator, Point
from riichi_advisor.rules.shanten import calc_all

logger = logging.getLogger(__name__)


def _fold_aka(full: Sequence[bool]) -> List[bool]:
    """Collapse a 37-wide flag array onto the 34 basic kinds."""
    ret = list(full[:34])
    for kind, red in zip(FIVE_INDICES, RED_FIVE_IDS):
        ret[kind] = ret[kind] or full[red]
    return ret


class AgentHelper:
    """Queries a policy asks at one decision point.

    Attributes:
        state: The snapshot being queried
        config: Policy and search tunables
    """

    def __init__(self, state: PlayerState, config: Optional[HelperConfig] = None):
        self.state = state
        self.config = config or DEFAULT_CONFIG

    def kans_count(self) -> int:
        """Kans made by this player, for the four-kan abort check."""
        return len(self.state.minkans) + len(self.state.ankans)

    def yaokyuu_kind_count(self) -> int:
        """Distinct terminal and honor kinds in the concealed hand."""
        return sum(1 for i in YAOCHU_INDICES if self.state.tehai[i] > 0)

    def _require_discard_point(self):
        if not self.state.last_cans.can_discard:
            raise EngineDesyncError("tehai is not 3n+2")

    def _split_aka(self, ret: List[bool]):
        """Offer red fives separately from the black ones."""
        st = self.state
        for suit, (kind, red) in enumerate(zip(FIVE_INDICES, RED_FIVE_IDS)):
            if ret[kind] and st.akas_in_hand[suit]:
                ret[red] = True
                ret[kind] = st.tehai[kind] > 1

    # ------------------------------------------------------------------
    # Discard candidates
    # ------------------------------------------------------------------

    def discard_candidates(self) -> List[bool]:
        """Legal discards by basic kind. Must be called at 3n+2."""
        return _fold_aka(self.discard_candidates_aka())

    def discard_candidates_aka(self) -> List[bool]:
        """Legal discards over the 37 tile ids, red fives kept apart."""
        self._require_discard_point()
        st = self.state
        ret = [False] * 37

        if st.riichi_accepted[0]:
            if st.last_self_tsumo is None:
                raise EngineDesyncError("riichi accepted without last self tsumo")
            ret[st.last_self_tsumo.id] = True
            return ret

        for i, count in enumerate(st.tehai):
            if count == 0:
                continue
            if st.riichi_declared[0]:
                if st.shanten == 1:
                    ret[i] = st.next_shanten_discards[i]
                else:
                    # Riichi can only be declared at shanten 0 or 1
                    ret[i] = st.keep_shanten_discards[i]
            else:
                ret[i] = not st.forbidden_tiles[i]

        self._split_aka(ret)
        return ret

    def discard_candidates_with_unconditional_tenpai(self) -> List[bool]:
        """Discards leaving a real, non-furiten tenpai backed by a yaku.

        Independent of riichi status. Must be called at 3n+2.
        """
        return _fold_aka(self.discard_candidates_with_unconditional_tenpai_aka())

    def discard_candidates_with_unconditional_tenpai_aka(self) -> List[bool]:
        """Red-five aware version of the unconditional tenpai filter."""
        self._require_discard_point()
        st = self.state
        ret = [False] * 37

        if (st.tiles_left == 0  # haitei
                or st.shanten > 1
                or st.shanten == 1 and not st.has_next_shanten_discard):
            return ret

        if st.last_self_tsumo is not None:
            if st.waits[st.last_self_tsumo.index34]:
                # Already agari, any discard is furiten
                return ret
            if st.riichi_accepted[0]:
                if not st.at_furiten:
                    ret[st.last_self_tsumo.id] = True
                return ret
        elif calc_all(st.tehai, st.tehai_len_div3) == -1:
            # Complete right after chi/pon
            return ret

        tenpai_discards = (st.next_shanten_discards if st.shanten == 1
                           else st.keep_shanten_discards)

        for discard in range(34):
            if not tenpai_discards[discard] or st.forbidden_tiles[discard]:
                continue
            tehai_3n1 = list(st.tehai)
            tehai_3n1[discard] -= 1

            for tsumo, seen in enumerate(st.tiles_seen):
                if tsumo == discard or tehai_3n1[tsumo] == 4:
                    continue
                tehai_3n2 = list(tehai_3n1)
                tehai_3n2[tsumo] += 1
                if calc_all(tehai_3n2, st.tehai_len_div3) > -1:
                    continue

                if st.discarded_tiles[tsumo]:
                    ret[discard] = False
                    break

                # Only after the furiten check above
                if seen == 4 or ret[discard]:
                    continue

                ret[discard] = AgariCalculator(
                    tehai=tehai_3n2,
                    is_menzen=st.is_menzen,
                    melds=st.melds,
                    bakaze=st.bakaze,
                    jikaze=st.jikaze,
                    winning_tile=tsumo,
                    is_ron=True,
                ).has_yaku()

        self._split_aka(ret)
        return ret

    # ------------------------------------------------------------------
    # Rule-based ryukyoku / agari
    # ------------------------------------------------------------------

    def rule_based_ryukyoku(self) -> bool:
        """Whether to call kyuushu kyuuhai when it is legal."""
        if not self.state.last_cans.can_ryukyoku:
            return False
        decision = self._rule_based_ryukyoku_slow()
        logger.debug("ryukyoku decision for seat %d: %s", self.state.player_id, decision)
        return decision

    def _rule_based_ryukyoku_slow(self) -> bool:
        st = self.state
        if calc_all(st.tehai, st.tehai_len_div3) <= 2:
            return False

        # Big hands are rarely needed in the west round
        if st.bakaze == Wind.WEST:
            return True

        if st.is_all_last:
            if st.oya == 0 or st.rank < 3:
                return True

            # Last place, not dealer: draw only if a haneman tsumo would be
            # enough to leave last place.
            scores = [-3000 - st.honba * 300] * 4
            scores[0] = 12000 + st.kyotaku * 1000 + st.honba * 300
            scores[st.oya] = -6000 - st.honba * 300
            scores = [a + b for a, b in zip(scores, st.scores)]
            return st.get_rank(scores) < 3

        if self.yaokyuu_kind_count() >= self.config.yaokyuu_keep_threshold:
            return False
        if all(st.tehai[i] > 0 for i in HONOR_INDICES):
            return False
        return True

    def rule_based_agari(self) -> bool:
        """Whether to actually take a legal ron or tsumo."""
        cans = self.state.last_cans
        if not cans.can_agari():
            return False
        decision = self._rule_based_agari_slow(
            cans.can_ron_agari, self.state.rel(cans.target_actor))
        logger.debug("agari decision for seat %d: %s", self.state.player_id, decision)
        return decision

    def _rule_based_agari_slow(self, is_ron: bool, target_rel: int) -> bool:
        st = self.state
        promotion = self.config.promotion_score
        if not st.is_all_last or st.oya == 0 or st.rank < 3:
            return True

        if st.bakaze == Wind.WEST:
            # Not yet the real all-last (W4)
            if st.kyoku < 3:
                return True
        elif all(s < promotion for s in st.scores):
            # West round stays reachable; sound but not complete
            return True

        ura_indicators = self._best_case_ura_indicators() if st.riichi_accepted[0] else []
        point = self.agari_points(is_ron, ura_indicators)

        exp_scores = list(st.scores)
        if is_ron:
            exp_scores[0] += point.ron + st.kyotaku * 1000 + st.honba * 300
            exp_scores[target_rel] -= point.ron + st.honba * 300
        else:
            # Not the dealer here
            exp_scores[0] += point.tsumo_total(False) + st.kyotaku * 1000 + st.honba * 300
            for idx in range(1, 4):
                if idx == st.oya:
                    exp_scores[idx] -= point.tsumo_oya + st.honba * 100
                else:
                    exp_scores[idx] -= point.tsumo_ko + st.honba * 100

        # Entering or keeping the west round; sound and complete here
        if all(s < promotion for s in exp_scores):
            return True
        return st.get_rank(exp_scores) < 3

    def _best_case_ura_indicators(self) -> List[Tile]:
        """Most valuable uradora indicators still physically possible.

        Kinds are tried by count held (concealed kans as four), most first,
        each indicator kind repeated until its copies run out.
        """
        st = self.state
        tehai_full = list(st.tehai)
        for kind in st.ankans:
            tehai_full[kind] += 4

        by_count = sorted(
            (i for i, c in enumerate(tehai_full) if c > 0),
            key=lambda i: -tehai_full[i],
        )

        tiles_seen = list(st.tiles_seen)
        ura_indicators = []
        wanted = len(st.dora_indicators)
        for kind in by_count:
            if len(ura_indicators) >= wanted:
                break
            ura_ind = ALL_TILES[kind].prev()
            while len(ura_indicators) < wanted and tiles_seen[ura_ind.index34] < 4:
                ura_indicators.append(ura_ind)
                tiles_seen[ura_ind.index34] += 1
        return ura_indicators

    # ------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------

    def agari_points(self, is_ron: bool, ura_indicators: Sequence[Tile] = ()) -> Point:
        """Points of the win available right now.

        ``ura_indicators`` only count with an accepted riichi.

        Raises:
            CannotAgariError: No legal win in this mode, or no winning tile.
            NotAHoraHandError: The hand does not evaluate as a win.
        """
        st = self.state
        cans = st.last_cans
        if not (cans.can_ron_agari if is_ron else cans.can_tsumo_agari):
            raise CannotAgariError("cannot agari")

        # Tenhou / chiihou, never stacked with other yakuman
        if not is_ron and st.can_w_riichi:
            return Point.from_yakuman(st.oya == 0, 1)

        winning_tile = st.last_kawa_tile if is_ron else st.last_self_tsumo
        if winning_tile is None:
            raise CannotAgariError("cannot find the winning tile")

        if is_ron:
            additional_hans = sum((
                st.riichi_accepted[0],  # 立直
                st.is_w_riichi,         # 両立直
                st.at_ippatsu,          # 一発
                st.tiles_left == 0,     # 河底撈魚
                st.chankan_chance,      # 槍槓
            ))
        else:
            additional_hans = sum((
                st.riichi_accepted[0],                  # 立直
                st.is_w_riichi,                         # 両立直
                st.at_ippatsu,                          # 一発
                st.is_menzen,                           # 門前清自摸和
                st.tiles_left == 0 and not st.at_rinshan,  # 海底摸月
                st.at_rinshan,                          # 嶺上開花
            ))

        tehai = list(st.tehai)
        doras = st.doras_owned[0]
        if is_ron:
            kind = winning_tile.index34
            tehai[kind] += 1
            doras += st.dora_factor[kind]
            if winning_tile.is_aka:
                doras += 1
        if st.riichi_accepted[0]:
            ankans = st.ankans
            for ura in ura_indicators:
                nxt = ura.next().index34
                doras += tehai[nxt]
                if nxt in ankans:
                    doras += 4

        agari = AgariCalculator(
            tehai=tehai,
            is_menzen=st.is_menzen,
            melds=st.melds,
            bakaze=st.bakaze,
            jikaze=st.jikaze,
            winning_tile=winning_tile.index34,
            is_ron=is_ron,
        ).agari(additional_hans, doras)
        if agari is None:
            raise NotAHoraHandError("not a hora hand")
        return agari.point(st.oya == 0)

    # ------------------------------------------------------------------
    # Shanten and lookahead
    # ------------------------------------------------------------------

    def real_time_shanten(self) -> int:
        """Shanten at this exact point, also correct at 3n+2."""
        st = self.state
        if not st.last_cans.can_discard:
            return st.shanten

        if st.shanten > 0:
            return st.shanten - 1 if st.has_next_shanten_discard else st.shanten

        if st.last_self_tsumo is not None:
            return -1 if st.waits[st.last_self_tsumo.index34] else 0

        # After chi/pon the cached value is clamped at 0 and may hide a
        # complete hand.
        return calc_all(st.tehai, st.tehai_len_div3)

    def _draw_horizon(self) -> Tuple[int, bool]:
        """(self-draws left, whether the last of them is the last wall tile)."""
        st = self.state
        if st.last_cans.can_discard:
            tiles_left = st.tiles_left
        else:
            # Chankan is ignored here
            target = st.rel(st.last_cans.target_actor)
            tiles_left = max(st.tiles_left - (4 - target), 0)
        return tiles_left // 4, tiles_left % 4 == 0

    def single_player_tables(self) -> SinglePlayerTables:
        """Expected value table over the remaining self-draws.

        Raises:
            InsufficientDrawsError: Not even one more self-draw.
            HandAlreadyCompleteError: Real-time shanten is -1.
            SearchError: Raised by the search for hands it cannot handle.
        """
        st = self.state
        if st.tiles_left < 4:
            raise InsufficientDrawsError("need at least one more tsumo")

        cur_shanten = self.real_time_shanten()
        if cur_shanten < 0:
            raise HandAlreadyCompleteError("can't calculate an agari hand")

        can_discard = st.last_cans.can_discard
        tsumos_left, calc_haitei = self._draw_horizon()
        if tsumos_left < 1:
            raise InsufficientDrawsError("need at least one more tsumo")

        if st.is_menzen and not st.ankans:
            num_doras_in_fuuro = 0
        else:
            num_doras_in_tehai = sum(st.tehai[ind.next().index34] for ind in st.dora_indicators)
            num_akas = sum(st.akas_in_hand)
            num_doras_in_fuuro = st.doras_owned[0] - num_doras_in_tehai - num_akas

        prefer_riichi = st.scores[0] >= self.config.riichi_deposit
        calc_double_riichi = can_discard and st.can_w_riichi

        # After an accepted riichi the drawn tile is as good as discarded
        tehai = list(st.tehai)
        akas_in_hand = list(st.akas_in_hand)
        is_discard_after_riichi = can_discard and st.riichi_accepted[0]
        if is_discard_after_riichi:
            last_tsumo = st.last_self_tsumo
            tehai[last_tsumo.index34] -= 1
            if last_tsumo.is_aka:
                akas_in_hand[FIVE_INDICES.index(last_tsumo.index34)] = False
            can_discard = False

        init_state = InitState(
            tehai=tuple(tehai),
            akas_in_hand=tuple(akas_in_hand),
            tiles_seen=st.tiles_seen,
            akas_seen=st.akas_seen,
        )
        sp_calc = SPCalculator(
            tehai_len_div3=st.tehai_len_div3,
            is_menzen=st.is_menzen,
            melds=st.melds,
            bakaze=st.bakaze,
            jikaze=st.jikaze,
            num_doras_in_fuuro=num_doras_in_fuuro,
            prefer_riichi=prefer_riichi,
            dora_indicators=st.dora_indicators,
            calc_double_riichi=calc_double_riichi,
            calc_haitei=calc_haitei,
            sort_result=True,
            max_shanten=self.config.max_search_shanten,
        )

        max_ev_table = sp_calc.calc(init_state, can_discard, tsumos_left, cur_shanten)
        if is_discard_after_riichi:
            max_ev_table[0].tile = st.last_self_tsumo

        return SinglePlayerTables(max_ev_table=max_ev_table)
