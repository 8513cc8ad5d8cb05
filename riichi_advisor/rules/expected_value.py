"""Single-player expected value search over the remaining self-draws.

Model:
- every draw comes from the unseen pool with a fixed probability
  (unseen copies of the kind / all unseen tiles);
- a draw that does not lower the shanten number is discarded right away;
- a draw that does lower it is kept, and the discard that maximises the
  expected value of the resulting hand is chosen;
- a completing draw at tenpai is scored as a tsumo win.

The value of a hand is the expected number of points collected by a
tsumo win within the horizon.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from riichi_advisor.core.meld import Meld
from riichi_advisor.core.player_state import Wind
from riichi_advisor.core.tile import ALL_TILES, FIVE_INDICES, RED_FIVE_IDS, Tile
from riichi_advisor.errors import SearchError
from riichi_advisor.rules.scoring import AgariCalculator
from riichi_advisor.rules.shanten import calc_all

logger = logging.getLogger(__name__)

# (expected points, win probability, tenpai probability)
Outcome = Tuple[float, float, float]


@dataclass(frozen=True)
class InitState:
    """Hand and visibility the search starts from."""
    tehai: Tuple[int, ...]
    akas_in_hand: Tuple[bool, ...]
    tiles_seen: Tuple[int, ...]
    akas_seen: Tuple[bool, ...]


@dataclass
class RequiredTile:
    tile: Tile
    count: int


@dataclass
class Candidate:
    """Outlook after one discard (or of the current hand when not discarding)."""
    tile: Optional[Tile]
    exp_value: float
    win_prob: float
    tenpai_prob: float
    required_tiles: List[RequiredTile] = field(default_factory=list)
    shanten_down: bool = False

    @property
    def num_required_tiles(self) -> int:
        return sum(r.count for r in self.required_tiles)


@dataclass
class SinglePlayerTables:
    max_ev_table: List[Candidate]


class SPCalculator:
    """Expected value search for one hand shape.

    Attributes:
        tehai_len_div3: Mentsu still to be formed in the concealed part
        is_menzen: No open melds
        melds: Own melds, passed through to the hand evaluator
        bakaze / jikaze: Round and seat wind (EAST seat is the dealer)
        num_doras_in_fuuro: Doras held in melds, not visible in ``tehai``
        prefer_riichi: Closed wins are scored with riichi
        dora_indicators: Revealed indicators
        calc_double_riichi: Riichi would be a double riichi
        calc_haitei: The last draw of the horizon is the last tile of the wall
        sort_result: Sort candidates best first
        calc_shanten_down: Also report discards that raise shanten
        max_shanten: Refuse hands further than this from tenpai
    """

    def __init__(
        self,
        tehai_len_div3: int,
        is_menzen: bool,
        melds: Sequence[Meld],
        bakaze: Wind,
        jikaze: Wind,
        num_doras_in_fuuro: int,
        prefer_riichi: bool,
        dora_indicators: Sequence[Tile],
        calc_double_riichi: bool = False,
        calc_haitei: bool = False,
        sort_result: bool = True,
        calc_shanten_down: bool = False,
        max_shanten: int = 3,
    ):
        self.tehai_len_div3 = tehai_len_div3
        self.is_menzen = is_menzen
        self.melds = list(melds)
        self.bakaze = bakaze
        self.jikaze = jikaze
        self.num_doras_in_fuuro = num_doras_in_fuuro
        self.prefer_riichi = prefer_riichi
        self.dora_indicators = list(dora_indicators)
        self.calc_double_riichi = calc_double_riichi
        self.calc_haitei = calc_haitei
        self.sort_result = sort_result
        self.calc_shanten_down = calc_shanten_down
        self.max_shanten = max_shanten

    def calc(self, init_state: InitState, can_discard: bool,
             tsumos_left: int, cur_shanten: int) -> List[Candidate]:
        """Evaluate every discard (3n+2) or the current hand (3n+1)."""
        if tsumos_left < 1:
            raise SearchError("need at least one more tsumo")
        if cur_shanten < 0:
            raise SearchError("hand is already complete")
        if cur_shanten > self.max_shanten:
            raise SearchError(f"shanten {cur_shanten} exceeds search limit {self.max_shanten}")

        search = _Search(self, init_state)
        tehai = list(init_state.tehai)
        akas = tuple(init_state.akas_in_hand)

        if not can_discard:
            outcome = search.evaluate(tuple(tehai), tsumos_left, akas)
            candidates = [search.candidate(None, tuple(tehai), outcome, False)]
        else:
            candidates = []
            for discard, akas_after in _discard_options(tehai, akas):
                kind = discard.index34
                tehai[kind] -= 1
                after = tuple(tehai)
                tehai[kind] += 1
                shanten = calc_all(after, self.tehai_len_div3)
                shanten_down = shanten > cur_shanten
                if shanten_down and not self.calc_shanten_down:
                    continue
                outcome = search.evaluate(after, tsumos_left, akas_after)
                candidates.append(search.candidate(discard, after, outcome, shanten_down))

        logger.debug("sp search: %d candidates, %d states, %d tsumos",
                     len(candidates), len(search.memo), tsumos_left)
        if self.sort_result:
            candidates.sort(
                key=lambda c: (c.exp_value, c.win_prob, c.tenpai_prob, c.num_required_tiles),
                reverse=True,
            )
        return candidates


def _discard_options(tehai: List[int], akas: Tuple[bool, ...]):
    """Yield (tile, akas after discarding it), red fives as separate options."""
    for kind in range(34):
        if tehai[kind] == 0:
            continue
        if kind in FIVE_INDICES:
            suit = FIVE_INDICES.index(kind)
            if akas[suit]:
                after = list(akas)
                after[suit] = False
                yield ALL_TILES[RED_FIVE_IDS[suit]], tuple(after)
                if tehai[kind] > 1:
                    yield ALL_TILES[kind], akas
                continue
        yield ALL_TILES[kind], akas


class _Search:
    """Memoised state of one ``SPCalculator.calc`` call."""

    def __init__(self, calc: SPCalculator, init_state: InitState):
        self.calc = calc
        self.left = [max(4 - seen, 0) for seen in init_state.tiles_seen]
        self.total_left = sum(self.left)
        self.dora_factor = [0] * 34
        for ind in calc.dora_indicators:
            self.dora_factor[ind.next().index34] += 1
        self.is_oya = calc.jikaze == Wind.EAST
        self.memo: Dict[tuple, Outcome] = {}
        self.win_memo: Dict[tuple, int] = {}

    def shanten(self, hand: Sequence[int]) -> int:
        return calc_all(hand, self.calc.tehai_len_div3)

    def required_tiles(self, hand: Tuple[int, ...]) -> List[RequiredTile]:
        shanten = self.shanten(hand)
        test = list(hand)
        required = []
        for t in range(34):
            if self.left[t] == 0 or hand[t] >= 4:
                continue
            test[t] += 1
            if self.shanten(test) < shanten:
                required.append(RequiredTile(ALL_TILES[t], self.left[t]))
            test[t] -= 1
        return required

    def candidate(self, tile: Optional[Tile], hand: Tuple[int, ...],
                  outcome: Outcome, shanten_down: bool) -> Candidate:
        ev, win, tenpai = outcome
        return Candidate(
            tile=tile,
            exp_value=ev,
            win_prob=win,
            tenpai_prob=tenpai,
            required_tiles=self.required_tiles(hand),
            shanten_down=shanten_down,
        )

    def evaluate(self, hand: Tuple[int, ...], draws_left: int,
                 akas: Tuple[bool, ...]) -> Outcome:
        """Outcome of a 3n+1 hand with ``draws_left`` self-draws to come."""
        key = (hand, draws_left, akas)
        cached = self.memo.get(key)
        if cached is not None:
            return cached

        shanten = self.shanten(hand)
        if draws_left == 0 or self.total_left == 0:
            outcome = (0.0, 0.0, 1.0 if shanten == 0 else 0.0)
            self.memo[key] = outcome
            return outcome

        ev = win = tenpai = 0.0
        stay = 1.0
        drawn = list(hand)
        for t in range(34):
            if self.left[t] == 0 or hand[t] >= 4:
                continue
            drawn[t] += 1
            if self.shanten(drawn) < shanten:
                p = self.left[t] / self.total_left
                if shanten == 0:
                    points = self.win_value(tuple(drawn), t, draws_left, akas)
                    if points > 0:
                        stay -= p
                        ev += p * points
                        win += p
                else:
                    stay -= p
                    r_ev, r_win, r_tenpai = self.best_after_draw(drawn, draws_left - 1, akas)
                    ev += p * r_ev
                    win += p * r_win
                    tenpai += p * r_tenpai
            drawn[t] -= 1

        r_ev, r_win, r_tenpai = self.evaluate(hand, draws_left - 1, akas)
        ev += stay * r_ev
        win += stay * r_win
        tenpai += stay * r_tenpai
        if shanten == 0:
            tenpai = 1.0

        outcome = (ev, win, tenpai)
        self.memo[key] = outcome
        return outcome

    def best_after_draw(self, drawn: List[int], draws_left: int,
                        akas: Tuple[bool, ...]) -> Outcome:
        """Best discard from a 3n+2 hand that keeps the improved shanten."""
        target = self.shanten(drawn)
        best = None
        for d in range(34):
            if drawn[d] == 0:
                continue
            drawn[d] -= 1
            if self.shanten(drawn) == target:
                akas_after = akas
                if d in FIVE_INDICES and drawn[d] == 0:
                    after = list(akas)
                    after[FIVE_INDICES.index(d)] = False
                    akas_after = tuple(after)
                outcome = self.evaluate(tuple(drawn), draws_left, akas_after)
                if best is None or outcome[:2] > best[:2]:
                    best = outcome
            drawn[d] += 1
        return best if best is not None else (0.0, 0.0, 0.0)

    def win_value(self, hand: Tuple[int, ...], win_tile: int, draws_left: int,
                  akas: Tuple[bool, ...]) -> int:
        """Points collected by a tsumo win on ``win_tile``, 0 without yaku."""
        is_haitei = self.calc.calc_haitei and draws_left == 1
        key = (hand, win_tile, is_haitei, akas)
        cached = self.win_memo.get(key)
        if cached is not None:
            return cached

        calc = self.calc
        additional_hans = 0
        if calc.is_menzen:
            additional_hans += 1  # 門前清自摸和
            if calc.prefer_riichi:
                additional_hans += 2 if calc.calc_double_riichi else 1
        if is_haitei:
            additional_hans += 1
        doras = calc.num_doras_in_fuuro + sum(akas)
        doras += sum(c * f for c, f in zip(hand, self.dora_factor))

        agari = AgariCalculator(
            tehai=hand,
            is_menzen=calc.is_menzen,
            melds=calc.melds,
            bakaze=calc.bakaze,
            jikaze=calc.jikaze,
            winning_tile=win_tile,
            is_ron=False,
        ).agari(additional_hans, doras)
        points = 0 if agari is None else agari.point(self.is_oya).tsumo_total(self.is_oya)
        self.win_memo[key] = points
        return points
