"""Build consistent PlayerState snapshots from what a player can see."""

from dataclasses import replace
from typing import Optional, Sequence, Union

from riichi_advisor.core.meld import Meld
from riichi_advisor.core.player_state import LastCans, PlayerState, Wind
from riichi_advisor.core.tile import (
    FIVE_INDICES, Tile, make_tiles_from_string, tile_from_string, tiles_to_34_array,
)
from riichi_advisor.rules.agari import get_waiting_tiles
from riichi_advisor.rules.furiten import is_discard_furiten, is_missed_win_furiten
from riichi_advisor.rules.shanten import calc_all

TileSource = Union[str, Sequence[Tile]]


def _tiles(source: TileSource) -> list:
    if isinstance(source, str):
        return make_tiles_from_string(source)
    return list(source)


def _tile(source: Union[str, Tile, None]) -> Optional[Tile]:
    if isinstance(source, str):
        return tile_from_string(source)
    return source


def _aka_flags(tiles) -> list:
    flags = [False, False, False]
    for t in tiles:
        if t.is_aka:
            flags[FIVE_INDICES.index(t.index34)] = True
    return flags


def build_player_state(
    hand: TileSource,
    melds: Sequence[Meld] = (),
    *,
    player_id: int = 0,
    last_self_tsumo: Union[str, Tile, None] = None,
    last_kawa_tile: Union[str, Tile, None] = None,
    discards: TileSource = (),
    visible_tiles: TileSource = (),
    dora_indicators: TileSource = (),
    forbidden: TileSource = (),
    riichi_declared: bool = False,
    riichi_accepted: bool = False,
    is_w_riichi: bool = False,
    at_ippatsu: bool = False,
    can_w_riichi: bool = False,
    missed_tiles: TileSource = (),
    at_rinshan: bool = False,
    chankan_chance: bool = False,
    tiles_left: int = 70,
    bakaze: Wind = Wind.EAST,
    kyoku: int = 0,
    honba: int = 0,
    kyotaku: int = 0,
    oya: int = 0,
    scores: Sequence[int] = (25000, 25000, 25000, 25000),
    is_all_last: bool = False,
    can_discard: Optional[bool] = None,
    can_ron_agari: bool = False,
    can_tsumo_agari: bool = False,
    can_ryukyoku: bool = False,
    target_actor: int = 0,
) -> PlayerState:
    """Derive every cached field of a PlayerState.

    Args:
        hand: Concealed tiles, the self-drawn tile included at 3n+2
        melds: Own melds
        player_id: Absolute seat of this player
        last_self_tsumo: Tile just drawn (must be in ``hand``)
        last_kawa_tile: Discard that can be ronned
        discards: Own discard history
        visible_tiles: Other visible tiles (opponents' rivers and melds),
            each physical tile listed once
        dora_indicators: Revealed dora indicators, in order
        forbidden: Kinds that may not be discarded right now (kuikae)
        missed_tiles: Winning tiles passed on since the last own discard,
            or since riichi (temporary and riichi furiten)
        oya: Absolute seat of the dealer
        scores: Scores by absolute seat
        can_discard: Defaults to True at 3n+2 and False at 3n+1

    Raises:
        ValueError: The tiles do not form a legal 13/14 tile hand.
    """
    concealed = _tiles(hand)
    melds = tuple(melds)
    tsumo = _tile(last_self_tsumo)
    kawa = _tile(last_kawa_tile)
    own_discards = _tiles(discards)
    indicators = tuple(_tiles(dora_indicators))

    tehai = tiles_to_34_array(concealed)
    total = sum(tehai)
    len_div3 = total // 3
    if total % 3 == 0 or len_div3 + len(melds) != 4:
        raise ValueError(f"{total} concealed tiles with {len(melds)} melds is not a hand")
    if any(c > 4 for c in tehai):
        raise ValueError("more than four copies of a tile in hand")
    is_3n2 = total % 3 == 2
    if tsumo is not None and (not is_3n2 or tsumo not in concealed):
        raise ValueError(f"last self tsumo {tsumo} is not part of a 3n+2 hand")

    # Shanten before the draw; after chi/pon the 3n+2 value clamped at 0
    base = list(tehai)
    if tsumo is not None:
        base[tsumo.index34] -= 1
    if is_3n2 and tsumo is None:
        shanten = max(calc_all(tehai, len_div3), 0)
    else:
        shanten = calc_all(base, len_div3)

    keep = [False] * 34
    nxt = [False] * 34
    if is_3n2:
        test = list(tehai)
        for i in range(34):
            if tehai[i] == 0:
                continue
            test[i] -= 1
            s = calc_all(test, len_div3)
            test[i] += 1
            if s < shanten:
                nxt[i] = True
            elif s == shanten:
                keep[i] = True

    waits = [False] * 34
    if not is_3n2 or tsumo is not None:
        for w in get_waiting_tiles(base):
            waits[w] = True

    discarded = [False] * 34
    for t in own_discards:
        discarded[t.index34] = True

    forbidden_tiles = [False] * 34
    for t in _tiles(forbidden):
        forbidden_tiles[t.index34] = True

    meld_tiles = [t for m in melds for t in m.tiles]
    visible = concealed + meld_tiles + own_discards + list(indicators) + _tiles(visible_tiles)
    tiles_seen = tiles_to_34_array(visible)
    if any(c > 4 for c in tiles_seen):
        raise ValueError("more than four copies of a tile are visible")

    dora_factor = [0] * 34
    for ind in indicators:
        dora_factor[ind.next().index34] += 1
    owned = tiles_to_34_array(concealed + meld_tiles)
    doras_owned = sum(c * f for c, f in zip(owned, dora_factor))
    doras_owned += sum(1 for t in concealed + meld_tiles if t.is_aka)

    rel_scores = tuple(scores[(player_id + i) % 4] for i in range(4))
    rel_oya = (oya - player_id + 4) % 4
    riichi_declared = riichi_declared or riichi_accepted

    state = PlayerState(
        player_id=player_id,
        tehai=tuple(tehai),
        akas_in_hand=tuple(_aka_flags(concealed)),
        melds=melds,
        tehai_len_div3=len_div3,
        shanten=shanten,
        keep_shanten_discards=tuple(keep),
        next_shanten_discards=tuple(nxt),
        has_next_shanten_discard=any(nxt),
        forbidden_tiles=tuple(forbidden_tiles),
        discarded_tiles=tuple(discarded),
        waits=tuple(waits),
        at_furiten=(is_discard_furiten(waits, discarded)
                    or is_missed_win_furiten(
                        (i for i, w in enumerate(waits) if w),
                        {t.index34 for t in _tiles(missed_tiles)})),
        riichi_declared=(riichi_declared, False, False, False),
        riichi_accepted=(riichi_accepted, False, False, False),
        is_w_riichi=is_w_riichi,
        at_ippatsu=at_ippatsu,
        can_w_riichi=can_w_riichi,
        last_self_tsumo=tsumo,
        last_kawa_tile=kawa,
        at_rinshan=at_rinshan,
        chankan_chance=chankan_chance,
        tiles_left=tiles_left,
        tiles_seen=tuple(tiles_seen),
        akas_seen=tuple(_aka_flags(visible)),
        dora_indicators=indicators,
        doras_owned=(doras_owned, 0, 0, 0),
        dora_factor=tuple(dora_factor),
        bakaze=bakaze,
        jikaze=Wind((4 - rel_oya) % 4),
        kyoku=kyoku,
        honba=honba,
        kyotaku=kyotaku,
        oya=rel_oya,
        scores=rel_scores,
        is_all_last=is_all_last,
        last_cans=LastCans(
            can_discard=is_3n2 if can_discard is None else can_discard,
            can_ron_agari=can_ron_agari,
            can_tsumo_agari=can_tsumo_agari,
            can_ryukyoku=can_ryukyoku,
            target_actor=target_actor,
        ),
    )
    return replace(state, rank=state.get_rank(rel_scores))
