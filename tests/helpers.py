"""Shared builders for tests."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dataclasses import replace

from riichi_advisor.core.meld import Meld, MeldType
from riichi_advisor.core.tile import ALL_TILES, tiles_to_34_array, make_tiles_from_string
from riichi_advisor.player.agent_helper import AgentHelper
from riichi_advisor.player.snapshot import build_player_state


def make_34(tiles_str):
    """Helper: create 34 array from shorthand."""
    return tiles_to_34_array(make_tiles_from_string(tiles_str))


def helper_for(hand, *args, **kwargs) -> AgentHelper:
    """AgentHelper over a freshly built snapshot."""
    return AgentHelper(build_player_state(hand, *args, **kwargs))


def with_cans(state, **cans):
    """Copy of ``state`` with some legal-action flags changed."""
    return replace(state, last_cans=replace(state.last_cans, **cans))


def flagged(flags):
    """Indices whose flag is set."""
    return [i for i, f in enumerate(flags) if f]


def random_hand(rng, num_pons=0, noise=2):
    """Near-complete 3n+2 hand drawn from one set of 136 tiles.

    Pons are called first, the concealed part is cut from whole mentsu and
    a pair, and then ``noise`` of its tiles are swapped for other kinds.
    The last tile of the hand is a natural choice for the drawn tile.

    Returns (concealed tiles, melds, counts left in the wall).
    """
    wall = [4] * 34

    def take(kind, n=1):
        wall[kind] -= n
        return [ALL_TILES[kind]] * n

    def triplet_kinds():
        return [k for k in range(34) if wall[k] >= 3]

    melds = []
    for _ in range(num_pons):
        kind = rng.choice(triplet_kinds())
        melds.append(Meld(MeldType.PON, tuple(take(kind, 3)), ALL_TILES[kind], 1))

    hand = []
    for _ in range(4 - num_pons):
        starts = [k for k in range(27)
                  if k % 9 < 7 and wall[k] and wall[k + 1] and wall[k + 2]]
        if starts and rng.random() < 0.7:
            first = rng.choice(starts)
            for k in range(first, first + 3):
                hand += take(k)
        else:
            hand += take(rng.choice(triplet_kinds()), 3)
    hand += take(rng.choice([k for k in range(34) if wall[k] >= 2]), 2)

    rng.shuffle(hand)
    for i in range(noise):
        old = hand[i].index34
        wall[old] += 1
        hand[i] = take(rng.choice([k for k in range(34) if wall[k] and k != old]))[0]
    rng.shuffle(hand)
    return hand, melds, wall


def wall_tiles(wall):
    """Tiles behind a list of wall counts."""
    return [ALL_TILES[k] for k, n in enumerate(wall) for _ in range(n)]
