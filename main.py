#!/usr/bin/env python3
"""Riichi Mahjong decision support - analyse one hand in the terminal."""

import argparse
import logging
from dataclasses import replace

from rich.console import Console
from rich.panel import Panel

from riichi_advisor.core.meld import Meld, MeldType
from riichi_advisor.core.player_state import Wind
from riichi_advisor.player.agent_helper import AgentHelper
from riichi_advisor.player.snapshot import build_player_state
from riichi_advisor.ui.report import render_report

console = Console()

_WINDS = {"E": Wind.EAST, "S": Wind.SOUTH, "W": Wind.WEST, "N": Wind.NORTH,
          "東": Wind.EAST, "南": Wind.SOUTH, "西": Wind.WEST, "北": Wind.NORTH}


def _wind(value: str) -> Wind:
    try:
        return _WINDS[value.upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(f"unknown wind {value!r}")


def _meld(value: str) -> Meld:
    """'pon:555p' / 'chi:324m' / 'ankan:1111z' style meld argument."""
    kind, _, tiles = value.partition(":")
    try:
        return Meld.from_string(MeldType(kind.lower()), tiles, from_player=None)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyse a riichi mahjong hand")
    parser.add_argument("hand", nargs="?", help="concealed tiles, e.g. '123m456p789s1119m'")
    parser.add_argument("--tsumo", default=None, help="tile just drawn (part of hand)")
    parser.add_argument("--meld", action="append", type=_meld, default=[],
                        help="own meld, e.g. pon:555p (repeatable)")
    parser.add_argument("--discards", default="", help="own discards")
    parser.add_argument("--visible", default="", help="other visible tiles")
    parser.add_argument("--dora", default="", help="dora indicators")
    parser.add_argument("--missed", default="", help="winning tiles passed on (furiten)")
    parser.add_argument("--riichi", action="store_true", help="riichi already accepted")
    parser.add_argument("--tiles-left", type=int, default=70)
    parser.add_argument("--round", dest="bakaze", type=_wind, default=Wind.EAST,
                        help="round wind: E/S/W/N")
    parser.add_argument("--seat", type=int, default=0, help="own absolute seat")
    parser.add_argument("--oya", type=int, default=0, help="dealer's absolute seat")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def analyse(args, hand: str):
    state = build_player_state(
        hand,
        args.meld,
        player_id=args.seat,
        last_self_tsumo=args.tsumo,
        discards=args.discards,
        visible_tiles=args.visible,
        dora_indicators=args.dora,
        missed_tiles=args.missed,
        riichi_accepted=args.riichi,
        tiles_left=args.tiles_left,
        bakaze=args.bakaze,
        oya=args.oya,
    )
    helper = AgentHelper(state)
    if state.last_self_tsumo is not None and helper.real_time_shanten() < 0:
        helper = AgentHelper(replace(state, last_cans=replace(state.last_cans, can_tsumo_agari=True)))
    render_report(console, helper)


def prompt_loop(args):
    """Ask for hands until an empty line."""
    console.print(Panel("[bold cyan]立直麻将 打牌支援[/bold cyan]\n"
                        "[dim]手牌を入力 (例: 123m456p789s1119m), 空行で終了[/dim]",
                        border_style="cyan", padding=(1, 4)))
    while True:
        hand = console.input("  > ").strip()
        if not hand:
            return
        try:
            analyse(args, hand)
        except ValueError as e:
            console.print(f"  [red]{e}[/red]")


def main():
    """Main entry point."""
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        if args.hand:
            analyse(args, args.hand)
        else:
            prompt_loop(args)
    except ValueError as e:
        console.print(f"  [red]{e}[/red]")
    except (KeyboardInterrupt, EOFError):
        console.print()


if __name__ == "__main__":
    main()
