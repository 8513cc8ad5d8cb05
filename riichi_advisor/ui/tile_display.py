"""Tile display formatting with colors for terminal output."""

from typing import Sequence

from rich.text import Text

from riichi_advisor.core.tile import (
    ALL_TILES, FIVE_INDICES, RED_FIVE_IDS, TILE_NAMES_37, Tile, TileSuit,
)


# Color schemes
SUIT_COLORS = {
    TileSuit.MAN: "red",
    TileSuit.PIN: "blue",
    TileSuit.SOU: "green",
    TileSuit.WIND: "yellow",
    TileSuit.DRAGON: "yellow",
}


def tile_to_rich_text(tile: Tile, highlight: bool = False) -> Text:
    """Convert a tile to a Rich Text object with appropriate colors."""
    if tile.is_aka:
        style = "bold red on white"
    else:
        style = f"bold {SUIT_COLORS[tile.suit]}"
        if highlight:
            style += " on white"
    return Text(f"[{TILE_NAMES_37[tile.id]}]", style=style)


def tiles_to_rich_text(tiles: Sequence[Tile], separator: str = " ") -> Text:
    """Convert a list of tiles to Rich Text."""
    result = Text()
    for i, tile in enumerate(tiles):
        if i > 0:
            result.append(separator)
        result.append_text(tile_to_rich_text(tile))
    return result


def hand_to_rich_text(tehai: Sequence[int], akas_in_hand: Sequence[bool],
                      last_self_tsumo: Tile = None) -> Text:
    """Render a 34-count hand, red fives shown in place of one black five.

    The drawn tile is split off to the right and highlighted.
    """
    counts = list(tehai)
    if last_self_tsumo is not None:
        counts[last_self_tsumo.index34] -= 1

    tiles = []
    for kind, count in enumerate(counts):
        if count <= 0:
            continue
        red = RED_FIVE_IDS[FIVE_INDICES.index(kind)] if kind in FIVE_INDICES else None
        has_red = red is not None and akas_in_hand[FIVE_INDICES.index(kind)]
        if has_red and last_self_tsumo is not None and last_self_tsumo.id == red:
            has_red = False
        if has_red:
            tiles.append(ALL_TILES[red])
            count -= 1
        tiles.extend([ALL_TILES[kind]] * count)

    result = tiles_to_rich_text(tiles)
    if last_self_tsumo is not None:
        result.append("  ")
        result.append_text(tile_to_rich_text(last_self_tsumo, highlight=True))
    return result


def candidates_to_rich_text(flags: Sequence[bool]) -> Text:
    """Render the tiles whose flag is set in a 34 or 37 wide array."""
    tiles = [ALL_TILES[i] for i, ok in enumerate(flags) if ok]
    if not tiles:
        return Text("-", style="dim")
    return tiles_to_rich_text(tiles)
