"""Rich rendering of a decision-support report for one snapshot."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from riichi_advisor.core.player_state import PlayerState
from riichi_advisor.errors import AgentHelperError
from riichi_advisor.player.agent_helper import AgentHelper
from riichi_advisor.ui.tile_display import (
    candidates_to_rich_text, hand_to_rich_text, tile_to_rich_text, tiles_to_rich_text,
)

MAX_EV_ROWS = 8


def render_header(console: Console, state: PlayerState):
    """Round, seat and hand summary."""
    header = Text()
    header.append(f"{state.bakaze.kanji}{state.kyoku + 1}局", style="bold")
    header.append(f"  {state.honba}本場  供託{state.kyotaku}")
    header.append(f"  自風 {state.jikaze.kanji}")
    header.append(f"  残り {state.tiles_left}枚\n")
    if state.dora_indicators:
        header.append("ドラ表示: ")
        header.append_text(tiles_to_rich_text(state.dora_indicators))
        header.append("\n")
    header.append_text(hand_to_rich_text(state.tehai, state.akas_in_hand, state.last_self_tsumo))
    for meld in state.melds:
        header.append("  ")
        header.append_text(tiles_to_rich_text(meld.tiles, separator=""))
    console.print(Panel(header, title="[bold]手牌[/bold]", border_style="cyan"))


def render_ev_table(console: Console, helper: AgentHelper):
    """Expected value table, or the reason it cannot be built."""
    try:
        tables = helper.single_player_tables()
    except AgentHelperError as e:
        console.print(f"  [dim]期待値計算なし: {e}[/dim]")
        return

    table = Table(title="期待値", show_header=True, border_style="cyan")
    table.add_column("打牌", style="bold")
    table.add_column("期待値", justify="right")
    table.add_column("和了率", justify="right")
    table.add_column("聴牌率", justify="right")
    table.add_column("有効牌")

    for candidate in tables.max_ev_table[:MAX_EV_ROWS]:
        tile = tile_to_rich_text(candidate.tile) if candidate.tile else Text("-")
        required = Text()
        for i, r in enumerate(candidate.required_tiles):
            if i > 0:
                required.append(" ")
            required.append_text(tile_to_rich_text(r.tile))
        required.append(f" ({candidate.num_required_tiles})", style="dim")
        table.add_row(
            tile,
            f"{candidate.exp_value:.0f}",
            f"{candidate.win_prob * 100:.1f}%",
            f"{candidate.tenpai_prob * 100:.1f}%",
            required,
        )
    console.print(table)


def render_report(console: Console, helper: AgentHelper):
    """Everything the helper can answer at this decision point."""
    state = helper.state
    render_header(console, state)

    shanten = helper.real_time_shanten()
    label = "和了" if shanten < 0 else ("聴牌" if shanten == 0 else f"{shanten}向聴")
    console.print(f"  向聴数: [bold]{label}[/bold]")

    if state.last_cans.can_discard:
        line = Text("  打牌候補: ")
        line.append_text(candidates_to_rich_text(helper.discard_candidates_aka()))
        console.print(line)
        line = Text("  聴牌打牌: ")
        line.append_text(candidates_to_rich_text(
            helper.discard_candidates_with_unconditional_tenpai_aka()))
        console.print(line)

    if state.last_cans.can_agari():
        is_ron = state.last_cans.can_ron_agari
        try:
            point = helper.agari_points(is_ron)
        except AgentHelperError as e:
            console.print(f"  [red]和了不可: {e}[/red]")
        else:
            paid = point.ron if is_ron else point.tsumo_total(state.oya == 0)
            detail = f"役満×{point.yakuman}" if point.is_yakuman else f"{point.han}翻{point.fu}符"
            decision = "和了" if helper.rule_based_agari() else "見逃し"
            console.print(f"  和了: [bold green]{detail} {paid}点[/bold green]  判断: {decision}")

    if state.last_cans.can_ryukyoku:
        decision = "流局" if helper.rule_based_ryukyoku() else "続行"
        console.print(f"  九種九牌 ({helper.yaokyuu_kind_count()}種): {decision}")

    console.print()
    render_ev_table(console, helper)
