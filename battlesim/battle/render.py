from __future__ import annotations
from typing import Iterable, List
from rich.align import Align
from rich.box import ROUNDED, DOUBLE
from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from .engine import BattleView, CombatantView

LOG_LINES = 8

def hp_bar_style(current: int, max_hp: int) -> str:
    if max_hp <= 0:
        return "red"
    pct = current / max_hp * 100
    if pct > 50:
        return "green"
    if pct > 20:
        return "yellow"
    return "red"

def hp_bar(current: int, max_hp: int, width: int = 24) -> Text:
    current = max(0, min(current, max_hp))
    filled = int(round(current / max_hp * width)) if max_hp > 0 else 0
    bar = Text("█" * filled, style=hp_bar_style(current, max_hp))
    bar.append("░" * (width - filled), style="dim")
    bar.append(f" {current}/{max_hp}")
    return bar

def combatant_panel(c: CombatantView, title: str) -> Panel:
    body = Text(f"{c.name} (Lv {c.level})\n", style="bold")
    body.append("HP: ")
    body.append_text(hp_bar(c.current_hp, c.max_hp))
    return Panel(body, title=title, box=ROUNDED, width=42)

def log_table(entries: Iterable[str], limit: int = LOG_LINES) -> Table:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("log", style="bright_white")
    recent: List[str] = list(entries)[-limit:]
    for line in recent:
        table.add_row(line)
    return table

def command_menu(view: BattleView, switch_menu: bool) -> RenderableType:
    if view.over:
        return Panel(Align.center(Text(view.outcome_message, style="bold bright_yellow")), box=DOUBLE)
    if view.phase != "PLAYER_CHOOSING":
        return Text("Opponent is thinking...", style="italic dim")
    lines = Text()
    if switch_menu:
        for member in view.bench:
            allowed = member.slot in view.valid_switches
            style = "green" if allowed else "dim strike"
            lines.append(f"[{member.slot + 1}] {member.name} (HP: {member.current_hp})\n", style=style)
        lines.append("[b] Back", style="cyan")
        return Panel(lines, title="Switch Pokémon", box=ROUNDED)
    for i, name in enumerate(view.valid_moves):
        lines.append(f"[{i + 1}] {name}\n", style="bright_white")
    lines.append("[s] Switch Pokémon", style="cyan")
    return Panel(lines, title="Moves", box=ROUNDED)

def render_view(view: BattleView, *, switch_menu: bool = False) -> RenderableType:
    arena = Columns([combatant_panel(view.player, "You"), combatant_panel(view.opponent, "Opponent")])
    return Group(
        arena,
        Panel(log_table(view.log), title="Battle log", box=ROUNDED),
        Text(view.headline, style="bold"),
        command_menu(view, switch_menu),
    )

__all__ = ["hp_bar_style", "hp_bar", "combatant_panel", "log_table", "command_menu", "render_view"]
