from __future__ import annotations
import sys
import time
from typing import Optional
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.text import Text
from battlesim.battle.engine import BattleView
from battlesim.battle.render import render_view
from battlesim.battle.service import BattleService, DEMO_MATCHUPS
from battlesim.core.errors import BattleSimError, IllegalActionError
from battlesim.core.logging import logger
from battlesim.system.settings import Settings

console = Console()

def _choose_matchup() -> str:
    """Stand-in for the team selection screen: pick one of the built-in matchups."""
    names = sorted(DEMO_MATCHUPS)
    console.print(Panel(Text("Choose your battle", justify="center", style="bold bright_yellow")))
    for i, name in enumerate(names, start=1):
        console.print(f"  [{i}] {name.replace('_', ' ').title()}")
    pick = Prompt.ask("Matchup", choices=[str(i) for i in range(1, len(names) + 1)], default="1")
    return names[int(pick) - 1]

def _draw(service: BattleService, view: Optional[BattleView] = None):
    view = view or service.view()
    if view is None:
        return
    console.clear()
    console.print(render_view(view, switch_menu=service.switch_menu_open))

def _play_out(service: BattleService):
    """Reveal scheduled transitions one at a time, sleeping through each delay."""
    sched = service.scheduler
    while sched is not None and sched.pending:
        due = sched.next_due()
        if due is None:
            break
        wait = max(0.0, due - sched.now)
        time.sleep(wait)
        service.tick(wait)
        _draw(service)

def _read_command(service: BattleService, view: BattleView):
    if service.switch_menu_open:
        choices = [str(s + 1) for s in view.valid_switches] + ["b"]
        answer = Prompt.ask("Switch to", choices=choices)
        if answer == "b":
            service.close_switch_menu()
            return
        service.choose_switch(int(answer) - 1)
        return
    choices = [str(i + 1) for i in range(len(view.valid_moves))] + ["s"]
    answer = Prompt.ask("Command", choices=choices)
    if answer == "s":
        if not view.valid_switches:
            console.print("No other Pokémon can battle!", style="yellow")
            time.sleep(1)
            return
        service.open_switch_menu()
        return
    service.choose_move(int(answer) - 1)

def play(service: BattleService) -> bool:
    """Run one battle to its end. Returns True when the player wants a rematch."""
    service.start_demo(_choose_matchup())
    while True:
        view = service.view()
        if view is None:
            return False
        _draw(service, view)
        if view.over:
            return Confirm.ask("Play again?", default=True)
        if view.phase != "PLAYER_CHOOSING":
            _play_out(service)
            continue
        try:
            _read_command(service, view)
        except IllegalActionError as e:
            logger.warn("CommandRejected", action=e.action, reason=e.reason)
            continue
        _play_out(service)

def run():
    settings = Settings.load()
    settings.apply()
    service = BattleService(settings)
    try:
        while play(service):
            service.restart()
    except KeyboardInterrupt:
        console.print("\nBattle abandoned.", style="dim")
    except BattleSimError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    finally:
        if service.engine is not None:
            service.engine.abandon()

if __name__ == "__main__":
    run()
