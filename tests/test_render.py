import random
from rich.console import Console
from battlesim.battle.ai import MoveSelector
from battlesim.battle.engine import BattleEngine
from battlesim.battle.models import Combatant, Move, StatBlock
from battlesim.battle.render import hp_bar_style, render_view


def test_hp_colour_thresholds():
    assert hp_bar_style(100, 100) == "green"
    assert hp_bar_style(51, 100) == "green"
    assert hp_bar_style(50, 100) == "yellow"
    assert hp_bar_style(21, 100) == "yellow"
    assert hp_bar_style(20, 100) == "red"
    assert hp_bar_style(0, 100) == "red"


def test_render_view_shows_both_sides_and_menus():
    tackle = Move("Tackle", 40)
    mk = lambda name: Combatant(name=name, level=5, stats=StatBlock(20, 10, 10, 10, 10), moves=[tackle])
    eng = BattleEngine(MoveSelector(random.Random(1)))
    eng.initialize([mk("Turtwig"), mk("Chimchar")], [mk("Starly")])
    console = Console(record=True, width=120)
    console.print(render_view(eng.view()))
    out = console.export_text()
    assert "Turtwig (Lv 5)" in out and "Starly (Lv 5)" in out
    assert "[1] Tackle" in out
    console.print(render_view(eng.view(), switch_menu=True))
    out = console.export_text()
    assert "Chimchar (HP: 20)" in out
    assert "[b] Back" in out
