"""Battle service: the command surface the presentation layer talks to.

Wraps one :class:`BattleEngine` at a time together with its scheduler and the
pure UI state (whether the switch menu is open). ``restart`` throws the whole
battle away and hands control back to team selection.
"""
from __future__ import annotations
import random
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Sequence, TypedDict
from battlesim.core.errors import IllegalActionError
from battlesim.core.logging import logger
from battlesim.system.settings import Settings
from .ai import MoveSelector
from .engine import BattleEngine, BattleView, MoveRef, SwitchRef
from .factory import roster_from_dicts
from .models import Combatant
from .scheduler import BattleScheduler

class BattleResult(TypedDict):
    outcome: Literal["PLAYER_WIN","OPPONENT_WIN","ONGOING"]
    battle_id: str

def _mon(name: str, level: int, hp: int, atk: int, df: int, spa: int, spd: int, moves: List[tuple]) -> Dict[str, Any]:
    return {
        "name": name, "level": level,
        "stats": {"hp": hp, "attack": atk, "defense": df, "specialAttack": spa, "specialDefense": spd},
        "selectedMoves": [{"name": n, "power": p, "type": t} for n, p, t in moves],
    }

DEMO_MATCHUPS: Dict[str, Dict[str, List[Dict[str, Any]]]] = {
    "starter_showdown": {
        "player": [
            _mon("Turtwig", 5, 21, 12, 12, 9, 11, [("Tackle", 40, "physical"), ("Razor Leaf", 55, "physical")]),
            _mon("Chimchar", 5, 19, 11, 9, 11, 9, [("Scratch", 40, "physical"), ("Ember", 40, "special")]),
        ],
        "opponent": [
            _mon("Piplup", 5, 20, 10, 10, 11, 11, [("Pound", 40, "physical"), ("Bubble", 40, "special")]),
            _mon("Starly", 4, 16, 9, 7, 7, 7, [("Tackle", 40, "physical"), ("Quick Attack", 40, "physical")]),
        ],
    },
    "gym_rematch": {
        "player": [
            _mon("Luxray", 40, 125, 100, 65, 77, 65, [("Spark", 65, "physical"), ("Crunch", 80, "physical"),
                                                     ("Thunderbolt", 90, "special"), ("Bite", 60, "physical")]),
            _mon("Staraptor", 38, 112, 98, 58, 45, 51, [("Wing Attack", 60, "physical"), ("Close Combat", 120, "physical")]),
            _mon("Empoleon", 41, 130, 77, 80, 97, 90, [("Surf", 90, "special"), ("Metal Claw", 50, "physical")]),
        ],
        "opponent": [
            _mon("Onix", 36, 95, 40, 130, 35, 45, [("Rock Throw", 50, "physical"), ("Screech", 0, "physical")]),
            _mon("Rampardos", 40, 137, 145, 53, 75, 59, [("Headbutt", 70, "physical"), ("Zen Headbutt", 80, "physical")]),
        ],
    },
}

class BattleService:
    def __init__(self, settings: Optional[Settings] = None, *, rng: Optional[random.Random] = None,
                 on_restart: Optional[Callable[[], None]] = None):
        self.settings = settings or Settings.load()
        self.rng = rng
        self.on_restart = on_restart
        self.engine: Optional[BattleEngine] = None
        self.scheduler: Optional[BattleScheduler] = None
        self.battle_id = ""
        self.switch_menu_open = False
        self._watchers: List[Callable[[BattleView], None]] = []
        self._counter = 0

    def watch(self, fn: Callable[[BattleView], None]):
        """Receive every BattleView of every battle this service starts."""
        self._watchers.append(fn)

    def _emit(self, view: BattleView):
        for fn in list(self._watchers):
            fn(view)

    # ---------------- Battle lifecycle -----------------
    def start(self, player_roster: Sequence[Combatant], opponent_roster: Sequence[Combatant],
              *, battle_id: Optional[str] = None) -> BattleView:
        if self.engine is not None:
            self.engine.abandon()
        self._counter += 1
        self.battle_id = battle_id or f"battle_{self._counter}"
        rng = self.rng or random.Random(self.settings.data.seed)
        self.scheduler = BattleScheduler(delay=self.settings.data.think_delay)
        self.engine = BattleEngine(MoveSelector(rng), self.scheduler, battle_id=self.battle_id)
        self.engine.subscribe(self._emit)
        self.switch_menu_open = False
        if self.settings.data.debug:
            logger.info("BattleServiceStart", battle_id=self.battle_id,
                        player=len(player_roster), opponent=len(opponent_roster))
        return self.engine.initialize(player_roster, opponent_roster)

    def start_from_dicts(self, player: Sequence[Mapping[str, Any]], opponent: Sequence[Mapping[str, Any]],
                         *, battle_id: Optional[str] = None) -> BattleView:
        return self.start(roster_from_dicts(player), roster_from_dicts(opponent), battle_id=battle_id)

    def start_demo(self, demo_id: str) -> BattleView:
        demo = DEMO_MATCHUPS.get(demo_id)
        if demo is None:
            raise KeyError(f"Unknown demo matchup: {demo_id}")
        return self.start_from_dicts(demo["player"], demo["opponent"], battle_id=demo_id)

    def restart(self):
        """Discard the current battle and go back to team selection."""
        if self.engine is not None:
            self.engine.abandon()
        self.engine = None
        self.scheduler = None
        self.switch_menu_open = False
        logger.info("BattleRestart", battle_id=self.battle_id)
        if self.on_restart:
            self.on_restart()

    # ---------------- Commands -----------------
    def _engine(self, action: str) -> BattleEngine:
        if self.engine is None:
            raise IllegalActionError(action, "no battle in progress")
        return self.engine

    def choose_move(self, move: MoveRef) -> BattleView:
        view = self._engine("move").submit_player_move(move)
        self.switch_menu_open = False
        return view

    def choose_switch(self, target: SwitchRef) -> BattleView:
        view = self._engine("switch").submit_player_switch(target)
        self.switch_menu_open = False
        return view

    def open_switch_menu(self) -> bool:
        view = self.view()
        self.switch_menu_open = view is not None and view.phase == "PLAYER_CHOOSING"
        return self.switch_menu_open

    def close_switch_menu(self):
        self.switch_menu_open = False

    # ---------------- Time & projection -----------------
    def busy(self) -> bool:
        return self.scheduler is not None and self.scheduler.pending

    def tick(self, dt: float) -> int:
        return self.scheduler.advance(dt) if self.scheduler else 0

    def pump(self, sleep: Optional[Callable[[float], None]] = None) -> int:
        """Play out every pending transition; ``sleep`` makes it real time."""
        return self.scheduler.run_until_idle(sleep) if self.scheduler else 0

    def view(self) -> Optional[BattleView]:
        return self.engine.view() if self.engine and self.engine.state else None

    def result(self) -> BattleResult:
        view = self.view()
        return {"outcome": view.outcome if view else "ONGOING", "battle_id": self.battle_id}

__all__ = ["BattleService", "BattleResult", "DEMO_MATCHUPS"]
