"""Turn-based battle engine.

The engine owns one :class:`BattleState` and moves it through the phases

    PLAYER_CHOOSING -> ACTION_RESOLVING -> OPPONENT_CHOOSING -> ACTION_RESOLVING
        -> (FAINT_HANDLING)* -> PLAYER_CHOOSING

with BATTLE_OVER reachable whenever a team runs out of combatants. Player
actions resolve synchronously; the follow-up (opponent turn, sending out a
replacement) goes through the optional :class:`BattleScheduler` so a
presentation layer can reveal it after a delay. Without a scheduler the
follow-up runs immediately.

Commands are only accepted in PLAYER_CHOOSING. Anything else raises
:class:`IllegalActionError` and leaves the state untouched.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple, Union
from battlesim.core.errors import IllegalActionError, InvalidRosterError
from battlesim.core.logging import logger
from .ai import MoveSelector
from .mechanics import compute_damage
from .models import Combatant, MissSignal, Move, Outcome, Phase, Side
from .party import Team, resolve_faint
from .scheduler import BattleScheduler, ScheduledTask

OPENING_HEADLINE = "A wild battle has begun!"
WIN_MESSAGE = "You won the battle!"
LOSS_MESSAGE = "You have no more Pokémon! You blacked out!"

MoveRef = Union[Move, int]
SwitchRef = Union[Combatant, int]

@dataclass
class BattleState:
    player: Team
    opponent: Team
    phase: Phase = "PLAYER_CHOOSING"
    turn_owner: Side = "player"
    log: List[str] = field(default_factory=list)
    headline: str = OPENING_HEADLINE
    outcome: Outcome = "ONGOING"
    outcome_message: str = ""
    turn: int = 1

    @property
    def over(self) -> bool:
        return self.outcome != "ONGOING"

    def team(self, side: Side) -> Team:
        return self.player if side == "player" else self.opponent

    def foe(self, side: Side) -> Team:
        return self.opponent if side == "player" else self.player

@dataclass(frozen=True)
class CombatantView:
    slot: int
    name: str
    level: int
    sprite: object
    current_hp: int
    max_hp: int
    fainted: bool

    @classmethod
    def of(cls, c: Combatant, team: Team) -> "CombatantView":
        return cls(c.slot, c.name, c.level, c.sprite, c.current_hp or 0, c.max_hp,
                   c.slot in team.fainted or c.is_fainted())

@dataclass(frozen=True)
class BattleView:
    """Read-only projection handed to the presentation layer after every transition."""
    player: CombatantView
    opponent: CombatantView
    phase: Phase
    turn_owner: Side
    log: Tuple[str, ...]
    headline: str
    over: bool
    outcome: Outcome
    outcome_message: str
    valid_moves: Tuple[str, ...]
    valid_switches: Tuple[int, ...]
    bench: Tuple[CombatantView, ...]

class BattleEngine:
    def __init__(self, selector: Optional[MoveSelector] = None, scheduler: Optional[BattleScheduler] = None,
                 *, battle_id: str = "battle"):
        self.selector = selector or MoveSelector()
        self.scheduler = scheduler
        self.battle_id = battle_id
        self.state: Optional[BattleState] = None
        self.abandoned = False
        self._pending: Optional[ScheduledTask] = None
        self._token = 0
        self._listeners: List[Callable[[BattleView], None]] = []
        self.logger = logger.bind(battle=battle_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self, player_roster: Sequence[Combatant], opponent_roster: Sequence[Combatant]) -> BattleView:
        if not player_roster:
            raise InvalidRosterError("player")
        if not opponent_roster:
            raise InvalidRosterError("opponent")
        self.state = BattleState(Team.from_roster(player_roster), Team.from_roster(opponent_roster))
        self.abandoned = False
        self._pending = None
        self._token += 1
        self.logger.info("BattleStart", player=self.state.player.active().name,
                         opponent=self.state.opponent.active().name)
        return self._notify()

    def abandon(self):
        """Drop the battle: pending transitions are cancelled and no command is accepted."""
        self.abandoned = True
        self._pending = None
        self._token += 1
        if self.scheduler is not None:
            self.scheduler.close()
        self.logger.info("BattleAbandoned")

    def subscribe(self, fn: Callable[[BattleView], None]) -> Callable[[], None]:
        self._listeners.append(fn)
        return lambda: self._listeners.remove(fn)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def submit_player_move(self, move: MoveRef) -> BattleView:
        st = self._require_choosing("move")
        chosen = self._resolve_move(st.player.active(), move)
        st.phase = "ACTION_RESOLVING"
        self._attack(st, "player", chosen)
        st.turn_owner = "opponent"
        follow = self._after_hit(st, "opponent")
        self._notify()
        self._defer(follow)
        return self.view()

    def submit_player_switch(self, target: SwitchRef) -> BattleView:
        st = self._require_choosing("switch")
        team = st.player
        slot = self._resolve_slot(team, target)
        if slot == team.active_slot:
            raise IllegalActionError("switch", "target is already active")
        if not team.can_switch_to(slot):
            raise IllegalActionError("switch", f"slot {slot} cannot battle")
        outgoing = team.active()
        # outgoing keeps its own current_hp; nothing is restored on the way in
        team.active_slot = slot
        incoming = team.active()
        self._say(st, f"{outgoing.name} switched to {incoming.name}", headline=f"{incoming.name}, I choose you!")
        self.logger.info("Switched", out=outgoing.name, into=incoming.name, hp=incoming.current_hp)
        st.turn_owner = "opponent"
        st.phase = "OPPONENT_CHOOSING"
        self._notify()
        self._defer(self._opponent_turn_task(st))
        return self.view()

    def resolve_opponent_turn(self) -> BattleView:
        """Play the opponent's turn now. Rejected while a scheduled transition is pending."""
        if self._pending is not None:
            raise IllegalActionError("opponent_turn", f"transition '{self._pending.label}' is still pending")
        return self._resolve_opponent_turn()

    def _resolve_opponent_turn(self) -> BattleView:
        st = self._require_state("opponent_turn")
        if st.phase != "OPPONENT_CHOOSING":
            raise IllegalActionError("opponent_turn", f"not the opponent's turn (phase {st.phase})")
        st.phase = "ACTION_RESOLVING"
        move = self.selector.select_move(st.opponent.active())
        self._attack(st, "opponent", move)
        st.turn_owner = "player"
        st.turn += 1
        follow = self._after_hit(st, "player")
        self._notify()
        self._defer(follow)
        return self.view()

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------
    def view(self) -> BattleView:
        st = self.state
        if st is None:
            raise IllegalActionError("view", "battle not initialized")
        choosing = st.phase == "PLAYER_CHOOSING" and not self.abandoned
        p_team = st.player
        return BattleView(
            player=CombatantView.of(p_team.active(), p_team),
            opponent=CombatantView.of(st.opponent.active(), st.opponent),
            phase=st.phase,
            turn_owner=st.turn_owner,
            log=tuple(st.log),
            headline=st.headline,
            over=st.over,
            outcome=st.outcome,
            outcome_message=st.outcome_message,
            valid_moves=tuple(m.name for m in p_team.active().moves) if choosing else (),
            valid_switches=tuple(m.slot for m in p_team.members if p_team.can_switch_to(m.slot)) if choosing else (),
            bench=tuple(CombatantView.of(m, p_team) for m in p_team.members),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _require_state(self, action: str) -> BattleState:
        if self.state is None:
            raise IllegalActionError(action, "battle not initialized")
        if self.abandoned:
            raise IllegalActionError(action, "battle was abandoned")
        return self.state

    def _require_choosing(self, action: str) -> BattleState:
        st = self._require_state(action)
        if st.over:
            raise IllegalActionError(action, "battle is over")
        if st.phase != "PLAYER_CHOOSING":
            raise IllegalActionError(action, f"not the player's turn (phase {st.phase})")
        if st.player.active().is_fainted() or st.opponent.active().is_fainted():
            raise IllegalActionError(action, "an active combatant has fainted")
        return st

    @staticmethod
    def _resolve_move(active: Combatant, move: MoveRef) -> Move:
        if isinstance(move, int) and not isinstance(move, bool):
            if 0 <= move < len(active.moves):
                return active.moves[move]
            raise IllegalActionError("move", f"{active.name} has no move in slot {move}")
        if isinstance(move, Move) and move in active.moves:
            return move
        raise IllegalActionError("move", f"{active.name} does not know {getattr(move, 'name', move)!r}")

    @staticmethod
    def _resolve_slot(team: Team, target: SwitchRef) -> int:
        if isinstance(target, int) and not isinstance(target, bool):
            if 0 <= target < len(team.members):
                return target
            raise IllegalActionError("switch", f"no team member in slot {target}")
        for m in team.members:
            if m is target:
                return m.slot
        raise IllegalActionError("switch", f"{getattr(target, 'name', target)!r} is not on the player's team")

    def _attack(self, st: BattleState, side: Side, move: Move):
        attacker = st.team(side).active()
        defender = st.foe(side).active()
        result = compute_damage(move, attacker, defender)
        if isinstance(result, MissSignal):
            self._say(st, f"{attacker.name} missed the move!")
            self.logger.debug("MoveMissed", side=side, move=move.name, reason=result.reason)
            return
        defender.take_damage(result)
        self._say(st, f"{attacker.name} uses {move.name} for {result} points of damage on {defender.name}")
        self.logger.info("MoveResolved", side=side, move=move.name, damage=result, target_hp=defender.current_hp)

    def _after_hit(self, st: BattleState, defender_side: Side) -> Optional[Callable[[], None]]:
        """Route to faint handling or to the next turn, judged on the health just committed."""
        if st.team(defender_side).active().is_fainted():
            return self._faint(st, defender_side)
        if defender_side == "opponent":
            st.phase = "OPPONENT_CHOOSING"
            return self._opponent_turn_task(st)
        st.phase = "PLAYER_CHOOSING"
        return None

    def _faint(self, st: BattleState, side: Side) -> Optional[Callable[[], None]]:
        team = st.team(side)
        fainted = team.active()
        st.phase = "FAINT_HANDLING"
        self._say(st, f"{fainted.name} fainted!")
        self.logger.info("CombatantFainted", side=side, name=fainted.name)
        result = resolve_faint(team, fainted)
        if result.team_eliminated or result.next_active is None:
            self._finish(st, "OPPONENT_WIN" if side == "player" else "PLAYER_WIN")
            return None
        slot = result.next_active.slot

        def send_out():
            if st is not self.state or self.abandoned:
                return
            self._send_out(st, side, slot)
        return send_out

    def _send_out(self, st: BattleState, side: Side, slot: int):
        team = st.team(side)
        team.active_slot = slot
        nxt = team.active()
        if side == "player":
            self._say(st, f"{nxt.name}, I choose you!")
        else:
            self._say(st, f"Opponent sent out {nxt.name}!")
        self.logger.info("SentOut", side=side, name=nxt.name, hp=nxt.current_hp)
        st.turn_owner = "player"
        st.phase = "PLAYER_CHOOSING"
        self._notify()

    def _opponent_turn_task(self, st: BattleState) -> Callable[[], None]:
        def opponent_turn():
            if st is not self.state or self.abandoned:
                return
            self._resolve_opponent_turn()
        return opponent_turn

    def _finish(self, st: BattleState, outcome: Outcome):
        st.outcome = outcome
        st.outcome_message = WIN_MESSAGE if outcome == "PLAYER_WIN" else LOSS_MESSAGE
        st.phase = "BATTLE_OVER"
        st.headline = st.outcome_message
        self.logger.info("BattleOver", outcome=outcome, turns=st.turn)

    def _say(self, st: BattleState, text: str, *, headline: Optional[str] = None):
        st.log.append(text)
        st.headline = headline or text

    def _defer(self, task: Optional[Callable[[], None]]):
        if task is None:
            return
        if self.scheduler is None:
            task()
            return
        # only the most recently scheduled transition may fire
        self._token += 1
        token = self._token
        label = getattr(task, "__name__", "transition")

        def fire():
            if token != self._token or self._pending is None:
                return
            self._pending = None
            task()
        self._pending = self.scheduler.schedule(fire, label=label)

    def _notify(self) -> BattleView:
        view = self.view()
        for fn in list(self._listeners):
            fn(view)
        return view

__all__ = ["BattleEngine", "BattleState", "BattleView", "CombatantView",
           "OPENING_HEADLINE", "WIN_MESSAGE", "LOSS_MESSAGE"]
