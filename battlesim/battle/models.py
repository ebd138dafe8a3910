"""Battle data model: moves, stat blocks and combatants.

Moves and stat blocks are immutable values. A Combatant's only mutable battle
field is ``current_hp``; everything else is fixed once the roster is handed in.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Union

Side = Literal["player", "opponent"]
Phase = Literal["PLAYER_CHOOSING", "ACTION_RESOLVING", "OPPONENT_CHOOSING", "FAINT_HANDLING", "BATTLE_OVER"]
Outcome = Literal["ONGOING", "PLAYER_WIN", "OPPONENT_WIN"]

MAX_MOVES = 4

Power = Union[int, float, str, None]

@dataclass(frozen=True)
class Move:
    name: str
    power: Power = 0
    category: str = "physical"  # physical | special

    @property
    def is_special(self) -> bool:
        return str(self.category).lower() == "special"

STRUGGLE = Move(name="Struggle", power=50, category="physical")

@dataclass(frozen=True)
class StatBlock:
    max_hp: int
    attack: int
    defense: int
    special_attack: int
    special_defense: int

@dataclass(frozen=True)
class MissSignal:
    """Damage could not be computed; the move is reported as missed."""
    reason: str

@dataclass(eq=False)
class Combatant:
    name: str
    level: int
    stats: StatBlock
    moves: List[Move] = field(default_factory=list)
    sprite: Any = None  # opaque, passed through to the presentation layer
    current_hp: Optional[int] = None  # lazily initialized to max HP
    slot: int = -1  # roster index, assigned when the team is built

    def __post_init__(self):
        max_hp = int(self.stats.max_hp)
        if self.current_hp is None or self.current_hp > max_hp:
            self.current_hp = max_hp
        self.current_hp = max(0, int(self.current_hp))
        if len(self.moves) > MAX_MOVES:
            self.moves = self.moves[:MAX_MOVES]

    @property
    def max_hp(self) -> int:
        return int(self.stats.max_hp)

    def is_fainted(self) -> bool:
        return (self.current_hp or 0) <= 0

    def take_damage(self, amount: int) -> int:
        """Subtract ``amount`` and return the HP actually lost (health floors at 0)."""
        before = self.current_hp or 0
        self.current_hp = max(0, min(self.max_hp, before - max(0, int(amount))))
        return before - self.current_hp

__all__ = ["Side", "Phase", "Outcome", "Move", "STRUGGLE", "StatBlock", "MissSignal", "Combatant", "MAX_MOVES"]
