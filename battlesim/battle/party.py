"""Teams and the faint cascade.

A Team keeps its roster order for the whole battle. Fainted members stay in the
roster (the switch menu still lists them) but are never selectable again.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Set
from battlesim.battle.models import Combatant

@dataclass
class Team:
    members: List[Combatant]
    active_slot: int = 0
    fainted: Set[int] = field(default_factory=set)

    @classmethod
    def from_roster(cls, roster: Iterable[Combatant]) -> "Team":
        """Copy the roster into battle-owned combatants, slot = roster index, full health."""
        members = [replace(c, moves=list(c.moves), current_hp=c.max_hp, slot=i) for i, c in enumerate(roster)]
        return cls(members)

    def active(self) -> Combatant:
        return self.members[self.active_slot]

    def get(self, slot: int) -> Combatant:
        if slot < 0 or slot >= len(self.members):
            raise IndexError(f"no team member in slot {slot}")
        return self.members[slot]

    def available(self) -> List[Combatant]:
        return [m for m in self.members if m.slot not in self.fainted and not m.is_fainted()]

    def has_available(self) -> bool:
        return bool(self.available())

    def can_switch_to(self, slot: int) -> bool:
        if slot == self.active_slot or slot < 0 or slot >= len(self.members):
            return False
        return slot not in self.fainted and not self.members[slot].is_fainted()

@dataclass(frozen=True)
class FaintResult:
    next_active: Optional[Combatant]
    team_eliminated: bool

def resolve_faint(team: Team, fainted: Combatant) -> FaintResult:
    """Retire ``fainted`` and pick the first remaining member in roster order.

    Does not change ``team.active_slot``; the engine does that when the
    replacement is actually sent out.
    """
    team.fainted.add(fainted.slot)
    remaining = team.available()
    if not remaining:
        return FaintResult(next_active=None, team_eliminated=True)
    return FaintResult(next_active=remaining[0], team_eliminated=False)

__all__ = ["Team", "FaintResult", "resolve_faint"]
