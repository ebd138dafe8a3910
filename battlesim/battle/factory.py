"""Factory helpers for constructing Combatant instances from roster data.

The team-selection screen hands rosters over as plain mappings shaped like::

    {"name": "pikachu", "level": 50,
     "sprites": {"front_default": "https://..."},
     "stats": {"hp": 95, "attack": 75, "defense": 60,
               "specialAttack": 70, "specialDefense": 70},
     "selectedMoves": [{"name": "thunderbolt", "power": 90, "type": "special"}]}

snake_case keys (``special_attack``, ``selected_moves``, ``category``) are
accepted as well. The sprite reference (``sprites`` or ``sprite``) is kept
exactly as given. Stat values are passed through untouched; a malformed value
surfaces later as a missed move, not as an error here.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Mapping
from battlesim.core.errors import RosterFormatError
from .models import Combatant, MAX_MOVES, Move, StatBlock

_STAT_KEYS = {
    "max_hp": ("hp", "max_hp", "maxHealth"),
    "attack": ("attack",),
    "defense": ("defense",),
    "special_attack": ("specialAttack", "special_attack", "sp_atk"),
    "special_defense": ("specialDefense", "special_defense", "sp_def"),
}

def _pick(data: Mapping[str, Any], keys: Iterable[str], entry: str, what: str) -> Any:
    for k in keys:
        if k in data:
            return data[k]
    raise RosterFormatError(entry, f"missing {what}")

def move_from_dict(data: Mapping[str, Any]) -> Move:
    if "name" not in data:
        raise RosterFormatError(repr(dict(data)), "move without a name")
    category = data.get("category") or data.get("type") or "physical"
    return Move(name=str(data["name"]), power=data.get("power"), category=str(category))

def combatant_from_dict(data: Mapping[str, Any]) -> Combatant:
    entry = str(data.get("name", "<unnamed>"))
    name = _pick(data, ("name",), entry, "name")
    level = _pick(data, ("level",), entry, "level")
    raw_stats = _pick(data, ("stats",), entry, "stats")
    if not isinstance(raw_stats, Mapping):
        raise RosterFormatError(entry, "stats must be a mapping")
    stats: Dict[str, Any] = {field: _pick(raw_stats, keys, entry, f"stat {keys[0]}") for field, keys in _STAT_KEYS.items()}
    try:
        max_hp = int(stats["max_hp"])
    except (TypeError, ValueError):
        raise RosterFormatError(entry, f"hp must be an integer, got {stats['max_hp']!r}") from None
    if max_hp <= 0:
        raise RosterFormatError(entry, "hp must be positive")
    stats["max_hp"] = max_hp
    raw_moves = data.get("selectedMoves", data.get("selected_moves", data.get("moves", [])))
    moves = [move_from_dict(m) for m in list(raw_moves)[:MAX_MOVES]]
    # handed through as-is; only the presentation layer looks inside
    sprite = data["sprites"] if "sprites" in data else data.get("sprite")
    return Combatant(name=str(name), level=level, stats=StatBlock(**stats), moves=moves, sprite=sprite)

def roster_from_dicts(entries: Iterable[Mapping[str, Any]]) -> List[Combatant]:
    return [combatant_from_dict(e) for e in entries]

__all__ = ["combatant_from_dict", "move_from_dict", "roster_from_dicts"]
