from __future__ import annotations
import math
import re
from numbers import Real
from typing import Optional, Union
from battlesim.battle.models import Combatant, MissSignal, Move, Power

def _finite(value: object) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    f = float(value)
    return f if math.isfinite(f) else None

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

def normalize_power(power: Power) -> Optional[float]:
    """Numeric move power, or None when the value cannot be read as a number.

    Strings keep their leading base-10 integer ("40" and "40.5" both give 40);
    a string without one ("abc", "") is not a number.
    """
    if isinstance(power, str):
        m = _LEADING_INT.match(power)
        return float(int(m.group(1), 10)) if m else None
    return _finite(power)

def stat_pair(move: Move, attacker: Combatant, defender: Combatant) -> tuple[object, object]:
    if move.is_special:
        return attacker.stats.special_attack, defender.stats.special_defense
    return attacker.stats.attack, defender.stats.defense

def compute_damage(move: Move, attacker: Combatant, defender: Combatant) -> Union[int, MissSignal]:
    power = normalize_power(move.power)
    if power is None:
        return MissSignal(f"non-numeric power {move.power!r}")
    raw_atk, raw_def = stat_pair(move, attacker, defender)
    atk, dfn, level = _finite(raw_atk), _finite(raw_def), _finite(attacker.level)
    if atk is None or dfn is None or level is None:
        return MissSignal("non-numeric level or stat")
    base = (((2 * level) / 5 + 2) * power * (atk / max(1.0, dfn))) / 50 + 2
    # round half up, never negative
    return max(0, math.floor(base + 0.5))

__all__ = ["compute_damage", "normalize_power", "stat_pair"]
