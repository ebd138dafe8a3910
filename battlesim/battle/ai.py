from __future__ import annotations
import random
from typing import Optional
from battlesim.battle.models import Combatant, Move, STRUGGLE

class MoveSelector:
    """Opponent AI: a uniformly random pick among the active combatant's moves.

    Pass a seeded ``random.Random`` for reproducible battles.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def select_move(self, active: Combatant) -> Move:
        if not active.moves:
            return STRUGGLE
        return self.rng.choice(active.moves)

__all__ = ["MoveSelector"]
