"""
Battle system package.
- models.py (Combatant, Move, StatBlock, MissSignal)
- mechanics.py (damage calc)
- ai.py (opponent move selection)
- party.py (teams, faint cascade)
- scheduler.py (delayed transitions)
- engine.py (turn state machine)
- service.py (presentation commands)
"""
from .engine import BattleEngine, BattleView
from .service import BattleService
__all__ = ["BattleEngine", "BattleView", "BattleService"]
