"""
Error classes for clearer exception sources.
"""
from __future__ import annotations

class BattleSimError(Exception):
    pass

class InvalidRosterError(BattleSimError):
    def __init__(self, side: str):
        super().__init__(f"Cannot start battle: {side} roster is empty")
        self.side = side

class IllegalActionError(BattleSimError):
    def __init__(self, action: str, reason: str):
        super().__init__(f"Action '{action}' rejected: {reason}")
        self.action = action
        self.reason = reason

class RosterFormatError(BattleSimError):
    def __init__(self, entry: str, detail: str):
        super().__init__(f"Malformed roster entry {entry}: {detail}")
        self.entry = entry
        self.detail = detail
