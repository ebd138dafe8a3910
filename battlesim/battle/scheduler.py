"""Cooperative delay queue for battle transitions.

Nothing here runs on a thread. Time only moves when the owner calls
:meth:`BattleScheduler.advance` (tests use virtual time) or
:meth:`BattleScheduler.run_until_idle` with a real ``sleep`` (the terminal UI).
Tasks fire in the order they were scheduled: a task never becomes due before
one scheduled ahead of it, even with a shorter delay.
"""
from __future__ import annotations
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional
from battlesim.core.errors import IllegalActionError
from battlesim.core.logging import logger

@dataclass(order=True)
class ScheduledTask:
    due: float
    seq: int
    label: str = field(compare=False, default="")
    callback: Callable[[], None] = field(compare=False, default=lambda: None)
    cancelled: bool = field(compare=False, default=False)

    def cancel(self):
        self.cancelled = True

class BattleScheduler:
    def __init__(self, delay: float = 2.0):
        self.delay = delay
        self.now = 0.0
        self._queue: List[ScheduledTask] = []
        self._seq = itertools.count()
        self._last_due = 0.0
        self._closed = False

    @property
    def pending(self) -> bool:
        return any(not t.cancelled for t in self._queue)

    @property
    def closed(self) -> bool:
        return self._closed

    def next_due(self) -> Optional[float]:
        live = [t.due for t in self._queue if not t.cancelled]
        return min(live) if live else None

    def schedule(self, callback: Callable[[], None], *, delay: Optional[float] = None, label: str = "") -> ScheduledTask:
        if self._closed:
            raise IllegalActionError("schedule", "scheduler was cancelled")
        wait = self.delay if delay is None else max(0.0, delay)
        due = max(self.now + wait, self._last_due)
        self._last_due = due
        task = ScheduledTask(due=due, seq=next(self._seq), label=label, callback=callback)
        heapq.heappush(self._queue, task)
        logger.debug("TaskScheduled", label=label, due=f"{due:.2f}")
        return task

    def advance(self, dt: float) -> int:
        """Move the clock forward by ``dt`` and fire every task that became due.

        Tasks scheduled by a callback fire in the same call if they fall inside
        the window. Returns the number of tasks fired.
        """
        target = self.now + max(0.0, dt)
        fired = 0
        while self._queue and self._queue[0].due <= target:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self.now = task.due
            logger.debug("TaskFired", label=task.label, at=f"{self.now:.2f}")
            task.callback()
            fired += 1
            if self._closed:
                break
        self.now = max(self.now, target)
        return fired

    def run_until_idle(self, sleep: Optional[Callable[[float], None]] = None) -> int:
        """Fire pending tasks one after another, sleeping out each delay if ``sleep`` is given."""
        fired = 0
        while True:
            due = self.next_due()
            if due is None:
                return fired
            wait = max(0.0, due - self.now)
            if sleep and wait > 0:
                sleep(wait)
            fired += self.advance(wait)

    def cancel_all(self) -> int:
        live = [t for t in self._queue if not t.cancelled]
        for t in live:
            t.cancel()
            logger.debug("TaskCancelled", label=t.label)
        self._queue.clear()
        self._last_due = self.now
        return len(live)

    def close(self):
        """Cancel everything and refuse new work; used when a battle is abandoned."""
        self.cancel_all()
        self._closed = True

__all__ = ["BattleScheduler", "ScheduledTask"]
