"""Deferred callbacks used to pace assistant prompts.

The LeadCollector never sleeps; it asks a Scheduler to run a callback after
a delay. Production code uses the event loop, tests use ManualScheduler and
advance a virtual clock.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable

log = logging.getLogger("leadbot.scheduler")


class Scheduler(ABC):
    """Runs callbacks after a delay. Scheduled callbacks are never cancelled."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` once, ``delay`` seconds from now."""

    @property
    @abstractmethod
    def pending(self) -> int:
        """Number of callbacks scheduled but not yet run."""


class AsyncioScheduler(Scheduler):
    """Schedules callbacks on the running asyncio event loop."""

    def __init__(self) -> None:
        self._pending = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        loop = asyncio.get_running_loop()
        self._pending += 1

        def _run() -> None:
            self._pending -= 1
            try:
                callback()
            except Exception:
                log.exception("Scheduled callback failed")

        loop.call_later(delay, _run)

    @property
    def pending(self) -> int:
        return self._pending


class ManualScheduler(Scheduler):
    """A virtual clock. Nothing runs until ``advance`` or ``run_all``.

    Callbacks due at the same time run in the order they were scheduled.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), callback))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running everything now due. Returns the count run."""
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now = due
            callback()
            ran += 1
        self.now = target
        return ran

    def run_all(self) -> int:
        """Run every scheduled callback, including ones scheduled meanwhile."""
        ran = 0
        while self._queue:
            due, _, callback = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback()
            ran += 1
        return ran
