"""
Scheduler: delayed, cancellable callbacks plus the clock that timestamps chunks.

Implementations:
- AsyncioScheduler: host event loop timers (loop.call_later), wall-clock UTC time.
- VirtualScheduler: simulated clock; nothing fires until advance() moves time forward.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable


class Scheduler(ABC):
    """One handle per scheduled callback. cancel() on a fired or cancelled handle is a no-op."""

    @abstractmethod
    def now(self) -> datetime:
        """Current instant (timezone-aware, UTC)."""
        ...

    @abstractmethod
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Run callback once after delay_ms. Returns a handle for cancel()."""
        ...

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        ...


class AsyncioScheduler(Scheduler):
    """
    Timers on the asyncio event loop. Callbacks run on the loop thread, one at a time,
    between caption events; schedule() must be called from that loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(max(0, delay_ms) / 1000.0, callback)

    def cancel(self, handle: asyncio.TimerHandle | None) -> None:
        if handle is not None:
            handle.cancel()


class VirtualTimer:
    __slots__ = ("due_ms", "callback", "cancelled", "fired")

    def __init__(self, due_ms: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class VirtualScheduler(Scheduler):
    """
    Simulated clock for deterministic tests.

    advance(ms) fires due timers in (due time, schedule order); the clock reads each
    timer's due time while its callback runs, so timestamps taken inside a callback are exact.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._start = start or datetime(1970, 1, 1, tzinfo=timezone.utc)
        self._elapsed_ms = 0
        self._queue: list[tuple[int, int, VirtualTimer]] = []
        self._seq = itertools.count()

    @property
    def elapsed_ms(self) -> int:
        return self._elapsed_ms

    def now(self) -> datetime:
        return self._start + timedelta(milliseconds=self._elapsed_ms)

    def at(self, ms: int) -> datetime:
        """Instant ms after the simulated start."""
        return self._start + timedelta(milliseconds=ms)

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self._elapsed_ms + max(0, delay_ms), callback)
        heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))
        return timer

    def cancel(self, handle: VirtualTimer | None) -> None:
        if handle is not None:
            handle.cancelled = True

    def pending(self) -> int:
        """Number of timers still armed."""
        return sum(1 for _, _, timer in self._queue if timer.active)

    def advance(self, ms: int) -> None:
        if ms < 0:
            raise ValueError("cannot move the clock backwards")
        target = self._elapsed_ms + ms
        while self._queue and self._queue[0][0] <= target:
            _, _, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self._elapsed_ms = timer.due_ms
            timer.fired = True
            timer.callback()
        self._elapsed_ms = target

    def advance_to(self, ms: int) -> None:
        """Move the clock to ms after start."""
        self.advance(ms - self._elapsed_ms)
