"""
Timer scheduling for the notification engine.

The engine needs two kinds of timers:
- One-shot timers (auto-hide a notification after its duration)
- A periodic timer (the retention sweep)

Design decisions:
- Delays are in milliseconds, like notification durations
- Timer callbacks run on the event loop thread, never in parallel with store
  mutations
- A failing callback is logged and never kills the periodic timer
- The scheduler tracks pending timers so ``cancel_all`` can stop everything

Two implementations are provided:
- AsyncioScheduler: real timers on an asyncio event loop
- ManualScheduler: a virtual clock advanced explicitly (tests, demos)
"""

import asyncio
import heapq
import itertools
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger("notification_scheduler")

TimerCallback = Callable[[], None]


def _run_safely(callback: TimerCallback, kind: str) -> None:
    try:
        callback()
    except Exception as e:
        logger.error(f"{kind} timer callback raised: {e}")


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """What the engine needs from a timer facility."""

    def call_later(self, delay_ms: int, callback: TimerCallback) -> Optional[TimerHandle]:
        ...

    def call_every(self, interval_ms: int, callback: TimerCallback) -> Optional[TimerHandle]:
        ...

    def cancel_all(self) -> int:
        ...


# =============================================================================
# asyncio
# =============================================================================

class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop.

    If no loop is given, the running loop is used at scheduling time. When
    there is no running loop the timer cannot be scheduled; this is logged
    and None is returned rather than raising into the caller.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._handles: set[asyncio.TimerHandle] = set()
        self._tasks: set[asyncio.Task] = set()

    def _get_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def call_later(self, delay_ms: int, callback: TimerCallback) -> Optional[asyncio.TimerHandle]:
        loop = self._get_loop()
        if loop is None:
            logger.warning(f"No running event loop, dropping {delay_ms}ms timer")
            return None

        handle: Optional[asyncio.TimerHandle] = None

        def fire() -> None:
            self._handles.discard(handle)
            _run_safely(callback, "One-shot")

        handle = loop.call_later(delay_ms / 1000, fire)
        self._handles.add(handle)
        return handle

    def call_every(self, interval_ms: int, callback: TimerCallback) -> Optional[asyncio.Task]:
        loop = self._get_loop()
        if loop is None:
            logger.warning(f"No running event loop, dropping {interval_ms}ms periodic timer")
            return None

        async def tick() -> None:
            while True:
                await asyncio.sleep(interval_ms / 1000)
                _run_safely(callback, "Periodic")

        task = loop.create_task(tick())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending_count(self) -> int:
        return len(self._handles) + len(self._tasks)

    def cancel_all(self) -> int:
        """Cancel every pending timer. Returns how many were cancelled."""
        cancelled = 0
        for handle in list(self._handles):
            handle.cancel()
            cancelled += 1
        self._handles.clear()
        for task in list(self._tasks):
            task.cancel()
            cancelled += 1
        self._tasks.clear()
        return cancelled


# =============================================================================
# Virtual clock
# =============================================================================

class _ManualTimer:
    def __init__(self, scheduler: "ManualScheduler", due_ms: int, callback: TimerCallback,
                 interval_ms: Optional[int] = None):
        self.scheduler = scheduler
        self.due_ms = due_ms
        self.callback = callback
        self.interval_ms = interval_ms
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by a virtual clock.

    Nothing fires until ``advance`` is called. Timers due at the same instant
    fire in the order they were scheduled.

    Example:
        scheduler = ManualScheduler()
        scheduler.call_later(1000, lambda: print("fired"))
        scheduler.advance(999)   # nothing
        scheduler.advance(1)     # fired
    """

    def __init__(self):
        self.now_ms = 0
        self._queue: list[tuple[int, int, _ManualTimer]] = []
        self._sequence = itertools.count()

    def _push(self, timer: _ManualTimer) -> None:
        heapq.heappush(self._queue, (timer.due_ms, next(self._sequence), timer))

    def call_later(self, delay_ms: int, callback: TimerCallback) -> _ManualTimer:
        timer = _ManualTimer(self, self.now_ms + delay_ms, callback)
        self._push(timer)
        return timer

    def call_every(self, interval_ms: int, callback: TimerCallback) -> _ManualTimer:
        timer = _ManualTimer(self, self.now_ms + interval_ms, callback, interval_ms)
        self._push(timer)
        return timer

    def advance(self, ms: int) -> int:
        """
        Move the clock forward, firing every timer that comes due.

        Returns the number of callbacks that ran.
        """
        target = self.now_ms + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now_ms = due_ms
            if timer.interval_ms is not None:
                timer.due_ms = due_ms + timer.interval_ms
                self._push(timer)
            _run_safely(timer.callback, "Periodic" if timer.interval_ms else "One-shot")
            fired += 1
        self.now_ms = target
        return fired

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def cancel_all(self) -> int:
        cancelled = self.pending_count
        for _, _, timer in self._queue:
            timer.cancel()
        self._queue.clear()
        return cancelled
