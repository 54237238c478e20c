"""Timer capability used to prune views after a transition window.

Two implementations:

- ``ManualScheduler``: a virtual clock advanced explicitly by the host
  (or by tests).  Callbacks run synchronously inside ``advance()``.
- ``AnyioScheduler``: each timer is a task in a caller-owned anyio task
  group, sleeping inside its own ``CancelScope`` so ``cancel()`` stops it
  before the callback runs.

Callbacks always run on the host's event loop, never on another thread.
"""

import heapq
import itertools
from collections.abc import Callable
from typing import Protocol

import anyio
from anyio.abc import TaskGroup


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled before it fires."""

    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    """Protocol for timer schedulers."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimer:
    """Timer handle returned by ``ManualScheduler``."""

    __slots__ = ("_cancelled", "callback", "when")

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Virtual-clock scheduler.

    Usage::

        scheduler = ManualScheduler()
        scheduler.call_later(0.3, prune)
        scheduler.advance(0.3)  # prune() runs here
    """

    __slots__ = ("_counter", "_queue", "now")

    def __init__(self) -> None:
        self.now = 0.0
        self._counter = itertools.count()
        # (when, sequence, timer); sequence keeps FIFO order for equal deadlines
        self._queue: list[tuple[float, int, ManualTimer]] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.when, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every due timer in deadline order."""
        deadline = self.now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            when, _, timer = heapq.heappop(self._queue)
            self.now = when
            if not timer.cancelled:
                timer.callback()
        self.now = deadline


class AnyioTimer:
    """Timer handle returned by ``AnyioScheduler``."""

    __slots__ = ("_scope",)

    def __init__(self, scope: anyio.CancelScope) -> None:
        self._scope = scope

    def cancel(self) -> None:
        self._scope.cancel()

    @property
    def cancelled(self) -> bool:
        return self._scope.cancel_called


class AnyioScheduler:
    """Schedule callbacks as tasks in an anyio task group.

    Usage::

        async with anyio.create_task_group() as tg:
            router = Router(manifest, scheduler=AnyioScheduler(tg))
            ...
    """

    __slots__ = ("_task_group",)

    def __init__(self, task_group: TaskGroup) -> None:
        self._task_group = task_group

    def call_later(self, delay: float, callback: Callable[[], None]) -> AnyioTimer:
        scope = anyio.CancelScope()
        self._task_group.start_soon(self._run, delay, callback, scope)
        return AnyioTimer(scope)

    @staticmethod
    async def _run(delay: float, callback: Callable[[], None], scope: anyio.CancelScope) -> None:
        with scope:
            await anyio.sleep(delay)
            callback()
