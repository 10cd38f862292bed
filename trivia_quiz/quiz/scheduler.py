from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class Handle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Handle: ...


class TimerHandle:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class TickScheduler:
    """Deferred calls that run when the render loop polls ``run_due``.

    Streamlit reruns the script instead of running an event loop, so the
    page calls ``run_due`` on every pass.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._pending: List[TimerHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._clock() + delay, callback)
        self._pending.append(handle)
        return handle

    def next_due(self) -> Optional[float]:
        live = [handle.due for handle in self._pending if not handle.cancelled]
        return min(live) if live else None

    def run_due(self) -> int:
        """Fire every call whose deadline has passed, earliest first.

        A failing callback does not stop the rest; the first error is
        re-raised once all due calls have run.
        """

        now = self._clock()
        self._pending = [h for h in self._pending if not h.cancelled]
        due = sorted((h for h in self._pending if h.due <= now), key=lambda item: item.due)
        ran = 0
        error: Optional[Exception] = None
        for handle in due:
            self._pending.remove(handle)
            if handle.cancelled:
                continue
            ran += 1
            try:
                handle.callback()
            except Exception as exc:  # pylint: disable=broad-except
                logger.exception("Scheduled callback failed")
                if error is None:
                    error = exc
        if error is not None:
            raise error
        return ran


class AsyncioScheduler:
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)
