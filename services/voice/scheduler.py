"""
Timer Scheduling

Supersedable timers for the voice session and the live preview. All
callbacks run on the event loop thread.

Usage:
    scheduler = AsyncioScheduler()
    handle = scheduler.call_later(0.1, refresh)
    handle.cancel()
"""

import asyncio
from typing import Callable, Optional, Protocol

from utils.logging import get_logger

logger = get_logger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Scheduler backed by the running asyncio loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class PeriodicTask:
    """
    Re-arming timer built on a Scheduler.

    A failing callback is logged and the task keeps running.
    """

    def __init__(self, scheduler: Scheduler, interval: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self._handle: Optional[TimerHandle] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._schedule()

    def stop(self) -> None:
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self.scheduler.call_later(self.interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if not self._running:
            return
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Periodic callback failed: {e}", exc_info=True)
        if self._running and self._handle is None:
            self._schedule()
