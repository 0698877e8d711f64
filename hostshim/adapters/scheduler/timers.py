"""Asyncio timer adapter.

Implements the real arm/cancel primitives a SchedulingPolicy starts
with: one-shot timers on the running asyncio event loop.
"""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class AsyncioTimerScheduler:
    """Arms one-shot callbacks with loop.call_later."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        """Initialize timer scheduler.

        Args:
            loop: Event loop to arm timers on. Defaults to the loop running
                at arm time.
        """
        self._loop = loop
        self._active: set[asyncio.TimerHandle] = set()

    @property
    def active_count(self) -> int:
        """Number of timers armed and not yet fired or cancelled."""
        return len(self._active)

    def arm(self, delay_seconds: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        """Arm callback to run once after delay_seconds.

        Raises:
            RuntimeError: If no loop was given and none is running.
        """
        loop = self._loop or asyncio.get_running_loop()
        handle: asyncio.TimerHandle

        def _fire() -> None:
            self._active.discard(handle)
            callback()

        handle = loop.call_later(delay_seconds, _fire)
        self._active.add(handle)
        logger.debug(f"Armed timer for {delay_seconds:.3f}s")
        return handle

    def cancel(self, handle: asyncio.TimerHandle | None) -> None:
        """Cancel a timer returned by arm(). None is ignored."""
        if handle is None:
            return
        handle.cancel()
        self._active.discard(handle)
        logger.debug("Cancelled timer")

    def cancel_all(self) -> None:
        for handle in list(self._active):
            self.cancel(handle)
