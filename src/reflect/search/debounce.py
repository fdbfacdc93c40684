"""Trailing debounce timer on top of the asyncio event loop."""

import asyncio
import logging
from collections.abc import Callable

from ..config import DEFAULT_FILTER_DELAY_MS

logger = logging.getLogger(__name__)


class DebounceScheduler:
    """Run an action once input has been quiet for a fixed delay.

    Each call to `schedule` cancels the previously armed timer, so at most
    one action is ever pending. Callbacks fire on the event loop that was
    running when they were scheduled.

    Usage:
        scheduler = DebounceScheduler(delay_ms=300)

        def on_keystroke(text):
            scheduler.schedule(lambda: refresh(text))
    """

    def __init__(
        self,
        delay_ms: int = DEFAULT_FILTER_DELAY_MS,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """Initialize the scheduler.

        Args:
            delay_ms: Default quiet period in milliseconds.
            loop: Event loop to schedule on. Uses the running loop if None.
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        self._delay_ms = delay_ms
        self._loop = loop
        self._timer: asyncio.TimerHandle | None = None
        self._action: Callable[[], None] | None = None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def pending(self) -> bool:
        """True while an action is armed and has not fired yet."""
        return self._timer is not None

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None and not self._loop.is_closed():
            return self._loop
        return asyncio.get_running_loop()

    def schedule(self, action: Callable[[], None], delay_ms: int | None = None) -> None:
        """Arm `action` to run after the quiet period, replacing any pending one.

        Args:
            action: Zero-argument callable.
            delay_ms: Override for this call; uses the configured delay if None.

        Raises:
            ValueError: If the delay is negative.
            RuntimeError: If no loop was given and none is running.
        """
        delay = self._delay_ms if delay_ms is None else delay_ms
        if delay < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay}")
        # A failed schedule() leaves any pending action in place
        loop = self._get_loop()
        self.cancel()

        def fire():
            self._timer = None
            self._action = None
            action()

        self._action = action
        self._timer = loop.call_later(delay / 1000, fire)
        logger.debug("Armed debounce timer for %d ms", delay)

    def cancel(self) -> None:
        """Drop the pending action, if any."""
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        self._action = None
        logger.debug("Cancelled pending debounce timer")

    def flush(self) -> bool:
        """Run the pending action now instead of waiting.

        Returns:
            True if an action was pending and has been run.
        """
        action = self._action
        if action is None:
            return False
        self.cancel()
        action()
        return True
