"""
Debounce helper for coalescing rapid repeated provider calls.
"""

import asyncio
import inspect
from typing import Any, Callable

from .logging import get_logger


class Debouncer:
    """Delays calls to ``fn`` and drops all but the most recent one.

    Every call waits ``delay`` seconds before invoking ``fn``. A newer call
    arriving during that wait cancels the pending one, which then resolves to
    ``cancelled_return`` instead of raising. Callers should treat that value
    as "no new data yet".

    ``fn`` may be a plain function or a coroutine function. Only one event
    loop may drive a given instance.
    """

    def __init__(self, fn: Callable, delay: float, cancelled_return: Any = None):
        """Initialize debouncer around fn with a delay in seconds."""
        self.fn = fn
        self.delay = delay
        self.cancelled_return = cancelled_return
        self.logger = get_logger(__name__)
        self._pending = None

    def cancel(self) -> None:
        """Cancel the pending wait, if any."""
        if self._pending is not None:
            self._pending.set()
            self._pending = None

    async def __call__(self, *args, **kwargs):
        self.cancel()

        cancelled = asyncio.Event()
        self._pending = cancelled

        try:
            await asyncio.wait_for(cancelled.wait(), timeout=self.delay)
        except asyncio.TimeoutError:
            pass
        else:
            self.logger.debug(f"Debounced call to {getattr(self.fn, '__name__', self.fn)} superseded")
            return self.cancelled_return

        if self._pending is cancelled:
            self._pending = None

        result = self.fn(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result
