"""Event-loop timers for page controllers.

Both timers are bound to the running asyncio loop and must be stopped (or a
debouncer flushed) from the page's cleanup so nothing fires after the router
has moved on.
"""
from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from apps.common import get_logger

logger = get_logger(__name__).bind(component="storefront", layer="timers")

Callback = Callable[..., Union[None, Awaitable[None]]]


async def _invoke(callback: Callback, *args: Any) -> None:
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class Interval:
    """Calls ``callback`` every ``period`` seconds until stopped."""

    def __init__(self, period: float, callback: Callback):
        self.period = period
        self.callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._run())

    def restart(self) -> None:
        self.start()

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.period)
            try:
                await _invoke(self.callback)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Interval callback failed")


class Debouncer:
    """Runs ``callback`` once, ``delay`` seconds after the last ``call``."""

    def __init__(self, delay: float, callback: Callback):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.Task] = None
        self._args: tuple = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None and not self._handle.done()

    def call(self, *args: Any) -> None:
        self.cancel()
        self._args = args
        self._handle = asyncio.get_running_loop().create_task(self._fire_later())

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def flush(self) -> None:
        """Run a pending call now instead of waiting out the delay."""
        if self.pending:
            self.cancel()
            await _invoke(self.callback, *self._args)

    async def _fire_later(self) -> None:
        await asyncio.sleep(self.delay)
        self._handle = None
        await _invoke(self.callback, *self._args)
