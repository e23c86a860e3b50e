"""Bounded, cancellable waits for page conditions.

WHY: Players build their DOM lazily: the <video> element and the native
subtitle layer can appear seconds after the page loads. Watching for them
must end when the thing appears, when the wait times out, or when the
session is torn down, rather than observing the page forever.

HOW: wait_for() polls a predicate on an asyncio sleep cadence until it is
true or the timeout elapses. Watch wraps wait_for() in a task with an
on_found callback and an explicit cancel(), giving the session a handle
it can drop on teardown.

RULES:
- The predicate is checked once immediately, before any sleep
- A predicate that raises counts as "not yet" (logged at debug level)
- Watch.cancel() is idempotent and safe after completion
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def _check(predicate: Callable[[], bool]) -> bool:
    try:
        return bool(predicate())
    except Exception:
        logger.debug("Wait predicate raised; treating as not ready", exc_info=True)
        return False


async def wait_for(
    predicate: Callable[[], bool],
    timeout: float,
    interval: float = 0.25,
) -> bool:
    """Poll predicate until it is true or timeout seconds pass.

    Returns:
        True if the predicate became true, False on timeout.
    """
    deadline = time.monotonic() + timeout
    while True:
        if _check(predicate):
            return True
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return False
        await asyncio.sleep(min(interval, remaining))


class Watch:
    """A running wait_for() with a callback, cancellable by its owner."""

    def __init__(
        self,
        predicate: Callable[[], bool],
        on_found: Callable[[], None],
        timeout: float,
        interval: float = 0.25,
        label: str = "condition",
    ) -> None:
        self.label = label
        self.found = False
        self._on_found = on_found
        self._task: Optional[asyncio.Task] = asyncio.create_task(
            self._run(predicate, timeout, interval)
        )

    async def _run(self, predicate: Callable[[], bool], timeout: float, interval: float) -> bool:
        if await wait_for(predicate, timeout, interval):
            self.found = True
            self._on_found()
            return True
        logger.info("Gave up waiting for %s after %.1fs", self.label, timeout)
        return False

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()

    async def wait(self) -> bool:
        """Wait for the watch to finish; True if the condition was met."""
        task = self._task
        if task is None:
            return self.found
        await asyncio.wait({task})
        if task.cancelled():
            return False
        return task.result()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
