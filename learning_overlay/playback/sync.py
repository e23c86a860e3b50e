"""Playback synchronization loop.

WHY: The overlay must show the subtitle matching the video's current
position, and must not redo rendering work on every tick while the same
line stays on screen.

HOW: A single state variable, the active segment or None. Every tick
reads the playback position, scans the segments in input order for the
first one containing it, and compares the result with the previous active
segment by value ((start_time, text)), not by index. on_change fires only
when that value changes. start() runs tick() on a fixed asyncio cadence;
stop() cancels it.

RULES:
- Active = first segment in input order with start <= t <= end
- At a shared boundary (a ends where b starts) the earlier segment in
  input order wins, e.g. [(0,2,"a"), (2,4,"b")] at t=2 gives "a"
- set_segments() replaces the whole set; it never merges
- A failing time source or callback is logged; the loop degrades to
  "no active segment" and keeps running
- stop() is idempotent; a stopped loop holds no task
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from learning_overlay.config import SYNC_TICK_INTERVAL_S
from learning_overlay.core.ir import Segment

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Optional[Segment], float], None]


def find_active_segment(segments: Sequence[Segment], t: float) -> Optional[Segment]:
    """First segment (input order) whose closed interval contains t."""
    for segment in segments:
        if segment.start_time <= t <= segment.end_time:
            return segment
    return None


class SyncLoop:
    """Maps playback position to the active segment on a fixed cadence.

    Args:
        time_source: Returns the current playback position in seconds.
        on_change: Called with (active_segment_or_None, t) on every change.
        interval: Seconds between ticks (default 100ms).
    """

    def __init__(
        self,
        time_source: Callable[[], float],
        on_change: ChangeCallback,
        interval: float = SYNC_TICK_INTERVAL_S,
    ) -> None:
        self._time_source = time_source
        self._on_change = on_change
        self.interval = interval
        self._segments: List[Segment] = []
        self._active: Optional[Segment] = None
        self._task: Optional[asyncio.Task] = None
        self._time_failing = False

    @property
    def active_segment(self) -> Optional[Segment]:
        return self._active

    @property
    def segments(self) -> List[Segment]:
        return list(self._segments)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_segments(self, segments: Sequence[Segment]) -> None:
        self._segments = list(segments)

    def tick(self) -> Optional[Segment]:
        """Run one synchronization step and return the active segment."""
        try:
            t = float(self._time_source())
        except Exception:
            # Logged once per outage, not once per tick
            if not self._time_failing:
                logger.exception("Playback position unavailable")
            self._time_failing = True
            t = None
        else:
            if self._time_failing:
                logger.info("Playback position available again")
            self._time_failing = False

        active = find_active_segment(self._segments, t) if t is not None else None
        previous_key = self._active.key if self._active is not None else None
        current_key = active.key if active is not None else None
        if current_key == previous_key:
            return self._active

        self._active = active
        try:
            self._on_change(active, t if t is not None else 0.0)
        except Exception:
            logger.exception("Active-segment callback failed")
        return active

    async def _run(self) -> None:
        while True:
            self.tick()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Start ticking on the running event loop (no-op if already running)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
