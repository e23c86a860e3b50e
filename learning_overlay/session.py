"""One overlay session: from page detection to teardown.

WHY: Something has to own the lifetime of everything a playback page
needs (the adapter chosen for the site, its subtitle subscription, the
sync loop, the renderers, the vocabulary cache) and guarantee that all
of it is released exactly once when the user navigates away.

HOW: The platform is detected once from the URL and the matching adapter
is created at construction. start() loads the vocabulary cache, waits a
bounded time for the video element, then subscribes to subtitles, hides
the native subtitle layer (watching for it if it has not appeared yet)
and starts the sync loop. Every subtitle delivery replaces the working
set. Active-segment changes go to whichever renderer the display mode
selects. close() undoes all of it.

RULES:
- Platform dispatch happens once, here; nothing downstream re-dispatches
- Unsupported site or no video within the wait window -> INACTIVE, no error
- Each subtitle delivery is a full replacement of the segment set
- One channel subscription per session, cancelled once in close()
- Native subtitles are hidden only while display_mode is not off
- close() never awaits the network: the last flush runs in the background
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Coroutine, List, Optional, Set, Union

from learning_overlay.adapters import detect_platform, get_adapter
from learning_overlay.adapters.base import BaseAdapter, Page
from learning_overlay.api.client import VocabAPIClient
from learning_overlay.api.models import Translation
from learning_overlay.channel import SubtitleChannel, Subscription
from learning_overlay.config import (
    SYNC_TICK_INTERVAL_S,
    VIDEO_POLL_INTERVAL_S,
    VIDEO_WAIT_TIMEOUT_S,
    DisplayMode,
    OverlayConfig,
)
from learning_overlay.core.ir import Segment, VocabEntry, VocabStatus
from learning_overlay.core.text import clean_word, extract_words
from learning_overlay.playback.sync import SyncLoop
from learning_overlay.renderers.overlay import OverlayRenderer
from learning_overlay.renderers.transcript import TranscriptRenderer
from learning_overlay.vocab.cache import VocabCache
from learning_overlay.vocab.storage import LocalVocabStore
from learning_overlay.waiting import Watch

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    """Lifecycle of an overlay session.

    RULES:
    - idle: constructed, start() not called
    - waiting: looking for the video element
    - active: subtitles subscribed and sync loop running
    - inactive: unsupported site or video never appeared
    - closed: torn down; terminal
    """

    IDLE = "idle"
    WAITING = "waiting"
    ACTIVE = "active"
    INACTIVE = "inactive"
    CLOSED = "closed"


class OverlaySession:
    """Wires adapter, channel, sync loop, renderers, and vocabulary cache.

    Args:
        url: Page URL, used once to pick the platform adapter.
        page: The page the adapter inspects.
        config: Session settings.
        channel: Subtitle channel the host publishes payloads to.
        api: Backend client for sync and lookups (None = offline).
        store: Local vocabulary store (None = no vocabulary tracking).
        user_id: Signed-in identity; enables flushing to the server.
    """

    def __init__(
        self,
        url: str,
        page: Page,
        config: Optional[OverlayConfig] = None,
        channel: Optional[SubtitleChannel] = None,
        api: Optional[VocabAPIClient] = None,
        store: Optional[LocalVocabStore] = None,
        user_id: Optional[str] = None,
        video_timeout: float = VIDEO_WAIT_TIMEOUT_S,
        poll_interval: float = VIDEO_POLL_INTERVAL_S,
        tick_interval: float = SYNC_TICK_INTERVAL_S,
    ) -> None:
        self.config = config or OverlayConfig()
        self.channel = channel or SubtitleChannel()
        self.api = api
        self.platform = detect_platform(url)
        self.adapter: Optional[BaseAdapter] = get_adapter(self.platform, page)
        self.state = SessionState.IDLE
        self.segments: List[Segment] = []
        self.video_timeout = video_timeout
        self.poll_interval = poll_interval

        self.cache: Optional[VocabCache] = None
        if store is not None and self.config.target_language:
            self.cache = VocabCache(store, self.config.target_language, remote=api, user_id=user_id)

        self.overlay = OverlayRenderer(self.get_word_status, self.config.show_word_status)
        self.transcript = TranscriptRenderer(self.get_word_status, self.config.show_word_status)
        self.sync = SyncLoop(self._current_time, self._on_active_change, interval=tick_interval)

        self._subscription: Optional[Subscription] = None
        self._video_watch: Optional[Watch] = None
        self._native_watch: Optional[Watch] = None
        self._background: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def controls(self) -> Optional[BaseAdapter]:
        """Playback control surface (None on unsupported sites)."""
        return self.adapter

    async def start(self) -> SessionState:
        """Bring the session up; returns the resulting state."""
        if self.state is not SessionState.IDLE:
            return self.state
        if self.adapter is None:
            logger.info("No supported platform detected")
            self.state = SessionState.INACTIVE
            return self.state

        logger.info("Detected platform: %s", self.adapter.name)
        if self.cache is not None:
            await self.cache.start()

        self.state = SessionState.WAITING
        self._video_watch = Watch(
            self.adapter.is_video_ready,
            lambda: None,
            timeout=self.video_timeout,
            interval=self.poll_interval,
            label=f"{self.adapter.name} video",
        )
        found = await self._video_watch.wait()
        self._video_watch = None
        if self.state is SessionState.CLOSED:
            return self.state
        if not found:
            logger.warning("Video player not found on %s; session inactive", self.adapter.name)
            self.state = SessionState.INACTIVE
            return self.state

        await self._activate()
        return self.state

    async def _activate(self) -> None:
        logger.info("Video player ready")
        if self.adapter.get_video_container() is None:
            logger.error("Could not find video container on %s", self.adapter.name)

        self._subscription = await self.adapter.intercept_subtitles(self._on_segments, self.channel)
        self._apply_display_mode()
        self.sync.start()
        self.state = SessionState.ACTIVE
        logger.info("Overlay session active on %s", self.adapter.name)

    def close(self) -> None:
        """Tear the session down. Safe to call more than once."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        self.sync.stop()
        for watch in (self._video_watch, self._native_watch):
            if watch is not None:
                watch.cancel()
        self._video_watch = None
        self._native_watch = None
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        if self.adapter is not None:
            self.adapter.destroy()
        if self.cache is not None:
            self.cache.close()
        self.overlay.clear()
        logger.info("Overlay session closed")

    # ------------------------------------------------------------------
    # Subtitles and synchronization
    # ------------------------------------------------------------------

    def _current_time(self) -> float:
        return self.adapter.get_current_time() if self.adapter is not None else 0.0

    def _on_segments(self, segments: List[Segment]) -> None:
        self.segments = list(segments)
        self.sync.set_segments(self.segments)
        self.transcript.set_segments(self.segments)
        self.sync.tick()
        # set_segments() cleared the highlight; an unchanged active line fires no callback
        if self.config.display_mode is DisplayMode.transcript:
            self.transcript.highlight_active(self.sync.active_segment)

        words = extract_words(" ".join(s.text for s in self.segments))
        if words and self.cache is not None:
            self._spawn(self.cache.load_vocab_for_words(words))
        if words and self.api is not None and self.config.target_language:
            self._spawn(self.api.prefetch_translations(
                words, self.config.target_language, self.config.native_language,
            ))

    def _on_active_change(self, segment: Optional[Segment], t: float) -> None:
        mode = self.config.display_mode
        if mode is DisplayMode.overlay:
            self.overlay.update_active(segment)
        elif mode is DisplayMode.transcript:
            self.transcript.highlight_active(segment)

    def _spawn(self, coro: Coroutine) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; skipped %s", coro.__qualname__)
            coro.close()
            return
        task = loop.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    # ------------------------------------------------------------------
    # Display settings
    # ------------------------------------------------------------------

    def set_display_mode(self, mode: Union[DisplayMode, str]) -> None:
        self.config.display_mode = DisplayMode(mode)
        if self.is_active:
            self._apply_display_mode()
            self._on_active_change(self.sync.active_segment, 0.0)

    def _apply_display_mode(self) -> None:
        mode = self.config.display_mode
        self.overlay.set_visible(mode is DisplayMode.overlay)
        self.transcript.set_visible(mode is DisplayMode.transcript)
        if mode is DisplayMode.overlay:
            self.transcript.highlight_active(None)
        else:
            self.overlay.clear()

        if mode is DisplayMode.off:
            if self._native_watch is not None:
                self._native_watch.cancel()
                self._native_watch = None
            self.adapter.show_native_subtitles()
            return

        if self.adapter.hide_native_subtitles() or not self.adapter.native_subtitle_selectors:
            return
        if self._native_watch is None or self._native_watch.done:
            # The platform builds its subtitle layer lazily
            self._native_watch = Watch(
                lambda: self.adapter.find_native_subtitle_container() is not None,
                self.adapter.hide_native_subtitles,
                timeout=self.video_timeout,
                interval=self.poll_interval,
                label=f"{self.adapter.name} subtitle container",
            )

    def set_show_word_status(self, show: bool) -> None:
        self.config.show_word_status = show
        self.overlay.set_show_word_status(show)
        self.transcript.set_show_word_status(show)

    # ------------------------------------------------------------------
    # Vocabulary
    # ------------------------------------------------------------------

    def get_word_status(self, word: str) -> VocabStatus:
        if self.cache is None:
            return VocabStatus.UNKNOWN
        return self.cache.get_status(word)

    def update_word_status(self, word: str, status: Union[VocabStatus, str]) -> Optional[VocabEntry]:
        """Record a status edit and re-render both views."""
        if self.cache is None:
            logger.warning("No target language configured; status for %r not saved", word)
            return None
        entry = self.cache.update_status(word, status)
        self.overlay.refresh()
        self.transcript.refresh()
        return entry

    async def lookup_word(self, word: str) -> Translation:
        """Translation for a clicked word, or the unavailable sentinel."""
        cleaned = clean_word(word)
        if not cleaned or self.api is None or not self.config.target_language:
            return Translation.unavailable()
        return await self.api.translate_word(
            cleaned, self.config.target_language, self.config.native_language,
        )
