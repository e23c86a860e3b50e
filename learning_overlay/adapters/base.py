"""Platform adapter contract and the page abstractions it works against.

WHY: Every streaming site puts its <video> element, its player container,
and its own subtitle layer in a different place, and serves subtitles in
its own format. Shared code (session, sync loop, renderers) must not know
which site it is running on. Each site is therefore one subclass of
BaseAdapter, picked once per session.

HOW: The page is reached only through three small protocols (Page,
ElementHandle, VideoHandle) so adapters work with any host (a browser
bridge, a headless driver, or the in-memory fakes used by the tests).
BaseAdapter implements the whole contract from declarative class
attributes: ordered selector lists, the subtitle format, and the URL
patterns the host should watch for subtitle downloads. Subclasses
normally only set those attributes.

RULES:
- Selector lists are ordered fallbacks; the first match wins
- The cached video handle is re-validated with page.contains() on every
  access and re-queried when detached
- Playback pass-throughs are safe with no video: they no-op or return
  neutral defaults (0.0 time, rate 1.0, not playing)
- hide/show native subtitles are symmetric: show restores exactly the
  style text hide replaced, on the same element, and then forgets it
- intercept_subtitles registers with the channel at most once per adapter
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, List, Optional, Protocol, Tuple

from learning_overlay.channel import SubtitleChannel, SubtitleMessage, Subscription
from learning_overlay.core.ir import Segment
from learning_overlay.parsers import parse_subtitles

logger = logging.getLogger(__name__)

SegmentsCallback = Callable[[List[Segment]], None]

# HTMLMediaElement.HAVE_CURRENT_DATA
READY_STATE_CURRENT_DATA = 2

HIDDEN_STYLE = "opacity: 0; visibility: hidden;"


# ---------------------------------------------------------------------------
# Page protocols
# ---------------------------------------------------------------------------


class ElementHandle(Protocol):
    """A page element. ``style`` is the inline CSS text (read/write)."""

    style: str

    @property
    def parent(self) -> Optional[ElementHandle]: ...

    def get_attribute(self, name: str) -> Optional[str]: ...


class VideoHandle(ElementHandle, Protocol):
    """A media element exposing the HTMLMediaElement playback surface."""

    current_time: float
    playback_rate: float

    @property
    def duration(self) -> float: ...

    @property
    def paused(self) -> bool: ...

    @property
    def ready_state(self) -> int: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...


class Page(Protocol):
    """The document the adapter inspects."""

    def query_selector(self, selector: str) -> Optional[ElementHandle]: ...

    def query_selector_all(self, selector: str) -> List[ElementHandle]: ...

    def contains(self, element: ElementHandle) -> bool: ...


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class BaseAdapter(ABC):
    """Abstract base for all streaming-platform adapters.

    To add a new streaming source:
    1. Create a new file in adapters/
    2. Subclass BaseAdapter, implement ``name`` and set the selector,
       format, and capture-pattern attributes
    3. Register it in ADAPTERS and add a detection rule in
       adapters/__init__.py
    """

    platform: ClassVar[str] = ""
    """Registry key, also the platform tag on SubtitleMessages."""

    video_selectors: ClassVar[Tuple[str, ...]] = ("video",)
    container_selectors: ClassVar[Tuple[str, ...]] = ()
    native_subtitle_selectors: ClassVar[Tuple[str, ...]] = ()
    subtitle_format: ClassVar[str] = "webvtt"
    capture_patterns: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, page: Page) -> None:
        self.page = page
        self.subtitles: List[Segment] = []
        self._video: Optional[VideoHandle] = None
        self._callback: Optional[SegmentsCallback] = None
        self._subscription: Optional[Subscription] = None
        self._hidden_element: Optional[ElementHandle] = None
        self._saved_style: Optional[str] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable platform name, e.g. 'Netflix'."""

    # ------------------------------------------------------------------
    # Element discovery
    # ------------------------------------------------------------------

    def _first_match(self, selectors: Tuple[str, ...]) -> Optional[ElementHandle]:
        for selector in selectors:
            element = self.page.query_selector(selector)
            if element is not None:
                return element
        return None

    def get_video_element(self) -> Optional[VideoHandle]:
        """Return the live video handle, re-querying if the cached one detached."""
        if self._video is not None and self.page.contains(self._video):
            return self._video
        self._video = self._first_match(self.video_selectors)  # type: ignore[assignment]
        return self._video

    def get_video_container(self) -> Optional[ElementHandle]:
        """Element the overlay is attached to; falls back to the video's parent."""
        container = self._first_match(self.container_selectors)
        if container is not None:
            return container
        video = self.get_video_element()
        return video.parent if video is not None else None

    def is_video_ready(self) -> bool:
        video = self.get_video_element()
        return video is not None and video.ready_state >= READY_STATE_CURRENT_DATA

    def find_native_subtitle_container(self) -> Optional[ElementHandle]:
        return self._first_match(self.native_subtitle_selectors)

    # ------------------------------------------------------------------
    # Subtitle acquisition
    # ------------------------------------------------------------------

    async def intercept_subtitles(
        self,
        on_segments: SegmentsCallback,
        channel: SubtitleChannel,
    ) -> Subscription:
        """Deliver parsed subtitles to on_segments as payloads arrive.

        WHY: Subtitle files arrive whenever the player fetches them: at
        start, on track change, on seek into a new chunk. So delivery is a
        stream of full replacements, not a one-shot result.

        HOW: Registers this adapter's platform with the channel once.
        Calling again only swaps the callback; the existing subscription
        is returned.

        Returns:
            The subscription; the owner cancels it on teardown.
        """
        self._callback = on_segments
        if self._subscription is None or not self._subscription.active:
            self._subscription = channel.subscribe(
                self.platform, self._on_message, patterns=self.capture_patterns,
            )
        return self._subscription

    def _on_message(self, message: SubtitleMessage) -> None:
        segments = self.parse_payload(message.data, message.format)
        logger.info(
            "%s: received %d subtitle segments%s",
            self.name, len(segments), f" from {message.url}" if message.url else "",
        )
        self.subtitles = segments
        if self._callback is not None:
            self._callback(segments)

    def parse_payload(self, data: str, fmt: Optional[str] = None) -> List[Segment]:
        return parse_subtitles(data, fmt or self.subtitle_format)

    # ------------------------------------------------------------------
    # Native subtitle layer
    # ------------------------------------------------------------------

    def hide_native_subtitles(self) -> bool:
        """Hide the platform's own subtitle layer.

        Returns:
            True if a container was found and hidden (or already hidden).
        """
        if self._hidden_element is not None and self.page.contains(self._hidden_element):
            return True
        container = self.find_native_subtitle_container()
        if container is None:
            return False
        self._hidden_element = container
        self._saved_style = container.style
        container.style = f"{container.style.rstrip()} {HIDDEN_STYLE}".strip()
        return True

    def show_native_subtitles(self) -> None:
        """Undo hide_native_subtitles exactly; no-op if nothing was hidden."""
        element, saved = self._hidden_element, self._saved_style
        self._hidden_element = None
        self._saved_style = None
        if element is None or saved is None:
            return
        if self.page.contains(element):
            element.style = saved

    # ------------------------------------------------------------------
    # Playback controls
    # ------------------------------------------------------------------

    def get_current_time(self) -> float:
        video = self.get_video_element()
        return float(video.current_time) if video is not None else 0.0

    def get_duration(self) -> float:
        video = self.get_video_element()
        if video is None:
            return 0.0
        duration = video.duration
        # NaN until metadata loads
        return float(duration) if duration == duration else 0.0

    def play(self) -> None:
        video = self.get_video_element()
        if video is not None:
            video.play()

    def pause(self) -> None:
        video = self.get_video_element()
        if video is not None:
            video.pause()

    def is_playing(self) -> bool:
        video = self.get_video_element()
        return video is not None and not video.paused

    def seek(self, seconds: float) -> None:
        video = self.get_video_element()
        if video is not None:
            video.current_time = max(0.0, seconds)

    def skip(self, seconds: float) -> None:
        """Skip forward (positive) or back (negative), clamped at 0."""
        video = self.get_video_element()
        if video is not None:
            video.current_time = max(0.0, video.current_time + seconds)

    def set_playback_rate(self, rate: float) -> None:
        video = self.get_video_element()
        if video is not None:
            video.playback_rate = rate

    def get_playback_rate(self) -> float:
        video = self.get_video_element()
        return float(video.playback_rate) if video is not None else 1.0

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def destroy(self) -> None:
        """Restore native subtitles and release the session's references."""
        self.show_native_subtitles()
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._callback = None
        self._video = None
        self.subtitles = []
