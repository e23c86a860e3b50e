"""Subtitle payload channel between the host and platform adapters.

WHY: However a host gets hold of a subtitle file (response capture, a
user-supplied file, a URL it noticed), it hands the raw text to the
engine tagged with the platform it came from. Adapters listen for their
platform. The channel gives that hand-off one owner: each subscription is
registered once and cancelled once, instead of a fresh global listener
piling up every time interception is requested.

HOW: SubtitleChannel keeps one handler list per platform tag. publish()
calls the matching handlers synchronously. subscribe() returns a
Subscription handle whose cancel() removes exactly that handler.
SubtitleFetcher is the optional network path: given a URL the host
noticed, it checks it against the subscribed capture patterns, downloads
it with httpx, and publishes the text.

RULES:
- A handler error is logged and does not reach the publisher
- Subscription.cancel() is idempotent
- SubtitleFetcher never raises on network failure; it logs and returns False
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import httpx

logger = logging.getLogger(__name__)

MessageHandler = Callable[["SubtitleMessage"], None]


@dataclass(frozen=True)
class SubtitleMessage:
    """A raw subtitle payload captured for a platform."""

    platform: str
    data: str
    url: Optional[str] = None
    format: Optional[str] = None
    """Wire format name; None means the receiving adapter's default."""


class Subscription:
    """Handle for one registered handler; cancel() unregisters it."""

    def __init__(self, channel: SubtitleChannel, platform: str, handler: MessageHandler) -> None:
        self._channel = channel
        self.platform = platform
        self.handler = handler
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self._channel._remove(self)


class SubtitleChannel:
    """Platform-tagged publish/subscribe for subtitle payloads."""

    def __init__(self) -> None:
        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._patterns: Dict[str, Tuple[str, ...]] = {}

    def subscribe(
        self,
        platform: str,
        handler: MessageHandler,
        patterns: Sequence[str] = (),
    ) -> Subscription:
        """Register handler for payloads tagged with platform.

        Args:
            platform: Platform tag to listen for.
            handler: Called with each matching SubtitleMessage.
            patterns: URL glob patterns whose downloads carry this
                      platform's subtitles (used by SubtitleFetcher).
        """
        subscription = Subscription(self, platform, handler)
        self._subscriptions.setdefault(platform, []).append(subscription)
        if patterns:
            self._patterns[platform] = tuple(patterns)
        logger.debug("Subscribed to %s subtitles", platform)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        subs = self._subscriptions.get(subscription.platform, [])
        if subscription in subs:
            subs.remove(subscription)
        if not subs:
            self._subscriptions.pop(subscription.platform, None)
            self._patterns.pop(subscription.platform, None)
        logger.debug("Unsubscribed from %s subtitles", subscription.platform)

    def listener_count(self, platform: str) -> int:
        return len(self._subscriptions.get(platform, []))

    def watched_patterns(self) -> Dict[str, Tuple[str, ...]]:
        """URL patterns per platform that currently has listeners."""
        return dict(self._patterns)

    def platform_for_url(self, url: str) -> Optional[str]:
        for platform, patterns in self._patterns.items():
            if any(fnmatch.fnmatch(url, pattern) for pattern in patterns):
                return platform
        return None

    def publish(self, message: SubtitleMessage) -> int:
        """Deliver a payload to its platform's handlers.

        Returns:
            Number of handlers that received the message.
        """
        delivered = 0
        for subscription in list(self._subscriptions.get(message.platform, [])):
            try:
                subscription.handler(message)
            except Exception:
                logger.exception("Subtitle handler failed for %s", message.platform)
                continue
            delivered += 1
        return delivered


class SubtitleFetcher:
    """Downloads subtitle files the host noticed and publishes them.

    Use as: async with SubtitleFetcher(channel) as fetcher: ...
    An existing httpx.AsyncClient may be passed in (tests use one with
    httpx.MockTransport); it is then not closed by the fetcher.
    """

    def __init__(
        self,
        channel: SubtitleChannel,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        self._channel = channel
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    async def __aenter__(self) -> SubtitleFetcher:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, platform: Optional[str] = None) -> bool:
        """Fetch url and publish it for platform (or the platform whose
        capture patterns match the URL).

        Returns:
            True if the payload was downloaded and published.
        """
        if self._client is None:
            raise RuntimeError(
                "SubtitleFetcher must be used as an async context manager: "
                "async with SubtitleFetcher(channel) as fetcher: ..."
            )
        platform = platform or self._channel.platform_for_url(url)
        if platform is None:
            logger.debug("Ignoring URL with no matching platform: %s", url)
            return False

        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Failed to fetch subtitles from %s: %s", url, exc)
            return False

        self._channel.publish(SubtitleMessage(platform=platform, data=resp.text, url=url))
        return True
