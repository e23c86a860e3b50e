"""Netflix adapter.

WHY: Netflix serves subtitles as TTML (DFXP profile) from its own CDN and
renders them in a ".player-timedtext" layer.

HOW: Declarative selectors plus one extra: the subtitle track menu is read
to list available languages.

RULES:
- Captured payloads are parsed as TTML
- Available languages come from data-uia="track-item-<lang>" menu items
"""

from __future__ import annotations

from typing import List

from learning_overlay.adapters.base import BaseAdapter

_TRACK_ITEM_PREFIX = "track-item-"


class NetflixAdapter(BaseAdapter):
    platform = "netflix"
    video_selectors = ("video",)
    container_selectors = (
        ".watch-video--player-view",
        ".VideoContainer",
        ".nf-player-container",
    )
    native_subtitle_selectors = (
        ".player-timedtext",
        '[data-uia="player-timedtext"]',
    )
    subtitle_format = "ttml"
    capture_patterns = (
        "*://assets.nflxext.com/*",
        "*://ipv4_1-*.1.nflxso.net/*",
    )

    @property
    def name(self) -> str:
        return "Netflix"

    def get_available_languages(self) -> List[str]:
        """Language codes listed in the open audio/subtitle menu."""
        languages: List[str] = []
        for item in self.page.query_selector_all(f'[data-uia^="{_TRACK_ITEM_PREFIX}"]'):
            tag = item.get_attribute("data-uia") or ""
            lang = tag[len(_TRACK_ITEM_PREFIX):] if tag.startswith(_TRACK_ITEM_PREFIX) else ""
            if lang:
                languages.append(lang)
        return languages
