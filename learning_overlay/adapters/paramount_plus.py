"""Paramount+ adapter (WebVTT). Native subtitle layer not identified."""

from learning_overlay.adapters.base import BaseAdapter


class ParamountPlusAdapter(BaseAdapter):
    platform = "paramount"
    container_selectors = (".video-player-container", '[data-testid="video-player"]')
    capture_patterns = ("*://*.cbsaavideo.com/*", "*://*.cbsi.com/*")

    @property
    def name(self) -> str:
        return "Paramount+"
