"""Stan (AU) adapter (WebVTT)."""

from learning_overlay.adapters.base import BaseAdapter


class StanAdapter(BaseAdapter):
    platform = "stan"
    container_selectors = (".player-container", '[class*="player"]')
    capture_patterns = ("*://*.stan.com.au/*", "*://*.stanassets.com/*")

    @property
    def name(self) -> str:
        return "Stan"
