"""Binge (AU) adapter (WebVTT, standard HTML5 player)."""

from learning_overlay.adapters.base import BaseAdapter


class BingeAdapter(BaseAdapter):
    platform = "binge"
    container_selectors = (".player-container", '[class*="player"]')
    capture_patterns = ("*://*.binge.com.au/*", "*://*.foxtel.com.au/*")

    @property
    def name(self) -> str:
        return "Binge"
