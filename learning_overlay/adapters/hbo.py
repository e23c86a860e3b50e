"""HBO Max / Max adapter (WebVTT)."""

from learning_overlay.adapters.base import BaseAdapter


class HBOAdapter(BaseAdapter):
    platform = "hbo"
    video_selectors = ("video[src]", ".default-player video", "video")
    container_selectors = (".default-player", '[data-testid="player"]', ".player-container")
    native_subtitle_selectors = (".player-timedtext",)
    capture_patterns = ("*://*.hbomaxcdn.com/*", "*://*.max.com/*")

    @property
    def name(self) -> str:
        return "Max"
