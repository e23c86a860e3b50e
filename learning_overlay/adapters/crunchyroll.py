"""Crunchyroll adapter (WebVTT, video.js based player)."""

from learning_overlay.adapters.base import BaseAdapter


class CrunchyrollAdapter(BaseAdapter):
    platform = "crunchyroll"
    video_selectors = ("#player0 video", '[data-testid="vilos-player"] video', "video")
    container_selectors = ("#player0", '[data-testid="vilos-player"]', ".video-player-wrapper")
    native_subtitle_selectors = (".vjs-text-track-display", '[class*="subtitle"]')
    capture_patterns = (
        "*://*.crunchyroll.com/*",
        "*://*.vrv.co/*",
        "*://static.crunchyroll.com/*",
    )

    @property
    def name(self) -> str:
        return "Crunchyroll"
