"""Prime Video adapter (WebVTT served via CloudFront)."""

from learning_overlay.adapters.base import BaseAdapter


class PrimeVideoAdapter(BaseAdapter):
    platform = "prime"
    video_selectors = (
        ".webPlayerElement video",
        '[data-testid="video-player"] video',
        "video.webPlayerElement",
        "video",
    )
    container_selectors = (
        ".webPlayerUIContainer",
        ".rendererContainer",
        '[data-testid="video-player"]',
    )
    native_subtitle_selectors = (
        ".atvwebplayersdk-captions-text",
        '[data-testid="subtitles-container"]',
    )
    capture_patterns = (
        "*://*.cloudfront.net/*",
        "*://*.media-amazon.com/*",
        "*://*.pv-cdn.net/*",
    )

    @property
    def name(self) -> str:
        return "Prime Video"
