"""Disney+ adapter (WebVTT).

The native subtitle layer has not been identified, so hide/show are no-ops.
"""

from learning_overlay.adapters.base import BaseAdapter


class DisneyPlusAdapter(BaseAdapter):
    platform = "disney"
    container_selectors = ('[data-testid="web-player"]', ".btm-media-player")
    capture_patterns = ("*://*.bamgrid.com/*", "*://*.disney-plus.net/*")

    @property
    def name(self) -> str:
        return "Disney+"
