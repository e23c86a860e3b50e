"""Floating subtitle overlay: shows the single active segment."""

from __future__ import annotations

from typing import List, Optional

from learning_overlay.core.ir import Segment
from learning_overlay.renderers.base import BaseRenderer, RenderedToken, to_markup


class OverlayRenderer(BaseRenderer):
    """Renders the active segment, re-rendering only when it changes."""

    def __init__(self, status_lookup, show_word_status: bool = True) -> None:  # noqa: ANN001
        super().__init__(status_lookup, show_word_status)
        self.current: Optional[Segment] = None
        self.tokens: List[RenderedToken] = []
        self.render_count = 0

    @property
    def name(self) -> str:
        return "Subtitle Overlay"

    @property
    def markup(self) -> str:
        return to_markup(self.tokens)

    def update_active(self, segment: Optional[Segment]) -> None:
        if segment is None:
            self.clear()
            return
        if self.current is not None and self.current.key == segment.key:
            return
        self.current = segment
        self._render()

    def _render(self) -> None:
        self.tokens = self.render_tokens(self.current.text) if self.current else []
        self.render_count += 1

    def clear(self) -> None:
        self.current = None
        self.tokens = []

    def refresh(self) -> None:
        if self.current is not None:
            self._render()
