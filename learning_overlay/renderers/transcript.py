"""Transcript panel: all segments as lines, with the active line marked."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from learning_overlay.core.ir import Segment
from learning_overlay.renderers.base import BaseRenderer, RenderedToken, to_markup


@dataclass
class TranscriptLine:
    segment: Segment
    tokens: List[RenderedToken]
    active: bool = False

    @property
    def markup(self) -> str:
        css = "transcript-line transcript-line--active" if self.active else "transcript-line"
        return f'<div class="{css}">{to_markup(self.tokens)}</div>'


class TranscriptRenderer(BaseRenderer):
    """Renders the whole subtitle set and tracks the active line index."""

    def __init__(self, status_lookup, show_word_status: bool = True) -> None:  # noqa: ANN001
        super().__init__(status_lookup, show_word_status)
        self.lines: List[TranscriptLine] = []
        self.active_index = -1

    @property
    def name(self) -> str:
        return "Transcript Panel"

    def set_segments(self, segments: Sequence[Segment]) -> None:
        self.lines = [TranscriptLine(s, self.render_tokens(s.text)) for s in segments]
        self.active_index = -1

    def highlight_active(self, segment: Optional[Segment]) -> int:
        """Mark the line matching segment (by start time and text).

        Returns:
            The new active index, -1 when nothing is active.
        """
        new_index = -1
        if segment is not None:
            for index, line in enumerate(self.lines):
                if line.segment.key == segment.key:
                    new_index = index
                    break
        if new_index != self.active_index:
            for index, line in enumerate(self.lines):
                line.active = index == new_index
            self.active_index = new_index
        return self.active_index

    def refresh(self) -> None:
        for line in self.lines:
            line.tokens = self.render_tokens(line.segment.text)

    @property
    def markup(self) -> str:
        return "".join(line.markup for line in self.lines)
