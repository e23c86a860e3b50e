"""Abstract base renderer and rendered-token container.

WHY: The floating overlay and the transcript panel show the same thing:
segment text split into words, each tinted by vocabulary status, in
different layouts. The base class owns the shared token -> status ->
color step so both stay consistent.

HOW: render_tokens() tokenizes text, asks the status lookup for each
word, and attaches the color and CSS class. to_markup() turns rendered
tokens into escaped HTML spans for hosts that inject markup.

RULES:
- With show_word_status off every word renders as known (neutral color)
- Separators carry no status and no color
- Markup is always HTML-escaped
"""

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from learning_overlay.core.colors import color_for, status_class_name
from learning_overlay.core.ir import Token, VocabStatus
from learning_overlay.core.text import tokenize

StatusLookup = Callable[[str], VocabStatus]


@dataclass(frozen=True)
class RenderedToken:
    """A token ready for display."""

    token: Token
    status: Optional[VocabStatus] = None
    color: Optional[str] = None

    @property
    def css_class(self) -> str:
        if not self.token.is_word:
            return "separator"
        return f"word {status_class_name(self.status)}"


def to_markup(tokens: List[RenderedToken]) -> str:
    parts = []
    for rendered in tokens:
        text = html.escape(rendered.token.display_text)
        if rendered.token.is_word:
            parts.append(
                '<span class="{}" data-word="{}" style="color: {};">{}</span>'.format(
                    rendered.css_class,
                    html.escape(rendered.token.normalized_text, quote=True),
                    rendered.color,
                    text,
                )
            )
        else:
            parts.append(f'<span class="separator">{text}</span>')
    return "".join(parts)


class BaseRenderer(ABC):
    """Shared rendering state for subtitle presentation consumers."""

    def __init__(self, status_lookup: StatusLookup, show_word_status: bool = True) -> None:
        self._status_lookup = status_lookup
        self.show_word_status = show_word_status
        self.visible = True

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable renderer name."""

    @abstractmethod
    def refresh(self) -> None:
        """Re-render the current content (after a status edit)."""

    def render_tokens(self, text: str) -> List[RenderedToken]:
        rendered: List[RenderedToken] = []
        for token in tokenize(text):
            if not token.is_word:
                rendered.append(RenderedToken(token))
                continue
            status = (
                self._status_lookup(token.normalized_text)
                if self.show_word_status
                else VocabStatus.KNOWN
            )
            rendered.append(RenderedToken(token, status, color_for(status)))
        return rendered

    def set_visible(self, visible: bool) -> None:
        self.visible = visible

    def set_show_word_status(self, show: bool) -> None:
        self.show_word_status = show
        self.refresh()
