"""Abstract base parser.

WHY: Every subtitle wire format turns into the same list of Segments.
A common base keeps the registry, the adapters, and the CLI format-agnostic
and puts the shared segment rules (text cleaning, zero-duration clamp)
in one place.

HOW: BaseParser is an ABC with a ``name`` property and a ``parse()``
method. ``make_segment()`` is the only way subclasses build Segments.

RULES:
- parse() never raises on malformed input; bad cues are dropped
- Segment text is always cleaned before it is stored
- A cue whose end precedes its start becomes zero-duration

To add a new input format:
1. Create a new file in parsers/
2. Subclass BaseParser and implement name and parse()
3. Register it in PARSERS in parsers/__init__.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from learning_overlay.core.ir import Segment
from learning_overlay.core.text import clean_subtitle_text


class BaseParser(ABC):
    """Abstract base for all subtitle format parsers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'WebVTT'."""

    @abstractmethod
    def parse(self, data: str) -> List[Segment]:
        """Convert a raw subtitle payload into Segments, in document order."""

    @staticmethod
    def make_segment(start: float, end: float, raw_text: str) -> Optional[Segment]:
        """Build a cleaned Segment, or None if the cleaned text is empty."""
        text = clean_subtitle_text(raw_text)
        if not text:
            return None
        start = max(0.0, start)
        return Segment(start_time=start, end_time=max(start, end), text=text)
