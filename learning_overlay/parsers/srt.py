"""SubRip (SRT) parser.

WHY: SRT is the lowest common denominator for downloaded or side-loaded
subtitles.

HOW: The payload is split into blank-line-separated blocks. Line 1 of a
block is the index (ignored), line 2 the time range, the rest the text.

RULES:
- Blocks with fewer than 3 lines are skipped
- The time range must match HH:MM:SS,mmm --> HH:MM:SS,mmm
- Commas become dots before parse_timestamp
- Blocks failing the match, or with empty cleaned text, are skipped
"""

from __future__ import annotations

import re
from typing import List

from learning_overlay.core.ir import Segment
from learning_overlay.core.timestamps import parse_timestamp
from learning_overlay.parsers.base import BaseParser

_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n+")
_TIME_RANGE_RE = re.compile(r"(\d{2}:\d{2}:\d{2},\d{3})\s*-->\s*(\d{2}:\d{2}:\d{2},\d{3})")


class SRTParser(BaseParser):
    """Parser for SubRip (.srt) subtitle payloads."""

    @property
    def name(self) -> str:
        return "SRT"

    def parse(self, data: str) -> List[Segment]:
        segments: List[Segment] = []
        normalized = data.replace("\r\n", "\n").replace("\r", "\n").strip()
        if not normalized:
            return segments

        for block in _BLOCK_SPLIT_RE.split(normalized):
            lines = block.split("\n")
            if len(lines) < 3:
                continue

            match = _TIME_RANGE_RE.search(lines[1])
            if not match:
                continue

            start = parse_timestamp(match.group(1).replace(",", "."))
            end = parse_timestamp(match.group(2).replace(",", "."))
            segment = self.make_segment(start, end, " ".join(lines[2:]))
            if segment is not None:
                segments.append(segment)

        return segments
