"""WebVTT parser.

WHY: Most streaming sources (HBO, Prime Video, Disney+, Crunchyroll, ...)
serve WebVTT.

HOW: Line scanner. Everything before the first cue-time line is header
(WEBVTT, STYLE, NOTE blocks). Each cue-time line is split on "-->"; the
following non-blank lines that are not themselves cue-time lines are the
cue text, joined with single spaces.

RULES:
- Cue identifiers and NOTE blocks between cues are skipped
- Cue settings after the end time ("align:start") are ignored
- A cue without text lines is dropped
- CRLF line endings are accepted
"""

from __future__ import annotations

from typing import List

from learning_overlay.core.ir import Segment
from learning_overlay.core.timestamps import parse_timestamp
from learning_overlay.parsers.base import BaseParser

CUE_SEPARATOR = "-->"


class WebVTTParser(BaseParser):
    """Parser for WebVTT (.vtt) subtitle payloads."""

    @property
    def name(self) -> str:
        return "WebVTT"

    def parse(self, data: str) -> List[Segment]:
        segments: List[Segment] = []
        lines = data.splitlines()
        i = 0

        # Skip header
        while i < len(lines) and CUE_SEPARATOR not in lines[i]:
            i += 1

        while i < len(lines):
            line = lines[i].strip()
            if CUE_SEPARATOR not in line:
                i += 1
                continue

            start_raw, _, end_raw = line.partition(CUE_SEPARATOR)
            start = parse_timestamp(start_raw)
            end = parse_timestamp((end_raw.split() or [""])[0])

            text_lines = []
            i += 1
            while i < len(lines) and lines[i].strip() and CUE_SEPARATOR not in lines[i]:
                text_lines.append(lines[i].strip())
                i += 1

            if text_lines:
                segment = self.make_segment(start, end, " ".join(text_lines))
                if segment is not None:
                    segments.append(segment)

        return segments
