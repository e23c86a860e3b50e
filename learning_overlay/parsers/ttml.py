"""TTML / DFXP parser.

WHY: Netflix serves timed text as TTML (DFXP profile). Paragraph elements
carry the cue timing as attributes and the text as mixed content with
<span> and <br/> children.

HOW: ElementTree parses the document; every element whose local name is
"p" is considered regardless of namespace prefix. Text is collected from
the element's descendants with <br/> turned into a space. Times are read
with parse_offset_time, which understands TTML metric offsets
("12.5s", "300ms", "81250000t") and falls back to clock times.

RULES:
- A <p> needs begin and either end or dur; otherwise it is skipped
- Empty cleaned text is skipped
- Malformed XML yields [] and an error log, never an exception
- Tick offsets use the root's ttp:tickRate (default 10,000,000)
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import List, Optional

from learning_overlay.core.ir import Segment
from learning_overlay.core.timestamps import parse_timestamp
from learning_overlay.parsers.base import BaseParser

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 10_000_000

_OFFSET_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)(h|ms|m|s|t)\s*$")
_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _attribute(element: ET.Element, name: str) -> Optional[str]:
    """Attribute lookup that ignores the namespace of the attribute."""
    for key, value in element.attrib.items():
        if _local_name(key) == name:
            return value
    return None


def parse_offset_time(raw: Optional[str], tick_rate: int = DEFAULT_TICK_RATE) -> float:
    """Parse a TTML time expression into seconds.

    Metric offsets are handled here; clock times ("00:00:01.500") go
    through parse_timestamp. Anything else degrades to 0.0.
    """
    if not raw:
        return 0.0
    match = _OFFSET_RE.match(raw)
    if match:
        value, unit = float(match.group(1)), match.group(2)
        if unit == "t":
            return round(value / tick_rate, 3) if tick_rate > 0 else 0.0
        return round(value * _UNIT_SECONDS[unit], 3)
    return parse_timestamp(raw)


def _text_content(element: ET.Element) -> str:
    parts: List[str] = [element.text or ""]
    for child in element:
        if _local_name(child.tag) == "br":
            parts.append(" ")
        else:
            parts.append(_text_content(child))
        parts.append(child.tail or "")
    return "".join(parts)


class TTMLParser(BaseParser):
    """Parser for TTML / DFXP subtitle documents."""

    @property
    def name(self) -> str:
        return "TTML"

    def parse(self, data: str) -> List[Segment]:
        try:
            root = ET.fromstring(data.strip().encode("utf-8"))
        except ET.ParseError:
            logger.error("Failed to parse TTML document", exc_info=True)
            return []

        tick_rate = DEFAULT_TICK_RATE
        raw_rate = _attribute(root, "tickRate")
        if raw_rate and raw_rate.strip().isdigit():
            tick_rate = int(raw_rate)

        segments: List[Segment] = []
        for p in root.iter():
            if _local_name(p.tag) != "p":
                continue
            begin = _attribute(p, "begin")
            end = _attribute(p, "end")
            dur = _attribute(p, "dur")
            if not begin or not (end or dur):
                continue

            start = parse_offset_time(begin, tick_rate)
            if end:
                stop = parse_offset_time(end, tick_rate)
            else:
                stop = round(start + parse_offset_time(dur, tick_rate), 3)

            segment = self.make_segment(start, stop, _text_content(p))
            if segment is not None:
                segments.append(segment)

        return segments
