"""Subtitle parser registry: one entry point for every wire format.

WHY: Adapters, the CLI, and the session receive payloads tagged with a
format name ("webvtt", "dfxp", ...) or not tagged at all. A central dict
maps names to parser classes and a sniffing function handles the
untagged case.

HOW: PARSERS maps lowercase format names (including aliases) to parser
*classes*. parse_subtitles() resolves the name, instantiates, parses.

RULES:
- Format names are case-insensitive
- An unknown format name logs a warning and returns [] (never raises)
- "auto" sniffs the payload with detect_format()
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Dict, List, Optional, Type

from learning_overlay.parsers.srt import SRTParser
from learning_overlay.parsers.ttml import TTMLParser
from learning_overlay.parsers.webvtt import WebVTTParser

if TYPE_CHECKING:
    from learning_overlay.core.ir import Segment
    from learning_overlay.parsers.base import BaseParser

logger = logging.getLogger(__name__)

PARSERS: Dict[str, Type[BaseParser]] = {
    "webvtt": WebVTTParser,
    "vtt": WebVTTParser,
    "ttml": TTMLParser,
    "dfxp": TTMLParser,
    "xml": TTMLParser,
    "srt": SRTParser,
}

_SRT_HEAD_RE = re.compile(r"^\d+\s*\n\d{2}:\d{2}:\d{2},\d{3}\s*-->")


def detect_format(data: str) -> Optional[str]:
    """Guess the format of an untagged subtitle payload.

    Returns "webvtt", "ttml", "srt", or None when nothing matches.
    """
    head = data.lstrip("\ufeff \t\r\n")
    if head.startswith("WEBVTT"):
        return "webvtt"
    if head.startswith("<"):
        return "ttml"
    if _SRT_HEAD_RE.match(head.replace("\r\n", "\n")):
        return "srt"
    if "-->" in head:
        return "webvtt"
    return None


def get_parser(fmt: str) -> Optional[BaseParser]:
    """Return a parser instance for a format name, or None if unknown."""
    parser_cls = PARSERS.get(fmt.strip().lower())
    return parser_cls() if parser_cls else None


def parse_subtitles(data: str, fmt: str) -> List[Segment]:
    """Parse a payload in the named format ("auto" to sniff it).

    Args:
        data: Raw subtitle text.
        fmt: Format name or alias, case-insensitive.

    Returns:
        Segments in document order, or [] for unknown formats.
    """
    if fmt.strip().lower() == "auto":
        detected = detect_format(data)
        if detected is None:
            logger.warning("Could not detect subtitle format of %d-char payload", len(data))
            return []
        fmt = detected

    parser = get_parser(fmt)
    if parser is None:
        logger.warning("Unknown subtitle format: %s", fmt)
        return []
    return parser.parse(data)


__all__ = ["PARSERS", "detect_format", "get_parser", "parse_subtitles"]
