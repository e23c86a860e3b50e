"""Cue timestamp parsing for every supported subtitle format.

WHY: WebVTT writes "00:01:02.500", SRT writes "00:01:02,500", short WebVTT
cues drop the hours ("01:02.500"), and TTML clock values may be bare
seconds. A single tolerant parser lets every format parser share one
definition of time.

HOW: Three patterns tried in order, each searched (not anchored) in the
input after the first comma is turned into a dot. The fractional part is
right-padded to three digits and truncated to milliseconds. All arithmetic
is done in integer milliseconds and divided once, so results are exact to
the millisecond.

RULES:
- H:MM:SS[.f] first, then MM:SS[.f], then SECONDS[.f]; first match wins
- "1" as a fraction means 100ms; "12345" means 123ms
- Unparsable input returns 0.0 and never raises
"""

from __future__ import annotations

import re
from typing import Optional

_HMS_RE = re.compile(r"(\d+):(\d{2}):(\d{2})(?:\.(\d+))?")
_MS_RE = re.compile(r"(\d+):(\d{2})(?:\.(\d+))?")
_S_RE = re.compile(r"(\d+)(?:\.(\d+))?")


def _fraction_ms(fraction: Optional[str]) -> int:
    if not fraction:
        return 0
    return int(fraction.ljust(3, "0")[:3])


def parse_timestamp(raw: object) -> float:
    """Parse a cue timestamp into float seconds.

    Args:
        raw: Timestamp text such as "01:02:03.456", "02:03,4" or "12.5".

    Returns:
        Seconds as a float, or 0.0 when nothing recognisable is found.
    """
    if not isinstance(raw, str):
        return 0.0
    cleaned = raw.strip().replace(",", ".", 1)

    match = _HMS_RE.search(cleaned)
    if match:
        hours, minutes, seconds = (int(g) for g in match.group(1, 2, 3))
        total_ms = ((hours * 60 + minutes) * 60 + seconds) * 1000 + _fraction_ms(match.group(4))
        return total_ms / 1000

    match = _MS_RE.search(cleaned)
    if match:
        minutes, seconds = int(match.group(1)), int(match.group(2))
        total_ms = (minutes * 60 + seconds) * 1000 + _fraction_ms(match.group(3))
        return total_ms / 1000

    match = _S_RE.search(cleaned)
    if match:
        total_ms = int(match.group(1)) * 1000 + _fraction_ms(match.group(2))
        return total_ms / 1000

    return 0.0


def format_timestamp(seconds: float) -> str:
    """Format seconds as a WebVTT clock time (HH:MM:SS.mmm)."""
    total_ms = max(0, int(round(seconds * 1000)))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, ms = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{ms:03d}"
