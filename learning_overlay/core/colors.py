"""Vocabulary-status highlight colors.

WHY: The overlay tints each word by how well the learner knows it: brand
orange for new words, fading toward white as the word becomes familiar,
plain white once known.

HOW: Each status has an intensity in [0, 1]. The brand color is linearly
interpolated toward white per RGB channel with that intensity as weight,
rounded half-up, and written back as lowercase hex.

RULES:
- known always maps to KNOWN_COLOR, regardless of intensity table
- Intensity decreases monotonically: new/unknown 1.0 > recognised 0.7 >
  familiar 0.4
- Unrecognised status strings are treated as full intensity
"""

from __future__ import annotations

from typing import Dict, Union

from learning_overlay.core.ir import VocabStatus

HIGHLIGHT_COLOR = "#FF6B35"
KNOWN_COLOR = "#ffffff"

STATUS_COLORS: Dict[VocabStatus, str] = {
    VocabStatus.NEW: "#FF6B35",
    VocabStatus.UNKNOWN: "#FF6B35",
    VocabStatus.RECOGNISED: "#FFA07A",
    VocabStatus.FAMILIAR: "#FFD700",
    VocabStatus.KNOWN: "#4CAF50",
}
"""Indicator colors for status buttons (not used for word tinting)."""

STATUS_LABELS: Dict[VocabStatus, str] = {
    VocabStatus.NEW: "New",
    VocabStatus.UNKNOWN: "Unknown",
    VocabStatus.RECOGNISED: "Recognised",
    VocabStatus.FAMILIAR: "Familiar",
    VocabStatus.KNOWN: "Known",
}

STATUS_INTENSITY: Dict[VocabStatus, float] = {
    VocabStatus.NEW: 1.0,
    VocabStatus.UNKNOWN: 1.0,
    VocabStatus.RECOGNISED: 0.7,
    VocabStatus.FAMILIAR: 0.4,
    VocabStatus.KNOWN: 0.0,
}


def _coerce(status: Union[VocabStatus, str, None]):
    if isinstance(status, VocabStatus) or status is None:
        return status
    try:
        return VocabStatus(status)
    except ValueError:
        return None


def blend_with_white(color: str, intensity: float) -> str:
    """Blend a "#rrggbb" color toward white; intensity 1 = color, 0 = white."""
    channels = (int(color[i:i + 2], 16) for i in (1, 3, 5))
    blended = (int(c * intensity + 255 * (1 - intensity) + 0.5) for c in channels)
    return "#" + "".join(f"{c:02x}" for c in blended)


def color_for(status: Union[VocabStatus, str, None]) -> str:
    """Display color for a word with the given vocabulary status."""
    resolved = _coerce(status)
    if resolved is VocabStatus.KNOWN:
        return KNOWN_COLOR
    intensity = STATUS_INTENSITY.get(resolved, 1.0) if resolved else 1.0
    return blend_with_white(HIGHLIGHT_COLOR, intensity)


def status_class_name(status: Union[VocabStatus, str, None]) -> str:
    """CSS class for a word span, e.g. "word--familiar"."""
    resolved = _coerce(status)
    return f"word--{(resolved or VocabStatus.UNKNOWN).value}"
