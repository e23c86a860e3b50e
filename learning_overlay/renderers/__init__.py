"""Presentation consumers of the sync loop and vocabulary cache.

WHY: Hosts show subtitles either as a floating overlay over the video or
as a scrolling transcript. Both are thin layers over the same tokenize ->
status -> color step.

RULES:
- Renderers never mutate vocabulary state; edits go through VocabCache
- Each renderer is a BaseRenderer subclass
"""

from learning_overlay.renderers.overlay import OverlayRenderer
from learning_overlay.renderers.transcript import TranscriptRenderer

__all__ = ["OverlayRenderer", "TranscriptRenderer"]
