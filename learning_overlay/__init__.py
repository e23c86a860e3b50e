"""Learning Overlay: subtitle ingestion and synchronized vocabulary overlay.

WHY: Streaming platforms deliver subtitles in different wire formats
(WebVTT, TTML/DFXP, SRT) and expose their video players through different
page structures. A learner overlay needs one timed-text model, a loop that
keeps it in step with playback, and a per-word status cache that survives
going offline.

HOW: Four layers: ingest (parsers + platform adapters), synchronize
(SyncLoop), present (tokenizer, colors, renderers), remember (VocabCache
with local persistence and batched server sync). The session module wires
them together for one playback session.

RULES:
- All parsers produce the same Segment model
- Adding a streaming source = one new adapter module, no shared-code changes
- No error in ingestion or sync may stop playback synchronization
"""

__version__ = "0.1.0"
