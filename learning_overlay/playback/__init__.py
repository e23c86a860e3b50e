"""Playback synchronization (active-segment tracking)."""

from learning_overlay.playback.sync import SyncLoop, find_active_segment

__all__ = ["SyncLoop", "find_active_segment"]
