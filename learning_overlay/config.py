"""Configuration constants, session settings, and .env loading.

WHY: Timing constants, endpoints, and storage locations should be easy to
find and override, and the per-session display settings must be passed in
explicitly rather than living in a global mutable object that every
component reads and writes.

HOW: python-dotenv loads the .env file on import. Defaults are module-level
constants overridable through environment variables. OverlayConfig is a
pydantic model with the closed set of recognised session options; it is
constructed once and handed to the session.

RULES:
- All defaults can be overridden via environment variables
- The auth token is optional; without it the engine runs offline
- OverlayConfig rejects unknown display modes at construction
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env from the project root (where the script is run from)
load_dotenv()


class ConfigError(ValueError):
    """Raised when an environment override cannot be interpreted."""


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


# ---------------------------------------------------------------------------
# Remote API and local storage
# ---------------------------------------------------------------------------

API_BASE_URL = os.getenv("LEARNING_OVERLAY_API_URL", "https://intongues2.vercel.app/api")
STORAGE_DIR = Path(
    os.getenv("LEARNING_OVERLAY_STORAGE_DIR", str(Path.home() / ".learning_overlay"))
)

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

SYNC_TICK_INTERVAL_S = _env_float("SYNC_TICK_INTERVAL_S", 0.1)
"""Playback polling cadence for the SyncLoop (100ms)."""

VOCAB_SYNC_INTERVAL_S = _env_float("VOCAB_SYNC_INTERVAL_S", 60.0)
"""Periodic flush interval for pending vocabulary updates."""

VIDEO_WAIT_TIMEOUT_S = _env_float("VIDEO_WAIT_TIMEOUT_S", 30.0)
"""How long a session waits for the video element before giving up."""

VIDEO_POLL_INTERVAL_S = _env_float("VIDEO_POLL_INTERVAL_S", 0.25)
"""Poll interval used while waiting for page elements to appear."""


def load_auth_token() -> Optional[str]:
    """Load the backend auth token from the environment.

    WHY: Remote sync needs a Bearer token, but the overlay must remain
    usable offline, so a missing token is not an error.

    RULES:
    - Returns None if LEARNING_OVERLAY_AUTH_TOKEN is missing or blank
    """
    token = os.getenv("LEARNING_OVERLAY_AUTH_TOKEN", "").strip()
    return token or None


# ---------------------------------------------------------------------------
# Session settings
# ---------------------------------------------------------------------------


class DisplayMode(str, Enum):
    """Where subtitle text is shown during playback."""

    off = "off"
    overlay = "overlay"
    transcript = "transcript"


class OverlayConfig(BaseModel):
    """Explicit settings for one overlay session.

    WHY: Replaces the shared settings object the renderers and the loop
    used to mutate. Everything a session needs to know about user
    preferences is fixed at construction.

    RULES:
    - display_mode defaults to overlay
    - show_word_status defaults to True; when False every word renders
      with the known-word color
    - target_language keys the local vocabulary store; None disables
      vocabulary persistence and translation lookups
    """

    display_mode: DisplayMode = Field(
        default=DisplayMode.overlay,
        description="Subtitle display mode: off, overlay, or transcript.",
    )
    show_word_status: bool = Field(
        default=True,
        description="Color words by vocabulary status.",
    )
    target_language: Optional[str] = Field(
        default=None,
        description="Language being learned (the subtitle language).",
    )
    native_language: str = Field(
        default="english",
        description="Learner's native language for translations.",
    )
