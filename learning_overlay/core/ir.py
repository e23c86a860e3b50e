"""Data model shared by parsers, the sync loop, renderers, and the vocab cache.

WHY: Every subtitle wire format ends up as the same timed-text unit, and
every word the learner sees is looked up by the same normalized key. One
well-typed model decouples ingestion from presentation and from
vocabulary tracking.

HOW: Frozen dataclasses for values that must not change after creation
(Segment, Token, PendingUpdate); a plain dataclass for VocabEntry, which
the cache replaces wholesale on every edit. Status and token kind are
str enums so they serialize cleanly to JSON.

RULES:
- All times are float seconds
- Segment is produced only by parsers and is immutable
- VocabEntry.updated_at and PendingUpdate.timestamp are epoch milliseconds
- Persisted entries use camelCase keys ("updatedAt") for wire compatibility
"""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Any, Dict


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class VocabStatus(str, enum.Enum):
    """Learner-progress label attached to a word.

    RULES:
    - Ordered from least to most known
    - unknown is the default for words never seen by the cache
    """

    NEW = "new"
    UNKNOWN = "unknown"
    RECOGNISED = "recognised"
    FAMILIAR = "familiar"
    KNOWN = "known"


class TokenKind(str, enum.Enum):
    WORD = "word"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class Segment:
    """A timed unit of subtitle text.

    RULES:
    - start_time >= 0
    - end_time >= start_time (malformed cues degrade to zero duration)
    - text is already cleaned (no markup, single spaces, trimmed)
    """

    start_time: float
    end_time: float
    text: str

    @property
    def key(self) -> tuple:
        """Value identity used to detect active-segment changes."""
        return (self.start_time, self.text)

    def to_dict(self) -> Dict[str, Any]:
        return {"startTime": self.start_time, "endTime": self.end_time, "text": self.text}


@dataclass(frozen=True)
class Token:
    """One word or separator run from a segment's text.

    RULES:
    - normalized_text is lowercased for words; identical to display_text
      for separators
    - display_text is the exact original slice of the input
    """

    kind: TokenKind
    normalized_text: str
    display_text: str

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD


@dataclass
class VocabEntry:
    """Vocabulary status of one normalized word."""

    word: str
    status: VocabStatus
    updated_at: int

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "updatedAt": self.updated_at}

    @classmethod
    def from_dict(cls, word: str, data: Dict[str, Any]) -> VocabEntry:
        """Parse a persisted or remote entry.

        Unrecognised status strings fall back to unknown; a missing
        timestamp becomes 0 so any later local edit wins.
        """
        try:
            status = VocabStatus(data.get("status", VocabStatus.UNKNOWN.value))
        except ValueError:
            status = VocabStatus.UNKNOWN
        return cls(word=word, status=status, updated_at=int(data.get("updatedAt") or 0))


@dataclass(frozen=True)
class PendingUpdate:
    """A local status edit waiting to be flushed to the remote store."""

    word: str
    status: VocabStatus
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "status": self.status.value, "timestamp": self.timestamp}
