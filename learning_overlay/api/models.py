"""Request and response dataclasses for the learning backend API.

WHY: The backend exchanges plain JSON. Typed dataclasses make the shapes
explicit at the boundary so the cache and the session never handle raw
dicts.

HOW: Each dataclass maps to one JSON object and has a from_dict factory
(and to_dict where it is sent).

RULES:
- Lookup entries reuse VocabEntry from the core model
- Translation.available is False only for the "unavailable" sentinel
- Unknown keys in responses are ignored
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from learning_overlay.core.ir import PendingUpdate, VocabEntry


@dataclass
class VocabBatchRequest:
    """Body of POST /vocab/batch."""

    updates: List[PendingUpdate]
    language: str

    def to_dict(self) -> Dict[str, Any]:
        return {"updates": [u.to_dict() for u in self.updates], "language": self.language}


@dataclass
class VocabLookupResponse:
    """Response of POST /vocab/lookup: {"entries": {word: entry}}."""

    entries: Dict[str, VocabEntry] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> VocabLookupResponse:
        raw = data.get("entries")
        if not isinstance(raw, dict):
            raw = {}
        return cls(entries={
            word: VocabEntry.from_dict(word, entry)
            for word, entry in raw.items()
            if isinstance(entry, dict)
        })


@dataclass
class Translation:
    """A word or phrase translation as shown in the word popup."""

    text: str
    pronunciation: Optional[str] = None
    available: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Translation:
        return cls(
            text=data.get("text") or data.get("translation") or "",
            pronunciation=data.get("pronunciation"),
        )

    @classmethod
    def unavailable(cls) -> Translation:
        """Sentinel returned when the translation service cannot be reached."""
        return cls(text="Translation unavailable", available=False)
