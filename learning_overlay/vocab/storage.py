"""Durable local storage for the vocabulary map.

WHY: The overlay must be usable offline the moment a session starts, and
a status edit must survive a crash before it reaches the server. The whole
word -> entry map for a language is therefore kept on local disk.

HOW: One JSON file per namespaced key ("vocab_<language>.json") in the
storage directory. Saves write a temporary file and os.replace() it, so a
reader never sees a half-written file. Loads validate the payload with
jsonschema before trusting it.

RULES:
- Keys are namespaced per language: vocab_<language>
- A missing file is an empty map
- A corrupt or schema-invalid file is logged, renamed aside to
  "<name>.corrupt-<epoch ms>", and treated as empty
- Save failures are logged and reported as False, never raised
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Dict, Union

import jsonschema

from learning_overlay.core.ir import VocabEntry, VocabStatus, now_ms

logger = logging.getLogger(__name__)

STORE_SCHEMA = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "properties": {
            "status": {"enum": [s.value for s in VocabStatus]},
            "updatedAt": {"type": ["integer", "number", "null"]},
        },
        "required": ["status"],
    },
}

_UNSAFE_KEY_RE = re.compile(r"[^\w.-]+")


def storage_key(language: str) -> str:
    return f"vocab_{language}"


class LocalVocabStore:
    """File-backed store holding one vocabulary map per language."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def path_for(self, language: str) -> Path:
        safe = _UNSAFE_KEY_RE.sub("_", storage_key(language))
        return self.directory / f"{safe}.json"

    def load(self, language: str) -> Dict[str, VocabEntry]:
        path = self.path_for(language)
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            jsonschema.validate(instance=data, schema=STORE_SCHEMA)
        except OSError as exc:
            logger.error("Failed to load vocabulary from %s: %s", path, exc)
            return {}
        except (ValueError, jsonschema.ValidationError) as exc:
            logger.error("Failed to load vocabulary from %s: %s", path, exc)
            self._set_aside(path)
            return {}
        return {word: VocabEntry.from_dict(word, entry) for word, entry in data.items()}

    def _set_aside(self, path: Path) -> None:
        aside = path.with_name(f"{path.name}.corrupt-{now_ms()}")
        try:
            os.replace(path, aside)
        except OSError as exc:
            logger.error("Could not move unreadable vocabulary file %s aside: %s", path, exc)
            return
        logger.warning("Moved unreadable vocabulary file to %s", aside)

    def save(self, language: str, entries: Dict[str, VocabEntry]) -> bool:
        path = self.path_for(language)
        tmp_path = path.with_suffix(".json.tmp")
        payload = {word: entry.to_dict() for word, entry in entries.items()}
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False)
            os.replace(tmp_path, path)
        except OSError as exc:
            logger.error("Failed to save vocabulary to %s: %s", path, exc)
            return False
        return True
