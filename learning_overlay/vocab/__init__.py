"""Vocabulary status tracking: in-memory cache, local store, server sync."""

from learning_overlay.vocab.cache import VocabCache
from learning_overlay.vocab.storage import LocalVocabStore

__all__ = ["LocalVocabStore", "VocabCache"]
