"""Vocabulary status cache with local persistence and batched server sync.

WHY: Every rendered word needs its status instantly, edits must show up
on the very next render, and the server must eventually learn about every
edit even when the network comes and goes. Reads therefore never touch
the network, writes hit memory and disk synchronously, and the network
only ever sees a queue of pending edits.

HOW: Two pieces of state: the word -> VocabEntry map and an append-only
list of PendingUpdates. update_status() writes both, persists the map,
and schedules an immediate background flush when a user is signed in.
flush() snapshots the queue, sends it as one batch, and on success
removes exactly the snapshotted objects, so edits made while the request
was in flight stay queued. A periodic task re-runs flush() for the life
of the session, which is what retries failed batches.

RULES:
- load() runs once, before the first write or sync; the local map is
  authoritative for reads
- get_status() is a pure read; missing words are unknown
- update_status() is read-your-writes: no await between write and read
- A failed flush leaves the queue untouched (at-least-once delivery)
- Only one flush is in flight at a time; an overlapping call returns False
  and a follow-up flush runs when the in-flight one settles
- Remote lookups only fill words missing locally, never overwrite them
- close() stops the periodic task; the final flush runs fire-and-forget
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Set, Tuple, Union

import httpx

from learning_overlay.api.client import VocabAPIError
from learning_overlay.config import VOCAB_SYNC_INTERVAL_S
from learning_overlay.core.ir import PendingUpdate, VocabEntry, VocabStatus, now_ms
from learning_overlay.vocab.storage import LocalVocabStore

logger = logging.getLogger(__name__)


class VocabRemote(Protocol):
    """The part of VocabAPIClient the cache depends on."""

    async def push_updates(self, updates: Sequence[PendingUpdate], language: str) -> None: ...

    async def lookup_words(self, words: Sequence[str], language: str) -> Dict[str, VocabEntry]: ...


def normalize_key(word: str) -> str:
    return word.lower().strip()


class VocabCache:
    """Per-language word status cache.

    Args:
        store: Durable local store.
        language: Target language; keys the local store and the remote batches.
        remote: Remote API; None keeps the cache local-only.
        user_id: Signed-in identity; flushes are skipped while None.
        sync_interval: Seconds between periodic flushes.
    """

    def __init__(
        self,
        store: LocalVocabStore,
        language: str,
        remote: Optional[VocabRemote] = None,
        user_id: Optional[str] = None,
        sync_interval: float = VOCAB_SYNC_INTERVAL_S,
    ) -> None:
        self._store = store
        self.language = language
        self._remote = remote
        self.user_id = user_id
        self.sync_interval = sync_interval
        self._entries: Dict[str, VocabEntry] = {}
        self._pending: List[PendingUpdate] = []
        self._loaded = False
        self._flushing = False
        self._flush_requested = False
        self._periodic: Optional[asyncio.Task] = None
        self._background: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> int:
        """Load the local map (first call only). Returns the entry count."""
        if not self._loaded:
            self._entries = self._store.load(self.language)
            self._loaded = True
            logger.info("Loaded %d vocabulary entries for %s", len(self._entries), self.language)
        return len(self._entries)

    async def start(self) -> None:
        """Load local state, kick off a first flush, start the periodic timer."""
        self.load()
        self._schedule_flush()
        if self._periodic is None:
            self._periodic = asyncio.create_task(self._periodic_flush())

    async def _periodic_flush(self) -> None:
        while True:
            await asyncio.sleep(self.sync_interval)
            await self.flush()

    def close(self) -> Optional[asyncio.Task]:
        """Stop the periodic timer and fire a last flush without waiting.

        Returns:
            The final flush task, or None if nothing was scheduled.
        """
        if self._periodic is not None:
            self._periodic.cancel()
            self._periodic = None
        if not self._pending:
            return None
        return self._schedule_flush()

    # ------------------------------------------------------------------
    # Reads and writes
    # ------------------------------------------------------------------

    def get_status(self, word: str) -> VocabStatus:
        entry = self._entries.get(normalize_key(word))
        return entry.status if entry is not None else VocabStatus.UNKNOWN

    def update_status(self, word: str, status: Union[VocabStatus, str]) -> VocabEntry:
        """Record a status edit locally and queue it for the server.

        Raises:
            ValueError: If word is blank or status is not a known status.
        """
        key = normalize_key(word)
        if not key:
            raise ValueError("Cannot set status for an empty word")
        status = VocabStatus(status)
        self.load()
        timestamp = now_ms()

        entry = VocabEntry(word=key, status=status, updated_at=timestamp)
        self._entries[key] = entry
        self._store.save(self.language, self._entries)
        self._pending.append(PendingUpdate(word=key, status=status, timestamp=timestamp))

        if self.user_id is not None:
            self._schedule_flush()
        return entry

    def all_entries(self) -> Dict[str, VocabEntry]:
        return dict(self._entries)

    @property
    def pending_updates(self) -> Tuple[PendingUpdate, ...]:
        return tuple(self._pending)

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def _schedule_flush(self) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the periodic timer will pick the queue up later
            return None
        task = loop.create_task(self.flush())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def flush(self) -> bool:
        """Send pending updates in one batch.

        Returns:
            True if the queue snapshot was delivered (or was empty),
            False if nothing was sent or the send failed.
        """
        if not self._pending:
            return True
        if self._remote is None or self.user_id is None:
            return False
        if self._flushing:
            self._flush_requested = True
            return False

        batch = list(self._pending)
        self._flushing = True
        try:
            await self._remote.push_updates(batch, self.language)
        except (httpx.HTTPError, VocabAPIError) as exc:
            logger.error("Vocabulary sync failed, %d updates kept: %s", len(batch), exc)
            return False
        except Exception:
            logger.exception("Vocabulary sync failed, %d updates kept", len(batch))
            return False
        finally:
            self._flushing = False
            if self._flush_requested:
                # Edits arrived mid-flight; send them as soon as this batch settles
                self._flush_requested = False
                self._schedule_flush()

        sent = {id(update) for update in batch}
        self._pending = [u for u in self._pending if id(u) not in sent]
        logger.info("Synced %d vocabulary updates for %s", len(batch), self.language)
        return True

    async def load_vocab_for_words(self, words: Iterable[str]) -> int:
        """Fill in entries for words the local map does not know yet.

        Returns:
            Number of entries added.
        """
        self.load()
        missing = sorted({normalize_key(w) for w in words} - set(self._entries) - {""})
        if not missing or self._remote is None:
            return 0
        try:
            remote_entries = await self._remote.lookup_words(missing, self.language)
        except (httpx.HTTPError, VocabAPIError) as exc:
            logger.error("Vocabulary lookup failed for %d words: %s", len(missing), exc)
            return 0

        added = 0
        for word, entry in remote_entries.items():
            key = normalize_key(word)
            if key and key not in self._entries:
                self._entries[key] = VocabEntry(word=key, status=entry.status, updated_at=entry.updated_at)
                added += 1
        if added:
            self._store.save(self.language, self._entries)
        return added
