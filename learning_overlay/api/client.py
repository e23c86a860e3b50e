"""Async HTTP client for the learning backend.

WHY: Vocabulary edits must reach the server in batches, missing words can
be looked up in bulk, and the word popup needs translations and
pronunciations. All of it is authenticated JSON over HTTPS. This module
keeps the HTTP details in one class so the cache and the session only
see typed results.

HOW: Wraps httpx.AsyncClient with Bearer auth. Use as an async context
manager to get a connection pool, exit to close it. The vocabulary
methods raise VocabAPIError on non-2xx so the cache can keep its queue;
the lookup helpers (translation, pronunciation, expressions) catch
failures and return a sentinel, because the UI only needs to show
"unavailable".

RULES:
- Use as: async with VocabAPIClient(...) as client: ...
- auth_token defaults to load_auth_token(); without a token requests are
  sent unauthenticated (the server decides)
- push_updates / lookup_words raise VocabAPIError or httpx.HTTPError
- translate_* never raise; they return Translation.unavailable()
- Successful translations and pronunciations are cached in memory
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from learning_overlay.api.models import Translation, VocabBatchRequest, VocabLookupResponse
from learning_overlay.config import API_BASE_URL, load_auth_token
from learning_overlay.core.ir import PendingUpdate, VocabEntry

logger = logging.getLogger(__name__)


class VocabAPIError(Exception):
    """Raised when the backend returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"API error {status_code}: {message}")


class VocabAPIClient:
    """Async client for vocabulary sync and word lookups.

    Args:
        auth_token: Bearer token; defaults to LEARNING_OVERLAY_AUTH_TOKEN.
        base_url: API root; defaults to LEARNING_OVERLAY_API_URL.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    def __init__(
        self,
        auth_token: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._auth_token = auth_token or load_auth_token()
        self._base_url = (base_url or API_BASE_URL).rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._translation_cache: Dict[str, Translation] = {}
        self._pronunciation_cache: Dict[str, str] = {}

    async def __aenter__(self) -> VocabAPIClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers(),
            timeout=httpx.Timeout(30.0, connect=10.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def has_credentials(self) -> bool:
        return self._auth_token is not None

    def set_auth_token(self, token: Optional[str]) -> None:
        self._auth_token = token
        if self._client is not None:
            self._client.headers.pop("Authorization", None)
            self._client.headers.update(self._headers())

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "VocabAPIClient must be used as an async context manager: "
                "async with VocabAPIClient() as client: ..."
            )
        return self._client

    async def _post(self, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        client = self._ensure_client()
        resp = await client.post(endpoint, json=body)
        if resp.status_code not in (200, 201, 204):
            raise VocabAPIError(resp.status_code, resp.text)
        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError:
            raise VocabAPIError(resp.status_code, f"Response is not JSON: {resp.text[:200]}")
        if not isinstance(data, dict):
            raise VocabAPIError(resp.status_code, f"Expected a JSON object, got {type(data).__name__}")
        return data

    # ------------------------------------------------------------------
    # Vocabulary sync
    # ------------------------------------------------------------------

    async def push_updates(self, updates: Sequence[PendingUpdate], language: str) -> None:
        """Send a batch of status edits (POST /vocab/batch).

        The server applies them idempotently, last updatedAt wins, so
        resending a batch after an ambiguous failure is safe.
        """
        request = VocabBatchRequest(updates=list(updates), language=language)
        await self._post("/vocab/batch", request.to_dict())

    async def lookup_words(self, words: Sequence[str], language: str) -> Dict[str, VocabEntry]:
        """Fetch stored entries for words (POST /vocab/lookup)."""
        data = await self._post("/vocab/lookup", {"words": list(words), "language": language})
        return VocabLookupResponse.from_dict(data).entries

    # ------------------------------------------------------------------
    # Lookups for the word popup
    # ------------------------------------------------------------------

    async def _translate(self, cache_key: str, text: str, from_lang: str, to_lang: str) -> Translation:
        cached = self._translation_cache.get(cache_key)
        if cached is not None:
            return cached
        try:
            data = await self._post(
                "/translatePhrase", {"text": text, "fromLang": from_lang, "toLang": to_lang},
            )
        except (httpx.HTTPError, VocabAPIError, ValueError) as exc:
            logger.error("Translation failed for %r: %s", text, exc)
            return Translation.unavailable()
        translation = Translation.from_dict(data)
        self._translation_cache[cache_key] = translation
        return translation

    async def translate_word(self, word: str, from_lang: str, to_lang: str) -> Translation:
        return await self._translate(f"{word}_{from_lang}_{to_lang}", word, from_lang, to_lang)

    async def translate_phrase(self, phrase: str, from_lang: str, to_lang: str) -> Translation:
        return await self._translate(f"phrase_{phrase}_{from_lang}_{to_lang}", phrase, from_lang, to_lang)

    async def prefetch_translations(self, words: Sequence[str], from_lang: str, to_lang: str) -> int:
        """Warm the translation cache for words in one request.

        Returns:
            Number of translations added to the cache (0 on failure).
        """
        uncached = sorted({
            w for w in words if f"{w}_{from_lang}_{to_lang}" not in self._translation_cache
        })
        if not uncached:
            return 0
        try:
            data = await self._post(
                "/batchTranslate", {"words": uncached, "fromLang": from_lang, "toLang": to_lang},
            )
        except (httpx.HTTPError, VocabAPIError, ValueError) as exc:
            logger.error("Batch translation failed: %s", exc)
            return 0

        added = 0
        for word, value in (data.get("translations") or {}).items():
            translation = Translation.from_dict(value) if isinstance(value, dict) else Translation(text=str(value))
            self._translation_cache[f"{word}_{from_lang}_{to_lang}"] = translation
            added += 1
        return added

    async def get_pronunciation(self, word: str, language: str) -> Optional[str]:
        """Audio URL for a word, or None when unavailable."""
        cache_key = f"{word}_{language}"
        if cache_key in self._pronunciation_cache:
            return self._pronunciation_cache[cache_key]
        try:
            data = await self._post("/tts", {"text": word, "language": language})
        except (httpx.HTTPError, VocabAPIError, ValueError) as exc:
            logger.error("Pronunciation lookup failed for %r: %s", word, exc)
            return None
        audio_url = data.get("audioUrl")
        if audio_url:
            self._pronunciation_cache[cache_key] = audio_url
        return audio_url

    async def get_expressions(self, text: str, language: str) -> List[Dict[str, Any]]:
        """Multi-word expressions detected in text, or [] when unavailable."""
        try:
            data = await self._post("/detectExpressions", {"text": text, "language": language})
        except (httpx.HTTPError, VocabAPIError, ValueError) as exc:
            logger.error("Expression detection failed: %s", exc)
            return []
        return list(data.get("expressions") or [])
