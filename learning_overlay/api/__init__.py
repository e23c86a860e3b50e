"""Learning backend API package: async HTTP interface to the server.

WHY: Vocabulary sync and word lookups talk to the same authenticated JSON
API. This package keeps that behind one client class.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Response data is parsed
into typed dataclasses defined in models.py.

RULES:
- All HTTP calls go through VocabAPIClient (no direct httpx usage elsewhere,
  except SubtitleFetcher downloading subtitle files)
- Authentication is via Bearer token from config
"""

from learning_overlay.api.client import VocabAPIClient, VocabAPIError
from learning_overlay.api.models import Translation

__all__ = ["Translation", "VocabAPIClient", "VocabAPIError"]
