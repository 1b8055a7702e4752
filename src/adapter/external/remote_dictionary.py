"""Remote dictionary service adapter.

Implements DictionaryPort against the dictionary HTTP service
(word lookup, language-pair lookup, suggestions). Also holds the payload
parser that turns the service's loosely-shaped JSON into LookupOutcome.

Every call is bounded by a hard deadline; on expiry the in-flight request
is cancelled and Failed(TIMEOUT) is returned. Nothing is retried.
"""

import asyncio
import logging
import os
from typing import Any
from urllib.parse import urljoin, urlsplit

import httpx

from domain.model.errors import ValidationError
from domain.model.lookup import (
    Failed,
    FailureReason,
    Found,
    LookupOutcome,
    NotFound,
    RawResultEntry,
)
from port.dictionary import SUGGESTION_LIMIT

logger = logging.getLogger(__name__)

DICTIONARY_API_BASE_URL = os.getenv("DICTIONARY_API_BASE_URL", "https://minhqnd.com")
LOOKUP_TIMEOUT_SECONDS = float(os.getenv("DICTIONARY_API_TIMEOUT", "20"))

LOOKUP_PATH = "/api/dictionary/lookup"
SUGGEST_PATH = "/api/dictionary/suggest"

# Legacy flat payloads carry no language metadata; they come from the
# Vietnamese monolingual dictionary.
LEGACY_LANG_CODE = "vi"
LEGACY_LANG_NAME = "Tiếng Việt"


class RemoteDictionaryAdapter:
    """Adapter that talks to the remote dictionary service over httpx."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or DICTIONARY_API_BASE_URL).rstrip("/")
        self.timeout = LOOKUP_TIMEOUT_SECONDS if timeout is None else timeout
        self._transport = transport

    @property
    def origin(self) -> str:
        parts = urlsplit(self.base_url)
        return f"{parts.scheme}://{parts.netloc}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    async def lookup(self, word: str, lang: str | None = None) -> LookupOutcome:
        """Look up a single word.

        Args:
            word: Word to look up (surrounding whitespace is ignored).
            lang: Optional language code for the language-pair variant.

        Returns:
            Found, NotFound, or Failed(TIMEOUT | NETWORK_ERROR | SERVER_ERROR).

        Raises:
            ValidationError: If word is blank.
        """
        word = (word or "").strip()
        if not word:
            raise ValidationError("Word is required")

        params = {"word": word}
        if lang:
            params["lang"] = lang

        try:
            response = await self._get(LOOKUP_PATH, params)
        except (TimeoutError, httpx.TimeoutException):
            logger.warning(
                "Dictionary lookup timed out",
                extra={"word": word, "timeout": self.timeout},
            )
            return Failed(FailureReason.TIMEOUT)
        except httpx.RequestError as e:
            logger.warning(
                "Dictionary lookup request error",
                extra={"word": word, "error_type": type(e).__name__},
            )
            return Failed(FailureReason.NETWORK_ERROR)

        if not response.is_success:
            logger.warning(
                "Dictionary lookup HTTP error",
                extra={"word": word, "status_code": response.status_code},
            )
            return Failed(FailureReason.SERVER_ERROR)

        try:
            data = response.json()
        except ValueError:
            logger.warning("Dictionary lookup returned invalid JSON", extra={"word": word})
            return Failed(FailureReason.SERVER_ERROR)

        if not isinstance(data, dict):
            logger.warning(
                "Unexpected response type from dictionary service",
                extra={"word": word, "type": type(data).__name__},
            )
            return Failed(FailureReason.SERVER_ERROR)

        outcome = parse_lookup_payload(data, self.origin, requested_word=word)
        logger.debug(
            "Dictionary lookup finished",
            extra={
                "word": word,
                "outcome": type(outcome).__name__,
                "entry_count": len(outcome.entries) if isinstance(outcome, Found) else 0,
            },
        )
        return outcome

    async def suggest(self, query: str, limit: int = SUGGESTION_LIMIT) -> list[str]:
        """Fetch related-word suggestions. Returns [] on any failure."""
        query = (query or "").strip()
        if not query:
            return []

        try:
            response = await self._get(SUGGEST_PATH, {"q": query, "limit": limit})
            response.raise_for_status()
            data = response.json()
        except (TimeoutError, httpx.TimeoutException):
            logger.warning("Suggestion request timed out", extra={"query": query})
            return []
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Suggestion request HTTP error",
                extra={"query": query, "status_code": e.response.status_code},
            )
            return []
        except httpx.RequestError as e:
            logger.warning(
                "Suggestion request error",
                extra={"query": query, "error_type": type(e).__name__},
            )
            return []
        except ValueError:
            logger.warning("Suggestion response is not JSON", extra={"query": query})
            return []

        return parse_suggestions(data, limit)

    async def _get(self, path: str, params: dict[str, Any]) -> httpx.Response:
        """GET under a hard deadline; expiry cancels the request."""
        async with asyncio.timeout(self.timeout):
            async with self._client() as client:
                return await client.get(path, params=params)


# ── Payload parsing ──────────────────────────────────────────


def parse_lookup_payload(
    data: dict[str, Any],
    origin: str,
    requested_word: str = "",
) -> LookupOutcome:
    """Turn a lookup payload into a LookupOutcome.

    Accepts both the multi-language shape ({"results": [...]}) and the
    legacy flat shape ({"meanings": [...]}), which becomes one implicit
    entry. Relative audio paths are resolved against `origin`.
    """
    if data.get("exists") is False:
        return NotFound()

    results = data.get("results")
    if isinstance(results, list):
        raw_entries = [r for r in results if isinstance(r, dict)]
    elif isinstance(data.get("meanings"), (list, dict)):
        raw_entries = [{
            "lang_code": data.get("lang_code") or LEGACY_LANG_CODE,
            "lang_name": data.get("lang_name") or LEGACY_LANG_NAME,
            "audio": data.get("audio"),
            "meanings": data.get("meanings"),
            "pronunciations": data.get("pronunciations"),
            "translations": data.get("translations"),
            "relations": data.get("relations"),
        }]
    else:
        raw_entries = []

    if not raw_entries:
        return NotFound()

    entries = tuple(
        RawResultEntry.from_dict({**raw, "audio": absolutize_audio(raw.get("audio"), origin)})
        for raw in raw_entries
    )
    return Found(word=str(data.get("word") or requested_word), entries=entries)


def absolutize_audio(audio: Any, origin: str) -> str | None:
    """Resolve a service-relative audio path into an absolute URL."""
    if not audio or not isinstance(audio, str):
        return None
    if urlsplit(audio).scheme:
        return audio
    return urljoin(origin.rstrip("/") + "/", audio)


def parse_suggestions(data: Any, limit: int = SUGGESTION_LIMIT) -> list[str]:
    """Read a suggestion list from {"suggestions": [...]} or a bare list."""
    if isinstance(data, dict):
        data = data.get("suggestions")
    if not isinstance(data, list):
        return []
    return [s for s in data if isinstance(s, str) and s][:limit]
