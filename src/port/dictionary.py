"""Dictionary port: outbound interface to the remote dictionary service."""

from typing import Protocol

from domain.model.lookup import LookupOutcome

SUGGESTION_LIMIT = 10


class DictionaryPort(Protocol):
    """Port for looking up words and fetching related-word suggestions.

    lookup() never raises on transport problems: timeouts, network and
    server failures come back as Failed outcomes. Blank words raise
    ValidationError before any request is made.

    suggest() is best-effort and returns [] on any failure.
    """

    async def lookup(self, word: str, lang: str | None = None) -> LookupOutcome: ...

    async def suggest(self, query: str, limit: int = SUGGESTION_LIMIT) -> list[str]: ...
