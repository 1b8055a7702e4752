"""In-memory implementation of DictionaryPort for testing."""

import asyncio

from domain.model.errors import ValidationError
from domain.model.lookup import LookupOutcome, NotFound
from port.dictionary import SUGGESTION_LIMIT


class FakeDictionaryAdapter:
    """Fake dictionary that returns preconfigured outcomes per word.

    hold_lookup()/hold_suggest() return an Event that blocks the matching
    call until set, to script the order in which responses resolve.
    """

    def __init__(
        self,
        outcomes: dict[str, LookupOutcome] | None = None,
        suggestions: dict[str, list[str]] | None = None,
    ):
        self.outcomes = outcomes or {}
        self.suggestions = suggestions or {}
        self.lookup_calls: list[str] = []
        self.suggest_calls: list[str] = []
        self.last_lang: str | None = None
        self._lookup_gates: dict[str, asyncio.Event] = {}
        self._suggest_gates: dict[str, asyncio.Event] = {}

    def hold_lookup(self, word: str) -> asyncio.Event:
        return self._lookup_gates.setdefault(word, asyncio.Event())

    def hold_suggest(self, query: str) -> asyncio.Event:
        return self._suggest_gates.setdefault(query, asyncio.Event())

    async def lookup(self, word: str, lang: str | None = None) -> LookupOutcome:
        word = (word or "").strip()
        if not word:
            raise ValidationError("Word is required")
        self.lookup_calls.append(word)
        self.last_lang = lang
        gate = self._lookup_gates.get(word)
        if gate is not None:
            await gate.wait()
        return self.outcomes.get(word, NotFound())

    async def suggest(self, query: str, limit: int = SUGGESTION_LIMIT) -> list[str]:
        self.suggest_calls.append(query)
        gate = self._suggest_gates.get(query)
        if gate is not None:
            await gate.wait()
        return list(self.suggestions.get(query, []))[:limit]
