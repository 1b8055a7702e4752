"""Search session controller: the client-side search state machine.

Owns SessionState and is its only writer. Drives the dictionary port
(lookup, then suggestions) and keeps the `search` URL parameter in step
with the visible result.

Status flow: IDLE -> LOADING -> (LOADED | ERRORED) -> LOADING -> ...

Each search cycle is tagged with its query and a cycle number. A response
whose tag no longer matches the current cycle is dropped, so a slow earlier
response never overwrites a newer one. In-flight calls are not aborted.
"""

import logging
from typing import Callable

from domain.model.errors import ValidationError
from domain.model.lookup import Failed, FailureReason, Found, LookupOutcome
from domain.model.query import clean_query, decode_query, encode_query
from domain.model.session import SessionState, SessionStatus
from port.audio import AudioPlaybackError, AudioPort
from port.dictionary import SUGGESTION_LIMIT, DictionaryPort
from port.location import LocationPort
from services.normalizer import normalize_outcome

logger = logging.getLogger(__name__)

SEARCH_PARAM = "search"

StateListener = Callable[[SessionState], None]


def filter_suggestions(suggestions: list[str], word: str, limit: int = SUGGESTION_LIMIT) -> list[str]:
    """Drop the searched word itself and cap the list."""
    return [s for s in suggestions if s != word][:limit]


class SearchSessionController:
    """Coordinates user input, the URL and the dictionary service."""

    def __init__(
        self,
        dictionary: DictionaryPort,
        location: LocationPort,
        audio: AudioPort | None = None,
        on_change: StateListener | None = None,
    ):
        self._dictionary = dictionary
        self._location = location
        self._audio = audio
        self._on_change = on_change
        self._state = SessionState()
        self._cycle = 0
        self._failed_query: str | None = None

    @property
    def state(self) -> SessionState:
        """Live session state. Readers must not mutate it."""
        return self._state

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_search_term(self, text: str) -> bool:
        """Mirror the input box. Ignored while a lookup is in flight."""
        if self._state.is_loading:
            return False
        self._state.search_term = text
        self._notify()
        return True

    async def submit(self, word: str | None = None) -> bool:
        """Submit a search from the input box.

        No-op when the trimmed word is empty, or when its encoded form is
        already the URL's `search` parameter. After an error the same word
        may be submitted again.

        Returns:
            True if a lookup was dispatched.
        """
        trimmed = clean_query(self._state.search_term if word is None else word)
        if not trimmed:
            return False

        encoded = encode_query(trimmed)
        if (
            self._location.read_query_param(SEARCH_PARAM) == encoded
            and self._state.status is not SessionStatus.ERRORED
        ):
            logger.debug("Search unchanged, skipping lookup", extra={"query": trimmed})
            return False

        self._location.set_query_param(SEARCH_PARAM, encoded, mode="merge")
        await self._run_cycle(trimmed, source="submit")
        return True

    async def init_from_url(self) -> bool:
        """Seed the session from the URL, once per session.

        Reads and decodes the `search` parameter and, if present, runs a
        search without writing the URL back.
        """
        if self._state.initialized:
            return False
        self._state.initialized = True

        param = self._location.read_query_param(SEARCH_PARAM)
        if not param:
            return False

        word = clean_query(decode_query(param))
        if not word:
            return False

        await self._run_cycle(word, source="url")
        return True

    async def select_related(self, word: str) -> bool:
        """Jump to a related word or suggestion.

        Always dispatches, and replaces the whole query string with a
        single `search` parameter.
        """
        trimmed = clean_query(word)
        if not trimmed:
            return False

        self._location.set_query_param(SEARCH_PARAM, encode_query(trimmed), mode="replace")
        await self._run_cycle(trimmed, source="related")
        return True

    async def retry(self) -> bool:
        """Run the failed search again."""
        if self._state.status is not SessionStatus.ERRORED or not self._failed_query:
            return False
        await self._run_cycle(self._failed_query, source="retry")
        return True

    def clear(self) -> None:
        """Reset the search and drop the `search` URL parameter."""
        self._cycle += 1
        self._failed_query = None
        state = self._state
        state.search_term = ""
        state.status = SessionStatus.IDLE
        state.result = None
        state.groups = []
        state.error = None
        state.suggestions = []
        state.reset_view()
        self._location.set_query_param(SEARCH_PARAM, None, mode="merge")
        logger.debug("Search cleared", extra={"href": self._location.href})
        self._notify()

    # ------------------------------------------------------------------
    # Presentation toggles (no network)
    # ------------------------------------------------------------------

    def select_tab(self, index: int) -> None:
        if not 0 <= index < len(self._state.groups):
            raise ValidationError(f"No result tab at index {index}")
        self._state.active_tab_index = index
        self._notify()

    def toggle_pronunciation_panel(self, index: int) -> bool:
        """Expand or collapse the secondary-pronunciation panel of a tab.

        Returns:
            True if the panel is now expanded.
        """
        panels = self._state.expanded_pronunciation_panels
        if index in panels:
            panels.discard(index)
        else:
            panels.add(index)
        self._notify()
        return index in panels

    async def play_audio(self, url: str | None = None) -> bool:
        """Play a recording (default: the active tab's audio).

        Playback failures are logged and otherwise ignored.
        """
        if url is None:
            group = self._state.active_group
            url = group.entry.audio if group else None
        if not url or self._audio is None:
            return False

        try:
            await self._audio.play(url)
        except AudioPlaybackError as e:
            logger.warning("Audio playback failed", extra={"url": url, "error": str(e)})
            return False
        return True

    # ------------------------------------------------------------------
    # Search cycle
    # ------------------------------------------------------------------

    async def _run_cycle(self, query: str, source: str) -> None:
        self._cycle += 1
        cycle = self._cycle

        state = self._state
        state.search_term = query
        state.status = SessionStatus.LOADING
        state.result = None
        state.groups = []
        state.error = None
        state.suggestions = []
        self._notify()

        logger.info("Search dispatched", extra={"query": query, "source": source, "cycle": cycle})
        outcome = await self._lookup(query)

        if not self._is_current(cycle, query):
            logger.debug("Discarding stale lookup response", extra={"query": query, "cycle": cycle})
            return

        if isinstance(outcome, Failed):
            state.status = SessionStatus.ERRORED
            state.error = outcome
            self._failed_query = query
            logger.info("Search failed", extra={"query": query, "reason": outcome.reason.value})
        else:
            state.result = outcome
            state.groups = normalize_outcome(outcome)
            state.status = SessionStatus.LOADED
            state.reset_view()
            logger.info("Search loaded", extra={
                "query": query,
                "found": isinstance(outcome, Found),
                "entry_count": len(state.groups),
            })
        self._notify()

        if isinstance(outcome, Found):
            await self._load_suggestions(cycle, query)

    async def _lookup(self, query: str) -> LookupOutcome:
        try:
            return await self._dictionary.lookup(query)
        except Exception as e:
            logger.error(
                "Unexpected error during lookup",
                extra={"query": query, "error": str(e)},
                exc_info=True,
            )
            return Failed(FailureReason.SERVER_ERROR)

    async def _load_suggestions(self, cycle: int, query: str) -> None:
        try:
            suggestions = await self._dictionary.suggest(query, SUGGESTION_LIMIT)
        except Exception as e:
            logger.warning(
                "Suggestion lookup failed",
                extra={"query": query, "error": str(e)},
            )
            suggestions = []

        if not self._is_current(cycle, query):
            logger.debug("Discarding stale suggestions", extra={"query": query, "cycle": cycle})
            return

        self._state.suggestions = filter_suggestions(suggestions, query)
        self._notify()

    def _is_current(self, cycle: int, query: str) -> bool:
        return cycle == self._cycle and query == self._state.search_term

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self._state.snapshot())
