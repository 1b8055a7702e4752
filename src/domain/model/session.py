"""Search session state, owned by SearchSessionController."""

import copy
from dataclasses import dataclass, field
from enum import Enum

from domain.model.lookup import Failed, GroupedEntry, LookupOutcome


class SessionStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


@dataclass
class SessionState:
    """Mutable state of one search session (one page load).

    While status is LOADING, result/groups/error are empty: a cycle never
    exposes a partially applied outcome.
    """
    search_term: str = ""
    status: SessionStatus = SessionStatus.IDLE
    result: LookupOutcome | None = None
    groups: list[GroupedEntry] = field(default_factory=list)
    error: Failed | None = None
    suggestions: list[str] = field(default_factory=list)
    active_tab_index: int = 0
    expanded_pronunciation_panels: set[int] = field(default_factory=set)
    initialized: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status is SessionStatus.LOADING

    @property
    def active_group(self) -> GroupedEntry | None:
        if 0 <= self.active_tab_index < len(self.groups):
            return self.groups[self.active_tab_index]
        return None

    def reset_view(self) -> None:
        """Reset tab/pronunciation toggles to their defaults."""
        self.active_tab_index = 0
        self.expanded_pronunciation_panels = set()

    def snapshot(self) -> "SessionState":
        """Detached copy for readers (renderers, callbacks)."""
        return copy.deepcopy(self)
