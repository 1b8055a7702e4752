"""Audio port: plays pronunciation recordings."""

from typing import Protocol


class AudioPlaybackError(Exception):
    """Recording could not be fetched or played."""


class AudioPort(Protocol):
    async def play(self, url: str) -> None: ...
