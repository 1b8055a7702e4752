"""In-memory implementation of AudioPort for testing."""

from port.audio import AudioPlaybackError


class FakeAudioPlayer:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.played: list[str] = []

    async def play(self, url: str) -> None:
        self.played.append(url)
        if self.fail:
            raise AudioPlaybackError("playback failed")
