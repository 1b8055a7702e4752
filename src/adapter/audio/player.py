"""Audio adapter: fetches pronunciation recordings over HTTP.

The fetched bytes are handed to a sink. The default sink stores the
recording in a temporary file so an external player can open it.
"""

import logging
import mimetypes
import tempfile
from pathlib import Path
from typing import Callable

import httpx

from port.audio import AudioPlaybackError

logger = logging.getLogger(__name__)

AUDIO_TIMEOUT_SECONDS = 20.0

AudioSink = Callable[[bytes, str], None]


def save_to_tempfile(content: bytes, content_type: str) -> None:
    suffix = mimetypes.guess_extension(content_type.split(";")[0].strip()) or ".mp3"
    with tempfile.NamedTemporaryFile(prefix="tudien-", suffix=suffix, delete=False) as f:
        f.write(content)
    logger.info("Audio saved", extra={"path": str(Path(f.name)), "bytes": len(content)})


class HttpAudioPlayer:
    """Implements AudioPort by downloading the recording."""

    def __init__(
        self,
        sink: AudioSink = save_to_tempfile,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.sink = sink
        self._transport = transport

    async def play(self, url: str) -> None:
        try:
            async with httpx.AsyncClient(
                timeout=AUDIO_TIMEOUT_SECONDS,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise AudioPlaybackError(f"Failed to fetch audio: {type(e).__name__}") from e

        try:
            self.sink(response.content, response.headers.get("content-type", ""))
        except OSError as e:
            raise AudioPlaybackError(f"Failed to store audio: {e}") from e
