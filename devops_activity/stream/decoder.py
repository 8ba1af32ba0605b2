"""Reassemble blank-line delimited event frames from arbitrarily split text."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List

FRAME_DELIMITER = "\n\n"

logger = logging.getLogger(__name__)


class FrameDecoder:
    """Turn pushed text chunks into complete ``text/event-stream`` frames.

    Only the text after the last delimiter seen is buffered, so memory is
    bounded by the size of one frame rather than by the stream length.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._closed = False

    @property
    def pending(self) -> str:
        """Text received after the last delimiter, not yet a frame."""
        return self._buffer

    def feed(self, chunk: str) -> List[str]:
        """Append ``chunk`` and return every frame it completes, in order."""
        if self._closed:
            raise RuntimeError("Cannot feed a closed FrameDecoder")
        if not chunk:
            return []

        self._buffer += chunk
        if FRAME_DELIMITER not in self._buffer:
            return []

        *complete, self._buffer = self._buffer.split(FRAME_DELIMITER)
        return [frame for frame in complete if frame.strip()]

    def close(self) -> int:
        """Mark the transport finished and drop any unterminated frame.

        Returns the number of characters discarded.
        """
        discarded = len(self._buffer) if self._buffer.strip() else 0
        if discarded:
            logger.debug("Discarding %d chars of unterminated frame at close", discarded)
        self._buffer = ""
        self._closed = True
        return discarded

    def decode(self, chunks: Iterable[str]) -> Iterator[str]:
        """Lazily decode an iterable of chunks, closing once it is exhausted."""
        for chunk in chunks:
            yield from self.feed(chunk)
        self.close()


__all__ = ["FRAME_DELIMITER", "FrameDecoder"]
