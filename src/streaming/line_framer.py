"""Incremental framing of a byte stream into text lines."""

import codecs
import logging

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"


class LineFramer:
    """Turns arbitrary byte chunks into complete text lines.

    Multi-byte characters split across chunks are held by the incremental
    decoder until the rest arrives. Text after the last newline is kept as
    the pending fragment and prepended to the next chunk's text.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Unterminated text held over from previous chunks."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one chunk and return the lines it completed.

        Args:
            chunk: Raw bytes as delivered by the transport.

        Returns:
            Complete lines without their trailing newline, in arrival order.
        """
        if not chunk:
            return []

        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split(LINE_SEPARATOR)
        return lines

    def finish(self) -> str | None:
        """Flush the decoder at end of stream.

        Returns:
            The trailing unterminated line, or None if nothing is pending.
        """
        remainder = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        self._decoder.reset()

        if not remainder:
            return None
        logger.debug(f"Stream ended without trailing newline ({len(remainder)} chars)")
        return remainder
