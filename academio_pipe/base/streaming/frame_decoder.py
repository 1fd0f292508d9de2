"""Frame decoder: network chunks to complete text lines.

Bytes are decoded with an incremental UTF-8 decoder so a multi-byte character
split across two chunks is reassembled instead of being replaced. A single
pending buffer holds the incomplete trailing line between chunks.
"""

from __future__ import annotations

import codecs
from typing import List


class FrameDecoder:
    """Turn an arbitrary split of a byte stream into its complete lines.

    ``feed`` returns every line completed by the chunk, in order, without the
    terminator (a trailing ``\\r`` of a CRLF pair is removed too). ``finish``
    flushes the decoder and discards the unterminated tail: terminal events
    are always newline-terminated, so a dangling fragment is never parsed.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    @property
    def pending(self) -> str:
        """Incomplete trailing line carried over to the next chunk."""
        return self._pending

    def feed(self, chunk: bytes) -> List[str]:
        if not chunk:
            return []
        text = self._pending + self._decoder.decode(chunk)
        *lines, self._pending = text.split("\n")
        return [line[:-1] if line.endswith("\r") else line for line in lines]

    def finish(self) -> str:
        """Flush at stream end and return the discarded tail ('' when clean)."""
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return tail


__all__ = ["FrameDecoder"]
