"""Framing decoders turning raw response bytes into provider events.

Decoders are synchronous state machines: ``feed()`` a chunk of bytes as
it arrives, get back the complete frames it finished, and ``flush()``
once the transport is exhausted. Partial frames and partial UTF-8
sequences stay buffered between calls.
"""

from __future__ import annotations

import abc
import codecs
import json
import logging
from enum import Enum
from typing import Any, AsyncIterable, AsyncIterator

_logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"


class StreamFraming(Enum):
    SSE = "sse"
    NDJSON = "ndjson"


class FrameDecoder(abc.ABC):
    """Shared buffering for the framing disciplines."""

    def __init__(self) -> None:
        self._text = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.finished = False

    def feed(self, chunk: bytes) -> list[str]:
        if self.finished:
            return []
        self._buffer += self._text.decode(chunk)
        return self._drain()

    def flush(self) -> list[str]:
        """Emit whatever is left once the underlying stream has ended."""
        if self.finished:
            return []
        self._buffer += self._text.decode(b"", final=True)
        remainder, self._buffer = self._buffer, ""
        if not remainder.strip():
            return []
        return self._finish(remainder)

    @abc.abstractmethod
    def _drain(self) -> list[str]:
        """Split complete frames off the buffer, keeping any partial tail."""

    @abc.abstractmethod
    def _finish(self, remainder: str) -> list[str]:
        """Frames from the unterminated text left when the stream ends."""


class SSEDecoder(FrameDecoder):
    """Server-sent events: ``data: <payload>`` blocks separated by a blank line."""

    def _drain(self) -> list[str]:
        self._buffer = self._buffer.replace("\r\n", "\n")
        *blocks, self._buffer = self._buffer.split("\n\n")
        return self._payloads(blocks)

    def _finish(self, remainder: str) -> list[str]:
        return self._payloads([remainder.replace("\r\n", "\n")])

    def _payloads(self, blocks: list[str]) -> list[str]:
        payloads: list[str] = []
        for block in blocks:
            data_lines = [
                line[5:].removeprefix(" ")
                for line in block.split("\n")
                if line.startswith("data:")
            ]
            if not data_lines:
                continue
            payload = "\n".join(data_lines)
            if payload.strip() == DONE_SENTINEL:
                self.finished = True
                self._buffer = ""
                break
            payloads.append(payload)
        return payloads


class NDJSONDecoder(FrameDecoder):
    """Newline-delimited JSON: one event per line."""

    def _drain(self) -> list[str]:
        *lines, self._buffer = self._buffer.split("\n")
        return [line.strip() for line in lines if line.strip()]

    def _finish(self, remainder: str) -> list[str]:
        return [remainder.strip()]


def make_decoder(framing: StreamFraming) -> FrameDecoder:
    if framing == StreamFraming.NDJSON:
        return NDJSONDecoder()
    return SSEDecoder()


async def decode_events(
    chunks: AsyncIterable[bytes],
    framing: StreamFraming,
) -> AsyncIterator[Any]:
    """Yield parsed JSON events from a byte stream, in arrival order.

    Frames that are not valid JSON (heartbeats, truncated frames) are
    skipped.
    """
    decoder = make_decoder(framing)

    async for chunk in chunks:
        for frame in decoder.feed(chunk):
            event = _parse_frame(frame)
            if event is not None:
                yield event
        if decoder.finished:
            return

    for frame in decoder.flush():
        event = _parse_frame(frame)
        if event is not None:
            yield event


def _parse_frame(frame: str) -> Any:
    try:
        return json.loads(frame)
    except json.JSONDecodeError:
        _logger.debug("Skipping unparseable stream frame: %.200s", frame)
        return None
