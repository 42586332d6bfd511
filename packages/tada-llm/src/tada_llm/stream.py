"""Cancellable streams of completion text."""

from __future__ import annotations

import asyncio
import contextlib
from typing import AsyncIterable, AsyncIterator, Awaitable, Callable


async def read_until_cancelled(
    chunks: AsyncIterable[bytes],
    cancel: asyncio.Event | None,
) -> AsyncIterator[bytes]:
    """Relay chunks until the source ends or ``cancel`` is set.

    Each pending read is raced against the cancellation event, so a
    cancel takes effect even while the transport is blocked.
    """
    iterator = chunks.__aiter__()
    if cancel is None:
        async for chunk in iterator:
            yield chunk
        return

    waiter = asyncio.ensure_future(cancel.wait())
    pending: asyncio.Future[bytes] | None = None
    try:
        while not cancel.is_set():
            pending = asyncio.ensure_future(iterator.__anext__())
            await asyncio.wait({pending, waiter}, return_when=asyncio.FIRST_COMPLETED)
            if not pending.done():
                return
            try:
                chunk = pending.result()
            except StopAsyncIteration:
                return
            pending = None
            if cancel.is_set():
                return
            yield chunk
    finally:
        waiter.cancel()
        if pending is not None and not pending.done():
            pending.cancel()
            with contextlib.suppress(asyncio.CancelledError, StopAsyncIteration):
                await pending


class CompletionStream:
    """Async iterator of text fragments with an accumulated view.

    Iterate it once. The underlying response is released when iteration
    ends, is cancelled, or the consumer stops early.
    """

    def __init__(
        self,
        fragments: AsyncIterator[str],
        *,
        cancel: asyncio.Event | None = None,
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._fragments = fragments
        self._cancel = cancel
        self._on_close = on_close
        self._parts: list[str] = []
        self._done = False
        self._closed = False

    async def __aiter__(self) -> AsyncIterator[str]:
        try:
            async for fragment in self._fragments:
                if self.cancelled:
                    break
                self._parts.append(fragment)
                yield fragment
            self._done = True
        finally:
            await self.aclose()

    async def __aenter__(self) -> CompletionStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def done(self) -> bool:
        """True once the stream ran to completion or was cancelled."""
        return self._done

    @property
    def cancelled(self) -> bool:
        return self._cancel is not None and self._cancel.is_set()

    async def collect(self, on_delta: Callable[[str], None] | None = None) -> str:
        """Drain the stream, forwarding each fragment, and return the full text."""
        async for fragment in self:
            if on_delta:
                on_delta(fragment)
        return self.text

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._fragments, "aclose", None)
        if aclose is not None:
            await aclose()
        if self._on_close:
            await self._on_close()
