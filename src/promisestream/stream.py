"""Single-pass output stream and chunk-sequence helpers.

OutputStream is what StreamBuilder.build() returns. It is an async iterator
of ``str``/``bytes`` chunks that can be handed to anything consuming async
iterables (an ASGI response body, a file writer, another builder).

Example:
    >>> stream = from_iterable(["<p>", "hi", "</p>"])
    >>> await stream_to_string(stream)
    '<p>hi</p>'
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Iterable
from typing import TYPE_CHECKING, Self

from .settings import get_settings
from .sources import Chunk

if TYPE_CHECKING:
    from types import TracebackType

__all__ = ["OutputStream", "from_iterable", "collect", "stream_to_string"]


class OutputStream:
    """Forward-only async chunk sequence, consumed at most once.

    Iterating again after exhaustion, failure or aclose() yields nothing.

    Example:
        >>> async with builder.build() as stream:
        ...     async for chunk in stream:
        ...         await send(chunk)
    """

    __slots__ = ("_chunks", "_started", "_closed")

    def __init__(self, chunks: AsyncIterator[Chunk]) -> None:
        self._chunks = chunks
        self._started = False
        self._closed = False

    @property
    def consumed(self) -> bool:
        """Whether a chunk has been requested from this stream."""
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> Chunk:
        if self._closed:
            raise StopAsyncIteration
        self._started = True
        try:
            return await self._chunks.__anext__()
        except BaseException:
            # StopAsyncIteration included: exhausted and failed streams stay finished
            self._closed = True
            raise

    async def aclose(self) -> None:
        """Stop the stream early. Sources still resolving are left to finish."""
        if self._closed:
            return
        self._closed = True
        if (aclose := getattr(self._chunks, "aclose", None)) is not None:
            await aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "started" if self._started else "fresh"
        return f"<{type(self).__name__} {state}>"


def from_iterable(chunks: Iterable[Chunk] | AsyncIterable[Chunk] | Chunk) -> OutputStream:
    """Wrap a sync or async chunk sequence as an OutputStream.

    A bare ``str`` or ``bytes`` is one chunk, not a sequence of characters.

    Raises:
        TypeError: ``chunks`` is neither text nor iterable.
    """
    if isinstance(chunks, (str, bytes, bytearray)):
        return OutputStream(_iterate((bytes(chunks) if isinstance(chunks, bytearray) else chunks,)))
    if isinstance(chunks, AsyncIterable):
        return OutputStream(_aiterate(chunks))
    if isinstance(chunks, Iterable):
        return OutputStream(_iterate(chunks))
    raise TypeError(f"Cannot build a stream from {type(chunks).__name__}")


async def collect(stream: AsyncIterable[Chunk]) -> list[Chunk]:
    """Drain ``stream`` into a list of chunks."""
    return [chunk async for chunk in stream]


async def stream_to_string(stream: AsyncIterable[Chunk], encoding: str | None = None) -> str:
    """Drain ``stream`` and join its chunks, decoding bytes with ``encoding``.

    Defaults to the configured output encoding. Failures of the stream
    propagate unchanged.
    """
    encoding = encoding or get_settings().output.encoding
    return "".join(c if isinstance(c, str) else bytes(c).decode(encoding) for c in await collect(stream))


async def _iterate(chunks: Iterable[Chunk]) -> AsyncIterator[Chunk]:
    for chunk in chunks:
        yield chunk


async def _aiterate(chunks: AsyncIterable[Chunk]) -> AsyncIterator[Chunk]:
    async for chunk in chunks:
        yield chunk
