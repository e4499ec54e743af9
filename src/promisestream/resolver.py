"""Concurrent resolution with strictly ordered emission.

All sources of a snapshot start resolving at once (factories are invoked
synchronously in list order, awaitables are scheduled as tasks). Output is
then produced by visiting the per-source slots in list order, so a slow
source holds back everything after it but never delays the start of any
other source's work.

Example:
    >>> async def slow():
    ...     await asyncio.sleep(1.0)
    ...     return "<head>"
    >>> async for chunk in emit(["<html>", slow(), lambda: "<body>"]):
    ...     print(chunk)  # <html>, <head>, <body>
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Sequence
from dataclasses import dataclass

from .errors import FailurePhase, SourceError
from .sources import EMPTY, Chunk, Content, ContentKind, SourceKind, classify, to_content, unwrap

__all__ = ["Slot", "resolve_sources", "emit"]

logger = logging.getLogger("promisestream.resolver")


@dataclass(slots=True, frozen=True)
class Slot:
    """Pending resolution of the source at ``index``.

    ``kind`` is the kind of the queued item itself, before any factory call.
    """
    index: int
    kind: SourceKind
    future: asyncio.Future[Content]


def resolve_sources(sources: Sequence[object]) -> list[Slot]:
    """Start resolving every source and return one slot per source, in order.

    Must be called from a running event loop. Nothing is awaited here: a
    factory that raises stores its exception in its own slot and the
    remaining sources are still started.
    """
    loop = asyncio.get_running_loop()
    return [_start(loop, index, item) for index, item in enumerate(sources)]


async def emit(sources: Sequence[object]) -> AsyncIterator[Chunk]:
    """Yield the chunks of ``sources`` in list order.

    Raises:
        SourceError: A source failed to resolve or its sub-stream raised.
            Chunks of earlier sources have already been yielded.
    """
    slots = resolve_sources(sources)
    logger.debug("resolution started", extra={"sources": len(slots)})
    visited = 0
    try:
        for slot in slots:
            try:
                # a cancelled pull must not cancel the slot, nor the awaitable it wraps
                content = await asyncio.shield(slot.future)
            except Exception as exc:
                visited += 1
                logger.debug("source failed", exc_info=True, extra={"index": slot.index})
                raise SourceError.from_exc(slot.index, slot.kind, exc) from exc
            visited += 1

            if content.kind is ContentKind.TEXT:
                yield content.value  # type: ignore[misc]
            elif content.kind is ContentKind.STREAM:
                drain = _drain(slot, content.value)  # type: ignore[arg-type]
                try:
                    async for chunk in drain:
                        yield chunk
                finally:
                    await drain.aclose()
    finally:
        # Sources after the stopping point keep running; retrieve their
        # outcome so failures are logged instead of reported as unhandled.
        for slot in slots[visited:]:
            slot.future.add_done_callback(_discard)


async def _drain(slot: Slot, stream: AsyncIterable[Chunk]) -> AsyncIterator[Chunk]:
    iterator: AsyncIterator[Chunk] | None = None
    exhausted = False
    try:
        while True:
            try:
                if iterator is None:
                    iterator = stream.__aiter__()
                chunk = await iterator.__anext__()
            except StopAsyncIteration:
                exhausted = True
                return
            except Exception as exc:
                exhausted = True
                logger.debug("sub-stream failed", exc_info=True, extra={"index": slot.index})
                raise SourceError.from_exc(slot.index, slot.kind, exc, FailurePhase.DRAIN) from exc
            yield chunk
    finally:
        if not exhausted and iterator is not None and (aclose := getattr(iterator, "aclose", None)) is not None:
            await aclose()


def _start(loop: asyncio.AbstractEventLoop, index: int, item: object) -> Slot:
    kind = classify(item).kind
    future: asyncio.Future[Content]
    try:
        source = unwrap(item)
    except Exception as exc:
        future = loop.create_future()
        future.set_exception(exc)
        return Slot(index, kind, future)

    match source.kind:
        case SourceKind.DEFERRED:
            future = loop.create_task(_settle(index, source.value))  # type: ignore[arg-type]
        case SourceKind.TEXT:
            future = _ready(loop, Content(ContentKind.TEXT, source.value))
        case SourceKind.STREAM:
            future = _ready(loop, Content(ContentKind.STREAM, source.value))
        case _:
            _log_dropped(index, source.value)
            future = _ready(loop, EMPTY)
    return Slot(index, kind, future)


async def _settle(index: int, awaitable: Awaitable[object]) -> Content:
    value = await awaitable
    content = to_content(value)
    if content.is_empty:
        _log_dropped(index, value)
        if inspect.iscoroutine(value):
            value.close()
    return content


def _ready(loop: asyncio.AbstractEventLoop, content: Content) -> asyncio.Future[Content]:
    future: asyncio.Future[Content] = loop.create_future()
    future.set_result(content)
    return future


def _discard(future: asyncio.Future[Content]) -> None:
    if not future.cancelled() and (exc := future.exception()) is not None:
        logger.debug("discarding failure of unemitted source: %r", exc)


def _log_dropped(index: int, value: object) -> None:
    logger.debug("dropping unsupported value", extra={"index": index, "value_type": type(value).__name__})
