"""Builder composing ordered sources into an output stream.

Example:
    >>> title = "What up dawg!"
    >>> builder = StreamBuilder([
    ...     "<html>",
    ...     "<head><title>",
    ...     title,
    ...     "</title></head>",
    ... ])
    >>> builder.push("<body>", fetch_body(), lambda: render_footer(), "</body></html>")
    >>> stream = builder.build()
    >>> async for chunk in stream:
    ...     await response.write(chunk)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Self

from .resolver import emit
from .sources import StreamSource
from .stream import OutputStream

__all__ = ["StreamBuilder"]

logger = logging.getLogger("promisestream.builder")


class StreamBuilder:
    """Append-only queue of sources; build() snapshots it into a new OutputStream.

    Sources can be text, async iterables, awaitables resolving to text or an
    async iterable, or zero-argument callables returning any of those.
    Chunks always come out in the order the sources were pushed.
    """

    __slots__ = ("_sources",)

    def __init__(self, initial_sources: Iterable[StreamSource] | None = None) -> None:
        """Create a builder, optionally seeded with sources (shorthand for push())."""
        self._sources: list[StreamSource] = list(initial_sources or ())

    @property
    def sources(self) -> tuple[StreamSource, ...]:
        """Read-only view of the currently queued sources."""
        return tuple(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def push(self, *sources: StreamSource) -> Self:
        """Queue sources for streams built after this call.

        Returns:
            self for chaining
        """
        self._sources.extend(sources)
        return self

    def build(self) -> OutputStream:
        """Return a new stream over the sources queued so far.

        Later push() calls are not seen by this stream. Nothing is invoked or
        awaited until the stream is first iterated.
        """
        snapshot = tuple(self._sources)
        logger.debug("snapshot taken", extra={"sources": len(snapshot)})
        return OutputStream(emit(snapshot))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sources={len(self._sources)})"
