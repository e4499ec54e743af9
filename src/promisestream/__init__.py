"""promisestream - ordered async streams from text, streams, awaitables and factories.

Start sending a response before every fragment of it is known. Each source
starts resolving as soon as the stream is pulled, concurrently with the
others, while chunks come out strictly in the order the sources were queued.

Quick Start:
    >>> import asyncio
    >>> from promisestream import StreamBuilder, stream_to_string
    >>>
    >>> async def fetch_user() -> str:
    ...     await asyncio.sleep(0.5)
    ...     return "<p>Avery</p>"
    >>>
    >>> builder = StreamBuilder(["<html><body>", fetch_user(), lambda: "<footer/>"])
    >>> builder.push("</body></html>")
    >>> await stream_to_string(builder.build())
    '<html><body><p>Avery</p><footer/></body></html>'

Sub-streams:
    >>> async def rows():
    ...     for name in ("Apple", "Orange"):
    ...         yield f"<li>{name}</li>"
    >>> StreamBuilder(["<ul>", rows(), "</ul>"]).build()  # <ul><li>Apple</li><li>Orange</li></ul>

HTTP (requires the ``http`` extra):
    >>> from promisestream.adapters import streaming_response
    >>> return streaming_response(builder)
"""

from __future__ import annotations

__version__ = "0.1.0"

from .builder import StreamBuilder
from .errors import FailurePhase, SourceError, SourceFailure
from .observability import configure_logging
from .settings import PromiseStreamSettings, clear_settings_cache, get_settings
from .sources import Chunk, Content, ContentKind, Source, SourceKind, StreamSource, classify
from .stream import OutputStream, collect, from_iterable, stream_to_string

__all__ = [
    # Builder & output
    "StreamBuilder",
    "OutputStream",
    "from_iterable",
    "collect",
    "stream_to_string",
    # Classification
    "classify",
    "Source",
    "SourceKind",
    "Content",
    "ContentKind",
    "Chunk",
    "StreamSource",
    # Errors
    "SourceError",
    "SourceFailure",
    "FailurePhase",
    # Configuration
    "PromiseStreamSettings",
    "get_settings",
    "clear_settings_cache",
    "configure_logging",
]
