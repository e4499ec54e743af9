"""Classification of queued sources into a tagged union.

A queued item is one of:
    - text: ``str``/``bytes``, emitted as a single chunk
    - stream: any async iterable, drained chunk by chunk
    - deferred: any awaitable settling to text or a stream
    - factory: a zero-argument callable returning any of the above

Anything else is unsupported and resolves to empty content.

Example:
    >>> classify("<p>hi</p>").kind
    <SourceKind.TEXT: 'text'>
    >>> unwrap(lambda: "<p>hi</p>").kind
    <SourceKind.TEXT: 'text'>
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterable, Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias, Union

Chunk: TypeAlias = Union[str, bytes]
Streamable: TypeAlias = Union[str, bytes, AsyncIterable[Chunk], Awaitable[object]]
StreamSource: TypeAlias = Union[Streamable, Callable[[], object]]

_TEXT_TYPES = (str, bytes, bytearray)


class SourceKind(StrEnum):
    """Kinds of queued items."""
    TEXT = "text"
    STREAM = "stream"
    DEFERRED = "deferred"
    FACTORY = "factory"
    UNSUPPORTED = "unsupported"


class ContentKind(StrEnum):
    """Kinds of fully resolved content."""
    TEXT = "text"
    STREAM = "stream"
    EMPTY = "empty"


@dataclass(slots=True, frozen=True)
class Source:
    """A classified queued item."""
    kind: SourceKind
    value: object = None


@dataclass(slots=True, frozen=True)
class Content:
    """Resolved content of one source: text, a stream to drain, or nothing."""
    kind: ContentKind
    value: object = None

    @property
    def is_empty(self) -> bool:
        return self.kind is ContentKind.EMPTY


EMPTY = Content(ContentKind.EMPTY)


def classify(value: object) -> Source:
    """Determine the kind of ``value`` without invoking or awaiting it.

    Precedence is text, stream, deferred, factory, so an object that is both
    async-iterable and callable is treated as a stream.
    """
    if isinstance(value, _TEXT_TYPES):
        return Source(SourceKind.TEXT, bytes(value) if isinstance(value, bytearray) else value)
    if isinstance(value, AsyncIterable):
        return Source(SourceKind.STREAM, value)
    if inspect.isawaitable(value):
        return Source(SourceKind.DEFERRED, value)
    if callable(value):
        return Source(SourceKind.FACTORY, value)
    return Source(SourceKind.UNSUPPORTED, value)


def unwrap(value: object) -> Source:
    """Classify a queued item, invoking it once if it is a factory.

    Only one level of indirection is followed: a factory returning another
    factory is unsupported. Exceptions raised by the factory propagate.
    """
    source = classify(value)
    if source.kind is not SourceKind.FACTORY:
        return source
    inner = classify(source.value())  # type: ignore[operator]
    if inner.kind is SourceKind.FACTORY:
        return Source(SourceKind.UNSUPPORTED, inner.value)
    return inner


def to_content(value: object) -> Content:
    """Map a settled value to content; anything but text or a stream is empty."""
    source = classify(value)
    match source.kind:
        case SourceKind.TEXT: return Content(ContentKind.TEXT, source.value)
        case SourceKind.STREAM: return Content(ContentKind.STREAM, source.value)
        case _: return EMPTY
