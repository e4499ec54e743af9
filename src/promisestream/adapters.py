"""Transport adapters for output streams.

Byte encoding for raw sockets and ASGI bodies, plus a Starlette
StreamingResponse factory for web backends.

Example:
    >>> from starlette.applications import Starlette
    >>> from starlette.routing import Route
    >>>
    >>> async def home(request):
    ...     return streaming_response(render_page(request.query_params.get("name", "visitor")))
    >>>
    >>> app = Starlette(routes=[Route("/", home)])
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Mapping
from typing import TYPE_CHECKING

from .builder import StreamBuilder
from .settings import get_settings
from .sources import Chunk

if TYPE_CHECKING:
    from starlette.responses import StreamingResponse

    from .stream import OutputStream

__all__ = ["encode_stream", "streaming_response"]


async def encode_stream(stream: AsyncIterable[Chunk], encoding: str | None = None) -> AsyncIterator[bytes]:
    """Yield every chunk of ``stream`` as bytes; ``str`` chunks are encoded."""
    encoding = encoding or get_settings().output.encoding
    async for chunk in stream:
        yield chunk.encode(encoding) if isinstance(chunk, str) else bytes(chunk)


def streaming_response(
    source: OutputStream | StreamBuilder,
    *,
    media_type: str | None = None,
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> StreamingResponse:
    """Create a Starlette StreamingResponse that sends chunks as they are emitted.

    A StreamBuilder is built on the spot. Media type and encoding default to
    the configured output settings.

    Raises:
        ImportError: starlette is not installed.
    """
    try:
        from starlette.responses import StreamingResponse
    except ImportError as e:
        raise ImportError(
            "HTTP responses require starlette. "
            "Install with: pip install 'promisestream[http]'"
        ) from e

    output = get_settings().output
    stream = source.build() if isinstance(source, StreamBuilder) else source
    return StreamingResponse(
        encode_stream(stream, output.encoding),
        status_code=status_code,
        headers=dict(headers) if headers else None,
        media_type=media_type or output.media_type,
    )
