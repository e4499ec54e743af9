"""Tests for OutputStream and chunk-sequence helpers."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from promisestream import OutputStream, StreamBuilder, collect, from_iterable, stream_to_string


async def letters() -> AsyncIterator[str]:
    for letter in "abc":
        yield letter


# ─────────────────────────────────────────────────────────────────────────────
# Single-pass Contract
# ─────────────────────────────────────────────────────────────────────────────


class TestOutputStream:
    """OutputStream is forward-only and consumed once."""

    @pytest.mark.asyncio
    async def test_reiterating_after_exhaustion_yields_nothing(self) -> None:
        stream = StreamBuilder(["a", "b"]).build()

        assert await collect(stream) == ["a", "b"]
        assert await collect(stream) == []
        assert stream.closed

    @pytest.mark.asyncio
    async def test_consumed_flag(self) -> None:
        stream = StreamBuilder(["a"]).build()
        assert not stream.consumed

        await stream.__anext__()
        assert stream.consumed

    @pytest.mark.asyncio
    async def test_aiter_returns_self(self) -> None:
        stream = from_iterable(["a"])
        assert stream.__aiter__() is stream

    @pytest.mark.asyncio
    async def test_aclose_before_iteration(self) -> None:
        calls: list[int] = []
        stream = StreamBuilder([lambda: calls.append(1) or "x"]).build()

        await stream.aclose()
        await stream.aclose()

        assert await collect(stream) == []
        assert calls == []

    @pytest.mark.asyncio
    async def test_context_manager_closes(self) -> None:
        async with StreamBuilder(["a", "b"]).build() as stream:
            assert await stream.__anext__() == "a"

        assert stream.closed
        assert await collect(stream) == []

    def test_repr_reflects_state(self) -> None:
        assert repr(from_iterable([])) == "<OutputStream fresh>"


# ─────────────────────────────────────────────────────────────────────────────
# from_iterable / collect / stream_to_string
# ─────────────────────────────────────────────────────────────────────────────


class TestHelpers:
    """Constructing and draining chunk sequences."""

    @pytest.mark.asyncio
    async def test_from_sync_iterable(self) -> None:
        assert await collect(from_iterable(["a", b"b"])) == ["a", b"b"]

    @pytest.mark.asyncio
    async def test_from_generator(self) -> None:
        assert await collect(from_iterable(c for c in "xyz")) == ["x", "y", "z"]

    @pytest.mark.asyncio
    async def test_from_async_iterable(self) -> None:
        stream = from_iterable(letters())
        assert isinstance(stream, OutputStream)
        assert await collect(stream) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_text_is_one_chunk(self) -> None:
        assert await collect(from_iterable("hello")) == ["hello"]
        assert await collect(from_iterable(b"hello")) == [b"hello"]

    @pytest.mark.asyncio
    async def test_bytearray_is_frozen_to_bytes(self) -> None:
        chunks = await collect(from_iterable(bytearray(b"abc")))

        assert chunks == [b"abc"]
        assert type(chunks[0]) is bytes

    def test_rejects_non_iterables(self) -> None:
        with pytest.raises(TypeError, match="int"):
            from_iterable(42)  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_stream_to_string_decodes_bytes(self) -> None:
        stream = from_iterable(["caf", "é".encode(), b"!"])
        assert await stream_to_string(stream) == "café!"

    @pytest.mark.asyncio
    async def test_stream_to_string_with_explicit_encoding(self) -> None:
        stream = from_iterable(["na", "ï".encode("latin-1"), "ve"])
        assert await stream_to_string(stream, encoding="latin-1") == "naïve"

    @pytest.mark.asyncio
    async def test_stream_to_string_uses_configured_encoding(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from promisestream import clear_settings_cache

        monkeypatch.setenv("PROMISESTREAM_OUTPUT_ENCODING", "latin-1")
        clear_settings_cache()

        assert await stream_to_string(from_iterable(["ï".encode("latin-1")])) == "ï"
