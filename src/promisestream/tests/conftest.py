"""Shared fixtures for promisestream tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from promisestream import clear_settings_cache
from promisestream.observability import ROOT_LOGGER


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate settings and logger configuration between tests."""
    for name in ("PROMISESTREAM_DEBUG", "PROMISESTREAM_LOG_LEVEL", "PROMISESTREAM_LOG_FORMAT",
                 "PROMISESTREAM_OUTPUT_ENCODING", "PROMISESTREAM_OUTPUT_MEDIA_TYPE"):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
