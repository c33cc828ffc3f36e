"""Shared fixtures; no test touches the network or a real database."""

from __future__ import annotations

import pytest

from app.modules.flows.tools.youtube_transcript import TranscriptFetcher
from tests.fakes import FakeCaptionSource, FakeQuizStore


@pytest.fixture
def caption_source() -> FakeCaptionSource:
    return FakeCaptionSource(["Python lists are ordered.", "They are mutable."])


@pytest.fixture
def transcripts(caption_source: FakeCaptionSource) -> TranscriptFetcher:
    return TranscriptFetcher(source=caption_source)


@pytest.fixture
def quiz_store() -> FakeQuizStore:
    return FakeQuizStore()
