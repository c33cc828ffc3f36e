from __future__ import annotations

import pytest

from app.core.config import TranscriptSettings


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("en", ["en"]),
        ("en, es", ["en", "es"]),
        ("en,,pt-BR,", ["en", "pt-BR"]),
        ('["en", "de"]', ["en", "de"]),
    ],
)
def test_transcript_languages_from_env(monkeypatch, raw, expected):
    monkeypatch.setenv("TRANSCRIPT_LANGUAGES", raw)

    assert TranscriptSettings().languages == expected


def test_transcript_languages_default_to_english(monkeypatch):
    monkeypatch.delenv("TRANSCRIPT_LANGUAGES", raising=False)

    assert TranscriptSettings().languages == ["en"]
