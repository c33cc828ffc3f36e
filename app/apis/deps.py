from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.core.db.base import async_session_maker
from app.core.db_services import SqlQuizStore
from app.core.logging import get_logger
from app.modules.ai.client import AIClient
from app.modules.flows.tools.youtube_transcript import TranscriptFetcher

logger = get_logger(__name__)


def get_ai_client(request: Request) -> AIClient:
    """Return the application's AI client, building it from settings on first use."""
    client = getattr(request.app.state, "ai_client", None)
    if client is None:
        try:
            client = AIClient.from_settings()
        except RuntimeError as e:
            logger.error(f"AI client unavailable: {e}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="The AI model is not configured.",
            ) from e
        request.app.state.ai_client = client
    return client


def get_transcript_fetcher(request: Request) -> TranscriptFetcher:
    fetcher = getattr(request.app.state, "transcripts", None)
    if fetcher is None:
        fetcher = TranscriptFetcher()
        request.app.state.transcripts = fetcher
    return fetcher


def get_quiz_store(request: Request) -> SqlQuizStore:
    store = getattr(request.app.state, "quiz_store", None)
    if store is None:
        store = SqlQuizStore(async_session_maker)
        request.app.state.quiz_store = store
    return store
