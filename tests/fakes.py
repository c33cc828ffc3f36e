"""In-memory stand-ins for the AI client, caption source and quiz store."""

from __future__ import annotations

import uuid
from typing import Any, Optional

from app.modules.flows.models import QuizQuestion, SaveQuizResult
from app.modules.flows.tools.youtube_transcript import CaptionSourceError


class FakeAIClient:
    """Stands in for ``AIClient``; returns preset outputs and stream chunks."""

    def __init__(
        self,
        outputs: Optional[list[Any]] = None,
        *,
        chunks: Optional[list[str]] = None,
        error: Optional[Exception] = None,
        stream_error: Optional[Exception] = None,
    ) -> None:
        self.outputs = list(outputs or [])
        self.chunks = list(chunks or [])
        self.error = error
        self.stream_error = stream_error
        self.prompts: list[str] = []
        self.stream_calls: list[tuple[Any, Any]] = []

    async def generate(self, prompt, output_type, *, system_prompt=None, tools=()):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        output = self.outputs.pop(0)
        if isinstance(output, dict):
            return output_type.model_validate(output)
        return output

    async def stream(self, prompt, *, message_history=None, system_prompt=None, tools=()):
        self.stream_calls.append((prompt, message_history))
        for chunk in self.chunks:
            yield chunk
        if self.stream_error is not None:
            raise self.stream_error


class FakeCaptionSource:
    def __init__(
        self, segments: Optional[list[str]] = None, error: Optional[str] = None
    ) -> None:
        self.segments = segments or []
        self.error = error
        self.urls: list[str] = []

    async def fetch_segments(self, video_url: str) -> list[str]:
        self.urls.append(video_url)
        if self.error is not None:
            raise CaptionSourceError(self.error)
        return list(self.segments)


class FakeQuizStore:
    def __init__(self, result: Optional[SaveQuizResult] = None, error: Optional[Exception] = None) -> None:
        self.result = result
        self.error = error
        self.saved: list[tuple[uuid.UUID, list[QuizQuestion]]] = []
        self.quizzes: dict[uuid.UUID, Any] = {}

    async def create_quiz_for_topic(self, topic_id, questions):
        self.saved.append((topic_id, questions))
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return SaveQuizResult(success=True, quiz_id=str(uuid.uuid4()))

    async def get_quiz_for_topic(self, topic_id):
        return self.quizzes.get(topic_id)


def make_question(n: int, *, options: Optional[list[str]] = None, answer: Optional[str] = None) -> dict:
    options = options or [f"A{n}", f"B{n}", f"C{n}", f"D{n}"]
    return {
        "question": f"Question {n}?",
        "options": options,
        "correctAnswer": answer if answer is not None else options[0],
    }
