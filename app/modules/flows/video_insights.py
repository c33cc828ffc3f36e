"""Flows that turn a YouTube video's transcript into study material.

Both flows fetch the transcript before calling the model and stop early when
captions cannot be retrieved. Generated questions must carry 3 or 4 options
and a correct answer copied from those options.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol
from uuid import UUID

from app.core.logging import get_logger
from app.modules.ai.client import AIClient
from app.modules.ai.errors import EmptyResult, GenerationFailed, PersistenceFailed
from app.modules.flows import prompts
from app.modules.flows.base import Flow, FlowDeps
from app.modules.flows.models import (
    GeneratedQuiz,
    GenerateQuizInput,
    GenerateQuizResponse,
    QuizQuestion,
    QuizSaved,
    SaveQuizResult,
    TranscriptPromptInput,
    VideoInsightsInput,
    VideoInsightsOutput,
)
from app.modules.flows.tools.youtube_transcript import TranscriptFetcher

logger = get_logger(__name__)

INSIGHT_QUESTION_COUNT = 5
MAX_QUIZ_QUESTIONS = 7
MIN_OPTIONS, MAX_OPTIONS = 3, 4

SAVE_FAILED_MESSAGE = "Failed to save the generated quiz to the database."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred during quiz generation."


class QuizStore(Protocol):
    async def create_quiz_for_topic(
        self, topic_id: UUID, questions: list[QuizQuestion]
    ) -> SaveQuizResult: ...


def check_quiz_questions(questions: list[QuizQuestion]) -> None:
    """Raise ``GenerationFailed`` unless every question is answerable."""
    for i, q in enumerate(questions):
        options = [o.strip() for o in q.options]
        if not MIN_OPTIONS <= len(options) <= MAX_OPTIONS:
            raise GenerationFailed(
                f"The AI generated an invalid quiz: question {i + 1} has "
                f"{len(options)} options instead of {MIN_OPTIONS} or {MAX_OPTIONS}."
            )
        if q.correct_answer.strip() not in options:
            raise GenerationFailed(
                f"The AI generated an invalid quiz: the answer to question {i + 1} "
                "is not one of its options."
            )


class ExtractVideoInsightsFlow(Flow[VideoInsightsInput, VideoInsightsOutput]):
    name = "extract-video-insights"
    description = "Summarize a YouTube video and write a 5-question quiz about it."
    input_type = VideoInsightsInput
    output_type = VideoInsightsOutput

    def __init__(self, client: AIClient, *, transcripts: Optional[TranscriptFetcher] = None) -> None:
        super().__init__(client)
        self.transcripts = transcripts or TranscriptFetcher()

    @classmethod
    def from_deps(cls, deps: FlowDeps) -> "ExtractVideoInsightsFlow":
        return cls(deps.client, transcripts=deps.transcripts)

    async def _execute(self, payload: VideoInsightsInput) -> VideoInsightsOutput:
        transcript = await self.transcripts.fetch(str(payload.video_url))

        prompt = prompts.VIDEO_INSIGHTS.render(TranscriptPromptInput(transcript=transcript))
        output = await self.client.generate(prompt, VideoInsightsOutput)
        if not output.summary.strip() or not output.questions:
            raise EmptyResult("The AI failed to generate insights from the transcript.")

        check_quiz_questions(output.questions)
        if len(output.questions) > INSIGHT_QUESTION_COUNT:
            output = output.model_copy(
                update={"questions": output.questions[:INSIGHT_QUESTION_COUNT]}
            )
        return output


class GenerateQuizFromTranscriptFlow(Flow[GenerateQuizInput, QuizSaved]):
    name = "generate-quiz-from-transcript"
    description = "Write a 5-7 question quiz from a YouTube video and save it for a topic."
    input_type = GenerateQuizInput
    output_type = QuizSaved

    def __init__(
        self,
        client: AIClient,
        *,
        store: QuizStore,
        transcripts: Optional[TranscriptFetcher] = None,
    ) -> None:
        super().__init__(client)
        self.store = store
        self.transcripts = transcripts or TranscriptFetcher()

    @classmethod
    def from_deps(cls, deps: FlowDeps) -> "GenerateQuizFromTranscriptFlow":
        if deps.store is None:
            raise RuntimeError(f"Flow '{cls.name}' needs a quiz store")
        return cls(deps.client, store=deps.store, transcripts=deps.transcripts)

    async def _execute(self, payload: GenerateQuizInput) -> QuizSaved:
        transcript = await self.transcripts.fetch(str(payload.video_url))

        prompt = prompts.QUIZ_FROM_TRANSCRIPT.render(TranscriptPromptInput(transcript=transcript))
        quiz = await self.client.generate(prompt, GeneratedQuiz)
        if not quiz.questions:
            raise EmptyResult("The AI failed to generate quiz questions from the transcript.")
        check_quiz_questions(quiz.questions)

        saved = await self.store.create_quiz_for_topic(
            payload.topic_id, list(quiz.questions[:MAX_QUIZ_QUESTIONS])
        )
        if not saved.success or not saved.quiz_id:
            raise PersistenceFailed(saved.error or SAVE_FAILED_MESSAGE)
        return QuizSaved(quiz_id=saved.quiz_id)


async def extract_video_insights(
    data: Any, *, client: AIClient, transcripts: Optional[TranscriptFetcher] = None
) -> VideoInsightsOutput:
    return await ExtractVideoInsightsFlow(client, transcripts=transcripts).invoke(data)


async def generate_quiz_from_transcript(
    data: Any,
    *,
    client: AIClient,
    store: QuizStore,
    transcripts: Optional[TranscriptFetcher] = None,
) -> GenerateQuizResponse:
    """Generate and save a quiz, reporting every failure in the envelope."""
    flow = GenerateQuizFromTranscriptFlow(client, store=store, transcripts=transcripts)
    try:
        result = await flow.run(data)
    except Exception:  # noqa: BLE001
        logger.exception("Error in generate_quiz_from_transcript")
        return GenerateQuizResponse(success=False, error=UNEXPECTED_ERROR_MESSAGE)

    if not result.success or result.data is None:
        return GenerateQuizResponse(success=False, error=result.error or UNEXPECTED_ERROR_MESSAGE)
    return GenerateQuizResponse(success=True, quiz_id=result.data.quiz_id)
