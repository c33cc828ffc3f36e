from __future__ import annotations

from typing import Annotated, Any, Union
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, StreamingResponse

from app.apis.deps import get_ai_client, get_quiz_store, get_transcript_fetcher
from app.apis.flows.schemas import FlowDescription
from app.core.config import settings
from app.core.db_services import SqlQuizStore
from app.modules.ai.client import AIClient
from app.modules.ai.errors import FlowErrorCategory
from app.modules.flows.base import Flow, FlowResult
from app.modules.flows.chat import ChatFlow
from app.modules.flows.code_tutor import (
    ExplainCodeSnippetFlow,
    GenerateCodeTaskFlow,
    ProvideHintFlow,
    ReviewCodeFlow,
)
from app.modules.flows.course_content import (
    GenerateCourseDescriptionFlow,
    GenerateDistractorsFlow,
)
from app.modules.flows.models import (
    ChatInput,
    CodeTaskInput,
    CodeTaskOutput,
    CourseDescriptionInput,
    CourseDescriptionOutput,
    DistractorsInput,
    DistractorsOutput,
    ExplainCodeSnippetInput,
    ExplainCodeSnippetOutput,
    GeneratedQuiz,
    GenerateQuizInput,
    GenerateQuizResponse,
    ProvideHintInput,
    ProvideHintOutput,
    ReviewCodeInput,
    ReviewCodeOutput,
    VideoInsightsInput,
    VideoInsightsOutput,
)
from app.modules.flows.registry import FLOW_REGISTRY, describe_flow
from app.modules.flows.tools.youtube_transcript import TranscriptFetcher
from app.modules.flows.video_insights import (
    ExtractVideoInsightsFlow,
    generate_quiz_from_transcript as _generate_quiz_from_transcript,
)


router = APIRouter()

Client = Annotated[AIClient, Depends(get_ai_client)]
Transcripts = Annotated[TranscriptFetcher, Depends(get_transcript_fetcher)]
QuizStore = Annotated[SqlQuizStore, Depends(get_quiz_store)]

PREFIX = f"/{settings.app.version}/ai"

_FAILURE_STATUS = {
    FlowErrorCategory.SCHEMA_MISMATCH: 422,
    FlowErrorCategory.GENERATION_FAILED: 502,
    FlowErrorCategory.EMPTY_RESULT: 502,
    FlowErrorCategory.TRANSCRIPT_UNAVAILABLE: 424,
    FlowErrorCategory.PERSISTENCE_FAILED: 500,
    FlowErrorCategory.STREAM_FAILED: 502,
}


async def _run(flow: Flow[Any, Any], req: Any) -> Union[FlowResult[Any], JSONResponse]:
    result = await flow.run(req)
    if result.success:
        return result
    status_code = _FAILURE_STATUS.get(result.error_code, 500)  # type: ignore[arg-type]
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", by_alias=True),
    )


@router.get(f"{PREFIX}/flows", response_model=list[FlowDescription], tags=["ai"])
async def list_flows() -> list[FlowDescription]:
    return [FlowDescription(**describe_flow(name)) for name in FLOW_REGISTRY]


@router.post(
    f"{PREFIX}/explain-code-snippet",
    response_model=FlowResult[ExplainCodeSnippetOutput],
    tags=["ai"],
)
async def explain_code_snippet(req: ExplainCodeSnippetInput, client: Client):
    return await _run(ExplainCodeSnippetFlow(client), req)


@router.post(
    f"{PREFIX}/review-code-and-provide-feedback",
    response_model=FlowResult[ReviewCodeOutput],
    tags=["ai"],
)
async def review_code_and_provide_feedback(req: ReviewCodeInput, client: Client):
    return await _run(ReviewCodeFlow(client), req)


@router.post(
    f"{PREFIX}/provide-hint-for-code-practice",
    response_model=FlowResult[ProvideHintOutput],
    tags=["ai"],
)
async def provide_hint_for_code_practice(req: ProvideHintInput, client: Client):
    return await _run(ProvideHintFlow(client), req)


@router.post(
    f"{PREFIX}/generate-course-description",
    response_model=FlowResult[CourseDescriptionOutput],
    tags=["ai"],
)
async def generate_course_description(req: CourseDescriptionInput, client: Client):
    return await _run(GenerateCourseDescriptionFlow(client), req)


@router.post(
    f"{PREFIX}/generate-code-task",
    response_model=FlowResult[CodeTaskOutput],
    tags=["ai"],
)
async def generate_code_task(req: CodeTaskInput, client: Client):
    return await _run(GenerateCodeTaskFlow(client), req)


@router.post(
    f"{PREFIX}/generate-distractors",
    response_model=FlowResult[DistractorsOutput],
    tags=["ai"],
)
async def generate_distractors(req: DistractorsInput, client: Client):
    return await _run(GenerateDistractorsFlow(client), req)


@router.post(
    f"{PREFIX}/extract-video-insights",
    response_model=FlowResult[VideoInsightsOutput],
    tags=["ai"],
)
async def extract_video_insights(
    req: VideoInsightsInput, client: Client, transcripts: Transcripts
):
    return await _run(ExtractVideoInsightsFlow(client, transcripts=transcripts), req)


@router.post(
    f"{PREFIX}/generate-quiz-from-transcript",
    response_model=GenerateQuizResponse,
    tags=["ai"],
)
async def generate_quiz_from_transcript(
    req: GenerateQuizInput,
    client: Client,
    transcripts: Transcripts,
    store: QuizStore,
) -> GenerateQuizResponse:
    # Failures are reported in the body; this endpoint always answers 200
    return await _generate_quiz_from_transcript(
        req, client=client, store=store, transcripts=transcripts
    )


@router.get(
    f"{PREFIX}/quizzes/{{topic_id}}",
    response_model=GeneratedQuiz,
    tags=["ai"],
)
async def get_topic_quiz(topic_id: UUID, store: QuizStore) -> GeneratedQuiz:
    quiz = await store.get_quiz_for_topic(topic_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


@router.post(f"{PREFIX}/chat", tags=["ai"])
async def chat(req: ChatInput, client: Client) -> StreamingResponse:
    return StreamingResponse(
        ChatFlow(client).open(req),
        media_type="text/plain; charset=utf-8",
        headers={"Cache-Control": "no-cache"},
    )
