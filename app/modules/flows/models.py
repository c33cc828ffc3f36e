"""Input and output records for the AI flows.

Field descriptions double as guidance for the model's structured output.
Following the provider's schema limits, list lengths and the quiz answer
invariant are not encoded in the schema; flows check them after generation.
"""

from __future__ import annotations

from typing import Literal, Optional
from uuid import UUID

from pydantic import Field, HttpUrl, model_validator

from app.modules.ai.validation import FlowRecord


class ExplainCodeSnippetInput(FlowRecord):
    code_snippet: str = Field(..., description="The code snippet to be explained.")


class ExplainCodeSnippetOutput(FlowRecord):
    explanation: str = Field(
        ..., description="The explanation of the code snippet in simpler terms."
    )


class ReviewCodeInput(FlowRecord):
    code: str = Field(..., description="The code to review.")
    solution: str = Field(
        ..., description="The expected correct solution for comparison."
    )
    programming_language: str = Field(
        ..., description="The programming language of the code."
    )


class ReviewCodeOutput(FlowRecord):
    feedback: str = Field(..., description="The feedback on the code.")


class ProvideHintInput(FlowRecord):
    problem_statement: str = Field(
        ..., description="The problem statement for the code practice problem."
    )
    user_code: Optional[str] = Field(
        default=None, description="The user's current code, if any."
    )


class ProvideHintOutput(FlowRecord):
    hint: str = Field(
        ..., description="A hint to help the user solve the code practice problem."
    )


class CourseDescriptionInput(FlowRecord):
    course_title: str = Field(..., description="The title of the course.")


class CourseDescriptionOutput(FlowRecord):
    description: str = Field(
        ..., description="A compelling and concise course description."
    )


class CodeTaskInput(FlowRecord):
    topic_title: str = Field(..., description="The title of the programming topic.")
    programming_language: str = Field(
        ...,
        description="The programming language for the code task (e.g., Python, JavaScript, Java).",
    )


class CodeTaskOutput(FlowRecord):
    task: str = Field(
        ...,
        description="A structured coding challenge including a problem description, starter code, and solution.",
    )


class DistractorsInput(FlowRecord):
    language: str = Field(
        ..., description="The programming language (e.g., Python, JavaScript)."
    )
    correct_snippets: list[str] = Field(
        ...,
        description="An array of correct code snippets that will appear in the level.",
    )
    count: int = Field(
        ..., gt=0, description="The number of unique distractor snippets to generate."
    )


class DistractorsOutput(FlowRecord):
    distractors: list[str] = Field(
        ...,
        description="An array of incorrect but plausible code snippets to serve as distractors.",
    )


class QuizQuestion(FlowRecord):
    question: str = Field(..., description="The quiz question.")
    options: list[str] = Field(..., description="An array of 3-4 possible answers.")
    correct_answer: str = Field(
        ..., description="The correct answer, copied exactly from the options."
    )


class VideoInsightsInput(FlowRecord):
    video_url: HttpUrl = Field(..., description="The URL of the YouTube video.")


class TranscriptPromptInput(FlowRecord):
    transcript: str


class VideoInsightsOutput(FlowRecord):
    summary: str = Field(
        ..., description="A concise, one-paragraph summary of the video content."
    )
    questions: list[QuizQuestion] = Field(
        ...,
        description="An array of 5 multiple-choice quiz questions based on the video.",
    )


class GenerateQuizInput(FlowRecord):
    video_url: HttpUrl = Field(..., description="The URL of the YouTube video.")
    topic_id: UUID = Field(
        ..., description="The ID of the topic to associate the quiz with."
    )


class GeneratedQuiz(FlowRecord):
    questions: list[QuizQuestion] = Field(
        ..., description="An array of 5-7 quiz questions."
    )


class QuizSaved(FlowRecord):
    quiz_id: str


class SaveQuizResult(FlowRecord):
    """Outcome reported by a quiz store."""

    success: bool
    quiz_id: Optional[str] = None
    error: Optional[str] = None


class GenerateQuizResponse(FlowRecord):
    """Envelope returned by ``generate_quiz_from_transcript``; never an exception."""

    success: bool
    quiz_id: Optional[str] = None
    error: Optional[str] = None


class MediaContent(FlowRecord):
    content_type: str
    url: str


class MessagePart(FlowRecord):
    text: Optional[str] = None
    media: Optional[MediaContent] = None

    @model_validator(mode="after")
    def _has_payload(self) -> "MessagePart":
        if self.text is None and self.media is None:
            raise ValueError("a message part needs text or media")
        return self


class ChatMessage(FlowRecord):
    role: Literal["user", "model"]
    content: list[MessagePart]


class ChatInput(FlowRecord):
    messages: list[ChatMessage] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _ends_with_user(self) -> "ChatInput":
        if self.messages[-1].role != "user":
            raise ValueError("the last chat message must come from the user")
        return self
