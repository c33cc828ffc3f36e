"""AI flows module exports."""

from .base import Flow, FlowDeps, FlowResult
from .chat import ChatFlow, chat
from .code_tutor import (
    explain_code_snippet,
    generate_code_task,
    provide_hint_for_code_practice,
    review_code_and_provide_feedback,
)
from .course_content import generate_course_description, generate_distractors
from .registry import FLOW_REGISTRY, build_flow, describe_flow
from .video_insights import extract_video_insights, generate_quiz_from_transcript

__all__ = [
    "Flow",
    "FlowDeps",
    "FlowResult",
    "ChatFlow",
    "chat",
    "explain_code_snippet",
    "generate_code_task",
    "provide_hint_for_code_practice",
    "review_code_and_provide_feedback",
    "generate_course_description",
    "generate_distractors",
    "extract_video_insights",
    "generate_quiz_from_transcript",
    "FLOW_REGISTRY",
    "build_flow",
    "describe_flow",
]
