"""Tutoring flows for the code practice pages: explain, review, hint, task."""

from __future__ import annotations

from typing import Any

from app.modules.ai.client import AIClient
from app.modules.flows import prompts
from app.modules.flows.base import PromptFlow
from app.modules.flows.models import (
    CodeTaskInput,
    CodeTaskOutput,
    ExplainCodeSnippetInput,
    ExplainCodeSnippetOutput,
    ProvideHintInput,
    ProvideHintOutput,
    ReviewCodeInput,
    ReviewCodeOutput,
)


class ExplainCodeSnippetFlow(PromptFlow[ExplainCodeSnippetInput, ExplainCodeSnippetOutput]):
    name = "explain-code-snippet"
    description = "Explain a code snippet in simpler terms."
    input_type = ExplainCodeSnippetInput
    output_type = ExplainCodeSnippetOutput
    template = prompts.EXPLAIN_CODE_SNIPPET
    answer_field = "explanation"
    empty_message = "Failed to get an explanation from the AI."


class ReviewCodeFlow(PromptFlow[ReviewCodeInput, ReviewCodeOutput]):
    name = "review-code-and-provide-feedback"
    description = "Give playful feedback on an incorrect submission."
    input_type = ReviewCodeInput
    output_type = ReviewCodeOutput
    template = prompts.REVIEW_CODE
    answer_field = "feedback"
    empty_message = "Failed to get feedback on the code from the AI."


class ProvideHintFlow(PromptFlow[ProvideHintInput, ProvideHintOutput]):
    name = "provide-hint-for-code-practice"
    description = "Hint at the next step of a practice problem."
    input_type = ProvideHintInput
    output_type = ProvideHintOutput
    template = prompts.PROVIDE_HINT
    answer_field = "hint"
    empty_message = "Failed to get a hint from the AI."


class GenerateCodeTaskFlow(PromptFlow[CodeTaskInput, CodeTaskOutput]):
    name = "generate-code-task"
    description = "Write a beginner coding challenge (problem, starter code, solution)."
    input_type = CodeTaskInput
    output_type = CodeTaskOutput
    template = prompts.CODE_TASK
    answer_field = "task"
    empty_message = "Failed to generate a code task from the AI."


async def explain_code_snippet(data: Any, *, client: AIClient) -> ExplainCodeSnippetOutput:
    return await ExplainCodeSnippetFlow(client).invoke(data)


async def review_code_and_provide_feedback(data: Any, *, client: AIClient) -> ReviewCodeOutput:
    return await ReviewCodeFlow(client).invoke(data)


async def provide_hint_for_code_practice(data: Any, *, client: AIClient) -> ProvideHintOutput:
    return await ProvideHintFlow(client).invoke(data)


async def generate_code_task(data: Any, *, client: AIClient) -> CodeTaskOutput:
    return await GenerateCodeTaskFlow(client).invoke(data)
