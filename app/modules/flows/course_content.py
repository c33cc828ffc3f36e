"""Authoring flows for the admin console: course copy and game distractors."""

from __future__ import annotations

from typing import Any

from app.modules.ai.client import AIClient
from app.modules.ai.errors import EmptyResult
from app.modules.flows import prompts
from app.modules.flows.base import Flow, PromptFlow
from app.modules.flows.models import (
    CourseDescriptionInput,
    CourseDescriptionOutput,
    DistractorsInput,
    DistractorsOutput,
)


class GenerateCourseDescriptionFlow(PromptFlow[CourseDescriptionInput, CourseDescriptionOutput]):
    name = "generate-course-description"
    description = "Write a one-paragraph course description from a title."
    input_type = CourseDescriptionInput
    output_type = CourseDescriptionOutput
    template = prompts.COURSE_DESCRIPTION
    answer_field = "description"
    empty_message = "Failed to generate a course description from the AI."


class GenerateDistractorsFlow(Flow[DistractorsInput, DistractorsOutput]):
    """Plausible wrong snippets for the coding game.

    Count, uniqueness and non-overlap with the correct snippets are asked of
    the model in the prompt only. The list comes back as generated.
    """

    name = "generate-distractors"
    description = "Generate incorrect but plausible code snippets for a game level."
    input_type = DistractorsInput
    output_type = DistractorsOutput

    async def _execute(self, payload: DistractorsInput) -> DistractorsOutput:
        prompt = prompts.DISTRACTORS.render(payload)
        output = await self.client.generate(prompt, DistractorsOutput)

        if not output.distractors:
            raise EmptyResult("The AI failed to generate distractor snippets.")
        return output


async def generate_course_description(
    data: Any, *, client: AIClient
) -> CourseDescriptionOutput:
    return await GenerateCourseDescriptionFlow(client).invoke(data)


async def generate_distractors(data: Any, *, client: AIClient) -> DistractorsOutput:
    return await GenerateDistractorsFlow(client).invoke(data)
