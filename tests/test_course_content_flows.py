from __future__ import annotations

import pytest

from app.modules.ai.errors import EmptyResult, FlowErrorCategory
from app.modules.flows.course_content import (
    GenerateDistractorsFlow,
    generate_course_description,
    generate_distractors,
)
from app.modules.flows.models import DistractorsOutput
from tests.fakes import FakeAIClient

DISTRACTOR_INPUT = {"language": "Python", "correctSnippets": ["def", "return"], "count": 3}


@pytest.mark.asyncio
async def test_course_description_passes_through():
    client = FakeAIClient([{"description": "Learn Python from scratch."}])

    out = await generate_course_description({"courseTitle": "Python 101"}, client=client)

    assert out.description == "Learn Python from scratch."
    assert "Course Title: Python 101" in client.prompts[0]


@pytest.mark.asyncio
async def test_course_description_fails_on_blank_answer():
    client = FakeAIClient([{"description": ""}])
    with pytest.raises(EmptyResult, match="Failed to generate a course description"):
        await generate_course_description({"courseTitle": "Python 101"}, client=client)


@pytest.mark.asyncio
async def test_distractors_pass_through_unchanged():
    expected = DistractorsOutput(distractors=["fun", "retrun", "var"])
    client = FakeAIClient([expected])

    out = await generate_distractors(DISTRACTOR_INPUT, client=client)

    assert out is expected


@pytest.mark.asyncio
async def test_distractors_keep_extra_items_beyond_count():
    expected = DistractorsOutput(distractors=["fun", "retrun", "var", "lamda", "esle"])
    client = FakeAIClient([expected])

    out = await generate_distractors(DISTRACTOR_INPUT, client=client)

    assert out == expected
    assert len(out.distractors) == 5


@pytest.mark.asyncio
async def test_distractors_fail_on_empty_list():
    client = FakeAIClient([{"distractors": []}])
    with pytest.raises(EmptyResult, match="The AI failed to generate distractor snippets."):
        await generate_distractors(DISTRACTOR_INPUT, client=client)


@pytest.mark.asyncio
async def test_distractors_run_reports_empty_result():
    client = FakeAIClient([{"distractors": []}])

    result = await GenerateDistractorsFlow(client).run(DISTRACTOR_INPUT)

    assert result.success is False
    assert result.error_code is FlowErrorCategory.EMPTY_RESULT
