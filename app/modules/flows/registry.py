"""Registry of published flows, keyed by their kebab-case name."""

from __future__ import annotations

from typing import Any

from app.modules.ai.validation import FieldSpec, describe
from app.modules.flows.base import Flow, FlowDeps
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
from app.modules.flows.video_insights import (
    ExtractVideoInsightsFlow,
    GenerateQuizFromTranscriptFlow,
)

FLOW_REGISTRY: dict[str, type[Flow[Any, Any]]] = {
    flow.name: flow
    for flow in (
        ExplainCodeSnippetFlow,
        ReviewCodeFlow,
        ProvideHintFlow,
        GenerateCourseDescriptionFlow,
        GenerateCodeTaskFlow,
        GenerateDistractorsFlow,
        ExtractVideoInsightsFlow,
        GenerateQuizFromTranscriptFlow,
        ChatFlow,
    )
}

STREAMING_FLOWS = frozenset({ChatFlow.name})


def build_flow(name: str, deps: FlowDeps) -> Flow[Any, Any]:
    try:
        flow_cls = FLOW_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown flow '{name}'. Available: {', '.join(sorted(FLOW_REGISTRY))}"
        ) from None
    return flow_cls.from_deps(deps)


def describe_flow(name: str) -> dict[str, Any]:
    flow_cls = FLOW_REGISTRY[name]
    inputs: list[FieldSpec] = describe(flow_cls.input_type)
    outputs: list[FieldSpec] = describe(flow_cls.output_type)
    return {
        "name": name,
        "description": flow_cls.description,
        "streaming": name in STREAMING_FLOWS,
        "input": [f.model_dump() for f in inputs],
        "output": [f.model_dump() for f in outputs],
    }
