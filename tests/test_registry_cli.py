from __future__ import annotations

import json

import pytest

from app.modules.flows.base import FlowDeps
from app.modules.flows.cli import main
from app.modules.flows.code_tutor import ExplainCodeSnippetFlow
from app.modules.flows.registry import FLOW_REGISTRY, build_flow, describe_flow
from app.modules.flows.video_insights import GenerateQuizFromTranscriptFlow
from tests.fakes import FakeAIClient, FakeQuizStore

FLOW_NAMES = {
    "explain-code-snippet",
    "review-code-and-provide-feedback",
    "provide-hint-for-code-practice",
    "generate-course-description",
    "generate-code-task",
    "generate-distractors",
    "extract-video-insights",
    "generate-quiz-from-transcript",
    "chat",
}


def test_registry_publishes_every_flow():
    assert set(FLOW_REGISTRY) == FLOW_NAMES


def test_build_flow_wires_collaborators(transcripts):
    deps = FlowDeps(client=FakeAIClient(), transcripts=transcripts, store=FakeQuizStore())

    explain = build_flow("explain-code-snippet", deps)
    quiz = build_flow("generate-quiz-from-transcript", deps)

    assert isinstance(explain, ExplainCodeSnippetFlow)
    assert isinstance(quiz, GenerateQuizFromTranscriptFlow)
    assert quiz.store is deps.store
    assert quiz.transcripts is transcripts


def test_build_flow_rejects_unknown_names_and_missing_store():
    with pytest.raises(KeyError, match="Unknown flow 'nope'"):
        build_flow("nope", FlowDeps(client=FakeAIClient()))
    with pytest.raises(RuntimeError, match="needs a quiz store"):
        build_flow("generate-quiz-from-transcript", FlowDeps(client=FakeAIClient()))


def test_describe_flow_lists_wire_fields():
    described = describe_flow("review-code-and-provide-feedback")
    assert described["streaming"] is False
    assert [f["alias"] for f in described["input"]] == ["code", "solution", "programmingLanguage"]
    assert [f["name"] for f in described["output"]] == ["feedback"]
    assert describe_flow("chat")["streaming"] is True


def test_cli_list_prints_all_flows(capsys):
    assert main(["list"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert {f["name"] for f in listed} == FLOW_NAMES


def test_cli_run_prints_the_flow_result(capsys):
    deps = FlowDeps(client=FakeAIClient([{"explanation": "Assigns 1."}]))

    code = main(["run", "explain-code-snippet", "--input", '{"codeSnippet": "x = 1"}'], deps=deps)

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"success": True, "data": {"explanation": "Assigns 1."}, "error": None, "errorCode": None}


def test_cli_run_reads_input_files_and_fails_with_status_one(tmp_path, capsys):
    path = tmp_path / "input.json"
    path.write_text(json.dumps({"courseTitle": "Rust"}), encoding="utf-8")
    deps = FlowDeps(client=FakeAIClient([{"description": ""}]))

    code = main(["run", "generate-course-description", "--input-file", str(path)], deps=deps)

    assert code == 1
    out = json.loads(capsys.readouterr().out)
    assert out["errorCode"] == "empty_result"


def test_cli_run_requires_input():
    with pytest.raises(SystemExit):
        main(["run", "explain-code-snippet"], deps=FlowDeps(client=FakeAIClient()))


def test_cli_chat_streams_to_stdout(capsys):
    deps = FlowDeps(client=FakeAIClient(chunks=["Hel", "lo"]))
    assert main(["chat", "--message", "hi"], deps=deps) == 0
    assert capsys.readouterr().out == "Hello\n"
