"""HTTP surface with the AI client, transcripts and quiz store overridden."""

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from app.apis.deps import get_ai_client, get_quiz_store, get_transcript_fetcher
from app.core.config import settings
from app.modules.flows.models import GeneratedQuiz, QuizQuestion, SaveQuizResult
from app.modules.flows.tools.youtube_transcript import CAPTIONS_DISABLED_MESSAGE, TranscriptFetcher
from main import app
from tests.fakes import FakeAIClient, FakeCaptionSource, FakeQuizStore, make_question

PREFIX = f"/{settings.app.version}/ai"


@pytest.fixture
def overrides():
    state = {
        "client": FakeAIClient(),
        "transcripts": TranscriptFetcher(source=FakeCaptionSource(["Some", "captions"])),
        "store": FakeQuizStore(),
    }
    app.dependency_overrides[get_ai_client] = lambda: state["client"]
    app.dependency_overrides[get_transcript_fetcher] = lambda: state["transcripts"]
    app.dependency_overrides[get_quiz_store] = lambda: state["store"]
    try:
        yield state
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def http(overrides):
    return TestClient(app)


def test_root_reports_status(http):
    resp = http.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "app": settings.app.name, "version": settings.app.version}


def test_list_flows(http):
    resp = http.get(f"{PREFIX}/flows")
    assert resp.status_code == 200
    names = {f["name"] for f in resp.json()}
    assert "generate-distractors" in names
    assert len(names) == 9


def test_structured_flow_success_envelope(http, overrides):
    overrides["client"] = FakeAIClient([{"explanation": "Prints hi."}])

    resp = http.post(f"{PREFIX}/explain-code-snippet", json={"codeSnippet": "print('hi')"})

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True,
        "data": {"explanation": "Prints hi."},
        "error": None,
        "errorCode": None,
    }


def test_snake_case_bodies_are_accepted(http, overrides):
    overrides["client"] = FakeAIClient([{"hint": "Use a loop."}])

    resp = http.post(
        f"{PREFIX}/provide-hint-for-code-practice", json={"problem_statement": "Sum 1..n"}
    )

    assert resp.status_code == 200
    assert resp.json()["data"] == {"hint": "Use a loop."}


def test_empty_result_maps_to_502(http, overrides):
    overrides["client"] = FakeAIClient([{"distractors": []}])

    resp = http.post(
        f"{PREFIX}/generate-distractors",
        json={"language": "Python", "correctSnippets": ["def"], "count": 2},
    )

    assert resp.status_code == 502
    body = resp.json()
    assert body["success"] is False
    assert body["errorCode"] == "empty_result"
    assert body["error"] == "The AI failed to generate distractor snippets."


def test_invalid_body_maps_to_422_envelope(http):
    resp = http.post(f"{PREFIX}/review-code-and-provide-feedback", json={"code": "x"})

    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["errorCode"] == "schema_mismatch"
    assert "solution" in body["error"]


def test_unavailable_transcript_maps_to_424(http, overrides):
    overrides["transcripts"] = TranscriptFetcher(source=FakeCaptionSource(error="subtitles are disabled"))

    resp = http.post(f"{PREFIX}/extract-video-insights", json={"videoUrl": "https://youtu.be/ABC123"})

    assert resp.status_code == 424
    assert resp.json()["error"] == CAPTIONS_DISABLED_MESSAGE


def test_invalid_generated_quiz_maps_to_502(http, overrides):
    bad = make_question(1, options=["a", "b", "c"], answer="d")
    overrides["client"] = FakeAIClient([{"summary": "A video.", "questions": [bad]}])

    resp = http.post(f"{PREFIX}/extract-video-insights", json={"videoUrl": "https://youtu.be/ABC123"})

    assert resp.status_code == 502
    body = resp.json()
    assert body["errorCode"] == "generation_failed"
    assert "not one of its options" in body["error"]


def test_quiz_generation_success(http, overrides):
    overrides["client"] = FakeAIClient([{"questions": [make_question(1), make_question(2)]}])
    overrides["store"] = FakeQuizStore(SaveQuizResult(success=True, quiz_id="quiz-9"))
    topic_id = str(uuid.uuid4())

    resp = http.post(
        f"{PREFIX}/generate-quiz-from-transcript",
        json={"videoUrl": "https://youtu.be/ABC123", "topicId": topic_id},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "quizId": "quiz-9", "error": None}
    assert str(overrides["store"].saved[0][0]) == topic_id


def test_quiz_generation_failures_still_answer_200(http, overrides):
    overrides["transcripts"] = TranscriptFetcher(source=FakeCaptionSource(error="subtitles are disabled"))

    resp = http.post(
        f"{PREFIX}/generate-quiz-from-transcript",
        json={"videoUrl": "https://youtu.be/ABC123", "topicId": str(uuid.uuid4())},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": False, "quizId": None, "error": CAPTIONS_DISABLED_MESSAGE}


def test_topic_quiz_lookup(http, overrides):
    topic_id = uuid.uuid4()
    overrides["store"].quizzes[topic_id] = GeneratedQuiz(
        questions=[QuizQuestion(question="Q?", options=["a", "b", "c"], correct_answer="a")]
    )

    found = http.get(f"{PREFIX}/quizzes/{topic_id}")
    missing = http.get(f"{PREFIX}/quizzes/{uuid.uuid4()}")

    assert found.status_code == 200
    assert found.json()["questions"][0]["correctAnswer"] == "a"
    assert missing.status_code == 404


def test_chat_streams_plain_text(http, overrides):
    overrides["client"] = FakeAIClient(chunks=["Hel", "lo"])

    resp = http.post(
        f"{PREFIX}/chat",
        json={"messages": [{"role": "user", "content": [{"text": "Say hello"}]}]},
    )

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "Hello"


def test_chat_rejects_conversations_not_ending_with_the_user(http):
    resp = http.post(
        f"{PREFIX}/chat",
        json={"messages": [{"role": "model", "content": [{"text": "Hi"}]}]},
    )

    assert resp.status_code == 422
    assert resp.json()["errorCode"] == "schema_mismatch"
