import json

import pytest
import requests

from config import Settings
from screening import llm_gemini, llm_groq
from screening.errors import LLMConfigurationError, LLMRequestError, LLMResponseError
from helpers import FakeResponse


def _gemini_body(text, finish="STOP"):
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": finish}]}


def _groq_body(content):
    return {"choices": [{"message": {"content": content}}]}


GEMINI = Settings(gemini_api_key="g-key", gemini_model="gemini-test", timeout=30)
GROQ = Settings(llm_provider="groq", groq_api_key="q-key", groq_model="llama-test")


def test_gemini_sends_schema_constrained_request(fake_post, model_output):
    calls = fake_post(llm_gemini, FakeResponse(_gemini_body(json.dumps(model_output()))))

    result = llm_gemini.generate_screening("SYSTEM", "PROMPT", GEMINI)

    assert result["topCandidates"] == ["1", "2"]
    (call,) = calls
    assert call["url"].endswith("/models/gemini-test:generateContent")
    assert call["headers"]["x-goog-api-key"] == "g-key"
    assert call["timeout"] == 30
    body = call["json"]
    assert body["systemInstruction"]["parts"][0]["text"] == "SYSTEM"
    assert body["contents"][0]["parts"][0]["text"] == "PROMPT"
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert body["generationConfig"]["responseSchema"]["required"] == [
        "evaluations",
        "topCandidates",
        "fairnessCheck",
    ]


def test_gemini_joins_text_parts(fake_post):
    body = {"candidates": [{"content": {"parts": [{"text": '{"evaluations": '}, {"text": "[]}"}]}}]}
    fake_post(llm_gemini, FakeResponse(body))
    assert llm_gemini.generate_screening("s", "p", GEMINI) == {"evaluations": []}


def test_gemini_requires_api_key(fake_post):
    calls = fake_post(llm_gemini, FakeResponse({}))
    with pytest.raises(LLMConfigurationError):
        llm_gemini.generate_screening("s", "p", Settings())
    assert calls == []


@pytest.mark.parametrize(
    "response, exc",
    [
        (FakeResponse({"error": {"message": "bad key"}}, status_code=403), LLMRequestError),
        (FakeResponse(invalid_json=True), LLMResponseError),
        (FakeResponse({"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}}), LLMResponseError),
        (FakeResponse(_gemini_body("", finish="MAX_TOKENS")), LLMResponseError),
        (FakeResponse(_gemini_body("not json")), LLMResponseError),
    ],
)
def test_gemini_failures_propagate(fake_post, response, exc):
    fake_post(llm_gemini, response)
    with pytest.raises(exc):
        llm_gemini.generate_screening("s", "p", GEMINI)


def test_gemini_http_error_keeps_status(fake_post):
    fake_post(llm_gemini, FakeResponse({}, status_code=429))
    with pytest.raises(LLMRequestError) as exc:
        llm_gemini.generate_screening("s", "p", GEMINI)
    assert exc.value.status_code == 429


def test_gemini_network_error(fake_post):
    fake_post(llm_gemini, exc=requests.ConnectionError("connection refused"))
    with pytest.raises(LLMRequestError, match="Could not reach Gemini"):
        llm_gemini.generate_screening("s", "p", GEMINI)


def test_groq_uses_json_mode(fake_post, model_output):
    calls = fake_post(llm_groq, FakeResponse(_groq_body(json.dumps(model_output(ids=("a",))))))

    result = llm_groq.generate_screening("SYSTEM", "PROMPT", GROQ)

    assert result["evaluations"][0]["resumeId"] == "a"
    (call,) = calls
    assert call["headers"]["Authorization"] == "Bearer q-key"
    assert call["json"]["model"] == "llama-test"
    assert call["json"]["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in call["json"]["messages"]] == ["system", "user"]


def test_groq_accepts_object_content(fake_post):
    fake_post(llm_groq, FakeResponse(_groq_body({"evaluations": []})))
    assert llm_groq.generate_screening("s", "p", GROQ) == {"evaluations": []}


@pytest.mark.parametrize(
    "response, exc",
    [
        (FakeResponse({}, status_code=500), LLMRequestError),
        (FakeResponse({"choices": []}), LLMResponseError),
        (FakeResponse(_groq_body("   ")), LLMResponseError),
        (FakeResponse(_groq_body("{broken")), LLMResponseError),
    ],
)
def test_groq_failures_propagate(fake_post, response, exc):
    fake_post(llm_groq, response)
    with pytest.raises(exc):
        llm_groq.generate_screening("s", "p", GROQ)


def test_groq_requires_api_key():
    with pytest.raises(LLMConfigurationError):
        llm_groq.generate_screening("s", "p", Settings(llm_provider="groq"))
