"""Tests for the AI summarizer."""

from __future__ import annotations

import io
import json
from http.client import RemoteDisconnected
from urllib.error import HTTPError

import pytest

from repograph.config import SummarizerConfig
from repograph.errors import SummarizerError, SummarizerNotConfiguredError
from repograph.llm.summarizer import Summarizer, build_prompt


def test_summarizer_constructs_request() -> None:
    captured = {}

    def fake_runner(request):
        captured["prompt"] = request.prompt
        captured["model"] = request.model
        captured["base_url"] = request.base_url
        captured["api_key"] = request.api_key
        captured["request_timeout"] = request.request_timeout
        return "Overall Purpose: prints things"

    summarizer = Summarizer(
        SummarizerConfig(
            api_key="key",
            model="custom-model",
            base_url="http://localhost:8080/v1/",
            request_timeout=15.0,
        ),
        runner=fake_runner,
    )
    result = summarizer.summarize("print('hi')")

    assert result == "Overall Purpose: prints things"
    assert captured["model"] == "custom-model"
    assert captured["base_url"] == "http://localhost:8080/v1"
    assert captured["api_key"] == "key"
    assert captured["request_timeout"] == 15.0
    assert "print('hi')" in captured["prompt"]
    assert captured["prompt"] == build_prompt("print('hi')")


def test_prompt_wraps_code_in_template() -> None:
    prompt = build_prompt("const x = {a: 1};")
    assert "Overall Purpose" in prompt
    assert "Key Components & Functionality" in prompt
    assert "```\nconst x = {a: 1};\n```" in prompt


def test_missing_api_key_is_reported() -> None:
    summarizer = Summarizer(SummarizerConfig(api_key=None), runner=lambda request: "unused")
    assert summarizer.configured is False
    with pytest.raises(SummarizerNotConfiguredError):
        summarizer.summarize("code")


def test_empty_code_is_rejected() -> None:
    summarizer = Summarizer(SummarizerConfig(api_key="key"), runner=lambda request: "unused")
    with pytest.raises(ValueError):
        summarizer.summarize("")


def test_http_runner_posts_chat_completion(monkeypatch) -> None:
    captured = {}

    class FakeResponse:
        def read(self):
            return json.dumps(
                {"choices": [{"message": {"content": "  A helper module.  "}}]}
            ).encode("utf-8")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["headers"] = {k.lower(): v for k, v in request.header_items()}
        captured["payload"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse()

    monkeypatch.setattr("repograph.llm.summarizer.urlopen", fake_urlopen)

    summarizer = Summarizer(
        SummarizerConfig(
            api_key="gem-key",
            model="gemini-1.5-flash",
            base_url="https://ai.example/v1beta/openai",
            temperature=0.1,
            request_timeout=20.0,
        )
    )
    assert summarizer.summarize("def f(): pass") == "A helper module."
    assert captured["url"] == "https://ai.example/v1beta/openai/chat/completions"
    assert captured["headers"]["authorization"] == "Bearer gem-key"
    assert captured["payload"]["model"] == "gemini-1.5-flash"
    assert captured["payload"]["temperature"] == 0.1
    assert captured["payload"]["messages"][0]["role"] == "user"
    assert "def f(): pass" in captured["payload"]["messages"][0]["content"]
    assert captured["timeout"] == 20.0


def test_http_runner_failure_raises_summarizer_error(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise HTTPError(request.full_url, 429, "Too Many Requests", {}, io.BytesIO(b"quota"))

    monkeypatch.setattr("repograph.llm.summarizer.urlopen", fake_urlopen)

    summarizer = Summarizer(SummarizerConfig(api_key="key"))
    with pytest.raises(SummarizerError) as excinfo:
        summarizer.summarize("code")
    assert "429" in str(excinfo.value)
    assert excinfo.value.message == "Failed to get summary from AI service."


@pytest.mark.parametrize(
    "failure",
    [
        TimeoutError("The read operation timed out"),
        RemoteDisconnected("Remote end closed connection without response"),
    ],
)
def test_http_runner_connection_failure_raises_summarizer_error(monkeypatch, failure) -> None:
    def fake_urlopen(request, timeout=None):
        raise failure

    monkeypatch.setattr("repograph.llm.summarizer.urlopen", fake_urlopen)

    summarizer = Summarizer(SummarizerConfig(api_key="key"))
    with pytest.raises(SummarizerError) as excinfo:
        summarizer.summarize("code")
    assert excinfo.value.__cause__ is failure
    assert excinfo.value.message == "Failed to get summary from AI service."
