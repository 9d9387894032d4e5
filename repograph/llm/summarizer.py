"""Source summaries through an OpenAI-compatible chat-completions endpoint."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http.client import HTTPException
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import SummarizerConfig
from ..errors import SummarizerError, SummarizerNotConfiguredError
from ..logging import get_logger

SUMMARY_TEMPLATE = """
You are an expert code analyst. Provide a structured summary of the following code. Use the following template exactly.

Overall Purpose

    A brief, one-to-two sentence explanation of what this file is for.

Key Components & Functionality

    Use an ordered list without(*) naming each important function, class or component and what it does.

Dependencies & Interactions

    Describe which other modules, libraries or services this code relies on.

```
{code}
```
"""


@dataclass
class SummaryRequest:
    """Represents one summarization call."""

    prompt: str
    model: str
    base_url: str
    api_key: str
    temperature: Optional[float]
    request_timeout: Optional[float]


class Summarizer:
    """Builds the summary prompt and sends it to the configured model."""

    def __init__(
        self,
        config: SummarizerConfig | None = None,
        *,
        runner: Callable[[SummaryRequest], str] | None = None,
    ) -> None:
        self.config = config or SummarizerConfig()
        self._runner = runner or self._http_runner
        self.logger = get_logger("summarizer")

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    def summarize(self, code: str) -> str:
        if not self.configured:
            raise SummarizerNotConfiguredError()
        if not code:
            raise ValueError("No code provided for summarization.")
        request = SummaryRequest(
            prompt=build_prompt(code),
            model=self.config.model,
            base_url=self.config.base_url.rstrip("/"),
            api_key=self.config.api_key or "",
            temperature=self.config.temperature,
            request_timeout=self.config.request_timeout,
        )
        try:
            return self._runner(request)
        except SummarizerError as exc:
            self.logger.error("AI summarization failed: %s", exc)
            raise

    @staticmethod
    def _http_runner(request: SummaryRequest) -> str:
        endpoint = f"{request.base_url}/chat/completions"
        payload: dict[str, object] = {
            "model": request.model,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature

        data = json.dumps(payload).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {request.api_key}",
        }
        http_request = Request(endpoint, data=data, headers=headers, method="POST")
        timeout = request.request_timeout or 60.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise SummarizerError(
                f"Summarizer request failed with status {exc.code}: {message}"
            ) from exc
        except URLError as exc:
            raise SummarizerError(f"Summarizer request failed: {exc.reason}") from exc
        except (OSError, HTTPException) as exc:
            raise SummarizerError(
                f"Summarizer request failed: {type(exc).__name__}: {exc}"
            ) from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SummarizerError("Summarizer returned invalid JSON") from exc

        content = _extract_content(response_payload)
        if not content:
            raise SummarizerError("Summarizer returned an empty response")
        return content.strip()


def build_prompt(code: str) -> str:
    return SUMMARY_TEMPLATE.format(code=code)


def _extract_content(payload: object) -> str:
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if isinstance(message, dict):
        content = message.get("content")
        if isinstance(content, str):
            return content
    text = first.get("text")
    if isinstance(text, str):
        return text
    return ""


__all__ = ["SUMMARY_TEMPLATE", "Summarizer", "SummaryRequest", "build_prompt"]
