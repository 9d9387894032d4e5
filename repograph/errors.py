"""Failure types surfaced by the repository graph pipeline."""

from __future__ import annotations

from typing import Optional


class RepoGraphError(RuntimeError):
    """Base class for failures reported to callers with a user-facing message."""

    status_code = 500
    default_message = "Unexpected repograph failure."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRepoUrlError(RepoGraphError):
    """Raised before any network access when the repository URL is malformed."""

    status_code = 400
    default_message = "Invalid GitHub URL format."


class UpstreamError(RepoGraphError):
    """Raised when a must-have call to the hosting API fails."""

    status_code = 500
    default_message = "Failed to fetch repository data. It might be private or does not exist."

    def __init__(
        self,
        detail: str,
        *,
        url: str | None = None,
        http_status: Optional[int] = None,
    ) -> None:
        super().__init__()
        self.detail = detail
        self.url = url
        self.http_status = http_status

    def __str__(self) -> str:
        return self.detail


class NoRelevantFilesError(RepoGraphError):
    """Raised when the tree listing holds no file matching the relevance filter."""

    status_code = 404

    def __init__(self, branch: str) -> None:
        self.branch = branch
        super().__init__(f"No relevant files found in the default branch ('{branch}').")


class SummarizerNotConfiguredError(RepoGraphError):
    """Raised when a summary is requested without an AI API key."""

    status_code = 500
    default_message = "AI API key is not configured on the server."


class SummarizerError(RepoGraphError):
    """Raised when the AI summarization call fails."""

    status_code = 500
    default_message = "Failed to get summary from AI service."

    def __init__(self, detail: str) -> None:
        super().__init__()
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


__all__ = [
    "InvalidRepoUrlError",
    "NoRelevantFilesError",
    "RepoGraphError",
    "SummarizerError",
    "SummarizerNotConfiguredError",
    "UpstreamError",
]
