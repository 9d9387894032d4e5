from __future__ import annotations

import pytest

from repograph.config import GitHubConfig, RepoGraphConfig
from tests._fixtures.fake_github import FakeGitHubClient


@pytest.fixture
def config() -> RepoGraphConfig:
    """Configuration with small concurrency so limits are exercised."""
    return RepoGraphConfig(github=GitHubConfig(max_concurrency=2))


@pytest.fixture
def make_client():
    """Factory for fake hosting API clients serving an in-memory repository."""

    def _make(files, **kwargs) -> FakeGitHubClient:
        return FakeGitHubClient(files, **kwargs)

    return _make
