"""Configuration loading for repograph (.repograph.yml plus environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

CONFIG_FILENAME = ".repograph.yml"

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_SUMMARIZER_MODEL = "gemini-1.5-flash"
DEFAULT_SUMMARIZER_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"

ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_SUMMARIZER_API_KEY = "GEMINI_API_KEY"
ENV_SUMMARIZER_MODEL = "REPOGRAPH_SUMMARIZER_MODEL"
ENV_SUMMARIZER_BASE_URL = "REPOGRAPH_SUMMARIZER_BASE_URL"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GitHubConfig:
    """Hosting API access settings."""

    token: Optional[str] = None
    api_url: str = DEFAULT_GITHUB_API_URL
    graphql_url: str = DEFAULT_GITHUB_GRAPHQL_URL
    request_timeout: float = 30.0
    max_concurrency: int = 16


@dataclass
class SummarizerConfig:
    """AI summarization endpoint settings."""

    api_key: Optional[str] = None
    model: str = DEFAULT_SUMMARIZER_MODEL
    base_url: str = DEFAULT_SUMMARIZER_BASE_URL
    request_timeout: float = 60.0
    temperature: Optional[float] = None


@dataclass
class RepoGraphConfig:
    """Process-wide settings handed explicitly to the pipeline and service."""

    github: GitHubConfig = field(default_factory=GitHubConfig)
    summarizer: SummarizerConfig = field(default_factory=SummarizerConfig)


def load_config(
    config_path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> RepoGraphConfig:
    """Load configuration from disk, filling unset secrets from the environment."""
    env = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    if config_path is not None:
        config_file = _resolve_config_path(config_path)
        if config_file.exists():
            data = _read_config(config_file)

    github_data = _as_dict(data.get("github"))
    github = GitHubConfig()
    if github_data:
        github.token = _as_str(github_data.get("token"))
        github.api_url = (_as_str(github_data.get("api_url")) or github.api_url).rstrip("/")
        github.graphql_url = _as_str(github_data.get("graphql_url")) or github.graphql_url
        timeout = _as_float(github_data.get("request_timeout"))
        if timeout is not None:
            github.request_timeout = timeout
        concurrency = _as_int(github_data.get("max_concurrency"))
        if concurrency is not None:
            if concurrency < 1:
                raise ConfigError("github.max_concurrency must be at least 1")
            github.max_concurrency = concurrency

    summarizer_data = _as_dict(data.get("summarizer"))
    summarizer = SummarizerConfig()
    if summarizer_data:
        summarizer.api_key = _as_str(summarizer_data.get("api_key"))
        summarizer.model = _as_str(summarizer_data.get("model")) or summarizer.model
        summarizer.base_url = _as_str(summarizer_data.get("base_url")) or summarizer.base_url
        timeout = _as_float(summarizer_data.get("request_timeout"))
        if timeout is not None:
            summarizer.request_timeout = timeout
        summarizer.temperature = _as_float(summarizer_data.get("temperature"))

    github.token = github.token or env.get(ENV_GITHUB_TOKEN) or None
    summarizer.api_key = summarizer.api_key or env.get(ENV_SUMMARIZER_API_KEY) or None
    if not summarizer_data.get("model") and env.get(ENV_SUMMARIZER_MODEL):
        summarizer.model = env[ENV_SUMMARIZER_MODEL]
    if not summarizer_data.get("base_url") and env.get(ENV_SUMMARIZER_BASE_URL):
        summarizer.base_url = env[ENV_SUMMARIZER_BASE_URL]

    return RepoGraphConfig(github=github, summarizer=summarizer)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GitHubConfig",
    "RepoGraphConfig",
    "SummarizerConfig",
    "load_config",
]
