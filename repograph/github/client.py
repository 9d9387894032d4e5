"""Thin client for the GitHub REST and GraphQL APIs."""

from __future__ import annotations

import json
from http.client import HTTPException
from typing import Any, Dict, List, Mapping
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..config import GitHubConfig
from ..errors import UpstreamError
from ..logging import get_logger
from ..models import PinnedRepository, RepoFileEntry, RepoMetadata

PINNED_ITEMS_QUERY = (
    "query($username: String!) { user(login: $username) { pinnedItems(first: 6, types: REPOSITORY) "
    "{ nodes { ... on Repository { name description url stargazerCount primaryLanguage { name color } } } } } }"
)


class GitHubClient:
    """Blocking calls against the hosting API; every failure raises UpstreamError."""

    USER_AGENT = "repograph"

    def __init__(self, config: GitHubConfig | None = None) -> None:
        self.config = config or GitHubConfig()
        self.logger = get_logger("github")

    def get_repository(self, owner: str, repo: str) -> RepoMetadata:
        payload = self._get_json(f"{self._api_url}/repos/{_segment(owner)}/{_segment(repo)}")
        branch = _require_str(payload, "default_branch")
        languages_url = payload.get("languages_url")
        if not isinstance(languages_url, str) or not languages_url:
            languages_url = f"{self._api_url}/repos/{_segment(owner)}/{_segment(repo)}/languages"
        return RepoMetadata(default_branch=branch, languages_url=languages_url)

    def get_user(self, owner: str) -> Dict[str, Any]:
        return self._get_json(f"{self._api_url}/users/{_segment(owner)}")

    def get_pinned_repositories(self, owner: str) -> List[PinnedRepository]:
        payload = self._post_json(
            self.config.graphql_url,
            {"query": PINNED_ITEMS_QUERY, "variables": {"username": owner}},
        )
        errors = payload.get("errors")
        if errors:
            raise UpstreamError(f"GraphQL query failed: {errors}", url=self.config.graphql_url)
        try:
            nodes = payload["data"]["user"]["pinnedItems"]["nodes"]
        except (KeyError, TypeError) as exc:
            raise UpstreamError(
                "GraphQL response is missing pinned items", url=self.config.graphql_url
            ) from exc

        pinned: List[PinnedRepository] = []
        for node in nodes or []:
            if not isinstance(node, dict) or "name" not in node:
                continue
            pinned.append(
                PinnedRepository(
                    name=str(node["name"]),
                    description=node.get("description"),
                    url=str(node.get("url", "")),
                    stargazer_count=int(node.get("stargazerCount") or 0),
                    primary_language=node.get("primaryLanguage"),
                )
            )
        return pinned

    def get_languages(self, languages_url: str) -> Dict[str, int]:
        payload = self._get_json(languages_url)
        return {
            str(name): int(count)
            for name, count in payload.items()
            if isinstance(count, (int, float)) and not isinstance(count, bool)
        }

    def get_tree(self, owner: str, repo: str, branch: str) -> List[RepoFileEntry]:
        url = (
            f"{self._api_url}/repos/{_segment(owner)}/{_segment(repo)}"
            f"/git/trees/{quote(branch, safe='')}?recursive=1"
        )
        payload = self._get_json(url)
        items = payload.get("tree")
        if not isinstance(items, list):
            raise UpstreamError("Tree listing is missing the 'tree' array", url=url)
        if payload.get("truncated"):
            self.logger.warning("Tree listing for %s/%s@%s was truncated", owner, repo, branch)

        entries: List[RepoFileEntry] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            path = item.get("path")
            kind = item.get("type")
            if not isinstance(path, str) or not isinstance(kind, str):
                continue
            blob_url = item.get("url")
            entries.append(
                RepoFileEntry(
                    path=path,
                    kind=kind,
                    url=blob_url if isinstance(blob_url, str) else None,
                )
            )
        return entries

    def get_blob(self, url: str) -> str:
        payload = self._get_json(url)
        return _require_str(payload, "content", allow_empty=True)

    @property
    def _api_url(self) -> str:
        return self.config.api_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.USER_AGENT,
        }
        if self.config.token:
            headers["Authorization"] = f"token {self.config.token}"
        return headers

    def _get_json(self, url: str) -> Dict[str, Any]:
        return self._send(Request(url, headers=self._headers(), method="GET"))

    def _post_json(self, url: str, body: Mapping[str, Any]) -> Dict[str, Any]:
        headers = self._headers()
        headers["Content-Type"] = "application/json"
        data = json.dumps(body).encode("utf-8")
        return self._send(Request(url, data=data, headers=headers, method="POST"))

    def _send(self, request: Request) -> Dict[str, Any]:
        url = request.full_url
        self.logger.debug("%s %s", request.get_method(), url)
        try:
            with urlopen(request, timeout=self.config.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or str(exc.reason)
            raise UpstreamError(
                f"GitHub request failed with status {exc.code}: {message}",
                url=url,
                http_status=exc.code,
            ) from exc
        except URLError as exc:
            raise UpstreamError(f"GitHub request failed: {exc.reason}", url=url) from exc
        except (OSError, HTTPException) as exc:
            # Timeouts while reading and dropped connections are not URLErrors.
            raise UpstreamError(
                f"GitHub request failed: {type(exc).__name__}: {exc}", url=url
            ) from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise UpstreamError("GitHub returned invalid JSON", url=url) from exc
        if not isinstance(payload, dict):
            raise UpstreamError("GitHub returned an unexpected payload", url=url)
        return payload


def _segment(value: str) -> str:
    return quote(value, safe="")


def _require_str(payload: Mapping[str, Any], key: str, *, allow_empty: bool = False) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or (not value and not allow_empty):
        raise UpstreamError(f"GitHub response is missing '{key}'")
    return value


__all__ = ["GitHubClient", "PINNED_ITEMS_QUERY"]
