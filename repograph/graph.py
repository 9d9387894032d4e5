"""Repository-to-graph assembly."""

from __future__ import annotations

import asyncio
import base64
import binascii
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, List, Mapping, Optional, Sequence, TypeVar
from urllib.parse import quote

from .config import RepoGraphConfig
from .errors import InvalidRepoUrlError, NoRelevantFilesError
from .extractors import extractor_for
from .github.client import GitHubClient
from .logging import get_logger
from .models import (
    ExtendedInfo,
    FetchedFile,
    GraphEdge,
    GraphNode,
    GraphResult,
    LanguageShare,
    OwnerInfo,
    RepoFileEntry,
    RepoIdentity,
)
from .resolver import resolve_import_path
from .tree_builder import build_file_tree

RELEVANT_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".html", ".css", ".json", ".md")

_REPO_URL = re.compile(r"github\.com/([^/]+)/([^/]+)")
_CENTS = Decimal("0.01")

T = TypeVar("T")


def parse_repo_url(url: str) -> RepoIdentity:
    """Return owner and repository name from a GitHub URL."""
    match = _REPO_URL.search(url or "")
    if not match:
        raise InvalidRepoUrlError()
    return RepoIdentity(owner=match.group(1), repo=match.group(2).replace(".git", "", 1))


def is_relevant(entry: RepoFileEntry) -> bool:
    return entry.is_blob and entry.path.endswith(RELEVANT_EXTENSIONS)


def string_to_color(value: str) -> str:
    """Return a stable ``hsl()`` color for ``value``.

    Mirrors the browser-side hash so colors match across front and back end:
    a 32-bit shift-and-subtract over UTF-16 code units, remainder keeping sign.
    """
    hash_value = 0
    encoded = value.encode("utf-16-le")
    for offset in range(0, len(encoded), 2):
        code_unit = encoded[offset] | (encoded[offset + 1] << 8)
        shifted = _to_int32(_to_int32(hash_value) << 5)
        hash_value = code_unit + (shifted - hash_value)
    hue = abs(hash_value) % 360
    if hash_value < 0:
        hue = -hue
    return f"hsl({hue}, 70%, 50%)"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def decode_content(encoded: str) -> str:
    """Decode base64 blob content as UTF-8, replacing undecodable bytes."""
    try:
        raw = base64.b64decode(encoded)
    except (binascii.Error, ValueError):
        return ""
    return raw.decode("utf-8", errors="replace")


def summarize_languages(byte_counts: Mapping[str, int]) -> List[LanguageShare]:
    """Return each language's share of the total, largest first."""
    total = sum(byte_counts.values())
    shares: List[LanguageShare] = []
    for name, count in byte_counts.items():
        percentage: str | int = _to_fixed((count / total) * 100) if total > 0 else 0
        shares.append(LanguageShare(name=name, percentage=percentage))
    shares.sort(key=lambda share: float(share.percentage), reverse=True)
    return shares


def _to_fixed(value: float) -> str:
    """Two-decimal rendering of the exact float, ties rounded up like JavaScript toFixed."""
    return str(Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))


def utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def build_nodes(files: Sequence[FetchedFile]) -> List[GraphNode]:
    return [
        GraphNode(
            id=item.path,
            display_name=item.path.split("/")[-1],
            byte_size=utf16_length(decode_content(item.encoded_content)),
            content=item.encoded_content,
            color=string_to_color(item.path),
        )
        for item in files
    ]


def build_edges(files: Sequence[FetchedFile]) -> List[GraphEdge]:
    """Extract references from each file and keep those that resolve to a fetched file."""
    known_paths = {item.path for item in files}
    edges: List[GraphEdge] = []
    for item in files:
        extractor = extractor_for(item.path)
        if extractor is None:
            continue
        text = decode_content(item.encoded_content)
        for specifier in extractor(item.path, text):
            target = resolve_import_path(item.path, specifier, known_paths)
            if target:
                edges.append(GraphEdge(source=item.path, target=target))
    return edges


class GraphAssembler:
    """Fetches a repository through the hosting API and assembles its graph."""

    def __init__(
        self,
        config: RepoGraphConfig | None = None,
        client: GitHubClient | None = None,
    ) -> None:
        self.config = config or RepoGraphConfig()
        self.client = client or GitHubClient(self.config.github)
        self.logger = get_logger("graph")

    async def assemble(self, repo_url: str) -> GraphResult:
        identity = parse_repo_url(repo_url)
        owner, repo = identity.owner, identity.repo
        self.logger.info("Analyzing %s/%s", owner, repo)
        semaphore = asyncio.Semaphore(self.config.github.max_concurrency)

        metadata = await asyncio.to_thread(self.client.get_repository, owner, repo)
        extended = await self._fetch_extended_info(owner, metadata.languages_url, semaphore)

        entries = await asyncio.to_thread(self.client.get_tree, owner, repo, metadata.default_branch)
        relevant = [entry for entry in entries if is_relevant(entry)]
        self.logger.debug(
            "Tree for %s/%s@%s has %d entries, %d relevant",
            owner,
            repo,
            metadata.default_branch,
            len(entries),
            len(relevant),
        )
        if not relevant:
            raise NoRelevantFilesError(metadata.default_branch)

        files = await self._fetch_contents(owner, repo, relevant, semaphore)

        nodes = build_nodes(files)
        tree = build_file_tree(entries, files)
        edges = await asyncio.to_thread(build_edges, files)
        self.logger.info(
            "Assembled %d nodes and %d links for %s/%s", len(nodes), len(edges), owner, repo
        )

        return GraphResult(
            nodes=nodes,
            edges=edges,
            tree=tree,
            languages=extended.languages if extended else None,
            owner_info=extended.owner if extended else None,
        )

    async def _fetch_extended_info(
        self, owner: str, languages_url: str, semaphore: asyncio.Semaphore
    ) -> Optional[ExtendedInfo]:
        """Fetch profile, pinned repositories and language statistics, or None on any failure."""
        try:
            profile, pinned, byte_counts = await asyncio.gather(
                self._call(semaphore, self.client.get_user, owner),
                self._call(semaphore, self.client.get_pinned_repositories, owner),
                self._call(semaphore, self.client.get_languages, languages_url),
            )
        except Exception as exc:
            self.logger.warning(
                "Could not fetch extended owner/language info. Continuing without it. (%s)", exc
            )
            return None

        owner_info = OwnerInfo(
            avatar_url=profile.get("avatar_url"),
            name=profile.get("name"),
            bio=profile.get("bio"),
            html_url=profile.get("html_url"),
            pinned_items=pinned,
        )
        return ExtendedInfo(owner=owner_info, languages=summarize_languages(byte_counts))

    async def _fetch_contents(
        self,
        owner: str,
        repo: str,
        relevant: Sequence[RepoFileEntry],
        semaphore: asyncio.Semaphore,
    ) -> List[FetchedFile]:
        async def _fetch(entry: RepoFileEntry) -> FetchedFile:
            url = entry.url or self._blob_fallback_url(owner, repo, entry.path)
            content = await self._call(semaphore, self.client.get_blob, url)
            return FetchedFile(path=entry.path, encoded_content=content)

        # gather preserves input order, so extraction order follows the listing.
        return list(await asyncio.gather(*(_fetch(entry) for entry in relevant)))

    def _blob_fallback_url(self, owner: str, repo: str, path: str) -> str:
        return f"{self.config.github.api_url.rstrip('/')}/repos/{owner}/{repo}/contents/{quote(path)}"

    @staticmethod
    async def _call(
        semaphore: asyncio.Semaphore, func: Callable[..., T], *args: object
    ) -> T:
        async with semaphore:
            return await asyncio.to_thread(func, *args)


def analyze_repository(
    repo_url: str,
    config: RepoGraphConfig | None = None,
    *,
    assembler_factory: Callable[[RepoGraphConfig], GraphAssembler] | None = None,
) -> GraphResult:
    """Synchronous entry point for callers outside an event loop."""
    effective = config or RepoGraphConfig()
    factory = assembler_factory or GraphAssembler
    return asyncio.run(factory(effective).assemble(repo_url))


__all__ = [
    "GraphAssembler",
    "RELEVANT_EXTENSIONS",
    "analyze_repository",
    "build_edges",
    "build_nodes",
    "decode_content",
    "is_relevant",
    "parse_repo_url",
    "string_to_color",
    "summarize_languages",
    "utf16_length",
]
