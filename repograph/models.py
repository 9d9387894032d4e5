"""Core data models shared across repograph components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class RepoIdentity:
    """Owner and repository name parsed from a hosting URL."""

    owner: str
    repo: str


@dataclass(frozen=True)
class RepoMetadata:
    """Must-have repository facts needed before listing the tree."""

    default_branch: str
    languages_url: str


@dataclass(frozen=True)
class RepoFileEntry:
    """One entry of the recursive tree listing."""

    path: str
    kind: str  # "blob" or "tree"
    url: Optional[str] = None

    @property
    def is_blob(self) -> bool:
        return self.kind == "blob"


@dataclass(frozen=True)
class FetchedFile:
    """A relevant blob whose base64 content has been downloaded."""

    path: str
    encoded_content: str


@dataclass
class GraphNode:
    id: str
    display_name: str
    byte_size: int
    content: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "size": self.byte_size,
            "content": self.content,
            "color": self.color,
        }


@dataclass
class GraphEdge:
    source: str
    target: str

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target}


@dataclass
class FolderTreeNode:
    """Folder or file in the hierarchical view of the full tree listing."""

    name: str
    path: str
    kind: str  # "folder" or "file"
    children: Optional[List["FolderTreeNode"]] = None
    id: Optional[str] = None
    content: Optional[str] = None
    is_active: Optional[bool] = None

    @property
    def is_folder(self) -> bool:
        return self.kind == "folder"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": self.name, "path": self.path, "type": self.kind}
        if self.is_folder:
            payload["children"] = [child.to_dict() for child in self.children or []]
            return payload
        payload["id"] = self.id
        if self.content is not None:
            payload["content"] = self.content
        payload["isActive"] = bool(self.is_active)
        return payload


@dataclass
class LanguageShare:
    name: str
    percentage: str | int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "percentage": self.percentage}


@dataclass
class PinnedRepository:
    """Summary of a repository pinned on the owner's profile."""

    name: str
    description: Optional[str]
    url: str
    stargazer_count: int
    primary_language: Optional[Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "stargazerCount": self.stargazer_count,
            "primaryLanguage": self.primary_language,
        }


@dataclass
class OwnerInfo:
    avatar_url: Optional[str]
    name: Optional[str]
    bio: Optional[str]
    html_url: Optional[str]
    pinned_items: List[PinnedRepository] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avatarUrl": self.avatar_url,
            "name": self.name,
            "bio": self.bio,
            "htmlUrl": self.html_url,
            "pinnedItems": [item.to_dict() for item in self.pinned_items],
        }


@dataclass
class ExtendedInfo:
    """Nice-to-have owner and language data; absent as a whole when any part fails."""

    owner: OwnerInfo
    languages: List[LanguageShare]


@dataclass
class GraphResult:
    """Assembled output of one repository analysis."""

    nodes: List[GraphNode]
    edges: List[GraphEdge]
    tree: List[FolderTreeNode]
    languages: Optional[List[LanguageShare]] = None
    owner_info: Optional[OwnerInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ownerInfo": self.owner_info.to_dict() if self.owner_info else None,
            "languages": (
                [share.to_dict() for share in self.languages]
                if self.languages is not None
                else None
            ),
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [edge.to_dict() for edge in self.edges],
            "tree": [node.to_dict() for node in self.tree],
        }
