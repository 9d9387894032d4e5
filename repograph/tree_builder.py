"""Folder hierarchy construction from a flat tree listing."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .models import FetchedFile, FolderTreeNode, RepoFileEntry


def build_file_tree(
    entries: Iterable[RepoFileEntry], fetched: Iterable[FetchedFile]
) -> List[FolderTreeNode]:
    """Return the top-level folder/file nodes for ``entries``.

    Siblings keep first-discovery order. Files whose content was fetched are
    active and carry that content; every other file is inactive.
    """
    content_by_path = {item.path: item.encoded_content for item in fetched}
    roots: List[FolderTreeNode] = []
    # (parent path, name) -> node; "" is the parent path of top-level nodes.
    index: Dict[Tuple[str, str], FolderTreeNode] = {}

    for entry in entries:
        parts = entry.path.split("/")
        siblings = roots
        parent_path = ""

        for position, part in enumerate(parts):
            is_last = position == len(parts) - 1
            key = (parent_path, part)
            node = index.get(key)
            if node is None:
                current_path = "/".join(parts[: position + 1])
                is_folder = entry.kind == "tree" if is_last else True
                node = FolderTreeNode(
                    name=part,
                    path=current_path,
                    kind="folder" if is_folder else "file",
                    children=[] if is_folder else None,
                )
                if not is_folder:
                    node.id = entry.path
                    node.is_active = entry.path in content_by_path
                    node.content = content_by_path.get(entry.path)
                index[key] = node
                siblings.append(node)

            if not node.is_folder:
                # A file cannot contain further segments.
                break
            siblings = node.children  # type: ignore[assignment]
            parent_path = node.path

    return roots


__all__ = ["build_file_tree"]
