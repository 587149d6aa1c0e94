"""Canonical path addressing between live nodes and stored path keys.

A PathKey is the `/`-joined chain of node names from (exclusive) root to
(inclusive) target. The empty string is the root itself. Keys are anchored at
the avatar root, so they survive removal of organisational sub-folders only if
the nodes below keep their names.

Duplicate sibling names resolve to the first child in native order. That is a
known sharp edge; `find_ambiguous_names` surfaces it for diagnostics.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from outfit_engines.common.errors import PathUnreachable
from outfit_engines.scene_graph.models import SceneNode

PathKey = str
PATH_SEPARATOR = "/"


def compute_path(root: SceneNode, target: SceneNode) -> PathKey:
    if target is root:
        return ""
    names: List[str] = []
    current: Optional[SceneNode] = target
    while current is not None and current is not root:
        names.append(current.name)
        current = current.parent
    if current is None:
        raise PathUnreachable(root.name, target.name)
    return PATH_SEPARATOR.join(reversed(names))


def resolve_path(root: SceneNode, path: PathKey) -> Optional[SceneNode]:
    """Walk child-by-name from root. Missing segments mean the node is gone."""
    current = root
    for segment in path.split(PATH_SEPARATOR):
        if not segment:
            continue
        found = current.find_child(segment)
        if found is None:
            return None
        current = found
    return current


def is_descendant(root: SceneNode, node: SceneNode) -> bool:
    current: Optional[SceneNode] = node
    while current is not None:
        if current is root:
            return True
        current = current.parent
    return False


def find_ambiguous_names(root: SceneNode) -> List[Tuple[PathKey, str]]:
    """(parent path, child name) for every name shared by siblings."""
    found: List[Tuple[PathKey, str]] = []
    for parent in [root, *root.iter_descendants()]:
        seen: Dict[str, int] = {}
        for child in parent.children:
            seen[child.name] = seen.get(child.name, 0) + 1
        for name, count in seen.items():
            if count > 1:
                found.append((compute_path(root, parent), name))
    return found
