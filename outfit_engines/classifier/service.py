"""Heuristic outfit-part classifier.

Pure functions over `SceneNode` and the tables in `vocabulary`. Nothing here
mutates the scene.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from outfit_engines.classifier import vocabulary
from outfit_engines.config import runtime_config
from outfit_engines.scene_graph.models import SceneNode
from outfit_engines.scene_graph.paths import PathKey, compute_path

logger = logging.getLogger(__name__)


def system_keywords() -> List[str]:
    return list(vocabulary.SYSTEM_KEYWORDS) + runtime_config.get_extra_excluded_keywords()


def _contains_any(name_lower: str, words: Iterable[str]) -> bool:
    return any(word in name_lower for word in words)


def should_skip_subtree(node: SceneNode, keywords: Optional[Sequence[str]] = None) -> bool:
    """True if the node itself must not be classified.

    Despite the name, callers still visit the children of a skipped node.
    """
    if node.editor_only or node.hidden or node.not_editable:
        return True
    kws = system_keywords() if keywords is None else keywords
    return _contains_any(node.name.lower(), kws)


def _is_excluded_body_part(name_lower: str) -> bool:
    if name_lower in vocabulary.EXCLUDED_EXACT:
        return True
    return _contains_any(name_lower, vocabulary.EXCLUDED_SUBSTRINGS)


def is_likely_outfit_node(node: SceneNode, scan_root: Optional[SceneNode] = None) -> bool:
    name_lower = node.name.lower()

    if _is_excluded_body_part(name_lower):
        return False

    if vocabulary.PART_MARKER in node.name or _contains_any(name_lower, vocabulary.CLOTHING_VOCABULARY):
        return True

    # Folder pattern: something holding "A-Shirt" or "Clothing" children.
    for child in node.children:
        child_lower = child.name.lower()
        if vocabulary.PART_MARKER in child.name or _contains_any(child_lower, vocabulary.CHILD_FOLDER_VOCABULARY):
            return True

    parent = node.parent
    if parent is None:
        return False

    # Direct children of the scan root are top-level wearable folders by convention.
    if scan_root is not None and parent is scan_root:
        return True

    parent_lower = parent.name.lower()
    return vocabulary.PART_MARKER in parent.name or _contains_any(parent_lower, vocabulary.PARENT_FOLDER_VOCABULARY)


def collect_candidates(root: SceneNode, keywords: Optional[Sequence[str]] = None) -> List[PathKey]:
    """Paths of every likely outfit node below root, in depth-first order."""
    kws = system_keywords() if keywords is None else list(keywords)
    found: List[PathKey] = []
    seen = set()

    def _walk(current: SceneNode) -> None:
        for child in current.children:
            if should_skip_subtree(child, kws):
                logger.debug("Skipping system node %s", child.name)
            elif is_likely_outfit_node(child, root):
                path = compute_path(root, child)
                if path not in seen:
                    seen.add(path)
                    found.append(path)
            _walk(child)

    _walk(root)
    return found


def count_toggleable(node: SceneNode) -> int:
    """Descendants that render something or group other nodes."""
    return sum(
        1 for d in node.iter_descendants() if d.has_renderable_surface or d.children
    )


def detect_outfit_root(avatar_root: SceneNode) -> Optional[SceneNode]:
    """Guess which direct child of the avatar holds the outfit parts."""
    for folder_name in vocabulary.OUTFIT_FOLDER_NAMES:
        for child in avatar_root.children:
            if child.name.lower() == folder_name.lower():
                return child

    best: Optional[SceneNode] = None
    best_count = 0
    excluded = [n.lower() for n in vocabulary.EXCLUDED_ROOT_NAMES]
    for child in avatar_root.children:
        if _contains_any(child.name.lower(), excluded):
            continue
        toggleables = count_toggleable(child)
        if toggleables > best_count:
            best, best_count = child, toggleables

    if best is not None and best_count >= 2:
        return best
    return None


def find_excluded_system_roots(root: SceneNode, keywords: Optional[Sequence[str]] = None) -> List[str]:
    """Names of direct children that belong to a host system integration."""
    kws = system_keywords() if keywords is None else keywords
    return [child.name for child in root.children if _contains_any(child.name.lower(), kws)]
