"""Artifact Compiler.

Every artifact assigns an explicit value to every path any slot has ever
tracked (the union domain). Switching between slots therefore never leaves a
node at whatever the host's write-defaults behaviour would have picked.
Unconfigured slots compile to all-false.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from outfit_engines.artifact_compiler.models import CompiledArtifact, CompileResult
from outfit_engines.diagnostics.models import Finding
from outfit_engines.scene_graph.models import SceneNode
from outfit_engines.scene_graph.paths import resolve_path
from outfit_engines.slot_store.models import SlotStore
from outfit_engines.slot_store.service import ensure_fixed_size, get_slot, missing_object_finding, unique_paths

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r'[\x00-\x1f<>:"/\\|?*]')


def sanitize_clip_name(name: str) -> str:
    if not name:
        return "Unnamed"
    return _UNSAFE_NAME_CHARS.sub("_", name)


def clip_name_for(slot_index: int, slot_name: str) -> str:
    return f"Outfit_{slot_index}_{sanitize_clip_name(slot_name)}"


def union_tracked_paths(store: SlotStore) -> List[str]:
    """Sorted union of every path tracked or recorded by any slot."""
    ensure_fixed_size(store)
    paths = set()
    for slot in store.slots:
        paths.update(p for p in slot.tracked if p)
        paths.update(s.path for s in slot.states if s.path)
    return sorted(paths)


def blend_domain(store: SlotStore) -> Dict[str, List[str]]:
    """Continuous parameter names recorded per path, across all slots."""
    ensure_fixed_size(store)
    names: Dict[str, set] = {}
    for slot in store.slots:
        for state in slot.states:
            if state.continuous_params:
                names.setdefault(state.path, set()).update(state.continuous_params)
    return {path: sorted(params) for path, params in sorted(names.items())}


def _prune(domain: List[str], root: Optional[SceneNode]) -> List[str]:
    if root is None:
        return domain
    return [p for p in domain if resolve_path(root, p) is not None]


def compile_slot(
    store: SlotStore,
    slot_index: int,
    root: Optional[SceneNode] = None,
    prune_missing: bool = False,
) -> CompiledArtifact:
    """Full state assignment for one slot.

    With `prune_missing` and a root, paths that no longer resolve are left
    out of the domain instead of being animated blindly.
    """
    slot = get_slot(store, slot_index)
    domain = union_tracked_paths(store)
    blends = blend_domain(store)
    if prune_missing:
        domain = _prune(domain, root)

    active = set(slot.active_paths()) if slot.configured else set()
    recorded = {s.path: s.continuous_params for s in slot.states} if slot.configured else {}

    assignments = {path: path in active for path in domain}
    blend_assignments: Dict[str, Dict[str, float]] = {}
    for path in domain:
        params = blends.get(path)
        if not params:
            continue
        values = recorded.get(path, {})
        blend_assignments[path] = {name: float(values.get(name, 0.0)) for name in params}

    return CompiledArtifact(
        slot_index=slot_index,
        clip_name=clip_name_for(slot_index, slot.name),
        configured=slot.configured,
        assignments=assignments,
        blend_assignments=blend_assignments,
    )


def compile_store(
    store: SlotStore,
    root: Optional[SceneNode] = None,
    prune_missing: bool = False,
) -> CompileResult:
    """Compile every slot, configured or not, plus missing-path findings."""
    ensure_fixed_size(store)
    domain = union_tracked_paths(store)
    findings: List[Finding] = []
    if root is not None:
        missing = {p for p in domain if resolve_path(root, p) is None}
        for i, slot in enumerate(store.slots):
            for path in unique_paths(list(slot.tracked) + [s.path for s in slot.states if s.path]):
                if path in missing:
                    findings.append(missing_object_finding(i, path))
        if missing:
            logger.warning("%s tracked path(s) no longer resolve", len(missing))
        if prune_missing:
            domain = [p for p in domain if p not in missing]

    artifacts = [compile_slot(store, i, root, prune_missing) for i in range(len(store.slots))]
    logger.debug("Compiled %s artifacts over %s paths", len(artifacts), len(domain))
    return CompileResult(domain=domain, artifacts=artifacts, findings=findings)
