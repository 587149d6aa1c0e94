"""Slot Store operations.

These functions mutate the `SlotStore` they are given (it is the owned data
model) and never touch the scene or persistence. The caller saves the store
afterwards.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from outfit_engines.classifier.service import collect_candidates
from outfit_engines.common.errors import PathUnreachable, SlotIndexError
from outfit_engines.diagnostics.models import Finding, FindingCode, Severity
from outfit_engines.scene_graph.models import SceneNode
from outfit_engines.scene_graph.paths import compute_path, is_descendant, resolve_path
from outfit_engines.slot_store.models import (
    PRESET_SLOT_NAMES,
    SLOT_COUNT,
    CaptureResult,
    ObjectState,
    RestorePlan,
    Slot,
    SlotInfo,
    SlotStore,
    default_slot_name,
)

logger = logging.getLogger(__name__)

LABEL_MAX_LENGTH = 12


def new_store(avatar_identity: str, root_hint: Optional[str] = None) -> SlotStore:
    store = SlotStore(avatar_identity=avatar_identity, root_hint=root_hint)
    ensure_fixed_size(store)
    return store


def ensure_fixed_size(store: SlotStore) -> bool:
    """Repair the slot array to exactly SLOT_COUNT non-null slots.

    Existing slots keep their position and data. Returns True if anything changed.
    """
    repaired = False
    if len(store.slots) > SLOT_COUNT:
        store.slots = store.slots[:SLOT_COUNT]
        repaired = True
    while len(store.slots) < SLOT_COUNT:
        store.slots.append(None)
        repaired = True
    for i, slot in enumerate(store.slots):
        if slot is None:
            store.slots[i] = Slot(name=default_slot_name(i))
            repaired = True
    if repaired:
        logger.debug("Repaired slot array for avatar %s", store.avatar_identity)
    return repaired


def migrate_legacy_states(slot: Slot) -> int:
    """Fill an empty tracked set from recorded states. Returns paths added."""
    if slot.tracked or not slot.states:
        return 0
    slot.tracked = unique_paths(s.path for s in slot.states if s.path)
    return len(slot.tracked)


def normalize_store(store: SlotStore) -> SlotStore:
    """Load-time repair: fixed size plus legacy migration on every slot."""
    ensure_fixed_size(store)
    for i, slot in enumerate(store.slots):
        added = migrate_legacy_states(slot)
        if added:
            logger.info("Migrated %s tracked paths from states for slot %s", added, i)
    return store


def get_slot(store: SlotStore, slot_index: int) -> Slot:
    if slot_index < 0 or slot_index >= SLOT_COUNT:
        raise SlotIndexError(slot_index, SLOT_COUNT)
    ensure_fixed_size(store)
    return store.slots[slot_index]


def unique_paths(paths: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            result.append(path)
    return result


def missing_object_finding(slot_index: int, path: str) -> Finding:
    return Finding(
        severity=Severity.WARNING,
        code=FindingCode.MISSING_TRACKED_OBJECT,
        message=f"Tracked object not found: '{path}'",
        slot_index=slot_index,
        paths=[path],
    )


def capture_slot(
    store: SlotStore,
    slot_index: int,
    root: SceneNode,
    tracked_paths: Optional[Iterable[str]] = None,
    auto_detect: bool = False,
) -> CaptureResult:
    """Record the current visibility of the slot's tracked nodes.

    States are replaced wholesale. Unresolvable paths are dropped with a
    finding; if nothing resolves the slot is left unconfigured.
    """
    slot = get_slot(store, slot_index)
    if tracked_paths is not None:
        slot.tracked = unique_paths(tracked_paths)
    if not slot.tracked and auto_detect:
        slot.tracked = collect_candidates(root)
        logger.info("Auto-detected %s objects for slot %s", len(slot.tracked), slot_index)

    states: List[ObjectState] = []
    missing: List[str] = []
    for path in slot.tracked:
        node = resolve_path(root, path)
        if node is None:
            logger.warning("Tracked object not found: '%s'", path)
            missing.append(path)
            continue
        states.append(ObjectState(path=path, active=node.active, continuous_params=dict(node.blend_weights)))

    slot.states = states
    findings = [missing_object_finding(slot_index, path) for path in missing]

    if states:
        slot.configured = True
        logger.info("Saved %s tracked objects to slot %s ('%s')", len(states), slot_index, slot.name)
    else:
        slot.configured = False
        findings.append(
            Finding(
                severity=Severity.WARNING,
                code=FindingCode.NO_RESOLVABLE_PATHS,
                message="No objects were saved. Make sure tracked objects exist under the avatar.",
                slot_index=slot_index,
            )
        )
        logger.warning("Nothing saved for slot %s", slot_index)

    return CaptureResult(
        slot_index=slot_index,
        slot=slot,
        saved_count=len(states),
        missing_paths=missing,
        findings=findings,
    )


def clear_slot(store: SlotStore, slot_index: int) -> Slot:
    slot = get_slot(store, slot_index)
    slot.tracked = []
    slot.states = []
    slot.configured = False
    slot.icon_ref = None
    return slot


def rename_slot(store: SlotStore, slot_index: int, name: str) -> Slot:
    slot = get_slot(store, slot_index)
    slot.name = name
    return slot


def set_slot_icon(store: SlotStore, slot_index: int, icon_ref: Optional[str]) -> Slot:
    slot = get_slot(store, slot_index)
    slot.icon_ref = icon_ref
    return slot


def apply_preset_names(store: SlotStore) -> SlotStore:
    ensure_fixed_size(store)
    for i, name in enumerate(PRESET_SLOT_NAMES[:SLOT_COUNT]):
        store.slots[i].name = name
    return store


def add_tracked_node(store: SlotStore, slot_index: int, root: SceneNode, node: SceneNode) -> str:
    """Track a live node. Raises PathUnreachable if node is not under root."""
    slot = get_slot(store, slot_index)
    if not is_descendant(root, node) or node is root:
        raise PathUnreachable(root.name, node.name)
    path = compute_path(root, node)
    if path not in slot.tracked:
        slot.tracked.append(path)
        logger.debug("Added tracked object '%s' to slot %s", path, slot_index)
    return path


def remove_tracked_path(store: SlotStore, slot_index: int, path: str) -> bool:
    slot = get_slot(store, slot_index)
    if path not in slot.tracked:
        return False
    slot.tracked = [p for p in slot.tracked if p != path]
    return True


def auto_detect_tracked(store: SlotStore, slot_index: int, root: SceneNode) -> List[str]:
    slot = get_slot(store, slot_index)
    slot.tracked = collect_candidates(root)
    return list(slot.tracked)


def restore_plan(store: SlotStore, slot_index: int, root: SceneNode) -> RestorePlan:
    """What the editor should toggle to preview a saved slot. Read-only."""
    slot = get_slot(store, slot_index)
    plan = RestorePlan(slot_index=slot_index)
    if not slot.configured:
        return plan

    tracked = slot.tracked or unique_paths(s.path for s in slot.states if s.path)
    for path in tracked:
        if resolve_path(root, path) is None:
            plan.findings.append(missing_object_finding(slot_index, path))
            continue
        state = slot.state_for(path)
        if state is not None:
            plan.assignments[path] = state.active
    return plan


def slot_info(store: SlotStore, slot_index: int) -> SlotInfo:
    slot = get_slot(store, slot_index)
    return SlotInfo(
        slot_index=slot_index,
        name=slot.name,
        configured=slot.configured,
        object_count=len(slot.states),
        icon_ref=slot.icon_ref,
        states=[s.model_copy() for s in slot.states],
    )


def slot_labels(store: SlotStore) -> Dict[str, str]:
    """Hierarchy badge per path: which configured outfits show it."""
    ensure_fixed_size(store)
    outfits_by_path: Dict[str, List[str]] = {}
    for i, slot in enumerate(store.slots):
        if not slot.configured:
            continue
        for path in slot.active_paths():
            outfits_by_path.setdefault(path, []).append(slot.display_name(i))

    labels = {}
    for path, names in outfits_by_path.items():
        label = ", ".join(names)
        if len(label) > LABEL_MAX_LENGTH:
            label = label[:LABEL_MAX_LENGTH] + "..."
        labels[path] = f"[{label}]"
    return labels


def validate_store(store: SlotStore) -> List[Finding]:
    ensure_fixed_size(store)
    if store.configured_count() == 0:
        return [
            Finding(
                severity=Severity.ERROR,
                code=FindingCode.NO_CONFIGURED_SLOTS,
                message="No outfit slots have been configured. Please save at least one outfit.",
            )
        ]
    return []
