"""Cross-checks between a slot store and the host documents generated from it.

Every check runs independently; an early failure never hides a later one.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from outfit_engines.classifier.service import detect_outfit_root, find_excluded_system_roots
from outfit_engines.config import runtime_config
from outfit_engines.diagnostics.models import DiagnosticsReport, FindingCode, Severity
from outfit_engines.host_assets.models import ControlType, ExpressionParameters, ExpressionsMenu
from outfit_engines.host_assets.service import PARAMETER_BIT_BUDGET, synced_bit_cost
from outfit_engines.scene_graph.models import SceneNode
from outfit_engines.scene_graph.paths import PATH_SEPARATOR, find_ambiguous_names, resolve_path
from outfit_engines.slot_store.models import SlotStore
from outfit_engines.slot_store.service import ensure_fixed_size, validate_store
from outfit_engines.state_machine.models import AnimatorController, ParameterType

logger = logging.getLogger(__name__)

_SELECTABLE_CONTROLS = (ControlType.TOGGLE, ControlType.BUTTON)


def check_selector_parameter(report: DiagnosticsReport, parameters: Optional[ExpressionParameters], name: str) -> None:
    decl = parameters.get(name) if parameters is not None else None
    if decl is None:
        report.add(Severity.ERROR, FindingCode.SELECTOR_MISSING, f"{name} parameter is missing in expression parameters.")
    elif decl.value_type != ParameterType.INT:
        report.add(Severity.ERROR, FindingCode.SELECTOR_WRONG_TYPE, f"{name} parameter is not Int.")

    if parameters is not None:
        cost = synced_bit_cost(parameters.parameters)
        if cost > PARAMETER_BIT_BUDGET:
            report.add(
                Severity.WARNING,
                FindingCode.PARAMETER_BUDGET_EXCEEDED,
                f"Synced parameters use {cost} bits (limit {PARAMETER_BIT_BUDGET}).",
            )


def check_controller(
    report: DiagnosticsReport,
    store: SlotStore,
    controller: Optional[AnimatorController],
    layer_name: str,
    parameter: str,
) -> None:
    if controller is None:
        report.add(Severity.WARNING, FindingCode.LAYER_MISSING, "Animator controller is missing.")
        return

    param = controller.parameter(parameter)
    if param is None:
        report.add(Severity.WARNING, FindingCode.SELECTOR_MISSING, f"Controller parameter {parameter} is missing.")
    elif param.type != ParameterType.INT:
        report.add(Severity.ERROR, FindingCode.SELECTOR_WRONG_TYPE, f"Controller parameter {parameter} is not Int.")

    layer = controller.layer(layer_name)
    if layer is None:
        report.add(Severity.WARNING, FindingCode.LAYER_MISSING, f"{layer_name} layer is missing.")
        return

    configured = store.configured_indices()
    slot_states = [s for s in layer.states if s.slot_index is not None]
    if not layer.states:
        report.add(Severity.WARNING, FindingCode.LAYER_EMPTY, f"{layer_name} layer has no states.")
    if configured and not slot_states:
        report.add(Severity.ERROR, FindingCode.LAYER_EMPTY, f"{layer_name} layer is missing states for configured slots.")
        return
    for i in configured:
        if layer.state_for_slot(i) is None:
            report.add(
                Severity.WARNING,
                FindingCode.LAYER_OUT_OF_DATE,
                f"{layer_name} layer has no state for slot {i}; regenerate.",
                slot_index=i,
            )


def check_menu(
    report: DiagnosticsReport,
    store: SlotStore,
    menu: Optional[ExpressionsMenu],
    submenu_name: str,
    parameter: str,
) -> None:
    entry = None
    if menu is not None:
        entry = next(
            (c for c in menu.controls if c.name == submenu_name and c.type == ControlType.SUB_MENU),
            None,
        )
    if entry is None or entry.sub_menu is None:
        report.add(Severity.WARNING, FindingCode.MENU_MISSING, f"{submenu_name} submenu is missing in expressions menu.")
        return

    configured = store.configured_indices()
    for i in configured:
        expected = store.slots[i].display_name(i)
        bound = next(
            (c for c in entry.sub_menu.controls if c.parameter == parameter and c.value == i),
            None,
        )
        if bound is not None:
            if bound.type not in _SELECTABLE_CONTROLS:
                report.add(
                    Severity.ERROR,
                    FindingCode.MENU_WRONG_CONTROL_TYPE,
                    f"Menu control for '{expected}' is not a Toggle or Button.",
                    slot_index=i,
                )
            continue

        # No control selects this slot; diagnose the control carrying its name.
        control = entry.sub_menu.control(expected)
        if control is None:
            report.add(
                Severity.WARNING,
                FindingCode.MENU_ENTRY_MISSING,
                f"Menu control missing for slot {i} ({expected}).",
                slot_index=i,
            )
            continue
        if control.type not in _SELECTABLE_CONTROLS:
            report.add(
                Severity.ERROR,
                FindingCode.MENU_WRONG_CONTROL_TYPE,
                f"Menu control for '{expected}' is not a Toggle or Button.",
                slot_index=i,
            )
        if control.parameter != parameter:
            report.add(
                Severity.ERROR,
                FindingCode.MENU_WRONG_PARAMETER,
                f"Menu control '{expected}' has wrong parameter.",
                slot_index=i,
            )
        elif control.value in configured and control.value != i:
            # Named control belongs to another slot sharing the name.
            report.add(
                Severity.WARNING,
                FindingCode.MENU_ENTRY_MISSING,
                f"Menu control missing for slot {i} ({expected}).",
                slot_index=i,
            )
        else:
            report.add(
                Severity.WARNING,
                FindingCode.MENU_WRONG_VALUE,
                f"Menu control '{expected}' has wrong value (expected {i}).",
                slot_index=i,
            )


def check_tracked_paths(report: DiagnosticsReport, store: SlotStore, root: SceneNode) -> List[str]:
    """One warning per unresolvable tracked path, grouped by slot."""
    missing: List[str] = []
    for i, slot in enumerate(store.slots):
        for path in slot.tracked:
            if resolve_path(root, path) is None:
                missing.append(path)
                report.add(
                    Severity.WARNING,
                    FindingCode.MISSING_TRACKED_OBJECT,
                    f"Slot {i} ({slot.display_name(i)}): tracked object not found: '{path}'",
                    slot_index=i,
                    paths=[path],
                )
    return missing


def _joined(parent_path: str, name: str) -> str:
    return f"{parent_path}{PATH_SEPARATOR}{name}" if parent_path else name


def check_ambiguous_names(report: DiagnosticsReport, store: SlotStore, root: SceneNode) -> None:
    """Advisory only: resolution keeps picking the first sibling."""
    tracked = {p for slot in store.slots for p in slot.tracked}
    for parent_path, name in find_ambiguous_names(root):
        prefix = _joined(parent_path, name)
        affected = sorted(p for p in tracked if p == prefix or p.startswith(prefix + PATH_SEPARATOR))
        if not affected:
            continue
        report.add(
            Severity.WARNING,
            FindingCode.AMBIGUOUS_NAME,
            f"Several siblings are named '{name}' under '{parent_path or '<root>'}'; the first one is used.",
            paths=affected,
        )


def check_outfit_root(report: DiagnosticsReport, store: SlotStore, root: SceneNode) -> None:
    outfit_root = resolve_path(root, store.root_hint) if store.root_hint else detect_outfit_root(root)
    if outfit_root is None:
        report.add(Severity.WARNING, FindingCode.OUTFIT_ROOT_MISSING, "Outfit root is not set.")
        return
    excluded = find_excluded_system_roots(outfit_root)
    if excluded:
        report.add(
            Severity.WARNING,
            FindingCode.EXCLUDED_SYSTEM_ROOT,
            f"Outfit root contains excluded system objects: {', '.join(excluded)}",
            paths=excluded,
        )


def run_diagnostics(
    store: SlotStore,
    parameters: Optional[ExpressionParameters] = None,
    menu: Optional[ExpressionsMenu] = None,
    controller: Optional[AnimatorController] = None,
    root: Optional[SceneNode] = None,
) -> DiagnosticsReport:
    """Validate a store against the host's parameters, menu, controller and scene."""
    ensure_fixed_size(store)
    parameter = runtime_config.get_selector_parameter_name()
    report = DiagnosticsReport()
    report.findings.extend(validate_store(store))

    check_selector_parameter(report, parameters, parameter)
    check_controller(report, store, controller, runtime_config.get_layer_name(), parameter)
    check_menu(report, store, menu, runtime_config.get_submenu_name(), parameter)
    if root is not None:
        check_tracked_paths(report, store, root)
        check_ambiguous_names(report, store, root)
        check_outfit_root(report, store, root)

    if not report.findings:
        report.add(Severity.INFO, FindingCode.ALL_CLEAR, "No issues found.")
    logger.info(
        "Diagnostics for %s: %s error(s), %s warning(s)",
        store.avatar_identity,
        report.error_count,
        report.warning_count,
    )
    return report
