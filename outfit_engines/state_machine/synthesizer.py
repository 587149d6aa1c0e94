"""State machine synthesizer.

Builds the selector-driven outfit layer from compiled artifacts and merges it
into a host controller. Nothing here mutates its inputs: merges operate on a
deep copy and return it.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from outfit_engines.artifact_compiler.compiler import compile_store
from outfit_engines.artifact_compiler.models import CompileResult
from outfit_engines.config import runtime_config
from outfit_engines.scene_graph.models import SceneNode
from outfit_engines.slot_store.models import SlotStore
from outfit_engines.state_machine.models import (
    NEUTRAL_SELECTOR_VALUE,
    NEUTRAL_STATE_NAME,
    AnimatorController,
    Condition,
    ConditionMode,
    ControllerParameter,
    LayerState,
    ParameterType,
    StateMachineLayer,
    Transition,
)

logger = logging.getLogger(__name__)

LAYOUT_RADIUS = 200.0
LAYOUT_CENTER = (300.0, 100.0)


def vote_write_defaults(controller: AnimatorController, exclude_layer: Optional[str] = None) -> bool:
    """Majority vote over existing states' write-default flags.

    Ties and an empty controller resolve to off.
    """
    on_count = 0
    off_count = 0
    for layer in controller.layers:
        if exclude_layer is not None and layer.name == exclude_layer:
            continue
        for state in layer.states:
            if state.write_defaults:
                on_count += 1
            else:
                off_count += 1
    decision = on_count > off_count
    logger.debug("Write defaults vote: %s on, %s off -> %s", on_count, off_count, "on" if decision else "off")
    return decision


def state_positions(count: int) -> List[Tuple[float, float]]:
    """Editor positions for `count` states on a circle around the layout centre."""
    cx, cy = LAYOUT_CENTER
    positions = []
    for i in range(count):
        angle = (i / count) * math.pi * 2
        positions.append((round(cx + math.cos(angle) * LAYOUT_RADIUS, 3), round(cy + math.sin(angle) * LAYOUT_RADIUS, 3)))
    return positions


def _selector_equals(parameter: str, value: int) -> List[Condition]:
    return [Condition(parameter=parameter, mode=ConditionMode.EQUALS, threshold=value)]


def build_outfit_layer(
    store: SlotStore,
    root: Optional[SceneNode] = None,
    write_defaults: bool = False,
    layer_name: Optional[str] = None,
    parameter: Optional[str] = None,
    compiled: Optional[CompileResult] = None,
) -> StateMachineLayer:
    """One state per configured slot plus Neutral, keyed on the selector.

    Neutral is always the entry state and carries no assignments.
    """
    layer_name = layer_name or runtime_config.get_layer_name()
    parameter = parameter or runtime_config.get_selector_parameter_name()
    if compiled is None:
        compiled = compile_store(store, root)

    configured = [compiled.artifact(i) for i in store.configured_indices()]
    positions = state_positions(len(configured))

    neutral = LayerState(
        name=NEUTRAL_STATE_NAME,
        write_defaults=write_defaults,
        position=LAYOUT_CENTER,
    )
    states = [neutral]
    for artifact, position in zip(configured, positions):
        states.append(
            LayerState(
                name=artifact.clip_name,
                slot_index=artifact.slot_index,
                clip_name=artifact.clip_name,
                assignments=dict(artifact.assignments),
                blend_assignments={p: dict(v) for p, v in artifact.blend_assignments.items()},
                write_defaults=write_defaults,
                position=position,
            )
        )

    transitions = [
        Transition(destination=state.name, conditions=_selector_equals(parameter, state.slot_index))
        for state in states[1:]
    ]
    transitions.append(
        Transition(destination=NEUTRAL_STATE_NAME, conditions=_selector_equals(parameter, NEUTRAL_SELECTOR_VALUE))
    )
    # Direct hops between outfits, independent of any-state evaluation order.
    for source in states[1:]:
        for destination in states[1:]:
            if source.name == destination.name:
                continue
            transitions.append(
                Transition(
                    source=source.name,
                    destination=destination.name,
                    conditions=_selector_equals(parameter, destination.slot_index),
                )
            )

    return StateMachineLayer(
        name=layer_name,
        parameter=parameter,
        default_state=NEUTRAL_STATE_NAME,
        states=states,
        transitions=transitions,
    )


def remove_layer(controller: AnimatorController, name: str) -> int:
    """Drop every layer with this name. Returns how many were removed."""
    before = len(controller.layers)
    controller.layers = [layer for layer in controller.layers if layer.name != name]
    return before - len(controller.layers)


def ensure_parameter(
    controller: AnimatorController,
    name: str,
    param_type: ParameterType = ParameterType.INT,
    default: float = NEUTRAL_SELECTOR_VALUE,
) -> bool:
    """Add `name` or correct its type and default in place. True if added."""
    existing = controller.parameter(name)
    if existing is not None:
        existing.type = param_type
        existing.default = default
        return False
    controller.parameters.append(ControllerParameter(name=name, type=param_type, default=default))
    return True


def merge_outfit_layer(controller: AnimatorController, layer: StateMachineLayer) -> AnimatorController:
    """Replace-by-name merge of a generated layer into a copy of `controller`.

    The write-default flag of every new state follows the vote over the
    states that remain once the previous outfit layer is gone.
    """
    merged = controller.model_copy(deep=True)
    removed = remove_layer(merged, layer.name)
    if removed:
        logger.info("Removed %s existing '%s' layer(s)", removed, layer.name)

    write_defaults = vote_write_defaults(merged)
    new_layer = layer.model_copy(deep=True)
    for state in new_layer.states:
        state.write_defaults = write_defaults

    if new_layer.parameter:
        ensure_parameter(merged, new_layer.parameter, ParameterType.INT)
    merged.layers.append(new_layer)
    logger.info("Merged layer '%s' with %s states", new_layer.name, len(new_layer.states))
    return merged


def synthesize(
    store: SlotStore,
    controller: Optional[AnimatorController] = None,
    root: Optional[SceneNode] = None,
    compiled: Optional[CompileResult] = None,
) -> AnimatorController:
    """Build the outfit layer and merge it into (a copy of) the controller."""
    controller = controller or AnimatorController()
    layer = build_outfit_layer(store, root, compiled=compiled)
    return merge_outfit_layer(controller, layer)
