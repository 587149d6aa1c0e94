"""State machine schemas for the host's animator controller."""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from outfit_engines.artifact_compiler.models import stable_hash

NEUTRAL_STATE_NAME = "Neutral"
NEUTRAL_SELECTOR_VALUE = -1


class ParameterType(str, Enum):
    INT = "Int"
    FLOAT = "Float"
    BOOL = "Bool"
    TRIGGER = "Trigger"


class ConditionMode(str, Enum):
    EQUALS = "Equals"
    NOT_EQUAL = "NotEqual"
    GREATER = "Greater"
    LESS = "Less"


# --- Layer Structure ---

class Condition(BaseModel):
    parameter: str
    mode: ConditionMode = ConditionMode.EQUALS
    threshold: float = 0


class Transition(BaseModel):
    """Edge in a layer. `source=None` is the host's any-state."""
    source: Optional[str] = None
    destination: str
    conditions: List[Condition] = Field(default_factory=list)
    duration: float = 0.0
    has_exit_time: bool = False
    can_transition_to_self: bool = False

    @property
    def is_global(self) -> bool:
        return self.source is None


class LayerState(BaseModel):
    name: str
    slot_index: Optional[int] = None  # None for Neutral and host-authored states
    clip_name: Optional[str] = None
    assignments: Dict[str, bool] = Field(default_factory=dict)
    blend_assignments: Dict[str, Dict[str, float]] = Field(default_factory=dict)
    write_defaults: bool = False
    position: Tuple[float, float] = (0.0, 0.0)


class StateMachineLayer(BaseModel):
    name: str
    parameter: Optional[str] = None
    default_state: Optional[str] = None
    default_weight: float = 1.0
    states: List[LayerState] = Field(default_factory=list)
    transitions: List[Transition] = Field(default_factory=list)

    def state(self, name: str) -> Optional[LayerState]:
        return next((s for s in self.states if s.name == name), None)

    def state_for_slot(self, slot_index: int) -> Optional[LayerState]:
        return next((s for s in self.states if s.slot_index == slot_index), None)

    def transitions_to(self, destination: str) -> List[Transition]:
        return [t for t in self.transitions if t.destination == destination]

    def compute_hash(self) -> str:
        """Deterministic hash of layer content."""
        return stable_hash(self.model_dump(mode="json"))


# --- Controller ---

class ControllerParameter(BaseModel):
    name: str
    type: ParameterType = ParameterType.INT
    default: float = 0


class AnimatorController(BaseModel):
    """Host-owned layer set the outfit layer is merged into."""
    name: str = "FX"
    layers: List[StateMachineLayer] = Field(default_factory=list)
    parameters: List[ControllerParameter] = Field(default_factory=list)

    def layer(self, name: str) -> Optional[StateMachineLayer]:
        return next((layer for layer in self.layers if layer.name == name), None)

    def parameter(self, name: str) -> Optional[ControllerParameter]:
        return next((p for p in self.parameters if p.name == name), None)

    def compute_hash(self) -> str:
        return stable_hash(self.model_dump(mode="json"))
