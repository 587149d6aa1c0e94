"""Persisted outfit slot models."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from outfit_engines.diagnostics.models import Finding

# Matches the 0-5 range of the host's integer selector menu.
SLOT_COUNT = 6

PRESET_SLOT_NAMES = ("Default", "Casual", "Formal", "Sporty", "Beach", "Night Out")


def default_slot_name(index: int) -> str:
    return f"Outfit {index}"


class ObjectState(BaseModel):
    """Recorded visibility of one tracked node."""
    path: str
    active: bool = False
    continuous_params: Dict[str, float] = Field(default_factory=dict)


class Slot(BaseModel):
    name: str = ""
    tracked: List[str] = Field(default_factory=list)  # unique, insertion order
    states: List[ObjectState] = Field(default_factory=list)
    # The only way to tell "empty" from "everything switched off".
    configured: bool = False
    icon_ref: Optional[str] = None

    def display_name(self, index: int) -> str:
        return self.name or default_slot_name(index)

    def state_for(self, path: str) -> Optional[ObjectState]:
        for state in self.states:
            if state.path == path:
                return state
        return None

    def active_paths(self) -> List[str]:
        return [s.path for s in self.states if s.active]


class SlotStore(BaseModel):
    """All outfit slots for one avatar, keyed by its stable identity."""
    avatar_identity: str
    # Optional entries tolerate partially written documents; ensure_fixed_size repairs them.
    slots: List[Optional[Slot]] = Field(default_factory=list)
    root_hint: Optional[str] = None

    def configured_indices(self) -> List[int]:
        return [i for i, slot in enumerate(self.slots) if slot is not None and slot.configured]

    def configured_count(self) -> int:
        return len(self.configured_indices())


class CaptureResult(BaseModel):
    slot_index: int
    slot: Slot
    saved_count: int = 0
    missing_paths: List[str] = Field(default_factory=list)
    findings: List[Finding] = Field(default_factory=list)

    @property
    def nothing_saved(self) -> bool:
        return self.saved_count == 0


class RestorePlan(BaseModel):
    """Visibility the editor should apply to show a saved slot."""
    slot_index: int
    assignments: Dict[str, bool] = Field(default_factory=dict)
    findings: List[Finding] = Field(default_factory=list)


class SlotInfo(BaseModel):
    slot_index: int
    name: str
    configured: bool
    object_count: int = 0
    icon_ref: Optional[str] = None
    states: List[ObjectState] = Field(default_factory=list)
