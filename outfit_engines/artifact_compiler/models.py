"""Compiled per-slot state artifacts (derived, never persisted)."""
from __future__ import annotations

import hashlib
import json
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from outfit_engines.diagnostics.models import Finding


def stable_hash(payload: object) -> str:
    content = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(content.encode()).hexdigest()[:16]


class CompiledArtifact(BaseModel):
    slot_index: int
    clip_name: str
    configured: bool = False
    # Total over the union domain: every tracked path has an explicit value.
    assignments: Dict[str, bool] = Field(default_factory=dict)
    blend_assignments: Dict[str, Dict[str, float]] = Field(default_factory=dict)

    def compute_hash(self) -> str:
        """Deterministic hash of artifact content."""
        return stable_hash(self.model_dump(mode="json"))


class CompileResult(BaseModel):
    domain: List[str] = Field(default_factory=list)
    artifacts: List[CompiledArtifact] = Field(default_factory=list)
    findings: List[Finding] = Field(default_factory=list)

    def artifact(self, slot_index: int) -> Optional[CompiledArtifact]:
        return next((a for a in self.artifacts if a.slot_index == slot_index), None)

    def compute_hash(self) -> str:
        return stable_hash([a.model_dump(mode="json") for a in self.artifacts])
