"""Inputs and outputs of a full outfit generation run."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from outfit_engines.diagnostics.models import Finding
from outfit_engines.host_assets.models import ExpressionParameters, ExpressionsMenu
from outfit_engines.state_machine.models import AnimatorController


class HostDocuments(BaseModel):
    """The host-owned documents generation merges into. Any may be absent."""
    parameters: Optional[ExpressionParameters] = None
    menu: Optional[ExpressionsMenu] = None
    controller: Optional[AnimatorController] = None


class GenerationResult(BaseModel):
    avatar_identity: str
    configured_slots: List[int] = Field(default_factory=list)
    write_defaults: bool = False
    layer_hash: str
    documents: HostDocuments
    findings: List[Finding] = Field(default_factory=list)
