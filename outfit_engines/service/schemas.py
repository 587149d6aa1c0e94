"""Request/response schemas for the outfit HTTP surface."""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from outfit_engines.pipeline.models import HostDocuments
from outfit_engines.scene_graph.models import SceneNode


class SceneRequest(BaseModel):
    root: SceneNode


class CaptureRequest(BaseModel):
    root: SceneNode
    tracked_paths: Optional[List[str]] = None
    auto_detect: bool = False


class RenameRequest(BaseModel):
    name: str


class IconRequest(BaseModel):
    icon_ref: Optional[str] = None


class CompileRequest(BaseModel):
    root: Optional[SceneNode] = None
    prune_missing: bool = False


class GenerateRequest(BaseModel):
    root: SceneNode
    documents: HostDocuments = Field(default_factory=HostDocuments)


class DiagnosticsRequest(BaseModel):
    root: Optional[SceneNode] = None
    documents: HostDocuments = Field(default_factory=HostDocuments)


class CandidatesResponse(BaseModel):
    candidates: List[str] = Field(default_factory=list)
    outfit_root: Optional[str] = None
    excluded_system_roots: List[str] = Field(default_factory=list)


class LabelsResponse(BaseModel):
    labels: Dict[str, str] = Field(default_factory=dict)
