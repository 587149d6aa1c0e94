"""HTTP routes for the outfit engines."""
from __future__ import annotations

from fastapi import APIRouter

from outfit_engines.artifact_compiler.models import CompileResult
from outfit_engines.classifier.service import collect_candidates, detect_outfit_root, find_excluded_system_roots
from outfit_engines.common.error_envelope import error_response
from outfit_engines.common.errors import GenerationRefused, SlotIndexError
from outfit_engines.config import runtime_config
from outfit_engines.diagnostics.models import DiagnosticsReport
from outfit_engines.pipeline.models import GenerationResult
from outfit_engines.pipeline.service import OutfitManager
from outfit_engines.scene_graph.paths import compute_path
from outfit_engines.service.schemas import (
    CandidatesResponse,
    CaptureRequest,
    CompileRequest,
    DiagnosticsRequest,
    GenerateRequest,
    IconRequest,
    LabelsResponse,
    RenameRequest,
    SceneRequest,
)
from outfit_engines.slot_store.models import CaptureResult, RestorePlan, Slot, SlotInfo, SlotStore

router = APIRouter(prefix="/outfits", tags=["outfits"])


def _slot_not_found(exc: SlotIndexError):
    error_response(
        code="outfits.slot_not_found",
        message=str(exc),
        status_code=404,
        resource_kind="slot",
        details={"slot_index": exc.slot_index},
    )


@router.get("/health")
def health() -> dict:
    return {"status": "ok", "config": runtime_config.config_snapshot()}


@router.post("/candidates", response_model=CandidatesResponse)
def candidates(request: SceneRequest) -> CandidatesResponse:
    root = request.root
    outfit_root = detect_outfit_root(root)
    return CandidatesResponse(
        candidates=collect_candidates(root),
        outfit_root=compute_path(root, outfit_root) if outfit_root is not None else None,
        excluded_system_roots=find_excluded_system_roots(outfit_root or root),
    )


@router.get("/{avatar_id}/store", response_model=SlotStore)
def get_store(avatar_id: str) -> SlotStore:
    return OutfitManager(avatar_id).load_store()


@router.put("/{avatar_id}/store", response_model=SlotStore)
def put_store(avatar_id: str, store: SlotStore) -> SlotStore:
    if store.avatar_identity != avatar_id:
        error_response(
            code="outfits.identity_mismatch",
            message=f"Store belongs to {store.avatar_identity}, not {avatar_id}",
            status_code=400,
            resource_kind="slot_store",
        )
    return OutfitManager(avatar_id).save_store(store)


@router.delete("/{avatar_id}/store")
def delete_store(avatar_id: str) -> dict:
    if not OutfitManager(avatar_id).delete_store():
        error_response(
            code="outfits.store_not_found",
            message=f"No slot store for avatar {avatar_id}",
            status_code=404,
            resource_kind="slot_store",
        )
    return {"status": "deleted", "avatar_identity": avatar_id}


@router.post("/{avatar_id}/presets", response_model=SlotStore)
def apply_presets(avatar_id: str) -> SlotStore:
    return OutfitManager(avatar_id).apply_preset_names()


@router.get("/{avatar_id}/labels", response_model=LabelsResponse)
def labels(avatar_id: str) -> LabelsResponse:
    return LabelsResponse(labels=OutfitManager(avatar_id).slot_labels())


@router.get("/{avatar_id}/slots/{slot_index}", response_model=SlotInfo)
def get_slot(avatar_id: str, slot_index: int) -> SlotInfo:
    try:
        return OutfitManager(avatar_id).slot_info(slot_index)
    except SlotIndexError as exc:
        _slot_not_found(exc)


@router.post("/{avatar_id}/slots/{slot_index}/capture", response_model=CaptureResult)
def capture(avatar_id: str, slot_index: int, request: CaptureRequest) -> CaptureResult:
    try:
        return OutfitManager(avatar_id).capture_slot(
            slot_index, request.root, request.tracked_paths, request.auto_detect
        )
    except SlotIndexError as exc:
        _slot_not_found(exc)


@router.post("/{avatar_id}/slots/{slot_index}/clear", response_model=Slot)
def clear(avatar_id: str, slot_index: int) -> Slot:
    try:
        return OutfitManager(avatar_id).clear_slot(slot_index)
    except SlotIndexError as exc:
        _slot_not_found(exc)


@router.put("/{avatar_id}/slots/{slot_index}/name", response_model=Slot)
def rename(avatar_id: str, slot_index: int, request: RenameRequest) -> Slot:
    try:
        return OutfitManager(avatar_id).rename_slot(slot_index, request.name)
    except SlotIndexError as exc:
        _slot_not_found(exc)


@router.put("/{avatar_id}/slots/{slot_index}/icon", response_model=Slot)
def set_icon(avatar_id: str, slot_index: int, request: IconRequest) -> Slot:
    try:
        return OutfitManager(avatar_id).set_slot_icon(slot_index, request.icon_ref)
    except SlotIndexError as exc:
        _slot_not_found(exc)


@router.post("/{avatar_id}/slots/{slot_index}/restore-plan", response_model=RestorePlan)
def restore(avatar_id: str, slot_index: int, request: SceneRequest) -> RestorePlan:
    try:
        return OutfitManager(avatar_id).restore_plan(slot_index, request.root)
    except SlotIndexError as exc:
        _slot_not_found(exc)


@router.post("/{avatar_id}/compile", response_model=CompileResult)
def compile_outfits(avatar_id: str, request: CompileRequest) -> CompileResult:
    return OutfitManager(avatar_id).compile(request.root, request.prune_missing)


@router.post("/{avatar_id}/generate", response_model=GenerationResult)
def generate(avatar_id: str, request: GenerateRequest) -> GenerationResult:
    try:
        return OutfitManager(avatar_id).generate(request.root, request.documents)
    except GenerationRefused as exc:
        error_response(
            code="outfits.generation_refused",
            message=str(exc),
            status_code=409,
            resource_kind="slot_store",
        )


@router.post("/{avatar_id}/diagnostics", response_model=DiagnosticsReport)
def diagnostics(avatar_id: str, request: DiagnosticsRequest) -> DiagnosticsReport:
    return OutfitManager(avatar_id).diagnostics(request.documents, request.root)
