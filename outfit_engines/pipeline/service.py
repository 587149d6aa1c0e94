"""OutfitManager: one avatar's slot store plus the full generation pipeline.

The avatar identity is fixed at construction and carried through every call.
The store is read from and written to the repository at the end of each
mutating operation, never in between.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from outfit_engines.artifact_compiler.compiler import compile_store
from outfit_engines.artifact_compiler.models import CompileResult
from outfit_engines.classifier.service import detect_outfit_root
from outfit_engines.common.errors import GenerationRefused
from outfit_engines.diagnostics.models import DiagnosticsReport, Severity
from outfit_engines.diagnostics.service import run_diagnostics
from outfit_engines.host_assets.service import build_outfit_menu, merge_main_menu, merge_selector_parameter
from outfit_engines.pipeline.models import GenerationResult, HostDocuments
from outfit_engines.scene_graph.models import SceneNode
from outfit_engines.scene_graph.paths import compute_path
from outfit_engines.slot_store import service as slot_service
from outfit_engines.slot_store import state as slot_state
from outfit_engines.slot_store.models import CaptureResult, RestorePlan, Slot, SlotInfo, SlotStore
from outfit_engines.slot_store.repository import SlotStoreRepository
from outfit_engines.state_machine.models import AnimatorController
from outfit_engines.state_machine.synthesizer import build_outfit_layer, merge_outfit_layer

logger = logging.getLogger(__name__)


class OutfitManager:
    def __init__(self, avatar_identity: str, repository: Optional[SlotStoreRepository] = None) -> None:
        if not avatar_identity:
            raise ValueError("avatar_identity is required")
        self.avatar_identity = avatar_identity
        self._repository = repository

    @property
    def repository(self) -> SlotStoreRepository:
        if self._repository is not None:
            return self._repository
        return slot_state.slot_store_repo

    # --- Store ---

    def load_store(self) -> SlotStore:
        return self.repository.get_or_create(self.avatar_identity)

    def save_store(self, store: SlotStore) -> SlotStore:
        if store.avatar_identity != self.avatar_identity:
            raise ValueError(f"Store belongs to {store.avatar_identity}, not {self.avatar_identity}")
        slot_service.ensure_fixed_size(store)
        return self.repository.save(store)

    def delete_store(self) -> bool:
        return self.repository.delete(self.avatar_identity)

    # --- Slot edits ---

    def capture_slot(
        self,
        slot_index: int,
        root: SceneNode,
        tracked_paths: Optional[Iterable[str]] = None,
        auto_detect: bool = False,
    ) -> CaptureResult:
        store = self.load_store()
        result = slot_service.capture_slot(store, slot_index, root, tracked_paths, auto_detect)
        self.save_store(store)
        return result

    def clear_slot(self, slot_index: int) -> Slot:
        store = self.load_store()
        slot = slot_service.clear_slot(store, slot_index)
        self.save_store(store)
        return slot

    def rename_slot(self, slot_index: int, name: str) -> Slot:
        store = self.load_store()
        slot = slot_service.rename_slot(store, slot_index, name)
        self.save_store(store)
        return slot

    def set_slot_icon(self, slot_index: int, icon_ref: Optional[str]) -> Slot:
        store = self.load_store()
        slot = slot_service.set_slot_icon(store, slot_index, icon_ref)
        self.save_store(store)
        return slot

    def apply_preset_names(self) -> SlotStore:
        store = slot_service.apply_preset_names(self.load_store())
        return self.save_store(store)

    def add_tracked_node(self, slot_index: int, root: SceneNode, node: SceneNode) -> str:
        store = self.load_store()
        path = slot_service.add_tracked_node(store, slot_index, root, node)
        self.save_store(store)
        return path

    def remove_tracked_path(self, slot_index: int, path: str) -> bool:
        store = self.load_store()
        removed = slot_service.remove_tracked_path(store, slot_index, path)
        if removed:
            self.save_store(store)
        return removed

    def auto_detect_tracked(self, slot_index: int, root: SceneNode) -> List[str]:
        store = self.load_store()
        paths = slot_service.auto_detect_tracked(store, slot_index, root)
        self.save_store(store)
        return paths

    # --- Read-only views ---

    def restore_plan(self, slot_index: int, root: SceneNode) -> RestorePlan:
        return slot_service.restore_plan(self.load_store(), slot_index, root)

    def slot_info(self, slot_index: int) -> SlotInfo:
        return slot_service.slot_info(self.load_store(), slot_index)

    def slot_labels(self) -> Dict[str, str]:
        return slot_service.slot_labels(self.load_store())

    def compile(self, root: Optional[SceneNode] = None, prune_missing: bool = False) -> CompileResult:
        return compile_store(self.load_store(), root, prune_missing)

    def diagnostics(self, documents: Optional[HostDocuments] = None, root: Optional[SceneNode] = None) -> DiagnosticsReport:
        documents = documents or HostDocuments()
        return run_diagnostics(
            self.load_store(),
            documents.parameters,
            documents.menu,
            documents.controller,
            root,
        )

    # --- Generation ---

    def generate(self, root: SceneNode, documents: Optional[HostDocuments] = None) -> GenerationResult:
        """Compile every slot and merge layer, parameter and menu into copies of the host documents.

        Raises GenerationRefused before producing anything when no slot is
        configured. The store is saved only once every document is built.
        """
        documents = documents or HostDocuments()
        store = self.load_store()

        refusals = [f for f in slot_service.validate_store(store) if f.severity == Severity.ERROR]
        if refusals:
            raise GenerationRefused("; ".join(f.message for f in refusals))

        compiled = compile_store(store, root)
        controller = documents.controller or AnimatorController()
        layer = build_outfit_layer(store, root, compiled=compiled)
        merged_controller = merge_outfit_layer(controller, layer)
        merged_layer = merged_controller.layer(layer.name)

        merged = HostDocuments(
            parameters=merge_selector_parameter(documents.parameters),
            menu=merge_main_menu(documents.menu, build_outfit_menu(store)),
            controller=merged_controller,
        )

        if store.root_hint is None:
            outfit_root = detect_outfit_root(root)
            if outfit_root is not None:
                store.root_hint = compute_path(root, outfit_root)
        self.save_store(store)

        write_defaults = bool(merged_layer.states) and merged_layer.states[0].write_defaults
        logger.info(
            "Generated outfit layer for %s: %s slot(s), write defaults %s",
            self.avatar_identity,
            store.configured_count(),
            "on" if write_defaults else "off",
        )
        return GenerationResult(
            avatar_identity=self.avatar_identity,
            configured_slots=store.configured_indices(),
            write_defaults=write_defaults,
            layer_hash=merged_layer.compute_hash(),
            documents=merged,
            findings=compiled.findings,
        )
