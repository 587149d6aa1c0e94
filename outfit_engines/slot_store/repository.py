"""Repository interfaces for slot stores, keyed by avatar identity."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol

from outfit_engines.common.errors import StoreNotFound
from outfit_engines.slot_store.models import SlotStore
from outfit_engines.slot_store.service import new_store, normalize_store

logger = logging.getLogger(__name__)


class SlotStoreRepository(Protocol):
    """Storage abstraction for outfit slot stores."""

    def get(self, avatar_identity: str) -> Optional[SlotStore]: ...
    def require(self, avatar_identity: str) -> SlotStore: ...
    def get_or_create(self, avatar_identity: str, root_hint: Optional[str] = None) -> SlotStore: ...
    def save(self, store: SlotStore) -> SlotStore: ...
    def delete(self, avatar_identity: str) -> bool: ...
    def list_identities(self) -> List[str]: ...


class InMemorySlotStoreRepository:
    """In-memory implementation for dev/tests."""

    def __init__(self) -> None:
        self._items: Dict[str, dict] = {}

    def get(self, avatar_identity: str) -> Optional[SlotStore]:
        data = self._items.get(avatar_identity)
        if data is None:
            return None
        # Stored as plain data so callers never share a live instance with the repo.
        return normalize_store(SlotStore.model_validate(data))

    def require(self, avatar_identity: str) -> SlotStore:
        store = self.get(avatar_identity)
        if store is None:
            raise StoreNotFound(avatar_identity)
        return store

    def get_or_create(self, avatar_identity: str, root_hint: Optional[str] = None) -> SlotStore:
        store = self.get(avatar_identity)
        if store is not None:
            return store
        logger.info("Creating slot store for avatar %s", avatar_identity)
        return self.save(new_store(avatar_identity, root_hint=root_hint))

    def save(self, store: SlotStore) -> SlotStore:
        self._items[store.avatar_identity] = store.model_dump(mode="json")
        return store

    def delete(self, avatar_identity: str) -> bool:
        return self._items.pop(avatar_identity, None) is not None

    def list_identities(self) -> List[str]:
        return sorted(self._items)


class FirestoreSlotStoreRepository(InMemorySlotStoreRepository):
    """Firestore implementation, one document per avatar identity."""

    def __init__(self, client: Optional[object] = None, collection: str = "outfit_slot_stores") -> None:
        if client is None:  # pragma: no cover - optional dep
            try:
                from google.cloud import firestore  # type: ignore
            except Exception as exc:
                raise RuntimeError("google-cloud-firestore not installed") from exc
            from outfit_engines.config import runtime_config

            project = runtime_config.get_firestore_project()
            if not project:
                raise RuntimeError("GCP project is required for Firestore slot store repo")
            client = firestore.Client(project=project)  # type: ignore[arg-type]
        self._client = client
        self._collection = collection

    def _col(self):
        return self._client.collection(self._collection)

    def get(self, avatar_identity: str) -> Optional[SlotStore]:
        snap = self._col().document(avatar_identity).get()
        if not snap or not snap.exists:
            return None
        data = snap.to_dict() or {}
        return normalize_store(SlotStore.model_validate(data))

    def save(self, store: SlotStore) -> SlotStore:
        self._col().document(store.avatar_identity).set(store.model_dump(mode="json"))
        return store

    def delete(self, avatar_identity: str) -> bool:
        ref = self._col().document(avatar_identity)
        snap = ref.get()
        if not snap or not snap.exists:
            return False
        ref.delete()
        return True

    def list_identities(self) -> List[str]:
        return sorted(doc.id for doc in self._col().stream())
