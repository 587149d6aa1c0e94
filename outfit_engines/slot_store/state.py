"""Shared slot store repository for routes/services."""
from __future__ import annotations

from outfit_engines.config import runtime_config
from outfit_engines.slot_store.repository import (
    FirestoreSlotStoreRepository,
    InMemorySlotStoreRepository,
    SlotStoreRepository,
)


def _default_repo() -> SlotStoreRepository:
    backend = runtime_config.get_slot_store_backend()
    if backend == "firestore":
        try:
            return FirestoreSlotStoreRepository()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize FirestoreSlotStoreRepository: {e}")
    if backend == "memory":
        return InMemorySlotStoreRepository()
    raise RuntimeError(f"SLOT_STORE_BACKEND must be 'memory' or 'firestore'. Got: '{backend}'")


class LazySlotStoreRepo:
    def __init__(self):
        self._impl = None

    @property
    def _repo(self) -> SlotStoreRepository:
        if self._impl is None:
            self._impl = _default_repo()
        return self._impl

    def __getattr__(self, name):
        return getattr(self._repo, name)


slot_store_repo: SlotStoreRepository = LazySlotStoreRepo()  # type: ignore


def set_slot_store_repo(repo: SlotStoreRepository) -> None:
    # Swap the proxy's impl so modules that already imported slot_store_repo see it.
    global slot_store_repo
    if isinstance(slot_store_repo, LazySlotStoreRepo):
        slot_store_repo._impl = repo
    else:
        slot_store_repo = repo
