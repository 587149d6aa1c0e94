"""Tests for slot store repositories and the shared repo state."""
from unittest.mock import MagicMock

import pytest

from outfit_engines.common.errors import StoreNotFound
from outfit_engines.slot_store import state
from outfit_engines.slot_store.models import SLOT_COUNT
from outfit_engines.slot_store.repository import FirestoreSlotStoreRepository, InMemorySlotStoreRepository
from outfit_engines.slot_store.service import new_store, rename_slot


@pytest.fixture
def repo():
    return InMemorySlotStoreRepository()


def test_get_or_create_persists_new_store(repo):
    store = repo.get_or_create("avatar-1", root_hint="Outfits")
    assert len(store.slots) == SLOT_COUNT
    assert repo.list_identities() == ["avatar-1"]
    assert repo.get("avatar-1").root_hint == "Outfits"


def test_loaded_store_is_a_copy(repo):
    store = repo.get_or_create("avatar-1")
    rename_slot(store, 0, "Unsaved")
    assert repo.get("avatar-1").slots[0].name == "Outfit 0"
    repo.save(store)
    assert repo.get("avatar-1").slots[0].name == "Unsaved"


def test_load_repairs_legacy_documents(repo):
    repo._items["avatar-1"] = {
        "avatar_identity": "avatar-1",
        "slots": [{"name": "Old", "configured": True, "states": [{"path": "Outfits/Shirt", "active": True}]}, None],
    }
    store = repo.get("avatar-1")
    assert len(store.slots) == SLOT_COUNT
    assert store.slots[0].tracked == ["Outfits/Shirt"]


def test_require_and_delete(repo):
    with pytest.raises(StoreNotFound):
        repo.require("missing")
    repo.save(new_store("avatar-1"))
    assert repo.delete("avatar-1")
    assert not repo.delete("avatar-1")


def _fake_firestore():
    docs = {}

    def document(doc_id):
        ref = MagicMock()

        def get():
            snap = MagicMock()
            snap.exists = doc_id in docs
            snap.id = doc_id
            snap.to_dict.return_value = docs.get(doc_id)
            return snap

        ref.get.side_effect = get
        ref.set.side_effect = lambda data: docs.__setitem__(doc_id, data)
        ref.delete.side_effect = lambda: docs.pop(doc_id, None)
        return ref

    def stream():
        for doc_id in list(docs):
            snap = MagicMock()
            snap.id = doc_id
            yield snap

    collection = MagicMock()
    collection.document.side_effect = document
    collection.stream.side_effect = stream
    client = MagicMock()
    client.collection.return_value = collection
    return client, docs


def test_firestore_repository_round_trip():
    client, docs = _fake_firestore()
    repo = FirestoreSlotStoreRepository(client=client)

    store = repo.get_or_create("avatar-1")
    rename_slot(store, 1, "Casual")
    repo.save(store)

    client.collection.assert_called_with("outfit_slot_stores")
    assert docs["avatar-1"]["slots"][1]["name"] == "Casual"
    assert repo.get("avatar-1").slots[1].name == "Casual"
    assert repo.list_identities() == ["avatar-1"]
    assert repo.delete("avatar-1")
    assert repo.get("avatar-1") is None


def test_firestore_backend_requires_project(monkeypatch):
    monkeypatch.setenv("SLOT_STORE_BACKEND", "firestore")
    monkeypatch.delenv("GCP_PROJECT", raising=False)
    monkeypatch.delenv("PROJECT_ID", raising=False)
    with pytest.raises(RuntimeError):
        state._default_repo()


def test_unknown_backend(monkeypatch):
    monkeypatch.setenv("SLOT_STORE_BACKEND", "sqlite")
    with pytest.raises(RuntimeError):
        state._default_repo()


def test_set_slot_store_repo_swaps_shared_proxy():
    previous = state.slot_store_repo._impl
    replacement = InMemorySlotStoreRepository()
    try:
        state.set_slot_store_repo(replacement)
        state.slot_store_repo.save(new_store("avatar-9"))
        assert replacement.list_identities() == ["avatar-9"]
    finally:
        state.set_slot_store_repo(previous)
