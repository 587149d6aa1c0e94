"""HTTP surface tests."""
import pytest
from fastapi.testclient import TestClient

from outfit_engines.service.server import create_app
from outfit_engines.slot_store.repository import InMemorySlotStoreRepository
from outfit_engines.slot_store.state import set_slot_store_repo

AVATAR = {
    "name": "Avatar",
    "children": [
        {"name": "Body", "has_renderable_surface": True},
        {
            "name": "Outfits",
            "children": [
                {"name": "Shirt", "active": True},
                {"name": "Jacket", "active": False},
                {"name": "GoGoLoco"},
            ],
        },
    ],
}


@pytest.fixture
def client():
    set_slot_store_repo(InMemorySlotStoreRepository())
    return TestClient(create_app())


def test_health(client):
    resp = client.get("/outfits/health")
    assert resp.status_code == 200
    assert resp.json()["config"]["layer_name"] == "OutfitManager"


def test_candidates(client):
    resp = client.post("/outfits/candidates", json={"root": AVATAR})
    body = resp.json()
    assert resp.status_code == 200
    assert body["outfit_root"] == "Outfits"
    assert "Outfits/Shirt" in body["candidates"]
    assert "Outfits/GoGoLoco" not in body["candidates"]
    assert body["excluded_system_roots"] == ["GoGoLoco"]


def test_store_lifecycle(client):
    store = client.get("/outfits/avatar-1/store").json()
    assert len(store["slots"]) == 6

    store["slots"][2]["name"] = "Formal"
    resp = client.put("/outfits/avatar-1/store", json=store)
    assert resp.status_code == 200
    assert client.get("/outfits/avatar-1/slots/2").json()["name"] == "Formal"

    assert client.delete("/outfits/avatar-1/store").status_code == 200
    resp = client.delete("/outfits/avatar-1/store")
    assert resp.status_code == 404
    assert resp.json()["detail"]["error"]["code"] == "outfits.store_not_found"


def test_put_store_identity_mismatch(client):
    store = client.get("/outfits/avatar-1/store").json()
    resp = client.put("/outfits/avatar-2/store", json=store)
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"]["resource_kind"] == "slot_store"


def test_slot_edits(client):
    resp = client.post(
        "/outfits/avatar-1/slots/0/capture",
        json={"root": AVATAR, "tracked_paths": ["Outfits/Shirt", "Outfits/Missing"]},
    )
    body = resp.json()
    assert resp.status_code == 200
    assert body["saved_count"] == 1
    assert body["missing_paths"] == ["Outfits/Missing"]
    assert body["findings"][0]["code"] == "MissingTrackedObject"

    assert client.put("/outfits/avatar-1/slots/0/name", json={"name": "Casual"}).json()["name"] == "Casual"
    assert client.put("/outfits/avatar-1/slots/0/icon", json={"icon_ref": "icons/c.png"}).json()["icon_ref"] == "icons/c.png"
    assert client.get("/outfits/avatar-1/labels").json()["labels"] == {"Outfits/Shirt": "[Casual]"}

    plan = client.post("/outfits/avatar-1/slots/0/restore-plan", json={"root": AVATAR}).json()
    assert plan["assignments"] == {"Outfits/Shirt": True}

    cleared = client.post("/outfits/avatar-1/slots/0/clear").json()
    assert cleared["configured"] is False


def test_bad_slot_index(client):
    resp = client.post("/outfits/avatar-1/slots/6/clear")
    assert resp.status_code == 404
    assert resp.json()["detail"]["error"]["details"] == {"slot_index": 6}


def test_presets(client):
    names = [s["name"] for s in client.post("/outfits/avatar-1/presets").json()["slots"]]
    assert names[:3] == ["Default", "Casual", "Formal"]


def test_compile_generate_and_diagnose(client):
    client.post("/outfits/avatar-1/slots/1/capture", json={"root": AVATAR, "tracked_paths": ["Outfits/Shirt", "Outfits/Jacket"]})

    compiled = client.post("/outfits/avatar-1/compile", json={"root": AVATAR}).json()
    assert compiled["artifacts"][1]["assignments"] == {"Outfits/Jacket": False, "Outfits/Shirt": True}
    assert compiled["artifacts"][0]["assignments"] == {"Outfits/Jacket": False, "Outfits/Shirt": False}

    generated = client.post("/outfits/avatar-1/generate", json={"root": AVATAR})
    assert generated.status_code == 200
    documents = generated.json()["documents"]
    layer = documents["controller"]["layers"][0]
    assert layer["default_state"] == "Neutral"

    report = client.post("/outfits/avatar-1/diagnostics", json={"root": AVATAR, "documents": documents}).json()
    codes = [f["code"] for f in report["findings"]]
    assert codes == ["ExcludedSystemRoot"]


def test_generate_refused(client):
    resp = client.post("/outfits/avatar-9/generate", json={"root": AVATAR})
    assert resp.status_code == 409
    assert resp.json()["detail"]["error"]["code"] == "outfits.generation_refused"
