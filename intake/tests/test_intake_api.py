import asyncio
import uuid
from pathlib import Path

from fastapi.testclient import TestClient

from intake.api.main import DRAFT_UPDATE_HEADER, app
from intake.drafts.service import DraftService
from intake.internal_core.store import InMemoryDraftStore


def _install_memory_service(public_base: str = "https://intake.example/") -> InMemoryDraftStore:
    store = InMemoryDraftStore()
    app.state.draft_service = DraftService(store, public_base=public_base)
    return store


def _clear_app_state() -> None:
    for name in ("draft_service", "intake_config", "static_dir"):
        if hasattr(app.state, name):
            delattr(app.state, name)


def test_hello() -> None:
    client = TestClient(app)
    response = client.get("/api/hello/world")
    assert response.status_code == 200
    assert response.json() == {"hello": "Hello world"}


def test_health_is_plain_text() -> None:
    client = TestClient(app)
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.text == "ok"
    assert response.headers["content-type"].startswith("text/plain")


def test_create_draft_returns_id_and_resume_url() -> None:
    store = _install_memory_service()
    client = TestClient(app)
    try:
        first = client.post("/api/drafts")
        second = client.post("/api/drafts")
    finally:
        _clear_app_state()

    assert first.status_code == 200
    body = first.json()
    assert set(body) == {"id", "resume_url"}
    assert body["resume_url"] == f"https://intake.example/form/{body['id']}"
    assert second.json()["id"] != body["id"]
    for draft_id in (body["id"], second.json()["id"]):
        assert asyncio.run(store.find_by_id(draft_id))["status"] == "draft"


def test_draft_lifecycle_over_http() -> None:
    _install_memory_service()
    client = TestClient(app)
    try:
        draft_id = client.post("/api/drafts").json()["id"]

        initial = client.get(f"/api/drafts/{draft_id}")
        assert initial.status_code == 200
        assert initial.json()["data"] == {}
        assert initial.json()["step"] == 0
        assert initial.json()["status"] == "draft"

        saved = client.patch(f"/api/drafts/{draft_id}", json={"data": {"name": "Alice"}, "step": 1})
        assert saved.status_code == 200
        assert saved.headers[DRAFT_UPDATE_HEADER] == "applied"
        assert saved.json()["data"] == {"name": "Alice"}
        assert saved.json()["step"] == 1

        resaved = client.patch(f"/api/drafts/{draft_id}", json={"data": {"name": "Alice", "city": "Oslo"}})
        assert resaved.json()["step"] == 1
        assert resaved.json()["data"] == {"name": "Alice", "city": "Oslo"}

        submitted = client.post(f"/api/drafts/{draft_id}/submit")
        assert submitted.status_code == 200
        assert submitted.json()["status"] == "submitted"

        ignored = client.patch(f"/api/drafts/{draft_id}", json={"data": {"name": "Bob"}, "step": 4})
        assert ignored.status_code == 200
        assert ignored.headers[DRAFT_UPDATE_HEADER] == "ignored"
        assert ignored.json() == submitted.json()

        again = client.post(f"/api/drafts/{draft_id}/submit")
        assert again.status_code == 200
        assert again.json()["status"] == "submitted"

        final = client.get(f"/api/drafts/{draft_id}").json()
    finally:
        _clear_app_state()

    assert set(final) == {"id", "data", "step", "status", "created_at", "updated_at"}
    assert final["id"] == draft_id
    assert final["data"] == {"name": "Alice", "city": "Oslo"}
    assert final["step"] == 1
    assert final["status"] == "submitted"
    assert final["updated_at"] >= final["created_at"]


def test_patch_with_non_object_data_saves_empty_object() -> None:
    _install_memory_service()
    client = TestClient(app)
    try:
        draft_id = client.post("/api/drafts").json()["id"]
        response = client.patch(f"/api/drafts/{draft_id}", json={"data": [1, 2, 3]})
    finally:
        _clear_app_state()
    assert response.status_code == 200
    assert response.json()["data"] == {}


def test_frontend_entry_and_favicon_served_from_static_dir(tmp_path: Path) -> None:
    (tmp_path / "index.html").write_text("<html>intake</html>", encoding="utf-8")
    (tmp_path / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    app.state.static_dir = str(tmp_path)
    client = TestClient(app)
    try:
        page = client.get(f"/form/{uuid.uuid4()}")
        icon = client.get("/favicon.ico")
        unknown_api = client.get("/api/not-a-route")
    finally:
        _clear_app_state()

    assert page.status_code == 200
    assert "intake" in page.text
    assert page.headers["content-type"].startswith("text/html")
    assert icon.status_code == 200
    assert icon.content == b"\x00\x00\x01\x00"
    assert unknown_api.status_code == 404


def test_patch_rejects_non_integer_or_out_of_range_step() -> None:
    store = _install_memory_service()
    client = TestClient(app)
    try:
        draft_id = client.post("/api/drafts").json()["id"]
        responses = [
            client.patch(f"/api/drafts/{draft_id}", json={"data": {"a": 1}, "step": step})
            for step in ("3", True, 2**70, 1.5)
        ]
        boundary = client.patch(f"/api/drafts/{draft_id}", json={"data": {"a": 1}, "step": 2**63 - 1})
    finally:
        _clear_app_state()

    assert [r.status_code for r in responses] == [422, 422, 422, 422]
    assert boundary.status_code == 200
    assert boundary.json()["step"] == 2**63 - 1
    assert asyncio.run(store.find_by_id(draft_id))["data"] == {"a": 1}
