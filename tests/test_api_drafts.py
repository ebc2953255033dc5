"""
API 测试：草稿、版本、自动保存路由
"""
from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from draft_studio.api import autosave as autosave_api
from draft_studio.api import versions as versions_api
from draft_studio.core.database import init_db
from draft_studio.core.exceptions import ConcurrencyConflictError
from draft_studio.main import app

client = TestClient(app)


def setup_module() -> None:
    """确保测试数据库表存在。"""
    init_db()


def _create_draft(workspace_id: str | None = None, **extra) -> dict:
    payload = {
        "title": "API 草稿",
        "workspace_id": workspace_id or f"ws-{uuid.uuid4().hex[:8]}",
        "created_by_id": "user-1",
        "content": {"type": "doc"},
    }
    payload.update(extra)
    resp = client.post("/api/drafts", json=payload)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_health() -> None:
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_draft_returns_first_version() -> None:
    data = _create_draft()

    assert data["current_version"] == 1
    assert data["status"] == "DRAFT"
    assert data["working_copy"] is None
    assert data["latest_version"]["version"] == 1
    assert data["latest_version"]["content"] == {"type": "doc"}
    assert data["latest_version"]["change_summary"] == "Initial version"


def test_create_draft_empty_title_returns_400() -> None:
    resp = client.post(
        "/api/drafts",
        json={"title": "  ", "workspace_id": "ws", "created_by_id": "u"},
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "标题不能为空"


def test_get_missing_draft_returns_404() -> None:
    resp = client.get("/api/drafts/does-not-exist")

    assert resp.status_code == 404


def test_list_drafts_by_workspace() -> None:
    workspace_id = f"ws-{uuid.uuid4().hex[:8]}"
    first = _create_draft(workspace_id)
    second = _create_draft(workspace_id)
    _create_draft()

    resp = client.get("/api/drafts", params={"workspace_id": workspace_id})

    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert [item["id"] for item in data["items"]] == [second["id"], first["id"]]
    assert all(item["version_count"] == 1 for item in data["items"])


def test_update_metadata() -> None:
    draft = _create_draft()

    resp = client.patch(f"/api/drafts/{draft['id']}", json={"status": "READY"})

    assert resp.status_code == 200
    assert resp.json()["status"] == "READY"
    assert resp.json()["current_version"] == 1


def test_update_invalid_status_returns_400() -> None:
    draft = _create_draft()

    resp = client.patch(f"/api/drafts/{draft['id']}", json={"status": "LOST"})

    assert resp.status_code == 400


def test_manual_save_and_history() -> None:
    draft = _create_draft()

    saved = client.post(
        f"/api/drafts/{draft['id']}/versions",
        json={
            "content": {"type": "doc", "v": 2},
            "content_html": "<p>v2</p>",
            "change_summary": "手动保存",
            "created_by_id": "user-2",
        },
    )
    assert saved.status_code == 200
    assert saved.json()["version"] == 2

    history = client.get(f"/api/drafts/{draft['id']}/versions").json()
    assert [v["version"] for v in history] == [2, 1]
    assert history[0]["content_html"] == "<p>v2</p>"

    single = client.get(f"/api/drafts/{draft['id']}/versions/1")
    assert single.status_code == 200
    assert single.json()["content"] == {"type": "doc"}


def test_missing_version_returns_404() -> None:
    draft = _create_draft()

    resp = client.get(f"/api/drafts/{draft['id']}/versions/9")

    assert resp.status_code == 404


def test_working_copy_flow() -> None:
    draft = _create_draft()
    draft_id = draft["id"]

    saved = client.patch(
        f"/api/drafts/{draft_id}/temp",
        json={"content": {"type": "doc", "edited": True}},
    )
    assert saved.status_code == 200
    assert saved.json()["working_copy"] == {"type": "doc", "edited": True}
    assert saved.json()["working_copy_saved_at"] is not None

    committed = client.post(
        f"/api/drafts/{draft_id}/temp/commit",
        json={"created_by_id": "user-1"},
    )
    assert committed.status_code == 200
    assert committed.json()["version"] == 2
    assert committed.json()["content"] == {"type": "doc", "edited": True}

    detail = client.get(f"/api/drafts/{draft_id}").json()
    assert detail["working_copy"] is None
    assert detail["current_version"] == 2


def test_commit_without_working_copy_returns_409() -> None:
    draft = _create_draft()

    resp = client.post(
        f"/api/drafts/{draft['id']}/temp/commit",
        json={"created_by_id": "user-1"},
    )

    assert resp.status_code == 409
    assert resp.json()["detail"] == "没有可提交的工作副本"


def test_discard_working_copy() -> None:
    draft = _create_draft()
    client.patch(f"/api/drafts/{draft['id']}/temp", json={"content": {"x": 1}})

    resp = client.delete(f"/api/drafts/{draft['id']}/temp")

    assert resp.status_code == 200
    assert resp.json()["working_copy"] is None
    assert resp.json()["current_version"] == 1


def test_revert() -> None:
    draft = _create_draft()
    client.post(
        f"/api/drafts/{draft['id']}/versions",
        json={"content": {"type": "doc", "v": 2}, "created_by_id": "user-1"},
    )

    resp = client.post(f"/api/drafts/{draft['id']}/revert/1", json={"created_by_id": "user-3"})

    assert resp.status_code == 200
    data = resp.json()
    assert data["version"] == 3
    assert data["content"] == {"type": "doc"}
    assert data["change_summary"] == "Reverted to version 1"


def test_revert_missing_version_returns_404() -> None:
    draft = _create_draft()

    resp = client.post(f"/api/drafts/{draft['id']}/revert/7", json={"created_by_id": "u"})

    assert resp.status_code == 404


def test_delete_draft() -> None:
    draft = _create_draft()

    resp = client.delete(f"/api/drafts/{draft['id']}")
    assert resp.status_code == 200

    assert client.get(f"/api/drafts/{draft['id']}").status_code == 404
    assert client.delete(f"/api/drafts/{draft['id']}").status_code == 404


def _exhaust_retries(monkeypatch, version_service) -> None:
    """让版本追加直接以冲突结束，等同于重试耗尽"""

    def conflict(draft_id, *args, **kwargs):
        raise ConcurrencyConflictError(draft_id, 1)

    monkeypatch.setattr(version_service, "append_from", conflict)


def test_manual_save_conflict_returns_503(monkeypatch) -> None:
    draft = _create_draft()
    _exhaust_retries(monkeypatch, versions_api.version_service)

    resp = client.post(
        f"/api/drafts/{draft['id']}/versions",
        json={"content": {"type": "doc", "v": 2}, "created_by_id": "user-1"},
    )

    assert resp.status_code == 503
    assert "请重试保存" in resp.json()["detail"]


def test_revert_conflict_returns_503(monkeypatch) -> None:
    draft = _create_draft()
    _exhaust_retries(monkeypatch, versions_api.revert_service.version_service)

    resp = client.post(f"/api/drafts/{draft['id']}/revert/1", json={"created_by_id": "u"})

    assert resp.status_code == 503


def test_commit_conflict_returns_503(monkeypatch) -> None:
    draft = _create_draft()
    client.patch(f"/api/drafts/{draft['id']}/temp", json={"content": {"type": "doc", "wip": 1}})
    _exhaust_retries(monkeypatch, autosave_api.autosave_service.version_service)

    resp = client.post(f"/api/drafts/{draft['id']}/temp/commit", json={"created_by_id": "u"})

    assert resp.status_code == 503
    # 冲突不会吞掉工作副本
    detail = client.get(f"/api/drafts/{draft['id']}").json()
    assert detail["working_copy"] == {"type": "doc", "wip": 1}
    assert detail["current_version"] == 1
