"""
Acceptance smoke checks for draft-studio.

Walks one draft through its whole lifecycle over HTTP:
create -> autosave -> commit -> revert -> discard -> delete.

Usage:
  DATABASE_URL=sqlite:///./data/acceptance_draft_studio.db PYTHONPATH=src python scripts/acceptance_smoke.py
"""

from __future__ import annotations

import json
import os
import sys
import uuid
from dataclasses import dataclass
from typing import Callable

from fastapi.testclient import TestClient


@dataclass
class CheckResult:
    name: str
    passed: bool
    detail: str


def _ok(name: str, detail: str) -> CheckResult:
    return CheckResult(name=name, passed=True, detail=detail)


def _fail(name: str, detail: str) -> CheckResult:
    return CheckResult(name=name, passed=False, detail=detail)


def run_check(name: str, fn: Callable[[], CheckResult]) -> CheckResult:
    try:
        return fn()
    except Exception as exc:  # pragma: no cover - smoke tool
        return _fail(name, f"exception: {exc}")


def main() -> int:
    database_url = os.getenv("DATABASE_URL", "sqlite:///./data/acceptance_draft_studio.db")
    os.environ["DATABASE_URL"] = database_url

    from draft_studio.core.database import init_db
    from draft_studio.main import app

    # Ensure tables exist for the acceptance database.
    init_db()

    client = TestClient(app)
    results: list[CheckResult] = []
    author = "smoke-user"
    state: dict = {}

    def check_health() -> CheckResult:
        resp = client.get("/health")
        if resp.status_code != 200:
            return _fail("GET /health", f"status={resp.status_code}, body={resp.text[:200]}")
        return _ok("GET /health", "healthy")

    def check_create() -> CheckResult:
        resp = client.post(
            "/api/drafts",
            json={
                "title": "smoke draft",
                "workspace_id": f"ws-{uuid.uuid4().hex[:8]}",
                "created_by_id": author,
                "content": {"type": "doc"},
            },
        )
        if resp.status_code != 200:
            return _fail("POST /api/drafts", f"status={resp.status_code}, body={resp.text[:300]}")
        data = resp.json()
        if data["current_version"] != 1:
            return _fail("POST /api/drafts", f"unexpected response: {json.dumps(data)[:300]}")
        state["draft_id"] = data["id"]
        return _ok("POST /api/drafts", f"id={data['id']}")

    def check_autosave_commit() -> CheckResult:
        draft_id = state["draft_id"]
        saved = client.patch(
            f"/api/drafts/{draft_id}/temp",
            json={"content": {"type": "doc", "edited": True}},
        )
        if saved.status_code != 200 or saved.json()["working_copy"] is None:
            return _fail("autosave", f"status={saved.status_code}, body={saved.text[:300]}")

        committed = client.post(
            f"/api/drafts/{draft_id}/temp/commit",
            json={"created_by_id": author},
        )
        if committed.status_code != 200 or committed.json()["version"] != 2:
            return _fail("commit", f"status={committed.status_code}, body={committed.text[:300]}")
        return _ok("autosave + commit", "version=2")

    def check_revert() -> CheckResult:
        draft_id = state["draft_id"]
        resp = client.post(f"/api/drafts/{draft_id}/revert/1", json={"created_by_id": author})
        if resp.status_code != 200:
            return _fail("revert", f"status={resp.status_code}, body={resp.text[:300]}")
        data = resp.json()
        if data["version"] != 3 or data["content"] != {"type": "doc"}:
            return _fail("revert", f"unexpected response: {json.dumps(data)[:300]}")
        return _ok("revert", f"summary={data['change_summary']}")

    def check_discard() -> CheckResult:
        draft_id = state["draft_id"]
        saved = client.patch(
            f"/api/drafts/{draft_id}/temp",
            json={"content": {"type": "doc", "scratch": True}},
        )
        if saved.status_code != 200:
            return _fail("discard", f"autosave status={saved.status_code}, body={saved.text[:300]}")

        resp = client.delete(f"/api/drafts/{draft_id}/temp")
        if resp.status_code != 200:
            return _fail("discard", f"status={resp.status_code}, body={resp.text[:300]}")
        data = client.get(f"/api/drafts/{draft_id}").json()
        if data["working_copy"] is not None or data["current_version"] != 3:
            return _fail("discard", f"unexpected draft: {json.dumps(data)[:300]}")
        return _ok("discard", "working copy cleared, version=3")

    def check_delete() -> CheckResult:
        draft_id = state["draft_id"]
        resp = client.delete(f"/api/drafts/{draft_id}")
        if resp.status_code != 200:
            return _fail("delete", f"status={resp.status_code}")
        gone = client.get(f"/api/drafts/{draft_id}/versions")
        if gone.status_code != 404:
            return _fail("delete", f"versions still visible: status={gone.status_code}")
        return _ok("delete", "draft and versions removed")

    results.append(run_check("GET /health", check_health))
    results.append(run_check("POST /api/drafts", check_create))
    if results[-1].passed:
        results.append(run_check("autosave + commit", check_autosave_commit))
        results.append(run_check("revert", check_revert))
        results.append(run_check("discard", check_discard))
        results.append(run_check("delete", check_delete))

    passed = sum(1 for item in results if item.passed)
    failed = len(results) - passed

    print("\nAcceptance Smoke Report")
    print("=" * 24)
    for item in results:
        status = "PASS" if item.passed else "FAIL"
        print(f"[{status}] {item.name}: {item.detail}")

    print("-" * 24)
    print(f"passed={passed}, failed={failed}, total={len(results)}")
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
