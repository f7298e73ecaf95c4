from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from agent_resume.runtime.domain.models import Task
from agent_resume.runtime.storage.container import Container
from agent_resume.server.api import create_app

SESSION_REF = "550e8400-e29b-41d4-a716-446655440000"


def _client(project_dir: Path) -> TestClient:
    return TestClient(create_app(project_dir=project_dir))


def test_healthz(project_dir: Path) -> None:
    resp = _client(project_dir).get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_preview_resume(project_dir: Path, container: Container, blocked_task: Task) -> None:
    resp = _client(project_dir).get("/tasks/WRK-42/resume")
    assert resp.status_code == 200
    body = resp.json()
    assert body["display_id"] == "WRK-42"
    assert body["args"][:3] == ["claude", "--resume", SESSION_REF]
    assert body["args"][3] == body["prompt"]
    assert body["prompt_length"] == len(body["prompt"])
    assert body["column"] == "need_input"
    assert container.tasks.get(blocked_task.id).column == "need_input"


def test_preview_resume_minimal_with_project_query(tmp_path: Path, project_dir: Path, blocked_task: Task) -> None:
    client = TestClient(create_app(project_dir=tmp_path / "elsewhere"))
    resp = client.get("/tasks/WRK-42/resume", params={"minimal": "true", "project_dir": str(project_dir)})
    assert resp.status_code == 200
    assert resp.json()["prompt"].startswith("Task WRK-42:")


def test_post_resume_marks_in_progress(project_dir: Path, container: Container, blocked_task: Task) -> None:
    resp = _client(project_dir).post(
        "/tasks/WRK-42/resume",
        json={"prompt": "It's fixed, carry on", "mark_in_progress": True},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["command"] == f"claude --resume {SESSION_REF} 'It'\\''s fixed, carry on'"
    assert body["column"] == "in_progress"
    assert container.tasks.get(blocked_task.id).column == "in_progress"


def test_resume_errors(project_dir: Path, container: Container, blocked_task: Task) -> None:
    client = _client(project_dir)
    assert client.get("/tasks/WRK-404/resume").status_code == 404

    task = container.tasks.get(blocked_task.id)
    task.agent_session.ref = "short"
    container.tasks.upsert(task)
    resp = client.get("/tasks/WRK-42/resume")
    assert resp.status_code == 400
    assert resp.json()["detail"]["kind"] == "invalid_session_reference"

    task.column = "done"
    container.tasks.upsert(task)
    assert client.get("/tasks/WRK-42/resume").status_code == 409
