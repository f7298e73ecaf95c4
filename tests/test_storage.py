from __future__ import annotations

from pathlib import Path

import yaml

from agent_resume.resume.config import ResumeRuntimeConfig, get_resume_runtime_config
from agent_resume.resume.context import PromptMode
from agent_resume.runtime.domain.models import AgentSession, CommentRecord, Task
from agent_resume.runtime.storage.bootstrap import ensure_state_root
from agent_resume.runtime.storage.container import Container


def test_ensure_state_root_creates_files_and_gitignore(tmp_path: Path) -> None:
    state_root = ensure_state_root(tmp_path)
    assert state_root == tmp_path / ".agent_resume"
    for name in ("tasks.yaml", "boards.yaml", "comments.yaml", "config.yaml"):
        assert (state_root / name).exists()
    assert ".agent_resume/" in (tmp_path / ".gitignore").read_text(encoding="utf-8")

    config = yaml.safe_load((state_root / "config.yaml").read_text(encoding="utf-8"))
    assert config["schema_version"] == 1
    assert config["resume"]["prompt_mode"] == "full"


def test_ensure_state_root_keeps_existing_gitignore(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("node_modules/", encoding="utf-8")
    ensure_state_root(tmp_path)
    ensure_state_root(tmp_path)
    content = (tmp_path / ".gitignore").read_text(encoding="utf-8")
    assert content.startswith("node_modules/\n")
    assert content.count(".agent_resume/") == 1


def test_task_round_trip_with_session(container: Container) -> None:
    task = Task(
        title="Fix login",
        column="need_input",
        seq=7,
        agent_session=AgentSession(tool="codex", ref="thread-abcdef12", working_dir="/src"),
    )
    container.tasks.upsert(task)

    loaded = container.tasks.get(task.id)
    assert loaded is not None
    assert loaded.column == "need_input"
    assert loaded.seq == 7
    assert loaded.agent_session is not None
    assert loaded.agent_session.tool == "codex"
    assert loaded.agent_session.ref == "thread-abcdef12"


def test_task_from_dict_normalizes_bad_values() -> None:
    task = Task.from_dict({"id": "t1", "priority": "P0", "column": "nowhere", "seq": "x", "agent_session": {}})
    assert task.priority == "medium"
    assert task.column == "backlog"
    assert task.seq == 0
    assert task.agent_session is None


def test_comments_sorted_oldest_first_and_limited(container: Container) -> None:
    for minute in (30, 10, 20):
        container.comments.add(
            CommentRecord(task_id="t1", content=f"at {minute}", created_at=f"2024-01-15T10:{minute}:00Z")
        )
    container.comments.add(CommentRecord(task_id="other", content="elsewhere"))

    comments = container.comments.list_for_task("t1")
    assert [c.content for c in comments] == ["at 10", "at 20", "at 30"]

    limited = container.comments.list_for_task("t1", limit=2)
    assert [c.content for c in limited] == ["at 10", "at 20"]


def test_comment_projection() -> None:
    record = CommentRecord(content="hi", author_type="agent", author_id="codex", created_at="2024-01-15T10:05:00")
    comment = record.to_comment()
    assert comment.content == "hi"
    assert comment.author_id == "codex"
    assert comment.created.tzinfo is not None
    assert (comment.created.hour, comment.created.minute) == (10, 5)


def test_resume_config_defaults() -> None:
    assert get_resume_runtime_config({}) == ResumeRuntimeConfig()
    assert get_resume_runtime_config({"resume": "bogus"}) == ResumeRuntimeConfig()


def test_resume_config_normalization() -> None:
    cfg = get_resume_runtime_config(
        {"resume": {"prompt_mode": " Minimal ", "comment_limit": 25, "default_working_dir": "/work"}}
    )
    assert cfg.prompt_mode is PromptMode.MINIMAL
    assert cfg.comment_limit == 25
    assert cfg.default_working_dir == "/work"

    bad = get_resume_runtime_config({"resume": {"prompt_mode": "huge", "comment_limit": True, "default_working_dir": "  "}})
    assert bad.prompt_mode is PromptMode.FULL
    assert bad.comment_limit == 100
    assert bad.default_working_dir == "."

    assert get_resume_runtime_config({"resume": {"comment_limit": -5}}).comment_limit == 100


def test_container_reads_resume_config(container: Container) -> None:
    config = container.config.load()
    config["resume"]["prompt_mode"] = "minimal"
    container.config.save(config)
    assert container.resume_config().prompt_mode is PromptMode.MINIMAL
