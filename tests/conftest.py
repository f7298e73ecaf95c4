from __future__ import annotations

from pathlib import Path

import pytest

from agent_resume.runtime.domain.models import AgentSession, Board, CommentRecord, Task
from agent_resume.runtime.storage.container import Container

SESSION_REF = "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "repo"
    path.mkdir()
    return path


@pytest.fixture
def container(project_dir: Path) -> Container:
    return Container(project_dir)


@pytest.fixture
def blocked_task(container: Container, project_dir: Path) -> Task:
    """A WRK-42 task waiting on human input with a linked Claude Code session."""
    board = container.boards.upsert(Board(id="board0000000001", name="Work", prefix="WRK"))
    session = AgentSession(tool="claude-code", ref=SESSION_REF, working_dir=str(project_dir))
    task = container.tasks.upsert(
        Task(
            id="task0000000042x",
            title="Implement user authentication",
            description="Add JWT based login.",
            priority="high",
            column="need_input",
            board_id=board.id,
            seq=42,
            agent_session=session,
            session_history=[AgentSession.from_dict(session.to_dict())],
        )
    )
    container.comments.add(
        CommentRecord(
            task_id=task.id,
            content="Should I use pyjwt or authlib?",
            author_type="agent",
            author_id="claude",
            created_at="2024-01-15T10:00:00+00:00",
        )
    )
    container.comments.add(
        CommentRecord(
            task_id=task.id,
            content="Use pyjwt, it's already a dependency.",
            author_type="human",
            author_id="",
            created_at="2024-01-15T10:05:00+00:00",
        )
    )
    return task
