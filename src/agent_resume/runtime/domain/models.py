"""Domain model dataclasses and normalization helpers."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, Optional, cast

from ...io_utils import now_iso, parse_iso
from ...resume.context import Comment

Column = Literal["backlog", "todo", "in_progress", "need_input", "review", "done"]
SessionStatus = Literal["active", "paused", "completed", "abandoned"]
_VALID_COLUMNS = {"backlog", "todo", "in_progress", "need_input", "review", "done"}
_VALID_PRIORITIES = {"low", "medium", "high", "urgent"}
_VALID_SESSION_STATUSES = {"active", "paused", "completed", "abandoned"}
FINAL_SESSION_STATUSES = tuple(sorted(_VALID_SESSION_STATUSES - {"active"}))


def _id() -> str:
    return uuid.uuid4().hex[:15]


def _int_or_zero(value: Any) -> int:
    try:
        return int(value) if value is not None else 0
    except (TypeError, ValueError):
        return 0


@dataclass
class AgentSession:
    """Coding-agent session linked to a task."""
    tool: str = ""
    ref: str = ""
    working_dir: str = ""
    linked_at: str = field(default_factory=now_iso)
    status: SessionStatus = "active"
    ended_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize the session to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AgentSession":
        """Deserialize a session, normalizing unknown statuses to ``active``."""
        status = str(data.get("status") or "active")
        if status not in _VALID_SESSION_STATUSES:
            status = "active"
        return cls(
            tool=str(data.get("tool") or ""),
            ref=str(data.get("ref") or ""),
            working_dir=str(data.get("working_dir") or ""),
            linked_at=str(data.get("linked_at") or now_iso()),
            status=cast(SessionStatus, status),
            ended_at=str(data.get("ended_at") or ""),
        )


@dataclass
class Board:
    """Kanban board; its prefix forms task display ids such as ``WRK-42``."""
    id: str = field(default_factory=_id)
    name: str = ""
    prefix: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize the board to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Board":
        """Deserialize a board from persisted data."""
        return cls(
            id=str(data.get("id") or _id()),
            name=str(data.get("name") or ""),
            prefix=str(data.get("prefix") or "").strip().upper(),
        )


@dataclass
class Task:
    """Task record as stored by the board."""
    id: str = field(default_factory=_id)
    title: str = ""
    description: str = ""
    priority: str = "medium"
    column: Column = "backlog"
    board_id: Optional[str] = None
    seq: int = 0
    display_id: Optional[str] = None
    agent_session: Optional[AgentSession] = None
    session_history: list[AgentSession] = field(default_factory=list)
    history: list[dict[str, Any]] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    def add_history(self, action: str, *, changes: Optional[dict[str, Any]] = None, actor: str = "cli") -> None:
        """Append an audit entry to the task history."""
        entry: dict[str, Any] = {"timestamp": now_iso(), "action": action, "actor": actor}
        if changes:
            entry["changes"] = changes
        self.history.append(entry)

    def to_dict(self) -> dict[str, Any]:
        """Serialize a task to a dictionary payload."""
        data = asdict(self)
        data["agent_session"] = self.agent_session.to_dict() if self.agent_session else None
        data["session_history"] = [s.to_dict() for s in self.session_history]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize and normalize a task from persisted data."""
        priority = str(data.get("priority") or "medium")
        if priority not in _VALID_PRIORITIES:
            priority = "medium"
        column = str(data.get("column") or "backlog")
        if column not in _VALID_COLUMNS:
            column = "backlog"
        raw_session = data.get("agent_session")
        session = AgentSession.from_dict(raw_session) if isinstance(raw_session, dict) and raw_session else None
        return cls(
            id=str(data.get("id") or _id()),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            priority=priority,
            column=cast(Column, column),
            board_id=(str(data.get("board_id")) if data.get("board_id") else None),
            seq=_int_or_zero(data.get("seq")),
            display_id=(str(data.get("display_id")) if data.get("display_id") else None),
            agent_session=session,
            session_history=[
                AgentSession.from_dict(s) for s in list(data.get("session_history") or []) if isinstance(s, dict)
            ],
            history=[h for h in list(data.get("history") or []) if isinstance(h, dict)],
            created_at=str(data.get("created_at") or now_iso()),
            updated_at=str(data.get("updated_at") or now_iso()),
        )


@dataclass
class CommentRecord:
    """Persisted comment on a task."""
    id: str = field(default_factory=_id)
    task_id: str = ""
    content: str = ""
    author_type: str = "human"
    author_id: str = ""
    created_at: str = field(default_factory=now_iso)
    metadata: dict[str, Any] = field(default_factory=dict)

    def created(self) -> datetime:
        """Creation time in UTC; unparseable values sort first as the epoch."""
        parsed = parse_iso(self.created_at)
        if parsed is None:
            return datetime.fromtimestamp(0, tz=timezone.utc)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed

    def to_comment(self) -> Comment:
        """Project the record into the conversation view used by prompts."""
        return Comment(
            content=self.content,
            author_type=self.author_type,
            author_id=self.author_id,
            created=self.created(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the comment to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommentRecord":
        """Deserialize a comment from persisted data."""
        return cls(
            id=str(data.get("id") or _id()),
            task_id=str(data.get("task_id") or ""),
            content=str(data.get("content") or ""),
            author_type=str(data.get("author_type") or "human"),
            author_id=str(data.get("author_id") or ""),
            created_at=str(data.get("created_at") or now_iso()),
            metadata=dict(data.get("metadata") or {}),
        )
