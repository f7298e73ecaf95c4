"""Context prompts injected into resumed agent sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Protocol, Sequence

DESCRIPTION_LIMIT = 500
MINIMAL_COMMENT_LIMIT = 200
MINIMAL_RECENT_COMMENTS = 3
SHORT_ID_LENGTH = 8

_NO_COMMENTS = "_No comments yet_"


class PromptMode(str, Enum):
    """Which prompt layout to generate."""
    FULL = "full"
    MINIMAL = "minimal"


class TaskView(Protocol):
    """Read-only task fields the prompt builders consume."""

    @property
    def id(self) -> str: ...

    @property
    def title(self) -> str: ...

    @property
    def priority(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def display_id(self) -> Optional[str]: ...

    @property
    def seq(self) -> int: ...


@dataclass(frozen=True)
class Comment:
    """One message in a task's conversation thread."""
    content: str
    author_type: str
    author_id: str
    created: datetime


def resolve_author_label(author_type: str, author_id: str) -> str:
    """Prefer the author id for display, falling back to the author type."""
    if author_id:
        return author_id
    return author_type


def resolve_display_id(task: TaskView, *, prefix: Optional[str]) -> str:
    """Derive the human-facing identifier of a task.

    Args:
        task (TaskView): Task to identify.
        prefix (Optional[str]): Prefix of the board the task belongs to, or
            ``None`` when the board could not be resolved.

    Returns:
        str: The stored ``display_id`` when set, else ``<prefix>-<seq>`` when
        both are available, else the first eight characters of the task id.
    """
    if task.display_id:
        return task.display_id
    if prefix and task.seq > 0:
        return f"{prefix}-{task.seq}"
    return task.id[:SHORT_ID_LENGTH]


def _time_label(created: datetime) -> str:
    return created.astimezone().strftime("%H:%M")


def _truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def build_context_prompt(task: TaskView, display_id: str, comments: Sequence[Comment]) -> str:
    """Build the full context prompt with the complete conversation thread.

    Comments are rendered in the order given; callers supply them oldest first.
    Descriptions longer than :data:`DESCRIPTION_LIMIT` characters are cut,
    comment bodies never are.
    """
    parts: list[str] = ["## Task Context (from EgenSkriven)\n\n"]

    parts.append(f"**Task**: {display_id} - {task.title}\n")
    parts.append("**Status**: need_input -> in_progress\n")
    parts.append(f"**Priority**: {task.priority}\n")
    if task.description:
        parts.append("**Description**:\n")
        parts.append(_truncate(task.description, DESCRIPTION_LIMIT) + "\n")
    parts.append("\n")

    parts.append("## Conversation Thread\n\n")
    if not comments:
        parts.append(f"{_NO_COMMENTS}\n\n")
    for comment in comments:
        label = resolve_author_label(comment.author_type, comment.author_id)
        parts.append(f"[{label} @ {_time_label(comment.created)}]: {comment.content}\n\n")

    parts.append("## Instructions\n\n")
    parts.append(
        "Continue working on the task based on the human's response above. "
        "The conversation context should help you understand what was discussed. "
        "If you need more clarification, you can block the task again with a new question.\n"
    )
    return "".join(parts)


def build_minimal_prompt(task: TaskView, display_id: str, comments: Sequence[Comment]) -> str:
    """Build a short prompt for token-constrained resumes.

    Only the last three comments of the sequence are kept and each body is
    cut at :data:`MINIMAL_COMMENT_LIMIT` characters. No timestamps.
    """
    parts: list[str] = [f"Task {display_id}: {task.title}\n\n", "Recent comments:\n"]

    if not comments:
        parts.append(f"{_NO_COMMENTS}\n")
    for comment in comments[-MINIMAL_RECENT_COMMENTS:]:
        label = resolve_author_label(comment.author_type, comment.author_id)
        parts.append(f"- {label}: {_truncate(comment.content, MINIMAL_COMMENT_LIMIT)}\n")

    parts.append("\nContinue based on the above context.\n")
    return "".join(parts)


def build_prompt(mode: PromptMode | str, task: TaskView, display_id: str, comments: Sequence[Comment]) -> str:
    """Dispatch to the full or minimal builder.

    Raises:
        ValueError: If ``mode`` is not a :class:`PromptMode` value.
    """
    if PromptMode(mode) is PromptMode.MINIMAL:
        return build_minimal_prompt(task, display_id, comments)
    return build_context_prompt(task, display_id, comments)
