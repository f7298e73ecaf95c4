"""Domain models for board state read by the resume flow."""

from .models import FINAL_SESSION_STATUSES, AgentSession, Board, CommentRecord, Task

__all__ = [
    "FINAL_SESSION_STATUSES",
    "AgentSession",
    "Board",
    "CommentRecord",
    "Task",
]
