"""Board-backed resume flow: storage, reference resolution and launching."""

from .launcher import run_resume_command
from .resolver import AmbiguousTaskError, TaskNotFoundError, resolve_task, task_display_id
from .service import ResumePlan, ResumeService, ResumeStateError

__all__ = [
    "AmbiguousTaskError",
    "ResumePlan",
    "ResumeService",
    "ResumeStateError",
    "TaskNotFoundError",
    "resolve_task",
    "run_resume_command",
    "task_display_id",
]
