"""Prompt and command builders for resuming agent sessions."""

from .command import (
    VALID_TOOLS,
    InvalidSessionReferenceError,
    ResumeCommand,
    ResumeCommandError,
    ResumeErrorKind,
    Tool,
    UnsupportedToolError,
    build_resume_command,
    is_valid_tool,
    shell_quote,
    validate_session_ref,
)
from .context import (
    Comment,
    PromptMode,
    TaskView,
    build_context_prompt,
    build_minimal_prompt,
    build_prompt,
    resolve_author_label,
    resolve_display_id,
)

__all__ = [
    "Comment",
    "InvalidSessionReferenceError",
    "PromptMode",
    "ResumeCommand",
    "ResumeCommandError",
    "ResumeErrorKind",
    "TaskView",
    "Tool",
    "UnsupportedToolError",
    "VALID_TOOLS",
    "build_context_prompt",
    "build_minimal_prompt",
    "build_prompt",
    "build_resume_command",
    "is_valid_tool",
    "resolve_author_label",
    "resolve_display_id",
    "shell_quote",
    "validate_session_ref",
]
