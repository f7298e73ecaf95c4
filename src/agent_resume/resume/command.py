"""Build resume commands for previously spawned coding-agent sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MIN_SESSION_REF_LENGTH = 8


class Tool(str, Enum):
    """Coding-agent CLIs that can resume a session."""
    OPENCODE = "opencode"
    CLAUDE_CODE = "claude-code"
    CODEX = "codex"


VALID_TOOLS: tuple[str, ...] = tuple(t.value for t in Tool)


class ResumeErrorKind(str, Enum):
    """Failure categories raised while building a resume command."""
    UNSUPPORTED_TOOL = "unsupported_tool"
    INVALID_SESSION_REFERENCE = "invalid_session_reference"


class ResumeCommandError(ValueError):
    """Base error for resume command validation failures.

    Callers branch on :attr:`kind` instead of matching message text.
    """

    kind: ResumeErrorKind

    def __init__(self, kind: ResumeErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class UnsupportedToolError(ResumeCommandError):
    """Raised when the requested tool is not one of :data:`VALID_TOOLS`."""

    def __init__(self, tool: str) -> None:
        super().__init__(
            ResumeErrorKind.UNSUPPORTED_TOOL,
            f"unsupported tool: {tool!r} (supported: {', '.join(VALID_TOOLS)})",
        )
        self.tool = tool


class InvalidSessionReferenceError(ResumeCommandError):
    """Raised when a session reference is empty or implausibly short."""

    def __init__(self, session_ref: str, message: str) -> None:
        super().__init__(ResumeErrorKind.INVALID_SESSION_REFERENCE, message)
        self.session_ref = session_ref


@dataclass(frozen=True)
class ResumeCommand:
    """Everything needed to resume one agent session.

    Attributes:
        tool: Tool name (``opencode``, ``claude-code`` or ``codex``).
        session_ref: Session or thread identifier understood by the tool.
        working_dir: Directory the command should run in.
        prompt: Context prompt injected into the resumed session.
        command: Display form with the prompt shell-quoted, for logs and copy-paste.
        args: Argument vector for direct execution; holds the raw prompt.
    """
    tool: str
    session_ref: str
    working_dir: str
    prompt: str
    command: str
    args: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the command for JSON output."""
        return {
            "tool": self.tool,
            "session_ref": self.session_ref,
            "working_dir": self.working_dir,
            "prompt": self.prompt,
            "command": self.command,
            "args": list(self.args),
        }


def shell_quote(s: str) -> str:
    """Quote ``s`` as a single POSIX shell word.

    Single quotes inside ``s`` become ``'\\''`` (close, escaped quote, reopen).
    Nothing else needs escaping inside single quotes.
    """
    if s == "":
        return "''"
    return "'" + s.replace("'", "'\\''") + "'"


def is_valid_tool(tool: str) -> bool:
    """Return whether ``tool`` names a supported coding-agent CLI."""
    return tool in VALID_TOOLS


def validate_session_ref(session_ref: str) -> None:
    """Sanity-check a session reference.

    This is a length heuristic, not a format check; tools use UUIDs or
    similar identifiers that are always longer than a few characters.

    Raises:
        InvalidSessionReferenceError: If the reference is empty or shorter than
            :data:`MIN_SESSION_REF_LENGTH` characters.
    """
    if not session_ref:
        raise InvalidSessionReferenceError(session_ref, "session reference is empty")
    if len(session_ref) < MIN_SESSION_REF_LENGTH:
        raise InvalidSessionReferenceError(
            session_ref,
            f"session reference seems too short: {session_ref!r} "
            f"(minimum {MIN_SESSION_REF_LENGTH} characters)",
        )


def _parse_tool(tool: str | Tool) -> Tool:
    if isinstance(tool, Tool):
        return tool
    try:
        return Tool(str(tool))
    except ValueError:
        raise UnsupportedToolError(str(tool)) from None


def build_resume_command(tool: str | Tool, session_ref: str, working_dir: str, prompt: str) -> ResumeCommand:
    """Build the display command and argument vector that resume a session.

    Args:
        tool (str | Tool): Coding-agent tool that owns the session.
        session_ref (str): Session identifier previously recorded for the task.
        working_dir (str): Directory where the tool should be launched.
        prompt (str): Context prompt to inject; may contain arbitrary text.

    Returns:
        ResumeCommand: ``command`` carries the shell-quoted prompt while
        ``args`` carries the raw prompt for execution without a shell.

    Raises:
        UnsupportedToolError: If ``tool`` is not a supported tool.
        InvalidSessionReferenceError: If ``session_ref`` fails validation.
    """
    parsed = _parse_tool(tool)
    validate_session_ref(session_ref)

    quoted = shell_quote(prompt)
    if parsed is Tool.OPENCODE:
        command = f"opencode run {quoted} --session {session_ref}"
        args = ["opencode", "run", prompt, "--session", session_ref]
    elif parsed is Tool.CLAUDE_CODE:
        command = f"claude --resume {session_ref} {quoted}"
        args = ["claude", "--resume", session_ref, prompt]
    elif parsed is Tool.CODEX:
        command = f"codex exec resume {session_ref} {quoted}"
        args = ["codex", "exec", "resume", session_ref, prompt]
    else:  # pragma: no cover - every Tool member is handled above
        raise UnsupportedToolError(parsed.value)

    return ResumeCommand(
        tool=parsed.value,
        session_ref=session_ref,
        working_dir=working_dir,
        prompt=prompt,
        command=command,
        args=args,
    )
