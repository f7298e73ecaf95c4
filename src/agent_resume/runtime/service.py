"""Resume flow for tasks blocked in ``need_input``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, cast

from ..io_utils import now_iso
from ..resume.command import (
    ResumeCommand,
    UnsupportedToolError,
    build_resume_command,
    is_valid_tool,
    validate_session_ref,
)
from ..resume.context import PromptMode, build_prompt
from .domain.models import FINAL_SESSION_STATUSES, AgentSession, SessionStatus, Task
from .resolver import resolve_task, task_display_id
from .storage.container import Container

logger = logging.getLogger(__name__)

NEED_INPUT = "need_input"
IN_PROGRESS = "in_progress"


class ResumeStateError(ValueError):
    """The task is not in a state that can be resumed."""


@dataclass(frozen=True)
class ResumePlan:
    """A resolved task together with the command that resumes its session."""
    task: Task
    display_id: str
    session: AgentSession
    command: ResumeCommand

    @property
    def prompt(self) -> str:
        return self.command.prompt

    def to_dict(self) -> dict[str, object]:
        """Serialize the plan for JSON output."""
        return {
            "task_id": self.task.id,
            "display_id": self.display_id,
            "tool": self.command.tool,
            "session_ref": self.command.session_ref,
            "working_dir": self.command.working_dir,
            "command": self.command.command,
            "args": list(self.command.args),
            "prompt": self.command.prompt,
            "prompt_length": len(self.command.prompt),
        }


def _no_session_message(display_id: str) -> str:
    return (
        f"no agent session linked to task {display_id}\n\n"
        "To resume, first link a session:\n"
        f"  agent-resume session link {display_id} --tool <tool> --ref <session-id>"
    )


def _close_history(task: Task, session_ref: str, status: str) -> None:
    ended_at = now_iso()
    for entry in task.session_history:
        if entry.ref == session_ref:
            entry.status = cast(SessionStatus, status)
            entry.ended_at = ended_at


class ResumeService:
    """Prepare and record session resumes against project storage."""

    def __init__(self, container: Container) -> None:
        self._container = container

    def prepare(
        self,
        ref: str,
        *,
        minimal: Optional[bool] = None,
        custom_prompt: Optional[str] = None,
    ) -> ResumePlan:
        """Build the resume command for a blocked task.

        Args:
            ref (str): Task reference accepted by :func:`resolve_task`.
            minimal (Optional[bool]): Force the minimal (``True``) or full
                (``False``) prompt; ``None`` uses the configured mode.
            custom_prompt (Optional[str]): Prompt text used verbatim instead of
                a generated one.

        Returns:
            ResumePlan: Task, display id, session and built command.

        Raises:
            TaskNotFoundError: If the reference matches no task.
            AmbiguousTaskError: If the reference matches several tasks.
            ResumeStateError: If the task is not in ``need_input`` or has no session.
            ResumeCommandError: If the linked session's tool or reference is invalid.
        """
        task = resolve_task(self._container, ref)
        display_id = task_display_id(self._container, task)

        if task.column != NEED_INPUT:
            raise ResumeStateError(
                f"task {display_id} is not in need_input state (current: {task.column})"
            )
        session = task.agent_session
        if session is None or not session.tool:
            raise ResumeStateError(_no_session_message(display_id))
        validate_session_ref(session.ref)

        cfg = self._container.resume_config()
        working_dir = session.working_dir or cfg.default_working_dir

        if custom_prompt:
            prompt = custom_prompt
        else:
            if minimal is None:
                mode = cfg.prompt_mode
            else:
                mode = PromptMode.MINIMAL if minimal else PromptMode.FULL
            records = self._container.comments.list_for_task(task.id, limit=cfg.comment_limit)
            comments = [r.to_comment() for r in records]
            prompt = build_prompt(mode, task, display_id, comments)

        command = build_resume_command(session.tool, session.ref, working_dir, prompt)
        logger.debug("Prepared %s resume for %s (%d prompt chars)", command.tool, display_id, len(prompt))
        return ResumePlan(task=task, display_id=display_id, session=session, command=command)

    def mark_resumed(self, plan: ResumePlan, *, actor: str = "cli") -> Task:
        """Move the task to ``in_progress`` and mark its session active.

        Args:
            plan (ResumePlan): Plan returned by :meth:`prepare`.
            actor (str): Recorded as the actor of the history entry.

        Returns:
            Task: The updated, persisted task.
        """
        task = self._container.tasks.get(plan.task.id) or plan.task
        task.column = IN_PROGRESS
        task.add_history(
            "resumed",
            changes={"column": {"from": NEED_INPUT, "to": IN_PROGRESS}},
            actor=actor,
        )
        if task.agent_session is not None and task.agent_session.ref == plan.command.session_ref:
            task.agent_session.status = "active"
        for entry in reversed(task.session_history):
            if entry.ref == plan.command.session_ref:
                entry.status = "active"
                entry.ended_at = ""
                break
        else:
            logger.warning("Session %s of task %s has no history entry", plan.command.session_ref, plan.display_id)
        saved = self._container.tasks.upsert(task)
        logger.info("Task %s moved to %s for resume", plan.display_id, IN_PROGRESS)
        return saved

    def link_session(self, ref: str, *, tool: str, session_ref: str, working_dir: str) -> Task:
        """Link an agent session to a task.

        A previously linked session with a different reference is kept in
        ``session_history`` as ``abandoned``.

        Raises:
            UnsupportedToolError: If ``tool`` is not supported.
            InvalidSessionReferenceError: If ``session_ref`` fails validation.
            TaskNotFoundError: If the reference matches no task.
            AmbiguousTaskError: If the reference matches several tasks.
        """
        if not is_valid_tool(tool):
            raise UnsupportedToolError(tool)
        validate_session_ref(session_ref)
        task = resolve_task(self._container, ref)

        previous = task.agent_session
        if previous is not None and previous.ref != session_ref:
            logger.info("Abandoning session %s on task %s", previous.ref, task.id)
            if not any(s.ref == previous.ref for s in task.session_history):
                task.session_history.append(previous)
            _close_history(task, previous.ref, "abandoned")

        session = AgentSession(tool=tool, ref=session_ref, working_dir=working_dir)
        task.agent_session = session
        task.session_history = [s for s in task.session_history if s.ref != session_ref]
        task.session_history.append(AgentSession.from_dict(session.to_dict()))
        task.add_history("session_linked", changes={"agent_session": {"tool": tool, "ref": session_ref}})
        return self._container.tasks.upsert(task)

    def unlink_session(self, ref: str, *, status: str = "abandoned") -> Task:
        """Drop the session linked to a task, recording its final status.

        Raises:
            ValueError: If ``status`` is not one of ``FINAL_SESSION_STATUSES``.
            ResumeStateError: If the task has no linked session.
            TaskNotFoundError: If the reference matches no task.
            AmbiguousTaskError: If the reference matches several tasks.
        """
        if status not in FINAL_SESSION_STATUSES:
            raise ValueError(
                f"invalid status {status!r}: must be one of {', '.join(FINAL_SESSION_STATUSES)}"
            )
        task = resolve_task(self._container, ref)
        session = task.agent_session
        if session is None:
            raise ResumeStateError(f"no session linked to {task_display_id(self._container, task)}")

        if not any(s.ref == session.ref for s in task.session_history):
            task.session_history.append(AgentSession.from_dict(session.to_dict()))
        _close_history(task, session.ref, status)
        task.agent_session = None
        task.add_history(
            "session_unlinked",
            changes={"tool": session.tool, "session_ref": session.ref, "final_status": status},
            actor="user",
        )
        logger.info("Unlinked session %s from task %s as %s", session.ref, task.id, status)
        return self._container.tasks.upsert(task)
