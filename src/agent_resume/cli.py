#!/usr/bin/env python3
"""
Agent Resume
============

Resume a coding-agent session for a task that was blocked waiting on human
input. The task and its comment thread are turned into a context prompt that
is injected into the tool's resume command.

Usage:
  agent-resume resume WRK-123                  # print the command
  agent-resume resume WRK-123 --exec           # run it
  agent-resume resume WRK-123 --exec --dry-run
  agent-resume resume WRK-123 --minimal --json
  agent-resume session link WRK-123 --tool claude-code --ref 550e8400-e29b
  agent-resume session show WRK-123
  agent-resume session history WRK-123
  agent-resume session unlink WRK-123 --status completed
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .resume.command import VALID_TOOLS, InvalidSessionReferenceError
from .runtime.domain.models import FINAL_SESSION_STATUSES
from .runtime.launcher import run_resume_command
from .runtime.resolver import AmbiguousTaskError, TaskNotFoundError, resolve_task, task_display_id
from .runtime.service import ResumeService
from .runtime.storage import Container

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_GENERAL_ERROR = 1
EXIT_VALIDATION = 2
EXIT_NOT_FOUND = 3


def _indent_text(text: str, prefix: str) -> str:
    return "\n".join(prefix + line for line in text.split("\n"))


def _error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _cmd_resume(container: Container, args: argparse.Namespace) -> int:
    service = ResumeService(container)
    minimal: Optional[bool] = True if args.minimal else None
    plan = service.prepare(args.task_ref, minimal=minimal, custom_prompt=args.prompt)
    command = plan.command
    prompt = command.prompt

    if args.json:
        data = plan.to_dict()
        data.pop("args", None)
        print(json.dumps(data, indent=2))
        return EXIT_OK

    if args.exec:
        if args.dry_run:
            print(f"Would execute in {command.working_dir}:\n")
            print(f"  {command.command}\n")
            print(f"Prompt ({len(prompt)} chars):\n{_indent_text(prompt, '  ')}")
            return EXIT_OK

        service.mark_resumed(plan)
        print(f"Resuming session for {plan.display_id}...")
        print(f"Tool: {command.tool}")
        print(f"Working directory: {command.working_dir}\n")
        sys.stdout.flush()
        return run_resume_command(command)

    print(f"Resume command for {plan.display_id}:\n")
    print(f"  {command.command}\n")
    print(f"Working directory: {command.working_dir}")
    print(f"Prompt length: {len(prompt)} characters\n")
    print("To execute directly, run:")
    print(f"  agent-resume resume {plan.display_id} --exec")
    return EXIT_OK


def _cmd_session_link(container: Container, args: argparse.Namespace) -> int:
    service = ResumeService(container)
    working_dir = args.working_dir or str(Path.cwd())
    task = service.link_session(args.task_ref, tool=args.tool, session_ref=args.ref, working_dir=working_dir)
    display_id = task_display_id(container, task)
    if args.json:
        print(json.dumps({"task_id": task.id, "display_id": display_id, "agent_session": task.agent_session.to_dict()}, indent=2))
        return EXIT_OK
    print(f"Linked {args.tool} session {args.ref} to {display_id}")
    print(f"Working directory: {working_dir}")
    return EXIT_OK


def _cmd_session_show(container: Container, args: argparse.Namespace) -> int:
    task = resolve_task(container, args.task_ref)
    display_id = task_display_id(container, task)
    session = task.agent_session
    if args.json:
        print(json.dumps({
            "task_id": task.id,
            "display_id": display_id,
            "agent_session": session.to_dict() if session else None,
        }, indent=2))
        return EXIT_OK
    if session is None:
        print(f"No agent session linked to {display_id}")
        return EXIT_OK
    print(f"Session for {display_id}:")
    print(f"  Tool: {session.tool}")
    print(f"  Ref: {session.ref}")
    print(f"  Working directory: {session.working_dir}")
    print(f"  Linked at: {session.linked_at}")
    print(f"  Status: {session.status}")
    if task.column == "need_input":
        print(f"\n  (Use 'agent-resume resume {display_id}' to continue)")
    return EXIT_OK


def _cmd_session_history(container: Container, args: argparse.Namespace) -> int:
    task = resolve_task(container, args.task_ref)
    display_id = task_display_id(container, task)
    sessions = list(reversed(task.session_history))
    if args.json:
        print(json.dumps({
            "task_id": task.id,
            "display_id": display_id,
            "count": len(sessions),
            "sessions": [s.to_dict() for s in sessions],
        }, indent=2))
        return EXIT_OK
    if not sessions:
        print(f"No session history for {display_id}")
        return EXIT_OK
    print(f"Session history for {display_id} ({len(sessions)} sessions):\n")
    for i, session in enumerate(sessions, start=1):
        print(f"{i}. {session.tool} ({session.status})")
        print(f"   Ref: {session.ref}")
        print(f"   Started: {session.linked_at}")
        if session.status != "active" and session.ended_at:
            print(f"   Ended: {session.ended_at}")
        print()
    return EXIT_OK


def _cmd_session_unlink(container: Container, args: argparse.Namespace) -> int:
    task = ResumeService(container).unlink_session(args.task_ref, status=args.status)
    display_id = task_display_id(container, task)
    if args.json:
        print(json.dumps({
            "success": True,
            "task_id": task.id,
            "display_id": display_id,
            "final_status": args.status,
        }, indent=2))
        return EXIT_OK
    print(f"Session unlinked from {display_id} (marked as {args.status})")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-resume",
        description="Resume blocked coding-agent sessions with task context",
    )
    parser.add_argument(
        "--project-dir",
        type=Path,
        default=Path("."),
        help="Project directory (default: current directory)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    resume = subparsers.add_parser("resume", help="Resume work on a blocked task")
    resume.add_argument("task_ref", help="Task id, id prefix, display id (e.g. WRK-123) or title")
    resume.add_argument("-e", "--exec", action="store_true", help="Execute the resume command")
    resume.add_argument("-m", "--minimal", action="store_true", help="Use minimal prompt (fewer tokens)")
    resume.add_argument("-p", "--prompt", type=str, default=None, help="Custom prompt override")
    resume.add_argument("--dry-run", action="store_true", help="Show command without executing (use with --exec)")
    resume.add_argument("--json", action="store_true", help="Output as JSON")
    resume.set_defaults(handler=_cmd_resume)

    session = subparsers.add_parser("session", help="Manage agent sessions linked to tasks")
    session_sub = session.add_subparsers(dest="session_command", required=True)

    link = session_sub.add_parser("link", help="Link an agent session to a task")
    link.add_argument("task_ref")
    link.add_argument("-t", "--tool", required=True, help=f"Agent tool ({', '.join(VALID_TOOLS)})")
    link.add_argument("-r", "--ref", required=True, help="Session or thread id")
    link.add_argument("-w", "--working-dir", default=None, help="Directory of the session (default: current directory)")
    link.add_argument("--json", action="store_true", help="Output as JSON")
    link.set_defaults(handler=_cmd_session_link)

    show = session_sub.add_parser("show", help="Show the session linked to a task")
    show.add_argument("task_ref")
    show.add_argument("--json", action="store_true", help="Output as JSON")
    show.set_defaults(handler=_cmd_session_show)

    history = session_sub.add_parser("history", help="List every session linked to a task")
    history.add_argument("task_ref")
    history.add_argument("--json", action="store_true", help="Output as JSON")
    history.set_defaults(handler=_cmd_session_history)

    unlink = session_sub.add_parser("unlink", help="Unlink the current session from a task")
    unlink.add_argument("task_ref")
    unlink.add_argument(
        "--status",
        choices=FINAL_SESSION_STATUSES,
        default="abandoned",
        help="Final status recorded for the session (default: abandoned)",
    )
    unlink.add_argument("--json", action="store_true", help="Output as JSON")
    unlink.set_defaults(handler=_cmd_session_unlink)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        container = Container(args.project_dir)
        return args.handler(container, args)
    except AmbiguousTaskError as exc:
        _error(str(exc))
        for task in exc.matches:
            print(f"  {task_display_id(container, task)}  {task.title}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except TaskNotFoundError as exc:
        _error(str(exc))
        return EXIT_NOT_FOUND
    except InvalidSessionReferenceError as exc:
        _error(f"invalid session: {exc}")
        return EXIT_VALIDATION
    except ValueError as exc:
        _error(str(exc))
        return EXIT_VALIDATION
    except OSError as exc:
        logger.debug("Resume failed", exc_info=True)
        _error(str(exc))
        return EXIT_GENERAL_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
