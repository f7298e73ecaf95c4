"""Resolve user-supplied task references to task records."""

from __future__ import annotations

import re
from typing import Optional

from ..resume.context import resolve_display_id
from .domain.models import Task
from .storage.container import Container

_DISPLAY_ID_RE = re.compile(r"^([A-Za-z][A-Za-z0-9]*)-(\d+)$")


class TaskNotFoundError(LookupError):
    """No task matches the reference."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"no task found matching: {ref}")
        self.ref = ref


class AmbiguousTaskError(LookupError):
    """More than one task matches the reference."""

    def __init__(self, ref: str, matches: list[Task]) -> None:
        super().__init__(f"ambiguous task reference: {ref!r} matches {len(matches)} tasks")
        self.ref = ref
        self.matches = matches


def board_prefix(container: Container, task: Task) -> Optional[str]:
    """Return the prefix of the task's board, or ``None`` when unknown."""
    if not task.board_id:
        return None
    board = container.boards.get(task.board_id)
    if board is None or not board.prefix:
        return None
    return board.prefix


def task_display_id(container: Container, task: Task) -> str:
    """Resolve the display id of a task using its board's prefix."""
    return resolve_display_id(task, prefix=board_prefix(container, task))


def _single(ref: str, matches: list[Task]) -> Optional[Task]:
    if len(matches) > 1:
        raise AmbiguousTaskError(ref, matches)
    return matches[0] if matches else None


def resolve_task(container: Container, ref: str) -> Task:
    """Find the task a reference points to.

    Lookup order: exact id, display id (stored ``display_id`` or
    ``<PREFIX>-<seq>``), unique id prefix, then unique case-insensitive title
    substring. The first stage with any match decides.

    Args:
        container (Container): Project storage to search.
        ref (str): Task id, id prefix, display id such as ``WRK-42``, or title fragment.

    Returns:
        Task: The single matching task.

    Raises:
        TaskNotFoundError: If nothing matches.
        AmbiguousTaskError: If a stage yields several matches.
    """
    ref = ref.strip()
    if not ref:
        raise TaskNotFoundError(ref)
    tasks = container.tasks.list()

    for task in tasks:
        if task.id == ref:
            return task

    by_display = [t for t in tasks if t.display_id and t.display_id.lower() == ref.lower()]
    match = _DISPLAY_ID_RE.match(ref)
    if match:
        prefix, seq = match.group(1).upper(), int(match.group(2))
        board_ids = {b.id for b in container.boards.list() if b.prefix == prefix}
        by_display.extend(
            t for t in tasks if t.board_id in board_ids and t.seq == seq and t not in by_display
        )
    found = _single(ref, by_display)
    if found:
        return found

    found = _single(ref, [t for t in tasks if t.id.startswith(ref)])
    if found:
        return found

    needle = ref.lower()
    found = _single(ref, [t for t in tasks if needle in t.title.lower()])
    if found:
        return found
    raise TaskNotFoundError(ref)
