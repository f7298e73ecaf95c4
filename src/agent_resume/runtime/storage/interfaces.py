"""Repository interfaces for board persistence abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ..domain.models import Board, CommentRecord, Task


class TaskRepository(ABC):
    """Persistence contract for task records."""
    @abstractmethod
    def list(self) -> List[Task]:
        """List every persisted task record.

        Returns:
            List[Task]: All task records currently stored for the project.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]:
        """Fetch a task by id, or ``None`` when no record exists.

        Args:
            task_id (str): Identifier for the target task.

        Returns:
            Optional[Task]: Requested value when available; otherwise `None`.
        """
        raise NotImplementedError

    @abstractmethod
    def upsert(self, task: Task) -> Task:
        """Create or update a task record.

        Args:
            task (Task): Task model to persist.

        Returns:
            Task: Persisted task record after the write operation.
        """
        raise NotImplementedError


class BoardRepository(ABC):
    """Persistence contract for boards."""
    @abstractmethod
    def list(self) -> List[Board]:
        """List every persisted board."""
        raise NotImplementedError

    @abstractmethod
    def get(self, board_id: str) -> Optional[Board]:
        """Fetch a board by id, or ``None`` when no record exists."""
        raise NotImplementedError

    @abstractmethod
    def upsert(self, board: Board) -> Board:
        """Create or update a board."""
        raise NotImplementedError


class CommentRepository(ABC):
    """Persistence contract for task comments."""
    @abstractmethod
    def list_for_task(self, task_id: str, *, limit: Optional[int] = None) -> List[CommentRecord]:
        """List comments of one task, oldest first.

        Args:
            task_id (str): Task whose comments are requested.
            limit (Optional[int]): Keep at most this many of the oldest comments.

        Returns:
            List[CommentRecord]: Comments sorted ascending by creation time.
        """
        raise NotImplementedError

    @abstractmethod
    def add(self, comment: CommentRecord) -> CommentRecord:
        """Persist a new comment."""
        raise NotImplementedError
