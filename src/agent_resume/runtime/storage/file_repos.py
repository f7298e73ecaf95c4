"""File-backed repository implementations for board state."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Generic, List, Optional, TypeVar

import yaml

from ...io_utils import FileLock, now_iso
from ..domain.models import Board, CommentRecord, Task
from .interfaces import BoardRepository, CommentRepository, TaskRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _YamlCollectionRepo(Generic[T]):
    def __init__(
        self,
        path: Path,
        lock_path: Path,
        key: str,
        loader: Callable[[dict[str, Any]], T],
        dumper: Callable[[T], dict[str, Any]],
    ) -> None:
        """Initialize the YamlCollectionRepo.

        Args:
            path (Path): YAML file path containing this repository collection.
            lock_path (Path): Lock file path used for cross-process synchronization.
            key (str): Top-level YAML key that stores serialized collection items.
            loader (Callable[[dict[str, Any]], T]): Callable converting raw dictionaries
                into domain models.
            dumper (Callable[[T], dict[str, Any]]): Callable converting domain models
                into dictionaries for persistence.
        """
        self._path = path
        self._lock = FileLock(lock_path)
        self._thread_lock = threading.RLock()
        self._key = key
        self._loader = loader
        self._dumper = dumper

    def _load(self) -> list[T]:
        if not self._path.exists():
            return []
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            return []
        items = raw.get(self._key, [])
        if not isinstance(items, list):
            logger.warning("Ignoring malformed %r collection in %s", self._key, self._path)
            return []
        return [self._loader(item) for item in items if isinstance(item, dict)]

    def _save(self, items: list[T]) -> None:
        payload = {"version": 1, self._key: [self._dumper(item) for item in items]}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(payload, handle, sort_keys=False, allow_unicode=True)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, self._path)

    def list(self) -> list[T]:
        with self._thread_lock:
            with self._lock:
                return self._load()

    def upsert(self, item: T, key: Callable[[T], str], touch: Callable[[T, bool], None]) -> T:
        with self._thread_lock:
            with self._lock:
                items = self._load()
                for idx, existing in enumerate(items):
                    if key(existing) == key(item):
                        touch(item, False)
                        items[idx] = item
                        break
                else:
                    touch(item, True)
                    items.append(item)
                self._save(items)
        return item


def _touch_task(task: Task, created: bool) -> None:
    if created:
        task.created_at = task.created_at or now_iso()
    task.updated_at = now_iso()


class FileTaskRepository(TaskRepository):
    """YAML-backed task repository with coarse file/process locking."""
    def __init__(self, path: Path, lock_path: Path) -> None:
        """Initialize the FileTaskRepository.

        Args:
            path (Path): YAML file path for task records.
            lock_path (Path): Lock file path used while mutating task data.
        """
        self._repo = _YamlCollectionRepo[Task](
            path,
            lock_path,
            "tasks",
            loader=Task.from_dict,
            dumper=lambda t: t.to_dict(),
        )

    def list(self) -> list[Task]:
        """Load all persisted tasks."""
        return self._repo.list()

    def get(self, task_id: str) -> Optional[Task]:
        """Fetch a single task by identifier.

        Args:
            task_id (str): Identifier for the target task.

        Returns:
            Optional[Task]: Requested value when available; otherwise `None`.
        """
        for task in self.list():
            if task.id == task_id:
                return task
        return None

    def upsert(self, task: Task) -> Task:
        """Insert or update a task and refresh timestamps."""
        return self._repo.upsert(task, key=lambda t: t.id, touch=_touch_task)


class FileBoardRepository(BoardRepository):
    """YAML-backed board repository."""
    def __init__(self, path: Path, lock_path: Path) -> None:
        self._repo = _YamlCollectionRepo[Board](
            path,
            lock_path,
            "boards",
            loader=Board.from_dict,
            dumper=lambda b: b.to_dict(),
        )

    def list(self) -> list[Board]:
        return self._repo.list()

    def get(self, board_id: str) -> Optional[Board]:
        for board in self.list():
            if board.id == board_id:
                return board
        return None

    def upsert(self, board: Board) -> Board:
        return self._repo.upsert(board, key=lambda b: b.id, touch=lambda b, created: None)


class FileCommentRepository(CommentRepository):
    """YAML-backed comment repository."""
    def __init__(self, path: Path, lock_path: Path) -> None:
        """Initialize the FileCommentRepository.

        Args:
            path (Path): YAML file path for comment records.
            lock_path (Path): Lock file path used while mutating comments.
        """
        self._repo = _YamlCollectionRepo[CommentRecord](
            path,
            lock_path,
            "comments",
            loader=CommentRecord.from_dict,
            dumper=lambda c: c.to_dict(),
        )

    def list_for_task(self, task_id: str, *, limit: Optional[int] = None) -> List[CommentRecord]:
        """List one task's comments sorted by creation time, oldest first.

        Args:
            task_id (str): Task whose comments are requested.
            limit (Optional[int]): When positive, keep only the oldest ``limit`` comments.

        Returns:
            List[CommentRecord]: Matching comments in ascending creation order.
        """
        comments = [c for c in self._repo.list() if c.task_id == task_id]
        # sorted() is stable, so same-timestamp comments keep insertion order.
        comments = sorted(comments, key=lambda c: c.created())
        if limit is not None and limit > 0:
            comments = comments[:limit]
        return comments

    def add(self, comment: CommentRecord) -> CommentRecord:
        """Append a comment to the store."""
        return self._repo.upsert(comment, key=lambda c: c.id, touch=lambda c, created: None)


class FileConfigRepository:
    """YAML-backed repository for project configuration."""
    def __init__(self, path: Path, lock_path: Path) -> None:
        """Initialize the FileConfigRepository.

        Args:
            path (Path): YAML file path for project configuration.
            lock_path (Path): Lock file path used while reading or writing config.
        """
        self._path = path
        self._lock = FileLock(lock_path)
        self._thread_lock = threading.RLock()

    def load(self) -> dict[str, Any]:
        """Load configuration from disk.

        Returns:
            dict[str, Any]: Configuration mapping from disk, or an empty mapping.
        """
        with self._thread_lock:
            with self._lock:
                if not self._path.exists():
                    return {}
                raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
                return raw if isinstance(raw, dict) else {}

    def save(self, config: dict[str, Any]) -> dict[str, Any]:
        """Persist configuration to disk atomically.

        Args:
            config (dict[str, Any]): Configuration mapping to persist.

        Returns:
            dict[str, Any]: Saved configuration mapping.
        """
        with self._thread_lock:
            with self._lock:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
                with tmp_path.open("w", encoding="utf-8") as handle:
                    yaml.safe_dump(config, handle, sort_keys=False)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_path, self._path)
        return config
