"""Dependency container for board repositories."""

from __future__ import annotations

from pathlib import Path

from ...resume.config import ResumeRuntimeConfig, get_resume_runtime_config
from .bootstrap import ensure_state_root
from .file_repos import (
    FileBoardRepository,
    FileCommentRepository,
    FileConfigRepository,
    FileTaskRepository,
)


class Container:
    """Wire file-backed repositories and project-scoped settings."""
    def __init__(self, project_dir: Path) -> None:
        """Initialize the Container.

        Args:
            project_dir (Path): Project whose ``.agent_resume`` state is used.
        """
        self.project_dir = project_dir.resolve()
        self.state_root = ensure_state_root(self.project_dir)

        self.tasks = FileTaskRepository(self.state_root / "tasks.yaml", self.state_root / "tasks.lock")
        self.boards = FileBoardRepository(self.state_root / "boards.yaml", self.state_root / "boards.lock")
        self.comments = FileCommentRepository(self.state_root / "comments.yaml", self.state_root / "comments.lock")
        self.config = FileConfigRepository(self.state_root / "config.yaml", self.state_root / "config.lock")

    def resume_config(self) -> ResumeRuntimeConfig:
        """Load and normalize the ``resume`` configuration section."""
        return get_resume_runtime_config(self.config.load())
