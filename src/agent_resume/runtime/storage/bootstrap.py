from __future__ import annotations

import logging
from pathlib import Path

from .file_repos import FileConfigRepository

logger = logging.getLogger(__name__)

STATE_DIR_NAME = ".agent_resume"
SCHEMA_VERSION = 1

STATE_FILES = {
    "tasks": "tasks.yaml",
    "boards": "boards.yaml",
    "comments": "comments.yaml",
    "config": "config.yaml",
}


def _ensure_gitignored(project_dir: Path) -> None:
    """Add the state directory to the project's .gitignore if not already present."""
    gitignore = project_dir / ".gitignore"
    entry = f"{STATE_DIR_NAME}/"
    if gitignore.exists():
        content = gitignore.read_text(encoding="utf-8")
        existing_stripped = {line.strip() for line in content.splitlines()}
        if entry in existing_stripped or STATE_DIR_NAME in existing_stripped:
            return
        if content and not content.endswith("\n"):
            content += "\n"
        content += f"\n# Agent resume state\n{entry}\n"
        gitignore.write_text(content, encoding="utf-8")
    else:
        gitignore.write_text(f"# Agent resume state\n{entry}\n", encoding="utf-8")


def ensure_state_root(project_dir: Path) -> Path:
    state_root = project_dir / STATE_DIR_NAME
    if not state_root.exists():
        logger.debug("Creating state directory %s", state_root)
    state_root.mkdir(parents=True, exist_ok=True)
    _ensure_gitignored(project_dir)

    for file_name in STATE_FILES.values():
        target = state_root / file_name
        if not target.exists():
            target.write_text(f"version: {SCHEMA_VERSION}\n", encoding="utf-8")

    config_repo = FileConfigRepository(state_root / "config.yaml", state_root / "config.lock")
    config = config_repo.load()
    config.pop("version", None)
    config["schema_version"] = SCHEMA_VERSION
    config.setdefault("resume", {"prompt_mode": "full", "comment_limit": 100, "default_working_dir": "."})
    config_repo.save(config)

    return state_root
