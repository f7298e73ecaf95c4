"""Parse resume settings from project configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .context import PromptMode

DEFAULT_COMMENT_LIMIT = 100
DEFAULT_WORKING_DIR = "."


@dataclass(frozen=True)
class ResumeRuntimeConfig:
    """Resolved resume settings for one project.

    Attributes:
        prompt_mode: Prompt layout used when callers do not pick one.
        comment_limit: Maximum number of comments, oldest first, fed to the prompt.
        default_working_dir: Directory used when a linked session has none.
    """

    prompt_mode: PromptMode = PromptMode.FULL
    comment_limit: int = DEFAULT_COMMENT_LIMIT
    default_working_dir: str = DEFAULT_WORKING_DIR


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def get_resume_runtime_config(config: dict[str, Any]) -> ResumeRuntimeConfig:
    """Resolve the ``resume`` section of a parsed ``config.yaml``.

    Args:
        config (dict[str, Any]): Parsed configuration mapping; a missing or
            malformed ``resume`` section yields defaults.

    Returns:
        ResumeRuntimeConfig: Normalized settings. Unknown prompt modes fall back
        to ``full``, non-positive or non-integer limits to
        :data:`DEFAULT_COMMENT_LIMIT`, and blank directories to ``"."``.
    """
    resume_cfg = _as_dict(config.get("resume"))

    raw_mode = str(resume_cfg.get("prompt_mode") or "").strip().lower()
    prompt_mode = PromptMode(raw_mode) if raw_mode in {m.value for m in PromptMode} else PromptMode.FULL

    raw_limit = resume_cfg.get("comment_limit")
    comment_limit = DEFAULT_COMMENT_LIMIT
    # bool is an int subclass; "true" is not a limit
    if isinstance(raw_limit, int) and not isinstance(raw_limit, bool) and raw_limit > 0:
        comment_limit = raw_limit

    working_dir = str(resume_cfg.get("default_working_dir") or "").strip() or DEFAULT_WORKING_DIR

    return ResumeRuntimeConfig(
        prompt_mode=prompt_mode,
        comment_limit=comment_limit,
        default_working_dir=working_dir,
    )
