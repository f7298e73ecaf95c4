"""Pydantic request/response schemas for resume API routes."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ResumeRequest(BaseModel):
    """Payload for preparing a resume and optionally recording it."""

    minimal: Optional[bool] = None
    prompt: Optional[str] = None
    mark_in_progress: bool = False


class ResumeCommandResponse(BaseModel):
    """Resume command for a blocked task; execution stays with the client."""

    task_id: str
    display_id: str
    tool: str
    session_ref: str
    working_dir: str
    command: str
    args: list[str] = Field(default_factory=list)
    prompt: str
    prompt_length: int
    column: str
