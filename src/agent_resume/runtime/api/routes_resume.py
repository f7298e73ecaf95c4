"""Resume route registration for the HTTP API."""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ...resume.command import ResumeCommandError
from ..resolver import AmbiguousTaskError, TaskNotFoundError
from ..service import ResumePlan, ResumeService, ResumeStateError
from ..storage.container import Container
from .schemas import ResumeCommandResponse, ResumeRequest


def _response(plan: ResumePlan, column: str) -> ResumeCommandResponse:
    data = plan.to_dict()
    data["column"] = column
    return ResumeCommandResponse.model_validate(data)


def _prepare(service: ResumeService, task_ref: str, minimal: Optional[bool], prompt: Optional[str]) -> ResumePlan:
    try:
        return service.prepare(task_ref, minimal=minimal, custom_prompt=prompt)
    except TaskNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except AmbiguousTaskError as exc:
        raise HTTPException(
            status_code=409,
            detail={"error": str(exc), "matches": [t.id for t in exc.matches]},
        ) from exc
    except ResumeStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ResumeCommandError as exc:
        raise HTTPException(status_code=400, detail={"error": str(exc), "kind": exc.kind.value}) from exc


def register_resume_routes(router: APIRouter, resolve_container: Callable[[Optional[str]], Container]) -> None:
    """Register resume preview and resume-recording routes."""
    @router.get("/tasks/{task_ref}/resume", response_model=ResumeCommandResponse)
    async def preview_resume(
        task_ref: str,
        minimal: Optional[bool] = Query(None),
        prompt: Optional[str] = Query(None),
        project_dir: Optional[str] = Query(None),
    ) -> ResumeCommandResponse:
        """Build the resume command for a task without changing it.

        Args:
            task_ref: Task id, id prefix, display id, or title fragment.
            minimal: Force the minimal or full prompt; default follows config.
            prompt: Custom prompt used verbatim.
            project_dir: Optional project directory used to resolve state.

        Returns:
            The display command, argument vector and prompt.
        """
        service = ResumeService(resolve_container(project_dir))
        plan = _prepare(service, task_ref, minimal, prompt)
        return _response(plan, plan.task.column)

    @router.post("/tasks/{task_ref}/resume", response_model=ResumeCommandResponse)
    async def resume_task(
        task_ref: str,
        body: ResumeRequest,
        project_dir: Optional[str] = Query(None),
    ) -> ResumeCommandResponse:
        """Build the resume command and optionally move the task to in_progress.

        Args:
            task_ref: Task id, id prefix, display id, or title fragment.
            body: Prompt options and whether to record the resume.
            project_dir: Optional project directory used to resolve state.

        Returns:
            The resume command together with the task's resulting column.
        """
        service = ResumeService(resolve_container(project_dir))
        plan = _prepare(service, task_ref, body.minimal, body.prompt)
        column = plan.task.column
        if body.mark_in_progress:
            column = service.mark_resumed(plan, actor="api").column
        return _response(plan, column)
