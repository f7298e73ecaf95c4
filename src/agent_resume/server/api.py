"""FastAPI app wiring for the resume API."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, cast

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..runtime.api import create_router
from ..runtime.storage import Container


def create_app(project_dir: Optional[Path] = None, enable_cors: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        project_dir (Optional[Path]): Default project directory used when
            request-level ``project_dir`` query parameters are not provided.
        enable_cors (bool): Whether to install permissive CORS middleware for
            browser clients.

    Returns:
        FastAPI: Application with resume routes and a per-project container
        cache stored on ``app.state``.
    """
    app = FastAPI(
        title="Agent Resume",
        description="Resume blocked coding-agent sessions with task context",
        version=__version__,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.default_project_dir = project_dir
    app.state.containers = {}

    def _resolve_project_dir(project_dir_param: Optional[str] = None) -> Path:
        if project_dir_param:
            return Path(project_dir_param).expanduser().resolve()
        if app.state.default_project_dir:
            return Path(app.state.default_project_dir).resolve()
        return Path.cwd().resolve()

    def _resolve_container(project_dir_param: Optional[str] = None) -> Container:
        resolved = _resolve_project_dir(project_dir_param)
        key = str(resolved)
        cache = cast(dict[str, Container], app.state.containers)
        if key not in cache:
            cache[key] = Container(resolved)
        return cache[key]

    app.include_router(create_router(_resolve_container))

    @app.get("/healthz")
    async def healthz() -> dict[str, object]:
        """Expose liveness status for process-level health checks."""
        return {"status": "ok", "version": __version__}

    return app
