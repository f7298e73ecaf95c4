"""HTTP routes for the resume flow."""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from fastapi import APIRouter

from ..storage.container import Container
from .routes_resume import register_resume_routes


def create_router(resolve_container: Callable[[Optional[str]], Container]) -> APIRouter:
    """Create the API router with every route group registered."""
    router = APIRouter()
    register_resume_routes(router, resolve_container)
    return router


__all__ = ["create_router"]
