"""File-backed storage for tasks, boards, comments and configuration."""

from .container import Container

__all__ = ["Container"]
