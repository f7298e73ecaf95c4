"""Resume blocked coding-agent sessions with task and conversation context."""

__version__ = "0.1.0"
