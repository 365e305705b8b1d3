"""Structured action logging utilities.

Responsibilities:
- Emit concise, deterministic action-level runtime logs through `loguru`.
- Keep API keys and user text out of log lines.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class ActionLogger:
    """Emit deterministic action logs for catalog and synthesis activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, event: str, action: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[action] level={level} action={action} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_action_start(self, action: str, **context: object) -> None:
        """Emit an action-start runtime event."""

        self._emit("INFO", "start", action, **context)

    def log_action_complete(self, action: str, **context: object) -> None:
        """Emit an action-complete runtime event."""

        self._emit("INFO", "complete", action, **context)

    def log_action_failure(self, action: str, error_type: str) -> None:
        """Emit an action-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", action, error_type=error_type)

    def log_stale_result(self, action: str, token: int) -> None:
        """Emit a debug event for a result superseded by a newer request."""

        self._emit("DEBUG", "stale", action, token=token)
