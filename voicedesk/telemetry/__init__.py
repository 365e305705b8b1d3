"""Telemetry helpers.

This package emits deterministic action events for auditing CLI and
controller activity.
"""

from .logger import ActionLogger

__all__ = ["ActionLogger"]
