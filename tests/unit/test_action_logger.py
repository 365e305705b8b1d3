"""Unit tests for structured action logging."""

from __future__ import annotations

import io

from voicedesk.telemetry.logger import ActionLogger


def test_action_logger_emits_deterministic_sanitized_lines() -> None:
    """Context keys are sorted and unsafe characters replaced."""

    sink = io.StringIO()
    logger = ActionLogger(sink=sink)

    logger.log_action_start("synthesize", voice="es-ES-Standard A", token=3)
    logger.log_action_complete("load_voices", voices=2)
    logger.log_action_failure("synthesize", "NoAudioReturned")

    assert sink.getvalue().splitlines() == [
        "[action] level=INFO action=synthesize event=start token=3 voice=es-ES-Standard_A",
        "[action] level=INFO action=load_voices event=complete voices=2",
        "[action] level=ERROR action=synthesize event=failure error_type=NoAudioReturned",
    ]


def test_action_logger_filters_debug_events_below_level() -> None:
    sink = io.StringIO()

    ActionLogger(sink=sink).log_stale_result("synthesize", 4)
    assert sink.getvalue() == ""

    ActionLogger(sink=sink, level="DEBUG").log_stale_result("synthesize", 4)
    assert sink.getvalue().strip() == (
        "[action] level=DEBUG action=synthesize event=stale token=4"
    )
