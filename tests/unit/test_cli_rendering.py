"""Unit tests for CLI output and error rendering helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
import typer

from voicedesk.cli_rendering import echo_audio_summary, echo_voice_list, exit_with_command_error
from voicedesk.errors import FetchFailure
from voicedesk.models.datatypes import AudioResult, Voice


def test_exit_with_command_error_renders_action_error_with_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print action diagnostics and hint before exiting with code 1."""

    error = FetchFailure(
        action="load_voices",
        detail="Provider authentication failed (HTTP 403): API key not valid.",
        hint="Provide a valid Google TTS API key.",
        failure_kind="invalid_api_key",
    )

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("voices", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "voices failed at action `load_voices`" in captured.err
    assert "Hint: Provide a valid Google TTS API key." in captured.err


def test_exit_with_command_error_renders_non_action_fallback(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print fallback exception text for unexpected failures."""

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("speak", RuntimeError("disk full"))

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "speak failed: disk full" in captured.err


def test_echo_helpers_print_voice_labels_and_audio_summary(
    capsys: pytest.CaptureFixture[str],
) -> None:
    echo_voice_list(
        (
            Voice(name="A", language_codes=("en-US",)),
            Voice(name="B", language_codes=("es-ES", "en-US")),
        )
    )
    echo_audio_summary(
        AudioResult(audio_bytes=b"ABC", voice_name="B"),
        Path("out/speech.mp3"),
        "es-ES",
    )

    lines = capsys.readouterr().out.splitlines()
    assert lines[:2] == ["A (en-US)", "B (es-ES)"]
    assert "Voice: B" in lines
    assert "Language: es-ES" in lines
    assert "Audio bytes: 3" in lines
    assert f"Audio file: {Path('out/speech.mp3')}" in lines
