"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
language and voice listings, and synthesized audio summaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from .errors import VoicedeskError
from .models.datatypes import AudioResult, Voice


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, VoicedeskError):
        typer.secho(
            f"{command_name} failed at action `{exc.action}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_language_list(language_tags: tuple[str, ...]) -> None:
    """Print one language tag per line in catalog order."""

    for tag in language_tags:
        typer.echo(tag)


def echo_voice_list(voices: tuple[Voice, ...]) -> None:
    """Print one `name (first-language)` voice label per line."""

    for voice in voices:
        typer.echo(voice.label)


def echo_audio_summary(audio: AudioResult, output_path: Path, language: str | None) -> None:
    """Print synthesized audio location and request summary."""

    typer.echo(f"Voice: {audio.voice_name}")
    typer.echo(f"Language: {language or 'unknown'}")
    typer.echo(f"Audio bytes: {audio.size_bytes}")
    typer.echo(f"Audio file: {output_path}")
