"""Command-line interface for Voicedesk.

Responsibilities:
- Expose user-facing commands for listing languages/voices and synthesizing speech.
- Convert CLI arguments into a `VoicedeskConfig` and drive a `SpeechController`.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, NoReturn

import typer

from .cli_rendering import (
    echo_audio_summary,
    echo_language_list,
    echo_voice_list,
    exit_with_command_error,
)
from .cli_runtime import apply_runtime_sources, load_command_config, resolve_runtime_sources
from .config import VoicedeskConfig
from .controller import SpeechController
from .credentials import create_credential_store
from .errors import ValidationRejection, VoicedeskError
from .models.datatypes import (
    EFFECTS_PROFILE_IDS,
    MAX_TEXT_LENGTH,
    PITCH_RANGE,
    SPEAKING_RATE_RANGE,
    VOLUME_GAIN_DB_RANGE,
)
from .parsing import normalize_optional_string, utf16_length
from .provider_factory import ProviderFactory
from .telemetry.logger import ActionLogger

app = typer.Typer(
    name="voicedesk",
    no_args_is_help=True,
    help="Voicedesk CLI.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with session defaults."),
]
ApiKeyOption = Annotated[
    str | None,
    typer.Option(
        "--api-key",
        help="Provider API key override. Prefer `--prompt-api-key` to avoid shell history.",
    ),
]
PromptApiKeyOption = Annotated[
    bool,
    typer.Option(
        "--prompt-api-key",
        help="Prompt for API key with hidden input (never echoed).",
    ),
]
StoreApiKeyOption = Annotated[
    bool,
    typer.Option(
        "--store-api-key/--no-store-api-key",
        help="Persist CLI-entered API key to secure credential storage.",
    ),
]


def _open_session(
    config_file: Path | None,
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
) -> tuple[SpeechController, VoicedeskConfig]:
    """Resolve configuration, build a controller, and load the voice catalog."""

    runtime_cli_values, runtime_secure_values = resolve_runtime_sources(
        api_key=api_key,
        prompt_api_key=prompt_api_key,
        store_api_key=store_api_key,
        credential_store_factory=create_credential_store,
    )
    config = apply_runtime_sources(
        base_config=load_command_config(config_file),
        runtime_cli_values=runtime_cli_values,
        runtime_secure_values=runtime_secure_values,
    )
    controller = ProviderFactory.create_controller(
        config,
        action_logger=ActionLogger(level=config.log_level),
    )
    if not controller.refresh_voices():
        _raise_last_failure(controller)
    _select_language(controller, config.default_language)
    return controller, config


def _raise_last_failure(controller: SpeechController) -> NoReturn:
    """Re-raise the failure recorded by the controller's last action."""

    if controller.last_failure is not None:
        raise controller.last_failure
    raise VoicedeskError(action="unknown", detail=controller.error or "Action failed.")


def _require_in_range(value: float | None, bounds: tuple[float, float], option: str) -> None:
    """Reject out-of-range numeric options before any synthesis call."""

    if value is None:
        return
    low, high = bounds
    if not low <= value <= high:
        raise ValidationRejection(
            action="speak",
            detail=f"`{option}` must be within [{low}, {high}], got {value}.",
        )


def _select_language(controller: SpeechController, language: str | None) -> None:
    """Apply an explicit language choice, rejecting tags absent from the catalog."""

    if language is None:
        return
    if language not in controller.languages:
        raise ValidationRejection(
            action="select_language",
            detail=f"Language `{language}` is not offered by any voice.",
            hint="Run `voicedesk languages` to list supported language tags.",
        )
    controller.select_language(language)


def _select_voice(
    controller: SpeechController,
    voice: str | None,
    default_voice: str | None,
) -> None:
    """Select an explicit voice, else the configured default, else the first match."""

    if voice is not None:
        if not controller.select_voice(voice):
            _raise_last_failure(controller)
        return

    available = controller.available_voices()
    if not available:
        raise ValidationRejection(
            action="select_voice",
            detail=(
                "No voices are available for language "
                f"`{controller.selected_language or 'none'}`."
            ),
        )
    names = [candidate.name for candidate in available]
    controller.select_voice(default_voice if default_voice in names else names[0])


@app.command("languages")
def languages_command(
    config_file: ConfigOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """List language tags offered by the provider voice catalog."""

    try:
        controller, _ = _open_session(config_file, api_key, prompt_api_key, store_api_key)
    except Exception as exc:
        exit_with_command_error("languages", exc)

    echo_language_list(controller.languages)


@app.command("voices")
def voices_command(
    language: Annotated[
        str | None,
        typer.Option("--language", help="Language tag to filter voices by."),
    ] = None,
    config_file: ConfigOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """List voices for a language (default: configured or first catalog language)."""

    try:
        controller, _ = _open_session(config_file, api_key, prompt_api_key, store_api_key)
        _select_language(controller, language)
    except Exception as exc:
        exit_with_command_error("voices", exc)

    echo_voice_list(controller.available_voices())


@app.command("speak")
def speak_command(
    text: Annotated[
        str | None,
        typer.Argument(help="Text to synthesize. Required unless `--text-file` is given."),
    ] = None,
    out: Annotated[
        Path,
        typer.Option("--out", help="Output MP3 file path."),
    ] = Path("speech.mp3"),
    text_file: Annotated[
        Path | None,
        typer.Option("--text-file", help="Read UTF-8 text to synthesize from a file."),
    ] = None,
    language: Annotated[
        str | None,
        typer.Option("--language", help="Language tag (default: configured or first)."),
    ] = None,
    voice: Annotated[
        str | None,
        typer.Option("--voice", help="Voice name (default: first voice for the language)."),
    ] = None,
    pitch: Annotated[
        float | None,
        typer.Option("--pitch", help="Pitch in semitones, -20.0 to 20.0."),
    ] = None,
    speaking_rate: Annotated[
        float | None,
        typer.Option("--speaking-rate", help="Speaking rate, 0.25 to 4.0."),
    ] = None,
    volume_gain_db: Annotated[
        float | None,
        typer.Option("--volume-gain-db", help="Volume gain in dB, -96.0 to 16.0."),
    ] = None,
    effects_profile: Annotated[
        str | None,
        typer.Option(
            "--effects-profile",
            help=f"Audio effects profile: {', '.join(EFFECTS_PROFILE_IDS)}, or `none`.",
        ),
    ] = None,
    config_file: ConfigOption = None,
    api_key: ApiKeyOption = None,
    prompt_api_key: PromptApiKeyOption = False,
    store_api_key: StoreApiKeyOption = True,
) -> None:
    """Synthesize text with the chosen voice and write the MP3 audio."""

    try:
        if text is not None and text_file is not None:
            raise ValidationRejection(
                action="speak",
                detail="Pass either `TEXT` or `--text-file`, not both.",
            )
        input_text = text_file.read_text(encoding="utf-8") if text_file is not None else text
        if not input_text:
            raise ValidationRejection(
                action="speak",
                detail="Text to synthesize must not be empty.",
                hint="Pass text as an argument or via `--text-file`.",
            )
        if utf16_length(input_text) > MAX_TEXT_LENGTH:
            raise ValidationRejection(
                action="speak",
                detail=f"Text must not exceed {MAX_TEXT_LENGTH} characters.",
            )
        _require_in_range(pitch, PITCH_RANGE, "--pitch")
        _require_in_range(speaking_rate, SPEAKING_RATE_RANGE, "--speaking-rate")
        _require_in_range(volume_gain_db, VOLUME_GAIN_DB_RANGE, "--volume-gain-db")

        controller, config = _open_session(config_file, api_key, prompt_api_key, store_api_key)
        if not controller.edit_text(input_text):
            _raise_last_failure(controller)
        _select_language(controller, language)
        _select_voice(controller, voice, config.default_voice)

        if pitch is not None:
            controller.set_pitch(pitch)
        if speaking_rate is not None:
            controller.set_speaking_rate(speaking_rate)
        if volume_gain_db is not None:
            controller.set_volume_gain_db(volume_gain_db)
        if effects_profile is not None:
            profile = None if effects_profile.lower() == "none" else effects_profile
            if not controller.set_effects_profile(profile):
                _raise_last_failure(controller)

        audio = controller.speak()
        if audio is None:
            _raise_last_failure(controller)
        output_path = audio.write_to(out)
    except Exception as exc:
        exit_with_command_error("speak", exc)

    echo_audio_summary(audio, output_path, controller.selected_language)


@app.command("credentials")
def credentials_command(
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage securely stored CLI credentials."""

    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            VoicedeskError(
                action="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = normalize_optional_string(
            typer.prompt(
                "Google TTS API key (hidden input)",
                default="",
                hide_input=True,
                show_default=False,
            )
        )
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                VoicedeskError(
                    action="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(prompted_api_key)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                VoicedeskError(
                    action="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("API key stored in secure credential storage.")
        return

    if clear_api_key:
        removed = credential_store.clear_api_key()
        if removed:
            typer.echo("Stored API key cleared from secure credential storage.")
        else:
            typer.echo("No stored API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    has_stored_key = credential_store.get_api_key() is not None
    status = "present" if has_stored_key else "not set"
    typer.echo(f"Secure credential storage: {availability}")
    typer.echo(f"Stored Google TTS API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
