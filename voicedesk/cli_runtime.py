"""CLI runtime resolution helpers.

This module isolates API-key prompting, runtime source assembly, and secure
API-key persistence from the command wiring layer.
"""

from __future__ import annotations

from pathlib import Path
import os
from typing import Callable, Protocol

import typer

from .config import ConfigLoader, RuntimeConfigSources, VoicedeskConfig
from .credentials import create_credential_store
from .errors import VoicedeskError
from .parsing import normalize_optional_string


class CredentialStoreProtocol(Protocol):
    """Protocol for secure credential store operations used by CLI runtime resolution."""

    def get_api_key(self) -> str | None:
        """Return currently stored API key, if available."""

    def set_api_key(self, api_key: str) -> None:
        """Persist API key value in secure storage."""


def _prompt_hidden_api_key(label: str) -> str | None:
    """Prompt for an API key with hidden input and normalize blank answers."""

    return normalize_optional_string(
        typer.prompt(
            label,
            default="",
            hide_input=True,
            show_default=False,
        )
    )


def resolve_runtime_sources(
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
    credential_store_factory: Callable[[], CredentialStoreProtocol] = create_credential_store,
) -> tuple[dict[str, str], dict[str, str]]:
    """Resolve CLI and secure runtime source mappings for the provider API key."""

    runtime_cli_values: dict[str, str] = {}
    normalized_api_key = normalize_optional_string(api_key)
    if normalized_api_key is not None:
        runtime_cli_values["api_key"] = normalized_api_key

    if prompt_api_key and "api_key" not in runtime_cli_values:
        prompted_api_key = _prompt_hidden_api_key(
            "Google TTS API key (hidden; leave blank to skip)"
        )
        if prompted_api_key is not None:
            runtime_cli_values["api_key"] = prompted_api_key

    credential_store = credential_store_factory()
    runtime_secure_values: dict[str, str] = {}
    stored_api_key = credential_store.get_api_key()
    if stored_api_key is not None:
        runtime_secure_values["api_key"] = stored_api_key

    if "api_key" in runtime_cli_values and store_api_key:
        try:
            credential_store.set_api_key(runtime_cli_values["api_key"])
            typer.echo("Stored API key in secure credential storage.")
        except Exception as exc:
            raise VoicedeskError(
                action="credentials",
                detail=f"Failed to store API key securely: {exc}",
                hint=(
                    "Install and configure a keyring backend, or rerun with "
                    "`--no-store-api-key` for one-off usage."
                ),
            ) from exc

    return runtime_cli_values, runtime_secure_values


def load_command_config(config_path: Path | None) -> VoicedeskConfig:
    """Load YAML config when requested, else environment config, as action errors."""

    if config_path is None:
        try:
            return ConfigLoader.from_env()
        except ValueError as exc:
            raise VoicedeskError(
                action="config",
                detail=f"Invalid environment configuration: {exc}",
                hint="Fix the `VOICEDESK_*` environment variables and rerun.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise VoicedeskError(
            action="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise VoicedeskError(
            action="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def apply_runtime_sources(
    base_config: VoicedeskConfig,
    runtime_cli_values: dict[str, str],
    runtime_secure_values: dict[str, str],
) -> VoicedeskConfig:
    """Attach runtime source mappings while keeping base config values intact."""

    return VoicedeskConfig(
        api_key=base_config.api_key,
        base_url=base_config.base_url,
        timeout_seconds=base_config.timeout_seconds,
        default_language=base_config.default_language,
        default_voice=base_config.default_voice,
        pitch=base_config.pitch,
        speaking_rate=base_config.speaking_rate,
        volume_gain_db=base_config.volume_gain_db,
        effects_profile_id=base_config.effects_profile_id,
        log_level=base_config.log_level,
        runtime_sources=RuntimeConfigSources(
            cli=runtime_cli_values,
            secure=runtime_secure_values,
            env=os.environ,
        ),
    )
