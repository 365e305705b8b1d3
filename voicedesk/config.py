"""Configuration model and loaders for Voicedesk.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide deterministic precedence resolution for the API key and endpoint settings.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `VoicedeskConfig`: normalized settings for one CLI or controller session.
- `ProviderRuntimeConfig`: resolved provider connection values.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `VoicedeskConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .models.datatypes import (
    EFFECTS_PROFILE_IDS,
    PITCH_RANGE,
    SPEAKING_RATE_RANGE,
    VOLUME_GAIN_DB_RANGE,
)
from .parsing import normalize_optional_string, parse_optional_float
from .provider.google_client import DEFAULT_BASE_URL


_DEFAULT_TIMEOUT_SECONDS = 30.0
_API_KEY_ENV_KEYS = ("VOICEDESK_API_KEY", "GOOGLE_TTS_API_KEY")


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProviderRuntimeConfig:
    """Resolved provider connection values for one session.

    Attributes:
        base_url: Provider REST base URL.
        timeout_seconds: Per-request timeout.
        api_key: Provider API key, never persisted or logged.
    """

    base_url: str
    timeout_seconds: float
    api_key: str | None = None


@dataclass(slots=True)
class VoicedeskConfig:
    """Runtime configuration for one session.

    Attributes:
        api_key: Optional provider API key.
        base_url: Provider REST base URL.
        timeout_seconds: Per-request timeout in seconds.
        default_language: Language tag preselected instead of the first catalog tag.
        default_voice: Voice name preselected when it serves the language.
        pitch: Default pitch in `[-20, 20]`.
        speaking_rate: Default speaking rate in `[0.25, 4.0]`.
        volume_gain_db: Default volume gain in `[-96, 16]`.
        effects_profile_id: Optional default effects profile.
        log_level: Minimum action log level.
        runtime_sources: Optional runtime source overrides injected by CLI.
    """

    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS
    default_language: str | None = None
    default_voice: str | None = None
    pitch: float = 0.0
    speaking_rate: float = 1.0
    volume_gain_db: float = 0.0
    effects_profile_id: str | None = None
    log_level: str = "INFO"
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)

    def validate(self) -> None:
        """Validate configuration values before building provider components."""

        self._require_non_empty(self.base_url, "base_url")
        if self.timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be a positive number.")
        self._require_in_range(self.pitch, PITCH_RANGE, "pitch")
        self._require_in_range(self.speaking_rate, SPEAKING_RATE_RANGE, "speaking_rate")
        self._require_in_range(self.volume_gain_db, VOLUME_GAIN_DB_RANGE, "volume_gain_db")
        if self.effects_profile_id is not None and (
            self.effects_profile_id not in EFFECTS_PROFILE_IDS
        ):
            supported = ", ".join(EFFECTS_PROFILE_IDS)
            raise ValueError(
                f"Unsupported `effects_profile_id` value `{self.effects_profile_id}`; "
                f"supported: {supported}."
            )
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            raise ValueError(f"Unsupported `log_level` value `{self.log_level}`.")

    def resolved_provider_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ProviderRuntimeConfig:
        """Resolve provider settings with deterministic source precedence.

        Precedence for each key is:
        `cli` > `secure` > `env` > config field value.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        base_url = self._resolve_optional_runtime_value(
            key="base_url",
            env_keys=("VOICEDESK_BASE_URL",),
            default_value=self.base_url,
            sources=resolved_sources,
        )
        timeout_text = self._resolve_optional_runtime_value(
            key="timeout_seconds",
            env_keys=("VOICEDESK_TIMEOUT_SECONDS",),
            default_value=str(self.timeout_seconds),
            sources=resolved_sources,
        )
        api_key = self._resolve_optional_runtime_value(
            key="api_key",
            env_keys=_API_KEY_ENV_KEYS,
            default_value=self.api_key,
            sources=resolved_sources,
        )

        if base_url is None:
            raise ValueError("`base_url` could not be resolved from CLI, env, or config.")
        timeout_seconds = parse_optional_float(timeout_text, "timeout_seconds")
        if timeout_seconds is None or timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be a positive number.")

        return ProviderRuntimeConfig(
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            api_key=api_key,
        )

    def _resolve_optional_runtime_value(
        self,
        key: str,
        env_keys: tuple[str, ...],
        default_value: str | None,
        sources: RuntimeConfigSources,
    ) -> str | None:
        """Resolve an optional runtime value from sources in deterministic order."""

        cli_value = self._normalized_lookup(sources.cli, key)
        if cli_value is not None:
            return cli_value

        secure_value = self._normalized_lookup(sources.secure, key)
        if secure_value is not None:
            return secure_value

        for env_key in env_keys:
            env_value = self._normalized_lookup(sources.env, env_key)
            if env_value is not None:
                return env_value

        return normalize_optional_string(default_value)

    @staticmethod
    def _normalized_lookup(mapping: Mapping[str, str], key: str) -> str | None:
        """Return a stripped mapping value for a key or `None` when missing/blank."""

        if key not in mapping:
            return None
        return normalize_optional_string(mapping.get(key))

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Require non-empty string values for mandatory runtime fields."""

        if normalize_optional_string(value) is None:
            raise ValueError(f"`{field_name}` must be a non-empty string.")

    @staticmethod
    def _require_in_range(value: float, bounds: tuple[float, float], field_name: str) -> None:
        """Require a numeric value inside an inclusive range."""

        low, high = bounds
        if not low <= value <= high:
            raise ValueError(f"`{field_name}` must be within [{low}, {high}].")


class ConfigLoader:
    """Factory methods for creating `VoicedeskConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "api_key",
            "base_url",
            "timeout_seconds",
            "default_language",
            "default_voice",
            "pitch",
            "speaking_rate",
            "volume_gain_db",
            "effects_profile_id",
            "log_level",
        }
    )
    _RUNTIME_ENV_KEYS = frozenset(
        {
            "VOICEDESK_API_KEY",
            "GOOGLE_TTS_API_KEY",
            "VOICEDESK_BASE_URL",
            "VOICEDESK_TIMEOUT_SECONDS",
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> VoicedeskConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)

        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> VoicedeskConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        api_key = None
        for env_key in _API_KEY_ENV_KEYS:
            api_key = ConfigLoader._optional_env_string(env_map, env_key)
            if api_key is not None:
                break

        timeout_seconds = ConfigLoader._optional_env_float(env_map, "VOICEDESK_TIMEOUT_SECONDS")

        runtime_env = {
            key: value
            for key, value in env_map.items()
            if key in ConfigLoader._RUNTIME_ENV_KEYS
            and normalize_optional_string(value) is not None
        }

        config = VoicedeskConfig(
            api_key=api_key,
            base_url=(
                ConfigLoader._optional_env_string(env_map, "VOICEDESK_BASE_URL")
                or DEFAULT_BASE_URL
            ),
            timeout_seconds=(
                timeout_seconds if timeout_seconds is not None else _DEFAULT_TIMEOUT_SECONDS
            ),
            default_language=ConfigLoader._optional_env_string(env_map, "VOICEDESK_LANGUAGE"),
            default_voice=ConfigLoader._optional_env_string(env_map, "VOICEDESK_VOICE"),
            effects_profile_id=ConfigLoader._optional_env_string(
                env_map, "VOICEDESK_EFFECTS_PROFILE"
            ),
            log_level=(
                ConfigLoader._optional_env_string(env_map, "VOICEDESK_LOG_LEVEL") or "INFO"
            ).upper(),
            runtime_sources=RuntimeConfigSources(env=runtime_env),
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> VoicedeskConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        timeout_seconds = ConfigLoader._optional_float(payload, "timeout_seconds", source_label)
        pitch = ConfigLoader._optional_float(payload, "pitch", source_label)
        speaking_rate = ConfigLoader._optional_float(payload, "speaking_rate", source_label)
        volume_gain_db = ConfigLoader._optional_float(payload, "volume_gain_db", source_label)

        config = VoicedeskConfig(
            api_key=ConfigLoader._optional_string(payload, "api_key"),
            base_url=ConfigLoader._optional_string(payload, "base_url") or DEFAULT_BASE_URL,
            timeout_seconds=(
                timeout_seconds if timeout_seconds is not None else _DEFAULT_TIMEOUT_SECONDS
            ),
            default_language=ConfigLoader._optional_string(payload, "default_language"),
            default_voice=ConfigLoader._optional_string(payload, "default_voice"),
            pitch=pitch if pitch is not None else 0.0,
            speaking_rate=speaking_rate if speaking_rate is not None else 1.0,
            volume_gain_db=volume_gain_db if volume_gain_db is not None else 0.0,
            effects_profile_id=ConfigLoader._optional_string(payload, "effects_profile_id"),
            log_level=(ConfigLoader._optional_string(payload, "log_level") or "INFO").upper(),
        )
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label} {exc}") from exc
        return config

    @staticmethod
    def _optional_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_float(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> float | None:
        """Read and validate an optional numeric payload field."""

        if key not in payload:
            return None
        try:
            return parse_optional_float(payload[key], key)
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

    @staticmethod
    def _optional_env_string(env: Mapping[str, str], key: str) -> str | None:
        """Read and normalize optional string environment variable values."""

        if key not in env:
            return None
        return normalize_optional_string(env.get(key))

    @staticmethod
    def _optional_env_float(env: Mapping[str, str], key: str) -> float | None:
        """Read an optional number from environment mapping."""

        raw_value = ConfigLoader._optional_env_string(env, key)
        if raw_value is None:
            return None
        try:
            return parse_optional_float(raw_value, key)
        except ValueError as exc:
            raise ValueError(f"Environment variable `{key}` must be a number.") from exc
