"""Factory helpers wiring configuration to provider-backed components.

Responsibilities:
- Build the provider HTTP client from resolved runtime settings.
- Build a `SpeechController` with its catalog, requester, and tuning defaults.
"""

from __future__ import annotations

from .config import ProviderRuntimeConfig, VoicedeskConfig
from .controller import SpeechController
from .provider.google_client import GoogleTTSClient
from .telemetry.logger import ActionLogger
from .tts.catalog import VoiceCatalog
from .tts.synthesizer import SynthesisRequester


class ProviderFactory:
    """Factory for provider-backed components used by the CLI."""

    @staticmethod
    def create_client(runtime: ProviderRuntimeConfig) -> GoogleTTSClient:
        """Create the provider HTTP client for resolved runtime settings."""

        return GoogleTTSClient(
            api_key=runtime.api_key,
            base_url=runtime.base_url,
            timeout_seconds=runtime.timeout_seconds,
        )

    @staticmethod
    def create_controller(
        config: VoicedeskConfig,
        action_logger: ActionLogger | None = None,
    ) -> SpeechController:
        """Create a controller whose catalog and requester share one client."""

        client = ProviderFactory.create_client(config.resolved_provider_runtime())
        return SpeechController(
            VoiceCatalog(client),
            SynthesisRequester(client),
            pitch=config.pitch,
            speaking_rate=config.speaking_rate,
            volume_gain_db=config.volume_gain_db,
            effects_profile_id=config.effects_profile_id,
            action_logger=action_logger,
        )
