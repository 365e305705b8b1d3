"""Synthesis request lifecycle.

Responsibilities:
- Turn validated `SynthesisParameters` into one provider synthesis call.
- Decode the base64 MP3 payload into an `AudioResult`.
"""

from __future__ import annotations

from typing import Any, Protocol

from ..errors import FetchFailure, NoAudioReturned, hint_for_failure_kind
from ..models.datatypes import AudioResult, SynthesisParameters
from ..provider.google_client import GoogleTTSProviderError


class SynthesisClient(Protocol):
    """Protocol for provider clients that can synthesize speech."""

    def synthesize(self, body: dict[str, Any]) -> dict[str, Any]:
        """Return the decoded synthesis payload for a request body."""


class SynthesisRequester:
    """Perform single-attempt synthesis requests against a provider client."""

    def __init__(self, client: SynthesisClient) -> None:
        self._client = client

    def synthesize(self, params: SynthesisParameters) -> AudioResult:
        """Synthesize speech for one parameter set.

        Raises:
            ValueError: If `params` break the request contract (text length or
                missing voice). Callers must check before calling.
            NoAudioReturned: If the provider answered without `audioContent`.
            FetchFailure: If the request fails or the payload is malformed.
        """

        params.validate()
        try:
            payload = self._client.synthesize(params.to_request_body())
        except GoogleTTSProviderError as exc:
            raise FetchFailure(
                action="synthesize",
                detail=str(exc),
                hint=hint_for_failure_kind(exc.failure_kind),
                failure_kind=exc.failure_kind,
            ) from exc

        audio_content = payload.get("audioContent")
        if not audio_content:
            raise NoAudioReturned(
                action="synthesize",
                detail="Provider response did not include `audioContent`.",
                hint="Try another voice, language, or effects profile combination.",
            )
        if not isinstance(audio_content, str):
            raise FetchFailure(
                action="synthesize",
                detail="Provider response field `audioContent` must be a string.",
                failure_kind="invalid_payload",
            )

        try:
            return AudioResult.from_base64(audio_content, voice_name=params.voice_name)
        except ValueError as exc:
            raise FetchFailure(
                action="synthesize",
                detail=f"Provider returned undecodable audio: {exc}",
                failure_kind="invalid_payload",
            ) from exc
