"""Voice catalog loading and language filtering.

Responsibilities:
- Fetch the provider voice list and replace any previously loaded catalog.
- Derive distinct language tags in first-appearance order.
- Filter loaded voices by language tag without network access.
"""

from __future__ import annotations

from typing import Any, Protocol

from ..errors import EmptyCatalog, FetchFailure, hint_for_failure_kind
from ..models.datatypes import Voice
from ..provider.google_client import GoogleTTSProviderError


class VoiceListingClient(Protocol):
    """Protocol for provider clients that can list voices."""

    def list_voices(self) -> dict[str, Any]:
        """Return the decoded voice listing payload."""


def distinct_language_tags(voices: tuple[Voice, ...]) -> tuple[str, ...]:
    """Flatten every voice's language tags and drop duplicates, keeping first order."""

    return tuple(dict.fromkeys(code for voice in voices for code in voice.language_codes))


class VoiceCatalog:
    """Provider voice list plus its derived language tags."""

    def __init__(self, client: VoiceListingClient) -> None:
        """Initialize an empty catalog backed by a voice-listing client."""

        self._client = client
        self._voices: tuple[Voice, ...] = ()
        self._language_tags: tuple[str, ...] = ()

    @property
    def voices(self) -> tuple[Voice, ...]:
        return self._voices

    @property
    def language_tags(self) -> tuple[str, ...]:
        return self._language_tags

    def load(self) -> tuple[tuple[Voice, ...], tuple[str, ...]]:
        """Fetch the voice list once and replace the catalog contents.

        Returns:
            Loaded voices and their distinct language tags.

        Raises:
            EmptyCatalog: If the provider lists no voices. The catalog is
                left empty.
            FetchFailure: If the request fails or the payload is malformed.
                Previously loaded contents are kept.
        """

        try:
            voices = self.fetch()
        except EmptyCatalog:
            self.clear()
            raise
        return self.replace(voices)

    def fetch(self) -> tuple[Voice, ...]:
        """Request and parse the voice list without touching catalog contents.

        Raises:
            EmptyCatalog: If the provider lists no voices.
            FetchFailure: If the request fails or the payload is malformed.
        """

        try:
            payload = self._client.list_voices()
        except GoogleTTSProviderError as exc:
            raise FetchFailure(
                action="load_voices",
                detail=str(exc),
                hint=hint_for_failure_kind(exc.failure_kind),
                failure_kind=exc.failure_kind,
            ) from exc

        voices = self._parse_voices(payload)
        if not voices:
            raise EmptyCatalog(
                action="load_voices",
                detail="Provider voice listing returned no voices.",
            )
        return voices

    def replace(self, voices: tuple[Voice, ...]) -> tuple[tuple[Voice, ...], tuple[str, ...]]:
        """Replace catalog contents with fetched voices and re-derive tags."""

        self._voices = voices
        self._language_tags = distinct_language_tags(voices)
        return self._voices, self._language_tags

    def clear(self) -> None:
        self._voices = ()
        self._language_tags = ()

    def filter_by_language(self, language_tag: str) -> tuple[Voice, ...]:
        """Return loaded voices that list `language_tag`, in catalog order."""

        return tuple(voice for voice in self._voices if voice.supports(language_tag))

    def find(self, voice_name: str) -> Voice | None:
        """Return the loaded voice with the given name, if any."""

        for voice in self._voices:
            if voice.name == voice_name:
                return voice
        return None

    @staticmethod
    def _parse_voices(payload: dict[str, Any]) -> tuple[Voice, ...]:
        """Parse `voices[]` entries, mapping malformed payloads to fetch failures."""

        raw_voices = payload.get("voices")
        if raw_voices is None:
            return ()
        if not isinstance(raw_voices, list):
            raise FetchFailure(
                action="load_voices",
                detail="Provider response field `voices` must be a list.",
                failure_kind="invalid_payload",
            )

        voices: list[Voice] = []
        for entry in raw_voices:
            if not isinstance(entry, dict):
                raise FetchFailure(
                    action="load_voices",
                    detail="Provider response contains a non-object voice entry.",
                    failure_kind="invalid_payload",
                )
            try:
                voices.append(Voice.from_payload(entry))
            except ValueError as exc:
                raise FetchFailure(
                    action="load_voices",
                    detail=f"Provider response contains a malformed voice: {exc}",
                    failure_kind="invalid_payload",
                ) from exc
        return tuple(voices)
