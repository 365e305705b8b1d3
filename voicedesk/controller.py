"""Speech controller owning user-visible state.

Responsibilities:
- Hold text, selections, tuning values, the error slot, and the last audio.
- Route user actions to the voice catalog and the synthesis requester.
- Drop results superseded by a newer request of the same kind.

Key types:
- `SpeechController`: mutable state plus action methods.
- `ControllerSnapshot`: immutable view of controller state.
"""

from __future__ import annotations

from dataclasses import dataclass
import threading

from .errors import EmptyCatalog, ValidationRejection, VoicedeskError
from .models.datatypes import (
    EFFECTS_PROFILE_IDS,
    MAX_TEXT_LENGTH,
    PITCH_RANGE,
    SPEAKING_RATE_RANGE,
    VOLUME_GAIN_DB_RANGE,
    AudioResult,
    SynthesisParameters,
    Voice,
    clamp,
    text_length_in_range,
)
from .parsing import utf16_length
from .telemetry.logger import ActionLogger
from .tts.catalog import VoiceCatalog
from .tts.synthesizer import SynthesisRequester


_LOAD_VOICES = "load_voices"
_SYNTHESIZE = "synthesize"


@dataclass(frozen=True, slots=True)
class ControllerSnapshot:
    """Immutable copy of controller state at one point in time."""

    text: str
    languages: tuple[str, ...]
    selected_language: str | None
    selected_voice: str | None
    available_voices: tuple[Voice, ...]
    pitch: float
    speaking_rate: float
    volume_gain_db: float
    effects_profile_id: str | None
    error: str | None
    audio: AudioResult | None

    @property
    def text_length(self) -> int:
        return utf16_length(self.text)


class SpeechController:
    """Explicit state holder for the text-to-speech widget."""

    def __init__(
        self,
        catalog: VoiceCatalog,
        requester: SynthesisRequester,
        *,
        pitch: float = 0.0,
        speaking_rate: float = 1.0,
        volume_gain_db: float = 0.0,
        effects_profile_id: str | None = None,
        action_logger: ActionLogger | None = None,
    ) -> None:
        """Initialize idle controller state with optional tuning defaults."""

        self._catalog = catalog
        self._requester = requester
        self._action_logger = action_logger

        self.text = ""
        self.languages: tuple[str, ...] = ()
        self.selected_language: str | None = None
        self.selected_voice: str | None = None
        self.pitch = clamp(pitch, PITCH_RANGE)
        self.speaking_rate = clamp(speaking_rate, SPEAKING_RATE_RANGE)
        self.volume_gain_db = clamp(volume_gain_db, VOLUME_GAIN_DB_RANGE)
        self.effects_profile_id: str | None = None
        self.error: str | None = None
        self.last_failure: VoicedeskError | None = None
        self.audio: AudioResult | None = None

        self._token_lock = threading.Lock()
        self._generations = {_LOAD_VOICES: 0, _SYNTHESIZE: 0}

        if effects_profile_id:
            self.set_effects_profile(effects_profile_id)

    def edit_text(self, new_text: str) -> bool:
        """Accept a text edit within the length limit.

        Rejected edits leave the text unchanged and fill the error slot.
        """

        if utf16_length(new_text) > MAX_TEXT_LENGTH:
            self._fail(
                ValidationRejection(
                    action="edit_text",
                    detail=f"Text must not exceed {MAX_TEXT_LENGTH} characters.",
                )
            )
            return False

        self.text = new_text
        self._clear_error()
        return True

    def refresh_voices(self) -> bool:
        """Load the voice catalog once and select a default language if none is set.

        Returns:
            `True` when the catalog loaded and this result was applied.
        """

        token = self._begin(_LOAD_VOICES)
        self._log_start(_LOAD_VOICES, token=token)
        try:
            voices = self._catalog.fetch()
        except VoicedeskError as exc:
            with self._token_lock:
                current = self._generations[_LOAD_VOICES] == token
                if current and isinstance(exc, EmptyCatalog):
                    self._catalog.clear()
            if not current:
                self._log_stale(_LOAD_VOICES, token)
                return False
            self.languages = self._catalog.language_tags
            self._drop_unavailable_voice()
            self._fail(exc)
            return False

        with self._token_lock:
            current = self._generations[_LOAD_VOICES] == token
            if current:
                _, language_tags = self._catalog.replace(voices)
        if not current:
            self._log_stale(_LOAD_VOICES, token)
            return False

        self.languages = language_tags
        if not self.selected_language and language_tags:
            self.selected_language = language_tags[0]
        self._drop_unavailable_voice()
        self._log_complete(_LOAD_VOICES, voices=len(self._catalog.voices))
        return True

    def available_voices(self) -> tuple[Voice, ...]:
        """Return catalog voices matching the selected language."""

        if not self.selected_language:
            return ()
        return self._catalog.filter_by_language(self.selected_language)

    def select_language(self, language_tag: str) -> None:
        """Select a language tag; the voice selection is kept only if it still matches."""

        self.selected_language = language_tag
        self._drop_unavailable_voice()

    def select_voice(self, voice_name: str) -> bool:
        """Select a voice from the filtered list; other names are rejected."""

        voice = self._catalog.find(voice_name)
        if (
            voice is None
            or self.selected_language is None
            or not voice.supports(self.selected_language)
        ):
            self._fail(
                ValidationRejection(
                    action="select_voice",
                    detail=(
                        f"Voice `{voice_name}` is not available for language "
                        f"`{self.selected_language or 'none'}`."
                    ),
                )
            )
            return False
        self.selected_voice = voice_name
        return True

    def set_pitch(self, value: float) -> float:
        self.pitch = clamp(value, PITCH_RANGE)
        return self.pitch

    def set_speaking_rate(self, value: float) -> float:
        self.speaking_rate = clamp(value, SPEAKING_RATE_RANGE)
        return self.speaking_rate

    def set_volume_gain_db(self, value: float) -> float:
        self.volume_gain_db = clamp(value, VOLUME_GAIN_DB_RANGE)
        return self.volume_gain_db

    def set_effects_profile(self, profile_id: str | None) -> bool:
        """Set or clear the effects profile; unknown profiles are rejected."""

        if profile_id and profile_id not in EFFECTS_PROFILE_IDS:
            self._fail(
                ValidationRejection(
                    action="set_effects_profile",
                    detail=(
                        f"Unknown effects profile `{profile_id}`; supported: "
                        f"{', '.join(EFFECTS_PROFILE_IDS)}."
                    ),
                )
            )
            return False
        self.effects_profile_id = profile_id or None
        return True

    def can_speak(self) -> bool:
        """Return whether text is in range and a voice is selected."""

        return text_length_in_range(self.text) and bool(self.selected_voice)

    def build_parameters(self) -> SynthesisParameters:
        """Build request parameters from the current state."""

        return SynthesisParameters(
            text=self.text,
            language_code=self.selected_language or "",
            voice_name=self.selected_voice or "",
            pitch=self.pitch,
            speaking_rate=self.speaking_rate,
            volume_gain_db=self.volume_gain_db,
            effects_profile_id=self.effects_profile_id,
        )

    def speak(self) -> AudioResult | None:
        """Synthesize the current text with the current voice and tuning.

        Does nothing when `can_speak()` is false. On failure the previous audio
        is kept and the error slot is filled.
        """

        if not self.can_speak():
            return None

        params = self.build_parameters()
        token = self._begin(_SYNTHESIZE)
        self._log_start(_SYNTHESIZE, token=token, voice=params.voice_name)
        try:
            audio = self._requester.synthesize(params)
        except VoicedeskError as exc:
            if self._is_current(_SYNTHESIZE, token):
                self._fail(exc)
            else:
                self._log_stale(_SYNTHESIZE, token)
            return None

        if not self._is_current(_SYNTHESIZE, token):
            self._log_stale(_SYNTHESIZE, token)
            return None

        self.audio = audio
        self._log_complete(_SYNTHESIZE, bytes=audio.size_bytes)
        return audio

    def snapshot(self) -> ControllerSnapshot:
        """Return an immutable copy of the current state."""

        return ControllerSnapshot(
            text=self.text,
            languages=self.languages,
            selected_language=self.selected_language,
            selected_voice=self.selected_voice,
            available_voices=self.available_voices(),
            pitch=self.pitch,
            speaking_rate=self.speaking_rate,
            volume_gain_db=self.volume_gain_db,
            effects_profile_id=self.effects_profile_id,
            error=self.error,
            audio=self.audio,
        )

    def _drop_unavailable_voice(self) -> None:
        if self.selected_voice is None:
            return
        if not any(voice.name == self.selected_voice for voice in self.available_voices()):
            self.selected_voice = None

    def _begin(self, kind: str) -> int:
        with self._token_lock:
            self._generations[kind] += 1
            return self._generations[kind]

    def _is_current(self, kind: str, token: int) -> bool:
        with self._token_lock:
            return self._generations[kind] == token

    def _fail(self, exc: VoicedeskError) -> None:
        self.error = exc.user_message
        self.last_failure = exc
        if self._action_logger is not None:
            self._action_logger.log_action_failure(exc.action, type(exc).__name__)

    def _clear_error(self) -> None:
        self.error = None
        self.last_failure = None

    def _log_start(self, action: str, **context: object) -> None:
        if self._action_logger is not None:
            self._action_logger.log_action_start(action, **context)

    def _log_complete(self, action: str, **context: object) -> None:
        if self._action_logger is not None:
            self._action_logger.log_action_complete(action, **context)

    def _log_stale(self, action: str, token: int) -> None:
        if self._action_logger is not None:
            self._action_logger.log_stale_result(action, token)
