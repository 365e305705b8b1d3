"""Core datatypes shared across Voicedesk modules.

Responsibilities:
- Represent immutable voice catalog entries and synthesis requests.
- Hold the numeric ranges and enumerated values the provider accepts.

Key types:
- `Voice`, `SynthesisParameters`, `AudioResult`.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from ..parsing import utf16_length


MAX_TEXT_LENGTH = 5000
PITCH_RANGE = (-20.0, 20.0)
SPEAKING_RATE_RANGE = (0.25, 4.0)
VOLUME_GAIN_DB_RANGE = (-96.0, 16.0)
EFFECTS_PROFILE_IDS = (
    "telephony-class-application",
    "handset-class-device",
    "wearable-class-device",
)


def clamp(value: float, bounds: tuple[float, float]) -> float:
    """Clamp a numeric value into an inclusive `(low, high)` range."""

    low, high = bounds
    return max(low, min(high, float(value)))


def text_length_in_range(text: str) -> bool:
    """Return whether text is non-empty and within the provider length limit."""

    return 1 <= utf16_length(text) <= MAX_TEXT_LENGTH


@dataclass(frozen=True, slots=True)
class Voice:
    """One provider voice from the catalog.

    Attributes:
        name: Provider-native voice identifier, unique within a catalog.
        language_codes: Language tags this voice can speak, in provider order.
        ssml_gender: Optional provider gender label.
        natural_sample_rate_hertz: Optional native sample rate.
    """

    name: str
    language_codes: tuple[str, ...]
    ssml_gender: str | None = None
    natural_sample_rate_hertz: int | None = None

    def supports(self, language_code: str) -> bool:
        """Return whether this voice lists the given language tag."""

        return language_code in self.language_codes

    @property
    def label(self) -> str:
        """Return display label `name (first-language)`."""

        if not self.language_codes:
            return self.name
        return f"{self.name} ({self.language_codes[0]})"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Voice":
        """Build a voice from one provider `voices[]` entry.

        Raises:
            ValueError: If `name` or `languageCodes` is missing or malformed.
        """

        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("voice entry is missing a non-empty `name`.")
        codes = payload.get("languageCodes")
        if not isinstance(codes, list) or not all(isinstance(code, str) for code in codes):
            raise ValueError(f"voice `{name}` has malformed `languageCodes`.")

        gender = payload.get("ssmlGender")
        sample_rate = payload.get("naturalSampleRateHertz")
        return cls(
            name=name,
            language_codes=tuple(codes),
            ssml_gender=gender if isinstance(gender, str) else None,
            natural_sample_rate_hertz=(
                sample_rate
                if isinstance(sample_rate, int) and not isinstance(sample_rate, bool)
                else None
            ),
        )


@dataclass(frozen=True, slots=True)
class SynthesisParameters:
    """Everything sent with one synthesis request.

    Attributes:
        text: Input text, 1..5000 UTF-16 code units.
        language_code: Language tag sent with the voice selection.
        voice_name: Provider voice identifier.
        pitch: Semitone shift in `[-20, 20]`.
        speaking_rate: Rate multiplier in `[0.25, 4.0]`.
        volume_gain_db: Gain in dB in `[-96, 16]`.
        effects_profile_id: Optional audio effects profile.
    """

    text: str
    language_code: str
    voice_name: str
    pitch: float = 0.0
    speaking_rate: float = 1.0
    volume_gain_db: float = 0.0
    effects_profile_id: str | None = None

    def validate(self) -> None:
        """Check request preconditions.

        Raises:
            ValueError: If text length, voice, a numeric range, or the
                effects profile is out of contract.
        """

        if not text_length_in_range(self.text):
            raise ValueError(
                f"`text` must be between 1 and {MAX_TEXT_LENGTH} characters."
            )
        if not self.voice_name:
            raise ValueError("`voice_name` must be a non-empty voice identifier.")
        _require_in_range(self.pitch, PITCH_RANGE, "pitch")
        _require_in_range(self.speaking_rate, SPEAKING_RATE_RANGE, "speaking_rate")
        _require_in_range(self.volume_gain_db, VOLUME_GAIN_DB_RANGE, "volume_gain_db")
        if self.effects_profile_id and self.effects_profile_id not in EFFECTS_PROFILE_IDS:
            raise ValueError(
                f"Unsupported `effects_profile_id` value `{self.effects_profile_id}`."
            )

    def to_request_body(self) -> dict[str, Any]:
        """Return the provider JSON body for `text:synthesize`."""

        return {
            "input": {"text": self.text},
            "voice": {"languageCode": self.language_code, "name": self.voice_name},
            "audioConfig": {
                "audioEncoding": "MP3",
                "pitch": self.pitch,
                "speakingRate": self.speaking_rate,
                "volumeGainDb": self.volume_gain_db,
                "effectsProfileId": (
                    [self.effects_profile_id] if self.effects_profile_id else []
                ),
            },
        }


def _require_in_range(value: float, bounds: tuple[float, float], field_name: str) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"`{field_name}` must be within [{low}, {high}], got {value}.")


@dataclass(frozen=True, slots=True)
class AudioResult:
    """Decoded synthesis audio ready for playback.

    Attributes:
        audio_bytes: Raw MP3 bytes.
        voice_name: Voice that produced the audio.
        mime_type: Media type of `audio_bytes`.
    """

    audio_bytes: bytes
    voice_name: str
    mime_type: str = "audio/mp3"

    @classmethod
    def from_base64(cls, payload: str, voice_name: str) -> "AudioResult":
        """Decode a provider base64 `audioContent` payload.

        Raises:
            ValueError: If the payload is not valid base64.
        """

        try:
            audio_bytes = base64.b64decode(payload, validate=True)
        except (ValueError, TypeError) as exc:
            raise ValueError("audio payload is not valid base64.") from exc
        return cls(audio_bytes=audio_bytes, voice_name=voice_name)

    @property
    def size_bytes(self) -> int:
        return len(self.audio_bytes)

    def as_data_uri(self) -> str:
        """Return a `data:` URI playable by browser audio elements."""

        encoded = base64.b64encode(self.audio_bytes).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    def write_to(self, path: Path) -> Path:
        """Write audio bytes to `path`, creating parent directories."""

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.audio_bytes)
        return path
