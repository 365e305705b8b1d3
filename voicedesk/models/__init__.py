"""Shared typed data models for Voicedesk.

This package contains dataclasses and provider value ranges used by the
catalog, synthesizer, and controller modules.
"""

from .datatypes import (
    EFFECTS_PROFILE_IDS,
    MAX_TEXT_LENGTH,
    PITCH_RANGE,
    SPEAKING_RATE_RANGE,
    VOLUME_GAIN_DB_RANGE,
    AudioResult,
    SynthesisParameters,
    Voice,
)

__all__ = [
    "AudioResult",
    "EFFECTS_PROFILE_IDS",
    "MAX_TEXT_LENGTH",
    "PITCH_RANGE",
    "SPEAKING_RATE_RANGE",
    "SynthesisParameters",
    "VOLUME_GAIN_DB_RANGE",
    "Voice",
]
