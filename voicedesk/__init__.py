"""Top-level package for Voicedesk.

This package provides a thin client for a cloud text-to-speech provider: it
loads the voice catalog, filters voices by language, and synthesizes MP3
audio. The main entry point for embedding is `SpeechController`.
"""

from .controller import ControllerSnapshot, SpeechController

__all__ = ["ControllerSnapshot", "SpeechController", "__version__"]

__version__ = "0.1.0"
