"""Text-to-speech components.

This package contains the voice catalog and the synthesis requester used by
the controller and CLI.
"""

from .catalog import VoiceCatalog
from .synthesizer import SynthesisRequester

__all__ = ["SynthesisRequester", "VoiceCatalog"]
