"""Provider HTTP clients."""

from .google_client import DEFAULT_BASE_URL, GoogleTTSClient, GoogleTTSProviderError

__all__ = ["DEFAULT_BASE_URL", "GoogleTTSClient", "GoogleTTSProviderError"]
