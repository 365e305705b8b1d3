"""Integration-test fixtures for CLI runs without a real keyring backend."""

from __future__ import annotations

import pytest


class InMemoryCredentialStore:
    """Simple in-memory credential store used for CLI tests."""

    def __init__(self, initial_api_key: str | None = None) -> None:
        """Initialize the store with an optional pre-seeded API key."""

        self._api_key = initial_api_key

    def is_available(self) -> bool:
        """Return availability flag expected by the CLI status command."""

        return True

    def get_api_key(self) -> str | None:
        """Return currently stored API key value."""

        return self._api_key

    def set_api_key(self, api_key: str) -> None:
        """Persist a normalized API key value."""

        self._api_key = api_key.strip()

    def clear_api_key(self) -> bool:
        """Clear API key and return whether one existed."""

        existed = self._api_key is not None
        self._api_key = None
        return existed


@pytest.fixture
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    """Route CLI credential access to an in-memory store."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr("voicedesk.cli.create_credential_store", lambda: store)
    return store
