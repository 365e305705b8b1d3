"""Unit tests for secure credential store helpers."""

from keyring.errors import NoKeyringError

from voicedesk.credentials import KeyringCredentialStore


class FakeKeyringBackend:
    """Backend stub exposing the keyring `priority` attribute."""

    def __init__(self, priority: float) -> None:
        self.priority = priority


class FakeKeyringModule:
    """In-memory keyring stub for deterministic credential store tests."""

    def __init__(self, priority: float = 1) -> None:
        """Initialize fake storage dictionary and backend priority."""

        self._storage: dict[tuple[str, str], str] = {}
        self._backend = FakeKeyringBackend(priority)

    def get_keyring(self) -> FakeKeyringBackend:
        """Return the configured fake backend."""

        return self._backend

    def get_password(self, service_name: str, account_name: str) -> str | None:
        """Return previously stored password if present."""

        return self._storage.get((service_name, account_name))

    def set_password(self, service_name: str, account_name: str, value: str) -> None:
        """Store password value for the service/account key."""

        self._storage[(service_name, account_name)] = value

    def delete_password(self, service_name: str, account_name: str) -> None:
        """Delete password value for the service/account key."""

        self._storage.pop((service_name, account_name), None)


class NoBackendKeyringModule(FakeKeyringModule):
    """Keyring stub behaving like an environment without a usable backend."""

    def get_password(self, service_name: str, account_name: str) -> str | None:
        raise NoKeyringError("No recommended backend was available.")


def test_keyring_store_roundtrip_set_get_clear(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    """Keyring store should set/get/clear API key values via keyring backend."""

    fake_keyring = FakeKeyringModule()
    store = KeyringCredentialStore()
    monkeypatch.setattr(store, "_load_keyring_module", lambda: fake_keyring)

    assert store.is_available() is True
    assert store.get_api_key() is None

    store.set_api_key("  abc123  ")
    assert store.get_api_key() == "abc123"
    assert fake_keyring.get_password("voicedesk", "google_tts_api_key") == "abc123"

    assert store.clear_api_key() is True
    assert store.get_api_key() is None
    assert store.clear_api_key() is False


def test_keyring_store_rejects_blank_api_key(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    store = KeyringCredentialStore()
    monkeypatch.setattr(store, "_load_keyring_module", lambda: FakeKeyringModule())

    try:
        store.set_api_key("   ")
    except ValueError as exc:
        assert "non-empty" in str(exc)
    else:
        raise AssertionError("blank API key should be rejected")


def test_keyring_store_handles_missing_backend(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    """Keyring store should degrade safely when no keyring backend is usable."""

    store = KeyringCredentialStore()
    monkeypatch.setattr(store, "_load_keyring_module", lambda: NoBackendKeyringModule(priority=0))

    assert store.is_available() is False
    assert store.get_api_key() is None
    assert store.clear_api_key() is False
