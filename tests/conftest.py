"""Shared pytest fixtures for the full Voicedesk test suite."""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from voicedesk.provider import google_client as google_http


SCENARIO_VOICES_PAYLOAD = {
    "voices": [
        {"name": "A", "languageCodes": ["en-US"], "ssmlGender": "FEMALE"},
        {"name": "B", "languageCodes": ["es-ES", "en-US"], "naturalSampleRateHertz": 24000},
    ]
}


class MockRequestsResponse:
    """Minimal requests response mock for HTTP transport patching."""

    def __init__(self, *, payload: bytes, status_code: int = 200) -> None:
        """Initialize response with raw payload bytes and HTTP status."""

        self.content = payload
        self.status_code = status_code

    @classmethod
    def json_payload(cls, payload: object, status_code: int = 200) -> "MockRequestsResponse":
        """Build a response carrying a JSON-encoded payload."""

        return cls(payload=json.dumps(payload).encode("utf-8"), status_code=status_code)

    def raise_for_status(self) -> None:
        """Raise HTTPError when the response status represents a failure."""

        if self.status_code >= 400:
            raise google_http.requests.HTTPError(
                f"HTTP {self.status_code} error",
                response=self,
            )


class ProviderTransport:
    """Route patched `requests.request` calls by endpoint and record them."""

    def __init__(self) -> None:
        """Initialize empty routes and call log."""

        self.calls: list[dict[str, Any]] = []
        self._routes: dict[str, Callable[[], MockRequestsResponse]] = {}

    def respond(self, endpoint_suffix: str, payload: object, status_code: int = 200) -> None:
        """Answer requests to an endpoint with a JSON payload."""

        self._routes[endpoint_suffix] = lambda: MockRequestsResponse.json_payload(
            payload, status_code
        )

    def respond_raw(self, endpoint_suffix: str, payload: bytes) -> None:
        """Answer requests to an endpoint with raw bytes."""

        self._routes[endpoint_suffix] = lambda: MockRequestsResponse(payload=payload)

    def fail(self, endpoint_suffix: str, exc: Exception) -> None:
        """Raise `exc` for requests to an endpoint."""

        def _raise() -> MockRequestsResponse:
            raise exc

        self._routes[endpoint_suffix] = _raise

    def calls_to(self, endpoint_suffix: str) -> list[dict[str, Any]]:
        """Return recorded calls whose URL ends with `endpoint_suffix`."""

        return [call for call in self.calls if call["url"].endswith(endpoint_suffix)]

    def __call__(self, method: str, url: str, **kwargs: Any) -> MockRequestsResponse:
        """Record one request and dispatch it to the matching route."""

        self.calls.append({"method": method, "url": url, **kwargs})
        for suffix, handler in self._routes.items():
            if url.endswith(suffix):
                return handler()
        raise AssertionError(f"Unexpected provider request: {method} {url}")


@pytest.fixture
def provider_transport(monkeypatch: pytest.MonkeyPatch) -> ProviderTransport:
    """Patch provider HTTP transport with a recording, routable fake."""

    transport = ProviderTransport()
    monkeypatch.setattr("voicedesk.provider.google_client.requests.request", transport)
    return transport


@pytest.fixture(autouse=True)
def _isolate_voicedesk_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove host Voicedesk/Google variables so tests see a clean environment."""

    for key in (
        "VOICEDESK_API_KEY",
        "GOOGLE_TTS_API_KEY",
        "VOICEDESK_BASE_URL",
        "VOICEDESK_TIMEOUT_SECONDS",
        "VOICEDESK_LANGUAGE",
        "VOICEDESK_VOICE",
        "VOICEDESK_EFFECTS_PROFILE",
        "VOICEDESK_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def scenario_voices_payload() -> dict[str, Any]:
    """Provide the two-voice catalog payload (`A`: en-US, `B`: es-ES + en-US)."""

    return json.loads(json.dumps(SCENARIO_VOICES_PAYLOAD))
