"""Unit tests for the provider HTTP client."""

from __future__ import annotations

import pytest

from voicedesk.provider import google_client as google_http
from voicedesk.provider.google_client import GoogleTTSClient, GoogleTTSProviderError


def test_list_voices_sends_get_with_api_key_query_parameter(
    provider_transport, scenario_voices_payload
) -> None:  # type: ignore[no-untyped-def]
    """Voice listing should GET `/voices` with the key as a query parameter."""

    provider_transport.respond("/voices", scenario_voices_payload)
    client = GoogleTTSClient(api_key=" key-123 ", timeout_seconds=12.5)

    payload = client.list_voices()

    assert payload == scenario_voices_payload
    (call,) = provider_transport.calls
    assert call["method"] == "GET"
    assert call["url"] == "https://texttospeech.googleapis.com/v1/voices"
    assert call["params"] == {"key": "key-123"}
    assert call["timeout"] == 12.5
    assert call["json"] is None


def test_synthesize_posts_json_body_to_custom_base_url(provider_transport) -> None:  # type: ignore[no-untyped-def]
    """Synthesis should POST the body unchanged to `text:synthesize`."""

    provider_transport.respond("/text:synthesize", {"audioContent": "QUJD"})
    client = GoogleTTSClient(api_key="k", base_url="https://tts.example.test/v1/")
    body = {"input": {"text": "Hola"}}

    payload = client.synthesize(body)

    assert payload == {"audioContent": "QUJD"}
    (call,) = provider_transport.calls
    assert call["method"] == "POST"
    assert call["url"] == "https://tts.example.test/v1/text:synthesize"
    assert call["json"] == body
    assert call["headers"]["Content-Type"] == "application/json"


@pytest.mark.parametrize(
    ("status_code", "error_status", "expected_kind", "expected_headline"),
    [
        (403, "PERMISSION_DENIED", "invalid_api_key", "Provider authentication failed"),
        (429, "RESOURCE_EXHAUSTED", "quota_exceeded", "Provider quota exceeded"),
        (400, "INVALID_ARGUMENT", "invalid_argument", "Provider rejected the request"),
        (503, "UNAVAILABLE", "http_error", "Provider request failed"),
    ],
)
def test_http_errors_are_classified_with_provider_message(
    provider_transport,
    status_code: int,
    error_status: str,
    expected_kind: str,
    expected_headline: str,
) -> None:  # type: ignore[no-untyped-def]
    """HTTP failures should carry a classified kind and the provider message."""

    provider_transport.respond(
        "/voices",
        {"error": {"code": status_code, "message": "Request failed.", "status": error_status}},
        status_code=status_code,
    )
    client = GoogleTTSClient(api_key="k")

    with pytest.raises(GoogleTTSProviderError) as exc_info:
        client.list_voices()

    error = exc_info.value
    assert error.failure_kind == expected_kind
    assert error.status_code == status_code
    assert error.provider_status == error_status
    assert str(error) == f"{expected_headline} (HTTP {status_code}): Request failed."


def test_http_error_body_redacts_api_keys(provider_transport) -> None:  # type: ignore[no-untyped-def]
    """Provider error text must not echo the API key back to the user."""

    provider_transport.respond(
        "/voices",
        {
            "error": {
                "code": 400,
                "message": "API key not valid: AIzaSyD-abcdefghijklmnopqrstuvwxyz012",
                "status": "INVALID_ARGUMENT",
            }
        },
        status_code=400,
    )
    client = GoogleTTSClient(api_key="AIzaSyD-abcdefghijklmnopqrstuvwxyz012")

    with pytest.raises(GoogleTTSProviderError) as exc_info:
        client.list_voices()

    assert exc_info.value.failure_kind == "invalid_api_key"
    assert "AIzaSyD" not in str(exc_info.value)
    assert "[redacted-key]" in str(exc_info.value)


def test_transport_error_is_classified_and_redacts_key_in_url(provider_transport) -> None:  # type: ignore[no-untyped-def]
    """Connection failures should map to `transport` without leaking the URL key."""

    provider_transport.fail(
        "/voices",
        google_http.requests.ConnectionError(
            "Max retries exceeded with url: /v1/voices?key=super-secret-key"
        ),
    )
    client = GoogleTTSClient(api_key="super-secret-key")

    with pytest.raises(GoogleTTSProviderError) as exc_info:
        client.list_voices()

    assert exc_info.value.failure_kind == "transport"
    assert "super-secret-key" not in str(exc_info.value)
    assert "key=[redacted-key]" in str(exc_info.value)


def test_timeout_is_classified(provider_transport) -> None:  # type: ignore[no-untyped-def]
    """Request timeouts should map to `timeout`."""

    provider_transport.fail("/text:synthesize", google_http.requests.Timeout("slow"))
    client = GoogleTTSClient(api_key="k")

    with pytest.raises(GoogleTTSProviderError, match="timed out") as exc_info:
        client.synthesize({})

    assert exc_info.value.failure_kind == "timeout"


@pytest.mark.parametrize("raw_payload", [b"not json", b"[1, 2, 3]", b"\xff\xfe"])
def test_non_object_payloads_are_parse_failures(provider_transport, raw_payload: bytes) -> None:  # type: ignore[no-untyped-def]
    """Invalid or non-object JSON should raise `invalid_payload` errors."""

    provider_transport.respond_raw("/voices", raw_payload)
    client = GoogleTTSClient(api_key="k")

    with pytest.raises(GoogleTTSProviderError) as exc_info:
        client.list_voices()

    assert exc_info.value.failure_kind == "invalid_payload"
