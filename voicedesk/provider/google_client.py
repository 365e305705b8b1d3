"""Google Cloud Text-to-Speech HTTP client.

Responsibilities:
- Send voice-listing and synthesis requests to the provider REST API.
- Authenticate every request with a static API key query parameter.
- Raise actionable provider exceptions with secrets redacted.
"""

from __future__ import annotations

import json
import re
import socket
from typing import Any

import requests


DEFAULT_BASE_URL = "https://texttospeech.googleapis.com/v1"


class GoogleTTSProviderError(RuntimeError):
    """Raised when a provider request fails or returns a non-JSON payload."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_status: str | None = None,
    ) -> None:
        """Initialize provider error metadata for action-aware diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_status = provider_status


class GoogleTTSClient:
    """Minimal requests-based client for the `voices` and `text:synthesize` endpoints."""

    _MAX_PROVIDER_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize HTTP client settings."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def list_voices(self) -> dict[str, Any]:
        """Return the decoded `GET /voices` payload."""

        return self._request_json("GET", "/voices")

    def synthesize(self, body: dict[str, Any]) -> dict[str, Any]:
        """Return the decoded `POST /text:synthesize` payload for a request body."""

        return self._request_json("POST", "/text:synthesize", body=body)

    def _request_json(
        self,
        method: str,
        endpoint_path: str,
        *,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute one provider request and decode its JSON object payload."""

        endpoint = f"{self.base_url}{endpoint_path}"
        try:
            response = requests.request(
                method,
                endpoint,
                params={"key": self.api_key},
                headers={"Content-Type": "application/json"},
                json=body,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            raw_payload = bytes(response.content)
        except requests.HTTPError as exc:
            raise self._http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = "Provider request timed out."
            else:
                detail = (
                    "Provider request transport error: "
                    f"{self._short_message(self._redact_sensitive_tokens(str(exc)))}"
                )
            raise GoogleTTSProviderError(detail, failure_kind=failure_kind) from exc
        except TimeoutError as exc:
            raise GoogleTTSProviderError(
                "Provider request timed out.",
                failure_kind="timeout",
            ) from exc

        return self._decode_json_object(raw_payload)

    @staticmethod
    def _decode_json_object(raw_payload: bytes) -> dict[str, Any]:
        """Decode a JSON object payload or raise a parse failure."""

        try:
            payload = json.loads(raw_payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GoogleTTSProviderError(
                "Provider returned invalid JSON payload.",
                failure_kind="invalid_payload",
            ) from exc
        if not isinstance(payload, dict):
            raise GoogleTTSProviderError(
                "Provider response must be a JSON object.",
                failure_kind="invalid_payload",
            )
        return payload

    @staticmethod
    def _decode_error_body(exc: requests.HTTPError) -> str:
        """Decode an HTTP error body into a best-effort UTF-8 payload string."""

        response = exc.response
        if response is None:
            return ""
        return bytes(response.content).decode("utf-8", errors="replace").strip()

    @classmethod
    def _redact_sensitive_tokens(cls, text: str) -> str:
        """Redact API keys from URLs and provider error content."""

        redacted = re.sub(r"([?&]key=)[^&\s'\"]+", r"\1[redacted-key]", text)
        redacted = re.sub(r"\bAIza[0-9A-Za-z_-]{20,}\b", "[redacted-key]", redacted)
        return redacted

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing provider message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_PROVIDER_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_PROVIDER_MESSAGE_CHARS - 1]}..."

    @classmethod
    def _extract_provider_message(cls, body: str) -> tuple[str, str | None]:
        """Extract a concise provider message and optional status code name.

        Google errors have the shape
        `{"error": {"code": 400, "message": "...", "status": "INVALID_ARGUMENT"}}`.
        """

        if not body:
            return "", None

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(cls._redact_sensitive_tokens(body)), None

        provider_status: str | None = None
        message: str | None = None
        if isinstance(payload, dict):
            error_payload = payload.get("error")
            if isinstance(error_payload, dict):
                status_value = error_payload.get("status")
                if isinstance(status_value, str) and status_value.strip():
                    provider_status = status_value.strip()
                message_value = error_payload.get("message")
                if isinstance(message_value, str) and message_value.strip():
                    message = message_value.strip()

        if message is None:
            message = body

        return cls._short_message(cls._redact_sensitive_tokens(message)), provider_status

    @staticmethod
    def _classify_http_failure(
        status_code: int,
        provider_message: str,
        provider_status: str | None,
    ) -> str:
        """Classify provider HTTP errors into deterministic diagnostic kinds."""

        message_lower = provider_message.lower()
        normalized_status = provider_status.upper() if provider_status is not None else ""

        if (
            status_code in {401, 403}
            or normalized_status in {"UNAUTHENTICATED", "PERMISSION_DENIED"}
            or "api key" in message_lower
        ):
            return "invalid_api_key"
        if status_code == 429 or normalized_status == "RESOURCE_EXHAUSTED":
            return "quota_exceeded"
        if status_code == 400 or normalized_status == "INVALID_ARGUMENT":
            return "invalid_argument"
        if status_code in {408, 504} or "timed out" in message_lower:
            return "timeout"
        return "http_error"

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _http_error_to_provider_error(
        cls, exc: requests.HTTPError
    ) -> GoogleTTSProviderError:
        """Convert HTTP errors into normalized provider exceptions with metadata."""

        status_code = exc.response.status_code if exc.response is not None else 0
        body = cls._decode_error_body(exc)
        provider_message, provider_status = cls._extract_provider_message(body)
        failure_kind = cls._classify_http_failure(
            status_code, provider_message, provider_status
        )

        headline = {
            "invalid_api_key": "Provider authentication failed",
            "quota_exceeded": "Provider quota exceeded",
            "invalid_argument": "Provider rejected the request",
            "timeout": "Provider request timed out",
        }.get(failure_kind, "Provider request failed")

        if provider_message:
            detail = f"{headline} (HTTP {status_code}): {provider_message}"
        else:
            detail = f"{headline} (HTTP {status_code})."

        return GoogleTTSProviderError(
            detail,
            failure_kind=failure_kind,
            status_code=status_code,
            provider_status=provider_status,
        )
