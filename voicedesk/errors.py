"""Domain exceptions for catalog, synthesis, and CLI diagnostics.

Every failure a user action can hit is a `VoicedeskError` subclass carrying the
action that failed, a concise detail, and an optional hint. `user_message`
is the single line the controller places in its error slot.
"""

from __future__ import annotations


class VoicedeskError(RuntimeError):
    """Base class for action-scoped failures reported to the user."""

    default_message = "Something went wrong. Please try again."

    def __init__(
        self,
        *,
        action: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize an action-scoped error."""

        super().__init__(detail)
        self.action = action
        self.detail = detail
        self.hint = hint

    @property
    def user_message(self) -> str:
        """Return the human-readable message shown for this failure."""

        return self.default_message


class FetchFailure(VoicedeskError):
    """Raised when a provider call fails in transport, HTTP status, or parsing."""

    def __init__(
        self,
        *,
        action: str,
        detail: str,
        hint: str | None = None,
        failure_kind: str = "unknown",
    ) -> None:
        """Initialize fetch failure with the provider failure classification."""

        super().__init__(action=action, detail=detail, hint=hint)
        self.failure_kind = failure_kind

    @property
    def user_message(self) -> str:
        if self.action == "synthesize":
            return "There was an error generating the audio. Please try again."
        return "There was an error fetching the voices. Please try again later."


class EmptyCatalog(VoicedeskError):
    """Raised when the voice listing succeeds but contains no voices."""

    default_message = "No voices are available."


class NoAudioReturned(VoicedeskError):
    """Raised when a synthesis response carries no audio payload."""

    default_message = "Error generating the audio."


class ValidationRejection(VoicedeskError):
    """Raised when a local precondition fails before any network call."""

    @property
    def user_message(self) -> str:
        return self.detail


def hint_for_failure_kind(failure_kind: str) -> str | None:
    """Return an actionable hint for common provider failure kinds."""

    return {
        "invalid_api_key": (
            "Check the API key via `--api-key`, `VOICEDESK_API_KEY`, or "
            "`voicedesk credentials --set-api-key`."
        ),
        "quota_exceeded": "Wait for the provider quota to reset and retry.",
        "timeout": "Check network connectivity or raise `timeout_seconds`.",
        "transport": "Check network connectivity and retry.",
    }.get(failure_kind)
