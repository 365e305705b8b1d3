"""Integration tests for the secure credential management command."""

from __future__ import annotations

from pytest import MonkeyPatch
from typer.testing import CliRunner

from voicedesk.cli import app


def test_credentials_status_set_and_clear(
    monkeypatch: MonkeyPatch, credential_store  # type: ignore[no-untyped-def]
) -> None:
    """Credentials command reports status, stores a hidden key, and clears it."""

    runner = CliRunner()

    status = runner.invoke(app, ["credentials"])
    assert status.exit_code == 0, status.output
    assert "Secure credential storage: available" in status.output
    assert "Stored Google TTS API key: not set" in status.output

    monkeypatch.setattr("voicedesk.cli.typer.prompt", lambda *args, **kwargs: " new-key ")
    stored = runner.invoke(app, ["credentials", "--set-api-key"])
    assert stored.exit_code == 0, stored.output
    assert "new-key" not in stored.output
    assert credential_store.get_api_key() == "new-key"

    cleared = runner.invoke(app, ["credentials", "--clear-api-key"])
    assert cleared.exit_code == 0, cleared.output
    assert "Stored API key cleared" in cleared.output
    assert credential_store.get_api_key() is None

    cleared_again = runner.invoke(app, ["credentials", "--clear-api-key"])
    assert "No stored API key found" in cleared_again.output


def test_credentials_rejects_conflicting_flags(credential_store) -> None:  # type: ignore[no-untyped-def]
    runner = CliRunner()

    result = runner.invoke(app, ["credentials", "--set-api-key", "--clear-api-key"])

    assert result.exit_code == 1
    assert "credentials failed at action `credentials`" in result.output


def test_credentials_rejects_blank_prompted_key(
    monkeypatch: MonkeyPatch, credential_store  # type: ignore[no-untyped-def]
) -> None:
    monkeypatch.setattr("voicedesk.cli.typer.prompt", lambda *args, **kwargs: "   ")
    runner = CliRunner()

    result = runner.invoke(app, ["credentials", "--set-api-key"])

    assert result.exit_code == 1
    assert "No API key entered." in result.output
    assert credential_store.get_api_key() is None
