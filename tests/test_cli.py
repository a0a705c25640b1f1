"""Tests for the gdoc-merge command line."""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import requests
from google.auth.exceptions import RefreshError

from gdoc_merge.cli import main
from gdoc_merge.google import AuthorizationError, GoogleOAuth


@pytest.fixture
def services(drive_service, docs_service):
    """Route GoogleOAuth.build_service to the fakes."""
    by_name = {"drive": drive_service, "docs": docs_service}
    with patch.object(
        GoogleOAuth, "build_service", side_effect=lambda name, version: by_name[name]
    ):
        yield by_name


@pytest.fixture
def source_doc(monkeypatch):
    monkeypatch.setenv("GDOC_MERGE_SOURCE_ID", "DOC_A")
    monkeypatch.setenv("GDOC_MERGE_COPY_NAME", "Copy of A")


class TestRun:
    def test_prints_batch_response(self, mock_credentials, mock_token, services, source_doc, capsys):
        provider = MagicMock()

        assert main([], code_provider=provider) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["documentId"] == "copy-1"
        assert len(output["replies"]) == 4
        provider.assert_not_called()

    def test_run_command(self, mock_credentials, mock_token, services, source_doc):
        assert main(["run"]) == 0
        assert services["docs"].batch_calls[0][0] == "copy-1"

    def test_denied_copy_exits_nonzero(
        self, mock_credentials, mock_token, services, source_doc, caplog
    ):
        services["drive"].denied.add("DOC_A")

        with caplog.at_level(logging.ERROR):
            assert main([]) == 1

        assert services["docs"].batch_calls == []
        assert "Google API request failed" in caplog.text

    def test_copy_timeout_exits_nonzero(
        self, mock_credentials, mock_token, services, source_doc, caplog
    ):
        with (
            patch.object(services["drive"], "_copy", side_effect=TimeoutError("timed out")),
            caplog.at_level(logging.ERROR),
        ):
            assert main([]) == 1

        assert "files.copy failed (no response): timed out" in caplog.text
        assert services["docs"].batch_calls == []

    def test_refresh_failure_exits_nonzero(
        self, mock_credentials, mock_token, services, source_doc, caplog
    ):
        revoked = RefreshError("invalid_grant: Token has been expired or revoked.")
        with (
            patch.object(services["docs"], "_batch_update", side_effect=revoked),
            caplog.at_level(logging.ERROR),
        ):
            assert main([]) == 1

        assert "Google API request failed" in caplog.text
        assert "invalid_grant" in caplog.text

    def test_missing_credentials(self, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            assert main(["--credentials", str(tmp_path / "nope.json")]) == 1
        assert "Credentials file not found" in caplog.text

    def test_rejected_authorization(self, mock_credentials, services, source_doc, caplog):
        rejected = AuthorizationError("Unable to retrieve token from web: invalid_grant")
        with (
            patch.object(GoogleOAuth, "interactive_authorize", side_effect=rejected),
            caplog.at_level(logging.ERROR),
        ):
            assert main([], code_provider=lambda url: "code") == 1

        assert "Authentication failed" in caplog.text
        assert services["drive"].copy_calls == []


class TestOtherCommands:
    def test_inspect(self, mock_credentials, mock_token, services, capsys):
        assert main(["inspect", "DOC_A"]) == 0
        out = capsys.readouterr().out
        assert "The title of the doc is: A" in out
        assert "Table start index: 82" in out

    def test_inspect_missing_document(self, mock_credentials, mock_token, services):
        assert main(["inspect", "missing"]) == 1

    def test_status_with_token(self, mock_credentials, mock_token, capsys):
        assert main(["status"]) == 0
        out = capsys.readouterr().out
        assert "Status     : valid" in out

    def test_status_without_token(self, mock_credentials, capsys):
        assert main(["status"]) == 1
        assert "No token found" in capsys.readouterr().out

    def test_login(self, mock_credentials, tmp_path, capsys):
        issued = {
            "access_token": "fresh",
            "expires_at": 4102444800,
            "scope": "https://www.googleapis.com/auth/drive",
        }
        with patch("authlib.integrations.requests_client.OAuth2Session.fetch_token", return_value=issued):
            assert main(["login"], code_provider=lambda url: "code") == 0

        assert (tmp_path / "token.json").exists()
        assert "Token saved successfully" in capsys.readouterr().out

    def test_status_scope_mismatch(self, mock_credentials, tmp_path, capsys):
        (tmp_path / "token.json").write_text(
            json.dumps(
                {
                    "token": "docs-only",
                    "scopes": ["https://www.googleapis.com/auth/documents"],
                    "expiry": "2099-01-01T00:00:00Z",
                }
            )
        )

        assert main(["status"]) == 1
        out = capsys.readouterr().out
        assert "Status     : scope_mismatch" in out
        assert "Missing    : https://www.googleapis.com/auth/drive" in out
        assert "No token found" not in out

    def test_logout(self, mock_credentials, mock_token):
        revoked = requests.Response()
        revoked.status_code = 200
        with patch("requests.Session.send", return_value=revoked) as send:
            assert main(["logout"]) == 0

        sent = send.call_args.args[0]
        assert sent.url.startswith("https://oauth2.googleapis.com/revoke")
        assert "token=test-access-token" in sent.url
        assert "Authorization" not in sent.headers
        assert not mock_token.exists()

    def test_logout_when_revoke_unreachable(self, mock_credentials, mock_token):
        with patch("requests.Session.send", side_effect=requests.ConnectionError("offline")):
            assert main(["logout"]) == 0
        assert not mock_token.exists()
