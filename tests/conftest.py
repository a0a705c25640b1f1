"""Shared fixtures."""

import json

import pytest
from fakes import FakeDoc, FakeDocsService, FakeDriveService

DRIVE_SCOPE = "https://www.googleapis.com/auth/drive"

TEMPLATE_TEXT = (
    "Merge template\n"
    "{{insert1}} jumped over the {{insert2}}.\n"
    + "Filler paragraph used to push later content past the insert index.\n" * 4
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep tests away from a developer's .env and GDOC_MERGE_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "GDOC_MERGE_SOURCE_ID",
        "GDOC_MERGE_COPY_NAME",
        "GDOC_MERGE_INSERT_INDEX",
        "GDOC_MERGE_INSERT_TEXT",
        "GDOC_MERGE_TABLE_INDEX",
        "GDOC_MERGE_CREDENTIALS",
        "GDOC_MERGE_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_credentials(tmp_path):
    """Create a mock credentials file."""
    creds = {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "client_secret": "test-client-secret",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }
    creds_path = tmp_path / "credentials.json"
    with open(creds_path, "w") as f:
        json.dump(creds, f)
    return creds_path


@pytest.fixture
def mock_token(tmp_path):
    """Create a mock token file."""
    token = {
        "token": "test-access-token",
        "refresh_token": "test-refresh-token",
        "token_uri": "https://oauth2.googleapis.com/token",
        "client_id": "test-client-id.apps.googleusercontent.com",
        "client_secret": "test-client-secret",
        "scopes": [DRIVE_SCOPE],
        "type": "Bearer",
        "expiry": "2099-01-01T00:00:00Z",
    }
    token_path = tmp_path / "token.json"
    with open(token_path, "w") as f:
        json.dump(token, f)
    return token_path


@pytest.fixture
def docs_service():
    """Docs fake holding DOC_A: placeholders and a table starting at index 82."""
    service = FakeDocsService()
    assert len(TEMPLATE_TEXT) > 178
    service.docs["DOC_A"] = FakeDoc(title="A", text=TEMPLATE_TEXT, tables={82})
    return service


@pytest.fixture
def drive_service(docs_service):
    return FakeDriveService(docs_service)
