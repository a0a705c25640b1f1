"""Tests for settings resolution."""

import os
from pathlib import Path

import pytest

from gdoc_merge.config import (
    DEFAULT_COPY_NAME,
    DEFAULT_SOURCE_DOCUMENT_ID,
    get_credential_status,
    load_settings,
    read_env_file,
)


def test_defaults(tmp_path):
    settings = load_settings(env_file=None)
    assert settings.source_document_id == DEFAULT_SOURCE_DOCUMENT_ID
    assert settings.copy_name == DEFAULT_COPY_NAME
    assert settings.insert_index == 178
    assert settings.table_index == 82
    assert settings.credentials_path == Path("credentials.json")
    assert settings.token_path == Path("token.json")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GDOC_MERGE_SOURCE_ID", "DOC_A")
    monkeypatch.setenv("GDOC_MERGE_COPY_NAME", "Copy of A")
    monkeypatch.setenv("GDOC_MERGE_TABLE_INDEX", "12")

    settings = load_settings(env_file=None)
    assert settings.source_document_id == "DOC_A"
    assert settings.copy_name == "Copy of A"
    assert settings.table_index == 12


def test_env_file_does_not_override_environment(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        'GDOC_MERGE_COPY_NAME="From file"\n'
        "GDOC_MERGE_INSERT_INDEX=200\n"
        "not a setting\n"
    )
    monkeypatch.setenv("GDOC_MERGE_INSERT_INDEX", "150")

    settings = load_settings(env_file=env_file)
    assert settings.copy_name == "From file"
    assert settings.insert_index == 150
    assert "GDOC_MERGE_COPY_NAME" not in os.environ


def test_read_env_file_keeps_only_prefixed_keys(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "OTHER_TOOL_API_KEY=secret\n"
        "export GDOC_MERGE_SOURCE_ID='DOC_B'\n"
        "GDOC_MERGE_TOKEN = /tmp/t.json\n"
        "GDOC_MERGE_INSERT_TEXT\n"
    )
    assert read_env_file(env_file) == {
        "GDOC_MERGE_SOURCE_ID": "DOC_B",
        "GDOC_MERGE_TOKEN": "/tmp/t.json",
    }
    assert "OTHER_TOOL_API_KEY" not in os.environ


def test_read_missing_env_file(tmp_path):
    assert read_env_file(tmp_path / ".env") == {}


def test_explicit_paths_win(monkeypatch):
    monkeypatch.setenv("GDOC_MERGE_TOKEN", "/env/token.json")
    settings = load_settings(env_file=None, credentials_path="c.json", token_path="t.json")
    assert settings.credentials_path == Path("c.json")
    assert settings.token_path == Path("t.json")


def test_invalid_integer(monkeypatch):
    monkeypatch.setenv("GDOC_MERGE_INSERT_INDEX", "end")
    with pytest.raises(ValueError, match="GDOC_MERGE_INSERT_INDEX"):
        load_settings(env_file=None)


def test_credential_status(mock_credentials):
    settings = load_settings(env_file=None)
    status = get_credential_status(settings)
    assert status["credentials"] is True
    assert status["token"] is False
