"""Runtime configuration.

Files are resolved relative to the working directory by default:
    credentials.json - Google OAuth client credentials
    token.json       - cached OAuth user token
    .env             - optional GDOC_MERGE_* overrides

The .env file is read by load_settings(); only GDOC_MERGE_* keys are used.
Values already present in the environment take precedence over the file.
"""

import os
from collections import ChainMap
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

ENV_FILE = Path(".env")
ENV_PREFIX = "GDOC_MERGE_"
DEFAULT_CREDENTIALS = Path("credentials.json")
DEFAULT_TOKEN = Path("token.json")

# my-drive / try-gdocs-api
DEFAULT_SOURCE_DOCUMENT_ID = "1F6ye209lFqkg5LHCepvK2vQMDnCuxW_PagasjwWuq5o"
DEFAULT_COPY_NAME = "merged-output-from-try-gdocs-api"
DEFAULT_INSERT_INDEX = 178
DEFAULT_TABLE_INDEX = 82
DEFAULT_INSERT_TEXT = "\nHello."

# Applied in this order, after the index-targeted edits.
DEFAULT_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("{{insert2}}", "lazy dog"),
    ("{{insert1}}", "The Quick Brown fox."),
)


@dataclass(frozen=True)
class MergeSettings:
    """Parameters for one copy-and-edit run."""

    source_document_id: str = DEFAULT_SOURCE_DOCUMENT_ID
    copy_name: str = DEFAULT_COPY_NAME
    insert_index: int = DEFAULT_INSERT_INDEX
    insert_text: str = DEFAULT_INSERT_TEXT
    table_index: int = DEFAULT_TABLE_INDEX
    replacements: tuple[tuple[str, str], ...] = DEFAULT_REPLACEMENTS
    credentials_path: Path = field(default=DEFAULT_CREDENTIALS)
    token_path: Path = field(default=DEFAULT_TOKEN)


def read_env_file(env_path: Path) -> dict[str, str]:
    """Read GDOC_MERGE_* assignments from a .env file.

    Lines are ``KEY=value`` with optional matching quotes around the value.
    Other keys are ignored and the process environment is left untouched.
    """
    if not env_path.exists():
        return {}

    values = {}
    for raw in env_path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key.startswith(ENV_PREFIX):
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key] = value

    return values


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def load_settings(
    env_file: Path | None = ENV_FILE,
    credentials_path: str | Path | None = None,
    token_path: str | Path | None = None,
) -> MergeSettings:
    """Build MergeSettings from defaults, the .env file and the environment.

    Args:
        env_file: Optional .env file read for GDOC_MERGE_* values. None skips it.
        credentials_path: Explicit credentials path, overrides the environment.
        token_path: Explicit token path, overrides the environment.

    Returns:
        Resolved MergeSettings.
    """
    file_values = read_env_file(Path(env_file)) if env_file is not None else {}
    env = ChainMap(os.environ, file_values)

    return MergeSettings(
        source_document_id=env.get("GDOC_MERGE_SOURCE_ID", DEFAULT_SOURCE_DOCUMENT_ID),
        copy_name=env.get("GDOC_MERGE_COPY_NAME", DEFAULT_COPY_NAME),
        insert_index=_get_int(env, "GDOC_MERGE_INSERT_INDEX", DEFAULT_INSERT_INDEX),
        insert_text=env.get("GDOC_MERGE_INSERT_TEXT", DEFAULT_INSERT_TEXT),
        table_index=_get_int(env, "GDOC_MERGE_TABLE_INDEX", DEFAULT_TABLE_INDEX),
        credentials_path=Path(
            credentials_path or env.get("GDOC_MERGE_CREDENTIALS", DEFAULT_CREDENTIALS)
        ),
        token_path=Path(token_path or env.get("GDOC_MERGE_TOKEN", DEFAULT_TOKEN)),
    )


def get_credential_status(settings: MergeSettings) -> dict:
    """Get status of the configured credential files.

    Returns:
        Dictionary with credential status.
    """
    return {
        "env_file": ENV_FILE.exists(),
        "credentials": settings.credentials_path.exists(),
        "token": settings.token_path.exists(),
    }
