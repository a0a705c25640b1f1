"""OAuth token model and on-disk cache.

Tokens are stored in the Google authorized-user layout so that
google.oauth2.credentials.Credentials.from_authorized_user_file() can read
the same file:

    {"token": ..., "refresh_token": ..., "token_uri": ..., "client_id": ...,
     "client_secret": ..., "scopes": [...], "type": "Bearer",
     "expiry": "2099-01-01T00:00:00Z"}
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from gdoc_merge.google.exceptions import TokenError

logger = logging.getLogger(__name__)

TOKEN_FILE_MODE = 0o600


@dataclass
class OAuthToken:
    """An OAuth 2.0 user token."""

    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None
    token_type: str = "Bearer"
    scopes: list[str] = field(default_factory=list)

    @property
    def expiry(self) -> datetime | None:
        """Expiry as an aware UTC datetime."""
        if self.expires_at is None:
            return None
        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc)

    def is_expired(self, now: float | None = None) -> bool:
        if self.expires_at is None:
            return False
        if now is None:
            now = datetime.now(timezone.utc).timestamp()
        return self.expires_at < now

    @classmethod
    def from_authlib(cls, token: dict[str, Any], default_scopes: list[str]) -> OAuthToken:
        """Convert an Authlib token dict.

        The token endpoint may omit ``scope`` when everything requested was
        granted, in which case ``default_scopes`` is assumed.
        """
        scope = token.get("scope")
        if isinstance(scope, str):
            scopes = scope.split()
        elif scope:
            scopes = list(scope)
        else:
            scopes = list(default_scopes)

        expires_at = token.get("expires_at")
        return cls(
            access_token=token["access_token"],
            refresh_token=token.get("refresh_token"),
            expires_at=int(expires_at) if expires_at is not None else None,
            token_type=token.get("token_type", "Bearer"),
            scopes=scopes,
        )

    def to_authlib(self) -> dict[str, Any]:
        token: dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "scope": " ".join(self.scopes),
        }
        if self.refresh_token:
            token["refresh_token"] = self.refresh_token
        if self.expires_at is not None:
            token["expires_at"] = self.expires_at
        return token


def _parse_expiry(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return int(value)
    dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def _format_expiry(expires_at: int | None) -> str | None:
    if expires_at is None:
        return None
    return datetime.fromtimestamp(expires_at, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def load_token(path: str | Path) -> OAuthToken:
    """Load a cached token.

    Args:
        path: Token file path.

    Returns:
        The cached OAuthToken.

    Raises:
        FileNotFoundError: If there is no cached token.
        TokenError: If the file exists but cannot be parsed.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError:
        raise
    except (OSError, ValueError) as e:
        raise TokenError(f"Failed to read token file {path}: {e}") from e

    if not isinstance(data, dict) or not data.get("token"):
        raise TokenError(f"Token file {path} has no access token")

    try:
        expires_at = _parse_expiry(data.get("expiry"))
    except (TypeError, ValueError) as e:
        raise TokenError(f"Token file {path} has an invalid expiry: {e}") from e

    return OAuthToken(
        access_token=data["token"],
        refresh_token=data.get("refresh_token"),
        expires_at=expires_at,
        token_type=data.get("type", "Bearer"),
        scopes=list(data.get("scopes", [])),
    )


def save_token(
    path: str | Path,
    token: OAuthToken,
    client_id: str | None = None,
    client_secret: str | None = None,
    token_uri: str | None = None,
) -> None:
    """Write a token to disk, readable and writable by the owner only.

    Any existing file is overwritten.

    Raises:
        TokenError: If the file cannot be written.
    """
    path = Path(path)
    data = {
        "token": token.access_token,
        "refresh_token": token.refresh_token,
        "token_uri": token_uri,
        "client_id": client_id,
        "client_secret": client_secret,
        "scopes": token.scopes,
        "type": token.token_type,
        "expiry": _format_expiry(token.expires_at),
    }

    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, TOKEN_FILE_MODE)
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
        # O_CREAT's mode does not apply to a file that already existed
        os.chmod(path, TOKEN_FILE_MODE)
    except OSError as e:
        raise TokenError(f"Unable to cache OAuth token at {path}: {e}") from e

    logger.info(f"Saved OAuth token to {path}")
