"""Google OAuth management using Authlib.

This module provides OAuth 2.0 authentication for Google APIs with:
- Cached token loading, with interactive authorization as the fallback
- Owner-only token storage
- Google API service creation (Docs, Drive)

The interactive step is delegated to a code provider: a callable that is
given the authorization URL and returns the authorization code (or the full
redirect URL). The default provider prints the URL and reads one line from
standard input.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from gdoc_merge.config import DEFAULT_TOKEN
from gdoc_merge.google.exceptions import (
    AuthorizationError,
    CredentialsNotFoundError,
    InvalidCredentialsError,
    ScopeMismatchError,
    TokenError,
)
from gdoc_merge.google.token import OAuthToken, load_token, save_token

logger = logging.getLogger(__name__)


# Common Google OAuth scopes
SCOPES = {
    "docs": "https://www.googleapis.com/auth/documents",
    "docs_readonly": "https://www.googleapis.com/auth/documents.readonly",
    "drive": "https://www.googleapis.com/auth/drive",
    "drive_readonly": "https://www.googleapis.com/auth/drive.readonly",
    "drive_file": "https://www.googleapis.com/auth/drive.file",
}

# The full Drive scope also covers the Docs API.
DEFAULT_SCOPES = ["drive"]

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
REVOKE_URL = "https://oauth2.googleapis.com/revoke"
DEFAULT_REDIRECT_URI = "http://localhost"

CodeProvider = Callable[[str], str]


def resolve_scopes(scopes: list[str]) -> list[str]:
    """Resolve scope names to full URLs."""
    resolved = []
    for scope in scopes:
        if scope.startswith("https://"):
            resolved.append(scope)
        elif scope in SCOPES:
            resolved.append(SCOPES[scope])
        else:
            raise ValueError(
                f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}"
            )
    return resolved


def load_client_credentials(path: str | Path) -> bytes:
    """Read the OAuth client credentials file.

    Raises:
        CredentialsNotFoundError: If the file is missing or unreadable.
    """
    path = Path(path)
    if not path.exists():
        raise CredentialsNotFoundError(str(path))
    try:
        return path.read_bytes()
    except OSError as e:
        raise CredentialsNotFoundError(str(path), reason=str(e)) from e


@dataclass(frozen=True)
class ClientConfig:
    """OAuth client configuration parsed from credentials.json."""

    client_id: str
    client_secret: str
    scopes: tuple[str, ...]
    redirect_uri: str = DEFAULT_REDIRECT_URI
    auth_uri: str = AUTHORIZE_URL
    token_uri: str = TOKEN_URL

    @classmethod
    def from_json(cls, data: bytes | str, scopes: list[str] | None = None) -> ClientConfig:
        """Parse Google "installed" or "web" client credentials.

        Args:
            data: Raw contents of credentials.json.
            scopes: Scope names or full URLs. Defaults to ["drive"].

        Raises:
            InvalidCredentialsError: If the descriptor is malformed.
            ValueError: If a scope name is unknown.
        """
        resolved = resolve_scopes(scopes or DEFAULT_SCOPES)

        try:
            creds = json.loads(data)
        except ValueError as e:
            raise InvalidCredentialsError(f"Invalid JSON in credentials file: {e}") from e

        if not isinstance(creds, dict):
            raise InvalidCredentialsError("Invalid credentials.json format. Expected an object.")

        # Handle both web and installed app credential formats
        if "installed" in creds:
            app_creds = creds["installed"]
        elif "web" in creds:
            app_creds = creds["web"]
        else:
            raise InvalidCredentialsError(
                "Invalid credentials.json format. Expected 'installed' or 'web' key."
            )

        if not isinstance(app_creds, dict):
            raise InvalidCredentialsError("Invalid credentials.json format.")

        client_id = app_creds.get("client_id")
        client_secret = app_creds.get("client_secret")
        if not client_id or not client_secret:
            raise InvalidCredentialsError("Credentials file is missing client_id or client_secret.")

        redirect_uris = app_creds.get("redirect_uris") or [DEFAULT_REDIRECT_URI]

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            scopes=tuple(resolved),
            redirect_uri=redirect_uris[0],
            auth_uri=app_creds.get("auth_uri", AUTHORIZE_URL),
            token_uri=app_creds.get("token_uri", TOKEN_URL),
        )


def console_code_provider(authorization_url: str) -> str:
    """Print the authorization URL and read the code from standard input."""
    print("Go to the following link in your browser then type the authorization code:")
    print(authorization_url)
    return input("Authorization code: ")


class GoogleOAuth:
    """Google OAuth management using Authlib.

    Loads a cached token when one exists, otherwise runs the authorization
    code flow once and caches the result.

    Example:
        >>> config = ClientConfig.from_json(load_client_credentials("credentials.json"))
        >>> auth = GoogleOAuth(config, token_path="token.json")
        >>> drive_service = auth.build_service("drive", "v3")
    """

    def __init__(
        self,
        config: ClientConfig,
        token_path: str | Path | None = None,
        code_provider: CodeProvider | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            config: Parsed client configuration.
            token_path: Path to store/load tokens. Defaults to ./token.json.
            code_provider: Supplies the authorization code for a URL.
                Defaults to console_code_provider.
        """
        self.config = config
        self.token_path = Path(token_path) if token_path else DEFAULT_TOKEN
        self.code_provider = code_provider or console_code_provider
        self.required_scopes = list(config.scopes)

        self.session = OAuth2Session(
            client_id=config.client_id,
            client_secret=config.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri=config.redirect_uri,
            token_endpoint=config.token_uri,
            token_endpoint_auth_method="client_secret_post",
        )

        self.token: OAuthToken | None = None
        self._state: str | None = None

    @classmethod
    def from_credentials_file(
        cls,
        credentials_path: str | Path,
        scopes: list[str] | None = None,
        token_path: str | Path | None = None,
        code_provider: CodeProvider | None = None,
    ) -> GoogleOAuth:
        """Read credentials.json and build a GoogleOAuth for the given scopes."""
        data = load_client_credentials(credentials_path)
        config = ClientConfig.from_json(data, scopes)
        return cls(config, token_path=token_path, code_provider=code_provider)

    def _missing_scopes(self, token: OAuthToken) -> set[str]:
        return set(self.required_scopes) - set(token.scopes)

    def load_cached_token(self) -> OAuthToken | None:
        """Load the cached token, or None if it is absent or unusable."""
        try:
            token = load_token(self.token_path)
        except FileNotFoundError:
            logger.info("No existing token found")
            return None
        except TokenError as e:
            logger.warning(f"Ignoring cached token: {e}")
            return None

        missing = self._missing_scopes(token)
        if missing:
            logger.warning(f"Token missing required scopes: {missing}")
            return None

        logger.info(f"Loaded token with scopes: {token.scopes}")
        return token

    def persist_token(self, token: OAuthToken) -> None:
        """Save token to the cache file."""
        print(f"Saving credential file to: {self.token_path}")
        save_token(
            self.token_path,
            token,
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            token_uri=self.config.token_uri,
        )

    def get_authorization_url(self) -> str:
        """Start OAuth authorization flow.

        Returns:
            Authorization URL for user to visit.
        """
        authorization_url, state = self.session.create_authorization_url(
            self.config.auth_uri,
            access_type="offline",
            prompt="consent",
        )

        self._state = state
        return authorization_url

    def interactive_authorize(self) -> OAuthToken:
        """Obtain a new token through the code provider.

        Returns:
            The newly issued token. It is not persisted here.

        Raises:
            AuthorizationError: If no code was supplied or the exchange failed.
            ScopeMismatchError: If the granted scopes are insufficient.
        """
        url = self.get_authorization_url()
        try:
            response = self.code_provider(url)
        except EOFError as e:
            raise AuthorizationError("Unable to read authorization code") from e

        response = (response or "").strip()
        if not response:
            raise AuthorizationError("No authorization code provided")

        # Accept either the bare code or the full redirect URL
        if response.startswith(("http://", "https://")):
            kwargs: dict[str, Any] = {"authorization_response": response}
        else:
            kwargs = {"code": response}

        try:
            raw_token = self.session.fetch_token(
                self.config.token_uri,
                state=self._state,
                **kwargs,
            )
        except (AuthlibBaseError, requests.RequestException) as e:
            raise AuthorizationError(f"Unable to retrieve token from web: {e}") from e

        if not raw_token or not raw_token.get("access_token"):
            raise AuthorizationError("Token endpoint returned no access token")

        token = OAuthToken.from_authlib(raw_token, self.required_scopes)
        missing = self._missing_scopes(token)
        if missing:
            raise ScopeMismatchError(missing)

        logger.info(f"Authorized with scopes: {token.scopes}")
        return token

    def ensure_token(self) -> OAuthToken:
        """Return a usable token, authorizing interactively if needed."""
        if self.token is not None:
            return self.token

        token = self.load_cached_token()
        if token is None:
            token = self.interactive_authorize()
            self.persist_token(token)

        self.token = token
        self.session.token = token.to_authlib()
        return token

    def is_authorized(self) -> bool:
        """Check for a cached token with the required scopes, without prompting."""
        if self.token is not None:
            return not self._missing_scopes(self.token)
        return self.load_cached_token() is not None

    def get_credentials(self) -> GoogleCredentials:
        """Get Google Credentials object for API client libraries.

        google-auth refreshes the access token on its own once it expires,
        using the refresh token carried here.
        """
        token = self.ensure_token()

        # google-auth compares against naive UTC datetimes
        expiry = token.expiry.replace(tzinfo=None) if token.expiry else None

        return GoogleCredentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=self.config.token_uri,
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            scopes=self.required_scopes,
            expiry=expiry,
        )

    def build_service(self, service_name: str = "docs", version: str = "v1"):
        """Build a Google API service with current credentials.

        Args:
            service_name: Name of the service (e.g., 'docs', 'drive').
            version: API version (e.g., 'v1').

        Returns:
            Google API service object.
        """
        creds = self.get_credentials()
        return build(service_name, version, credentials=creds)

    def revoke_token(self) -> None:
        """Revoke the cached token and clear local storage."""
        token = self.token or self.load_cached_token()
        try:
            if token is None:
                logger.warning("No token to revoke")
            else:
                # The token travels as a parameter, not as a bearer header
                self.session.post(
                    REVOKE_URL,
                    params={"token": token.access_token},
                    withhold_token=True,
                )
        except (AuthlibBaseError, requests.RequestException) as e:
            logger.warning(f"Failed to revoke token remotely: {e}")
        finally:
            if self.token_path.exists():
                self.token_path.unlink()
            self.token = None

        logger.info("Token revoked successfully")

    def get_token_info(self) -> dict[str, Any]:
        """Get information about the cached token.

        Returns:
            Dictionary with token status, scopes, expiry, etc.
        """
        token = self.token
        if token is None:
            try:
                token = load_token(self.token_path)
            except FileNotFoundError:
                return {"status": "no_token"}
            except TokenError as e:
                return {"status": "unreadable", "error": str(e)}

        missing = sorted(self._missing_scopes(token))
        if missing:
            status = "scope_mismatch"
        elif token.is_expired():
            status = "expired"
        else:
            status = "valid"

        if token.expires_at is not None:
            expires_in = token.expires_at - datetime.now().timestamp()
            expires_str = str(timedelta(seconds=int(max(0, expires_in))))
        else:
            expires_str = "unknown"

        return {
            "status": status,
            "scopes": token.scopes,
            "missing_scopes": missing,
            "expires_in": expires_str,
            "has_refresh_token": bool(token.refresh_token),
        }
