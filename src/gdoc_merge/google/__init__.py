"""Google OAuth and API authentication utilities."""

from gdoc_merge.google.exceptions import (
    AuthorizationError,
    CredentialsNotFoundError,
    GoogleAPIError,
    GoogleAuthError,
    InvalidCredentialsError,
    ScopeMismatchError,
    TokenError,
)
from gdoc_merge.google.oauth import (
    ClientConfig,
    GoogleOAuth,
    console_code_provider,
    load_client_credentials,
)
from gdoc_merge.google.token import OAuthToken, load_token, save_token

__all__ = [
    "GoogleOAuth",
    "ClientConfig",
    "OAuthToken",
    "console_code_provider",
    "load_client_credentials",
    "load_token",
    "save_token",
    "GoogleAuthError",
    "GoogleAPIError",
    "CredentialsNotFoundError",
    "InvalidCredentialsError",
    "TokenError",
    "AuthorizationError",
    "ScopeMismatchError",
]
