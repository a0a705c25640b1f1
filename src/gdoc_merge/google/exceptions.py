"""Google authentication and API exceptions."""


class GoogleAuthError(Exception):
    """Base exception for Google authentication errors."""

    pass


class CredentialsNotFoundError(GoogleAuthError):
    """Raised when the OAuth credentials file is missing or unreadable."""

    def __init__(self, path: str, reason: str | None = None):
        self.path = path
        message = f"Credentials file not found at {path}. "
        if reason:
            message = f"Unable to read credentials file {path}: {reason}. "
        super().__init__(message + "Please download OAuth credentials from Google Cloud Console.")


class InvalidCredentialsError(GoogleAuthError):
    """Raised when the credentials file cannot be parsed into a client config."""

    pass


class TokenError(GoogleAuthError):
    """Raised when there's an issue reading or writing the OAuth token."""

    pass


class AuthorizationError(GoogleAuthError):
    """Raised when interactive authorization or the code exchange fails."""

    pass


class ScopeMismatchError(AuthorizationError):
    """Raised when token scopes don't match required scopes."""

    def __init__(self, missing_scopes: set[str]):
        self.missing_scopes = missing_scopes
        super().__init__(f"Token missing required scopes: {missing_scopes}")


class GoogleAPIError(Exception):
    """Raised when a Drive or Docs API call fails.

    ``status_code`` is None when no HTTP response was received.
    """

    def __init__(self, operation: str, status_code: int | None, message: str):
        self.operation = operation
        self.status_code = status_code
        self.message = message
        reason = status_code if status_code is not None else "no response"
        super().__init__(f"{operation} failed ({reason}): {message}")
