"""Helpers for executing googleapiclient requests."""

import json
import logging
from typing import Any

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from gdoc_merge.google.exceptions import GoogleAPIError

logger = logging.getLogger(__name__)

# Failures that happen before any HTTP status is available
TRANSPORT_ERRORS = (RefreshError, TransportError, httplib2.HttpLib2Error, OSError)


def _error_message(error: HttpError) -> str:
    """Pull the service's error message out of an HttpError body."""
    try:
        data = json.loads(error.content.decode("utf-8"))
        return data["error"]["message"]
    except (ValueError, KeyError, TypeError, AttributeError):
        return getattr(error, "reason", "") or str(error)


def execute(request: Any, operation: str) -> dict[str, Any]:
    """Execute an API request, translating failures to GoogleAPIError.

    Transport failures (timeouts, connection resets, a refresh token the
    provider no longer accepts) are reported the same way as error statuses,
    with ``status_code`` set to None. Nothing is retried.

    Args:
        request: A googleapiclient HttpRequest (anything with execute()).
        operation: Short name of the call, used in error messages.

    Returns:
        The decoded JSON response.

    Raises:
        GoogleAPIError: If the call did not succeed.
    """
    try:
        result = request.execute()
    except HttpError as e:
        status = getattr(e.resp, "status", None)
        message = _error_message(e)
        logger.error(f"{operation} failed with status {status}: {message}")
        raise GoogleAPIError(operation, status, message) from e
    except TRANSPORT_ERRORS as e:
        message = str(e) or type(e).__name__
        logger.error(f"{operation} failed before a response was received: {message}")
        raise GoogleAPIError(operation, None, message) from e

    logger.debug(f"{operation} succeeded")
    return result or {}
