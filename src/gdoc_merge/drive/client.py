"""Google Drive API client implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from gdoc_merge.google import GoogleOAuth
from gdoc_merge.google.api import execute

logger = logging.getLogger(__name__)

FILE_FIELDS = "id, name, mimeType, webViewLink"


@dataclass
class DriveFile:
    """Represents a Google Drive file."""

    id: str
    name: str
    mime_type: str = ""
    web_view_link: str | None = None


class DriveClient:
    """Google Drive API client.

    Usage:
        client = DriveClient(auth)
        copy = client.copy_file(source_id, "Copy of template")

    A prebuilt service object can be passed instead of an auth manager.
    """

    def __init__(self, auth: GoogleOAuth | None = None, service: Any = None) -> None:
        if auth is None and service is None:
            raise ValueError("DriveClient needs either an auth manager or a service")
        self._auth = auth
        self._service = service

    def _get_service(self) -> Any:
        """Get or create Drive API service."""
        if self._service is None:
            self._service = self._auth.build_service("drive", "v3")
        return self._service

    def copy_file(self, source_id: str, name: str) -> DriveFile:
        """Copy a file, giving the copy a new name.

        Args:
            source_id: Drive file ID to copy.
            name: Name of the new file.

        Returns:
            The created copy.

        Raises:
            GoogleAPIError: If the copy is rejected (e.g. no access).
        """
        service = self._get_service()
        logger.info(f"Copying {source_id} to '{name}'")
        result = execute(
            service.files().copy(
                fileId=source_id,
                body={"name": name},
                fields=FILE_FIELDS,
                supportsAllDrives=True,
            ),
            "files.copy",
        )
        copy = self._parse_file(result)
        logger.info(f"Created copy {copy.id}")
        return copy

    def _parse_file(self, data: dict) -> DriveFile:
        """Parse file from API response."""
        return DriveFile(
            id=data["id"],
            name=data.get("name", ""),
            mime_type=data.get("mimeType", ""),
            web_view_link=data.get("webViewLink"),
        )
