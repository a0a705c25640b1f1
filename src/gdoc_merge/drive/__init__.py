"""Google Drive API client.

Usage:
    from gdoc_merge.drive import DriveClient

    client = DriveClient(auth)
    copy = client.copy_file(template_id, "Merged output")
"""

from __future__ import annotations

from gdoc_merge.drive.client import DriveClient, DriveFile

__all__ = ["DriveClient", "DriveFile"]
