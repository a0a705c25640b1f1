"""Google Docs API client implementation."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from gdoc_merge.docs.requests import EditOperation, check_edit_order, to_requests
from gdoc_merge.google import GoogleOAuth
from gdoc_merge.google.api import execute

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """Represents a Google Doc."""

    id: str
    title: str
    body_text: str = ""
    revision_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class BatchResult:
    """Response of a batchUpdate call.

    ``replies`` holds one entry per submitted request, in request order.
    """

    document_id: str
    replies: list[dict[str, Any]]
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def occurrences_changed(self) -> int:
        """Total replacements made by replaceAllText requests."""
        return sum(
            reply.get("replaceAllText", {}).get("occurrencesChanged", 0) for reply in self.replies
        )

    def to_json(self) -> str:
        return json.dumps(self.raw, indent=2)


class DocsClient:
    """Google Docs API client.

    Usage:
        client = DocsClient(auth)

        doc = client.get_document(doc_id)
        print(doc.body_text)

        result = client.batch_update(doc_id, [InsertText(1, "Hello")])
    """

    def __init__(self, auth: GoogleOAuth | None = None, service: Any = None) -> None:
        if auth is None and service is None:
            raise ValueError("DocsClient needs either an auth manager or a service")
        self._auth = auth
        self._service = service

    def _get_service(self) -> Any:
        """Get or create Docs API service."""
        if self._service is None:
            self._service = self._auth.build_service("docs", "v1")
        return self._service

    def get_document(self, document_id: str) -> Document:
        """Get a document by ID.

        Raises:
            GoogleAPIError: If the document cannot be read.
        """
        service = self._get_service()
        result = execute(service.documents().get(documentId=document_id), "documents.get")
        return self._parse_document(result)

    def batch_update(self, document_id: str, edits: list[EditOperation]) -> BatchResult:
        """Submit edits as a single atomic batchUpdate.

        The service applies all edits or none of them.

        Args:
            document_id: Document ID.
            edits: Ordered edit operations.

        Returns:
            BatchResult with one reply per edit.

        Raises:
            EditOrderError: If index-based edits are not ordered end to front.
            GoogleAPIError: If the service rejects the batch.
        """
        check_edit_order(edits)
        service = self._get_service()

        logger.info(f"Submitting {len(edits)} edits to {document_id}")
        result = execute(
            service.documents().batchUpdate(
                documentId=document_id, body={"requests": to_requests(edits)}
            ),
            "documents.batchUpdate",
        )

        return BatchResult(
            document_id=result.get("documentId", document_id),
            replies=result.get("replies", []),
            raw=result,
        )

    def _parse_document(self, data: dict) -> Document:
        """Parse document from API response."""
        body_text = "".join(text for _, text in paragraph_runs(data))

        return Document(
            id=data["documentId"],
            title=data.get("title", ""),
            body_text=body_text,
            revision_id=data.get("revisionId"),
            raw=data,
        )


def _body_content(data: dict) -> list[dict]:
    return data.get("body", {}).get("content", [])


def table_start_indexes(data: dict) -> list[int]:
    """Start index of every top-level table in the document body."""
    return [
        element.get("startIndex", 0) for element in _body_content(data) if "table" in element
    ]


def paragraph_runs(data: dict) -> list[tuple[int, str]]:
    """Text runs of top-level paragraphs as (element position, content) pairs."""
    runs = []
    for position, element in enumerate(_body_content(data)):
        if "paragraph" not in element:
            continue
        for para_element in element["paragraph"].get("elements", []):
            text_run = para_element.get("textRun")
            if text_run:
                runs.append((position, text_run.get("content", "")))
    return runs


def describe_document(data: dict, include_json: bool = False) -> list[str]:
    """Diagnostic listing of a document's structural elements.

    Args:
        data: Raw document as returned by documents.get.
        include_json: Append each paragraph element's JSON.

    Returns:
        Lines to print.
    """
    lines = [f"The title of the doc is: {data.get('title', '')}"]

    for position, element in enumerate(_body_content(data)):
        if "table" in element:
            lines.append(f"Table start index: {element.get('startIndex', 0)}")
            lines.append(f"Element: {position}")
            lines.append("-------")
        elif "paragraph" in element:
            for para_element in element["paragraph"].get("elements", []):
                text_run = para_element.get("textRun")
                if text_run:
                    lines.append(text_run.get("content", "").rstrip("\n"))
            lines.append(f"Element: {position}")
            if include_json:
                lines.append(json.dumps(element))
            lines.append("-------")

    return lines
