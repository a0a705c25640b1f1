"""Google Docs API client and batch edit operations.

Usage:
    from gdoc_merge.docs import DocsClient, InsertText, ReplaceAllText

    client = DocsClient(auth)
    result = client.batch_update(doc_id, [
        InsertText(index=120, text="Hello"),
        ReplaceAllText("{{name}}", "World"),
    ])
"""

from __future__ import annotations

from gdoc_merge.docs.client import (
    BatchResult,
    DocsClient,
    Document,
    describe_document,
    paragraph_runs,
    table_start_indexes,
)
from gdoc_merge.docs.requests import (
    EditOperation,
    EditOrderError,
    InsertTableRow,
    InsertText,
    ReplaceAllText,
    check_edit_order,
)

__all__ = [
    "DocsClient",
    "Document",
    "BatchResult",
    "describe_document",
    "paragraph_runs",
    "table_start_indexes",
    "EditOperation",
    "EditOrderError",
    "InsertText",
    "InsertTableRow",
    "ReplaceAllText",
    "check_edit_order",
]
