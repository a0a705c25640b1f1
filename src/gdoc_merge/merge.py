"""Copy a template document and fill it in with one batch update."""

from __future__ import annotations

import logging

from gdoc_merge.config import MergeSettings
from gdoc_merge.docs import BatchResult, DocsClient, EditOperation
from gdoc_merge.docs.requests import InsertTableRow, InsertText, ReplaceAllText
from gdoc_merge.drive import DriveClient

logger = logging.getLogger(__name__)


def build_batch_edits(settings: MergeSettings) -> list[EditOperation]:
    """Edits applied to the copied template.

    Index-based edits come first and run from the end of the document
    towards the beginning. Placeholder replacements follow.
    """
    edits: list[EditOperation] = [
        InsertText(index=settings.insert_index, text=settings.insert_text),
        InsertTableRow(table_start_index=settings.table_index, insert_below=True),
    ]
    edits.extend(ReplaceAllText(find=find, replace=replace) for find, replace in settings.replacements)
    return edits


def run_merge(settings: MergeSettings, drive: DriveClient, docs: DocsClient) -> BatchResult:
    """Copy the source document and apply the batch edits to the copy.

    Raises:
        GoogleAPIError: If the copy or the batch update is rejected. A
            failed copy means no batch update is attempted.
    """
    copy = drive.copy_file(settings.source_document_id, settings.copy_name)

    edits = build_batch_edits(settings)
    result = docs.batch_update(copy.id, edits)

    logger.info(
        f"Applied {len(result.replies)} edits to {copy.id} "
        f"({result.occurrences_changed} replacements)"
    )
    return result
