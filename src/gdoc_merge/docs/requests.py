"""Docs batchUpdate edit operations.

Each operation renders itself to the request dict the Docs API expects.
The service applies a batch in list order, so an insertion shifts every
later offset. Edits that target fixed indexes must therefore run from the
end of the document towards the beginning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


class EditOrderError(ValueError):
    """Raised when index-targeted edits would shift each other's offsets."""

    pass


@dataclass(frozen=True)
class InsertText:
    """Insert text at a body index."""

    index: int
    text: str

    @property
    def target_index(self) -> int:
        return self.index

    def to_request(self) -> dict[str, Any]:
        return {
            "insertText": {
                "location": {"index": self.index},
                "text": self.text,
            }
        }


@dataclass(frozen=True)
class InsertTableRow:
    """Insert a row next to a cell of the table starting at table_start_index."""

    table_start_index: int
    row_index: int = 0
    column_index: int = 0
    insert_below: bool = True

    @property
    def target_index(self) -> int:
        return self.table_start_index

    def to_request(self) -> dict[str, Any]:
        return {
            "insertTableRow": {
                "insertBelow": self.insert_below,
                "tableCellLocation": {
                    "tableStartLocation": {"index": self.table_start_index},
                    "rowIndex": self.row_index,
                    "columnIndex": self.column_index,
                },
            }
        }


@dataclass(frozen=True)
class ReplaceAllText:
    """Replace every occurrence of ``find`` with ``replace``."""

    find: str
    replace: str
    match_case: bool = True

    # Not tied to an offset
    target_index = None

    def to_request(self) -> dict[str, Any]:
        return {
            "replaceAllText": {
                "containsText": {"text": self.find, "matchCase": self.match_case},
                "replaceText": self.replace,
            }
        }


EditOperation = Union[InsertText, InsertTableRow, ReplaceAllText]


def check_edit_order(edits: list[EditOperation]) -> None:
    """Verify index-targeted edits run from the end of the document backwards.

    Replace-all operations match by content and are skipped.

    Raises:
        EditOrderError: If an edit targets a later index than one before it.
    """
    previous: tuple[int, int] | None = None
    for position, edit in enumerate(edits):
        index = edit.target_index
        if index is None:
            continue
        if previous is not None and index > previous[1]:
            raise EditOrderError(
                f"Edit {position} targets index {index} after edit {previous[0]} "
                f"targeted index {previous[1]}; order index-based edits from the "
                "end of the document towards the beginning"
            )
        previous = (position, index)


def to_requests(edits: list[EditOperation]) -> list[dict[str, Any]]:
    """Render edits to the batchUpdate ``requests`` list."""
    return [edit.to_request() for edit in edits]
