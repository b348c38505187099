# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Comparison of same-named snippets across documents."""

from typing import Any, ClassVar, cast

from spdxcmp.differences import FileDifference, ItemDifference, SnippetDifference
from spdxcmp.file_comparer import FileComparer
from spdxcmp.item_comparer import (
    ITEM_FIELDS,
    ComparedField,
    FieldStrategy,
    ItemComparer,
    value_field,
)
from spdxcmp.model import SpdxFile, SpdxItem, SpdxSnippet
from spdxcmp.translator import LicenseIdTranslator


def _unique_from_file(
    snippet_a: SpdxSnippet, snippet_b: SpdxSnippet, _: object
) -> tuple[SpdxFile, ...]:
    file_a = snippet_a.snippet_from_file
    file_b = snippet_b.snippet_from_file
    if file_a is None:
        return ()
    if file_b is None or file_a.name != file_b.name:
        return (file_a,)
    return ()


SNIPPET_FIELDS: tuple[ComparedField, ...] = ITEM_FIELDS + (
    value_field("byte_range"),
    value_field("line_range"),
    ComparedField("snippet_from_file", FieldStrategy.PAIRWISE, _unique_from_file),
)


class SnippetComparer(ItemComparer):
    """Compare one snippet across the documents it appears in.

    Snippets taken from files of the same name are compared through a file
    comparer; files of different names are reported as unique.
    """

    FIELDS: ClassVar[tuple[ComparedField, ...]] = SNIPPET_FIELDS
    DIFFERENCE_TYPE: ClassVar[type[ItemDifference]] = SnippetDifference

    def __init__(self, translator: LicenseIdTranslator) -> None:
        super().__init__(translator)
        self._from_file_differences: dict[tuple[int, int], FileDifference] = {}

    def add_document_snippet(self, document_index: int, snippet: SpdxSnippet) -> None:
        """Add the snippet found in one document."""
        self.add_document_item(document_index, snippet)

    def is_snippet_from_file_equal(self) -> bool:
        return self.is_field_equal("snippet_from_file") and not self._from_file_differences

    def get_snippet_from_file_difference(
        self, document_a: int, document_b: int
    ) -> FileDifference | None:
        """Return the difference of the snippet files, if any."""
        self._check_ready()
        self._item(document_a)
        self._item(document_b)
        return self._from_file_differences.get((document_a, document_b))

    def _compare_pair(
        self, document_a: int, item_a: SpdxItem, document_b: int, item_b: SpdxItem
    ) -> dict[tuple[int, int], Any]:
        file_a = cast(SpdxSnippet, item_a).snippet_from_file
        file_b = cast(SpdxSnippet, item_b).snippet_from_file
        if file_a is None or file_b is None or file_a.name != file_b.name:
            return {}
        comparer = FileComparer(self._translator)
        comparer.add_document_file(document_a, file_a)
        comparer.add_document_file(document_b, file_b)
        if not comparer.is_difference_found():
            return {}
        return {
            (document_a, document_b): comparer.get_file_difference(document_a, document_b),
            (document_b, document_a): comparer.get_file_difference(document_b, document_a),
        }

    def _store_pair_records(self, records: dict[tuple[int, int], Any]) -> None:
        self._from_file_differences.update(records)

    def _difference_details(self, document_a: int, document_b: int) -> dict[str, Any]:
        file_difference = self._from_file_differences.get((document_a, document_b))
        details: dict[str, Any] = {"snippet_from_file_difference": file_difference}
        if file_difference is not None:
            details["snippet_from_file_equal"] = False
        return details
