# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Comparison of same-named files across documents."""

from typing import ClassVar, cast

from spdxcmp.differences import FileDifference, ItemDifference
from spdxcmp.item_comparer import (
    ITEM_FIELDS,
    ComparedField,
    ItemComparer,
    text_field,
    text_set_field,
    unique_field,
)
from spdxcmp.model import SpdxFile

FILE_FIELDS: tuple[ComparedField, ...] = ITEM_FIELDS + (
    unique_field("checksums"),
    text_set_field("file_types"),
    text_set_field("contributors"),
    text_field("notice_text"),
    text_set_field("file_dependencies"),
)


class FileComparer(ItemComparer):
    """Compare one file across the documents it appears in."""

    FIELDS: ClassVar[tuple[ComparedField, ...]] = FILE_FIELDS
    DIFFERENCE_TYPE: ClassVar[type[ItemDifference]] = FileDifference

    def add_document_file(self, document_index: int, file: SpdxFile) -> None:
        """Add the file found in one document."""
        self.add_document_item(document_index, file)

    def get_file_difference(self, document_a: int, document_b: int) -> FileDifference:
        return cast(FileDifference, self.get_difference(document_a, document_b))
