# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Comparison of same-named packages across documents."""

import logging
from typing import Any, ClassVar, cast

from spdxcmp.differences import FileDifference, ItemDifference, PackageDifference
from spdxcmp.file_comparer import FileComparer
from spdxcmp.helpers import verification_codes_equal
from spdxcmp.item_comparer import (
    ITEM_FIELDS,
    ComparedField,
    FieldStrategy,
    ItemComparer,
    license_field,
    text_field,
    unique_field,
    value_field,
)
from spdxcmp.model import SpdxFile, SpdxItem, SpdxPackage
from spdxcmp.translator import LicenseIdTranslator

logger = logging.getLogger(__name__)


def _unique_files_by_name(
    package_a: SpdxPackage, package_b: SpdxPackage, _: object
) -> tuple[SpdxFile, ...]:
    names_b = {file.name for file in package_b.files}
    return tuple(file for file in package_a.files if file.name not in names_b)


PACKAGE_FIELDS: tuple[ComparedField, ...] = ITEM_FIELDS + (
    text_field("version_info"),
    text_field("package_file_name"),
    text_field("supplier"),
    text_field("originator"),
    text_field("download_location"),
    ComparedField(
        "verification_code",
        FieldStrategy.BASELINE,
        lambda a, b, _: verification_codes_equal(a.verification_code, b.verification_code),
    ),
    text_field("source_info"),
    license_field("license_declared"),
    text_field("summary"),
    text_field("description"),
    text_field("homepage"),
    value_field("files_analyzed"),
    unique_field("checksums"),
    unique_field("external_refs"),
    ComparedField("files", FieldStrategy.PAIRWISE, _unique_files_by_name),
)


class PackageComparer(ItemComparer):
    """Compare one package, including its files, across documents."""

    FIELDS: ClassVar[tuple[ComparedField, ...]] = PACKAGE_FIELDS
    DIFFERENCE_TYPE: ClassVar[type[ItemDifference]] = PackageDifference

    def __init__(self, translator: LicenseIdTranslator) -> None:
        super().__init__(translator)
        self._file_differences: dict[tuple[int, int], tuple[FileDifference, ...]] = {}

    def add_document_package(self, document_index: int, package: SpdxPackage) -> None:
        """Add the package found in one document."""
        self.add_document_item(document_index, package)

    def is_files_equal(self) -> bool:
        """Return whether every document lists the same, equal files."""
        return self.is_field_equal("files") and not any(self._file_differences.values())

    def get_unique_files(self, document_a: int, document_b: int) -> tuple[SpdxFile, ...]:
        return self.get_unique("files", document_a, document_b)

    def get_file_differences(
        self, document_a: int, document_b: int
    ) -> tuple[FileDifference, ...]:
        """Return the differences of same-named package files."""
        self._check_ready()
        self._item(document_a)
        self._item(document_b)
        return self._file_differences.get((document_a, document_b), ())

    def get_package_difference(
        self, document_a: int, document_b: int
    ) -> PackageDifference:
        return cast(PackageDifference, self.get_difference(document_a, document_b))

    def _compare_pair(
        self, document_a: int, item_a: SpdxItem, document_b: int, item_b: SpdxItem
    ) -> dict[tuple[int, int], Any]:
        package_a = cast(SpdxPackage, item_a)
        package_b = cast(SpdxPackage, item_b)
        forward: list[FileDifference] = []
        backward: list[FileDifference] = []
        files_b = {file.name: file for file in package_b.files}
        for file_a in package_a.files:
            file_b = files_b.get(file_a.name)
            if file_b is None:
                continue
            comparer = FileComparer(self._translator)
            comparer.add_document_file(document_a, file_a)
            comparer.add_document_file(document_b, file_b)
            if comparer.is_difference_found():
                forward.append(comparer.get_file_difference(document_a, document_b))
                backward.append(comparer.get_file_difference(document_b, document_a))
        if forward:
            logger.debug(
                f"Package files differ (package={package_a.name} files={len(forward)})"
            )
        return {
            (document_a, document_b): tuple(forward),
            (document_b, document_a): tuple(backward),
        }

    def _store_pair_records(self, records: dict[tuple[int, int], Any]) -> None:
        self._file_differences.update(records)

    def _difference_details(self, document_a: int, document_b: int) -> dict[str, Any]:
        file_differences = self._file_differences.get((document_a, document_b), ())
        details: dict[str, Any] = {"file_differences": file_differences}
        if file_differences:
            details["files_equal"] = False
        return details
