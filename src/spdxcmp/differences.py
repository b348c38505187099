# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Immutable records describing how same-named entities diverge."""

from dataclasses import dataclass, fields

from spdxcmp.model import (
    AnyLicenseInfo,
    Annotation,
    Checksum,
    ExternalRef,
    Relationship,
    SpdxFile,
)

_EQUAL_SUFFIX = "_equal"


class _FieldFlags:
    """Mixin deriving the diverging field names from ``*_equal`` flags."""

    def differing_fields(self) -> tuple[str, ...]:
        """Return the names of the fields whose equality flag is ``False``."""
        return tuple(
            field.name[: -len(_EQUAL_SUFFIX)]
            for field in fields(self)  # type: ignore[arg-type]
            if field.name.endswith(_EQUAL_SUFFIX) and not getattr(self, field.name)
        )

    @property
    def difference_found(self) -> bool:
        return bool(self.differing_fields())


@dataclass(frozen=True)
class ExtractedLicenseDifference(_FieldFlags):
    """Represent text-equal extracted licenses whose metadata differs.

    Attributes:
        license_text: Extracted text of the first license.
        id_a: License id in the first document.
        id_b: License id in the second document.
        name_a: License name in the first document.
        name_b: License name in the second document.
        name_equal: Whether the names are equal.
        comment_a: Comment in the first document.
        comment_b: Comment in the second document.
        comment_equal: Whether the comments are equal.
        see_also_a: Source URLs in the first document.
        see_also_b: Source URLs in the second document.
        see_also_equal: Whether the source URLs are equal.
    """

    license_text: str | None
    id_a: str
    id_b: str
    name_a: str | None
    name_b: str | None
    name_equal: bool
    comment_a: str | None
    comment_b: str | None
    comment_equal: bool
    see_also_a: tuple[str, ...]
    see_also_b: tuple[str, ...]
    see_also_equal: bool


@dataclass(frozen=True)
class AmbiguousMatchWarning:
    """Represent an extracted license whose text matches several candidates.

    The first candidate in document order is used for the id translation.
    """

    license_id: str
    chosen_id: str
    candidate_ids: tuple[str, ...]


@dataclass(frozen=True)
class ReviewerDifference(_FieldFlags):
    """Represent one reviewer whose review date or comment differs."""

    reviewer: str
    date_a: str | None
    date_b: str | None
    date_equal: bool
    comment_a: str | None
    comment_b: str | None
    comment_equal: bool


@dataclass(frozen=True, kw_only=True)
class ItemDifference(_FieldFlags):
    """Represent the diverging fields of two same-named items.

    Attributes:
        name: Shared item name.
        spdx_id_a: Element id in the first document.
        spdx_id_b: Element id in the second document.
    """

    name: str
    spdx_id_a: str
    spdx_id_b: str
    comment_equal: bool = True
    license_concluded_equal: bool = True
    copyright_text_equal: bool = True
    license_comments_equal: bool = True
    license_info_from_files_equal: bool = True
    unique_license_info_from_files_a: tuple[AnyLicenseInfo, ...] = ()
    unique_license_info_from_files_b: tuple[AnyLicenseInfo, ...] = ()
    relationships_equal: bool = True
    unique_relationships_a: tuple[Relationship, ...] = ()
    unique_relationships_b: tuple[Relationship, ...] = ()
    annotations_equal: bool = True
    unique_annotations_a: tuple[Annotation, ...] = ()
    unique_annotations_b: tuple[Annotation, ...] = ()


@dataclass(frozen=True, kw_only=True)
class FileDifference(ItemDifference):
    """Represent the diverging fields of two same-named files."""

    checksums_equal: bool = True
    unique_checksums_a: tuple[Checksum, ...] = ()
    unique_checksums_b: tuple[Checksum, ...] = ()
    file_types_equal: bool = True
    contributors_equal: bool = True
    notice_text_equal: bool = True
    file_dependencies_equal: bool = True


@dataclass(frozen=True, kw_only=True)
class PackageDifference(ItemDifference):
    """Represent the diverging fields of two same-named packages."""

    version_info_equal: bool = True
    package_file_name_equal: bool = True
    supplier_equal: bool = True
    originator_equal: bool = True
    download_location_equal: bool = True
    verification_code_equal: bool = True
    source_info_equal: bool = True
    license_declared_equal: bool = True
    summary_equal: bool = True
    description_equal: bool = True
    homepage_equal: bool = True
    files_analyzed_equal: bool = True
    checksums_equal: bool = True
    unique_checksums_a: tuple[Checksum, ...] = ()
    unique_checksums_b: tuple[Checksum, ...] = ()
    external_refs_equal: bool = True
    unique_external_refs_a: tuple[ExternalRef, ...] = ()
    unique_external_refs_b: tuple[ExternalRef, ...] = ()
    files_equal: bool = True
    unique_files_a: tuple[SpdxFile, ...] = ()
    unique_files_b: tuple[SpdxFile, ...] = ()
    file_differences: tuple[FileDifference, ...] = ()


@dataclass(frozen=True, kw_only=True)
class SnippetDifference(ItemDifference):
    """Represent the diverging fields of two same-named snippets."""

    byte_range_equal: bool = True
    line_range_equal: bool = True
    snippet_from_file_equal: bool = True
    unique_snippet_from_file_a: tuple[SpdxFile, ...] = ()
    unique_snippet_from_file_b: tuple[SpdxFile, ...] = ()
    snippet_from_file_difference: FileDifference | None = None
