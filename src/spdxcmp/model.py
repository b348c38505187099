# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""In-memory SPDX document model consumed by the comparers."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ListedLicense:
    """Represent a license from the SPDX license list.

    Attributes:
        license_id: SPDX license identifier.
        name: Full license name.
        license_text: Canonical license text.
        standard_license_template: License template; ``None`` when not provided.
        see_also: Reference URLs.
    """

    license_id: str
    name: str | None = None
    license_text: str | None = None
    standard_license_template: str | None = None
    see_also: tuple[str, ...] = ()


@dataclass(frozen=True)
class ListedLicenseException:
    """Represent an exception from the SPDX exception list."""

    exception_id: str
    name: str | None = None
    exception_text: str | None = None
    exception_template: str | None = None
    see_also: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractedLicenseInfo:
    """Represent a non-listed license carried inside one document.

    Attributes:
        license_id: Document-local ``LicenseRef-`` identifier.
        extracted_text: License text found in the package.
        name: License name.
        comment: Free-form comment.
        see_also: Source URLs.
    """

    license_id: str
    extracted_text: str | None = None
    name: str | None = None
    comment: str | None = None
    see_also: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConjunctiveLicenseSet:
    """Represent licenses joined by ``AND``."""

    members: tuple["AnyLicenseInfo", ...]


@dataclass(frozen=True)
class DisjunctiveLicenseSet:
    """Represent licenses joined by ``OR``."""

    members: tuple["AnyLicenseInfo", ...]


@dataclass(frozen=True)
class WithExceptionOperator:
    """Represent ``<license> WITH <exception>``."""

    license: "AnyLicenseInfo"
    exception: ListedLicenseException


@dataclass(frozen=True)
class OrLaterOperator:
    """Represent ``<license>+``."""

    license: "AnyLicenseInfo"


@dataclass(frozen=True)
class NoAssertionLicense:
    """Represent ``NOASSERTION``."""


@dataclass(frozen=True)
class NoneLicense:
    """Represent ``NONE``."""


AnyLicenseInfo = (
    ListedLicense
    | ExtractedLicenseInfo
    | ConjunctiveLicenseSet
    | DisjunctiveLicenseSet
    | WithExceptionOperator
    | OrLaterOperator
    | NoAssertionLicense
    | NoneLicense
)


@dataclass(frozen=True)
class Checksum:
    """Represent one checksum of a file or package."""

    algorithm: str
    value: str


@dataclass(frozen=True)
class Annotation:
    """Represent an annotation attached to a document or element."""

    annotator: str
    annotation_type: str
    date: str | None = None
    comment: str | None = None


@dataclass(frozen=True)
class Relationship:
    """Represent a relationship from an element to another element id."""

    relationship_type: str
    related_element_id: str
    comment: str | None = None


@dataclass(frozen=True)
class Review:
    """Represent a document review."""

    reviewer: str
    date: str | None = None
    comment: str | None = None


@dataclass(frozen=True)
class CreationInfo:
    """Represent document creation information.

    Attributes:
        creators: Creator strings such as ``Tool: x`` or ``Person: y``.
        created: Creation timestamp.
        comment: Creator comment.
        license_list_version: License list version used by the creators.
    """

    creators: tuple[str, ...] = ()
    created: str | None = None
    comment: str | None = None
    license_list_version: str | None = None


@dataclass(frozen=True)
class ExternalDocumentRef:
    """Represent a reference to another SPDX document."""

    external_document_id: str
    spdx_document_namespace: str
    checksum: Checksum | None = None


@dataclass(frozen=True)
class ExternalRef:
    """Represent a package external reference."""

    category: str
    reference_type: str
    locator: str
    comment: str | None = None


@dataclass(frozen=True)
class PackageVerificationCode:
    """Represent a package verification code."""

    value: str
    excluded_file_names: tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True)
class SpdxItem:
    """Represent the fields shared by files, packages and snippets.

    Attributes:
        spdx_id: Document-local element identifier.
        name: Item name; the key used to pair items across documents.
        license_concluded: Concluded license.
        license_info_from_files: Licenses seen in the item.
        copyright_text: Copyright text.
        comment: Free-form comment.
        license_comments: Comment on the licensing.
        annotations: Element annotations.
        relationships: Element relationships.
    """

    spdx_id: str
    name: str
    license_concluded: AnyLicenseInfo | None = None
    license_info_from_files: tuple[AnyLicenseInfo, ...] = ()
    copyright_text: str | None = None
    comment: str | None = None
    license_comments: str | None = None
    annotations: tuple[Annotation, ...] = ()
    relationships: tuple[Relationship, ...] = ()


@dataclass(frozen=True, kw_only=True)
class SpdxFile(SpdxItem):
    """Represent an SPDX file."""

    checksums: tuple[Checksum, ...] = ()
    file_types: tuple[str, ...] = ()
    contributors: tuple[str, ...] = ()
    notice_text: str | None = None
    file_dependencies: tuple[str, ...] = ()


@dataclass(frozen=True, kw_only=True)
class SpdxPackage(SpdxItem):
    """Represent an SPDX package and the files it contains."""

    version_info: str | None = None
    package_file_name: str | None = None
    supplier: str | None = None
    originator: str | None = None
    download_location: str | None = None
    verification_code: PackageVerificationCode | None = None
    checksums: tuple[Checksum, ...] = ()
    source_info: str | None = None
    license_declared: AnyLicenseInfo | None = None
    summary: str | None = None
    description: str | None = None
    homepage: str | None = None
    files_analyzed: bool = True
    files: tuple[SpdxFile, ...] = ()
    external_refs: tuple[ExternalRef, ...] = ()


@dataclass(frozen=True, kw_only=True)
class SpdxSnippet(SpdxItem):
    """Represent a snippet of an SPDX file.

    Attributes:
        snippet_from_file: File the snippet was taken from.
        byte_range: Inclusive ``(start, end)`` byte offsets.
        line_range: Inclusive ``(start, end)`` line numbers.
    """

    snippet_from_file: SpdxFile | None = None
    byte_range: tuple[int, int] | None = None
    line_range: tuple[int, int] | None = None


@dataclass(frozen=True, kw_only=True)
class SpdxDocument:
    """Represent one SPDX document.

    Attributes:
        name: Document name.
        spdx_id: Document identifier.
        spec_version: SPDX specification version.
        data_license: Document data license.
        comment: Document comment.
        namespace: Document namespace URI.
        creation_info: Creation information.
        reviewers: Document reviews.
        extracted_licenses: Non-listed licenses used in the document.
        files: Files described outside of packages.
        packages: Packages described by the document.
        snippets: Snippets described by the document.
        annotations: Document-level annotations.
        relationships: Document-level relationships.
        external_document_refs: References to other SPDX documents.
    """

    name: str
    spdx_id: str = "SPDXRef-DOCUMENT"
    spec_version: str | None = None
    data_license: AnyLicenseInfo | None = None
    comment: str | None = None
    namespace: str | None = None
    creation_info: CreationInfo = field(default_factory=CreationInfo)
    reviewers: tuple[Review, ...] = ()
    extracted_licenses: tuple[ExtractedLicenseInfo, ...] = ()
    files: tuple[SpdxFile, ...] = ()
    packages: tuple[SpdxPackage, ...] = ()
    snippets: tuple[SpdxSnippet, ...] = ()
    annotations: tuple[Annotation, ...] = ()
    relationships: tuple[Relationship, ...] = ()
    external_document_refs: tuple[ExternalDocumentRef, ...] = ()

    def all_files(self) -> list[SpdxFile]:
        """Return document files followed by package files, without repeats."""
        collected = dict.fromkeys(self.files)
        for package in self.packages:
            collected.update(dict.fromkeys(package.files))
        return list(collected)
