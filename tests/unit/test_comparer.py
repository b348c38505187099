# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for N-way SPDX document comparison."""

from collections.abc import Callable

import pytest

from spdxcmp.comparer import SpdxComparer, compare_documents
from spdxcmp.errors import CompareInputError, CompareStateError
from spdxcmp.matcher import LicenseTextMatcher
from spdxcmp.model import (
    Annotation,
    Checksum,
    CreationInfo,
    ExternalDocumentRef,
    ExtractedLicenseInfo,
    ListedLicense,
    Relationship,
    Review,
    SpdxDocument,
    SpdxFile,
    SpdxPackage,
    SpdxSnippet,
)
from spdxcmp.state import CompareState

CUSTOM_TEXT = "Permission to use this custom software is granted to everyone."


def _file(name: str, copyright_text: str = "Copyright Acme") -> SpdxFile:
    return SpdxFile(
        spdx_id=f"SPDXRef-{name}",
        name=name,
        copyright_text=copyright_text,
        checksums=(Checksum("SHA1", "aaaa"),),
    )


class _FailingMatcher(LicenseTextMatcher):
    def match(self, reference: str | None, candidate: str | None) -> bool:
        raise CompareInputError("matcher failure")


@pytest.mark.parametrize(
    "getter",
    [
        lambda comparer: comparer.is_difference_found(),
        lambda comparer: comparer.num_documents(),
        lambda comparer: comparer.get_spdx_document(0),
        lambda comparer: comparer.is_files_equal(),
        lambda comparer: comparer.get_unique_files(0, 1),
        lambda comparer: comparer.get_package_comparers(),
        lambda comparer: comparer.get_reviewer_differences(0, 1),
        lambda comparer: comparer.compare_license(0, None, 1, None),
    ],
)
def test_ph4_cmp_001_getters_before_compare_raise(
    getter: Callable[[SpdxComparer], object],
) -> None:
    comparer = SpdxComparer()

    with pytest.raises(CompareStateError, match="No compare has been performed"):
        getter(comparer)


def test_ph4_cmp_002_compare_requires_two_documents() -> None:
    comparer = SpdxComparer()

    with pytest.raises(CompareInputError, match="at least 2 SPDX documents"):
        comparer.compare([SpdxDocument(name="only")])

    assert comparer.state is CompareState.IDLE


def test_ph4_cmp_003_identical_documents_have_no_difference() -> None:
    document = SpdxDocument(
        name="doc",
        spec_version="SPDX-2.3",
        data_license=ListedLicense("CC0-1.0"),
        files=(_file("a.c"),),
        packages=(SpdxPackage(spdx_id="SPDXRef-pkg", name="pkg", files=(_file("b.c"),)),),
        creation_info=CreationInfo(creators=("Tool: scanner",), created="2024-01-01T00:00:00Z"),
    )

    comparer = compare_documents([document, document])

    assert comparer.state is CompareState.READY
    assert comparer.num_documents() == 2
    assert comparer.get_spdx_document(1) is document
    assert not comparer.is_difference_found()


def test_ph4_cmp_004_files_are_merged_by_name() -> None:
    document_a = SpdxDocument(name="a", files=(_file("b.c"), _file("a.c")))
    document_b = SpdxDocument(name="b", files=(_file("c.c"), _file("b.c", "Copyright Other")))

    comparer = compare_documents([document_a, document_b])

    assert not comparer.is_files_equal()
    assert [file.name for file in comparer.get_unique_files(0, 1)] == ["a.c"]
    assert [file.name for file in comparer.get_unique_files(1, 0)] == ["c.c"]
    differences = comparer.get_file_differences(0, 1)
    assert [difference.name for difference in differences] == ["b.c"]
    assert differences[0].differing_fields() == ("copyright_text",)


def test_ph4_cmp_005_package_files_count_as_document_files() -> None:
    document_a = SpdxDocument(
        name="a",
        packages=(SpdxPackage(spdx_id="SPDXRef-pkg", name="pkg", files=(_file("d.c"),)),),
    )
    document_b = SpdxDocument(name="b", files=(_file("d.c"),))

    comparer = compare_documents([document_a, document_b])

    assert comparer.get_unique_files(0, 1) == ()
    assert comparer.get_unique_files(1, 0) == ()
    assert comparer.get_file_differences(0, 1) == ()


def test_ph4_cmp_006_extracted_licenses_translate_between_documents() -> None:
    ref_1 = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)
    ref_7 = ExtractedLicenseInfo("LicenseRef-7", extracted_text=CUSTOM_TEXT)
    document_a = SpdxDocument(
        name="a",
        extracted_licenses=(ref_1,),
        packages=(SpdxPackage(spdx_id="SPDXRef-pkg", name="pkg", license_declared=ref_1),),
    )
    document_b = SpdxDocument(
        name="b",
        extracted_licenses=(ref_7,),
        packages=(SpdxPackage(spdx_id="SPDXRef-pkg", name="pkg", license_declared=ref_7),),
    )

    comparer = compare_documents([document_a, document_b])

    assert comparer.get_license_id_map(0, 1) == {"LicenseRef-1": "LicenseRef-7"}
    assert comparer.compare_license(0, ref_1, 1, ref_7)
    assert comparer.is_extracted_licensing_infos_equal()
    assert comparer.is_packages_equal()
    assert comparer.is_package_equal("pkg")
    assert not comparer.is_difference_found()


def test_ph4_cmp_007_extracted_license_differences_are_reported() -> None:
    document_a = SpdxDocument(
        name="a",
        extracted_licenses=(
            ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT, name="Custom"),
            ExtractedLicenseInfo("LicenseRef-2", extracted_text="Only in the first document."),
        ),
    )
    document_b = SpdxDocument(
        name="b",
        extracted_licenses=(
            ExtractedLicenseInfo("LicenseRef-7", extracted_text=CUSTOM_TEXT, name="Renamed"),
            ExtractedLicenseInfo("LicenseRef-8", extracted_text=CUSTOM_TEXT, name="Renamed"),
        ),
    )

    comparer = compare_documents([document_a, document_b])

    assert not comparer.is_extracted_licensing_infos_equal()
    assert [info.license_id for info in comparer.get_unique_extracted_licenses(0, 1)] == [
        "LicenseRef-2"
    ]
    assert [
        difference.id_b for difference in comparer.get_extracted_license_differences(0, 1)
    ] == ["LicenseRef-7", "LicenseRef-8"]
    assert comparer.get_ambiguous_license_matches(0, 1)[0].chosen_id == "LicenseRef-7"


def test_ph4_cmp_008_packages_are_paired_by_name() -> None:
    document_a = SpdxDocument(
        name="a",
        packages=(
            SpdxPackage(spdx_id="SPDXRef-1", name="shared", version_info="1.0"),
            SpdxPackage(spdx_id="SPDXRef-2", name="only-a"),
        ),
    )
    document_b = SpdxDocument(
        name="b",
        packages=(SpdxPackage(spdx_id="SPDXRef-3", name="shared", version_info="2.0"),),
    )

    comparer = compare_documents([document_a, document_b])

    assert not comparer.is_packages_equal()
    assert [package.name for package in comparer.get_unique_packages(0, 1)] == ["only-a"]
    assert comparer.get_unique_packages(1, 0) == ()
    assert [package.name for package in comparer.get_package_comparers()] == [
        "only-a",
        "shared",
    ]
    assert [package.name for package in comparer.get_package_differences()] == ["shared"]
    assert not comparer.is_package_equal("shared")
    assert comparer.is_package_equal("only-a")
    with pytest.raises(CompareInputError):
        comparer.is_package_equal("missing")


def test_ph4_cmp_009_duplicate_snippet_names_keep_the_first() -> None:
    document_a = SpdxDocument(
        name="a",
        snippets=(
            SpdxSnippet(spdx_id="SPDXRef-s1", name="snip", byte_range=(0, 1)),
            SpdxSnippet(spdx_id="SPDXRef-s2", name="snip", byte_range=(5, 9)),
        ),
    )
    document_b = SpdxDocument(
        name="b",
        snippets=(SpdxSnippet(spdx_id="SPDXRef-s3", name="snip", byte_range=(0, 1)),),
    )

    comparer = compare_documents([document_a, document_b])

    snippet_comparers = comparer.get_snippet_comparers()
    assert len(snippet_comparers) == 1
    assert snippet_comparers[0].document_indices == [0, 1]
    assert snippet_comparers[0].get_item(0).spdx_id == "SPDXRef-s1"
    assert comparer.get_snippet_differences() == []


def test_ph4_cmp_010_document_fields_compare_against_first_document() -> None:
    document_a = SpdxDocument(name="a", spec_version="SPDX-2.3", comment="first")
    document_b = SpdxDocument(
        name="b",
        spec_version="SPDX-2.2",
        comment=" first ",
        data_license=ListedLicense("CC0-1.0"),
    )

    comparer = compare_documents([document_a, document_b])

    assert not comparer.is_spdx_version_equal()
    assert not comparer.is_data_license_equal()
    assert comparer.is_document_comments_equal()
    assert comparer.is_difference_found()


def test_ph4_cmp_011_reviewers_report_unique_and_changed_reviews() -> None:
    document_a = SpdxDocument(
        name="a",
        reviewers=(
            Review("Person: Jane", date="2020-01-01", comment="ok"),
            Review("Person: Bob", date="2020-01-01"),
        ),
    )
    document_b = SpdxDocument(name="b", reviewers=(Review("Person: Jane", date="2021-01-01"),))

    comparer = compare_documents([document_a, document_b])

    assert not comparer.is_reviewers_equal()
    assert [review.reviewer for review in comparer.get_unique_reviewers(0, 1)] == [
        "Person: Bob"
    ]
    differences = comparer.get_reviewer_differences(0, 1)
    assert len(differences) == 1
    assert differences[0].differing_fields() == ("date", "comment")
    assert comparer.get_unique_reviewers(1, 0) == ()


def test_ph4_cmp_012_creator_information_is_compared() -> None:
    document_a = SpdxDocument(
        name="a",
        creation_info=CreationInfo(
            creators=("Tool: scanner", "Person: Jane"),
            created="2024-01-01T00:00:00Z",
            license_list_version="3.21",
        ),
    )
    document_b = SpdxDocument(
        name="b",
        creation_info=CreationInfo(
            creators=("Tool: scanner",),
            created="2024-02-01T00:00:00Z",
            license_list_version="3.21",
        ),
    )

    comparer = compare_documents([document_a, document_b])

    assert not comparer.is_creator_information_equal()
    assert comparer.get_unique_creators(0, 1) == ("Person: Jane",)
    assert comparer.get_unique_creators(1, 0) == ()
    assert not comparer.is_creation_dates_equal()
    assert comparer.is_license_list_version_equal()
    assert comparer.is_creator_comments_equal()


def test_ph4_cmp_013_document_level_sets_are_compared_per_pair() -> None:
    annotation = Annotation("Person: Jane", "REVIEW", comment="looks fine")
    relationship = Relationship("DESCRIBES", "SPDXRef-pkg")
    reference = ExternalDocumentRef("DocumentRef-x", "https://example.org/spdx/x")
    document_a = SpdxDocument(
        name="a",
        annotations=(annotation,),
        relationships=(relationship,),
        external_document_refs=(reference,),
    )
    document_b = SpdxDocument(name="b", relationships=(relationship,))

    comparer = compare_documents([document_a, document_b])

    assert comparer.get_unique_document_annotations(0, 1) == (annotation,)
    assert not comparer.is_document_annotations_equal()
    assert comparer.is_document_relationships_equal()
    assert comparer.get_unique_external_document_refs(0, 1) == (reference,)
    assert comparer.get_unique_external_document_refs(1, 0) == ()


def test_ph4_cmp_014_three_documents_are_compared_pairwise() -> None:
    documents = [
        SpdxDocument(name="a", files=(_file("a.c"),)),
        SpdxDocument(name="b", files=(_file("a.c"),)),
        SpdxDocument(name="c", files=(_file("a.c", "Copyright Other"),)),
    ]

    comparer = compare_documents(documents)

    assert comparer.get_file_differences(0, 1) == ()
    assert len(comparer.get_file_differences(2, 0)) == 1
    assert len(comparer.get_file_differences(1, 2)) == 1
    with pytest.raises(CompareInputError):
        comparer.get_file_differences(0, 3)


def test_ph4_cmp_015_failed_compare_returns_to_idle() -> None:
    info = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)
    documents = [
        SpdxDocument(name="a", extracted_licenses=(info,)),
        SpdxDocument(name="b", extracted_licenses=(info,)),
    ]
    comparer = SpdxComparer(_FailingMatcher())

    with pytest.raises(CompareInputError, match="matcher failure"):
        comparer.compare(documents)

    assert comparer.state is CompareState.IDLE
    with pytest.raises(CompareStateError, match="No compare has been performed"):
        comparer.is_difference_found()


def test_ph4_cmp_016_compare_replaces_previous_results() -> None:
    comparer = SpdxComparer()
    comparer.compare([SpdxDocument(name="a"), SpdxDocument(name="b", comment="changed")])
    assert comparer.is_difference_found()

    comparer.compare([SpdxDocument(name="a"), SpdxDocument(name="b")])

    assert not comparer.is_difference_found()


def test_ph4_cmp_017_unique_files_and_single_copyright_difference() -> None:
    document_a = SpdxDocument(
        name="a", files=(_file("a.c"), _file("b.c", "Copyright X"), _file("c.c"))
    )
    document_b = SpdxDocument(name="b", files=(_file("a.c"), _file("b.c", "Copyright Y")))

    comparer = compare_documents([document_a, document_b])

    assert [file.name for file in comparer.get_unique_files(0, 1)] == ["c.c"]
    assert comparer.get_unique_files(1, 0) == ()
    differences = comparer.get_file_differences(0, 1)
    assert len(differences) == 1
    assert differences[0].name == "b.c"
    assert differences[0].differing_fields() == ("copyright_text",)


def test_ph4_cmp_018_kept_comparers_survive_a_later_compare() -> None:
    ref_1 = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)
    ref_7 = ExtractedLicenseInfo("LicenseRef-7", extracted_text=CUSTOM_TEXT)
    other_7 = ExtractedLicenseInfo("LicenseRef-7", extracted_text="A different license text.")

    def _documents(license_b: ExtractedLicenseInfo) -> list[SpdxDocument]:
        return [
            SpdxDocument(
                name="a",
                extracted_licenses=(ref_1,),
                packages=(
                    SpdxPackage(spdx_id="SPDXRef-pkg", name="pkg", license_concluded=ref_1),
                ),
            ),
            SpdxDocument(
                name="b",
                extracted_licenses=(license_b,),
                packages=(
                    SpdxPackage(spdx_id="SPDXRef-pkg", name="pkg", license_concluded=license_b),
                ),
            ),
        ]

    comparer = SpdxComparer()
    comparer.compare(_documents(ref_7))
    kept = comparer.get_package_comparers()[0]
    assert kept.get_package_difference(0, 1).license_concluded_equal

    comparer.compare(_documents(other_7))

    assert not comparer.get_package_comparers()[0].get_package_difference(
        0, 1
    ).license_concluded_equal
    assert kept.get_package_difference(0, 1).license_concluded_equal
    assert not kept.is_difference_found()


class _SwitchableMatcher(LicenseTextMatcher):
    fail = False

    def match(self, reference: str | None, candidate: str | None) -> bool:
        if self.fail:
            raise CompareInputError("matcher failure")
        return super().match(reference, candidate)


def test_ph4_cmp_019_kept_comparers_survive_a_failed_compare() -> None:
    ref_1 = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)
    documents = [
        SpdxDocument(
            name=name,
            extracted_licenses=(ref_1,),
            packages=(SpdxPackage(spdx_id="SPDXRef-pkg", name="pkg", license_concluded=ref_1),),
        )
        for name in ("a", "b")
    ]
    matcher = _SwitchableMatcher()
    comparer = SpdxComparer(matcher)
    comparer.compare(documents)
    kept = comparer.get_package_comparers()[0]

    matcher.fail = True
    with pytest.raises(CompareInputError, match="matcher failure"):
        comparer.compare(documents)

    assert comparer.state is CompareState.IDLE
    assert kept.get_package_difference(0, 1).license_concluded_equal


class _ReentrantMatcher(LicenseTextMatcher):
    def __init__(self) -> None:
        super().__init__()
        self.comparer: SpdxComparer | None = None
        self.errors: list[str] = []

    def match(self, reference: str | None, candidate: str | None) -> bool:
        assert self.comparer is not None
        assert self.comparer.state is CompareState.COMPARING
        with pytest.raises(CompareStateError) as excinfo:
            self.comparer.get_unique_files(0, 1)
        self.errors.append(str(excinfo.value))
        return super().match(reference, candidate)


def test_ph4_cmp_020_accessors_fail_while_compare_is_running() -> None:
    info = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)
    documents = [
        SpdxDocument(name="a", extracted_licenses=(info,)),
        SpdxDocument(name="b", extracted_licenses=(info,)),
    ]
    matcher = _ReentrantMatcher()
    comparer = SpdxComparer(matcher)
    matcher.comparer = comparer

    comparer.compare(documents)

    assert matcher.errors
    assert all(
        error
        == "Compare in progress - can not obtain compare results until compare has completed"
        for error in matcher.errors
    )
    assert comparer.state is CompareState.READY
    assert not comparer.is_difference_found()
