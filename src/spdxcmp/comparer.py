# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""N-way structural comparison of SPDX documents.

``SpdxComparer.compare`` runs a fixed pipeline over K documents:

1. build the extracted license id translation for all K(K-1) ordered pairs;
2. compare document fields against document 0;
3. compare files, packages and snippets by name with a sorted merge;
4. compare reviewers, creators, annotations, relationships and external
   document references as per-pair sets.

Results are kept per ordered pair of document indices and are rebuilt from
scratch by every call to ``compare``.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from spdxcmp.differences import (
    AmbiguousMatchWarning,
    ExtractedLicenseDifference,
    FileDifference,
    ReviewerDifference,
)
from spdxcmp.errors import CompareInputError, CompareStateError
from spdxcmp.file_comparer import FileComparer
from spdxcmp.helpers import (
    external_document_refs_equal,
    find_unique,
    find_unique_strings,
    sort_key,
    sorted_merge_unique,
    strings_equal,
)
from spdxcmp.item_comparer import ItemComparer
from spdxcmp.matcher import LicenseTextMatcher
from spdxcmp.model import (
    AnyLicenseInfo,
    Annotation,
    ExternalDocumentRef,
    ExtractedLicenseInfo,
    Relationship,
    Review,
    SpdxDocument,
    SpdxFile,
    SpdxItem,
    SpdxPackage,
    SpdxSnippet,
)
from spdxcmp.package_comparer import PackageComparer
from spdxcmp.snippet_comparer import SnippetComparer
from spdxcmp.state import IN_PROGRESS_MESSAGE, CompareState, require_ready
from spdxcmp.translator import LicenseIdTranslator

logger = logging.getLogger(__name__)

NO_COMPARE_MESSAGE = "No compare has been performed"
INSUFFICIENT_DOCUMENTS_MESSAGE = (
    "Insufficient documents compared - must provide at least 2 SPDX documents"
)

Pair = tuple[int, int]
ItemT = TypeVar("ItemT", bound=SpdxItem)
ComparerT = TypeVar("ComparerT", bound=ItemComparer)


@dataclass
class _ComparisonResults:
    """Hold the results of one compare run."""

    documents: tuple[SpdxDocument, ...]
    translator: LicenseIdTranslator
    spec_version_equal: bool = True
    data_license_equal: bool = True
    document_comment_equal: bool = True
    unique_files: dict[Pair, tuple[SpdxFile, ...]] = field(default_factory=dict)
    file_differences: dict[Pair, tuple[FileDifference, ...]] = field(default_factory=dict)
    unique_packages: dict[Pair, tuple[SpdxPackage, ...]] = field(default_factory=dict)
    package_comparers: dict[str, PackageComparer] = field(default_factory=dict)
    unique_snippets: dict[Pair, tuple[SpdxSnippet, ...]] = field(default_factory=dict)
    snippet_comparers: dict[str, SnippetComparer] = field(default_factory=dict)
    unique_reviewers: dict[Pair, tuple[Review, ...]] = field(default_factory=dict)
    reviewer_differences: dict[Pair, tuple[ReviewerDifference, ...]] = field(
        default_factory=dict
    )
    unique_creators: dict[Pair, tuple[str, ...]] = field(default_factory=dict)
    creator_comment_equal: bool = True
    creation_date_equal: bool = True
    license_list_version_equal: bool = True
    unique_annotations: dict[Pair, tuple[Annotation, ...]] = field(default_factory=dict)
    unique_relationships: dict[Pair, tuple[Relationship, ...]] = field(
        default_factory=dict
    )
    unique_external_document_refs: dict[Pair, tuple[ExternalDocumentRef, ...]] = field(
        default_factory=dict
    )

    def pairs(self) -> list[Pair]:
        count = len(self.documents)
        return [(a, b) for a in range(count) for b in range(count) if a != b]


class SpdxComparer:
    """Compare two or more SPDX documents.

    The comparer moves through ``IDLE`` (nothing compared), ``COMPARING`` and
    ``READY``. Result accessors are only legal in ``READY``.
    """

    def __init__(self, matcher: LicenseTextMatcher | None = None) -> None:
        """Initialize comparer.

        Args:
            matcher: Text matcher used for extracted license translation.
        """
        self._matcher = matcher
        self._state = CompareState.IDLE
        self._results: _ComparisonResults | None = None

    @property
    def state(self) -> CompareState:
        return self._state

    def compare(self, documents: Sequence[SpdxDocument]) -> None:
        """Compare documents and replace any previous results.

        Args:
            documents: Documents to compare; indices into this sequence
                identify the documents in every accessor.

        Raises:
            CompareInputError: If fewer than two documents are given.
            CompareStateError: If a compare is already running.
        """
        if self._state is CompareState.COMPARING:
            raise CompareStateError(IN_PROGRESS_MESSAGE)
        if documents is None or len(documents) < 2:
            raise CompareInputError(INSUFFICIENT_DOCUMENTS_MESSAGE)
        self._state = CompareState.COMPARING
        self._results = None
        try:
            # Each run owns its translator; comparers handed out earlier keep theirs.
            results = _ComparisonResults(
                documents=tuple(documents),
                translator=LicenseIdTranslator(self._matcher),
            )
            results.translator.build(results.documents)
            self._compare_document_fields(results)
            self._compare_files(results)
            self._compare_packages(results)
            self._compare_snippets(results)
            self._compare_reviewers(results)
            self._compare_creators(results)
            self._compare_document_sets(results)
        except Exception:
            logger.warning(f"Document compare aborted (documents={len(documents)})")
            self._state = CompareState.IDLE
            raise
        self._results = results
        self._state = CompareState.READY
        logger.info(
            f"Document compare completed (documents={len(documents)} difference_found={self.is_difference_found()})"
        )

    def get_spdx_document(self, index: int) -> SpdxDocument:
        results = self._ready()
        self._check_index(index)
        return results.documents[index]

    def num_documents(self) -> int:
        return len(self._ready().documents)

    def is_difference_found(self) -> bool:
        """Return whether any compared aspect differs."""
        self._ready()
        return not all(
            (
                self.is_spdx_version_equal(),
                self.is_data_license_equal(),
                self.is_document_comments_equal(),
                self.is_extracted_licensing_infos_equal(),
                self.is_files_equal(),
                self.is_packages_equal(),
                self.is_snippets_equal(),
                self.is_reviewers_equal(),
                self.is_creator_information_equal(),
                self.is_document_annotations_equal(),
                self.is_document_relationships_equal(),
                self.is_external_document_refs_equal(),
            )
        )

    def is_spdx_version_equal(self) -> bool:
        return self._ready().spec_version_equal

    def is_data_license_equal(self) -> bool:
        return self._ready().data_license_equal

    def is_document_comments_equal(self) -> bool:
        return self._ready().document_comment_equal

    def is_extracted_licensing_infos_equal(self) -> bool:
        results = self._ready()
        for document_a, document_b in results.pairs():
            mapping = results.translator.mapping(document_a, document_b)
            if mapping.unique or mapping.differences:
                return False
        return True

    def get_unique_extracted_licenses(
        self, document_a: int, document_b: int
    ) -> tuple[ExtractedLicenseInfo, ...]:
        """Return extracted licenses of ``document_a`` with no text match in ``document_b``."""
        self._check_pair(document_a, document_b)
        return self._ready().translator.mapping(document_a, document_b).unique

    def get_extracted_license_differences(
        self, document_a: int, document_b: int
    ) -> tuple[ExtractedLicenseDifference, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().translator.mapping(document_a, document_b).differences

    def get_ambiguous_license_matches(
        self, document_a: int, document_b: int
    ) -> tuple[AmbiguousMatchWarning, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().translator.mapping(document_a, document_b).ambiguous

    def get_license_id_map(self, document_a: int, document_b: int) -> dict[str, str]:
        self._check_pair(document_a, document_b)
        return dict(self._ready().translator.id_map(document_a, document_b))

    def compare_license(
        self,
        document_a: int,
        license_a: AnyLicenseInfo | None,
        document_b: int,
        license_b: AnyLicenseInfo | None,
    ) -> bool:
        """Return whether licenses taken from two compared documents are equal.

        Raises:
            CompareStateError: If no compare has completed.
        """
        self._check_pair(document_a, document_b)
        return self._ready().translator.license_equal(
            license_a, document_a, license_b, document_b
        )

    def is_files_equal(self) -> bool:
        results = self._ready()
        return not any(results.unique_files.values()) and not any(
            results.file_differences.values()
        )

    def get_unique_files(self, document_a: int, document_b: int) -> tuple[SpdxFile, ...]:
        """Return files of ``document_a`` with no same-named file in ``document_b``."""
        self._check_pair(document_a, document_b)
        return self._ready().unique_files.get((document_a, document_b), ())

    def get_file_differences(
        self, document_a: int, document_b: int
    ) -> tuple[FileDifference, ...]:
        """Return differences of same-named files in two documents."""
        self._check_pair(document_a, document_b)
        return self._ready().file_differences.get((document_a, document_b), ())

    def is_packages_equal(self) -> bool:
        results = self._ready()
        if any(results.unique_packages.values()):
            return False
        return not any(
            comparer.is_difference_found() for comparer in results.package_comparers.values()
        )

    def is_package_equal(self, name: str) -> bool:
        """Return whether the named package agrees in every document holding it.

        Raises:
            CompareInputError: If no document holds a package of that name.
        """
        comparer = self._ready().package_comparers.get(name)
        if comparer is None:
            raise CompareInputError(f"Package not found in compared documents: {name}")
        return not comparer.is_difference_found()

    def get_unique_packages(
        self, document_a: int, document_b: int
    ) -> tuple[SpdxPackage, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().unique_packages.get((document_a, document_b), ())

    def get_package_comparers(self) -> list[PackageComparer]:
        """Return one comparer per package name, ordered by name."""
        return list(self._ready().package_comparers.values())

    def get_package_differences(self) -> list[PackageComparer]:
        """Return the comparers of packages that differ between documents."""
        return [
            comparer
            for comparer in self.get_package_comparers()
            if comparer.is_difference_found()
        ]

    def is_snippets_equal(self) -> bool:
        results = self._ready()
        if any(results.unique_snippets.values()):
            return False
        return not any(
            comparer.is_difference_found() for comparer in results.snippet_comparers.values()
        )

    def get_unique_snippets(
        self, document_a: int, document_b: int
    ) -> tuple[SpdxSnippet, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().unique_snippets.get((document_a, document_b), ())

    def get_snippet_comparers(self) -> list[SnippetComparer]:
        return list(self._ready().snippet_comparers.values())

    def get_snippet_differences(self) -> list[SnippetComparer]:
        return [
            comparer
            for comparer in self.get_snippet_comparers()
            if comparer.is_difference_found()
        ]

    def is_reviewers_equal(self) -> bool:
        results = self._ready()
        return not any(results.unique_reviewers.values()) and not any(
            results.reviewer_differences.values()
        )

    def get_unique_reviewers(self, document_a: int, document_b: int) -> tuple[Review, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().unique_reviewers.get((document_a, document_b), ())

    def get_reviewer_differences(
        self, document_a: int, document_b: int
    ) -> tuple[ReviewerDifference, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().reviewer_differences.get((document_a, document_b), ())

    def is_creator_information_equal(self) -> bool:
        results = self._ready()
        return (
            not any(results.unique_creators.values())
            and results.creator_comment_equal
            and results.creation_date_equal
            and results.license_list_version_equal
        )

    def get_unique_creators(self, document_a: int, document_b: int) -> tuple[str, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().unique_creators.get((document_a, document_b), ())

    def is_creator_comments_equal(self) -> bool:
        return self._ready().creator_comment_equal

    def is_creation_dates_equal(self) -> bool:
        return self._ready().creation_date_equal

    def is_license_list_version_equal(self) -> bool:
        return self._ready().license_list_version_equal

    def is_document_annotations_equal(self) -> bool:
        return not any(self._ready().unique_annotations.values())

    def get_unique_document_annotations(
        self, document_a: int, document_b: int
    ) -> tuple[Annotation, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().unique_annotations.get((document_a, document_b), ())

    def is_document_relationships_equal(self) -> bool:
        return not any(self._ready().unique_relationships.values())

    def get_unique_document_relationships(
        self, document_a: int, document_b: int
    ) -> tuple[Relationship, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().unique_relationships.get((document_a, document_b), ())

    def is_external_document_refs_equal(self) -> bool:
        return not any(self._ready().unique_external_document_refs.values())

    def get_unique_external_document_refs(
        self, document_a: int, document_b: int
    ) -> tuple[ExternalDocumentRef, ...]:
        self._check_pair(document_a, document_b)
        return self._ready().unique_external_document_refs.get((document_a, document_b), ())

    def _compare_document_fields(self, results: _ComparisonResults) -> None:
        base = results.documents[0]
        for index, document in enumerate(results.documents[1:], start=1):
            if not strings_equal(base.spec_version, document.spec_version):
                results.spec_version_equal = False
            if not results.translator.license_equal(
                base.data_license, 0, document.data_license, index
            ):
                results.data_license_equal = False
            if not strings_equal(base.comment, document.comment):
                results.document_comment_equal = False

    def _compare_files(self, results: _ComparisonResults) -> None:
        sorted_files = [
            sorted(document.all_files(), key=lambda file: sort_key(file.name))
            for document in results.documents
        ]
        for document_a, document_b in results.pairs():
            files_a = sorted_files[document_a]
            files_b = sorted_files[document_b]
            results.unique_files[(document_a, document_b)] = tuple(
                sorted_merge_unique(files_a, files_b, key=lambda file: file.name)
            )
            results.file_differences[(document_a, document_b)] = tuple(
                self._find_file_differences(
                    results.translator, document_a, files_a, document_b, files_b
                )
            )
        logger.debug(f"Files compared (documents={len(results.documents)})")

    def _find_file_differences(
        self,
        translator: LicenseIdTranslator,
        document_a: int,
        files_a: list[SpdxFile],
        document_b: int,
        files_b: list[SpdxFile],
    ) -> list[FileDifference]:
        differences: list[FileDifference] = []
        index_a = 0
        index_b = 0
        while index_a < len(files_a) and index_b < len(files_b):
            file_a = files_a[index_a]
            file_b = files_b[index_b]
            if file_a.name == file_b.name:
                comparer = FileComparer(translator)
                comparer.add_document_file(document_a, file_a)
                comparer.add_document_file(document_b, file_b)
                if comparer.is_difference_found():
                    differences.append(comparer.get_file_difference(document_a, document_b))
                index_a += 1
                index_b += 1
            elif sort_key(file_a.name) > sort_key(file_b.name):
                index_b += 1
            else:
                index_a += 1
        return differences

    def _compare_packages(self, results: _ComparisonResults) -> None:
        unique, comparers = self._compare_named_items(
            results,
            lambda document: document.packages,
            lambda: PackageComparer(results.translator),
        )
        results.unique_packages = unique
        results.package_comparers = comparers

    def _compare_snippets(self, results: _ComparisonResults) -> None:
        unique, comparers = self._compare_named_items(
            results,
            lambda document: document.snippets,
            lambda: SnippetComparer(results.translator),
        )
        results.unique_snippets = unique
        results.snippet_comparers = comparers

    def _compare_named_items(
        self,
        results: _ComparisonResults,
        items_of: Callable[[SpdxDocument], Sequence[ItemT]],
        new_comparer: Callable[[], ComparerT],
    ) -> tuple[dict[Pair, tuple[ItemT, ...]], dict[str, ComparerT]]:
        sorted_items = [
            sorted(items_of(document), key=lambda item: sort_key(item.name))
            for document in results.documents
        ]
        unique: dict[Pair, tuple[ItemT, ...]] = {}
        for document_a, document_b in results.pairs():
            unique[(document_a, document_b)] = tuple(
                sorted_merge_unique(
                    sorted_items[document_a],
                    sorted_items[document_b],
                    key=lambda item: item.name,
                )
            )
        comparers: dict[str, ComparerT] = {}
        for document_index, items in enumerate(sorted_items):
            for item in items:
                comparer = comparers.get(item.name)
                if comparer is None:
                    comparer = new_comparer()
                    comparers[item.name] = comparer
                if document_index in comparer.document_indices:
                    logger.warning(
                        f"Duplicate item name in document, keeping the first (name={item.name} document={document_index})"
                    )
                    continue
                comparer.add_document_item(document_index, item)
        return unique, dict(sorted(comparers.items()))

    def _compare_reviewers(self, results: _ComparisonResults) -> None:
        for document_a, document_b in results.pairs():
            reviewers_a = results.documents[document_a].reviewers
            reviewers_b = results.documents[document_b].reviewers
            unique: list[Review] = []
            differences: list[ReviewerDifference] = []
            for review_a in reviewers_a:
                same_name = [
                    review_b
                    for review_b in reviewers_b
                    if strings_equal(review_a.reviewer, review_b.reviewer)
                ]
                if not same_name:
                    unique.append(review_a)
                    continue
                if any(_reviews_equal(review_a, review_b) for review_b in same_name):
                    continue
                review_b = same_name[0]
                differences.append(
                    ReviewerDifference(
                        reviewer=review_a.reviewer,
                        date_a=review_a.date,
                        date_b=review_b.date,
                        date_equal=strings_equal(review_a.date, review_b.date),
                        comment_a=review_a.comment,
                        comment_b=review_b.comment,
                        comment_equal=strings_equal(review_a.comment, review_b.comment),
                    )
                )
            results.unique_reviewers[(document_a, document_b)] = tuple(unique)
            results.reviewer_differences[(document_a, document_b)] = tuple(differences)

    def _compare_creators(self, results: _ComparisonResults) -> None:
        for document_a, document_b in results.pairs():
            info_a = results.documents[document_a].creation_info
            info_b = results.documents[document_b].creation_info
            results.unique_creators[(document_a, document_b)] = tuple(
                find_unique_strings(info_a.creators, info_b.creators)
            )
            if not strings_equal(info_a.comment, info_b.comment):
                results.creator_comment_equal = False
            if not strings_equal(info_a.created, info_b.created):
                results.creation_date_equal = False
            if not strings_equal(info_a.license_list_version, info_b.license_list_version):
                results.license_list_version_equal = False

    def _compare_document_sets(self, results: _ComparisonResults) -> None:
        for document_a, document_b in results.pairs():
            doc_a = results.documents[document_a]
            doc_b = results.documents[document_b]
            pair = (document_a, document_b)
            results.unique_annotations[pair] = tuple(
                find_unique(doc_a.annotations, doc_b.annotations)
            )
            results.unique_relationships[pair] = tuple(
                find_unique(doc_a.relationships, doc_b.relationships)
            )
            results.unique_external_document_refs[pair] = tuple(
                find_unique(
                    doc_a.external_document_refs,
                    doc_b.external_document_refs,
                    external_document_refs_equal,
                )
            )

    def _ready(self) -> _ComparisonResults:
        require_ready(self._state, NO_COMPARE_MESSAGE)
        if self._results is None:
            raise CompareStateError(NO_COMPARE_MESSAGE)
        return self._results

    def _check_index(self, index: int) -> None:
        count = len(self._ready().documents)
        if index < 0 or index >= count:
            raise CompareInputError(
                f"Invalid document index (index={index} documents={count})"
            )

    def _check_pair(self, document_a: int, document_b: int) -> None:
        self._check_index(document_a)
        self._check_index(document_b)


def _reviews_equal(review_a: Review, review_b: Review) -> bool:
    return strings_equal(review_a.date, review_b.date) and strings_equal(
        review_a.comment, review_b.comment
    )


def compare_documents(
    documents: Sequence[SpdxDocument], matcher: LicenseTextMatcher | None = None
) -> SpdxComparer:
    """Compare documents and return the ready comparer.

    Args:
        documents: Two or more documents.
        matcher: Text matcher used for extracted license translation.

    Returns:
        Comparer in the ``READY`` state.
    """
    comparer = SpdxComparer(matcher)
    comparer.compare(documents)
    return comparer

