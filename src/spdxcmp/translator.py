# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Translation of extracted license ids between documents.

Documents assign their own ``LicenseRef-`` ids to non-listed licenses. Before
license expressions from two documents can be compared, every ordered pair
of documents gets a map from the first document's ids to the ids of the
text-equivalent licenses in the second document.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from spdxcmp.differences import AmbiguousMatchWarning, ExtractedLicenseDifference
from spdxcmp.errors import CompareStateError
from spdxcmp.helpers import string_lists_equal, strings_equal
from spdxcmp.license_equality import is_license_equal
from spdxcmp.matcher import LicenseTextMatcher, default_matcher
from spdxcmp.model import AnyLicenseInfo, ExtractedLicenseInfo, SpdxDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LicenseIdMapping:
    """Represent the extracted license translation for one document pair.

    Attributes:
        id_map: First-document id to second-document id.
        differences: Text-equal licenses whose name, comment or URLs differ.
        unique: First-document licenses with no text match in the second.
        ambiguous: Licenses that text-matched more than one candidate.
    """

    id_map: Mapping[str, str] = field(default_factory=dict)
    differences: tuple[ExtractedLicenseDifference, ...] = ()
    unique: tuple[ExtractedLicenseInfo, ...] = ()
    ambiguous: tuple[AmbiguousMatchWarning, ...] = ()


def build_id_map(
    licenses_a: Sequence[ExtractedLicenseInfo],
    licenses_b: Sequence[ExtractedLicenseInfo],
    matcher: LicenseTextMatcher | None = None,
) -> LicenseIdMapping:
    """Map extracted license ids of one document onto another.

    The first text-equivalent license of ``licenses_b`` in sequence order
    wins; later text matches only contribute metadata differences and an
    ambiguity record.

    Args:
        licenses_a: Extracted licenses of the first document.
        licenses_b: Extracted licenses of the second document.
        matcher: Text matcher; the default matcher when omitted.

    Returns:
        Id map, metadata differences, unmatched licenses and ambiguities.
    """
    matcher = matcher or default_matcher()
    id_map: dict[str, str] = {}
    differences: list[ExtractedLicenseDifference] = []
    unique: list[ExtractedLicenseInfo] = []
    ambiguous: list[AmbiguousMatchWarning] = []
    for license_a in licenses_a:
        text_matches = [
            license_b
            for license_b in licenses_b
            if matcher.match(license_a.extracted_text, license_b.extracted_text)
        ]
        if not text_matches:
            unique.append(license_a)
            continue
        id_map[license_a.license_id] = text_matches[0].license_id
        if len(text_matches) > 1:
            warning = AmbiguousMatchWarning(
                license_id=license_a.license_id,
                chosen_id=text_matches[0].license_id,
                candidate_ids=tuple(match.license_id for match in text_matches),
            )
            logger.warning(
                "Extracted license text matches several licenses, using the first "
                f"(license_id={warning.license_id} chosen_id={warning.chosen_id} "
                f"candidates={len(warning.candidate_ids)})"
            )
            ambiguous.append(warning)
        for license_b in text_matches:
            difference = _metadata_difference(license_a, license_b)
            if difference.difference_found:
                differences.append(difference)
    return LicenseIdMapping(
        id_map=id_map,
        differences=tuple(differences),
        unique=tuple(unique),
        ambiguous=tuple(ambiguous),
    )


def _metadata_difference(
    license_a: ExtractedLicenseInfo, license_b: ExtractedLicenseInfo
) -> ExtractedLicenseDifference:
    return ExtractedLicenseDifference(
        license_text=license_a.extracted_text,
        id_a=license_a.license_id,
        id_b=license_b.license_id,
        name_a=license_a.name,
        name_b=license_b.name,
        name_equal=strings_equal(license_a.name, license_b.name),
        comment_a=license_a.comment,
        comment_b=license_b.comment,
        comment_equal=strings_equal(license_a.comment, license_b.comment),
        see_also_a=license_a.see_also,
        see_also_b=license_b.see_also,
        see_also_equal=string_lists_equal(license_a.see_also, license_b.see_also),
    )


class LicenseIdTranslator:
    """Hold the extracted license id maps for every ordered document pair."""

    def __init__(self, matcher: LicenseTextMatcher | None = None) -> None:
        self._matcher = matcher or default_matcher()
        self._mappings: dict[tuple[int, int], LicenseIdMapping] = {}

    def build(self, documents: Sequence[SpdxDocument]) -> None:
        """Build the mappings for all ordered pairs of documents.

        Args:
            documents: Documents in comparison order; indices identify them.
        """
        self._mappings = {}
        for index_a, document_a in enumerate(documents):
            for index_b, document_b in enumerate(documents):
                if index_a == index_b:
                    continue
                self._mappings[(index_a, index_b)] = build_id_map(
                    document_a.extracted_licenses,
                    document_b.extracted_licenses,
                    self._matcher,
                )
        logger.debug(
            f"License id translation built (documents={len(documents)} pairs={len(self._mappings)})"
        )

    def clear(self) -> None:
        self._mappings = {}

    def mapping(self, document_a: int, document_b: int) -> LicenseIdMapping:
        """Return the mapping from one document to another.

        Raises:
            CompareStateError: If the mapping was never built.
        """
        mapping = self._mappings.get((document_a, document_b))
        if mapping is None:
            raise CompareStateError(
                f"License id map not initialized (document_a={document_a} document_b={document_b})"
            )
        return mapping

    def id_map(self, document_a: int, document_b: int) -> Mapping[str, str]:
        return self.mapping(document_a, document_b).id_map

    def license_equal(
        self,
        license_a: AnyLicenseInfo | None,
        document_a: int,
        license_b: AnyLicenseInfo | None,
        document_b: int,
    ) -> bool:
        """Return whether licenses from two documents are equivalent.

        Raises:
            CompareStateError: If the pair's mapping was never built.
        """
        return is_license_equal(license_a, license_b, self.id_map(document_a, document_b))
