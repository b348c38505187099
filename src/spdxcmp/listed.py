# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Matching of candidate text against SPDX listed licenses and exceptions."""

import logging
from collections.abc import Iterable
from typing import Protocol

from spdxcmp.errors import CompareInputError
from spdxcmp.matcher import LicenseTextMatcher
from spdxcmp.model import ListedLicense, ListedLicenseException
from spdxcmp.template_evaluator import (
    DifferenceDescription,
    VariableRuleStrategy,
    compare_template,
)

logger = logging.getLogger(__name__)


class LicenseListProvider(Protocol):
    """Supply the listed licenses a candidate text is checked against."""

    def license_ids(self) -> list[str]:
        """Return the ids of all listed licenses."""

    def get_license(self, license_id: str) -> ListedLicense:
        """Return one listed license.

        Raises:
            KeyError: If the id is not listed.
        """


class StaticLicenseList:
    """Serve listed licenses from an in-memory collection."""

    def __init__(self, licenses: Iterable[ListedLicense]) -> None:
        self._licenses = {license.license_id: license for license in licenses}

    def license_ids(self) -> list[str]:
        return list(self._licenses)

    def get_license(self, license_id: str) -> ListedLicense:
        return self._licenses[license_id]


def _first_non_blank(*values: str | None) -> str | None:
    for value in values:
        if value and value.strip():
            return value
    return None


def is_text_standard_license(
    license: ListedLicense,
    candidate_text: str | None,
    matcher: LicenseTextMatcher | None = None,
    strategy: VariableRuleStrategy = VariableRuleStrategy.OFFSET,
) -> DifferenceDescription:
    """Compare candidate text against a listed license.

    The license template is used when present, otherwise the license text.

    Args:
        license: Listed license.
        candidate_text: Text to check.
        matcher: Matcher supplying the token rules.
        strategy: Cursor strategy for variable rules.

    Returns:
        Difference description; ``difference_found`` is ``False`` on a match.

    Raises:
        CompareInputError: If the license carries neither template nor text.
    """
    template = _first_non_blank(license.standard_license_template, license.license_text)
    if template is None:
        raise CompareInputError(
            f"Listed license has no template or text (license_id={license.license_id})"
        )
    return compare_template(template, candidate_text, matcher=matcher, strategy=strategy)


def is_text_standard_exception(
    exception: ListedLicenseException,
    candidate_text: str | None,
    matcher: LicenseTextMatcher | None = None,
    strategy: VariableRuleStrategy = VariableRuleStrategy.OFFSET,
) -> DifferenceDescription:
    """Compare candidate text against a listed license exception.

    Raises:
        CompareInputError: If the exception carries neither template nor text.
    """
    template = _first_non_blank(exception.exception_template, exception.exception_text)
    if template is None:
        raise CompareInputError(
            f"Listed exception has no template or text (exception_id={exception.exception_id})"
        )
    return compare_template(template, candidate_text, matcher=matcher, strategy=strategy)


def matching_standard_license_ids(
    candidate_text: str | None,
    license_list: LicenseListProvider,
    matcher: LicenseTextMatcher | None = None,
) -> list[str]:
    """Return the ids of every listed license matching the candidate text.

    Args:
        candidate_text: Text to check.
        license_list: Listed licenses to scan.
        matcher: Matcher supplying the token rules.

    Returns:
        Matching license ids in list order.
    """
    matcher = matcher or LicenseTextMatcher()
    matches: list[str] = []
    for license_id in license_list.license_ids():
        license = license_list.get_license(license_id)
        if _first_non_blank(license.standard_license_template, license.license_text) is None:
            logger.debug(f"Skipping listed license without text (license_id={license_id})")
            continue
        description = is_text_standard_license(license, candidate_text, matcher=matcher)
        if not description.difference_found:
            matches.append(license_id)
    logger.debug(
        f"Listed license scan completed (licenses={len(license_list.license_ids())} matches={len(matches)})"
    )
    return matches
