# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Conversion between SPDX license expression strings and the license model."""

import logging
from collections.abc import Iterable, Mapping

from license_expression import (
    ExpressionError,
    LicenseSymbol,
    LicenseWithExceptionSymbol,
    Licensing,
    ParseError,
)

from spdxcmp.errors import CompareInputError
from spdxcmp.model import (
    AnyLicenseInfo,
    ConjunctiveLicenseSet,
    DisjunctiveLicenseSet,
    ExtractedLicenseInfo,
    ListedLicense,
    ListedLicenseException,
    NoAssertionLicense,
    NoneLicense,
    OrLaterOperator,
    WithExceptionOperator,
)

logger = logging.getLogger(__name__)

NOASSERTION = "NOASSERTION"
NONE = "NONE"
LICENSE_REF_PREFIX = "LicenseRef-"


class LicenseExpressionParser:
    """Parse SPDX expressions, resolving ``LicenseRef-`` ids per document."""

    def __init__(
        self,
        extracted_licenses: Iterable[ExtractedLicenseInfo] = (),
        listed_licenses: Mapping[str, ListedLicense] | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            extracted_licenses: Document-local licenses available for lookup.
            listed_licenses: Optional listed licenses keyed by id, used to fill
                in names and texts of parsed symbols.
        """
        self._licensing = Licensing()
        self._extracted = {info.license_id: info for info in extracted_licenses}
        self._listed = {
            key.lower(): value for key, value in (listed_licenses or {}).items()
        }

    def parse(self, expression: str) -> AnyLicenseInfo:
        """Parse an SPDX license expression.

        Args:
            expression: Expression such as ``MIT OR (Apache-2.0 AND LicenseRef-1)``.

        Returns:
            License model object.

        Raises:
            CompareInputError: If the expression is empty or malformed.
        """
        try:
            parsed = self._licensing.parse(expression, validate=False)
        except (ExpressionError, ParseError) as exc:
            logger.warning(f"License expression rejected (expression={expression!r} error={exc})")
            raise CompareInputError(
                f"Invalid license expression {expression!r}: {exc}"
            ) from exc
        if parsed is None:
            raise CompareInputError("License expression is empty.")
        return self._convert(parsed)

    def _convert(self, node: object) -> AnyLicenseInfo:
        if isinstance(node, LicenseWithExceptionSymbol):
            exception_key = node.exception_symbol.key
            return WithExceptionOperator(
                license=self._symbol(node.license_symbol.key),
                exception=ListedLicenseException(exception_id=exception_key),
            )
        if isinstance(node, LicenseSymbol):
            return self._symbol(node.key)
        if isinstance(node, self._licensing.AND):
            return ConjunctiveLicenseSet(
                members=tuple(self._flatten(node, self._licensing.AND))
            )
        if isinstance(node, self._licensing.OR):
            return DisjunctiveLicenseSet(
                members=tuple(self._flatten(node, self._licensing.OR))
            )
        raise CompareInputError(f"Unsupported license expression node: {node!r}")

    def _flatten(self, node: object, operator: type) -> list[AnyLicenseInfo]:
        members: list[AnyLicenseInfo] = []
        for argument in node.args:
            if isinstance(argument, operator):
                members.extend(self._flatten(argument, operator))
            else:
                members.append(self._convert(argument))
        return members

    def _symbol(self, key: str) -> AnyLicenseInfo:
        if key.upper() == NOASSERTION:
            return NoAssertionLicense()
        if key.upper() == NONE:
            return NoneLicense()
        if LICENSE_REF_PREFIX.lower() in key.lower():
            return self._extracted.get(key) or ExtractedLicenseInfo(license_id=key)
        if key.endswith("+"):
            return OrLaterOperator(license=self._listed_license(key[:-1]))
        return self._listed_license(key)

    def _listed_license(self, key: str) -> ListedLicense:
        return self._listed.get(key.lower()) or ListedLicense(license_id=key)


def parse_license_expression(
    expression: str,
    extracted_licenses: Iterable[ExtractedLicenseInfo] = (),
) -> AnyLicenseInfo:
    """Parse an SPDX license expression into the license model.

    Args:
        expression: SPDX license expression.
        extracted_licenses: Document-local licenses for ``LicenseRef-`` lookup.

    Returns:
        License model object.
    """
    return LicenseExpressionParser(extracted_licenses).parse(expression)


def license_to_string(info: AnyLicenseInfo | None) -> str:
    """Render a license model object as an SPDX expression."""
    if info is None:
        return ""
    if isinstance(info, ListedLicense):
        return info.license_id
    if isinstance(info, ExtractedLicenseInfo):
        return info.license_id
    if isinstance(info, NoAssertionLicense):
        return NOASSERTION
    if isinstance(info, NoneLicense):
        return NONE
    if isinstance(info, OrLaterOperator):
        return f"{license_to_string(info.license)}+"
    if isinstance(info, WithExceptionOperator):
        return f"{license_to_string(info.license)} WITH {info.exception.exception_id}"
    operator = " AND " if isinstance(info, ConjunctiveLicenseSet) else " OR "
    parts = []
    for member in info.members:
        rendered = license_to_string(member)
        if isinstance(member, (ConjunctiveLicenseSet, DisjunctiveLicenseSet)):
            rendered = f"({rendered})"
        parts.append(rendered)
    return operator.join(parts)
