# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Structural equality of license expressions across two documents."""

from collections.abc import Mapping, Sequence

from spdxcmp.model import (
    AnyLicenseInfo,
    ConjunctiveLicenseSet,
    DisjunctiveLicenseSet,
    ExtractedLicenseInfo,
    ListedLicense,
    OrLaterOperator,
    WithExceptionOperator,
)


def is_license_equal(
    license_a: AnyLicenseInfo | None,
    license_b: AnyLicenseInfo | None,
    id_map: Mapping[str, str],
) -> bool:
    """Return whether two licenses are equivalent.

    License sets are compared as unordered multisets: both sets must have the
    same size and each member of ``license_a`` must pair with a distinct equal
    member of ``license_b``. Extracted licenses are resolved through
    ``id_map``; an id missing from the map never equals anything.

    Args:
        license_a: License from the first document.
        license_b: License from the second document.
        id_map: Extracted license id translation from the first document to
            the second.

    Returns:
        ``True`` when the licenses are equivalent.
    """
    if license_a is None or license_b is None:
        return license_a is None and license_b is None
    if isinstance(license_a, (ConjunctiveLicenseSet, DisjunctiveLicenseSet)):
        if type(license_a) is not type(license_b):
            return False
        return members_equal(license_a.members, license_b.members, id_map)
    if isinstance(license_a, ExtractedLicenseInfo):
        if not isinstance(license_b, ExtractedLicenseInfo):
            return False
        return id_map.get(license_a.license_id) == license_b.license_id
    if isinstance(license_a, ListedLicense):
        if not isinstance(license_b, ListedLicense):
            return False
        return license_a.license_id.lower() == license_b.license_id.lower()
    if isinstance(license_a, OrLaterOperator):
        if not isinstance(license_b, OrLaterOperator):
            return False
        return is_license_equal(license_a.license, license_b.license, id_map)
    if isinstance(license_a, WithExceptionOperator):
        if not isinstance(license_b, WithExceptionOperator):
            return False
        return (
            license_a.exception.exception_id.lower()
            == license_b.exception.exception_id.lower()
            and is_license_equal(license_a.license, license_b.license, id_map)
        )
    return license_a == license_b


def members_equal(
    members_a: Sequence[AnyLicenseInfo],
    members_b: Sequence[AnyLicenseInfo],
    id_map: Mapping[str, str],
) -> bool:
    """Return whether two license collections match as unordered multisets."""
    if len(members_a) != len(members_b):
        return False
    remaining = list(members_b)
    for member in members_a:
        for index, candidate in enumerate(remaining):
            if is_license_equal(member, candidate, id_map):
                del remaining[index]
                break
        else:
            return False
    return True


def find_unique_licenses(
    licenses_a: Sequence[AnyLicenseInfo],
    licenses_b: Sequence[AnyLicenseInfo],
    id_map: Mapping[str, str],
) -> list[AnyLicenseInfo]:
    """Return licenses of ``licenses_a`` with no equivalent in ``licenses_b``."""
    return [
        license_a
        for license_a in licenses_a
        if not any(is_license_equal(license_a, license_b, id_map) for license_b in licenses_b)
    ]
