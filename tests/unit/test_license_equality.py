# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for license equality across documents."""

from spdxcmp.license_equality import find_unique_licenses, is_license_equal
from spdxcmp.model import (
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

MIT = ListedLicense("MIT")
APACHE = ListedLicense("Apache-2.0")
REF_1 = ExtractedLicenseInfo("LicenseRef-1", extracted_text="Custom text")
REF_7 = ExtractedLicenseInfo("LicenseRef-7", extracted_text="Custom text")


def test_ph3_leq_001_license_sets_ignore_member_order() -> None:
    assert is_license_equal(
        ConjunctiveLicenseSet((MIT, APACHE)), ConjunctiveLicenseSet((APACHE, MIT)), {}
    )
    assert not is_license_equal(
        ConjunctiveLicenseSet((MIT, APACHE)), DisjunctiveLicenseSet((MIT, APACHE)), {}
    )


def test_ph3_leq_002_set_members_pair_with_distinct_members() -> None:
    assert not is_license_equal(
        ConjunctiveLicenseSet((MIT, MIT)), ConjunctiveLicenseSet((MIT, APACHE)), {}
    )
    assert not is_license_equal(
        DisjunctiveLicenseSet((MIT,)), DisjunctiveLicenseSet((MIT, MIT)), {}
    )


def test_ph3_leq_003_extracted_licenses_are_translated() -> None:
    id_map = {"LicenseRef-1": "LicenseRef-7"}

    assert is_license_equal(REF_1, REF_7, id_map)
    assert not is_license_equal(REF_1, REF_7, {})
    assert not is_license_equal(REF_7, REF_1, id_map)
    assert is_license_equal(
        DisjunctiveLicenseSet((MIT, REF_1)), DisjunctiveLicenseSet((REF_7, MIT)), id_map
    )


def test_ph3_leq_004_listed_ids_compare_case_insensitively() -> None:
    assert is_license_equal(ListedLicense("mit"), MIT, {})
    assert not is_license_equal(MIT, APACHE, {})
    assert not is_license_equal(MIT, REF_1, {})


def test_ph3_leq_005_operators_and_special_values() -> None:
    classpath = ListedLicenseException("Classpath-exception-2.0")
    gpl = ListedLicense("GPL-2.0-only")

    assert is_license_equal(
        WithExceptionOperator(gpl, classpath), WithExceptionOperator(gpl, classpath), {}
    )
    assert not is_license_equal(
        WithExceptionOperator(gpl, classpath),
        WithExceptionOperator(gpl, ListedLicenseException("GCC-exception-3.1")),
        {},
    )
    assert is_license_equal(OrLaterOperator(gpl), OrLaterOperator(gpl), {})
    assert not is_license_equal(OrLaterOperator(gpl), gpl, {})
    assert is_license_equal(NoAssertionLicense(), NoAssertionLicense(), {})
    assert not is_license_equal(NoAssertionLicense(), NoneLicense(), {})
    assert is_license_equal(None, None, {})
    assert not is_license_equal(None, MIT, {})


def test_ph3_leq_006_find_unique_licenses() -> None:
    unique = find_unique_licenses([MIT, REF_1, APACHE], [REF_7, ListedLicense("apache-2.0")], {
        "LicenseRef-1": "LicenseRef-7"
    })

    assert unique == [MIT]
