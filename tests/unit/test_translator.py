# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for extracted license id translation."""

import pytest

from spdxcmp.errors import CompareStateError
from spdxcmp.model import ExtractedLicenseInfo, SpdxDocument
from spdxcmp.translator import LicenseIdTranslator, build_id_map

CUSTOM_TEXT = "Permission to use this custom software is granted to everyone."


def test_ph3_trans_001_text_equivalent_licenses_are_mapped() -> None:
    licenses_a = [ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)]
    licenses_b = [
        ExtractedLicenseInfo("LicenseRef-2", extracted_text="Something else entirely."),
        ExtractedLicenseInfo("LicenseRef-7", extracted_text=f"// {CUSTOM_TEXT.upper()}"),
    ]

    mapping = build_id_map(licenses_a, licenses_b)

    assert dict(mapping.id_map) == {"LicenseRef-1": "LicenseRef-7"}
    assert mapping.unique == ()
    assert mapping.differences == ()
    assert mapping.ambiguous == ()


def test_ph3_trans_002_metadata_differences_are_recorded() -> None:
    license_a = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT, name="Custom")
    license_b = ExtractedLicenseInfo(
        "LicenseRef-7", extracted_text=CUSTOM_TEXT, name="Custom v2", see_also=("https://x",)
    )

    mapping = build_id_map([license_a], [license_b])

    assert len(mapping.differences) == 1
    difference = mapping.differences[0]
    assert (difference.id_a, difference.id_b) == ("LicenseRef-1", "LicenseRef-7")
    assert difference.differing_fields() == ("name", "see_also")
    assert difference.difference_found


def test_ph3_trans_003_first_text_match_wins_and_ambiguity_is_reported() -> None:
    license_a = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)
    licenses_b = [
        ExtractedLicenseInfo("LicenseRef-7", extracted_text=CUSTOM_TEXT),
        ExtractedLicenseInfo("LicenseRef-8", extracted_text=CUSTOM_TEXT, comment="copy"),
    ]

    mapping = build_id_map([license_a], licenses_b)

    assert mapping.id_map["LicenseRef-1"] == "LicenseRef-7"
    assert len(mapping.ambiguous) == 1
    assert mapping.ambiguous[0].chosen_id == "LicenseRef-7"
    assert mapping.ambiguous[0].candidate_ids == ("LicenseRef-7", "LicenseRef-8")
    assert [difference.id_b for difference in mapping.differences] == ["LicenseRef-8"]


def test_ph3_trans_004_unmatched_licenses_are_unique() -> None:
    license_a = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)

    mapping = build_id_map([license_a], [])

    assert mapping.unique == (license_a,)
    assert dict(mapping.id_map) == {}


def test_ph3_trans_005_translator_requires_build() -> None:
    translator = LicenseIdTranslator()

    with pytest.raises(CompareStateError, match="License id map not initialized"):
        translator.id_map(0, 1)


def test_ph3_trans_006_translator_maps_every_ordered_pair() -> None:
    license_1 = ExtractedLicenseInfo("LicenseRef-1", extracted_text=CUSTOM_TEXT)
    license_7 = ExtractedLicenseInfo("LicenseRef-7", extracted_text=CUSTOM_TEXT)
    translator = LicenseIdTranslator()

    translator.build(
        [
            SpdxDocument(name="a", extracted_licenses=(license_1,)),
            SpdxDocument(name="b", extracted_licenses=(license_7,)),
        ]
    )

    assert dict(translator.id_map(0, 1)) == {"LicenseRef-1": "LicenseRef-7"}
    assert dict(translator.id_map(1, 0)) == {"LicenseRef-7": "LicenseRef-1"}
    assert translator.license_equal(license_1, 0, license_7, 1)
    assert not translator.license_equal(license_1, 1, license_7, 0)

    translator.clear()
    with pytest.raises(CompareStateError):
        translator.mapping(0, 1)
