# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for SPDX license matching and document comparison."""

from spdxcmp.comparer import SpdxComparer, compare_documents
from spdxcmp.errors import (
    CompareInputError,
    CompareStateError,
    LicenseTemplateRuleError,
    SpdxCompareError,
)
from spdxcmp.expression import license_to_string, parse_license_expression
from spdxcmp.listed import (
    StaticLicenseList,
    is_text_standard_exception,
    is_text_standard_license,
    matching_standard_license_ids,
)
from spdxcmp.matcher import LicenseTextMatcher, licenses_match
from spdxcmp.template_evaluator import (
    DifferenceDescription,
    VariableRuleStrategy,
    compare_template,
)
from spdxcmp.template_filter import filter_template
from spdxcmp.tokenizer import MatchingConfig, Tokenizer

__all__ = [
    "CompareInputError",
    "CompareStateError",
    "DifferenceDescription",
    "LicenseTemplateRuleError",
    "LicenseTextMatcher",
    "MatchingConfig",
    "SpdxCompareError",
    "SpdxComparer",
    "StaticLicenseList",
    "Tokenizer",
    "VariableRuleStrategy",
    "compare_documents",
    "compare_template",
    "filter_template",
    "is_text_standard_exception",
    "is_text_standard_license",
    "license_to_string",
    "licenses_match",
    "matching_standard_license_ids",
    "parse_license_expression",
]
