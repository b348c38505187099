# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Exception hierarchy shared by the matching engine and comparers."""


class SpdxCompareError(RuntimeError):
    """Represent any failure raised by license matching or document comparison."""


class CompareInputError(SpdxCompareError):
    """Represent invalid input passed to a matcher or comparer."""


class CompareStateError(SpdxCompareError):
    """Represent an accessor used while the comparer is in the wrong state."""


class LicenseTemplateRuleError(CompareInputError):
    """Represent malformed license template syntax."""
