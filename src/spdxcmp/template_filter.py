# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Projection of a license template into its fixed text fragments."""

import logging

from spdxcmp.template import LicenseTemplateRule, parse_template

logger = logging.getLogger(__name__)


class FilterTemplateOutputHandler:
    """Collect the literal fragments of a template.

    Variable rules either contribute their original text or split the
    current fragment. Optional content is dropped unless requested.
    """

    def __init__(self, include_var_text: bool = False, include_optional: bool = False) -> None:
        """Initialize handler.

        Args:
            include_var_text: Inline each variable rule's original text.
            include_optional: Keep text inside optional blocks.
        """
        self._include_var_text = include_var_text
        self._include_optional = include_optional
        self._optional_depth = 0
        self._current = ""
        self._fragments: list[str] = []

    @property
    def fragments(self) -> list[str]:
        """Return the fragments collected so far."""
        return list(self._fragments)

    def text(self, text: str) -> None:
        if self._in_scope():
            self._current += text

    def variable_rule(self, rule: LicenseTemplateRule) -> None:
        if self._include_var_text and self._in_scope():
            self._current += rule.original
        else:
            self._flush()

    def begin_optional(self, rule: LicenseTemplateRule) -> None:
        self._optional_depth += 1

    def end_optional(self, rule: LicenseTemplateRule) -> None:
        self._optional_depth -= 1
        if self._optional_depth == 0 and not self._include_optional:
            self._flush()

    def complete_parsing(self) -> None:
        self._flush()

    def _in_scope(self) -> bool:
        return self._include_optional or self._optional_depth <= 0

    def _flush(self) -> None:
        if self._current:
            self._fragments.append(self._current)
            self._current = ""


def filter_template(
    template: str,
    include_var_text: bool = False,
    include_optional: bool = False,
) -> list[str]:
    """Return the fixed text fragments of a license template.

    Args:
        template: License template text.
        include_var_text: Inline variable original text instead of splitting.
        include_optional: Keep optional block content.

    Returns:
        Text fragments in template order.

    Raises:
        LicenseTemplateRuleError: If the template is malformed.
    """
    handler = FilterTemplateOutputHandler(
        include_var_text=include_var_text, include_optional=include_optional
    )
    parse_template(template, handler)
    logger.debug(f"Template filtered (fragments={len(handler.fragments)})")
    return handler.fragments
