# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""License template rules, node model, and the callback-driven parser.

A template is license text interleaved with ``<<...>>`` rules::

    Copyright <<var;name="copyright";original="(c) 2020";match=".+">>
    <<beginOptional>> All rights reserved.<<endOptional>>

The parser streams the template through a ``TemplateOutputHandler``: every
literal run, variable rule, and optional boundary is emitted exactly once in
document order, followed by a single ``complete_parsing`` call.
"""

import logging
import re
from dataclasses import dataclass
from typing import Literal, Protocol

from spdxcmp.errors import LicenseTemplateRuleError

logger = logging.getLogger(__name__)

RuleType = Literal["variable", "begin_optional", "end_optional"]

RULE_PATTERN = re.compile(r"<<\s*(.+?)\s*>>", re.DOTALL)
_PART_SEPARATOR = re.compile(r"(?<!\\);")

_RULE_TYPES: dict[str, RuleType] = {
    "var": "variable",
    "beginoptional": "begin_optional",
    "endoptional": "end_optional",
}
_KEYWORDS = ("name", "original", "match", "example")


@dataclass(frozen=True)
class LicenseTemplateRule:
    """Represent one ``<<...>>`` rule of a license template.

    Attributes:
        rule_type: Rule category.
        name: Rule name; required for variable rules.
        original: Text of the variable as it appears in the reference license.
        match: Regular expression accepted for the variable text.
        example: Example replacement text.
    """

    rule_type: RuleType
    name: str | None = None
    original: str = ""
    match: str | None = None
    example: str | None = None

    def __post_init__(self) -> None:
        if self.rule_type == "variable":
            if not self.name:
                raise LicenseTemplateRuleError("Variable rule is missing a name.")
            if self.match is None:
                raise LicenseTemplateRuleError(
                    f"Variable rule {self.name} is missing a match expression."
                )

    @classmethod
    def parse(cls, rule_text: str) -> "LicenseTemplateRule":
        """Parse the text between ``<<`` and ``>>``.

        Args:
            rule_text: Rule body such as ``var;name="x";match=".+"``.

        Returns:
            Parsed rule.

        Raises:
            LicenseTemplateRuleError: If the rule type or a keyword is unknown,
                or a variable rule lacks its name or match expression.
        """
        parts = _PART_SEPARATOR.split(rule_text)
        type_name = parts[0].strip()
        rule_type = _RULE_TYPES.get(type_name.lower())
        if rule_type is None:
            raise LicenseTemplateRuleError(f"Unknown rule type: {type_name}")
        values: dict[str, str] = {}
        for part in parts[1:]:
            if not part.strip():
                continue
            keyword, separator, raw_value = part.partition("=")
            keyword = keyword.strip().lower()
            if not separator:
                raise LicenseTemplateRuleError(
                    f"Missing '=' in rule part: {part.strip()}"
                )
            if keyword not in _KEYWORDS:
                raise LicenseTemplateRuleError(f"Unknown rule keyword: {keyword}")
            value = _strip_quotes(raw_value.strip())
            if keyword in {"original", "example"}:
                value = value.replace("\\n", "\n").replace("\\t", "\t")
            values[keyword] = value
        return cls(
            rule_type=rule_type,
            name=values.get("name"),
            original=values.get("original", ""),
            match=values.get("match"),
            example=values.get("example"),
        )


@dataclass(frozen=True)
class LiteralText:
    """Represent a literal run of template text."""

    text: str


@dataclass(frozen=True)
class OptionalBlock:
    """Represent template content that may be absent from a matching text."""

    children: tuple["TemplateNode", ...]


TemplateNode = LiteralText | LicenseTemplateRule | OptionalBlock


class TemplateOutputHandler(Protocol):
    """Receive the parse events of one license template."""

    def text(self, text: str) -> None:
        """Receive a literal run of template text."""

    def variable_rule(self, rule: LicenseTemplateRule) -> None:
        """Receive a variable rule."""

    def begin_optional(self, rule: LicenseTemplateRule) -> None:
        """Receive the start of an optional block."""

    def end_optional(self, rule: LicenseTemplateRule) -> None:
        """Receive the end of an optional block."""

    def complete_parsing(self) -> None:
        """Receive the end of the template."""


def parse_template(template: str, handler: TemplateOutputHandler) -> None:
    """Stream a license template through an output handler.

    Args:
        template: License template text.
        handler: Receiver of parse events.

    Raises:
        LicenseTemplateRuleError: If a rule is malformed or optional blocks are
            unbalanced.
    """
    depth = 0
    position = 0
    for match in RULE_PATTERN.finditer(template):
        if match.start() > position:
            handler.text(template[position : match.start()])
        position = match.end()
        rule = LicenseTemplateRule.parse(match.group(1))
        if rule.rule_type == "variable":
            handler.variable_rule(rule)
        elif rule.rule_type == "begin_optional":
            depth += 1
            handler.begin_optional(rule)
        else:
            if depth == 0:
                raise LicenseTemplateRuleError(
                    f"End optional rule found without a matching begin (offset={match.start()})"
                )
            depth -= 1
            handler.end_optional(rule)
    if position < len(template):
        handler.text(template[position:])
    if depth != 0:
        raise LicenseTemplateRuleError(
            f"Missing end optional rule (unclosed_blocks={depth})"
        )
    handler.complete_parsing()


class TemplateTreeBuilder:
    """Collect parse events into a tree of template nodes."""

    def __init__(self) -> None:
        self._stack: list[list[TemplateNode]] = [[]]

    @property
    def nodes(self) -> tuple[TemplateNode, ...]:
        """Return the top-level nodes collected so far."""
        return tuple(self._stack[0])

    @property
    def depth(self) -> int:
        """Return the number of optional blocks currently open."""
        return len(self._stack) - 1

    def text(self, text: str) -> None:
        self._stack[-1].append(LiteralText(text))

    def variable_rule(self, rule: LicenseTemplateRule) -> None:
        self._stack[-1].append(rule)

    def begin_optional(self, rule: LicenseTemplateRule) -> None:
        self._stack.append([])

    def end_optional(self, rule: LicenseTemplateRule) -> None:
        if len(self._stack) == 1:
            raise LicenseTemplateRuleError(
                "End optional rule found without a matching begin."
            )
        children = self._stack.pop()
        self._stack[-1].append(OptionalBlock(tuple(children)))

    def complete_parsing(self) -> None:
        return None


def parse_template_tree(template: str) -> tuple[TemplateNode, ...]:
    """Parse a license template into its node tree.

    Args:
        template: License template text.

    Returns:
        Top-level template nodes.
    """
    builder = TemplateTreeBuilder()
    parse_template(template, builder)
    return builder.nodes


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value
