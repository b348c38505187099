# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for license template rule parsing and the template parser."""

import pytest

from spdxcmp.errors import LicenseTemplateRuleError
from spdxcmp.template import (
    LicenseTemplateRule,
    LiteralText,
    OptionalBlock,
    parse_template,
    parse_template_tree,
)


class _RecordingHandler:
    def __init__(self) -> None:
        self.events: list[tuple[str, str | None]] = []

    def text(self, text: str) -> None:
        self.events.append(("text", text))

    def variable_rule(self, rule: LicenseTemplateRule) -> None:
        self.events.append(("variable", rule.name))

    def begin_optional(self, rule: LicenseTemplateRule) -> None:
        self.events.append(("begin_optional", None))

    def end_optional(self, rule: LicenseTemplateRule) -> None:
        self.events.append(("end_optional", None))

    def complete_parsing(self) -> None:
        self.events.append(("complete", None))


def test_ph2_rule_001_variable_rule_parses_all_keywords() -> None:
    rule = LicenseTemplateRule.parse(
        'var;name="copyright";original="(c) 2020\\nAcme";match=".+";example="Foo"'
    )

    assert rule.rule_type == "variable"
    assert rule.name == "copyright"
    assert rule.original == "(c) 2020\nAcme"
    assert rule.match == ".+"
    assert rule.example == "Foo"


def test_ph2_rule_002_rule_whitespace_and_case_are_tolerated() -> None:
    rule = LicenseTemplateRule.parse(' VAR ; name = "x" ; match = "[0-9]+" ')
    begin = LicenseTemplateRule.parse("beginOptional")

    assert (rule.rule_type, rule.name, rule.match) == ("variable", "x", "[0-9]+")
    assert rule.original == ""
    assert begin.rule_type == "begin_optional"


@pytest.mark.parametrize(
    "rule_text",
    [
        'foo;name="x"',
        'var;name="x"',
        'var;match=".+"',
        'var;name="x";match=".+";colour="red"',
        'var;name="x";match',
    ],
)
def test_ph2_rule_003_malformed_rules_raise(rule_text: str) -> None:
    with pytest.raises(LicenseTemplateRuleError):
        LicenseTemplateRule.parse(rule_text)


def test_ph2_parse_001_events_are_emitted_in_document_order() -> None:
    handler = _RecordingHandler()

    parse_template('a<<var;name="v";match="x">>b<<beginOptional>>c<<endOptional>>', handler)

    assert handler.events == [
        ("text", "a"),
        ("variable", "v"),
        ("text", "b"),
        ("begin_optional", None),
        ("text", "c"),
        ("end_optional", None),
        ("complete", None),
    ]


def test_ph2_parse_002_tree_nests_optional_blocks() -> None:
    nodes = parse_template_tree(
        'A<<beginOptional>>B<<beginOptional>>C<<endOptional>>'
        '<<var;name="v";match=".+">><<endOptional>>D'
    )

    assert nodes == (
        LiteralText("A"),
        OptionalBlock(
            (
                LiteralText("B"),
                OptionalBlock((LiteralText("C"),)),
                LicenseTemplateRule("variable", name="v", match=".+"),
            )
        ),
        LiteralText("D"),
    )


def test_ph2_parse_003_unbalanced_optional_blocks_raise() -> None:
    with pytest.raises(LicenseTemplateRuleError):
        parse_template_tree("A<<endOptional>>")
    with pytest.raises(LicenseTemplateRuleError):
        parse_template_tree("<<beginOptional>>A")


def test_ph2_parse_004_plain_text_is_a_single_literal() -> None:
    assert parse_template_tree("MIT License") == (LiteralText("MIT License"),)
    assert parse_template_tree("") == ()
