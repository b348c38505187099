# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Streaming evaluation of a license template against candidate text."""

import enum
import logging
import re
from dataclasses import dataclass

from spdxcmp.errors import CompareInputError
from spdxcmp.matcher import LicenseTextMatcher, TokenCursor
from spdxcmp.template import (
    LicenseTemplateRule,
    LiteralText,
    OptionalBlock,
    TemplateNode,
    TemplateTreeBuilder,
    parse_template,
)
from spdxcmp.tokenizer import Token, Tokenizer

logger = logging.getLogger(__name__)


class VariableRuleStrategy(str, enum.Enum):
    """Select how the cursor is moved past a matched variable rule.

    ``OFFSET`` searches the normalized source from the cursor token and moves
    to the first token at or after the match end. ``RETOKENIZE`` rejoins the
    remaining tokens with spaces, re-tokenizes the text after the match and
    derives the cursor from the token count, with a two-token lookahead
    re-check.
    """

    OFFSET = "offset"
    RETOKENIZE = "retokenize"


@dataclass(frozen=True)
class LineColumn:
    """Represent a location in the compared text.

    Attributes:
        line: 1-based line number.
        column: 1-based column number.
        length: Length of the offending token.
    """

    line: int
    column: int
    length: int


@dataclass(frozen=True)
class DifferenceDescription:
    """Represent the outcome of comparing text against a template.

    Attributes:
        difference_found: Whether the text diverges from the template.
        message: Explanation of the first divergence; empty on a match.
        differences: Locations of the divergence in the compared text.
    """

    difference_found: bool
    message: str = ""
    differences: tuple[LineColumn, ...] = ()


@dataclass(frozen=True)
class _Snapshot:
    cursor: int
    tokens: list[Token]
    difference_found: bool
    explanation: str
    locations: tuple[LineColumn, ...]


class TemplateRuleEvaluator:
    """Match compare text against template parse events.

    The first divergence is sticky: once recorded, later events are ignored.
    Optional content is buffered until its block closes and then matched as a
    unit; a failed optional block is rolled back instead of reported.
    """

    def __init__(
        self,
        compare_text: str | None,
        matcher: LicenseTextMatcher | None = None,
        strategy: VariableRuleStrategy = VariableRuleStrategy.OFFSET,
    ) -> None:
        """Initialize evaluator for one compare text.

        Args:
            compare_text: Candidate license text.
            matcher: Matcher providing tokenizer and skip-ahead rule.
            strategy: Cursor strategy for variable rules.
        """
        self._matcher = matcher or LicenseTextMatcher()
        self._tokenizer: Tokenizer = self._matcher.tokenizer
        self._strategy = strategy
        self._source = self._tokenizer.normalize(compare_text or "")
        self._tokens = self._tokenizer.tokenize_normalized(self._source)
        self._cursor = 0
        self._difference_found = False
        self._explanation = ""
        self._locations: list[LineColumn] = []
        self._optional: TemplateTreeBuilder | None = None
        self._patterns: dict[str, re.Pattern[str]] = {}

    def text(self, text: str) -> None:
        if self._optional is not None:
            self._optional.text(text)
            return
        if self._difference_found:
            return
        self._match_literal(text)

    def variable_rule(self, rule: LicenseTemplateRule) -> None:
        if self._optional is not None:
            self._optional.variable_rule(rule)
            return
        if self._difference_found:
            return
        self._match_variable(rule)

    def begin_optional(self, rule: LicenseTemplateRule) -> None:
        if self._optional is None:
            self._optional = TemplateTreeBuilder()
        else:
            self._optional.begin_optional(rule)

    def end_optional(self, rule: LicenseTemplateRule) -> None:
        if self._optional is None:
            raise CompareInputError("End optional received without a begin optional.")
        if self._optional.depth > 0:
            self._optional.end_optional(rule)
            return
        children = self._optional.nodes
        self._optional = None
        if self._difference_found:
            return
        self._match_optional(children)

    def complete_parsing(self) -> None:
        if self._difference_found:
            return
        for token in self._tokens[self._cursor :]:
            if not self._tokenizer.is_skippable(token.text):
                self._record(
                    "Additional text found after the end of the license template",
                    token,
                )
                return

    def matches(self) -> bool:
        """Return ``True`` when no difference was recorded."""
        return not self._difference_found

    def difference_description(self) -> DifferenceDescription:
        """Return the comparison outcome."""
        return DifferenceDescription(
            difference_found=self._difference_found,
            message=self._explanation,
            differences=tuple(self._locations),
        )

    def _match_nodes(self, nodes: tuple[TemplateNode, ...]) -> None:
        for node in nodes:
            if self._difference_found:
                return
            if isinstance(node, LiteralText):
                self._match_literal(node.text)
            elif isinstance(node, OptionalBlock):
                self._match_optional(node.children)
            else:
                self._match_variable(node)

    def _match_optional(self, children: tuple[TemplateNode, ...]) -> None:
        snapshot = _Snapshot(
            cursor=self._cursor,
            tokens=list(self._tokens),
            difference_found=self._difference_found,
            explanation=self._explanation,
            locations=tuple(self._locations),
        )
        self._match_nodes(children)
        if self._difference_found:
            logger.debug(
                f"Optional text not present, rolling back (cursor={snapshot.cursor} reason={self._explanation!r})"
            )
            self._cursor = snapshot.cursor
            self._tokens = snapshot.tokens
            self._difference_found = snapshot.difference_found
            self._explanation = snapshot.explanation
            self._locations = list(snapshot.locations)

    def _match_literal(self, text: str) -> bool:
        expected = TokenCursor(self._tokenizer.tokenize(text))
        actual = TokenCursor(self._tokens, self._cursor)
        if self._matcher.consume_equivalent(expected, actual):
            self._cursor = actual.index
            return True
        if actual.exhausted():
            self._record(
                "End of compare text encountered before the end of the license template",
                None,
            )
        else:
            self._record("Difference found in normal text", actual.current())
        return False

    def _match_variable(self, rule: LicenseTemplateRule) -> bool:
        pattern = self._compile(rule)
        if self._strategy is VariableRuleStrategy.RETOKENIZE:
            return self._match_variable_retokenized(rule, pattern)
        return self._match_variable_by_offset(rule, pattern)

    def _match_variable_by_offset(
        self, rule: LicenseTemplateRule, pattern: re.Pattern[str]
    ) -> bool:
        current = self._current()
        start = current.start if current is not None else len(self._source)
        remaining = self._source[start:]
        match = pattern.search(remaining)
        if not self._check_variable_match(rule, match, remaining):
            return False
        self._advance_to(start + match.end())
        return True

    def _match_variable_retokenized(
        self, rule: LicenseTemplateRule, pattern: re.Pattern[str]
    ) -> bool:
        remaining = " ".join(token.text for token in self._tokens[self._cursor :])
        match = pattern.search(remaining)
        if not self._check_variable_match(rule, match, remaining):
            return False
        after = remaining[match.end() :].strip()
        if not after:
            self._cursor = len(self._tokens)
            return True
        expected = [token.text for token in self._tokenizer.tokenize_normalized(after)]
        index = len(self._tokens) - len(expected)
        if index < self._cursor:
            self._record(
                f"Unable to locate the text following variable rule {rule.name}",
                self._current(),
            )
            return False
        if self._misaligned(index, expected):
            index += 1
            if self._misaligned(index, expected):
                self._record(
                    f"Mismatched text found after end of variable rule {rule.name}",
                    self._tokens[index] if index < len(self._tokens) else None,
                )
                return False
        self._cursor = index
        return True

    def _check_variable_match(
        self,
        rule: LicenseTemplateRule,
        match: re.Match[str] | None,
        remaining: str,
    ) -> bool:
        if match is None:
            self._record(
                f"Variable text rule {rule.name} did not match the compare text",
                self._current(),
            )
            return False
        if match.start() > 0:
            extra = remaining[: match.start()].strip()
            self._record(
                f'Extra text "{extra}" found before the variable text rule {rule.name}',
                self._current(),
            )
            return False
        return True

    def _misaligned(self, index: int, expected: list[str]) -> bool:
        if index >= len(self._tokens):
            return True
        text = self._tokens[index].text
        return text != expected[0] and (len(expected) > 1 and text != expected[1])

    def _advance_to(self, position: int) -> None:
        index = self._cursor
        while index < len(self._tokens) and self._tokens[index].end <= position:
            index += 1
        if index < len(self._tokens) and self._tokens[index].start < position:
            token = self._tokens[index]
            cut = position - token.start
            self._tokens[index] = Token(
                text=token.text[cut:],
                start=position,
                end=token.end,
                line=token.line,
                column=token.column + cut,
            )
        self._cursor = index

    def _compile(self, rule: LicenseTemplateRule) -> re.Pattern[str]:
        expression = rule.match or ""
        pattern = self._patterns.get(expression)
        if pattern is None:
            try:
                pattern = re.compile(expression, re.IGNORECASE)
            except re.error as exc:
                raise CompareInputError(
                    f"Invalid match expression for variable rule {rule.name}: {exc}"
                ) from exc
            self._patterns[expression] = pattern
        return pattern

    def _current(self) -> Token | None:
        if self._cursor < len(self._tokens):
            return self._tokens[self._cursor]
        return None

    def _record(self, message: str, token: Token | None) -> None:
        if token is None and self._tokens:
            last = self._tokens[-1]
            location = LineColumn(line=last.line, column=last.column + len(last.text), length=0)
            token_text = ""
        elif token is None:
            location = LineColumn(line=1, column=1, length=0)
            token_text = ""
        else:
            location = LineColumn(line=token.line, column=token.column, length=len(token.text))
            token_text = token.text
        self._difference_found = True
        self._explanation = (
            f'{message} starting at line #{location.line} column #{location.column} "{token_text}".'
        )
        self._locations.append(location)
        logger.debug(f"Template difference recorded (explanation={self._explanation!r})")


def compare_template(
    template: str,
    compare_text: str | None,
    matcher: LicenseTextMatcher | None = None,
    strategy: VariableRuleStrategy = VariableRuleStrategy.OFFSET,
) -> DifferenceDescription:
    """Compare candidate text against a license template.

    Args:
        template: License template text.
        compare_text: Candidate text.
        matcher: Matcher supplying the token rules.
        strategy: Cursor strategy for variable rules.

    Returns:
        Difference description; ``difference_found`` is ``False`` on a match.

    Raises:
        LicenseTemplateRuleError: If the template is malformed.
        CompareInputError: If a variable rule carries an invalid expression.
    """
    evaluator = TemplateRuleEvaluator(compare_text, matcher=matcher, strategy=strategy)
    parse_template(template, evaluator)
    return evaluator.difference_description()
