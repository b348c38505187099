# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Skip-ahead token matcher deciding license text equivalence."""

import functools
import logging
from collections.abc import Sequence

from spdxcmp.tokenizer import MatchingConfig, Token, Tokenizer

logger = logging.getLogger(__name__)


class TokenCursor:
    """Walk a token list; owned by a single matching operation."""

    def __init__(self, tokens: Sequence[Token], index: int = 0) -> None:
        self.tokens = tokens
        self.index = index

    def current(self) -> Token | None:
        """Return the token under the cursor, or ``None`` at the end."""
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def current_text(self) -> str | None:
        token = self.current()
        return token.text if token is not None else None

    def advance(self) -> None:
        self.index += 1

    def exhausted(self) -> bool:
        return self.index >= len(self.tokens)


class LicenseTextMatcher:
    """Decide whether two license texts are equivalent.

    The walk is greedy and never backtracks: after a mismatch both sides skip
    their comment markers once and the retry either succeeds or fails the
    whole match.
    """

    def __init__(
        self,
        config: MatchingConfig | None = None,
        tokenizer: Tokenizer | None = None,
    ) -> None:
        """Initialize matcher.

        Args:
            config: Matching tables used to build a tokenizer.
            tokenizer: Prebuilt tokenizer; takes precedence over ``config``.
        """
        self._tokenizer = tokenizer or Tokenizer(config)

    @property
    def tokenizer(self) -> Tokenizer:
        """Return the tokenizer shared with template evaluation."""
        return self._tokenizer

    def match(self, reference: str | None, candidate: str | None) -> bool:
        """Return whether two license texts are equivalent.

        Args:
            reference: Reference text; ``None`` is treated as empty.
            candidate: Candidate text; ``None`` is treated as empty.

        Returns:
            ``True`` when every significant token of one text lines up with an
            equivalent token of the other.
        """
        reference = reference or ""
        candidate = candidate or ""
        if reference == candidate:
            return True
        reference_cursor = TokenCursor(self._tokenizer.tokenize(reference))
        candidate_cursor = TokenCursor(self._tokenizer.tokenize(candidate))
        if not self.consume_equivalent(reference_cursor, candidate_cursor):
            return False
        return self.only_skippable_remaining(candidate_cursor)

    def consume_equivalent(self, expected: TokenCursor, actual: TokenCursor) -> bool:
        """Consume all ``expected`` tokens against ``actual`` tokens.

        Trailing ``actual`` tokens are left in place for the caller.

        Args:
            expected: Cursor over the text that must be fully matched.
            actual: Cursor over the text being consumed.

        Returns:
            ``True`` when ``expected`` was consumed without an unresolved mismatch.
        """
        tokenizer = self._tokenizer
        while not expected.exhausted():
            if actual.exhausted():
                return self.only_skippable_remaining(expected)
            if tokenizer.tokens_equivalent(expected.current_text(), actual.current_text()):
                expected.advance()
                actual.advance()
                continue
            self._skip_skippable(actual)
            self._skip_skippable(expected)
            if expected.exhausted():
                return True
            if not tokenizer.tokens_equivalent(
                expected.current_text(), actual.current_text()
            ):
                logger.debug(
                    "Token mismatch "
                    f"(expected={expected.current_text()!r} actual={actual.current_text()!r})"
                )
                return False
            expected.advance()
            actual.advance()
        return True

    def only_skippable_remaining(self, cursor: TokenCursor) -> bool:
        """Return whether every remaining token under the cursor is skippable."""
        return all(
            self._tokenizer.is_skippable(token.text)
            for token in cursor.tokens[cursor.index :]
        )

    def _skip_skippable(self, cursor: TokenCursor) -> None:
        while not cursor.exhausted() and self._tokenizer.is_skippable(
            cursor.current_text()
        ):
            cursor.advance()


@functools.cache
def default_matcher() -> LicenseTextMatcher:
    """Return a matcher built from the default configuration."""
    return LicenseTextMatcher()


def licenses_match(reference: str | None, candidate: str | None) -> bool:
    """Return whether two license texts match with the default configuration.

    Args:
        reference: Reference license text.
        candidate: Candidate license text.

    Returns:
        Match verdict.
    """
    return default_matcher().match(reference, candidate)
