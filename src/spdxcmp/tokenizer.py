# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Tokenizer and token equivalence rules for SPDX license text matching."""

import bisect
import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DASH_VARIANTS = "\u2012\u2013\u2014\u2015"

DEFAULT_SKIPPABLE_TOKENS: frozenset[str] = frozenset(
    {"//", "/*", "*/", "/**", "#", "##", "*", "**", '"""', "/", "=begin", "=end"}
)

DEFAULT_COMMENT_MARKERS: tuple[str, ...] = ('"""', "/**", "/*", "*/", "//")

DEFAULT_PUNCTUATION = ".,?!\"'();:/"

# (variant, canonical) pairs; both sides resolve to the canonical spelling.
DEFAULT_SPELLING_VARIANTS: tuple[tuple[str, str], ...] = (
    ("acknowledgment", "acknowledgement"),
    ("analogue", "analog"),
    ("analyse", "analyze"),
    ("artefact", "artifact"),
    ("authorisation", "authorization"),
    ("authorised", "authorized"),
    ("calibre", "caliber"),
    ("cancelled", "canceled"),
    ("capitalisations", "capitalizations"),
    ("catalogue", "catalog"),
    ("categorise", "categorize"),
    ("centre", "center"),
    ("emphasised", "emphasized"),
    ("favour", "favor"),
    ("favourite", "favorite"),
    ("fulfil", "fulfill"),
    ("fulfilment", "fulfillment"),
    ("initialise", "initialize"),
    ("judgment", "judgement"),
    ("labelling", "labeling"),
    ("labour", "labor"),
    ("licence", "license"),
    ("maximise", "maximize"),
    ("modelled", "modeled"),
    ("modelling", "modeling"),
    ("offence", "offense"),
    ("optimise", "optimize"),
    ("organisation", "organization"),
    ("organise", "organize"),
    ("practise", "practice"),
    ("programme", "program"),
    ("realise", "realize"),
    ("recognise", "recognize"),
    ("signalling", "signaling"),
    ("utilisation", "utilization"),
    ("whilst", "while"),
    ("wilful", "willful"),
    ("non-commercial", "noncommercial"),
    ("copyright-owner", "copyright-holder"),
    ("copyright-owners", "copyright-holders"),
    ("sublicense", "sub-license"),
    ("non-infringement", "noninfringement"),
    ("copyright", "\u00a9"),
    ('"', "'"),
)

DEFAULT_PHRASE_FOLDS: tuple[tuple[str, str], ...] = (
    (r"\bcopyright\s+holders\b", "copyright-holders"),
    (r"\bcopyright\s+owners\b", "copyright-owners"),
    (r"\bcopyright\s+holder\b", "copyright-holder"),
    (r"\bcopyright\s+owner\b", "copyright-owner"),
    (r"\bper\s+cent\b", "percent"),
)

_CHARACTER_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("‘", "'"),
    ("’", "'"),
    ("‛", "'"),
    ("`", "'"),
    ("''", '"'),
    ("“", '"'),
    ("”", '"'),
    ("‟", '"'),
    ("„", '"'),
    ("\u00a0", " "),
    ("\u2028", "\n"),
    ("http://", "https://"),
)

_COPYRIGHT_SYMBOL = re.compile(r"\(c\)", re.IGNORECASE)


@dataclass(frozen=True)
class MatchingConfig:
    """Represent the immutable lookup tables used for token matching.

    Attributes:
        skippable_tokens: Lowercased tokens treated as comment noise.
        spelling_variants: ``(variant, canonical)`` spelling pairs.
        phrase_folds: ``(regex, replacement)`` multi-word folds applied before splitting.
        punctuation: Characters emitted as standalone tokens.
        comment_markers: Multi-character markers emitted as standalone tokens.
    """

    skippable_tokens: frozenset[str] = DEFAULT_SKIPPABLE_TOKENS
    spelling_variants: tuple[tuple[str, str], ...] = DEFAULT_SPELLING_VARIANTS
    phrase_folds: tuple[tuple[str, str], ...] = DEFAULT_PHRASE_FOLDS
    punctuation: str = DEFAULT_PUNCTUATION
    comment_markers: tuple[str, ...] = DEFAULT_COMMENT_MARKERS

    def __post_init__(self) -> None:
        if any(char.isspace() for char in self.punctuation):
            raise ValueError("punctuation must not contain whitespace.")
        if any(not marker.strip() for marker in self.comment_markers):
            raise ValueError("comment_markers must not be blank.")


_DEFAULT_CONFIG = MatchingConfig()


def default_matching_config() -> MatchingConfig:
    """Return the shared default matching configuration."""
    return _DEFAULT_CONFIG


@dataclass(frozen=True)
class Token:
    """Represent one token of normalized license text.

    Attributes:
        text: Token text as it appears in the normalized source.
        start: Start offset in the normalized source.
        end: End offset (exclusive) in the normalized source.
        line: 1-based line number.
        column: 1-based column number.
    """

    text: str
    start: int
    end: int
    line: int
    column: int


def normalize_text(text: str) -> str:
    """Unify quote, space, and dash variants before tokenizing.

    Args:
        text: Raw license text.

    Returns:
        Text with character variants replaced by their canonical forms.
    """
    for source, target in _CHARACTER_REPLACEMENTS:
        text = text.replace(source, target)
    for dash in DASH_VARIANTS:
        text = text.replace(dash, "-")
    return _COPYRIGHT_SYMBOL.sub("\u00a9", text)


class Tokenizer:
    """Split license text into tokens and decide token equivalence."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        """Initialize tokenizer from a matching configuration.

        Args:
            config: Lookup tables; the default configuration when omitted.
        """
        self._config = config or default_matching_config()
        self._canonical = {
            variant.lower(): canonical.lower()
            for variant, canonical in self._config.spelling_variants
        }
        self._folds = [
            (re.compile(pattern, re.IGNORECASE), replacement)
            for pattern, replacement in self._config.phrase_folds
        ]
        punctuation = re.escape(self._config.punctuation)
        markers = "|".join(
            re.escape(marker)
            for marker in sorted(self._config.comment_markers, key=len, reverse=True)
        )
        alternatives = [f"[{punctuation}]", rf"[^\s{punctuation}]+"]
        if markers:
            alternatives.insert(0, markers)
        self._token_pattern = re.compile("|".join(alternatives))

    @property
    def config(self) -> MatchingConfig:
        """Return the configuration this tokenizer was built from."""
        return self._config

    def normalize(self, text: str) -> str:
        """Normalize characters and fold multi-word phrases.

        Line breaks consumed by a fold are re-emitted after the replacement so
        line numbers stay stable.
        """
        text = normalize_text(text)
        for pattern, replacement in self._folds:
            text = pattern.sub(
                lambda match, target=replacement: (
                    target + "\n" * match.group(0).count("\n")
                ),
                text,
            )
        return text

    def tokenize(self, text: str | None) -> list[Token]:
        """Split text into tokens.

        Args:
            text: License text; ``None`` yields no tokens.

        Returns:
            Tokens in source order.
        """
        if not text:
            return []
        normalized = self.normalize(text)
        return self.tokenize_normalized(normalized)

    def tokenize_normalized(self, normalized: str, offset: int = 0) -> list[Token]:
        """Split already-normalized text into tokens.

        Args:
            normalized: Output of ``normalize``.
            offset: Position to start scanning from.

        Returns:
            Tokens in source order with offsets relative to ``normalized``.
        """
        line_starts = [0] + [
            index + 1 for index, char in enumerate(normalized) if char == "\n"
        ]
        tokens: list[Token] = []
        for match in self._token_pattern.finditer(normalized, offset):
            line_index = bisect.bisect_right(line_starts, match.start()) - 1
            tokens.append(
                Token(
                    text=match.group(0),
                    start=match.start(),
                    end=match.end(),
                    line=line_index + 1,
                    column=match.start() - line_starts[line_index] + 1,
                )
            )
        return tokens

    def is_skippable(self, token: str | None) -> bool:
        """Return whether a token is whitespace or a comment marker."""
        if token is None:
            return False
        trimmed = token.strip()
        if not trimmed:
            return True
        return trimmed.lower() in self._config.skippable_tokens

    def tokens_equivalent(self, left: str | None, right: str | None) -> bool:
        """Return whether two tokens are equivalent for matching purposes.

        Args:
            left: First token text.
            right: Second token text.

        Returns:
            ``True`` when both are ``None``, when they are equal after
            normalization, or when they are spelling variants of each other.
        """
        if left is None:
            return right is None
        if right is None:
            return False
        normalized_left = self._normalize_token(left)
        normalized_right = self._normalize_token(right)
        if normalized_left == normalized_right:
            return True
        return self._canonical.get(
            normalized_left, normalized_left
        ) == self._canonical.get(normalized_right, normalized_right)

    def _normalize_token(self, token: str) -> str:
        normalized = token.strip().lower()
        for dash in DASH_VARIANTS:
            normalized = normalized.replace(dash, "-")
        return normalized
