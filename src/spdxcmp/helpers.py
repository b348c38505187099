# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Null-tolerant equality and uniqueness helpers used by the comparers."""

from collections.abc import Callable, Sequence
from typing import TypeVar

from spdxcmp.model import ExternalDocumentRef, PackageVerificationCode

T = TypeVar("T")


def strings_equal(left: str | None, right: str | None) -> bool:
    """Return whether two strings are equal after trimming.

    ``None`` and the empty string are considered equal.
    """
    return (left or "").strip() == (right or "").strip()


def compare_strings(left: str | None, right: str | None) -> int:
    """Order two strings with ``None`` first; returns -1, 0 or 1."""
    if left is None:
        return 0 if right is None else -1
    if right is None:
        return 1
    return (left > right) - (left < right)


def elements_equivalent(
    left: Sequence[T],
    right: Sequence[T],
    equal: Callable[[T, T], bool] | None = None,
) -> bool:
    """Return whether two collections match as unordered multisets.

    Args:
        left: First collection.
        right: Second collection.
        equal: Element equality; ``==`` when omitted.

    Returns:
        ``True`` when both have the same size and every element of ``left``
        pairs with a distinct equal element of ``right``.
    """
    equal = equal or (lambda first, second: first == second)
    if len(left) != len(right):
        return False
    remaining = list(right)
    for element in left:
        for index, candidate in enumerate(remaining):
            if equal(element, candidate):
                del remaining[index]
                break
        else:
            return False
    return True


def string_lists_equal(left: Sequence[str] | None, right: Sequence[str] | None) -> bool:
    """Return whether two string collections match unordered after trimming."""
    return elements_equivalent(list(left or ()), list(right or ()), strings_equal)


def find_unique(
    left: Sequence[T],
    right: Sequence[T],
    equal: Callable[[T, T], bool] | None = None,
) -> list[T]:
    """Return the elements of ``left`` with no equal element in ``right``."""
    equal = equal or (lambda first, second: first == second)
    return [element for element in left if not any(equal(element, other) for other in right)]


def find_unique_strings(left: Sequence[str], right: Sequence[str]) -> list[str]:
    """Return the strings of ``left`` with no trimmed equal in ``right``."""
    return find_unique(left, right, strings_equal)


def verification_codes_equal(
    left: PackageVerificationCode | None, right: PackageVerificationCode | None
) -> bool:
    """Return whether two verification codes share value and excluded files."""
    if left is None or right is None:
        return left is None and right is None
    return strings_equal(left.value, right.value) and string_lists_equal(
        left.excluded_file_names, right.excluded_file_names
    )


def external_document_refs_equal(
    left: ExternalDocumentRef, right: ExternalDocumentRef
) -> bool:
    """Return whether two external document refs point to the same document."""
    return strings_equal(
        left.spdx_document_namespace, right.spdx_document_namespace
    ) and left.checksum == right.checksum


def sorted_merge_unique(
    left: Sequence[T],
    right: Sequence[T],
    key: Callable[[T], str | None],
) -> list[T]:
    """Return the elements of ``left`` whose key never occurs in ``right``.

    Both sequences must already be sorted by ``key``; the smaller side is
    advanced on each step and elements with equal keys consume each other.
    """
    unique: list[T] = []
    left_index = 0
    right_index = 0
    while left_index < len(left) and right_index < len(right):
        order = compare_strings(key(left[left_index]), key(right[right_index]))
        if order == 0:
            left_index += 1
            right_index += 1
        elif order < 0:
            unique.append(left[left_index])
            left_index += 1
        else:
            right_index += 1
    unique.extend(left[left_index:])
    return unique


def sort_key(value: str | None) -> tuple[bool, str]:
    """Return a sort key ordering ``None`` first."""
    return (value is not None, value or "")
