# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Incremental comparison of one same-named item across documents.

Items are added one document at a time. Each compared field is tagged with
the strategy used when an item is added:

* ``BASELINE`` fields are compared only against the first item added.
* ``PAIRWISE`` fields are compared against every previously added item, and
  the elements unique to each side are kept per ordered document pair.

Difference records for a document pair are built on request from the two
items directly for ``BASELINE`` fields and from the stored unique elements
for ``PAIRWISE`` fields.
"""

import enum
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from spdxcmp.differences import ItemDifference
from spdxcmp.errors import CompareInputError, CompareStateError
from spdxcmp.helpers import find_unique, string_lists_equal, strings_equal
from spdxcmp.license_equality import find_unique_licenses, is_license_equal
from spdxcmp.model import SpdxItem
from spdxcmp.state import CompareState, require_ready
from spdxcmp.translator import LicenseIdTranslator

logger = logging.getLogger(__name__)


class FieldStrategy(str, enum.Enum):
    """Select which previously added items a field is compared with."""

    BASELINE = "baseline"
    PAIRWISE = "pairwise"


FieldCompare = Callable[[Any, Any, Mapping[str, str]], Any]


@dataclass(frozen=True)
class ComparedField:
    """Represent one compared item field.

    Attributes:
        name: Field name; also the prefix of the difference record flags.
        strategy: Comparison strategy.
        compare: For ``BASELINE`` returns whether two items agree; for
            ``PAIRWISE`` returns the elements of the first item with no
            equivalent in the second. Receives the license id map from the
            first item's document to the second's.
    """

    name: str
    strategy: FieldStrategy
    compare: FieldCompare


def text_field(name: str) -> ComparedField:
    """Return a baseline field compared as trimmed text."""
    return ComparedField(
        name,
        FieldStrategy.BASELINE,
        lambda a, b, _: strings_equal(getattr(a, name), getattr(b, name)),
    )


def value_field(name: str) -> ComparedField:
    """Return a baseline field compared by value."""
    return ComparedField(
        name, FieldStrategy.BASELINE, lambda a, b, _: getattr(a, name) == getattr(b, name)
    )


def text_set_field(name: str) -> ComparedField:
    """Return a baseline field holding an unordered collection of strings."""
    return ComparedField(
        name,
        FieldStrategy.BASELINE,
        lambda a, b, _: string_lists_equal(getattr(a, name), getattr(b, name)),
    )


def license_field(name: str) -> ComparedField:
    """Return a baseline field holding a license expression."""
    return ComparedField(
        name,
        FieldStrategy.BASELINE,
        lambda a, b, id_map: is_license_equal(getattr(a, name), getattr(b, name), id_map),
    )


def unique_field(name: str) -> ComparedField:
    """Return a pairwise field holding a collection compared by value."""
    return ComparedField(
        name,
        FieldStrategy.PAIRWISE,
        lambda a, b, _: tuple(find_unique(getattr(a, name), getattr(b, name))),
    )


def unique_license_field(name: str) -> ComparedField:
    """Return a pairwise field holding a collection of licenses."""
    return ComparedField(
        name,
        FieldStrategy.PAIRWISE,
        lambda a, b, id_map: tuple(
            find_unique_licenses(getattr(a, name), getattr(b, name), id_map)
        ),
    )


ITEM_FIELDS: tuple[ComparedField, ...] = (
    text_field("comment"),
    license_field("license_concluded"),
    text_field("copyright_text"),
    text_field("license_comments"),
    unique_license_field("license_info_from_files"),
    unique_field("relationships"),
    unique_field("annotations"),
)


class ItemComparer:
    """Compare one named item across the documents it appears in."""

    FIELDS: ClassVar[tuple[ComparedField, ...]] = ITEM_FIELDS
    DIFFERENCE_TYPE: ClassVar[type[ItemDifference]] = ItemDifference

    def __init__(self, translator: LicenseIdTranslator) -> None:
        """Initialize comparer.

        Args:
            translator: Built extracted license translator for the documents.
        """
        self._translator = translator
        self._state = CompareState.IDLE
        self._name: str | None = None
        self._items: dict[int, SpdxItem] = {}
        self._baseline_equal = {
            field.name: True
            for field in self.FIELDS
            if field.strategy is FieldStrategy.BASELINE
        }
        self._unique: dict[str, dict[tuple[int, int], tuple[Any, ...]]] = {
            field.name: {}
            for field in self.FIELDS
            if field.strategy is FieldStrategy.PAIRWISE
        }
        self._difference_found = False

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def document_indices(self) -> list[int]:
        """Return the documents an item was added for, in insertion order."""
        return list(self._items)

    def add_document_item(self, document_index: int, item: SpdxItem) -> None:
        """Add the item found in one document and compare it.

        Args:
            document_index: Index of the document holding the item.
            item: Item to compare.

        Raises:
            CompareStateError: If another add is in progress.
            CompareInputError: If the document was already added or the
                item name differs from the items added before.
        """
        if self._state is CompareState.COMPARING:
            raise CompareStateError("Item compare in progress")
        if document_index in self._items:
            raise CompareInputError(
                f"Item already added for document (name={item.name} document={document_index})"
            )
        if self._name is not None and item.name != self._name:
            raise CompareInputError(
                f"Item names do not match (expected={self._name} actual={item.name})"
            )
        self._state = CompareState.COMPARING
        try:
            self._compare_item(document_index, item)
            self._items[document_index] = item
            self._name = item.name
        finally:
            self._state = CompareState.READY if self._items else CompareState.IDLE

    def is_difference_found(self) -> bool:
        self._check_ready()
        return self._difference_found

    def is_field_equal(self, name: str) -> bool:
        """Return whether a field agreed for every added item.

        Raises:
            CompareInputError: If the field is not compared by this comparer.
        """
        self._check_ready()
        if name in self._baseline_equal:
            return self._baseline_equal[name]
        if name in self._unique:
            return not any(self._unique[name].values())
        raise CompareInputError(f"Unknown compared field: {name}")

    def get_unique(self, name: str, document_a: int, document_b: int) -> tuple[Any, ...]:
        """Return the elements of a pairwise field unique to ``document_a``.

        Raises:
            CompareInputError: If the field is not pairwise or the documents
                were not both added.
        """
        self._check_ready()
        if name not in self._unique:
            raise CompareInputError(f"Field is not compared pairwise: {name}")
        self._item(document_a)
        self._item(document_b)
        return self._unique[name].get((document_a, document_b), ())

    def get_item(self, document_index: int) -> SpdxItem:
        self._check_ready()
        return self._item(document_index)

    def get_difference(self, document_a: int, document_b: int) -> ItemDifference:
        """Build the difference record for two documents.

        Args:
            document_a: First document index.
            document_b: Second document index.

        Returns:
            Difference record; every flag is ``True`` when the items agree.
        """
        self._check_ready()
        item_a = self._item(document_a)
        item_b = self._item(document_b)
        id_map = self._translator.id_map(document_a, document_b)
        values: dict[str, Any] = {
            "name": self._name,
            "spdx_id_a": item_a.spdx_id,
            "spdx_id_b": item_b.spdx_id,
        }
        for field in self.FIELDS:
            if field.strategy is FieldStrategy.BASELINE:
                values[f"{field.name}_equal"] = bool(field.compare(item_a, item_b, id_map))
                continue
            unique_a = self._unique[field.name].get((document_a, document_b), ())
            unique_b = self._unique[field.name].get((document_b, document_a), ())
            values[f"{field.name}_equal"] = not unique_a and not unique_b
            values[f"unique_{field.name}_a"] = unique_a
            values[f"unique_{field.name}_b"] = unique_b
        values.update(self._difference_details(document_a, document_b))
        return self.DIFFERENCE_TYPE(**values)

    def _compare_item(self, document_index: int, item: SpdxItem) -> None:
        baseline_failures: list[str] = []
        unique_updates: list[tuple[str, tuple[int, int], tuple[Any, ...]]] = []
        pair_records: dict[tuple[int, int], Any] = {}
        difference_found = False
        if self._items:
            baseline_index, baseline = next(iter(self._items.items()))
            id_map = self._translator.id_map(document_index, baseline_index)
            for field in self.FIELDS:
                if field.strategy is not FieldStrategy.BASELINE:
                    continue
                if not field.compare(item, baseline, id_map):
                    logger.debug(
                        f"Item field differs from baseline (name={item.name} field={field.name} document={document_index})"
                    )
                    baseline_failures.append(field.name)
                    difference_found = True
        for other_index, other in self._items.items():
            map_to_other = self._translator.id_map(document_index, other_index)
            map_from_other = self._translator.id_map(other_index, document_index)
            for field in self.FIELDS:
                if field.strategy is not FieldStrategy.PAIRWISE:
                    continue
                unique_new = tuple(field.compare(item, other, map_to_other))
                unique_other = tuple(field.compare(other, item, map_from_other))
                unique_updates.append((field.name, (document_index, other_index), unique_new))
                unique_updates.append((field.name, (other_index, document_index), unique_other))
                if unique_new or unique_other:
                    difference_found = True
            records = self._compare_pair(document_index, item, other_index, other)
            if any(records.values()):
                difference_found = True
            pair_records.update(records)
        # Nothing is recorded until every field of the new item compared cleanly.
        for name in baseline_failures:
            self._baseline_equal[name] = False
        for name, pair, unique in unique_updates:
            self._unique[name][pair] = unique
        self._store_pair_records(pair_records)
        self._difference_found = self._difference_found or difference_found

    def _compare_pair(
        self, document_a: int, item_a: SpdxItem, document_b: int, item_b: SpdxItem
    ) -> dict[tuple[int, int], Any]:
        """Compare subclass-specific content of two items.

        Returns:
            Records keyed by ordered document pair, stored through
            ``_store_pair_records`` once the item is accepted. Any truthy
            record marks a difference.
        """
        return {}

    def _store_pair_records(self, records: dict[tuple[int, int], Any]) -> None:
        """Store the records returned by ``_compare_pair``."""

    def _difference_details(self, document_a: int, document_b: int) -> dict[str, Any]:
        """Return subclass-specific difference record values."""
        return {}

    def _item(self, document_index: int) -> SpdxItem:
        item = self._items.get(document_index)
        if item is None:
            raise CompareInputError(
                f"No item added for document (name={self._name} document={document_index})"
            )
        return item

    def _check_ready(self) -> None:
        require_ready(self._state, "No items have been added to compare")
