# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Lifecycle states shared by the document and item comparers."""

import enum

from spdxcmp.errors import CompareStateError

IN_PROGRESS_MESSAGE = (
    "Compare in progress - can not obtain compare results until compare has completed"
)


class CompareState(str, enum.Enum):
    """Represent the lifecycle of a comparer instance."""

    IDLE = "idle"
    COMPARING = "comparing"
    READY = "ready"


def require_ready(state: CompareState, idle_message: str) -> None:
    """Fail unless results can be read in the given state.

    Args:
        state: Current comparer state.
        idle_message: Error message used when nothing was compared yet.

    Raises:
        CompareStateError: If the state is not ``READY``.
    """
    if state is CompareState.COMPARING:
        raise CompareStateError(IN_PROGRESS_MESSAGE)
    if state is CompareState.IDLE:
        raise CompareStateError(idle_message)
