"""Pure calculations for restoring shield state on reset."""

from __future__ import annotations

import copy
from collections.abc import Mapping  # noqa: TC003

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class RoundStartReset(BaseModel):
    """Pending allocation restored at the start of a round."""

    model_config = ConfigDict(frozen=True)

    new_pending: dict[str, int]
    new_remaining: int = Field(..., ge=0)


class ReallocationReset(BaseModel):
    """Pending deltas and counters restored during a reallocation."""

    model_config = ConfigDict(frozen=True)

    new_pending_changes: dict[str, int]
    shields_to_remove: int | None = Field(default=None, ge=0)
    shields_to_add: int = Field(..., ge=0)


def calculate_round_start_reset(
    initial_snapshot: Mapping[str, int] | None, shields_to_allocate: int
) -> RoundStartReset:
    """Restore the phase-entry snapshot and the full round budget.

    The remaining budget is the round's allocation exactly. Shields already
    present in the snapshot never reduce it.
    """
    return RoundStartReset(
        new_pending=copy.deepcopy(dict(initial_snapshot or {})),
        new_remaining=max(0, shields_to_allocate),
    )


def calculate_reallocation_removal_reset(
    max_shields_to_remove: int,
) -> ReallocationReset:
    """Discard every pending removal and restore the removal allowance."""
    return ReallocationReset(
        new_pending_changes={},
        shields_to_remove=max(0, max_shields_to_remove),
        shields_to_add=0,
    )


def calculate_reallocation_adding_reset(
    post_removal_changes: Mapping[str, int],
) -> ReallocationReset:
    """Return to the deltas captured when the removal phase ended."""
    removed = sum(abs(delta) for delta in post_removal_changes.values() if delta < 0)
    return ReallocationReset(
        new_pending_changes=dict(post_removal_changes),
        shields_to_add=removed,
    )


def calculate_reallocation_display_shields(
    game_state_shields: int, pending_changes: Mapping[str, int], section_name: str
) -> int:
    """Return the shield count to display for *section_name* under pending deltas."""
    return game_state_shields + pending_changes.get(section_name, 0)


__all__ = [
    "ReallocationReset",
    "RoundStartReset",
    "calculate_reallocation_adding_reset",
    "calculate_reallocation_display_shields",
    "calculate_reallocation_removal_reset",
    "calculate_round_start_reset",
]
