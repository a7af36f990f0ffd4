"""Immutable records produced while routing player actions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from dronewars_core.shared.value_objects import ActionResult  # noqa: TC001


def _now() -> datetime:
    return datetime.now(UTC)


class ProcessedAction(BaseModel):
    """A single call made to the action processor and the result it returned."""

    model_config = ConfigDict(frozen=True)

    action_type: str = Field(..., min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)
    result: ActionResult
    occurred_at: datetime = Field(default_factory=_now)


class ShieldCommitment(BaseModel):
    """Outcome of confirming a round-start shield allocation."""

    model_config = ConfigDict(frozen=True)

    player_id: str = Field(..., min_length=1)
    shield_allocations: dict[str, int]
    accepted: bool
    waiting_for_opponent: bool


class ShipAbilityConfirmation(BaseModel):
    """Request for the presentation layer to confirm a ship ability."""

    model_config = ConfigDict(frozen=True)

    ability: dict[str, Any]
    section_name: str | None
    target: Any = None
    ability_type: str
    pending_changes: dict[str, int] = Field(default_factory=dict)


__all__ = ["ProcessedAction", "ShieldCommitment", "ShipAbilityConfirmation"]
