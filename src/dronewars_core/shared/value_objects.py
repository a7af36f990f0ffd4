"""Immutable value objects shared across the rules core."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class ValueRange(BaseModel):
    """Inclusive numeric range used for seeded rolls."""

    model_config = ConfigDict(frozen=True)

    min: float = Field(default=0, ge=0)
    max: float = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _ensure_ordered(self) -> ValueRange:
        """Reject ranges whose lower bound exceeds the upper bound."""
        if self.min > self.max:
            msg = f"Range minimum {self.min} exceeds maximum {self.max}."
            raise ValueError(msg)
        return self

    @property
    def is_zero(self) -> bool:
        """Return ``True`` when the range can only produce zero."""
        return self.min == 0 and self.max == 0

    def interpolate(self, fraction: float) -> float:
        """Map *fraction* in ``[0, 1)`` onto the range."""
        return self.min + fraction * (self.max - self.min)


class ActionResult(BaseModel):
    """Outcome returned by the authoritative action processor."""

    model_config = ConfigDict(frozen=True)

    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None

    @property
    def both_players_complete(self) -> bool:
        """Return whether the processor reported both commitments as complete."""
        return bool(self.data and self.data.get("bothPlayersComplete"))


class OperationResult(BaseModel):
    """Result of a hangar operation such as a repair, recovery or scrap."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error: str | None = None
    cost: int | None = Field(default=None, ge=0)
    count: int | None = Field(default=None, ge=0)
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def failure(cls, error: str) -> OperationResult:
        """Build a failed result carrying *error*."""
        return cls(success=False, error=error)


__all__ = ["ActionResult", "OperationResult", "ValueRange"]
