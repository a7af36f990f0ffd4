"""Pure rules for shield capacity and authoritative shield updates.

These helpers operate on the player-state payloads held by the authoritative
game state (``{"shipSections": {name: {...}}, "energy": ...}``). Each returns
new payloads and never mutates its input.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence  # noqa: TC003
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

MIDDLE_LANE_INDEX = 1
MIDDLE_LANE_SHIELD_BONUS = "Shields Per Turn"
REALLOCATION_ENERGY_COST = 1


class ShieldValidation(BaseModel):
    """Outcome of validating a single shield addition or removal."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    error: str | None = None
    max_available: int = Field(default=0, ge=0)


def _sections(player_state: Mapping[str, Any]) -> Mapping[str, Any]:
    return player_state.get("shipSections") or {}


def effective_section_max_shields(
    section_name: str,
    player_state: Mapping[str, Any],
    placed_sections: Sequence[str | None],
) -> int:
    """Return the shield capacity of *section_name* including lane bonuses."""
    section = _sections(player_state).get(section_name)
    if not section:
        return 0
    effective_max = section.get("shields", 0)
    placed = list(placed_sections)
    if section_name in placed and placed.index(section_name) == MIDDLE_LANE_INDEX:
        bonus = (section.get("middleLaneBonus") or {}).get(MIDDLE_LANE_SHIELD_BONUS)
        if bonus:
            effective_max += bonus
    return effective_max


def allocated_shields(player_state: Mapping[str, Any], section_name: str) -> int:
    """Return the shields currently allocated to *section_name*."""
    section = _sections(player_state).get(section_name) or {}
    return section.get("allocatedShields", 0)


def validate_shield_removal(
    player_state: Mapping[str, Any], section_name: str
) -> ShieldValidation:
    """Check that *section_name* has an allocated shield to give up."""
    if section_name not in _sections(player_state):
        return ShieldValidation(valid=False, error="Section not found")
    if allocated_shields(player_state, section_name) <= 0:
        return ShieldValidation(valid=False, error="No shields to remove")
    return ShieldValidation(valid=True)


def validate_shield_addition(
    player_state: Mapping[str, Any],
    section_name: str,
    placed_sections: Sequence[str | None],
) -> ShieldValidation:
    """Check that *section_name* has spare shield capacity."""
    if section_name not in _sections(player_state):
        return ShieldValidation(valid=False, error="Section not found")
    available = effective_section_max_shields(
        section_name, player_state, placed_sections
    ) - allocated_shields(player_state, section_name)
    if available <= 0:
        return ShieldValidation(valid=False, error="Section at maximum shields")
    return ShieldValidation(valid=True, max_available=available)


def valid_reallocation_targets(
    player_state: Mapping[str, Any],
    direction: Literal["remove", "add"],
    placed_sections: Sequence[str | None],
) -> list[str]:
    """Return placed sections that can give up or receive a shield."""
    targets: list[str] = []
    for section_name in placed_sections:
        if section_name is None or section_name not in _sections(player_state):
            continue
        if direction == "remove":
            if validate_shield_removal(player_state, section_name).valid:
                targets.append(section_name)
        elif validate_shield_addition(
            player_state, section_name, placed_sections
        ).valid:
            targets.append(section_name)
    return targets


def apply_shield_changes(
    player_state: Mapping[str, Any], changes: Mapping[str, int]
) -> dict[str, Any]:
    """Return a player state with signed shield *changes* applied per section."""
    sections = {name: dict(data) for name, data in _sections(player_state).items()}
    for section_name, delta in changes.items():
        if section_name not in sections or delta == 0:
            continue
        current = sections[section_name].get("allocatedShields", 0)
        sections[section_name]["allocatedShields"] = max(0, current + delta)
    return {**player_state, "shipSections": sections}


def apply_shield_allocations(
    player_state: Mapping[str, Any], allocations: Mapping[str, int]
) -> dict[str, Any]:
    """Return a player state whose sections hold exactly *allocations*.

    Sections missing from *allocations* end up with no allocated shields.
    """
    sections = {
        name: {**data, "allocatedShields": allocations.get(name, 0)}
        for name, data in _sections(player_state).items()
    }
    return {**player_state, "shipSections": sections}


def complete_reallocation(
    player_state: Mapping[str, Any], pending_changes: Mapping[str, int]
) -> dict[str, Any]:
    """Apply confirmed reallocation deltas and pay the ability's energy cost."""
    updated = apply_shield_changes(player_state, pending_changes)
    energy = updated.get("energy", 0)
    if energy >= REALLOCATION_ENERGY_COST:
        updated["energy"] = energy - REALLOCATION_ENERGY_COST
    return updated


__all__ = [
    "MIDDLE_LANE_SHIELD_BONUS",
    "ShieldValidation",
    "allocated_shields",
    "apply_shield_allocations",
    "apply_shield_changes",
    "complete_reallocation",
    "effective_section_max_shields",
    "valid_reallocation_targets",
    "validate_shield_addition",
    "validate_shield_removal",
]
