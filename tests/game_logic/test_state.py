"""Tests for validated updates of the shield and salvage state models."""

import pytest
from pydantic import ValidationError

from dronewars_core.game_logic.state import (
    PointOfInterest,
    ReallocationState,
    SalvageSlot,
    SalvageState,
    ShieldAllocationState,
)
from dronewars_core.shared.enums import ReallocationPhase


def make_salvage(index: int = 0) -> SalvageState:
    slots = (SalvageSlot(), SalvageSlot())
    return SalvageState(
        poi=PointOfInterest(name="Derelict Freighter", q=1, r=-1),
        slots=slots,
        total_slots=len(slots),
        current_slot_index=index,
    )


def test_evolve_applies_changes_and_keeps_the_rest() -> None:
    state = ReallocationState(
        phase=ReallocationPhase.REMOVING, shields_to_remove=2, max_shields=2
    )

    updated = state.evolve(
        pending_shield_changes={"bridge": -1}, shields_to_remove=1, shields_to_add=1
    )

    assert updated.pending_shield_changes == {"bridge": -1}
    assert (updated.shields_to_remove, updated.shields_to_add) == (1, 1)
    assert updated.phase is ReallocationPhase.REMOVING
    assert state.pending_shield_changes == {}


def test_reallocation_update_cannot_create_shields() -> None:
    state = ReallocationState(
        phase=ReallocationPhase.ADDING,
        shields_to_add=1,
        pending_shield_changes={"droneControlHub": -2, "bridge": 2},
    )

    with pytest.raises(ValidationError, match="more shields than it removed"):
        state.evolve(pending_shield_changes={"droneControlHub": -2, "bridge": 3})


def test_allocation_update_cannot_overspend_budget() -> None:
    state = ShieldAllocationState(pending_shields_remaining=0)

    with pytest.raises(ValidationError):
        state.evolve(pending_shields_remaining=-1)


def test_salvage_update_keeps_cursor_inside_slots() -> None:
    state = make_salvage(index=2)

    with pytest.raises(ValidationError, match="past the end"):
        state.evolve(current_slot_index=3)


def test_salvage_update_keeps_encounter_chance_in_range() -> None:
    with pytest.raises(ValidationError):
        make_salvage().evolve(current_encounter_chance=101)


def test_salvage_update_preserves_nested_models() -> None:
    updated = make_salvage().evolve(current_slot_index=1, encounter_triggered=True)

    assert updated.poi == PointOfInterest(name="Derelict Freighter", q=1, r=-1)
    assert updated.slots == (SalvageSlot(), SalvageSlot())
    assert updated.current_slot_index == 1
    assert updated.encounter_triggered is True
