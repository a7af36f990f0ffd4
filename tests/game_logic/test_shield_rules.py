"""Tests for shield capacity rules and authoritative shield updates."""

import pytest

from dronewars_core.game_logic.shield_rules import (
    apply_shield_allocations,
    apply_shield_changes,
    complete_reallocation,
    effective_section_max_shields,
    valid_reallocation_targets,
    validate_shield_addition,
    validate_shield_removal,
)
from dronewars_core.game_logic.slots import normalize_placed_sections

PLACED = ["bridge", "powerCell", "droneControlHub"]


@pytest.fixture
def player_state() -> dict:
    return {
        "energy": 2,
        "shipSections": {
            "bridge": {"shields": 2, "allocatedShields": 2},
            "powerCell": {
                "shields": 2,
                "allocatedShields": 0,
                "middleLaneBonus": {"Shields Per Turn": 1},
            },
            "droneControlHub": {
                "shields": 3,
                "allocatedShields": 1,
                "middleLaneBonus": {"Shields Per Turn": 2},
            },
        },
    }


def test_middle_lane_bonus_applies_only_in_middle_lane(player_state: dict) -> None:
    assert effective_section_max_shields("powerCell", player_state, PLACED) == 3
    assert effective_section_max_shields("droneControlHub", player_state, PLACED) == 3

    swapped = ["bridge", "droneControlHub", "powerCell"]
    assert effective_section_max_shields("droneControlHub", player_state, swapped) == 5
    assert effective_section_max_shields("powerCell", player_state, swapped) == 2


def test_unknown_section_has_no_capacity(player_state: dict) -> None:
    assert effective_section_max_shields("cargoBay", player_state, PLACED) == 0


def test_lane_mapped_layout_is_equivalent(player_state: dict) -> None:
    placed = normalize_placed_sections({"l": "bridge", "m": "powerCell", "r": None})

    assert effective_section_max_shields("powerCell", player_state, placed) == 3


def test_removal_validation(player_state: dict) -> None:
    assert validate_shield_removal(player_state, "bridge").valid
    assert validate_shield_removal(player_state, "powerCell").error == "No shields to remove"
    assert validate_shield_removal(player_state, "cargoBay").error == "Section not found"


def test_addition_validation_reports_spare_capacity(player_state: dict) -> None:
    result = validate_shield_addition(player_state, "powerCell", PLACED)

    assert result.valid
    assert result.max_available == 3
    assert (
        validate_shield_addition(player_state, "bridge", PLACED).error
        == "Section at maximum shields"
    )


def test_valid_reallocation_targets(player_state: dict) -> None:
    assert valid_reallocation_targets(player_state, "remove", PLACED) == [
        "bridge",
        "droneControlHub",
    ]
    assert valid_reallocation_targets(player_state, "add", PLACED) == [
        "powerCell",
        "droneControlHub",
    ]
    assert valid_reallocation_targets(player_state, "add", [None, "powerCell", None]) == [
        "powerCell"
    ]


def test_apply_shield_changes_does_not_mutate_input(player_state: dict) -> None:
    updated = apply_shield_changes(player_state, {"bridge": -2, "powerCell": 2, "ghost": 1})

    assert updated["shipSections"]["bridge"]["allocatedShields"] == 0
    assert updated["shipSections"]["powerCell"]["allocatedShields"] == 2
    assert "ghost" not in updated["shipSections"]
    assert player_state["shipSections"]["bridge"]["allocatedShields"] == 2


def test_apply_shield_allocations_replaces_all_sections(player_state: dict) -> None:
    updated = apply_shield_allocations(player_state, {"powerCell": 3})

    assert {
        name: section["allocatedShields"] for name, section in updated["shipSections"].items()
    } == {"bridge": 0, "powerCell": 3, "droneControlHub": 0}


def test_complete_reallocation_spends_energy(player_state: dict) -> None:
    updated = complete_reallocation(player_state, {"bridge": -1, "powerCell": 1})

    assert updated["energy"] == 1
    assert updated["shipSections"]["powerCell"]["allocatedShields"] == 1


def test_complete_reallocation_without_energy_keeps_zero(player_state: dict) -> None:
    updated = complete_reallocation({**player_state, "energy": 0}, {})

    assert updated["energy"] == 0
