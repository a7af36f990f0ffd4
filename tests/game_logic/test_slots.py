"""Tests for ship-layout normalization across storage formats."""

import pytest

from dronewars_core.game_logic.configuration import ItemCatalog
from dronewars_core.game_logic.slots import (
    LaneMappedPlacedSections,
    PositionalPlacedSections,
    get_drone_effective_limit,
    normalize_component_layout,
    normalize_placed_sections,
    resolve_component_id_for_lane,
    sync_drone_slots_to_legacy,
    sync_section_slots_to_legacy,
    tag_placed_sections,
)
from dronewars_core.game_logic.state import ShipSlot
from dronewars_core.shared.enums import Lane


def test_lane_component_falls_back_to_legacy_mapping() -> None:
    slot = {
        "id": 1,
        "sectionSlots": {"l": {"componentId": None}},
        "shipComponents": {"POWERCELL_001": "l"},
    }

    assert resolve_component_id_for_lane(slot, "l") == "POWERCELL_001"


def test_section_slot_wins_over_legacy_mapping() -> None:
    slot = {
        "id": 1,
        "sectionSlots": {"m": {"componentId": "BRIDGE_002"}},
        "shipComponents": {"BRIDGE_001": "m"},
    }

    assert resolve_component_id_for_lane(slot, Lane.MIDDLE) == "BRIDGE_002"


def test_missing_lane_resolves_to_none() -> None:
    assert resolve_component_id_for_lane({"id": 1}, "r") is None
    assert resolve_component_id_for_lane(None, "r") is None


def test_component_layout_covers_every_lane() -> None:
    slot = ShipSlot.model_validate(
        {
            "id": 2,
            "sectionSlots": {"l": {"componentId": "BRIDGE_001"}, "r": None},
            "shipComponents": {"HUB_001": "r"},
        }
    )

    assert normalize_component_layout(slot) == {
        Lane.LEFT: "BRIDGE_001",
        Lane.MIDDLE: None,
        Lane.RIGHT: "HUB_001",
    }


def test_placed_sections_are_tagged_by_format() -> None:
    assert isinstance(tag_placed_sections(["a", "b", "c"]), PositionalPlacedSections)
    assert isinstance(tag_placed_sections({"l": "a"}), LaneMappedPlacedSections)


@pytest.mark.parametrize(
    "raw",
    [
        ["bridge", "powerCell", "droneControlHub"],
        {"m": "powerCell", "l": "bridge", "r": "droneControlHub"},
    ],
)
def test_placed_sections_normalize_to_lane_order(raw: object) -> None:
    assert normalize_placed_sections(raw) == ("bridge", "powerCell", "droneControlHub")


def test_empty_placed_sections() -> None:
    assert normalize_placed_sections(None) == ()
    assert normalize_placed_sections({}) == (None, None, None)


def test_sync_to_legacy_views() -> None:
    slot = ShipSlot.model_validate(
        {
            "id": 3,
            "sectionSlots": {"l": {"componentId": "BRIDGE_001"}, "m": None},
            "droneSlots": [
                {"slotIndex": 0, "assignedDrone": "Dart", "slotDamaged": True},
                {"slotIndex": 1, "assignedDrone": None},
            ],
        }
    )

    assert sync_section_slots_to_legacy(slot) == {"BRIDGE_001": Lane.LEFT}
    assert sync_drone_slots_to_legacy(slot) == [{"name": "Dart", "isDamaged": True}]


def test_legacy_drone_list_becomes_drone_slots() -> None:
    slot = ShipSlot.model_validate(
        {"id": 4, "drones": [{"name": "Dart", "isDamaged": False}, {"name": "Talon"}]}
    )

    assert [drone.assigned_drone for drone in slot.drone_slots] == ["Dart", "Talon"]
    assert [drone.slot_index for drone in slot.drone_slots] == [0, 1]


@pytest.mark.parametrize(
    ("damaged", "limit", "expected"),
    [(False, 3, 3), (True, 3, 2), (True, 1, 1)],
)
def test_drone_effective_limit(damaged: bool, limit: int, expected: int) -> None:
    slot = ShipSlot.model_validate(
        {"id": 1, "droneSlots": [{"slotIndex": 0, "assignedDrone": "Dart", "slotDamaged": damaged}]}
    )
    catalog = ItemCatalog(drone_limits={"Dart": limit})

    assert get_drone_effective_limit(slot, 0, catalog) == expected


def test_empty_or_missing_drone_slot_has_no_limit() -> None:
    slot = ShipSlot.model_validate({"id": 1, "droneSlots": [{"slotIndex": 0}]})

    assert get_drone_effective_limit(slot, 0, ItemCatalog()) == 0
    assert get_drone_effective_limit(slot, 5, ItemCatalog()) == 0
