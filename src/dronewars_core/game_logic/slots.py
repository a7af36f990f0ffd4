"""Adapters normalizing ship-layout payloads stored in more than one format.

Saves written by older builds keep ship components as a flat
``{componentId: lane}`` mapping and placed sections as a positional list,
while newer ones use lane-keyed ``sectionSlots`` and lane mappings. The
helpers here resolve both shapes once so callers work with a single one.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.config import ConfigDict

from dronewars_core.game_logic.configuration import ItemCatalog  # noqa: TC001
from dronewars_core.game_logic.state import ShipSlot
from dronewars_core.shared.enums import LANE_ORDER, Lane

logger = logging.getLogger(__name__)


class PositionalPlacedSections(BaseModel):
    """Placed sections stored as a list ordered left, middle, right."""

    model_config = ConfigDict(frozen=True)

    format: Literal["positional"] = "positional"
    sections: tuple[str | None, ...] = ()


class LaneMappedPlacedSections(BaseModel):
    """Placed sections stored as a ``{lane: sectionName}`` mapping."""

    model_config = ConfigDict(frozen=True)

    format: Literal["lane_mapped"] = "lane_mapped"
    lanes: dict[Lane, str | None] = Field(default_factory=dict)


PlacedSections = Annotated[
    PositionalPlacedSections | LaneMappedPlacedSections,
    Field(discriminator="format"),
]

_PLACED_SECTIONS_ADAPTER: TypeAdapter[
    PositionalPlacedSections | LaneMappedPlacedSections
] = TypeAdapter(PlacedSections)


def tag_placed_sections(
    raw: Sequence[str | None] | Mapping[str, str | None] | None,
) -> PositionalPlacedSections | LaneMappedPlacedSections:
    """Wrap a raw placed-sections payload in its tagged representation."""
    if isinstance(raw, Mapping):
        payload: dict[str, Any] = {"format": "lane_mapped", "lanes": dict(raw)}
    else:
        payload = {"format": "positional", "sections": tuple(raw or ())}
    return _PLACED_SECTIONS_ADAPTER.validate_python(payload)


def normalize_placed_sections(
    raw: Sequence[str | None] | Mapping[str, str | None] | None,
) -> tuple[str | None, ...]:
    """Return placed section names in lane order regardless of stored format."""
    tagged = tag_placed_sections(raw)
    if isinstance(tagged, LaneMappedPlacedSections):
        return tuple(tagged.lanes.get(lane) for lane in LANE_ORDER)
    return tagged.sections


def as_ship_slot(slot: ShipSlot | Mapping[str, Any] | None) -> ShipSlot | None:
    """Validate a raw ship-slot payload, passing models and ``None`` through."""
    if slot is None or isinstance(slot, ShipSlot):
        return slot
    return ShipSlot.model_validate(slot)


def resolve_component_id_for_lane(
    slot: ShipSlot | Mapping[str, Any] | None, lane: Lane | str
) -> str | None:
    """Return the component installed in *lane*.

    The lane-keyed ``sectionSlots`` entry wins. When it is missing or empty
    the legacy ``shipComponents`` mapping is scanned for the lane.
    """
    ship_slot = as_ship_slot(slot)
    if ship_slot is None:
        return None
    section_slot = ship_slot.section_slots.get(lane)  # type: ignore[call-overload]
    if section_slot is not None and section_slot.component_id:
        return section_slot.component_id
    for component_id, component_lane in ship_slot.ship_components.items():
        if component_lane == lane:
            logger.debug("Resolved lane %s from legacy components", lane)
            return component_id
    return None


def normalize_component_layout(
    slot: ShipSlot | Mapping[str, Any] | None,
) -> dict[Lane, str | None]:
    """Return the component id for every lane, resolving both storage formats."""
    return {lane: resolve_component_id_for_lane(slot, lane) for lane in LANE_ORDER}


def sync_section_slots_to_legacy(slot: ShipSlot) -> dict[str, Lane]:
    """Return the legacy ``{componentId: lane}`` view of *slot*'s sections."""
    legacy: dict[str, Lane] = {}
    for lane in LANE_ORDER:
        section_slot = slot.section_slots.get(lane)
        if section_slot is not None and section_slot.component_id:
            legacy[section_slot.component_id] = lane
    return legacy


def sync_drone_slots_to_legacy(slot: ShipSlot) -> list[dict[str, Any]]:
    """Return the legacy ``[{name, isDamaged}]`` view of filled drone slots."""
    return [
        {"name": drone_slot.assigned_drone, "isDamaged": drone_slot.slot_damaged}
        for drone_slot in slot.drone_slots
        if drone_slot.assigned_drone
    ]


def get_drone_effective_limit(
    slot: ShipSlot, slot_index: int, catalog: ItemCatalog
) -> int:
    """Return the deployment limit of the drone in *slot_index*.

    Empty or missing slots allow nothing. A damaged slot lowers the limit by
    one, but never below one.
    """
    if not 0 <= slot_index < len(slot.drone_slots):
        return 0
    drone_slot = slot.drone_slots[slot_index]
    if not drone_slot.assigned_drone:
        return 0
    base_limit = catalog.drone_limit(drone_slot.assigned_drone)
    if drone_slot.slot_damaged:
        return max(1, base_limit - 1)
    return base_limit


__all__ = [
    "LaneMappedPlacedSections",
    "PlacedSections",
    "PositionalPlacedSections",
    "as_ship_slot",
    "get_drone_effective_limit",
    "normalize_component_layout",
    "normalize_placed_sections",
    "resolve_component_id_for_lane",
    "sync_drone_slots_to_legacy",
    "sync_section_slots_to_legacy",
    "tag_placed_sections",
]
