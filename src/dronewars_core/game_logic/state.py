"""State containers for shields, salvage runs and hangar ship slots."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from dronewars_core.shared.enums import (
    Lane,
    LootType,
    ReallocationPhase,
    ShipSlotStatus,
)

# Models fed from game data accept the camelCase keys used there.
_DATA_MODEL_CONFIG = ConfigDict(
    frozen=True, alias_generator=to_camel, populate_by_name=True
)


class _ValidatedState(BaseModel):
    """Frozen state whose updates go through validation again."""

    model_config = ConfigDict(frozen=True)

    def evolve(self, **changes: Any) -> Self:
        """Return a copy with *changes* applied, re-running every validator."""
        return self.model_validate({**dict(self), **changes})


class ShieldAllocationState(_ValidatedState):
    """Unconfirmed round-start shield allocation for a single player."""

    pending_shield_allocations: dict[str, int] = Field(default_factory=dict)
    pending_shields_remaining: int = Field(default=0, ge=0)
    initial_shield_allocation: dict[str, int] = Field(default_factory=dict)


class ReallocationState(_ValidatedState):
    """Progress of an ability-driven shield reallocation."""

    phase: ReallocationPhase | None = None
    shields_to_add: int = Field(default=0, ge=0)
    shields_to_remove: int = Field(default=0, ge=0)
    max_shields: int = Field(default=0, ge=0)
    pending_shield_changes: dict[str, int] = Field(default_factory=dict)
    post_removal_pending_changes: dict[str, int] = Field(default_factory=dict)
    ability: dict[str, Any] | None = None
    section_name: str | None = None

    @model_validator(mode="after")
    def _ensure_conservation(self) -> ReallocationState:
        """Shields are moved between sections, never created."""
        if sum(self.pending_shield_changes.values()) > 0:
            msg = "Reallocation cannot add more shields than it removed."
            raise ValueError(msg)
        return self

    @property
    def active(self) -> bool:
        """Return ``True`` while a reallocation is in progress."""
        return self.phase is not None


class PointOfInterest(BaseModel):
    """Map location offering salvage.

    Hex payloads that nest the location data under ``poiData`` are flattened,
    keeping the hex coordinates.
    """

    model_config = _DATA_MODEL_CONFIG

    q: int | None = None
    r: int | None = None
    name: str | None = None
    reward_type: str | None = None
    encounter_chance: float | None = Field(default=None, ge=0)
    threat_increase: float | None = Field(default=None, ge=0)
    disable_salvage: bool = False

    @model_validator(mode="before")
    @classmethod
    def _flatten_hex(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and isinstance(data.get("poiData"), Mapping):
            flattened = dict(data["poiData"])
            for key in ("q", "r"):
                if key in data:
                    flattened[key] = data[key]
            return flattened
        return data


class SalvageSlot(BaseModel):
    """Single hidden reward slot of a salvage operation."""

    model_config = _DATA_MODEL_CONFIG

    revealed: bool = False
    type: LootType | None = None
    content: dict[str, Any] | None = None


class SalvageState(_ValidatedState):
    """Progressive salvage of a point of interest."""

    poi: PointOfInterest
    zone: str | None = None
    slots: tuple[SalvageSlot, ...]
    total_slots: int = Field(..., ge=0)
    current_slot_index: int = Field(default=0, ge=0)
    current_encounter_chance: float = Field(default=0, ge=0, le=100)
    encounter_triggered: bool = False

    @model_validator(mode="after")
    def _ensure_consistency(self) -> SalvageState:
        """Ensure the slot count and cursor stay within the slot sequence."""
        if self.total_slots != len(self.slots):
            msg = "Salvage total_slots must match the number of slots."
            raise ValueError(msg)
        if self.current_slot_index > self.total_slots:
            msg = "Salvage slot index cannot point past the end of the slots."
            raise ValueError(msg)
        return self


class DroneSlot(BaseModel):
    """Drone bay of a ship slot.

    Older saves store ``droneName``/``isDamaged`` instead of
    ``assignedDrone``/``slotDamaged``; both are accepted.
    """

    model_config = _DATA_MODEL_CONFIG

    slot_index: int | None = Field(default=None, ge=0)
    assigned_drone: str | None = None
    slot_damaged: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized = dict(data)
        if normalized.get("assignedDrone") is None and "droneName" in normalized:
            normalized["assignedDrone"] = normalized.pop("droneName")
        if normalized.get("slotDamaged") is None and "isDamaged" in normalized:
            normalized["slotDamaged"] = normalized.pop("isDamaged")
        if normalized.get("assignedDrone") is None and "name" in normalized:
            normalized["assignedDrone"] = normalized.pop("name")
        normalized.pop("droneName", None)
        normalized.pop("isDamaged", None)
        normalized.pop("name", None)
        return normalized


class SectionSlot(BaseModel):
    """Component installed in a ship lane and the damage it has taken."""

    model_config = _DATA_MODEL_CONFIG

    component_id: str | None = None
    damage_dealt: int = Field(default=0, ge=0)


class DeckEntry(BaseModel):
    """Card and quantity in a ship slot's decklist."""

    model_config = _DATA_MODEL_CONFIG

    id: str
    quantity: int = Field(default=1, ge=0)


class ShipSlot(BaseModel):
    """Hangar slot holding a ship, its deck, drones and components.

    A legacy ``drones`` list of ``{name, isDamaged}`` entries is converted into
    drone slots when no ``droneSlots`` are supplied.
    """

    model_config = _DATA_MODEL_CONFIG

    id: int = Field(..., ge=0)
    name: str = ""
    status: ShipSlotStatus = ShipSlotStatus.EMPTY
    is_immutable: bool = False
    ship_id: str | None = None
    decklist: tuple[DeckEntry, ...] = ()
    drone_slots: tuple[DroneSlot, ...] = ()
    section_slots: dict[Lane, SectionSlot | None] = Field(default_factory=dict)
    ship_components: dict[str, Lane] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_drones(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        normalized = dict(data)
        legacy = normalized.pop("drones", None)
        has_slots = normalized.get("droneSlots") or normalized.get("drone_slots")
        if legacy and not has_slots:
            normalized["droneSlots"] = [
                {"slotIndex": index, **drone} for index, drone in enumerate(legacy)
            ]
        return normalized

    @property
    def is_starter_slot(self) -> bool:
        """Return ``True`` for the fixed starter slot."""
        return self.id == 0


class ShipComponentInstance(BaseModel):
    """Owned ship component tracked with its current hull."""

    model_config = _DATA_MODEL_CONFIG

    instance_id: str
    component_id: str
    current_hull: int = Field(..., ge=0)
    max_hull: int = Field(..., ge=0)

    @property
    def damaged(self) -> bool:
        """Return ``True`` when the component is below its maximum hull."""
        return self.current_hull < self.max_hull


class Hangar(BaseModel):
    """Single-player hangar: ship slots, inventory and component instances."""

    model_config = _DATA_MODEL_CONFIG

    ship_slots: tuple[ShipSlot, ...] = ()
    inventory: dict[str, int] = Field(default_factory=dict)
    component_instances: tuple[ShipComponentInstance, ...] = ()

    def find_slot(self, slot_id: int) -> ShipSlot | None:
        """Return the ship slot with *slot_id* or ``None``."""
        return next((slot for slot in self.ship_slots if slot.id == slot_id), None)

    def with_slot(self, updated: ShipSlot) -> Hangar:
        """Return a copy of the hangar with *updated* replacing its slot."""
        slots = tuple(
            updated if slot.id == updated.id else slot for slot in self.ship_slots
        )
        return self.model_copy(update={"ship_slots": slots})


class SectionThresholds(BaseModel):
    """Hull thresholds of a ship section."""

    model_config = _DATA_MODEL_CONFIG

    damaged: int | None = None


class RunShipSection(BaseModel):
    """Hull of a ship section during a run."""

    model_config = _DATA_MODEL_CONFIG

    hull: int = Field(..., ge=0)
    max_hull: int = Field(default=0, ge=0)
    thresholds: SectionThresholds = Field(default_factory=SectionThresholds)

    def is_damaged(self, default_threshold: int) -> bool:
        """Return ``True`` when the hull is at or below the damaged threshold."""
        threshold = self.thresholds.damaged
        limit = default_threshold if threshold is None else threshold
        return self.hull <= limit


class RunState(BaseModel):
    """Slice of an extraction run consumed by the extraction rules."""

    model_config = _DATA_MODEL_CONFIG

    ship_slot_id: int = Field(default=0, ge=0)
    ship_sections: dict[str, RunShipSection] = Field(default_factory=dict)
    collected_loot: tuple[dict[str, Any], ...] = ()
    current_hull: int = Field(default=0, ge=0)
    max_hull: int = Field(default=0, ge=0)
    detection: float = Field(default=0, ge=0)

    @property
    def is_starter_deck(self) -> bool:
        """Return ``True`` when the run uses the starter slot."""
        return self.ship_slot_id == 0


__all__ = [
    "DeckEntry",
    "DroneSlot",
    "Hangar",
    "PointOfInterest",
    "ReallocationState",
    "RunShipSection",
    "RunState",
    "SalvageSlot",
    "SalvageState",
    "SectionSlot",
    "SectionThresholds",
    "ShieldAllocationState",
    "ShipComponentInstance",
    "ShipSlot",
]
