"""Hangar economy: MIA recovery, scrapping and the repair bay.

Services here read and write the hangar through an injected
:class:`~dronewars_core.game_logic.interfaces.HangarStore` and pay through an
injected :class:`~dronewars_core.game_logic.interfaces.CreditLedger`. Every
operation reports failure through an :class:`OperationResult` instead of
raising, and hangar changes are only saved after the ledger accepts the
payment.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from dronewars_core.game_logic.configuration import (
    EconomyConfiguration,
    ItemCatalog,
    StarterPool,
    get_default_economy_configuration,
)
from dronewars_core.game_logic.interfaces import (  # noqa: TC001
    CreditLedger,
    HangarStore,
)
from dronewars_core.game_logic.slots import as_ship_slot, normalize_component_layout
from dronewars_core.game_logic.state import (
    Hangar,
    SectionSlot,
    ShipComponentInstance,
    ShipSlot,
)
from dronewars_core.shared.enums import Lane, ShipSlotStatus
from dronewars_core.shared.value_objects import OperationResult

logger = logging.getLogger(__name__)

SLOT_NOT_FOUND = "Ship slot not found"
SLOT_NOT_MIA = "Ship is not MIA"
SLOT_NOT_ACTIVE = "Ship slot is not active"


def calculate_section_repair_cost(
    damage_dealt: int, economy: EconomyConfiguration | None = None
) -> int:
    """Return the price of repairing *damage_dealt* points on a section."""
    if damage_dealt <= 0:
        return 0
    prices = economy or get_default_economy_configuration()
    return damage_dealt * prices.section_damage_repair_cost


def calculate_drone_slot_repair_cost(economy: EconomyConfiguration | None = None) -> int:
    """Return the flat price of repairing a damaged drone slot."""
    return (economy or get_default_economy_configuration()).drone_slot_repair_cost


class RecoveryValuation(BaseModel):
    """Replacement value of a ship slot and the resulting recovery price."""

    model_config = ConfigDict(frozen=True)

    total_value: int = Field(..., ge=0)
    cost: int = Field(..., ge=0)


class RecoveryService:
    """Recovers or scraps ship slots lost in action."""

    def __init__(
        self,
        hangar_store: HangarStore,
        ledger: CreditLedger,
        catalog: ItemCatalog,
        starter_pool: StarterPool,
        economy: EconomyConfiguration | None = None,
    ) -> None:
        self._hangar_store = hangar_store
        self._ledger = ledger
        self._catalog = catalog
        self._starter_pool = starter_pool
        self._economy = economy or get_default_economy_configuration()

    def value_ship_slot(self, ship_slot: ShipSlot | Mapping[str, Any] | None) -> RecoveryValuation:
        """Value the non-starter contents of *ship_slot*.

        Cards are priced at their replication cost per copy. The ship, drones
        and components are priced at their blueprint cost. Items missing from
        the catalog add nothing.
        """
        slot = as_ship_slot(ship_slot)
        floor = self._economy.mia_recovery_floor
        if slot is None:
            return RecoveryValuation(total_value=0, cost=floor)

        pool = self._starter_pool
        catalog = self._catalog
        total = 0
        for entry in slot.decklist:
            if entry.id in pool.card_ids:
                continue
            rarity = catalog.card_rarity(entry.id)
            if rarity is not None:
                total += self._economy.replication_cost(rarity) * entry.quantity

        if slot.ship_id and slot.ship_id not in pool.ship_ids:
            rarity = catalog.ship_rarity(slot.ship_id)
            if rarity is not None:
                total += self._economy.blueprint_cost(rarity)

        for drone_slot in slot.drone_slots:
            name = drone_slot.assigned_drone
            if not name or name in pool.drone_names:
                continue
            rarity = catalog.drone_rarity(name)
            if rarity is not None:
                total += self._economy.blueprint_cost(rarity)

        for component_id in normalize_component_layout(slot).values():
            if not component_id or component_id in pool.component_ids:
                continue
            rarity = catalog.component_rarity(component_id)
            if rarity is not None:
                total += self._economy.blueprint_cost(rarity)

        cost = max(floor, math.floor(total * self._economy.mia_recovery_multiplier))
        return RecoveryValuation(total_value=total, cost=cost)

    def calculate_recovery_cost(self, ship_slot: ShipSlot | Mapping[str, Any] | None) -> int:
        """Return the price of recovering *ship_slot*; never below the floor."""
        return self.value_ship_slot(ship_slot).cost

    def recovery_cost_for(self, slot_id: int) -> int:
        """Return the recovery price of the hangar slot *slot_id*."""
        return self.calculate_recovery_cost(self._hangar_store.load_hangar().find_slot(slot_id))

    def can_afford_recovery(self, slot_id: int) -> bool:
        """Return ``True`` when the ledger covers the recovery of *slot_id*."""
        return self._ledger.can_afford(self.recovery_cost_for(slot_id))

    def recover(self, slot_id: int) -> OperationResult:
        """Pay to bring an MIA slot back into service with its drones repaired."""
        hangar = self._hangar_store.load_hangar()
        slot = hangar.find_slot(slot_id)
        if slot is None:
            return OperationResult.failure(SLOT_NOT_FOUND)
        if slot.status is not ShipSlotStatus.MIA:
            return OperationResult.failure(SLOT_NOT_MIA)

        cost = self.calculate_recovery_cost(slot)
        payment = self._ledger.deduct(cost, f"MIA Recovery: {slot.name}")
        if not payment.success:
            return OperationResult.failure(payment.error or "Payment failed")

        recovered = slot.model_copy(
            update={
                "status": ShipSlotStatus.ACTIVE,
                "drone_slots": tuple(
                    drone.model_copy(update={"slot_damaged": False})
                    for drone in slot.drone_slots
                ),
            }
        )
        self._hangar_store.save_hangar(hangar.with_slot(recovered))
        logger.info("Recovered ship slot %s for %s credits", slot_id, cost)
        return OperationResult(success=True, cost=cost)

    def scrap(self, slot_id: int) -> OperationResult:
        """Give up an MIA slot, removing its cards and ship from the inventory."""
        hangar = self._hangar_store.load_hangar()
        slot = hangar.find_slot(slot_id)
        if slot is None:
            return OperationResult.failure(SLOT_NOT_FOUND)
        if slot.status is not ShipSlotStatus.MIA:
            return OperationResult.failure(SLOT_NOT_MIA)
        if slot.is_immutable:
            return OperationResult.failure("Cannot scrap starter deck")

        inventory = dict(hangar.inventory)
        cards_removed: list[dict[str, Any]] = []
        for entry in slot.decklist:
            owned = inventory.get(entry.id, 0)
            if owned <= 0:
                continue
            removed = min(entry.quantity, owned)
            _take(inventory, entry.id, removed)
            cards_removed.append({"cardId": entry.id, "quantity": removed})

        if slot.ship_id and slot.ship_id not in self._starter_pool.ship_ids:
            _take(inventory, slot.ship_id, 1)

        emptied = slot.model_copy(
            update={
                "status": ShipSlotStatus.EMPTY,
                "name": f"Ship Slot {slot.id}",
                "ship_id": None,
                "decklist": (),
                "drone_slots": (),
                "section_slots": {},
                "ship_components": {},
            }
        )
        updated = hangar.with_slot(emptied).model_copy(update={"inventory": inventory})
        self._hangar_store.save_hangar(updated)
        logger.info(
            "Scrapped ship slot %s, %s card types removed", slot_id, len(cards_removed)
        )
        return OperationResult(
            success=True,
            count=len(cards_removed),
            details={"cardsRemoved": cards_removed},
        )


def _take(inventory: dict[str, int], item_id: str, quantity: int) -> None:
    remaining = inventory.get(item_id, 0) - quantity
    if remaining > 0:
        inventory[item_id] = remaining
    else:
        inventory.pop(item_id, None)


class DamagedDrone(BaseModel):
    """Damaged drone awaiting repair in an active ship slot."""

    model_config = ConfigDict(frozen=True)

    ship_slot_id: int
    drone_index: int = Field(..., ge=0)
    drone_name: str
    repair_cost: int = Field(..., ge=0)


class RepairService:
    """Repair bay pricing and repairs for components, drones and sections."""

    def __init__(
        self,
        hangar_store: HangarStore,
        ledger: CreditLedger,
        catalog: ItemCatalog,
        economy: EconomyConfiguration | None = None,
    ) -> None:
        self._hangar_store = hangar_store
        self._ledger = ledger
        self._catalog = catalog
        self._economy = economy or get_default_economy_configuration()

    # Hull repair --------------------------------------------------------
    def hull_repair_cost(self, instance: ShipComponentInstance | None) -> int:
        """Return the price of restoring *instance* to full hull."""
        if instance is None or not instance.damaged:
            return 0
        return (instance.max_hull - instance.current_hull) * self._economy.hull_repair_cost_per_hp

    def damaged_components(self) -> tuple[ShipComponentInstance, ...]:
        return tuple(
            instance
            for instance in self._hangar_store.load_hangar().component_instances
            if instance.damaged
        )

    def total_repair_cost(self) -> int:
        return sum(self.hull_repair_cost(instance) for instance in self.damaged_components())

    def repair_component(self, instance_id: str) -> OperationResult:
        """Restore a single component instance to full hull."""
        hangar = self._hangar_store.load_hangar()
        instance = next(
            (i for i in hangar.component_instances if i.instance_id == instance_id), None
        )
        if instance is None:
            return OperationResult.failure("Component not found")
        if not instance.damaged:
            return OperationResult.failure("Component is not damaged")

        cost = self.hull_repair_cost(instance)
        payment = self._ledger.deduct(cost, f"Hull repair: {instance.component_id}")
        if not payment.success:
            return OperationResult.failure(payment.error or "Payment failed")
        self._hangar_store.save_hangar(_repair_instances(hangar, {instance_id}))
        logger.info("Repaired %s for %s credits", instance.component_id, cost)
        return OperationResult(success=True, cost=cost)

    def repair_all_components(self) -> OperationResult:
        """Restore every damaged component instance in one payment."""
        damaged = self.damaged_components()
        if not damaged:
            return OperationResult.failure("No damaged components")
        cost = sum(self.hull_repair_cost(instance) for instance in damaged)
        payment = self._ledger.deduct(cost, f"Repair all components ({len(damaged)})")
        if not payment.success:
            return OperationResult.failure(payment.error or "Payment failed")
        hangar = self._hangar_store.load_hangar()
        self._hangar_store.save_hangar(
            _repair_instances(hangar, {instance.instance_id for instance in damaged})
        )
        return OperationResult(success=True, cost=cost, count=len(damaged))

    # Drone repair -------------------------------------------------------
    def drone_repair_cost(self, drone_name: str) -> int:
        """Return the repair price of *drone_name*; unknown drones cost as Common."""
        rarity = self._catalog.drone_rarity(drone_name)
        if rarity is None:
            logger.debug("Drone %s not catalogued, using Common repair cost", drone_name)
        return self._economy.drone_repair_cost(rarity)

    def damaged_drones(self) -> list[DamagedDrone]:
        """Return damaged drones across all active ship slots."""
        damaged: list[DamagedDrone] = []
        for slot in self._hangar_store.load_hangar().ship_slots:
            if slot.status is not ShipSlotStatus.ACTIVE:
                continue
            for index, drone_slot in enumerate(slot.drone_slots):
                if drone_slot.assigned_drone and drone_slot.slot_damaged:
                    damaged.append(
                        DamagedDrone(
                            ship_slot_id=slot.id,
                            drone_index=index,
                            drone_name=drone_slot.assigned_drone,
                            repair_cost=self.drone_repair_cost(drone_slot.assigned_drone),
                        )
                    )
        return damaged

    def repair_drone(self, slot_id: int, drone_index: int) -> OperationResult:
        """Repair the drone at *drone_index* in an active ship slot."""
        hangar = self._hangar_store.load_hangar()
        slot = hangar.find_slot(slot_id)
        if slot is None:
            return OperationResult.failure(SLOT_NOT_FOUND)
        if slot.status is not ShipSlotStatus.ACTIVE:
            return OperationResult.failure(SLOT_NOT_ACTIVE)
        if not 0 <= drone_index < len(slot.drone_slots):
            return OperationResult.failure("Drone not found")
        drone_slot = slot.drone_slots[drone_index]
        if not drone_slot.assigned_drone:
            return OperationResult.failure("Drone not found")
        if not drone_slot.slot_damaged:
            return OperationResult.failure("Drone is not damaged")

        cost = self.drone_repair_cost(drone_slot.assigned_drone)
        payment = self._ledger.deduct(cost, f"Drone repair: {drone_slot.assigned_drone}")
        if not payment.success:
            return OperationResult.failure(payment.error or "Payment failed")
        self._hangar_store.save_hangar(hangar.with_slot(_repair_drones(slot, {drone_index})))
        logger.info("Repaired drone %s in slot %s", drone_slot.assigned_drone, slot_id)
        return OperationResult(success=True, cost=cost)

    def repair_all_drones_in_slot(self, slot_id: int) -> OperationResult:
        """Repair every damaged drone of an active ship slot in one payment."""
        hangar = self._hangar_store.load_hangar()
        slot = hangar.find_slot(slot_id)
        if slot is None or slot.status is not ShipSlotStatus.ACTIVE:
            return OperationResult.failure("Invalid ship slot")
        damaged = {
            index: drone.assigned_drone
            for index, drone in enumerate(slot.drone_slots)
            if drone.assigned_drone and drone.slot_damaged
        }
        if not damaged:
            return OperationResult.failure("No damaged drones in this slot")

        cost = sum(self.drone_repair_cost(name) for name in damaged.values())
        payment = self._ledger.deduct(cost, f"Repair all drones in slot {slot_id}")
        if not payment.success:
            return OperationResult.failure(payment.error or "Payment failed")
        self._hangar_store.save_hangar(hangar.with_slot(_repair_drones(slot, set(damaged))))
        return OperationResult(success=True, cost=cost, count=len(damaged))

    # Section repair -----------------------------------------------------
    def section_repair_cost(self, slot_id: int, lane: Lane | str) -> int:
        """Return the price of clearing the damage on a ship slot lane."""
        slot = self._hangar_store.load_hangar().find_slot(slot_id)
        section = slot.section_slots.get(lane) if slot is not None else None  # type: ignore[call-overload]
        if section is None:
            return 0
        return calculate_section_repair_cost(section.damage_dealt, self._economy)

    def repair_section(self, slot_id: int, lane: Lane | str) -> OperationResult:
        """Clear the damage dealt to the section installed in *lane*."""
        hangar = self._hangar_store.load_hangar()
        slot = hangar.find_slot(slot_id)
        if slot is None:
            return OperationResult.failure(SLOT_NOT_FOUND)
        section: SectionSlot | None = slot.section_slots.get(lane)  # type: ignore[call-overload]
        if section is None or not section.component_id:
            return OperationResult.failure("Section not found")
        if section.damage_dealt <= 0:
            return OperationResult.failure("Section is not damaged")

        cost = calculate_section_repair_cost(section.damage_dealt, self._economy)
        payment = self._ledger.deduct(cost, f"Section repair: {section.component_id}")
        if not payment.success:
            return OperationResult.failure(payment.error or "Payment failed")
        repaired = slot.model_copy(
            update={
                "section_slots": {
                    **slot.section_slots,
                    Lane(lane): section.model_copy(update={"damage_dealt": 0}),
                }
            }
        )
        self._hangar_store.save_hangar(hangar.with_slot(repaired))
        return OperationResult(success=True, cost=cost)


def _repair_instances(hangar: Hangar, instance_ids: set[str]) -> Hangar:
    instances = tuple(
        instance.model_copy(update={"current_hull": instance.max_hull})
        if instance.instance_id in instance_ids
        else instance
        for instance in hangar.component_instances
    )
    return hangar.model_copy(update={"component_instances": instances})


def _repair_drones(slot: ShipSlot, indices: set[int]) -> ShipSlot:
    drones = tuple(
        drone.model_copy(update={"slot_damaged": False}) if index in indices else drone
        for index, drone in enumerate(slot.drone_slots)
    )
    return slot.model_copy(update={"drone_slots": drones})


__all__ = [
    "DamagedDrone",
    "RecoveryService",
    "RecoveryValuation",
    "RepairService",
    "calculate_drone_slot_repair_cost",
    "calculate_section_repair_cost",
]
