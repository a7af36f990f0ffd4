"""Shared enumerations, value objects and cross-cutting helpers."""

from dronewars_core.shared.enums import (
    LANE_ORDER,
    AbilityHandler,
    Lane,
    LootType,
    Rarity,
    ReallocationPhase,
    ShipSlotStatus,
    SlotDisplayState,
    ThreatLevel,
    TurnPhase,
)
from dronewars_core.shared.events import (
    ProcessedAction,
    ShieldCommitment,
    ShipAbilityConfirmation,
)
from dronewars_core.shared.rng import (
    DeterministicRandomService,
    LinearCongruentialGenerator,
)
from dronewars_core.shared.value_objects import (
    ActionResult,
    OperationResult,
    ValueRange,
)

__all__ = [
    "LANE_ORDER",
    "AbilityHandler",
    "ActionResult",
    "DeterministicRandomService",
    "Lane",
    "LinearCongruentialGenerator",
    "LootType",
    "OperationResult",
    "ProcessedAction",
    "Rarity",
    "ReallocationPhase",
    "ShieldCommitment",
    "ShipAbilityConfirmation",
    "ShipSlotStatus",
    "SlotDisplayState",
    "ThreatLevel",
    "TurnPhase",
    "ValueRange",
]
