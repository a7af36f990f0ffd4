"""Shared enumerations used across the rules core."""

from enum import StrEnum


class TurnPhase(StrEnum):
    """Turn phases reported by the authoritative game state."""

    DECK_SELECTION = "deckSelection"
    PLACEMENT = "placement"
    ROUND_INITIALIZATION = "roundInitialization"
    ALLOCATE_SHIELDS = "allocateShields"
    MANDATORY_DISCARD = "mandatoryDiscard"
    DEPLOYMENT = "deployment"
    ACTION = "action"
    GAME_OVER = "gameOver"


class AbilityHandler(StrEnum):
    """Execution modes a ship ability can be routed to."""

    REALLOCATION = "reallocation"
    CONFIRMATION = "confirmation"
    TARGETING = "targeting"


class ReallocationPhase(StrEnum):
    """Ordered sub-phases of a sequential shield reallocation."""

    REMOVING = "removing"
    ADDING = "adding"


class Lane(StrEnum):
    """Ship lanes a component can occupy."""

    LEFT = "l"
    MIDDLE = "m"
    RIGHT = "r"


LANE_ORDER: tuple[Lane, ...] = (Lane.LEFT, Lane.MIDDLE, Lane.RIGHT)


class LootType(StrEnum):
    """Kinds of content a salvage slot or loot entry can hold."""

    CARD = "card"
    SALVAGE_ITEM = "salvageItem"
    BLUEPRINT = "blueprint"
    TOKEN = "token"


class SlotDisplayState(StrEnum):
    """Display states a salvage slot moves through from left to right."""

    LOCKED = "locked"
    NEXT_TARGET = "next_target"
    SCANNING = "scanning"
    REVEALED = "revealed"


class ThreatLevel(StrEnum):
    """Run-wide threat levels that raise the starting encounter chance."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ShipSlotStatus(StrEnum):
    """Lifecycle states of a hangar ship slot."""

    ACTIVE = "active"
    MIA = "mia"
    EMPTY = "empty"


class Rarity(StrEnum):
    """Rarity tiers driving replication, blueprint and repair prices."""

    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    MYTHIC = "Mythic"


__all__ = [
    "LANE_ORDER",
    "AbilityHandler",
    "Lane",
    "LootType",
    "Rarity",
    "ReallocationPhase",
    "ShipSlotStatus",
    "SlotDisplayState",
    "ThreatLevel",
    "TurnPhase",
]
