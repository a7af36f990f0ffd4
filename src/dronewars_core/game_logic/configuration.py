"""Economy, map-tier and catalog configuration consumed by the rules core."""

from __future__ import annotations

from functools import cache

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from dronewars_core.shared.enums import Rarity, ThreatLevel
from dronewars_core.shared.value_objects import ValueRange


def _rarity_table(
    common: int, uncommon: int, rare: int, mythic: int
) -> dict[Rarity, int]:
    return {
        Rarity.COMMON: common,
        Rarity.UNCOMMON: uncommon,
        Rarity.RARE: rare,
        Rarity.MYTHIC: mythic,
    }


class EconomyDefaults(BaseSettings):
    """Load default economic parameters from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DRONEWARS_ECONOMY_",
        extra="ignore",
    )

    replication_costs: dict[Rarity, int] = Field(
        default_factory=lambda: _rarity_table(100, 250, 600, 1500)
    )
    blueprint_costs: dict[Rarity, int] = Field(
        default_factory=lambda: _rarity_table(75, 175, 450, 1100)
    )
    drone_repair_costs: dict[Rarity, int] = Field(
        default_factory=lambda: _rarity_table(50, 100, 200, 400)
    )
    mia_recovery_floor: int = Field(default=500, ge=0)
    mia_recovery_multiplier: float = Field(default=0.5, ge=0)
    hull_repair_cost_per_hp: int = Field(default=10, ge=0)
    drone_slot_repair_cost: int = Field(default=50, ge=0)
    section_damage_repair_cost: int = Field(default=10, ge=0)
    starter_deck_extraction_limit: int = Field(default=3, ge=0)
    custom_deck_extraction_limit: int = Field(default=6, ge=0)

    def to_config(self) -> EconomyConfiguration:
        """Convert defaults into an immutable configuration object."""
        return EconomyConfiguration(**self.model_dump())


class EconomyConfiguration(BaseModel):
    """Immutable representation of the hangar economy prices."""

    model_config = ConfigDict(frozen=True)

    replication_costs: dict[Rarity, int]
    blueprint_costs: dict[Rarity, int]
    drone_repair_costs: dict[Rarity, int]
    mia_recovery_floor: int = Field(ge=0)
    mia_recovery_multiplier: float = Field(ge=0)
    hull_repair_cost_per_hp: int = Field(ge=0)
    drone_slot_repair_cost: int = Field(ge=0)
    section_damage_repair_cost: int = Field(ge=0)
    starter_deck_extraction_limit: int = Field(ge=0)
    custom_deck_extraction_limit: int = Field(ge=0)

    def replication_cost(self, rarity: str | None) -> int:
        """Return the card replication price for *rarity*, defaulting to Common."""
        return _lookup(self.replication_costs, rarity)

    def blueprint_cost(self, rarity: str | None) -> int:
        """Return the blueprint price for *rarity*, defaulting to Common."""
        return _lookup(self.blueprint_costs, rarity)

    def drone_repair_cost(self, rarity: str | None) -> int:
        """Return the drone repair price for *rarity*, defaulting to Common."""
        return _lookup(self.drone_repair_costs, rarity)


def _lookup(table: dict[Rarity, int], rarity: str | None) -> int:
    if rarity is not None and rarity in table:
        return table[rarity]  # type: ignore[index]
    return table.get(Rarity.COMMON, 0)


def _default_threat_bonus() -> dict[ThreatLevel, ValueRange]:
    return {
        ThreatLevel.LOW: ValueRange(min=0, max=0),
        ThreatLevel.MEDIUM: ValueRange(min=5, max=10),
        ThreatLevel.HIGH: ValueRange(min=10, max=20),
    }


class DetectionTriggers(BaseModel):
    """Detection added by map actions within a tier."""

    model_config = ConfigDict(frozen=True)

    looting: float = Field(default=10, ge=0)


class TierConfiguration(BaseModel):
    """Map-tier tuning for salvage encounters and detection.

    Accepts both snake_case and the camelCase keys used by map data files.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    tier: int = Field(default=1, ge=1)
    detection_triggers: DetectionTriggers = Field(default_factory=DetectionTriggers)
    salvage_encounter_increase_range: ValueRange = Field(
        default_factory=lambda: ValueRange(min=5, max=10)
    )
    threat_encounter_bonus: dict[ThreatLevel, ValueRange] = Field(
        default_factory=_default_threat_bonus
    )

    def threat_bonus_range(self, threat_level: str) -> ValueRange:
        """Return the encounter bonus range for *threat_level*."""
        configured = self.threat_encounter_bonus.get(threat_level)  # type: ignore[call-overload]
        if configured is not None:
            return configured
        return _default_threat_bonus().get(threat_level, ValueRange())  # type: ignore[call-overload]


class StarterPool(BaseModel):
    """Identity sets of items every player owns from the start."""

    model_config = ConfigDict(frozen=True)

    card_ids: frozenset[str] = frozenset()
    ship_ids: frozenset[str] = frozenset()
    drone_names: frozenset[str] = frozenset()
    component_ids: frozenset[str] = frozenset()


class ItemCatalog(BaseModel):
    """Read-only rarity and limit lookups for cards, ships, drones and components."""

    model_config = ConfigDict(frozen=True)

    card_rarities: dict[str, Rarity] = Field(default_factory=dict)
    ship_rarities: dict[str, Rarity] = Field(default_factory=dict)
    drone_rarities: dict[str, Rarity] = Field(default_factory=dict)
    component_rarities: dict[str, Rarity] = Field(default_factory=dict)
    drone_limits: dict[str, int] = Field(default_factory=dict)

    def card_rarity(self, card_id: str) -> Rarity | None:
        """Return the rarity of *card_id* or ``None`` when it is not catalogued."""
        return self.card_rarities.get(card_id)

    def ship_rarity(self, ship_id: str) -> Rarity | None:
        """Return the rarity of *ship_id* or ``None`` when it is not catalogued."""
        return self.ship_rarities.get(ship_id)

    def drone_rarity(self, drone_name: str) -> Rarity | None:
        """Return the rarity of *drone_name* or ``None`` when it is not catalogued."""
        return self.drone_rarities.get(drone_name)

    def component_rarity(self, component_id: str) -> Rarity | None:
        """Return the rarity of *component_id* or ``None`` when it is not catalogued."""
        return self.component_rarities.get(component_id)

    def drone_limit(self, drone_name: str) -> int:
        """Return the base deployment limit of *drone_name*, defaulting to 1."""
        return self.drone_limits.get(drone_name) or 1


@cache
def get_default_economy_configuration() -> EconomyConfiguration:
    """Return the cached default economic configuration."""
    return EconomyDefaults().to_config()


__all__ = [
    "DetectionTriggers",
    "EconomyConfiguration",
    "EconomyDefaults",
    "ItemCatalog",
    "StarterPool",
    "TierConfiguration",
    "get_default_economy_configuration",
]
