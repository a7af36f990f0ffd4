"""Tests for economy, tier and catalog configuration."""

import pytest
from pydantic import ValidationError

from dronewars_core.game_logic.configuration import (
    EconomyDefaults,
    ItemCatalog,
    TierConfiguration,
    get_default_economy_configuration,
)
from dronewars_core.shared.enums import Rarity, ThreatLevel
from dronewars_core.shared.value_objects import ValueRange


def test_default_economy_prices() -> None:
    economy = get_default_economy_configuration()

    assert economy.replication_cost(Rarity.MYTHIC) == 1500
    assert economy.blueprint_cost("Rare") == 450
    assert economy.drone_repair_cost(Rarity.UNCOMMON) == 100
    assert economy.mia_recovery_floor == 500
    assert economy.starter_deck_extraction_limit == 3
    assert economy.custom_deck_extraction_limit == 6


def test_unknown_rarity_costs_as_common() -> None:
    economy = get_default_economy_configuration()

    assert economy.replication_cost(None) == 100
    assert economy.blueprint_cost("Legendary") == 75


def test_economy_defaults_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DRONEWARS_ECONOMY_MIA_RECOVERY_FLOOR", "750")
    get_default_economy_configuration.cache_clear()

    assert get_default_economy_configuration().mia_recovery_floor == 750


def test_economy_configuration_is_frozen() -> None:
    economy = EconomyDefaults().to_config()

    with pytest.raises(ValidationError):
        economy.mia_recovery_floor = 1  # type: ignore[misc]


def test_tier_configuration_accepts_map_data_keys() -> None:
    tier = TierConfiguration.model_validate(
        {
            "tier": 2,
            "detectionTriggers": {"looting": 15},
            "salvageEncounterIncreaseRange": {"min": 1, "max": 2},
            "threatEncounterBonus": {"high": {"min": 30, "max": 40}},
        }
    )

    assert tier.detection_triggers.looting == 15
    assert tier.salvage_encounter_increase_range == ValueRange(min=1, max=2)
    assert tier.threat_bonus_range(ThreatLevel.HIGH) == ValueRange(min=30, max=40)
    assert tier.threat_bonus_range("medium") == ValueRange(min=5, max=10)
    assert tier.threat_bonus_range("unknown") == ValueRange()


def test_value_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValidationError):
        ValueRange(min=5, max=1)


def test_drone_limit_defaults_to_one() -> None:
    catalog = ItemCatalog(drone_limits={"Swarm": 3})

    assert catalog.drone_limit("Swarm") == 3
    assert catalog.drone_limit("Talon") == 1
