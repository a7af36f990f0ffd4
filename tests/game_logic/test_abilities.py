"""Tests for ship ability routing."""

import pytest

from dronewars_core.game_logic.abilities import (
    ABILITY_CONFIG,
    AbilityHandlerConfig,
    get_ability_handler_config,
    route_ability,
)
from dronewars_core.shared.enums import AbilityHandler


@pytest.mark.parametrize(
    ("name", "handler", "ability_type"),
    [
        ("Reallocate Shields", AbilityHandler.REALLOCATION, "reallocateShields"),
        ("Recalculate", AbilityHandler.CONFIRMATION, "recalculate"),
        ("Recall", AbilityHandler.TARGETING, "recall"),
        ("Target Lock", AbilityHandler.TARGETING, "targetLock"),
    ],
)
def test_registered_abilities_resolve(
    name: str, handler: AbilityHandler, ability_type: str
) -> None:
    config = get_ability_handler_config({"name": name})

    assert config == AbilityHandlerConfig(handler=handler, ability_type=ability_type)


def test_unknown_ability_has_no_config() -> None:
    assert get_ability_handler_config({"name": "Overcharge"}) is None
    assert get_ability_handler_config({}) is None


def test_ability_config_is_read_only() -> None:
    with pytest.raises(TypeError):
        ABILITY_CONFIG["Overcharge"] = ABILITY_CONFIG["Recall"]  # type: ignore[index]


def test_route_ability_uses_registered_config() -> None:
    route = route_ability({"name": "Recall", "targeting": {"type": "DRONE"}})

    assert route.handler is AbilityHandler.TARGETING
    assert route.ability_type == "recall"
    assert route.fallback is False


def test_route_ability_falls_back_by_targeting_declaration() -> None:
    targeted = route_ability({"name": "Overcharge", "targeting": {"type": "LANE"}})
    untargeted = route_ability({"name": "Vent"})

    assert targeted.handler is AbilityHandler.TARGETING
    assert targeted.fallback is True
    assert untargeted.handler is AbilityHandler.CONFIRMATION
    assert untargeted.ability_type is None
