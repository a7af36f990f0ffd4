"""Routing of ship abilities to their execution flow."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel
from pydantic.config import ConfigDict

from dronewars_core.shared.enums import AbilityHandler

logger = logging.getLogger(__name__)


class AbilityHandlerConfig(BaseModel):
    """Execution flow and action type registered for a named ship ability."""

    model_config = ConfigDict(frozen=True)

    handler: AbilityHandler
    ability_type: str


class AbilityRoute(BaseModel):
    """Resolved execution flow for an ability, including unregistered ones."""

    model_config = ConfigDict(frozen=True)

    handler: AbilityHandler
    ability_type: str | None
    fallback: bool = False


ABILITY_CONFIG: Mapping[str, AbilityHandlerConfig] = MappingProxyType(
    {
        "Reallocate Shields": AbilityHandlerConfig(
            handler=AbilityHandler.REALLOCATION, ability_type="reallocateShields"
        ),
        "Recalculate": AbilityHandlerConfig(
            handler=AbilityHandler.CONFIRMATION, ability_type="recalculate"
        ),
        "Recall": AbilityHandlerConfig(
            handler=AbilityHandler.TARGETING, ability_type="recall"
        ),
        "Target Lock": AbilityHandlerConfig(
            handler=AbilityHandler.TARGETING, ability_type="targetLock"
        ),
    }
)


def _ability_field(ability: Any, key: str) -> Any:
    if isinstance(ability, Mapping):
        return ability.get(key)
    return getattr(ability, key, None)


def get_ability_handler_config(ability: Any) -> AbilityHandlerConfig | None:
    """Return the registered handler config for *ability* or ``None``."""
    name = _ability_field(ability, "name")
    if not isinstance(name, str):
        return None
    return ABILITY_CONFIG.get(name)


def route_ability(ability: Any) -> AbilityRoute:
    """Return the execution flow for *ability*.

    Unregistered abilities enter targeting mode when they declare a
    ``targeting`` block and otherwise ask for a plain confirmation.
    """
    config = get_ability_handler_config(ability)
    if config is not None:
        return AbilityRoute(handler=config.handler, ability_type=config.ability_type)

    handler = (
        AbilityHandler.TARGETING
        if _ability_field(ability, "targeting")
        else AbilityHandler.CONFIRMATION
    )
    logger.info(
        "No handler registered for ability %r, falling back to %s",
        _ability_field(ability, "name"),
        handler,
    )
    return AbilityRoute(handler=handler, ability_type=None, fallback=True)


__all__ = [
    "ABILITY_CONFIG",
    "AbilityHandlerConfig",
    "AbilityRoute",
    "get_ability_handler_config",
    "route_ability",
]
