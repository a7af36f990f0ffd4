"""Extraction rules: loot limits, credit payout, blockades and escape damage."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from dronewars_core.game_logic.configuration import (
    EconomyConfiguration,
    get_default_economy_configuration,
)
from dronewars_core.game_logic.interfaces import (  # noqa: TC001
    FixedReputationProvider,
    ReputationProvider,
)
from dronewars_core.game_logic.state import RunShipSection, RunState
from dronewars_core.settings import get_settings
from dronewars_core.shared.enums import LootType
from dronewars_core.shared.rng import (
    DeterministicRandomService,
    LinearCongruentialGenerator,
)
from dronewars_core.shared.value_objects import ValueRange

logger = logging.getLogger(__name__)

LIMIT_DAMAGED_THRESHOLD = 5
ESCAPE_DAMAGED_THRESHOLD = 4
DEFAULT_ESCAPE_DAMAGE = ValueRange(min=2, max=2)


def calculate_extracted_credits(loot_items: Iterable[Mapping[str, Any]] | None) -> int:
    """Sum the credit value of salvage items in *loot_items*.

    Cards, blueprints and tokens never pay out credits. Missing values count
    as zero.
    """
    if loot_items is None or isinstance(loot_items, (str, bytes, Mapping)):
        return 0
    return sum(
        item.get("creditValue") or 0
        for item in loot_items
        if item.get("type") == LootType.SALVAGE_ITEM
    )


def _count_type(loot_items: Iterable[Mapping[str, Any]], loot_type: LootType) -> int:
    return sum(1 for item in loot_items if item.get("type") == loot_type)


class LootSelectionRequired(BaseModel):
    """Returned when collected loot exceeds the extraction limit."""

    model_config = ConfigDict(frozen=True)

    action: Literal["selectLoot"] = "selectLoot"
    limit: int = Field(..., ge=0)
    collected_loot: tuple[dict[str, Any], ...]


class ExtractionSummary(BaseModel):
    """Outcome of a completed extraction."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    cards_acquired: int = Field(..., ge=0)
    blueprints_acquired: int = Field(..., ge=0)
    credits_earned: int = Field(..., ge=0)
    final_hull: int = Field(..., ge=0)
    max_hull: int = Field(..., ge=0)
    hull_percent: int = Field(..., ge=0)
    items_discarded: int = Field(default=0, ge=0)
    extracted_loot: tuple[dict[str, Any], ...] = ()


class EscapeDamageHit(BaseModel):
    """One point of escape damage landing on a section."""

    model_config = ConfigDict(frozen=True)

    section: str
    new_hull: int = Field(..., ge=0)
    max_hull: int = Field(..., ge=0)


class EscapeDamageOutcome(BaseModel):
    """Sections before and after escape damage was distributed."""

    model_config = ConfigDict(frozen=True)

    initial_sections: dict[str, RunShipSection]
    updated_sections: dict[str, RunShipSection]
    total_damage: int = Field(..., ge=0)
    damage_hits: tuple[EscapeDamageHit, ...] = ()
    would_destroy: bool

    @property
    def total_hull(self) -> int:
        return sum(section.hull for section in self.updated_sections.values())

    @property
    def max_hull(self) -> int:
        return sum(section.max_hull for section in self.updated_sections.values())


class EscapeRisk(BaseModel):
    """Worst-case estimate shown before the player commits to escaping."""

    model_config = ConfigDict(frozen=True)

    could_destroy: bool
    max_damage: int = Field(..., ge=0)
    escape_damage_range: ValueRange


def _coerce_run_state(run_state: RunState | Mapping[str, Any]) -> RunState:
    if isinstance(run_state, RunState):
        return run_state
    return RunState.model_validate(run_state)


class ExtractionController:
    """Applies extraction rules to the current run."""

    def __init__(
        self,
        economy: EconomyConfiguration | None = None,
        reputation: ReputationProvider | None = None,
        rng: DeterministicRandomService | None = None,
    ) -> None:
        self._economy = economy or get_default_economy_configuration()
        self._reputation = reputation or FixedReputationProvider()
        self._rng = rng or DeterministicRandomService(get_settings().rng_seed)

    def check_blockade(self, detection: float) -> bool:
        """Roll whether the extraction gate is blockaded at *detection*."""
        roll = self._rng.random() * 100
        blocked = roll < detection
        logger.info("Blockade check: roll %.2f vs detection %.2f", roll, detection)
        return blocked

    def calculate_extraction_limit(self, run_state: RunState | Mapping[str, Any]) -> int:
        """Return how many loot items may be extracted.

        The starter slot has a smaller base limit and earns no reputation
        bonus. Each damaged section lowers the limit by one.
        """
        state = _coerce_run_state(run_state)
        if state.is_starter_deck:
            base_limit = self._economy.starter_deck_extraction_limit
            bonus = 0
        else:
            base_limit = self._economy.custom_deck_extraction_limit
            bonus = self._reputation.get_extraction_bonus()
        damaged = sum(
            1
            for section in state.ship_sections.values()
            if section.is_damaged(LIMIT_DAMAGED_THRESHOLD)
        )
        return max(0, base_limit + bonus - damaged)

    def complete_extraction(
        self,
        run_state: RunState | Mapping[str, Any],
        selected_loot: Iterable[Mapping[str, Any]] | None = None,
    ) -> LootSelectionRequired | ExtractionSummary:
        """Finish the run, or ask for a loot selection when over the limit."""
        state = _coerce_run_state(run_state)
        limit = self.calculate_extraction_limit(state)
        loot_count = len(state.collected_loot)
        if selected_loot is None and loot_count > limit:
            logger.info("Loot exceeds limit (%s/%s), selection required", loot_count, limit)
            return LootSelectionRequired(limit=limit, collected_loot=state.collected_loot)

        selection = tuple(dict(item) for item in selected_loot) if selected_loot is not None else None
        extracted = selection if selection is not None else state.collected_loot
        hull_percent = (
            round(state.current_hull / state.max_hull * 100) if state.max_hull > 0 else 100
        )
        summary = ExtractionSummary(
            cards_acquired=_count_type(extracted, LootType.CARD),
            blueprints_acquired=_count_type(extracted, LootType.BLUEPRINT),
            credits_earned=calculate_extracted_credits(extracted),
            final_hull=state.current_hull,
            max_hull=state.max_hull,
            hull_percent=hull_percent,
            items_discarded=loot_count - len(selection) if selection is not None else 0,
            extracted_loot=extracted,
        )
        logger.info(
            "Extraction complete: %s items, %s credits",
            len(extracted),
            summary.credits_earned,
        )
        return summary

    @staticmethod
    def escape_damage_range(ai_personality: Mapping[str, Any] | None) -> ValueRange:
        """Return the escape damage range of an enemy, defaulting to 2."""
        configured = (ai_personality or {}).get("escapeDamage")
        if not configured:
            return DEFAULT_ESCAPE_DAMAGE
        return ValueRange.model_validate(configured)

    def check_escape_could_destroy(
        self,
        run_state: RunState | Mapping[str, Any],
        ai_personality: Mapping[str, Any] | None = None,
    ) -> EscapeRisk:
        """Return whether the worst-case escape could leave every section damaged."""
        state = _coerce_run_state(run_state)
        damage_range = self.escape_damage_range(ai_personality)
        max_damage = int(damage_range.max)
        could_destroy = all(
            section.model_copy(update={"hull": max(0, section.hull - max_damage)}).is_damaged(
                ESCAPE_DAMAGED_THRESHOLD
            )
            for section in state.ship_sections.values()
        )
        return EscapeRisk(
            could_destroy=could_destroy,
            max_damage=max_damage,
            escape_damage_range=damage_range,
        )

    def apply_escape_damage(
        self,
        run_state: RunState | Mapping[str, Any],
        ai_personality: Mapping[str, Any] | None = None,
        seed: int = 0,
    ) -> EscapeDamageOutcome:
        """Distribute seeded escape damage one point at a time across sections."""
        state = _coerce_run_state(run_state)
        rng = LinearCongruentialGenerator(seed)
        damage_range = self.escape_damage_range(ai_personality)
        total_damage = rng.randint(int(damage_range.min), int(damage_range.max))

        updated = dict(state.ship_sections)
        keys = list(updated)
        hits: list[EscapeDamageHit] = []
        for _ in range(total_damage if keys else 0):
            key = keys[int(rng.random() * len(keys))]
            section = updated[key]
            updated[key] = section.model_copy(update={"hull": max(0, section.hull - 1)})
            hits.append(
                EscapeDamageHit(
                    section=key, new_hull=updated[key].hull, max_hull=section.max_hull
                )
            )

        would_destroy = all(
            section.is_damaged(ESCAPE_DAMAGED_THRESHOLD) for section in updated.values()
        )
        logger.info(
            "Escape damage applied: %s points, would destroy: %s",
            total_damage,
            would_destroy,
        )
        return EscapeDamageOutcome(
            initial_sections=dict(state.ship_sections),
            updated_sections=updated,
            total_damage=total_damage,
            damage_hits=tuple(hits),
            would_destroy=would_destroy,
        )


__all__ = [
    "EscapeDamageHit",
    "EscapeDamageOutcome",
    "EscapeRisk",
    "ExtractionController",
    "ExtractionSummary",
    "LootSelectionRequired",
    "calculate_extracted_credits",
]
