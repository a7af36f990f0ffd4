"""Progressive salvage of points of interest and the MIA risk gate.

Salvage reveals a point of interest's hidden slots one at a time from left to
right. Every attempt rolls against an encounter chance that grows after each
safe reveal. An encounter freezes the operation until the combat it starts
has been resolved elsewhere. All rolls are seeded so a run replays
identically.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from dronewars_core.game_logic.configuration import TierConfiguration
from dronewars_core.game_logic.state import PointOfInterest, SalvageSlot, SalvageState
from dronewars_core.settings import CoreSettings, get_settings
from dronewars_core.shared.enums import LootType, SlotDisplayState, ThreatLevel
from dronewars_core.shared.rng import DeterministicRandomService

logger = logging.getLogger(__name__)

MAX_ENCOUNTER_CHANCE = 100.0
SLOT_ROLL_STRIDE = 1337
ENCOUNTER_INCREASE_OFFSET = 7919
POI_Q_STRIDE = 1000
POI_R_STRIDE = 37
POI_THREAT_OFFSET = 8887
HIGH_THREAT_DETECTION = 80
MEDIUM_THREAT_DETECTION = 50


class SalvageAttempt(BaseModel):
    """Outcome of a single salvage click."""

    model_config = ConfigDict(frozen=True)

    salvage_state: SalvageState
    slot_content: SalvageSlot | None = None
    encounter_triggered: bool = False


class RevealedLoot(BaseModel):
    """Contents of every revealed slot grouped by loot type."""

    model_config = ConfigDict(frozen=True)

    cards: tuple[dict[str, Any], ...] = ()
    salvage_items: tuple[dict[str, Any], ...] = ()
    tokens: tuple[dict[str, Any], ...] = ()
    blueprints: tuple[dict[str, Any], ...] = ()


class SalvageRiskAssessment(BaseModel):
    """Whether salvaging once more would push detection to the MIA threshold."""

    model_config = ConfigDict(frozen=True)

    detection: float = Field(..., ge=0)
    threat_increase: float = Field(..., ge=0)
    total_detection_if_salvaged: float = Field(..., ge=0)
    threshold: float = Field(..., gt=0)
    salvage_blocked: bool
    leave_allowed: bool = True

    @property
    def warning(self) -> str | None:
        """Return the warning shown while salvage is blocked."""
        if not self.salvage_blocked:
            return None
        return (
            f"+{self.threat_increase:g}% detection would raise threat to "
            f"{self.total_detection_if_salvaged:g}% and trigger MIA"
        )


def _coerce_poi(poi: PointOfInterest | Mapping[str, Any]) -> PointOfInterest:
    if isinstance(poi, PointOfInterest):
        return poi
    return PointOfInterest.model_validate(poi)


def assess_salvage_risk(
    detection: float,
    tier_config: TierConfiguration,
    poi: PointOfInterest | Mapping[str, Any] | None = None,
    *,
    threshold: float | None = None,
) -> SalvageRiskAssessment:
    """Decide whether another salvage attempt is allowed at *detection*.

    The POI's own threat increase wins over the tier's looting trigger. The
    threshold is inclusive. Leaving the POI is always permitted.
    """
    limit = threshold if threshold is not None else get_settings().mia_detection_threshold
    poi_data = _coerce_poi(poi) if poi is not None else None
    threat_increase = (
        poi_data.threat_increase
        if poi_data is not None and poi_data.threat_increase
        else tier_config.detection_triggers.looting
    )
    total = detection + threat_increase
    blocked = total >= limit
    if blocked:
        logger.info("Salvage blocked: detection %s + %s >= %s", detection, threat_increase, limit)
    return SalvageRiskAssessment(
        detection=detection,
        threat_increase=threat_increase,
        total_detection_if_salvaged=total,
        threshold=limit,
        salvage_blocked=blocked,
    )


def threat_label(detection: float) -> str:
    """Return the threat band displayed for *detection*."""
    if detection >= HIGH_THREAT_DETECTION:
        return "High"
    if detection >= MEDIUM_THREAT_DETECTION:
        return "Medium"
    return "Low"


def slot_display_state(
    state: SalvageState, index: int, *, scanning: bool = False
) -> SlotDisplayState:
    """Return how slot *index* is presented.

    Slots left of the cursor are revealed, the slot under the cursor is the
    next target (or scanning while an attempt resolves) and the rest stay
    locked.
    """
    if 0 <= index < state.total_slots and state.slots[index].revealed:
        return SlotDisplayState.REVEALED
    if index == state.current_slot_index and not state.encounter_triggered:
        if scanning:
            return SlotDisplayState.SCANNING
        if index < state.total_slots:
            return SlotDisplayState.NEXT_TARGET
    return SlotDisplayState.LOCKED


class SalvageController:
    """Creates and advances salvage states."""

    def __init__(
        self,
        rng: DeterministicRandomService | None = None,
        settings: CoreSettings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._rng = rng or DeterministicRandomService(self._settings.rng_seed)

    def initialize_salvage(
        self,
        poi: PointOfInterest | Mapping[str, Any],
        tier_config: TierConfiguration,
        zone: str | None,
        slots: Sequence[SalvageSlot | Mapping[str, Any]],
        threat_level: ThreatLevel | str = ThreatLevel.LOW,
    ) -> SalvageState | None:
        """Create the salvage state for *poi* with hidden *slots*.

        Returns ``None`` for points of interest that cannot be salvaged.
        """
        poi_data = _coerce_poi(poi)
        if poi_data.disable_salvage:
            logger.info("Salvage disabled for %s", poi_data.name or "point of interest")
            return None

        hidden = tuple(
            (
                slot if isinstance(slot, SalvageSlot) else SalvageSlot.model_validate(slot)
            ).model_copy(update={"revealed": False})
            for slot in slots
        )
        base_chance = (
            poi_data.encounter_chance
            if poi_data.encounter_chance
            else self._settings.default_encounter_chance
        )
        chance = base_chance + self._threat_bonus(poi_data, tier_config, threat_level)
        return SalvageState(
            poi=poi_data,
            zone=zone,
            slots=hidden,
            total_slots=len(hidden),
            current_slot_index=0,
            current_encounter_chance=min(MAX_ENCOUNTER_CHANCE, chance),
            encounter_triggered=False,
        )

    def _threat_bonus(
        self,
        poi: PointOfInterest,
        tier_config: TierConfiguration,
        threat_level: ThreatLevel | str,
    ) -> float:
        bonus_range = tier_config.threat_bonus_range(threat_level)
        if bonus_range.is_zero:
            return 0.0
        offset = (poi.q or 0) * POI_Q_STRIDE + (poi.r or 0) * POI_R_STRIDE + POI_THREAT_OFFSET
        bonus = self._rng.roll_in_range(bonus_range, offset)
        logger.debug("Threat bonus (%s): +%.1f%%", threat_level, bonus)
        return bonus

    def attempt_salvage(
        self,
        salvage_state: SalvageState,
        tier_config: TierConfiguration,
        alert_bonus: float = 0.0,
    ) -> SalvageAttempt:
        """Reveal the next slot, rolling for an encounter first.

        *alert_bonus* is a percentage added to the roll target while the POI
        is on high alert. The slot is revealed whether or not an encounter
        triggers. The cursor always moves past it, while the encounter chance
        only grows after a safe reveal.
        """
        if not self.can_continue_salvage(salvage_state):
            logger.debug("Salvage attempt ignored; nothing left to reveal")
            return SalvageAttempt(
                salvage_state=salvage_state,
                encounter_triggered=salvage_state.encounter_triggered,
            )

        index = salvage_state.current_slot_index
        chance = salvage_state.current_encounter_chance
        roll = self._rng.roll_percent(index * SLOT_ROLL_STRIDE)
        target = chance + alert_bonus
        triggered = roll < target
        logger.debug(
            "Encounter roll %.1f vs %.1f%% - %s",
            roll,
            target,
            "triggered" if triggered else "safe",
        )

        revealed_slot = salvage_state.slots[index].model_copy(update={"revealed": True})
        slots = (
            *salvage_state.slots[:index],
            revealed_slot,
            *salvage_state.slots[index + 1 :],
        )
        if not triggered:
            chance = min(
                MAX_ENCOUNTER_CHANCE,
                chance + self.roll_encounter_increase(tier_config, index),
            )
        updated = salvage_state.evolve(
            slots=slots,
            current_slot_index=index + 1,
            current_encounter_chance=chance,
            encounter_triggered=triggered,
        )
        if triggered:
            logger.info("Salvage encounter triggered at slot %s", index)
        return SalvageAttempt(
            salvage_state=updated,
            slot_content=revealed_slot,
            encounter_triggered=triggered,
        )

    def roll_encounter_increase(
        self, tier_config: TierConfiguration, slot_index: int = 0
    ) -> float:
        """Return the seeded encounter-chance increase after revealing a slot."""
        offset = slot_index * SLOT_ROLL_STRIDE + ENCOUNTER_INCREASE_OFFSET
        return self._rng.roll_in_range(
            tier_config.salvage_encounter_increase_range, offset
        )

    @staticmethod
    def collect_revealed_loot(salvage_state: SalvageState) -> RevealedLoot:
        """Group the contents of revealed slots by loot type."""
        grouped: dict[LootType, list[dict[str, Any]]] = {kind: [] for kind in LootType}
        for slot in salvage_state.slots:
            if slot.revealed and slot.type is not None and slot.content:
                grouped[slot.type].append(slot.content)
        return RevealedLoot(
            cards=tuple(grouped[LootType.CARD]),
            salvage_items=tuple(grouped[LootType.SALVAGE_ITEM]),
            tokens=tuple(grouped[LootType.TOKEN]),
            blueprints=tuple(grouped[LootType.BLUEPRINT]),
        )

    @staticmethod
    def can_continue_salvage(salvage_state: SalvageState) -> bool:
        """Return ``True`` when slots remain and no encounter is pending."""
        return (
            salvage_state.current_slot_index < salvage_state.total_slots
            and not salvage_state.encounter_triggered
        )

    @staticmethod
    def has_revealed_any_slots(salvage_state: SalvageState) -> bool:
        """Return ``True`` once at least one slot has been revealed."""
        return any(slot.revealed for slot in salvage_state.slots)

    @staticmethod
    def is_fully_looted(salvage_state: SalvageState) -> bool:
        """Return ``True`` when every slot has been revealed."""
        return salvage_state.current_slot_index >= salvage_state.total_slots

    @staticmethod
    def reset_after_combat(
        salvage_state: SalvageState, high_alert_bonus: float = 0.0
    ) -> SalvageState:
        """Clear a resolved encounter so salvaging can continue.

        The cursor is moved past the slot under it if that slot is already
        revealed, and *high_alert_bonus* is added to the encounter chance.
        """
        index = salvage_state.current_slot_index
        if index < salvage_state.total_slots and salvage_state.slots[index].revealed:
            index += 1
        return salvage_state.evolve(
            encounter_triggered=False,
            current_slot_index=index,
            current_encounter_chance=min(
                MAX_ENCOUNTER_CHANCE,
                salvage_state.current_encounter_chance + high_alert_bonus,
            ),
        )


__all__ = [
    "RevealedLoot",
    "SalvageAttempt",
    "SalvageController",
    "SalvageRiskAssessment",
    "assess_salvage_risk",
    "slot_display_state",
    "threat_label",
]
