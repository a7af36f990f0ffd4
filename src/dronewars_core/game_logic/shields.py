"""Coordination of round-start shield allocation and ability reallocation.

A :class:`ShieldAllocationCoordinator` owns one player's unconfirmed shield
state. The authoritative game state is only read; changes reach it through
the action processor, either as a simultaneous commitment at the start of a
round or as a sequence of ``reallocateShieldsAbility`` actions that the
presentation layer confirms afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from dronewars_core.game_logic.abilities import route_ability
from dronewars_core.game_logic.interfaces import (  # noqa: TC001
    ActionProcessor,
    EffectiveStatsProvider,
    GameStateAccessor,
    SectionShieldStatsProvider,
)
from dronewars_core.game_logic.phases import (
    SECTION_CLICK_ACTIONS,
    ShieldAction,
    ShieldMode,
    ShieldTransition,
    can_transition,
    is_action_allowed,
    is_allocation_phase,
    reallocation_phase_for,
    transition,
)
from dronewars_core.game_logic.shield_reset import (
    calculate_reallocation_adding_reset,
    calculate_reallocation_display_shields,
    calculate_reallocation_removal_reset,
    calculate_round_start_reset,
)
from dronewars_core.game_logic.shield_rules import allocated_shields
from dronewars_core.game_logic.slots import normalize_placed_sections
from dronewars_core.game_logic.state import ReallocationState, ShieldAllocationState
from dronewars_core.shared.enums import AbilityHandler, TurnPhase
from dronewars_core.shared.events import ShieldCommitment, ShipAbilityConfirmation
from dronewars_core.shared.value_objects import ActionResult

logger = logging.getLogger(__name__)

COMMITMENT_ACTION = "commitment"
REALLOCATE_ACTION = "reallocateShields"
REALLOCATE_ABILITY_ACTION = "reallocateShieldsAbility"
RESET_ALLOCATION_ACTION = "resetShieldAllocation"
END_ALLOCATION_ACTION = "endShieldAllocation"
ALLOCATE_SHIELD_ACTION = "allocateShield"

WaitingCallback = Callable[[str], None]
ConfirmationCallback = Callable[[ShipAbilityConfirmation], None]


def _max_shields_for(ability: Mapping[str, Any]) -> int:
    effect = ability.get("effect") or {}
    value = effect.get("value") or {}
    return int(value.get("maxShields", 0))


class ShieldAllocationCoordinator:
    """Pending shield state and click handling for a single player."""

    def __init__(
        self,
        player_id: str,
        opponent_id: str,
        game_state: GameStateAccessor,
        action_processor: ActionProcessor,
        stats_provider: EffectiveStatsProvider | None = None,
        *,
        placed_sections_key: str = "placedSections",
        on_waiting: WaitingCallback | None = None,
        on_confirmation_request: ConfirmationCallback | None = None,
    ) -> None:
        self._player_id = player_id
        self._opponent_id = opponent_id
        self._game_state = game_state
        self._action_processor = action_processor
        self._stats_provider = stats_provider or SectionShieldStatsProvider()
        self._placed_sections_key = placed_sections_key
        self._on_waiting = on_waiting
        self._on_confirmation_request = on_confirmation_request
        self._mode = ShieldMode.IDLE
        self._allocation = ShieldAllocationState()
        self._reallocation = ReallocationState()
        self._phase_key: tuple[str | None, Any, int] | None = None
        self.sync_phase()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def mode(self) -> ShieldMode:
        """Return the current FSM mode."""
        return self._mode

    @property
    def allocation(self) -> ShieldAllocationState:
        """Return the pending round-start allocation."""
        return self._allocation

    @property
    def reallocation(self) -> ReallocationState:
        """Return the pending reallocation."""
        return self._reallocation

    @property
    def pending_shield_allocations(self) -> dict[str, int]:
        return dict(self._allocation.pending_shield_allocations)

    @property
    def pending_shields_remaining(self) -> int:
        return self._allocation.pending_shields_remaining

    @property
    def pending_shield_changes(self) -> dict[str, int]:
        return dict(self._reallocation.pending_shield_changes)

    @property
    def shields_to_add(self) -> int:
        return self._reallocation.shields_to_add

    @property
    def shields_to_remove(self) -> int:
        return self._reallocation.shields_to_remove

    @property
    def can_allocate_more_shields(self) -> bool:
        """Return ``True`` when any section is below its shield capacity."""
        player_state = self._player_state()
        sections = player_state.get("shipSections") or {}
        return any(
            allocated_shields(player_state, name) < self._effective_max(name)
            for name in sections
        )

    def display_shields(self, section_name: str) -> int:
        """Return the shield count shown for *section_name* in the current mode."""
        if self._mode is ShieldMode.ROUND_START:
            return self._allocation.pending_shield_allocations.get(section_name, 0)
        base = allocated_shields(self._player_state(), section_name)
        if self._reallocation.active:
            return calculate_reallocation_display_shields(
                base, self._reallocation.pending_shield_changes, section_name
            )
        return base

    # ------------------------------------------------------------------
    # Phase tracking
    # ------------------------------------------------------------------
    def sync_phase(self) -> ShieldMode:
        """Follow the authoritative turn phase.

        Pending round-start state is initialized once per phase entry, which
        is detected through a change of turn phase, round number or allocation
        budget. The round number catches a new round whose allocation phase is
        reached without this coordinator seeing the phases in between.
        """
        turn_phase = self._game_state.get("turnPhase")
        budget = int(self._game_state.get("shieldsToAllocate") or 0)
        key = (turn_phase, self._game_state.get("roundNumber"), budget)
        if is_allocation_phase(turn_phase):
            if budget > 0 and key != self._phase_key:
                if self._reallocation.active:
                    self.cancel_reallocation()
                self._enter_round_start(budget)
        elif self._mode is ShieldMode.ROUND_START:
            self._mode = transition(self._mode, ShieldTransition.LEAVE_ALLOCATION)
            logger.debug("Player %s left shield allocation", self._player_id)
        self._phase_key = key
        return self._mode

    def _enter_round_start(self, budget: int) -> None:
        player_state = self._player_state()
        snapshot = {
            name: section.get("allocatedShields", 0)
            for name, section in (player_state.get("shipSections") or {}).items()
            if section.get("allocatedShields", 0) > 0
        }
        self._mode = transition(self._mode, ShieldTransition.ENTER_ALLOCATION)
        self._allocation = ShieldAllocationState(
            pending_shield_allocations=dict(snapshot),
            pending_shields_remaining=budget,
            initial_shield_allocation=snapshot,
        )
        logger.info(
            "Initialized shield allocation for %s with budget %s",
            self._player_id,
            budget,
        )

    # ------------------------------------------------------------------
    # Round-start allocation
    # ------------------------------------------------------------------
    async def allocate_shield(self, section_name: str) -> bool:
        """Add one pending shield to *section_name*.

        Outside the allocation phase the click is routed to the action
        processor as a shield reallocation instead.
        """
        self.sync_phase()
        turn_phase = self._game_state.get("turnPhase")
        if not is_allocation_phase(turn_phase):
            result = await self._process(
                REALLOCATE_ACTION,
                {
                    "action": "add",
                    "sectionName": section_name,
                    "playerId": self._player_id,
                },
            )
            return result.success
        if not self._allowed(ShieldAction.ALLOCATE):
            return False

        remaining = self._allocation.pending_shields_remaining
        if remaining <= 0:
            logger.debug("No shields remaining to allocate for %s", self._player_id)
            return False
        pending = self._allocation.pending_shield_allocations
        current = pending.get(section_name, 0)
        if current >= self._effective_max(section_name):
            logger.debug("Section %s already at max shields", section_name)
            return False

        self._allocation = self._allocation.evolve(
            pending_shield_allocations={**pending, section_name: current + 1},
            pending_shields_remaining=remaining - 1,
        )
        return True

    def reset_shields(self) -> bool:
        """Restore the phase-entry snapshot and the full round budget."""
        self.sync_phase()
        if not self._allowed(ShieldAction.RESET_ALLOCATION):
            return False
        reset = calculate_round_start_reset(
            self._allocation.initial_shield_allocation,
            int(self._game_state.get("shieldsToAllocate") or 0),
        )
        self._allocation = self._allocation.evolve(
            pending_shield_allocations=reset.new_pending,
            pending_shields_remaining=reset.new_remaining,
        )
        return True

    async def confirm_shields(self) -> ShieldCommitment | None:
        """Commit the pending allocation for this round.

        When the commitment is accepted and the opponent has not completed its
        own yet, the caller is notified through ``on_waiting``.
        """
        self.sync_phase()
        if not self._allowed(ShieldAction.CONFIRM_ALLOCATION):
            return None
        allocations = dict(self._allocation.pending_shield_allocations)
        result = await self._process(
            COMMITMENT_ACTION,
            {
                "playerId": self._player_id,
                "phase": TurnPhase.ALLOCATE_SHIELDS.value,
                "actionData": {"committed": True, "shieldAllocations": allocations},
            },
        )
        waiting = result.success and not self._opponent_committed(
            TurnPhase.ALLOCATE_SHIELDS
        )
        if waiting:
            self._notify_waiting(TurnPhase.ALLOCATE_SHIELDS)
        return ShieldCommitment(
            player_id=self._player_id,
            shield_allocations=allocations,
            accepted=result.success,
            waiting_for_opponent=waiting,
        )

    async def reset_shield_allocation(self) -> ActionResult:
        """Ask the action processor to reset this player's allocation."""
        return await self._process(
            RESET_ALLOCATION_ACTION, {"playerId": self._player_id}
        )

    async def end_allocation(self) -> ActionResult:
        """Finish shield allocation on the action processor."""
        result = await self._process(
            END_ALLOCATION_ACTION, {"playerId": self._player_id}
        )
        if result.data is not None and not result.both_players_complete:
            self._notify_waiting(TurnPhase.ALLOCATE_SHIELDS)
        return result

    async def handle_shield_action(
        self, action_type: str, payload: Mapping[str, Any]
    ) -> ActionResult | bool | None:
        """Route a shield action by turn phase.

        Allocation-phase actions are handled locally as simultaneous actions,
        action-phase actions go straight to the action processor.
        """
        turn_phase = self._game_state.get("turnPhase")
        if is_allocation_phase(turn_phase):
            return await self.handle_round_start_shield_action(action_type, payload)
        if turn_phase == TurnPhase.ACTION:
            return await self._process(action_type, payload)
        logger.info("Shield action %s is not valid in phase %s", action_type, turn_phase)
        return None

    async def handle_round_start_shield_action(
        self, action_type: str, payload: Mapping[str, Any]
    ) -> ActionResult | bool | None:
        """Dispatch a simultaneous round-start shield action."""
        if not is_allocation_phase(self._game_state.get("turnPhase")):
            logger.info("Round-start shield action %s outside allocation", action_type)
            return None
        if action_type == ALLOCATE_SHIELD_ACTION:
            section_name = payload.get("sectionName")
            if not section_name:
                logger.info("allocateShield action is missing sectionName")
                return False
            return await self.allocate_shield(section_name)
        handlers: dict[str, Callable[[], Awaitable[ActionResult]]] = {
            RESET_ALLOCATION_ACTION: self.reset_shield_allocation,
            END_ALLOCATION_ACTION: self.end_allocation,
        }
        handler = handlers.get(action_type)
        if handler is None:
            logger.info("Unknown round-start shield action %s", action_type)
            return None
        return await handler()

    # ------------------------------------------------------------------
    # Ability-driven reallocation
    # ------------------------------------------------------------------
    def start_reallocation(
        self, ability: Mapping[str, Any], section_name: str | None = None
    ) -> bool:
        """Begin a reallocation for *ability* used from *section_name*."""
        self.sync_phase()
        if route_ability(ability).handler is not AbilityHandler.REALLOCATION:
            logger.info("Ability %r does not reallocate shields", ability.get("name"))
            return False
        if not can_transition(self._mode, ShieldTransition.START_REALLOCATION):
            logger.debug("Cannot start reallocation in mode %s", self._mode)
            return False

        max_shields = _max_shields_for(ability)
        self._mode = transition(self._mode, ShieldTransition.START_REALLOCATION)
        self._reallocation = ReallocationState(
            phase=reallocation_phase_for(self._mode),
            shields_to_remove=max_shields,
            shields_to_add=0,
            max_shields=max_shields,
            ability=dict(ability),
            section_name=section_name,
        )
        logger.info(
            "Player %s started reallocating up to %s shields",
            self._player_id,
            max_shields,
        )
        return True

    async def remove_shield(self, section_name: str) -> bool:
        """Take one shield from *section_name* during the removal phase."""
        if not self._allowed(ShieldAction.REMOVE):
            return False
        state = self._reallocation
        if state.shields_to_remove <= 0:
            logger.debug("No more shields may be removed")
            return False
        base = allocated_shields(self._player_state(), section_name)
        if base + state.pending_shield_changes.get(section_name, 0) <= 0:
            logger.debug("Section %s has no shields left to remove", section_name)
            return False

        result = await self._process(
            REALLOCATE_ABILITY_ACTION,
            {"action": "remove", "sectionName": section_name, "playerId": self._player_id},
        )
        if not result.success or self._mode is not ShieldMode.REMOVING:
            return False
        state = self._reallocation
        changes = state.pending_shield_changes
        self._reallocation = state.evolve(
            pending_shield_changes={
                **changes,
                section_name: changes.get(section_name, 0) - 1,
            },
            shields_to_remove=state.shields_to_remove - 1,
            shields_to_add=state.shields_to_add + 1,
        )
        return True

    async def add_shield(self, section_name: str) -> bool:
        """Place one removed shield on *section_name* during the adding phase."""
        if not self._allowed(ShieldAction.ADD):
            return False
        if self._reallocation.shields_to_add <= 0:
            logger.debug("No removed shields left to add")
            return False

        result = await self._process(
            REALLOCATE_ABILITY_ACTION,
            {"action": "add", "sectionName": section_name, "playerId": self._player_id},
        )
        if not result.success or self._mode is not ShieldMode.ADDING:
            return False
        state = self._reallocation
        changes = state.pending_shield_changes
        self._reallocation = state.evolve(
            pending_shield_changes={
                **changes,
                section_name: changes.get(section_name, 0) + 1,
            },
            shields_to_add=state.shields_to_add - 1,
        )
        return True

    def continue_to_add_phase(self) -> bool:
        """Finish removing shields and start placing them."""
        if not self._allowed(ShieldAction.CONTINUE_TO_ADD):
            return False
        self._mode = transition(self._mode, ShieldTransition.CONTINUE_TO_ADDING)
        state = self._reallocation
        self._reallocation = state.evolve(
            phase=reallocation_phase_for(self._mode),
            post_removal_pending_changes=dict(state.pending_shield_changes),
        )
        return True

    def reset_reallocation(self) -> bool:
        """Undo the clicks made in the current reallocation phase."""
        if not self._allowed(ShieldAction.RESET_REALLOCATION):
            return False
        state = self._reallocation
        if self._mode is ShieldMode.REMOVING:
            reset = calculate_reallocation_removal_reset(state.max_shields)
            update: dict[str, Any] = {
                "pending_shield_changes": reset.new_pending_changes,
                "shields_to_remove": reset.shields_to_remove,
                "shields_to_add": reset.shields_to_add,
            }
        else:
            reset = calculate_reallocation_adding_reset(
                state.post_removal_pending_changes
            )
            update = {
                "pending_shield_changes": reset.new_pending_changes,
                "shields_to_add": reset.shields_to_add,
            }
        self._reallocation = state.evolve(**update)
        return True

    def cancel_reallocation(self) -> bool:
        """Abandon the reallocation and clear all of its state."""
        if not self._allowed(ShieldAction.CANCEL_REALLOCATION):
            return False
        self._mode = transition(self._mode, ShieldTransition.CANCEL)
        self._reallocation = ReallocationState()
        logger.info("Player %s cancelled shield reallocation", self._player_id)
        return True

    def clear_reallocation_state(self) -> None:
        """Drop reallocation state once the confirmed ability has resolved."""
        if can_transition(self._mode, ShieldTransition.COMPLETE):
            self._mode = transition(self._mode, ShieldTransition.COMPLETE)
        self._reallocation = ReallocationState()

    def confirm_reallocation(self) -> ShipAbilityConfirmation | None:
        """Ask the presentation layer to confirm the reallocation."""
        if not self._allowed(ShieldAction.CONFIRM_REALLOCATION):
            return None
        state = self._reallocation
        confirmation = ShipAbilityConfirmation(
            ability=state.ability or {},
            section_name=state.section_name,
            target=None,
            ability_type=REALLOCATE_ACTION,
            pending_changes=dict(state.pending_shield_changes),
        )
        if self._on_confirmation_request is not None:
            self._on_confirmation_request(confirmation)
        return confirmation

    async def handle_ship_section_click(self, section_name: str) -> bool:
        """Route a click on *section_name* according to the current mode."""
        self.sync_phase()
        action = SECTION_CLICK_ACTIONS.get(self._mode)
        if action is ShieldAction.REMOVE:
            return await self.remove_shield(section_name)
        if action is ShieldAction.ADD:
            return await self.add_shield(section_name)
        if action is ShieldAction.ALLOCATE:
            return await self.allocate_shield(section_name)
        logger.debug("Ignored click on %s in mode %s", section_name, self._mode)
        return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _allowed(self, action: ShieldAction) -> bool:
        if is_action_allowed(self._mode, action):
            return True
        logger.debug("Rejected %s in shield mode %s", action, self._mode)
        return False

    def _player_state(self) -> Mapping[str, Any]:
        return self._game_state.get(self._player_id) or {}

    def _effective_max(self, section_name: str) -> int:
        placed = normalize_placed_sections(
            self._game_state.get(self._placed_sections_key)
        )
        return self._stats_provider.get_effective_section_max_shields(
            section_name, self._player_state(), placed
        )

    def _opponent_committed(self, phase: str) -> bool:
        commitments = self._game_state.get("commitments") or {}
        phase_commitments = commitments.get(phase) or {}
        opponent = phase_commitments.get(self._opponent_id) or {}
        return bool(opponent.get("completed"))

    def _notify_waiting(self, phase: str) -> None:
        logger.info("Player %s waiting for opponent in %s", self._player_id, phase)
        if self._on_waiting is not None:
            self._on_waiting(phase)

    async def _process(
        self, action_type: str, payload: Mapping[str, Any]
    ) -> ActionResult:
        result = await self._action_processor.process_action(action_type, payload)
        if not result.success:
            logger.info(
                "Action %s for %s failed: %s", action_type, self._player_id, result.error
            )
        return result


__all__ = ["ShieldAllocationCoordinator"]
