"""Finite-state machine governing shield allocation modes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType

from dronewars_core.shared.enums import ReallocationPhase, TurnPhase


class ShieldMode(StrEnum):
    """Mutually exclusive shield interaction modes for a player."""

    IDLE = "idle"
    ROUND_START = "round_start"
    REMOVING = "removing"
    ADDING = "adding"


class ShieldTransition(StrEnum):
    """Events that move the shield FSM between modes."""

    ENTER_ALLOCATION = "enter_allocation"
    LEAVE_ALLOCATION = "leave_allocation"
    START_REALLOCATION = "start_reallocation"
    CONTINUE_TO_ADDING = "continue_to_adding"
    CANCEL = "cancel"
    COMPLETE = "complete"


class ShieldAction(StrEnum):
    """Player actions accepted by the shield coordinator."""

    ALLOCATE = "allocate"
    RESET_ALLOCATION = "reset_allocation"
    CONFIRM_ALLOCATION = "confirm_allocation"
    REMOVE = "remove"
    ADD = "add"
    CONTINUE_TO_ADD = "continue_to_add"
    RESET_REALLOCATION = "reset_reallocation"
    CANCEL_REALLOCATION = "cancel_reallocation"
    CONFIRM_REALLOCATION = "confirm_reallocation"


class IllegalShieldTransitionError(ValueError):
    """Raised when a transition is not defined for the current mode."""


SHIELD_TRANSITIONS: Mapping[tuple[ShieldMode, ShieldTransition], ShieldMode] = (
    MappingProxyType(
        {
            (ShieldMode.IDLE, ShieldTransition.ENTER_ALLOCATION): ShieldMode.ROUND_START,
            (ShieldMode.ROUND_START, ShieldTransition.ENTER_ALLOCATION): (
                ShieldMode.ROUND_START
            ),
            (ShieldMode.ROUND_START, ShieldTransition.LEAVE_ALLOCATION): ShieldMode.IDLE,
            (ShieldMode.IDLE, ShieldTransition.START_REALLOCATION): ShieldMode.REMOVING,
            (ShieldMode.REMOVING, ShieldTransition.CONTINUE_TO_ADDING): (
                ShieldMode.ADDING
            ),
            (ShieldMode.REMOVING, ShieldTransition.CANCEL): ShieldMode.IDLE,
            (ShieldMode.ADDING, ShieldTransition.CANCEL): ShieldMode.IDLE,
            (ShieldMode.REMOVING, ShieldTransition.COMPLETE): ShieldMode.IDLE,
            (ShieldMode.ADDING, ShieldTransition.COMPLETE): ShieldMode.IDLE,
        }
    )
)

MODE_ACTIONS: Mapping[ShieldMode, frozenset[ShieldAction]] = MappingProxyType(
    {
        ShieldMode.IDLE: frozenset(),
        ShieldMode.ROUND_START: frozenset(
            {
                ShieldAction.ALLOCATE,
                ShieldAction.RESET_ALLOCATION,
                ShieldAction.CONFIRM_ALLOCATION,
            }
        ),
        ShieldMode.REMOVING: frozenset(
            {
                ShieldAction.REMOVE,
                ShieldAction.CONTINUE_TO_ADD,
                ShieldAction.RESET_REALLOCATION,
                ShieldAction.CANCEL_REALLOCATION,
            }
        ),
        ShieldMode.ADDING: frozenset(
            {
                ShieldAction.ADD,
                ShieldAction.RESET_REALLOCATION,
                ShieldAction.CANCEL_REALLOCATION,
                ShieldAction.CONFIRM_REALLOCATION,
            }
        ),
    }
)

# Section clicks resolve to a single action per mode.
SECTION_CLICK_ACTIONS: Mapping[ShieldMode, ShieldAction] = MappingProxyType(
    {
        ShieldMode.ROUND_START: ShieldAction.ALLOCATE,
        ShieldMode.REMOVING: ShieldAction.REMOVE,
        ShieldMode.ADDING: ShieldAction.ADD,
    }
)


def can_transition(mode: ShieldMode, event: ShieldTransition) -> bool:
    """Return ``True`` when *event* is defined for *mode*."""
    return (mode, event) in SHIELD_TRANSITIONS


def transition(mode: ShieldMode, event: ShieldTransition) -> ShieldMode:
    """Return the mode reached by applying *event* to *mode*."""
    try:
        return SHIELD_TRANSITIONS[mode, event]
    except KeyError:
        msg = f"Transition {event} is not allowed from shield mode {mode}."
        raise IllegalShieldTransitionError(msg) from None


def is_action_allowed(mode: ShieldMode, action: ShieldAction) -> bool:
    """Return ``True`` when *action* may be performed in *mode*."""
    return action in MODE_ACTIONS[mode]


def reallocation_phase_for(mode: ShieldMode) -> ReallocationPhase | None:
    """Return the reallocation sub-phase represented by *mode*, if any."""
    if mode is ShieldMode.REMOVING:
        return ReallocationPhase.REMOVING
    if mode is ShieldMode.ADDING:
        return ReallocationPhase.ADDING
    return None


def is_allocation_phase(turn_phase: str | None) -> bool:
    """Return ``True`` when *turn_phase* is the simultaneous allocation phase."""
    return turn_phase == TurnPhase.ALLOCATE_SHIELDS


__all__ = [
    "MODE_ACTIONS",
    "SECTION_CLICK_ACTIONS",
    "SHIELD_TRANSITIONS",
    "IllegalShieldTransitionError",
    "ShieldAction",
    "ShieldMode",
    "ShieldTransition",
    "can_transition",
    "is_action_allowed",
    "is_allocation_phase",
    "reallocation_phase_for",
    "transition",
]
