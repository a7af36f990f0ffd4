"""Tests for the shield mode state machine."""

import pytest

from dronewars_core.game_logic.phases import (
    MODE_ACTIONS,
    IllegalShieldTransitionError,
    ShieldAction,
    ShieldMode,
    ShieldTransition,
    can_transition,
    is_action_allowed,
    is_allocation_phase,
    reallocation_phase_for,
    transition,
)
from dronewars_core.shared.enums import ReallocationPhase


def test_reallocation_moves_from_removing_to_adding_then_idle() -> None:
    mode = transition(ShieldMode.IDLE, ShieldTransition.START_REALLOCATION)
    assert mode is ShieldMode.REMOVING

    mode = transition(mode, ShieldTransition.CONTINUE_TO_ADDING)
    assert mode is ShieldMode.ADDING

    assert transition(mode, ShieldTransition.COMPLETE) is ShieldMode.IDLE


def test_round_start_cannot_start_reallocation() -> None:
    assert not can_transition(ShieldMode.ROUND_START, ShieldTransition.START_REALLOCATION)
    with pytest.raises(IllegalShieldTransitionError):
        transition(ShieldMode.ROUND_START, ShieldTransition.START_REALLOCATION)


def test_adding_cannot_go_back_to_removing() -> None:
    assert not can_transition(ShieldMode.ADDING, ShieldTransition.CONTINUE_TO_ADDING)


def test_every_mode_lists_its_actions() -> None:
    assert set(MODE_ACTIONS) == set(ShieldMode)
    assert not MODE_ACTIONS[ShieldMode.IDLE]


@pytest.mark.parametrize(
    ("mode", "action", "allowed"),
    [
        (ShieldMode.ROUND_START, ShieldAction.ALLOCATE, True),
        (ShieldMode.ROUND_START, ShieldAction.REMOVE, False),
        (ShieldMode.REMOVING, ShieldAction.REMOVE, True),
        (ShieldMode.REMOVING, ShieldAction.ADD, False),
        (ShieldMode.REMOVING, ShieldAction.CONFIRM_REALLOCATION, False),
        (ShieldMode.ADDING, ShieldAction.ADD, True),
        (ShieldMode.ADDING, ShieldAction.CONFIRM_REALLOCATION, True),
        (ShieldMode.IDLE, ShieldAction.ALLOCATE, False),
    ],
)
def test_action_permissions(mode: ShieldMode, action: ShieldAction, allowed: bool) -> None:
    assert is_action_allowed(mode, action) is allowed


def test_reallocation_phase_mapping() -> None:
    assert reallocation_phase_for(ShieldMode.REMOVING) is ReallocationPhase.REMOVING
    assert reallocation_phase_for(ShieldMode.ADDING) is ReallocationPhase.ADDING
    assert reallocation_phase_for(ShieldMode.ROUND_START) is None


def test_allocation_phase_detection() -> None:
    assert is_allocation_phase("allocateShields")
    assert not is_allocation_phase("action")
    assert not is_allocation_phase(None)
