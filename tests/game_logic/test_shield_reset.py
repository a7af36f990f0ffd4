"""Tests for the shield reset calculations."""

import pytest

from dronewars_core.game_logic.shield_reset import (
    calculate_reallocation_adding_reset,
    calculate_reallocation_display_shields,
    calculate_reallocation_removal_reset,
    calculate_round_start_reset,
)


@pytest.mark.parametrize(
    ("snapshot", "budget"),
    [
        ({}, 0),
        ({"bridge": 2}, 5),
        ({"bridge": 3, "powerCell": 4, "droneControlHub": 1}, 2),
    ],
)
def test_round_start_reset_restores_snapshot_and_full_budget(
    snapshot: dict[str, int], budget: int
) -> None:
    reset = calculate_round_start_reset(snapshot, budget)

    assert reset.new_remaining == budget
    assert reset.new_pending == snapshot


def test_round_start_reset_budget_is_not_reduced_by_existing_shields() -> None:
    reset = calculate_round_start_reset({"bridge": 4, "powerCell": 4}, 3)

    assert reset.new_remaining == 3


def test_round_start_reset_returns_an_independent_copy() -> None:
    snapshot = {"bridge": 1}
    reset = calculate_round_start_reset(snapshot, 2)
    reset.new_pending["bridge"] = 9

    assert snapshot == {"bridge": 1}


def test_round_start_reset_is_idempotent() -> None:
    snapshot = {"bridge": 2, "powerCell": 1}

    assert calculate_round_start_reset(snapshot, 4) == calculate_round_start_reset(snapshot, 4)


def test_round_start_reset_without_snapshot() -> None:
    reset = calculate_round_start_reset(None, 3)

    assert reset.new_pending == {}
    assert reset.new_remaining == 3


def test_removal_reset_restores_allowance() -> None:
    reset = calculate_reallocation_removal_reset(3)

    assert reset.new_pending_changes == {}
    assert reset.shields_to_remove == 3
    assert reset.shields_to_add == 0


@pytest.mark.parametrize(
    ("changes", "expected"),
    [
        ({}, 0),
        ({"bridge": -2}, 2),
        ({"bridge": -1, "powerCell": -2, "droneControlHub": 0}, 3),
        ({"bridge": -2, "powerCell": 1}, 2),
    ],
)
def test_adding_reset_counts_removed_shields(changes: dict[str, int], expected: int) -> None:
    reset = calculate_reallocation_adding_reset(changes)

    assert reset.shields_to_add == expected
    assert reset.new_pending_changes == changes


def test_display_shields_apply_pending_delta() -> None:
    changes = {"bridge": -1, "powerCell": 2}

    assert calculate_reallocation_display_shields(3, changes, "bridge") == 2
    assert calculate_reallocation_display_shields(1, changes, "powerCell") == 3
    assert calculate_reallocation_display_shields(4, changes, "droneControlHub") == 4
