"""Tests for extraction limits, payouts, blockades and escape damage."""

import pytest

from dronewars_core.game_logic.extraction import (
    ExtractionController,
    ExtractionSummary,
    LootSelectionRequired,
    calculate_extracted_credits,
)
from dronewars_core.game_logic.interfaces import FixedReputationProvider
from dronewars_core.shared.rng import DeterministicRandomService
from dronewars_core.shared.value_objects import ValueRange

LOOT = [
    {"type": "card", "cardId": "LASER_01"},
    {"type": "salvageItem", "itemId": "SCRAP", "creditValue": 50},
    {"type": "blueprint", "blueprintId": "TALON"},
    {"type": "salvageItem", "itemId": "ALLOY", "creditValue": 75},
]


def make_run(**overrides: object) -> dict:
    base: dict = {
        "shipSlotId": 1,
        "shipSections": {
            "bridge": {"hull": 8, "maxHull": 10},
            "powerCell": {"hull": 9, "maxHull": 10},
        },
        "collectedLoot": LOOT,
        "currentHull": 30,
        "maxHull": 40,
    }
    base.update(overrides)
    return base


@pytest.mark.parametrize(
    ("loot", "expected"),
    [
        ([], 0),
        (None, 0),
        (LOOT, 125),
        ([{"type": "salvageItem"}, {"type": "salvageItem", "creditValue": None}], 0),
        ([{"type": "card", "creditValue": 500}], 0),
    ],
)
def test_extracted_credits(loot: list | None, expected: int) -> None:
    assert calculate_extracted_credits(loot) == expected


def test_starter_limit_ignores_reputation() -> None:
    controller = ExtractionController(reputation=FixedReputationProvider(2))

    assert controller.calculate_extraction_limit(make_run(shipSlotId=0)) == 3
    assert controller.calculate_extraction_limit(make_run()) == 8


def test_damaged_sections_reduce_limit() -> None:
    run = make_run(
        shipSections={
            "bridge": {"hull": 5, "maxHull": 10},
            "powerCell": {"hull": 4, "maxHull": 10, "thresholds": {"damaged": 3}},
            "droneControlHub": {"hull": 0, "maxHull": 10},
        }
    )

    assert ExtractionController().calculate_extraction_limit(run) == 4


def test_limit_never_goes_negative() -> None:
    sections = {f"s{index}": {"hull": 0} for index in range(5)}

    limit = ExtractionController().calculate_extraction_limit(
        make_run(shipSlotId=0, shipSections=sections)
    )

    assert limit == 0


def test_extraction_over_limit_requires_selection() -> None:
    result = ExtractionController().complete_extraction(make_run(shipSlotId=0, collectedLoot=LOOT))

    assert isinstance(result, LootSelectionRequired)
    assert result.action == "selectLoot"
    assert result.limit == 3
    assert len(result.collected_loot) == 4


def test_extraction_with_selection_discards_the_rest() -> None:
    result = ExtractionController().complete_extraction(
        make_run(shipSlotId=0), selected_loot=[LOOT[1], LOOT[2]]
    )

    assert isinstance(result, ExtractionSummary)
    assert result.items_discarded == 2
    assert result.credits_earned == 50
    assert result.blueprints_acquired == 1
    assert result.cards_acquired == 0


def test_extraction_within_limit_summarizes_run() -> None:
    result = ExtractionController().complete_extraction(make_run())

    assert isinstance(result, ExtractionSummary)
    assert result.success
    assert result.cards_acquired == 1
    assert result.blueprints_acquired == 1
    assert result.credits_earned == 125
    assert (result.final_hull, result.max_hull, result.hull_percent) == (30, 40, 75)
    assert result.items_discarded == 0


def test_hull_percent_defaults_to_full_without_max_hull() -> None:
    result = ExtractionController().complete_extraction(make_run(currentHull=0, maxHull=0))

    assert isinstance(result, ExtractionSummary)
    assert result.hull_percent == 100


def test_blockade_chance_follows_detection() -> None:
    controller = ExtractionController(rng=DeterministicRandomService(7))

    assert controller.check_blockade(0) is False
    assert controller.check_blockade(100) is True


def test_escape_damage_range_defaults() -> None:
    assert ExtractionController.escape_damage_range(None) == ValueRange(min=2, max=2)
    assert ExtractionController.escape_damage_range({"escapeDamage": {"min": 1, "max": 3}}) == (
        ValueRange(min=1, max=3)
    )


def test_escape_could_destroy_uses_worst_case() -> None:
    controller = ExtractionController()
    fragile = make_run(shipSections={"a": {"hull": 5}, "b": {"hull": 6}})
    sturdy = make_run(shipSections={"a": {"hull": 5}, "b": {"hull": 10}})

    risk = controller.check_escape_could_destroy(fragile)

    assert risk.could_destroy
    assert risk.max_damage == 2
    assert not controller.check_escape_could_destroy(sturdy).could_destroy


def test_escape_damage_is_applied_one_point_at_a_time() -> None:
    run = make_run()
    controller = ExtractionController()

    outcome = controller.apply_escape_damage(run, {"escapeDamage": {"min": 3, "max": 3}}, seed=11)

    assert outcome.total_damage == 3
    assert len(outcome.damage_hits) == 3
    assert outcome.total_hull == 17 - 3
    assert outcome.max_hull == 20
    assert outcome.initial_sections["bridge"].hull == 8
    assert outcome.initial_sections["powerCell"].hull == 9
    assert not outcome.would_destroy


def test_escape_damage_is_reproducible_for_a_seed() -> None:
    controller = ExtractionController()

    first = controller.apply_escape_damage(make_run(), None, seed=99)
    second = controller.apply_escape_damage(make_run(), None, seed=99)

    assert first.damage_hits == second.damage_hits
    assert first.updated_sections == second.updated_sections


def test_escape_damage_without_sections() -> None:
    outcome = ExtractionController().apply_escape_damage(make_run(shipSections={}), None)

    assert outcome.damage_hits == ()
    assert outcome.would_destroy
