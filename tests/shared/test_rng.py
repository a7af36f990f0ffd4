"""Tests for the deterministic random helpers."""

import pytest

from dronewars_core.shared.rng import DeterministicRandomService, LinearCongruentialGenerator
from dronewars_core.shared.value_objects import ValueRange


def test_offset_rolls_are_stable_and_independent_of_stream() -> None:
    service = DeterministicRandomService(1234)
    first = service.roll(1337)

    service.random()
    service.random()

    assert service.roll(1337) == first
    assert DeterministicRandomService(1234).roll(1337) == first
    assert service.roll(0) != first


def test_reseed_restarts_the_stream() -> None:
    service = DeterministicRandomService(5)
    expected = [service.random() for _ in range(3)]

    service.reseed(5)

    assert [service.random() for _ in range(3)] == expected
    assert service.seed == 5


def test_roll_in_range_stays_in_bounds() -> None:
    service = DeterministicRandomService(9)
    value_range = ValueRange(min=5, max=10)

    for offset in range(50):
        assert 5 <= service.roll_in_range(value_range, offset) < 10
    assert service.roll_in_range(ValueRange(), 3) == 0


def test_roll_percent_scale() -> None:
    service = DeterministicRandomService(3)

    assert service.roll_percent(4) == pytest.approx(service.roll(4) * 100)


def test_choice_rejects_empty_population() -> None:
    service = DeterministicRandomService(1)

    assert service.choice(["a"]) == "a"
    with pytest.raises(ValueError, match="empty"):
        service.choice([])


def test_linear_congruential_sequence() -> None:
    generator = LinearCongruentialGenerator(0)

    assert generator.random() == pytest.approx(49297 / 233280)
    assert generator.random() == pytest.approx(((49297 * 9301 + 49297) % 233280) / 233280)


def test_linear_congruential_randint_bounds() -> None:
    generator = LinearCongruentialGenerator(42)

    values = [generator.randint(2, 4) for _ in range(100)]

    assert set(values) <= {2, 3, 4}
    assert LinearCongruentialGenerator(7).randint(2, 2) == 2
