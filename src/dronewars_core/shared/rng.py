"""Deterministic random helpers used across the rules core."""

from __future__ import annotations

from collections.abc import Sequence  # noqa: TC003
from random import Random
from typing import TypeVar

from dronewars_core.shared.value_objects import ValueRange  # noqa: TC001

_T = TypeVar("_T")

_LCG_MULTIPLIER = 9301
_LCG_INCREMENT = 49297
_LCG_MODULUS = 233280


class DeterministicRandomService:
    """Thin wrapper around :class:`random.Random` providing deterministic utilities.

    Offset rolls derive a fresh generator from ``seed + offset`` so that the
    same slot or point of interest always produces the same value for a run.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._random = Random(seed)  # noqa: S311

    @property
    def seed(self) -> int | None:
        """Return the base seed for the service."""
        return self._seed

    def reseed(self, seed: int | None) -> None:
        """Reset the random generator to a new seed."""
        self._seed = seed
        self._random = Random(seed)  # noqa: S311

    def random(self) -> float:
        """Return the next float in ``[0, 1)`` from the shared stream."""
        return self._random.random()

    def roll(self, offset: int = 0) -> float:
        """Return a float in ``[0, 1)`` fixed by the base seed and *offset*."""
        local_random = Random((self._seed or 0) + offset)  # noqa: S311
        return local_random.random()

    def roll_percent(self, offset: int = 0) -> float:
        """Return a seeded roll scaled to ``[0, 100)``."""
        return self.roll(offset) * 100

    def roll_in_range(self, value_range: ValueRange, offset: int = 0) -> float:
        """Return a seeded value within *value_range*."""
        if value_range.is_zero:
            return 0.0
        return value_range.interpolate(self.roll(offset))

    def choice(self, population: Sequence[_T]) -> _T:
        """Return a deterministic choice from *population*."""
        if not population:
            msg = "Cannot choose from an empty population."
            raise ValueError(msg)
        return population[self._random.randrange(len(population))]


class LinearCongruentialGenerator:
    """Small reproducible generator used for escape-damage distribution."""

    def __init__(self, seed: int) -> None:
        self._state = seed

    def random(self) -> float:
        """Advance the generator and return a float in ``[0, 1)``."""
        self._state = (self._state * _LCG_MULTIPLIER + _LCG_INCREMENT) % _LCG_MODULUS
        return self._state / _LCG_MODULUS

    def randint(self, low: int, high: int) -> int:
        """Return an integer in the inclusive range ``[low, high]``."""
        return int(self.random() * (high - low + 1)) + low


__all__ = ["DeterministicRandomService", "LinearCongruentialGenerator"]
