"""Test configuration and fixtures for the rules core test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from dronewars_core.game_logic.configuration import get_default_economy_configuration
from dronewars_core.settings import get_settings


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("DRONEWARS_RNG_SEED", "1234")
    monkeypatch.setenv("DRONEWARS_MIA_DETECTION_THRESHOLD", "100")
    monkeypatch.delenv("DRONEWARS_ECONOMY_MIA_RECOVERY_FLOOR", raising=False)
    get_settings.cache_clear()
    get_default_economy_configuration.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_economy_configuration.cache_clear()
