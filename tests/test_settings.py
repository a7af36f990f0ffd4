"""Tests for environment-driven package settings."""

import logging

import pytest

from dronewars_core import CoreSettings, configure_logging, get_settings


def test_settings_read_prefixed_environment() -> None:
    settings = get_settings()

    assert settings.rng_seed == 1234
    assert settings.mia_detection_threshold == 100
    assert settings.default_encounter_chance == 15


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()


def test_threshold_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DRONEWARS_MIA_DETECTION_THRESHOLD", "0")

    with pytest.raises(ValueError, match="mia_detection_threshold"):
        CoreSettings()


def test_configure_logging_accepts_lowercase_level(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging(CoreSettings(log_level="debug"))

    assert calls[0]["level"] == "DEBUG"
