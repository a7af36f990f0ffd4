"""Drone Wars combat, salvage and recovery-economy rules."""

from dronewars_core.settings import CoreSettings, configure_logging, get_settings

__all__ = ["CoreSettings", "configure_logging", "get_settings"]
