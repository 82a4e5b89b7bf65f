"""Configuration for stateful check runs."""

from statecheck.config.settings import CheckConfig, load_config

__all__ = ["CheckConfig", "load_config"]
