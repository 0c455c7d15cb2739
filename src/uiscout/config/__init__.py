"""Configuration for uiscout."""

from .settings import ScoutConfig, load_config

__all__ = ["ScoutConfig", "load_config"]
