"""Discovery and execution settings with environment variable loading."""

import os
import logging
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class ScoutConfig(BaseModel):
    """Configuration for discovery, synthesis and execution."""

    # Bounded waits
    visibility_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("UISCOUT_VISIBILITY_TIMEOUT_MS", "1000")),
        ge=0,
        description="Bounded wait for scanner visibility checks",
    )
    tooltip_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("UISCOUT_TOOLTIP_TIMEOUT_MS", "500")),
        ge=0,
        description="Bounded wait for tooltip and reveal probes",
    )

    # Latency caps
    tooltip_limit: int = Field(
        default_factory=lambda: int(os.getenv("UISCOUT_TOOLTIP_LIMIT", "10")),
        ge=0,
        description="Buttons hovered during tooltip probing",
    )
    dynamic_hover_limit: int = Field(
        default_factory=lambda: int(os.getenv("UISCOUT_DYNAMIC_HOVER_LIMIT", "5")),
        ge=0,
        description="Navigation elements hovered during dynamic discovery",
    )
    dynamic_settle_ms: int = Field(
        default_factory=lambda: int(os.getenv("UISCOUT_DYNAMIC_SETTLE_MS", "500")),
        ge=0,
        description="Settle interval after each dynamic hover",
    )
    step_settle_ms: int = Field(
        default_factory=lambda: int(os.getenv("UISCOUT_STEP_SETTLE_MS", "100")),
        ge=0,
        description="Settle interval after each executed step",
    )
    essentials_per_selector: int = Field(
        default_factory=lambda: int(os.getenv("UISCOUT_ESSENTIALS_PER_SELECTOR", "10")),
        ge=0,
        description="Elements processed per selector in essentials discovery",
    )

    # Output
    screenshot_dir: str = Field(
        default_factory=lambda: os.getenv("UISCOUT_SCREENSHOT_DIR", "test-screenshots"),
        description="Directory for step and failure screenshots",
    )

    # Behaviour switches
    isolate_scanner_failures: bool = Field(
        default_factory=lambda: _env_bool("UISCOUT_ISOLATE_SCANNER_FAILURES", "false"),
        description="Keep partial results when a scanner fails instead of aborting",
    )
    include_dynamic: bool = Field(
        default_factory=lambda: _env_bool("UISCOUT_INCLUDE_DYNAMIC", "true"),
        description="Run hover-triggered dynamic discovery",
    )
    execute_tests: bool = Field(
        default_factory=lambda: _env_bool("UISCOUT_EXECUTE_TESTS", "true"),
        description="Replay synthesized test cases in complete runs",
    )

    # Browser
    headless: bool = Field(
        default_factory=lambda: _env_bool("UISCOUT_HEADLESS", "true"),
        description="Launch the browser headless",
    )
    navigation_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("UISCOUT_NAVIGATION_TIMEOUT_MS", "30000")),
        ge=0,
        description="Page navigation timeout",
    )


def load_config(config_path: Optional[str] = None) -> ScoutConfig:
    """
    Load settings from an optional YAML file.

    Values are merged in this order (later overrides earlier):
    1. Environment variables (UISCOUT_*) and built-in defaults
    2. The YAML file at config_path, if given and readable

    Only the ``uiscout`` section is merged when present, otherwise the whole
    file is used.

    Args:
        config_path: Optional config file path

    Returns:
        Merged ScoutConfig instance
    """
    merged_config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path) as f:
                    file_config = yaml.safe_load(f) or {}
                    if "uiscout" in file_config:
                        merged_config.update(file_config["uiscout"] or {})
                    else:
                        merged_config.update(file_config)
                    logger.debug(f"Loaded config from {path}")
            except Exception as e:
                logger.warning(f"Failed to load config from {path}: {e}")
        else:
            logger.warning(f"Config file not found: {path}")

    return ScoutConfig(**merged_config)
