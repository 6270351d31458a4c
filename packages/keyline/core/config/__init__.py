"""Configuration management for keyline."""

from keyline.core.config.loader import (
    configure_logging,
    detect_format,
    load_config,
    load_keyline_config,
)
from keyline.core.config.models import ConfigBase, KeylineConfig, LoggingConfig, PaletteConfig

__all__ = [
    "ConfigBase",
    "KeylineConfig",
    "LoggingConfig",
    "PaletteConfig",
    "configure_logging",
    "detect_format",
    "load_config",
    "load_keyline_config",
]
