"""Configuration models for keyline."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field


class ConfigBase(BaseModel):
    """Base class for all keyline configurations.

    Provides common functionality for loading from files with defaults.
    Subclasses must implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type.

        Subclasses must override this to provide their default location.

        Returns:
            Path to the default config file
        """
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path or use default path.

        A missing file at the *default* path yields an all-defaults config;
        a missing file at an explicit path is an error.

        Args:
            path: Path to config file, or None to use default

        Returns:
            Loaded config instance

        Raises:
            FileNotFoundError: If an explicit config file doesn't exist
            ValidationError: If config is invalid
        """
        from keyline.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
            if not Path(path).exists():
                return cls()
        raw = load_config(path)
        return cls.model_validate(raw)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )

    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log line format (ignored when structured)",
    )

    structured: bool = Field(default=False, description="Emit JSON log lines")

    filename: str | None = Field(default=None, description="Log file (stderr when unset)")


class PaletteConfig(BaseModel):
    """Timeline color palette.

    Rules get colors round-robin from a palette generated once from ``seed``,
    so the same stylesheet always renders with the same colors.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    size: int = Field(default=10, ge=1, le=64, description="Number of base colors")
    seed: int = Field(default=7, description="Seed for the palette generator")
    saturation: tuple[float, float] = Field(
        default=(35.0, 105.0), description="Saturation range (%), clipped to 100"
    )
    lightness: tuple[float, float] = Field(default=(70.0, 80.0), description="Lightness range (%)")


class KeylineConfig(ConfigBase):
    """Session-level configuration.

    Example:
        >>> config = KeylineConfig.model_validate({"markup_debounce_ms": 250})
        >>> config.palette.size
        10
    """

    markup_debounce_ms: float = Field(
        default=500.0, ge=0.0, description="Quiet period before rebuilding rendered markup"
    )

    default_timeline_ms: float = Field(
        default=1000.0, gt=0.0, description="Timeline length when no rule has a length"
    )

    keyframe_indent: str = Field(
        default="    ", description="Indentation for declarations inserted into keyframe blocks"
    )

    palette: PaletteConfig = Field(default_factory=PaletteConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        return Path("keyline.json")
