"""Configuration models for circlr."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from circlr.core.selection.classifier import SUPPORTED_NODE_TYPES


class ConfigBase(BaseModel):
    """Base class for circlr configurations.

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
        """Load config from path, falling back to defaults when the file is absent.

        Args:
            path: Path to config file, or None to use default

        Returns:
            Loaded config instance

        Raises:
            ValueError: If the file exists but cannot be parsed
            ValidationError: If config is invalid
        """
        from circlr.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        if not Path(path).exists():
            return cls()
        raw = load_config(path)
        return cls.model_validate(raw)


class UIConfig(BaseModel):
    """Plugin window and preview viewport."""

    width: int = Field(
        default=280, gt=0, description="Window width, also the preview viewport side"
    )
    height: int = Field(default=502, gt=0, description="Window height")
    preview_padding: float = Field(default=60.0, ge=0.0, description="Space kept around the circle")


class LayoutDefaults(BaseModel):
    """Parameters shown when the plugin opens."""

    count: int = Field(default=8, ge=2, description="Number of instances")
    sweep_angle_deg: float | None = Field(
        default=None, gt=0.0, le=360.0, description="Sweep; None for the full-circle sweep"
    )
    align_radially: bool = True
    adaptive_radius: bool = Field(
        default=True, description="Derive the radius from the selection until the user edits it"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = None


class PluginConfig(ConfigBase):
    """Plugin-level configuration."""

    ui: UIConfig = Field(default_factory=UIConfig)
    defaults: LayoutDefaults = Field(default_factory=LayoutDefaults)
    debounce_ms: int = Field(default=200, ge=0, description="Quiet period for parameter input")
    supported_node_types: frozenset[str] = Field(default=SUPPORTED_NODE_TYPES)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("supported_node_types", mode="before")
    @classmethod
    def _upper_node_types(cls, v: object) -> object:
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(str(t).upper() for t in v)
        return v

    @classmethod
    def default_path(cls) -> Path:
        return Path("circlr.yaml")
