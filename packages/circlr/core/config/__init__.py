"""Plugin configuration."""

from circlr.core.config.loader import detect_format, load_config, load_plugin_config
from circlr.core.config.models import (
    ConfigBase,
    LayoutDefaults,
    LoggingConfig,
    PluginConfig,
    UIConfig,
)

__all__ = [
    "ConfigBase",
    "LayoutDefaults",
    "LoggingConfig",
    "PluginConfig",
    "UIConfig",
    "detect_format",
    "load_config",
    "load_plugin_config",
]
