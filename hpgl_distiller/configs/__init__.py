"""Distiller configuration loading and validation."""

from hpgl_distiller.configs.loader import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_INIT_STRING,
    ConfigError,
    DistillerConfig,
    LoggingConfig,
    load_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_INIT_STRING",
    "ConfigError",
    "DistillerConfig",
    "LoggingConfig",
    "load_config",
]
