"""Configuration loader for the HPGL distiller.

Loads and validates ``distiller.yaml`` into typed, frozen dataclasses.
The resulting :class:`DistillerConfig` is built once and handed to every
component read-only; command-line flags produce a modified copy through
:meth:`DistillerConfig.with_overrides`, never by mutation.

Slew is configured in **milliseconds** per unit of travel (matching the
``-s`` flag) and stored in **microseconds**, the unit the motion timer
works in::

    slew_us = round(slew_ms * 1000)

Usage::

    from hpgl_distiller.configs.loader import load_config
    cfg = load_config()                          # shipped defaults
    cfg = load_config("/custom/distiller.yaml")  # explicit path
    cfg = cfg.with_overrides(slew_us=2000, normalize=True)
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from hpgl_distiller.errors import ConfigError
from hpgl_distiller.hpgl.commands import DEFAULT_ACCEPT_SET, AcceptSet
from hpgl_distiller.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "distiller.yaml"
DEFAULT_INIT_STRING = "IN;PU;"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_INIT_STRING",
    "DistillerConfig",
    "LoggingConfig",
    "load_config",
    "slew_ms_to_us",
]


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings for the command-line entry point."""

    level: str = "INFO"
    json: bool = False
    file: str | None = None


@dataclass(frozen=True)
class DistillerConfig:
    """Top-level, immutable distiller configuration.

    Parameters
    ----------
    init_string : str
        HPGL prepended to the output.
    slew_us : int
        Pacing delay per unit distance in microseconds; ``0`` disables it.
    normalize : bool
        Run the bounding-box pass and shift extents to the origin.
    x_offset, y_offset : int
        User shift applied to every coordinate pair.
    accept_set : AcceptSet
        Recognised mnemonics (fixed to the cutter subset by default).
    logging : LoggingConfig
        Logging settings used by the CLI.
    """

    init_string: str = DEFAULT_INIT_STRING
    slew_us: int = 0
    normalize: bool = False
    x_offset: int = 0
    y_offset: int = 0
    accept_set: AcceptSet = DEFAULT_ACCEPT_SET
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def pacing_enabled(self) -> bool:
        return self.slew_us > 0

    @property
    def rewrites_coordinates(self) -> bool:
        """``True`` when the bounding-box/offset pass changes anything."""
        return self.normalize or self.x_offset != 0 or self.y_offset != 0

    def with_overrides(self, **overrides: Any) -> DistillerConfig:
        """Return a validated copy with the non-``None`` *overrides* applied.

        ``log_level``, ``log_json`` and ``log_file`` update the nested
        :class:`LoggingConfig`.

        Raises
        ------
        ConfigError
            If an override names an unknown field or fails validation.
        """
        log_updates = {
            key[len("log_"):]: overrides.pop(key)
            for key in ("log_level", "log_json", "log_file")
            if key in overrides
        }
        log_updates = {k: v for k, v in log_updates.items() if v is not None}
        changes = {k: v for k, v in overrides.items() if v is not None}

        known = {f.name for f in dataclasses.fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ConfigError(f"Unknown configuration field(s): {sorted(unknown)}")

        if log_updates:
            changes["logging"] = dataclasses.replace(self.logging, **log_updates)

        cfg = dataclasses.replace(self, **changes)
        _validate_config(cfg)
        return cfg


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _as_int(name: str, value: Any) -> int:
    """Coerce an integral YAML value, rejecting bools and fractions."""
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigError(f"{name} must be an integer, got {value!r}")
        return int(value)
    return int(value)


def slew_ms_to_us(value: Any) -> int:
    """Convert a slew in milliseconds per unit to integer microseconds.

    Raises
    ------
    ConfigError
        If *value* is a bool, not a number, or not finite.
    """
    if isinstance(value, bool):
        raise ConfigError(f"slew must be a number, got {value!r}")
    try:
        slew_ms = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"slew must be a number, got {value!r}") from exc
    slew_us = slew_ms * 1000
    if not math.isfinite(slew_us):
        raise ConfigError(f"slew must be finite, got {value!r}")
    return int(round(slew_us))


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Section '{name}' must be a mapping, got {type(raw).__name__}")
    return raw


def _validate_config(cfg: DistillerConfig) -> None:
    """Validate field values and cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid value.
    """
    if not isinstance(cfg.init_string, str):
        raise ConfigError(
            f"init_string must be a string, got {type(cfg.init_string).__name__}"
        )
    if isinstance(cfg.slew_us, bool) or not isinstance(cfg.slew_us, int):
        raise ConfigError(f"slew_us must be an integer, got {cfg.slew_us!r}")
    if cfg.slew_us < 0:
        raise ConfigError(f"slew must be >= 0, got {cfg.slew_us} us")
    for name in ("x_offset", "y_offset"):
        value = getattr(cfg, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{name} must be an integer, got {value!r}")
    if cfg.logging.level.upper() not in LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {', '.join(LOG_LEVELS)}, "
            f"got {cfg.logging.level!r}"
        )
    if "\n" in cfg.init_string or "\r" in cfg.init_string:
        logger.warning(
            "init_string contains a line break; it is written verbatim",
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> DistillerConfig:
    """Load and validate distiller configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``distiller.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    DistillerConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If a required key is missing, a value fails validation, or the
        file cannot be read, is empty or is not valid YAML.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.debug("Loading configuration from %s", path)

    try:
        data = load_yaml(path)
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {path}: {exc}") from exc
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot parse configuration file {path}: {exc}") from exc
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    try:
        # -- output ---------------------------------------------------------
        init_string = data["output"]["init_string"]

        # -- pacing ---------------------------------------------------------
        slew_us = slew_ms_to_us(data["pacing"]["slew_ms"])

        # -- bounding box (optional) ----------------------------------------
        bb = _section(data, "bounding_box")
        normalize = bool(bb.get("normalize", False))
        x_offset = _as_int("bounding_box.x_offset", bb.get("x_offset", 0))
        y_offset = _as_int("bounding_box.y_offset", bb.get("y_offset", 0))

        # -- logging (optional) ---------------------------------------------
        lg = _section(data, "logging")
        log_file = lg.get("file")
        logging_cfg = LoggingConfig(
            level=str(lg.get("level", "INFO")).upper(),
            json=bool(lg.get("json", False)),
            file=str(log_file) if log_file else None,
        )

        config = DistillerConfig(
            init_string=init_string,
            slew_us=slew_us,
            normalize=normalize,
            x_offset=x_offset,
            y_offset=y_offset,
            logging=logging_cfg,
        )

        _validate_config(config)
        return config

    except KeyError as exc:
        raise ConfigError(
            f"Missing required configuration key: {exc}"
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc
