"""rrule_lite.config_loader

Config file loading for rrule_lite.

- Reads YAML (PyYAML) config files; JSON is valid YAML and works too.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override and layers RRULE_LITE_* environment values on top.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .core.config_manager import ConfigManager
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("rrule_lite.yaml")


@dataclass
class Config:
    """Typed configuration for rrule_lite.

    Fields:
        max_occurrences_per_series: occurrence cap per series per window (1..500)
        default_window_days: window length used by the CLI when --to is omitted
        log_level: logging level name
    """

    max_occurrences_per_series: int = 50
    default_window_days: int = 31
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int and clamped to their allowed
        ranges, logging a warning when a coercion happens.
        """
        if data is None:
            data = {}

        def _coerce_int(key: str, default: int, low: int, high: int) -> int:
            raw = data.get(key, default)
            try:
                value = int(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not an int; using default %d", key, raw, default)
                return default
            if value < low:
                logger.warning("%s %d below minimum; coercing to %d", key, value, low)
                return low
            if value > high:
                logger.warning("%s %d above maximum; coercing to %d", key, value, high)
                return high
            return value

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        return cls(
            max_occurrences_per_series=_coerce_int("max_occurrences_per_series", 50, 1, 500),
            default_window_days=_coerce_int("default_window_days", 31, 1, 366),
            log_level=log_level,
        )


def _load_yaml(path: Path) -> Any:
    """Load a YAML (or JSON) document; empty files load as an empty mapping."""
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse config file {path}: {exc}") from exc
    return {} if loaded is None else loaded


def load_config(path: str | Path | None = None, env: ConfigManager | None = None) -> Config:
    """Load configuration from a YAML file plus environment overrides.

    Args:
        path: Optional path to the config file (default ./rrule_lite.yaml)
        env: Optional ConfigManager supplying RRULE_LITE_* overrides

    Returns:
        Config dataclass instance with values from file/environment (or defaults).

    Raises:
        ConfigError: If the file exists but its top level is not a mapping,
            or it is not valid YAML
    """
    p = Path(path) if path else DEFAULT_CONFIG_PATH
    logger.debug("Attempting to load config from %s", p)

    data: dict[str, Any] = {}
    if p.exists():
        raw = _load_yaml(p)
        if not isinstance(raw, dict):
            logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
            raise ConfigError("Config file must contain a mapping at top level")
        data.update(raw)
        logger.info("Loaded configuration from %s", p)
    else:
        logger.info("Config file %s not found; using defaults", p)

    manager = env or ConfigManager()
    data.update(manager.load_full_config())

    cfg = Config.from_dict(data)
    logger.debug("Configuration values: %s", cfg)
    return cfg
