# -*- coding: utf-8 -*-
"""
Psychro Calculator Configuration

Centralized defaults for the calculator facade covering:
- Default total pressure used when a caller does not supply one
- Chart bounds (maximum dry-bulb temperature and humidity ratio)
- Solver iteration cap
- Output precision, provenance toggle and log level

The engine functions in correlation, conversions, solvers and derivation
never read this module; they take every value as an explicit argument.

All settings can be overridden via environment variables with the
``PSYCHRO_`` prefix (e.g. ``PSYCHRO_DEFAULT_TOTAL_PRESSURE``), or loaded
from a YAML file with ``PsychroConfig.from_yaml``.

Example:
    >>> from psychro.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.default_total_pressure, cfg.max_temp)
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

_ENV_PREFIX = "PSYCHRO_"


@dataclass
class PsychroConfig:
    """Configuration for the psychrometric calculator.

    Attributes:
        default_total_pressure: Total pressure (psia) used when a caller
            omits it at the calculator level. Must lie in the 10-20 psia
            operating range.
        max_temp: Upper dry-bulb bound (F) of the chart the consumer draws.
            Must lie strictly between 20F and 180F.
        max_humidity_ratio: Upper humidity-ratio bound (lb/lb) of the chart.
            Must lie strictly between 0 and 0.07.
        max_iterations: Iteration cap handed to every solver.
        precision: Decimal places used when rounding values for the
            provenance hash.
        enable_provenance: Whether resolved states carry a SHA-256 hash.
        log_level: Logging level name for the ``psychro`` logger.
    """

    default_total_pressure: float = 14.696
    max_temp: float = 100.0
    max_humidity_ratio: float = 0.03
    max_iterations: int = 500
    precision: int = 6
    enable_provenance: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> PsychroConfig:
        """Build a PsychroConfig from environment variables.

        Every field can be overridden via ``PSYCHRO_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).

        Returns:
            Populated PsychroConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}")

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default

        def _float(name: str, default: float) -> float:
            val = _env(name)
            if val is None:
                return default
            try:
                return float(val)
            except ValueError:
                logger.warning(
                    "Invalid float for %s%s=%s, using default %f",
                    prefix, name, val, default,
                )
                return default

        def _str(name: str, default: str) -> str:
            val = _env(name)
            return default if val is None else val

        config = cls(
            default_total_pressure=_float(
                "DEFAULT_TOTAL_PRESSURE", cls.default_total_pressure,
            ),
            max_temp=_float("MAX_TEMP", cls.max_temp),
            max_humidity_ratio=_float(
                "MAX_HUMIDITY_RATIO", cls.max_humidity_ratio,
            ),
            max_iterations=_int("MAX_ITERATIONS", cls.max_iterations),
            precision=_int("PRECISION", cls.precision),
            enable_provenance=_bool(
                "ENABLE_PROVENANCE", cls.enable_provenance,
            ),
            log_level=_str("LOG_LEVEL", cls.log_level),
        )

        logger.info(
            "PsychroConfig loaded: pressure=%.3f psia, max_temp=%.1fF, "
            "max_w=%.4f, max_iterations=%d, precision=%d, provenance=%s",
            config.default_total_pressure,
            config.max_temp,
            config.max_humidity_ratio,
            config.max_iterations,
            config.precision,
            config.enable_provenance,
        )
        return config

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> PsychroConfig:
        """Build a PsychroConfig from a YAML mapping of field names to values.

        Fields absent from the file keep their defaults.

        Args:
            path: Path to the YAML file.

        Returns:
            Populated PsychroConfig instance.

        Raises:
            ValueError: If the file is not a mapping or names unknown fields.
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config %s: %s", path, e)
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"PsychroConfig file {path} must contain a mapping")
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown PsychroConfig fields in {path}: {unknown}")

        config = cls(**data)
        logger.info("PsychroConfig loaded from %s", path)
        return config

    def __post_init__(self) -> None:
        """Validate all configuration constraints after initialization.

        Raises:
            ValueError: If any constraint is violated.
        """
        errors: list[str] = []

        if not 10.0 < self.default_total_pressure < 20.0:
            errors.append("default_total_pressure must be between 10 and 20 psia")
        if not 20.0 < self.max_temp < 180.0:
            errors.append("max_temp must be between 20 and 180 F")
        if not 0.0 < self.max_humidity_ratio < 0.07:
            errors.append("max_humidity_ratio must be between 0 and 0.07")
        if self.max_iterations < 1:
            errors.append("max_iterations must be >= 1")
        if self.precision < 0:
            errors.append("precision must be >= 0")

        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if self.log_level.upper() not in valid_levels:
            errors.append(
                f"log_level must be one of {valid_levels}, "
                f"got '{self.log_level}'"
            )

        if errors:
            msg = "; ".join(errors)
            logger.error("PsychroConfig validation failed: %s", msg)
            raise ValueError(f"PsychroConfig validation failed: {msg}")

        logger.debug("PsychroConfig validated successfully")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the configuration to a plain dictionary."""
        return {
            "default_total_pressure": self.default_total_pressure,
            "max_temp": self.max_temp,
            "max_humidity_ratio": self.max_humidity_ratio,
            "max_iterations": self.max_iterations,
            "precision": self.precision,
            "enable_provenance": self.enable_provenance,
            "log_level": self.log_level,
        }


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[PsychroConfig] = None
_config_lock = threading.Lock()


def _apply_log_level(config: PsychroConfig) -> None:
    """Set the package logger to the configured level."""
    logging.getLogger("psychro").setLevel(
        getattr(logging, config.log_level.upper(), logging.INFO)
    )


def get_config() -> PsychroConfig:
    """Return the singleton PsychroConfig, creating it from env if needed.

    Uses double-checked locking so the hot path takes no lock.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = PsychroConfig.from_env()
                _apply_log_level(_config_instance)
    return _config_instance


def set_config(config: PsychroConfig) -> None:
    """Replace the singleton PsychroConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
        _apply_log_level(config)
    logger.info("PsychroConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "PsychroConfig",
    "get_config",
    "set_config",
    "reset_config",
]
