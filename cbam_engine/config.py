# -*- coding: utf-8 -*-
"""
CBAM Engine Configuration

Centralized configuration for the CBAM emissions calculation engine covering:
- Result consistency tolerance
- Input plausibility thresholds (energy units, large consumption, process ceiling)
- Metrics and provenance toggles
- Log level used by the command line interface

None of these settings change calculated values. They only steer
validation thresholds and the ambient observability of the engine.

All settings can be overridden via environment variables with the
``GL_CBAM_`` prefix (e.g. ``GL_CBAM_CONSISTENCY_TOLERANCE``).

Example:
    >>> from cbam_engine.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.consistency_tolerance, cfg.max_energy_units)

Author: GreenLang Platform Team
Status: Production Ready
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Environment variable prefix
# ---------------------------------------------------------------------------

_ENV_PREFIX = "GL_CBAM_"


# ---------------------------------------------------------------------------
# CBAMEngineConfig
# ---------------------------------------------------------------------------


@dataclass
class CBAMEngineConfig:
    """Complete configuration for the CBAM emissions calculation engine.

    Attributes:
        consistency_tolerance: Absolute slack (tCO2e) allowed when checking
            that component totals do not exceed the reported total.
        max_energy_units: Number of distinct energy units above which input
            validation warns about unit diversity.
        large_consumption_threshold_mwh: Fuel consumption (in MWh) above which
            input validation warns about an implausibly large value.
        general_process_factor_ceiling: Process emission factor above which
            a process without a known plausibility range is flagged.
        enable_metrics: Whether to record Prometheus metrics.
        enable_provenance: Whether to attach a SHA-256 provenance hash to results.
        log_level: Log level applied by the command line interface.
    """

    # -- Result checks -------------------------------------------------------
    consistency_tolerance: float = 0.01

    # -- Input plausibility --------------------------------------------------
    max_energy_units: int = 3
    large_consumption_threshold_mwh: float = 1_000_000.0
    general_process_factor_ceiling: float = 20.0

    # -- Observability -------------------------------------------------------
    enable_metrics: bool = True
    enable_provenance: bool = True
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> CBAMEngineConfig:
        """Build a CBAMEngineConfig from environment variables.

        Every field can be overridden via ``GL_CBAM_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).

        Returns:
            Populated CBAMEngineConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

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
                    "Invalid float for %s%s=%s, using default %s",
                    prefix, name, val, default,
                )
                return default

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None:
                return default
            return val

        config = cls(
            consistency_tolerance=_float(
                "CONSISTENCY_TOLERANCE", cls.consistency_tolerance,
            ),
            max_energy_units=_int("MAX_ENERGY_UNITS", cls.max_energy_units),
            large_consumption_threshold_mwh=_float(
                "LARGE_CONSUMPTION_THRESHOLD_MWH",
                cls.large_consumption_threshold_mwh,
            ),
            general_process_factor_ceiling=_float(
                "GENERAL_PROCESS_FACTOR_CEILING",
                cls.general_process_factor_ceiling,
            ),
            enable_metrics=_bool("ENABLE_METRICS", cls.enable_metrics),
            enable_provenance=_bool("ENABLE_PROVENANCE", cls.enable_provenance),
            log_level=_str("LOG_LEVEL", cls.log_level).upper(),
        )

        logger.info(
            "CBAMEngineConfig loaded: tolerance=%s, max_units=%d, "
            "metrics=%s, provenance=%s",
            config.consistency_tolerance,
            config.max_energy_units,
            config.enable_metrics,
            config.enable_provenance,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[CBAMEngineConfig] = None
_config_lock = threading.Lock()


def get_config() -> CBAMEngineConfig:
    """Return the singleton CBAMEngineConfig, creating from env if needed."""
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = CBAMEngineConfig.from_env()
    return _config_instance


def set_config(config: CBAMEngineConfig) -> None:
    """Replace the singleton CBAMEngineConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("CBAMEngineConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "CBAMEngineConfig",
    "get_config",
    "set_config",
    "reset_config",
]
