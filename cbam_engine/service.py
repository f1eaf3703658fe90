# -*- coding: utf-8 -*-
"""
CBAM Engine Service

``CBAMEngineService`` bundles calculation, input validation and results
validation behind one object that owns a configuration, times each run
and records the engine metrics. ``get_service()`` returns a process-wide
instance.

Usage:
    >>> from cbam_engine.service import get_service
    >>> evaluation = get_service().evaluate(snapshot)
    >>> evaluation.results.total_emissions

Author: GreenLang Platform Team
Status: Production Ready
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

from cbam_engine.composer import DataInput, calculate_cbam_emissions
from cbam_engine.config import CBAMEngineConfig, get_config
from cbam_engine.metrics import record_calculation, record_records_processed
from cbam_engine.models import CBAMDataSnapshot, ResultsSnapshot, ValidationReport
from cbam_engine.validation import CBAMDataValidator, ResultsValidator

logger = logging.getLogger(__name__)

_singleton_lock = threading.Lock()
_singleton_instance: Optional["CBAMEngineService"] = None


class Evaluation(BaseModel):
    """Outcome of :meth:`CBAMEngineService.evaluate`."""

    model_config = ConfigDict(frozen=True)

    results: ResultsSnapshot
    data_report: ValidationReport
    results_report: ValidationReport

    @property
    def is_valid(self) -> bool:
        return self.data_report.is_valid and self.results_report.is_valid


class CBAMEngineService:
    """Unified facade over the CBAM emissions engine.

    Attributes:
        config: CBAMEngineConfig used for every call.
        data_validator: CBAMDataValidator instance.
        results_validator: ResultsValidator instance.

    Example:
        >>> service = CBAMEngineService()
        >>> results = service.calculate({"energyFuelData": []})
        >>> results.total_emissions
        0.0
    """

    def __init__(self, config: Optional[CBAMEngineConfig] = None) -> None:
        self.config = config or get_config()
        self.data_validator = CBAMDataValidator(self.config)
        self.results_validator = ResultsValidator(self.config)
        self._calculation_count = 0
        logger.info("CBAMEngineService created")

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def calculate(self, data: DataInput) -> ResultsSnapshot:
        """Compute the results snapshot for ``data`` and record metrics."""
        snapshot = CBAMDataSnapshot.coerce(data)
        start = time.perf_counter()
        try:
            results = calculate_cbam_emissions(snapshot, self.config)
        except Exception:
            record_calculation("failure", time.perf_counter() - start)
            logger.exception("CBAM calculation failed")
            raise
        record_calculation("success", time.perf_counter() - start)

        record_records_processed("fuel", len(snapshot.energy_fuel_data))
        record_records_processed("process", len(snapshot.process_production_data))
        record_records_processed("installation_source", len(snapshot.emission_installation_data.emissions))
        record_records_processed("precursor", len(snapshot.purchased_precursors.precursors))
        self._calculation_count += 1
        return results

    def validate_data(self, data: DataInput) -> ValidationReport:
        """Validate a data snapshot."""
        return self.data_validator.validate(data)

    def validate_results(self, results: Any) -> ValidationReport:
        """Validate a results snapshot (model or mapping)."""
        return self.results_validator.validate(results)

    def evaluate(self, data: DataInput) -> Evaluation:
        """Validate ``data``, calculate, then validate the results."""
        snapshot = CBAMDataSnapshot.coerce(data)
        data_report = self.validate_data(snapshot)
        results = self.calculate(snapshot)
        results_report = self.validate_results(results)
        logger.debug(
            "Evaluation complete: data_valid=%s results_valid=%s",
            data_report.is_valid, results_report.is_valid,
        )
        return Evaluation(
            results=results,
            data_report=data_report,
            results_report=results_report,
        )

    def get_metrics(self) -> Dict[str, Any]:
        """Summary of this service instance."""
        return {
            "calculations": self._calculation_count,
            "metrics_enabled": self.config.enable_metrics,
            "provenance_enabled": self.config.enable_provenance,
        }


def get_service() -> CBAMEngineService:
    """Get or create the singleton CBAMEngineService."""
    global _singleton_instance
    if _singleton_instance is None:
        with _singleton_lock:
            if _singleton_instance is None:
                _singleton_instance = CBAMEngineService()
    return _singleton_instance


def reset_service() -> None:
    """Drop the singleton (primarily for test teardown)."""
    global _singleton_instance
    with _singleton_lock:
        _singleton_instance = None


__all__ = [
    "CBAMEngineService",
    "Evaluation",
    "get_service",
    "reset_service",
]
