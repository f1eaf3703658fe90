# -*- coding: utf-8 -*-
"""
Prometheus Metrics - CBAM Emissions Calculation Engine

Prometheus metrics for monitoring engine usage. Metrics never influence
calculated values; recording can be switched off with
``GL_CBAM_ENABLE_METRICS=false``.

Metrics:
    1. gl_cbam_calculations_total (Counter)
    2. gl_cbam_calculation_duration_seconds (Histogram)
    3. gl_cbam_validations_total (Counter)
    4. gl_cbam_validation_issues_total (Counter)
    5. gl_cbam_factor_fallbacks_total (Counter)
    6. gl_cbam_records_processed_total (Counter)

Author: GreenLang Platform Team
Status: Production Ready
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram

from cbam_engine.config import get_config

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# 1. Calculations count
cbam_calculations_total = Counter(
    "gl_cbam_calculations_total",
    "Total CBAM emission calculations performed",
    labelnames=["result"],
)

# 2. Calculation duration
cbam_calculation_duration_seconds = Histogram(
    "gl_cbam_calculation_duration_seconds",
    "CBAM emission calculation duration in seconds",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0),
)

# 3. Validations count
cbam_validations_total = Counter(
    "gl_cbam_validations_total",
    "Total CBAM validations performed",
    labelnames=["kind", "result"],
)

# 4. Validation findings by severity
cbam_validation_issues_total = Counter(
    "gl_cbam_validation_issues_total",
    "Total validation findings by severity",
    labelnames=["kind", "severity"],
)

# 5. Factor resolutions that ended at the category constant
cbam_factor_fallbacks_total = Counter(
    "gl_cbam_factor_fallbacks_total",
    "Emission factor resolutions that used the category fallback",
    labelnames=["category"],
)

# 6. Records processed per calculation
cbam_records_processed_total = Counter(
    "gl_cbam_records_processed_total",
    "Input records processed by the calculation engine",
    labelnames=["record_type"],
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def _enabled() -> bool:
    return get_config().enable_metrics


def record_calculation(result: str, duration: float) -> None:
    """Record a calculation run.

    Args:
        result: "success" or "failure".
        duration: Duration in seconds.
    """
    if not _enabled():
        return
    cbam_calculations_total.labels(result=result).inc()
    cbam_calculation_duration_seconds.observe(duration)


def record_validation(kind: str, is_valid: bool, errors: int, warnings: int) -> None:
    """Record a validation run and its findings.

    Args:
        kind: "data" or "results".
        is_valid: Whether the report was valid.
        errors: Number of errors found.
        warnings: Number of warnings found.
    """
    if not _enabled():
        return
    cbam_validations_total.labels(kind=kind, result="valid" if is_valid else "invalid").inc()
    if errors:
        cbam_validation_issues_total.labels(kind=kind, severity="error").inc(errors)
    if warnings:
        cbam_validation_issues_total.labels(kind=kind, severity="warning").inc(warnings)


def record_factor_fallback(category: str) -> None:
    """Record a factor resolution that ended at the category constant."""
    if not _enabled():
        return
    cbam_factor_fallbacks_total.labels(category=category or "unknown").inc()


def record_records_processed(record_type: str, count: int) -> None:
    """Record how many records of one type a calculation processed."""
    if not _enabled() or count <= 0:
        return
    cbam_records_processed_total.labels(record_type=record_type).inc(count)


__all__ = [
    "cbam_calculations_total",
    "cbam_calculation_duration_seconds",
    "cbam_validations_total",
    "cbam_validation_issues_total",
    "cbam_factor_fallbacks_total",
    "cbam_records_processed_total",
    "record_calculation",
    "record_validation",
    "record_factor_fallback",
    "record_records_processed",
]
