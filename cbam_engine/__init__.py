# -*- coding: utf-8 -*-
"""
GreenLang CBAM Emissions Calculation Engine
===========================================

Deterministic calculation of direct, process, installation, indirect,
embedded and transport emissions for EU Carbon Border Adjustment
Mechanism (CBAM) reporting. It supports:

- Lenient data snapshots (camelCase or snake_case, malformed values read as 0)
- Emission factor resolution: explicit value, user override, default table,
  category fallback
- Per-gas breakdowns (CO2, CH4, N2O, other GHG) and biogenic CO2
- Imported raw material shares by country and by material
- Input and results validation reports
- SHA-256 provenance hash on every results snapshot
- Prometheus metrics and a GL_CBAM_ prefixed configuration

Key Components:
    - composer: calculate_cbam_emissions, the single entry point
    - calculation: per-source aggregators
    - resolution: emission factor fallback chain
    - validation: CBAMDataValidator and ResultsValidator
    - service: CBAMEngineService facade
    - cli: the ``cbam-engine`` command

Example:
    >>> from cbam_engine import calculate_cbam_emissions
    >>> results = calculate_cbam_emissions({
    ...     "energyFuelData": [{"fuelType": "Natural gas", "consumption": 100,
    ...                         "unit": "GJ", "co2EmissionFactor": 56.1}],
    ... })
    >>> results.total_direct_co2_emissions
    5610.0
"""

__version__ = "1.0.0"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from cbam_engine.config import (
    CBAMEngineConfig,
    get_config,
    reset_config,
    set_config,
)

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
from cbam_engine.models import (
    CBAMDataSnapshot,
    EmissionFactorOverride,
    EmissionsByGasType,
    EnergyFuelRecord,
    FactorCategory,
    GasType,
    ProcessInput,
    ProcessRecord,
    PurchasedPrecursor,
    ResultsSnapshot,
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

# ---------------------------------------------------------------------------
# Defaults, units and factor resolution
# ---------------------------------------------------------------------------
from cbam_engine.defaults import (
    get_default_embedded_emission_factor,
    get_default_fuel_emission_factor,
    get_default_process_emission_factor,
)
from cbam_engine.units import (
    EnergyUnitConverter,
    normalize_electricity_factor,
    to_common_energy_unit,
    to_mwh,
)
from cbam_engine.resolution import FactorResolution, FactorSource, resolve_factor

# ---------------------------------------------------------------------------
# Calculation, validation and provenance
# ---------------------------------------------------------------------------
from cbam_engine.composer import calculate_cbam_emissions
from cbam_engine.validation import (
    CBAMDataValidator,
    ResultsValidator,
    validate_calculation_results,
    validate_cbam_data,
)
from cbam_engine.provenance import calculation_hash

# ---------------------------------------------------------------------------
# I/O and service
# ---------------------------------------------------------------------------
from cbam_engine.exceptions import CBAMEngineError, SnapshotLoadError
from cbam_engine.io import load_overrides, load_snapshot
from cbam_engine.service import CBAMEngineService, Evaluation, get_service

__all__ = [
    "__version__",
    # Configuration
    "CBAMEngineConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Models
    "CBAMDataSnapshot",
    "EmissionFactorOverride",
    "EmissionsByGasType",
    "EnergyFuelRecord",
    "FactorCategory",
    "GasType",
    "ProcessInput",
    "ProcessRecord",
    "PurchasedPrecursor",
    "ResultsSnapshot",
    "ValidationIssue",
    "ValidationReport",
    "ValidationSeverity",
    # Defaults, units, resolution
    "get_default_fuel_emission_factor",
    "get_default_process_emission_factor",
    "get_default_embedded_emission_factor",
    "EnergyUnitConverter",
    "to_common_energy_unit",
    "to_mwh",
    "normalize_electricity_factor",
    "FactorResolution",
    "FactorSource",
    "resolve_factor",
    # Calculation, validation, provenance
    "calculate_cbam_emissions",
    "CBAMDataValidator",
    "ResultsValidator",
    "validate_cbam_data",
    "validate_calculation_results",
    "calculation_hash",
    # I/O and service
    "CBAMEngineError",
    "SnapshotLoadError",
    "load_snapshot",
    "load_overrides",
    "CBAMEngineService",
    "Evaluation",
    "get_service",
]
