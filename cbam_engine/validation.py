# -*- coding: utf-8 -*-
"""
CBAM Data and Results Validation

Two independent validators, both side-effect free apart from metrics:

- CBAMDataValidator checks a data snapshot: required identifiers, numeric
  ranges, duplicate names, process completeness, process factor
  plausibility and unit diversity.
- ResultsValidator checks a results snapshot: non-negative aggregates,
  ordering between totals, shares within [0, 1].

Findings are returned in a ValidationReport, never raised. Errors make the
report invalid; warnings and info do not.

Example:
    >>> from cbam_engine.validation import validate_cbam_data
    >>> report = validate_cbam_data({"companyInfo": {"companyName": "ACME"}})
    >>> report.is_valid
    False

Author: GreenLang Platform Team
Status: Production Ready
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from pydantic import ValidationError

from cbam_engine.coercion import (
    has_number,
    is_blank,
    is_invalid_number,
    parse_number,
    safe_float,
    safe_text,
)
from cbam_engine.config import CBAMEngineConfig, get_config
from cbam_engine.defaults import (
    FUEL_EMISSION_FACTORS,
    STANDARD_PROCESS_TYPES,
    get_process_factor_range,
    lookup_default,
)
from cbam_engine.metrics import record_validation
from cbam_engine.models import (
    CBAMDataSnapshot,
    EnergyFuelRecord,
    ProcessInput,
    ProcessRecord,
    ResultsSnapshot,
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)
from cbam_engine.units import to_mwh

logger = logging.getLogger(__name__)

_VAT_PATTERN = re.compile(r"^[A-Za-z]{2}[0-9A-Za-z]{2,}$")
_PERIOD_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")


class _IssueCollector:
    """Accumulates findings and the field counters of the summary."""

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []
        self.total_fields = 0
        self.valid_fields = 0

    def error(self, field: str, message: str) -> None:
        self.issues.append(ValidationIssue(field=field, message=message, severity=ValidationSeverity.ERROR))

    def warning(self, field: str, message: str) -> None:
        self.issues.append(ValidationIssue(field=field, message=message, severity=ValidationSeverity.WARNING))

    def info(self, field: str, message: str) -> None:
        self.issues.append(ValidationIssue(field=field, message=message, severity=ValidationSeverity.INFO))

    # -- field checks --------------------------------------------------------

    def text(
        self,
        value: Any,
        field: str,
        required: bool = False,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        pattern: Optional[re.Pattern] = None,
    ) -> bool:
        self.total_fields += 1
        if is_blank(value):
            if required:
                self.error(field, "This field is required")
                return False
            return True
        text = safe_text(value)
        if min_length is not None and len(text) < min_length:
            self.error(field, f"Must be at least {min_length} characters")
            return False
        if max_length is not None and len(text) > max_length:
            self.error(field, f"Must be at most {max_length} characters")
            return False
        if pattern is not None and not pattern.match(text):
            self.error(field, "Invalid format")
            return False
        self.valid_fields += 1
        return True

    def number(
        self,
        value: Any,
        field: str,
        required: bool = False,
        minimum: Optional[float] = None,
        maximum: Optional[float] = None,
    ) -> bool:
        self.total_fields += 1
        if is_blank(value):
            if required:
                self.error(field, "This field is required")
                return False
            return True
        if is_invalid_number(value):
            self.error(field, "Must be a valid number")
            return False
        number = safe_float(value)
        if minimum is not None and number < minimum:
            self.error(field, f"Must be at least {minimum:g}")
            return False
        if maximum is not None and number > maximum:
            self.error(field, f"Must be at most {maximum:g}")
            return False
        self.valid_fields += 1
        return True

    # -- report --------------------------------------------------------------

    def report(self) -> ValidationReport:
        errors = [f"{i.field}: {i.message}" for i in self.issues if i.severity is ValidationSeverity.ERROR]
        warnings = [f"{i.field}: {i.message}" for i in self.issues if i.severity is ValidationSeverity.WARNING]
        info = [f"{i.field}: {i.message}" for i in self.issues if i.severity is ValidationSeverity.INFO]
        return ValidationReport(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            info=info,
            issues=list(self.issues),
            summary={
                "total_fields": self.total_fields,
                "valid_fields": self.valid_fields,
                "error_fields": len(errors),
                "warning_fields": len(warnings),
            },
        )


# =============================================================================
# Input validation
# =============================================================================


class CBAMDataValidator:
    """Validates a CBAM data snapshot before export or step advancement.

    Attributes:
        config: Engine configuration supplying the plausibility thresholds.

    Example:
        >>> validator = CBAMDataValidator()
        >>> report = validator.validate(snapshot)
        >>> print(report.errors)
    """

    def __init__(self, config: Optional[CBAMEngineConfig] = None) -> None:
        self.config = config or get_config()

    def validate(self, data: Union[CBAMDataSnapshot, Dict[str, Any], None]) -> ValidationReport:
        """Run every input check on ``data``.

        Args:
            data: A CBAMDataSnapshot or the raw camelCase mapping.

        Returns:
            ValidationReport with errors, warnings and info.
        """
        snapshot = CBAMDataSnapshot.coerce(data)
        collector = _IssueCollector()

        self._check_identifiers(snapshot, collector)
        self._check_fuels(snapshot.energy_fuel_data, collector)
        self._check_processes(snapshot.process_production_data, collector)
        self._check_installation_sources(snapshot, collector)
        self._check_precursors(snapshot, collector)

        if not any(i.severity is not ValidationSeverity.INFO for i in collector.issues):
            collector.info("data", "All data validation checks passed")

        report = collector.report()
        record_validation("data", report.is_valid, len(report.errors), len(report.warnings))
        logger.debug(
            "Data validation: valid=%s errors=%d warnings=%d",
            report.is_valid, len(report.errors), len(report.warnings),
        )
        return report

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def _check_identifiers(self, snapshot: CBAMDataSnapshot, c: _IssueCollector) -> None:
        company = snapshot.company_info
        report = snapshot.report_config
        details = snapshot.installation_details

        c.text(company.company_name, "companyInfo.companyName", required=True, min_length=2)
        c.text(company.company_address, "companyInfo.companyAddress", required=True, min_length=5)
        c.text(company.company_vat, "companyInfo.companyVAT", pattern=_VAT_PATTERN)

        c.text(report.installation_id, "reportConfig.installationId", required=True, min_length=1)
        c.text(report.reporting_period, "reportConfig.reportingPeriod", required=True, pattern=_PERIOD_PATTERN)
        c.text(report.installation_name, "reportConfig.installationName", required=True)
        c.text(report.installation_address, "reportConfig.installationAddress", required=True)
        c.text(
            report.installation_country, "reportConfig.installationCountry",
            required=True, min_length=2, max_length=2,
        )
        c.text(details.main_activity, "installationDetails.mainActivity", required=True)

    # ------------------------------------------------------------------
    # Fuels
    # ------------------------------------------------------------------

    def _check_fuels(self, fuels: List[EnergyFuelRecord], c: _IssueCollector) -> None:
        if not fuels:
            c.warning("energyFuelData", "No energy or fuel data provided")
            return

        units: Set[str] = set()
        for index, fuel in enumerate(fuels):
            prefix = f"energyFuelData[{index}]"
            c.text(fuel.fuel_type, f"{prefix}.fuelType", required=True)
            c.number(fuel.consumption, f"{prefix}.consumption", required=True, minimum=0)
            c.text(fuel.unit, f"{prefix}.unit", required=True)

            c.number(fuel.co2_emission_factor, f"{prefix}.co2EmissionFactor", minimum=0)
            c.number(fuel.ch4_emission_factor, f"{prefix}.ch4EmissionFactor", minimum=0)
            c.number(fuel.n2o_emission_factor, f"{prefix}.n2oEmissionFactor", minimum=0)
            c.number(fuel.other_gwp_emission_factor, f"{prefix}.otherGwpEmissionFactor", minimum=0)
            c.number(fuel.biomass_share, f"{prefix}.biomassShare", minimum=0, maximum=100)
            c.number(fuel.renewable_share, f"{prefix}.renewableShare", minimum=0, maximum=100)

            factors = (
                fuel.co2_emission_factor,
                fuel.ch4_emission_factor,
                fuel.n2o_emission_factor,
                fuel.other_gwp_emission_factor,
            )
            if not any(safe_float(f) for f in factors):
                c.warning(prefix, "No emission factors provided for any greenhouse gas")

            unit = safe_text(fuel.unit)
            if unit:
                units.add(unit.lower())
            consumption_mwh = to_mwh(fuel.consumption, unit) if unit.lower() in ("mwh", "kwh", "gj") else 0.0
            if consumption_mwh > self.config.large_consumption_threshold_mwh:
                c.warning(
                    f"{prefix}.consumption",
                    f"Large consumption value (>{self.config.large_consumption_threshold_mwh:,.0f} MWh) - please verify",
                )

            fuel_type = safe_text(fuel.fuel_type)
            if fuel_type and lookup_default(FUEL_EMISSION_FACTORS, fuel_type) is None:
                c.warning(f"{prefix}.fuelType", f"Fuel type '{fuel_type}' not in standard list")

        if len(units) > self.config.max_energy_units:
            c.warning(
                "energyFuelData",
                f"{len(units)} different energy units in use; consider harmonising units",
            )

    # ------------------------------------------------------------------
    # Processes
    # ------------------------------------------------------------------

    def _check_processes(self, processes: List[ProcessRecord], c: _IssueCollector) -> None:
        if not processes:
            c.warning("processProductionData", "No process or production data provided")
            return

        seen_names: Dict[str, int] = {}
        for index, process in enumerate(processes):
            prefix = f"processProductionData[{index}]"
            c.text(process.process_name, f"{prefix}.processName", required=True)
            c.text(process.process_type, f"{prefix}.processType", required=True)
            c.text(process.unit, f"{prefix}.unit", required=True)
            c.number(process.production_amount, f"{prefix}.productionAmount", minimum=0)
            c.number(process.production_quantity, f"{prefix}.productionQuantity", minimum=0)
            c.number(process.process_emission_factor, f"{prefix}.processEmissionFactor", minimum=0)
            c.number(process.ch4_emission_factor, f"{prefix}.ch4EmissionFactor", minimum=0)
            c.number(process.n2o_emission_factor, f"{prefix}.n2oEmissionFactor", minimum=0)
            c.number(process.other_gwp_emission_factor, f"{prefix}.otherGwpEmissionFactor", minimum=0)

            name = safe_text(process.process_name).lower()
            if name:
                if name in seen_names:
                    c.error(
                        f"{prefix}.processName",
                        f"Duplicate process name (also used by process {seen_names[name] + 1})",
                    )
                else:
                    seen_names[name] = index

            if not safe_float(process.production_amount) and not safe_float(process.production_quantity):
                c.error(prefix, "Either production amount or quantity must be provided")

            if not process.inputs and not process.outputs:
                c.warning(prefix, "Process has no input materials or output products")
            elif not process.inputs:
                c.warning(f"{prefix}.inputs", "No input materials specified")

            self._check_market_split(process, prefix, c)
            self._check_plausibility(process, prefix, c)
            self._check_inputs(process.inputs, prefix, c)
            self._check_elements(process, prefix, c)

            process_type = safe_text(process.process_type)
            if process_type and process_type.lower() not in {t.lower() for t in STANDARD_PROCESS_TYPES}:
                c.warning(f"{prefix}.processType", f"Process type '{process_type}' not in standard list")

    def _check_market_split(self, process: ProcessRecord, prefix: str, c: _IssueCollector) -> None:
        c.number(process.produced_for_market, f"{prefix}.producedForMarket", minimum=0)
        c.number(process.market_share_percent, f"{prefix}.marketSharePercent", minimum=0, maximum=100)
        market = parse_number(process.produced_for_market)
        production = parse_number(process.production_amount)
        if production is None:
            production = parse_number(process.production_quantity)
        if market is not None and production is not None and market > production:
            c.error(f"{prefix}.producedForMarket", "Produced for market exceeds total production")

    def _check_plausibility(self, process: ProcessRecord, prefix: str, c: _IssueCollector) -> None:
        factor = parse_number(process.process_emission_factor)
        if factor is None or factor < 0:
            return
        field = f"{prefix}.processEmissionFactor"
        bounds = get_process_factor_range(safe_text(process.process_type))
        if bounds is not None:
            low, high = bounds
            if factor < low or factor > high:
                c.warning(
                    field,
                    f"Emission factor {factor:g} outside typical range {low:g}-{high:g} tCO2/t "
                    f"for {safe_text(process.process_type)}",
                )
        elif factor > self.config.general_process_factor_ceiling:
            c.warning(
                field,
                f"Emission factor {factor:g} tCO2/t is unusually high "
                f"(>{self.config.general_process_factor_ceiling:g})",
            )

    def _check_inputs(self, inputs: List[ProcessInput], prefix: str, c: _IssueCollector) -> None:
        seen_materials: Set[str] = set()
        for index, material in enumerate(inputs):
            field = f"{prefix}.inputs[{index}]"
            c.text(material.material_name, f"{field}.materialName", required=True, min_length=1)
            c.text(material.unit, f"{field}.unit", required=True)
            c.number(material.amount, f"{field}.amount", minimum=0)
            c.number(material.quantity, f"{field}.quantity", minimum=0)
            c.number(material.embedded_emissions, f"{field}.embeddedEmissions", minimum=0)
            c.number(material.transport_distance, f"{field}.transportDistance", minimum=0)

            if not safe_float(material.amount) and not safe_float(material.quantity):
                c.error(field, "Either amount or quantity must be provided")

            name = safe_text(material.material_name).lower()
            if name:
                if name in seen_materials:
                    c.warning(f"{field}.materialName", "Duplicate material name within process")
                seen_materials.add(name)

            if material.is_imported:
                if is_blank(material.country_of_origin) and is_blank(material.origin_country):
                    c.warning(field, "Imported material but no country of origin specified")
                if safe_float(material.transport_distance) and is_blank(material.transport_mode):
                    c.warning(field, "Transport distance provided but no transport mode specified")

            if not safe_float(material.embedded_emissions):
                c.info(field, "No embedded emissions provided; default factor applies")

    def _check_elements(self, process: ProcessRecord, prefix: str, c: _IssueCollector) -> None:
        elements = process.applicable_elements
        if elements.indirect_emissions:
            c.number(process.electricity_consumption, f"{prefix}.electricityConsumption", required=True, minimum=0)
            c.text(process.electricity_unit, f"{prefix}.electricityUnit", required=True)
            c.number(
                process.electricity_emission_factor, f"{prefix}.electricityEmissionFactor",
                required=True, minimum=0,
            )
            c.text(process.electricity_emission_factor_unit, f"{prefix}.electricityEmissionFactorUnit", required=True)
            c.number(process.electricity_exported_amount, f"{prefix}.electricityExportedAmount", minimum=0)
            if safe_float(process.electricity_exported_amount) > 0:
                c.text(process.electricity_exported_unit, f"{prefix}.electricityExportedUnit", required=True)
            if has_number(process.electricity_exported_emission_factor):
                c.number(
                    process.electricity_exported_emission_factor,
                    f"{prefix}.electricityExportedEmissionFactor", minimum=0,
                )
                c.text(
                    process.electricity_exported_emission_factor_unit,
                    f"{prefix}.electricityExportedEmissionFactorUnit", required=True,
                )

        if elements.measurable_heat:
            heat = process.measurable_heat_data
            field = f"{prefix}.measurableHeatData"
            c.number(heat.quantity, f"{field}.quantity", required=True, minimum=0)
            c.text(heat.unit, f"{field}.unit", required=True)
            c.number(heat.emission_factor, f"{field}.emissionFactor", minimum=0)
            c.number(heat.share_to_cbam_goods, f"{field}.shareToCBAMGoods", minimum=0, maximum=100)
            c.number(heat.imported, f"{field}.imported", minimum=0)
            c.number(heat.exported, f"{field}.exported", minimum=0)

        if elements.waste_gases:
            gases = process.waste_gases_data
            field = f"{prefix}.wasteGasesData"
            c.number(gases.quantity, f"{field}.quantity", required=True, minimum=0)
            c.text(gases.unit, f"{field}.unit", required=True)
            c.number(gases.emission_factor, f"{field}.emissionFactor", minimum=0)
            c.number(gases.reused_share, f"{field}.reusedShare", minimum=0, maximum=100)
            c.number(gases.imported, f"{field}.imported", minimum=0)
            c.number(gases.exported, f"{field}.exported", minimum=0)

    # ------------------------------------------------------------------
    # Installation sources and precursors
    # ------------------------------------------------------------------

    def _check_installation_sources(self, snapshot: CBAMDataSnapshot, c: _IssueCollector) -> None:
        data = snapshot.emission_installation_data
        c.number(data.total_indirect_co2_emissions, "emissionInstallationData.totalIndirectCO2Emissions", minimum=0)
        for index, source in enumerate(data.emissions):
            field = f"emissionInstallationData.emissions[{index}]"
            c.number(source.activity_level, f"{field}.activityLevel", minimum=0)
            c.number(source.emission_factor, f"{field}.emissionFactor", minimum=0)
            c.number(source.co2_emissions, f"{field}.co2Emissions", minimum=0)
            c.number(source.biomass_fraction, f"{field}.biomassFraction", minimum=0, maximum=100)
            c.number(source.oxidation_factor, f"{field}.oxidationFactor", minimum=0)
            c.number(source.ch4_emissions, f"{field}.ch4Emissions", minimum=0)
            c.number(source.n2o_emissions, f"{field}.n2oEmissions", minimum=0)

    def _check_precursors(self, snapshot: CBAMDataSnapshot, c: _IssueCollector) -> None:
        for index, precursor in enumerate(snapshot.purchased_precursors.precursors):
            field = f"purchasedPrecursors.precursors[{index}]"
            c.text(precursor.name, f"{field}.name", required=True)
            c.number(precursor.total_amount_consumed, f"{field}.totalAmountConsumed", required=True, minimum=0)
            c.number(
                precursor.specific_direct_embedded_emissions,
                f"{field}.specificDirectEmbeddedEmissions", minimum=0,
            )
            c.number(precursor.electricity_consumption, f"{field}.electricityConsumption", minimum=0)
            c.number(precursor.electricity_emission_factor, f"{field}.electricityEmissionFactor", minimum=0)

            if (
                has_number(precursor.specific_direct_embedded_emissions)
                and safe_float(precursor.specific_direct_embedded_emissions) == 0
                and is_blank(precursor.default_justification)
            ):
                c.warning(field, "Zero direct embedded emissions without a justification")
            if precursor.uses_default_values and is_blank(precursor.default_justification):
                c.warning(f"{field}.defaultJustification", "Default values used without a justification")


# =============================================================================
# Results validation
# =============================================================================


class ResultsValidator:
    """Sanity checks on a results snapshot."""

    _NON_NEGATIVE = (
        ("total_direct_co2_emissions", "Direct emissions"),
        ("total_process_emissions", "Process emissions"),
        ("installation_emissions", "Installation source emissions"),
        ("total_emissions", "Total emissions"),
        ("embedded_emissions", "Embedded emissions"),
        ("purchased_precursors_embedded_emissions", "Precursor embedded emissions"),
        ("total_embedded_emissions", "Total embedded emissions"),
        ("transport_emissions", "Transport emissions"),
        ("cumulative_emissions", "Cumulative emissions"),
        ("biogenic_co2_emissions", "Biogenic CO2 emissions"),
        ("total_energy", "Total energy"),
        ("specific_emissions", "Specific emissions"),
        ("emission_intensity", "Emission intensity"),
        ("cbam_reportable_emissions", "CBAM reportable emissions"),
        ("cbam_reportable_emission_intensity", "CBAM reportable emission intensity"),
    )

    _SHARES = (
        ("renewable_share", "Renewable share"),
        ("imported_raw_material_share", "Imported raw material share"),
    )

    def __init__(self, config: Optional[CBAMEngineConfig] = None) -> None:
        self.config = config or get_config()

    @staticmethod
    def _coerce(results: Any, c: _IssueCollector) -> Optional[ResultsSnapshot]:
        """Read ``results`` as a snapshot; malformed fields become errors."""
        if isinstance(results, ResultsSnapshot):
            return results
        if not isinstance(results, Mapping):
            c.error("results", "Expected a results snapshot")
            return None
        try:
            return ResultsSnapshot.model_validate(dict(results))
        except ValidationError as exc:
            for error in exc.errors():
                field = ".".join(str(part) for part in error["loc"]) or "results"
                c.error(field, error["msg"])
            return None

    @staticmethod
    def _check_share(c: _IssueCollector, value: float, field: str, label: str) -> None:
        c.total_fields += 1
        if value < 0 or value > 1:
            c.error(field, f"{label} must be between 0 and 1")
        else:
            c.valid_fields += 1

    def validate(self, results: Union[ResultsSnapshot, Dict[str, Any]]) -> ValidationReport:
        """Check non-negativity, ordering and share ranges of ``results``."""
        c = _IssueCollector()
        snapshot = self._coerce(results, c)
        if snapshot is not None:
            self._check_results(snapshot, c)
        report = c.report()
        record_validation("results", report.is_valid, len(report.errors), len(report.warnings))
        return report

    def _check_results(self, results: ResultsSnapshot, c: _IssueCollector) -> None:
        tolerance = self.config.consistency_tolerance

        for attr, label in self._NON_NEGATIVE:
            c.total_fields += 1
            if getattr(results, attr) < 0:
                c.error(attr, f"{label} cannot be negative")
            else:
                c.valid_fields += 1

        if results.total_direct_co2_emissions + results.total_process_emissions > results.total_emissions + tolerance:
            c.warning("total_emissions", "Total emissions should be at least direct + process emissions")
        if results.total_emissions > results.cumulative_emissions + tolerance:
            c.warning("cumulative_emissions", "Cumulative emissions should be at least total emissions")
        if results.total_embedded_emissions > results.cumulative_emissions + tolerance:
            c.warning("cumulative_emissions", "Cumulative emissions should be at least embedded emissions")

        for attr, label in self._SHARES:
            self._check_share(c, getattr(results, attr), attr, label)
        by_country = results.imported_raw_material_share_by_country.by_country
        for country, entry in by_country.items():
            self._check_share(
                c, entry.share, f"imported_raw_material_share_by_country.{country}.share",
                f"Imported share of {country}",
            )
        by_material = results.imported_raw_material_share_by_material.by_material
        for material, entry in by_material.items():
            self._check_share(
                c, entry.share, f"imported_raw_material_share_by_material.{material}.share",
                f"Imported share of {material}",
            )


# =============================================================================
# Functional API
# =============================================================================


def validate_cbam_data(
    data: Union[CBAMDataSnapshot, Dict[str, Any], None],
    config: Optional[CBAMEngineConfig] = None,
) -> ValidationReport:
    """Validate a data snapshot. See :class:`CBAMDataValidator`."""
    return CBAMDataValidator(config).validate(data)


def validate_calculation_results(
    results: Union[ResultsSnapshot, Dict[str, Any]],
    config: Optional[CBAMEngineConfig] = None,
) -> ValidationReport:
    """Validate a results snapshot. See :class:`ResultsValidator`."""
    return ResultsValidator(config).validate(results)


__all__ = [
    "CBAMDataValidator",
    "ResultsValidator",
    "validate_cbam_data",
    "validate_calculation_results",
]
