# -*- coding: utf-8 -*-
"""
Process Calculator - process emissions and per-process attribution

Handles emissions from production processes:
1. Process emissions (production x resolved process factor)
2. Process emissions by gas
3. Indirect emissions from electricity consumed by a process
4. Per-process attribution: measurable heat, waste gases, electricity
   export credit, specific embedded emissions and an uncertainty estimate

Production is read from ``production_amount``, then ``production_quantity``,
then 0. Process factors resolve through the "Process" chain with the 0.1
category fallback.
"""

from typing import Any, Iterable, List, Optional

from cbam_engine.calculation.gas_breakdown import sum_by_gas
from cbam_engine.coercion import parse_number, percent_to_fraction, safe_float, safe_ratio, safe_text
from cbam_engine.defaults import (
    BASE_UNCERTAINTY_PERCENT,
    DEFAULT_DATA_UNCERTAINTY_PERCENT,
    DEFAULT_ELECTRICITY_FACTOR_UNCERTAINTY_PERCENT,
    DEFAULT_PROCESS_EMISSION_FACTOR,
    MAX_UNCERTAINTY_PERCENT,
    OTHER_METHOD_UNCERTAINTY_PERCENT,
    PROCESS_EMISSION_FACTORS,
)
from cbam_engine.models import (
    EmissionsByGasType,
    FactorCategory,
    GasType,
    MeasurableHeatData,
    ProcessAttribution,
    ProcessRecord,
    WasteGasesData,
    coerce_records,
)
from cbam_engine.resolution import resolve_factor
from cbam_engine.units import normalize_electricity_factor, to_mwh


def production_of(process: ProcessRecord) -> float:
    """Production quantity: amount, else quantity, else 0."""
    for value in (process.production_amount, process.production_quantity):
        parsed = parse_number(value)
        if parsed is not None:
            return parsed
    return 0.0


def calculate_total_production(process_production_data: Any) -> float:
    return sum(production_of(p) for p in coerce_records(process_production_data, ProcessRecord))


def resolve_process_factor(
    process: ProcessRecord,
    gas: GasType = GasType.CO2,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Resolved factor of ``process`` for ``gas``.

    CO2 uses the process emission factor, the process table and the 0.1
    fallback; the other gases only have record factors and overrides.
    """
    if gas is GasType.CO2:
        return resolve_factor(
            FactorCategory.PROCESS.value,
            process.process_type,
            explicit_value=process.process_emission_factor,
            overrides=emission_factors,
            defaults_table=PROCESS_EMISSION_FACTORS,
            fallback=DEFAULT_PROCESS_EMISSION_FACTOR,
        )
    explicit = {
        GasType.CH4: process.ch4_emission_factor,
        GasType.N2O: process.n2o_emission_factor,
        GasType.OTHER_GWP: process.other_gwp_emission_factor,
    }[gas]
    return resolve_factor(
        FactorCategory.PROCESS.value,
        process.process_type,
        gas_type=gas.value,
        explicit_value=explicit,
        overrides=emission_factors,
    )


def calculate_total_process_emissions(
    process_production_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Sum of production x resolved process factor (tCO2).

    Indirect electricity emissions are not included here.
    """
    overrides = list(emission_factors or [])
    total = 0.0
    for process in coerce_records(process_production_data, ProcessRecord):
        total += production_of(process) * resolve_process_factor(process, GasType.CO2, overrides)
    return total


def calculate_process_emissions_by_gas_type(
    process_production_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> EmissionsByGasType:
    """Process emissions split into CO2, CH4, N2O and other GWP."""
    overrides = list(emission_factors or [])
    return sum_by_gas(
        coerce_records(process_production_data, ProcessRecord),
        quantity=production_of,
        factor=lambda process, gas: resolve_process_factor(process, gas, overrides),
    )


# ---------------------------------------------------------------------------
# Electricity
# ---------------------------------------------------------------------------


def process_indirect_emissions(process: ProcessRecord) -> float:
    """Indirect emissions of one process, 0 unless the process opts in.

    Consumption is normalized to MWh and the factor to tCO2/MWh; a missing
    factor counts as 0.
    """
    if not process.applicable_elements.indirect_emissions:
        return 0.0
    consumption_mwh = to_mwh(process.electricity_consumption, process.electricity_unit)
    factor_per_mwh = normalize_electricity_factor(
        process.electricity_emission_factor, process.electricity_emission_factor_unit,
    )
    return consumption_mwh * factor_per_mwh


def calculate_process_indirect_emissions(process_production_data: Any) -> float:
    """Indirect electricity emissions summed over all opted-in processes."""
    return sum(
        process_indirect_emissions(p)
        for p in coerce_records(process_production_data, ProcessRecord)
    )


def electricity_export_credit(process: ProcessRecord) -> float:
    """Emissions credited for electricity exported by a process."""
    amount_mwh = to_mwh(process.electricity_exported_amount, process.electricity_exported_unit)
    factor_per_mwh = normalize_electricity_factor(
        process.electricity_exported_emission_factor,
        process.electricity_exported_emission_factor_unit,
    )
    return max(amount_mwh * factor_per_mwh, 0.0)


# ---------------------------------------------------------------------------
# Attribution
# ---------------------------------------------------------------------------


def measurable_heat_emissions(heat: MeasurableHeatData) -> float:
    """max(0, net + imported - exported) x factor x share to CBAM goods."""
    net_heat = safe_float(heat.quantity) + safe_float(heat.imported) - safe_float(heat.exported)
    share = percent_to_fraction(heat.share_to_cbam_goods, default=1.0)
    return max(net_heat, 0.0) * safe_float(heat.emission_factor) * share


def waste_gas_emissions(waste_gases: WasteGasesData) -> float:
    """max(0, amount + imported - exported) x (1 - reused share) x factor."""
    net_gas = (
        safe_float(waste_gases.quantity)
        + safe_float(waste_gases.imported)
        - safe_float(waste_gases.exported)
    )
    reused = percent_to_fraction(waste_gases.reused_share, default=0.0)
    return max(net_gas, 0.0) * (1.0 - reused) * safe_float(waste_gases.emission_factor)


def _is_default_values(source: Any) -> bool:
    return safe_text(source).lower() == "default values"


def process_uncertainty(process: ProcessRecord) -> float:
    """Uncertainty of a process's emissions in percent, capped at 50.

    5% base, +10 when the direct emissions come from default values, +5 for
    a default electricity factor, +3 for an "Other" calculation method.
    """
    uncertainty = BASE_UNCERTAINTY_PERCENT
    if _is_default_values(process.emissions_data_source):
        uncertainty += DEFAULT_DATA_UNCERTAINTY_PERCENT
    if _is_default_values(process.electricity_emission_factor_source):
        uncertainty += DEFAULT_ELECTRICITY_FACTOR_UNCERTAINTY_PERCENT
    if safe_text(process.calculation_method).lower().startswith("other"):
        uncertainty += OTHER_METHOD_UNCERTAINTY_PERCENT
    return min(uncertainty, MAX_UNCERTAINTY_PERCENT)


def confidence_interval(emissions: float, uncertainty_percent: float) -> List[float]:
    """``[lower, upper]`` around ``emissions``; lower never exceeds upper."""
    margin = abs(emissions) * uncertainty_percent / 100.0
    return [emissions - margin, emissions + margin]


def calculate_process_attributions(
    process_production_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> List[ProcessAttribution]:
    """Attribute emissions to each process for reporting.

    Heat and waste gas terms only apply when the matching applicable
    element is set. The attribution is a reporting view; it does not feed
    the installation totals.
    """
    overrides = list(emission_factors or [])
    attributions = []
    for process in coerce_records(process_production_data, ProcessRecord):
        elements = process.applicable_elements
        production = production_of(process)
        direct = production * resolve_process_factor(process, GasType.CO2, overrides)
        heat = measurable_heat_emissions(process.measurable_heat_data) if elements.measurable_heat else 0.0
        waste = waste_gas_emissions(process.waste_gases_data) if elements.waste_gases else 0.0
        indirect = process_indirect_emissions(process)
        credit = electricity_export_credit(process)
        net = direct + heat + waste + indirect - credit
        uncertainty = process_uncertainty(process)
        attributions.append(
            ProcessAttribution(
                process_id=safe_text(process.id),
                process_name=safe_text(process.process_name) or safe_text(process.process_type),
                production=production,
                direct_emissions=direct,
                measurable_heat_emissions=heat,
                waste_gas_emissions=waste,
                indirect_emissions=indirect,
                electricity_export_credit=credit,
                net_attributed_emissions=net,
                specific_embedded_emissions=safe_ratio(net, production),
                uncertainty_percentage=uncertainty,
                confidence_interval=confidence_interval(net, uncertainty),
            )
        )
    return attributions


__all__ = [
    "production_of",
    "calculate_total_production",
    "resolve_process_factor",
    "calculate_total_process_emissions",
    "calculate_process_emissions_by_gas_type",
    "process_indirect_emissions",
    "calculate_process_indirect_emissions",
    "electricity_export_credit",
    "measurable_heat_emissions",
    "waste_gas_emissions",
    "process_uncertainty",
    "confidence_interval",
    "calculate_process_attributions",
]
