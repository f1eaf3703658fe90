# -*- coding: utf-8 -*-
"""
Embedded Emissions Calculator

Emissions embedded in the materials an installation consumes:
1. Process inputs: an explicit non-zero ``embedded_emissions`` value is a
   total and is added as-is; otherwise quantity x resolved "Embedded" factor
2. Process inputs by gas (explicit totals count as CO2)
3. Imported inputs, total and per material
4. Purchased precursors: amount x specific factor (or resolved factor)
   plus electricity consumption x electricity factor (default 0.475 t/MWh)

Embedded factors fall back to 0.5 t/t for unknown materials.
"""

from typing import Any, Dict, Iterable, Optional

from cbam_engine.calculation.gas_breakdown import GAS_TYPES
from cbam_engine.calculation.shares import input_quantity, is_imported_input, iter_inputs
from cbam_engine.coercion import has_number, parse_number, safe_float, safe_text
from cbam_engine.defaults import (
    DEFAULT_ELECTRICITY_EMISSION_FACTOR,
    DEFAULT_EMBEDDED_EMISSION_FACTOR,
    EMBEDDED_EMISSION_FACTORS,
)
from cbam_engine.models import (
    EmissionsByGasType,
    FactorCategory,
    GasType,
    ImportedMaterialEmbedded,
    ProcessInput,
    PurchasedPrecursor,
    PurchasedPrecursorsData,
    coerce_record,
)
from cbam_engine.resolution import resolve_factor
from cbam_engine.units import normalize_electricity_factor, to_mwh


def resolve_embedded_factor(
    name: Any,
    gas: GasType = GasType.CO2,
    emission_factors: Optional[Iterable[Any]] = None,
    explicit_value: Any = None,
) -> float:
    """Resolved "Embedded" factor for a material or precursor name.

    CO2 falls back to the embedded table and then 0.5; other gases only
    come from overrides.
    """
    if gas is GasType.CO2:
        return resolve_factor(
            FactorCategory.EMBEDDED.value,
            name,
            explicit_value=explicit_value,
            overrides=emission_factors,
            defaults_table=EMBEDDED_EMISSION_FACTORS,
            fallback=DEFAULT_EMBEDDED_EMISSION_FACTOR,
        )
    return resolve_factor(
        FactorCategory.EMBEDDED.value,
        name,
        gas_type=gas.value,
        explicit_value=explicit_value,
        overrides=emission_factors,
    )


def _explicit_embedded(material: ProcessInput) -> Optional[float]:
    value = parse_number(material.embedded_emissions)
    if value is not None and value > 0:
        return value
    return None


def input_embedded_emissions(
    material: ProcessInput,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Embedded emissions of one process input (tCO2e)."""
    explicit = _explicit_embedded(material)
    if explicit is not None:
        return explicit
    return input_quantity(material) * resolve_embedded_factor(
        material.material_name, GasType.CO2, emission_factors,
    )


def calculate_embedded_emissions(
    process_production_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Embedded emissions of all process inputs (tCO2e)."""
    overrides = list(emission_factors or [])
    return sum(
        input_embedded_emissions(material, overrides)
        for material in iter_inputs(process_production_data)
    )


def calculate_embedded_emissions_by_gas_type(
    process_production_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> EmissionsByGasType:
    """Embedded emissions of process inputs split by gas."""
    overrides = list(emission_factors or [])
    sums = {gas: 0.0 for gas in GAS_TYPES}
    for material in iter_inputs(process_production_data):
        explicit = _explicit_embedded(material)
        if explicit is not None:
            sums[GasType.CO2] += explicit
            continue
        quantity = input_quantity(material)
        for gas in GAS_TYPES:
            sums[gas] += quantity * resolve_embedded_factor(material.material_name, gas, overrides)
    return EmissionsByGasType.from_parts(
        co2=sums[GasType.CO2],
        ch4=sums[GasType.CH4],
        n2o=sums[GasType.N2O],
        other_gwp=sums[GasType.OTHER_GWP],
    )


def calculate_imported_material_embedded_emissions(
    process_production_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> ImportedMaterialEmbedded:
    """Embedded emissions of imported inputs, total and per material."""
    overrides = list(emission_factors or [])
    by_material: Dict[str, float] = {}
    for material in iter_inputs(process_production_data):
        if not is_imported_input(material):
            continue
        name = safe_text(material.material_name)
        by_material[name] = by_material.get(name, 0.0) + input_embedded_emissions(material, overrides)
    return ImportedMaterialEmbedded(total=sum(by_material.values()), by_material=by_material)


# ---------------------------------------------------------------------------
# Purchased precursors
# ---------------------------------------------------------------------------


def precursor_electricity_emissions(precursor: PurchasedPrecursor) -> float:
    """Electricity term of a precursor, 0 without consumption."""
    consumption = safe_float(precursor.electricity_consumption)
    if consumption <= 0:
        return 0.0
    consumption_mwh = to_mwh(consumption, precursor.electricity_unit)
    if has_number(precursor.electricity_emission_factor):
        factor = normalize_electricity_factor(
            precursor.electricity_emission_factor,
            precursor.electricity_emission_factor_unit,
        )
    else:
        factor = DEFAULT_ELECTRICITY_EMISSION_FACTOR
    return consumption_mwh * factor


def precursor_embedded_emissions(
    precursor: PurchasedPrecursor,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Embedded emissions of one purchased precursor (tCO2e)."""
    factor = resolve_embedded_factor(
        precursor.name,
        GasType.CO2,
        emission_factors,
        explicit_value=precursor.specific_direct_embedded_emissions,
    )
    direct = safe_float(precursor.total_amount_consumed) * factor
    return direct + precursor_electricity_emissions(precursor)


def calculate_purchased_precursors_embedded_emissions(
    purchased_precursors: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Embedded emissions of all purchased precursors (tCO2e)."""
    overrides = list(emission_factors or [])
    data = coerce_record(purchased_precursors, PurchasedPrecursorsData)
    return sum(precursor_embedded_emissions(p, overrides) for p in data.precursors)


__all__ = [
    "resolve_embedded_factor",
    "input_embedded_emissions",
    "calculate_embedded_emissions",
    "calculate_embedded_emissions_by_gas_type",
    "calculate_imported_material_embedded_emissions",
    "precursor_electricity_emissions",
    "precursor_embedded_emissions",
    "calculate_purchased_precursors_embedded_emissions",
]
