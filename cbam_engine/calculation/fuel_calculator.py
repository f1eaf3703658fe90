# -*- coding: utf-8 -*-
"""
Fuel and Energy Calculator - direct combustion emissions

Handles emissions from fuels burned at the installation:
1. Direct CO2 (consumption x resolved CO2 factor)
2. Direct emissions by gas (CO2, CH4, N2O, other GWP)
3. Biogenic CO2 from biomass and biogenic fuels
4. Fuel balance in TJ, grouped by use category

Factors resolve through the "Fuel" chain: record factor, overrides,
built-in fuel table, then 0.
"""

from typing import Any, Dict, Iterable, List, Optional

from cbam_engine.calculation.gas_breakdown import sum_by_gas
from cbam_engine.coercion import safe_float, safe_text
from cbam_engine.defaults import (
    BIOMASS_CO2_FACTOR,
    DEFAULT_FUEL_EMISSION_FACTOR,
    FUEL_EMISSION_FACTORS,
)
from cbam_engine.models import (
    EmissionsByGasType,
    EnergyFuelRecord,
    FactorCategory,
    FuelBalanceEntry,
    GasType,
    coerce_records,
)
from cbam_engine.resolution import resolve_factor
from cbam_engine.units import to_common_energy_unit

UNSPECIFIED_USE_CATEGORY = "Unspecified"


def _explicit_gas_factor(fuel: EnergyFuelRecord, gas: GasType) -> Any:
    return {
        GasType.CO2: fuel.co2_emission_factor,
        GasType.CH4: fuel.ch4_emission_factor,
        GasType.N2O: fuel.n2o_emission_factor,
        GasType.OTHER_GWP: fuel.other_gwp_emission_factor,
    }[gas]


def resolve_fuel_factor(
    fuel: EnergyFuelRecord,
    gas: GasType = GasType.CO2,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Resolved factor of ``fuel`` for ``gas``.

    Only CO2 has built-in defaults; the other gases fall back to 0.
    """
    return resolve_factor(
        FactorCategory.FUEL.value,
        fuel.fuel_type,
        gas_type=gas.value,
        explicit_value=_explicit_gas_factor(fuel, gas),
        overrides=emission_factors,
        defaults_table=FUEL_EMISSION_FACTORS if gas is GasType.CO2 else None,
        fallback=DEFAULT_FUEL_EMISSION_FACTOR,
    )


def is_biogenic_fuel(fuel: EnergyFuelRecord) -> bool:
    return fuel.is_biogenic or safe_text(fuel.fuel_type).lower() == "biomass"


def calculate_total_direct_co2_emissions(
    energy_fuel_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Sum of consumption x resolved CO2 factor over all fuel records (tCO2)."""
    overrides = list(emission_factors or [])
    total = 0.0
    for fuel in coerce_records(energy_fuel_data, EnergyFuelRecord):
        total += safe_float(fuel.consumption) * resolve_fuel_factor(fuel, GasType.CO2, overrides)
    return total


def calculate_direct_emissions_by_gas_type(
    energy_fuel_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> EmissionsByGasType:
    """Direct emissions split into CO2, CH4, N2O and other GWP."""
    overrides = list(emission_factors or [])
    return sum_by_gas(
        coerce_records(energy_fuel_data, EnergyFuelRecord),
        quantity=lambda fuel: safe_float(fuel.consumption),
        factor=lambda fuel, gas: resolve_fuel_factor(fuel, gas, overrides),
    )


def calculate_biogenic_co2_emissions(
    energy_fuel_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Biogenic CO2 of biomass or biogenic-flagged fuels.

    consumption x factor x 1.83; only overrides flagged biogenic are
    considered when resolving the factor.
    """
    overrides = list(emission_factors or [])
    total = 0.0
    for fuel in coerce_records(energy_fuel_data, EnergyFuelRecord):
        if not is_biogenic_fuel(fuel):
            continue
        factor = resolve_factor(
            FactorCategory.FUEL.value,
            fuel.fuel_type,
            explicit_value=fuel.co2_emission_factor,
            overrides=overrides,
            defaults_table=FUEL_EMISSION_FACTORS,
            fallback=DEFAULT_FUEL_EMISSION_FACTOR,
            biogenic_only=True,
        )
        total += safe_float(fuel.consumption) * factor * BIOMASS_CO2_FACTOR
    return total


def calculate_fuel_balance(energy_fuel_data: Any) -> List[FuelBalanceEntry]:
    """Energy input in TJ per use category, in order of first appearance.

    Records in units other than GJ, MWh or TJ contribute 0 TJ but are
    still counted.
    """
    energy: Dict[str, float] = {}
    counts: Dict[str, int] = {}
    for fuel in coerce_records(energy_fuel_data, EnergyFuelRecord):
        category = safe_text(fuel.use_category) or UNSPECIFIED_USE_CATEGORY
        energy[category] = energy.get(category, 0.0) + to_common_energy_unit(fuel.consumption, fuel.unit)
        counts[category] = counts.get(category, 0) + 1
    return [
        FuelBalanceEntry(use_category=category, energy_tj=value, record_count=counts[category])
        for category, value in energy.items()
    ]


__all__ = [
    "resolve_fuel_factor",
    "is_biogenic_fuel",
    "calculate_total_direct_co2_emissions",
    "calculate_direct_emissions_by_gas_type",
    "calculate_biogenic_co2_emissions",
    "calculate_fuel_balance",
]
