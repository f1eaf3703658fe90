# -*- coding: utf-8 -*-
"""
Installation Source Calculator

Emissions of installation-level sources, per source:
1. An explicitly stored ``co2_emissions`` value wins
2. Otherwise activity level x emission factor, when the factor is > 0
3. Otherwise mass balance:
   activity x calorific value x carbon content x oxidation (default 1)
   x conversion (default 3.667), reduced by the biomass fraction
CH4 and N2O quantities are added as CO2e using GWP 28 and 265.
"""

from typing import Any

from cbam_engine.coercion import has_number, percent_to_fraction, safe_float, safe_text
from cbam_engine.defaults import CARBON_TO_CO2, DEFAULT_OXIDATION_FACTOR, GWP_CH4, GWP_N2O
from cbam_engine.models import (
    InstallationEmissionData,
    InstallationEmissionSource,
    InstallationEmissionsResult,
    SourceEmission,
    coerce_record,
)


def mass_balance_co2(source: InstallationEmissionSource) -> float:
    """CO2 from the mass balance of a source, after the biomass reduction."""
    oxidation = source.oxidation_factor if has_number(source.oxidation_factor) else DEFAULT_OXIDATION_FACTOR
    conversion = source.conversion_factor if has_number(source.conversion_factor) else CARBON_TO_CO2
    co2 = (
        safe_float(source.activity_level)
        * safe_float(source.calorific_value)
        * safe_float(source.carbon_content)
        * safe_float(oxidation)
        * safe_float(conversion)
    )
    biomass = percent_to_fraction(source.biomass_fraction)
    return co2 * (1.0 - biomass)


def source_co2(source: InstallationEmissionSource) -> float:
    """CO2 of one source: stored value, activity x factor, or mass balance."""
    if has_number(source.co2_emissions):
        return safe_float(source.co2_emissions)
    emission_factor = safe_float(source.emission_factor)
    if emission_factor > 0:
        return safe_float(source.activity_level) * emission_factor
    return mass_balance_co2(source)


def source_emissions(source: InstallationEmissionSource) -> float:
    """Total CO2e of one source including CH4 and N2O."""
    return (
        source_co2(source)
        + safe_float(source.ch4_emissions) * GWP_CH4
        + safe_float(source.n2o_emissions) * GWP_N2O
    )


def calculate_emission_installation_data(emission_installation_data: Any) -> InstallationEmissionsResult:
    """Total and per-source emissions of the installation sources (tCO2e).

    The manually entered indirect CO2 of the installation is not part of
    this total; the composer adds it separately.
    """
    data = coerce_record(emission_installation_data, InstallationEmissionData)
    by_source = [
        SourceEmission(
            source_id=safe_text(source.emission_source_id),
            source_name=safe_text(source.emission_source_name),
            emissions=source_emissions(source),
        )
        for source in data.emissions
    ]
    return InstallationEmissionsResult(
        total_emissions=sum(item.emissions for item in by_source),
        emissions_by_source=by_source,
    )


__all__ = [
    "mass_balance_co2",
    "source_co2",
    "source_emissions",
    "calculate_emission_installation_data",
]
