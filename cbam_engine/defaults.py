# -*- coding: utf-8 -*-
"""
cbam_engine/defaults.py

Built-in CBAM default emission factors and constants.

Tables:
- Fuel combustion factors (tCO2 per unit of energy consumed)
- Process emission factors (tCO2 per tonne of product)
- Embedded emission factors (tCO2 per tonne of material)
- Transport factors (tCO2 per tonne-km, by mode)
- Plausibility ranges for process emission factors, by process type

All tables are read-only mappings built at import time and are safe to
share across threads. Names are matched exactly first, then
case-insensitively (see ``lookup_default``).

Sources:
- EU CBAM Implementing Regulation 2023/1773 default values (simplified)
- IPCC 2006 Guidelines, AR5 100-year GWP values

Author: GreenLang Framework Team
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

# ==================== CONSTANTS ====================

DEFAULT_ELECTRICITY_EMISSION_FACTOR = 0.475  # tCO2/MWh grid average
BIOMASS_CO2_FACTOR = 1.83  # biogenic CO2 multiplier
DEFAULT_PROCESS_EMISSION_FACTOR = 0.1  # process category fallback
DEFAULT_EMBEDDED_EMISSION_FACTOR = 0.5  # embedded category fallback
DEFAULT_FUEL_EMISSION_FACTOR = 0.0  # fuel category fallback

GWP_CH4 = 28.0  # AR5, 100-year
GWP_N2O = 265.0  # AR5, 100-year

CARBON_TO_CO2 = 3.667  # 44/12
DEFAULT_OXIDATION_FACTOR = 1.0

MWH_TO_GJ = 3.6
GJ_TO_MWH = 0.2777777778

# ==================== UNCERTAINTY ====================
# Percent added to the per-process uncertainty estimate

BASE_UNCERTAINTY_PERCENT = 5.0
DEFAULT_DATA_UNCERTAINTY_PERCENT = 10.0  # direct emissions from default values
DEFAULT_ELECTRICITY_FACTOR_UNCERTAINTY_PERCENT = 5.0
OTHER_METHOD_UNCERTAINTY_PERCENT = 3.0  # "Other (please specify)" method
MAX_UNCERTAINTY_PERCENT = 50.0

# ==================== FUELS ====================
# tCO2 per unit of energy, preview values shown by the form

_FUEL_EMISSION_FACTORS: Dict[str, float] = {
    "Natural Gas": 0.202,
    "Coal": 0.34,
    "Oil": 0.267,
    "LPG": 0.229,
    "Diesel": 0.267,
    "Petrol": 0.267,
    "Biomass": 0.0,  # biogenic, reported separately
    "Electricity": 0.475,
    "Heat": 0.25,
    "Other": 0.3,
    "Coke": 0.35,
    "Coke Oven Gas": 0.4,
    "Blast Furnace Gas": 0.28,
    "Propane": 0.24,
    "Butane": 0.24,
    "Naphtha": 0.27,
    "Fuel Oil": 0.28,
    "Peat": 0.32,
    "Waste Gas": 0.4,
    "Hydrogen": 0.0,
    "Steam": 0.0,
    "Geothermal": 0.0,
    "Solar": 0.0,
    "Wind": 0.0,
    "Hydro": 0.0,
    "Nuclear": 0.0,
}

# ==================== PROCESSES ====================
# tCO2 per tonne of product

_PROCESS_EMISSION_FACTORS: Dict[str, float] = {
    "Iron and Steel Production": 1.9,
    "Aluminium Production": 1.7,
    "Cement Production": 0.66,
    "Fertilizer Production": 2.0,
    "Electricity Production": 0.475,
    "Hydrogen Production": 0.0,
    "Organic Chemicals": 1.3,
    "Plastics": 2.0,
    "Other": 0.5,
    "Ammonia": 1.8,
    "Nitric Acid": 0.5,
    "Urea": 1.2,
    "Mixed Fertilisers": 1.5,
    "Aluminium Products": 1.7,
    "Unwrought Aluminium": 1.7,
    "Electricity Export": 0.475,
    "Glass": 0.3,
    "Paper": 0.5,
    "Refining": 0.7,
    "Chemicals": 1.0,
    "Steel Primary": 2.0,  # BF-BOF route
    "Steel Secondary": 0.4,  # EAF route
    "Cement Clinker": 0.8,
    "Lime": 0.7,
    "Gypsum": 0.1,
    "Dolomite": 0.5,
}

# ==================== EMBEDDED ====================
# tCO2 per tonne of input material

_EMBEDDED_EMISSION_FACTORS: Dict[str, float] = {
    # Raw materials
    "Iron Ore": 0.03,
    "Coal": 0.09,
    "Limestone": 0.05,
    "Bauxite": 0.3,
    "Alumina": 1.6,
    "Scrap Metal": 0.3,
    "Natural Gas": 0.056,
    "Crude Oil": 0.12,
    "Other": 0.5,
    # Iron and steel intermediates
    "Coke": 0.35,
    "Sinter": 0.2,
    "Pellets": 0.15,
    "Direct Reduced Iron": 0.4,
    "Hot Metal": 0.35,
    "Steel Slabs": 0.4,
    "Steel Coils": 0.4,
    "Steel Beams": 0.4,
    # Aluminium
    "Aluminium Ingots": 1.7,
    "Aluminium Billets": 1.7,
    "Aluminium Slabs": 1.7,
    "Aluminium Sheets": 1.7,
    # Minerals
    "Clinker": 0.8,
    "Cement": 0.66,
    "Lime": 0.7,
    "Gypsum": 0.1,
    # Fertilisers and chemicals
    "Ammonia": 1.8,
    "Nitric Acid": 0.5,
    "Urea": 1.2,
    "Mixed Fertilisers": 1.5,
    "Glass": 0.3,
    "Paper": 0.5,
    "Chemicals": 1.0,
    "Plastics": 2.0,
    # Energy carriers
    "Electricity": 0.475,
    "Heat": 0.25,
    "Steam": 0.0,
    "Hydrogen": 0.0,
}

# ==================== TRANSPORT ====================
# tCO2 per tonne-km

_TRANSPORT_EMISSION_FACTORS: Dict[str, float] = {
    "road": 0.089,
    "rail": 0.041,
    "sea": 0.015,
    "air": 0.602,
}
DEFAULT_TRANSPORT_EMISSION_FACTOR = 0.1

# ==================== PLAUSIBILITY ====================
# (min, max) tCO2/t accepted without a warning, by process type

_PROCESS_FACTOR_RANGES: Dict[str, Tuple[float, float]] = {
    "Calcination": (0.3, 1.2),
    "Reduction": (1.0, 5.0),
    "Smelting": (0.5, 3.0),
    "Refining": (0.2, 2.0),
    "Chemical Reaction": (0.1, 5.0),
    "Physical Transformation": (0.05, 1.0),
}

# Process types the form offers out of the box.
STANDARD_PROCESS_TYPES: Tuple[str, ...] = (
    "Iron and Steel Production", "Aluminium Production", "Cement Production",
    "Fertilizer Production", "Electricity Production", "Hydrogen Production",
    "Organic Chemicals", "Plastics", "Other",
) + tuple(_PROCESS_FACTOR_RANGES)

FUEL_EMISSION_FACTORS: Mapping[str, float] = MappingProxyType(_FUEL_EMISSION_FACTORS)
PROCESS_EMISSION_FACTORS: Mapping[str, float] = MappingProxyType(_PROCESS_EMISSION_FACTORS)
EMBEDDED_EMISSION_FACTORS: Mapping[str, float] = MappingProxyType(_EMBEDDED_EMISSION_FACTORS)
TRANSPORT_EMISSION_FACTORS: Mapping[str, float] = MappingProxyType(_TRANSPORT_EMISSION_FACTORS)
PROCESS_FACTOR_RANGES: Mapping[str, Tuple[float, float]] = MappingProxyType(_PROCESS_FACTOR_RANGES)


def lookup_default(table: Mapping[str, float], name: str) -> Optional[float]:
    """Look up ``name`` in ``table``, exact match first, then case-insensitive.

    Returns:
        The tabulated factor, or None when the name is unknown.
    """
    if not name:
        return None
    if name in table:
        return table[name]
    key = name.strip().lower()
    for candidate, value in table.items():
        if candidate.lower() == key:
            return value
    return None


def get_default_fuel_emission_factor(fuel_type: str) -> float:
    """Default CO2 factor for a fuel type; unknown fuels use the "Other" row."""
    value = lookup_default(FUEL_EMISSION_FACTORS, fuel_type)
    return FUEL_EMISSION_FACTORS["Other"] if value is None else value


def get_default_process_emission_factor(process_type: str) -> float:
    """Default factor for a process type; unknown processes use the "Other" row."""
    value = lookup_default(PROCESS_EMISSION_FACTORS, process_type)
    return PROCESS_EMISSION_FACTORS["Other"] if value is None else value


def get_default_embedded_emission_factor(material_name: str) -> float:
    """Default embedded factor for a material; unknown materials use 0.5."""
    value = lookup_default(EMBEDDED_EMISSION_FACTORS, material_name)
    return DEFAULT_EMBEDDED_EMISSION_FACTOR if value is None else value


def get_transport_emission_factor(mode: str) -> float:
    """Factor per tonne-km for a transport mode, 0.1 for unknown modes."""
    value = lookup_default(TRANSPORT_EMISSION_FACTORS, mode)
    return DEFAULT_TRANSPORT_EMISSION_FACTOR if value is None else value


def get_process_factor_range(process_type: str) -> Optional[Tuple[float, float]]:
    """Plausible (min, max) process factor for ``process_type``, if known."""
    if not process_type:
        return None
    key = process_type.strip().lower()
    for candidate, bounds in PROCESS_FACTOR_RANGES.items():
        if candidate.lower() == key:
            return bounds
    return None
