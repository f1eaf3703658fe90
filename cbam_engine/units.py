# -*- coding: utf-8 -*-
"""
Energy Unit Conversion

All conversions are deterministic multiplications by tabulated constants.
Unlike a strict converter, the engine never fails on an unknown unit:
partially filled forms are expected, so unknown units degrade to a
documented neutral result instead (0 TJ for the fuel balance, identity for
electricity quantities and factors).

Supports:
- Energy to TJ: GJ, MWh, TJ (fuel balance common unit)
- Electricity quantity to MWh: kWh, MWh, GJ
- Electricity emission factor to tCO2/MWh: t/kWh, t/MWh, t/GJ
"""

from typing import Any, Dict

from cbam_engine.coercion import safe_float
from cbam_engine.defaults import GJ_TO_MWH, MWH_TO_GJ


def _normalize_unit(unit: Any) -> str:
    """Lower-case a unit string and drop whitespace and the CO2 qualifier."""
    if unit is None:
        return ""
    text = str(unit).strip().lower().replace(" ", "")
    for prefix in ("tco2e/", "tco2/", "t/"):
        if text.startswith(prefix):
            return "per_" + text[len(prefix):]
    return text


class EnergyUnitConverter:
    """
    Converter for the handful of energy units used by the CBAM form.

    GUARANTEES:
    - Same input -> same output
    - Unknown units never raise
    - Unit matching is case-insensitive
    """

    # Energy to TJ (fuel balance)
    ENERGY_TO_TJ: Dict[str, float] = {
        'gj': 1.0 / 1000.0,
        'mwh': MWH_TO_GJ / 1000.0,
        'tj': 1.0,
    }

    # Electricity quantity to MWh
    ENERGY_TO_MWH: Dict[str, float] = {
        'kwh': 1.0 / 1000.0,
        'mwh': 1.0,
        'gj': GJ_TO_MWH,
    }

    # Emission factor per unit of electricity to tCO2/MWh
    FACTOR_TO_PER_MWH: Dict[str, float] = {
        'per_kwh': 1000.0,
        'per_mwh': 1.0,
        'per_gj': MWH_TO_GJ,
    }

    def to_tj(self, value: Any, unit: Any) -> float:
        """Convert an energy quantity to TJ; unknown units yield 0."""
        factor = self.ENERGY_TO_TJ.get(_normalize_unit(unit))
        if factor is None:
            return 0.0
        return safe_float(value) * factor

    def to_mwh(self, value: Any, unit: Any) -> float:
        """Convert an electricity quantity to MWh; unknown units pass through."""
        factor = self.ENERGY_TO_MWH.get(_normalize_unit(unit), 1.0)
        return safe_float(value) * factor

    def factor_to_per_mwh(self, value: Any, unit: Any) -> float:
        """Convert an electricity emission factor to tCO2/MWh."""
        factor = self.FACTOR_TO_PER_MWH.get(_normalize_unit(unit), 1.0)
        return safe_float(value) * factor

    def is_supported_energy_unit(self, unit: Any) -> bool:
        """Check whether ``unit`` takes part in the fuel balance."""
        return _normalize_unit(unit) in self.ENERGY_TO_TJ


_converter = EnergyUnitConverter()


def to_common_energy_unit(value: Any, unit: Any) -> float:
    """Convert ``value`` in ``unit`` (GJ, MWh, TJ) to TJ."""
    return _converter.to_tj(value, unit)


def to_mwh(value: Any, unit: Any) -> float:
    """Convert an electricity quantity (kWh, MWh, GJ) to MWh."""
    return _converter.to_mwh(value, unit)


def normalize_electricity_factor(value: Any, unit: Any) -> float:
    """Convert an electricity emission factor to tCO2/MWh."""
    return _converter.factor_to_per_mwh(value, unit)
