# -*- coding: utf-8 -*-
"""
Transport Calculator - emissions of shipping imported inputs

Only inputs flagged ``is_imported`` that carry both a transport distance
and a transport mode contribute. An explicit ``transport_emissions`` value
wins; otherwise distance (km) x mode factor (tCO2/t-km) x quantity (t).

Mode factors: "Transport" overrides first, then road 0.089, rail 0.041,
sea 0.015, air 0.602, and 0.1 for any other mode.
"""

from typing import Any, Iterable, Optional

from cbam_engine.calculation.shares import input_quantity, iter_inputs
from cbam_engine.coercion import safe_float, safe_text
from cbam_engine.defaults import DEFAULT_TRANSPORT_EMISSION_FACTOR, TRANSPORT_EMISSION_FACTORS
from cbam_engine.models import FactorCategory, ProcessInput
from cbam_engine.resolution import resolve_factor


def transport_emissions_of(
    material: ProcessInput,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Transport emissions of one input, 0 when it does not qualify."""
    distance = safe_float(material.transport_distance)
    mode = safe_text(material.transport_mode)
    if not material.is_imported or not distance or not mode:
        return 0.0
    explicit = safe_float(material.transport_emissions)
    if explicit:
        return explicit
    factor = resolve_factor(
        FactorCategory.TRANSPORT.value,
        mode,
        overrides=emission_factors,
        defaults_table=TRANSPORT_EMISSION_FACTORS,
        fallback=DEFAULT_TRANSPORT_EMISSION_FACTOR,
    )
    return distance * factor * input_quantity(material)


def calculate_transport_emissions(
    process_production_data: Any,
    emission_factors: Optional[Iterable[Any]] = None,
) -> float:
    """Transport emissions of all qualifying imported inputs (tCO2e)."""
    overrides = list(emission_factors or [])
    return sum(
        transport_emissions_of(material, overrides)
        for material in iter_inputs(process_production_data)
    )


__all__ = [
    "transport_emissions_of",
    "calculate_transport_emissions",
]
