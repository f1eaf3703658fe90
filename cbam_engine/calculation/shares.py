# -*- coding: utf-8 -*-
"""
Share calculators: energy, renewable share and imported raw materials.

An input counts as imported when ANY of these holds:
- it is flagged ``is_imported``
- it has a non-empty ``origin_country``
- it has a non-empty ``country_of_origin``

Country data alone is enough, even when the flag says otherwise.
"""

from typing import Any, Dict, Iterator, Tuple

from cbam_engine.coercion import as_fraction, parse_number, safe_float, safe_ratio, safe_text
from cbam_engine.models import (
    CountryShare,
    EnergyFuelRecord,
    ImportedShareByCountry,
    ImportedShareByMaterial,
    MaterialShare,
    ProcessInput,
    ProcessRecord,
    coerce_records,
)

UNKNOWN_COUNTRY = "Unknown"


def is_imported_input(material: ProcessInput) -> bool:
    """Imported when flagged or when either country field is filled in."""
    return (
        material.is_imported
        or bool(safe_text(material.origin_country))
        or bool(safe_text(material.country_of_origin))
    )


def input_quantity(material: ProcessInput) -> float:
    """Input quantity: amount, else quantity, else 0."""
    for value in (material.amount, material.quantity):
        parsed = parse_number(value)
        if parsed is not None:
            return parsed
    return 0.0


def iter_inputs(process_production_data: Any) -> Iterator[ProcessInput]:
    for process in coerce_records(process_production_data, ProcessRecord):
        yield from process.inputs


# ---------------------------------------------------------------------------
# Energy
# ---------------------------------------------------------------------------


def calculate_total_energy(energy_fuel_data: Any) -> float:
    """Sum of the raw consumption of every fuel record (units are not converted)."""
    return sum(safe_float(f.consumption) for f in coerce_records(energy_fuel_data, EnergyFuelRecord))


def calculate_renewable_share(energy_fuel_data: Any) -> float:
    """Renewable fraction of total energy, 0 when there is no energy.

    Electricity counts with its renewable share, biomass counts fully.
    """
    records = coerce_records(energy_fuel_data, EnergyFuelRecord)
    total_energy = sum(safe_float(f.consumption) for f in records)
    if total_energy <= 0:
        return 0.0
    renewable = 0.0
    for fuel in records:
        fuel_type = safe_text(fuel.fuel_type).lower()
        if fuel_type == "electricity":
            renewable += safe_float(fuel.consumption) * as_fraction(fuel.renewable_share)
        elif fuel_type == "biomass":
            renewable += safe_float(fuel.consumption)
    return safe_ratio(renewable, total_energy)


# ---------------------------------------------------------------------------
# Imported raw materials
# ---------------------------------------------------------------------------


def _imported_and_total(process_production_data: Any) -> Tuple[float, float]:
    imported = total = 0.0
    for material in iter_inputs(process_production_data):
        amount = input_quantity(material)
        total += amount
        if is_imported_input(material):
            imported += amount
    return imported, total


def calculate_imported_raw_material_share(process_production_data: Any) -> float:
    """Imported input quantity / total input quantity, 0 without inputs."""
    imported, total = _imported_and_total(process_production_data)
    return safe_ratio(imported, total)


def calculate_imported_raw_material_share_by_country(process_production_data: Any) -> ImportedShareByCountry:
    """Imported quantity per country, each share taken against all inputs.

    The country key is ``country_of_origin``, else ``origin_country``,
    else "Unknown".
    """
    inputs = list(iter_inputs(process_production_data))
    total_inputs = sum(input_quantity(m) for m in inputs)
    if total_inputs <= 0:
        return ImportedShareByCountry()

    amounts: Dict[str, float] = {}
    imported_total = 0.0
    for material in inputs:
        if not is_imported_input(material):
            continue
        country = (
            safe_text(material.country_of_origin)
            or safe_text(material.origin_country)
            or UNKNOWN_COUNTRY
        )
        amount = input_quantity(material)
        imported_total += amount
        amounts[country] = amounts.get(country, 0.0) + amount

    return ImportedShareByCountry(
        total=imported_total,
        by_country={
            country: CountryShare(amount=amount, share=amount / total_inputs)
            for country, amount in amounts.items()
        },
    )


def calculate_imported_raw_material_share_by_material(process_production_data: Any) -> ImportedShareByMaterial:
    """Per material: imported quantity, total quantity and imported share."""
    imported: Dict[str, float] = {}
    totals: Dict[str, float] = {}
    grand_total = 0.0
    for material in iter_inputs(process_production_data):
        name = safe_text(material.material_name)
        amount = input_quantity(material)
        totals[name] = totals.get(name, 0.0) + amount
        imported.setdefault(name, 0.0)
        grand_total += amount
        if is_imported_input(material):
            imported[name] += amount

    return ImportedShareByMaterial(
        total=grand_total,
        by_material={
            name: MaterialShare(
                imported=imported[name],
                total=totals[name],
                share=safe_ratio(imported[name], totals[name]),
            )
            for name in totals
        },
    )


__all__ = [
    "UNKNOWN_COUNTRY",
    "is_imported_input",
    "input_quantity",
    "iter_inputs",
    "calculate_total_energy",
    "calculate_renewable_share",
    "calculate_imported_raw_material_share",
    "calculate_imported_raw_material_share_by_country",
    "calculate_imported_raw_material_share_by_material",
]
