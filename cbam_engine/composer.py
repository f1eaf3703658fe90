# -*- coding: utf-8 -*-
"""
CBAM Results Composer

Single entry point that turns a data snapshot into a complete, frozen
ResultsSnapshot. Combination rules:

    total_process_emissions = process emissions + process indirect electricity
    total_emissions         = direct CO2 + total_process_emissions
                              + installation sources + manual indirect CO2
    total_embedded          = embedded (inputs) + embedded (precursors)
    cumulative_emissions    = total_emissions + total_embedded
    specific_emissions      = total_emissions / total production (0 without production)
    cbam_reportable         = cumulative x imported raw material share
    emission_intensity      = total_emissions / max(1, total production)

Every aggregate is recomputed from scratch on every call; the same snapshot
always produces an identical result, provenance hash included.

Example:
    >>> from cbam_engine.composer import calculate_cbam_emissions
    >>> results = calculate_cbam_emissions({
    ...     "energyFuelData": [
    ...         {"fuelType": "Natural gas", "consumption": 100, "unit": "GJ",
    ...          "co2EmissionFactor": 56.1},
    ...     ],
    ... })
    >>> results.total_emissions
    5610.0
"""

import logging
from typing import Any, Mapping, Optional, Union

from cbam_engine.calculation import (
    calculate_biogenic_co2_emissions,
    calculate_direct_emissions_by_gas_type,
    calculate_embedded_emissions,
    calculate_embedded_emissions_by_gas_type,
    calculate_emission_installation_data,
    calculate_fuel_balance,
    calculate_imported_material_embedded_emissions,
    calculate_imported_raw_material_share,
    calculate_imported_raw_material_share_by_country,
    calculate_imported_raw_material_share_by_material,
    calculate_process_attributions,
    calculate_process_emissions_by_gas_type,
    calculate_process_indirect_emissions,
    calculate_purchased_precursors_embedded_emissions,
    calculate_renewable_share,
    calculate_total_direct_co2_emissions,
    calculate_total_energy,
    calculate_total_process_emissions,
    calculate_total_production,
    calculate_transport_emissions,
)
from cbam_engine.coercion import safe_float, safe_ratio
from cbam_engine.config import CBAMEngineConfig, get_config
from cbam_engine.models import CBAMDataSnapshot, ResultsSnapshot
from cbam_engine.provenance import calculation_hash

logger = logging.getLogger(__name__)

DataInput = Union[CBAMDataSnapshot, Mapping[str, Any], None]


def calculate_cbam_emissions(
    data: DataInput,
    config: Optional[CBAMEngineConfig] = None,
) -> ResultsSnapshot:
    """Compute the full results snapshot for ``data``.

    Args:
        data: A CBAMDataSnapshot or the raw camelCase mapping from the form.
        config: Engine configuration; the process-wide config when omitted.

    Returns:
        ResultsSnapshot with every aggregate filled in.
    """
    cfg = config or get_config()
    snapshot = CBAMDataSnapshot.coerce(data)
    overrides = snapshot.emission_factors
    fuels = snapshot.energy_fuel_data
    processes = snapshot.process_production_data
    installation = snapshot.emission_installation_data

    # -- Direct --------------------------------------------------------------
    direct_co2 = calculate_total_direct_co2_emissions(fuels, overrides)
    direct_by_gas = calculate_direct_emissions_by_gas_type(fuels, overrides)
    biogenic_co2 = calculate_biogenic_co2_emissions(fuels, overrides)

    # -- Process -------------------------------------------------------------
    process_emissions = calculate_total_process_emissions(processes, overrides)
    process_indirect = calculate_process_indirect_emissions(processes)
    total_process = process_emissions + process_indirect
    process_by_gas = calculate_process_emissions_by_gas_type(processes, overrides)

    # -- Installation sources ------------------------------------------------
    installation_result = calculate_emission_installation_data(installation)
    manual_indirect = safe_float(installation.total_indirect_co2_emissions)

    total_emissions = direct_co2 + total_process + installation_result.total_emissions + manual_indirect

    # -- Embedded ------------------------------------------------------------
    embedded_inputs = calculate_embedded_emissions(processes, overrides)
    embedded_by_gas = calculate_embedded_emissions_by_gas_type(processes, overrides)
    embedded_precursors = calculate_purchased_precursors_embedded_emissions(
        snapshot.purchased_precursors, overrides,
    )
    total_embedded = embedded_inputs + embedded_precursors
    cumulative = total_emissions + total_embedded

    # -- Shares --------------------------------------------------------------
    total_production = calculate_total_production(processes)
    imported_share = calculate_imported_raw_material_share(processes)
    total_by_gas = direct_by_gas + process_by_gas + embedded_by_gas
    reportable = cumulative * imported_share
    net_co2 = total_by_gas.co2 - biogenic_co2
    # intensities divide by at least one unit of production
    intensity_base = max(1.0, total_production)

    values = dict(
        total_direct_co2_emissions=direct_co2,
        direct_emissions_by_gas_type=direct_by_gas,
        biogenic_co2_emissions=biogenic_co2,
        total_process_emissions=total_process,
        process_indirect_emissions=process_indirect,
        process_emissions_by_gas_type=process_by_gas,
        installation_emissions=installation_result.total_emissions,
        installation_emissions_by_source=installation_result.emissions_by_source,
        installation_indirect_co2_emissions=manual_indirect,
        total_emissions=total_emissions,
        total_production=total_production,
        specific_emissions=safe_ratio(total_emissions, total_production),
        total_energy=calculate_total_energy(fuels),
        renewable_share=calculate_renewable_share(fuels),
        imported_raw_material_share=imported_share,
        imported_raw_material_share_by_country=calculate_imported_raw_material_share_by_country(processes),
        imported_raw_material_share_by_material=calculate_imported_raw_material_share_by_material(processes),
        embedded_emissions=embedded_inputs,
        embedded_emissions_by_gas_type=embedded_by_gas,
        purchased_precursors_embedded_emissions=embedded_precursors,
        total_embedded_emissions=total_embedded,
        imported_material_embedded_emissions=calculate_imported_material_embedded_emissions(
            processes, overrides,
        ),
        transport_emissions=calculate_transport_emissions(processes, overrides),
        cumulative_emissions=cumulative,
        total_emissions_by_gas_type=total_by_gas,
        cbam_reportable_emissions=reportable,
        cbam_reportable_emissions_by_gas_type=total_by_gas.scaled(imported_share),
        net_co2_emissions=net_co2,
        net_co2_emissions_reportable=net_co2 * imported_share,
        emission_intensity=total_emissions / intensity_base,
        cbam_reportable_emission_intensity=reportable / intensity_base,
        fuel_balance=calculate_fuel_balance(fuels),
        process_attributions=calculate_process_attributions(processes, overrides),
    )

    results = ResultsSnapshot(**values)
    if cfg.enable_provenance:
        provenance = calculation_hash(snapshot, results.model_dump(mode="json"))
        results = results.model_copy(update={"provenance_hash": provenance})

    logger.debug(
        "CBAM emissions: total=%.4f cumulative=%.4f specific=%.4f (%d fuels, %d processes)",
        total_emissions, cumulative, results.specific_emissions, len(fuels), len(processes),
    )
    return results


__all__ = ["calculate_cbam_emissions", "DataInput"]
