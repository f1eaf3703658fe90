"""
CBAM Emission Source Aggregators

Pure, deterministic aggregators over the records of a data snapshot.
None of them raise: missing or unparseable numbers count as 0 and unknown
names resolve to category fallback factors.

Components:
- fuel_calculator: Direct combustion CO2, per-gas split, biogenic CO2, fuel balance
- process_calculator: Process emissions, indirect electricity, per-process attribution
- installation_calculator: Installation-level sources (stored, factor or mass balance)
- embedded_calculator: Embedded emissions in inputs, imported inputs and precursors
- transport_calculator: Transport of imported inputs
- shares: Total energy, renewable share, imported raw material shares
- gas_breakdown: Shared per-gas summation
"""

from cbam_engine.calculation.embedded_calculator import (
    calculate_embedded_emissions,
    calculate_embedded_emissions_by_gas_type,
    calculate_imported_material_embedded_emissions,
    calculate_purchased_precursors_embedded_emissions,
)
from cbam_engine.calculation.fuel_calculator import (
    calculate_biogenic_co2_emissions,
    calculate_direct_emissions_by_gas_type,
    calculate_fuel_balance,
    calculate_total_direct_co2_emissions,
)
from cbam_engine.calculation.gas_breakdown import sum_by_gas
from cbam_engine.calculation.installation_calculator import calculate_emission_installation_data
from cbam_engine.calculation.process_calculator import (
    calculate_process_attributions,
    calculate_process_emissions_by_gas_type,
    calculate_process_indirect_emissions,
    calculate_total_process_emissions,
    calculate_total_production,
)
from cbam_engine.calculation.shares import (
    calculate_imported_raw_material_share,
    calculate_imported_raw_material_share_by_country,
    calculate_imported_raw_material_share_by_material,
    calculate_renewable_share,
    calculate_total_energy,
    is_imported_input,
)
from cbam_engine.calculation.transport_calculator import calculate_transport_emissions

__all__ = [
    # Fuel
    "calculate_total_direct_co2_emissions",
    "calculate_direct_emissions_by_gas_type",
    "calculate_biogenic_co2_emissions",
    "calculate_fuel_balance",
    # Process
    "calculate_total_process_emissions",
    "calculate_process_emissions_by_gas_type",
    "calculate_process_indirect_emissions",
    "calculate_process_attributions",
    "calculate_total_production",
    # Installation
    "calculate_emission_installation_data",
    # Embedded
    "calculate_embedded_emissions",
    "calculate_embedded_emissions_by_gas_type",
    "calculate_imported_material_embedded_emissions",
    "calculate_purchased_precursors_embedded_emissions",
    # Transport
    "calculate_transport_emissions",
    # Shares
    "calculate_total_energy",
    "calculate_renewable_share",
    "calculate_imported_raw_material_share",
    "calculate_imported_raw_material_share_by_country",
    "calculate_imported_raw_material_share_by_material",
    "is_imported_input",
    # Breakdown
    "sum_by_gas",
]
