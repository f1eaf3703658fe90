# -*- coding: utf-8 -*-
"""
Results Composer Tests

This test suite validates:
- Reference scenarios (fuel only, process with input, precursors)
- Combination rules between the aggregates
- Determinism: same snapshot, same results, same provenance hash
- Malformed input never raises
"""

import math

import pytest

from cbam_engine.composer import calculate_cbam_emissions
from cbam_engine.config import CBAMEngineConfig
from cbam_engine.models import CBAMDataSnapshot, ResultsSnapshot


def _floats(value, path="results"):
    if isinstance(value, float):
        yield path, value
    elif isinstance(value, dict):
        for key, item in value.items():
            yield from _floats(item, f"{path}.{key}")
    elif isinstance(value, list):
        for index, item in enumerate(value):
            yield from _floats(item, f"{path}[{index}]")


class TestScenarios:

    def test_fuel_only(self, natural_gas_data):
        results = calculate_cbam_emissions(natural_gas_data)
        assert results.total_direct_co2_emissions == pytest.approx(5610.0)
        assert results.total_emissions == pytest.approx(5610.0)
        assert results.specific_emissions == 0.0
        assert results.total_energy == pytest.approx(100.0)
        assert results.fuel_balance[0].energy_tj == pytest.approx(0.1)

    def test_process_with_input(self, steel_process_data):
        results = calculate_cbam_emissions(steel_process_data)
        assert results.total_process_emissions == pytest.approx(19.0)
        assert results.embedded_emissions == pytest.approx(0.15)
        assert results.total_production == pytest.approx(10.0)
        assert results.specific_emissions == pytest.approx(1.9)
        assert results.cumulative_emissions == pytest.approx(19.15)

    def test_installation_source(self, mass_balance_source):
        results = calculate_cbam_emissions({"emissionInstallationData": {"emissions": [mass_balance_source]}})
        assert results.installation_emissions == pytest.approx(0.14668)
        assert results.total_emissions == pytest.approx(0.14668)

    def test_precursors(self, precursor_data):
        results = calculate_cbam_emissions({"purchasedPrecursors": precursor_data})
        assert results.purchased_precursors_embedded_emissions == pytest.approx(22.375)
        assert results.total_embedded_emissions == pytest.approx(22.375)
        assert results.total_emissions == 0.0

    def test_imported_share_uses_country_data(self):
        data = {
            "processProductionData": [
                {
                    "productionAmount": 1,
                    "inputs": [
                        {"materialName": "Iron Ore", "amount": 10, "isImported": False,
                         "originCountry": "", "countryOfOrigin": "DE"},
                    ],
                }
            ]
        }
        assert calculate_cbam_emissions(data).imported_raw_material_share == pytest.approx(1.0)


class TestCombination:

    def test_complete_snapshot(self, complete_data):
        results = calculate_cbam_emissions(complete_data)

        assert results.total_direct_co2_emissions == pytest.approx(256.1)
        assert results.total_process_emissions == pytest.approx(380.0)
        assert results.installation_emissions == pytest.approx(0.14668)
        assert results.total_emissions == pytest.approx(636.24668)
        assert results.embedded_emissions == pytest.approx(17.0)
        assert results.purchased_precursors_embedded_emissions == pytest.approx(22.375)
        assert results.total_embedded_emissions == pytest.approx(39.375)
        assert results.cumulative_emissions == pytest.approx(675.62168)
        assert results.specific_emissions == pytest.approx(636.24668 / 200)
        assert results.imported_raw_material_share == pytest.approx(0.75)
        assert results.transport_emissions == pytest.approx(1000 * 0.015 * 300)
        assert results.renewable_share == pytest.approx(200 / 1500)
        assert results.cbam_reportable_emissions == pytest.approx(675.62168 * 0.75)
        assert results.total_emissions_by_gas_type.co2 == pytest.approx(256.1 + 380.0 + 17.0)
        assert results.net_co2_emissions == pytest.approx(results.total_emissions_by_gas_type.co2)
        assert results.imported_material_embedded_emissions.by_material == {"Iron Ore": pytest.approx(12.0)}
        assert results.process_attributions[0].direct_emissions == pytest.approx(380.0)

    def test_indirect_electricity_is_part_of_process_total(self):
        data = {
            "processProductionData": [
                {
                    "productionAmount": 10,
                    "processEmissionFactor": 1.0,
                    "applicableElements": {"indirectEmissions": True},
                    "electricityConsumption": 4,
                    "electricityUnit": "MWh",
                    "electricityEmissionFactor": 0.5,
                }
            ]
        }
        results = calculate_cbam_emissions(data)
        assert results.process_indirect_emissions == pytest.approx(2.0)
        assert results.total_process_emissions == pytest.approx(12.0)
        assert results.total_emissions == pytest.approx(12.0)

    def test_manual_indirect_is_added(self, mass_balance_source):
        data = {
            "emissionInstallationData": {
                "emissions": [mass_balance_source],
                "totalIndirectCO2Emissions": "10",
            }
        }
        results = calculate_cbam_emissions(data)
        assert results.installation_indirect_co2_emissions == pytest.approx(10.0)
        assert results.total_emissions == pytest.approx(10.14668)

    def test_biogenic_reduces_net_co2(self):
        data = {"energyFuelData": [{"fuelType": "Biomass", "consumption": 10, "co2EmissionFactor": 0.1}]}
        results = calculate_cbam_emissions(data)
        assert results.biogenic_co2_emissions == pytest.approx(1.83)
        assert results.net_co2_emissions == pytest.approx(1.0 - 1.83)

    def test_reportable_figures_follow_imported_share(self, complete_data):
        results = calculate_cbam_emissions(complete_data)
        share = results.imported_raw_material_share
        by_gas = results.cbam_reportable_emissions_by_gas_type

        assert by_gas.co2 == pytest.approx(results.total_emissions_by_gas_type.co2 * share)
        assert by_gas.total == pytest.approx(results.total_emissions_by_gas_type.total * share)
        assert results.net_co2_emissions_reportable == pytest.approx(results.net_co2_emissions * share)

    def test_emission_intensities(self, complete_data):
        results = calculate_cbam_emissions(complete_data)
        assert results.emission_intensity == pytest.approx(636.24668 / 200)
        assert results.cbam_reportable_emission_intensity == pytest.approx(675.62168 * 0.75 / 200)

    def test_intensity_divides_by_at_least_one(self):
        data = {"processProductionData": [{"productionAmount": 0.5, "processEmissionFactor": 2.0}]}
        results = calculate_cbam_emissions(data)
        assert results.specific_emissions == pytest.approx(2.0)
        assert results.emission_intensity == pytest.approx(1.0)

    def test_invariants(self, complete_data):
        results = calculate_cbam_emissions(complete_data)
        assert results.total_emissions >= results.total_direct_co2_emissions
        assert results.total_emissions >= results.total_process_emissions
        assert results.cumulative_emissions >= results.total_emissions
        assert 0.0 <= results.renewable_share <= 1.0
        assert 0.0 <= results.imported_raw_material_share <= 1.0


class TestDeterminism:

    def test_idempotent(self, complete_data):
        first = calculate_cbam_emissions(complete_data)
        second = calculate_cbam_emissions(complete_data)
        assert first == second
        assert len(first.provenance_hash) == 64

    def test_dict_and_model_inputs_agree(self, complete_data):
        from_dict = calculate_cbam_emissions(complete_data)
        from_model = calculate_cbam_emissions(CBAMDataSnapshot.model_validate(complete_data))
        assert from_dict == from_model

    def test_hash_changes_with_input(self, natural_gas_data):
        first = calculate_cbam_emissions(natural_gas_data)
        natural_gas_data["energyFuelData"][0]["consumption"] = 101
        second = calculate_cbam_emissions(natural_gas_data)
        assert first.provenance_hash != second.provenance_hash

    def test_provenance_can_be_disabled(self, natural_gas_data):
        config = CBAMEngineConfig(enable_provenance=False)
        assert calculate_cbam_emissions(natural_gas_data, config).provenance_hash == ""


class TestMalformedInput:

    @pytest.mark.parametrize(
        "data",
        [
            None,
            {},
            {"energyFuelData": "oops", "processProductionData": 7},
            {"energyFuelData": [None, 1, {"consumption": "NaN", "co2EmissionFactor": "inf"}]},
            {"processProductionData": [{"inputs": [{"amount": "-"}], "applicableElements": "x"}]},
            {"purchasedPrecursors": [], "emissionInstallationData": "none"},
            {"emissionFactors": [{"category": "Fuel", "value": "??"}]},
            {"energyFuelData": [{"fuelType": "Coal", "consumption": 10 ** 400, "unit": "GJ"}]},
            {"energyFuelData": [{"fuelType": "Coal", "consumption": 1e200, "co2EmissionFactor": 1e200}]},
        ],
    )
    def test_never_raises(self, data):
        results = calculate_cbam_emissions(data)
        assert isinstance(results, ResultsSnapshot)
        for name, value in _floats(results.model_dump()):
            assert math.isfinite(value), name

    def test_empty_snapshot_is_all_zero(self):
        results = calculate_cbam_emissions({})
        assert results.total_emissions == 0.0
        assert results.cumulative_emissions == 0.0
        assert results.specific_emissions == 0.0
        assert results.renewable_share == 0.0

    def test_export_uses_camel_case(self, natural_gas_data):
        exported = calculate_cbam_emissions(natural_gas_data).to_export_dict()
        assert exported["totalDirectCO2Emissions"] == pytest.approx(5610.0)
        assert "directEmissionsByGasType" in exported
        assert "netCO2Emissions" in exported
