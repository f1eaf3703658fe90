# -*- coding: utf-8 -*-
"""Tests for embedded, precursor and transport emissions."""

import pytest

from cbam_engine.calculation.embedded_calculator import (
    calculate_embedded_emissions,
    calculate_embedded_emissions_by_gas_type,
    calculate_imported_material_embedded_emissions,
    calculate_purchased_precursors_embedded_emissions,
    precursor_electricity_emissions,
)
from cbam_engine.calculation.transport_calculator import calculate_transport_emissions
from cbam_engine.models import PurchasedPrecursor


def _process(*inputs):
    return [{"processName": "P", "productionAmount": 1, "inputs": list(inputs)}]


class TestEmbeddedInputs:

    def test_default_material_factor(self, steel_process_data):
        assert calculate_embedded_emissions(steel_process_data["processProductionData"]) == pytest.approx(0.15)

    def test_explicit_value_is_a_total(self):
        processes = _process({"materialName": "Iron Ore", "quantity": 5, "embeddedEmissions": 2})
        assert calculate_embedded_emissions(processes) == pytest.approx(2.0)

    def test_unknown_material_falls_back(self):
        processes = _process({"materialName": "Moon rock", "amount": 4})
        assert calculate_embedded_emissions(processes) == pytest.approx(2.0)

    def test_override(self):
        processes = _process({"materialName": "Iron Ore", "amount": 10})
        overrides = [{"category": "Embedded", "name": "Iron Ore", "value": 0.1}]
        assert calculate_embedded_emissions(processes, overrides) == pytest.approx(1.0)

    def test_by_gas(self):
        processes = _process(
            {"materialName": "Iron Ore", "amount": 10},
            {"materialName": "Coke", "amount": 1, "embeddedEmissions": 3},
        )
        overrides = [{"category": "Embedded", "name": "Iron Ore", "gasType": "CH4", "value": 0.01}]
        result = calculate_embedded_emissions_by_gas_type(processes, overrides)
        assert result.co2 == pytest.approx(0.3 + 3.0)
        assert result.ch4 == pytest.approx(0.1)
        assert result.total == pytest.approx(3.4)

    def test_imported_materials(self):
        processes = _process(
            {"materialName": "Iron Ore", "amount": 10, "countryOfOrigin": "BR"},
            {"materialName": "Iron Ore", "amount": 10, "isImported": True},
            {"materialName": "Limestone", "amount": 10},
        )
        result = calculate_imported_material_embedded_emissions(processes)
        assert result.by_material == {"Iron Ore": pytest.approx(0.6)}
        assert result.total == pytest.approx(0.6)


class TestPrecursors:

    def test_specific_factor_plus_electricity(self, precursor_data):
        total = calculate_purchased_precursors_embedded_emissions(precursor_data)
        assert total == pytest.approx(22.375)

    def test_default_grid_factor(self):
        precursor = PurchasedPrecursor(electricity_consumption=10)
        assert precursor_electricity_emissions(precursor) == pytest.approx(4.75)

    def test_electricity_units_normalized(self):
        precursor = PurchasedPrecursor(
            electricity_consumption=1000,
            electricity_unit="kWh",
            electricity_emission_factor=0.0005,
            electricity_emission_factor_unit="tCO2/kWh",
        )
        assert precursor_electricity_emissions(precursor) == pytest.approx(0.5)

    def test_factor_from_table_without_specific_value(self):
        data = {"precursors": [{"name": "Alumina", "totalAmountConsumed": 2}]}
        assert calculate_purchased_precursors_embedded_emissions(data) == pytest.approx(3.2)

    def test_missing_data(self):
        assert calculate_purchased_precursors_embedded_emissions(None) == 0.0


class TestTransport:

    def test_default_mode_factor(self):
        processes = _process(
            {"materialName": "Iron Ore", "amount": 100, "isImported": True,
             "transportDistance": 1000, "transportMode": "sea"},
        )
        assert calculate_transport_emissions(processes) == pytest.approx(1000 * 0.015 * 100)

    def test_explicit_value_wins(self):
        processes = _process(
            {"materialName": "Iron Ore", "amount": 100, "isImported": True,
             "transportDistance": 1000, "transportMode": "sea", "transportEmissions": 7},
        )
        assert calculate_transport_emissions(processes) == pytest.approx(7.0)

    def test_requires_import_flag_distance_and_mode(self):
        processes = _process(
            {"amount": 100, "countryOfOrigin": "CN", "transportDistance": 1000, "transportMode": "air"},
            {"amount": 100, "isImported": True, "transportMode": "air"},
            {"amount": 100, "isImported": True, "transportDistance": 1000},
        )
        assert calculate_transport_emissions(processes) == 0.0

    def test_unknown_mode_and_override(self):
        processes = _process(
            {"amount": 1, "isImported": True, "transportDistance": 10, "transportMode": "pipeline"},
            {"amount": 1, "isImported": True, "transportDistance": 10, "transportMode": "Rail"},
        )
        overrides = [{"category": "Transport", "name": "rail", "value": 0.05}]
        assert calculate_transport_emissions(processes, overrides) == pytest.approx(10 * 0.1 + 10 * 0.05)
