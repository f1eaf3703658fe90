# -*- coding: utf-8 -*-
"""Tests for energy totals, renewable share and imported raw material shares."""

import pytest

from cbam_engine.calculation.shares import (
    calculate_imported_raw_material_share,
    calculate_imported_raw_material_share_by_country,
    calculate_imported_raw_material_share_by_material,
    calculate_renewable_share,
    calculate_total_energy,
    is_imported_input,
)
from cbam_engine.models import ProcessInput


def _process(*inputs):
    return [{"processName": "P", "inputs": list(inputs)}]


class TestImportedClassification:
    """An input is imported when any of the three signals is present."""

    def test_country_of_origin_alone_marks_imported(self):
        # isImported false and an empty originCountry must not override country data
        material = ProcessInput.model_validate(
            {"isImported": False, "originCountry": "", "countryOfOrigin": "DE"}
        )
        assert is_imported_input(material)

    def test_origin_country_alone_marks_imported(self):
        assert is_imported_input(ProcessInput(origin_country="CN"))

    def test_flag_alone_marks_imported(self):
        assert is_imported_input(ProcessInput(is_imported=True))

    def test_nothing_means_domestic(self):
        assert not is_imported_input(ProcessInput(origin_country="  ", country_of_origin=""))

    def test_share_counts_country_only_inputs(self):
        processes = _process(
            {"materialName": "Iron Ore", "amount": 30, "isImported": False,
             "originCountry": "", "countryOfOrigin": "DE"},
            {"materialName": "Limestone", "amount": 70},
        )
        assert calculate_imported_raw_material_share(processes) == pytest.approx(0.3)


class TestImportedShares:

    def test_no_inputs(self):
        assert calculate_imported_raw_material_share([]) == 0.0
        by_country = calculate_imported_raw_material_share_by_country([])
        assert by_country.total == 0.0
        assert by_country.by_country == {}

    def test_by_country(self):
        processes = _process(
            {"materialName": "Iron Ore", "amount": 50, "countryOfOrigin": "BR"},
            {"materialName": "Coal", "quantity": 25, "originCountry": "AU"},
            {"materialName": "Scrap", "amount": 5, "isImported": True},
            {"materialName": "Limestone", "amount": 20},
        )
        result = calculate_imported_raw_material_share_by_country(processes)
        assert result.total == pytest.approx(80.0)
        assert set(result.by_country) == {"BR", "AU", "Unknown"}
        assert result.by_country["BR"].share == pytest.approx(0.5)
        assert result.by_country["AU"].amount == pytest.approx(25.0)
        assert result.by_country["Unknown"].share == pytest.approx(0.05)

    def test_by_material(self):
        processes = _process(
            {"materialName": "Iron Ore", "amount": 50, "countryOfOrigin": "BR"},
            {"materialName": "Iron Ore", "amount": 50},
            {"materialName": "Limestone", "amount": 20},
        )
        result = calculate_imported_raw_material_share_by_material(processes)
        assert result.total == pytest.approx(120.0)
        assert result.by_material["Iron Ore"].share == pytest.approx(0.5)
        assert result.by_material["Limestone"].imported == 0.0
        assert result.by_material["Limestone"].share == 0.0


class TestEnergy:

    def test_total_energy_sums_raw_consumption(self):
        fuels = [{"consumption": 100, "unit": "GJ"}, {"consumption": "50", "unit": "MWh"}]
        assert calculate_total_energy(fuels) == pytest.approx(150.0)

    def test_renewable_share(self):
        fuels = [
            {"fuelType": "Electricity", "consumption": 100, "renewableShare": 40},
            {"fuelType": "Biomass", "consumption": 50},
            {"fuelType": "Natural Gas", "consumption": 50},
        ]
        assert calculate_renewable_share(fuels) == pytest.approx((40 + 50) / 200)

    def test_renewable_share_as_fraction(self):
        fuels = [{"fuelType": "electricity", "consumption": 100, "renewableShare": 0.25}]
        assert calculate_renewable_share(fuels) == pytest.approx(0.25)

    def test_no_energy_means_zero_share(self):
        assert calculate_renewable_share([]) == 0.0
        assert calculate_renewable_share([{"fuelType": "Biomass", "consumption": 0}]) == 0.0
