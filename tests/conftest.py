# -*- coding: utf-8 -*-
"""Shared fixtures for the CBAM engine test suite."""

import json
from typing import Any, Dict

import pytest

from cbam_engine.config import reset_config
from cbam_engine.service import reset_service


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Every test starts from the default configuration."""
    for name in (
        "GL_CBAM_CONSISTENCY_TOLERANCE",
        "GL_CBAM_MAX_ENERGY_UNITS",
        "GL_CBAM_LARGE_CONSUMPTION_THRESHOLD_MWH",
        "GL_CBAM_GENERAL_PROCESS_FACTOR_CEILING",
        "GL_CBAM_ENABLE_METRICS",
        "GL_CBAM_ENABLE_PROVENANCE",
        "GL_CBAM_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    reset_service()
    yield
    reset_config()
    reset_service()


# ============================================================================
# Scenario snapshots
# ============================================================================

@pytest.fixture
def natural_gas_data() -> Dict[str, Any]:
    """One natural gas record with an explicit factor, no processes."""
    return {
        "energyFuelData": [
            {
                "id": "fuel-1",
                "fuelType": "Natural gas",
                "consumption": 100,
                "unit": "GJ",
                "co2EmissionFactor": 56.1,
            }
        ],
    }


@pytest.fixture
def steel_process_data() -> Dict[str, Any]:
    """One process with an explicit factor and one Iron Ore input."""
    return {
        "processProductionData": [
            {
                "id": "proc-1",
                "processName": "Hot rolling",
                "productionQuantity": 10,
                "unit": "t",
                "processEmissionFactor": 1.9,
                "inputs": [
                    {"materialName": "Iron Ore", "quantity": 5, "unit": "t"},
                ],
            }
        ],
    }


@pytest.fixture
def mass_balance_source() -> Dict[str, Any]:
    """Installation source computed by mass balance, half biomass."""
    return {
        "emissionSourceId": "src-1",
        "emissionSourceName": "Kiln",
        "activityLevel": 100,
        "calorificValue": 0.04,
        "carbonContent": 0.02,
        "oxidationFactor": 1,
        "conversionFactor": 3.667,
        "biomassFraction": 50,
    }


@pytest.fixture
def precursor_data() -> Dict[str, Any]:
    return {
        "precursors": [
            {
                "name": "Pig iron",
                "totalAmountConsumed": 10,
                "specificDirectEmbeddedEmissions": 2.0,
                "electricityConsumption": 5,
                "electricityEmissionFactor": 0.475,
            }
        ]
    }


@pytest.fixture
def complete_data(mass_balance_source, precursor_data) -> Dict[str, Any]:
    """A fully filled-in snapshot that passes input validation."""
    return {
        "companyInfo": {
            "companyName": "ACME Steel GmbH",
            "companyAddress": "Industriestrasse 1, Duisburg",
            "companyVAT": "DE123456789",
        },
        "reportConfig": {
            "reportingPeriod": "2025-Q1",
            "installationId": "INST-001",
            "installationName": "Duisburg Works",
            "installationCountry": "DE",
            "installationAddress": "Industriestrasse 1, Duisburg",
        },
        "installationDetails": {
            "installationType": "Integrated steel plant",
            "mainActivity": "Iron and Steel Production",
        },
        "energyFuelData": [
            {
                "fuelType": "Natural Gas",
                "consumption": 1000,
                "unit": "GJ",
                "co2EmissionFactor": 0.0561,
                "ch4EmissionFactor": 0.000001,
                "useCategory": "Process heat",
            },
            {
                "fuelType": "Electricity",
                "consumption": 500,
                "unit": "MWh",
                "co2EmissionFactor": 0.4,
                "renewableShare": 40,
                "useCategory": "Drives",
            },
        ],
        "processProductionData": [
            {
                "id": "p1",
                "processName": "Steelmaking",
                "processType": "Iron and Steel Production",
                "productionAmount": 200,
                "unit": "t",
                "processEmissionFactor": 1.9,
                "inputs": [
                    {
                        "materialName": "Iron Ore",
                        "amount": 300,
                        "unit": "t",
                        "isImported": True,
                        "countryOfOrigin": "BR",
                        "embeddedEmissions": 12,
                        "transportDistance": 1000,
                        "transportMode": "sea",
                    },
                    {
                        "materialName": "Limestone",
                        "amount": 100,
                        "unit": "t",
                        "embeddedEmissions": 5,
                    },
                ],
                "outputs": [
                    {"productName": "Steel slabs", "amount": 200, "unit": "t"},
                ],
            }
        ],
        "emissionInstallationData": {
            "emissions": [mass_balance_source],
        },
        "purchasedPrecursors": {
            "precursors": [
                dict(precursor_data["precursors"][0], originCountry="UA"),
            ]
        },
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a mapping to a JSON file under tmp_path and return the path."""
    def _write(data: Any, name: str = "snapshot.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write

