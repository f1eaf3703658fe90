# -*- coding: utf-8 -*-
"""Tests for the emission factor fallback chain and the default tables."""

import math

import pytest

from cbam_engine.defaults import (
    EMBEDDED_EMISSION_FACTORS,
    FUEL_EMISSION_FACTORS,
    PROCESS_EMISSION_FACTORS,
    get_default_embedded_emission_factor,
    get_default_fuel_emission_factor,
    get_default_process_emission_factor,
    get_process_factor_range,
    get_transport_emission_factor,
    lookup_default,
)
from cbam_engine.models import EmissionFactorOverride
from cbam_engine.resolution import (
    FactorSource,
    find_override,
    resolve_chain,
    resolve_factor,
    resolve_factor_detailed,
)


@pytest.fixture
def overrides():
    return [
        {"category": "Process", "name": "Cement Production", "gasType": "CO2", "value": 0.9},
        {"category": "Process", "name": "Cement Production", "gasType": "CH4", "value": 0.01},
        EmissionFactorOverride(category="Embedded", name="Iron Ore", value=0.05),
        {"category": "Fuel", "name": "Coal", "value": "-1"},
        {"category": "Fuel", "name": "Wood pellets", "value": 0.2, "isBiogenic": True},
    ]


class TestResolveChain:

    def test_first_value_wins(self):
        value, source = resolve_chain(
            [
                (FactorSource.EXPLICIT, lambda: None),
                (FactorSource.OVERRIDE, lambda: 2.0),
                (FactorSource.DEFAULT_TABLE, lambda: 3.0),
            ],
            fallback=9.0,
        )
        assert value == 2.0
        assert source is FactorSource.OVERRIDE

    def test_fallback_when_all_empty(self):
        value, source = resolve_chain([(FactorSource.EXPLICIT, lambda: None)], fallback=0.1)
        assert value == 0.1
        assert source is FactorSource.CATEGORY_FALLBACK

    def test_zero_from_table_is_a_value(self):
        value, source = resolve_chain([(FactorSource.DEFAULT_TABLE, lambda: 0.0)], fallback=0.5)
        assert value == 0.0
        assert source is FactorSource.DEFAULT_TABLE


class TestResolveFactor:
    """Explicit -> override -> default table -> category fallback."""

    def test_explicit_value_wins(self, overrides):
        value = resolve_factor(
            "Process", "Cement Production", explicit_value=1.5,
            overrides=overrides, defaults_table=PROCESS_EMISSION_FACTORS, fallback=0.1,
        )
        assert value == 1.5

    def test_zero_explicit_value_falls_through(self, overrides):
        resolution = resolve_factor_detailed(
            "Process", "Cement Production", explicit_value=0,
            overrides=overrides, defaults_table=PROCESS_EMISSION_FACTORS, fallback=0.1,
        )
        assert resolution.value == 0.9
        assert resolution.source is FactorSource.OVERRIDE

    def test_override_name_is_case_insensitive(self, overrides):
        value = resolve_factor(
            "Embedded", "iron ore", overrides=overrides,
            defaults_table=EMBEDDED_EMISSION_FACTORS, fallback=0.5,
        )
        assert value == 0.05

    def test_override_respects_gas_type(self, overrides):
        assert resolve_factor("Process", "Cement Production", gas_type="CH4", overrides=overrides) == 0.01
        assert resolve_factor("Process", "Cement Production", gas_type="N2O", overrides=overrides) == 0.0

    def test_negative_override_is_skipped(self, overrides):
        resolution = resolve_factor_detailed(
            "Fuel", "Coal", overrides=overrides, defaults_table=FUEL_EMISSION_FACTORS,
        )
        assert resolution.value == FUEL_EMISSION_FACTORS["Coal"]
        assert resolution.source is FactorSource.DEFAULT_TABLE

    def test_default_table(self):
        resolution = resolve_factor_detailed(
            "Embedded", "Iron Ore", defaults_table=EMBEDDED_EMISSION_FACTORS, fallback=0.5,
        )
        assert resolution.value == 0.03
        assert resolution.source is FactorSource.DEFAULT_TABLE

    def test_category_fallback(self):
        resolution = resolve_factor_detailed(
            "Process", "Unobtainium smelting", defaults_table=PROCESS_EMISSION_FACTORS, fallback=0.1,
        )
        assert resolution.value == 0.1
        assert resolution.source is FactorSource.CATEGORY_FALLBACK

    def test_biogenic_only_overrides(self, overrides):
        assert find_override(overrides, "Fuel", "Wood pellets", biogenic_only=True) == 0.2
        assert find_override(overrides, "Embedded", "Iron Ore", biogenic_only=True) is None

    @pytest.mark.parametrize("name", [None, "", 42, "???"])
    @pytest.mark.parametrize("explicit", [None, "", "abc", float("nan"), -3])
    def test_never_raises_and_is_finite(self, name, explicit):
        value = resolve_factor(
            "Embedded", name, explicit_value=explicit,
            overrides=[{"category": "Embedded", "name": "x", "value": "bad"}],
            defaults_table=EMBEDDED_EMISSION_FACTORS, fallback=0.5,
        )
        assert math.isfinite(value)
        assert value >= 0


class TestDefaults:

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            FUEL_EMISSION_FACTORS["Coal"] = 1.0  # type: ignore[index]

    def test_lookup_default_case_insensitive(self):
        assert lookup_default(FUEL_EMISSION_FACTORS, "natural gas") == FUEL_EMISSION_FACTORS["Natural Gas"]
        assert lookup_default(FUEL_EMISSION_FACTORS, "plasma") is None

    def test_public_getters(self):
        assert get_default_fuel_emission_factor("Coal") == 0.34
        assert get_default_fuel_emission_factor("Plasma") == FUEL_EMISSION_FACTORS["Other"]
        assert get_default_process_emission_factor("Cement Production") == 0.66
        assert get_default_process_emission_factor("Unknown") == PROCESS_EMISSION_FACTORS["Other"]
        assert get_default_embedded_emission_factor("Iron Ore") == 0.03
        assert get_default_embedded_emission_factor("Moon rock") == 0.5

    def test_transport_factors(self):
        assert get_transport_emission_factor("Sea") == 0.015
        assert get_transport_emission_factor("pipeline") == 0.1

    def test_process_factor_range(self):
        assert get_process_factor_range("calcination") == (0.3, 1.2)
        assert get_process_factor_range("Iron and Steel Production") is None
