# -*- coding: utf-8 -*-
"""Tests for energy unit conversion and safe numeric coercion."""

import math

import pytest

from cbam_engine.coercion import (
    as_fraction,
    finite_or_zero,
    is_invalid_number,
    parse_number,
    percent_to_fraction,
    safe_bool,
    safe_float,
    safe_ratio,
)
from cbam_engine.units import (
    EnergyUnitConverter,
    normalize_electricity_factor,
    to_common_energy_unit,
    to_mwh,
)


class TestToCommonEnergyUnit:
    """Energy to TJ for the fuel balance."""

    def test_gj_to_tj(self):
        assert to_common_energy_unit(1000, "GJ") == pytest.approx(1.0)

    def test_mwh_to_tj(self):
        assert to_common_energy_unit(1000 / 3.6, "MWh") == pytest.approx(1.0)

    def test_tj_is_identity(self):
        assert to_common_energy_unit(2.5, "TJ") == pytest.approx(2.5)

    def test_unit_is_case_insensitive(self):
        assert to_common_energy_unit(1000, "gj") == to_common_energy_unit(1000, "GJ")

    @pytest.mark.parametrize("unit", ["kg", "", None, "barrels"])
    def test_unknown_unit_contributes_zero(self, unit):
        assert to_common_energy_unit(500, unit) == 0.0

    def test_unparseable_value_reads_zero(self):
        assert to_common_energy_unit("lots", "GJ") == 0.0


class TestElectricityNormalization:

    def test_kwh_to_mwh(self):
        assert to_mwh(5000, "kWh") == pytest.approx(5.0)

    def test_gj_to_mwh(self):
        assert to_mwh(36, "GJ") == pytest.approx(10.0)

    def test_unknown_unit_passes_through(self):
        assert to_mwh(5, None) == pytest.approx(5.0)

    def test_factor_per_kwh(self):
        assert normalize_electricity_factor(0.0004, "tCO2/kWh") == pytest.approx(0.4)

    def test_factor_per_gj(self):
        assert normalize_electricity_factor(0.1, "tCO2/GJ") == pytest.approx(0.36)

    def test_factor_per_mwh_is_identity(self):
        assert normalize_electricity_factor(0.475, "t/MWh") == pytest.approx(0.475)

    def test_supported_units(self):
        converter = EnergyUnitConverter()
        assert converter.is_supported_energy_unit("MWh")
        assert not converter.is_supported_energy_unit("kWh")


class TestCoercion:
    """Malformed values never escape as NaN, inf or exceptions."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (12, 12.0),
            ("12.5", 12.5),
            (" 7 ", 7.0),
            ("12,5", 12.5),
            ("", None),
            ("n/a", None),
            (None, None),
            (True, None),
            (float("nan"), None),
            (float("inf"), None),
            (10 ** 400, None),
            ([1], None),
        ],
    )
    def test_parse_number(self, value, expected):
        assert parse_number(value) == expected

    def test_safe_float_default(self):
        assert safe_float("abc") == 0.0
        assert safe_float(None, default=1.0) == 1.0

    def test_invalid_number_only_when_entered(self):
        assert is_invalid_number("abc")
        assert not is_invalid_number("")
        assert not is_invalid_number(None)
        assert not is_invalid_number("3.2")

    @pytest.mark.parametrize("value", [True, "yes", "TRUE", "1", 1, "on"])
    def test_safe_bool_truthy(self, value):
        assert safe_bool(value) is True

    @pytest.mark.parametrize("value", [False, "no", "", None, 0, "false"])
    def test_safe_bool_falsy(self, value):
        assert safe_bool(value) is False

    def test_safe_ratio_guards_denominator(self):
        assert safe_ratio(5.0, 0.0) == 0.0
        assert safe_ratio(5.0, -1.0) == 0.0
        assert safe_ratio(5.0, 2.0) == 2.5
        assert not math.isnan(safe_ratio(0.0, 0.0))
        assert safe_ratio(1e300, 1e-300) == 0.0

    def test_finite_or_zero(self):
        assert finite_or_zero(2.5) == 2.5
        assert finite_or_zero(1e200 * 1e200) == 0.0
        assert finite_or_zero(float("nan")) == 0.0

    def test_as_fraction_accepts_percent_and_fraction(self):
        assert as_fraction(0.4) == pytest.approx(0.4)
        assert as_fraction(40) == pytest.approx(0.4)
        assert as_fraction(250) == 1.0
        assert as_fraction(-3) == 0.0

    def test_percent_to_fraction(self):
        assert percent_to_fraction(50) == pytest.approx(0.5)
        assert percent_to_fraction(150) == 1.0
        assert percent_to_fraction(None, default=1.0) == 1.0
