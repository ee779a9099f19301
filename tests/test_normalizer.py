"""Tests for unit normalization and display-rate selection."""

import pytest

from pricewise.models import Scale, UnitCategory
from pricewise.normalizer import (
    GRAMS_PER_OUNCE,
    GRAMS_PER_POUND,
    ML_PER_FLUID_OUNCE,
    canonical_unit,
    normalize,
    resolve_unit,
    select_display_rate,
)


class TestResolveUnit:
    @pytest.mark.parametrize("unit", ["g", "gram", "grams", "G", " Grams "])
    def test_gram_synonyms(self, unit):
        assert resolve_unit(unit) == (UnitCategory.WEIGHT, 1.0)

    @pytest.mark.parametrize("unit", ["kg", "KG", "kilogram", "kilo"])
    def test_kilogram_synonyms(self, unit):
        assert resolve_unit(unit) == (UnitCategory.WEIGHT, 1000.0)

    def test_ounce_and_pound(self):
        assert resolve_unit("oz") == (UnitCategory.WEIGHT, GRAMS_PER_OUNCE)
        assert resolve_unit("Pound") == (UnitCategory.WEIGHT, GRAMS_PER_POUND)
        assert resolve_unit("lbs") == (UnitCategory.WEIGHT, GRAMS_PER_POUND)

    @pytest.mark.parametrize("unit", ["l", "L", "liter", "Litre"])
    def test_litre_synonyms(self, unit):
        assert resolve_unit(unit) == (UnitCategory.VOLUME, 1000.0)

    @pytest.mark.parametrize("unit", ["fl oz", "FL  OZ", "floz", " Fl Oz"])
    def test_fluid_ounce_whitespace_insensitive(self, unit):
        assert resolve_unit(unit) == (UnitCategory.VOLUME, ML_PER_FLUID_OUNCE)

    @pytest.mark.parametrize("unit", ["widget", "each", "pack", "", "unit"])
    def test_unknown_falls_back_to_count(self, unit):
        assert resolve_unit(unit) == (UnitCategory.COUNT, 1.0)

    def test_canonical_unit(self):
        assert canonical_unit("  Fl   OZ ") == "fl oz"


class TestNormalizeWeight:
    def test_grams(self):
        result = normalize(2.50, 500, "g")
        assert result.category is UnitCategory.WEIGHT
        assert result.base_unit == "G"
        assert result.rates["100G"] == pytest.approx(0.5)
        assert result.rates["1KG"] == pytest.approx(5.0)
        assert result.rates["1LB"] == pytest.approx(2.50 / 500 * GRAMS_PER_POUND)

    def test_kilograms(self):
        result = normalize(3.0, 1.5, "kg")
        assert result.rates["100G"] == pytest.approx(0.2)
        assert result.rates["1KG"] == pytest.approx(2.0)

    @pytest.mark.parametrize("unit", ["g", "kg", "oz", "lb"])
    def test_kilo_rate_is_ten_times_hundred_gram_rate(self, unit):
        result = normalize(4.99, 3, unit)
        assert result.category is UnitCategory.WEIGHT
        assert result.rates["1KG"] == pytest.approx(result.rates["100G"] * 10)

    def test_ounces(self):
        result = normalize(1.0, 16, "oz")
        grams = 16 * GRAMS_PER_OUNCE
        assert result.rates["100G"] == pytest.approx(1.0 / grams * 100)

    def test_one_pound_priced_per_pound(self):
        result = normalize(3.0, 1, "lb")
        assert result.rates["1LB"] == pytest.approx(3.0)


class TestNormalizeVolume:
    def test_millilitres(self):
        result = normalize(1.20, 330, "ml")
        assert result.category is UnitCategory.VOLUME
        assert result.base_unit == "ML"
        assert result.rates["100ML"] == pytest.approx(1.20 / 330 * 100)
        assert result.rates["1L"] == pytest.approx(result.rates["100ML"] * 10)

    def test_litres(self):
        result = normalize(2.0, 2, "L")
        assert result.rates["1L"] == pytest.approx(1.0)
        assert result.rates["100ML"] == pytest.approx(0.1)

    def test_fluid_ounces(self):
        result = normalize(5.0, 64, "fl oz")
        assert result.category is UnitCategory.VOLUME
        assert result.rates["FL OZ"] == pytest.approx(5.0 / 64)


class TestNormalizeCount:
    def test_unknown_unit(self):
        result = normalize(6.0, 3, "widget")
        assert result.category is UnitCategory.COUNT
        assert result.base_unit == "UNIT"
        assert result.rates == {"UNIT": pytest.approx(2.0), "DOZEN": pytest.approx(24.0)}

    def test_dozen_is_twelve_units(self):
        result = normalize(3.49, 10, "eggs")
        assert result.rates["DOZEN"] == pytest.approx(result.rates["UNIT"] * 12)

    def test_zero_price(self):
        result = normalize(0.0, 4, "each")
        assert result.rates["UNIT"] == 0.0


class TestNormalizeProperties:
    def test_idempotent(self):
        assert normalize(1.99, 250, "g") == normalize(1.99, 250, "g")

    def test_no_rounding(self):
        result = normalize(1.0, 3, "g")
        assert result.rates["100G"] == 1.0 / 3 * 100


class TestSelectDisplayRate:
    def test_weight(self):
        rates = normalize(2.0, 100, "g").rates
        small = select_display_rate(rates, Scale.SMALL, UnitCategory.WEIGHT)
        large = select_display_rate(rates, Scale.LARGE, UnitCategory.WEIGHT)
        assert small.label == "100G"
        assert small.rate == pytest.approx(2.0)
        assert large.label == "1KG"
        assert large.rate == pytest.approx(20.0)

    def test_volume(self):
        rates = normalize(1.0, 1, "l").rates
        assert select_display_rate(rates, Scale.SMALL, UnitCategory.VOLUME).label == "100ML"
        assert select_display_rate(rates, Scale.LARGE, UnitCategory.VOLUME).label == "1L"

    @pytest.mark.parametrize("scale", [Scale.SMALL, Scale.LARGE])
    def test_count_ignores_scale(self, scale):
        rates = normalize(5.0, 2, "pack").rates
        display = select_display_rate(rates, scale, UnitCategory.COUNT)
        assert display.label == "UNIT"
        assert display.rate == pytest.approx(2.5)

    def test_missing_denomination(self):
        display = select_display_rate({"1LB": 3.0}, Scale.SMALL, UnitCategory.WEIGHT)
        assert display.label == "100G"
        assert display.rate is None

    def test_does_not_mutate_rates(self):
        rates = {"100G": 1.0, "1KG": 10.0, "1LB": 4.5}
        select_display_rate(rates, Scale.LARGE, UnitCategory.WEIGHT)
        assert rates == {"100G": 1.0, "1KG": 10.0, "1LB": 4.5}
