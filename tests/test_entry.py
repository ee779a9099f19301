"""Tests for manual entry validation."""

import pytest

from pricewise.entry import ManualEntryError, parse_manual_entry


def test_valid_entry_is_upper_cased():
    info = parse_manual_entry("Oat Milk", "2.49", "1", "l", brand="Oatly")
    assert info.name == "OAT MILK"
    assert info.brand == "OATLY"
    assert info.price == 2.49
    assert info.quantity == 1.0
    assert info.unit == "L"


def test_numeric_values_accepted():
    info = parse_manual_entry("rice", 3, 2.5, "kg")
    assert info.price == 3.0
    assert info.quantity == 2.5


def test_blank_brand_becomes_none():
    info = parse_manual_entry("rice", "3", "1", "kg", brand="  ")
    assert info.brand is None


def test_zero_price_allowed():
    assert parse_manual_entry("sample", "0", "1", "each").price == 0.0


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"name": "", "price": "1", "quantity": "1", "unit": "g"}, "name"),
        ({"name": "  ", "price": "1", "quantity": "1", "unit": "g"}, "name"),
        ({"name": "x", "price": "1", "quantity": "1", "unit": ""}, "unit"),
        ({"name": "x", "price": "abc", "quantity": "1", "unit": "g"}, "price"),
        ({"name": "x", "price": "", "quantity": "1", "unit": "g"}, "price"),
        ({"name": "x", "price": "-1", "quantity": "1", "unit": "g"}, "price"),
        ({"name": "x", "price": "nan", "quantity": "1", "unit": "g"}, "price"),
        ({"name": "x", "price": "1", "quantity": "0", "unit": "g"}, "quantity"),
        ({"name": "x", "price": "1", "quantity": "-2", "unit": "g"}, "quantity"),
        ({"name": "x", "price": "1", "quantity": "inf", "unit": "g"}, "quantity"),
    ],
)
def test_invalid_fields(kwargs, field):
    with pytest.raises(ManualEntryError) as exc:
        parse_manual_entry(**kwargs)
    assert exc.value.field == field


def test_error_is_value_error():
    with pytest.raises(ValueError, match="quantity"):
        parse_manual_entry("x", "1", "0", "g")
