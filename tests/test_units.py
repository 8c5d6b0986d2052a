import math
from types import MappingProxyType

import pytest

from unit_converter.config import PLACEHOLDER
from unit_converter.core.models import (
    Affine,
    Category,
    FormatMode,
    InvalidNumber,
    Linear,
    TemperatureScale,
    Unit,
    UnknownCategory,
    UnknownUnit,
)
from unit_converter.core.units import UnitManager, _affine, _linear

LINEAR_CATEGORIES = [c for c in UnitManager.list_categories() if c != "Temperature"]


# --- TABELA ---

def test_categories_in_declaration_order():
    categories = UnitManager.list_categories()
    assert categories == list(UnitManager.CATEGORIES)
    assert categories[:6] == ["Force", "Pressure", "Length", "Mass", "Time", "Temperature"]
    assert categories[-1] == "DataSize"
    assert UnitManager.list_categories() == categories


def test_list_units_is_stable():
    units = UnitManager.list_units("Length")
    assert len(units) == 12
    assert units[3:] == ["mm", "cm", "m", "km", "in", "ft", "yd", "mi", "NM"]
    assert UnitManager.list_units("Length") == units


def test_list_units_unknown_category():
    with pytest.raises(UnknownCategory) as exc:
        UnitManager.list_units("Luminosity")
    assert exc.value.category == "Luminosity"


@pytest.mark.parametrize("category", UnitManager.list_categories())
def test_table_invariants(category):
    cat = UnitManager.get_category(category)
    assert len(cat.units) >= 1
    assert cat.base_unit in cat.units

    for name, unit in cat.units.items():
        assert unit.name == name
        if category == "Temperature":
            assert isinstance(unit.descriptor, Affine)
        else:
            assert isinstance(unit.descriptor, Linear)
            assert math.isfinite(unit.descriptor.factor)
            assert unit.descriptor.factor > 0


def test_base_unit_has_unit_factor():
    for category in LINEAR_CATEGORIES:
        cat = UnitManager.get_category(category)
        assert cat.units[cat.base_unit].descriptor.factor == 1.0


def test_temperature_scales_are_exhaustive():
    cat = UnitManager.get_category("Temperature")
    assert cat.is_affine
    assert {u.descriptor.scale for u in cat.units.values()} == set(TemperatureScale)


def test_category_units_are_read_only():
    cat = UnitManager.get_category("Mass")
    with pytest.raises(TypeError):
        cat.units["grain"] = Unit("grain", Linear(6.479891e-5))


def test_linear_builder_rejects_bad_factors():
    with pytest.raises(ValueError):
        _linear("Bad", "a", [("a", None, 1), ("b", None, 0)])
    with pytest.raises(ValueError):
        _linear("Bad", "a", [("a", None, 1), ("b", None, -2.0)])
    with pytest.raises(ValueError):
        _linear("Bad", "a", [("a", None, 1), ("b", None, float("inf"))])
    with pytest.raises(ValueError):
        _linear("Bad", "a", [("a", None, 1), ("a", "again", 2)])
    with pytest.raises(ValueError):
        _linear("Bad", "a", [("a", None, 2)])
    with pytest.raises(ValueError):
        _linear("Empty", "a", [])


def test_affine_builder_requires_all_three_scales():
    with pytest.raises(ValueError):
        _affine("Temp", "K", [
            ("C", "°C", TemperatureScale.CELSIUS),
            ("K", "K", TemperatureScale.KELVIN),
        ])


# --- CONVERSÃO LINEAR ---

def test_length_metre_to_kilometre():
    result = UnitManager.convert("Length", "m", "km", "1500")
    assert result.ok
    assert result.value == 1.5
    assert result.text == "1.50000000"
    assert result.display == "1.50000000 km (kilometre)"
    assert result.standard_form == "1.500e+0 km (kilometre)"


def test_kilogram_to_pound():
    result = UnitManager.convert("Mass", "kg", "lb", "1")
    assert result.value == pytest.approx(2.20462, rel=1e-5)
    assert result.text == "2.20462262"


def test_units_resolve_by_label():
    result = UnitManager.convert("Length", "m (metre)", "km (kilometre)", "2500")
    assert result.text == "2.50000000"


def test_explicit_format_mode():
    result = UnitManager.convert("Length", "m", "km", "1500", mode=FormatMode.FIXED)
    assert result.text == "1.500000"


def test_round_trip_for_linear_categories():
    v = 7.25
    for category in LINEAR_CATEGORIES:
        units = UnitManager.list_units(category)
        for u1 in units:
            for u2 in units:
                there = UnitManager.convert_value(category, u1, u2, v)
                back = UnitManager.convert_value(category, u2, u1, 1)
                assert there * back == pytest.approx(v, rel=1e-12), (category, u1, u2)


@pytest.mark.parametrize("category", UnitManager.list_categories())
def test_identity_conversion(category):
    for unit in UnitManager.list_units(category):
        for v in (0.0, -40.5, 1234.5678, 1e-12):
            assert UnitManager.convert_value(category, unit, unit, v) == v


# --- TEMPERATURA ---

@pytest.mark.parametrize("from_unit, to_unit, raw, expected", [
    ("C", "F", "0", "32.000000"),
    ("C", "F", "100", "212.000000"),
    ("F", "K", "32", "273.150000"),
    ("K", "C", "0", "-273.150000"),
    ("F", "C", "-40", "-40.000000"),
    ("C", "K", "25", "298.150000"),
    ("K", "F", "373.15", "212.000000"),
])
def test_temperature_conversions(from_unit, to_unit, raw, expected):
    assert UnitManager.convert("Temperature", from_unit, to_unit, raw).text == expected


def test_temperature_uses_exact_affine_rules():
    assert UnitManager.convert_value("Temperature", "F", "K", 50) == (50 - 32) * (5 / 9) + 273.15
    assert UnitManager.convert_value("Temperature", "K", "F", 300) == (300 - 273.15) * 9 / 5 + 32
    assert UnitManager.convert_value("Temperature", "C", "K", 21.5) == 21.5 + 273.15


def test_temperature_identity_display():
    for unit in UnitManager.list_units("Temperature"):
        assert UnitManager.convert("Temperature", unit, unit, "36.6").text == "36.600000"


def test_temperature_display_uses_label():
    result = UnitManager.convert("Temperature", "C", "F", "0")
    assert result.display == "32.000000 °F (Fahrenheit)"
    assert result.standard_form == "3.200e+1 °F (Fahrenheit)"


# --- ERROS ---

def test_empty_input_is_not_an_error():
    result = UnitManager.convert("Length", "m", "km", "")
    assert result.is_empty
    assert not result.ok
    assert result.error is None
    assert result.display == PLACEHOLDER
    assert result.standard_form == ""


@pytest.mark.parametrize("raw", [
    "abc", "   ", "1.2.3", "inf", "nan", "-", "1_000", "١٢", "0x10", "1e999", "Infinity",
])
def test_invalid_number(raw):
    result = UnitManager.convert("Length", "m", "km", raw)
    assert isinstance(result.error, InvalidNumber)
    assert result.value is None
    assert not result.is_empty
    assert result.display == PLACEHOLDER


def test_whitespace_and_sign_are_accepted():
    assert UnitManager.convert("Length", "km", "m", "  -1.5 ").text == "-1500.00000"
    assert UnitManager.convert("Length", "km", "m", "+.5").text == "500.000000"
    assert UnitManager.convert("Length", "km", "m", "2e3").text == "2000000.00"


def test_unknown_from_unit():
    result = UnitManager.convert("Length", "furlong", "m", "1")
    assert isinstance(result.error, UnknownUnit)
    assert result.error.side == "from"
    assert result.error.unit == "furlong"
    assert result.value is None


def test_unknown_to_unit():
    result = UnitManager.convert("Temperature", "C", "Rankine", "1")
    assert isinstance(result.error, UnknownUnit)
    assert result.error.side == "to"
    assert result.display == PLACEHOLDER


def test_unit_from_another_category_is_unknown():
    result = UnitManager.convert("Length", "kg", "m", "1")
    assert isinstance(result.error, UnknownUnit)


def test_unknown_category_in_convert():
    result = UnitManager.convert("Luminosity", "cd", "lm", "1")
    assert isinstance(result.error, UnknownCategory)


def test_overflow_is_invalid_number():
    result = UnitManager.convert("DataSize", "EB", "bit", "1e300")
    assert isinstance(result.error, InvalidNumber)


def test_convert_value_raises():
    with pytest.raises(UnknownUnit):
        UnitManager.convert_value("Mass", "kg", "stone", 1.0)
    with pytest.raises(UnknownCategory):
        UnitManager.convert_value("Mood", "a", "b", 1.0)
    with pytest.raises(InvalidNumber):
        UnitManager.convert_value("Mass", "kg", "g", float("nan"))


def test_errors_are_value_errors():
    assert issubclass(InvalidNumber, ValueError)
    assert issubclass(UnknownUnit, ValueError)
    assert issubclass(UnknownCategory, ValueError)


# --- TABELA DE CONVERSÃO / AUXILIARES ---

def test_convert_all_linear_matches_convert_value():
    values = UnitManager.convert_all("Length", "km", 1.5)
    assert list(values) == UnitManager.list_units("Length")
    assert values["m"] == 1500.0
    assert values["km"] == 1.5
    for unit, value in values.items():
        assert value == UnitManager.convert_value("Length", "km", unit, 1.5)


def test_convert_all_temperature():
    values = UnitManager.convert_all("Temperature", "C", 100.0)
    assert values["C"] == 100.0
    assert values["F"] == pytest.approx(212.0)
    assert values["K"] == pytest.approx(373.15)


def test_convert_all_errors():
    with pytest.raises(UnknownUnit):
        UnitManager.convert_all("Length", "league", 1.0)
    with pytest.raises(InvalidNumber):
        UnitManager.convert_all("Length", "m", float("inf"))


def test_swap():
    assert UnitManager.swap("m", "km") == ("km", "m")


def test_default_units():
    assert UnitManager.default_units("Temperature") == ("C", "F")
    assert UnitManager.default_units("ElectricCurrent") == ("A", "mA")


def test_default_units_single_unit_category(monkeypatch):
    single = Category("Solo", "x", {"x": Unit("x", Linear(1.0))})
    monkeypatch.setattr(UnitManager, "CATEGORIES", MappingProxyType({"Solo": single}))

    assert UnitManager.default_units("Solo") == ("x", "x")
    assert UnitManager.convert("Solo", "x", "x", "3").text == "3.00000000"


def test_standard_form_rounds_ties_up():
    # 8.5 bit = 1.0625 Byte, empate exato em 3 casas
    result = UnitManager.convert("DataSize", "bit", "B", "8.5")
    assert result.text == "1.06250000"
    assert result.standard_form == "1.063e+0 Byte"


def test_significant_text_rounds_ties_up():
    assert UnitManager.convert("Length", "m", "m", "1234567885").text == "1.23456789e+9"


def test_parse_value_accepts_plain_decimal_syntax():
    assert UnitManager.parse_value(" 5. ") == 5.0
    assert UnitManager.parse_value("-2.5E-3") == -0.0025
    with pytest.raises(InvalidNumber):
        UnitManager.parse_value(None)
