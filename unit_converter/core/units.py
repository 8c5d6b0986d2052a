# unit_converter/core/units.py
import math
import re
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from unit_converter.core.formatting import format_value, to_exponential
from unit_converter.core.models import (
    Affine,
    Category,
    ConversionError,
    ConversionResult,
    FormatMode,
    InvalidNumber,
    Linear,
    TemperatureScale,
    Unit,
    UnknownCategory,
    UnknownUnit,
)

# Sinal, dígitos ASCII, ponto decimal e expoente (sem "_", "0x", "inf")
_NUMBER = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")

# Linha da tabela: (nome, rótulo ou None, fator para a unidade base)
UnitRow = Tuple[str, Optional[str], float]


def _check_unique(category: str, units: Sequence[Unit]) -> None:
    names = [u.name for u in units]
    labels = [u.label for u in units]
    if len(set(names)) != len(names):
        raise ValueError(f"{category}: duplicated unit name")
    if len(set(labels)) != len(labels):
        raise ValueError(f"{category}: duplicated unit label")


def _linear(name: str, base: str, rows: Sequence[UnitRow]) -> Category:
    if not rows:
        raise ValueError(f"{name}: category without units")

    units = []
    for unit_name, label, factor in rows:
        factor = float(factor)
        if not math.isfinite(factor) or factor <= 0:
            raise ValueError(f"{name}: invalid factor {factor!r} for {unit_name!r}")
        units.append(Unit(unit_name, Linear(factor), label or unit_name))

    _check_unique(name, units)
    for unit in units:
        if unit.name == base and unit.descriptor.factor != 1.0:
            raise ValueError(f"{name}: base unit {base!r} must have factor 1")
    return Category(name, base, {u.name: u for u in units})


def _affine(name: str, base: str, rows: Sequence[Tuple[str, str, TemperatureScale]]) -> Category:
    units = [Unit(unit_name, Affine(scale), label) for unit_name, label, scale in rows]
    _check_unique(name, units)

    # As três escalas, cada uma exatamente uma vez
    scales = [u.descriptor.scale for u in units]
    if sorted(s.value for s in scales) != sorted(s.value for s in TemperatureScale):
        raise ValueError(f"{name}: temperature scales must be C, F and K exactly once")
    return Category(name, base, {u.name: u for u in units})


# Regras afins (exatas): escala -> Kelvin e Kelvin -> escala
_TO_KELVIN = {
    TemperatureScale.CELSIUS: lambda c: c + 273.15,
    TemperatureScale.FAHRENHEIT: lambda f: (f - 32) * (5 / 9) + 273.15,
    TemperatureScale.KELVIN: lambda k: k,
}

_FROM_KELVIN = {
    TemperatureScale.CELSIUS: lambda k: k - 273.15,
    TemperatureScale.FAHRENHEIT: lambda k: (k - 273.15) * 9 / 5 + 32,
    TemperatureScale.KELVIN: lambda k: k,
}


class UnitManager:
    """Gerencia a tabela de categorias e as conversões entre unidades."""

    # Ordem de declaração = ordem exibida na interface
    CATEGORIES: Mapping[str, Category] = MappingProxyType({c.name: c for c in (
        _linear("Force", "N", [
            ("µN", "µN (micronewton)", 1e-6),
            ("mN", "mN (millinewton)", 1e-3),
            ("N", "N (newton)", 1),
            ("kN", "kN (kilonewton)", 1e3),
            ("MN", "MN (meganewton)", 1e6),
            ("kgf", "kg (mass due to gravity)", 9.80665),
        ]),
        _linear("Pressure", "Pa", [
            ("Pa", "Pa (pascal)", 1),
            ("mbar", "mbar (millibar)", 100),
            ("bar", None, 100000),
            ("kPa", None, 1000),
            ("MPa", None, 1e6),
            ("atm", "atm (standard)", 101325),
            ("psi", None, 6894.757),
            ("torr", None, 133.322),
        ]),
        _linear("Length", "m", [
            ("Å", "Å (angstrom)", 1e-10),
            ("nm", "nm (nanometre)", 1e-9),
            ("µm", "µm (micrometre)", 1e-6),
            ("mm", "mm (millimetre)", 1e-3),
            ("cm", "cm (centimetre)", 1e-2),
            ("m", "m (metre)", 1),
            ("km", "km (kilometre)", 1e3),
            ("in", "in (inch)", 0.0254),
            ("ft", "ft (foot)", 0.3048),
            ("yd", "yd (yard)", 0.9144),
            ("mi", "mi (mile)", 1609.34),
            ("NM", "NM (nautical mile)", 1852),
        ]),
        _linear("Mass", "kg", [
            ("µg", "µg (microgram)", 1e-9),
            ("mg", "mg (milligram)", 1e-6),
            ("g", "g (gram)", 1e-3),
            ("kg", "kg (kilogram)", 1),
            ("t", "t (tonne)", 1000),
            ("lb", "lb (pound)", 0.453592),
            ("oz", "oz (ounce)", 0.0283495),
            ("st", "st (stone)", 6.35029),
        ]),
        _linear("Time", "s", [
            ("ns", "ns (nanosecond)", 1e-9),
            ("µs", "µs (microsecond)", 1e-6),
            ("ms", "ms (millisecond)", 1e-3),
            ("s", "s (second)", 1),
            ("min", "min (minute)", 60),
            ("h", "h (hour)", 3600),
            ("day", None, 86400),
            ("week", None, 604800),
            ("year", None, 31557600),  # Ano juliano
        ]),
        _affine("Temperature", "K", [
            ("C", "°C (Celsius)", TemperatureScale.CELSIUS),
            ("F", "°F (Fahrenheit)", TemperatureScale.FAHRENHEIT),
            ("K", "K (Kelvin)", TemperatureScale.KELVIN),
        ]),
        _linear("Energy", "J", [
            ("J", None, 1),
            ("kJ", None, 1e3),
            ("MJ", None, 1e6),
            ("GJ", None, 1e9),
            ("cal", None, 4.184),  # Caloria termoquímica
            ("kcal", None, 4184),
            ("Wh", None, 3600),
            ("kWh", None, 3.6e6),
            ("BTU", None, 1055.05585),
            ("eV", None, 1.602176634e-19),
            ("keV", None, 1.602176634e-16),
            ("MeV", None, 1.602176634e-13),
            ("GeV", None, 1.602176634e-10),
            ("amu", None, 1.492418e-10),  # Equivalente energético de 1 u
            ("erg", None, 1e-7),
            ("ft·lb", None, 1.3558179483314004),
        ]),
        _linear("Power", "W", [
            ("W", "W (watt)", 1),
            ("kW", "kW (kilowatt)", 1e3),
            ("MW", "MW (megawatt)", 1e6),
            ("hp", "hp (horsepower)", 745.7),
            ("BTU/hr", None, 0.29307107),
        ]),
        _linear("ElectricPotential", "V", [
            ("V", "V (volt)", 1),
            ("mV", "mV (millivolt)", 1e-3),
            ("kV", "kV (kilovolt)", 1e3),
        ]),
        _linear("ElectricCurrent", "A", [
            ("A", "A (ampere)", 1),
            ("mA", "mA (milliampere)", 1e-3),
        ]),
        _linear("ElectricResistance", "Ω", [
            ("Ω", "Ω (ohm)", 1),
            ("kΩ", "kΩ (kilo-ohm)", 1e3),
            ("MΩ", "MΩ (mega-ohm)", 1e6),
        ]),
        _linear("ElectricCharge", "C", [
            ("C", "C (coulomb)", 1),
            ("mAh", "mAh (milliamp-hour)", 3.6),
        ]),
        _linear("Area", "m²", [
            ("mm²", None, 1e-6),
            ("cm²", None, 1e-4),
            ("m²", None, 1),
            ("km²", None, 1e6),
            ("ft²", None, 0.092903),
            ("in²", None, 0.00064516),
            ("acre", None, 4046.86),
            ("hectare", None, 10000),
        ]),
        _linear("Volume", "m³", [
            ("mm³", None, 1e-9),
            ("cm³", None, 1e-6),
            ("m³", None, 1),
            ("L", "L (litre)", 1e-3),
            ("mL", "mL (millilitre)", 1e-6),
            ("gal", "gal (US gallon)", 0.00378541),
            ("gal (UK)", "gal (UK gallon)", 0.00454609),
            ("cup", "cup (US)", 0.000236588),
            ("pint", "pint (US)", 0.000473176),
        ]),
        _linear("Speed", "m/s", [
            ("m/s", None, 1),
            ("km/h", None, 0.277778),
            ("mph", None, 0.44704),
            ("knots", None, 0.514444),
            ("ft/s", None, 0.3048),
        ]),
        _linear("Density", "kg/m³", [
            ("kg/m³", None, 1),
            ("g/cm³", None, 1000),
            ("lb/ft³", None, 16.0185),
        ]),
        _linear("Angle", "rad", [
            ("rad", "rad (radian)", 1),
            ("deg", "° (degree)", math.pi / 180),
            ("gon", "gon (gradian)", math.pi / 200),
        ]),
        _linear("Frequency", "Hz", [
            ("Hz", "Hz (hertz)", 1),
            ("kHz", "kHz (kilohertz)", 1e3),
            ("MHz", "MHz (megahertz)", 1e6),
            ("GHz", "GHz (gigahertz)", 1e9),
        ]),
        _linear("AngularFrequency", "rad/s", [
            ("rad/s", "rad/s (radians per second)", 1),
            ("Hz", "Hz (hertz)", 2 * math.pi),
            ("kHz", "kHz (kilohertz)", 2 * math.pi * 1e3),
            ("MHz", "MHz (megahertz)", 2 * math.pi * 1e6),
            ("rpm", "rpm (revolutions per minute)", 2 * math.pi / 60),
        ]),
        _linear("MolarMass", "g/mol", [
            ("g/mol", None, 1),
            ("kg/mol", None, 1000),
            ("mg/mol", None, 1e-3),
            ("g/mmol", None, 1e3),
            ("kg/kmol", None, 1),
        ]),
        _linear("VolumetricFlowRate", "m³/s", [
            ("m³/s", "m³/s (cubic metre per second)", 1),
            ("L/s", "L/s (litre per second)", 1e-3),
            ("L/min", "L/min (litre per minute)", 1e-3 / 60),
            ("L/h", "L/h (litre per hour)", 1e-3 / 3600),
            ("gal/min", "gal/min (US gallons per minute)", 0.00378541 / 60),
            ("gal/h", "gal/h (US gallons per hour)", 0.00378541 / 3600),
            ("ft³/s", "ft³/s (cubic foot per second)", 0.0283168),
            ("ft³/min", "ft³/min (cubic foot per minute)", 0.0283168 / 60),
        ]),
        _linear("MassFlowRate", "kg/s", [
            ("kg/s", "kg/s (kilogram per second)", 1),
            ("kg/min", "kg/min (kilogram per minute)", 1 / 60),
            ("kg/h", "kg/h (kilogram per hour)", 1 / 3600),
            ("g/s", "g/s (gram per second)", 1e-3),
            ("g/min", "g/min (gram per minute)", 1e-3 / 60),
            ("lb/s", "lb/s (pound per second)", 0.453592),
            ("lb/min", "lb/min (pound per minute)", 0.453592 / 60),
        ]),
        _linear("DataSize", "B", [
            ("bit", None, 1 / 8),
            ("B", "Byte", 1),
            ("KB", None, 1024),  # Binário (1024^n)
            ("MB", None, 1024 ** 2),
            ("GB", None, 1024 ** 3),
            ("TB", None, 1024 ** 4),
            ("PB", None, 1024 ** 5),
            ("EB", None, 1024 ** 6),
            ("kB", None, 1000),  # Decimal (1000^n)
            ("MB (decimal)", None, 1e6),
            ("GB (decimal)", None, 1e9),
            ("TB (decimal)", None, 1e12),
        ]),
    )})

    @staticmethod
    def list_categories() -> List[str]:
        return list(UnitManager.CATEGORIES)

    @staticmethod
    def get_category(category: str) -> Category:
        try:
            return UnitManager.CATEGORIES[category]
        except (KeyError, TypeError):
            raise UnknownCategory(category) from None

    @staticmethod
    def list_units(category: str) -> List[str]:
        return list(UnitManager.get_category(category).units)

    @staticmethod
    def default_units(category: str) -> Tuple[str, str]:
        """Primeira e segunda unidades (ou a primeira duas vezes se houver só uma)."""
        names = UnitManager.list_units(category)
        return names[0], names[1] if len(names) > 1 else names[0]

    @staticmethod
    def swap(from_unit: str, to_unit: str) -> Tuple[str, str]:
        return to_unit, from_unit

    @staticmethod
    def parse_value(raw_value: str) -> float:
        """
        Converte o texto digitado em float.
        Aceita espaços nas pontas, sinal, ponto decimal e expoente.
        Texto vazio, não numérico, 'inf', 'nan' ou estouro -> InvalidNumber.
        """
        text = raw_value.strip() if isinstance(raw_value, str) else ""
        if not _NUMBER.fullmatch(text):
            raise InvalidNumber(raw_value)

        value = float(text)
        if not math.isfinite(value):
            raise InvalidNumber(raw_value, "out of range")
        return value

    @staticmethod
    def _resolve(category: Category, unit: str, side: str) -> Unit:
        found = category.find(unit) if isinstance(unit, str) else None
        if found is None:
            raise UnknownUnit(category.name, unit, side)
        return found

    @staticmethod
    def _apply(source: Unit, target: Unit, value: float) -> float:
        if source is target:
            return value

        src, dst = source.descriptor, target.descriptor
        if isinstance(src, Affine) and isinstance(dst, Affine):
            kelvin = _TO_KELVIN[src.scale](value)
            return _FROM_KELVIN[dst.scale](kelvin)
        if isinstance(src, Linear) and isinstance(dst, Linear):
            return value * src.factor / dst.factor
        raise TypeError(f"Cannot mix {type(src).__name__} and {type(dst).__name__} units")

    @staticmethod
    def convert_value(category: str, from_unit: str, to_unit: str, value: float) -> float:
        """Conversão numérica pura. Levanta ConversionError em caso de falha."""
        cat = UnitManager.get_category(category)
        source = UnitManager._resolve(cat, from_unit, "from")
        target = UnitManager._resolve(cat, to_unit, "to")
        if not math.isfinite(value):
            raise InvalidNumber(str(value))

        result = UnitManager._apply(source, target, value)
        if not math.isfinite(result):
            raise InvalidNumber(str(value), "result out of range")
        return result

    @staticmethod
    def convert(category: str, from_unit: str, to_unit: str, raw_value: str,
                mode: Optional[FormatMode] = None) -> ConversionResult:
        """
        Converte o texto digitado e formata para exibição.
        Nunca levanta os erros de conversão: eles voltam em result.error.
        Entrada vazia ('') devolve um resultado vazio, sem erro.
        """
        if raw_value == "":
            return ConversionResult()

        try:
            value = UnitManager.parse_value(raw_value)
            cat = UnitManager.get_category(category)
            converted = UnitManager.convert_value(category, from_unit, to_unit, value)
        except ConversionError as e:
            return ConversionResult(error=e)

        if mode is None:
            mode = FormatMode.FIXED if cat.is_affine else FormatMode.SIGNIFICANT

        text = format_value(converted, mode)
        target = cat.find(to_unit)
        return ConversionResult(
            value=converted,
            text=text,
            unit=target.label,
            standard_text=to_exponential(float(text)),
        )

    @staticmethod
    def convert_all(category: str, from_unit: str, value: float) -> Dict[str, float]:
        """Valor expresso em todas as unidades da categoria (tabela de conversão)."""
        cat = UnitManager.get_category(category)
        source = UnitManager._resolve(cat, from_unit, "from")
        if not math.isfinite(value):
            raise InvalidNumber(str(value))

        units = list(cat.units.values())
        if isinstance(source.descriptor, Linear):
            factors = np.array([u.descriptor.factor for u in units], dtype=float)
            values = value * source.descriptor.factor / factors
            return {u.name: (value if u is source else float(v)) for u, v in zip(units, values)}

        return {u.name: UnitManager._apply(source, u, value) for u in units}
