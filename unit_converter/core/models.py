# unit_converter/core/models.py
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from unit_converter.config import PLACEHOLDER


class TemperatureScale(Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"
    KELVIN = "K"


class FormatMode(Enum):
    SIGNIFICANT = "significant"  # 9 algarismos significativos
    FIXED = "fixed"              # 6 casas decimais


@dataclass(frozen=True)
class Linear:
    """Unidade proporcional: valor_base = valor * factor."""
    factor: float


@dataclass(frozen=True)
class Affine:
    """Escala de temperatura (zero deslocado, não cabe num fator)."""
    scale: TemperatureScale


UnitDescriptor = Union[Linear, Affine]


@dataclass(frozen=True)
class Unit:
    name: str
    descriptor: UnitDescriptor
    label: str = ""

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", self.name)


@dataclass(frozen=True)
class Category:
    name: str
    base_unit: str
    units: Mapping[str, Unit] = field(default_factory=dict)

    def __post_init__(self):
        # Tabela somente leitura depois de construída
        object.__setattr__(self, "units", MappingProxyType(dict(self.units)))

    @property
    def is_affine(self) -> bool:
        return any(isinstance(u.descriptor, Affine) for u in self.units.values())

    def find(self, key: str) -> Optional[Unit]:
        """Procura pelo nome curto ('km') e depois pelo rótulo ('km (kilometre)')."""
        unit = self.units.get(key)
        if unit is not None:
            return unit
        for candidate in self.units.values():
            if candidate.label == key:
                return candidate
        return None


# --- ERROS ---

class ConversionError(ValueError):
    """Base de todas as falhas recuperáveis de conversão."""


class InvalidNumber(ConversionError):
    def __init__(self, raw_value: str, reason: str = "not a finite number"):
        self.raw_value = raw_value
        super().__init__(f"Invalid number {raw_value!r}: {reason}")


class UnknownCategory(ConversionError):
    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Unknown category: {category!r}")


class UnknownUnit(ConversionError):
    def __init__(self, category: str, unit: str, side: str):
        self.category = category
        self.unit = unit
        self.side = side  # 'from' ou 'to'
        super().__init__(f"Unknown {side}-unit {unit!r} in category {category!r}")


@dataclass(frozen=True)
class ConversionResult:
    value: Optional[float] = None
    text: str = ""
    unit: str = ""
    standard_text: str = ""
    error: Optional[ConversionError] = None
    placeholder: str = PLACEHOLDER

    @property
    def ok(self) -> bool:
        return self.value is not None and self.error is None

    @property
    def is_empty(self) -> bool:
        """Entrada vazia: ainda não há resultado (não é erro)."""
        return self.value is None and self.error is None

    @property
    def display(self) -> str:
        if not self.ok:
            return self.placeholder
        return f"{self.text} {self.unit}"

    @property
    def standard_form(self) -> str:
        if not self.ok:
            return ""
        return f"{self.standard_text} {self.unit}"
