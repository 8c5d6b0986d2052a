# unit_converter/ui/state.py
from dataclasses import dataclass

from unit_converter.config import DEFAULT_CATEGORY, DEFAULT_VALUE
from unit_converter.core.models import ConversionResult
from unit_converter.core.units import UnitManager


@dataclass
class ConverterState:
    """
    Estado da janela (categoria ativa, unidades e texto digitado),
    sem depender do Tk. A interface só lê e escreve aqui.
    """
    category: str
    from_unit: str
    to_unit: str
    raw_value: str = DEFAULT_VALUE

    @classmethod
    def initial(cls, category: str = DEFAULT_CATEGORY, raw_value: str = DEFAULT_VALUE) -> "ConverterState":
        from_unit, to_unit = UnitManager.default_units(category)
        return cls(category, from_unit, to_unit, raw_value)

    def set_category(self, category: str) -> None:
        # Troca de categoria sempre reseta as unidades (1ª e 2ª da lista)
        from_unit, to_unit = UnitManager.default_units(category)
        self.category = category
        self.from_unit, self.to_unit = from_unit, to_unit

    def swap_units(self) -> None:
        self.from_unit, self.to_unit = UnitManager.swap(self.from_unit, self.to_unit)

    def result(self) -> ConversionResult:
        return UnitManager.convert(self.category, self.from_unit, self.to_unit, self.raw_value)
