# unit_converter/core/formatting.py
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Tuple

from unit_converter.config import FIXED_DECIMALS, SIGNIFICANT_DIGITS, STANDARD_FORM_DIGITS
from unit_converter.core.models import FormatMode

# Precisão suficiente para qualquer float (até ~1.8e308) sem arredondar antes da hora
_EXACT = Context(prec=800)


def _sign(value: float) -> str:
    # -0.0 não leva sinal
    return "-" if value < 0 else ""


def _exponent_text(mantissa: str, exponent: int) -> str:
    # Expoente sem zeros à esquerda: 1.5e+3, não 1.5e+03
    sign = "+" if exponent >= 0 else "-"
    return f"{mantissa}e{sign}{abs(exponent)}"


def _significant(value: float, digits: int) -> Tuple[str, int]:
    """
    Arredonda |value| para `digits` algarismos significativos.
    Empate sobe (como o navegador), não vai para o par como o format() do Python.
    Retorna (algarismos, expoente decimal do primeiro algarismo).
    """
    magnitude = Decimal(value).copy_abs()  # Decimal(float) é exato
    if magnitude.is_zero():
        return "0" * digits, 0

    exponent = magnitude.adjusted()
    quantum = Decimal((0, (1,), exponent - digits + 1))
    rounded = magnitude.quantize(quantum, rounding=ROUND_HALF_UP, context=_EXACT)
    coefficient = "".join(str(d) for d in rounded.as_tuple().digits)

    # 9.9999... virou 10.000...: um algarismo a mais
    if len(coefficient) > digits:
        coefficient, exponent = coefficient[:digits], exponent + 1
    return coefficient, exponent


def _mantissa(coefficient: str) -> str:
    if len(coefficient) == 1:
        return coefficient
    return f"{coefficient[0]}.{coefficient[1:]}"


def to_precision(value: float, digits: int = SIGNIFICANT_DIGITS) -> str:
    """
    Mesmo formato do toPrecision() do navegador:
    notação fixa enquanto -6 <= expoente < digits, científica fora disso.
    Zeros à direita são mantidos (1.5 -> '1.50000000').
    """
    coefficient, exponent = _significant(value, digits)
    sign = _sign(value)

    if exponent < -6 or exponent >= digits:
        return sign + _exponent_text(_mantissa(coefficient), exponent)
    if exponent == digits - 1:
        return sign + coefficient
    if exponent >= 0:
        return f"{sign}{coefficient[:exponent + 1]}.{coefficient[exponent + 1:]}"
    return f"{sign}0.{'0' * (-exponent - 1)}{coefficient}"


def to_fixed(value: float, decimals: int = FIXED_DECIMALS) -> str:
    magnitude = Decimal(value).copy_abs()
    quantum = Decimal((0, (1,), -decimals))
    rounded = magnitude.quantize(quantum, rounding=ROUND_HALF_UP, context=_EXACT)
    return f"{_sign(value)}{rounded:f}"


def to_exponential(value: float, digits: int = STANDARD_FORM_DIGITS) -> str:
    """Forma padrão (notação científica) usada na linha 'Standard form'."""
    coefficient, exponent = _significant(value, digits + 1)
    return _sign(value) + _exponent_text(_mantissa(coefficient), exponent)


def format_value(value: float, mode: FormatMode) -> str:
    if mode is FormatMode.FIXED:
        return to_fixed(value)
    if mode is FormatMode.SIGNIFICANT:
        return to_precision(value)
    raise ValueError(f"Unsupported format mode: {mode!r}")
