# pure conversion arithmetic between the three milli-unit scales.
# python ints never overflow, so every formula runs "wide" and the result is
# narrowed back to signed 32 bit afterwards; narrowing is where range errors come from.

from __future__ import annotations
from typing import Callable, Dict
from .units import TemperatureUnit

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1

# offsets in milli-degrees
FREEZING_POINT_F = 32000
ZERO_CELSIUS_K = 273150


class ConversionError(ValueError):
    # base for results that do not fit in signed 32 bit; raw_value is the wide result
    def __init__(self, raw_value: int, message: str):
        super().__init__(message)
        self.raw_value = raw_value


class TooLowError(ConversionError):
    def __init__(self, raw_value: int):
        super().__init__(raw_value, f"Temperature {raw_value} is too low to be converted to this unit")


class TooHighError(ConversionError):
    def __init__(self, raw_value: int):
        super().__init__(raw_value, f"Temperature {raw_value} is too high to be converted to this unit")


def trunc_div(numerator: int, denominator: int) -> int:
    # integer division truncating toward zero (python's // floors)
    q = abs(numerator) // denominator
    return q if numerator >= 0 else -q


def _narrow(value: int) -> int:
    if value < I32_MIN:
        raise TooLowError(value)
    if value > I32_MAX:
        raise TooHighError(value)
    return value


Formula = Callable[[int], int]

# one table per target unit, each keyed by every source unit
_TO_MILLI_CELSIUS: Dict[TemperatureUnit, Formula] = {
    TemperatureUnit.MILLI_CELSIUS: lambda v: v,
    TemperatureUnit.MILLI_FAHRENHEIT: lambda v: trunc_div((v - FREEZING_POINT_F) * 5, 9),
    TemperatureUnit.MILLI_KELVIN: lambda v: v - ZERO_CELSIUS_K,
}

_TO_MILLI_FAHRENHEIT: Dict[TemperatureUnit, Formula] = {
    TemperatureUnit.MILLI_CELSIUS: lambda v: trunc_div(v * 9, 5) + FREEZING_POINT_F,
    TemperatureUnit.MILLI_FAHRENHEIT: lambda v: v,
    TemperatureUnit.MILLI_KELVIN: lambda v: trunc_div((v - ZERO_CELSIUS_K) * 9, 5) + FREEZING_POINT_F,
}

_TO_MILLI_KELVIN: Dict[TemperatureUnit, Formula] = {
    TemperatureUnit.MILLI_CELSIUS: lambda v: v + ZERO_CELSIUS_K,
    TemperatureUnit.MILLI_FAHRENHEIT: lambda v: trunc_div((v - FREEZING_POINT_F) * 5, 9) + ZERO_CELSIUS_K,
    TemperatureUnit.MILLI_KELVIN: lambda v: v,
}

CONVERSIONS: Dict[TemperatureUnit, Dict[TemperatureUnit, Formula]] = {
    TemperatureUnit.MILLI_CELSIUS: _TO_MILLI_CELSIUS,
    TemperatureUnit.MILLI_FAHRENHEIT: _TO_MILLI_FAHRENHEIT,
    TemperatureUnit.MILLI_KELVIN: _TO_MILLI_KELVIN,
}


def check_conversion_table(table: Dict[TemperatureUnit, Dict[TemperatureUnit, Formula]]) -> None:
    # every (source, target) pair must have a formula; a new unit without one fails at import
    missing = [
        (source.name, target.name)
        for target in TemperatureUnit
        for source in TemperatureUnit
        if source not in table.get(target, {})
    ]
    if missing:
        raise RuntimeError(f"Conversion table is missing (from, to) pairs: {missing}")


check_conversion_table(CONVERSIONS)


def convert_temperature(value: int, from_unit: TemperatureUnit, to_unit: TemperatureUnit) -> int:
    # raises TooLowError / TooHighError when the value or the result leaves signed 32 bit
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"temperature must be an int (got {type(value).__name__})")
    formula = CONVERSIONS[TemperatureUnit(to_unit)][TemperatureUnit(from_unit)]
    return _narrow(formula(_narrow(value)))
