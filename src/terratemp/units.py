# the closed set of supported scales, every value is an integer count of thousandths of a degree

from __future__ import annotations
from enum import Enum


class TemperatureUnit(Enum):
    MILLI_CELSIUS = "mC"
    MILLI_FAHRENHEIT = "mF"
    MILLI_KELVIN = "mK"

    @classmethod
    def parse(cls, text: str) -> "TemperatureUnit":
        # accepts member names, symbols (mC) and scale names (celsius, C) in any case
        key = text.strip().lower()
        for unit in cls:
            if key in _ALIASES[unit]:
                return unit
        raise ValueError(f"Unknown temperature unit {text!r} (expected one of mC, mF, mK)")


_ALIASES = {
    TemperatureUnit.MILLI_CELSIUS: {"milli_celsius", "mc", "c", "celsius"},
    TemperatureUnit.MILLI_FAHRENHEIT: {"milli_fahrenheit", "mf", "f", "fahrenheit"},
    TemperatureUnit.MILLI_KELVIN: {"milli_kelvin", "mk", "k", "kelvin"},
}
