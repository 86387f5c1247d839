# value objects kept explicit and immutable, shared by the service and the cli

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
from .converter import convert_temperature
from .units import TemperatureUnit

# generous bounds for weather-caused temperatures, in milli-degrees celsius
TERRESTRIAL_MIN = -100000
TERRESTRIAL_MAX = 100000


@dataclass(frozen=True)
class Temperature:
    # canonical value in milli-degrees celsius, the only unit ever stored
    temperature: int

    def __post_init__(self):
        # identity conversion still runs the 32-bit range check
        convert_temperature(self.temperature, TemperatureUnit.MILLI_CELSIUS, TemperatureUnit.MILLI_CELSIUS)

    @classmethod
    def new(cls, value: int, unit: TemperatureUnit) -> "Temperature":
        # conversion errors propagate unchanged; nothing is clamped
        return cls(temperature=convert_temperature(value, unit, TemperatureUnit.MILLI_CELSIUS))

    def value_in(self, unit: TemperatureUnit) -> int:
        return convert_temperature(self.temperature, TemperatureUnit.MILLI_CELSIUS, unit)

    def is_terrestrial(self) -> bool:
        # true if the temperature (caused only by the weather) can be found on Earth
        return TERRESTRIAL_MIN <= self.temperature <= TERRESTRIAL_MAX


@dataclass(frozen=True)
class CityAverage:
    # output value object used by the cli forecast command
    city: str
    average: int
    accepted: int
    rejected: Tuple[Tuple[int, str], ...] = ()
