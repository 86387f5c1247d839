# business rules: accept only terrestrial readings and average them in milli-celsius.
# the aggregator itself is pure; the helpers below wire it to raw readings and the weather client

from __future__ import annotations
import logging
from typing import Iterable, List, Tuple
from .client import WeatherAPIClient
from .converter import ConversionError, trunc_div
from .models import CityAverage, Temperature
from .units import TemperatureUnit

logger = logging.getLogger(__name__)


class AggregationError(ValueError):
    pass


class AggregationConversionError(AggregationError):
    # the submitted value could not be represented; the converter error is kept as cause
    def __init__(self, cause: ConversionError):
        super().__init__(str(cause))
        self.cause = cause


class NotTerrestrialError(AggregationError):
    def __init__(self, temperature: Temperature):
        super().__init__(f"Submitted temperature {temperature.temperature} mC is probably not terrestrial")
        self.temperature = temperature


class EmptyAggregationError(AggregationError):
    def __init__(self):
        super().__init__("Cannot average an aggregator that holds no temperatures")


class TemperatureAggregator:
    # insertion order and duplicates are kept; a rejected reading is never stored
    def __init__(self):
        self._temperatures: List[Temperature] = []

    def __len__(self) -> int:
        return len(self._temperatures)

    @property
    def temperatures(self) -> Tuple[Temperature, ...]:
        return tuple(self._temperatures)

    def add(self, value: int, unit: TemperatureUnit) -> None:
        try:
            temperature = Temperature.new(value, unit)
        except ConversionError as exc:
            raise AggregationConversionError(exc) from exc
        if not temperature.is_terrestrial():
            raise NotTerrestrialError(temperature)
        self._temperatures.append(temperature)

    def average(self) -> int:
        # integer mean in milli-celsius, truncated toward zero
        if not self._temperatures:
            raise EmptyAggregationError()
        total = sum(t.value_in(TemperatureUnit.MILLI_CELSIUS) for t in self._temperatures)
        return trunc_div(total, len(self._temperatures))


def aggregate_readings(
    readings: Iterable[int], unit: TemperatureUnit
) -> Tuple[TemperatureAggregator, List[Tuple[int, AggregationError]]]:
    # feed every reading, collecting the rejected ones instead of stopping at the first
    aggregator = TemperatureAggregator()
    rejected: List[Tuple[int, AggregationError]] = []
    for value in readings:
        try:
            aggregator.add(value, unit)
        except AggregationError as exc:
            logger.info("Rejected reading %d %s: %s", value, unit.value, exc)
            rejected.append((value, exc))
    return aggregator, rejected


# transform raw provider payload into milli-celsius readings
def parse_readings(data) -> List[int]:
    # weatherAPI shape: data["forecast"]["forecastday"][i]["day"]["maxtemp_c"]
    try:
        days = data["forecast"]["forecastday"]
        return [round(float(d["day"]["maxtemp_c"]) * 1000) for d in days]
    except (KeyError, TypeError) as exc:
        raise ValueError("Unsupported payload shape for parse_readings()") from exc
    except (ValueError, OverflowError) as exc:
        # NaN, Infinity or non-numeric strings in maxtemp_c
        raise ValueError(f"Invalid maxtemp_c in forecast payload: {exc}") from exc


# single city path: fetch -> parse -> aggregate
def average_max_temp_for_city(client: WeatherAPIClient, city: str, query: str, days: int | None = None) -> CityAverage:
    payload = client.get_city_forecast(query, days=days)
    aggregator, rejected = aggregate_readings(parse_readings(payload), TemperatureUnit.MILLI_CELSIUS)
    return CityAverage(
        city=city,
        average=aggregator.average(),
        accepted=len(aggregator),
        rejected=tuple((value, str(exc)) for value, exc in rejected),
    )
