# unit tests for the aggregator and the pure helpers, independent of live http

import json
from pathlib import Path
import pytest
from terratemp.converter import I32_MAX, TooHighError
from terratemp.service import (
    AggregationConversionError,
    AggregationError,
    EmptyAggregationError,
    NotTerrestrialError,
    TemperatureAggregator,
    aggregate_readings,
    average_max_temp_for_city,
    parse_readings,
)
from terratemp.units import TemperatureUnit

C = TemperatureUnit.MILLI_CELSIUS
F = TemperatureUnit.MILLI_FAHRENHEIT
K = TemperatureUnit.MILLI_KELVIN

DATA = Path(__file__).parent / "data" / "example_city.json"


def load_payload():
    return json.loads(DATA.read_text())


def test_average_of_two_readings():
    agg = TemperatureAggregator()
    agg.add(0, C)
    agg.add(40000, C)
    assert agg.average() == 20000


def test_average_mixes_units():
    agg = TemperatureAggregator()
    agg.add(32000, F)  # 0 C
    agg.add(283150, K)  # 10 C
    agg.add(20000, C)
    assert agg.average() == 10000


def test_average_truncates_toward_zero():
    agg = TemperatureAggregator()
    agg.add(-1, C)
    agg.add(-2, C)
    # -1.5 truncates to -1, not -2
    assert agg.average() == -1
    agg.add(4, C)
    assert agg.average() == 0


def test_add_rejects_extremes_without_storing():
    agg = TemperatureAggregator()
    agg.add(10000, C)
    with pytest.raises(NotTerrestrialError) as info:
        agg.add(200000, C)
    assert info.value.temperature.temperature == 200000
    assert len(agg) == 1
    assert agg.average() == 10000


def test_add_wraps_conversion_errors():
    agg = TemperatureAggregator()
    with pytest.raises(AggregationConversionError) as info:
        agg.add(I32_MAX + 1, C)
    assert isinstance(info.value.cause, TooHighError)
    assert info.value.__cause__ is info.value.cause
    assert len(agg) == 0


def test_conversion_failure_inside_add():
    # kelvin to celsius shifts down by 273150, out of range at the bottom
    agg = TemperatureAggregator()
    with pytest.raises(AggregationError):
        agg.add(-(2**31), K)
    assert len(agg) == 0


def test_average_on_empty_aggregator_raises():
    with pytest.raises(EmptyAggregationError):
        TemperatureAggregator().average()


def test_insertion_order_and_duplicates_are_kept():
    agg = TemperatureAggregator()
    for value in (5000, -3000, 5000):
        agg.add(value, C)
    assert [t.temperature for t in agg.temperatures] == [5000, -3000, 5000]
    assert len(agg) == 3


def test_temperatures_snapshot_does_not_expose_storage():
    agg = TemperatureAggregator()
    agg.add(1000, C)
    snapshot = agg.temperatures
    agg.add(2000, C)
    assert len(snapshot) == 1


def test_aggregate_readings_collects_rejections():
    agg, rejected = aggregate_readings([0, 40000, 200000, -150000], C)
    assert agg.average() == 20000
    assert [value for value, _ in rejected] == [200000, -150000]
    assert all(isinstance(exc, NotTerrestrialError) for _, exc in rejected)


def test_parse_readings_example():
    # the fixture mirrors the weatherAPI payload shape
    readings = parse_readings(load_payload())
    # today + next 5 days = 6 items
    assert len(readings) == 6
    assert readings[0] == 31200
    assert all(isinstance(r, int) for r in readings)


def test_parse_readings_rejects_unknown_shape():
    with pytest.raises(ValueError):
        parse_readings({"consolidated_weather": []})
    with pytest.raises(ValueError):
        parse_readings(None)


class FakeClient:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def get_city_forecast(self, query, days=None):
        self.calls.append((query, days))
        return self.payload


def test_average_max_temp_for_city():
    client = FakeClient(load_payload())
    result = average_max_temp_for_city(client, "Boise", "Boise, ID", days=6)
    assert client.calls == [("Boise, ID", 6)]
    assert result.city == "Boise"
    assert result.accepted == 6
    assert result.rejected == ()
    # (31200 + 29800 + 33000 + 35500 + 30100 + 28400) / 6
    assert result.average == 31333


def test_average_max_temp_for_city_reports_rejected_days():
    payload = load_payload()
    payload["forecast"]["forecastday"][0]["day"]["maxtemp_c"] = 150.0
    result = average_max_temp_for_city(FakeClient(payload), "Boise", "Boise, ID")
    assert result.accepted == 5
    assert result.rejected[0][0] == 150000
    assert "not terrestrial" in result.rejected[0][1]


@pytest.mark.parametrize("max_temp", [float("inf"), float("-inf"), float("nan"), "warm"])
def test_parse_readings_rejects_non_finite_values(max_temp):
    payload = {"forecast": {"forecastday": [{"day": {"maxtemp_c": max_temp}}]}}
    with pytest.raises(ValueError, match="Invalid maxtemp_c"):
        parse_readings(payload)
