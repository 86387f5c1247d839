# connects command-line input to the converter and the aggregator and prints plain integer results.

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional
from .client import WeatherAPIClient, WeatherAPIError
from .config import Settings
from .converter import ConversionError, convert_temperature
from .service import EmptyAggregationError, aggregate_readings, average_max_temp_for_city
from .units import TemperatureUnit

logger = logging.getLogger(__name__)

# be explicit in queries to avoid provider geocoding ambiguity
CITIES = {
    "Salt Lake City": "Salt Lake City, UT",
    "Los Angeles": "Los Angeles, CA",
    "Boise": "Boise, ID",
}


def _unit(text: str) -> TemperatureUnit:
    try:
        return TemperatureUnit.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="terratemp", description="Convert and average milli-unit temperatures.")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_convert = sub.add_parser("convert", help="convert a milli-unit value between scales")
    p_convert.add_argument("value", type=int)
    p_convert.add_argument("from_unit", type=_unit)
    p_convert.add_argument("to_unit", type=_unit)

    p_average = sub.add_parser("average", help="average terrestrial readings, printed in milli-celsius")
    p_average.add_argument("values", type=int, nargs="+")
    p_average.add_argument("--unit", type=_unit, default=None, help="unit of the readings (default: TERRATEMP_UNIT or mC)")

    p_forecast = sub.add_parser("forecast", help="average forecast daily max temperature per city")
    p_forecast.add_argument("cities", nargs="*", help="city queries (default: the built-in city list)")
    p_forecast.add_argument("--days", type=int, default=None)
    return parser


def _cmd_convert(args, settings: Settings) -> int:
    try:
        print(convert_temperature(args.value, args.from_unit, args.to_unit))
    except ConversionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def _cmd_average(args, settings: Settings) -> int:
    unit = args.unit or settings.default_unit
    aggregator, rejected = aggregate_readings(args.values, unit)
    for value, exc in rejected:
        print(f"rejected {value} {unit.value}: {exc}", file=sys.stderr)
    try:
        print(aggregator.average())
    except EmptyAggregationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def _cmd_forecast(args, settings: Settings) -> int:
    cities = {c: c for c in args.cities} if args.cities else CITIES
    try:
        client = WeatherAPIClient(settings)
        for city, query in cities.items():
            r = average_max_temp_for_city(client, city, query, days=args.days)
            print(f"{r.city} Average Max Temp: {r.average} mC ({r.accepted} readings)")
    except (WeatherAPIError, ValueError) as exc:
        # ValueError covers bad payloads and EmptyAggregationError
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


COMMANDS = {
    "convert": _cmd_convert,
    "average": _cmd_average,
    "forecast": _cmd_forecast,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    logger.debug("Running %s (default unit %s, days %d)", args.command, settings.default_unit.value, settings.days)
    return COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
