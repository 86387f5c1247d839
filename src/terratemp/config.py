# runtime settings read from the environment.
# a local .env file is honoured for development; in production the variables are injected by the platform

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional
from dotenv import find_dotenv, load_dotenv
from .units import TemperatureUnit

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_DAYS = 6
MAX_FORECAST_DAYS = 10  # WeatherAPI caps the forecast at 10 days


def _read(env: Mapping[str, str], name: str, cast, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r} ({exc})") from exc


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    days: int = DEFAULT_DAYS
    default_unit: TemperatureUnit = TemperatureUnit.MILLI_CELSIUS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        if env is None:
            load_dotenv(find_dotenv(usecwd=True))
            env = os.environ

        days = _read(env, "TERRATEMP_DAYS", int, DEFAULT_DAYS)
        if not (1 <= days <= MAX_FORECAST_DAYS):
            raise ValueError(f"Invalid value for TERRATEMP_DAYS: must be between 1 and {MAX_FORECAST_DAYS} (got {days})")

        return cls(
            api_key=env.get("WEATHERAPI_KEY") or None,
            timeout=_read(env, "TERRATEMP_TIMEOUT", float, DEFAULT_TIMEOUT),
            max_retries=_read(env, "TERRATEMP_MAX_RETRIES", int, DEFAULT_MAX_RETRIES),
            days=days,
            default_unit=_read(env, "TERRATEMP_UNIT", TemperatureUnit.parse, TemperatureUnit.MILLI_CELSIUS),
        )
