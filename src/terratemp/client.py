# boundary for external i/o: a source of real readings to feed the aggregator.
# http, keys and retries live here so the conversion core stays pure and testable

from __future__ import annotations
import logging
from typing import Any, Dict, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from .config import MAX_FORECAST_DAYS, Settings

logger = logging.getLogger(__name__)


class WeatherAPIError(RuntimeError):
    # single error type for everything that goes wrong talking to the provider
    pass


class WeatherAPIClient:
    BASE_URL = "https://api.weatherapi.com/v1/forecast.json"
    USER_AGENT = "terratemp/0.1"

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or Settings.from_env()
        if not self.settings.api_key:
            # fail early, a missing key otherwise shows up as a confusing 401
            raise WeatherAPIError("WEATHERAPI_KEY not set")
        self._session_obj = session

    def _build_session(self) -> requests.Session:
        retry = Retry(
            total=self.settings.max_retries,
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        s = requests.Session()
        s.headers.update({"User-Agent": self.USER_AGENT})
        adapter = HTTPAdapter(max_retries=retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    @property
    def session(self) -> requests.Session:
        if self._session_obj is None:
            self._session_obj = self._build_session()
        return self._session_obj

    def get_city_forecast(self, city_query: str, days: Optional[int] = None) -> Dict[str, Any]:
        days = self.settings.days if days is None else days
        if not (1 <= days <= MAX_FORECAST_DAYS):
            raise WeatherAPIError(f"'days' must be between 1 and {MAX_FORECAST_DAYS} (got {days})")

        params = {
            "key": self.settings.api_key,
            "q": city_query,
            "days": days,
            "aqi": "no",
            "alerts": "no",
        }
        logger.debug("Fetching %d-day forecast for %r", days, city_query)

        try:
            resp = self.session.get(self.BASE_URL, params=params, timeout=self.settings.timeout)
        except requests.RequestException as exc:
            raise WeatherAPIError(f"Request error for {city_query!r}: {exc}") from exc

        if resp.status_code >= 400:
            snippet = (resp.text or "")[:300]
            raise WeatherAPIError(f"HTTP {resp.status_code} for {city_query!r} (days={days}). Body: {snippet}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise WeatherAPIError(f"Invalid JSON for {city_query!r}: {exc}") from exc

        try:
            _ = data["forecast"]["forecastday"]
        except (KeyError, TypeError) as exc:
            raise WeatherAPIError("Unexpected API shape: missing forecast.forecastday") from exc

        return data
