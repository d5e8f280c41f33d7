"""OpenWeatherMap client with a small per-city TTL cache."""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from typing import Any

import httpx

from smarthome.numeric import round_half_up
from smarthome.weather.models import ForecastDay, TemperatureRange, WeatherData

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org"
DEFAULT_CITY = "Singapore"
DEFAULT_CACHE_TTL = 600
FORECAST_DAYS = 5


class WeatherClient:
    """Fetches current conditions and a daily forecast in metric units."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        cache_ttl_seconds: float = DEFAULT_CACHE_TTL,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._cache_ttl = cache_ttl_seconds
        self._cache: dict[tuple[str, str], tuple[float, Any]] = {}
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(15.0, connect=5.0),
            )
        return self._client

    def _cached(self, kind: str, city: str) -> Any | None:
        entry = self._cache.get((kind, city.lower()))
        if entry and time.monotonic() - entry[0] < self._cache_ttl:
            return entry[1]
        return None

    def _store(self, kind: str, city: str, value: Any) -> None:
        now = time.monotonic()
        expired = [k for k, (stamp, _) in self._cache.items() if now - stamp >= self._cache_ttl]
        for key in expired:
            del self._cache[key]
        self._cache[(kind, city.lower())] = (now, value)

    async def _get(self, path: str, city: str) -> dict[str, Any]:
        client = await self._get_client()
        resp = await client.get(
            path, params={"q": city, "appid": self._api_key, "units": "metric"},
        )
        if resp.status_code != 200:
            raise RuntimeError(
                f"Weather API error ({resp.status_code}) for {city!r}: {resp.text[:200]}"
            )
        try:
            return resp.json()
        except ValueError:
            raise RuntimeError("Weather API returned non-JSON response") from None

    async def current(self, city: str = DEFAULT_CITY) -> WeatherData:
        """Current conditions for *city*."""
        cached = self._cached("current", city)
        if cached is not None:
            return cached

        data = await self._get("/data/2.5/weather", city)
        try:
            weather = WeatherData(
                temperature=round_half_up(data["main"]["temp"]),
                feels_like=round_half_up(data["main"]["feels_like"]),
                humidity=data["main"]["humidity"],
                pressure=data["main"].get("pressure", 0),
                wind_speed=data.get("wind", {}).get("speed", 0),
                description=data["weather"][0]["description"],
                icon=data["weather"][0]["icon"],
                sunrise=data.get("sys", {}).get("sunrise", 0),
                sunset=data.get("sys", {}).get("sunset", 0),
            )
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as exc:
            raise RuntimeError(f"Unexpected weather payload: missing {exc}") from exc

        self._store("current", city, weather)
        logger.debug("Weather for %s: %.0f°C, %.0f%%", city, weather.temperature, weather.humidity)
        return weather

    async def forecast(self, city: str = DEFAULT_CITY) -> list[ForecastDay]:
        """Up to five daily summaries built from the 3-hourly forecast."""
        cached = self._cached("forecast", city)
        if cached is not None:
            return cached

        data = await self._get("/data/2.5/forecast", city)
        try:
            by_date: dict[str, list[dict]] = defaultdict(list)
            for item in data.get("list", []):
                by_date[item["dt_txt"].split(" ")[0]].append(item)

            days: list[ForecastDay] = []
            for date, items in by_date.items():
                temps = [i["main"]["temp"] for i in items]
                humidities = [i["main"]["humidity"] for i in items]
                days.append(
                    ForecastDay(
                        date=date,
                        temperature=TemperatureRange(
                            min=round_half_up(min(temps)),
                            max=round_half_up(max(temps)),
                            avg=round_half_up(sum(temps) / len(temps)),
                        ),
                        humidity=round_half_up(sum(humidities) / len(humidities)),
                        description=items[0]["weather"][0]["description"],
                        icon=items[0]["weather"][0]["icon"],
                    )
                )
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as exc:
            raise RuntimeError(f"Unexpected forecast payload: {exc!r}") from exc

        days = days[:FORECAST_DAYS]
        self._store("forecast", city, days)
        return days

    def clear_cache(self) -> None:
        self._cache.clear()

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
