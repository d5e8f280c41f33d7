"""Tests for the OpenWeatherMap client."""

from __future__ import annotations

import re

import pytest

from smarthome.weather.client import WeatherClient

CURRENT_URL = re.compile(r"https://api\.openweathermap\.org/data/2\.5/weather\?.*")
FORECAST_URL = re.compile(r"https://api\.openweathermap\.org/data/2\.5/forecast\?.*")

CURRENT_PAYLOAD = {
    "main": {"temp": 31.6, "feels_like": 36.2, "humidity": 74, "pressure": 1008},
    "wind": {"speed": 3.1},
    "weather": [{"description": "scattered clouds", "icon": "03d"}],
    "sys": {"sunrise": 1717195000, "sunset": 1717239000},
}


def _slot(date: str, hour: str, temp: float, humidity: float) -> dict:
    return {
        "dt_txt": f"{date} {hour}",
        "main": {"temp": temp, "humidity": humidity},
        "weather": [{"description": "light rain", "icon": "10d"}],
    }


@pytest.mark.asyncio
async def test_current_weather(httpx_mock) -> None:
    httpx_mock.add_response(url=CURRENT_URL, json=CURRENT_PAYLOAD)

    client = WeatherClient(api_key="owm-key")
    weather = await client.current("Singapore")
    await client.close()

    request = httpx_mock.get_request()
    assert request.url.params["q"] == "Singapore"
    assert request.url.params["units"] == "metric"
    assert request.url.params["appid"] == "owm-key"
    assert weather.temperature == 32
    assert weather.feels_like == 36
    assert weather.humidity == 74
    assert weather.wind_speed == 3.1
    assert weather.description == "scattered clouds"


@pytest.mark.asyncio
async def test_current_weather_is_cached(httpx_mock) -> None:
    httpx_mock.add_response(url=CURRENT_URL, json=CURRENT_PAYLOAD)

    client = WeatherClient(api_key="owm-key")
    first = await client.current("Singapore")
    second = await client.current("singapore")
    await client.close()

    assert first == second
    assert len(httpx_mock.get_requests()) == 1


@pytest.mark.asyncio
async def test_error_status_raises(httpx_mock) -> None:
    httpx_mock.add_response(url=CURRENT_URL, status_code=401, json={"message": "Invalid API key"})

    client = WeatherClient(api_key="bad")
    with pytest.raises(RuntimeError, match="401"):
        await client.current("Singapore")
    await client.close()


@pytest.mark.asyncio
async def test_malformed_payload_raises(httpx_mock) -> None:
    httpx_mock.add_response(url=CURRENT_URL, json={"cod": 200})

    client = WeatherClient(api_key="owm-key")
    with pytest.raises(RuntimeError, match="Unexpected weather payload"):
        await client.current("Singapore")
    await client.close()


@pytest.mark.asyncio
async def test_forecast_groups_by_day(httpx_mock) -> None:
    slots = [
        _slot("2024-06-01", "12:00:00", 30.0, 70),
        _slot("2024-06-01", "15:00:00", 32.0, 60),
        _slot("2024-06-02", "00:00:00", 26.0, 80),
    ]
    for day in range(3, 8):
        slots.append(_slot(f"2024-06-0{day}", "12:00:00", 29.0, 75))
    httpx_mock.add_response(url=FORECAST_URL, json={"list": slots})

    client = WeatherClient(api_key="owm-key")
    days = await client.forecast("Singapore")
    await client.close()

    assert len(days) == 5
    assert days[0].date == "2024-06-01"
    assert days[0].temperature.min == 30
    assert days[0].temperature.max == 32
    assert days[0].temperature.avg == 31
    assert days[0].humidity == 65
    assert days[1].temperature.avg == 26


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"list": [{"main": {"temp": 30, "humidity": 70}}]},
        {"list": [{"dt_txt": "2024-06-01 12:00:00", "main": {"humidity": 70}, "weather": []}]},
        {"list": [{"dt_txt": "2024-06-01 12:00:00", "main": {"temp": 30, "humidity": 70}, "weather": []}]},
        {"list": [None]},
    ],
)
async def test_malformed_forecast_raises(httpx_mock, payload) -> None:
    httpx_mock.add_response(url=FORECAST_URL, json=payload)

    client = WeatherClient(api_key="owm-key")
    with pytest.raises(RuntimeError, match="Unexpected forecast payload"):
        await client.forecast("Singapore")
    await client.close()


@pytest.mark.asyncio
async def test_expired_cache_entries_are_pruned(httpx_mock) -> None:
    client = WeatherClient(api_key="owm-key", cache_ttl_seconds=0)
    for city in ("Singapore", "Jakarta", "Kuala Lumpur"):
        httpx_mock.add_response(url=CURRENT_URL, json=CURRENT_PAYLOAD)
        await client.current(city)
    await client.close()

    assert list(client._cache) == [("current", "kuala lumpur")]
