"""Tests for the weather endpoints."""

import pytest


@pytest.mark.asyncio
async def test_current_weather_with_impact(client) -> None:
    data = (await client.get("/api/weather/current")).json()
    assert data["city"] == "Singapore"
    assert data["weather"]["feelsLike"] == 38
    assert data["energy_impact"]["coolingDemand"] == "high"
    assert "Turn on AC and set to 24°C" in data["suggestions"]


@pytest.mark.asyncio
async def test_forecast_and_correlation(client) -> None:
    forecast = (await client.get("/api/weather/forecast", params={"city": "Jakarta"})).json()
    assert forecast[0]["temperature"]["avg"] == 30

    correlation = (await client.get("/api/weather/correlation")).json()
    assert correlation == [
        {"date": "2024-06-01", "temperature": 30.0, "energyConsumption": 23.0, "cost": 6.9}
    ]


@pytest.mark.asyncio
async def test_upstream_failure_is_502(client, services) -> None:
    services["weather"].fail = True
    assert (await client.get("/api/weather/current")).status_code == 502
    assert (await client.get("/api/weather/forecast")).status_code == 502
    assert (await client.get("/api/weather/correlation")).status_code == 502
