"""Tests for weather-to-energy heuristics."""

from __future__ import annotations

from datetime import datetime

import pytest

from smarthome.weather.analysis import (
    automation_suggestions,
    calculate_energy_impact,
    weather_energy_correlation,
)
from smarthome.weather.models import ForecastDay, TemperatureRange, WeatherData


def _weather(temperature: float, humidity: float = 60, wind_speed: float = 2) -> WeatherData:
    return WeatherData(
        temperature=temperature,
        feels_like=temperature,
        humidity=humidity,
        wind_speed=wind_speed,
    )


@pytest.mark.parametrize(
    "temperature,cooling,heating",
    [
        (33, "high", "low"),
        (30, "medium", "low"),
        (27, "low", "low"),
        (18, "low", "medium"),
        (12, "low", "high"),
    ],
)
def test_demand_levels(temperature: float, cooling: str, heating: str) -> None:
    impact = calculate_energy_impact(_weather(temperature))
    assert impact.cooling_demand == cooling
    assert impact.heating_demand == heating


def test_natural_ventilation_recommended() -> None:
    impact = calculate_energy_impact(_weather(26, humidity=55, wind_speed=3))
    assert impact.natural_ventilation is True
    assert "natural ventilation" in impact.recommendation


def test_no_ventilation_when_still_or_humid() -> None:
    assert calculate_energy_impact(_weather(26, wind_speed=0.5)).natural_ventilation is False
    assert calculate_energy_impact(_weather(26, humidity=75)).natural_ventilation is False


def test_high_humidity_recommendation() -> None:
    impact = calculate_energy_impact(_weather(30, humidity=85))
    assert "dehumidifier" in impact.recommendation


def test_impact_serializes_with_camel_case() -> None:
    dumped = calculate_energy_impact(_weather(33)).model_dump(by_alias=True)
    assert set(dumped) == {
        "coolingDemand",
        "heatingDemand",
        "naturalVentilation",
        "recommendation",
    }


def test_suggestions_for_hot_evening() -> None:
    suggestions = automation_suggestions(_weather(32, humidity=85), datetime(2024, 6, 1, 19))
    assert "Turn on AC and set to 24°C" in suggestions
    assert "Use AC in dehumidifier mode" in suggestions
    assert "Turn on evening lights" in suggestions


def test_suggestions_for_cool_dry_morning() -> None:
    suggestions = automation_suggestions(_weather(24, humidity=50), datetime(2024, 6, 1, 9))
    assert suggestions == [
        "Turn off AC and use natural ventilation",
        "Open blinds for natural lighting",
    ]


def test_energy_correlation() -> None:
    days = [
        ForecastDay(date="2024-06-01", temperature=TemperatureRange(min=27, max=33, avg=30), humidity=70),
        ForecastDay(date="2024-06-02", temperature=TemperatureRange(min=22, max=26, avg=24), humidity=60),
    ]
    result = weather_energy_correlation(days)

    assert result[0].energy_consumption == 23.0
    assert result[0].cost == 6.9
    assert result[1].energy_consumption == 15.0
    assert result[1].cost == 4.5
