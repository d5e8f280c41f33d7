"""Weather-to-energy heuristics -- pure functions tuned for a tropical climate."""

from __future__ import annotations

from datetime import datetime

from smarthome.numeric import round_half_up
from smarthome.weather.models import (
    EnergyImpact,
    ForecastDay,
    WeatherData,
    WeatherEnergyCorrelation,
)

# Daily household baseline before any cooling load
BASELINE_DAILY_KWH = 15.0
COMFORT_TEMPERATURE = 26.0
KWH_PER_DEGREE = 2.0
CORRELATION_RATE = 0.30


def calculate_energy_impact(weather: WeatherData) -> EnergyImpact:
    """Classify cooling/heating demand and suggest how to run the home."""
    temperature = weather.temperature
    humidity = weather.humidity

    cooling = "medium"
    if temperature > 32:
        cooling = "high"
    elif temperature < 28:
        cooling = "low"

    heating = "low"
    if temperature < 15:
        heating = "high"
    elif temperature < 20:
        heating = "medium"

    natural_ventilation = (
        24 <= temperature <= 28 and humidity < 70 and weather.wind_speed > 1
    )

    if cooling == "high":
        recommendation = (
            "High cooling demand. Consider pre-cooling during off-peak hours "
            "and using blinds to reduce solar heat gain."
        )
    elif cooling == "low" and natural_ventilation:
        recommendation = (
            "Perfect weather for natural ventilation. Turn off AC and open "
            "windows to save energy."
        )
    elif humidity > 80:
        recommendation = (
            "High humidity. Use dehumidifier mode on AC for better comfort "
            "and efficiency."
        )
    else:
        recommendation = (
            "Moderate conditions. Use fans and partial AC to optimize energy "
            "consumption."
        )

    return EnergyImpact(
        cooling_demand=cooling,
        heating_demand=heating,
        natural_ventilation=natural_ventilation,
        recommendation=recommendation,
    )


def automation_suggestions(weather: WeatherData, now: datetime | None = None) -> list[str]:
    """Plain-language rule ideas for the current conditions."""
    now = now or datetime.now()
    suggestions: list[str] = []

    if weather.temperature > 30:
        suggestions.append("Turn on AC and set to 24°C")
        suggestions.append("Close blinds to 50% to reduce heat")
    if weather.temperature < 26 and weather.humidity < 60:
        suggestions.append("Turn off AC and use natural ventilation")
        suggestions.append("Open blinds for natural lighting")
    if weather.humidity > 80:
        suggestions.append("Use AC in dehumidifier mode")
    if 18 <= now.hour <= 22:
        suggestions.append("Turn on evening lights")

    return suggestions


def weather_energy_correlation(
    forecast: list[ForecastDay],
) -> list[WeatherEnergyCorrelation]:
    """Estimate daily consumption from forecast temperatures."""
    result: list[WeatherEnergyCorrelation] = []
    for day in forecast:
        extra = max(0.0, (day.temperature.avg - COMFORT_TEMPERATURE) * KWH_PER_DEGREE)
        consumption = BASELINE_DAILY_KWH + extra
        result.append(
            WeatherEnergyCorrelation(
                date=day.date,
                temperature=day.temperature.avg,
                energy_consumption=round_half_up(consumption, 1),
                cost=round_half_up(consumption * CORRELATION_RATE, 2),
            )
        )
    return result
