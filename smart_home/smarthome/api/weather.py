"""Weather API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from smarthome.config import Options
from smarthome.deps import get_options, get_weather_client
from smarthome.weather.analysis import (
    automation_suggestions,
    calculate_energy_impact,
    weather_energy_correlation,
)
from smarthome.weather.client import WeatherClient
from smarthome.weather.models import (
    EnergyImpact,
    ForecastDay,
    WeatherData,
    WeatherEnergyCorrelation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["weather"])


class CurrentWeatherResponse(BaseModel):
    city: str
    weather: WeatherData
    energy_impact: EnergyImpact
    suggestions: list[str] = Field(default_factory=list)


@router.get("/weather/current", response_model=CurrentWeatherResponse)
async def current_weather(
    city: str | None = Query(default=None),
    client: WeatherClient = Depends(get_weather_client),
    options: Options = Depends(get_options),
) -> CurrentWeatherResponse:
    """Current conditions with their expected energy impact."""
    city = city or options.weather_city
    try:
        weather = await client.current(city)
    except Exception as e:
        logger.error("Weather lookup failed for %s: %s", city, e)
        raise HTTPException(status_code=502, detail=str(e))
    return CurrentWeatherResponse(
        city=city,
        weather=weather,
        energy_impact=calculate_energy_impact(weather),
        suggestions=automation_suggestions(weather),
    )


@router.get("/weather/forecast", response_model=list[ForecastDay])
async def forecast(
    city: str | None = Query(default=None),
    client: WeatherClient = Depends(get_weather_client),
    options: Options = Depends(get_options),
) -> list[ForecastDay]:
    city = city or options.weather_city
    try:
        return await client.forecast(city)
    except Exception as e:
        logger.error("Forecast lookup failed for %s: %s", city, e)
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/weather/correlation", response_model=list[WeatherEnergyCorrelation])
async def correlation(
    city: str | None = Query(default=None),
    client: WeatherClient = Depends(get_weather_client),
    options: Options = Depends(get_options),
) -> list[WeatherEnergyCorrelation]:
    """Estimated daily consumption over the forecast period."""
    city = city or options.weather_city
    try:
        days = await client.forecast(city)
    except Exception as e:
        logger.error("Forecast lookup failed for %s: %s", city, e)
        raise HTTPException(status_code=502, detail=str(e))
    return weather_energy_correlation(days)
