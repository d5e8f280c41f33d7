"""Weather data models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Demand = Literal["low", "medium", "high"]


class WeatherData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    temperature: float
    feels_like: float = Field(..., alias="feelsLike")
    humidity: float
    pressure: float = 0
    wind_speed: float = Field(0, alias="windSpeed")
    description: str = ""
    icon: str = ""
    sunrise: int = 0
    sunset: int = 0


class TemperatureRange(BaseModel):
    min: float
    max: float
    avg: float


class ForecastDay(BaseModel):
    date: str
    temperature: TemperatureRange
    humidity: float
    description: str = ""
    icon: str = ""


class EnergyImpact(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cooling_demand: Demand = Field(..., alias="coolingDemand")
    heating_demand: Demand = Field(..., alias="heatingDemand")
    natural_ventilation: bool = Field(..., alias="naturalVentilation")
    recommendation: str


class WeatherEnergyCorrelation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    temperature: float
    energy_consumption: float = Field(..., alias="energyConsumption", description="kWh")
    cost: float = Field(..., description="SGD")
