"""Energy advisor data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ConsumptionAnalysis(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_unusual: bool = Field(..., alias="isUnusual")
    message: str
    suggestions: list[str] = Field(default_factory=list)


class TopConsumer(BaseModel):
    device: str
    percentage: float
    usage: float


class EnergyInsights(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_devices: int = Field(..., alias="totalDevices")
    active_devices: int = Field(..., alias="activeDevices")
    active_rules: int = Field(..., alias="activeRules")
    today_usage: float = Field(..., alias="todayUsage")
    today_cost: float = Field(..., alias="todayCost")
    weekly_average: float = Field(..., alias="weeklyAverage")
    monthly_cost: float = Field(..., alias="monthlyCost")
    top_consumers: list[TopConsumer] = Field(default_factory=list, alias="topConsumers")
    savings_potential: float = Field(..., alias="savingsPotential")
    efficiency_score: int = Field(..., alias="efficiencyScore")


class Conversation(BaseModel):
    id: str
    user_message: str
    ai_response: str
    context_json: str = "{}"
    created_at: str = ""
