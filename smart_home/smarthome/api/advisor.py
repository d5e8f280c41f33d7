"""Energy advisor API endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from smarthome.advisor.engine import (
    SIMULATED_USAGE,
    AdvisorEngine,
    ConversationStore,
    build_insights,
)
from smarthome.advisor.models import ConsumptionAnalysis, Conversation, EnergyInsights
from smarthome.config import Options
from smarthome.deps import (
    get_advisor_engine,
    get_conversation_store,
    get_device_registry,
    get_options,
    get_rule_registry,
    get_weather_client,
)
from smarthome.devices.registry import DeviceRegistry
from smarthome.llm.base import ChatMessage
from smarthome.rules.registry import RuleRegistry
from smarthome.weather.client import WeatherClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["advisor"])


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    history: list[ChatMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    response: str
    conversation_id: str


class RecommendationsResponse(BaseModel):
    recommendations: list[str]


class UsageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_usage: float = Field(..., ge=0, alias="currentUsage")
    historical_average: float = Field(..., ge=0, alias="historicalAverage")


async def _home_context(
    devices: DeviceRegistry,
    weather: WeatherClient,
    options: Options,
) -> dict[str, Any]:
    """Devices, weather and usage figures handed to the advisor prompts."""
    context: dict[str, Any] = {
        "devices": [d.model_dump(mode="json") for d in await devices.list_devices()],
        "energy_usage": dict(SIMULATED_USAGE),
    }
    try:
        current = await weather.current(options.weather_city)
        context["weather"] = current.model_dump(mode="json")
    except Exception as e:
        # The advisor still answers without weather
        logger.warning("Weather unavailable for advisor context: %s", e)
    return context


@router.post("/advisor/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    engine: AdvisorEngine = Depends(get_advisor_engine),
    store: ConversationStore = Depends(get_conversation_store),
    devices: DeviceRegistry = Depends(get_device_registry),
    weather: WeatherClient = Depends(get_weather_client),
    options: Options = Depends(get_options),
) -> ChatResponse:
    """Ask the advisor a question about the home's energy use."""
    context = await _home_context(devices, weather, options)
    reply = await engine.chat(body.message, body.history, context)
    conversation_id = await store.save(body.message, reply, context)
    return ChatResponse(response=reply, conversation_id=conversation_id)


@router.get("/advisor/recommendations", response_model=RecommendationsResponse)
async def recommendations(
    engine: AdvisorEngine = Depends(get_advisor_engine),
    devices: DeviceRegistry = Depends(get_device_registry),
    weather: WeatherClient = Depends(get_weather_client),
    options: Options = Depends(get_options),
) -> RecommendationsResponse:
    context = await _home_context(devices, weather, options)
    return RecommendationsResponse(recommendations=await engine.recommendations(context))


@router.post("/advisor/unusual", response_model=ConsumptionAnalysis)
async def detect_unusual(
    body: UsageRequest,
    engine: AdvisorEngine = Depends(get_advisor_engine),
    devices: DeviceRegistry = Depends(get_device_registry),
) -> ConsumptionAnalysis:
    """Flag consumption well above the historical average."""
    return await engine.analyze_consumption(
        body.current_usage, body.historical_average, await devices.list_devices(),
    )


@router.get("/advisor/insights", response_model=EnergyInsights)
async def insights(
    devices: DeviceRegistry = Depends(get_device_registry),
    rules: RuleRegistry = Depends(get_rule_registry),
) -> EnergyInsights:
    return build_insights(await devices.list_devices(), await rules.list_rules())


@router.get("/advisor/conversations", response_model=list[Conversation])
async def conversations(
    limit: int = Query(default=20, ge=1, le=200),
    store: ConversationStore = Depends(get_conversation_store),
) -> list[Conversation]:
    """Recent advisor exchanges, newest first."""
    return await store.list_recent(limit)
