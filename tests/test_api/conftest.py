"""Fixtures for API tests: the app wired to a temp database and fakes."""

from __future__ import annotations

import httpx
import pytest_asyncio

import smarthome.deps as deps
from smarthome.advisor.engine import AdvisorEngine, ConversationStore
from smarthome.config import Options
from smarthome.db.database import Database
from smarthome.devices.models import Device
from smarthome.devices.registry import DeviceRegistry
from smarthome.engine.errors import ParserUnavailable, RuleParseError
from smarthome.engine.loop import AutomationLoop, HomeStateProvider
from smarthome.llm.base import ChatMessage, LLMBackend, LLMResponse
from smarthome.main import app
from smarthome.plans.catalog import PlanCatalog
from smarthome.rules.models import ParsedRule
from smarthome.rules.parser import RuleParser
from smarthome.rules.registry import RuleRegistry
from smarthome.weather.models import ForecastDay, TemperatureRange, WeatherData


class FakeWeather:
    def __init__(self) -> None:
        self.fail = False

    async def current(self, city: str) -> WeatherData:
        if self.fail:
            raise RuntimeError("Weather API error (401) for 'Singapore'")
        return WeatherData(temperature=33, feels_like=38, humidity=70, wind_speed=2)

    async def forecast(self, city: str) -> list[ForecastDay]:
        if self.fail:
            raise RuntimeError("Weather API error (401) for 'Singapore'")
        return [
            ForecastDay(
                date="2024-06-01",
                temperature=TemperatureRange(min=27, max=33, avg=30),
                humidity=70,
            )
        ]


class FakeParser(RuleParser):
    def __init__(self) -> None:
        self.mode = "ok"

    async def parse_rule(self, text: str, devices: list[Device] | None = None) -> ParsedRule:
        if self.mode == "down":
            raise ParserUnavailable("Language model unavailable: connection refused")
        if self.mode == "bad":
            raise RuleParseError("Could not parse the rule. Please try rephrasing it.")
        return ParsedRule.model_validate(
            {
                "name": "Lights Off When Away",
                "condition": {"type": "presence", "operator": "=", "value": False},
                "action": [{"deviceId": "lamp", "action": "turnOff"}],
            }
        )


class EchoLLM(LLMBackend):
    async def chat(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        json_mode: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        if json_mode:
            return LLMResponse(content='{"recommendations": ["Use fans"]}')
        return LLMResponse(content=f"You asked: {messages[-1].content}")

    async def health_check(self) -> bool:
        return True


@pytest_asyncio.fixture
async def services(db: Database):
    devices = DeviceRegistry(db.conn)
    rules = RuleRegistry(db.conn)
    catalog = PlanCatalog(db.conn)
    await catalog.refresh()
    weather = FakeWeather()
    parser = FakeParser()
    loop = AutomationLoop(devices, rules, HomeStateProvider(devices, weather))

    overrides = {
        deps.get_options: lambda: Options(),
        deps.get_device_registry: lambda: devices,
        deps.get_rule_registry: lambda: rules,
        deps.get_plan_catalog: lambda: catalog,
        deps.get_weather_client: lambda: weather,
        deps.get_rule_parser: lambda: parser,
        deps.get_advisor_engine: lambda: AdvisorEngine(EchoLLM()),
        deps.get_conversation_store: lambda: ConversationStore(db.conn),
        deps.get_automation_loop: lambda: loop,
    }
    app.dependency_overrides.update(overrides)
    yield {
        "devices": devices,
        "rules": rules,
        "catalog": catalog,
        "weather": weather,
        "parser": parser,
    }
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(services):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
