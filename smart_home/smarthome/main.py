"""FastAPI application -- Smart Home Energy Hub entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import smarthome.deps as deps
from smarthome.advisor.engine import AdvisorEngine, ConversationStore
from smarthome.api.advisor import router as advisor_router
from smarthome.api.devices import router as devices_router
from smarthome.api.plans import router as plans_router
from smarthome.api.rules import router as rules_router
from smarthome.api.weather import router as weather_router
from smarthome.config import Options, is_dev_mode, load_options
from smarthome.db.database import Database
from smarthome.db.seed import seed_defaults
from smarthome.devices.registry import DeviceRegistry
from smarthome.engine.loop import AutomationLoop, HomeStateProvider
from smarthome.llm.base import LLMBackend
from smarthome.llm.gemini import GeminiBackend
from smarthome.llm.openai_compat import OpenAICompatBackend
from smarthome.plans.catalog import PlanCatalog
from smarthome.rules.parser import LLMRuleParser
from smarthome.rules.registry import RuleRegistry
from smarthome.weather.client import WeatherClient

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def _build_llm_backend(options: Options) -> LLMBackend:
    kwargs = {"api_key": options.llm_api_key}
    if options.llm_api_url:
        kwargs["base_url"] = options.llm_api_url
    if options.llm_model:
        kwargs["model"] = options.llm_model
    if options.llm_backend == "gemini":
        return GeminiBackend(**kwargs)
    return OpenAICompatBackend(**kwargs)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init resources on startup, clean up on shutdown."""
    log_level = logging.DEBUG if is_dev_mode() else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    options = load_options()
    deps._options = options
    logger.info("Smart Home Energy Hub starting with options: %s", options.redacted())

    # Init database
    deps._database = Database()
    await deps._database.connect()
    logger.info("Database connected")

    conn = deps._database.conn
    deps._device_registry = DeviceRegistry(conn)
    deps._rule_registry = RuleRegistry(conn, max_log_entries=options.rule_log_limit)
    deps._plan_catalog = PlanCatalog(conn)
    deps._conversation_store = ConversationStore(conn)

    await seed_defaults(deps._device_registry, deps._rule_registry)
    if await deps._plan_catalog.count() == 0:
        await deps._plan_catalog.refresh()

    # Init LLM backend
    deps._llm_backend = _build_llm_backend(options)
    logger.info(
        "LLM backend: %s (model: %s)", options.llm_backend, deps._llm_backend.model_name,
    )
    deps._rule_parser = LLMRuleParser(deps._llm_backend)
    deps._advisor_engine = AdvisorEngine(deps._llm_backend)

    deps._weather_client = WeatherClient(options.openweather_api_key)
    if not options.openweather_api_key:
        logger.warning("No OpenWeatherMap key configured; weather conditions will not match")

    # Init automation loop
    deps._state_provider = HomeStateProvider(
        deps._device_registry,
        deps._weather_client if options.openweather_api_key else None,
        city=options.weather_city,
        presence=options.presence,
        price=options.electricity_price,
    )
    deps._automation_loop = AutomationLoop(
        deps._device_registry,
        deps._rule_registry,
        deps._state_provider,
        interval_seconds=options.automation_interval,
    )
    if options.automation_enabled:
        await deps._automation_loop.start()

    yield

    # Shutdown
    await deps._automation_loop.stop()
    await deps._weather_client.close()
    await deps._llm_backend.close()
    if deps._database:
        await deps._database.close()
    deps._options = None
    deps._database = None
    deps._llm_backend = None
    deps._device_registry = None
    deps._rule_registry = None
    deps._rule_parser = None
    deps._plan_catalog = None
    deps._weather_client = None
    deps._advisor_engine = None
    deps._conversation_store = None
    deps._state_provider = None
    deps._automation_loop = None


app = FastAPI(
    title="Smart Home Energy Hub",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(devices_router)
app.include_router(rules_router)
app.include_router(plans_router)
app.include_router(weather_router)
app.include_router(advisor_router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": VERSION}


@app.get("/")
async def index() -> dict:
    """Service banner listing the API areas."""
    return {
        "name": "Smart Home Energy Hub",
        "version": VERSION,
        "endpoints": [
            "/api/devices",
            "/api/rules",
            "/api/plans",
            "/api/weather",
            "/api/advisor",
        ],
    }
