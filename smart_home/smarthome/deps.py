"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from smarthome.llm.base import LLMBackend

if TYPE_CHECKING:
    from smarthome.advisor.engine import AdvisorEngine, ConversationStore
    from smarthome.config import Options
    from smarthome.db.database import Database
    from smarthome.devices.registry import DeviceRegistry
    from smarthome.engine.loop import AutomationLoop, HomeStateProvider
    from smarthome.plans.catalog import PlanCatalog
    from smarthome.rules.parser import RuleParser
    from smarthome.rules.registry import RuleRegistry
    from smarthome.weather.client import WeatherClient

_options: Options | None = None
_database: Database | None = None
_llm_backend: LLMBackend | None = None
_device_registry: DeviceRegistry | None = None
_rule_registry: RuleRegistry | None = None
_rule_parser: RuleParser | None = None
_plan_catalog: PlanCatalog | None = None
_weather_client: WeatherClient | None = None
_advisor_engine: AdvisorEngine | None = None
_conversation_store: ConversationStore | None = None
_state_provider: HomeStateProvider | None = None
_automation_loop: AutomationLoop | None = None


def get_options() -> Options:
    """FastAPI dependency: return the loaded Options."""
    assert _options is not None, "Options not loaded"
    return _options


def get_database() -> Database:
    """FastAPI dependency: return the shared Database."""
    assert _database is not None, "Database not initialised"
    return _database


def get_llm_backend() -> LLMBackend:
    """FastAPI dependency: return the shared LLMBackend."""
    assert _llm_backend is not None, "LLMBackend not initialised"
    return _llm_backend


def get_device_registry() -> DeviceRegistry:
    assert _device_registry is not None, "DeviceRegistry not initialised"
    return _device_registry


def get_rule_registry() -> RuleRegistry:
    assert _rule_registry is not None, "RuleRegistry not initialised"
    return _rule_registry


def get_rule_parser() -> RuleParser:
    assert _rule_parser is not None, "RuleParser not initialised"
    return _rule_parser


def get_plan_catalog() -> PlanCatalog:
    assert _plan_catalog is not None, "PlanCatalog not initialised"
    return _plan_catalog


def get_weather_client() -> WeatherClient:
    assert _weather_client is not None, "WeatherClient not initialised"
    return _weather_client


def get_advisor_engine() -> AdvisorEngine:
    assert _advisor_engine is not None, "AdvisorEngine not initialised"
    return _advisor_engine


def get_conversation_store() -> ConversationStore:
    assert _conversation_store is not None, "ConversationStore not initialised"
    return _conversation_store


def get_state_provider() -> HomeStateProvider:
    assert _state_provider is not None, "HomeStateProvider not initialised"
    return _state_provider


def get_automation_loop() -> AutomationLoop:
    """FastAPI dependency: return the background AutomationLoop."""
    assert _automation_loop is not None, "AutomationLoop not initialised"
    return _automation_loop
