"""Add-on options: /data/options.json or environment fallback."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS_PATH = "/data/options.json"


class Options(BaseModel):
    llm_backend: Literal["openai_compat", "gemini"] = "openai_compat"
    llm_api_url: str = ""
    llm_api_key: str = ""
    llm_model: str = ""
    openweather_api_key: str = ""
    weather_city: str = "Singapore"
    automation_enabled: bool = True
    automation_interval: float = Field(30, gt=0)
    rule_log_limit: int = Field(1000, ge=1)
    presence: bool = True
    electricity_price: float | None = None

    def redacted(self) -> dict:
        """Options safe to log."""
        return {k: v for k, v in self.model_dump().items() if "key" not in k}


def _env_options() -> dict:
    env_map = {
        "llm_backend": "LLM_BACKEND",
        "llm_api_url": "LLM_API_URL",
        "llm_api_key": "LLM_API_KEY",
        "llm_model": "LLM_MODEL",
        "openweather_api_key": "OPENWEATHER_API_KEY",
        "weather_city": "WEATHER_CITY",
        "automation_enabled": "AUTOMATION_ENABLED",
        "automation_interval": "AUTOMATION_INTERVAL",
        "rule_log_limit": "RULE_LOG_LIMIT",
    }
    return {
        field: os.environ[var] for field, var in env_map.items() if var in os.environ
    }


def load_options() -> Options:
    """Load options from the JSON file when present, else from the environment."""
    opts_path = Path(os.environ.get("SMARTHOME_OPTIONS_PATH", DEFAULT_OPTIONS_PATH))
    if opts_path.exists():
        logger.debug("Reading options from %s", opts_path)
        return Options.model_validate(json.loads(opts_path.read_text()))
    return Options.model_validate(_env_options())


def is_dev_mode() -> bool:
    return os.environ.get("SMARTHOME_DEV_MODE", "").lower() in ("1", "true", "yes")
