"""Tests for the application shell and configuration."""

import json

from fastapi.testclient import TestClient

from smarthome.config import Options, load_options
from smarthome.main import _build_llm_backend, app
from smarthome.llm.gemini import GeminiBackend
from smarthome.llm.openai_compat import OpenAICompatBackend


def test_health_and_index() -> None:
    client = TestClient(app)
    assert client.get("/health").json()["status"] == "ok"
    assert "/api/plans" in client.get("/").json()["endpoints"]


def test_options_from_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "options.json"
    path.write_text(json.dumps({"llm_backend": "gemini", "llm_api_key": "secret", "automation_interval": 120}))
    monkeypatch.setenv("SMARTHOME_OPTIONS_PATH", str(path))

    options = load_options()

    assert options.llm_backend == "gemini"
    assert options.automation_interval == 120
    assert "llm_api_key" not in options.redacted()


def test_options_from_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SMARTHOME_OPTIONS_PATH", str(tmp_path / "missing.json"))
    monkeypatch.setenv("WEATHER_CITY", "Kuala Lumpur")
    monkeypatch.setenv("AUTOMATION_ENABLED", "false")
    monkeypatch.setenv("RULE_LOG_LIMIT", "50")

    options = load_options()

    assert options.weather_city == "Kuala Lumpur"
    assert options.automation_enabled is False
    assert options.rule_log_limit == 50


def test_backend_selection() -> None:
    assert isinstance(_build_llm_backend(Options()), OpenAICompatBackend)
    gemini = _build_llm_backend(Options(llm_backend="gemini", llm_model="gemini-2.0-flash"))
    assert isinstance(gemini, GeminiBackend)
    assert gemini.model_name == "gemini-2.0-flash"
