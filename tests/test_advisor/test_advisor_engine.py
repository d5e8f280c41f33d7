"""Tests for the energy advisor."""

from __future__ import annotations

import json

import pytest

from smarthome.advisor.engine import (
    CHAT_FALLBACK,
    DEFAULT_SUGGESTIONS,
    EMPTY_REPLY_FALLBACK,
    AdvisorEngine,
    ConversationStore,
    build_insights,
)
from smarthome.db.database import Database
from smarthome.devices.models import Device
from smarthome.engine.models import Condition
from smarthome.llm.base import ChatMessage, LLMBackend, LLMResponse
from smarthome.rules.models import AutomationRule


class MockLLM(LLMBackend):
    """Controllable mock LLM backend."""

    def __init__(self, content: str = "", fail: bool = False) -> None:
        self._content = content
        self._fail = fail
        self.calls: list[dict] = []

    async def chat(
        self,
        system_prompt: str,
        messages: list[ChatMessage],
        json_mode: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        self.calls.append(
            {
                "system": system_prompt,
                "messages": messages,
                "json_mode": json_mode,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self._fail:
            raise RuntimeError("LLM failure")
        return LLMResponse(content=self._content, model="mock-model")

    async def health_check(self) -> bool:
        return not self._fail


CONTEXT = {
    "devices": [{"id": "aircon", "name": "Air Conditioner", "status": True}],
    "weather": {"temperature": 32, "humidity": 75},
    "energy_usage": {"today_usage": 22.5},
}

DEVICES = [
    Device(id="aircon", name="Air Conditioner", type="aircon", status=True, value=24),
    Device(id="lamp", name="Lamp", type="light", status=False),
]


class TestChat:
    @pytest.mark.asyncio
    async def test_reply_uses_context_and_history(self) -> None:
        llm = MockLLM("  Raise the AC to 25°C.  ")
        history = [
            ChatMessage(role="user", content="hi"),
            ChatMessage(role="assistant", content="Hello!"),
        ]

        reply = await AdvisorEngine(llm).chat("How can I save?", history, CONTEXT)

        assert reply == "Raise the AC to 25°C."
        call = llm.calls[0]
        assert "Air Conditioner" in call["system"]
        assert [m.role for m in call["messages"]] == ["user", "assistant", "user"]
        assert call["messages"][-1].content == "How can I save?"
        assert call["temperature"] == 0.7
        assert call["max_tokens"] == 500

    @pytest.mark.asyncio
    async def test_llm_failure_returns_apology(self) -> None:
        reply = await AdvisorEngine(MockLLM(fail=True)).chat("Hi", [], CONTEXT)
        assert reply == CHAT_FALLBACK

    @pytest.mark.asyncio
    async def test_empty_reply_returns_fallback(self) -> None:
        reply = await AdvisorEngine(MockLLM("   ")).chat("Hi", [], CONTEXT)
        assert reply == EMPTY_REPLY_FALLBACK


class TestRecommendations:
    @pytest.mark.asyncio
    async def test_parses_list(self) -> None:
        content = json.dumps({"recommendations": ["Use fans", "Close blinds", ""]})
        llm = MockLLM(content)

        tips = await AdvisorEngine(llm).recommendations(CONTEXT)

        assert tips == ["Use fans", "Close blinds"]
        assert llm.calls[0]["json_mode"] is True

    @pytest.mark.asyncio
    async def test_bad_reply_gives_empty_list(self) -> None:
        assert await AdvisorEngine(MockLLM("no json here")).recommendations(CONTEXT) == []
        assert await AdvisorEngine(MockLLM('{"recommendations": "x"}')).recommendations(CONTEXT) == []

    @pytest.mark.asyncio
    async def test_llm_failure_gives_empty_list(self) -> None:
        assert await AdvisorEngine(MockLLM(fail=True)).recommendations(CONTEXT) == []


class TestConsumption:
    @pytest.mark.asyncio
    async def test_normal_usage_skips_llm(self) -> None:
        llm = MockLLM()
        result = await AdvisorEngine(llm).analyze_consumption(25, 20, DEVICES)

        assert result.is_unusual is False
        assert llm.calls == []

    @pytest.mark.asyncio
    async def test_unusual_usage_asks_llm_about_active_devices(self) -> None:
        content = json.dumps(
            {"message": "The AC has been running all day.", "suggestions": ["Set AC to 25°C"]}
        )
        llm = MockLLM(content)

        result = await AdvisorEngine(llm).analyze_consumption(30, 20, DEVICES)

        assert result.is_unusual is True
        assert result.message == "The AC has been running all day."
        assert result.suggestions == ["Set AC to 25°C"]
        prompt = llm.calls[0]["messages"][0].content
        assert "aircon" in prompt
        assert "lamp" not in prompt

    @pytest.mark.asyncio
    async def test_llm_failure_uses_fallback(self) -> None:
        result = await AdvisorEngine(MockLLM(fail=True)).analyze_consumption(30, 20, DEVICES)

        assert result.is_unusual is True
        assert result.suggestions == DEFAULT_SUGGESTIONS

    @pytest.mark.asyncio
    async def test_zero_average_is_not_unusual(self) -> None:
        result = await AdvisorEngine(MockLLM()).analyze_consumption(10, 0, DEVICES)
        assert result.is_unusual is False


def test_insights_count_devices_and_rules() -> None:
    rules = [
        AutomationRule(id=1, name="a", condition=Condition(type="presence", value=True), enabled=True),
        AutomationRule(id=2, name="b", condition=Condition(type="presence", value=True), enabled=False),
    ]
    insights = build_insights(DEVICES, rules)

    assert insights.total_devices == 2
    assert insights.active_devices == 1
    assert insights.active_rules == 1
    assert insights.top_consumers[0].device == "Air Conditioner"
    assert "todayUsage" in insights.model_dump(by_alias=True)


@pytest.mark.asyncio
async def test_conversations_listed_newest_first(db: Database) -> None:
    store = ConversationStore(db.conn)
    first = await store.save("Hi", "Hello", CONTEXT)
    second = await store.save("Tips?", "Use fans", {})

    recent = await store.list_recent()

    assert [c.id for c in recent] == [second, first]
    assert json.loads(recent[1].context_json)["weather"]["temperature"] == 32
