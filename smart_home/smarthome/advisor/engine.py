"""Energy advisor -- LLM chat and analysis with deterministic fallbacks."""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

import aiosqlite

from smarthome.advisor.models import (
    ConsumptionAnalysis,
    Conversation,
    EnergyInsights,
    TopConsumer,
)
from smarthome.devices.models import Device
from smarthome.engine.errors import RuleParseError
from smarthome.llm.base import ChatMessage, LLMBackend
from smarthome.llm.prompts.advisor import (
    ADVISOR_SYSTEM_PROMPT,
    CONSUMPTION_SYSTEM_PROMPT,
    RECOMMENDATIONS_SYSTEM_PROMPT,
    build_consumption_prompt,
    build_context_block,
)
from smarthome.rules.models import AutomationRule
from smarthome.rules.parser import extract_json_object

logger = logging.getLogger(__name__)

CHAT_FALLBACK = "Sorry, I encountered an error. Please try again."
EMPTY_REPLY_FALLBACK = "Sorry, I could not generate a response."
# Usage above this multiple of the historical average counts as unusual
UNUSUAL_THRESHOLD = 1.3
DEFAULT_SUGGESTIONS = [
    "Check for devices left on",
    "Review AC temperature settings",
]
MAX_HISTORY_TURNS = 20

# Meter figures until real metering is wired in
SIMULATED_USAGE = {
    "today_usage": 22.5,
    "today_cost": 6.75,
    "weekly_average": 21.3,
    "monthly_cost": 195.50,
    "savings_potential": 35.20,
    "efficiency_score": 72,
}
SIMULATED_TOP_CONSUMERS = [
    TopConsumer(device="Air Conditioner", percentage=45, usage=10.1),
    TopConsumer(device="Water Heater", percentage=25, usage=5.6),
    TopConsumer(device="Refrigerator", percentage=15, usage=3.4),
    TopConsumer(device="Lights", percentage=10, usage=2.3),
    TopConsumer(device="Others", percentage=5, usage=1.1),
]


class AdvisorEngine:
    """Answers energy questions about the home using an LLM."""

    def __init__(self, llm_backend: LLMBackend) -> None:
        self._llm = llm_backend

    async def chat(
        self,
        message: str,
        history: list[ChatMessage],
        context: dict[str, Any],
    ) -> str:
        """Reply to *message*. LLM failures yield an apology, never an exception."""
        system_prompt = f"{ADVISOR_SYSTEM_PROMPT}\n\n{build_context_block(context)}"
        turns = list(history[-MAX_HISTORY_TURNS:])
        turns.append(ChatMessage(role="user", content=message))

        try:
            response = await self._llm.chat(
                system_prompt, turns, temperature=0.7, max_tokens=500,
            )
        except Exception:
            logger.exception("Advisor chat failed")
            return CHAT_FALLBACK
        return response.content.strip() or EMPTY_REPLY_FALLBACK

    async def recommendations(self, context: dict[str, Any]) -> list[str]:
        """3-5 energy-saving tips, or an empty list when the LLM is unavailable."""
        try:
            response = await self._llm.generate(
                RECOMMENDATIONS_SYSTEM_PROMPT,
                build_context_block(context),
                json_mode=True,
                temperature=0.7,
            )
            data = extract_json_object(response.content)
        except RuleParseError:
            logger.warning("Recommendations reply was not a JSON object")
            return []
        except Exception:
            logger.exception("Recommendation generation failed")
            return []

        items = data.get("recommendations", [])
        if not isinstance(items, list):
            return []
        return [str(i) for i in items if str(i).strip()]

    async def analyze_consumption(
        self,
        current_usage: float,
        historical_average: float,
        devices: list[Device],
    ) -> ConsumptionAnalysis:
        """Flag usage above the threshold and ask the LLM for likely causes."""
        if historical_average <= 0 or current_usage <= historical_average * UNUSUAL_THRESHOLD:
            return ConsumptionAnalysis(
                is_unusual=False,
                message="Energy consumption is within normal range.",
            )

        fallback = ConsumptionAnalysis(
            is_unusual=True,
            message="Energy consumption is unusually high.",
            suggestions=list(DEFAULT_SUGGESTIONS),
        )
        active = [d.model_dump(mode="json") for d in devices if d.status]
        try:
            response = await self._llm.generate(
                CONSUMPTION_SYSTEM_PROMPT,
                build_consumption_prompt(current_usage, historical_average, active),
                json_mode=True,
                temperature=0.5,
            )
            data = extract_json_object(response.content)
        except Exception:
            logger.exception("Consumption analysis failed, using fallback")
            return fallback

        message = data.get("message")
        suggestions = data.get("suggestions")
        if not isinstance(message, str) or not isinstance(suggestions, list):
            return fallback
        return ConsumptionAnalysis(
            is_unusual=True,
            message=message,
            suggestions=[str(s) for s in suggestions],
        )


def build_insights(devices: list[Device], rules: list[AutomationRule]) -> EnergyInsights:
    """Counts from the registries plus simulated meter figures."""
    return EnergyInsights(
        total_devices=len(devices),
        active_devices=sum(1 for d in devices if d.status),
        active_rules=sum(1 for r in rules if r.enabled),
        top_consumers=SIMULATED_TOP_CONSUMERS,
        **SIMULATED_USAGE,
    )


class ConversationStore:
    """Persists advisor exchanges."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def save(
        self, user_message: str, ai_response: str, context: dict[str, Any],
    ) -> str:
        conversation_id = uuid.uuid4().hex
        await self._conn.execute(
            """INSERT INTO advisor_conversations
               (id, user_message, ai_response, context_json, created_at)
               VALUES (?, ?, ?, ?, datetime('now'))""",
            (
                conversation_id,
                user_message,
                ai_response,
                json.dumps(context, ensure_ascii=False, default=str),
            ),
        )
        await self._conn.commit()
        return conversation_id

    async def list_recent(self, limit: int = 20) -> list[Conversation]:
        async with self._conn.execute(
            "SELECT * FROM advisor_conversations ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (limit,),
        ) as cursor:
            rows = await cursor.fetchall()
        return [Conversation(**dict(r)) for r in rows]
