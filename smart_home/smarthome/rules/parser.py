"""Natural-language rule parsing behind a vendor-neutral capability."""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod

from pydantic import ValidationError

from smarthome.devices.models import Device
from smarthome.engine.errors import ParserUnavailable, RuleParseError
from smarthome.llm.base import LLMBackend
from smarthome.llm.prompts.rules import RULE_PARSER_SYSTEM_PROMPT, build_rule_user_prompt
from smarthome.rules.models import ParsedRule

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 2000


class RuleParser(ABC):
    """Turns free text into a ParsedRule, or raises RuleParseError."""

    @abstractmethod
    async def parse_rule(
        self, text: str, devices: list[Device] | None = None,
    ) -> ParsedRule:
        ...


def extract_json_object(content: str) -> dict:
    """Pull a JSON object out of an LLM reply (bare or inside a code fence)."""
    match = re.search(r"```(?:json)?\s*\n(.*?)```", content, re.DOTALL)
    raw = match.group(1).strip() if match else content.strip()
    if not match and not raw.startswith("{"):
        # Tolerate chatter around a bare object
        start, end = raw.find("{"), raw.rfind("}")
        if start != -1 and end > start:
            raw = raw[start : end + 1]

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RuleParseError(f"Response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise RuleParseError("Response JSON is not an object")
    return data


class LLMRuleParser(RuleParser):
    """RuleParser backed by any LLMBackend. Fails closed."""

    def __init__(self, llm_backend: LLMBackend) -> None:
        self._llm = llm_backend

    async def parse_rule(
        self, text: str, devices: list[Device] | None = None,
    ) -> ParsedRule:
        text = text.strip()
        if not text:
            raise RuleParseError("Rule text is empty")
        if len(text) > MAX_INPUT_LENGTH:
            raise RuleParseError(f"Rule text exceeds {MAX_INPUT_LENGTH} characters")

        try:
            response = await self._llm.generate(
                RULE_PARSER_SYSTEM_PROMPT,
                build_rule_user_prompt(text, devices),
                json_mode=True,
                temperature=0.3,
            )
        except Exception as exc:
            logger.exception("LLM call failed while parsing rule")
            raise ParserUnavailable(f"Language model unavailable: {exc}") from exc

        data = extract_json_object(response.content)
        try:
            rule = ParsedRule.model_validate(data)
        except ValidationError as exc:
            logger.warning("LLM rule did not validate: %s", exc.errors())
            raise RuleParseError("Could not parse the rule. Please try rephrasing it.") from exc

        logger.info(
            "Parsed rule '%s' (%s condition, %d actions)",
            rule.name,
            rule.condition.type,
            len(rule.actions),
        )
        return rule
